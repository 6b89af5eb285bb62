"""Linux input handler: Xlib + XTest fake input events via ctypes."""

from __future__ import annotations

import ctypes
import ctypes.util
import os
import threading
import time
from typing import Sequence

from airhid.actions._handler import InputHandler, wheel_notches
from airhid.actions._keys import KeyId, Modifier

# ---------------------------------------------------------------------------
# X11 keysym mapping (XK_* constants)
# ---------------------------------------------------------------------------

_XK_MAP: dict[KeyId, int] = {
    KeyId.ENTER: 0xFF0D,
    KeyId.TAB: 0xFF09,
    KeyId.ESC: 0xFF1B,
    KeyId.SPACE: 0x0020,
    KeyId.BACKSPACE: 0xFF08,
    KeyId.DELETE: 0xFFFF,
    KeyId.INSERT: 0xFF63,
    KeyId.PRINT_SCREEN: 0xFF61,
    KeyId.UP: 0xFF52,
    KeyId.DOWN: 0xFF54,
    KeyId.LEFT: 0xFF51,
    KeyId.RIGHT: 0xFF53,
    KeyId.HOME: 0xFF50,
    KeyId.END: 0xFF57,
    KeyId.PAGE_UP: 0xFF55,
    KeyId.PAGE_DOWN: 0xFF56,
    # Punctuation keysyms equal their ASCII code; "+" shares the "=" key
    KeyId.PLUS: ord("="),
    KeyId.MINUS: ord("-"),
    KeyId.COMMA: ord(","),
    KeyId.PERIOD: ord("."),
    KeyId.SLASH: ord("/"),
    KeyId.SEMICOLON: ord(";"),
    KeyId.QUOTE: ord("'"),
    KeyId.LEFT_BRACKET: ord("["),
    KeyId.RIGHT_BRACKET: ord("]"),
    KeyId.BACKSLASH: ord("\\"),
    KeyId.BACKTICK: ord("`"),
}
_XK_MAP.update({KeyId[f"F{n}"]: 0xFFBD + n for n in range(1, 13)})
# Letters and digits: for ASCII, keysym == codepoint
_XK_MAP.update({k: ord(k.value) for k in KeyId if len(k.value) == 1})

_XK_MODIFIERS: dict[Modifier, int] = {
    Modifier.CTRL: 0xFFE3,  # XK_Control_L
    Modifier.ALT: 0xFFE9,  # XK_Alt_L
    Modifier.SHIFT: 0xFFE1,  # XK_Shift_L
    Modifier.SUPER: 0xFFEB,  # XK_Super_L
}

_MODIFIER_ORDER = (Modifier.CTRL, Modifier.SHIFT, Modifier.ALT, Modifier.SUPER)

# Pointer buttons: left=1, right=3, wheel up=4, wheel down=5
_BUTTONS = {"left": 1, "right": 3}
_WHEEL_UP = 4
_WHEEL_DOWN = 5


# ---------------------------------------------------------------------------
# XTest keyboard/mouse input via ctypes
# ---------------------------------------------------------------------------


class _XTest:
    """Thin ctypes wrapper around Xlib + XTest for input simulation."""

    def __init__(self):
        self._xlib = None
        self._xtst = None
        self._display = None
        # One Display* shared by every server thread; Xlib is not thread-safe
        self._lock = threading.RLock()

    def _ensure_open(self):
        with self._lock:
            if self._display is None:
                self._open()

    def _open(self):

        libx11_name = ctypes.util.find_library("X11")
        if not libx11_name:
            raise RuntimeError("libX11 not found. Install libx11-dev or xorg-x11-libs.")
        xlib = ctypes.cdll.LoadLibrary(libx11_name)

        libxtst_name = ctypes.util.find_library("Xtst")
        if not libxtst_name:
            raise RuntimeError("libXtst not found. Install libxtst-dev or libXtst.")
        xtst = ctypes.cdll.LoadLibrary(libxtst_name)

        # Set up function signatures
        xlib.XOpenDisplay.argtypes = [ctypes.c_char_p]
        xlib.XOpenDisplay.restype = ctypes.c_void_p
        xlib.XFlush.argtypes = [ctypes.c_void_p]
        xlib.XKeysymToKeycode.argtypes = [ctypes.c_void_p, ctypes.c_ulong]
        xlib.XKeysymToKeycode.restype = ctypes.c_ubyte

        xtst.XTestFakeKeyEvent.argtypes = [
            ctypes.c_void_p, ctypes.c_uint, ctypes.c_int, ctypes.c_ulong,
        ]
        xtst.XTestFakeKeyEvent.restype = ctypes.c_int

        xtst.XTestFakeButtonEvent.argtypes = [
            ctypes.c_void_p, ctypes.c_uint, ctypes.c_int, ctypes.c_ulong,
        ]
        xtst.XTestFakeButtonEvent.restype = ctypes.c_int

        xtst.XTestFakeRelativeMotionEvent.argtypes = [
            ctypes.c_void_p, ctypes.c_int, ctypes.c_int, ctypes.c_ulong,
        ]
        xtst.XTestFakeRelativeMotionEvent.restype = ctypes.c_int

        display_name = os.environ.get("DISPLAY", ":0").encode()
        display = xlib.XOpenDisplay(display_name)
        if not display:
            raise RuntimeError(
                f"Cannot open X11 display '{display_name.decode()}'. "
                "Ensure DISPLAY is set and X server is running."
            )

        self._xlib = xlib
        self._xtst = xtst
        self._display = display

    def keysym_to_keycode(self, keysym: int) -> int:
        with self._lock:
            self._ensure_open()
            return self._xlib.XKeysymToKeycode(self._display, keysym)

    def fake_key_event(self, keycode: int, is_press: bool, delay: int = 0):
        with self._lock:
            self._ensure_open()
            if not self._xtst.XTestFakeKeyEvent(self._display, keycode, int(is_press), delay):
                raise RuntimeError(f"XTestFakeKeyEvent failed for keycode {keycode}")
            self._xlib.XFlush(self._display)

    def fake_button_event(self, button: int, is_press: bool, delay: int = 0):
        with self._lock:
            self._ensure_open()
            if not self._xtst.XTestFakeButtonEvent(self._display, button, int(is_press), delay):
                raise RuntimeError(f"XTestFakeButtonEvent failed for button {button}")
            self._xlib.XFlush(self._display)

    def fake_relative_motion(self, dx: int, dy: int, delay: int = 0):
        with self._lock:
            self._ensure_open()
            self._xtst.XTestFakeRelativeMotionEvent(self._display, dx, dy, delay)
            self._xlib.XFlush(self._display)

    def flush(self):
        with self._lock:
            if self._xlib and self._display:
                self._xlib.XFlush(self._display)


# Singleton instance, lazily initialized
_xtest: _XTest | None = None
_xtest_lock = threading.Lock()


def _get_xtest() -> _XTest:
    global _xtest
    with _xtest_lock:
        if _xtest is None:
            _xtest = _XTest()
        return _xtest


# ---------------------------------------------------------------------------
# Input simulation helpers
# ---------------------------------------------------------------------------


def _keycode(xt: _XTest, keysym: int) -> int:
    kc = xt.keysym_to_keycode(keysym)
    if not kc:
        raise RuntimeError(f"No keycode for keysym {keysym:#x} in the current keymap")
    return kc


def _send_key_combo(modifiers: frozenset[Modifier], keys: Sequence[KeyId]) -> None:
    """Send a keyboard combination via XTest fake key events."""
    xt = _get_xtest()

    mod_keycodes = [_keycode(xt, _XK_MODIFIERS[m]) for m in _MODIFIER_ORDER if m in modifiers]
    main_keycodes = [_keycode(xt, _XK_MAP[k]) for k in keys]

    # If only modifiers specified, treat them as main keys
    if mod_keycodes and not main_keycodes:
        main_keycodes = mod_keycodes
        mod_keycodes = []

    if not main_keycodes:
        raise RuntimeError("Nothing to press: empty chord")

    # Everything pressed so far is released again, even when a press fails
    pressed: list[int] = []
    try:
        for kc in mod_keycodes:
            xt.fake_key_event(kc, True)
            pressed.append(kc)
        time.sleep(0.01)

        for kc in main_keycodes:
            xt.fake_key_event(kc, True)
            pressed.append(kc)
        time.sleep(0.01)
    finally:
        _release_keys(xt, pressed)


def _release_keys(xt: _XTest, pressed: list[int]) -> None:
    """Release keys in reverse press order; raise the first failure last."""
    failure: RuntimeError | None = None
    for kc in reversed(pressed):
        try:
            xt.fake_key_event(kc, False)
        except RuntimeError as exc:
            failure = failure or exc
    xt.flush()
    if failure is not None:
        raise failure


def _send_mouse_click(button: str = "left") -> None:
    xt = _get_xtest()
    btn_num = _BUTTONS.get(button, 1)
    xt.fake_button_event(btn_num, True)
    time.sleep(0.01)
    xt.fake_button_event(btn_num, False)
    xt.flush()


def _send_scroll(amount: int) -> None:
    """X11 scroll is a click of button 4 (up) or 5 (down) per notch."""
    xt = _get_xtest()
    notches = wheel_notches(amount)
    btn = _WHEEL_UP if notches > 0 else _WHEEL_DOWN
    for _ in range(abs(notches)):
        xt.fake_button_event(btn, True)
        xt.fake_button_event(btn, False)
        time.sleep(0.01)
    xt.flush()


# ---------------------------------------------------------------------------
# LinuxInputHandler
# ---------------------------------------------------------------------------


class LinuxInputHandler(InputHandler):
    """Inject keyboard and mouse events on Linux/X11 via XTest.

    Requirements:
      - libX11 and libXtst
      - a reachable X display (``DISPLAY``); Wayland sessions need XWayland
    """

    @property
    def platform_name(self) -> str:
        return "linux"

    def press_chord(self, modifiers: frozenset[Modifier], keys: Sequence[KeyId]) -> None:
        _send_key_combo(modifiers, keys)

    def move_mouse(self, dx: int, dy: int) -> None:
        _get_xtest().fake_relative_motion(dx, dy)

    def click(self, button: str = "left") -> None:
        _send_mouse_click(button)

    def scroll(self, amount: int) -> None:
        _send_scroll(amount)
