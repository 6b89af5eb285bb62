"""Windows input handler: Win32 SendInput keyboard and mouse."""

from __future__ import annotations

import ctypes
import ctypes.wintypes
import time
from typing import Sequence

from airhid.actions._handler import InputHandler
from airhid.actions._keys import KeyId, Modifier

# ---------------------------------------------------------------------------
# Virtual-key codes
# ---------------------------------------------------------------------------

INPUT_MOUSE = 0
INPUT_KEYBOARD = 1
KEYEVENTF_EXTENDEDKEY = 0x0001
KEYEVENTF_KEYUP = 0x0002

VK_MAP: dict[KeyId, int] = {
    KeyId.ENTER: 0x0D,
    KeyId.ESC: 0x1B,
    KeyId.TAB: 0x09,
    KeyId.SPACE: 0x20,
    KeyId.BACKSPACE: 0x08,
    KeyId.DELETE: 0x2E,
    KeyId.INSERT: 0x2D,
    KeyId.PRINT_SCREEN: 0x2C,
    KeyId.UP: 0x26,
    KeyId.DOWN: 0x28,
    KeyId.LEFT: 0x25,
    KeyId.RIGHT: 0x27,
    KeyId.HOME: 0x24,
    KeyId.END: 0x23,
    KeyId.PAGE_UP: 0x21,
    KeyId.PAGE_DOWN: 0x22,
    # OEM punctuation (US layout positions)
    KeyId.PLUS: 0xBB,
    KeyId.MINUS: 0xBD,
    KeyId.COMMA: 0xBC,
    KeyId.PERIOD: 0xBE,
    KeyId.SLASH: 0xBF,
    KeyId.SEMICOLON: 0xBA,
    KeyId.QUOTE: 0xDE,
    KeyId.LEFT_BRACKET: 0xDB,
    KeyId.RIGHT_BRACKET: 0xDD,
    KeyId.BACKSLASH: 0xDC,
    KeyId.BACKTICK: 0xC0,
}
# F1..F12 are contiguous from 0x70; letters and digits use their ASCII code.
VK_MAP.update({KeyId[f"F{n}"]: 0x6F + n for n in range(1, 13)})
VK_MAP.update({k: ord(k.value.upper()) for k in KeyId if len(k.value) == 1})

MODIFIER_VK: dict[Modifier, int] = {
    Modifier.CTRL: 0xA2,  # VK_LCONTROL
    Modifier.ALT: 0xA4,  # VK_LMENU
    Modifier.SHIFT: 0xA0,  # VK_LSHIFT
    Modifier.SUPER: 0x5B,  # VK_LWIN
}

# Press order for held modifiers
_MODIFIER_ORDER = (Modifier.CTRL, Modifier.SHIFT, Modifier.ALT, Modifier.SUPER)

_EXTENDED_VKS = {
    0x26,
    0x28,
    0x25,
    0x27,  # arrow keys
    0x24,
    0x23,
    0x21,
    0x22,  # home, end, pageup, pagedown
    0x2D,
    0x2E,  # insert, delete
    0x2C,  # print screen
    0x5B,
    0x5C,  # VK_LWIN, VK_RWIN
}

ULONG_PTR = ctypes.c_uint64 if ctypes.sizeof(ctypes.c_void_p) == 8 else ctypes.c_uint32


class MOUSEINPUT(ctypes.Structure):
    _fields_ = [
        ("dx", ctypes.c_long),
        ("dy", ctypes.c_long),
        ("mouseData", ctypes.wintypes.DWORD),
        ("dwFlags", ctypes.wintypes.DWORD),
        ("time", ctypes.wintypes.DWORD),
        ("dwExtraInfo", ULONG_PTR),
    ]


class KEYBDINPUT(ctypes.Structure):
    _fields_ = [
        ("wVk", ctypes.wintypes.WORD),
        ("wScan", ctypes.wintypes.WORD),
        ("dwFlags", ctypes.wintypes.DWORD),
        ("time", ctypes.wintypes.DWORD),
        ("dwExtraInfo", ULONG_PTR),
    ]


class HARDWAREINPUT(ctypes.Structure):
    _fields_ = [
        ("uMsg", ctypes.wintypes.DWORD),
        ("wParamL", ctypes.wintypes.WORD),
        ("wParamH", ctypes.wintypes.WORD),
    ]


class _INPUT_UNION(ctypes.Union):
    _fields_ = [
        ("mi", MOUSEINPUT),
        ("ki", KEYBDINPUT),
        ("hi", HARDWAREINPUT),
    ]


class INPUT(ctypes.Structure):
    _fields_ = [
        ("type", ctypes.wintypes.DWORD),
        ("_input", _INPUT_UNION),
    ]


_user32_dll = None


def _user32():
    global _user32_dll
    if _user32_dll is None:
        _user32_dll = ctypes.WinDLL("user32", use_last_error=True)
    return _user32_dll


def _send_inputs(inputs: list[INPUT], what: str) -> None:
    arr = (INPUT * len(inputs))(*inputs)
    sent = _user32().SendInput(len(inputs), arr, ctypes.sizeof(INPUT))
    if sent != len(inputs):
        err = ctypes.get_last_error()
        raise RuntimeError(f"SendInput {what} failed, sent {sent}/{len(inputs)} events (error={err})")


def is_elevated() -> bool:
    """Return True when the process runs with Administrator rights."""
    try:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())
    except (AttributeError, OSError):
        return False


# ---------------------------------------------------------------------------
# Keyboard
# ---------------------------------------------------------------------------


def _make_key_input(vk: int, *, down: bool = True) -> INPUT:
    flags = 0 if down else KEYEVENTF_KEYUP
    if vk in _EXTENDED_VKS:
        flags |= KEYEVENTF_EXTENDEDKEY
    inp = INPUT()
    inp.type = INPUT_KEYBOARD
    inp._input.ki.wVk = vk
    inp._input.ki.dwFlags = flags
    return inp


def resolve_chord(
    modifiers: frozenset[Modifier], keys: Sequence[KeyId]
) -> tuple[list[int], list[int]]:
    """Map a chord to (modifier VKs, main VKs).

    A modifier-only chord ("win") becomes main keys so it actually fires.
    """
    mod_vks = [MODIFIER_VK[m] for m in _MODIFIER_ORDER if m in modifiers]
    main_vks = [VK_MAP[k] for k in keys]
    if mod_vks and not main_vks:
        return [], mod_vks
    return mod_vks, main_vks


def _send_chord(modifiers: frozenset[Modifier], keys: Sequence[KeyId]) -> None:
    mod_vks, main_vks = resolve_chord(modifiers, keys)
    if not main_vks:
        raise RuntimeError("Nothing to press: empty chord")

    main_up = [_make_key_input(vk, down=False) for vk in reversed(main_vks)]
    mod_up = [_make_key_input(vk, down=False) for vk in reversed(mod_vks)]
    try:
        if mod_vks:
            # Send modifier-down events first, pause briefly, then the rest.
            # System hotkeys like Win+R need the modifier state registered first.
            _send_inputs([_make_key_input(vk, down=True) for vk in mod_vks], "keyboard")
            time.sleep(0.02)
        _send_inputs([_make_key_input(vk, down=True) for vk in main_vks] + main_up, "keyboard")
    except RuntimeError:
        # Part of a batch may have landed; lift every key of the chord again
        _send_inputs(main_up + mod_up, "keyboard")
        raise
    if mod_up:
        _send_inputs(mod_up, "keyboard")


# ---------------------------------------------------------------------------
# Mouse
# ---------------------------------------------------------------------------

MOUSEEVENTF_MOVE = 0x0001
MOUSEEVENTF_LEFTDOWN = 0x0002
MOUSEEVENTF_LEFTUP = 0x0004
MOUSEEVENTF_RIGHTDOWN = 0x0008
MOUSEEVENTF_RIGHTUP = 0x0010
MOUSEEVENTF_WHEEL = 0x0800


def _make_mouse_input(flags: int, dx: int = 0, dy: int = 0, data: int = 0) -> INPUT:
    inp = INPUT()
    inp.type = INPUT_MOUSE
    inp._input.mi.dx = dx
    inp._input.mi.dy = dy
    # mouseData is a DWORD; negative wheel deltas wrap like int32 -> uint32
    inp._input.mi.mouseData = data & 0xFFFFFFFF
    inp._input.mi.dwFlags = flags
    return inp


# ---------------------------------------------------------------------------
# WindowsInputHandler
# ---------------------------------------------------------------------------


class WindowsInputHandler(InputHandler):
    """Inject keyboard and mouse events on Windows via SendInput."""

    @property
    def platform_name(self) -> str:
        return "windows"

    def press_chord(self, modifiers: frozenset[Modifier], keys: Sequence[KeyId]) -> None:
        _send_chord(modifiers, keys)

    def move_mouse(self, dx: int, dy: int) -> None:
        _send_inputs([_make_mouse_input(MOUSEEVENTF_MOVE, dx, dy)], "mouse")

    def click(self, button: str = "left") -> None:
        if button == "right":
            down, up = MOUSEEVENTF_RIGHTDOWN, MOUSEEVENTF_RIGHTUP
        else:
            down, up = MOUSEEVENTF_LEFTDOWN, MOUSEEVENTF_LEFTUP
        _send_inputs([_make_mouse_input(down)], "mouse")
        time.sleep(0.01)
        _send_inputs([_make_mouse_input(up)], "mouse")

    def scroll(self, amount: int) -> None:
        _send_inputs([_make_mouse_input(MOUSEEVENTF_WHEEL, data=amount)], "mouse")
