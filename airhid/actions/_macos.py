"""macOS input handler: Quartz CGEvent keyboard and mouse."""

from __future__ import annotations

import time
from typing import Sequence

from airhid.actions._handler import InputHandler, wheel_notches
from airhid.actions._keys import KeyId, Modifier

# ---------------------------------------------------------------------------
# Quartz CGEvent keyboard constants
# ---------------------------------------------------------------------------

# Virtual keycode mapping for macOS (CGKeyCode values)
_VK_MAP: dict[KeyId, int] = {
    KeyId.ENTER: 0x24,
    KeyId.TAB: 0x30,
    KeyId.ESC: 0x35,
    KeyId.SPACE: 0x31,
    KeyId.BACKSPACE: 0x33,
    KeyId.DELETE: 0x75,
    KeyId.INSERT: 0x72,  # kVK_Help sits where Insert is on PC keyboards
    KeyId.PRINT_SCREEN: 0x69,  # F13
    KeyId.UP: 0x7E,
    KeyId.DOWN: 0x7D,
    KeyId.LEFT: 0x7B,
    KeyId.RIGHT: 0x7C,
    KeyId.HOME: 0x73,
    KeyId.END: 0x77,
    KeyId.PAGE_UP: 0x74,
    KeyId.PAGE_DOWN: 0x79,
    KeyId.F1: 0x7A,
    KeyId.F2: 0x78,
    KeyId.F3: 0x63,
    KeyId.F4: 0x76,
    KeyId.F5: 0x60,
    KeyId.F6: 0x61,
    KeyId.F7: 0x62,
    KeyId.F8: 0x64,
    KeyId.F9: 0x65,
    KeyId.F10: 0x6D,
    KeyId.F11: 0x67,
    KeyId.F12: 0x6F,
    # Letters
    KeyId.A: 0x00,
    KeyId.B: 0x0B,
    KeyId.C: 0x08,
    KeyId.D: 0x02,
    KeyId.E: 0x0E,
    KeyId.F: 0x03,
    KeyId.G: 0x05,
    KeyId.H: 0x04,
    KeyId.I: 0x22,
    KeyId.J: 0x26,
    KeyId.K: 0x28,
    KeyId.L: 0x25,
    KeyId.M: 0x2E,
    KeyId.N: 0x2D,
    KeyId.O: 0x1F,
    KeyId.P: 0x23,
    KeyId.Q: 0x0C,
    KeyId.R: 0x0F,
    KeyId.S: 0x01,
    KeyId.T: 0x11,
    KeyId.U: 0x20,
    KeyId.V: 0x09,
    KeyId.W: 0x0D,
    KeyId.X: 0x07,
    KeyId.Y: 0x10,
    KeyId.Z: 0x06,
    # Numbers
    KeyId.DIGIT_0: 0x1D,
    KeyId.DIGIT_1: 0x12,
    KeyId.DIGIT_2: 0x13,
    KeyId.DIGIT_3: 0x14,
    KeyId.DIGIT_4: 0x15,
    KeyId.DIGIT_5: 0x17,
    KeyId.DIGIT_6: 0x16,
    KeyId.DIGIT_7: 0x1A,
    KeyId.DIGIT_8: 0x1C,
    KeyId.DIGIT_9: 0x19,
    # Punctuation / symbols
    KeyId.MINUS: 0x1B,
    KeyId.PLUS: 0x18,
    KeyId.LEFT_BRACKET: 0x21,
    KeyId.RIGHT_BRACKET: 0x1E,
    KeyId.BACKSLASH: 0x2A,
    KeyId.SEMICOLON: 0x29,
    KeyId.QUOTE: 0x27,
    KeyId.COMMA: 0x2B,
    KeyId.PERIOD: 0x2F,
    KeyId.SLASH: 0x2C,
    KeyId.BACKTICK: 0x32,
}

# Modifier flag bits for CGEventSetFlags
_kCGEventFlagMaskCommand = 1 << 20
_kCGEventFlagMaskShift = 1 << 17
_kCGEventFlagMaskAlternate = 1 << 19
_kCGEventFlagMaskControl = 1 << 18

_MOD_FLAGS: dict[Modifier, int] = {
    Modifier.SUPER: _kCGEventFlagMaskCommand,
    Modifier.CTRL: _kCGEventFlagMaskControl,
    Modifier.ALT: _kCGEventFlagMaskAlternate,
    Modifier.SHIFT: _kCGEventFlagMaskShift,
}

# Keycodes for pressing a modifier on its own
_MOD_VK: dict[Modifier, int] = {
    Modifier.SUPER: 0x37,  # kVK_Command
    Modifier.CTRL: 0x3B,  # kVK_Control
    Modifier.ALT: 0x3A,  # kVK_Option
    Modifier.SHIFT: 0x38,  # kVK_Shift
}


def resolve_chord(
    modifiers: frozenset[Modifier], keys: Sequence[KeyId]
) -> tuple[int, list[int]]:
    """Map a chord to (flag mask, keycodes).

    If only modifiers were given (e.g. "cmd"), the modifier keys themselves
    are pressed with no flags.
    """
    flags = 0
    for m in modifiers:
        flags |= _MOD_FLAGS[m]
    main_keys = [_VK_MAP[k] for k in keys]
    if not main_keys and modifiers:
        main_keys = [_MOD_VK[m] for m in sorted(modifiers, key=lambda m: m.value)]
        flags = 0
    return flags, main_keys


def _send_key_combo(modifiers: frozenset[Modifier], keys: Sequence[KeyId]) -> None:
    """Send a keyboard combination via Quartz CGEvents."""
    from Quartz import (
        CGEventCreateKeyboardEvent,
        CGEventPost,
        CGEventSetFlags,
        kCGHIDEventTap,
    )

    flags, main_keys = resolve_chord(modifiers, keys)
    if not main_keys:
        raise RuntimeError("Nothing to press: empty chord")

    # Keys already down are released again, even when a later one fails
    pressed: list[int] = []
    try:
        for vk in main_keys:
            event = CGEventCreateKeyboardEvent(None, vk, True)
            if event is None:
                raise RuntimeError(f"CGEventCreateKeyboardEvent failed for keycode {vk:#x}")
            if flags:
                CGEventSetFlags(event, flags)
            CGEventPost(kCGHIDEventTap, event)
            pressed.append(vk)

        time.sleep(0.01)
    finally:
        for vk in reversed(pressed):
            event = CGEventCreateKeyboardEvent(None, vk, False)
            if flags:
                CGEventSetFlags(event, flags)
            CGEventPost(kCGHIDEventTap, event)

    time.sleep(0.01)


# ---------------------------------------------------------------------------
# Quartz CGEvent mouse helpers
# ---------------------------------------------------------------------------


def _current_location():
    from Quartz import CGEventCreate, CGEventGetLocation

    return CGEventGetLocation(CGEventCreate(None))


def _send_mouse_move(dx: int, dy: int) -> None:
    from Quartz import (
        CGEventCreateMouseEvent,
        CGEventPost,
        CGPointMake,
        kCGEventMouseMoved,
        kCGHIDEventTap,
        kCGMouseButtonLeft,
    )

    loc = _current_location()
    point = CGPointMake(loc.x + dx, loc.y + dy)
    move = CGEventCreateMouseEvent(None, kCGEventMouseMoved, point, kCGMouseButtonLeft)
    CGEventPost(kCGHIDEventTap, move)


def _send_mouse_click(button: str = "left") -> None:
    from Quartz import (
        CGEventCreateMouseEvent,
        CGEventPost,
        kCGEventLeftMouseDown,
        kCGEventLeftMouseUp,
        kCGEventRightMouseDown,
        kCGEventRightMouseUp,
        kCGHIDEventTap,
        kCGMouseButtonLeft,
        kCGMouseButtonRight,
    )

    if button == "right":
        mouse_button = kCGMouseButtonRight
        down_type = kCGEventRightMouseDown
        up_type = kCGEventRightMouseUp
    else:
        mouse_button = kCGMouseButtonLeft
        down_type = kCGEventLeftMouseDown
        up_type = kCGEventLeftMouseUp

    point = _current_location()
    down = CGEventCreateMouseEvent(None, down_type, point, mouse_button)
    CGEventPost(kCGHIDEventTap, down)
    time.sleep(0.01)
    up = CGEventCreateMouseEvent(None, up_type, point, mouse_button)
    CGEventPost(kCGHIDEventTap, up)


def _send_scroll(amount: int) -> None:
    """Scroll by whole lines; one wheel notch is one line."""
    from Quartz import (
        CGEventCreateScrollWheelEvent,
        CGEventPost,
        kCGHIDEventTap,
        kCGScrollEventUnitLine,
    )

    lines = wheel_notches(amount)
    if not lines:
        return
    event = CGEventCreateScrollWheelEvent(None, kCGScrollEventUnitLine, 1, lines)
    CGEventPost(kCGHIDEventTap, event)


# ---------------------------------------------------------------------------
# MacosInputHandler
# ---------------------------------------------------------------------------


class MacosInputHandler(InputHandler):
    """Inject keyboard and mouse events on macOS via Quartz CGEvents.

    Requires the Accessibility permission for the hosting terminal/app.
    """

    paste_modifiers = frozenset({Modifier.SUPER})

    @property
    def platform_name(self) -> str:
        return "macos"

    def press_chord(self, modifiers: frozenset[Modifier], keys: Sequence[KeyId]) -> None:
        _send_key_combo(modifiers, keys)

    def move_mouse(self, dx: int, dy: int) -> None:
        _send_mouse_move(dx, dy)

    def click(self, button: str = "left") -> None:
        _send_mouse_click(button)

    def scroll(self, amount: int) -> None:
        _send_scroll(amount)
