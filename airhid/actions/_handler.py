"""Abstract base for platform-specific input handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from airhid.actions._keys import KeyId, Modifier


class InputHandler(ABC):
    """Interface for platform-specific keyboard and mouse injection.

    Each platform implements this to translate abstract key identifiers
    into native key events.  Methods raise ``RuntimeError`` when the OS
    rejects an event; callers wrap that into ``InjectionFailure``.
    """

    #: Modifiers held for the system paste shortcut.
    paste_modifiers: frozenset[Modifier] = frozenset({Modifier.CTRL})

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Return the platform identifier ('windows', 'macos', 'linux')."""
        ...

    @abstractmethod
    def press_chord(self, modifiers: frozenset[Modifier], keys: Sequence[KeyId]) -> None:
        """Press all keys together while holding the modifiers.

        Modifiers go down first, then the keys; everything is released in
        reverse order.  With no keys, the modifiers themselves are pressed.

        Args:
            modifiers: Modifiers to hold.
            keys: Main keys, pressed in order and released in reverse.
        """
        ...

    def press_key(self, key: KeyId) -> None:
        """Press and release one key with no modifiers."""
        self.press_chord(frozenset(), (key,))

    @abstractmethod
    def move_mouse(self, dx: int, dy: int) -> None:
        """Move the pointer relative to its current position."""
        ...

    @abstractmethod
    def click(self, button: str = "left") -> None:
        """Click a mouse button ('left' or 'right') at the pointer."""
        ...

    @abstractmethod
    def scroll(self, amount: int) -> None:
        """Turn the wheel; positive scrolls up, negative down.

        ``amount`` is in wheel-delta units, 120 per notch (the Win32
        convention the phone client sends).
        """
        ...


WHEEL_DELTA = 120
# Upper bound on notches per scroll request
MAX_SCROLL_NOTCHES = 50


def wheel_notches(amount: int) -> int:
    """Convert a wheel delta to whole notches, never rounding a move to 0.

    The result is clamped to +/-MAX_SCROLL_NOTCHES.
    """
    if amount == 0:
        return 0
    notches = int(amount / WHEEL_DELTA)
    if notches == 0:
        notches = 1 if amount > 0 else -1
    return max(-MAX_SCROLL_NOTCHES, min(MAX_SCROLL_NOTCHES, notches))
