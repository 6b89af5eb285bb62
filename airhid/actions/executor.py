"""Command executor: dispatches parsed commands to a platform input handler."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from airhid.actions._handler import MAX_SCROLL_NOTCHES, WHEEL_DELTA
from airhid.actions._keys import DEFAULT_VOCABULARY, KeyId, Modifier, Vocabulary
from airhid.actions.parser import ParseResult, parse_command
from airhid.errors import InjectionFailure, UnknownKey

if TYPE_CHECKING:
    from airhid.actions._handler import InputHandler

logger = logging.getLogger(__name__)

# Pause between presses of a sequential dispatch ("up up down").
KEY_INTERVAL = 0.01
# Let the clipboard settle before pasting.
PASTE_DELAY = 0.1

VALID_MOUSE_ACTIONS = frozenset({"move", "click", "right_click", "scroll"})
VALID_TYPE_MODES = frozenset({"type", "clipboard"})

# Named shortcuts accepted by press_named_key() besides plain key names.
_KEY_SHORTCUTS: dict[str, tuple[frozenset[Modifier], tuple[KeyId, ...]]] = {
    "ctrl_enter": (frozenset({Modifier.CTRL}), (KeyId.ENTER,)),
}


@dataclass
class ActionResult:
    """Result of an action execution."""

    success: bool
    message: str
    error: str | None = None


def is_chord(result: ParseResult) -> bool:
    """True when the result is fired as one combined press.

    Any modifier forces a chord; so does a lone key.  Two or more bare keys
    are pressed one after another instead.
    """
    return bool(result.modifiers) or len(result.main_keys) <= 1


class CommandExecutor:
    """Parses commands and injects them through one serialized gate.

    Every keyboard injection (commands, single keys, paste) holds the same
    lock, so presses from concurrent requests never interleave.  Mouse
    events bypass the lock.

    Usage::

        executor = CommandExecutor(handler)
        executor.parse_and_dispatch("ctrl+shift+esc")
        executor.parse_and_dispatch("up up down")
    """

    def __init__(
        self,
        handler: InputHandler,
        *,
        vocab: Vocabulary = DEFAULT_VOCABULARY,
        lock: threading.Lock | None = None,
        key_interval: float = KEY_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        copy_text: Callable[[str], None] | None = None,
    ) -> None:
        self._handler = handler
        self._vocab = vocab
        self._lock = lock if lock is not None else threading.Lock()
        self._key_interval = key_interval
        self._sleep = sleep
        if copy_text is None:
            from airhid.clipboard import copy_text
        self._copy_text = copy_text

    @property
    def handler(self) -> InputHandler:
        return self._handler

    # -- keyboard ----------------------------------------------------------

    def parse_and_dispatch(self, command: str) -> ParseResult:
        """Parse ``command`` and press the resulting keys.

        Raises:
            EmptyCommand: Nothing but whitespace.
            NoRecognizedKeys: No vocabulary token in the command.
            InjectionFailure: The platform handler failed a press.
        """
        with self._lock:
            result = parse_command(command, self._vocab)
            logger.info(
                "parsed command %r -> modifiers=%s keys=%s",
                command,
                sorted(m.value for m in result.modifiers),
                [k.value for k in result.main_keys],
            )
            self.dispatch(result)
            return result

    def dispatch(self, result: ParseResult) -> None:
        """Press a parsed result as one chord or as a key sequence.

        The caller must hold the gate; parse_and_dispatch() does.
        """
        if is_chord(result):
            self._press_chord(result.modifiers, result.main_keys)
            return

        for i, key in enumerate(result.main_keys):
            if i:
                self._sleep(self._key_interval)
            try:
                self._handler.press_key(key)
            except Exception as exc:
                raise InjectionFailure(f"Failed to press {key.value}", exc) from exc

    def press_named_key(self, name: str) -> None:
        """Press one key by name ("enter", "tab", "up", "ctrl_enter", ...)."""
        name = name.strip().lower()
        shortcut = _KEY_SHORTCUTS.get(name)
        if shortcut is not None:
            modifiers, keys = shortcut
        else:
            key = self._vocab.lookup_key(name)
            if key is None:
                raise UnknownKey(name)
            modifiers, keys = frozenset(), (key,)

        with self._lock:
            logger.info("simulated key: %s", name)
            self._press_chord(modifiers, keys)

    def type_text(self, text: str, mode: str = "type") -> None:
        """Inject text through the clipboard.

        ``mode="type"`` copies the text and presses the paste shortcut;
        ``mode="clipboard"`` only copies it.
        """
        if mode not in VALID_TYPE_MODES:
            raise ValueError(f"Unknown mode '{mode}'. Valid: {sorted(VALID_TYPE_MODES)}")

        if mode == "clipboard":
            self._copy_text(text)
            return

        if not text:
            raise ValueError("No text provided")
        with self._lock:
            logger.info("injecting text via clipboard: %.50s...", text)
            self._copy_text(text)
            self._sleep(PASTE_DELAY)
            self._press_chord(self._handler.paste_modifiers, (KeyId.V,))
            logger.info("injected successfully")

    def _press_chord(self, modifiers: frozenset[Modifier], keys: tuple[KeyId, ...]) -> None:
        try:
            self._handler.press_chord(modifiers, keys)
        except Exception as exc:
            names = [m.value for m in sorted(modifiers, key=lambda m: m.value)]
            names += [k.value for k in keys]
            raise InjectionFailure(f"Failed to press {'+'.join(names)}", exc) from exc

    # -- mouse -------------------------------------------------------------

    def mouse(self, action: str, x: float = 0, y: float = 0) -> None:
        """Run a mouse action from the phone's touchpad.

        Args:
            action: One of move, click, right_click, scroll.
            x: Horizontal delta for move.
            y: Vertical delta for move, wheel delta for scroll.
        """
        if action not in VALID_MOUSE_ACTIONS:
            raise ValueError(
                f"Unknown mouse action '{action}'. Valid: {sorted(VALID_MOUSE_ACTIONS)}"
            )
        try:
            dx, dy = int(x), int(y)
        except (TypeError, ValueError, OverflowError) as exc:
            raise ValueError(f"Invalid mouse coordinates: {x!r}, {y!r}") from exc
        try:
            if action == "move":
                self._handler.move_mouse(dx, dy)
            elif action == "click":
                self._handler.click("left")
            elif action == "right_click":
                self._handler.click("right")
            else:
                limit = MAX_SCROLL_NOTCHES * WHEEL_DELTA
                self._handler.scroll(max(-limit, min(limit, dy)))
        except Exception as exc:
            raise InjectionFailure(f"Mouse {action} failed", exc) from exc
