"""
airhid -- drive this computer's keyboard and mouse from a phone browser.

Quick start::

    import airhid

    # Controller is the primary API; every call returns an ActionResult
    controller = airhid.Controller()
    controller.command("ctrl+shift+esc")   # one chord
    controller.command("up up down")       # three presses, 10 ms apart
    controller.command("向上翻页")          # page up
    controller.key("enter")
    controller.type_text("你好, world")     # via clipboard + paste
    controller.mouse("move", 10, -5)

    # The parser on its own (pure, no input is injected)
    result = airhid.parse_command("ctrl s")
    result.modifiers, result.main_keys
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from airhid._router import detect_platform, get_handler
from airhid.actions import (
    ActionResult,
    CommandExecutor,
    KeyId,
    Modifier,
    ParseResult,
    parse_command,
)
from airhid.errors import (
    CommandError,
    EmptyCommand,
    InjectionFailure,
    NoRecognizedKeys,
    UnknownKey,
)

__version__ = "1.1.0"

__all__ = [
    "Controller",
    "ActionResult",
    "ParseResult",
    "KeyId",
    "Modifier",
    "parse_command",
    # Errors
    "CommandError",
    "EmptyCommand",
    "NoRecognizedKeys",
    "UnknownKey",
    "InjectionFailure",
    # Advanced / building blocks
    "CommandExecutor",
    "get_handler",
    "detect_platform",
]

logger = logging.getLogger(__name__)


def describe(result: ParseResult) -> str:
    """Human-readable chord text, e.g. "ctrl+shift+esc"."""
    parts = [m.value for m in Modifier if m in result.modifiers]
    parts += [k.value for k in result.main_keys]
    return "+".join(parts)


class Controller:
    """Remote-input entry point shared by the HTTP and WebSocket servers.

    Wraps a CommandExecutor and reports outcomes as ActionResult instead of
    raising, so a bad request never takes the server down.

    Example::

        controller = airhid.Controller()
        result = controller.command("ctrl a")
        if not result.success:
            print(result.error)
    """

    def __init__(
        self,
        *,
        platform: str | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        if executor is None:
            executor = CommandExecutor(get_handler(platform))
        self._executor = executor

    @property
    def platform_name(self) -> str:
        return self._executor.handler.platform_name

    def command(self, command: str) -> ActionResult:
        """Parse and press a free-form key command.

        Args:
            command: e.g. "ctrl+shift+esc", "ctrl s", "alt f4", "回车".
        """
        return self._run(
            self._executor.parse_and_dispatch,
            command,
            describe_ok=lambda result: f"Pressed {describe(result)}",
        )

    def key(self, key: str) -> ActionResult:
        """Press one named key ("enter", "tab", "esc", "ctrl_enter", ...)."""
        return self._run(self._executor.press_named_key, key, describe_ok=lambda _: f"Pressed {key}")

    def type_text(self, text: str, mode: str = "type") -> ActionResult:
        """Type text via the clipboard, or just copy it (mode="clipboard")."""
        ok = "Copied to clipboard" if mode == "clipboard" else "Typed text"
        return self._run(self._executor.type_text, text, mode, describe_ok=lambda _: ok)

    def mouse(self, action: str, x: float = 0, y: float = 0) -> ActionResult:
        """Run a touchpad action: move (x, y deltas), click, right_click, scroll (y)."""
        return self._run(self._executor.mouse, action, x, y, describe_ok=lambda _: action)

    def info(self) -> dict[str, str]:
        return {
            "status": "online",
            "version": f"airhid-{__version__}",
            "platform": self.platform_name,
        }

    def _run(
        self,
        fn: Callable[..., Any],
        *args: Any,
        describe_ok: Callable[[Any], str],
    ) -> ActionResult:
        try:
            value = fn(*args)
        except (CommandError, ValueError) as exc:
            logger.warning("%s failed: %s", fn.__name__, exc)
            return ActionResult(success=False, message="", error=str(exc))
        return ActionResult(success=True, message=describe_ok(value))
