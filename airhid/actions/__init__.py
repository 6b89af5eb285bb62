"""airhid input layer.

Parses key commands and injects keyboard and mouse events through a
platform-specific handler.
"""

from airhid.actions._keys import DEFAULT_VOCABULARY, KeyId, Modifier, Vocabulary
from airhid.actions.executor import ActionResult, CommandExecutor
from airhid.actions.parser import ParseResult, parse_command

__all__ = [
    "ActionResult",
    "CommandExecutor",
    "DEFAULT_VOCABULARY",
    "KeyId",
    "Modifier",
    "ParseResult",
    "Vocabulary",
    "parse_command",
]
