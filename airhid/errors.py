"""Errors raised while parsing and injecting input."""

from __future__ import annotations


class CommandError(Exception):
    """Base class for every failure reported back to a remote caller."""


class NoRecognizedKeys(CommandError):
    """A command contained no modifier and no key from the vocabulary."""

    def __init__(self, command: str) -> None:
        super().__init__(f"No recognizable keys in command: {command!r}")
        self.command = command


class EmptyCommand(NoRecognizedKeys):
    """A command was empty or only whitespace."""

    def __init__(self) -> None:
        CommandError.__init__(self, "Command must not be empty")
        self.command = ""


class UnknownKey(CommandError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown key: {key}")
        self.key = key


class InjectionFailure(CommandError):
    """The OS input primitive (or the clipboard) failed.

    The original exception is kept on ``cause`` and chained as
    ``__cause__`` by the raiser.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause
