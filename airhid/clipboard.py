"""System clipboard access."""

from __future__ import annotations

import pyperclip

from airhid.errors import InjectionFailure


def copy_text(text: str) -> None:
    """Put ``text`` on the system clipboard."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        raise InjectionFailure("Clipboard error", exc) from exc
