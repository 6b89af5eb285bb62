"""Platform auto-detection and input handler dispatch."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from airhid.actions._handler import InputHandler


def detect_platform() -> str:
    """Return the current platform identifier."""
    if sys.platform == "win32":
        return "windows"
    elif sys.platform == "darwin":
        return "macos"
    elif sys.platform.startswith("linux"):
        return "linux"
    else:
        raise RuntimeError(f"Unsupported platform: {sys.platform}")


def get_handler(platform: str | None = None) -> InputHandler:
    """Return a fresh input handler instance.

    Args:
        platform: Force a specific platform ('windows', 'macos', 'linux').
                  If None, auto-detects from sys.platform.

    Raises:
        RuntimeError: If the platform is unsupported.
    """
    if platform is None:
        platform = detect_platform()

    if platform == "windows":
        from airhid.actions._windows import WindowsInputHandler

        return WindowsInputHandler()
    elif platform == "macos":
        from airhid.actions._macos import MacosInputHandler

        return MacosInputHandler()
    elif platform == "linux":
        from airhid.actions._linux import LinuxInputHandler

        return LinuxInputHandler()
    else:
        raise RuntimeError(
            f"No input handler available for platform '{platform}'. "
            f"Currently supported: windows, macos, linux."
        )
