"""Persistent server configuration (config.json)."""

from __future__ import annotations

import json
import logging
import os
import secrets
import sys
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"
CONFIG_ENV_VAR = "AIRHID_CONFIG"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000


@dataclass
class Config:
    token: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    # 0 disables the WebSocket channel
    ws_port: int = 0


def generate_token() -> str:
    """Return a random 16-byte token as 32 hex characters."""
    return secrets.token_hex(16)


def default_config_path() -> Path:
    """Where config.json lives.

    ``AIRHID_CONFIG`` wins; otherwise next to the frozen executable, or in
    the current directory when running from source.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent / CONFIG_FILE_NAME
    return Path.cwd() / CONFIG_FILE_NAME


def _read(path: Path) -> Config | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        logger.warning("Failed to load config %s: %s", path, exc)
        return None

    if not isinstance(data, dict) or not data.get("token"):
        return None
    try:
        return Config(
            token=str(data["token"]),
            host=str(data.get("host") or DEFAULT_HOST),
            port=int(data.get("port") or DEFAULT_PORT),
            ws_port=int(data.get("ws_port") or 0),
        )
    except (TypeError, ValueError) as exc:
        logger.warning("Ignoring malformed config %s: %s", path, exc)
        return None


def save(config: Config, path: Path) -> bool:
    """Write the config; returns False (and logs) when the file can't be written."""
    try:
        path.write_text(json.dumps(asdict(config), indent=2), encoding="utf-8")
        return True
    except OSError as exc:
        logger.warning("Could not save config to %s: %s", path, exc)
        return False


def load_or_init(path: Path | None = None) -> Config:
    """Load the config, or create and save a fresh one with a new token.

    A missing, unreadable, or token-less file is replaced.  A failed save
    is not fatal: the generated config is still returned.
    """
    if path is None:
        path = default_config_path()

    config = _read(path)
    if config is not None:
        return config

    config = Config(token=generate_token())
    if save(config, path):
        logger.info("Created new config at %s", path)
    return config
