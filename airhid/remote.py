"""WebSocket remote channel: the same controls as the HTTP API over one socket.

Clients connect to ``ws://host:ws_port/?token=<token>`` and speak a simple
JSON-RPC-like protocol:

    -> {"id": 1, "method": "command", "params": {"command": "ctrl+shift+esc"}}
    <- {"id": 1, "result": {"success": true, "message": "Pressed ctrl+shift+esc", "error": null}}

    -> {"id": 2, "method": "mouse", "params": {"action": "move", "x": 12, "y": -3}}
    <- {"id": 2, "result": {"success": true, "message": "move", "error": null}}

Supported methods: info, command, key, type, mouse
"""

from __future__ import annotations

import asyncio
import hmac
import json
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs, urlsplit

import websockets
import websockets.asyncio.server

if TYPE_CHECKING:
    from airhid import Controller

logger = logging.getLogger(__name__)

# RFC 6455 "policy violation"
CLOSE_POLICY_VIOLATION = 1008


class RemoteRpcServer:
    """Wraps a Controller and dispatches JSON-RPC calls."""

    def __init__(self, controller: Controller) -> None:
        self._controller = controller

    # -- RPC dispatch -------------------------------------------------------

    def dispatch(self, method: str, params: dict[str, Any]) -> Any:
        handler = getattr(self, f"rpc_{method}", None)
        if handler is None:
            raise ValueError(f"Unknown method: {method}")
        return handler(**params)

    # -- Methods ------------------------------------------------------------

    def rpc_info(self) -> dict:
        return self._controller.info()

    def rpc_command(self, command: str) -> dict:
        return asdict(self._controller.command(command))

    def rpc_key(self, key: str) -> dict:
        return asdict(self._controller.key(key))

    def rpc_type(self, text: str, mode: str = "type") -> dict:
        return asdict(self._controller.type_text(text, mode))

    def rpc_mouse(self, action: str, x: float = 0, y: float = 0) -> dict:
        return asdict(self._controller.mouse(action, x, y))


def token_from_path(path: str) -> str:
    """Extract the ``token`` query parameter from a request path."""
    values = parse_qs(urlsplit(path).query).get("token")
    return values[0] if values else ""


async def handle_client(
    rpc: RemoteRpcServer,
    websocket: websockets.asyncio.server.ServerConnection,
    token: str,
) -> None:
    """Handle a single WebSocket client connection."""
    supplied = token_from_path(websocket.request.path)
    if not hmac.compare_digest(supplied, token):
        logger.warning("rejected WebSocket client %s: bad token", websocket.remote_address)
        await websocket.close(CLOSE_POLICY_VIOLATION, "Forbidden")
        return

    logger.info("client connected from %s", websocket.remote_address)

    async for raw_message in websocket:
        try:
            msg = json.loads(raw_message)
        except json.JSONDecodeError as e:
            await websocket.send(json.dumps({"error": f"Invalid JSON: {e}"}))
            continue
        if not isinstance(msg, dict):
            await websocket.send(json.dumps({"error": "Expected a JSON object"}))
            continue

        msg_id = msg.get("id")
        method = msg.get("method", "")
        params = msg.get("params") or {}

        try:
            # Input injection blocks; keep it off the event loop
            result = await asyncio.to_thread(rpc.dispatch, method, params)
            response = {"id": msg_id, "result": result}
        except (TypeError, ValueError) as e:
            response = {"id": msg_id, "error": str(e)}

        await websocket.send(json.dumps(response, default=str, ensure_ascii=False))

    logger.info("client disconnected: %s", websocket.remote_address)


async def serve(rpc: RemoteRpcServer, host: str, port: int, token: str) -> None:
    """Run the WebSocket server forever."""
    async with websockets.asyncio.server.serve(
        lambda ws: handle_client(rpc, ws, token),
        host,
        port,
    ):
        logger.info("WebSocket remote listening on ws://%s:%d", host, port)
        await asyncio.Future()  # run forever
