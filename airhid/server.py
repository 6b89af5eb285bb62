"""HTTP server for the phone page.

Serves the single-page remote at ``/`` and a small JSON API behind a bearer
token::

    POST /command  {"command": "ctrl+shift+esc"}
    POST /key      {"key": "enter"}
    POST /type     {"text": "hello", "mode": "type" | "clipboard"}
    POST /mouse    {"action": "move", "x": 10, "y": -4}
    GET  /api/info

Replies are ``{"success": true}`` or ``{"success": false, "error": "..."}``.
"""

from __future__ import annotations

import functools
import hmac
import logging
from typing import TYPE_CHECKING, Any, Callable

from flask import Flask, jsonify, render_template, request

if TYPE_CHECKING:
    from airhid import Controller
    from airhid.actions.executor import ActionResult

logger = logging.getLogger(__name__)


def _reply(result: ActionResult):
    body: dict[str, Any] = {"success": result.success}
    if result.error:
        body["error"] = result.error
    return jsonify(body)


def _failure(error: str):
    return jsonify({"success": False, "error": error})


def _json_body() -> dict[str, Any] | None:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else None


def create_app(controller: Controller, token: str) -> Flask:
    """Build the Flask app bound to one controller and one access token."""
    app = Flask(__name__)

    def require_token(view: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(view)
        def wrapper(*args: Any, **kwargs: Any):
            header = request.headers.get("Authorization", "")
            if not header:
                return "Unauthorized", 401
            scheme, _, supplied = header.partition(" ")
            if scheme != "Bearer" or not hmac.compare_digest(supplied, token):
                logger.warning("rejected request from %s: bad token", request.remote_addr)
                return "Forbidden", 403
            return view(*args, **kwargs)

        return wrapper

    @app.route("/")
    def index():
        return render_template("index.html")

    @app.route("/api/info")
    @require_token
    def info():
        return jsonify(controller.info())

    @app.route("/command", methods=["POST"])
    @require_token
    def command():
        data = _json_body()
        if data is None:
            return _failure("Invalid JSON body")
        return _reply(controller.command(str(data.get("command") or "")))

    @app.route("/key", methods=["POST"])
    @require_token
    def key():
        data = _json_body()
        if data is None:
            return _failure("Invalid JSON body")
        return _reply(controller.key(str(data.get("key") or "")))

    @app.route("/type", methods=["POST"])
    @require_token
    def type_text():
        data = _json_body()
        if data is None:
            return _failure("Invalid JSON body")
        text = data.get("text") or ""
        if not isinstance(text, str):
            return _failure("text must be a string")
        mode = str(data.get("mode") or "type")
        return _reply(controller.type_text(text, mode))

    @app.route("/mouse", methods=["POST"])
    @require_token
    def mouse():
        data = _json_body()
        if data is None:
            return _failure("Invalid JSON body")
        return _reply(
            controller.mouse(
                str(data.get("action") or ""),
                data.get("x") or 0,
                data.get("y") or 0,
            )
        )

    return app


def run(app: Flask, host: str, port: int) -> None:
    """Serve ``app`` with Flask's threaded server (blocks)."""
    app.run(host=host, port=port, debug=False, use_reloader=False, threaded=True)
