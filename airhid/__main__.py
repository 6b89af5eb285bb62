"""CLI for the AirHID server: python -m airhid"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import threading
from pathlib import Path

import qrcode

from airhid import Controller, __version__
from airhid._router import detect_platform
from airhid.config import load_or_init
from airhid.network import get_all_ips, get_default_ip, select_ip
from airhid.remote import RemoteRpcServer, serve
from airhid.server import create_app, run

logger = logging.getLogger("airhid")


def connection_url(ip: str, port: int, token: str) -> str:
    return f"http://{ip}:{port}/?token={token}"


def print_qr(url: str) -> None:
    qr = qrcode.QRCode(border=1)
    qr.add_data(url)
    qr.make(fit=True)
    qr.print_ascii(invert=True)


def _warn_if_not_elevated() -> None:
    # Without elevation, SendInput can't reach elevated windows (UIPI).
    from airhid.actions._windows import is_elevated

    if not is_elevated():
        print("WARNING: not running as Administrator.")
        print("         Keys sent to elevated windows (Task Manager, installers) will be dropped.")
        print()


def _start_remote(controller: Controller, host: str, port: int, token: str) -> threading.Thread:
    rpc = RemoteRpcServer(controller)
    thread = threading.Thread(
        target=asyncio.run,
        args=(serve(rpc, host, port, token),),
        name="airhid-ws",
        daemon=True,
    )
    thread.start()
    return thread


def main() -> None:
    parser = argparse.ArgumentParser(
        description="AirHID: control this computer's keyboard and mouse from your phone"
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="Path to config.json (default: ./config.json)"
    )
    parser.add_argument("--host", type=str, default=None, help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="HTTP port (default: 5000)")
    parser.add_argument(
        "--ws-port", type=int, default=None, help="WebSocket remote port (default: off)"
    )
    parser.add_argument(
        "--ip", type=str, default=None, help="LAN address to advertise (default: ask when ambiguous)"
    )
    parser.add_argument("--no-qr", action="store_true", help="Don't print the QR code")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_or_init(args.config)
    host = args.host or config.host
    port = args.port or config.port
    ws_port = args.ws_port if args.ws_port is not None else config.ws_port
    logger.debug("effective config: host=%s port=%d ws_port=%d", host, port, ws_port)

    print(f"=== AirHID {__version__} ===")
    print()

    platform = detect_platform()
    if platform == "windows":
        _warn_if_not_elevated()

    try:
        controller = Controller(platform=platform)
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    ip = args.ip
    if not ip:
        ips = get_all_ips()
        ip = select_ip(ips) if sys.stdin.isatty() else get_default_ip(ips)
    url = connection_url(ip, port, config.token)

    print()
    print(f"  Platform: {controller.platform_name}")
    print(f"  Listening on http://{host}:{port}")
    if ws_port:
        print(f"  WebSocket: ws://{ip}:{ws_port}/?token={config.token}")
    print()
    print(f"  Open on your phone: {url}")
    print()
    if not args.no_qr:
        print_qr(url)
        print()

    if ws_port:
        _start_remote(controller, host, ws_port, config.token)

    app = create_app(controller, config.token)
    try:
        run(app, host, port)
    except KeyboardInterrupt:
        print("\nShutdown.")


if __name__ == "__main__":
    main()
