"""LAN address discovery for the connection URL."""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from typing import Callable

import psutil

logger = logging.getLogger(__name__)

FALLBACK_HOST = "localhost"


@dataclass(frozen=True)
class IPInfo:
    ip: str
    interface: str


def _is_candidate(ip: str) -> bool:
    return not (ip.startswith("127.") or ip.startswith("0.") or ip.startswith("169.254."))


def get_all_ips() -> list[IPInfo]:
    """Return the IPv4 addresses of every up, non-loopback interface.

    Each address is reported with its interface name.
    """
    try:
        addrs = psutil.net_if_addrs()
        stats = psutil.net_if_stats()
    except OSError as exc:
        logger.warning("interface enumeration failed: %s", exc)
        return []

    ips: list[IPInfo] = []
    seen: set[str] = set()
    for name, entries in addrs.items():
        st = stats.get(name)
        if st is None or not st.isup:
            continue
        for entry in entries:
            if entry.family != socket.AF_INET or not _is_candidate(entry.address):
                continue
            if entry.address in seen:
                continue
            seen.add(entry.address)
            ips.append(IPInfo(ip=entry.address, interface=name))
    return ips


def get_default_ip(ips: list[IPInfo] | None = None) -> str:
    """Pick the most likely LAN address: 192.168.* over 10.* over the rest."""
    if ips is None:
        ips = get_all_ips()
    if not ips:
        return FALLBACK_HOST
    for prefix in ("192.168.", "10."):
        for info in ips:
            if info.ip.startswith(prefix):
                return info.ip
    return ips[0].ip


def select_ip(
    ips: list[IPInfo],
    input_fn: Callable[[str], str] = input,
    print_fn: Callable[[str], None] = print,
) -> str:
    """Let the user choose among several addresses on the terminal.

    Empty or invalid input picks the first address.
    """
    if not ips:
        print_fn(f"No network interface found, using {FALLBACK_HOST}")
        return FALLBACK_HOST
    if len(ips) == 1:
        print_fn(f"Using IP: {ips[0].ip} ({ips[0].interface})")
        return ips[0].ip

    print_fn("\nMultiple network interfaces detected:")
    print_fn("-" * 50)
    for i, info in enumerate(ips, start=1):
        print_fn(f"  [{i}] {info.ip} ({info.interface})")
    print_fn("-" * 50)

    try:
        choice = input_fn(f"Please select IP [1-{len(ips)}] (default 1): ").strip()
    except EOFError:
        choice = ""
    if not choice:
        return ips[0].ip
    try:
        index = int(choice)
    except ValueError:
        index = 0
    if not 1 <= index <= len(ips):
        print_fn(f"Invalid selection, using default: {ips[0].ip}")
        return ips[0].ip
    return ips[index - 1].ip
