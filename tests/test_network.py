"""Tests for LAN address discovery and selection."""

from __future__ import annotations

import socket
from types import SimpleNamespace

from airhid import network
from airhid.network import FALLBACK_HOST, IPInfo, get_all_ips, get_default_ip, select_ip


def _ips(*addrs: str) -> list[IPInfo]:
    return [IPInfo(ip=a, interface=f"eth{i}") for i, a in enumerate(addrs)]


def _addr(family, address):
    return SimpleNamespace(family=family, address=address, netmask=None, broadcast=None, ptp=None)


class TestGetAllIps:
    def _patch(self, monkeypatch, addrs, up):
        monkeypatch.setattr(network.psutil, "net_if_addrs", lambda: addrs)
        monkeypatch.setattr(
            network.psutil,
            "net_if_stats",
            lambda: {name: SimpleNamespace(isup=name in up) for name in addrs},
        )

    def test_lists_every_up_interface_with_its_name(self, monkeypatch):
        addrs = {
            "lo": [_addr(socket.AF_INET, "127.0.0.1")],
            "wlan0": [_addr(socket.AF_INET, "192.168.1.20"), _addr(socket.AF_INET6, "fe80::1")],
            "tun0": [_addr(socket.AF_INET, "10.8.0.2")],
            "docker0": [_addr(socket.AF_INET, "172.17.0.1")],
        }
        self._patch(monkeypatch, addrs, up={"lo", "wlan0", "tun0", "docker0"})

        assert get_all_ips() == [
            IPInfo(ip="192.168.1.20", interface="wlan0"),
            IPInfo(ip="10.8.0.2", interface="tun0"),
            IPInfo(ip="172.17.0.1", interface="docker0"),
        ]

    def test_skips_down_interfaces(self, monkeypatch):
        addrs = {
            "eth0": [_addr(socket.AF_INET, "192.168.1.20")],
            "eth1": [_addr(socket.AF_INET, "10.0.0.5")],
        }
        self._patch(monkeypatch, addrs, up={"eth1"})
        assert get_all_ips() == [IPInfo(ip="10.0.0.5", interface="eth1")]

    def test_skips_link_local_and_duplicates(self, monkeypatch):
        addrs = {
            "eth0": [_addr(socket.AF_INET, "169.254.3.3"), _addr(socket.AF_INET, "192.168.1.20")],
            "br0": [_addr(socket.AF_INET, "192.168.1.20")],
        }
        self._patch(monkeypatch, addrs, up={"eth0", "br0"})
        assert get_all_ips() == [IPInfo(ip="192.168.1.20", interface="eth0")]

    def test_enumeration_failure(self, monkeypatch):
        def failing():
            raise OSError("no access")

        monkeypatch.setattr(network.psutil, "net_if_addrs", failing)
        assert get_all_ips() == []

    def test_nothing_found(self, monkeypatch):
        self._patch(monkeypatch, {}, up=set())
        assert get_all_ips() == []


class TestGetDefaultIp:
    def test_prefers_192_168(self):
        assert get_default_ip(_ips("172.16.0.2", "10.0.0.5", "192.168.1.20")) == "192.168.1.20"

    def test_then_10(self):
        assert get_default_ip(_ips("172.16.0.2", "10.0.0.5")) == "10.0.0.5"

    def test_then_first(self):
        assert get_default_ip(_ips("172.16.0.2", "172.17.0.1")) == "172.16.0.2"

    def test_empty_falls_back(self):
        assert get_default_ip([]) == FALLBACK_HOST


class TestSelectIp:
    def test_single_address_needs_no_prompt(self):
        def no_input(prompt):
            raise AssertionError("should not prompt")

        assert select_ip(_ips("192.168.1.20"), input_fn=no_input, print_fn=lambda s: None) == (
            "192.168.1.20"
        )

    def test_pick_second(self):
        ips = _ips("192.168.1.20", "10.0.0.5")
        assert select_ip(ips, input_fn=lambda p: "2", print_fn=lambda s: None) == "10.0.0.5"

    def test_empty_input_picks_first(self):
        ips = _ips("192.168.1.20", "10.0.0.5")
        assert select_ip(ips, input_fn=lambda p: "", print_fn=lambda s: None) == "192.168.1.20"

    def test_invalid_input_picks_first(self):
        ips = _ips("192.168.1.20", "10.0.0.5")
        assert select_ip(ips, input_fn=lambda p: "9", print_fn=lambda s: None) == "192.168.1.20"
        assert select_ip(ips, input_fn=lambda p: "x", print_fn=lambda s: None) == "192.168.1.20"

    def test_eof_picks_first(self):
        def eof(prompt):
            raise EOFError

        ips = _ips("192.168.1.20", "10.0.0.5")
        assert select_ip(ips, input_fn=eof, print_fn=lambda s: None) == "192.168.1.20"

    def test_no_addresses(self):
        assert select_ip([], print_fn=lambda s: None) == FALLBACK_HOST
