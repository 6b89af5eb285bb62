"""Tests for platform detection and handler routing."""

from __future__ import annotations

import sys

import pytest

from airhid._router import detect_platform, get_handler


class TestDetectPlatform:
    def test_returns_known_platform(self):
        result = detect_platform()
        assert result in ("windows", "macos", "linux")

    def test_matches_sys_platform(self):
        result = detect_platform()
        if sys.platform == "win32":
            assert result == "windows"
        elif sys.platform == "darwin":
            assert result == "macos"
        elif sys.platform.startswith("linux"):
            assert result == "linux"


class TestGetHandler:
    def test_unsupported_platform_raises(self):
        with pytest.raises(RuntimeError, match="No input handler available"):
            get_handler("nintendo")

    def test_returns_correct_type_for_current_platform(self):
        platform = detect_platform()
        try:
            handler = get_handler(platform)
            assert handler.platform_name == platform
        except (ImportError, OSError):
            pytest.skip(f"Handler dependencies not available for {platform}")

    def test_two_calls_return_distinct_instances(self):
        platform = detect_platform()
        try:
            h1 = get_handler(platform)
            h2 = get_handler(platform)
            assert h1 is not h2
        except (ImportError, OSError):
            pytest.skip(f"Handler dependencies not available for {platform}")
