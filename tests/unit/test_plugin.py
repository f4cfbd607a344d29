"""Unit tests for the adb plugin method handler."""

from __future__ import annotations

import platform
import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from adb_plugin import platform_version
from adb_plugin.channel import NOT_IMPLEMENTED, MethodCall, Success
from adb_plugin.plugin import GET_PLATFORM_VERSION, AdbPlugin

pytestmark = pytest.mark.unit

KNOWN_SYSTEMS = {"Linux": "Linux", "Darwin": "macOS", "Windows": "Windows"}

json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.floats(allow_nan=False) | st.text(),
    lambda children: st.lists(children, max_size=3)
    | st.dictionaries(st.text(max_size=5), children, max_size=3),
    max_leaves=10,
)


class TestGetPlatformVersion:
    def test_returns_success_with_string(self, plugin: AdbPlugin):
        result = plugin.handle(MethodCall(GET_PLATFORM_VERSION))

        assert isinstance(result, Success)
        assert isinstance(result.result, str)
        assert result.result

    @pytest.mark.skipif(platform.system() not in KNOWN_SYSTEMS, reason="unsupported host OS")
    def test_starts_with_os_name_and_contains_digit(self, plugin: AdbPlugin):
        result = plugin.handle_method(GET_PLATFORM_VERSION)

        assert isinstance(result, Success)
        assert result.result.startswith(KNOWN_SYSTEMS[platform.system()] + " ")
        assert re.search(r"\d", result.result)

    def test_consecutive_calls_agree(self, plugin: AdbPlugin):
        first = plugin.handle_method(GET_PLATFORM_VERSION)
        second = plugin.handle_method(GET_PLATFORM_VERSION)

        assert first == second

    def test_arguments_are_ignored(self, plugin: AdbPlugin):
        plain = plugin.handle_method(GET_PLATFORM_VERSION)
        with_args = plugin.handle_method(GET_PLATFORM_VERSION, {"verbose": True, "n": [1, 2]})

        assert plain == with_args

    def test_uses_configured_fallback(self, monkeypatch):
        monkeypatch.setattr("adb_plugin.platform_version.detect_os", lambda: "linux")

        def broken_uname():
            raise OSError("uname unavailable")

        monkeypatch.setattr(platform_version.os, "uname", broken_uname, raising=False)
        plugin = AdbPlugin(fallback_version="n/a")

        assert plugin.handle_method(GET_PLATFORM_VERSION) == Success("Linux n/a")


class TestUnknownMethods:
    @pytest.mark.parametrize(
        "method",
        ["", "foo", "getplatformversion", "GetPlatformVersion", "getPlatformVersion ", "get"],
    )
    def test_returns_not_implemented(self, plugin: AdbPlugin, method: str):
        assert plugin.handle_method(method) is NOT_IMPLEMENTED

    @given(st.text().filter(lambda name: name != GET_PLATFORM_VERSION), json_values)
    def test_any_other_name_is_never_a_string(self, method: str, arguments: object):
        result = AdbPlugin().handle(MethodCall(method, arguments))

        assert result is NOT_IMPLEMENTED
        assert not isinstance(result, str)

    def test_method_names_lists_only_platform_version(self, plugin: AdbPlugin):
        assert plugin.method_names == [GET_PLATFORM_VERSION]


@given(st.text(), json_values)
def test_handle_never_raises(method: str, arguments: object):
    result = AdbPlugin().handle(MethodCall(method, arguments))

    assert result is NOT_IMPLEMENTED or isinstance(result, Success)
