"""The adb plugin: answers platform queries on the ``adb`` channel."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from adb_plugin.channel.codec import NOT_IMPLEMENTED, MethodCall, Result, Success
from adb_plugin.config import DEFAULT_CHANNEL_NAME, DEFAULT_FALLBACK_VERSION
from adb_plugin.debug_log import log
from adb_plugin.platform_version import get_platform_version

if TYPE_CHECKING:
    from collections.abc import Callable

    from adb_plugin.channel.messenger import PluginRegistrar
    from adb_plugin.config import PluginConfig

CHANNEL_NAME = DEFAULT_CHANNEL_NAME
GET_PLATFORM_VERSION = "getPlatformVersion"


class AdbPlugin:
    """Stateless method-call handler for the ``adb`` channel."""

    def __init__(self, *, fallback_version: str = DEFAULT_FALLBACK_VERSION) -> None:
        self._fallback_version = fallback_version
        self._methods: dict[str, Callable[[Any], Any]] = {
            GET_PLATFORM_VERSION: self._get_platform_version,
        }

    @property
    def method_names(self) -> list[str]:
        return list(self._methods)

    def handle(self, call: MethodCall) -> Result:
        """Answer a call, or return NOT_IMPLEMENTED for unknown method names."""
        handler = self._methods.get(call.method)
        if handler is None:
            log.debug(f"Method not implemented: {call.method!r}")
            return NOT_IMPLEMENTED
        log.debug(f"Handling {call.method!r}")
        return Success(handler(call.arguments))

    def handle_method(self, method: str, arguments: Any = None) -> Result:
        return self.handle(MethodCall(method, arguments))

    def _get_platform_version(self, _arguments: Any) -> str:
        return get_platform_version(self._fallback_version)


def register_with_registrar(
    registrar: PluginRegistrar, config: PluginConfig | None = None
) -> AdbPlugin:
    """Create the plugin and install it on its channel."""
    if config is None:
        plugin = AdbPlugin()
        channel_name = CHANNEL_NAME
    else:
        plugin = AdbPlugin(fallback_version=config.general.fallback_version)
        channel_name = config.general.channel_name

    channel = registrar.channel(channel_name)
    channel.set_method_call_handler(plugin.handle)
    log.info(f"adb plugin registered on channel {channel_name!r}")
    return plugin
