"""Host-side routing of method calls to named channels."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeAlias

from adb_plugin.channel.codec import (
    NOT_IMPLEMENTED,
    ChannelError,
    Failure,
    MethodCall,
    Result,
    encode_response,
)
from adb_plugin.config import DEFAULT_CHANNEL_NAME
from adb_plugin.debug_log import log

if TYPE_CHECKING:
    from collections.abc import Callable

MethodCallHandler: TypeAlias = "Callable[[MethodCall], Result]"


class MethodChannel:
    """A named channel a plugin installs its handler on."""

    def __init__(self, name: str, messenger: PluginRegistrar) -> None:
        self.name = name
        self._messenger = messenger
        self._handler: MethodCallHandler | None = None

    @property
    def handler(self) -> MethodCallHandler | None:
        return self._handler

    def set_method_call_handler(self, handler: MethodCallHandler | None) -> None:
        """Install (or with None, remove) the handler for this channel."""
        self._handler = handler

    def invoke(self, method: str, arguments: Any = None) -> Result:
        return self._messenger.send(self.name, MethodCall(method, arguments))


class PluginRegistrar:
    """Keeps channels by name and routes calls to their handlers."""

    def __init__(self) -> None:
        self._channels: dict[str, MethodChannel] = {}

    @property
    def messenger(self) -> PluginRegistrar:
        return self

    @property
    def channel_names(self) -> list[str]:
        return sorted(self._channels)

    def channel(self, name: str) -> MethodChannel:
        """Get or create the channel called ``name``."""
        channel = self._channels.get(name)
        if channel is None:
            channel = MethodChannel(name, self)
            self._channels[name] = channel
            log.debug(f"Registered channel {name!r}")
        return channel

    def send(self, channel_name: str, call: MethodCall) -> Result:
        """Route a call; channels nobody handles answer with NOT_IMPLEMENTED."""
        channel = self._channels.get(channel_name)
        if channel is None or channel.handler is None:
            log.debug(f"No handler on channel {channel_name!r} for {call.method!r}")
            return NOT_IMPLEMENTED

        try:
            return channel.handler(call)
        except Exception as e:
            log.error(f"Handler on {channel_name!r} failed for {call.method!r}: {e}")
            return Failure("handler_error", str(e))

    def dispatch(self, envelope: dict[str, Any]) -> dict[str, Any]:
        """Decode a request envelope, route it and encode the response envelope."""
        request_id = envelope.get("id")
        try:
            channel_name = envelope.get("channel", DEFAULT_CHANNEL_NAME)
            if not isinstance(channel_name, str):
                raise ChannelError("Channel must be a string", "invalid_envelope")
            call = MethodCall.from_dict(envelope)
        except ChannelError as e:
            return encode_response(Failure(e.code, e.message, e.details), request_id)

        return encode_response(self.send(channel_name, call), request_id)
