"""Method channels: call/result types, the host registrar and the stdio loop."""

from adb_plugin.channel.codec import (
    NOT_IMPLEMENTED,
    ChannelError,
    Failure,
    MethodCall,
    Result,
    Success,
    decode_response,
    encode_response,
    is_not_implemented,
)
from adb_plugin.channel.messenger import MethodChannel, PluginRegistrar

__all__ = [
    "NOT_IMPLEMENTED",
    "ChannelError",
    "Failure",
    "MethodCall",
    "MethodChannel",
    "PluginRegistrar",
    "Result",
    "Success",
    "decode_response",
    "encode_response",
    "is_not_implemented",
]
