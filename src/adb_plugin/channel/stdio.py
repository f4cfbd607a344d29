"""Newline-delimited JSON request loop."""

from __future__ import annotations

import json
from typing import IO, TYPE_CHECKING, Any

from adb_plugin.channel.codec import Failure, encode_response
from adb_plugin.debug_log import log
from adb_plugin.limits import MAX_REQUEST_LINE_LENGTH

if TYPE_CHECKING:
    from adb_plugin.channel.messenger import PluginRegistrar


def _invalid(message: str) -> dict[str, Any]:
    return encode_response(Failure("invalid_envelope", message))


def handle_line(registrar: PluginRegistrar, line: str) -> dict[str, Any]:
    """Answer one request line."""
    if len(line.encode("utf-8", errors="replace")) > MAX_REQUEST_LINE_LENGTH:
        return _invalid(f"Request exceeds {MAX_REQUEST_LINE_LENGTH} bytes")
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        log.warning(f"Failed to parse request: {e}")
        return _invalid(f"Invalid JSON: {e.msg}")
    except RecursionError:
        log.warning("Failed to parse request: nesting too deep")
        return _invalid("Invalid JSON: nesting too deep")
    if not isinstance(data, dict):
        return _invalid("Request must be a JSON object")
    return registrar.dispatch(data)


def serve(registrar: PluginRegistrar, reader: IO[str], writer: IO[str]) -> int:
    """Answer requests from ``reader`` until EOF.

    Returns:
        Number of requests handled (blank lines are not counted)
    """
    handled = 0
    for line in reader:
        if not line.strip():
            continue
        response = handle_line(registrar, line)
        writer.write(json.dumps(response) + "\n")
        writer.flush()
        handled += 1
    log.info(f"Input closed after {handled} request(s)")
    return handled
