"""Numeric limits - no circular dependencies."""

from __future__ import annotations

MAX_LOG_LINES = 2000
MAX_LOG_MESSAGE_LENGTH = 4096
MAX_REQUEST_LINE_LENGTH = 1024 * 1024
