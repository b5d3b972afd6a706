"""Canonical error codes surfaced to the display."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    UNSUPPORTED_LANGUAGE = "UNSUPPORTED_LANGUAGE"

    BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"
    BACKEND_FAILED = "BACKEND_FAILED"
    BACKEND_TIMEOUT = "BACKEND_TIMEOUT"
