"""Shared utilities for LLM providers."""

from __future__ import annotations

import logging

_UNAVAILABLE_STATUS = frozenset({401, 403, 404})


def is_unavailable_status(status_code: int) -> bool:
    """Status codes meaning the configured model/credentials cannot be used at all."""
    return int(status_code) in _UNAVAILABLE_STATUS


def log_backend_call(
    logger: logging.Logger,
    *,
    provider: str,
    model: str,
    latency_ms: int,
    chars: int,
    fragments: int,
) -> None:
    logger.info(
        "backend call (provider=%s, model=%s, latency_ms=%s, chars=%s, fragments=%s)",
        provider,
        model,
        int(latency_ms),
        int(chars),
        int(fragments),
    )
