"""Logging initialization helpers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from transview.config import LoggingSettings, Settings

ROOT_LOGGER = "transview"

# HTTP client libraries log every request at INFO; a keystroke-driven preview
# would flood the console with them.
_CHATTY_LOGGERS = ("httpx", "httpcore", "anthropic")


def _level(name: str | None, default: int = logging.INFO) -> int:
    value = getattr(logging, str(name or "").strip().upper(), None)
    return value if isinstance(value, int) else default


def _handlers(cfg: LoggingSettings, log_dir: str, level: int) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=str(cfg.format), datefmt=str(cfg.datefmt))
    handlers: list[logging.Handler] = []
    if cfg.console:
        handlers.append(logging.StreamHandler())
    if cfg.file:
        file_path = Path(str(cfg.file))
        if not file_path.is_absolute():
            file_path = Path(log_dir) / file_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                file_path,
                maxBytes=int(cfg.max_bytes),
                backupCount=int(cfg.backup_count),
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(settings: Settings, *, force: bool = False) -> logging.Logger:
    """Configure the `transview` logger tree once per process.

    Other framework loggers (e.g. uvicorn) are left alone, except that HTTP
    client request logs are raised to WARNING when `LOG_QUIET_HTTP` is set.
    Per-logger overrides come from `LOG_LEVELS`, e.g.
    `{"transview.pipeline.scheduler": "DEBUG"}`.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if getattr(logger, "_transview_configured", False) and not force:
        return logger

    cfg = settings.logging
    level = _level(cfg.level)
    logger.setLevel(level)
    logger.handlers = _handlers(cfg, settings.log_dir, level)
    logger.propagate = False

    for name, override in (cfg.levels or {}).items():
        logging.getLogger(name).setLevel(_level(override, level))
    if cfg.quiet_http:
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    setattr(logger, "_transview_configured", True)
    return logger
