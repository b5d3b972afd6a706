from __future__ import annotations

import logging

from transview.config import Settings
from transview.utils.logging_setup import setup_logging


def test_setup_logging_configures_tree_and_overrides(tmp_path) -> None:
    settings = Settings(
        _env_file=None,
        log_dir=str(tmp_path),
        logging={
            "level": "warning",
            "console": False,
            "file": "transview.log",
            "levels": {"transview.pipeline.scheduler": "DEBUG"},
        },
    )
    try:
        logger = setup_logging(settings, force=True)

        assert logger.level == logging.WARNING
        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert (tmp_path / "transview.log").exists()
        assert logging.getLogger("transview.pipeline.scheduler").level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

        # Second call without force keeps the existing configuration.
        assert setup_logging(Settings(_env_file=None, log_dir=str(tmp_path))) is logger
        assert logger.level == logging.WARNING
    finally:
        logger = logging.getLogger("transview")
        for handler in logger.handlers:
            handler.close()
        logger.handlers = []
        logger.propagate = True
        logging.getLogger("transview.pipeline.scheduler").setLevel(logging.NOTSET)
        setattr(logger, "_transview_configured", False)
