from __future__ import annotations

import pytest

from transview.config import Settings
from transview_fakes import ScriptedBackend


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        log_dir=str(tmp_path / "logs"),
        preview={"debounce_ms": 10},
    )


@pytest.fixture()
def backend() -> ScriptedBackend:
    return ScriptedBackend()
