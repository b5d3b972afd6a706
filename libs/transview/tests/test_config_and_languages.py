from __future__ import annotations

import pytest
from pydantic import ValidationError

from transview.config import Settings
from transview.exceptions import ConfigurationError, UnsupportedLanguageError
from transview.languages import (
    LANGUAGE_LABELS,
    LANGUAGE_NAMES,
    is_supported_language,
    language_name,
    normalize_language_code,
)


def test_supported_language_set() -> None:
    assert list(LANGUAGE_NAMES) == [
        "en", "ja", "zh-Hans", "zh-Hant", "ko", "de", "fr", "es", "it", "pt-BR", "ru",
    ]
    assert set(LANGUAGE_LABELS) == set(LANGUAGE_NAMES)


def test_normalize_language_code_is_case_insensitive() -> None:
    assert normalize_language_code("ZH-hant") == "zh-Hant"
    assert normalize_language_code(" pt-br ") == "pt-BR"
    assert is_supported_language("JA")
    assert not is_supported_language("tlh")
    with pytest.raises(UnsupportedLanguageError):
        normalize_language_code("tlh")


def test_language_name() -> None:
    assert language_name("zh-hans") == "Simplified Chinese"
    assert language_name("tlh") == "tlh"


def test_settings_defaults(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    settings = Settings(_env_file=None, log_dir=str(tmp_path / "logs"))

    assert settings.preview.debounce_ms == 500
    assert settings.preview.debounce_s == pytest.approx(0.5)
    assert settings.preview.target_language == "ja"
    assert settings.preview.chunk_queue_size == 64
    assert settings.log_dir == str(tmp_path / "logs")


def test_preview_target_language_is_validated(tmp_path) -> None:
    settings = Settings(_env_file=None, log_dir=str(tmp_path), preview={"target_language": "PT-br"})
    assert settings.preview.target_language == "pt-BR"

    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_dir=str(tmp_path), preview={"target_language": "xx"})


def test_llm_config_defaults_base_url(tmp_path) -> None:
    settings = Settings(_env_file=None, log_dir=str(tmp_path), llm={"provider": "OpenAI", "api_key": "k"})
    cfg = settings.llm_config()
    assert cfg["provider"] == "openai"
    assert cfg["base_url"] == "https://api.openai.com/v1"

    settings = Settings(_env_file=None, log_dir=str(tmp_path), llm={"provider": "anthropic", "api_key": "k"})
    assert "base_url" not in settings.llm_config()


def test_llm_config_requires_provider(tmp_path) -> None:
    settings = Settings(_env_file=None, log_dir=str(tmp_path), llm={"provider": " "})
    with pytest.raises(ConfigurationError):
        settings.llm_config()
