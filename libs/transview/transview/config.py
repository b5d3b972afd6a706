"""Configuration management using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from transview.exceptions import ConfigurationError, UnsupportedLanguageError
from transview.languages import normalize_language_code

_ENV_FILES = (".env", "../.env", "../../.env")

_REPO_ROOT = Path(__file__).resolve().parents[3]


def _resolve_repo_path(value: str) -> str:
    raw = str(value or "").strip()
    if not raw:
        return raw
    p = Path(raw)
    if p.is_absolute():
        return str(p)
    return str((_REPO_ROOT / p).resolve())


class LLMConfig(BaseSettings):
    """Translation backend (LLM provider) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "openai"
    base_url: str | None = None
    api_key: str = ""
    model: str = "gpt-4o-mini"
    timeout: float = Field(default=120.0, gt=0)  # 单个请求超时（秒）
    temperature: float = Field(default=0.3, ge=0)
    max_tokens: int | None = Field(default=None, ge=1)


class PreviewConfig(BaseSettings):
    """Translation preview pipeline configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PREVIEW_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debounce_ms: int = Field(default=500, ge=0)
    target_language: str = "ja"
    chunk_queue_size: int = Field(
        default=64,
        ge=1,
        description="Max streamed fragments buffered between the backend and the display.",
    )

    @field_validator("target_language")
    @classmethod
    def _validate_language(cls, value: str) -> str:
        try:
            return normalize_language_code(value)
        except UnsupportedLanguageError as exc:
            raise ValueError(str(exc)) from exc

    @property
    def debounce_s(self) -> float:
        return float(self.debounce_ms) / 1000.0


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    file: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)
    levels: dict[str, str] = Field(default_factory=dict)
    quiet_http: bool = True


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    log_dir: str = "./logs"

    # Backend
    llm: LLMConfig = LLMConfig()

    # Pipeline
    preview: PreviewConfig = PreviewConfig()

    # Logging
    logging: LoggingSettings = LoggingSettings()

    def model_post_init(self, __context: Any) -> None:
        # Keep log paths stable when apps run from their own directory.
        self.log_dir = _resolve_repo_path(self.log_dir)

    def llm_config(self) -> dict[str, Any]:
        """Return an LLM config dict for the provider registry."""
        cfg = self.llm.model_dump()
        provider = str(cfg.get("provider") or "").strip().lower()
        if not provider:
            raise ConfigurationError("LLM backend is not configured (missing LLM_PROVIDER)")
        cfg["provider"] = provider

        # `base_url` is optional (provider-specific):
        # - openai/openai_compat: default to OpenAI public endpoint
        # - anthropic/claude: optional; defaults to Anthropic public endpoint
        base_url = str(cfg.get("base_url") or "").strip()
        if provider in {"openai", "openai_compat"}:
            cfg["base_url"] = base_url or "https://api.openai.com/v1"
        else:
            if base_url:
                cfg["base_url"] = base_url
            else:
                cfg.pop("base_url", None)
        return cfg
