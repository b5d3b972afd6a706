"""TransView exception hierarchy."""

from __future__ import annotations

from transview.error_codes import ErrorCode


class TransViewError(Exception):
    """Base error for TransView."""


class ConfigurationError(TransViewError):
    """Raised when configuration or inputs are invalid."""


class UnsupportedLanguageError(TransViewError):
    """Raised when a target language code is not in the supported set."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Unsupported language code: {code!r}")
        self.code = code
        self.error_code = ErrorCode.UNSUPPORTED_LANGUAGE


class ProviderError(TransViewError):
    """Raised when an external provider call fails."""

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message
        self.error_code = error_code


class BackendUnavailableError(ProviderError):
    """No model/connection could be obtained; the cached handle must be dropped."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(provider, message, error_code=ErrorCode.BACKEND_UNAVAILABLE)


class BackendCallFailedError(ProviderError):
    """A backend call failed (network or remote error)."""

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        error_code: ErrorCode | str | None = ErrorCode.BACKEND_FAILED,
    ) -> None:
        super().__init__(provider, message, error_code=error_code)
