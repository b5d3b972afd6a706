"""Pipeline services."""

from transview.services.translation_cache import TranslationCache

__all__ = ["TranslationCache"]
