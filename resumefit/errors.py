from __future__ import annotations


class ResumeFitError(Exception):
    """Base class for every error the engine raises on purpose."""


class ValidationError(ResumeFitError):
    """Caller input is unusable (empty resume or job description). Never retried."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ProviderError(ResumeFitError):
    """The embedding boundary failed: timeout, unavailable model or malformed output."""


class ConfigurationError(ResumeFitError):
    """Startup assets or settings are missing or malformed (dictionary, scoring policy)."""
