"""Exception hierarchy shared across the pipeline."""

from __future__ import annotations


class FilingAlphaError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(FilingAlphaError, ValueError):
    """Invalid configuration or input ordering, rejected before any work starts."""


class ProviderError(FilingAlphaError, RuntimeError):
    """An external collaborator (embedding, price, score) failed.

    Attributes
    ----------
    provider : str
        Name of the collaborator that failed, e.g. ``"price"``.
    """

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider} provider failed: {message}")
        self.provider = provider
