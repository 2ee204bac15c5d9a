"""
Provider exceptions for IntentBridge.

Providers never raise from their completion methods; these cover setup only.
"""


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class ProviderConfigurationError(ProviderError):
    """No provider can be built from the supplied configuration."""

    pass
