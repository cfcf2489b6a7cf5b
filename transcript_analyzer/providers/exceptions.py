class ProviderError(Exception):
    """Raised when a provider call fails."""


class ProviderNetworkError(ProviderError):
    """Raised when the provider call fails due to network, auth or quota issues."""


class ProviderResponseError(ProviderError):
    """Raised when the provider returns a response that cannot be parsed."""


class ProviderTimeoutError(ProviderError):
    """Raised when a provider call exceeds its deadline."""
