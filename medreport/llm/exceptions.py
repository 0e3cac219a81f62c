class ModelClientError(Exception):
    """Base exception for model analysis errors."""


class ProviderUnavailable(ModelClientError):
    """Raised when the requested provider is not configured."""


class ExternalProcessingDisallowed(ModelClientError):
    """Raised when the PHI policy forbids sending the document to the provider."""


class ProviderCallFailed(ModelClientError):
    """Raised when the provider call fails or returns unusable structured output."""
