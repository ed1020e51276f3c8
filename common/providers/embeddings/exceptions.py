"""Typed failures of the remote embedding provider.

These never reach retrieval callers: the embedding service converts every one
of them into a synthetic fallback vector.
"""

from typing import Optional

from common.core.exceptions import AppException


class EmbeddingProviderError(AppException):
    """Base class for embedding provider failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class AuthenticationFailedError(EmbeddingProviderError):
    """401 from the embedding endpoint."""

    pass


class ModelNotLoadedError(EmbeddingProviderError):
    """404 whose body reports that the server has no model loaded."""

    pass


class ModelNotFoundError(EmbeddingProviderError):
    """404 for an unknown model."""

    pass


class RateLimitedError(EmbeddingProviderError):
    """429 from the embedding endpoint."""

    pass


class ServiceUnavailableError(EmbeddingProviderError):
    """5xx, network failure or timeout."""

    pass


class InvalidResponseError(EmbeddingProviderError):
    """Body is not JSON or lacks data[0].embedding."""

    pass
