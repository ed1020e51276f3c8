"""Embedding provider for OpenAI-compatible ``/embeddings`` endpoints."""

from typing import Any, List, Optional
import httpx

from common.core.config import settings
from common.core.telemetry import get_logger, trace_span
from common.providers.embeddings.endpoints import make_endpoint
from common.providers.embeddings.exceptions import (
    AuthenticationFailedError,
    EmbeddingProviderError,
    InvalidResponseError,
    ModelNotFoundError,
    ModelNotLoadedError,
    RateLimitedError,
    ServiceUnavailableError,
)
from common.providers.embeddings.interface import EmbeddingProviderInterface

logger = get_logger(__name__)

NO_MODELS_LOADED_MARKER = "No models loaded"


class OpenAICompatibleEmbeddingProvider(EmbeddingProviderInterface):
    """Calls ``POST {base}/embeddings`` with bearer auth and a bounded timeout."""

    def __init__(
        self,
        model_name: Optional[str] = None,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_input_length: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the provider.

        Args:
            model_name: Model id sent with each request (default: settings)
            base_url: Server base URL, with or without ``/v1``
            api_key: Bearer token
            timeout: Request timeout in seconds (default: 10)
            max_input_length: Longer inputs are truncated (default: 8000)
            transport: Optional httpx transport, used by tests
        """
        self.model_name = model_name or settings.resolved_embedding_model
        self.base_url = base_url or settings.lm_base_url
        self.api_key = api_key or settings.lm_api_key
        self.timeout = timeout or settings.embedding_timeout_seconds
        self.max_input_length = (
            max_input_length or settings.max_embedding_input_length
        )
        self._transport = transport
        self._dimension: Optional[int] = None

    @property
    def endpoint(self) -> str:
        return make_endpoint(self.base_url, "/embeddings")

    @trace_span
    async def generate_embedding(self, text: str) -> List[float]:
        """Generate embedding for single text."""
        if not isinstance(text, str) or not text.strip():
            raise EmbeddingProviderError("Text cannot be empty for embedding")

        if len(text) > self.max_input_length:
            logger.warning(
                f"Text is too long for embedding ({len(text)} chars), truncating to {self.max_input_length}"
            )
            text = text[: self.max_input_length]

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json={"model": self.model_name, "input": text},
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as e:
            raise ServiceUnavailableError(
                f"Embedding request timed out after {self.timeout}s"
            ) from e
        except httpx.HTTPError as e:
            raise ServiceUnavailableError(f"Embedding request failed: {e}") from e

        logger.debug(f"Embedding response status: {response.status_code}")

        if response.is_error:
            raise self._error_for_response(response)

        try:
            data = response.json()
        except ValueError as e:
            raise InvalidResponseError(
                "Embedding service returned a non-JSON body",
                status_code=response.status_code,
            ) from e

        embedding = self._parse_embedding(data)
        self._dimension = len(embedding)
        logger.debug(f"Created embedding with {len(embedding)} dimensions")
        return embedding

    @trace_span
    async def warm_up(self) -> bool:
        """
        Load the model on the server if it is not listed yet.

        Checks ``GET /models``; when the model is missing, sends a one-token
        chat completion, which makes LM Studio-style servers load it. Failures
        are logged, never raised.
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                models_response = await client.get(
                    make_endpoint(self.base_url, "/models"),
                    headers=headers,
                    timeout=settings.health_check_timeout_seconds,
                )
                if models_response.is_success:
                    listed = models_response.json().get("data") or []
                    if any(item.get("id") == self.model_name for item in listed):
                        logger.info(f"Model {self.model_name} is already loaded")
                        return True

                logger.info(f"Pre-loading model {self.model_name}...")
                load_response = await client.post(
                    make_endpoint(self.base_url, "/chat/completions"),
                    headers=headers,
                    json={
                        "model": self.model_name,
                        "messages": [{"role": "user", "content": "preload"}],
                        "max_tokens": 1,
                        "temperature": 0,
                    },
                    timeout=settings.lm_timeout_ms / 1000,
                )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, AttributeError) as e:
            logger.warning(f"Model pre-loading failed: {e}")
            return False

        if load_response.is_error:
            logger.warning(f"Failed to pre-load model: {load_response.status_code}")
            return False

        logger.info(f"Model {self.model_name} pre-loaded")
        return True

    def _error_for_response(self, response: httpx.Response) -> EmbeddingProviderError:
        """Map a non-2xx response to a typed provider error."""
        status = response.status_code
        body = response.text
        logger.info(f"Embedding error response {status}: {body[:200]}")

        if status == 401:
            return AuthenticationFailedError(
                "Authentication failed for embedding service", status_code=status
            )
        if status == 404:
            if NO_MODELS_LOADED_MARKER in body:
                return ModelNotLoadedError(
                    "No models loaded on the embedding server", status_code=status
                )
            return ModelNotFoundError("Embedding model not found", status_code=status)
        if status == 429:
            return RateLimitedError(
                "Rate limit exceeded for embedding service", status_code=status
            )
        if status >= 500:
            return ServiceUnavailableError(
                "Embedding service is temporarily unavailable", status_code=status
            )
        return EmbeddingProviderError(
            f"Embedding API error: {status} {response.reason_phrase} - {body[:200]}",
            status_code=status,
        )

    @staticmethod
    def _parse_embedding(data: Any) -> List[float]:
        """Extract ``data[0].embedding`` or raise InvalidResponseError."""
        if not isinstance(data, dict):
            raise InvalidResponseError("Invalid response structure from embedding service")

        items = data.get("data")
        if not isinstance(items, list) or len(items) == 0 or not isinstance(items[0], dict):
            raise InvalidResponseError("Invalid response structure from embedding service")

        embedding = items[0].get("embedding")
        if not isinstance(embedding, list) or len(embedding) == 0:
            raise InvalidResponseError("Invalid embedding data received")

        if not all(
            isinstance(value, (int, float)) and not isinstance(value, bool)
            for value in embedding
        ):
            raise InvalidResponseError("Embedding contains non-numeric values")

        return [float(value) for value in embedding]

    def get_embedding_dimension(self) -> Optional[int]:
        """Vector length reported by the last successful call."""
        return self._dimension

    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model_name
