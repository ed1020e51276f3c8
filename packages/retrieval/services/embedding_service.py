"""Embedding with a fixed strategy and a synthetic fallback."""

from typing import List, Optional

from common.core.config import settings
from common.core.telemetry import get_logger, log_span_event, trace_span
from common.providers.embeddings.exceptions import EmbeddingProviderError
from common.providers.embeddings.factory import get_embedding_provider
from common.providers.embeddings.interface import EmbeddingProviderInterface
from common.providers.embeddings.provider_enum import EmbeddingProviderType
from common.providers.embeddings.word_frequency_provider import (
    WordFrequencyEmbeddingProvider,
)
from packages.retrieval.models.domain.embedding import (
    EmbeddingResult,
    EmbeddingStrategy,
)

logger = get_logger(__name__)


class EmbeddingService:
    """
    Turns text into vectors for one fixed strategy.

    The strategy is decided once, at construction, so every chunk and every
    query embedded by the same instance shares one vector space. Under
    PROVIDER, any provider failure is absorbed and the synthetic vector is
    returned instead; callers never see provider errors.
    """

    def __init__(
        self,
        strategy: EmbeddingStrategy,
        provider: Optional[EmbeddingProviderInterface] = None,
        fallback_provider: Optional[WordFrequencyEmbeddingProvider] = None,
    ):
        self.strategy = strategy
        self.fallback_provider = fallback_provider or WordFrequencyEmbeddingProvider()
        if strategy == EmbeddingStrategy.PROVIDER:
            self.provider = provider or get_embedding_provider(
                EmbeddingProviderType.OPENAI_COMPATIBLE
            )
        else:
            self.provider = None

    @trace_span
    async def embed_with_result(self, text: str) -> EmbeddingResult:
        """Embed text and report which strategy produced the vector."""
        if self.provider is None:
            return EmbeddingResult(
                vector=self.fallback_provider.vectorize(text),
                strategy=EmbeddingStrategy.SYNTHETIC,
            )

        try:
            vector = await self.provider.generate_embedding(text)
            return EmbeddingResult(vector=vector, strategy=EmbeddingStrategy.PROVIDER)
        except EmbeddingProviderError as e:
            error = e
        except Exception as e:
            # Treated like any other provider failure
            error = EmbeddingProviderError(f"Unexpected embedding failure: {e}")
            error.__cause__ = e

        logger.warning(
            f"Embedding failed ({type(error).__name__}: {error}), falling back to word-frequency vector"
        )
        log_span_event(
            "embedding_fallback",
            {"error_type": type(error).__name__, "status_code": error.status_code or 0},
        )
        return EmbeddingResult(
            vector=self.fallback_provider.vectorize(text),
            strategy=EmbeddingStrategy.SYNTHETIC,
            fallback_used=True,
            error=error,
        )

    async def warm_up(self) -> bool:
        """Ask the provider to load its model; a no-op under SYNTHETIC."""
        if self.provider is None:
            return True
        try:
            return await self.provider.warm_up()
        except Exception as e:
            logger.warning(f"Embedding provider warm-up failed: {e}")
            return False

    async def embed(self, text: str) -> List[float]:
        """Embed text, always returning a vector."""
        result = await self.embed_with_result(text)
        return result.vector

    async def embed_many(self, texts: List[str]) -> List[EmbeddingResult]:
        """Embed texts strictly one after another, preserving order."""
        results = []
        for text in texts:
            results.append(await self.embed_with_result(text))

        fallbacks = sum(1 for result in results if result.fallback_used)
        if fallbacks:
            logger.warning(
                f"{fallbacks}/{len(results)} embeddings used the word-frequency fallback"
            )
        return results


def get_embedding_service() -> EmbeddingService:
    """Get an embedding service using the strategy configured at startup."""
    return EmbeddingService(
        strategy=EmbeddingStrategy.from_disabled_flag(settings.disable_embeddings)
    )
