"""Factory for creating embedding provider instances."""

from typing import Optional

from common.providers.embeddings.interface import EmbeddingProviderInterface
from common.providers.embeddings.openai_compatible_provider import (
    OpenAICompatibleEmbeddingProvider,
)
from common.providers.embeddings.word_frequency_provider import (
    WordFrequencyEmbeddingProvider,
)
from common.providers.embeddings.provider_enum import EmbeddingProviderType
from common.core.config import settings


def get_embedding_provider(
    provider_type: Optional[str] = None,
    model_name: Optional[str] = None,
) -> EmbeddingProviderInterface:
    """
    Get embedding provider instance.

    Args:
        provider_type: Type of provider ('openai_compatible', 'word_frequency').
                      If None, derived from settings.disable_embeddings.
        model_name: Specific model to use. If None, uses the configured model.

    Returns:
        An instance of the requested embedding provider.

    Raises:
        ValueError: If provider type is unknown.
    """
    if provider_type is None:
        provider_type = (
            EmbeddingProviderType.WORD_FREQUENCY
            if settings.disable_embeddings
            else EmbeddingProviderType.OPENAI_COMPATIBLE
        )

    provider_type = provider_type.lower()

    match provider_type:
        case EmbeddingProviderType.OPENAI_COMPATIBLE:
            return OpenAICompatibleEmbeddingProvider(model_name=model_name)
        case EmbeddingProviderType.WORD_FREQUENCY:
            return WordFrequencyEmbeddingProvider()
        case _:
            raise ValueError(f"Unknown embedding provider type: {provider_type}")
