"""Embedding provider types."""


class EmbeddingProviderType:
    """Supported embedding provider types."""

    OPENAI_COMPATIBLE = "openai_compatible"
    WORD_FREQUENCY = "word_frequency"
