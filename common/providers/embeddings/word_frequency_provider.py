"""Synthetic embeddings from word frequencies.

This is a bag-of-words positional hash, not a semantic embedding: index ``i``
holds the relative frequency of the ``i``-th distinct word of the text, so two
vectors only line up when the texts introduce shared words in the same order.
Good enough to rank a document's chunks against queries that reuse its
vocabulary; a known quality limitation rather than a bug.
"""

from collections import Counter
from typing import List, Optional

from common.core.config import settings
from common.providers.embeddings.interface import EmbeddingProviderInterface

MODEL_NAME = "word-frequency"


class WordFrequencyEmbeddingProvider(EmbeddingProviderInterface):
    """Deterministic, I/O-free embedding provider."""

    def __init__(self, dimension: Optional[int] = None):
        self.dimension = dimension or settings.synthetic_embedding_dimension

    def vectorize(self, text: str) -> List[float]:
        """
        Project the first ``dimension`` distinct words onto a fixed vector.

        Words are lower-cased and split on whitespace; Counter keeps
        first-seen order, which decides each word's index.
        """
        words = text.lower().split()
        embedding = [0.0] * self.dimension
        if not words:
            return embedding

        total = len(words)
        for index, count in enumerate(Counter(words).values()):
            if index >= self.dimension:
                break
            embedding[index] = count / total
        return embedding

    async def generate_embedding(self, text: str) -> List[float]:
        """Generate embedding for single text."""
        return self.vectorize(text)

    def get_embedding_dimension(self) -> Optional[int]:
        return self.dimension

    def get_model_name(self) -> str:
        return MODEL_NAME
