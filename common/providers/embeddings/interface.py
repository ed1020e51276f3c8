from abc import ABC, abstractmethod
from typing import List, Optional


class EmbeddingProviderInterface(ABC):
    """Interface for embedding providers."""

    @abstractmethod
    async def generate_embedding(self, text: str) -> List[float]:
        """
        Generate an embedding for a single text.

        Args:
            text: The text to embed

        Returns:
            The embedding vector

        Raises:
            EmbeddingProviderError: If the provider cannot produce a vector
        """
        pass

    async def generate_embeddings(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for multiple texts, one request at a time.

        Args:
            texts: Texts to embed, in order

        Returns:
            One vector per text, in the same order
        """
        embeddings = []
        for text in texts:
            embeddings.append(await self.generate_embedding(text))
        return embeddings

    async def warm_up(self) -> bool:
        """
        Make sure the model is loaded before a batch of requests.

        Providers without a remote model have nothing to load.

        Returns:
            True if the model is ready, False if loading could not be confirmed
        """
        return True

    @abstractmethod
    def get_embedding_dimension(self) -> Optional[int]:
        """Get the vector length, or None if not known before the first call."""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Get the model name."""
        pass
