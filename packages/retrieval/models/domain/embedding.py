"""Domain models for embedding results."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from common.providers.embeddings.exceptions import EmbeddingProviderError


class EmbeddingStrategy(str, Enum):
    """Which strategy a service instance embeds with."""

    PROVIDER = "provider"
    """Remote embedding endpoint, falls back to SYNTHETIC on any failure."""

    SYNTHETIC = "synthetic"
    """Word-frequency vector, no I/O."""

    @classmethod
    def from_disabled_flag(cls, embeddings_disabled: bool) -> "EmbeddingStrategy":
        return cls.SYNTHETIC if embeddings_disabled else cls.PROVIDER


@dataclass(frozen=True)
class EmbeddingResult:
    """A vector tagged with the strategy that actually produced it."""

    vector: List[float]
    strategy: EmbeddingStrategy
    fallback_used: bool = False
    error: Optional[EmbeddingProviderError] = None

    @property
    def dimension(self) -> int:
        return len(self.vector)
