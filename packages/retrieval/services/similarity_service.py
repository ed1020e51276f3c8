"""Cosine similarity ranking of stored chunk vectors."""

import math
from typing import List, Sequence

from common.core.exceptions import DimensionMismatchError
from common.core.telemetry import get_logger, trace_span
from packages.retrieval.models.domain.ranking import Candidate, ScoredCandidate

logger = get_logger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine of the angle between two vectors.

    Raises:
        DimensionMismatchError: If the vectors differ in length

    Returns 0.0 when either vector has zero norm or the result is not finite.
    """
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))

    dot_product = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot_product += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    similarity = dot_product / (math.sqrt(norm_a) * math.sqrt(norm_b))
    if not math.isfinite(similarity):
        return 0.0
    # Clamp float drift so identical vectors never exceed 1
    return max(-1.0, min(1.0, similarity))


class SimilarityService:
    """Scores candidates against a query vector."""

    @trace_span
    def rank(
        self, query: Sequence[float], candidates: Sequence[Candidate]
    ) -> List[ScoredCandidate]:
        """
        Score every candidate and sort descending.

        Equal scores keep their original order. A candidate whose score cannot
        be computed (mismatched or corrupt vector) scores 0 instead of aborting
        the ranking.
        """
        scored = []
        for position, (candidate_id, vector) in enumerate(candidates):
            try:
                score = cosine_similarity(query, vector)
            except Exception as e:
                logger.error(
                    f"Error calculating similarity for candidate {candidate_id}: {e}"
                )
                score = 0.0
            scored.append(
                ScoredCandidate(id=candidate_id, score=score, position=position)
            )

        # sorted() is stable, so ties stay in insertion order
        return sorted(scored, key=lambda item: item.score, reverse=True)

    def top_k(
        self, query: Sequence[float], candidates: Sequence[Candidate], k: int
    ) -> List[ScoredCandidate]:
        """Return the k best-scoring candidates."""
        return self.rank(query, candidates)[:k]


def get_similarity_service() -> SimilarityService:
    """Get similarity service instance."""
    return SimilarityService()
