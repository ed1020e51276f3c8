"""Domain models for similarity ranking."""

from dataclasses import dataclass
from typing import Sequence, Tuple

# (candidate id, vector)
Candidate = Tuple[str, Sequence[float]]


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate id with its cosine score and original position."""

    id: str
    score: float
    position: int
