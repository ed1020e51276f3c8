"""
Sentence-respecting chunking for extracted document text.

Runs in-process and keeps no state between calls, so one instance can serve
any number of concurrent ingestions.
"""

import re
from typing import Dict, List, Optional

from common.core.config import settings
from common.core.exceptions import ChunkingFailedError, EmptyAfterPreprocessingError
from common.core.telemetry import trace_span, get_logger

logger = get_logger(__name__)

SENTENCE_SEPARATOR = ". "
_WHITESPACE_RUN = re.compile(r"\s+")
_BLANK_LINES = re.compile(r"\n\s*\n")
_SENTENCE_TERMINATORS = re.compile(r"[.!?]+")


class ChunkingService:
    """Splits text into chunks of whole sentences, up to a soft size target."""

    def __init__(
        self, chunk_size: Optional[int] = None, chunk_overlap: Optional[int] = None
    ):
        self.chunk_size = chunk_size or settings.chunk_size
        # Carried for configuration parity; split() does not apply it.
        self.chunk_overlap = (
            settings.chunk_overlap if chunk_overlap is None else chunk_overlap
        )

    @staticmethod
    def preprocess(text: str) -> str:
        """Collapse whitespace runs and blank lines, then trim."""
        text = _WHITESPACE_RUN.sub(" ", text)
        text = _BLANK_LINES.sub("\n", text)
        return text.strip()

    @staticmethod
    def split_sentences(text: str) -> List[str]:
        """Split on runs of ``.``, ``!`` or ``?`` and drop empty candidates."""
        sentences = []
        for candidate in _SENTENCE_TERMINATORS.split(text):
            sentence = candidate.strip()
            if sentence:
                sentences.append(sentence)
        return sentences

    @trace_span
    def split(self, text: str) -> List[str]:
        """
        Chunk text by greedily packing sentences joined with ". ".

        A sentence that would push the running chunk past chunk_size starts a
        new chunk. A single sentence longer than chunk_size is emitted whole.

        Args:
            text: Raw extracted document text

        Returns:
            Non-empty chunk strings, in document order

        Raises:
            EmptyAfterPreprocessingError: If nothing is left after preprocessing
            ChunkingFailedError: If no chunk could be produced
        """
        cleaned = self.preprocess(text)
        if not cleaned:
            raise EmptyAfterPreprocessingError(
                "Text preprocessing resulted in empty content"
            )

        chunks: List[str] = []
        current_chunk = ""

        for sentence in self.split_sentences(cleaned):
            if current_chunk:
                potential_chunk = current_chunk + SENTENCE_SEPARATOR + sentence
            else:
                potential_chunk = sentence

            if len(potential_chunk) <= self.chunk_size:
                current_chunk = potential_chunk
            else:
                if current_chunk:
                    chunks.append(current_chunk)
                current_chunk = sentence

        # Don't forget the last chunk
        if current_chunk:
            chunks.append(current_chunk)

        if not chunks:
            raise ChunkingFailedError("Failed to split text into chunks")

        logger.info(f"Sentence chunking produced {len(chunks)} chunks")
        return chunks

    @staticmethod
    def chunk_stats(chunks: List[str]) -> Dict[str, float]:
        """Size statistics used in ingestion logs."""
        if not chunks:
            return {
                "total_chunks": 0,
                "avg_chunk_size": 0,
                "min_chunk_size": 0,
                "max_chunk_size": 0,
            }

        sizes = [len(chunk) for chunk in chunks]
        return {
            "total_chunks": len(chunks),
            "avg_chunk_size": sum(sizes) / len(sizes),
            "min_chunk_size": min(sizes),
            "max_chunk_size": max(sizes),
        }


def get_chunking_service() -> ChunkingService:
    """Get chunking service instance."""
    return ChunkingService()
