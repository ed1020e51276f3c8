"""Domain models for document chunks."""

from typing import List
from pydantic import BaseModel, Field


class ChunkMetadata(BaseModel):
    """Where a chunk came from and which partition it belongs to."""

    document_id: str
    chunk_index: int = Field(ge=0)
    source: str
    session_id: str


class DocumentChunkModel(BaseModel):
    """A text segment of one document with its embedding."""

    id: str
    text: str = Field(min_length=1)
    embedding: List[float]
    metadata: ChunkMetadata

    model_config = {"frozen": True}

    @staticmethod
    def make_id(document_id: str, chunk_index: int) -> str:
        """Build the chunk id for a document position."""
        return f"{document_id}-{chunk_index}"
