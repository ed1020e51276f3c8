"""Domain models for per-document metadata records."""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class DocumentMetadataModel(BaseModel):
    """One record per live (document_id, session_id) pair."""

    document_id: str
    session_id: str
    source: str
    processed_at: datetime
    chunk_count: int = Field(ge=1)

    model_config = ConfigDict(frozen=True, from_attributes=True)


class DocumentInfo(BaseModel):
    """Display summary of a processed document."""

    source: str
    processed_at: datetime
    chunk_count: int

    @classmethod
    def from_metadata(cls, metadata: DocumentMetadataModel) -> "DocumentInfo":
        return cls(
            source=metadata.source,
            processed_at=metadata.processed_at,
            chunk_count=metadata.chunk_count,
        )
