from .document_chunk import DocumentChunkEntity
from .document_metadata import DocumentMetadataEntity

__all__ = [
    "DocumentChunkEntity",
    "DocumentMetadataEntity",
]
