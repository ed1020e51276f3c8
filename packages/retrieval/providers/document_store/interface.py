from abc import ABC, abstractmethod
from typing import List, Optional

from packages.retrieval.models.domain.document_chunk import DocumentChunkModel
from packages.retrieval.models.domain.document_metadata import DocumentMetadataModel


class DocumentStoreInterface(ABC):
    """
    Session-partitioned store of document chunks and metadata.

    Every read and delete is scoped by session_id; data written under one
    session is never visible from another, even for the same document_id.
    Connectivity and write failures surface as StorageUnavailableError and
    are not retried here.
    """

    @abstractmethod
    async def insert_chunks(self, chunks: List[DocumentChunkModel]) -> None:
        """
        Append a batch of chunks. No duplicate check; the caller guarantees
        uniqueness.
        """
        pass

    @abstractmethod
    async def insert_metadata(self, metadata: DocumentMetadataModel) -> None:
        """Append one metadata record."""
        pass

    @abstractmethod
    async def find_chunks(
        self, document_id: str, session_id: str
    ) -> List[DocumentChunkModel]:
        """
        Get chunks matching both document_id and session_id.

        Returns:
            Chunks ordered by chunk_index, empty if none
        """
        pass

    @abstractmethod
    async def find_metadata(
        self, document_id: str, session_id: str
    ) -> Optional[DocumentMetadataModel]:
        """Get the metadata record for the pair, or None."""
        pass

    @abstractmethod
    async def delete_document(self, document_id: str, session_id: str) -> None:
        """
        Remove all chunks and the metadata record for the pair.

        Deleting a document that does not exist is not an error.
        """
        pass

    @abstractmethod
    async def delete_session(self, session_id: str) -> None:
        """Remove every chunk and metadata record under a session."""
        pass

    @abstractmethod
    async def delete_all(self) -> None:
        """Remove every chunk and metadata record of every session."""
        pass

    @abstractmethod
    async def list_documents(self, session_id: str) -> List[DocumentMetadataModel]:
        """
        List a session's documents.

        Returns:
            Metadata records ordered by processed_at, newest first
        """
        pass
