from typing import Dict, List, Optional, Tuple

from common.core.telemetry import get_logger
from packages.retrieval.models.domain.document_chunk import DocumentChunkModel
from packages.retrieval.models.domain.document_metadata import DocumentMetadataModel
from packages.retrieval.providers.document_store.interface import (
    DocumentStoreInterface,
)

logger = get_logger(__name__)

StoreKey = Tuple[str, str]  # (document_id, session_id)


class MemoryDocumentStore(DocumentStoreInterface):
    """
    In-process document store.

    State lives on the instance, so each store handle is isolated; share one
    instance explicitly to share data. Not durable across restarts.
    """

    def __init__(self):
        self._chunks: Dict[StoreKey, List[DocumentChunkModel]] = {}
        self._metadata: Dict[StoreKey, List[DocumentMetadataModel]] = {}
        logger.info("Memory document store initialized")

    async def insert_chunks(self, chunks: List[DocumentChunkModel]) -> None:
        for chunk in chunks:
            key = (chunk.metadata.document_id, chunk.metadata.session_id)
            self._chunks.setdefault(key, []).append(chunk)

    async def insert_metadata(self, metadata: DocumentMetadataModel) -> None:
        key = (metadata.document_id, metadata.session_id)
        self._metadata.setdefault(key, []).append(metadata)

    async def find_chunks(
        self, document_id: str, session_id: str
    ) -> List[DocumentChunkModel]:
        chunks = self._chunks.get((document_id, session_id), [])
        return sorted(chunks, key=lambda chunk: chunk.metadata.chunk_index)

    async def find_metadata(
        self, document_id: str, session_id: str
    ) -> Optional[DocumentMetadataModel]:
        records = self._metadata.get((document_id, session_id))
        return records[0] if records else None

    async def delete_document(self, document_id: str, session_id: str) -> None:
        key = (document_id, session_id)
        self._chunks.pop(key, None)
        self._metadata.pop(key, None)
        logger.debug(f"Deleted document {document_id} from session {session_id}")

    async def delete_session(self, session_id: str) -> None:
        for store in (self._chunks, self._metadata):
            for key in [key for key in store if key[1] == session_id]:
                del store[key]
        logger.debug(f"Deleted session {session_id}")

    async def delete_all(self) -> None:
        self._chunks.clear()
        self._metadata.clear()
        logger.info("Deleted all documents")

    async def list_documents(self, session_id: str) -> List[DocumentMetadataModel]:
        records = [
            record
            for (_, key_session), records in self._metadata.items()
            if key_session == session_id
            for record in records
        ]
        return sorted(records, key=lambda record: record.processed_at, reverse=True)
