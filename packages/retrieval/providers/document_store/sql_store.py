"""Document store backed by SQLAlchemy async repositories."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from common.core.exceptions import StorageUnavailableError
from common.core.telemetry import get_logger, trace_span
from common.db.scoped import transaction
from packages.retrieval.models.domain.document_chunk import DocumentChunkModel
from packages.retrieval.models.domain.document_metadata import DocumentMetadataModel
from packages.retrieval.providers.document_store.interface import (
    DocumentStoreInterface,
)
from packages.retrieval.repositories.document_chunk_repository import (
    DocumentChunkRepository,
)
from packages.retrieval.repositories.document_metadata_repository import (
    DocumentMetadataRepository,
)

logger = get_logger(__name__)


@asynccontextmanager
async def _storage_errors(operation: str) -> AsyncGenerator[None, None]:
    """Re-raise database and socket failures as StorageUnavailableError."""
    try:
        yield
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Document store {operation} failed: {e}")
        raise StorageUnavailableError(f"Document store {operation} failed") from e


class SqlDocumentStore(DocumentStoreInterface):
    """Chunks and metadata in two tables, partitioned by session_id columns."""

    def __init__(
        self,
        chunk_repo: Optional[DocumentChunkRepository] = None,
        metadata_repo: Optional[DocumentMetadataRepository] = None,
    ):
        self.chunk_repo = chunk_repo or DocumentChunkRepository()
        self.metadata_repo = metadata_repo or DocumentMetadataRepository()

    @trace_span
    async def insert_chunks(self, chunks: List[DocumentChunkModel]) -> None:
        async with _storage_errors("insert_chunks"):
            await self.chunk_repo.bulk_create_from_models(chunks)

    @trace_span
    async def insert_metadata(self, metadata: DocumentMetadataModel) -> None:
        async with _storage_errors("insert_metadata"):
            await self.metadata_repo.create(metadata)

    @trace_span
    async def find_chunks(
        self, document_id: str, session_id: str
    ) -> List[DocumentChunkModel]:
        async with _storage_errors("find_chunks"):
            return await self.chunk_repo.get_for_document(document_id, session_id)

    @trace_span
    async def find_metadata(
        self, document_id: str, session_id: str
    ) -> Optional[DocumentMetadataModel]:
        async with _storage_errors("find_metadata"):
            return await self.metadata_repo.get_for_document(document_id, session_id)

    @trace_span
    async def delete_document(self, document_id: str, session_id: str) -> None:
        async with _storage_errors("delete_document"):
            async with transaction():
                chunks_deleted = await self.chunk_repo.delete_for_document(
                    document_id, session_id
                )
                await self.metadata_repo.delete_for_document(document_id, session_id)
        logger.info(
            f"Deleted document {document_id} ({chunks_deleted} chunks) from session {session_id}"
        )

    @trace_span
    async def delete_session(self, session_id: str) -> None:
        async with _storage_errors("delete_session"):
            async with transaction():
                chunks_deleted = await self.chunk_repo.delete_for_session(session_id)
                documents_deleted = await self.metadata_repo.delete_for_session(
                    session_id
                )
        logger.info(
            f"Deleted {documents_deleted} documents ({chunks_deleted} chunks) from session {session_id}"
        )

    @trace_span
    async def delete_all(self) -> None:
        async with _storage_errors("delete_all"):
            async with transaction():
                chunks_deleted = await self.chunk_repo.delete_all()
                documents_deleted = await self.metadata_repo.delete_all()
        logger.info(
            f"Deleted all documents: {documents_deleted} documents, {chunks_deleted} chunks"
        )

    @trace_span
    async def list_documents(self, session_id: str) -> List[DocumentMetadataModel]:
        async with _storage_errors("list_documents"):
            return await self.metadata_repo.list_for_session(session_id)
