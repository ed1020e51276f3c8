from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from common.core.telemetry import trace_span
from common.repositories.base import BaseRepository
from packages.retrieval.models.database.document_chunk import DocumentChunkEntity
from packages.retrieval.models.domain.document_chunk import (
    ChunkMetadata,
    DocumentChunkModel,
)


class DocumentChunkRepository(BaseRepository[DocumentChunkEntity, DocumentChunkModel]):
    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(DocumentChunkEntity, DocumentChunkModel, db_session)

    def _entity_to_domain(self, entity: DocumentChunkEntity) -> DocumentChunkModel:
        return DocumentChunkModel(
            id=entity.chunk_id,
            text=entity.text,
            embedding=entity.embedding,
            metadata=ChunkMetadata(
                document_id=entity.document_id,
                chunk_index=entity.chunk_index,
                source=entity.source,
                session_id=entity.session_id,
            ),
        )

    def _create_model_to_entity(self, chunk: DocumentChunkModel) -> DocumentChunkEntity:
        return DocumentChunkEntity(
            chunk_id=chunk.id,
            document_id=chunk.metadata.document_id,
            session_id=chunk.metadata.session_id,
            chunk_index=chunk.metadata.chunk_index,
            source=chunk.metadata.source,
            text=chunk.text,
            embedding=list(chunk.embedding),
        )

    @trace_span
    async def get_for_document(
        self, document_id: str, session_id: str
    ) -> List[DocumentChunkModel]:
        """Get all chunks of a document within one session, in document order."""
        query = self._scoped_select(
            session_id, DocumentChunkEntity.document_id == document_id
        ).order_by(DocumentChunkEntity.chunk_index, DocumentChunkEntity.id)
        return await self._fetch_all(query)

    @trace_span
    async def delete_for_document(self, document_id: str, session_id: str) -> int:
        return await self._delete_scoped(
            session_id, DocumentChunkEntity.document_id == document_id
        )

    @trace_span
    async def delete_for_session(self, session_id: str) -> int:
        return await self._delete_scoped(session_id)
