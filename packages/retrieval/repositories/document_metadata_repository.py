from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from common.core.telemetry import trace_span
from common.repositories.base import BaseRepository
from packages.retrieval.models.database.document_metadata import DocumentMetadataEntity
from packages.retrieval.models.domain.document_metadata import DocumentMetadataModel


class DocumentMetadataRepository(
    BaseRepository[DocumentMetadataEntity, DocumentMetadataModel]
):
    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(DocumentMetadataEntity, DocumentMetadataModel, db_session)

    @trace_span
    async def get_for_document(
        self, document_id: str, session_id: str
    ) -> Optional[DocumentMetadataModel]:
        """Get the metadata record of a document within one session."""
        query = self._scoped_select(
            session_id, DocumentMetadataEntity.document_id == document_id
        ).order_by(DocumentMetadataEntity.id)
        records = await self._fetch_all(query.limit(1))
        return records[0] if records else None

    @trace_span
    async def list_for_session(self, session_id: str) -> List[DocumentMetadataModel]:
        """List a session's documents, most recently processed first."""
        query = self._scoped_select(session_id).order_by(
            DocumentMetadataEntity.processed_at.desc(),
            DocumentMetadataEntity.id.desc(),
        )
        return await self._fetch_all(query)

    @trace_span
    async def delete_for_document(self, document_id: str, session_id: str) -> int:
        return await self._delete_scoped(
            session_id, DocumentMetadataEntity.document_id == document_id
        )

    @trace_span
    async def delete_for_session(self, session_id: str) -> int:
        return await self._delete_scoped(session_id)
