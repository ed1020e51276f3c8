"""
Ingestion and context retrieval over the document store.

Ingestion chunks extracted text, embeds each chunk and persists the result
for one (document_id, session_id) pair. Retrieval embeds a question, ranks
that pair's chunks and joins the best ones into a context string for the
chat model.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, List, Optional

from common.core.config import settings
from common.core.exceptions import (
    DocumentNotFoundError,
    EmptyContextError,
    InvalidInputError,
    NoRelevantContextError,
)
from common.core.telemetry import get_logger, log_span_event, trace_span
from packages.retrieval.models.domain.document_chunk import (
    ChunkMetadata,
    DocumentChunkModel,
)
from packages.retrieval.models.domain.document_metadata import (
    DocumentInfo,
    DocumentMetadataModel,
)
from packages.retrieval.providers.document_store import (
    DocumentStoreInterface,
    get_document_store,
)
from packages.retrieval.services.chunking_service import (
    ChunkingService,
    get_chunking_service,
)
from packages.retrieval.services.embedding_service import (
    EmbeddingService,
    get_embedding_service,
)
from packages.retrieval.services.similarity_service import (
    SimilarityService,
    get_similarity_service,
)

logger = get_logger(__name__)

CONTEXT_SEPARATOR = "\n\n"


def build_prompt(context: str, query: str) -> str:
    """Render the user message sent to the chat model for a question."""
    return f"Context:\n{context}\n\nQuestion: {query}"


def _require_text(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{name} must be a non-empty string")
    return value


class RetrievalService:
    """Owns validation and orchestration; stores nothing between calls."""

    def __init__(
        self,
        document_store: Optional[DocumentStoreInterface] = None,
        embedding_service: Optional[EmbeddingService] = None,
        chunking_service: Optional[ChunkingService] = None,
        similarity_service: Optional[SimilarityService] = None,
    ):
        self.document_store = document_store or get_document_store()
        self.embedding_service = embedding_service or get_embedding_service()
        self.chunking_service = chunking_service or get_chunking_service()
        self.similarity_service = similarity_service or get_similarity_service()

    @trace_span
    async def ingest(
        self, document_id: str, text: str, source: str, session_id: str
    ) -> DocumentMetadataModel:
        """
        Chunk, embed and store a document for one session.

        Ingestion is all-or-nothing: if anything fails after validation, the
        pair's partial chunks and metadata are removed before the original
        error is re-raised.

        Args:
            document_id: Caller-chosen document identifier
            text: Raw extracted text
            source: Original filename or URL
            session_id: Partition the document is visible in

        Returns:
            The stored metadata record

        Raises:
            InvalidInputError: If an argument is missing, blank or too long
            EmptyAfterPreprocessingError: If the text has no content
            ChunkingFailedError: If no chunk could be produced
            StorageUnavailableError: If the store rejects a write
        """
        _require_text("document_id", document_id)
        _require_text("text", text)
        _require_text("source", source)
        _require_text("session_id", session_id)
        if len(text) > settings.max_text_length:
            raise InvalidInputError(
                f"Text is too large ({len(text)} characters, maximum {settings.max_text_length})"
            )

        logger.info(
            f"Processing document {document_id} ({source}) for session {session_id}"
        )
        if settings.preload_model_before_ingest:
            await self.embedding_service.warm_up()
        try:
            return await self._ingest(document_id, text, source, session_id)
        except BaseException:
            # Cancellation (e.g. a caller timeout) must not leave orphan chunks
            await asyncio.shield(self._discard_partial(document_id, session_id))
            raise

    async def _ingest(
        self, document_id: str, text: str, source: str, session_id: str
    ) -> DocumentMetadataModel:
        texts = self.chunking_service.split(self.chunking_service.preprocess(text))
        stats = self.chunking_service.chunk_stats(texts)
        logger.info(
            f"Created {stats['total_chunks']} chunks for document {document_id} "
            f"(avg size {stats['avg_chunk_size']:.0f})"
        )

        embeddings = await self.embedding_service.embed_many(texts)
        chunks = [
            DocumentChunkModel(
                id=DocumentChunkModel.make_id(document_id, index),
                text=chunk_text,
                embedding=result.vector,
                metadata=ChunkMetadata(
                    document_id=document_id,
                    chunk_index=index,
                    source=source,
                    session_id=session_id,
                ),
            )
            for index, (chunk_text, result) in enumerate(zip(texts, embeddings))
        ]
        await self.document_store.insert_chunks(chunks)

        metadata = DocumentMetadataModel(
            document_id=document_id,
            session_id=session_id,
            source=source,
            processed_at=datetime.now(timezone.utc),
            chunk_count=len(chunks),
        )
        await self.document_store.insert_metadata(metadata)

        log_span_event(
            "document_ingested",
            {
                "document_id": document_id,
                "session_id": session_id,
                "chunk_count": len(chunks),
                "fallback_count": sum(1 for r in embeddings if r.fallback_used),
            },
        )
        logger.info(
            f"Stored document {document_id} with {len(chunks)} chunks for session {session_id}"
        )
        return metadata

    async def _discard_partial(self, document_id: str, session_id: str) -> None:
        try:
            await self.document_store.delete_document(document_id, session_id)
        except Exception as cleanup_error:
            logger.error(
                f"Cleanup after failed ingestion of {document_id} in session {session_id} failed: {cleanup_error}"
            )

    @trace_span
    async def retrieve_context(
        self,
        document_id: str,
        query: str,
        session_id: str,
        top_k: Optional[int] = None,
    ) -> str:
        """
        Build the context string for a question about one document.

        Args:
            document_id: Document to search
            query: The user's question
            session_id: Partition the document was ingested under
            top_k: Number of chunks to include, 1 to 20 (default 5)

        Returns:
            Texts of the best-matching chunks, separated by blank lines

        Raises:
            InvalidInputError: If an argument is missing or top_k is out of range
            DocumentNotFoundError: If the document has no metadata or chunks
            NoRelevantContextError: If ranking selected nothing
            EmptyContextError: If the selected texts are blank
            StorageUnavailableError: If the store cannot be read
        """
        _require_text("document_id", document_id)
        _require_text("query", query)
        _require_text("session_id", session_id)
        if top_k is None:
            top_k = settings.default_top_k
        if (
            not isinstance(top_k, int)
            or isinstance(top_k, bool)
            or not 1 <= top_k <= settings.max_top_k
        ):
            raise InvalidInputError(
                f"top_k must be an integer between 1 and {settings.max_top_k}"
            )

        metadata = await self.document_store.find_metadata(document_id, session_id)
        if metadata is None:
            raise DocumentNotFoundError(document_id, session_id)

        chunks = await self.document_store.find_chunks(document_id, session_id)
        if not chunks:
            raise DocumentNotFoundError(document_id, session_id)

        query_vector = await self.embedding_service.embed(query)
        selected = self.similarity_service.top_k(
            query_vector, [(chunk.id, chunk.embedding) for chunk in chunks], top_k
        )
        if not selected:
            raise NoRelevantContextError(
                f"No relevant context found for document {document_id}"
            )

        context = CONTEXT_SEPARATOR.join(chunks[item.position].text for item in selected)
        if not context.strip():
            raise EmptyContextError(f"Context for document {document_id} is empty")

        logger.info(
            f"Selected {len(selected)}/{len(chunks)} chunks for document {document_id} "
            f"(top score {selected[0].score:.3f})"
        )
        return context

    async def cleanup_document(self, document_id: str, session_id: str) -> None:
        """Remove a document's chunks and metadata; absent documents are ignored."""
        await self.document_store.delete_document(document_id, session_id)

    async def cleanup_session(self, session_id: str) -> None:
        """Remove everything stored under a session."""
        await self.document_store.delete_session(session_id)

    async def cleanup_all(self) -> None:
        """Remove every document of every session, e.g. on shutdown."""
        await self.document_store.delete_all()

    async def list_documents(self, session_id: str) -> List[DocumentMetadataModel]:
        return await self.document_store.list_documents(session_id)

    async def get_document_info(
        self, document_id: str, session_id: str
    ) -> Optional[DocumentInfo]:
        metadata = await self.document_store.find_metadata(document_id, session_id)
        if metadata is None:
            return None
        return DocumentInfo.from_metadata(metadata)


def get_retrieval_service() -> RetrievalService:
    """Get retrieval service instance with the configured collaborators."""
    return RetrievalService()
