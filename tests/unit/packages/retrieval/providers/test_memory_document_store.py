"""Tests for the in-memory document store and the store factory."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from common.core.constants import DocumentStoreProvider
from packages.retrieval.providers.document_store import (
    MemoryDocumentStore,
    SqlDocumentStore,
    get_document_store,
)


class TestMemoryDocumentStore:
    @pytest.fixture
    def store(self):
        return MemoryDocumentStore()

    @pytest.mark.asyncio
    async def test_find_chunks_orders_by_index(self, store, chunk_factory):
        await store.insert_chunks([chunk_factory("doc-1", i) for i in (1, 2, 0)])

        chunks = await store.find_chunks("doc-1", "session-a")

        assert [chunk.metadata.chunk_index for chunk in chunks] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_session_isolation(self, store, chunk_factory, metadata_factory):
        await store.insert_chunks([chunk_factory("doc-1", 0, session_id="A")])
        await store.insert_metadata(metadata_factory("doc-1", session_id="A"))

        assert await store.find_chunks("doc-1", "B") == []
        assert await store.find_metadata("doc-1", "B") is None

    @pytest.mark.asyncio
    async def test_delete_document_is_idempotent(
        self, store, chunk_factory, metadata_factory
    ):
        await store.insert_chunks([chunk_factory("doc-1", 0)])
        await store.insert_metadata(metadata_factory("doc-1"))

        await store.delete_document("doc-1", "session-a")
        await store.delete_document("doc-1", "session-a")
        await store.delete_document("never-stored", "session-a")

        assert await store.find_chunks("doc-1", "session-a") == []
        assert await store.find_metadata("doc-1", "session-a") is None

    @pytest.mark.asyncio
    async def test_delete_session(self, store, chunk_factory, metadata_factory):
        for session_id in ("A", "B"):
            await store.insert_chunks([chunk_factory("doc-1", 0, session_id=session_id)])
            await store.insert_metadata(metadata_factory("doc-1", session_id=session_id))

        await store.delete_session("A")
        await store.delete_session("A")

        assert await store.list_documents("A") == []
        assert await store.find_chunks("doc-1", "A") == []
        assert len(await store.list_documents("B")) == 1

    @pytest.mark.asyncio
    async def test_list_documents_newest_first(self, store, metadata_factory):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        await store.insert_metadata(metadata_factory("a", processed_at=base))
        await store.insert_metadata(
            metadata_factory("c", processed_at=base + timedelta(days=2))
        )
        await store.insert_metadata(
            metadata_factory("b", processed_at=base + timedelta(days=1))
        )

        documents = await store.list_documents("session-a")

        assert [doc.document_id for doc in documents] == ["c", "b", "a"]

    @pytest.mark.asyncio
    async def test_instances_do_not_share_state(self, chunk_factory):
        first = MemoryDocumentStore()
        second = MemoryDocumentStore()

        await first.insert_chunks([chunk_factory("doc-1", 0)])

        assert await second.find_chunks("doc-1", "session-a") == []


    @pytest.mark.asyncio
    async def test_delete_all_clears_every_session(
        self, store, chunk_factory, metadata_factory
    ):
        for session_id in ("A", "B"):
            await store.insert_chunks([chunk_factory("doc-1", 0, session_id=session_id)])
            await store.insert_metadata(metadata_factory("doc-1", session_id=session_id))

        await store.delete_all()
        await store.delete_all()

        for session_id in ("A", "B"):
            assert await store.find_chunks("doc-1", session_id) == []
            assert await store.list_documents(session_id) == []

    @pytest.mark.asyncio
    async def test_returned_metadata_cannot_alter_store(self, store, metadata_factory):
        await store.insert_metadata(metadata_factory("doc-1", chunk_count=3))
        record = await store.find_metadata("doc-1", "session-a")
        listed = (await store.list_documents("session-a"))[0]

        with pytest.raises(ValidationError):
            record.chunk_count = 99
        with pytest.raises(ValidationError):
            listed.source = "tampered.pdf"

        stored = await store.find_metadata("doc-1", "session-a")
        assert stored.chunk_count == 3
        assert stored.source == "report.pdf"

class TestGetDocumentStore:
    def test_memory(self):
        assert isinstance(
            get_document_store(DocumentStoreProvider.MEMORY), MemoryDocumentStore
        )

    def test_sql_by_string(self):
        assert isinstance(get_document_store("sql"), SqlDocumentStore)

    def test_default_from_settings(self):
        with patch(
            "packages.retrieval.providers.document_store.factory.settings"
        ) as mock_settings:
            mock_settings.document_store_provider = DocumentStoreProvider.MEMORY
            store = get_document_store()

        assert isinstance(store, MemoryDocumentStore)

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            get_document_store("mongodb")
