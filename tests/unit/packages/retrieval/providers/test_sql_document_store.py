"""Tests for the SQL-backed document store."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from common.core.exceptions import StorageUnavailableError
from packages.retrieval.providers.document_store.sql_store import SqlDocumentStore


class TestSqlDocumentStore:
    @pytest.fixture
    def store(self):
        """Store using lazy sessions against the patched test database."""
        return SqlDocumentStore()

    @pytest.mark.asyncio
    async def test_insert_and_find(self, store, chunk_factory, metadata_factory):
        await store.insert_chunks([chunk_factory("doc-1", i) for i in range(3)])
        await store.insert_metadata(metadata_factory("doc-1", chunk_count=3))

        chunks = await store.find_chunks("doc-1", "session-a")
        metadata = await store.find_metadata("doc-1", "session-a")

        assert [chunk.id for chunk in chunks] == ["doc-1-0", "doc-1-1", "doc-1-2"]
        assert metadata.chunk_count == len(chunks)

    @pytest.mark.asyncio
    async def test_session_isolation(self, store, chunk_factory, metadata_factory):
        await store.insert_chunks([chunk_factory("doc-1", 0, session_id="A")])
        await store.insert_metadata(metadata_factory("doc-1", session_id="A"))

        assert await store.find_chunks("doc-1", "B") == []
        assert await store.find_metadata("doc-1", "B") is None
        assert await store.list_documents("B") == []

    @pytest.mark.asyncio
    async def test_delete_document_is_idempotent(
        self, store, chunk_factory, metadata_factory
    ):
        await store.insert_chunks([chunk_factory("doc-1", 0), chunk_factory("doc-1", 1)])
        await store.insert_metadata(metadata_factory("doc-1", chunk_count=2))

        await store.delete_document("doc-1", "session-a")
        await store.delete_document("doc-1", "session-a")

        assert await store.find_chunks("doc-1", "session-a") == []
        assert await store.find_metadata("doc-1", "session-a") is None

    @pytest.mark.asyncio
    async def test_delete_session_leaves_other_sessions(
        self, store, chunk_factory, metadata_factory
    ):
        for session_id in ("A", "B"):
            await store.insert_chunks([chunk_factory("doc-1", 0, session_id=session_id)])
            await store.insert_metadata(metadata_factory("doc-1", session_id=session_id))

        await store.delete_session("A")

        assert await store.list_documents("A") == []
        assert len(await store.find_chunks("doc-1", "B")) == 1
        assert (await store.find_metadata("doc-1", "B")).session_id == "B"

    @pytest.mark.asyncio
    async def test_list_documents_newest_first(self, store, metadata_factory):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        await store.insert_metadata(metadata_factory("first", processed_at=base))
        await store.insert_metadata(
            metadata_factory("second", processed_at=base + timedelta(minutes=5))
        )

        documents = await store.list_documents("session-a")

        assert [doc.document_id for doc in documents] == ["second", "first"]

    @pytest.mark.asyncio
    async def test_delete_all_clears_every_session(
        self, store, chunk_factory, metadata_factory
    ):
        for session_id in ("A", "B"):
            await store.insert_chunks(
                [chunk_factory(f"doc-{session_id}", i, session_id=session_id) for i in range(2)]
            )
            await store.insert_metadata(
                metadata_factory(f"doc-{session_id}", session_id=session_id, chunk_count=2)
            )

        await store.delete_all()
        await store.delete_all()

        for session_id in ("A", "B"):
            assert await store.find_chunks(f"doc-{session_id}", session_id) == []
            assert await store.list_documents(session_id) == []

    @pytest.mark.asyncio
    async def test_delete_all_error_maps_to_storage_unavailable(self):
        chunk_repo = AsyncMock()
        chunk_repo.delete_all.return_value = 4
        metadata_repo = AsyncMock()
        metadata_repo.delete_all.side_effect = OperationalError(
            "DELETE", {}, Exception("database is locked")
        )
        store = SqlDocumentStore(chunk_repo=chunk_repo, metadata_repo=metadata_repo)

        with pytest.raises(StorageUnavailableError):
            await store.delete_all()

    @pytest.mark.asyncio
    async def test_database_error_maps_to_storage_unavailable(self):
        chunk_repo = AsyncMock()
        error = OperationalError("SELECT 1", {}, Exception("connection lost"))
        chunk_repo.get_for_document.side_effect = error
        store = SqlDocumentStore(chunk_repo=chunk_repo, metadata_repo=AsyncMock())

        with pytest.raises(StorageUnavailableError) as exc_info:
            await store.find_chunks("doc-1", "session-a")

        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_socket_error_maps_to_storage_unavailable(self, metadata_factory):
        metadata_repo = AsyncMock()
        metadata_repo.create.side_effect = ConnectionRefusedError("refused")
        store = SqlDocumentStore(chunk_repo=AsyncMock(), metadata_repo=metadata_repo)

        with pytest.raises(StorageUnavailableError):
            await store.insert_metadata(metadata_factory("doc-1"))

    @pytest.mark.asyncio
    async def test_delete_error_rolls_back_and_maps(self):
        chunk_repo = AsyncMock()
        chunk_repo.delete_for_document.return_value = 2
        metadata_repo = AsyncMock()
        metadata_repo.delete_for_document.side_effect = OperationalError(
            "DELETE", {}, Exception("disk I/O error")
        )
        store = SqlDocumentStore(chunk_repo=chunk_repo, metadata_repo=metadata_repo)

        with pytest.raises(StorageUnavailableError):
            await store.delete_document("doc-1", "session-a")

    @pytest.mark.asyncio
    async def test_other_errors_propagate_unchanged(self):
        chunk_repo = AsyncMock()
        chunk_repo.get_for_document.side_effect = KeyError("bug")
        store = SqlDocumentStore(chunk_repo=chunk_repo, metadata_repo=AsyncMock())

        with pytest.raises(KeyError):
            await store.find_chunks("doc-1", "session-a")
