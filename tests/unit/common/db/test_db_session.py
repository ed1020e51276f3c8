import pytest
from sqlalchemy import inspect, text

from common.db.scoped import get_session, transaction
from common.db.session import engine, init_db


class TestInitDb:
    @pytest.mark.asyncio
    async def test_creates_document_tables(self):
        await init_db()

        async with engine.connect() as conn:
            names = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names()
            )

        assert {"document_chunks", "document_metadata"} <= set(names)


class TestScopedSessions:
    @pytest.mark.asyncio
    async def test_nested_transaction_joins_outer(self):
        async with transaction() as outer:
            async with transaction() as inner:
                assert inner is outer
            async with get_session() as session:
                assert session is outer

    @pytest.mark.asyncio
    async def test_transaction_reraises(self):
        with pytest.raises(RuntimeError):
            async with transaction() as session:
                await session.execute(text("SELECT 1"))
                raise RuntimeError("boom")

    @pytest.mark.asyncio
    async def test_get_session_outside_transaction(self):
        async with get_session() as first:
            pass
        async with get_session() as second:
            pass

        assert first is not second
