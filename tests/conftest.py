# Shared pytest configuration and fixtures for all test types
import os

# The engine is built at import time, so point it at sqlite before anything
# under common/ is imported.
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DOCUMENT_STORE_PROVIDER", "sql")

from datetime import datetime, timezone  # noqa: E402
from typing import List  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from common.db.base import Base  # noqa: E402
from packages.retrieval.models.database import (  # noqa: E402, F401
    DocumentChunkEntity,
    DocumentMetadataEntity,
)
from packages.retrieval.models.domain.document_chunk import (  # noqa: E402
    ChunkMetadata,
    DocumentChunkModel,
)
from packages.retrieval.models.domain.document_metadata import (  # noqa: E402
    DocumentMetadataModel,
)

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine and initialize schema."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_connection(test_engine):
    """Create test connection with outer transaction for rollback isolation."""
    async with test_engine.connect() as connection:
        trans = await connection.begin()
        yield connection
        await trans.rollback()


@pytest_asyncio.fixture(scope="function")
async def test_session_factory(test_connection):
    """Create session factory bound to test connection.

    Using join_transaction_mode="create_savepoint" so nested transaction()
    calls create savepoints instead of real nested transactions.
    """
    return async_sessionmaker(
        bind=test_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )


@pytest_asyncio.fixture(scope="function")
async def test_db(test_session_factory):
    """Create a test database session."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function", autouse=True)
async def patch_lazy_sessions(test_session_factory, monkeypatch):
    """
    Patch the session factory to use the test database.

    This allows real transaction() and get_session() to run with proper
    commit/rollback/ContextVar semantics while using the test database.
    """
    monkeypatch.setattr("common.db.scoped.AsyncSessionLocal", test_session_factory)


def make_chunk(
    document_id: str,
    chunk_index: int,
    session_id: str = "session-a",
    text: str = None,
    embedding: List[float] = None,
    source: str = "report.pdf",
) -> DocumentChunkModel:
    """Build a chunk model for store and repository tests."""
    return DocumentChunkModel(
        id=DocumentChunkModel.make_id(document_id, chunk_index),
        text=text or f"Chunk {chunk_index} of {document_id}",
        embedding=embedding or [1.0, float(chunk_index), 0.5],
        metadata=ChunkMetadata(
            document_id=document_id,
            chunk_index=chunk_index,
            source=source,
            session_id=session_id,
        ),
    )


def make_metadata(
    document_id: str,
    session_id: str = "session-a",
    chunk_count: int = 1,
    processed_at: datetime = None,
    source: str = "report.pdf",
) -> DocumentMetadataModel:
    """Build a metadata model for store and repository tests."""
    return DocumentMetadataModel(
        document_id=document_id,
        session_id=session_id,
        source=source,
        processed_at=processed_at or datetime.now(timezone.utc),
        chunk_count=chunk_count,
    )


@pytest.fixture
def chunk_factory():
    return make_chunk


@pytest.fixture
def metadata_factory():
    return make_metadata
