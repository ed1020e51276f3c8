"""
Operation-scoped database sessions.

A session is opened for one store operation and closed right after it, so
nothing holds a connection while ingestion waits on the embedding server.

Usage:
    # One statement, committed on exit
    async with get_session() as session:
        result = await session.execute(query)

    # Several statements, committed together
    async with transaction():
        await chunk_repo.delete_for_document(document_id, session_id)
        await metadata_repo.delete_for_document(document_id, session_id)
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import get_logger
from common.db.session import AsyncSessionLocal
from common.db.context import (
    get_current_session,
    set_current_session,
    reset_current_session,
)

logger = get_logger(__name__)


@asynccontextmanager
async def _committed_session(label: str) -> AsyncGenerator[AsyncSession, None]:
    """Open a fresh session; commit when the block succeeds, roll back if not."""
    start = time.perf_counter()
    async with AsyncSessionLocal() as session:
        logger.debug(
            f"{label} session acquire: {(time.perf_counter() - start) * 1000:.2f}ms"
        )
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"{label} rollback due to: {e}")
            await session.rollback()
            raise


@asynccontextmanager
async def transaction() -> AsyncGenerator[AsyncSession, None]:
    """
    Explicit transaction boundary.

    Repository calls inside the block share one session and commit together.
    A nested transaction() joins the enclosing one.

    Raises:
        Exception: Re-raises any exception after rollback
    """
    existing = get_current_session()
    if existing is not None:
        yield existing
        return

    async with _committed_session("Transaction") as session:
        token = set_current_session(session)
        try:
            yield session
        finally:
            reset_current_session(token)


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a session for a single store operation.

    Inside transaction() the transaction's session is reused and left for it
    to commit; otherwise a session is opened and committed for this call only.
    """
    existing = get_current_session()
    if existing is not None:
        yield existing
        return

    async with _committed_session("Operation") as session:
        yield session
