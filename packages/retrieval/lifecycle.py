"""Startup and shutdown hooks for a process hosting the retrieval service."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from common.core.config import settings
from common.core.constants import DocumentStoreProvider
from common.core.telemetry import get_logger
from common.db.session import close_db, init_db
from packages.retrieval.services.retrieval_service import (
    RetrievalService,
    get_retrieval_service,
)

logger = get_logger(__name__)


async def shutdown(service: RetrievalService, purge: Optional[bool] = None) -> None:
    """
    Release resources held by the service.

    Args:
        service: Service whose store is purged
        purge: Delete every stored document first (default: settings)
    """
    if purge is None:
        purge = settings.purge_documents_on_shutdown

    try:
        if purge:
            logger.info("Removing all stored documents...")
            await service.cleanup_all()
    except Exception as cleanup_error:
        logger.error(f"Error during cleanup: {cleanup_error}")
    finally:
        await close_db()


@asynccontextmanager
async def lifespan(
    service: Optional[RetrievalService] = None,
) -> AsyncGenerator[RetrievalService, None]:
    """
    Run a retrieval service between startup and shutdown.

    Example:
        async with lifespan() as service:
            await service.ingest("doc-1", text, "report.pdf", "session-a")
    """
    logger.info("Starting retrieval service...")
    if settings.document_store_provider == DocumentStoreProvider.SQL:
        await init_db()
        logger.info("Database initialized")

    service = service or get_retrieval_service()
    try:
        yield service
    finally:
        logger.info("Shutting down retrieval service...")
        await shutdown(service)
