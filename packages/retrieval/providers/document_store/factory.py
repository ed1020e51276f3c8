from typing import Optional

from common.core.config import settings
from common.core.constants import DocumentStoreProvider
from common.core.telemetry import get_logger

from .interface import DocumentStoreInterface
from .memory_store import MemoryDocumentStore
from .sql_store import SqlDocumentStore

logger = get_logger(__name__)


def get_document_store(
    provider_type: Optional[DocumentStoreProvider] = None,
) -> DocumentStoreInterface:
    """
    Create a document store for the configured backend.

    Each call returns a new handle. The SQL store's data is shared through
    the database; a memory store is private to its handle, so callers that
    want to share it must pass the same instance around.

    Raises:
        ValueError: If the provider type is unknown.
    """
    provider_type = DocumentStoreProvider(
        provider_type or settings.document_store_provider
    )

    match provider_type:
        case DocumentStoreProvider.SQL:
            return SqlDocumentStore()
        case DocumentStoreProvider.MEMORY:
            logger.warning("Using in-memory document store; data is not durable")
            return MemoryDocumentStore()
        case _:
            raise ValueError(f"Unknown document store provider: {provider_type}")
