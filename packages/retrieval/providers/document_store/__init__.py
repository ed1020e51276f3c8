from .interface import DocumentStoreInterface
from .factory import get_document_store
from .memory_store import MemoryDocumentStore
from .sql_store import SqlDocumentStore

__all__ = [
    "DocumentStoreInterface",
    "get_document_store",
    "MemoryDocumentStore",
    "SqlDocumentStore",
]
