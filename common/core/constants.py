from enum import Enum


class Environment(str, Enum):
    """Environment profiles."""

    LOCAL = "local"
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class DocumentStoreProvider(str, Enum):
    """Document store backends."""

    SQL = "sql"
    MEMORY = "memory"


DEFAULT_SESSION_ID = "default"
SESSION_HEADER = "x-session-id"
