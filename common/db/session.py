from uuid import uuid4

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from common.core.config import settings
from common.core.telemetry import get_logger
from common.db.base import Base

logger = get_logger(__name__)

ASYNC_DATABASE_URL = settings.database_url

engine_kwargs = {"echo": settings.debug}

if ASYNC_DATABASE_URL.startswith("sqlite"):
    # SQLite uses a single-connection pool; sizing arguments do not apply
    logger.info("Using SQLite document store database")
else:
    logger.info(
        f"Using connection pooling - pool_size={settings.db_pool_size}, max_overflow={settings.db_pool_overflow}"
    )
    engine_kwargs["pool_pre_ping"] = True
    engine_kwargs["pool_recycle"] = 3600
    engine_kwargs["pool_size"] = settings.db_pool_size
    engine_kwargs["max_overflow"] = settings.db_pool_overflow
    if "asyncpg" in ASYNC_DATABASE_URL:
        engine_kwargs["connect_args"] = {
            "prepared_statement_name_func": lambda: f"__asyncpg_{uuid4()}__",
        }

engine = create_async_engine(ASYNC_DATABASE_URL, **engine_kwargs)
AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def init_db():
    """Create the document store tables if they do not exist yet."""
    # Register entities on Base.metadata before create_all
    from packages.retrieval.models.database import (  # noqa: F401, PLC0415
        DocumentChunkEntity,
        DocumentMetadataEntity,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Document store tables ensured")


async def close_db():
    """Dispose the engine's connection pool."""
    await engine.dispose()
    logger.info("Database engine disposed")
