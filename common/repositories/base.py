from contextlib import asynccontextmanager
from typing import Generic, TypeVar, Optional, List, Type, AsyncGenerator

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from pydantic import BaseModel

from common.core.telemetry import trace_span
from common.db.scoped import get_session

EntityType = TypeVar("EntityType")
DomainModelType = TypeVar("DomainModelType")
CreateModelType = TypeVar("CreateModelType", bound=BaseModel)


class BaseRepository(Generic[EntityType, DomainModelType]):
    """
    Base repository for session-partitioned tables.

    Entities must have a ``session_id`` column; every scoped query and delete
    filters on it.

    A repository either uses the session handed to its constructor (the
    caller owns that session) or, without one, opens an operation-scoped
    session per call via get_session(), joining any enclosing transaction().

    Example:
        repo = DocumentChunkRepository()
        chunks = await repo.get_for_document("doc-1", "session-a")
    """

    def __init__(
        self,
        entity_class: Type[EntityType],
        domain_class: Type[DomainModelType],
        db_session: Optional[AsyncSession] = None,
    ):
        self.entity_class = entity_class
        self.domain_class = domain_class
        self._explicit_session = db_session

    @asynccontextmanager
    async def _get_session(self) -> AsyncGenerator[AsyncSession, None]:
        if self._explicit_session is not None:
            yield self._explicit_session
        else:
            async with get_session() as session:
                yield session

    def _scoped_select(self, session_id: str, *criteria):
        """SELECT of this entity restricted to one session partition."""
        return select(self.entity_class).where(
            self.entity_class.session_id == session_id, *criteria
        )

    def _entity_to_domain(self, entity: EntityType) -> DomainModelType:
        """Convert database entity to domain model."""
        return self.domain_class.model_validate(entity)

    def _entities_to_domain(self, entities: List[EntityType]) -> List[DomainModelType]:
        return [self._entity_to_domain(entity) for entity in entities]

    def _create_model_to_entity(self, create_model: CreateModelType) -> EntityType:
        """Map a domain model to a new entity; override when columns differ."""
        return self.entity_class(**create_model.model_dump(exclude_none=True))

    async def _fetch_all(self, query) -> List[DomainModelType]:
        async with self._get_session() as session:
            result = await session.execute(query)
            return self._entities_to_domain(result.scalars().all())

    async def _delete_scoped(self, session_id: str, *criteria) -> int:
        """Hard delete rows of one session partition, returning the row count."""
        async with self._get_session() as session:
            result = await session.execute(
                delete(self.entity_class).where(
                    self.entity_class.session_id == session_id, *criteria
                )
            )
            await session.flush()
            return result.rowcount

    @trace_span
    async def delete_all(self) -> int:
        """Hard delete every row of every session partition."""
        async with self._get_session() as session:
            result = await session.execute(delete(self.entity_class))
            await session.flush()
            return result.rowcount

    @trace_span
    async def create(self, create_model: CreateModelType) -> DomainModelType:
        """Insert one record and return it as stored."""
        db_obj = self._create_model_to_entity(create_model)
        async with self._get_session() as session:
            session.add(db_obj)
            await session.flush()
            await session.refresh(db_obj)
            return self._entity_to_domain(db_obj)

    @trace_span
    async def bulk_create_from_models(
        self, create_models: List[CreateModelType]
    ) -> List[DomainModelType]:
        """Insert a batch in one flush; an empty batch is a no-op."""
        if not create_models:
            return []

        entities = [self._create_model_to_entity(model) for model in create_models]
        async with self._get_session() as session:
            session.add_all(entities)
            await session.flush()
            return self._entities_to_domain(entities)
