"""
Database session context management.

Holds the session of the current explicit transaction (if any) in a
ContextVar, so repositories called inside ``transaction()`` share one
session while standalone calls acquire their own.

Usage:
    async with transaction():
        await repo.delete_for_document(...)
        await other_repo.delete_for_document(...)  # Same session, commits together
"""

from contextvars import ContextVar
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

# Holds the current write session (if inside a transaction)
_current_session: ContextVar[Optional[AsyncSession]] = ContextVar(
    "db_session", default=None
)


def get_current_session() -> Optional[AsyncSession]:
    """Get the session of the enclosing transaction, if any."""
    return _current_session.get()


def set_current_session(session: AsyncSession) -> object:
    """
    Set session in context.

    Returns:
        Token for resetting the context variable
    """
    return _current_session.set(session)


def reset_current_session(token: object) -> None:
    """Reset session context using token from set_current_session."""
    _current_session.reset(token)

