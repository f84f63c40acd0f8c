"""Async Session Factory: sessionmaker shared by the session manager and test fixtures.

Invariants:
    - expire_on_commit=False everywhere: entities are built from rows after commit
    - Bound to an existing engine; engine lifecycle stays with the caller

Design Decisions:
    - Separate from infrastructure/database.py so scripts and fixtures get the same
      session configuration without the FastAPI singleton
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
