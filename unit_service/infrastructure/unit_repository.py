"""SQLAlchemy Unit Repository: implements core UnitRepository over an AsyncSession.

Invariants:
    - Returns core Unit entities, never UnitRecord rows
    - get_by_ids preserves the order of the requested ids; unknown ids skipped, duplicates collapsed
    - get_all filters by owner and name substring in SQL (LIKE with autoescape)
    - create/update commit immediately; any SQLAlchemyError is rolled back and raised as RepositoryError
    - Timestamps read back as tz-aware UTC regardless of driver

Design Decisions:
    - One repository per AsyncSession: the request owns the session lifecycle (get_db)
    - update copies mutable fields onto the loaded row; id and created_at are never rewritten
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from unit_service.core.domain_types import UnitId, UserId, as_utc
from unit_service.core.errors import ErrorContext, RepositoryError
from unit_service.core.unit import Unit
from unit_service.models.unit import UnitRecord

logger = logging.getLogger(__name__)


class SqlAlchemyUnitRepository:
    """UnitRepository backed by the `units` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_ids(self, ids: list[UnitId]) -> list[Unit]:
        wanted = list(dict.fromkeys(ids))
        try:
            result = await self.db.execute(
                select(UnitRecord).where(UnitRecord.id.in_(wanted)),
            )
            rows = {row.id: row for row in result.scalars().all()}
        except SQLAlchemyError as e:
            raise await self._fail("get_by_ids", e) from e
        return [_to_entity(rows[uid]) for uid in wanted if uid in rows]

    async def get_all(
        self, owner_id: UserId, name_contains: str | None = None,
    ) -> list[Unit]:
        query = (
            select(UnitRecord)
            .where(UnitRecord.user_id == owner_id)
            .order_by(UnitRecord.created_at, UnitRecord.id)
        )
        if name_contains is not None:
            query = query.where(
                UnitRecord.name.contains(name_contains, autoescape=True),
            )
        try:
            result = await self.db.execute(query)
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise await self._fail("get_all", e) from e
        return [_to_entity(row) for row in rows]

    async def create(self, unit: Unit) -> None:
        try:
            self.db.add(_to_record(unit))
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("create", e, unit.id) from e

    async def update(self, unit: Unit) -> None:
        try:
            result = await self.db.execute(
                select(UnitRecord).where(UnitRecord.id == unit.id),
            )
            row = result.scalar_one_or_none()
            if row is None:
                raise RepositoryError(
                    "no stored row for unit", "update",
                    ErrorContext(operation="update", unit_id=str(unit.id)),
                )
            row.version = unit.version
            row.updated_at = unit.updated_at
            row.deleted_at = unit.deleted_at
            row.user_id = unit.user_id
            row.name = unit.name
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("update", e, unit.id) from e

    async def _fail(
        self, operation: str, exc: SQLAlchemyError, unit_id: UnitId | None = None,
    ) -> RepositoryError:
        await self.db.rollback()
        logger.error(
            f"Unit repository {operation} failed: {exc}",
            extra={"operation": operation, "unit_id": str(unit_id) if unit_id else None},
        )
        return RepositoryError(
            type(exc).__name__, operation,
            ErrorContext(operation=operation, unit_id=str(unit_id) if unit_id else None),
        )


def _to_entity(row: UnitRecord) -> Unit:
    return Unit(
        id=UnitId(row.id),
        version=row.version,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        deleted_at=as_utc(row.deleted_at) if row.deleted_at else None,
        user_id=UserId(row.user_id) if row.user_id else None,
        name=row.name,
    )


def _to_record(unit: Unit) -> UnitRecord:
    return UnitRecord(
        id=unit.id,
        version=unit.version,
        created_at=unit.created_at,
        updated_at=unit.updated_at,
        deleted_at=unit.deleted_at,
        user_id=unit.user_id,
        name=unit.name,
    )
