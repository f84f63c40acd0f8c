"""Units API: HTTP surface over UnitService.

Invariants:
    - The requesting user is identified by the X-User-ID header (UUID)
    - create takes X-User-ID when present; absent header creates an unowned unit
    - update and get_all require X-User-ID; delete ignores it
    - Domain errors propagate to the global UnitServiceError handler (no try/except here)

Design Decisions:
    - One UnitService per request, bound to the request's AsyncSession
    - /mine declared before /{unit_id} so the literal path wins
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from unit_service.core.domain_types import UnitId, UserId
from unit_service.infrastructure.database import get_db
from unit_service.infrastructure.unit_repository import SqlAlchemyUnitRepository
from unit_service.schemas.unit import UnitCreate, UnitRename, UnitResponse
from unit_service.services.unit_service import UnitService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/units", tags=["units"])


def get_unit_service(db: AsyncSession = Depends(get_db)) -> UnitService:
    return UnitService(SqlAlchemyUnitRepository(db))


@router.get("", response_model=list[UnitResponse])
async def get_units_by_ids(
    ids: list[UUID] = Query([]),
    service: UnitService = Depends(get_unit_service),
):
    """Batch fetch by id; unknown ids are omitted."""
    units = await service.get_by_ids([UnitId(i) for i in ids])
    return [UnitResponse.from_entity(u) for u in units]


@router.get("/mine", response_model=list[UnitResponse])
async def list_my_units(
    name_contains: str | None = Query(None),
    x_user_id: UUID = Header(...),
    service: UnitService = Depends(get_unit_service),
):
    """Units owned by the caller, optionally filtered by name substring."""
    units = await service.get_all(UserId(x_user_id), name_contains)
    return [UnitResponse.from_entity(u) for u in units]


@router.get("/{unit_id}", response_model=UnitResponse)
async def get_unit(
    unit_id: UUID, service: UnitService = Depends(get_unit_service),
):
    unit = await service.get_by_id(UnitId(unit_id))
    return UnitResponse.from_entity(unit)


@router.post(
    "", response_model=UnitResponse, status_code=status.HTTP_201_CREATED,
)
async def create_unit(
    body: UnitCreate,
    x_user_id: UUID | None = Header(None),
    service: UnitService = Depends(get_unit_service),
):
    owner = UserId(x_user_id) if x_user_id else None
    unit = await service.create(owner, body.name)
    return UnitResponse.from_entity(unit)


@router.patch("/{unit_id}", response_model=UnitResponse)
async def rename_unit(
    unit_id: UUID,
    body: UnitRename,
    x_user_id: UUID = Header(...),
    service: UnitService = Depends(get_unit_service),
):
    """Rename on behalf of the owner. 403 for unowned units or other users."""
    unit = await service.update(UnitId(unit_id), UserId(x_user_id), body.name)
    return UnitResponse.from_entity(unit)


@router.delete("/{unit_id}", response_model=UnitResponse)
async def delete_unit(
    unit_id: UUID, service: UnitService = Depends(get_unit_service),
):
    """Soft delete. Returns the unit with deleted_at set."""
    unit = await service.delete(UnitId(unit_id))
    return UnitResponse.from_entity(unit)
