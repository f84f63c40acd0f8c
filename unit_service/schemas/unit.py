"""Unit Schemas: Pydantic models for the units API.

Invariants:
    - UnitCreate / UnitRename carry only the name; identity comes from the path and X-User-ID
    - Blank names pass through unchanged so the entity's name_required rule decides
    - UnitResponse mirrors every Unit field plus the derived state

Design Decisions:
    - No length limits beyond the entity rules: the domain owns name validation
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from unit_service.core.domain_types import UnitState
from unit_service.core.unit import Unit


class UnitCreate(BaseModel):
    name: str


class UnitRename(BaseModel):
    name: str


class UnitResponse(BaseModel):
    """Public-facing unit data."""
    id: UUID
    version: int
    name: str
    user_id: UUID | None = None
    state: UnitState
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @classmethod
    def from_entity(cls, unit: Unit) -> "UnitResponse":
        return cls(
            id=unit.id,
            version=unit.version,
            name=unit.name,
            user_id=unit.user_id,
            state=unit.state,
            created_at=unit.created_at,
            updated_at=unit.updated_at,
            deleted_at=unit.deleted_at,
        )
