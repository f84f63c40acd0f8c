"""Unit ORM: persists the Unit entity, soft-deleted rows included.

Invariants:
    - id is UUID primary key, assigned by the domain (no server default)
    - deleted_at NULL means active; rows are never physically deleted
    - user_id NULL means unowned

Design Decisions:
    - user_id indexed: get_all always filters by owner
    - No version check on write: optimistic locking is out of scope for storage
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from unit_service.db.base import Base


class UnitRecord(Base):
    """Row for a Unit entity."""
    __tablename__ = "units"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True,
    )
    version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
