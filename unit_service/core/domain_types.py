"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UnitId, UserId wrap UUIDs: never use bare UUID in domain logic
    - NIL_UUID and ZERO_TIMESTAMP are the "unset" values rejected by validation
    - All valid states encoded as Enums: no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from datetime import datetime, timezone
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UnitId = NewType("UnitId", UUID)
UserId = NewType("UserId", UUID)

NIL_UUID = UUID(int=0)


# ─── Time ────────────────────────────────────────────────────────

# Anything at or before the epoch counts as an unset timestamp
ZERO_TIMESTAMP = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ─── Enums ───────────────────────────────────────────────────────

class UnitState(str, Enum):
    """Unit lifecycle states: derived from deleted_at, never stored."""
    ACTIVE = "active"
    DELETED = "deleted"
