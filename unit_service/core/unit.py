"""Unit Entity: versioned, soft-deletable, optionally owned business record.

Invariants:
    - new_unit() starts at version 1 with created_at == updated_at
    - touch() bumps version by exactly 1 and refreshes updated_at
    - mark_deleted() sets deleted_at == updated_at and leaves version alone
    - validate() never mutates; it reports every violated rule at once

Design Decisions:
    - Rules are a tuple of named predicates, not reflection over field metadata
      (ADR: each rule testable in isolation)
    - Optional fields are `X | None` with explicit `is None` checks
    - Construction does not validate: callers validate before persisting
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, NamedTuple
from uuid import uuid4

from unit_service.core.domain_types import (
    NIL_UUID, ZERO_TIMESTAMP, UnitId, UnitState, UserId, as_utc, utc_now,
)
from unit_service.core.errors import UnitValidationError


@dataclass
class Unit:
    """Business entity: pure dataclass, no IO."""

    id: UnitId
    version: int
    created_at: datetime
    updated_at: datetime
    name: str
    deleted_at: datetime | None = None
    user_id: UserId | None = None

    @property
    def state(self) -> UnitState:
        return UnitState.DELETED if self.deleted_at is not None else UnitState.ACTIVE

    @property
    def is_deleted(self) -> bool:
        return self.state == UnitState.DELETED

    def violations(self) -> list["UnitRule"]:
        """Rules this unit currently breaks, in declaration order."""
        return [rule for rule in UNIT_RULES if not rule.check(self)]

    def validate(self) -> None:
        """Raise UnitValidationError listing every violated rule."""
        broken = self.violations()
        if broken:
            raise UnitValidationError([(rule.name, rule.message) for rule in broken])

    def touch(self) -> None:
        """Record a mutation: version + 1, updated_at = now."""
        self.version += 1
        self.updated_at = utc_now()

    def mark_deleted(self) -> None:
        """Soft delete. Calling twice refreshes the timestamp."""
        now = utc_now()
        self.updated_at = now
        self.deleted_at = now


def new_unit(user_id: UserId | None, name: str) -> Unit:
    """Build a fresh Unit. Not validated."""
    now = utc_now()
    return Unit(
        id=UnitId(uuid4()),
        version=1,
        created_at=now,
        updated_at=now,
        name=name,
        user_id=user_id,
    )


def touch(unit: Unit | None) -> None:
    """touch() for callers holding an optional reference; no-op on None."""
    if unit is None:
        return
    unit.touch()


def mark_deleted(unit: Unit | None) -> None:
    if unit is None:
        return
    unit.mark_deleted()


# ─── Validation Rules ────────────────────────────────────────────

class UnitRule(NamedTuple):
    name: str
    message: str
    check: Callable[[Unit], bool]


def _is_set(value: datetime | None) -> bool:
    return value is not None and as_utc(value) > ZERO_TIMESTAMP


def _updated_not_before_created(unit: Unit) -> bool:
    # Ordering is meaningless until both timestamps exist; *_required rules cover that
    if not (_is_set(unit.created_at) and _is_set(unit.updated_at)):
        return True
    return as_utc(unit.updated_at) >= as_utc(unit.created_at)


UNIT_RULES: tuple[UnitRule, ...] = (
    UnitRule(
        "id_required", "id is required",
        lambda u: u.id is not None and u.id != NIL_UUID,
    ),
    UnitRule(
        "version_positive", "version must be greater than 0",
        lambda u: isinstance(u.version, int) and u.version > 0,
    ),
    UnitRule(
        "created_at_required", "created_at is required",
        lambda u: _is_set(u.created_at),
    ),
    UnitRule(
        "updated_at_required", "updated_at is required",
        lambda u: _is_set(u.updated_at),
    ),
    UnitRule(
        "updated_at_after_created_at", "updated_at must not precede created_at",
        _updated_not_before_created,
    ),
    UnitRule(
        "deleted_at_not_zero", "deleted_at, when set, must be a real timestamp",
        lambda u: u.deleted_at is None or _is_set(u.deleted_at),
    ),
    UnitRule(
        "user_id_not_nil", "user_id, when set, must not be the nil UUID",
        lambda u: u.user_id is None or u.user_id != NIL_UUID,
    ),
    UnitRule(
        "name_required", "name is required",
        lambda u: isinstance(u.name, str) and u.name != "",
    ),
)
