"""Unit Service: get_by_ids, get_all, create, update, delete.

Invariants:
    - Preconditions (empty ids, empty name filter, entity validation) fail with
      BadParamsError before any repository write
    - update/delete fetch first: the stored unit decides who may mutate it
    - update requires an owner (UserIdMissingError) equal to the requester (UserIdMismatchError)
    - delete performs no ownership check
    - Repository failures are re-raised as RepositoryError carrying the operation name;
      never retried, never swallowed, never logged here

Design Decisions:
    - Name filtering is delegated to the repository (ADR: scales with table size)
    - Single-id lookups reuse get_by_ids and demand exactly one row: zero and many
      are distinct UnitLookupError subclasses, never BadParamsError
    - Only successful mutations are logged; failures propagate to the API error handler
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from unit_service.core.domain_types import UnitId, UserId
from unit_service.core.errors import (
    AmbiguousUnitLookupError,
    BadParamsError,
    ErrorContext,
    RepositoryError,
    UnitNotFoundError,
    UnitServiceError,
    UnitValidationError,
    UserIdMismatchError,
    UserIdMissingError,
)
from unit_service.core.repository_protocols import UnitRepository
from unit_service.core.unit import Unit, new_unit

logger = logging.getLogger(__name__)


class UnitService:
    """Use cases for the Unit entity."""

    def __init__(self, repo: UnitRepository):
        self.repo = repo

    async def get_by_ids(self, ids: list[UnitId]) -> list[Unit]:
        """Batch fetch. Unknown ids are simply absent from the result."""
        if not ids:
            raise BadParamsError(
                "bad params: ids must not be empty",
                ErrorContext(operation="get_by_ids"),
            )
        with _repository_call("get_by_ids"):
            return await self.repo.get_by_ids(list(ids))

    async def get_by_id(self, unit_id: UnitId) -> Unit:
        """Exactly one unit, soft-deleted ones included."""
        return await self._get_one(unit_id, "get_by_id")

    async def get_all(
        self, owner_id: UserId, name_contains: str | None = None,
    ) -> list[Unit]:
        """Units owned by owner_id, optionally narrowed to names containing a substring."""
        if name_contains == "":
            raise BadParamsError(
                "bad params: name filter must not be empty when given",
                ErrorContext(operation="get_all", user_id=str(owner_id)),
            )
        with _repository_call("get_all"):
            return await self.repo.get_all(owner_id, name_contains)

    async def create(self, owner_id: UserId | None, name: str) -> Unit:
        unit = new_unit(owner_id, name)
        _validate(unit, "create")

        with _repository_call("create", unit.id):
            await self.repo.create(unit)

        logger.info(
            f"Unit {unit.id} created",
            extra={
                "operation": "create", "unit_id": str(unit.id),
                "user_id": str(owner_id) if owner_id else None,
            },
        )
        return unit

    async def update(
        self, unit_id: UnitId, requesting_user_id: UserId, name: str,
    ) -> Unit:
        """Rename a unit on behalf of its owner. Bumps version."""
        unit = await self._get_one(unit_id, "update")

        ctx = ErrorContext(
            operation="update", unit_id=str(unit_id), user_id=str(requesting_user_id),
        )
        if unit.user_id is None:
            raise UserIdMissingError(str(unit_id), ctx)
        if unit.user_id != requesting_user_id:
            raise UserIdMismatchError(str(unit_id), ctx)

        unit.touch()
        unit.name = name
        _validate(unit, "update")

        with _repository_call("update", unit_id):
            await self.repo.update(unit)

        logger.info(
            f"Unit {unit_id} updated to version {unit.version}",
            extra={
                "operation": "update", "unit_id": str(unit_id),
                "user_id": str(requesting_user_id),
            },
        )
        return unit

    async def delete(self, unit_id: UnitId) -> Unit:
        """Soft delete. Version is left unchanged."""
        unit = await self._get_one(unit_id, "delete")
        unit.mark_deleted()

        with _repository_call("delete", unit_id):
            await self.repo.update(unit)

        logger.info(
            f"Unit {unit_id} marked deleted",
            extra={"operation": "delete", "unit_id": str(unit_id)},
        )
        return unit

    async def _get_one(self, unit_id: UnitId, operation: str) -> Unit:
        with _repository_call(operation, unit_id):
            units = await self.repo.get_by_ids([unit_id])

        ctx = ErrorContext(operation=operation, unit_id=str(unit_id))
        if not units:
            raise UnitNotFoundError(str(unit_id), ctx)
        if len(units) > 1:
            raise AmbiguousUnitLookupError(str(unit_id), len(units), ctx)
        return units[0]


def _validate(unit: Unit, operation: str) -> None:
    try:
        unit.validate()
    except UnitValidationError as e:
        raise BadParamsError.from_validation(
            e, ErrorContext(operation=operation, unit_id=str(unit.id)),
        ) from e


@contextmanager
def _repository_call(operation: str, unit_id: UnitId | None = None) -> Iterator[None]:
    """Re-raise anything the repository throws as RepositoryError for `operation`."""
    ctx = ErrorContext(
        operation=operation, unit_id=str(unit_id) if unit_id else None,
    )
    try:
        yield
    except RepositoryError as e:
        raise RepositoryError(f"{e.operation}: {e.reason}", operation, ctx) from e
    except UnitServiceError:
        raise
    except Exception as e:
        raise RepositoryError(str(e) or type(e).__name__, operation, ctx) from e
