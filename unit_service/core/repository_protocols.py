"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - Implementations signal storage failures with RepositoryError

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO;
      the service awaits them sequentially and nothing else
    - get_all filters by name on the storage side (ADR: never ship every row to filter in memory)
"""

from typing import Protocol

from unit_service.core.domain_types import UnitId, UserId
from unit_service.core.unit import Unit


class UnitRepository(Protocol):
    """Contract for unit persistence: implemented by shell."""
    async def get_by_ids(self, ids: list[UnitId]) -> list[Unit]: ...
    async def get_all(
        self, owner_id: UserId, name_contains: str | None = None,
    ) -> list[Unit]: ...
    async def create(self, unit: Unit) -> None: ...
    async def update(self, unit: Unit) -> None: ...
