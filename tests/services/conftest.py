"""Service test fixtures: in-memory UnitRepository fake.

Invariants:
    - FakeUnitRepository satisfies the UnitRepository Protocol structurally
    - Every repository call is recorded in `calls` as (method, args)
    - Stored units are copies: mutating a returned Unit never changes storage

Design Decisions:
    - Fake over mocks: ownership and versioning flows need real state across calls
    - `fail_on` makes one method raise, to exercise error wrapping
"""

import copy

import pytest

from unit_service.core.unit import Unit


class FakeUnitRepository:
    def __init__(self):
        self.units: dict = {}
        self.calls: list[tuple[str, tuple]] = []
        self.fail_on: dict[str, Exception] = {}
        self.duplicate_ids: set = set()

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, args))
        if method in self.fail_on:
            raise self.fail_on[method]

    def seed(self, unit: Unit) -> Unit:
        self.units[unit.id] = copy.deepcopy(unit)
        return unit

    async def get_by_ids(self, ids):
        self._record("get_by_ids", list(ids))
        found = []
        for uid in ids:
            if uid in self.units:
                found.append(copy.deepcopy(self.units[uid]))
                if uid in self.duplicate_ids:
                    found.append(copy.deepcopy(self.units[uid]))
        return found

    async def get_all(self, owner_id, name_contains=None):
        self._record("get_all", owner_id, name_contains)
        return [
            copy.deepcopy(u) for u in self.units.values()
            if u.user_id == owner_id
            and (name_contains is None or name_contains in u.name)
        ]

    async def create(self, unit):
        self._record("create", unit)
        self.units[unit.id] = copy.deepcopy(unit)

    async def update(self, unit):
        self._record("update", unit)
        self.units[unit.id] = copy.deepcopy(unit)

    def method_calls(self, method: str) -> list[tuple]:
        return [args for name, args in self.calls if name == method]


@pytest.fixture
def repo():
    return FakeUnitRepository()
