"""Units API: end-to-end through FastAPI, UnitService, and SQLite.

Invariants:
    - Domain errors map to their HTTP status with the structured error envelope
    - X-User-ID identifies the requester; missing where required → 400
    - DELETE soft-deletes; the unit stays readable
"""

from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from unit_service.infrastructure.database import get_db
from unit_service.main import app


@pytest.fixture
def owner_id():
    return str(uuid4())


async def _create(client, name="Alpha", owner=None):
    headers = {"X-User-ID": owner} if owner else {}
    return await client.post("/api/v1/units", json={"name": name}, headers=headers)


async def test_create_returns_201_with_version_one(client, owner_id):
    res = await _create(client, owner=owner_id)
    assert res.status_code == 201
    body = res.json()
    assert body["version"] == 1
    assert body["name"] == "Alpha"
    assert body["user_id"] == owner_id
    assert body["state"] == "active"
    assert body["deleted_at"] is None


async def test_create_without_header_is_unowned(client):
    res = await _create(client)
    assert res.status_code == 201
    assert res.json()["user_id"] is None


async def test_create_empty_name_returns_400_with_violation(client, owner_id):
    res = await _create(client, name="", owner=owner_id)
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "BAD_PARAMS"
    assert error["violations"][0]["rule"] == "name_required"


async def test_create_missing_body_returns_400(client):
    res = await client.post("/api/v1/units", json={})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_get_unit_by_id(client, owner_id):
    created = (await _create(client, owner=owner_id)).json()
    res = await client.get(f"/api/v1/units/{created['id']}")
    assert res.status_code == 200
    assert res.json()["id"] == created["id"]


async def test_get_unknown_unit_returns_404(client):
    res = await client.get(f"/api/v1/units/{uuid4()}")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "UNIT_NOT_FOUND"


async def test_get_by_ids_without_ids_returns_400(client):
    res = await client.get("/api/v1/units")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "BAD_PARAMS"


async def test_get_by_ids_returns_requested_units(client, owner_id):
    a = (await _create(client, "a", owner_id)).json()
    b = (await _create(client, "b", owner_id)).json()
    res = await client.get(
        "/api/v1/units", params=[("ids", b["id"]), ("ids", a["id"])],
    )
    assert res.status_code == 200
    assert [u["id"] for u in res.json()] == [b["id"], a["id"]]


async def test_list_mine_filters_by_owner_and_name(client, owner_id):
    await _create(client, "Alpha", owner_id)
    await _create(client, "Beta", owner_id)
    await _create(client, "Alphabet", str(uuid4()))

    res = await client.get(
        "/api/v1/units/mine",
        params={"name_contains": "Alph"},
        headers={"X-User-ID": owner_id},
    )

    assert res.status_code == 200
    assert [u["name"] for u in res.json()] == ["Alpha"]


async def test_list_mine_empty_filter_returns_400(client, owner_id):
    res = await client.get(
        "/api/v1/units/mine",
        params={"name_contains": ""},
        headers={"X-User-ID": owner_id},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "BAD_PARAMS"


async def test_list_mine_requires_user_header(client):
    res = await client.get("/api/v1/units/mine")
    assert res.status_code == 400


async def test_rename_by_owner_bumps_version(client, owner_id):
    created = (await _create(client, owner=owner_id)).json()
    res = await client.patch(
        f"/api/v1/units/{created['id']}",
        json={"name": "Beta"},
        headers={"X-User-ID": owner_id},
    )
    assert res.status_code == 200
    assert res.json()["version"] == 2
    assert res.json()["name"] == "Beta"


async def test_rename_by_other_user_returns_403_and_keeps_state(client, owner_id):
    created = (await _create(client, owner=owner_id)).json()
    res = await client.patch(
        f"/api/v1/units/{created['id']}",
        json={"name": "Gamma"},
        headers={"X-User-ID": str(uuid4())},
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "USER_ID_MISMATCH"

    stored = (await client.get(f"/api/v1/units/{created['id']}")).json()
    assert stored["name"] == "Alpha"
    assert stored["version"] == 1


async def test_rename_unowned_unit_returns_403_missing(client):
    created = (await _create(client)).json()
    res = await client.patch(
        f"/api/v1/units/{created['id']}",
        json={"name": "Beta"},
        headers={"X-User-ID": str(uuid4())},
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "USER_ID_MISSING"


async def test_delete_soft_deletes_and_keeps_version(client, owner_id):
    created = (await _create(client, owner=owner_id)).json()
    res = await client.delete(f"/api/v1/units/{created['id']}")
    assert res.status_code == 200
    body = res.json()
    assert body["deleted_at"] is not None
    assert body["state"] == "deleted"
    assert body["version"] == 1

    stored = (await client.get(f"/api/v1/units/{created['id']}")).json()
    assert stored["state"] == "deleted"


async def test_delete_unknown_unit_returns_404(client):
    res = await client.delete(f"/api/v1/units/{uuid4()}")
    assert res.status_code == 404


class _UnreachableDatabase:
    """Stands in for AsyncSession when the database connection is gone."""

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    async def rollback(self):
        pass

    async def close(self):
        pass


async def test_database_failure_returns_503_envelope(client):
    async def unreachable_db():
        yield _UnreachableDatabase()

    app.dependency_overrides[get_db] = unreachable_db

    res = await client.get(f"/api/v1/units/{uuid4()}")

    assert res.status_code == 503
    error = res.json()["error"]
    assert error["code"] == "REPOSITORY_ERROR"
    assert error["category"] == "database"
    assert error["severity"] == "critical"
    assert error["context"]["operation"] == "get_by_id"
