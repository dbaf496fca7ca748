"""Endpoint management tests — /api/endpoints CRUD.

Tests cover:
    - create: 201 payload shape, generated id, wire timestamp
    - create idempotent on a supplied id (200, stored definition untouched)
    - tableId linking: success, and warning when the table is missing
    - Validation failures answer 400 with field details
    - update: partial changes, relink / unlink, 404 for unknown ids
    - delete: cascades records, request logs and table links; 404 when unknown
    - listing carries data and requestLogs
"""

from sqlalchemy import func, select

from mockapi.models.endpoint_record import EndpointRecord
from mockapi.models.request_log import RequestLog
from mockapi.models.table_endpoint import TableEndpoint


async def _count(session_factory, model, **where) -> int:
    async with session_factory() as session:
        stmt = select(func.count()).select_from(model)
        for column, value in where.items():
            stmt = stmt.where(getattr(model, column) == value)
        return (await session.execute(stmt)).scalar_one()


# ─── Create ──────────────────────────────────────────────────────

async def test_create_endpoint(client):
    res = await client.post("/api/endpoints", json={
        "name": "Users", "path": "/users", "method": "post",
        "fields": [{"name": "name", "type": "string", "required": True}],
    })
    assert res.status_code == 201
    body = res.json()
    assert body["id"]
    assert body["method"] == "POST"
    assert body["fields"] == [
        {"name": "name", "type": "string", "required": True, "filterable": False},
    ]
    assert body["data"] == []
    assert body["warnings"] == []
    assert body["createdAt"].endswith("Z")


async def test_create_is_idempotent_on_id(client):
    first = await client.post("/api/endpoints", json={
        "id": "ep-1", "name": "Original", "path": "/orig", "method": "POST",
    })
    assert first.status_code == 201

    second = await client.post("/api/endpoints", json={
        "id": "ep-1", "name": "Replacement", "path": "/other", "method": "GET",
    })
    assert second.status_code == 200
    assert second.json()["name"] == "Original"
    assert second.json()["path"] == "/orig"

    listing = (await client.get("/api/endpoints")).json()
    assert [e["id"] for e in listing] == ["ep-1"]


async def test_create_links_to_existing_table(client):
    table = (await client.post("/api/tables", json={"name": "People"})).json()
    res = await client.post("/api/endpoints", json={
        "name": "Signups", "path": "/signups", "method": "POST", "tableId": table["id"],
    })
    assert res.status_code == 201
    assert res.json()["warnings"] == []

    tables = (await client.get("/api/tables")).json()
    assert tables[0]["endpointIds"] == [res.json()["id"]]


async def test_create_with_missing_table_warns(client):
    res = await client.post("/api/endpoints", json={
        "name": "Signups", "path": "/signups", "method": "POST", "tableId": "nope",
    })
    assert res.status_code == 201
    warnings = res.json()["warnings"]
    assert len(warnings) == 1
    assert "nope" in warnings[0]

    listing = (await client.get("/api/endpoints")).json()
    assert [e["path"] for e in listing] == ["/signups"]


async def test_create_rejects_invalid_path(client):
    res = await client.post("/api/endpoints", json={"name": "Bad", "path": "no slash"})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any(d["field"].endswith("path") for d in error["details"])


async def test_create_rejects_missing_name(client):
    res = await client.post("/api/endpoints", json={"path": "/x"})
    assert res.status_code == 400


# ─── Update ──────────────────────────────────────────────────────

async def test_update_changes_supplied_keys_only(client, declare_endpoint):
    created = await declare_endpoint("/users", "POST", [{"name": "name"}], name="Users")

    res = await client.put(f"/api/endpoints/{created['id']}", json={"name": "Members"})
    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "Members"
    assert body["path"] == "/users"
    assert body["method"] == "POST"
    assert body["fields"] == created["fields"]


async def test_update_path_moves_dispatch(client, declare_endpoint):
    created = await declare_endpoint("/old", "POST")
    await client.put(f"/api/endpoints/{created['id']}", json={"path": "/new"})

    assert (await client.post("/api/old", json={"a": 1})).status_code == 404
    assert (await client.post("/api/new", json={"a": 1})).status_code == 201


async def test_update_fields_changes_validation(client, declare_endpoint):
    created = await declare_endpoint("/users", "POST")
    await client.put(f"/api/endpoints/{created['id']}", json={
        "fields": [{"name": "email", "required": True}],
    })
    res = await client.post("/api/users", json={"name": "x"})
    assert res.status_code == 400
    assert res.json()["error"]["details"]["missing"] == ["email"]


async def test_update_relinks_table(client, declare_endpoint):
    a = (await client.post("/api/tables", json={"name": "A"})).json()
    b = (await client.post("/api/tables", json={"name": "B"})).json()
    created = await declare_endpoint("/users", "POST", tableId=a["id"])

    res = await client.put(f"/api/endpoints/{created['id']}", json={"tableId": b["id"]})
    assert res.json()["warnings"] == []

    tables = {t["name"]: t for t in (await client.get("/api/tables")).json()}
    assert tables["A"]["endpointIds"] == []
    assert tables["B"]["endpointIds"] == [created["id"]]


async def test_update_with_null_table_unlinks(client, declare_endpoint):
    table = (await client.post("/api/tables", json={"name": "A"})).json()
    created = await declare_endpoint("/users", "POST", tableId=table["id"])

    await client.put(f"/api/endpoints/{created['id']}", json={"tableId": None})
    tables = (await client.get("/api/tables")).json()
    assert tables[0]["endpointIds"] == []


async def test_update_unknown_endpoint_is_404(client):
    res = await client.put("/api/endpoints/missing", json={"name": "x"})
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


# ─── Delete ──────────────────────────────────────────────────────

async def test_delete_cascades(client, declare_endpoint, test_session_factory):
    table = (await client.post("/api/tables", json={"name": "People"})).json()
    doomed = await declare_endpoint("/doomed", "POST", tableId=table["id"])
    survivor = await declare_endpoint("/survivor", "POST", tableId=table["id"])
    await client.post("/api/doomed", json={"a": 1})
    await client.post("/api/survivor", json={"b": 2})

    res = await client.delete(f"/api/endpoints/{doomed['id']}")
    assert res.status_code == 200
    assert res.json() == {"message": "Endpoint deleted successfully"}

    assert await _count(test_session_factory, EndpointRecord, endpoint_id=doomed["id"]) == 0
    assert await _count(test_session_factory, RequestLog, endpoint_id=doomed["id"]) == 0
    assert await _count(test_session_factory, TableEndpoint, endpoint_id=doomed["id"]) == 0
    assert await _count(test_session_factory, EndpointRecord, endpoint_id=survivor["id"]) == 1

    assert (await client.get("/api/doomed")).status_code == 404
    assert [r["b"] for r in (await client.get("/api/survivor")).json()] == [2]


async def test_delete_unknown_endpoint_is_404(client):
    res = await client.delete("/api/endpoints/missing")
    assert res.status_code == 404


# ─── List ────────────────────────────────────────────────────────

async def test_list_includes_data_and_logs(client, declare_endpoint):
    created = await declare_endpoint("/notes", "POST")
    await client.post("/api/notes", json={"text": "hello"})

    listing = (await client.get("/api/endpoints")).json()
    entry = next(e for e in listing if e["id"] == created["id"])
    assert [r["text"] for r in entry["data"]] == ["hello"]
    assert len(entry["requestLogs"]) == 1
