# File: tests/test_clients.py | Version: 1.0 | Path: /tests/test_clients.py
import asyncio
import json

import httpx
import pytest

from taskviews.clients import (
    HttpColumnRegistry,
    HttpPersistenceBridge,
    HttpPriorityRegistry,
    HttpRecordSource,
)
from taskviews.clients._http import async_client, sync_client
from taskviews.core.errors import PersistenceError, RecordFetchError
from taskviews.store.columns import BUILTIN_COLUMNS

BASE = "http://dashboard.test"


def _async(handler):
    return async_client(base_url=BASE, token="tkn", transport=httpx.MockTransport(handler))


def _sync(handler):
    return sync_client(base_url=BASE, token="tkn", transport=httpx.MockTransport(handler))


def _fetch(handler, partition, subject_id=None):
    async def run():
        async with _async(handler) as client:
            return await HttpRecordSource(client).fetch(partition, subject_id)

    return asyncio.run(run())


def test_record_source_requests_partition_with_token_and_normalizes():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["tab"] = request.url.params.get("tab")
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[{"_id": 7, "assignedTo": "u1", "title": "GST"}])

    records = _fetch(handler, "execution")
    assert seen == {"path": "/api/tasks/received", "tab": "execution", "auth": "Bearer tkn"}
    assert records == [{"_id": 7, "id": "7", "assignedTo": {"id": "u1"}, "title": "GST"}]


def test_record_source_guidance_and_subject_paths():
    paths = []

    def handler(request):
        paths.append((request.url.path, request.url.params.get("tab")))
        return httpx.Response(200, json=[])

    _fetch(handler, "guidance")
    _fetch(handler, "completed", subject_id="u9")
    _fetch(handler, "guidance", subject_id="u9")
    assert paths == [
        ("/api/tasks/received/guidance", None),
        ("/api/tasks/received/user/u9", "completed"),
        ("/api/tasks/received/user/u9/guidance", None),
    ]


def test_record_source_http_error_becomes_fetch_error():
    with pytest.raises(RecordFetchError) as exc:
        _fetch(lambda request: httpx.Response(503), "completed")
    assert exc.value.partition == "completed"
    assert "503" in str(exc.value)


def test_record_source_transport_error_becomes_fetch_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RecordFetchError):
        _fetch(handler, "execution")


def test_record_source_rejects_non_list_payload():
    with pytest.raises(RecordFetchError):
        _fetch(lambda request: httpx.Response(200, json={"message": "nope"}), "execution")


def test_column_registry_appends_active_custom_columns():
    def handler(request):
        assert request.url.path == "/api/custom-columns"
        return httpx.Response(
            200,
            json=[
                {"name": "pan", "label": "PAN", "isActive": True},
                {"name": "old", "label": "Old", "isActive": False},
                {"label": "no name"},
            ],
        )

    async def run():
        async with _async(handler) as client:
            return await HttpColumnRegistry(client).list_columns()

    cols = asyncio.run(run())
    assert len(cols) == len(BUILTIN_COLUMNS) + 1
    assert cols[-1].id == "pan"
    assert cols[-1].is_custom is True
    assert cols[-1].default_width == 150


def test_priority_registry_parses_definitions():
    def handler(request):
        return httpx.Response(
            200,
            json=[
                {"name": "urgent", "order": 1, "isDefault": True},
                {"name": "critical", "order": 10, "isDefault": False},
            ],
        )

    async def run():
        async with _async(handler) as client:
            return await HttpPriorityRegistry(client).list_priorities()

    defs = asyncio.run(run())
    assert [(d.name, d.rank, d.is_default) for d in defs] == [
        ("urgent", 1, True),
        ("critical", 10, False),
    ]


def test_http_persistence_bridge_load_and_save():
    calls = []

    def handler(request):
        calls.append((request.method, request.url.path))
        if request.method == "GET":
            return httpx.Response(200, json={"views": [{"id": "a"}]})
        assert json.loads(request.content) == {"state": {"views": []}}
        return httpx.Response(200, json={"success": True})

    with _sync(handler) as client:
        bridge = HttpPersistenceBridge(client)
        assert bridge.load("receivedTasks") == {"views": [{"id": "a"}]}
        bridge.save("receivedTasks", {"views": []})
    assert calls == [("GET", "/view-state/receivedTasks"), ("POST", "/view-state/receivedTasks")]


def test_http_persistence_bridge_empty_state_is_none():
    with _sync(lambda request: httpx.Response(200, json={})) as client:
        assert HttpPersistenceBridge(client).load("receivedTasks") is None


def test_http_persistence_bridge_wraps_errors():
    with _sync(lambda request: httpx.Response(500)) as client:
        bridge = HttpPersistenceBridge(client)
        with pytest.raises(PersistenceError):
            bridge.load("receivedTasks")
        with pytest.raises(PersistenceError):
            bridge.save("receivedTasks", {})
