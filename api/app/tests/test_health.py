from __future__ import annotations

import pytest

from app.core.config import settings
from app.services.task_queue import task_queue


@pytest.mark.asyncio
async def test_health_reports_ok_without_detail(client, monkeypatch):
    called = False

    def _snapshot_stub() -> dict[str, object]:
        nonlocal called
        called = True
        return {}

    monkeypatch.setattr(task_queue, "snapshot", _snapshot_stub)

    response = await client.get("/api/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload == {"status": "ok"}
    assert called is False


@pytest.mark.asyncio
async def test_health_allows_allowlisted_clients_queue_detail(client, monkeypatch):
    monkeypatch.setattr(settings, "health_allowlist", ["testserver"])

    response = await client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["queue"]["status"] == "offline"
    assert payload["queue"]["inline_fallback"] is True


@pytest.mark.asyncio
async def test_health_degrades_when_queue_has_no_workers(client, monkeypatch):
    def _snapshot_stub() -> dict[str, object]:
        return {"status": "degraded", "warnings": ["no_workers"]}

    monkeypatch.setattr(settings, "health_allowlist", ["127.0.0.0/8", "testserver"])
    monkeypatch.setattr(task_queue, "snapshot", _snapshot_stub)
    monkeypatch.setattr(task_queue, "_enabled", True)

    response = await client.get("/api/health")
    payload = response.json()
    assert payload["status"] == "degraded"
    assert payload["queue"]["warnings"] == ["no_workers"]
