"""API tests for link CRUD and thumbnail scheduling."""

from __future__ import annotations

import uuid

import pytest

from app.models.link import Link
from app.services import link_service
from app.services.task_queue import task_queue
from app.tests.utils import png_file


@pytest.fixture()
def queued(monkeypatch: pytest.MonkeyPatch) -> list[uuid.UUID]:
    calls: list[uuid.UUID] = []

    async def _record(*, link_id: uuid.UUID) -> None:
        calls.append(link_id)

    monkeypatch.setattr(task_queue, "enqueue_thumbnail_attachment", _record)
    return calls


@pytest.mark.asyncio
async def test_create_link_persists_metadata_and_queues_thumbnail(client, queued):
    payload = {
        "url": "https://example.com/article",
        "title": "T",
        "description": "D",
        "image": "https://img/x.png",
    }

    response = await client.post("/api/links", json=payload)

    assert response.status_code == 201
    body = response.json()
    assert body["url"] == "https://example.com/article"
    assert body["meta_data"] == {"description": "D", "image": "https://img/x.png", "title": "T"}
    assert body["title"] == "T"
    assert body["thumbnail"] is None
    assert queued == [uuid.UUID(body["id"])]


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["", "   "])
async def test_create_link_requires_url(client, queued, url):
    response = await client.post("/api/links", json={"url": url, "title": "T"})

    assert response.status_code == 422
    assert queued == []


@pytest.mark.asyncio
async def test_create_link_rejects_missing_url(client, queued):
    response = await client.post("/api/links", json={"title": "T"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_and_get_links(client, queued):
    first = await client.post("/api/links", json={"url": "https://one.example"})
    second = await client.post("/api/links", json={"url": "https://two.example"})
    assert first.status_code == second.status_code == 201

    listing = await client.get("/api/links")
    assert listing.status_code == 200
    assert {item["url"] for item in listing.json()} == {"https://one.example", "https://two.example"}

    detail = await client.get(f"/api/links/{first.json()['id']}")
    assert detail.status_code == 200
    assert detail.json()["url"] == "https://one.example"

    missing = await client.get(f"/api/links/{uuid.uuid4()}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_update_link_merges_metadata_and_requeues(client, queued):
    created = await client.post(
        "/api/links", json={"url": "https://example.com", "title": "Old", "description": "Keep"}
    )
    link_id = created.json()["id"]

    response = await client.patch(f"/api/links/{link_id}", json={"title": "New", "image": "https://img/y.png"})

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "New"
    assert body["description"] == "Keep"
    assert body["image"] == "https://img/y.png"
    assert queued == [uuid.UUID(link_id), uuid.UUID(link_id)]

    blank = await client.patch(f"/api/links/{link_id}", json={"url": " "})
    assert blank.status_code == 422


@pytest.mark.asyncio
async def test_thumbnail_endpoint_serves_attachment(client, session, queued):
    link = Link(url="https://example.com", meta_data={"image": "https://img.example.com/x.png"})
    session.add(link)
    await session.commit()

    before = await client.get(f"/api/links/{link.id}/thumbnail")
    assert before.status_code == 404

    await link_service.attach_thumbnail(session, link, png_file())

    response = await client.get(f"/api/links/{link.id}/thumbnail")
    assert response.status_code == 200
    assert response.content == png_file().content
    assert response.headers["content-type"] == "image/png"
    assert 'filename="x.png"' in response.headers["content-disposition"]

    detail = await client.get(f"/api/links/{link.id}")
    assert detail.json()["thumbnail"]["filename"] == "x.png"


@pytest.mark.asyncio
async def test_delete_link_removes_thumbnail(client, session, queued):
    link = Link(url="https://example.com", meta_data={})
    session.add(link)
    await session.commit()
    await link_service.attach_thumbnail(session, link, png_file())

    response = await client.delete(f"/api/links/{link.id}")

    assert response.status_code == 204
    assert await link_service.get_link(session, link.id) is None
    assert await link_service.get_thumbnail(session, link.id) is None
