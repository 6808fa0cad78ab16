"""CRUD endpoints for links submitted through the preview form."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_link_or_404
from app.models.link import Link
from app.schema.link import LinkCreate, LinkRead, LinkUpdate
from app.services import link_service
from app.services.task_queue import task_queue

router = APIRouter()


@router.get("", response_model=list[LinkRead])
async def list_links(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_db),
) -> list[LinkRead]:
    """List saved links, newest first."""
    links = await link_service.list_links(session, limit=limit, offset=offset)
    return [LinkRead.model_validate(link) for link in links]


@router.post("", response_model=LinkRead, status_code=status.HTTP_201_CREATED)
async def create_link(
    payload: LinkCreate,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db),
) -> LinkRead:
    """Save a link and queue its thumbnail download."""
    link = await link_service.create_link(session, payload)
    background_tasks.add_task(task_queue.enqueue_thumbnail_attachment, link_id=link.id)
    return LinkRead.model_validate(link)


@router.get("/{link_id}", response_model=LinkRead)
async def get_link(link: Link = Depends(get_link_or_404)) -> LinkRead:
    return LinkRead.model_validate(link)


@router.patch("/{link_id}", response_model=LinkRead)
async def update_link(
    payload: LinkUpdate,
    background_tasks: BackgroundTasks,
    link: Link = Depends(get_link_or_404),
    session: AsyncSession = Depends(get_db),
) -> LinkRead:
    """Update the URL and/or metadata; the thumbnail is refreshed afterwards."""
    updated = await link_service.update_link(session, link, payload)
    background_tasks.add_task(task_queue.enqueue_thumbnail_attachment, link_id=updated.id)
    return LinkRead.model_validate(updated)


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_link(
    link: Link = Depends(get_link_or_404),
    session: AsyncSession = Depends(get_db),
) -> Response:
    await link_service.delete_link(session, link)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{link_id}/thumbnail")
async def get_thumbnail(
    link: Link = Depends(get_link_or_404),
    session: AsyncSession = Depends(get_db),
) -> Response:
    """Serve the attached thumbnail bytes."""
    thumbnail = await link_service.get_thumbnail(session, link.id)
    if not thumbnail:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Thumbnail not attached")
    filename = thumbnail.filename.encode("ascii", "ignore").decode().replace('"', "") or "thumbnail"
    return Response(
        content=thumbnail.data,
        media_type=thumbnail.content_type or "application/octet-stream",
        headers={"Content-Disposition": f'inline; filename="{filename}"', "ETag": f'"{thumbnail.checksum}"'},
    )
