"""Persistence helpers for links and their thumbnails."""

from __future__ import annotations

import hashlib
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload, undefer

from app.clients.downloader import DownloadedFile
from app.models.link import METADATA_KEYS, Link, LinkThumbnail
from app.schema.link import LinkCreate, LinkUpdate
from app.utils.redaction import redact_secrets

logger = logging.getLogger("app.services.link_service")


async def create_link(session: AsyncSession, payload: LinkCreate) -> Link:
    """Persist a link with the metadata captured by the preview form."""
    link = Link(url=payload.url, meta_data={})
    for key in METADATA_KEYS:
        setattr(link, key, getattr(payload, key))
    session.add(link)
    await session.commit()
    logger.info("Created link %s for %s", link.id, redact_secrets(link.url))
    return await get_link(session, link.id)  # type: ignore[return-value]


async def get_link(session: AsyncSession, link_id: uuid.UUID) -> Link | None:
    result = await session.execute(
        select(Link)
        .where(Link.id == link_id)
        .options(selectinload(Link.thumbnail))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_links(session: AsyncSession, *, limit: int = 50, offset: int = 0) -> list[Link]:
    result = await session.execute(
        select(Link)
        .options(selectinload(Link.thumbnail))
        .order_by(Link.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all())


async def update_link(session: AsyncSession, link: Link, payload: LinkUpdate) -> Link:
    """Apply only the fields present in the payload."""
    changes = payload.model_dump(exclude_unset=True)
    if "url" in changes and changes["url"] is not None:
        link.url = changes["url"]
    for key in METADATA_KEYS:
        if key in changes:
            setattr(link, key, changes[key])
    await session.commit()
    logger.info("Updated link %s (%s)", link.id, ", ".join(sorted(changes)) or "no changes")
    return await get_link(session, link.id)  # type: ignore[return-value]


async def delete_link(session: AsyncSession, link: Link) -> None:
    await session.delete(link)
    await session.commit()
    logger.info("Deleted link %s", link.id)


async def get_thumbnail(session: AsyncSession, link_id: uuid.UUID) -> LinkThumbnail | None:
    """Load the thumbnail row including its bytes."""
    result = await session.execute(
        select(LinkThumbnail)
        .where(LinkThumbnail.link_id == link_id)
        .options(undefer(LinkThumbnail.data))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def attach_thumbnail(session: AsyncSession, link: Link, downloaded: DownloadedFile) -> LinkThumbnail:
    """Store ``downloaded`` as the link's thumbnail, replacing any previous one."""
    existing = await session.execute(select(LinkThumbnail).where(LinkThumbnail.link_id == link.id))
    previous = existing.scalar_one_or_none()
    if previous is not None:
        await session.delete(previous)
        await session.flush()

    thumbnail = LinkThumbnail(
        link_id=link.id,
        filename=downloaded.original_filename,
        content_type=downloaded.content_type,
        byte_size=downloaded.size,
        checksum=hashlib.sha256(downloaded.content).hexdigest(),
        source_url=downloaded.url,
        data=downloaded.content,
    )
    session.add(thumbnail)
    await session.commit()
    logger.info(
        "Attached thumbnail %s (%d bytes) to link %s%s",
        thumbnail.filename,
        thumbnail.byte_size,
        link.id,
        " replacing previous attachment" if previous is not None else "",
    )
    return thumbnail
