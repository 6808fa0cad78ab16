"""Attach downloaded preview images to saved links."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.clients.downloader import InvalidURLError, ThumbnailDownloader, thumbnail_downloader
from app.core.config import settings
from app.services import link_service
from app.utils.redaction import redact_secrets

logger = logging.getLogger("app.jobs.thumbnails")


async def attach_thumbnail(
    session: AsyncSession,
    link_id: uuid.UUID,
    *,
    downloader: ThumbnailDownloader | None = None,
) -> dict[str, Any]:
    """Download the link's metadata image and attach it as its thumbnail.

    Invalid image URLs discard the job for good. Every other failure is
    raised so the queue's retry policy can take another pass. Running twice
    downloads twice and replaces the attachment.
    """
    link = await link_service.get_link(session, link_id)
    if link is None:
        logger.info("Skipping thumbnail for missing link %s", link_id)
        return {"status": "skipped", "reason": "link_missing", "link_id": str(link_id)}
    if not link.image:
        return {"status": "skipped", "reason": "no_image", "link_id": str(link_id)}

    downloader = downloader or thumbnail_downloader
    try:
        downloaded = await downloader.download(link.image)
    except InvalidURLError as exc:
        logger.warning(
            "Discarding thumbnail job for link %s; invalid image URL %s: %s",
            link_id,
            redact_secrets(link.image),
            redact_secrets(str(exc)),
        )
        return {"status": "discarded", "reason": "invalid_url", "link_id": str(link_id)}

    thumbnail = await link_service.attach_thumbnail(session, link, downloaded)
    return {
        "status": "attached",
        "link_id": str(link_id),
        "filename": thumbnail.filename,
        "byte_size": thumbnail.byte_size,
    }


def attach_thumbnail_job(*, link_id: str) -> dict[str, Any]:
    """RQ-friendly wrapper around attach_thumbnail."""

    async def _run() -> dict[str, Any]:
        # Connections belong to the loop that opened them; this loop lives for one job.
        engine = create_async_engine(settings.database_url, future=True, poolclass=NullPool)
        job_session = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
        try:
            async with job_session() as session:
                return await attach_thumbnail(session, uuid.UUID(link_id))
        finally:
            await engine.dispose()

    summary = asyncio.run(_run())
    logger.info("Thumbnail job for link %s finished: %s", link_id, summary["status"])
    return summary
