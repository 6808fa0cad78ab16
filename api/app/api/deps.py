import ipaddress
import uuid

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.clients.microlink import MicrolinkClient, microlink_client
from app.core.config import settings
from app.db.session import get_session
from app.models.link import Link
from app.services import link_service


async def get_db() -> AsyncSession:
    async for session in get_session():
        yield session


def get_microlink_client() -> MicrolinkClient:
    return microlink_client


async def get_link_or_404(link_id: uuid.UUID, session: AsyncSession = Depends(get_db)) -> Link:
    link = await link_service.get_link(session, link_id)
    if not link:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    return link


def _entry_matches(entry: str, candidate: str) -> bool:
    """Return True if an allowlist entry matches a candidate host/IP."""
    try:
        network = ipaddress.ip_network(entry, strict=False)
        return ipaddress.ip_address(candidate) in network
    except ValueError:
        return entry.casefold() == candidate.casefold()


def is_allowlisted(request: Request) -> bool:
    """Check request client/host headers against the health allowlist."""
    if not settings.health_allowlist:
        return False
    candidates: list[str] = []
    if request.client and request.client.host:
        candidates.append(request.client.host)
    host_header = request.headers.get("host")
    if host_header:
        candidates.append(host_header.split(":")[0])
    return any(
        entry and _entry_matches(entry, candidate)
        for candidate in candidates
        for entry in settings.health_allowlist
    )


def require_ops_access(request: Request) -> None:
    if not is_allowlisted(request):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Ops access restricted")
