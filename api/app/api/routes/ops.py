from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import require_ops_access
from app.services.task_queue import task_queue

router = APIRouter()


@router.get("/queues", tags=["ops"], dependencies=[Depends(require_ops_access)])
async def queue_health() -> dict:
    """
    Minimal operations view of Redis/RQ health for the thumbnail queue.

    Restricted to allowlisted hosts so queue internals stay private.
    """

    return task_queue.snapshot()
