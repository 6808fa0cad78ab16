"""FastAPI application entrypoint and health reporting.

Invariants:
- Queue detail in the health payload is only exposed to allowlisted hosts.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.deps import is_allowlisted
from app.api.router import api_router
from app.core.config import settings
from app.services.task_queue import task_queue

LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"

logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health", tags=["internal"])
@app.get(f"{settings.api_prefix}/health", tags=["internal"])
async def health(request: Request) -> dict[str, Any]:
    """Return health status and, for allowlisted hosts, the queue summary."""
    if not is_allowlisted(request):
        return {"status": "ok"}

    snapshot = task_queue.snapshot()
    queue_status = snapshot.get("status", "offline")
    status = "ok" if queue_status == "online" or not task_queue.enabled else "degraded"
    return {
        "status": status,
        "queue": {
            "status": queue_status,
            "inline_fallback": not task_queue.enabled,
            "warnings": snapshot.get("warnings", []),
        },
    }
