"""RQ task queue wrapper with inline fallback for local/test runs."""

from __future__ import annotations

import asyncio
import inspect
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from redis import Redis
from redis.exceptions import RedisError
from rq import Queue, Retry
from rq.registry import DeferredJobRegistry, FailedJobRegistry, ScheduledJobRegistry, StartedJobRegistry
from rq.worker import Worker

from app.core.config import settings
from app.utils.redaction import redact_secrets

logger = logging.getLogger("app.services.task_queue")

# Default retry profile for transient failures; permanent ones are discarded by the job itself.
DEFAULT_RETRY = Retry(max=3, interval=[5, 15, 30])


async def _call_inline(func: Callable[..., Any], kwargs: dict[str, Any]) -> Any:
    """Run a job function in-process; sync jobs get their own thread and event loop."""
    if inspect.iscoroutinefunction(func):
        return await func(**kwargs)
    return await asyncio.to_thread(func, **kwargs)


class TaskQueue:
    """Thin wrapper around RQ that can fall back to inline execution."""

    def __init__(self) -> None:
        self.queue_names: list[str] = settings.worker_queue_names or ["default"]
        self._connection: Redis | None = None
        self._enabled = False
        self._bootstrap()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def connection(self) -> Redis | None:
        return self._connection

    def _bootstrap(self) -> None:
        """Initialize Redis connectivity unless disabled for tests."""
        if settings.environment.lower() == "test":
            logger.info("Task queue disabled in test environment")
            return
        try:
            connection = Redis.from_url(settings.redis_url)
            connection.ping()
        except Exception as exc:  # pragma: no cover - network/redis specific
            logger.warning("Redis unavailable; running jobs inline: %s", redact_secrets(str(exc)))
            self._connection = None
            self._enabled = False
            return
        self._connection = connection
        self._enabled = True
        logger.info("Task queue ready (queues: %s)", ", ".join(self.queue_names))

    def _resolve_queue_name(self, queue_name: str | None) -> str:
        default = self.queue_names[0] if self.queue_names else "default"
        if queue_name and queue_name in self.queue_names:
            return queue_name
        return default

    def get_queue(self, queue_name: str | None = None) -> Queue:
        """Return a configured queue instance for enqueuing jobs."""
        if not self._connection:
            raise RuntimeError("Queue connection not initialized")
        return Queue(self._resolve_queue_name(queue_name), connection=self._connection)

    async def enqueue_thumbnail_attachment(self, *, link_id: uuid.UUID) -> Any:
        """Queue the thumbnail download for a freshly saved link."""
        from app.jobs.thumbnails import attach_thumbnail_job

        return await self.enqueue(
            attach_thumbnail_job,
            queue_name="thumbnails",
            timeout_seconds=settings.thumbnail_job_timeout_seconds,
            description=f"thumbnail:{link_id}",
            link_id=str(link_id),
        )

    async def enqueue(
        self,
        func: Callable[..., Any],
        *,
        queue_name: str | None = None,
        timeout_seconds: int = 60,
        retry: Retry | None = DEFAULT_RETRY,
        description: str | None = None,
        **kwargs: Any,
    ) -> Any:
        """Enqueue a job without waiting; run it inline when no queue is reachable.

        Returns the RQ job when queued, otherwise the job's own return value.
        """
        if not self._enabled or not self._connection:
            return await _call_inline(func, kwargs)

        def _enqueue() -> Any:
            queue = self.get_queue(queue_name)
            job = queue.enqueue(
                func,
                kwargs=kwargs,
                job_timeout=timeout_seconds,
                description=description,
                retry=retry,
            )
            logger.info("Enqueued %s on %s as %s", description or func.__name__, queue.name, job.id)
            return job

        try:
            return await asyncio.to_thread(_enqueue)
        except RedisError as exc:  # pragma: no cover - network/redis specific
            logger.warning("Falling back to inline execution after queue failure: %s", redact_secrets(str(exc)))
            return await _call_inline(func, kwargs)

    def snapshot(self) -> dict[str, Any]:
        """Return a diagnostic snapshot of queue and worker state."""
        if not self._connection:
            return {
                "status": "offline",
                "queues": [],
                "workers": [],
                "error": "queue connection not initialized",
                "redis_url": redact_secrets(settings.redis_url),
            }

        queues: list[dict[str, Any]] = []
        for name in self.queue_names:
            queue = Queue(name, connection=self._connection)
            queues.append(
                {
                    "name": name,
                    "size": queue.count,
                    "deferred": len(DeferredJobRegistry(queue=queue)),
                    "scheduled": len(ScheduledJobRegistry(queue=queue)),
                    "started": len(StartedJobRegistry(queue=queue)),
                    "failed": len(FailedJobRegistry(queue=queue)),
                }
            )

        workers: list[dict[str, Any]] = []
        try:
            for worker in Worker.all(connection=self._connection):
                workers.append(
                    {
                        "name": worker.name,
                        "state": getattr(worker, "state", "unknown"),
                        "queues": list(worker.queue_names()),
                        "current_job_id": worker.get_current_job_id(),
                    }
                )
        except RedisError as exc:  # pragma: no cover - network/redis specific
            logger.warning("Unable to list workers: %s", exc)

        warnings: list[str] = []
        if not workers:
            warnings.append("no_workers")
        return {
            "status": "online" if not warnings else "degraded",
            "queues": queues,
            "workers": workers,
            "redis_url": redact_secrets(settings.redis_url),
            "warnings": warnings,
            "checked_at": datetime.now(timezone.utc).isoformat(),
        }


task_queue = TaskQueue()
