from __future__ import annotations

import logging

from redis import Redis
from rq import Queue, Worker

from app.core.config import settings
from app.utils.redaction import redact_secrets

WORKER_LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"


def _configure_logging() -> None:
    logging.basicConfig(level=settings.log_level, format=WORKER_LOG_FORMAT, force=True)


def _queue_objects(connection: Redis) -> list[Queue]:
    return [Queue(name, connection=connection) for name in settings.worker_queue_names]


def main() -> None:
    _configure_logging()
    logger = logging.getLogger("app.worker")
    redis_connection = Redis.from_url(settings.redis_url)
    queues = _queue_objects(redis_connection)
    if not queues:
        logger.error("No worker queues configured; set WORKER_QUEUE_NAMES or rely on the default.")
        return
    logger.info(
        "Starting worker for queues %s on %s",
        ", ".join(settings.worker_queue_names),
        redact_secrets(settings.redis_url),
    )
    worker = Worker(queues, connection=redis_connection, name="link-preview-worker")
    # RQ installs its own SIGINT/SIGTERM handlers for a warm shutdown.
    worker.work()
    logger.info("Worker stopped")


if __name__ == "__main__":
    main()
