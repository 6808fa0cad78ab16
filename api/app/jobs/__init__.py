"""Background job modules for RQ workers."""

from .thumbnails import attach_thumbnail, attach_thumbnail_job

__all__ = [
    "attach_thumbnail",
    "attach_thumbnail_job",
]
