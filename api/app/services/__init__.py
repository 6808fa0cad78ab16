from . import link_service

__all__ = [
    "link_service",
]
"""Service-layer helpers for API operations."""
