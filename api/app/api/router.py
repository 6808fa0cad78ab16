"""API router composition for all route groups."""

from fastapi import APIRouter

from .routes import links, ops, previews

api_router = APIRouter()
api_router.include_router(links.router, prefix="/links", tags=["links"])
api_router.include_router(previews.router, tags=["previews"])
api_router.include_router(ops.router, prefix="/ops", tags=["ops"])
