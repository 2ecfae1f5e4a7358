"""APIRouter registration for the records service."""

from __future__ import annotations

from fastapi import APIRouter

from records_api.routes.records import router as records_router

api_router = APIRouter()
api_router.include_router(records_router, tags=["Records"])

__all__ = ["api_router"]
