"""Aggregate all API routers."""

from fastapi import APIRouter
from cover_service.api.v1.health import router as health_router
from cover_service.api.v1.covers import router as covers_router

api_router = APIRouter(prefix="/api")
api_router.include_router(health_router, tags=["health"])
api_router.include_router(covers_router, tags=["covers"])
