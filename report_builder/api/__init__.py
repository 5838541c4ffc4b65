"""
Report Builder API package.

Routers:
- query: GET /api/query report component queries (+ OPTIONS pre-flight)
"""

from fastapi import APIRouter

from report_builder.api.query import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    preflight_middleware,
    register_exception_handlers,
    router as query_router,
)

# Create main API router
api_router = APIRouter()

api_router.include_router(query_router, prefix="/api", tags=["query"])

__all__ = [
    "CORS_ALLOW_HEADERS",
    "CORS_ALLOW_METHODS",
    "api_router",
    "preflight_middleware",
    "query_router",
    "register_exception_handlers",
]
