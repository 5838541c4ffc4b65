"""
FastAPI router for the report component query endpoint.

Implements GET /api/query?queryName=<name>&<param>=<value>... and its OPTIONS
pre-flight.

API Contract:
- 200: JSON array (strings for getAnalysisTypes, row objects otherwise)
- 400: { error } when queryName is missing or unknown, or a required parameter is missing
- 500: { error, details } when BigQuery fails
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fastapi import APIRouter, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from report_builder.core.config import get_settings
from report_builder.core.dependencies import DispatcherDep
from report_builder.core.exceptions import QueryError
from report_builder.models.schemas import ErrorResponse


# Configure logging
logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = [
    "X-CSRF-Token",
    "X-Requested-With",
    "Accept",
    "Accept-Version",
    "Content-Length",
    "Content-MD5",
    "Content-Type",
    "Date",
    "X-Api-Version",
]
CORS_ALLOW_METHODS = ["GET"]


# =============================================================================
# Pre-flight Handling
# =============================================================================

def preflight_headers(origin: Optional[str]) -> Dict[str, str]:
    """
    Build the CORS headers sent with every pre-flight answer.

    The allow-origin header is '*' when all origins are allowed, the request
    origin when it is listed, and absent otherwise.
    """
    allowed_origins = get_settings().cors_allow_origins
    headers = {
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    }
    if "*" in allowed_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin in allowed_origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


def preflight_response(request: Request) -> Response:
    return Response(status_code=200, headers=preflight_headers(request.headers.get("origin")))


async def preflight_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """
    Answer browser pre-flights with 200 and an empty body.

    Must sit outside CORSMiddleware, which would otherwise reply with a
    non-empty body, or 400 for request headers outside CORS_ALLOW_HEADERS.
    """
    if request.method == "OPTIONS" and "access-control-request-method" in request.headers:
        return preflight_response(request)
    return await call_next(request)


# =============================================================================
# Router Definition
# =============================================================================

router = APIRouter()


# =============================================================================
# Error Handling
# =============================================================================

async def query_error_handler(request: Request, exc: QueryError) -> JSONResponse:
    """Render a QueryError as its status code and { error[, details] } body."""
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QueryError, query_error_handler)


# =============================================================================
# Endpoint Implementations
# =============================================================================

@router.get(
    "/query",
    response_model=List[Any],
    responses={
        400: {"model": ErrorResponse, "description": "Unknown query or missing parameter"},
        500: {"model": ErrorResponse, "description": "BigQuery failure"},
    },
)
async def run_query(
    request: Request,
    dispatcher: DispatcherDep,
    queryName: Optional[str] = Query(default=None, description="Name of the query to run"),
) -> List[Any]:
    """
    Run a named report component query.

    Every query parameter other than queryName is offered to the dispatcher,
    which binds the ones the query requires and ignores the rest.
    """
    params = {
        key: value
        for key, value in request.query_params.items()
        if key != 'queryName'
    }
    # BigQuery client calls block; keep them off the event loop
    return await run_in_threadpool(dispatcher.execute, queryName, params)


@router.options("/query")
async def query_preflight(request: Request) -> Response:
    """Answer OPTIONS requests that are not browser pre-flights the same way."""
    return preflight_response(request)
