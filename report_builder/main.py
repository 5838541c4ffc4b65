"""
FastAPI application entry point for the Report Builder API.

Configures logging and CORS, builds the BigQuery client and QueryDispatcher
once at startup, and registers the query router.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from report_builder import __version__
from report_builder.api import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    api_router,
    preflight_middleware,
    register_exception_handlers,
)
from report_builder.core.config import get_settings
from report_builder.core.warehouse import create_bigquery_client
from report_builder.services.dispatcher import QueryDispatcher

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    On startup:
        - Build the BigQuery client from settings
        - Store a QueryDispatcher on app.state for the DispatcherDep dependency

    On shutdown:
        - Close the BigQuery client's HTTP session
    """
    logger.info("Report Builder API starting")
    client = create_bigquery_client(settings)
    app.state.dispatcher = QueryDispatcher(client, settings)
    logger.info("BigQuery query dispatcher initialized")

    yield

    logger.info("Report Builder API shutting down")
    client.close()


# Create FastAPI application
app = FastAPI(
    title="Report Builder API",
    version=__version__,
    description=(
        "Serverless-style proxy for report component queries. "
        "Serves analysis types, filter, segmentation and metric catalogs, "
        "and property value options from BigQuery."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=CORS_ALLOW_METHODS,
    allow_headers=CORS_ALLOW_HEADERS,
)

# Registered last so it wraps CORSMiddleware and sees pre-flights first
app.middleware("http")(preflight_middleware)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancer probes.

    Returns:
        Dict with status 'healthy'
    """
    return {"status": "healthy"}


@app.get("/")
async def root():
    """
    Root endpoint providing API information.

    Returns:
        Dict with API name and version
    """
    return {
        "name": "Report Builder API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "report_builder.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
