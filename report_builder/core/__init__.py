"""
Core infrastructure package for the Report Builder backend.

Provides:
- Configuration management via pydantic-settings
- BigQuery client construction with JSON-blob or default credentials
- The query error taxonomy
- FastAPI dependency injection utilities

Dependencies are not re-exported here: report_builder.core.dependencies
imports the services layer, which itself imports from report_builder.core.

Usage:
    from report_builder.core import get_settings, create_bigquery_client

    settings = get_settings()
    client = create_bigquery_client(settings)
"""

from report_builder.core.config import Settings, get_settings
from report_builder.core.exceptions import (
    QueryError,
    InvalidQuery,
    MissingParameter,
    BackendError,
)
from report_builder.core.warehouse import create_bigquery_client, load_service_account_info


__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Error taxonomy (from exceptions.py)
    'QueryError',
    'InvalidQuery',
    'MissingParameter',
    'BackendError',
    # BigQuery client (from warehouse.py)
    'create_bigquery_client',
    'load_service_account_info',
]
