"""
Settings and environment management module for the Report Builder backend.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Sensible defaults for development
- Singleton pattern via @lru_cache for efficient access
- Optional BigQuery service-account credentials supplied as a JSON blob

Environment Variables:
- GOOGLE_APPLICATION_CREDENTIALS_JSON: Service account JSON (optional; falls back
  to Application Default Credentials when absent or malformed)
- BIGQUERY_PROJECT: BigQuery project ID used for query jobs (optional)
- BIGQUERY_LOCATION: BigQuery job location, e.g. 'EU' (optional)
- REPORT_COMPONENTS_TABLE: Table holding analysis types and their catalogs
- PROPERTY_VALUES_TABLE: Lookup table of enumerable property values
- CORS_ALLOW_ORIGINS: Origins allowed to call the API (default: all)
- LOG_LEVEL: Root logging level (default: INFO)

Usage:
    from report_builder.core.config import get_settings

    settings = get_settings()
    table = settings.report_components_table
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        google_application_credentials_json: Raw service account JSON for BigQuery.
        bigquery_project: Project that owns the query jobs.
        bigquery_location: Location for query jobs.
        report_components_table: Fully qualified table with per-analysis-type catalogs.
        property_values_table: Fully qualified table with property value options.
        cors_allow_origins: Origins permitted by the CORS middleware.
        log_level: Logging level name applied at startup.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',  # Ignore extra environment variables not defined in this class
        case_sensitive=False,
    )

    # =========================================================================
    # Google Cloud Credentials (Optional)
    # =========================================================================

    # Whole service account key as a JSON string, as set on serverless hosts
    # where a key file cannot be mounted. When unset the BigQuery client uses
    # ambient credential discovery (GOOGLE_APPLICATION_CREDENTIALS, gcloud, metadata).
    google_application_credentials_json: Optional[str] = None

    bigquery_project: Optional[str] = None

    bigquery_location: Optional[str] = None

    # =========================================================================
    # Warehouse Tables
    # =========================================================================

    # One row per analysis_type with repeated filter, segmentation and metric structs
    report_components_table: str = 'product-471619.report_components.dreamdata_io'

    # property_id, label, value, sort
    property_values_table: str = 'product-471619.property_values_lookup.dreamdata_io'

    # =========================================================================
    # HTTP / Runtime
    # =========================================================================

    cors_allow_origins: List[str] = ['*']

    log_level: str = 'INFO'


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The application settings instance with all configuration values.

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
