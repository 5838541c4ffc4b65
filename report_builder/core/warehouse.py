"""
BigQuery client construction for the Report Builder backend.

The client is built once per process in the FastAPI lifespan and handed to the
``QueryDispatcher``; nothing in this module holds a module-level client.

Credential resolution:
1. ``GOOGLE_APPLICATION_CREDENTIALS_JSON`` set and valid: service account
   credentials built from the JSON blob.
2. Unset: Application Default Credentials (``bigquery.Client()`` discovery).
3. Set but malformed (invalid JSON or rejected key): a warning is logged and
   the client falls back to default discovery. Never fatal.

Usage:
    settings = get_settings()
    client = create_bigquery_client(settings)
"""

import json
import logging
from typing import Any, Dict, Optional

from google.cloud import bigquery
from google.oauth2 import service_account

from report_builder.core.config import Settings


logger = logging.getLogger(__name__)


def load_service_account_info(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Parse the credential blob.

    Returns:
        The decoded mapping, or None when the blob is absent or not a JSON object.
    """
    if not raw or not raw.strip():
        return None

    try:
        info = json.loads(raw)
    except ValueError as e:
        logger.warning(
            f"Failed to parse GOOGLE_APPLICATION_CREDENTIALS_JSON ({e.__class__.__name__}); "
            "falling back to default credentials"
        )
        return None

    if not isinstance(info, dict):
        logger.warning(
            "GOOGLE_APPLICATION_CREDENTIALS_JSON is not a JSON object; "
            "falling back to default credentials"
        )
        return None

    return info


def create_bigquery_client(settings: Settings) -> bigquery.Client:
    """
    Build the BigQuery client from settings.

    Args:
        settings: Application settings carrying the optional credential blob,
            project and location.

    Returns:
        bigquery.Client: Client authenticated with the blob's service account,
        or with ambient credentials.
    """
    info = load_service_account_info(settings.google_application_credentials_json)

    if info is not None:
        try:
            credentials = service_account.Credentials.from_service_account_info(info)
        except (ValueError, KeyError) as e:
            logger.warning(
                f"Service account credentials rejected ({e.__class__.__name__}); "
                "falling back to default credentials"
            )
        else:
            project = settings.bigquery_project or info.get('project_id')
            logger.info(f"Using service account credentials for project {project}")
            return bigquery.Client(
                project=project,
                credentials=credentials,
                location=settings.bigquery_location,
            )

    logger.info("Using default BigQuery credential discovery")
    return bigquery.Client(
        project=settings.bigquery_project,
        location=settings.bigquery_location,
    )
