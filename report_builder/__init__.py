"""
Report Builder Backend Package.

FastAPI proxy for parameterized BigQuery report component queries, plus the
report-configuration state model (selection store, projector, selection
panels) the report builder UI drives.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, BigQuery client, errors, and dependencies
    - models: Pydantic schemas and enums
    - services: Query dispatch, catalogs, and selection state
    - sql: Parameterized BigQuery queries
"""

__version__ = "1.0.0"
