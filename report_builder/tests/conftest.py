"""
Pytest Configuration and Shared Fixtures for Report Builder Tests.

Provides:
- Settings pointing at test table names (no .env loading)
- A mock BigQuery client returning real google.cloud.bigquery Row objects
- Sample catalog rows and models (properties, metrics, value options)
- FakeCatalog: an async catalog whose per-type fetches can be held open to
  exercise stale-response handling

Dependencies:
- pytest
- pytest-asyncio
"""

import asyncio
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from google.cloud.bigquery.table import Row

from report_builder.core.config import Settings
from report_builder.models.schemas import Metric, Property, PropertyValueOption
from report_builder.services.dispatcher import QueryDispatcher


COMPONENTS_TABLE = 'test-project.report_components.test'
VALUES_TABLE = 'test-project.property_values_lookup.test'


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    config.addinivalue_line(
        'markers',
        'integration: marks tests requiring a real BigQuery project'
    )


# ============================================================
# HELPERS
# ============================================================

def make_rows(records: List[Dict[str, Any]]) -> List[Row]:
    """Build BigQuery Row objects from dicts sharing the same keys."""
    if not records:
        return []
    field_to_index = {name: i for i, name in enumerate(records[0])}
    return [Row(tuple(record.values()), field_to_index) for record in records]


def make_client(records: Optional[List[Dict[str, Any]]] = None) -> MagicMock:
    """Mock bigquery.Client whose query(...).result() yields ``records``."""
    client = MagicMock()
    client.query.return_value.result.return_value = make_rows(records or [])
    return client


# ============================================================
# SETTINGS / CLIENT FIXTURES
# ============================================================

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        report_components_table=COMPONENTS_TABLE,
        property_values_table=VALUES_TABLE,
        google_application_credentials_json=None,
        bigquery_project='test-project',
    )


@pytest.fixture
def mock_bigquery_client() -> MagicMock:
    return make_client()


@pytest.fixture
def dispatcher(mock_bigquery_client: MagicMock, test_settings: Settings) -> QueryDispatcher:
    return QueryDispatcher(mock_bigquery_client, test_settings)


# ============================================================
# SAMPLE DATA
# ============================================================

@pytest.fixture
def filter_rows() -> List[Dict[str, Any]]:
    """Filter property rows as BigQuery returns them for 'journeys'."""
    return [
        {
            'property_id': '1',
            'property_label': 'Source',
            'property_scope_label': 'UTM',
            'available_operators': ['equals', 'not_equals'],
        },
        {
            'property_id': '2',
            'property_label': 'Medium',
            'property_scope_label': 'UTM',
            'available_operators': ['contains', 'equals', 'is_null'],
        },
        {
            'property_id': '5',
            'property_label': 'Company Name',
            'property_scope_label': 'Company',
            'available_operators': ['equals', 'contains', 'is_not_null'],
        },
    ]


@pytest.fixture
def metric_rows() -> List[Dict[str, Any]]:
    return [
        {'metric_id': '7', 'metric_label': 'Sessions', 'metric_group_label': 'Engagement', 'has_filters': True},
        {'metric_id': '8', 'metric_label': 'Pipeline', 'metric_group_label': 'Revenue', 'has_filters': False},
        {'metric_id': '9', 'metric_label': 'Spend', 'metric_group_label': None, 'has_filters': None},
    ]


@pytest.fixture
def source_property() -> Property:
    return Property(
        propertyId='1',
        propertyLabel='Source',
        propertyScopeLabel='UTM',
        availableOperators=['equals', 'not_equals'],
    )


@pytest.fixture
def medium_property() -> Property:
    return Property(
        propertyId='2',
        propertyLabel='Medium',
        propertyScopeLabel='UTM',
        availableOperators=['contains', 'equals', 'is_null'],
    )


@pytest.fixture
def company_property() -> Property:
    return Property(
        propertyId='5',
        propertyLabel='Company Name',
        propertyScopeLabel='Company',
        availableOperators=['equals', 'contains', 'is_not_null'],
    )


@pytest.fixture
def sessions_metric() -> Metric:
    return Metric(metricId='7', metricLabel='Sessions', metricGroupLabel='Engagement', hasFilters=True)


@pytest.fixture
def pipeline_metric() -> Metric:
    return Metric(metricId='8', metricLabel='Pipeline', metricGroupLabel='Revenue', hasFilters=False)


# ============================================================
# FAKE CATALOG
# ============================================================

class FakeCatalog:
    """
    In-memory stand-in for CatalogService.

    Per-type fetches for a type listed in ``hold`` wait on its Event before
    returning, so tests can interleave analysis type selections.
    """

    def __init__(
        self,
        filters: Optional[Dict[str, List[Property]]] = None,
        segmentations: Optional[Dict[str, List[Property]]] = None,
        metrics: Optional[Dict[str, List[Metric]]] = None,
        values: Optional[Dict[str, List[PropertyValueOption]]] = None,
        metric_filters: Optional[Dict[str, List[Property]]] = None,
        analysis_types: Optional[List[str]] = None,
    ):
        self.filters = filters or {}
        self.segmentations = segmentations or {}
        self.metrics = metrics or {}
        self.values = values or {}
        self.metric_filters = metric_filters or {}
        self.analysis_types = analysis_types or []
        self.hold: Dict[str, asyncio.Event] = {}
        self.value_holds: Dict[str, asyncio.Event] = {}
        self.calls: List[tuple] = []

    async def fetch_analysis_types(self) -> List[str]:
        return list(self.analysis_types)

    async def fetch_type_catalogs(self, analysis_type: str):
        self.calls.append(('type_catalogs', analysis_type))
        if analysis_type in self.hold:
            await self.hold[analysis_type].wait()
        return (
            list(self.filters.get(analysis_type, [])),
            list(self.segmentations.get(analysis_type, [])),
            list(self.metrics.get(analysis_type, [])),
        )

    async def fetch_property_values(self, property_id: str) -> List[PropertyValueOption]:
        self.calls.append(('values', property_id))
        if property_id in self.value_holds:
            await self.value_holds[property_id].wait()
        return list(self.values.get(property_id, []))

    async def fetch_metric_filters(self, metric_id: str) -> List[Property]:
        self.calls.append(('metric_filters', metric_id))
        return list(self.metric_filters.get(metric_id, []))
