"""
Report Component Queries for the Report Builder backend.

Provides the parameterized BigQuery SQL behind each QueryName. Every value a
client supplies is bound as a named query parameter (@analysisType,
@propertyId, @metricId); only the table identifiers, which come from
configuration, are formatted into the query text.

Warehouse layout:
- report_components_table: one row per analysis_type with REPEATED STRUCT
  columns available_filter_properties, available_segmentation_properties and
  available_metrics (each metric carrying its own available_filter_properties)
- property_values_table: property_id, label, value, sort
"""

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from report_builder.models.enums import QueryName


# =============================================================================
# CONSTANTS
# =============================================================================

# Column unwrapped into a plain list of strings for getAnalysisTypes
ANALYSIS_TYPE_COLUMN: str = 'analysis_type'


# =============================================================================
# QUERY BUILDERS
# =============================================================================

def get_analysis_types_query(components_table: str) -> str:
    """Distinct analysis types, alphabetically."""
    return f"""
    SELECT DISTINCT analysis_type
    FROM `{components_table}`
    ORDER BY analysis_type
    """


def get_filters_for_type_query(components_table: str) -> str:
    """Filter properties available for @analysisType."""
    return f"""
    SELECT f.*
    FROM `{components_table}`, UNNEST(available_filter_properties) AS f
    WHERE analysis_type = @analysisType
    """


def get_segmentations_for_type_query(components_table: str) -> str:
    """Segmentation candidates available for @analysisType."""
    return f"""
    SELECT s.*
    FROM `{components_table}`, UNNEST(available_segmentation_properties) AS s
    WHERE analysis_type = @analysisType
    """


def get_metrics_for_type_query(components_table: str) -> str:
    """
    Metrics available for @analysisType.

    has_filters is derived from the metric's nested filter array so the
    catalog row stays flat.
    """
    return f"""
    SELECT
        m.metric_id,
        m.metric_label,
        m.metric_group_label,
        ARRAY_LENGTH(IFNULL(m.available_filter_properties, [])) > 0 AS has_filters
    FROM `{components_table}`, UNNEST(available_metrics) AS m
    WHERE analysis_type = @analysisType
    """


def get_property_values_query(values_table: str) -> str:
    """Enumerable values for @propertyId in display order."""
    return f"""
    SELECT label, value
    FROM `{values_table}`
    WHERE property_id = @propertyId
    ORDER BY sort
    """


def get_filters_for_metric_query(components_table: str) -> str:
    """
    Filter properties available on @metricId.

    A metric id may appear under several analysis types with the same filter
    set; DISTINCT on property_id keeps one row per property.
    """
    return f"""
    SELECT f.*
    FROM `{components_table}`,
        UNNEST(available_metrics) AS m,
        UNNEST(m.available_filter_properties) AS f
    WHERE m.metric_id = @metricId
    QUALIFY ROW_NUMBER() OVER (PARTITION BY f.property_id) = 1
    """


# =============================================================================
# REGISTRY
# =============================================================================

@dataclass(frozen=True)
class QueryTemplate:
    """
    A dispatchable query.

    Attributes:
        name: The QueryName this template answers.
        required_params: Bound parameter names the caller must supply.
        build: Builds the SQL text from (components_table, values_table).
    """
    name: QueryName
    required_params: Tuple[str, ...]
    build: Callable[[str, str], str]

    def render(self, components_table: str, values_table: str) -> str:
        return self.build(components_table, values_table)


QUERY_TEMPLATES: Dict[QueryName, QueryTemplate] = {
    QueryName.GET_ANALYSIS_TYPES: QueryTemplate(
        name=QueryName.GET_ANALYSIS_TYPES,
        required_params=(),
        build=lambda components, values: get_analysis_types_query(components),
    ),
    QueryName.GET_FILTERS_FOR_TYPE: QueryTemplate(
        name=QueryName.GET_FILTERS_FOR_TYPE,
        required_params=('analysisType',),
        build=lambda components, values: get_filters_for_type_query(components),
    ),
    QueryName.GET_SEGMENTATIONS_FOR_TYPE: QueryTemplate(
        name=QueryName.GET_SEGMENTATIONS_FOR_TYPE,
        required_params=('analysisType',),
        build=lambda components, values: get_segmentations_for_type_query(components),
    ),
    QueryName.GET_METRICS_FOR_TYPE: QueryTemplate(
        name=QueryName.GET_METRICS_FOR_TYPE,
        required_params=('analysisType',),
        build=lambda components, values: get_metrics_for_type_query(components),
    ),
    QueryName.GET_PROPERTY_VALUES: QueryTemplate(
        name=QueryName.GET_PROPERTY_VALUES,
        required_params=('propertyId',),
        build=lambda components, values: get_property_values_query(values),
    ),
    QueryName.GET_FILTERS_FOR_METRIC: QueryTemplate(
        name=QueryName.GET_FILTERS_FOR_METRIC,
        required_params=('metricId',),
        build=lambda components, values: get_filters_for_metric_query(components),
    ),
}

_missing = set(QueryName) - set(QUERY_TEMPLATES)
if _missing:
    raise RuntimeError(f"No query template registered for: {sorted(m.value for m in _missing)}")


def get_query_template(name: QueryName) -> QueryTemplate:
    return QUERY_TEMPLATES[name]
