"""
SQL Query Module for the Report Builder backend.

Provides the parameterized BigQuery templates dispatched by the /api/query
endpoint, keyed by QueryName.

Example usage:
    from report_builder.sql import get_query_template
    from report_builder.models import QueryName

    template = get_query_template(QueryName.GET_FILTERS_FOR_TYPE)
    sql = template.render(components_table, values_table)
    # template.required_params == ('analysisType',)
"""

from report_builder.sql.report_queries import (
    QueryTemplate,
    QUERY_TEMPLATES,
    ANALYSIS_TYPE_COLUMN,
    get_query_template,
    get_analysis_types_query,
    get_filters_for_type_query,
    get_segmentations_for_type_query,
    get_metrics_for_type_query,
    get_property_values_query,
    get_filters_for_metric_query,
)

__all__ = [
    'QueryTemplate',
    'QUERY_TEMPLATES',
    'ANALYSIS_TYPE_COLUMN',
    'get_query_template',
    'get_analysis_types_query',
    'get_filters_for_type_query',
    'get_segmentations_for_type_query',
    'get_metrics_for_type_query',
    'get_property_values_query',
    'get_filters_for_metric_query',
]
