"""
Services package for the Report Builder backend.

Exports:
- QueryDispatcher: named BigQuery queries with bound parameters
- CatalogService: failure-tolerant async catalog fetches
- SelectionStore: report configuration state and transitions
- ReportSession: store + catalog wiring with stale-response guards
- project / render_preview: configuration projection for the JSON preview
- SelectionPanel / group_items: grouped item selection
"""

from report_builder.services.dispatcher import (
    QueryDispatcher,
    resolve_query_name,
    bind_parameters,
)
from report_builder.services.catalog import CatalogService
from report_builder.services.selection_store import (
    SelectionStore,
    SelectionError,
    MetricNotSelectedError,
    CatalogRequest,
    empty_value,
    coerce_value,
    new_filter,
    apply_filter_patch,
)
from report_builder.services.projector import (
    project,
    render_preview,
    NOT_STARTED,
)
from report_builder.services.selection_panel import (
    SelectionPanel,
    group_items,
    FALLBACK_GROUP,
)
from report_builder.services.session import ReportSession


__all__ = [
    'QueryDispatcher',
    'resolve_query_name',
    'bind_parameters',
    'CatalogService',
    'SelectionStore',
    'SelectionError',
    'MetricNotSelectedError',
    'CatalogRequest',
    'empty_value',
    'coerce_value',
    'new_filter',
    'apply_filter_patch',
    'project',
    'render_preview',
    'NOT_STARTED',
    'SelectionPanel',
    'group_items',
    'FALLBACK_GROUP',
    'ReportSession',
]
