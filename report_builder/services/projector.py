"""
Configuration Projector

Derives the serializable report configuration shown in the live JSON preview
from a SelectionStore. Pure: no store mutation, and the result shares no
mutable objects with the store, so projecting the same state twice yields
equal output.
"""

import json
from typing import Any, Dict, List, Optional

from report_builder.models.schemas import ActiveFilter, Property, SelectedMetric
from report_builder.services.selection_store import SelectionStore


NOT_STARTED: Dict[str, Any] = {
    "status": "not_started",
    "message": "Select an analysis type to begin.",
}


def project_filter(active: ActiveFilter) -> Dict[str, Any]:
    value = active.value
    if isinstance(value, list):
        value = list(value)
    return {
        "propertyId": active.propertyId,
        "propertyLabel": active.propertyLabel,
        "operator": active.operator,
        "value": value,
    }


def project_segmentation(prop: Optional[Property]) -> Optional[Dict[str, Any]]:
    if prop is None:
        return None
    return {
        "propertyId": prop.propertyId,
        "propertyLabel": prop.propertyLabel,
        "propertyScopeLabel": prop.propertyScopeLabel,
    }


def project_metric(metric: SelectedMetric) -> Dict[str, Any]:
    return {
        "metricId": metric.metricId,
        "metricLabel": metric.metricLabel,
        "filters": [project_filter(f) for f in metric.filters],
    }


def project(store: SelectionStore) -> Dict[str, Any]:
    """
    Build the report configuration for the store's current state.

    Returns:
        A "not started" placeholder when no analysis type is active, otherwise
        analysisType, mandatorySelections (applicable fields only), filters,
        segmentation and metrics in insertion order.
    """
    if store.analysis_type is None:
        return dict(NOT_STARTED)

    filters: List[Dict[str, Any]] = [project_filter(f) for f in store.filters]

    return {
        "analysisType": store.analysis_type,
        "mandatorySelections": store.mandatory.for_type(store.analysis_type),
        "filters": filters,
        "segmentation": project_segmentation(store.segmentation),
        "metrics": [project_metric(m) for m in store.metrics],
    }


def render_preview(config: Dict[str, Any]) -> str:
    """JSON text for the live preview pane."""
    return json.dumps(config, indent=2)
