"""
Selection Store

Owns every mutable field of a report configuration in progress: the active
analysis type, mandatory selections, top-level filters, segmentation, selected
metrics with their own filters, and the catalogs fetched for the active type.

The transition methods below are the only mutation surface. Each one either
raises SelectionError before touching state or applies a complete change and
notifies subscribers, so the store never holds:
- a filter value whose shape disagrees with its operator
- the same metricId twice
- more than one segmentation
- filters for a metric that is no longer selected

Catalog results arrive asynchronously. select_analysis_type returns a
CatalogRequest; apply_catalogs ignores results whose request has been
superseded by a later analysis type selection.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from report_builder.models.enums import (
    DEFAULT_OPERATOR,
    AttributionModel,
    Operator,
    OperatorValueClass,
    TimePeriod,
)
from report_builder.models.schemas import (
    ActiveFilter,
    FilterValue,
    MandatorySelections,
    Metric,
    Property,
    PropertyValueOption,
    SelectedMetric,
)


logger = logging.getLogger(__name__)

Listener = Callable[["SelectionStore"], None]

FILTER_PATCH_KEYS = frozenset({'operator', 'value'})


class SelectionError(ValueError):
    """A transition was rejected; the store is unchanged."""


class MetricNotSelectedError(SelectionError):
    """A per-metric filter operation named a metric that is not selected."""

    def __init__(self, metric_id: str):
        super().__init__(f"Metric {metric_id} is not selected")
        self.metric_id = metric_id


@dataclass(frozen=True)
class CatalogRequest:
    """Identifies the catalog fetch issued for one analysis type selection."""
    generation: int
    analysis_type: str


# =============================================================================
# Filter value rules
# =============================================================================

def empty_value(operator: str) -> FilterValue:
    """Empty value form for an operator's value class."""
    value_class = Operator.value_class(operator)
    if value_class is OperatorValueClass.MULTI:
        return []
    if value_class is OperatorValueClass.NONE:
        return None
    return ""


def coerce_value(operator: str, value: Any) -> FilterValue:
    """
    Normalize a value to the shape the operator requires.

    Multi-valued operators accept a string (wrapped) or any list/tuple/set of
    strings; blank members and duplicates are dropped keeping first occurrence. Scalar operators
    accept a string. No-value operators ignore whatever is passed.

    Raises:
        SelectionError: If the value cannot take the required shape.
    """
    value_class = Operator.value_class(operator)

    if value_class is OperatorValueClass.NONE:
        return None

    if value_class is OperatorValueClass.MULTI:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value else []
        if isinstance(value, (set, frozenset)):
            items = sorted(value)
        elif isinstance(value, (list, tuple)):
            items = list(value)
        else:
            raise SelectionError(f"Operator {operator} requires a set of strings")
        if not all(isinstance(item, str) for item in items):
            raise SelectionError(f"Operator {operator} requires a set of strings")
        return list(dict.fromkeys(item for item in items if item))

    if value is None:
        return ""
    if not isinstance(value, str):
        raise SelectionError(f"Operator {operator} requires a single string value")
    return value


def new_filter(prop: Property) -> ActiveFilter:
    """Instantiate an ActiveFilter from a Property with its first operator."""
    operators = list(prop.availableOperators) or [DEFAULT_OPERATOR]
    operator = operators[0]
    return ActiveFilter(
        id=uuid.uuid4().hex,
        propertyId=prop.propertyId,
        propertyLabel=prop.propertyLabel,
        operator=operator,
        value=empty_value(operator),
        availableOperators=operators,
    )


def apply_filter_patch(active: ActiveFilter, patch: Mapping[str, Any]) -> ActiveFilter:
    """
    Return a copy of ``active`` with ``patch`` applied.

    An operator change across value classes resets the value to the new empty
    form, unless the patch also carries a value.
    """
    unknown = set(patch) - FILTER_PATCH_KEYS
    if unknown:
        raise SelectionError(f"Unsupported filter fields: {sorted(unknown)}")

    operator = patch.get('operator', active.operator)
    if operator not in active.availableOperators:
        raise SelectionError(
            f"Operator {operator} is not available for property {active.propertyId}"
        )

    if 'value' in patch:
        value = coerce_value(operator, patch['value'])
    elif Operator.value_class(operator) is not Operator.value_class(active.operator):
        value = empty_value(operator)
    else:
        value = active.value

    return active.model_copy(update={'operator': operator, 'value': value})


# =============================================================================
# Store
# =============================================================================

class SelectionStore:
    """Report configuration state and its transitions."""

    def __init__(self):
        self.analysis_types: List[str] = []
        self.analysis_type: Optional[str] = None
        self.mandatory: MandatorySelections = MandatorySelections()
        self.filters: List[ActiveFilter] = []
        self.segmentation: Optional[Property] = None
        self.metrics: List[SelectedMetric] = []

        # Catalogs for the active analysis type
        self.available_filters: List[Property] = []
        self.available_segmentations: List[Property] = []
        self.available_metrics: List[Metric] = []
        self.catalogs_loading: bool = False

        # filter id -> options; metric id -> filter catalog
        self.value_options: Dict[str, List[PropertyValueOption]] = {}
        self.metric_filter_catalogs: Dict[str, List[Property]] = {}

        self._generation = 0
        self._listeners: List[Listener] = []

    # -------------------------------------------------------------------------
    # Subscription
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_metric(self, metric_id: str) -> Optional[SelectedMetric]:
        for metric in self.metrics:
            if metric.metricId == metric_id:
                return metric
        return None

    def is_metric_selected(self, metric_id: str) -> bool:
        return self.get_metric(metric_id) is not None

    def find_filter(self, filter_id: str) -> Optional[ActiveFilter]:
        """Find a filter by id among top-level and per-metric filters."""
        for active in self.filters:
            if active.id == filter_id:
                return active
        for metric in self.metrics:
            for active in metric.filters:
                if active.id == filter_id:
                    return active
        return None

    def _require_analysis_type(self) -> str:
        if self.analysis_type is None:
            raise SelectionError("Select an analysis type first")
        return self.analysis_type

    def _require_metric(self, metric_id: str) -> SelectedMetric:
        metric = self.get_metric(metric_id)
        if metric is None:
            raise MetricNotSelectedError(metric_id)
        return metric

    # -------------------------------------------------------------------------
    # Analysis type and catalogs
    # -------------------------------------------------------------------------

    def set_analysis_types(self, analysis_types: Iterable[str]) -> None:
        self.analysis_types = list(analysis_types)
        self._notify()

    def select_analysis_type(self, analysis_type: str) -> CatalogRequest:
        """
        Make ``analysis_type`` active and reset everything that depends on it.

        Re-selecting the active type also resets. The returned request must be
        passed back to apply_catalogs with the fetched results.
        """
        if not analysis_type:
            raise SelectionError("Analysis type must be a non-empty string")
        if self.analysis_types and analysis_type not in self.analysis_types:
            raise SelectionError(f"Unknown analysis type: {analysis_type}")

        self._generation += 1
        self.analysis_type = analysis_type
        self.mandatory = MandatorySelections.defaults_for(analysis_type)
        self.filters = []
        self.segmentation = None
        self.metrics = []
        self.available_filters = []
        self.available_segmentations = []
        self.available_metrics = []
        self.value_options = {}
        self.metric_filter_catalogs = {}
        self.catalogs_loading = True

        logger.info(f"Analysis type set to {analysis_type} (request {self._generation})")
        self._notify()
        return CatalogRequest(generation=self._generation, analysis_type=analysis_type)

    def is_current(self, request: CatalogRequest) -> bool:
        return (
            request.generation == self._generation
            and request.analysis_type == self.analysis_type
        )

    def apply_catalogs(
        self,
        request: CatalogRequest,
        filters: Iterable[Property],
        segmentations: Iterable[Property],
        metrics: Iterable[Metric],
    ) -> bool:
        """
        Store the catalogs fetched for ``request``.

        Returns:
            False, leaving state untouched, if the request was superseded.
        """
        if not self.is_current(request):
            logger.info(
                f"Discarding catalogs for superseded request {request.generation} "
                f"({request.analysis_type})"
            )
            return False

        self.available_filters = list(filters)
        self.available_segmentations = list(segmentations)
        self.available_metrics = list(metrics)
        self.catalogs_loading = False
        self._notify()
        return True

    # -------------------------------------------------------------------------
    # Mandatory selections
    # -------------------------------------------------------------------------

    def set_mandatory_selection(self, field: str, value: Optional[str]) -> None:
        analysis_type = self._require_analysis_type()

        if field not in MandatorySelections.applicable_fields(analysis_type):
            raise SelectionError(f"{field} does not apply to analysis type {analysis_type}")

        if field == 'timePeriod':
            if value not in {p.value for p in TimePeriod}:
                raise SelectionError(f"Unknown time period: {value}")
        elif field == 'attributionModel':
            if value not in {m.value for m in AttributionModel}:
                raise SelectionError(f"Unknown attribution model: {value}")
        elif value is not None and not isinstance(value, str):
            raise SelectionError("Audience must be a string")

        self.mandatory = self.mandatory.model_copy(update={field: value})
        self._notify()

    # -------------------------------------------------------------------------
    # Top-level filters
    # -------------------------------------------------------------------------

    def add_filter(self, prop: Property) -> ActiveFilter:
        self._require_analysis_type()
        active = new_filter(prop)
        self.filters = self.filters + [active]
        self._notify()
        return active

    def update_filter(self, filter_id: str, patch: Mapping[str, Any]) -> Optional[ActiveFilter]:
        """Patch a top-level filter; unknown ids are ignored and return None."""
        updated = None
        filters = []
        for active in self.filters:
            if active.id == filter_id:
                active = updated = apply_filter_patch(active, patch)
            filters.append(active)
        if updated is None:
            return None
        self.filters = filters
        self._notify()
        return updated

    def remove_filter(self, filter_id: str) -> None:
        remaining = [f for f in self.filters if f.id != filter_id]
        if len(remaining) == len(self.filters):
            return
        self.filters = remaining
        self.value_options.pop(filter_id, None)
        self._notify()

    # -------------------------------------------------------------------------
    # Segmentation
    # -------------------------------------------------------------------------

    def set_segmentation(self, prop: Optional[Property]) -> None:
        if prop is not None:
            self._require_analysis_type()
        self.segmentation = prop
        self._notify()

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def toggle_metric(self, metric: Union[Metric, SelectedMetric]) -> bool:
        """
        Select ``metric`` if absent, otherwise deselect it with its filters.

        Returns:
            True if the metric is selected after the call.
        """
        self._require_analysis_type()

        existing = self.get_metric(metric.metricId)
        if existing is not None:
            self.metrics = [m for m in self.metrics if m.metricId != metric.metricId]
            for active in existing.filters:
                self.value_options.pop(active.id, None)
            self.metric_filter_catalogs.pop(metric.metricId, None)
            self._notify()
            return False

        self.metrics = self.metrics + [
            SelectedMetric(
                metricId=metric.metricId,
                metricLabel=metric.metricLabel,
                metricGroupLabel=metric.metricGroupLabel,
                hasFilters=metric.hasFilters,
            )
        ]
        self._notify()
        return True

    def set_metric_filter_catalog(self, metric_id: str, properties: Iterable[Property]) -> bool:
        """Store the filter catalog for a selected metric; dropped if it was deselected."""
        if not self.is_metric_selected(metric_id):
            logger.info(f"Discarding filter catalog for deselected metric {metric_id}")
            return False
        self.metric_filter_catalogs[metric_id] = list(properties)
        self._notify()
        return True

    def _replace_metric(self, replacement: SelectedMetric) -> None:
        self.metrics = [
            replacement if m.metricId == replacement.metricId else m
            for m in self.metrics
        ]

    def add_metric_filter(self, metric_id: str, prop: Property) -> ActiveFilter:
        metric = self._require_metric(metric_id)
        active = new_filter(prop)
        self._replace_metric(metric.model_copy(update={'filters': metric.filters + [active]}))
        self._notify()
        return active

    def update_metric_filter(
        self, metric_id: str, filter_id: str, patch: Mapping[str, Any]
    ) -> Optional[ActiveFilter]:
        metric = self._require_metric(metric_id)
        updated = None
        filters = []
        for active in metric.filters:
            if active.id == filter_id:
                active = updated = apply_filter_patch(active, patch)
            filters.append(active)
        if updated is None:
            return None
        self._replace_metric(metric.model_copy(update={'filters': filters}))
        self._notify()
        return updated

    def remove_metric_filter(self, metric_id: str, filter_id: str) -> None:
        metric = self._require_metric(metric_id)
        remaining = [f for f in metric.filters if f.id != filter_id]
        if len(remaining) == len(metric.filters):
            return
        self._replace_metric(metric.model_copy(update={'filters': remaining}))
        self.value_options.pop(filter_id, None)
        self._notify()

    # -------------------------------------------------------------------------
    # Value options
    # -------------------------------------------------------------------------

    def set_value_options(self, filter_id: str, options: Iterable[PropertyValueOption]) -> bool:
        """Store value options for a filter; dropped if the filter is gone."""
        if self.find_filter(filter_id) is None:
            logger.info(f"Discarding value options for removed filter {filter_id}")
            return False
        self.value_options[filter_id] = list(options)
        self._notify()
        return True
