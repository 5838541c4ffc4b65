"""
Enumeration definitions for the Report Builder backend.

All enums inherit from both `str` and `Enum` to ensure JSON serialization
compatibility with Pydantic models and plain ``json.dumps``.

- QueryName: the closed set of queries the /api/query endpoint dispatches
- Operator / OperatorValueClass: filter comparison kinds and the value shape each implies
- TimePeriod / AttributionModel: closed choices for mandatory selections
- PanelMode: which store operation a selection panel drives
"""

from enum import Enum
from typing import FrozenSet


class QueryName(str, Enum):
    """
    Queries recognized by the dispatcher.

    Values are the wire names clients pass as ``queryName``.
    """
    GET_ANALYSIS_TYPES = "getAnalysisTypes"
    GET_FILTERS_FOR_TYPE = "getFiltersForType"
    GET_SEGMENTATIONS_FOR_TYPE = "getSegmentationsForType"
    GET_METRICS_FOR_TYPE = "getMetricsForType"
    GET_PROPERTY_VALUES = "getPropertyValues"
    GET_FILTERS_FOR_METRIC = "getFiltersForMetric"


class OperatorValueClass(str, Enum):
    """
    Shape of an ActiveFilter value.

    - multi: ordered list of unique strings, empty form []
    - scalar: single string, empty form ""
    - none: no value, always None
    """
    MULTI = "multi"
    SCALAR = "scalar"
    NONE = "none"


class Operator(str, Enum):
    """
    Comparison kinds known to the report builder.

    Properties may advertise operators outside this list; those are treated
    as scalar-valued.
    """
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"

    @classmethod
    def value_class(cls, operator: str) -> OperatorValueClass:
        """Classify an operator string by the value shape it requires."""
        if operator in MULTI_VALUE_OPERATORS:
            return OperatorValueClass.MULTI
        if operator in NO_VALUE_OPERATORS:
            return OperatorValueClass.NONE
        return OperatorValueClass.SCALAR


MULTI_VALUE_OPERATORS: FrozenSet[str] = frozenset({
    Operator.EQUALS.value,
    Operator.NOT_EQUALS.value,
})

NO_VALUE_OPERATORS: FrozenSet[str] = frozenset({
    Operator.IS_NULL.value,
    Operator.IS_NOT_NULL.value,
})

# Used when a property arrives without any operators
DEFAULT_OPERATOR: str = Operator.EQUALS.value


class TimePeriod(str, Enum):
    """Reporting window applied to every analysis type."""
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    LAST_90_DAYS = "last_90_days"
    LAST_12_MONTHS = "last_12_months"
    QUARTER_TO_DATE = "quarter_to_date"
    YEAR_TO_DATE = "year_to_date"


class AttributionModel(str, Enum):
    """Attribution models offered for spend and session analyses."""
    FIRST_TOUCH = "first_touch"
    LAST_TOUCH = "last_touch"
    LINEAR = "linear"
    U_SHAPED = "u_shaped"
    W_SHAPED = "w_shaped"
    TIME_DECAY = "time_decay"
    DATA_DRIVEN = "data_driven"


# Analysis types whose mandatory selections carry an attribution model
ATTRIBUTION_MODEL_ANALYSIS_TYPES: FrozenSet[str] = frozenset({
    "spend_performance",
    "session_activity_performance",
})

# Analysis types whose mandatory selections carry an audience
AUDIENCE_ANALYSIS_TYPES: FrozenSet[str] = frozenset({
    "audience_engagement",
})


class PanelMode(str, Enum):
    """
    What a selection panel feeds into the store.

    Filter, segmentation and metric-filter panels are single-select and close
    after a pick; the metric panel stays open for further toggling.
    """
    FILTER = "filter"
    SEGMENTATION = "segmentation"
    METRIC = "metric"
    METRIC_FILTER = "metric_filter"
