"""
Package initialization file for report builder models.

Re-exports the Pydantic schemas and enumerations so other modules can import
them from report_builder.models directly.

Usage:
    from report_builder.models import (
        QueryName,
        Property,
        Metric,
        ActiveFilter,
    )
"""

# =============================================================================
# Enums
# =============================================================================

from report_builder.models.enums import (
    QueryName,
    Operator,
    OperatorValueClass,
    TimePeriod,
    AttributionModel,
    PanelMode,
    MULTI_VALUE_OPERATORS,
    NO_VALUE_OPERATORS,
    DEFAULT_OPERATOR,
    ATTRIBUTION_MODEL_ANALYSIS_TYPES,
    AUDIENCE_ANALYSIS_TYPES,
)


# =============================================================================
# Schemas
# =============================================================================

from report_builder.models.schemas import (
    FilterValue,
    Property,
    Metric,
    PropertyValueOption,
    ActiveFilter,
    SelectedMetric,
    MandatorySelections,
    ErrorResponse,
)


__all__ = [
    # Enums
    'QueryName',
    'Operator',
    'OperatorValueClass',
    'TimePeriod',
    'AttributionModel',
    'PanelMode',
    'MULTI_VALUE_OPERATORS',
    'NO_VALUE_OPERATORS',
    'DEFAULT_OPERATOR',
    'ATTRIBUTION_MODEL_ANALYSIS_TYPES',
    'AUDIENCE_ANALYSIS_TYPES',
    # Schemas
    'FilterValue',
    'Property',
    'Metric',
    'PropertyValueOption',
    'ActiveFilter',
    'SelectedMetric',
    'MandatorySelections',
    'ErrorResponse',
]
