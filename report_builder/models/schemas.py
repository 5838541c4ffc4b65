"""
Pydantic models for the Report Builder backend.

Catalog models (Property, Metric, PropertyValueOption) validate warehouse rows,
which arrive with snake_case column names; they also accept the camelCase field
names used everywhere else. Selection models (ActiveFilter, SelectedMetric,
MandatorySelections) hold the report-configuration state owned by the
SelectionStore.

All models use Pydantic v2 syntax.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from report_builder.models.enums import (
    ATTRIBUTION_MODEL_ANALYSIS_TYPES,
    AUDIENCE_ANALYSIS_TYPES,
    AttributionModel,
    TimePeriod,
)


FilterValue = Union[List[str], str, None]


# =============================================================================
# Catalog Models (warehouse rows)
# =============================================================================


class Property(BaseModel):
    """
    A filterable or segmentable warehouse column.

    Keyed by propertyId within a single catalog fetch; the same id may be
    reused across analysis types.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra='ignore',
        json_schema_extra={
            "example": {
                "property_id": "1",
                "property_label": "Source",
                "property_scope_label": "UTM",
                "available_operators": ["equals", "not_equals", "contains"],
            }
        }
    )

    propertyId: str = Field(..., alias='property_id', min_length=1)
    propertyLabel: str = Field(..., alias='property_label')
    propertyScopeLabel: Optional[str] = Field(default=None, alias='property_scope_label')
    availableOperators: List[str] = Field(default_factory=list, alias='available_operators')

    @field_validator('availableOperators', mode='before')
    @classmethod
    def _null_operators(cls, v: Any) -> Any:
        # REPEATED columns come back as None when the array is empty
        return [] if v is None else v


class Metric(BaseModel):
    """A selectable measure, optionally filterable on its own."""
    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra='ignore',
    )

    metricId: str = Field(..., alias='metric_id', min_length=1)
    metricLabel: str = Field(..., alias='metric_label')
    metricGroupLabel: Optional[str] = Field(default=None, alias='metric_group_label')
    hasFilters: bool = Field(default=False, alias='has_filters')

    @field_validator('hasFilters', mode='before')
    @classmethod
    def _null_has_filters(cls, v: Any) -> Any:
        return False if v is None else v


class PropertyValueOption(BaseModel):
    """One enumerable choice for a property's value."""
    model_config = ConfigDict(coerce_numbers_to_str=True, extra='ignore')

    label: str
    value: str


# =============================================================================
# Selection Models (SelectionStore state)
# =============================================================================


class ActiveFilter(BaseModel):
    """
    A filter instantiated from a Property.

    value shape follows the operator's OperatorValueClass; the SelectionStore
    enforces it on every transition.
    """
    id: str
    propertyId: str
    propertyLabel: str
    operator: str
    value: FilterValue = None
    availableOperators: List[str] = Field(default_factory=list)


class SelectedMetric(BaseModel):
    """A Metric in the report together with its own filter sequence."""
    metricId: str
    metricLabel: str
    metricGroupLabel: Optional[str] = None
    hasFilters: bool = False
    filters: List[ActiveFilter] = Field(default_factory=list)


class MandatorySelections(BaseModel):
    """
    Selections every report needs before it can run.

    attributionModel applies to spend/session analyses and audience to
    audience engagement; fields that do not apply stay None and are left out
    of the projected configuration.
    """
    timePeriod: str = TimePeriod.LAST_30_DAYS.value
    attributionModel: Optional[str] = None
    audience: Optional[str] = None

    @staticmethod
    def applicable_fields(analysis_type: str) -> List[str]:
        fields = ['timePeriod']
        if analysis_type in ATTRIBUTION_MODEL_ANALYSIS_TYPES:
            fields.append('attributionModel')
        if analysis_type in AUDIENCE_ANALYSIS_TYPES:
            fields.append('audience')
        return fields

    @classmethod
    def defaults_for(cls, analysis_type: str) -> "MandatorySelections":
        """Default mandatory selections for an analysis type."""
        if analysis_type in ATTRIBUTION_MODEL_ANALYSIS_TYPES:
            return cls(attributionModel=AttributionModel.LINEAR.value)
        return cls()

    def for_type(self, analysis_type: str) -> Dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in self.applicable_fields(analysis_type)
        }


# =============================================================================
# API Models
# =============================================================================


class ErrorResponse(BaseModel):
    """Body of 400/500 responses from /api/query."""
    error: str = Field(..., description="Short error message")
    details: Optional[str] = Field(
        default=None,
        description="Non-sensitive detail string (backend failures only)"
    )
