"""Pydantic data models for the road-data lookup pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

ElementId = str | int


class GeoPoint(BaseModel):
    """A WGS84 point in degrees, as selected on the map."""

    longitude: float
    latitude: float


class ProjectedPoint(BaseModel):
    """A SWEREF 99 TM point in meters."""

    easting: float
    northing: float


class AttributeKind(str, Enum):
    """A category of road data looked up independently per road-network element."""

    ROAD_NUMBER = "RoadNumber"
    STREET_NAME = "StreetName"
    FUNCTIONAL_ROAD_CLASS = "FunctionalRoadClass"
    SPEED_LIMIT = "SpeedLimit"
    ROAD_AUTHORITY = "RoadAuthority"
    ROAD_WIDTH = "RoadWidth"


class AttributeResult(BaseModel):
    """Outcome of one attribute lookup for a road-network element.

    ``success=True`` with no items means the element has no data of this kind,
    which is distinct from a failed lookup.
    """

    kind: AttributeKind
    success: bool
    items: list[dict[str, Any]] = Field(default_factory=list)
    error_message: str | None = None
    message: str | None = None
    substituted_for: AttributeKind | None = None
    replaced_error: str | None = None
    label: str | None = None
    raw_response: Any = Field(default=None, exclude=True, repr=False)

    @model_validator(mode="after")
    def _check_failure_shape(self) -> AttributeResult:
        if not self.success:
            if self.items:
                raise ValueError("a failed attribute result cannot carry items")
            if not self.error_message:
                raise ValueError("a failed attribute result needs an error_message")
        return self

    @property
    def is_empty(self) -> bool:
        return self.success and not self.items


class ResolveResult(BaseModel):
    """Outcome of snapping a projected point to the road network."""

    success: bool
    element_id: ElementId | None = None
    offset: float | None = None
    geometry_text: str | None = None
    error_message: str | None = None
    raw_response: Any = Field(default=None, exclude=True, repr=False)

    @model_validator(mode="after")
    def _check_failure_shape(self) -> ResolveResult:
        if not self.success:
            if self.element_id is not None:
                raise ValueError("a failed resolve cannot carry an element_id")
            if not self.error_message:
                raise ValueError("a failed resolve needs an error_message")
        return self

    @property
    def matched(self) -> bool:
        return self.success and self.element_id is not None


class AggregateResult(BaseModel):
    """Everything known about the road nearest to one selected point."""

    point: ProjectedPoint
    resolve: ResolveResult
    attributes: dict[AttributeKind, AttributeResult] = Field(default_factory=dict)
    overall_success: bool
    raw_upstream_responses: dict[str, Any] | None = None


class CoordinateView(BaseModel):
    """Both representations of a selected point, rounded for display."""

    longitude: float
    latitude: float
    easting: float
    northing: float


class SessionState(BaseModel):
    """Snapshot of a lookup session: the current selection and its applied result."""

    generation: int
    selected: GeoPoint | None = None
    projected: ProjectedPoint | None = None
    result: AggregateResult | None = None
