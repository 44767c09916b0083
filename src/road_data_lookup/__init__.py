"""Road-network attribute lookup for points on a map of Sweden."""

from .aggregator import RoadDataAggregator
from .attributes import ATTRIBUTE_SPECS, fetch_attribute
from .client import RoadDataClient
from .config import Settings, configure_logging, get_settings
from .errors import InvalidCoordinate, MalformedResponse, RoadDataError, TransportFailure
from .models import (
    AggregateResult,
    AttributeKind,
    AttributeResult,
    GeoPoint,
    ProjectedPoint,
    ResolveResult,
)
from .projection import format_coordinates, to_geographic, to_projected
from .resolver import resolve_nearest
from .session import LookupSession

__all__ = [
    "ATTRIBUTE_SPECS",
    "AggregateResult",
    "AttributeKind",
    "AttributeResult",
    "GeoPoint",
    "InvalidCoordinate",
    "LookupSession",
    "MalformedResponse",
    "ProjectedPoint",
    "ResolveResult",
    "RoadDataAggregator",
    "RoadDataClient",
    "RoadDataError",
    "Settings",
    "TransportFailure",
    "configure_logging",
    "fetch_attribute",
    "format_coordinates",
    "get_settings",
    "resolve_nearest",
    "to_geographic",
    "to_projected",
]
