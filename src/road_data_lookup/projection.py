"""WGS84 <-> SWEREF 99 TM coordinate transforms."""

from __future__ import annotations

import math

from pyproj import Transformer

from .errors import InvalidCoordinate
from .models import CoordinateView, GeoPoint, ProjectedPoint

GEOGRAPHIC_EPSG = 4326
PROJECTED_EPSG = 3006  # SWEREF 99 TM

_FORWARD = Transformer.from_crs(f"EPSG:{GEOGRAPHIC_EPSG}", f"EPSG:{PROJECTED_EPSG}", always_xy=True)
_INVERSE = Transformer.from_crs(f"EPSG:{PROJECTED_EPSG}", f"EPSG:{GEOGRAPHIC_EPSG}", always_xy=True)


def to_projected(geo: GeoPoint) -> ProjectedPoint:
    """Project a WGS84 point to SWEREF 99 TM easting/northing.

    Raises InvalidCoordinate for non-finite input, out-of-range degrees, or a
    projection that does not produce finite meters.
    """
    lon, lat = geo.longitude, geo.latitude
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise InvalidCoordinate(f"Non-finite geographic coordinate: lon={lon}, lat={lat}")
    if not -180 <= lon <= 180:
        raise InvalidCoordinate(f"Longitude out of range: {lon}")
    if not -90 <= lat <= 90:
        raise InvalidCoordinate(f"Latitude out of range: {lat}")

    easting, northing = _FORWARD.transform(lon, lat)
    if not (math.isfinite(easting) and math.isfinite(northing)):
        raise InvalidCoordinate(f"Cannot project lon={lon}, lat={lat} to EPSG:{PROJECTED_EPSG}")
    return ProjectedPoint(easting=easting, northing=northing)


def check_projected(point: ProjectedPoint) -> ProjectedPoint:
    """Return ``point`` unchanged, or raise InvalidCoordinate if it is not finite."""
    e, n = point.easting, point.northing
    if not (math.isfinite(e) and math.isfinite(n)):
        raise InvalidCoordinate(f"Non-finite projected coordinate: E={e}, N={n}")
    return point


def to_geographic(point: ProjectedPoint) -> GeoPoint:
    """Inverse of :func:`to_projected`."""
    check_projected(point)
    e, n = point.easting, point.northing

    lon, lat = _INVERSE.transform(e, n)
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise InvalidCoordinate(f"Cannot unproject E={e}, N={n} from EPSG:{PROJECTED_EPSG}")
    return GeoPoint(longitude=lon, latitude=lat)


def format_coordinates(geo: GeoPoint) -> CoordinateView:
    """Return both coordinate representations, rounded the way the map popup shows them."""
    projected = to_projected(geo)
    return CoordinateView(
        longitude=round(geo.longitude, 6),
        latitude=round(geo.latitude, 6),
        easting=round(projected.easting, 2),
        northing=round(projected.northing, 2),
    )
