"""Snap a projected point to the nearest road-network element."""

from __future__ import annotations

import logging
import math
from typing import Any

from .client import RoadDataClient
from .envelope import eval_result
from .errors import MalformedResponse, TransportFailure
from .models import ElementId, ProjectedPoint, ResolveResult
from .query import ELEMENT_ID_FIELD, SNAP_ALIAS, SNAP_OBJECT_TYPE, snap_to_network

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE_METERS = 500.0

_ID_KEYS = (ELEMENT_ID_FIELD, "ElementId")


async def resolve_nearest(
    client: RoadDataClient,
    point: ProjectedPoint,
    max_distance_meters: float = DEFAULT_MAX_DISTANCE_METERS,
) -> ResolveResult:
    """Find the road-network element closest to ``point`` within ``max_distance_meters``.

    A response without a match is a successful resolve with no element id.
    Transport and payload problems come back as a failed result.
    """
    if not max_distance_meters > 0:
        raise ValueError(f"max_distance_meters must be positive, got {max_distance_meters}")

    body = client.build(
        SNAP_OBJECT_TYPE,
        includes=(ELEMENT_ID_FIELD,),
        evals=[snap_to_network(point, max_distance_meters)],
        limit=1,
    )

    payload: Any = None
    try:
        payload = await client.post(body)
        match = _parse_snap(eval_result(payload, SNAP_ALIAS))
    except (TransportFailure, MalformedResponse) as e:
        logger.warning("Snapping E=%.2f N=%.2f failed: %s", point.easting, point.northing, e)
        return ResolveResult(success=False, error_message=str(e), raw_response=payload)

    if match is None:
        logger.info(
            "No road element within %gm of E=%.2f N=%.2f", max_distance_meters, point.easting, point.northing
        )
        return ResolveResult(success=True, raw_response=payload)

    element_id, offset, geometry_text = match
    return ResolveResult(
        success=True,
        element_id=element_id,
        offset=offset,
        geometry_text=geometry_text,
        raw_response=payload,
    )


def _parse_snap(snapped: dict[str, Any] | None) -> tuple[ElementId, float | None, str | None] | None:
    """Pull (element id, offset, WKT) out of a snap result, or None when nothing matched."""
    if not snapped:
        return None

    element_id = next((snapped[k] for k in _ID_KEYS if snapped.get(k) not in (None, "")), None)
    if element_id is None:
        return None
    if not isinstance(element_id, (str, int)) or isinstance(element_id, bool):
        raise MalformedResponse(f"Element id has unexpected type {type(element_id).__name__}")

    offset = snapped.get("Offset")
    if offset is not None:
        try:
            offset = float(offset)
        except (TypeError, ValueError) as e:
            raise MalformedResponse(f"Offset is not a number: {offset!r}") from e
        if not math.isfinite(offset) or offset < 0:
            raise MalformedResponse(f"Offset must be a non-negative number, got {offset}")

    return element_id, offset, _geometry_text(snapped.get("Geometry"))


def _geometry_text(geometry: Any) -> str | None:
    if geometry is None or isinstance(geometry, str):
        return geometry
    if isinstance(geometry, dict):
        # WKT, WKT-SWEREF99TM-2D, WKT-SWEREF99TM-3D, ...
        for key in sorted(geometry):
            if key.startswith("WKT") and isinstance(geometry[key], str):
                return geometry[key]
        return None
    raise MalformedResponse(f"Geometry has unexpected type {type(geometry).__name__}")
