"""XML request documents for the road-data API.

Every request is a ``<REQUEST>`` with a ``<LOGIN>`` and a single ``<QUERY>``
naming an object type in the NVDB namespace.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterable

from .models import ElementId, ProjectedPoint

ELEMENT_ID_FIELD = "Element_Id"
SNAP_ALIAS = "SnapToRoadNetwork"
SNAP_FUNCTION = "$function.vv_nvdb_v1.SnapToRoadNetwork"
SNAP_OBJECT_TYPE = "Vägnummer"


def build_request(
    object_type: str,
    *,
    api_key: str,
    namespace: str,
    schema_version: str,
    filters: Iterable[ET.Element] = (),
    includes: Iterable[str] = (),
    evals: Iterable[ET.Element] = (),
    limit: int | None = None,
) -> bytes:
    """Serialize a complete request document."""
    root = ET.Element("REQUEST")
    ET.SubElement(root, "LOGIN", authenticationkey=api_key)

    query = ET.SubElement(
        root,
        "QUERY",
        objecttype=object_type,
        namespace=namespace,
        schemaversion=schema_version,
    )
    if limit is not None:
        query.set("limit", str(limit))

    filters = list(filters)
    if filters:
        ET.SubElement(query, "FILTER").extend(filters)
    for field in includes:
        ET.SubElement(query, "INCLUDE").text = field
    query.extend(evals)

    return ET.tostring(root, encoding="utf-8")


def equals(name: str, value: ElementId) -> ET.Element:
    return ET.Element("EQ", name=name, value=str(value))


def snap_to_network(point: ProjectedPoint, max_distance_meters: float) -> ET.Element:
    """EVAL clause snapping ``point`` to the closest element within ``max_distance_meters``."""
    args = f"{point.easting:.3f}, {point.northing:.3f}, {max_distance_meters:g}"
    return ET.Element("EVAL", alias=SNAP_ALIAS, function=f"{SNAP_FUNCTION}({args})")
