"""Per-element attribute lookups, driven by one table of attribute kinds."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .client import RoadDataClient
from .envelope import records
from .errors import MalformedResponse, TransportFailure
from .models import AttributeKind, AttributeResult, ElementId
from .query import ELEMENT_ID_FIELD, equals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttributeSpec:
    """How one attribute kind is queried and described."""

    object_type: str
    fields: tuple[str, ...]
    singular: str
    plural: str
    label: str

    def found_message(self, count: int) -> str:
        if count == 0:
            return f"Inga {self.plural} hittades för denna position"
        if count == 1:
            return f"Hittade 1 {self.singular}"
        return f"Hittade {count} {self.plural}"

    def failed_message(self) -> str:
        return f"Kunde inte hämta {self.plural} från Trafikverket"


ATTRIBUTE_SPECS: dict[AttributeKind, AttributeSpec] = {
    AttributeKind.ROAD_NUMBER: AttributeSpec(
        object_type="Vägnummer",
        fields=("Huvudnummer", "Undernummer", "Europaväg", "Länsnummer", "Vägkategori"),
        singular="vägnummer",
        plural="vägnummer",
        label="Vägnummer",
    ),
    AttributeKind.STREET_NAME: AttributeSpec(
        object_type="Gatunamn",
        fields=("Namn",),
        singular="gatunamn",
        plural="gatunamn",
        label="Gatunamn",
    ),
    AttributeKind.FUNCTIONAL_ROAD_CLASS: AttributeSpec(
        object_type="FunkVägklass",
        fields=("Klass",),
        singular="funktionell vägklass",
        plural="funktionella vägklasser",
        label="Funktionell vägklass",
    ),
    AttributeKind.SPEED_LIMIT: AttributeSpec(
        object_type="Hastighetsgräns",
        fields=("Högsta_tillåtna_hastighet", "Körriktning"),
        singular="hastighetsgräns",
        plural="hastighetsgränser",
        label="Hastighetsgräns",
    ),
    AttributeKind.ROAD_AUTHORITY: AttributeSpec(
        object_type="Väghållare",
        fields=("Väghållartyp", "Väghållarnamn"),
        singular="väghållare",
        plural="väghållare",
        label="Väghållare",
    ),
    AttributeKind.ROAD_WIDTH: AttributeSpec(
        object_type="Vägbredd",
        fields=("Bredd",),
        singular="vägbredd",
        plural="vägbredder",
        label="Vägbredd",
    ),
}


async def fetch_attribute(client: RoadDataClient, kind: AttributeKind, element_id: ElementId) -> AttributeResult:
    """Fetch every record of ``kind`` attached to one road-network element.

    Transport and payload problems come back as a failed result, never as an
    exception.
    """
    spec = ATTRIBUTE_SPECS[kind]
    body = client.build(
        spec.object_type,
        filters=[equals(ELEMENT_ID_FIELD, element_id)],
        includes=(ELEMENT_ID_FIELD, *spec.fields),
        limit=client.settings.record_limit,
    )

    payload: Any = None
    try:
        payload = await client.post(body)
        items = records(payload, spec.object_type)
    except (TransportFailure, MalformedResponse) as e:
        logger.warning("%s lookup for element %r failed: %s", kind.value, element_id, e)
        return AttributeResult(
            kind=kind,
            success=False,
            error_message=str(e),
            message=spec.failed_message(),
            label=spec.label,
            raw_response=payload,
        )

    logger.debug("%s lookup for element %r returned %d record(s)", kind.value, element_id, len(items))
    return AttributeResult(
        kind=kind,
        success=True,
        items=items,
        message=spec.found_message(len(items)),
        label=spec.label,
        raw_response=payload,
    )


def substitute(result: AttributeResult, replaced: AttributeResult) -> AttributeResult:
    """Relabel ``result`` so it is shown in place of ``replaced``.

    The replaced lookup's error, if it failed, is kept as ``replaced_error``.
    """
    spec = ATTRIBUTE_SPECS[result.kind]
    label = f"{spec.label} (i stället för {ATTRIBUTE_SPECS[replaced.kind].singular})"
    return result.model_copy(
        update={"substituted_for": replaced.kind, "label": label, "replaced_error": replaced.error_message}
    )
