import xml.etree.ElementTree as ET

import httpx
import pytest

from road_data_lookup import RoadDataClient, Settings


def envelope(**result) -> dict:
    """A response envelope whose single RESULT entry holds ``result``."""
    return {"RESPONSE": {"RESULT": [result]}}


class FakeUpstream:
    """Stands in for the road-data API behind an httpx.MockTransport.

    Responses are keyed by the queried object type, or ``"snap"`` for the
    snap-to-network query. Unconfigured queries answer with an empty result.
    """

    def __init__(self):
        self.responses: dict[str, httpx.Response | Exception] = {}
        self.queries: list[ET.Element] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        query = ET.fromstring(request.content).find("QUERY")
        self.queries.append(query)
        key = "snap" if query.find("EVAL") is not None else query.get("objecttype")

        response = self.responses.get(key, httpx.Response(200, json=envelope()))
        if isinstance(response, Exception):
            raise response
        # a fresh response per request, so one configured answer can be served repeatedly
        return httpx.Response(response.status_code, content=response.content, headers=response.headers)

    def snap(self, element_id="E123", offset=12.34, wkt="POINT (500000 6580000)"):
        self.snap_value({"Element_Id": element_id, "Offset": offset, "Geometry": {"WKT": wkt}})

    def snap_value(self, value):
        self.responses["snap"] = httpx.Response(
            200, json=envelope(INFO={"EVALRESULT": [{"SnapToRoadNetwork": value}]})
        )

    def no_snap(self):
        self.responses["snap"] = httpx.Response(200, json=envelope(INFO={"EVALRESULT": []}))

    def respond(self, object_type: str, value):
        self.responses[object_type] = httpx.Response(200, json=envelope(**{object_type: value}))

    def fail(self, key: str, status: int = 500):
        self.responses[key] = httpx.Response(status, text="Internal Server Error")

    def raise_(self, key: str, exc: Exception):
        self.responses[key] = exc

    def object_types(self) -> list[str]:
        return [q.get("objecttype") for q in self.queries if q.find("EVAL") is None]


@pytest.fixture
def settings():
    return Settings(api_key="test-key", _env_file=None)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def client(settings, upstream):
    http = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    return RoadDataClient(settings, http=http)


@pytest.fixture
def populated(upstream):
    """Upstream with a snapped element and data for every attribute kind."""
    upstream.snap()
    upstream.respond("Vägnummer", {"Element_Id": "E123", "Huvudnummer": 4, "Europaväg": True})
    upstream.respond("Gatunamn", {"Element_Id": "E123", "Namn": "Essingeleden"})
    upstream.respond("FunkVägklass", {"Element_Id": "E123", "Klass": 0})
    upstream.respond(
        "Hastighetsgräns",
        [
            {"Element_Id": "E123", "Högsta_tillåtna_hastighet": 70, "Körriktning": "Med"},
            {"Element_Id": "E123", "Högsta_tillåtna_hastighet": 80, "Körriktning": "Mot"},
        ],
    )
    upstream.respond("Väghållare", {"Element_Id": "E123", "Väghållartyp": "statlig"})
    upstream.respond("Vägbredd", {"Element_Id": "E123", "Bredd": 9.5})
    return upstream
