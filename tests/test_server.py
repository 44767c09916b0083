"""Tests for the FastAPI server endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from road_data_lookup import RoadDataAggregator
from road_data_lookup.server import app, get_aggregator, get_sessions
from road_data_lookup.session import SessionRegistry

STOCKHOLM = {"longitude": 18.0686, "latitude": 59.3293}


@pytest.fixture
def api(client, populated):
    aggregator = RoadDataAggregator(client)
    sessions = SessionRegistry(aggregator)
    app.dependency_overrides[get_aggregator] = lambda: aggregator
    app.dependency_overrides[get_sessions] = lambda: sessions
    transport = ASGITransport(app=app)
    yield AsyncClient(transport=transport, base_url="http://test")
    app.dependency_overrides.clear()


@pytest.mark.asyncio
class TestCoordinates:
    async def test_health(self, api):
        resp = await api.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    async def test_coordinates(self, api):
        resp = await api.get("/coordinates", params={"lon": 15.0, "lat": 62.0})
        assert resp.status_code == 200
        data = resp.json()
        assert data["longitude"] == 15.0
        assert data["latitude"] == 62.0
        assert data["easting"] == pytest.approx(500000, abs=0.01)

    async def test_coordinates_out_of_range(self, api):
        resp = await api.get("/coordinates", params={"lon": 15.0, "lat": 95.0})
        assert resp.status_code == 400

    async def test_coordinates_missing_param(self, api):
        resp = await api.get("/coordinates", params={"lon": 15.0})
        assert resp.status_code == 422


@pytest.mark.asyncio
class TestLookup:
    async def test_lookup(self, api):
        resp = await api.post("/lookup", json=STOCKHOLM)
        assert resp.status_code == 200
        data = resp.json()
        assert data["overall_success"] is True
        assert data["resolve"]["element_id"] == "E123"
        assert set(data["attributes"]) == {
            "RoadNumber",
            "StreetName",
            "FunctionalRoadClass",
            "SpeedLimit",
            "RoadAuthority",
            "RoadWidth",
        }
        assert data["attributes"]["SpeedLimit"]["message"] == "Hittade 2 hastighetsgränser"
        assert "raw_response" not in data["resolve"]

    async def test_partial_failure_still_200(self, api, populated):
        populated.fail("Vägbredd", 500)
        resp = await api.post("/lookup", json=STOCKHOLM)
        assert resp.status_code == 200
        width = resp.json()["attributes"]["RoadWidth"]
        assert width["success"] is False
        assert width["items"] == []
        assert "500" in width["error_message"]

    async def test_invalid_point(self, api):
        resp = await api.post("/lookup", json={"longitude": 18.0, "latitude": -100.0})
        assert resp.status_code == 400

    async def test_projected(self, api):
        resp = await api.post("/lookup/projected", json={"easting": 500000, "northing": 6580000})
        assert resp.status_code == 200
        data = resp.json()
        assert data["point"] == {"easting": 500000.0, "northing": 6580000.0}
        assert data["overall_success"] is True

    @pytest.mark.parametrize("easting", ["NaN", "inf", "-Infinity"])
    async def test_projected_non_finite(self, api, populated, easting):
        resp = await api.post("/lookup/projected", json={"easting": easting, "northing": 6580000})
        assert resp.status_code == 400
        assert populated.queries == []


@pytest.mark.asyncio
class TestSessions:
    async def test_select_then_state(self, api):
        resp = await api.post("/sessions/abc/select", json=STOCKHOLM)
        assert resp.status_code == 200

        resp = await api.get("/sessions/abc")
        assert resp.status_code == 200
        state = resp.json()
        assert state["generation"] == 1
        assert state["selected"] == STOCKHOLM
        assert state["result"]["resolve"]["element_id"] == "E123"

    async def test_unknown_session(self, api):
        resp = await api.get("/sessions/nope")
        assert resp.status_code == 404

    async def test_select_invalid_point(self, api):
        resp = await api.post("/sessions/abc/select", json={"longitude": 500.0, "latitude": 59.0})
        assert resp.status_code == 400
