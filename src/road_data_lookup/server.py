"""FastAPI server for map-click road lookups."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query, Request

from .aggregator import RoadDataAggregator
from .client import RoadDataClient
from .config import VERSION, configure_logging, get_settings
from .errors import InvalidCoordinate
from .models import AggregateResult, CoordinateView, GeoPoint, ProjectedPoint, SessionState
from .projection import check_projected, format_coordinates, to_projected
from .session import SessionRegistry


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level)
    async with RoadDataClient(settings) as client:
        aggregator = RoadDataAggregator(
            client,
            max_distance_meters=settings.max_distance_meters,
            include_raw=settings.include_raw,
        )
        app.state.aggregator = aggregator
        app.state.sessions = SessionRegistry(aggregator)
        yield


app = FastAPI(title="Road Data Lookup", version=VERSION, lifespan=lifespan)


def get_aggregator(request: Request) -> RoadDataAggregator:
    return request.app.state.aggregator


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/coordinates")
async def coordinates(lon: float = Query(...), lat: float = Query(...)) -> CoordinateView:
    """Return a selected point in both WGS84 and SWEREF 99 TM."""
    return _transform(format_coordinates, GeoPoint(longitude=lon, latitude=lat))


@app.post("/lookup")
async def lookup(
    point: GeoPoint,
    aggregator: RoadDataAggregator = Depends(get_aggregator),
) -> AggregateResult:
    """Road attributes nearest to a clicked WGS84 point.

    Always answers 200 once the point is valid; upstream failures are reported
    inside the result.
    """
    projected = _transform(to_projected, point)
    return await aggregator.get_road_data_for_point(projected)


@app.post("/lookup/projected")
async def lookup_projected(
    point: ProjectedPoint,
    aggregator: RoadDataAggregator = Depends(get_aggregator),
) -> AggregateResult:
    return await aggregator.get_road_data_for_point(_transform(check_projected, point))


@app.post("/sessions/{session_id}/select")
async def select(
    session_id: str,
    point: GeoPoint,
    sessions: SessionRegistry = Depends(get_sessions),
) -> AggregateResult:
    """Select a point within a session; answers 409 if a later selection superseded it."""
    session = sessions.get_or_create(session_id)
    try:
        result = await session.select(point)
    except InvalidCoordinate as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if result is None:
        raise HTTPException(status_code=409, detail="Superseded by a newer selection")
    return result


@app.get("/sessions/{session_id}")
async def session_state(
    session_id: str,
    sessions: SessionRegistry = Depends(get_sessions),
) -> SessionState:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return session.state()


def _transform(transform, point):
    try:
        return transform(point)
    except InvalidCoordinate as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
