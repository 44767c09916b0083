"""Per-user interaction state for successive map selections."""

from __future__ import annotations

import logging
from collections import OrderedDict

from .aggregator import RoadDataAggregator
from .models import AggregateResult, GeoPoint, ProjectedPoint, SessionState
from .projection import to_projected

logger = logging.getLogger(__name__)

MAX_SESSIONS = 1024


class LookupSession:
    """Holds the current selection and the result applied for it.

    Every selection gets a new generation number. A lookup whose generation
    is no longer current when it completes is dropped, so a slow answer for an
    earlier click never replaces the answer for a later one.
    """

    def __init__(self, aggregator: RoadDataAggregator):
        self._aggregator = aggregator
        self._generation = 0
        self.selected: GeoPoint | None = None
        self.projected: ProjectedPoint | None = None
        self.result: AggregateResult | None = None

    @property
    def generation(self) -> int:
        return self._generation

    async def select(self, geo: GeoPoint) -> AggregateResult | None:
        """Look up road data for ``geo``.

        Returns the applied result, or None when a newer selection superseded
        this one before it completed. Raises InvalidCoordinate without touching
        the session state.
        """
        projected = to_projected(geo)

        self._generation += 1
        generation = self._generation
        self.selected = geo
        self.projected = projected
        self.result = None

        result = await self._aggregator.get_road_data_for_point(projected)
        if generation != self._generation:
            logger.debug("Dropping result of selection %d, current is %d", generation, self._generation)
            return None

        self.result = result
        return result

    def state(self) -> SessionState:
        return SessionState(
            generation=self._generation,
            selected=self.selected,
            projected=self.projected,
            result=self.result,
        )


class SessionRegistry:
    """Lookup sessions by id, evicting the least recently used past ``max_sessions``."""

    def __init__(self, aggregator: RoadDataAggregator, max_sessions: int = MAX_SESSIONS):
        self._aggregator = aggregator
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, LookupSession] = OrderedDict()

    def get(self, session_id: str) -> LookupSession | None:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def get_or_create(self, session_id: str) -> LookupSession:
        session = self.get(session_id)
        if session is None:
            session = self._sessions[session_id] = LookupSession(self._aggregator)
            while len(self._sessions) > self._max_sessions:
                self._sessions.popitem(last=False)
        return session

    def __len__(self) -> int:
        return len(self._sessions)
