"""Resolve-then-fan-out orchestration of road attribute lookups."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from anyio import create_task_group

from .attributes import ATTRIBUTE_SPECS, fetch_attribute, substitute
from .client import RoadDataClient
from .models import AggregateResult, AttributeKind, AttributeResult, ElementId, ProjectedPoint, ResolveResult
from .resolver import DEFAULT_MAX_DISTANCE_METERS, resolve_nearest

logger = logging.getLogger(__name__)

Resolver = Callable[[RoadDataClient, ProjectedPoint, float], Awaitable[ResolveResult]]
Fetcher = Callable[[RoadDataClient, AttributeKind, ElementId], Awaitable[AttributeResult]]

_WithRaw = TypeVar("_WithRaw", AttributeResult, ResolveResult)

ALL_KINDS: tuple[AttributeKind, ...] = tuple(AttributeKind)

# StreetName coverage is sparse outside built-up areas; FunctionalRoadClass
# is shown in its place.
FALLBACKS: dict[AttributeKind, AttributeKind] = {
    AttributeKind.STREET_NAME: AttributeKind.FUNCTIONAL_ROAD_CLASS,
}


class RoadDataAggregator:
    """Collects every configured attribute for the road nearest to a point.

    Remote failures never raise: they end up in the returned
    :class:`AggregateResult` so a partial result can always be rendered.
    """

    def __init__(
        self,
        client: RoadDataClient,
        *,
        kinds: Iterable[AttributeKind | str] = ALL_KINDS,
        max_distance_meters: float = DEFAULT_MAX_DISTANCE_METERS,
        include_raw: bool = False,
        resolver: Resolver = resolve_nearest,
        fetcher: Fetcher = fetch_attribute,
    ):
        self.client = client
        self.kinds = _validate_kinds(kinds)
        if not max_distance_meters > 0:
            raise ValueError(f"max_distance_meters must be positive, got {max_distance_meters}")
        self.max_distance_meters = max_distance_meters
        self.include_raw = include_raw
        self._resolve = resolver
        self._fetch = fetcher

    async def get_road_data_for_point(self, point: ProjectedPoint) -> AggregateResult:
        resolve = await self._resolve(self.client, point, self.max_distance_meters)
        raw: dict[str, Any] | None = {"resolve": resolve.raw_response} if self.include_raw else None
        resolve = _without_raw(resolve)

        if not resolve.matched:
            return AggregateResult(
                point=point,
                resolve=resolve,
                attributes={},
                overall_success=resolve.success,
                raw_upstream_responses=raw,
            )

        element_id = resolve.element_id
        results = await self._fetch_all(element_id, self.kinds)
        await self._apply_fallbacks(element_id, results)

        attributes = {kind: results[kind] for kind in self.kinds}
        if raw is not None:
            raw.update((kind.value, result.raw_response) for kind, result in attributes.items())
        attributes = {kind: _without_raw(result) for kind, result in attributes.items()}

        failed = [kind.value for kind, result in attributes.items() if not result.success]
        if failed:
            logger.info("Element %r resolved with failed attributes: %s", element_id, ", ".join(failed))

        return AggregateResult(
            point=point,
            resolve=resolve,
            attributes=attributes,
            overall_success=True,
            raw_upstream_responses=raw,
        )

    async def _fetch_all(
        self, element_id: ElementId, kinds: Iterable[AttributeKind]
    ) -> dict[AttributeKind, AttributeResult]:
        """Run one fetch per kind concurrently and wait for all of them to settle."""
        results: dict[AttributeKind, AttributeResult] = {}

        async def task(kind: AttributeKind):
            results[kind] = await self._fetch(self.client, kind, element_id)

        async with create_task_group() as tg:
            for kind in kinds:
                tg.start_soon(task, kind)

        return results

    async def _apply_fallbacks(self, element_id: ElementId, results: dict[AttributeKind, AttributeResult]) -> None:
        for kind, replacement_kind in FALLBACKS.items():
            result = results.get(kind)
            if result is None or (result.success and result.items):
                continue

            replacement = results.get(replacement_kind)
            if replacement is None:
                replacement = await self._fetch(self.client, replacement_kind, element_id)

            if result.success:
                logger.debug(
                    "%s empty for element %r, showing %s instead", kind.value, element_id, replacement_kind.value
                )
            else:
                logger.warning(
                    "%s failed for element %r (%s), showing %s instead",
                    kind.value,
                    element_id,
                    result.error_message,
                    replacement_kind.value,
                )
            results[kind] = substitute(replacement, result)


def _without_raw(result: _WithRaw) -> _WithRaw:
    """Drop the upstream payload so results held by sessions stay small."""
    if result.raw_response is None:
        return result
    return result.model_copy(update={"raw_response": None})


def _validate_kinds(kinds: Iterable[AttributeKind | str]) -> tuple[AttributeKind, ...]:
    try:
        validated = tuple(AttributeKind(k) for k in kinds)
    except ValueError as e:
        raise ValueError(f"Unknown attribute kind: {e}") from e

    if not validated:
        raise ValueError("At least one attribute kind must be configured")
    if len(set(validated)) != len(validated):
        raise ValueError("Attribute kinds must not repeat")
    missing = [k.value for k in validated if k not in ATTRIBUTE_SPECS]
    if missing:
        raise ValueError(f"No attribute spec for: {', '.join(missing)}")
    return validated
