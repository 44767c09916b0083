"""Normalization of the road-data API JSON envelope.

Successful responses look like::

    {"RESPONSE": {"RESULT": [{"<ObjectType>": {...} | [{...}, ...],
                              "INFO": {"EVALRESULT": [{"<alias>": {...}}]}}]}}

An object collection holds a single object or an array depending on
cardinality, and is left out entirely when nothing matched. Everything
downstream of this module only sees lists of records.
"""

from __future__ import annotations

from typing import Any

from .errors import MalformedResponse


def first_result(payload: Any) -> dict[str, Any]:
    """Return the first RESULT entry, or an empty dict when the envelope holds none."""
    if not isinstance(payload, dict) or not isinstance(payload.get("RESPONSE"), dict):
        raise MalformedResponse("Response is missing the RESPONSE envelope")

    results = payload["RESPONSE"].get("RESULT")
    if results is None:
        return {}
    if not isinstance(results, list):
        raise MalformedResponse("RESPONSE.RESULT is not a list")
    if not results:
        return {}

    result = results[0]
    if not isinstance(result, dict):
        raise MalformedResponse("RESPONSE.RESULT[0] is not an object")
    if "ERROR" in result:
        error = result["ERROR"]
        detail = error.get("MESSAGE") if isinstance(error, dict) else error
        raise MalformedResponse(f"Upstream reported an error: {detail}")
    return result


def as_records(value: Any, name: str) -> list[dict[str, Any]]:
    """Normalize an absent, single or multi-valued collection to a list of records."""
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        if not all(isinstance(v, dict) for v in value):
            raise MalformedResponse(f"{name} contains non-object entries")
        return value
    raise MalformedResponse(f"{name} has unexpected type {type(value).__name__}")


def records(payload: Any, object_type: str) -> list[dict[str, Any]]:
    """Records of ``object_type`` from a query response."""
    return as_records(first_result(payload).get(object_type), object_type)


def eval_result(payload: Any, alias: str) -> dict[str, Any] | None:
    """The first value produced by the EVAL clause named ``alias``, if any."""
    info = first_result(payload).get("INFO")
    if info is None:
        return None
    if not isinstance(info, dict):
        raise MalformedResponse("RESULT.INFO is not an object")

    for entry in as_records(info.get("EVALRESULT"), "INFO.EVALRESULT"):
        if alias in entry:
            values = as_records(entry[alias], alias)
            return values[0] if values else None
    return None
