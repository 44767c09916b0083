"""Exception taxonomy for the road-data lookup pipeline."""


class RoadDataError(Exception):
    """Base class for errors raised inside the lookup pipeline."""


class InvalidCoordinate(RoadDataError, ValueError):
    """A geographic or projected coordinate cannot be transformed."""


class TransportFailure(RoadDataError):
    """Network error, timeout or non-2xx status from the upstream service."""


class MalformedResponse(RoadDataError):
    """The upstream response body does not match the expected envelope."""
