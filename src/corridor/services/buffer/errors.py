"""Failure kinds raised while building a corridor buffer."""

from __future__ import annotations


class CorridorError(ValueError):
    """Base class for request-terminal corridor failures."""

    default_message = "Unable to build corridor buffer."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidParameter(CorridorError):
    default_message = "Invalid corridor parameter."


class NoMatchingRoad(CorridorError):
    default_message = "Could not find road with that name near the selection."


class DeadEnd(CorridorError):
    default_message = "Dead end found."


class WalkLimitExceeded(DeadEnd):
    default_message = "Walk exceeded the maximum number of steps."


class DegenerateGeometry(CorridorError):
    default_message = "Threshold distance is too short to construct a valid path."
