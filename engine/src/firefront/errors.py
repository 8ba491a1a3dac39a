"""Exceptions raised by the firefront engine."""

from __future__ import annotations


class FireFrontError(Exception):
    """Base class for engine errors."""


class MissingIgnitionError(FireFrontError):
    """An operation needs an ignition point and none is set."""

    def __init__(self, message: str = "Set the ignition point on the map first") -> None:
        super().__init__(message)


class IgnitionAlreadySetError(FireFrontError):
    """The ignition point can only be set once per run."""


class AnimatorBusyError(FireFrontError):
    """The animator was asked to start while not idle."""


class EnvironmentFetchError(FireFrontError):
    """An environmental lookup failed or returned no usable data."""
