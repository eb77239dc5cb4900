"""Errors raised by the simulation engine."""

from typing import Optional, Tuple


class ProjectileMotionError(Exception):
    """Base class for every error the engine raises."""


class CapacityExceeded(ProjectileMotionError):
    """Fire refused because the flying-trajectory cap is reached."""

    def __init__(self, flying: int, limit: int):
        self.flying = flying
        self.limit = limit
        super().__init__(
            f"{flying} trajectories already flying (limit {limit})"
        )


class InvalidParameter(ProjectileMotionError, ValueError):
    """A launch or configuration value lies outside its allowed range."""

    def __init__(self, name: str, value, valid_range: Optional[Tuple[float, float]] = None):
        self.name = name
        self.value = value
        self.valid_range = valid_range
        if valid_range is None:
            message = f"invalid {name}: {value!r}"
        else:
            message = (f"{name}={value!r} outside "
                       f"[{valid_range[0]}, {valid_range[1]}]")
        super().__init__(message)


class IllegalOperation(ProjectileMotionError):
    """Operation not allowed in the object's current lifecycle state."""
