"""
Projectile Definition & Launch Parameters
==========================================
Defines the ProjectileSpec dataclass, the catalogue of benchmark objects
and the frozen LaunchParameters snapshot taken when the cannon fires.

Coordinate system:
  x = downrange (horizontal, cannon muzzle at x = 0)
  y = height above the ground (vertical, up positive)
"""

import math
import numpy as np
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .constants import (
    GRAVITY_ON_EARTH, PROJECTILE_MASS_RANGE, PROJECTILE_DIAMETER_RANGE,
)
from .exceptions import InvalidParameter


@dataclass(frozen=True)
class ProjectileSpec:
    """
    Physical description of a projectile type.

    ``mass_range`` and ``diameter_range`` are the values an input layer may
    offer for this type; ``fire`` rejects anything outside them.
    """
    name: str = "cannonball"
    mass: float = 5.44                # kg
    diameter: float = 0.11            # m
    drag_coefficient: float = 0.47    # Cd (dimensionless), 0 disables drag
    mass_range: Tuple[float, float] = PROJECTILE_MASS_RANGE
    diameter_range: Tuple[float, float] = PROJECTILE_DIAMETER_RANGE

    def __post_init__(self):
        if not self.mass > 0:
            raise InvalidParameter('mass', self.mass)
        if not self.diameter > 0:
            raise InvalidParameter('diameter', self.diameter)
        if not self.drag_coefficient >= 0:
            raise InvalidParameter('drag_coefficient', self.drag_coefficient)

    @property
    def area(self) -> float:
        """Reference cross-sectional area (m²)."""
        return cross_sectional_area(self.diameter)

    def with_values(self, mass: Optional[float] = None,
                    diameter: Optional[float] = None,
                    drag_coefficient: Optional[float] = None) -> 'ProjectileSpec':
        """Copy of this spec with the given values overridden."""
        changes = {}
        if mass is not None:
            changes['mass'] = mass
        if diameter is not None:
            changes['diameter'] = diameter
        if drag_coefficient is not None:
            changes['drag_coefficient'] = drag_coefficient
        return replace(self, **changes) if changes else self


def cross_sectional_area(diameter: float) -> float:
    return math.pi * (diameter / 2) ** 2


# ══════════════════════════════════════════════════════════════════════════
#  Benchmark objects
# ══════════════════════════════════════════════════════════════════════════

CANNONBALL = ProjectileSpec()

PROJECTILE_TYPES = {
    'cannonball': CANNONBALL,
    'pumpkin': ProjectileSpec(
        name='pumpkin', mass=5.0, diameter=0.37, drag_coefficient=0.6,
        mass_range=(1.0, 20.0), diameter_range=(0.2, 0.8),
    ),
    'golf_ball': ProjectileSpec(
        name='golf ball', mass=0.046, diameter=0.043, drag_coefficient=0.3,
        mass_range=(0.01, 0.1), diameter_range=(0.03, 0.06),
    ),
    'baseball': ProjectileSpec(
        name='baseball', mass=0.145, diameter=0.074, drag_coefficient=0.35,
        mass_range=(0.1, 0.2), diameter_range=(0.06, 0.09),
    ),
    'football': ProjectileSpec(
        name='football', mass=0.41, diameter=0.17, drag_coefficient=0.05,
        mass_range=(0.3, 0.5), diameter_range=(0.14, 0.2),
    ),
    'tank_shell': ProjectileSpec(
        name='tank shell', mass=17.6, diameter=0.12, drag_coefficient=0.04,
        mass_range=(10.0, 30.0), diameter_range=(0.1, 0.2),
    ),
    'piano': ProjectileSpec(
        name='piano', mass=400.0, diameter=2.2, drag_coefficient=1.0,
        mass_range=(300.0, 500.0), diameter_range=(1.5, 3.0),
    ),
    'human': ProjectileSpec(
        name='human', mass=70.0, diameter=0.5, drag_coefficient=0.9,
        mass_range=(40.0, 120.0), diameter_range=(0.3, 0.7),
    ),
    'car': ProjectileSpec(
        name='car', mass=993.0, diameter=2.0, drag_coefficient=0.82,
        mass_range=(800.0, 1200.0), diameter_range=(1.5, 2.5),
    ),
}


def get_projectile_type(key: str) -> ProjectileSpec:
    if key not in PROJECTILE_TYPES:
        raise InvalidParameter(
            'projectile type',
            f"{key!r} (available: {list(PROJECTILE_TYPES.keys())})",
        )
    return PROJECTILE_TYPES[key]


def check_range(name: str, value: float, valid_range: Tuple[float, float]) -> float:
    """Return ``value`` as a float, or raise InvalidParameter."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(name, value, valid_range) from None
    if not math.isfinite(value) or not valid_range[0] <= value <= valid_range[1]:
        raise InvalidParameter(name, value, valid_range)
    return value


# ══════════════════════════════════════════════════════════════════════════
#  Launch snapshot
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LaunchParameters:
    """
    Everything that determines a trajectory curve, frozen at fire time.

    Two launches with equal LaunchParameters trace the same curve, so a
    second one may ride an existing, still flying trajectory.
    """
    spec: ProjectileSpec                 # mass/diameter/Cd already applied
    launch_height: float = 0.0           # m
    launch_angle: float = 0.0            # degrees above horizontal
    launch_speed: float = 0.0            # m/s
    gravity: float = GRAVITY_ON_EARTH    # m/s²
    altitude: float = 0.0                # m, launch-site altitude
    air_resistance_on: bool = False

    @property
    def mass(self) -> float:
        return self.spec.mass

    @property
    def diameter(self) -> float:
        return self.spec.diameter

    @property
    def drag_coefficient(self) -> float:
        return self.spec.drag_coefficient

    def initial_velocity_vector(self) -> np.ndarray:
        """Convert launch speed + angle to [vx, vy]."""
        angle = np.radians(self.launch_angle)
        return np.array([
            self.launch_speed * np.cos(angle),
            self.launch_speed * np.sin(angle),
        ])

    def initial_position(self) -> np.ndarray:
        """Starting position [x, y]."""
        return np.array([0.0, self.launch_height])
