"""
Simulation Constants
====================
Truths about the simulated world, sampling resolution, population caps and
the valid ranges for every launch parameter.

The module-level values are the defaults; ``SimulationConfig`` bundles them
so a host can inject its own set into the pool and the session.
"""

from dataclasses import dataclass
from typing import Tuple

from .exceptions import InvalidParameter


# ── World ─────────────────────────────────────────────────────────────────
GRAVITY_ON_EARTH     = 9.81          # m/s²
GRAVITY_RANGE        = (5.0, 20.0)   # m/s²
ALTITUDE_RANGE       = (0.0, 5000.0) # m, launch-site altitude above sea level

# ── Sampling & integration ────────────────────────────────────────────────
TIME_PER_DATA_POINT  = 0.025         # s  (sampling boundary)
MICRO_STEP           = 0.0025        # s  (integrator step)
STEP_DELTA           = 0.016         # s  (one frame for single-stepping)

# ── Population caps ───────────────────────────────────────────────────────
MAX_NUMBER_OF_PROJECTILES          = 5
MAX_NUMBER_OF_FLYING_PROJECTILES   = 3

# ── Cannon & projectile ranges ────────────────────────────────────────────
CANNON_HEIGHT_RANGE        = (0.0, 15.0)    # m
CANNON_ANGLE_RANGE         = (-90.0, 90.0)  # degrees
LAUNCH_VELOCITY_RANGE      = (0.0, 30.0)    # m/s
DRAG_COEFFICIENT_RANGE     = (0.0, 1.0)     # 0 disables drag
PROJECTILE_MASS_RANGE      = (1.0, 10.0)    # kg, cannonball / custom
PROJECTILE_DIAMETER_RANGE  = (0.1, 1.0)     # m, cannonball / custom

CANNON_HEIGHT_DEFAULT      = 0.0
CANNON_ANGLE_DEFAULT       = 80.0
LAUNCH_VELOCITY_DEFAULT    = 18.0

# ── Target ────────────────────────────────────────────────────────────────
TARGET_X_DEFAULT     = 15.0          # m
TARGET_WIDTH         = 3.0           # m

# ── Clock ─────────────────────────────────────────────────────────────────
SPEED_SCALES = {
    'normal': 1.0,
    'slow': 0.33,
}


def check_speed_scales(speed_scales) -> dict:
    """Validate a speed-name → frame-delta multiplier table."""
    scales = dict(speed_scales)
    if scales.get('normal') != 1.0:
        raise InvalidParameter('speed_scales', scales.get('normal'), (1.0, 1.0))
    if 'slow' in scales and not 0.0 < scales['slow'] < 1.0:
        raise InvalidParameter('speed_scales', scales['slow'], (0.0, 1.0))
    return scales


@dataclass(frozen=True)
class SimulationConfig:
    """Constants consumed by the engine. Defaults mirror the module values."""
    gravity: float = GRAVITY_ON_EARTH
    time_per_data_point: float = TIME_PER_DATA_POINT
    micro_step: float = MICRO_STEP
    step_delta: float = STEP_DELTA
    max_projectiles: int = MAX_NUMBER_OF_PROJECTILES
    max_flying_projectiles: int = MAX_NUMBER_OF_FLYING_PROJECTILES

    gravity_range: Tuple[float, float] = GRAVITY_RANGE
    altitude_range: Tuple[float, float] = ALTITUDE_RANGE
    cannon_height_range: Tuple[float, float] = CANNON_HEIGHT_RANGE
    cannon_angle_range: Tuple[float, float] = CANNON_ANGLE_RANGE
    launch_velocity_range: Tuple[float, float] = LAUNCH_VELOCITY_RANGE
    drag_coefficient_range: Tuple[float, float] = DRAG_COEFFICIENT_RANGE

    target_center: float = TARGET_X_DEFAULT
    target_width: float = TARGET_WIDTH
    # (name, multiplier) pairs; a tuple keeps the config hashable
    speed_scales: Tuple[Tuple[str, float], ...] = tuple(SPEED_SCALES.items())

    def __post_init__(self):
        if self.micro_step <= 0:
            raise InvalidParameter("micro_step", self.micro_step)
        if self.time_per_data_point <= 0:
            raise InvalidParameter("time_per_data_point", self.time_per_data_point)
        ratio = self.time_per_data_point / self.micro_step
        if ratio < 1.0 - 1e-9 or abs(ratio - round(ratio)) > 1e-9:
            # sampling boundaries must fall on micro-step boundaries
            raise InvalidParameter("time_per_data_point", self.time_per_data_point)
        if self.max_flying_projectiles > self.max_projectiles:
            raise InvalidParameter("max_flying_projectiles", self.max_flying_projectiles,
                                   (0, self.max_projectiles))
        if not self.target_width > 0:
            raise InvalidParameter("target_width", self.target_width)
        check_speed_scales(self.speed_scales)

    @property
    def steps_per_data_point(self) -> int:
        """Number of micro-steps between two sampling boundaries."""
        return int(round(self.time_per_data_point / self.micro_step))


DEFAULT_CONFIG = SimulationConfig()
