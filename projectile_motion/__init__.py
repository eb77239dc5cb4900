"""
Projectile Motion Engine
========================
Trajectory computation and lifecycle engine for cannon-launched
projectiles, meant to sit underneath an interactive presentation layer:
  - Gravity and quadratic air drag, integrated with RK4 at a fixed micro-step
  - ISA atmosphere (density vs altitude), switchable air resistance
  - Fixed-interval DataPoint sampling, independent of frame rate
  - Bounded pool of trajectories with rider sharing and eviction
  - Ground-crossing interpolation and target scoring
  - Play / pause / slow-motion / single-step clock

Validated against the closed-form drag-free range and an adaptive
scipy reference solution with drag.
"""

from .atmosphere import (
    Atmosphere, air_density, isa_temperature, isa_pressure, isa_density,
    SEA_LEVEL_DENSITY,
)
from .clock import SimulationClock
from .constants import SimulationConfig, DEFAULT_CONFIG
from .exceptions import (
    ProjectileMotionError, CapacityExceeded, InvalidParameter, IllegalOperation,
)
from .integrator import KinematicState, drag_force, compute_acceleration, step
from .model import ProjectileMotionModel, SessionSnapshot
from .pool import TrajectoryPool
from .projectile import (
    ProjectileSpec, LaunchParameters, PROJECTILE_TYPES, CANNONBALL,
    get_projectile_type,
)
from .scoring import (
    TargetZone, ScoreEvent, Score, evaluate_landing, landing_crossing,
)
from .trajectory import DataPoint, ProjectileObject, Trajectory
from .validation import (
    validate_against_analytic, validate_against_reference_solver,
    run_all_validations,
)

__version__ = "1.0.0"
__all__ = [
    'Atmosphere', 'air_density', 'isa_temperature', 'isa_pressure',
    'isa_density', 'SEA_LEVEL_DENSITY',
    'SimulationClock', 'SimulationConfig', 'DEFAULT_CONFIG',
    'ProjectileMotionError', 'CapacityExceeded', 'InvalidParameter',
    'IllegalOperation',
    'KinematicState', 'drag_force', 'compute_acceleration', 'step',
    'ProjectileMotionModel', 'SessionSnapshot', 'TrajectoryPool',
    'ProjectileSpec', 'LaunchParameters', 'PROJECTILE_TYPES', 'CANNONBALL',
    'get_projectile_type',
    'TargetZone', 'ScoreEvent', 'Score', 'evaluate_landing', 'landing_crossing',
    'DataPoint', 'ProjectileObject', 'Trajectory',
    'validate_against_analytic', 'validate_against_reference_solver',
    'run_all_validations',
]
