"""
Trajectory Sampling
===================
A Trajectory integrates one launch at a fixed micro-step and records a
DataPoint at every sampling boundary, independent of the frame delta it
is advanced by. Riders (ProjectileObjects) travel along the recorded
curve with their own elapsed time.

Point times come from an integer micro-step counter, so any split of the
same simulated duration into frames yields bit-identical DataPoints.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Tuple

from . import integrator
from .atmosphere import air_density
from .constants import DEFAULT_CONFIG, SimulationConfig
from .exceptions import IllegalOperation
from .integrator import KinematicState
from .logger import logger
from .projectile import LaunchParameters

# Tolerances when comparing summed frame deltas against micro-step times.
_TIME_EPSILON = 1e-9
_RIDER_EPSILON = 1e-6


def _frozen(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class DataPoint:
    """Recorded state of a trajectory at one instant. Immutable."""
    time: float                  # s since launch
    position: np.ndarray         # [x, y] (m)
    velocity: np.ndarray         # [vx, vy] (m/s)
    acceleration: np.ndarray     # [ax, ay] (m/s²)
    air_density: float          # kg/m³, 0 when air resistance is off
    drag_force: np.ndarray       # [Fx, Fy] (N)
    gravity_force: np.ndarray    # [0, -m g] (N)

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])

    @property
    def speed(self) -> float:
        return float(np.hypot(self.velocity[0], self.velocity[1]))


class ProjectileObject:
    """A launched projectile riding a trajectory's recorded curve."""

    def __init__(self, trajectory: 'Trajectory', rider_id: int):
        self.trajectory = trajectory
        self.id = rider_id
        self.time = 0.0
        self.index = 0
        self.landed = False

    @property
    def data_point(self) -> DataPoint:
        """The latest recorded point not later than this rider's time."""
        return self.trajectory._data_points[self.index]

    @property
    def valid(self) -> bool:
        return self.trajectory.valid

    def _advance(self, dt: float):
        if self.landed:
            return
        self.time += dt
        points = self.trajectory._data_points
        while (self.index + 1 < len(points)
               and points[self.index + 1].time <= self.time + _RIDER_EPSILON):
            self.index += 1
        if self.trajectory.landed and self.index == len(points) - 1:
            self.landed = True

    def __repr__(self):
        return (f"ProjectileObject(id={self.id}, t={self.time:.3f}, "
                f"index={self.index}, landed={self.landed})")


class Trajectory:
    """
    Time-ordered DataPoint sequence for one launch, plus its riders.

    Created by TrajectoryPool.fire; ``rank`` is derived from the owning
    pool and is None once the trajectory has been evicted or erased.
    """

    def __init__(self, launch: LaunchParameters,
                 config: SimulationConfig = DEFAULT_CONFIG,
                 method: str = 'rk4'):
        if method not in integrator.METHODS:
            raise ValueError(
                f"Unknown integration method '{method}'. "
                f"Available: {list(integrator.METHODS.keys())}"
            )
        self.launch = launch
        self.config = config
        self.method = method

        self._data_points: List[DataPoint] = []
        self._riders: List[ProjectileObject] = []
        self._next_rider_id = 0
        self._pool = None
        self._valid = True
        self._landed = False
        self._step_count = 0
        self._time_budget = 0.0

        self._state = KinematicState(
            position=launch.initial_position(),
            velocity=launch.initial_velocity_vector(),
        )
        self._record(self._density_at(self._state.position[1]))

    # ── Read accessors ────────────────────────────────────────────────────
    @property
    def data_points(self) -> Tuple[DataPoint, ...]:
        return tuple(self._data_points)

    @property
    def riders(self) -> Tuple[ProjectileObject, ...]:
        return tuple(self._riders)

    @property
    def landed(self) -> bool:
        return self._landed

    @property
    def flying(self) -> bool:
        """True while at least one rider has not reached the ground."""
        return self._valid and any(not r.landed for r in self._riders)

    @property
    def valid(self) -> bool:
        return self._valid

    @property
    def rank(self) -> Optional[int]:
        """0 for the most recently fired trajectory, None once removed."""
        if self._pool is None:
            return None
        return self._pool.rank_of(self)

    @property
    def spec(self):
        return self.launch.spec

    @property
    def landing_point(self) -> Optional[DataPoint]:
        return self._data_points[-1] if self._landed else None

    def times(self) -> np.ndarray:
        return np.array([p.time for p in self._data_points])

    def positions(self) -> np.ndarray:
        """Recorded positions, shape (N, 2)."""
        return np.array([p.position for p in self._data_points])

    # ── Mutation ──────────────────────────────────────────────────────────
    def add_rider(self) -> ProjectileObject:
        if not self._valid:
            raise IllegalOperation("cannot add a rider to a removed trajectory")
        if self._landed:
            raise IllegalOperation("cannot add a rider to a landed trajectory")
        rider = ProjectileObject(self, self._next_rider_id)
        self._next_rider_id += 1
        self._riders.append(rider)
        return rider

    def step(self, dt: float) -> bool:
        """
        Advance by ``dt`` simulated seconds.

        Integrates until the accumulated time is used up or the ground is
        reached, then moves the riders. Returns True if the trajectory
        landed during this call.
        """
        if not self._valid:
            raise IllegalOperation("cannot step a removed trajectory")
        if dt < 0:
            raise ValueError("dt must be >= 0")

        landed_now = False
        if not self._landed:
            micro_step = self.config.micro_step
            self._time_budget += dt
            while self._time_budget + _TIME_EPSILON >= micro_step:
                self._time_budget -= micro_step
                if self._micro_step():
                    landed_now = True
                    self._time_budget = 0.0
                    break

        for rider in self._riders:
            rider._advance(dt)
        return landed_now

    def _invalidate(self):
        self._valid = False
        self._pool = None

    def _density_at(self, height: float) -> float:
        """Density at ``height`` above the launch site (ground level below 0)."""
        return air_density(self.launch.altitude + max(float(height), 0.0),
                           self.launch.air_resistance_on)

    def _micro_step(self) -> bool:
        launch = self.launch
        density = self._density_at(self._state.position[1])
        self._state = integrator.step(
            self._state, launch.spec, launch.diameter, launch.drag_coefficient,
            density, self.config.micro_step, launch.gravity, self.method,
        )
        self._step_count += 1

        if self._state.position[1] <= 0.0:
            self._record(density)
            self._landed = True
            logger.debug("trajectory landed at t=%.4f s, x=%.3f m",
                         self._data_points[-1].time,
                         self._data_points[-1].x)
            return True
        if self._step_count % self.config.steps_per_data_point == 0:
            self._record(density)
        return False

    def _record(self, density: float):
        launch = self.launch
        velocity = self._state.velocity
        drag = integrator.drag_force(velocity, density,
                                     launch.drag_coefficient, launch.spec.area)
        self._data_points.append(DataPoint(
            time=self._step_count * self.config.micro_step,
            position=_frozen(self._state.position),
            velocity=_frozen(velocity),
            acceleration=_frozen(integrator.compute_acceleration(
                velocity, launch.spec, launch.diameter,
                launch.drag_coefficient, density, launch.gravity)),
            air_density=density,
            drag_force=_frozen(drag),
            gravity_force=_frozen(integrator.gravity_force(launch.mass,
                                                           launch.gravity)),
        ))

    # ── Flight summary ────────────────────────────────────────────────────
    @property
    def range_total(self) -> float:
        """Horizontal distance of the last recorded point (m)."""
        return self._data_points[-1].x

    @property
    def max_altitude(self) -> float:
        """Maximum recorded height (m)."""
        return float(max(p.y for p in self._data_points))

    @property
    def flight_time(self) -> float:
        """Time of the last recorded point (s)."""
        return self._data_points[-1].time

    @property
    def impact_speed(self) -> float:
        """Speed at the last recorded point (m/s)."""
        return self._data_points[-1].speed

    @property
    def impact_angle_deg(self) -> float:
        """Angle of descent at the last point (degrees below horizontal)."""
        vx, vy = self._data_points[-1].velocity
        return float(np.degrees(np.arctan2(-vy, vx)))

    def summary(self) -> str:
        """Human-readable summary string."""
        launch = self.launch
        status = 'landed' if self._landed else 'in flight'
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY — {launch.spec.name:<38s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Mass         : {launch.mass:>10.3f} kg{'':<23s} ║",
            f"║  Diameter     : {launch.diameter:>10.3f} m{'':<24s} ║",
            f"║  Drag coeff   : {launch.drag_coefficient:>10.3f}{'':<26s} ║",
            f"║  Air resist.  : {'on' if launch.air_resistance_on else 'off':>10s}{'':<26s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Launch speed : {launch.launch_speed:>10.2f} m/s{'':<22s} ║",
            f"║  Launch angle : {launch.launch_angle:>10.2f} °{'':<24s} ║",
            f"║  Launch height: {launch.launch_height:>10.2f} m{'':<24s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Status       : {status:>10s}{'':<26s} ║",
            f"║  Range        : {self.range_total:>10.2f} m{'':<24s} ║",
            f"║  Max height   : {self.max_altitude:>10.2f} m{'':<24s} ║",
            f"║  Flight time  : {self.flight_time:>10.3f} s{'':<24s} ║",
            f"║  Impact speed : {self.impact_speed:>10.2f} m/s{'':<22s} ║",
            f"║  Impact angle : {self.impact_angle_deg:>10.1f} °{'':<24s} ║",
            f"║  Data points  : {len(self._data_points):>10d}{'':<26s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)

    def __repr__(self):
        return (f"Trajectory(spec={self.launch.spec.name!r}, "
                f"points={len(self._data_points)}, riders={len(self._riders)}, "
                f"landed={self._landed}, rank={self.rank})")
