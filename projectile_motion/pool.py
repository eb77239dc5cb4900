"""
Trajectory Pool
===============
Owns the bounded, newest-first collection of trajectories.

Invariants:
  - at most ``config.max_projectiles`` trajectories in total; the oldest
    is evicted when a new one pushes the count over the cap
  - at most ``config.max_flying_projectiles`` flying trajectories; a fire
    that would exceed this is refused with CapacityExceeded
  - a rejected operation leaves the pool exactly as it was
"""

from typing import List, Optional, Tuple

from .atmosphere import Atmosphere
from .clock import SimulationClock
from .constants import DEFAULT_CONFIG, SimulationConfig
from .exceptions import CapacityExceeded
from .logger import logger
from .projectile import LaunchParameters, ProjectileSpec, check_range
from .trajectory import Trajectory


class TrajectoryPool:

    def __init__(self, config: SimulationConfig = DEFAULT_CONFIG,
                 clock: Optional[SimulationClock] = None,
                 atmosphere: Optional[Atmosphere] = None,
                 gravity: Optional[float] = None,
                 method: str = 'rk4'):
        self.config = config
        self.clock = clock if clock is not None else SimulationClock(
            step_delta=config.step_delta, speed_scales=config.speed_scales)
        self.atmosphere = atmosphere if atmosphere is not None else Atmosphere()
        self.gravity = config.gravity if gravity is None else gravity
        self.method = method
        self._trajectories: List[Trajectory] = []

    # ── Read accessors ────────────────────────────────────────────────────
    def trajectories(self) -> Tuple[Trajectory, ...]:
        """Trajectories ordered by rank (newest first)."""
        return tuple(self._trajectories)

    def __len__(self):
        return len(self._trajectories)

    def __iter__(self):
        return iter(self.trajectories())

    def rank_of(self, trajectory: Trajectory) -> Optional[int]:
        for rank, candidate in enumerate(self._trajectories):
            if candidate is trajectory:
                return rank
        return None

    @property
    def flying_count(self) -> int:
        return sum(1 for t in self._trajectories if t.flying)

    @property
    def can_fire(self) -> bool:
        """Whether a new (non-aliased) trajectory would be accepted."""
        return self.flying_count < self.config.max_flying_projectiles

    # ── Commands ──────────────────────────────────────────────────────────
    def launch_parameters(self, spec: ProjectileSpec, diameter: float,
                          drag_coefficient: float, launch_height: float,
                          launch_angle: float, launch_speed: float,
                          mass: Optional[float] = None) -> LaunchParameters:
        """Validate the inputs and freeze them with the current environment."""
        config = self.config
        mass = spec.mass if mass is None else mass
        mass = check_range('mass', mass, spec.mass_range)
        diameter = check_range('diameter', diameter, spec.diameter_range)
        drag_coefficient = check_range('drag_coefficient', drag_coefficient,
                                       config.drag_coefficient_range)
        launch_height = check_range('launch_height', launch_height,
                                    config.cannon_height_range)
        launch_angle = check_range('launch_angle', launch_angle,
                                   config.cannon_angle_range)
        launch_speed = check_range('launch_speed', launch_speed,
                                   config.launch_velocity_range)
        gravity = check_range('gravity', self.gravity, config.gravity_range)
        altitude = check_range('altitude', self.atmosphere.altitude,
                               config.altitude_range)

        return LaunchParameters(
            spec=spec.with_values(mass=mass, diameter=diameter,
                                  drag_coefficient=drag_coefficient),
            launch_height=launch_height,
            launch_angle=launch_angle,
            launch_speed=launch_speed,
            gravity=gravity,
            altitude=altitude,
            air_resistance_on=bool(self.atmosphere.air_resistance_on),
        )

    def fire(self, spec: ProjectileSpec, diameter: float,
             drag_coefficient: float, launch_height: float,
             launch_angle: float, launch_speed: float,
             mass: Optional[float] = None) -> Trajectory:
        """
        Launch a projectile.

        A launch whose parameters equal those of a trajectory that has not
        landed yet rides that trajectory; otherwise a new trajectory is
        created at rank 0 and the oldest is evicted past the total cap.

        Raises
        ------
        InvalidParameter
            Any value outside its configured range.
        CapacityExceeded
            A new trajectory is needed but the flying cap is reached.
        """
        launch = self.launch_parameters(spec, diameter, drag_coefficient,
                                        launch_height, launch_angle,
                                        launch_speed, mass)

        existing = self.find_flying(launch)
        if existing is not None:
            rider = existing.add_rider()
            logger.debug("rider %d attached to trajectory at rank %d",
                         rider.id, existing.rank)
            return existing

        flying = self.flying_count
        if flying >= self.config.max_flying_projectiles:
            logger.debug("fire refused: %d trajectories flying", flying)
            raise CapacityExceeded(flying, self.config.max_flying_projectiles)

        trajectory = Trajectory(launch, self.config, self.method)
        trajectory.add_rider()
        self._trajectories.insert(0, trajectory)
        trajectory._pool = self
        logger.debug("fired %s: speed=%.2f m/s angle=%.1f° height=%.2f m",
                     launch.spec.name, launch.launch_speed,
                     launch.launch_angle, launch.launch_height)

        while len(self._trajectories) > self.config.max_projectiles:
            evicted = self._trajectories.pop()
            evicted._invalidate()
            logger.debug("evicted oldest trajectory (%s)", evicted.spec.name)
        return trajectory

    def find_flying(self, launch: LaunchParameters) -> Optional[Trajectory]:
        """Trajectory that has not landed and was fired with ``launch``."""
        for trajectory in self._trajectories:
            if not trajectory.landed and trajectory.launch == launch:
                return trajectory
        return None

    def advance(self, frame_delta: float) -> List[Trajectory]:
        """Scale ``frame_delta`` through the clock and step by the result."""
        return self.advance_simulated(self.clock.advance(frame_delta))

    def advance_simulated(self, dt: float) -> List[Trajectory]:
        """
        Step every flying trajectory by ``dt`` simulated seconds, in rank
        order. Returns the trajectories that landed during this call.
        """
        landed = []
        if dt <= 0:
            return landed
        for trajectory in tuple(self._trajectories):
            if trajectory.flying and trajectory.step(dt):
                landed.append(trajectory)
        return landed

    def erase(self):
        """Remove every trajectory."""
        for trajectory in self._trajectories:
            trajectory._invalidate()
        count = len(self._trajectories)
        self._trajectories.clear()
        logger.debug("erased %d trajectories", count)
