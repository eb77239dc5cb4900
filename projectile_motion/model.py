"""
Simulation Session
==================
ProjectileMotionModel owns one pool, clock, target and score, plus the
current cannon and projectile settings. It is the single mutation path a
presentation layer talks to; observers either read ``snapshot()`` once per
frame or register an explicit landing listener.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .atmosphere import Atmosphere
from .clock import SimulationClock
from .constants import (
    CANNON_ANGLE_DEFAULT, CANNON_HEIGHT_DEFAULT, DEFAULT_CONFIG,
    LAUNCH_VELOCITY_DEFAULT, SimulationConfig,
)
from .pool import TrajectoryPool
from .projectile import ProjectileSpec, check_range, get_projectile_type
from .scoring import Score, ScoreEvent, TargetZone, evaluate_landing
from .trajectory import DataPoint, Trajectory


@dataclass(frozen=True)
class RiderSnapshot:
    id: int
    data_point: DataPoint
    landed: bool


@dataclass(frozen=True)
class TrajectorySnapshot:
    rank: int
    spec_name: str
    air_resistance_on: bool
    landed: bool
    flying: bool
    data_points: Tuple[DataPoint, ...]
    riders: Tuple[RiderSnapshot, ...]


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable per-frame view of everything a renderer needs."""
    trajectories: Tuple[TrajectorySnapshot, ...]
    playing: bool
    speed: str
    target: TargetZone
    last_score_event: Optional[ScoreEvent]
    hits: int
    landings: int
    can_fire: bool


LandingListener = Callable[[Trajectory, ScoreEvent], None]


class ProjectileMotionModel:

    def __init__(self, config: SimulationConfig = DEFAULT_CONFIG,
                 projectile_type: str = 'cannonball', method: str = 'rk4'):
        self.config = config
        self.clock = SimulationClock(step_delta=config.step_delta,
                                     speed_scales=config.speed_scales)
        self.atmosphere = Atmosphere()
        self.pool = TrajectoryPool(config, clock=self.clock,
                                   atmosphere=self.atmosphere, method=method)
        self.target = self._default_target()
        self.score = Score()
        self._landing_listeners: List[LandingListener] = []

        self._default_type = projectile_type
        self.select_projectile_type(projectile_type)
        self.cannon_height = CANNON_HEIGHT_DEFAULT
        self.cannon_angle = CANNON_ANGLE_DEFAULT
        self.launch_speed = LAUNCH_VELOCITY_DEFAULT

    # ── Settings ──────────────────────────────────────────────────────────
    def select_projectile_type(self, key: str):
        """Choose a benchmark object; resets mass, diameter and Cd."""
        spec = get_projectile_type(key)
        self.projectile_spec: ProjectileSpec = spec
        self.mass = spec.mass
        self.diameter = spec.diameter
        self.drag_coefficient = spec.drag_coefficient

    def set_cannon(self, height: Optional[float] = None,
                   angle: Optional[float] = None,
                   speed: Optional[float] = None):
        config = self.config
        if height is not None:
            self.cannon_height = check_range('launch_height', height,
                                             config.cannon_height_range)
        if angle is not None:
            self.cannon_angle = check_range('launch_angle', angle,
                                            config.cannon_angle_range)
        if speed is not None:
            self.launch_speed = check_range('launch_speed', speed,
                                            config.launch_velocity_range)

    def set_air_resistance_on(self, on: bool):
        self.atmosphere.air_resistance_on = bool(on)

    def set_altitude(self, altitude: float):
        self.atmosphere.altitude = check_range('altitude', altitude,
                                               self.config.altitude_range)

    def set_gravity(self, gravity: float):
        self.pool.gravity = check_range('gravity', gravity,
                                        self.config.gravity_range)

    def set_target_zone(self, center: float, half_width: Optional[float] = None):
        if half_width is None:
            half_width = self.target.half_width
        self.target = TargetZone(center=float(center), half_width=float(half_width))

    # ── Commands ──────────────────────────────────────────────────────────
    def fire(self, spec: Optional[ProjectileSpec] = None,
             diameter: Optional[float] = None,
             drag_coefficient: Optional[float] = None,
             launch_height: Optional[float] = None,
             launch_angle: Optional[float] = None,
             launch_speed: Optional[float] = None,
             mass: Optional[float] = None) -> Trajectory:
        """Fire the cannon; omitted values come from the current settings."""
        if spec is None:
            spec = self.projectile_spec
            mass = self.mass if mass is None else mass
            diameter = self.diameter if diameter is None else diameter
            if drag_coefficient is None:
                drag_coefficient = self.drag_coefficient
        return self.pool.fire(
            spec,
            spec.diameter if diameter is None else diameter,
            spec.drag_coefficient if drag_coefficient is None else drag_coefficient,
            self.cannon_height if launch_height is None else launch_height,
            self.cannon_angle if launch_angle is None else launch_angle,
            self.launch_speed if launch_speed is None else launch_speed,
            mass,
        )

    def erase(self):
        self.pool.erase()

    def play(self):
        self.clock.play()

    def pause(self):
        self.clock.pause()

    def set_speed(self, speed: str):
        self.clock.set_speed(speed)

    def advance(self, frame_delta: float) -> List[ScoreEvent]:
        """Called once per rendered frame with the wall-clock delta."""
        return self._score(self.pool.advance(frame_delta))

    def step(self) -> List[ScoreEvent]:
        """Advance exactly one fixed frame, even while paused."""
        return self._score(self.pool.advance_simulated(self.clock.step()))

    def reset(self):
        """Restore defaults, clear the pool and the score."""
        self.pool.erase()
        self.score.reset()
        self.clock.play()
        self.clock.set_speed('normal')
        self.atmosphere.air_resistance_on = False
        self.atmosphere.altitude = 0.0
        self.pool.gravity = self.config.gravity
        self.target = self._default_target()
        self.select_projectile_type(self._default_type)
        self.cannon_height = CANNON_HEIGHT_DEFAULT
        self.cannon_angle = CANNON_ANGLE_DEFAULT
        self.launch_speed = LAUNCH_VELOCITY_DEFAULT

    def _default_target(self) -> TargetZone:
        return TargetZone(center=self.config.target_center,
                          half_width=self.config.target_width / 2)

    def _score(self, landed: List[Trajectory]) -> List[ScoreEvent]:
        events = []
        for trajectory in landed:
            event = self.score.record(evaluate_landing(trajectory, self.target))
            events.append(event)
            for listener in tuple(self._landing_listeners):
                listener(trajectory, event)
        return events

    # ── Observation ───────────────────────────────────────────────────────
    def add_landing_listener(self, listener: LandingListener):
        self._landing_listeners.append(listener)

    def remove_landing_listener(self, listener: LandingListener):
        self._landing_listeners.remove(listener)

    def trajectories(self) -> Tuple[Trajectory, ...]:
        return self.pool.trajectories()

    @property
    def last_score_event(self) -> Optional[ScoreEvent]:
        return self.score.last_event

    def snapshot(self) -> SessionSnapshot:
        trajectories = tuple(
            TrajectorySnapshot(
                rank=rank,
                spec_name=t.spec.name,
                air_resistance_on=t.launch.air_resistance_on,
                landed=t.landed,
                flying=t.flying,
                data_points=t.data_points,
                riders=tuple(RiderSnapshot(r.id, r.data_point, r.landed)
                             for r in t.riders),
            )
            for rank, t in enumerate(self.pool.trajectories())
        )
        return SessionSnapshot(
            trajectories=trajectories,
            playing=self.clock.playing,
            speed=self.clock.speed,
            target=self.target,
            last_score_event=self.score.last_event,
            hits=self.score.hits,
            landings=self.score.landings,
            can_fire=self.pool.can_fire,
        )
