"""
Numerical Integration Engine
=============================
Advances one projectile's kinematic state by a fixed micro-step under
gravity and quadratic air drag.

Two time-stepping methods are available:

1. **Euler Method** (1st order): simple, kept as a reference.
2. **Runge-Kutta 4th Order (RK4)**: the default, exact for the
   drag-free (constant acceleration) case.

Both integrate the equations of motion:
    dx/dt = v
    dv/dt = g + F_drag(v) / m

Air density is an input and stays constant across one micro-step. Every
function here is pure: identical inputs give bit-identical outputs.
"""

import numpy as np
from dataclasses import dataclass

from .constants import GRAVITY_ON_EARTH
from .projectile import ProjectileSpec, cross_sectional_area


@dataclass(frozen=True, eq=False)
class KinematicState:
    """Position [x, y] (m) and velocity [vx, vy] (m/s) at one instant."""
    position: np.ndarray
    velocity: np.ndarray


def drag_force(velocity: np.ndarray, rho: float, cd: float,
               area: float) -> np.ndarray:
    """
    Compute aerodynamic drag force vector (N).

    F_drag = -½ ρ |v|² Cd A v̂

    Parameters
    ----------
    velocity : np.ndarray
        Velocity [vx, vy] (m/s)
    rho : float
        Air density (kg/m³)
    cd : float
        Drag coefficient (dimensionless)
    area : float
        Reference cross-sectional area (m²)

    Returns
    -------
    np.ndarray
        Drag force vector [Fx, Fy] (N)
    """
    v_mag = float(np.hypot(velocity[0], velocity[1]))
    if v_mag < 1e-10 or rho == 0.0 or cd == 0.0:
        return np.zeros(2)

    F_mag = 0.5 * rho * v_mag ** 2 * cd * area
    return -F_mag * (velocity / v_mag)


def gravity_force(mass: float, gravity: float = GRAVITY_ON_EARTH) -> np.ndarray:
    """Weight vector [0, -m g] (N)."""
    return np.array([0.0, -mass * gravity])


def compute_acceleration(velocity: np.ndarray, spec: ProjectileSpec,
                         diameter: float, drag_coefficient: float,
                         density: float,
                         gravity: float = GRAVITY_ON_EARTH) -> np.ndarray:
    """
    Total acceleration [ax, ay] (m/s²): gravity plus drag divided by mass.
    ``diameter`` and ``drag_coefficient`` take precedence over the spec's.
    """
    a_gravity = np.array([0.0, -gravity])
    area = cross_sectional_area(diameter)
    a_drag = drag_force(velocity, density, drag_coefficient, area) / spec.mass
    return a_gravity + a_drag


def euler_step(state: KinematicState, spec: ProjectileSpec, diameter: float,
               drag_coefficient: float, density: float, dt: float,
               gravity: float = GRAVITY_ON_EARTH) -> KinematicState:
    """
    Forward Euler.

    x_{n+1} = x_n + v_n * dt
    v_{n+1} = v_n + a(v_n) * dt
    """
    acc = compute_acceleration(state.velocity, spec, diameter,
                               drag_coefficient, density, gravity)
    return KinematicState(
        position=state.position + state.velocity * dt,
        velocity=state.velocity + acc * dt,
    )


def rk4_step(state: KinematicState, spec: ProjectileSpec, diameter: float,
             drag_coefficient: float, density: float, dt: float,
             gravity: float = GRAVITY_ON_EARTH) -> KinematicState:
    """
    4th-order Runge-Kutta.

    Drag depends only on velocity, so the position stages reduce to
    the intermediate velocities.
    """
    pos = state.position
    vel = state.velocity

    def accel(v):
        return compute_acceleration(v, spec, diameter, drag_coefficient,
                                    density, gravity)

    k1v = accel(vel)
    k1x = vel

    k2v = accel(vel + 0.5 * dt * k1v)
    k2x = vel + 0.5 * dt * k1v

    k3v = accel(vel + 0.5 * dt * k2v)
    k3x = vel + 0.5 * dt * k2v

    k4v = accel(vel + dt * k3v)
    k4x = vel + dt * k3v

    return KinematicState(
        position=pos + (dt / 6.0) * (k1x + 2*k2x + 2*k3x + k4x),
        velocity=vel + (dt / 6.0) * (k1v + 2*k2v + 2*k3v + k4v),
    )


METHODS = {
    'euler': euler_step,
    'rk4': rk4_step,
}


def step(state: KinematicState, spec: ProjectileSpec, diameter: float,
         drag_coefficient: float, density: float, dt: float,
         gravity: float = GRAVITY_ON_EARTH, method: str = 'rk4') -> KinematicState:
    """Advance ``state`` by ``dt`` seconds with the named method."""
    if method not in METHODS:
        raise ValueError(
            f"Unknown integration method '{method}'. "
            f"Available: {list(METHODS.keys())}"
        )
    return METHODS[method](state, spec, diameter, drag_coefficient,
                           density, dt, gravity)
