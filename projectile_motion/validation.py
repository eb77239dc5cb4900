"""
Validation Against Reference Solutions
=======================================
Compares the engine's recorded trajectories against:
  - the closed-form drag-free range
        R = v cosθ / g · (v sinθ + sqrt((v sinθ)² + 2 g h))
    which reduces to R = v² sin(2θ) / g for a launch from the ground
  - an adaptive, tightly-toleranced ``scipy.integrate.solve_ivp`` solution
    of the same drag equations, stopped by a ground-crossing event
"""

import numpy as np
from dataclasses import dataclass
from typing import Iterable, List, Optional

from scipy.integrate import solve_ivp

from .atmosphere import air_density
from .constants import GRAVITY_ON_EARTH, STEP_DELTA, SimulationConfig, DEFAULT_CONFIG
from .pool import TrajectoryPool
from .projectile import CANNONBALL, ProjectileSpec, cross_sectional_area
from .scoring import landing_crossing
from .trajectory import Trajectory


# (launch_speed m/s, launch_angle °, launch_height m)
REFERENCE_LAUNCHES = [
    (10.0, 15.0, 0.0),
    (20.0, 30.0, 0.0),
    (20.0, 45.0, 0.0),
    (25.0, 60.0, 0.0),
    (30.0, 75.0, 0.0),
    (15.0, 0.0, 10.0),
    (18.0, 40.0, 5.0),
]


@dataclass
class ValidationResult:
    """Result of one validation comparison."""
    launch_speed: float
    launch_angle: float
    launch_height: float
    ref_range: float        # reference range (m)
    sim_range: float        # simulated, interpolated at y = 0 (m)
    range_error: float      # m
    ref_tof: float          # s
    sim_tof: float          # s


def analytic_range(speed: float, angle_deg: float, height: float = 0.0,
                   gravity: float = GRAVITY_ON_EARTH) -> float:
    """Drag-free horizontal range (m)."""
    theta = np.radians(angle_deg)
    vx = speed * np.cos(theta)
    vy = speed * np.sin(theta)
    return float(vx / gravity * (vy + np.sqrt(vy ** 2 + 2 * gravity * height)))


def analytic_flight_time(speed: float, angle_deg: float, height: float = 0.0,
                         gravity: float = GRAVITY_ON_EARTH) -> float:
    """Drag-free time of flight (s)."""
    vy = speed * np.sin(np.radians(angle_deg))
    return float((vy + np.sqrt(vy ** 2 + 2 * gravity * height)) / gravity)


def simulate_launch(spec: ProjectileSpec, launch_speed: float,
                    launch_angle: float, launch_height: float = 0.0,
                    diameter: Optional[float] = None,
                    drag_coefficient: Optional[float] = None,
                    air_resistance_on: bool = False,
                    config: SimulationConfig = DEFAULT_CONFIG,
                    frame_delta: float = STEP_DELTA,
                    max_time: float = 120.0) -> Trajectory:
    """Fire one projectile in a fresh pool and advance it until it lands."""
    pool = TrajectoryPool(config)
    pool.atmosphere.air_resistance_on = air_resistance_on
    trajectory = pool.fire(
        spec,
        spec.diameter if diameter is None else diameter,
        spec.drag_coefficient if drag_coefficient is None else drag_coefficient,
        launch_height, launch_angle, launch_speed,
    )
    elapsed = 0.0
    while not trajectory.landed:
        if elapsed > max_time:
            raise RuntimeError(f"no landing within {max_time} s")
        pool.advance_simulated(frame_delta)
        elapsed += frame_delta
    return trajectory


def reference_solution(spec: ProjectileSpec, launch_speed: float,
                       launch_angle: float, launch_height: float = 0.0,
                       air_resistance_on: bool = True, altitude: float = 0.0,
                       gravity: float = GRAVITY_ON_EARTH, max_time: float = 120.0):
    """
    Adaptive RK45 solution of the same equations of motion.
    Returns (range, time of flight).
    """
    area = cross_sectional_area(spec.diameter)

    def rhs(t, s):
        x, y, vx, vy = s
        rho = air_density(altitude + max(y, 0.0), air_resistance_on)
        v = np.hypot(vx, vy)
        k = 0.5 * rho * spec.drag_coefficient * area * v / spec.mass
        return [vx, vy, -k * vx, -gravity - k * vy]

    def ground(t, s):
        return s[1]
    ground.terminal = True
    ground.direction = -1

    theta = np.radians(launch_angle)
    s0 = [0.0, launch_height,
          launch_speed * np.cos(theta), launch_speed * np.sin(theta)]
    sol = solve_ivp(rhs, (0.0, max_time), s0, method='RK45', events=ground,
                    rtol=1e-10, atol=1e-10)
    if sol.t_events[0].size == 0:
        raise RuntimeError(f"reference solution did not land within {max_time} s")
    return float(sol.y_events[0][0][0]), float(sol.t_events[0][0])


def validate_against_analytic(launches: Iterable = REFERENCE_LAUNCHES,
                              spec: ProjectileSpec = CANNONBALL,
                              verbose: bool = True) -> List[ValidationResult]:
    """Drag-free runs (Cd = 0, air resistance off) vs the closed form."""
    results = []
    if verbose:
        _print_header("ANALYTIC (no drag)")

    for speed, angle, height in launches:
        traj = simulate_launch(spec, speed, angle, height, drag_coefficient=0.0)
        sim_range, sim_tof = landing_crossing(traj)
        ref_range = analytic_range(speed, angle, height)
        ref_tof = analytic_flight_time(speed, angle, height)
        results.append(_result(speed, angle, height, ref_range, sim_range,
                               ref_tof, sim_tof, verbose))

    if verbose:
        _print_footer(results)
    return results


def validate_against_reference_solver(launches: Iterable = REFERENCE_LAUNCHES,
                                      spec: ProjectileSpec = CANNONBALL,
                                      verbose: bool = True) -> List[ValidationResult]:
    """Runs with air resistance on vs the adaptive scipy solution."""
    results = []
    if verbose:
        _print_header(f"REFERENCE SOLVER (drag, {spec.name})")

    for speed, angle, height in launches:
        traj = simulate_launch(spec, speed, angle, height, air_resistance_on=True)
        sim_range, sim_tof = landing_crossing(traj)
        ref_range, ref_tof = reference_solution(spec, speed, angle, height)
        results.append(_result(speed, angle, height, ref_range, sim_range,
                               ref_tof, sim_tof, verbose))

    if verbose:
        _print_footer(results)
    return results


def _result(speed, angle, height, ref_range, sim_range, ref_tof, sim_tof, verbose):
    vr = ValidationResult(
        launch_speed=speed, launch_angle=angle, launch_height=height,
        ref_range=ref_range, sim_range=sim_range,
        range_error=sim_range - ref_range,
        ref_tof=ref_tof, sim_tof=sim_tof,
    )
    if verbose:
        print(f"{speed:>6.1f} {angle:>6.1f} {height:>6.1f} "
              f"{ref_range:>10.4f} {sim_range:>10.4f} {vr.range_error:>+10.2e} "
              f"{ref_tof:>8.4f} {sim_tof:>8.4f}")
    return vr


def _print_header(title):
    print(f"\n{'='*72}")
    print(f"  VALIDATION: {title}")
    print(f"{'='*72}")
    print(f"{'v':>6} {'θ°':>6} {'h':>6} {'Ref R (m)':>10} {'Sim R (m)':>10} "
          f"{'Err (m)':>10} {'Ref ToF':>8} {'Sim ToF':>8}")
    print("-" * 72)


def _print_footer(results):
    worst = max(abs(r.range_error) for r in results)
    print("-" * 72)
    print(f"  Max absolute range error: {worst:.2e} m")
    status = "✓ PASS" if worst < 0.05 else "✗ NEEDS TUNING"
    print(f"  Status: {status}")
    print(f"{'='*72}\n")


def run_all_validations(verbose: bool = True):
    """Run both validations."""
    return {
        'analytic': validate_against_analytic(verbose=verbose),
        'reference_solver': validate_against_reference_solver(verbose=verbose),
    }


if __name__ == "__main__":
    run_all_validations(verbose=True)
