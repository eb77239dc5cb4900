"""
Unit Tests for the Projectile Motion Engine — physics
=====================================================
Atmosphere, integrator, trajectory sampling and validation.
Run: python -m pytest tests/ -v
"""

import sys
import os
import dataclasses
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from projectile_motion.atmosphere import (
    air_density, isa_temperature, isa_pressure, isa_density,
    SEA_LEVEL_DENSITY,
)
from projectile_motion.constants import (
    GRAVITY_ON_EARTH, MICRO_STEP, TIME_PER_DATA_POINT, SimulationConfig,
)
from projectile_motion.integrator import (
    KinematicState, drag_force, compute_acceleration, step, euler_step, rk4_step,
)
from projectile_motion.projectile import (
    CANNONBALL, LaunchParameters, ProjectileSpec, PROJECTILE_TYPES,
    get_projectile_type,
)
from projectile_motion.exceptions import InvalidParameter
from projectile_motion.scoring import landing_crossing
from projectile_motion.trajectory import Trajectory
from projectile_motion.validation import (
    analytic_range, simulate_launch, reference_solution,
    validate_against_analytic, validate_against_reference_solver,
)


def run_to_landing(trajectory, frame_delta=0.016, max_frames=100000):
    for _ in range(max_frames):
        if trajectory.landed:
            break
        trajectory.step(frame_delta)
    return trajectory


def make_launch(speed=20.0, angle=45.0, height=0.0, cd=None,
                air_resistance_on=False, spec=CANNONBALL):
    if cd is not None:
        spec = spec.with_values(drag_coefficient=cd)
    return LaunchParameters(spec=spec, launch_height=height, launch_angle=angle,
                            launch_speed=speed, air_resistance_on=air_resistance_on)


class TestAtmosphere:
    """ISA-based density profile."""

    def test_sea_level_density_exact(self):
        assert air_density(0.0) == SEA_LEVEL_DENSITY

    def test_disabled_is_zero(self):
        for h in [0.0, 100.0, 30000.0]:
            assert air_density(h, air_resistance_on=False) == 0.0

    def test_sea_level_temperature(self):
        assert abs(isa_temperature(0) - 288.15) < 0.01

    def test_sea_level_pressure(self):
        assert abs(isa_pressure(0) - 101325.0) < 1.0

    def test_isa_density_close_to_standard(self):
        assert abs(isa_density(0) - 1.225) < 0.01

    def test_density_decreases_monotonically(self):
        rho = [air_density(h) for h in np.linspace(0, 30000, 601)]
        assert all(a > b for a, b in zip(rho, rho[1:]))
        assert rho[-1] > 0

    def test_continuous_at_layer_boundaries(self):
        for h in [11000.0, 20000.0]:
            assert abs(air_density(h - 1e-3) - air_density(h + 1e-3)) < 1e-6

    def test_out_of_range_is_clamped(self):
        assert air_density(-500.0) == air_density(0.0)
        assert air_density(45000.0) == air_density(30000.0)

    def test_trajectory_density_uses_site_altitude(self):
        launch = LaunchParameters(spec=CANNONBALL, launch_angle=45.0,
                                  launch_speed=10.0, altitude=2000.0,
                                  air_resistance_on=True)
        assert Trajectory(launch).data_points[0].air_density == air_density(2000.0)
        still = dataclasses.replace(launch, air_resistance_on=False)
        assert Trajectory(still).data_points[0].air_density == 0.0


class TestProjectileSpec:
    """Projectile catalogue and launch parameters."""

    def test_cannonball_defaults(self):
        assert CANNONBALL.mass == 5.44
        assert CANNONBALL.diameter == 0.11
        assert CANNONBALL.drag_coefficient == 0.47

    def test_area(self):
        spec = ProjectileSpec(diameter=0.2)
        assert abs(spec.area - np.pi * 0.01) < 1e-12

    def test_catalogue_defaults_within_ranges(self):
        for spec in PROJECTILE_TYPES.values():
            assert spec.mass_range[0] <= spec.mass <= spec.mass_range[1]
            assert spec.diameter_range[0] <= spec.diameter <= spec.diameter_range[1]

    def test_unknown_type(self):
        with pytest.raises(InvalidParameter):
            get_projectile_type('anvil')

    def test_rejects_nonpositive_mass(self):
        with pytest.raises(InvalidParameter):
            ProjectileSpec(mass=0.0)

    def test_launch_parameters_structural_equality(self):
        a = make_launch(speed=12.0, angle=30.0)
        b = make_launch(speed=12.0, angle=30.0)
        assert a == b and a is not b
        assert a != make_launch(speed=12.0, angle=31.0)
        assert a != make_launch(speed=12.0, angle=30.0, air_resistance_on=True)

    def test_initial_velocity_vector(self):
        v = make_launch(speed=10.0, angle=30.0).initial_velocity_vector()
        assert abs(np.hypot(*v) - 10.0) < 1e-12
        assert abs(v[1] - 5.0) < 1e-12


class TestIntegrator:
    """Force model and stepping methods."""

    def test_drag_force_opposes_motion(self):
        v = np.array([10.0, 5.0])
        F = drag_force(v, rho=1.225, cd=0.47, area=0.01)
        assert np.dot(F, v) < 0
        assert abs(F[0] * v[1] - F[1] * v[0]) < 1e-12  # parallel

    def test_drag_force_magnitude(self):
        F = drag_force(np.array([10.0, 0.0]), rho=1.2, cd=0.5, area=0.1)
        assert F[0] == pytest.approx(-0.5 * 1.2 * 100.0 * 0.5 * 0.1)

    def test_drag_force_zero_cases(self):
        assert np.allclose(drag_force(np.zeros(2), 1.225, 0.47, 0.01), 0.0)
        assert np.allclose(drag_force(np.array([5.0, 5.0]), 1.225, 0.0, 0.01), 0.0)
        assert np.allclose(drag_force(np.array([5.0, 5.0]), 0.0, 0.47, 0.01), 0.0)

    def test_acceleration_without_drag_is_gravity(self):
        a = compute_acceleration(np.array([3.0, 4.0]), CANNONBALL, 0.11, 0.0,
                                 SEA_LEVEL_DENSITY, GRAVITY_ON_EARTH)
        assert np.array_equal(a, np.array([0.0, -GRAVITY_ON_EARTH]))

    def test_drag_scales_inversely_with_mass(self):
        v = np.array([20.0, 0.0])
        light = compute_acceleration(v, CANNONBALL.with_values(mass=2.0), 0.11, 0.47, 1.225)
        heavy = compute_acceleration(v, CANNONBALL.with_values(mass=4.0), 0.11, 0.47, 1.225)
        assert light[0] == pytest.approx(2 * heavy[0])

    def test_rk4_exact_without_drag(self):
        state = KinematicState(np.array([0.0, 1.0]), np.array([3.0, 4.0]))
        dt = 0.1
        new = rk4_step(state, CANNONBALL, 0.11, 0.0, 0.0, dt)
        assert new.position[0] == pytest.approx(0.3, abs=1e-12)
        assert new.position[1] == pytest.approx(1.0 + 0.4 - 0.5 * GRAVITY_ON_EARTH * dt**2, abs=1e-12)
        assert new.velocity[1] == pytest.approx(4.0 - GRAVITY_ON_EARTH * dt, abs=1e-12)

    def test_step_is_pure(self):
        state = KinematicState(np.array([1.0, 2.0]), np.array([15.0, 7.0]))
        a = step(state, CANNONBALL, 0.11, 0.47, 1.1, MICRO_STEP)
        b = step(state, CANNONBALL, 0.11, 0.47, 1.1, MICRO_STEP)
        assert np.array_equal(a.position, b.position)
        assert np.array_equal(a.velocity, b.velocity)
        assert np.array_equal(state.position, [1.0, 2.0])

    def test_unknown_method(self):
        state = KinematicState(np.zeros(2), np.zeros(2))
        with pytest.raises(ValueError):
            step(state, CANNONBALL, 0.11, 0.47, 1.1, MICRO_STEP, method='verlet')

    def test_rk4_more_accurate_than_euler(self):
        """At the same large timestep, RK4 stays closer to a fine-dt reference."""
        start = KinematicState(np.array([0.0, 0.0]), np.array([20.0, 20.0]))
        spec = CANNONBALL.with_values(diameter=0.5)

        def run(fn, dt, n):
            s = start
            for _ in range(n):
                s = fn(s, spec, 0.5, 0.47, 1.225, dt)
            return s

        ref = run(rk4_step, 0.0005, 2000)
        euler = run(euler_step, 0.1, 10)
        rk4 = run(rk4_step, 0.1, 10)
        assert (np.linalg.norm(rk4.position - ref.position)
                < np.linalg.norm(euler.position - ref.position))


class TestTrajectorySampling:
    """DataPoint recording and landing detection."""

    def test_first_point_at_origin(self):
        for angle in [-90.0, -30.0, 0.0, 45.0, 90.0]:
            t = Trajectory(make_launch(speed=12.0, angle=angle, height=7.0))
            first = t.data_points[0]
            assert first.time == 0.0
            assert first.x == 0.0
            assert first.y == 7.0

    def test_times_spaced_at_sampling_interval(self):
        t = run_to_landing(Trajectory(make_launch(speed=18.0, angle=50.0,
                                                  air_resistance_on=True)))
        times = t.times()
        gaps = np.diff(times)
        assert np.all(gaps > 0)
        assert np.allclose(gaps[:-1], TIME_PER_DATA_POINT, rtol=0, atol=1e-12)
        assert gaps[-1] <= TIME_PER_DATA_POINT + 1e-12

    def test_landing_point_not_clamped(self):
        t = run_to_landing(Trajectory(make_launch(speed=10.0, angle=30.0)))
        assert t.landed
        assert t.data_points[-1].y <= 0.0
        assert all(p.y > 0.0 for p in t.data_points[1:-1])

    def test_no_points_after_landing(self):
        t = run_to_landing(Trajectory(make_launch(speed=5.0, angle=20.0)))
        count = len(t.data_points)
        t.step(1.0)
        assert len(t.data_points) == count

    def test_parabolic_range_without_drag(self):
        """Cd = 0 and air resistance off matches R = v² sin(2θ) / g."""
        for speed, angle in [(10.0, 15.0), (20.0, 45.0), (25.0, 60.0), (30.0, 80.0)]:
            traj = simulate_launch(CANNONBALL, speed, angle, drag_coefficient=0.0)
            x, _ = landing_crossing(traj)
            expected = speed ** 2 * np.sin(np.radians(2 * angle)) / GRAVITY_ON_EARTH
            assert abs(x - expected) < 1e-2

    def test_zero_drag_coefficient_disables_drag_with_air_on(self):
        off = run_to_landing(Trajectory(make_launch(cd=0.0)))
        on = run_to_landing(Trajectory(make_launch(cd=0.0, air_resistance_on=True)))
        assert np.array_equal(off.positions(), on.positions())
        assert on.data_points[0].air_density == SEA_LEVEL_DENSITY
        assert off.data_points[0].air_density == 0.0

    def test_drag_reduces_range(self):
        no_drag = simulate_launch(CANNONBALL, 25.0, 45.0)
        drag = simulate_launch(get_projectile_type('pumpkin'), 25.0, 45.0,
                               air_resistance_on=True)
        assert landing_crossing(drag)[0] < landing_crossing(no_drag)[0]

    def test_frame_rate_independent(self):
        """Different frame partitions of the same time give identical points."""
        launch = make_launch(speed=17.0, angle=35.0, height=3.0, air_resistance_on=True)
        steady = run_to_landing(Trajectory(launch), frame_delta=0.016)
        irregular = Trajectory(launch)
        rng = np.random.default_rng(7)
        while not irregular.landed:
            irregular.step(float(rng.uniform(0.0005, 0.05)))
        slow = run_to_landing(Trajectory(launch), frame_delta=0.016 * 0.33)

        for other in (irregular, slow):
            assert len(other.data_points) == len(steady.data_points)
            for a, b in zip(steady.data_points, other.data_points):
                assert a.time == b.time
                assert np.array_equal(a.position, b.position)
                assert np.array_equal(a.velocity, b.velocity)
                assert np.array_equal(a.acceleration, b.acceleration)

    def test_data_points_are_immutable(self):
        t = Trajectory(make_launch())
        point = t.data_points[0]
        with pytest.raises(ValueError):
            point.position[0] = 3.0
        with pytest.raises(dataclasses.FrozenInstanceError):
            point.time = 1.0

    def test_forces_recorded(self):
        t = Trajectory(make_launch(speed=20.0, angle=0.0, height=5.0,
                                   air_resistance_on=True))
        p = t.data_points[0]
        assert p.gravity_force[1] == pytest.approx(-CANNONBALL.mass * GRAVITY_ON_EARTH)
        assert p.drag_force[0] < 0
        assert p.acceleration[0] == pytest.approx(p.drag_force[0] / CANNONBALL.mass)

    def test_density_follows_height(self):
        t = run_to_landing(Trajectory(make_launch(speed=30.0, angle=90.0,
                                                  air_resistance_on=True)))
        top = max(t.data_points, key=lambda p: p.y)
        assert top.air_density < t.data_points[0].air_density

    def test_custom_sampling_config(self):
        config = SimulationConfig(time_per_data_point=0.05, micro_step=0.005)
        t = run_to_landing(Trajectory(make_launch(speed=10.0), config))
        assert np.allclose(np.diff(t.times())[:-1], 0.05, atol=1e-12)

    def test_sampling_interval_must_be_whole_micro_steps(self):
        with pytest.raises(InvalidParameter):
            SimulationConfig(time_per_data_point=0.03, micro_step=0.004)
        with pytest.raises(InvalidParameter):
            SimulationConfig(time_per_data_point=0.001, micro_step=0.0025)
        config = SimulationConfig(time_per_data_point=0.03, micro_step=0.003)
        assert config.steps_per_data_point == 10
        t = run_to_landing(Trajectory(make_launch(speed=10.0), config))
        assert np.allclose(np.diff(t.times())[:-1], 0.03, atol=1e-12)

    def test_landing_point_only_after_landing(self):
        t = Trajectory(make_launch(speed=10.0, angle=30.0))
        t.step(0.1)
        assert t.landing_point is None
        run_to_landing(t)
        assert t.landing_point is t.data_points[-1]
        assert t.landing_point.y <= 0.0


class TestValidation:
    """Comparison against closed-form and reference solutions."""

    def test_analytic_validation(self):
        results = validate_against_analytic(verbose=False)
        assert all(abs(r.range_error) < 1e-2 for r in results)
        assert all(abs(r.sim_tof - r.ref_tof) < 1e-3 for r in results)

    def test_reference_solver_validation(self):
        results = validate_against_reference_solver(verbose=False)
        assert all(abs(r.range_error) < 5e-2 for r in results)

    def test_reference_solution_matches_closed_form_without_drag(self):
        x, _ = reference_solution(CANNONBALL, 20.0, 45.0, air_resistance_on=False)
        assert x == pytest.approx(analytic_range(20.0, 45.0), abs=1e-6)

    def test_no_landing_within_max_time(self):
        with pytest.raises(RuntimeError):
            simulate_launch(CANNONBALL, 30.0, 80.0, max_time=0.5)
        with pytest.raises(RuntimeError):
            reference_solution(CANNONBALL, 30.0, 80.0, max_time=0.5)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
