#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  PROJECTILE MOTION ENGINE — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Exercises the engine headless, the way a render loop would drive it:
    1. Atmosphere table
    2. Single cannonball fired and advanced frame by frame
    3. Rider sharing, flying cap and eviction
    4. Slow motion vs normal speed (identical sampled curves)
    5. Validation against the closed form and a scipy reference solution

  Usage:
    python main.py              # Run everything
    python main.py --quick      # Skip the validation tables
    python main.py --verbose    # Log engine events to the console
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import sys
import time

import numpy as np

from projectile_motion.atmosphere import isa_temperature, isa_pressure, air_density
from projectile_motion.constants import STEP_DELTA
from projectile_motion.exceptions import CapacityExceeded
from projectile_motion.logger import enable_console_logging
from projectile_motion.model import ProjectileMotionModel
from projectile_motion.validation import (
    validate_against_analytic, validate_against_reference_solver,
)


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def run_until_landed(model, max_frames=10000):
    events = []
    for _ in range(max_frames):
        events.extend(model.advance(STEP_DELTA))
        if not any(t.flying for t in model.trajectories()):
            break
    return events


def main():
    start_time = time.time()
    quick = '--quick' in sys.argv
    if '--verbose' in sys.argv:
        enable_console_logging(logging.DEBUG)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Atmosphere
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: ISA Atmosphere")
    print(f"  {'Alt (m)':>8} {'T (K)':>8} {'P (Pa)':>10} {'ρ (kg/m³)':>11}")
    for h in [0, 1000, 5000, 11000, 20000, 30000]:
        print(f"  {h:>8} {isa_temperature(h):>8.2f} {isa_pressure(h):>10.0f} "
              f"{air_density(h):>11.5f}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Single cannonball
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Cannonball, air resistance on")
    model = ProjectileMotionModel()
    model.set_air_resistance_on(True)
    model.set_cannon(height=0.0, angle=45.0, speed=15.0)
    trajectory = model.fire()
    events = run_until_landed(model)
    print(trajectory.summary())
    for event in events:
        print(f"  Landing x = {event.landing_x:.3f} m  "
              f"target [{event.target.left:.1f}, {event.target.right:.1f}]  "
              f"→ {'HIT' if event.hit else 'miss'}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Pool lifecycle
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Riders, flying cap, eviction")
    model.erase()
    model.set_air_resistance_on(False)
    model.set_cannon(angle=60.0, speed=20.0)
    model.fire()
    model.fire()
    first = model.trajectories()[0]
    print(f"  Identical launches share one trajectory: "
          f"{len(model.trajectories())} trajectory, {len(first.riders)} riders")

    for speed in (22.0, 24.0, 26.0):
        try:
            model.fire(launch_speed=speed)
            print(f"  Fired at {speed:.0f} m/s")
        except CapacityExceeded as e:
            print(f"  Refused at {speed:.0f} m/s: {e}")

    run_until_landed(model)
    for speed in (10.0, 12.0, 14.0, 16.0, 18.0):
        model.fire(launch_speed=speed)
        run_until_landed(model)
    ranks = [(t.rank, t.launch.launch_speed) for t in model.trajectories()]
    print(f"  Pool after 5 more launches (rank, speed): {ranks}")
    print(f"  Score: {model.score.hits} hits / {model.score.landings} landings")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Frame-rate independence
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Slow motion vs normal speed")
    curves = {}
    for speed in ('normal', 'slow'):
        m = ProjectileMotionModel()
        m.set_speed(speed)
        m.set_cannon(angle=30.0, speed=12.0)
        t = m.fire()
        run_until_landed(m)
        curves[speed] = t.positions()
    same = np.array_equal(curves['normal'], curves['slow'])
    print(f"  {len(curves['normal'])} points each; identical: {same}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Validation
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 5: Validation")
        validate_against_analytic(verbose=True)
        validate_against_reference_solver(verbose=True)
    else:
        section("PHASE 5: Validation SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"\n  Total runtime: {elapsed:.1f} seconds\n")


if __name__ == "__main__":
    main()
