"""
International Standard Atmosphere (ISA) Model
==============================================
Air density as a function of geometric altitude, used for the drag force
when air resistance is switched on.

Implements the troposphere (0-11 km), the isothermal lower stratosphere
(11-20 km) and the +1 K/km layer above it. The supported range is
0-30 km; altitudes outside it are clamped.

Reference: U.S. Standard Atmosphere, 1976 (NASA-TM-X-74335)
"""

import numpy as np
from dataclasses import dataclass


# ── ISA Constants ──────────────────────────────────────────────────────────
SEA_LEVEL_TEMP       = 288.15      # K  (15 °C)
SEA_LEVEL_PRESSURE   = 101325.0    # Pa
SEA_LEVEL_DENSITY    = 1.225       # kg/m³
LAPSE_RATE_TROPO     = -0.0065     # K/m  (troposphere)
TROPOPAUSE_ALT       = 11000.0     # m
TROPOPAUSE_TEMP      = 216.65      # K  (-56.5 °C)
STRATO_ALT           = 20000.0     # m
LAPSE_RATE_STRATO    = 0.001       # K/m  (above 20 km)
GRAVITY              = 9.80665     # m/s²  (standard, for the barometric law)
MOLAR_MASS_AIR       = 0.0289644   # kg/mol
GAS_CONSTANT         = 8.31447     # J/(mol·K)
R_SPECIFIC           = 287.058     # J/(kg·K)

MIN_ALTITUDE         = 0.0         # m
MAX_ALTITUDE         = 30000.0     # m


def clamp_altitude(altitude: float) -> float:
    return min(max(float(altitude), MIN_ALTITUDE), MAX_ALTITUDE)


def isa_temperature(altitude: float) -> float:
    """
    Temperature (K) at a given geometric altitude (m).

    - Troposphere (0–11 km): linear lapse at −6.5 °C/km
    - Stratosphere (11–20 km): isothermal at 216.65 K
    - 20–30 km: +1 °C/km
    """
    altitude = clamp_altitude(altitude)
    if altitude <= TROPOPAUSE_ALT:
        return SEA_LEVEL_TEMP + LAPSE_RATE_TROPO * altitude
    elif altitude <= STRATO_ALT:
        return TROPOPAUSE_TEMP
    else:
        return TROPOPAUSE_TEMP + LAPSE_RATE_STRATO * (altitude - STRATO_ALT)


def isa_pressure(altitude: float) -> float:
    """
    Atmospheric pressure (Pa) at a given geometric altitude (m).
    Uses the barometric formula appropriate for each layer.
    """
    altitude = clamp_altitude(altitude)
    exponent = GRAVITY * MOLAR_MASS_AIR / (GAS_CONSTANT * abs(LAPSE_RATE_TROPO))

    if altitude <= TROPOPAUSE_ALT:
        T = isa_temperature(altitude)
        return SEA_LEVEL_PRESSURE * (T / SEA_LEVEL_TEMP) ** exponent

    P_tropo = SEA_LEVEL_PRESSURE * (TROPOPAUSE_TEMP / SEA_LEVEL_TEMP) ** exponent
    if altitude <= STRATO_ALT:
        # Isothermal layer: exponential decay
        return P_tropo * float(np.exp(
            -GRAVITY * MOLAR_MASS_AIR * (altitude - TROPOPAUSE_ALT)
            / (GAS_CONSTANT * TROPOPAUSE_TEMP)
        ))

    P_20 = P_tropo * float(np.exp(
        -GRAVITY * MOLAR_MASS_AIR * (STRATO_ALT - TROPOPAUSE_ALT)
        / (GAS_CONSTANT * TROPOPAUSE_TEMP)
    ))
    T_h = isa_temperature(altitude)
    exp2 = GRAVITY * MOLAR_MASS_AIR / (GAS_CONSTANT * LAPSE_RATE_STRATO)
    return P_20 * (T_h / TROPOPAUSE_TEMP) ** (-exp2)


def isa_density(altitude: float) -> float:
    """
    Air density (kg/m³) from ideal gas law: ρ = P / (R_specific × T).
    """
    T = isa_temperature(altitude)
    P = isa_pressure(altitude)
    return P / (R_SPECIFIC * T)


_ISA_SEA_LEVEL_DENSITY = isa_density(0.0)


def air_density(altitude: float, air_resistance_on: bool = True) -> float:
    """
    Density (kg/m³) the drag force sees at ``altitude``.

    Returns 0 when air resistance is off. Otherwise the ISA profile is
    scaled so that sea level gives exactly ``SEA_LEVEL_DENSITY``.
    """
    if not air_resistance_on:
        return 0.0
    return SEA_LEVEL_DENSITY * (isa_density(altitude) / _ISA_SEA_LEVEL_DENSITY)


@dataclass
class Atmosphere:
    """Air-resistance switch and launch-site altitude shared by new launches."""
    air_resistance_on: bool = False
    altitude: float = 0.0        # m above sea level at ground level


if __name__ == "__main__":
    print("ISA Model Verification")
    print("=" * 50)
    print(f"{'Alt (m)':>10} {'T (K)':>10} {'P (Pa)':>12} {'ρ (kg/m³)':>12}")
    print("-" * 50)
    for h in [0, 1000, 5000, 10000, 11000, 15000, 20000, 30000]:
        print(f"{h:>10.0f} {isa_temperature(h):>10.2f} "
              f"{isa_pressure(h):>12.1f} {air_density(h):>12.5f}")
