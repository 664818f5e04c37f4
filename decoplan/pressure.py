"""
Pressure math for the tissue model.

Depth is in metres of sea water, pressure in bar, 1 bar per 10 m on top of
1 bar at the surface.
"""

from .buhlmann_constants import SURFACE_PRESSURE, WATER_VAPOR_PRESSURE

FEET_PER_METER = 3.28084

AIR_N2_FRACTION = 0.79


def ambient_pressure(depth_m: float) -> float:
    """Total pressure (bar) at a depth in metres."""
    return SURFACE_PRESSURE + depth_m / 10.0


def depth_from_pressure(pressure: float) -> float:
    """Inverse of ambient_pressure."""
    return (pressure - SURFACE_PRESSURE) * 10.0


def inspired_pressure(
    ambient: float, o2: float, he: float, gas: str = "n2"
) -> float:
    """Inspired inert gas pressure after water vapour dilution.

    Args:
        ambient: ambient pressure (bar)
        o2: oxygen fraction of the breathing gas
        he: helium fraction of the breathing gas
        gas: "n2" or "he"

    Fractions are not re-validated here.
    """
    alveolar = ambient - WATER_VAPOR_PRESSURE
    if gas == "n2":
        return alveolar * (1.0 - o2 - he)
    if gas == "he":
        return alveolar * he
    raise ValueError(f"Unknown inert gas: {gas!r}")


def maximum_operating_depth(o2: float, max_po2: float) -> float:
    """Deepest depth (m) at which the gas stays within max_po2."""
    if o2 <= 0:
        raise ValueError(f"O2 fraction must be positive, got {o2}")
    return (max_po2 / o2 - 1.0) * 10.0


def equivalent_air_depth(depth_m: float, o2: float) -> float:
    """Depth (m) on air with the same N2 partial pressure as a nitrox mix."""
    return (depth_m + 10.0) * (1.0 - o2) / AIR_N2_FRACTION - 10.0


def meters_to_feet(meters: float) -> float:
    return meters * FEET_PER_METER


def feet_to_meters(feet: float) -> float:
    return feet / FEET_PER_METER
