"""
Ceiling calculation over the compartment loading state.

The overall ceiling is the deepest of the per-compartment ceilings. Taking any
other aggregate (mean, median, a single compartment) would let the diver
ascend past a compartment's tolerated pressure.
"""

import math
from typing import Iterable

import numpy as np

from .pressure import ambient_pressure, depth_from_pressure


def m_value(a: float, b: float, depth_m: float) -> float:
    """Standard M-value at the ambient pressure of a depth.

    M(P) = a + P/b
    """
    return a + ambient_pressure(depth_m) / b


def compartment_ceiling_depths(
    total_inert: np.ndarray, a: np.ndarray, b: np.ndarray, gf_high: float
) -> np.ndarray:
    """Tolerated ceiling depth (m) of every compartment, clamped at 0.

    p_ceil = (P_inert - a*gf) * (b*gf), depth = (p_ceil - 1) * 10
    """
    a_adj = np.asarray(a, dtype=float) * gf_high
    b_adj = np.asarray(b, dtype=float) * gf_high
    p_ceil = (np.asarray(total_inert, dtype=float) - a_adj) * b_adj
    return np.maximum(0.0, depth_from_pressure(p_ceil))


def ceiling_from_pressures(
    total_inert: np.ndarray, a: np.ndarray, b: np.ndarray, gf_high: float
) -> int:
    """Deepest compartment ceiling, rounded up to a whole metre."""
    depths = compartment_ceiling_depths(total_inert, a, b, gf_high)
    if depths.size == 0:
        return 0
    return int(math.ceil(float(np.max(depths))))


def _as_arrays(compartments: Iterable):
    compartments = list(compartments)
    total = np.array([c.total_inert_pressure for c in compartments])
    a = np.array([c.a for c in compartments])
    b = np.array([c.b for c in compartments])
    return total, a, b


def compute_ceiling(compartments: Iterable, gf_high: float) -> int:
    """Overall ceiling (m) rounded up to the next whole metre.

    Args:
        compartments: objects exposing total_inert_pressure, a and b
        gf_high: gradient factor applied to a and b

    Returns:
        0 when every compartment tolerates the surface.
    """
    total, a, b = _as_arrays(compartments)
    return ceiling_from_pressures(total, a, b, gf_high)


def controlling_compartment(compartments: Iterable, gf_high: float) -> int:
    """Index of the compartment with the deepest ceiling (first one on ties)."""
    total, a, b = _as_arrays(compartments)
    depths = compartment_ceiling_depths(total, a, b, gf_high)
    return int(np.argmax(depths))
