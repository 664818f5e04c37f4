"""
Bühlmann ZH-L16C constants and gradient factor settings.

Single source of truth for compartment coefficients and the pure tissue
loading equations. All functions are pure (no side effects) so planning calls
can run side by side without sharing state.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

NUM_COMPARTMENTS = 16

# ZH-L16C N2 half-times in minutes (compartment 1 uses the 1b value)
ZH_L16C_HALFTIMES: Tuple[float, ...] = (
    5.0, 8.0, 12.5, 18.5, 27.0, 38.3, 54.3, 77.0,
    109.0, 146.0, 187.0, 239.0, 305.0, 390.0, 498.0, 635.0,
)

# M-value coefficients: M(P) = a + P/b
ZH_L16C_A: Tuple[float, ...] = (
    1.1696, 1.0000, 0.8618, 0.7562, 0.6667, 0.5933, 0.5282, 0.4701,
    0.4187, 0.3798, 0.3497, 0.3223, 0.2971, 0.2737, 0.2523, 0.2327,
)

ZH_L16C_B: Tuple[float, ...] = (
    0.5578, 0.6514, 0.7222, 0.7825, 0.8126, 0.8434, 0.8693, 0.8910,
    0.9092, 0.9222, 0.9319, 0.9403, 0.9477, 0.9544, 0.9602, 0.9653,
)

WATER_VAPOR_PRESSURE = 0.0627  # bar, alveolar water vapour

SURFACE_PRESSURE = 1.0  # bar, 1 bar per 10 m of sea water on top of this
SURFACE_N2_PRESSURE = 0.79  # bar, air-equilibrated tissue at the surface

# He effective half-time = N2 half-time * factor. Approximation of the
# separate ZH-L16 He table, kept for compatibility with existing plans.
HE_HALFTIME_FACTOR = 0.4


@dataclass(frozen=True)
class GradientFactors:
    """Gradient factor pair for Bühlmann decompression adjustments.

    gf_low:  intended for the deepest stop; carried but not used by stop placement
    gf_high: multiplies the a/b coefficients in the ceiling calculation
    Values are fractions (0.0–1.0).
    """
    gf_low: float
    gf_high: float

    def __post_init__(self):
        if not (0.0 < self.gf_low <= 1.0):
            raise ValueError(f"gf_low must be in (0, 1.0], got {self.gf_low}")
        if not (0.0 < self.gf_high <= 1.0):
            raise ValueError(f"gf_high must be in (0, 1.0], got {self.gf_high}")
        if self.gf_low > self.gf_high:
            raise ValueError(
                f"gf_low ({self.gf_low}) must be <= gf_high ({self.gf_high})"
            )

    @property
    def is_standard(self) -> bool:
        """True if GF 100/100 (no adjustment)."""
        return self.gf_low == 1.0 and self.gf_high == 1.0


GF_DEFAULT = GradientFactors(gf_low=0.30, gf_high=0.85)


def decay_constants(halftimes) -> np.ndarray:
    """k = ln(2) / halftime for each compartment."""
    return np.log(2) / np.asarray(halftimes, dtype=float)


def haldane_vec(
    pt0: np.ndarray, p_inspired: float, t: float, k: np.ndarray
) -> np.ndarray:
    """Haldane equation at constant ambient pressure.

    P(t) = P0 + (P_insp - P0) * (1 - exp(-k*t))
    """
    return pt0 + (p_inspired - pt0) * (1.0 - np.exp(-k * t))


def schreiner_vec(
    pt0: np.ndarray, p_inspired0: float, rate: float, t: float, k: np.ndarray
) -> np.ndarray:
    """Schreiner equation for a linear change of inspired pressure.

    P(t) = Pi0 + R*(t - 1/k) - (Pi0 - P0 - R/k) * exp(-k*t)

    Args:
        pt0: tissue pressures at the start of the interval
        p_inspired0: inspired inert gas pressure at the start (bar)
        rate: change of inspired inert gas pressure (bar/min)
        t: interval length (min)
        k: decay constants, one per compartment
    """
    return (
        p_inspired0
        + rate * (t - 1.0 / k)
        - (p_inspired0 - pt0 - rate / k) * np.exp(-k * t)
    )
