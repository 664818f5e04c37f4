"""
Sixteen-compartment Bühlmann tissue model.

Tissue state is held as two numpy arrays of shape (16,), one per inert gas.
Compartments never interact, so every update is a single vectorised step.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from .buhlmann_constants import (
    HE_HALFTIME_FACTOR,
    NUM_COMPARTMENTS,
    SURFACE_N2_PRESSURE,
    ZH_L16C_A,
    ZH_L16C_B,
    ZH_L16C_HALFTIMES,
    decay_constants,
    haldane_vec,
    schreiner_vec,
)
from .ceiling import ceiling_from_pressures
from .pressure import ambient_pressure, inspired_pressure


@dataclass(frozen=True)
class Compartment:
    """Snapshot of one compartment: static coefficients plus current loading."""
    index: int
    half_time: float
    a: float
    b: float
    n2_pressure: float
    he_pressure: float

    @property
    def total_inert_pressure(self) -> float:
        return self.n2_pressure + self.he_pressure


@dataclass(frozen=True)
class DiveSegment:
    """One leg of a dive profile.

    A constant-depth leg when end_depth_m is None, otherwise a linear
    descent/ascent from depth_m to end_depth_m over time_min.
    """
    depth_m: float
    time_min: float
    o2: float = 0.21
    he: float = 0.0
    end_depth_m: Optional[float] = None


class TissueCompartmentModel:
    """Inert gas loading of the 16 ZH-L16C compartments.

    A fresh instance is air-equilibrated at the surface. One instance serves a
    single planning call; nothing is shared between instances.
    """

    def __init__(self, gf_low: float = 0.30, gf_high: float = 0.85):
        # gf_low is kept for deepest-stop placement, which the scheduler does not do yet
        self.gf_low = gf_low
        self.gf_high = gf_high

        self.half_times = np.array(ZH_L16C_HALFTIMES)
        self.a = np.array(ZH_L16C_A)
        self.b = np.array(ZH_L16C_B)

        self.n2_k = decay_constants(self.half_times)
        self.he_k = decay_constants(self.half_times * HE_HALFTIME_FACTOR)

        self._n2_p = np.full(NUM_COMPARTMENTS, SURFACE_N2_PRESSURE)
        self._he_p = np.zeros(NUM_COMPARTMENTS)

    def update(self, depth_m: float, time_min: float, o2: float, he: float) -> None:
        """Advance loading for time_min spent at a constant depth (Haldane)."""
        p_amb = ambient_pressure(depth_m)
        p_n2 = inspired_pressure(p_amb, o2, he, "n2")
        p_he = inspired_pressure(p_amb, o2, he, "he")

        self._n2_p = haldane_vec(self._n2_p, p_n2, time_min, self.n2_k)
        self._he_p = haldane_vec(self._he_p, p_he, time_min, self.he_k)

    def update_linear(
        self,
        start_depth_m: float,
        end_depth_m: float,
        time_min: float,
        o2: float,
        he: float,
    ) -> None:
        """Advance loading over a constant-rate depth change (Schreiner)."""
        if time_min <= 0:
            return

        p_start = ambient_pressure(start_depth_m)
        p_end = ambient_pressure(end_depth_m)

        n2_start = inspired_pressure(p_start, o2, he, "n2")
        he_start = inspired_pressure(p_start, o2, he, "he")
        n2_rate = (inspired_pressure(p_end, o2, he, "n2") - n2_start) / time_min
        he_rate = (inspired_pressure(p_end, o2, he, "he") - he_start) / time_min

        self._n2_p = schreiner_vec(self._n2_p, n2_start, n2_rate, time_min, self.n2_k)
        self._he_p = schreiner_vec(self._he_p, he_start, he_rate, time_min, self.he_k)

    def run_segments(self, segments: Iterable[DiveSegment]) -> None:
        """Apply a multi-leg profile in order."""
        for segment in segments:
            if segment.end_depth_m is None or segment.end_depth_m == segment.depth_m:
                self.update(segment.depth_m, segment.time_min, segment.o2, segment.he)
            else:
                self.update_linear(
                    segment.depth_m,
                    segment.end_depth_m,
                    segment.time_min,
                    segment.o2,
                    segment.he,
                )

    def ceiling(self) -> int:
        """Current ceiling (m) using the model's gf_high."""
        return ceiling_from_pressures(
            self.total_inert_pressures, self.a, self.b, self.gf_high
        )

    @property
    def n2_pressures(self) -> np.ndarray:
        return self._n2_p.copy()

    @property
    def he_pressures(self) -> np.ndarray:
        return self._he_p.copy()

    @property
    def total_inert_pressures(self) -> np.ndarray:
        return self._n2_p + self._he_p

    @property
    def compartments(self) -> Tuple[Compartment, ...]:
        return tuple(
            Compartment(
                index=i,
                half_time=float(self.half_times[i]),
                a=float(self.a[i]),
                b=float(self.b[i]),
                n2_pressure=float(self._n2_p[i]),
                he_pressure=float(self._he_p[i]),
            )
            for i in range(NUM_COMPARTMENTS)
        )

    def copy(self) -> "TissueCompartmentModel":
        clone = TissueCompartmentModel(self.gf_low, self.gf_high)
        clone._n2_p = self._n2_p.copy()
        clone._he_p = self._he_p.copy()
        return clone
