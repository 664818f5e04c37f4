"""
Decompression stop scheduling on top of the tissue model.

The scheduler holds the diver at the ceiling (rounded to the stop increment)
one time step at a time, and steps the simulated depth up whenever the
ceiling clears, until the surface is reached.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .tissue_model import TissueCompartmentModel

logger = logging.getLogger(__name__)

# Scheduler defaults
STOP_INCREMENT = 3  # m, stop depths are multiples of this
ASCENT_STEP = 3  # m per ascent step once the ceiling clears
STOP_TIME_STEP = 1.0  # min simulated per stop iteration
ASCENT_TIME_STEP = 0.5  # min simulated per ascent step
MAX_TOTAL_STOP_TIME = 300.0  # min, runaway guard
SAFETY_STOP_DEPTH = 5  # m
SAFETY_STOP_TIME = 3.0  # min
SAFETY_STOP_THRESHOLD = 10  # m, safety stop only for dives deeper than this


@dataclass(frozen=True)
class DecompressionStop:
    """A required stop."""
    depth_m: int
    duration_min: float


@dataclass(frozen=True)
class DecompressionPlan:
    """Result of one planning call."""

    stops: Tuple[DecompressionStop, ...]  # in the order they were discovered
    total_runtime_min: float  # bottom time + stop time
    no_decompression_limit_min: float  # 0 when staged decompression was required
    ceiling_depth_m: int  # should be 0 after a completed schedule
    truncated: bool = False  # runaway guard cut the schedule short

    @property
    def total_stop_time(self) -> float:
        return sum(stop.duration_min for stop in self.stops)

    @property
    def requires_decompression(self) -> bool:
        """True if any stop beyond the recreational safety stop is needed."""
        return bool(self.stops) and self.no_decompression_limit_min == 0

    def to_dict(self) -> dict:
        return {
            "stops": [
                {"depth_m": s.depth_m, "duration_min": s.duration_min}
                for s in self.stops
            ],
            "total_runtime_min": self.total_runtime_min,
            "no_decompression_limit_min": self.no_decompression_limit_min,
            "ceiling_depth_m": self.ceiling_depth_m,
            "truncated": self.truncated,
        }


class DecompressionScheduler:
    """Stepwise ascent/stop simulation producing a DecompressionPlan."""

    def __init__(
        self,
        stop_increment: int = STOP_INCREMENT,
        ascent_step: int = ASCENT_STEP,
        stop_time_step: float = STOP_TIME_STEP,
        ascent_time_step: float = ASCENT_TIME_STEP,
        max_total_stop_time: float = MAX_TOTAL_STOP_TIME,
        safety_stop_depth: int = SAFETY_STOP_DEPTH,
        safety_stop_time: float = SAFETY_STOP_TIME,
        safety_stop_threshold: float = SAFETY_STOP_THRESHOLD,
    ):
        if stop_increment <= 0 or ascent_step <= 0:
            raise ValueError("stop_increment and ascent_step must be positive")
        if stop_time_step <= 0:
            raise ValueError(f"stop_time_step must be positive, got {stop_time_step}")

        self.stop_increment = stop_increment
        self.ascent_step = ascent_step
        self.stop_time_step = stop_time_step
        self.ascent_time_step = ascent_time_step
        self.max_total_stop_time = max_total_stop_time
        self.safety_stop_depth = safety_stop_depth
        self.safety_stop_time = safety_stop_time
        self.safety_stop_threshold = safety_stop_threshold

    @classmethod
    def from_config(cls, deco_cfg: Optional[dict]) -> "DecompressionScheduler":
        """Build from the `deco` block returned by load_effective_config."""
        deco_cfg = deco_cfg or {}
        return cls(
            stop_increment=int(deco_cfg.get("stop_increment", STOP_INCREMENT)),
            ascent_step=int(deco_cfg.get("ascent_step", ASCENT_STEP)),
            stop_time_step=float(deco_cfg.get("stop_time_step", STOP_TIME_STEP)),
            ascent_time_step=float(deco_cfg.get("ascent_time_step", ASCENT_TIME_STEP)),
            max_total_stop_time=float(
                deco_cfg.get("max_total_stop_time", MAX_TOTAL_STOP_TIME)
            ),
            safety_stop_depth=int(deco_cfg.get("safety_stop_depth", SAFETY_STOP_DEPTH)),
            safety_stop_time=float(deco_cfg.get("safety_stop_time", SAFETY_STOP_TIME)),
            safety_stop_threshold=float(
                deco_cfg.get("safety_stop_threshold", SAFETY_STOP_THRESHOLD)
            ),
        )

    def stop_depth_for(self, ceiling: int) -> int:
        """Ceiling rounded up to the next multiple of the stop increment."""
        return int(math.ceil(ceiling / self.stop_increment) * self.stop_increment)

    def schedule_stops(
        self,
        model: TissueCompartmentModel,
        start_depth_m: float,
        o2: float,
        he: float,
    ) -> Tuple[Tuple[DecompressionStop, ...], bool]:
        """Run the ascent/stop loop from start_depth_m.

        Mutates model. Returns (stops, truncated); truncated is True when the
        summed stop time reached max_total_stop_time with the ceiling still
        below the surface.
        """
        durations: Dict[int, float] = {}
        total_stop_time = 0.0
        truncated = False
        depth = start_depth_m

        while depth > 0:
            ceiling = model.ceiling()

            if ceiling > 0:
                if total_stop_time + self.stop_time_step > self.max_total_stop_time:
                    truncated = True
                    logger.warning(
                        f"Stop time reached {total_stop_time:.0f} min with ceiling "
                        f"at {ceiling} m; schedule truncated"
                    )
                    break

                stop_depth = self.stop_depth_for(ceiling)
                model.update(stop_depth, self.stop_time_step, o2, he)
                if stop_depth not in durations:
                    logger.debug(f"New stop at {stop_depth} m (ceiling {ceiling} m)")
                durations[stop_depth] = durations.get(stop_depth, 0.0) + self.stop_time_step
                total_stop_time += self.stop_time_step
            else:
                depth -= self.ascent_step
                if depth > 0:
                    model.update(depth, self.ascent_time_step, o2, he)

        stops = tuple(
            DecompressionStop(depth_m=d, duration_min=t)
            for d, t in durations.items()
            if t > 0
        )
        return stops, truncated

    def plan(
        self,
        max_depth_m: float,
        bottom_time_min: float,
        o2: float,
        he: float,
        gf_low: float = 0.30,
        gf_high: float = 0.85,
    ) -> DecompressionPlan:
        """Bottom phase, stop schedule and post-processing for one dive."""
        model = TissueCompartmentModel(gf_low=gf_low, gf_high=gf_high)
        model.update(max_depth_m, bottom_time_min, o2, he)
        logger.debug(
            f"Bottom phase {max_depth_m} m / {bottom_time_min} min, "
            f"ceiling {model.ceiling()} m"
        )

        stops, truncated = self.schedule_stops(model, max_depth_m, o2, he)

        if max_depth_m > self.safety_stop_threshold and not stops:
            stops = (DecompressionStop(self.safety_stop_depth, self.safety_stop_time),)

        total_runtime = bottom_time_min + sum(s.duration_min for s in stops)

        is_safety_only = (
            len(stops) == 1
            and stops[0].depth_m == self.safety_stop_depth
            and stops[0].duration_min == self.safety_stop_time
        )
        ndl = bottom_time_min if is_safety_only else 0

        plan = DecompressionPlan(
            stops=stops,
            total_runtime_min=total_runtime,
            no_decompression_limit_min=ndl,
            ceiling_depth_m=model.ceiling(),
            truncated=truncated,
        )
        logger.debug(
            f"Plan {max_depth_m} m / {bottom_time_min} min: {len(stops)} stop(s), "
            f"runtime {total_runtime:.1f} min"
        )
        return plan

    def find_no_decompression_limit(
        self,
        depth_m: float,
        o2: float,
        he: float,
        gf_low: float = 0.30,
        gf_high: float = 0.85,
        max_time_min: int = 200,
    ) -> int:
        """Longest whole-minute bottom time needing no staged stop.

        A plan with no stops or only the safety stop counts as within the
        limit. Returns max_time_min if the limit was not reached.
        """
        limit = 0
        for bottom_time in range(1, max_time_min + 1):
            plan = self.plan(depth_m, bottom_time, o2, he, gf_low, gf_high)
            if plan.requires_decompression:
                break
            limit = bottom_time
        return limit


def compute_decompression_plan(
    max_depth_m: float,
    bottom_time_min: float,
    o2_fraction: float,
    he_fraction: float,
    gf_low: float = 0.30,
    gf_high: float = 0.85,
) -> DecompressionPlan:
    """Plan a square dive with the default scheduler settings.

    Example:
        plan = compute_decompression_plan(40, 40, 0.21, 0.0)
    """
    return DecompressionScheduler().plan(
        max_depth_m, bottom_time_min, o2_fraction, he_fraction, gf_low, gf_high
    )
