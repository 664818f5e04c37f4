"""
Depth/runtime chart of a decompression plan.
"""

from typing import List, Optional, Tuple

import matplotlib.pyplot as plt

from .scheduler import DecompressionPlan


def plan_profile_points(
    plan: DecompressionPlan, max_depth_m: float, bottom_time_min: float
) -> List[Tuple[float, float]]:
    """(runtime, depth) corners of the planned dive.

    Descent and travel between stops are drawn as instantaneous, matching how
    the schedule accounts runtime.
    """
    points = [(0.0, 0.0), (0.0, max_depth_m), (bottom_time_min, max_depth_m)]
    t = bottom_time_min
    for stop in plan.stops:
        points.append((t, stop.depth_m))
        t += stop.duration_min
        points.append((t, stop.depth_m))
    points.append((t, 0.0))
    return points


def plot_plan(
    plan: DecompressionPlan,
    max_depth_m: float,
    bottom_time_min: float,
    title: str = "Dive Plan",
    save_path: Optional[str] = None,
) -> plt.Figure:
    """
    Plot the planned profile with stop labels.

    Args:
        plan: result of compute_decompression_plan
        max_depth_m: bottom depth used for the plan
        bottom_time_min: bottom time used for the plan
        title: Plot title
        save_path: Path to save figure (optional)

    Returns:
        matplotlib Figure object
    """
    points = plan_profile_points(plan, max_depth_m, bottom_time_min)
    times = [p[0] for p in points]
    depths = [p[1] for p in points]

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(times, depths, "b-", linewidth=2)
    ax.fill_between(times, depths, alpha=0.15, color="blue")

    t = bottom_time_min
    for stop in plan.stops:
        ax.annotate(
            f"{stop.depth_m} m / {stop.duration_min:g} min",
            xy=(t + stop.duration_min / 2.0, stop.depth_m),
            xytext=(0, -12),
            textcoords="offset points",
            ha="center",
            fontsize=8,
        )
        t += stop.duration_min

    ax.set_xlabel("Runtime (min)")
    ax.set_ylabel("Depth (m)")
    ax.set_title(title)
    ax.invert_yaxis()
    ax.grid(True, alpha=0.3)

    if plan.truncated:
        ax.text(
            0.02,
            0.02,
            "Schedule truncated by stop-time limit",
            transform=ax.transAxes,
            color="red",
            fontsize=9,
            bbox=dict(boxstyle="round", facecolor="white", alpha=0.8),
        )

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig
