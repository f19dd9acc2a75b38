"""Matplotlib figures of predicted trajectories, for tuning and debugging."""

from typing import Optional, Sequence, Tuple

import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.colors import Normalize
from matplotlib.figure import Figure

from .trajectory_simulator import TrajectoryResult


class Colors:
    BACKGROUND = '#1a3d1a'
    SURFACE = '#24502a'
    GRID = '#3d7a33'
    TEXT_PRIMARY = '#ffffff'
    TRAJECTORY_ERROR = '#ff9f43'
    LAUNCH = '#ffffff'
    TARGET = '#ffff00'
    HAZARD = '#3498db'


def _speeds(x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
    """Per-segment displacement, a speed proxy for colouring."""
    return np.sqrt(np.diff(x) ** 2 + np.diff(y) ** 2 + np.diff(z) ** 2)


def plot_trajectory(
        result: TrajectoryResult,
        target: Optional[Tuple[float, float]] = None,
        envelope: Sequence[TrajectoryResult] = ()
) -> Figure:
    """
    Top-down path coloured by speed next to the height profile.

    The y axis of the top-down view is inverted to match screen coordinates.
    """
    fig = Figure(figsize=(10, 4), facecolor=Colors.BACKGROUND)
    ax_top, ax_side = fig.subplots(1, 2)
    for ax in (ax_top, ax_side):
        ax.set_facecolor(Colors.SURFACE)
        ax.grid(True, color=Colors.GRID, linestyle='-', linewidth=0.5, alpha=0.5)
        ax.tick_params(colors=Colors.TEXT_PRIMARY)

    for other in envelope:
        ex, ey, _ = other.get_arrays()
        ax_top.plot(ex, ey, color=Colors.TRAJECTORY_ERROR, alpha=0.25, linewidth=1)

    x0, y0 = result.launch_params.position
    x, y, z = result.get_arrays()
    x = np.concatenate([[x0], x])
    y = np.concatenate([[y0], y])
    z = np.concatenate([[0.0], z])

    if len(x) > 1:
        points = np.array([x, y]).T.reshape(-1, 1, 2)
        segments = np.concatenate([points[:-1], points[1:]], axis=1)
        speeds = _speeds(x, y, z)
        lc = LineCollection(segments, cmap='plasma', norm=Normalize(speeds.min(), speeds.max()), linewidth=3)
        lc.set_array(speeds)
        ax_top.add_collection(lc)
        ax_top.autoscale_view()

    ax_top.plot(x0, y0, 'o', color=Colors.LAUNCH, markersize=8, zorder=5)
    landing = result.landing_point
    if landing is not None:
        marker_color = Colors.HAZARD if result.hazard else Colors.TARGET
        ax_top.plot(*landing, 'X', color=marker_color, markersize=10, zorder=5)
    if target is not None:
        ax_top.plot(*target, '+', color=Colors.TARGET, markersize=12, zorder=5)
    ax_top.invert_yaxis()
    ax_top.set_title('Ground path', color=Colors.TEXT_PRIMARY)

    travelled = np.concatenate([[0.0], np.cumsum(np.sqrt(np.diff(x) ** 2 + np.diff(y) ** 2))])
    ax_side.plot(travelled, z, color=Colors.TARGET, linewidth=2)
    ax_side.set_xlabel('Distance (px)', color=Colors.TEXT_PRIMARY)
    ax_side.set_ylabel('Height (px)', color=Colors.TEXT_PRIMARY)
    ax_side.set_title(f'Height profile ({result.bounces} bounces)', color=Colors.TEXT_PRIMARY)

    fig.tight_layout()
    return fig
