"""
planbench/viz.py — matplotlib 展示层

MatplotlibPresenter 在一个 Axes 上绘制障碍物地图、搜索图、路径与始末点,
坐标范围固定为工作空间边界.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from matplotlib.patches import Rectangle

from .environments import ObstacleMap
from .models import PlannerGraph, Point
from .presenter import Presenter

logger = logging.getLogger(__name__)


class MatplotlibPresenter(Presenter):
    """Draws onto a matplotlib Axes (created if not given)."""

    def __init__(self, ax: Optional[Any] = None,
                 limits: Tuple[float, float] = (-100.0, 100.0),
                 figsize: Tuple[float, float] = (8, 8),
                 title: str = ""):
        if ax is None:
            self.fig, ax = plt.subplots(figsize=figsize)
        else:
            self.fig = ax.figure
        self.ax = ax
        self.limits = limits
        self.title = title
        self._apply_limits()

    def _apply_limits(self) -> None:
        lo, hi = self.limits
        self.ax.set_xlim(lo, hi)
        self.ax.set_ylim(lo, hi)
        self.ax.set_aspect("equal")
        if self.title:
            self.ax.set_title(self.title)

    def clear(self) -> None:
        self.ax.cla()
        self._apply_limits()

    def draw_map_2d(self, obstacle_map: ObstacleMap) -> None:
        self.clear()
        for obs in obstacle_map.get_obstacles():
            w, h = obs.size
            self.ax.add_patch(Rectangle(
                tuple(obs.min_point), w, h,
                facecolor="dimgray", edgecolor="black", alpha=0.8))

    def draw_search_graph(self, graph: PlannerGraph) -> None:
        if graph.num_edges:
            lines = LineCollection(graph.segments(), colors="lightsteelblue",
                                   linewidths=0.6, zorder=1)
            self.ax.add_collection(lines)
        if graph.num_vertices:
            xs, ys = zip(*graph.vertices)
            self.ax.scatter(xs, ys, s=3, c="steelblue", zorder=2)

    def draw_geometric_path(self, path: Sequence[Point]) -> None:
        if not path:
            return
        xs, ys = zip(*path)
        self.ax.plot(xs, ys, "-", color="crimson", linewidth=2.0, zorder=3)

    def draw_point(self, point: Point, color: str) -> None:
        self.ax.plot(point.x, point.y, "o", color=color, markersize=8, zorder=4)

    def report_no_solution(self, planner_name: str) -> None:
        self.ax.text(0.5, 0.98, f"{planner_name}: no solution",
                     transform=self.ax.transAxes, ha="center", va="top",
                     color="crimson")

    def refresh(self) -> None:
        self.fig.canvas.draw_idle()

    def save(self, filepath: str | Path, dpi: int = 120) -> Path:
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        self.fig.savefig(filepath, dpi=dpi, bbox_inches="tight")
        logger.info("Saved figure → %s", filepath)
        return filepath

    def close(self) -> None:
        plt.close(self.fig)
