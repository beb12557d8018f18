"""
planbench/presenter.py — 展示层接口

编排层只调用这些方法作为通知, 不从中读取结果.
图形实现见 ``planbench.viz.MatplotlibPresenter``.
"""

from __future__ import annotations

import abc
import logging
from typing import Sequence

from .environments import ObstacleMap
from .models import PlannerGraph, Point

logger = logging.getLogger(__name__)

START_COLOR = "green"
GOAL_COLOR = "black"


class Presenter(abc.ABC):
    """Presentation contract consumed by the GUI / CLI layer."""

    @abc.abstractmethod
    def draw_search_graph(self, graph: PlannerGraph) -> None:
        """绘制求解器探索的图."""

    @abc.abstractmethod
    def draw_geometric_path(self, path: Sequence[Point]) -> None:
        """绘制起点到终点的路径."""

    @abc.abstractmethod
    def draw_point(self, point: Point, color: str) -> None:
        """绘制单个点 (起点 / 终点)."""

    @abc.abstractmethod
    def draw_map_2d(self, obstacle_map: ObstacleMap) -> None:
        """绘制障碍物地图."""

    def report_no_solution(self, planner_name: str) -> None:
        """时间预算内无解."""

    def refresh(self) -> None:
        """一批绘制完成后调用."""


class LoggingPresenter(Presenter):
    """Headless presenter: writes what would be drawn to the log."""

    def draw_search_graph(self, graph: PlannerGraph) -> None:
        logger.info("Number of vertices: %d", graph.num_vertices)
        logger.info("Number of edges: %d", graph.num_edges)

    def draw_geometric_path(self, path: Sequence[Point]) -> None:
        logger.info("Found solution: %d waypoints", len(path))
        for p in path:
            logger.debug("  (%.3f, %.3f)", p.x, p.y)

    def draw_point(self, point: Point, color: str) -> None:
        logger.debug("point (%.3f, %.3f) [%s]", point.x, point.y, color)

    def draw_map_2d(self, obstacle_map: ObstacleMap) -> None:
        logger.info("Map with %d obstacles", obstacle_map.n_obstacles)

    def report_no_solution(self, planner_name: str) -> None:
        logger.info("No solution found (%s)", planner_name)
