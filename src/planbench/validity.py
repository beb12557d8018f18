"""
planbench/validity.py — 状态有效性判定

ValidityOracle 绑定一张 ObstacleMap 与工作空间边界:
状态有效 ⇔ 在边界内且不与任何障碍物碰撞.
"""

from __future__ import annotations

from typing import Sequence

from .environments import ObstacleMap
from .models import Bounds


class ValidityOracle:
    """Predicate ``is_valid(point) -> bool`` closed over an obstacle map.

    ``check_count`` counts every query, which makes it usable as a
    collision-check counter in benchmark statistics.
    """

    def __init__(self, obstacle_map: ObstacleMap, bounds: Bounds):
        self.obstacle_map = obstacle_map
        self.bounds = bounds
        self.check_count = 0

    def is_valid(self, point: Sequence[float]) -> bool:
        self.check_count += 1
        if not self.bounds.contains(point):
            return False
        return self.obstacle_map.is_free(point)

    __call__ = is_valid

    def reset_counter(self) -> None:
        self.check_count = 0
