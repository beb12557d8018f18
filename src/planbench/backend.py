"""
planbench/backend.py — 求解库边界

SearchBackend:   构建搜索空间 / 问题定义, 并读取求解结果
ProblemInstance: 单次 solve / benchmark 调用的问题实例 (不跨调用共享)

求解器本身遵循外部库的接口 (OMPL 命名)::

    solver.setProblemDefinition(problem)
    solver.setup() / solver.isSetup()
    solver.solve(time_budget)        # truthy ⇔ 找到解
    solver.clear()
    solver.getName() / solver.setName(name)
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any, List

from .models import Bounds, PlannerGraph, Point
from .validity import ValidityOracle


@dataclass
class ProblemInstance:
    """搜索空间 + 有效性判定 + 始末点, 以及对应的求解库句柄."""
    bounds: Bounds
    oracle: ValidityOracle
    start: Point
    goal: Point
    space: Any
    problem: Any


class SearchBackend(abc.ABC):
    """Adapter between planbench and a sampling-based planning library."""

    name: str = "backend"

    @abc.abstractmethod
    def build_space(self, bounds: Bounds, oracle: ValidityOracle) -> Any:
        """构建有界 2D 搜索空间并挂接有效性判定, 返回空间句柄.

        该句柄即 ``PlannerDescriptor.get_planner`` 的参数.
        """

    @abc.abstractmethod
    def build_problem(self, space: Any, start: Point, goal: Point) -> Any:
        """构建包含始末状态的问题定义."""

    @abc.abstractmethod
    def has_solution(self, problem: Any) -> bool:
        """问题定义上是否已有 (精确或近似) 解."""

    @abc.abstractmethod
    def has_exact_solution(self, problem: Any) -> bool:
        """问题定义上是否已有精确解."""

    @abc.abstractmethod
    def solution_path(self, problem: Any) -> List[Point]:
        """从起点到终点的有序路径点."""

    @abc.abstractmethod
    def planner_graph(self, solver: Any, space: Any) -> PlannerGraph:
        """求解器探索过的图 (顶点 + 边)."""

    @abc.abstractmethod
    def clear_problem(self, problem: Any) -> None:
        """清除问题定义上已记录的解, 用于 benchmark 重复运行."""

    def seed(self, value: int) -> None:
        """设置求解库随机种子; 默认空操作."""
