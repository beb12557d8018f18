"""
planbench/planners.py — 统一规划器描述接口

PlannerDescriptor ABC: 名称 + 独占参数集合 + 求解器工厂 + 克隆
OmplPlannerDescriptor: 基于 ``ompl.geometric`` 的变体基类

内置变体 (封闭集合, 见 BUILTIN_PLANNERS):
- RRTStarPlanner      "RRTstar"      range, goal_bias
- LazyPRMStarPlanner  "LazyPRMstar"  range
- RRTPlanner          "RRT"          range, goal_bias
- RRTConnectPlanner   "RRTConnect"   range

range == 0.0 表示交给算法自动设定, 各变体在 configure() 中显式跳过.
"""

from __future__ import annotations

import abc
import logging
from typing import Any

from . import ompl_backend
from .configuration import (
    GOAL_BIAS,
    RANGE,
    ConfigurationSet,
    goal_bias_configuration,
    range_configuration,
)

logger = logging.getLogger(__name__)


class PlannerDescriptor(abc.ABC):
    """Wraps one planning algorithm and its tunable parameters.

    生命周期::

        desc = RRTStarPlanner()
        desc.get_configurations().get("range").set(5.0)
        solver = desc.get_planner(space)   # 每次调用产生独立的新求解器
        other = desc.copy()                # 参数集合深拷贝, 互不影响
    """

    def __init__(self) -> None:
        self._configurations = ConfigurationSet()
        self.declare_configurations(self._configurations)

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """注册表键与 benchmark 报告键."""

    def declare_configurations(self, configurations: ConfigurationSet) -> None:
        """注册该变体的参数及默认值; 默认无参数."""

    @abc.abstractmethod
    def get_planner(self, space: Any) -> Any:
        """构建绑定到 ``space`` 的新求解器并应用当前参数.

        返回的求解器归调用方所有, 描述对象不保留引用.
        """

    def get_configurations(self) -> ConfigurationSet:
        """返回内部参数集合 (别名, 可原地修改)."""
        return self._configurations

    def copy(self) -> "PlannerDescriptor":
        dup = type(self).__new__(type(self))
        dup.__dict__.update(self.__dict__)
        dup._configurations = self._configurations.copy()
        return dup

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._configurations.to_dict()!r})"


class OmplPlannerDescriptor(PlannerDescriptor):
    """Descriptor whose solver is ``ompl.geometric.<algorithm>``."""

    algorithm: str = ""

    @property
    def name(self) -> str:
        return self.algorithm

    def get_planner(self, space: Any) -> Any:
        planner_cls = ompl_backend.load_planner_class(self.algorithm)
        solver = planner_cls(space.space_information)
        self.configure(solver)
        logger.debug("created %s with %s", self.algorithm,
                     self._configurations.to_dict())
        return solver

    @abc.abstractmethod
    def configure(self, solver: Any) -> None:
        """把参数集合中的当前值写入求解器."""

    def _apply_range(self, solver: Any) -> None:
        value = self._configurations.get(RANGE).value
        if value > 0.0:
            solver.setRange(value)


class RRTStarPlanner(OmplPlannerDescriptor):
    algorithm = "RRTstar"

    def declare_configurations(self, configurations: ConfigurationSet) -> None:
        configurations.add(range_configuration(0.0))
        configurations.add(goal_bias_configuration(0.05))

    def configure(self, solver: Any) -> None:
        self._apply_range(solver)
        solver.setGoalBias(self._configurations.get(GOAL_BIAS).value)


class LazyPRMStarPlanner(OmplPlannerDescriptor):
    algorithm = "LazyPRMstar"

    def declare_configurations(self, configurations: ConfigurationSet) -> None:
        configurations.add(range_configuration(0.0))

    def configure(self, solver: Any) -> None:
        self._apply_range(solver)


class RRTPlanner(OmplPlannerDescriptor):
    algorithm = "RRT"

    def declare_configurations(self, configurations: ConfigurationSet) -> None:
        configurations.add(range_configuration(0.0))
        configurations.add(goal_bias_configuration(0.05))

    def configure(self, solver: Any) -> None:
        self._apply_range(solver)
        solver.setGoalBias(self._configurations.get(GOAL_BIAS).value)


class RRTConnectPlanner(OmplPlannerDescriptor):
    algorithm = "RRTConnect"

    def declare_configurations(self, configurations: ConfigurationSet) -> None:
        configurations.add(range_configuration(0.0))

    def configure(self, solver: Any) -> None:
        self._apply_range(solver)


BUILTIN_PLANNERS = (
    RRTStarPlanner,
    LazyPRMStarPlanner,
    RRTPlanner,
    RRTConnectPlanner,
)
