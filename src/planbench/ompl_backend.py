"""
planbench/ompl_backend.py — OMPL 求解库适配

使用 OMPL Python bindings (``ompl.base`` / ``ompl.geometric`` /
``ompl.util``) 构建 RealVector(2) 状态空间、有效性检测与问题定义.

OMPL 在首次使用时才导入; 未安装时抛 BackendUnavailableError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Callable, List, Optional, Tuple

from .backend import SearchBackend
from .errors import BackendUnavailableError
from .models import Bounds, PlannerGraph, Point
from .validity import ValidityOracle

logger = logging.getLogger(__name__)

# 延迟导入的 (base, geometric, util) 模块
_OMPL: Optional[Tuple[ModuleType, ModuleType, ModuleType]] = None

# OMPL 的 RNG 是进程级全局状态, 只在首次设置种子时生效
_SEEDED: Optional[int] = None


def load_ompl() -> Tuple[ModuleType, ModuleType, ModuleType]:
    """Import and cache ``ompl.base``, ``ompl.geometric``, ``ompl.util``."""
    global _OMPL
    if _OMPL is None:
        try:
            from ompl import base as ob
            from ompl import geometric as og
            from ompl import util as ou
        except ImportError as exc:
            raise BackendUnavailableError(
                "OMPL Python bindings are not installed "
                "(pip install 'planbench[ompl]')") from exc
        _OMPL = (ob, og, ou)
    return _OMPL


def has_ompl() -> bool:
    try:
        load_ompl()
    except BackendUnavailableError:
        return False
    return True


def load_planner_class(algorithm: str) -> Callable[[Any], Any]:
    """``ompl.geometric.<algorithm>``, e.g. ``RRTstar``."""
    _, og, _ = load_ompl()
    try:
        return getattr(og, algorithm)
    except AttributeError:
        raise ValueError(
            f"OMPL has no geometric planner '{algorithm}'") from None


@dataclass
class OmplSpace:
    """Space handle passed to planner descriptors.

    Holds the validity callback so it lives as long as the space information.
    """
    state_space: Any
    space_information: Any
    validity_fn: Callable[[Any], bool]


class OmplBackend(SearchBackend):
    """SearchBackend on top of OMPL geometric planning.

    Args:
        goal_threshold: goal region tolerance; None keeps OMPL's default
        validity_resolution: ``setStateValidityCheckingResolution`` fraction
        quiet: lower OMPL's console log level to WARN
    """

    name = "ompl"

    def __init__(self, goal_threshold: Optional[float] = None,
                 validity_resolution: Optional[float] = None,
                 quiet: bool = True):
        self.goal_threshold = goal_threshold
        self.validity_resolution = validity_resolution
        self.quiet = quiet
        self._log_level_set = False

    def _modules(self) -> Tuple[ModuleType, ModuleType, ModuleType]:
        ob, og, ou = load_ompl()
        if self.quiet and not self._log_level_set:
            ou.setLogLevel(ou.LOG_WARN)
            self._log_level_set = True
        return ob, og, ou

    def build_space(self, bounds: Bounds, oracle: ValidityOracle) -> OmplSpace:
        ob, _, _ = self._modules()

        space = ob.RealVectorStateSpace(2)
        ob_bounds = ob.RealVectorBounds(2)
        ob_bounds.setLow(float(bounds.low))
        ob_bounds.setHigh(float(bounds.high))
        space.setBounds(ob_bounds)

        si = ob.SpaceInformation(space)

        def state_is_valid(state) -> bool:
            return oracle.is_valid((state[0], state[1]))

        si.setStateValidityChecker(ob.StateValidityCheckerFn(state_is_valid))
        if self.validity_resolution is not None:
            si.setStateValidityCheckingResolution(self.validity_resolution)
        si.setup()
        logger.debug("OMPL space: RealVector(2) bounds [%g, %g]",
                     bounds.low, bounds.high)
        return OmplSpace(space, si, state_is_valid)

    def build_problem(self, space: OmplSpace, start: Point, goal: Point) -> Any:
        ob, _, _ = self._modules()

        start_state = ob.State(space.state_space)
        goal_state = ob.State(space.state_space)
        start_state[0], start_state[1] = float(start.x), float(start.y)
        goal_state[0], goal_state[1] = float(goal.x), float(goal.y)

        pdef = ob.ProblemDefinition(space.space_information)
        if self.goal_threshold is None:
            pdef.setStartAndGoalStates(start_state, goal_state)
        else:
            pdef.setStartAndGoalStates(start_state, goal_state,
                                       float(self.goal_threshold))
        return pdef

    def has_solution(self, problem: Any) -> bool:
        return bool(problem.hasSolution())

    def has_exact_solution(self, problem: Any) -> bool:
        return bool(problem.hasExactSolution())

    def solution_path(self, problem: Any) -> List[Point]:
        path = problem.getSolutionPath()
        return [Point(float(s[0]), float(s[1])) for s in path.getStates()]

    def planner_graph(self, solver: Any, space: OmplSpace) -> PlannerGraph:
        ob, _, ou = self._modules()
        data = ob.PlannerData(space.space_information)
        solver.getPlannerData(data)

        vertices = []
        edges = []
        for i in range(data.numVertices()):
            state = data.getVertex(i).getState()
            vertices.append(Point(float(state[0]), float(state[1])))
            targets = ou.vectorUint()
            data.getEdges(i, targets)
            edges.extend((i, int(j)) for j in targets)
        return PlannerGraph(vertices, edges)

    def clear_problem(self, problem: Any) -> None:
        problem.clearSolutionPaths()

    def seed(self, value: int) -> None:
        global _SEEDED
        if _SEEDED is not None:
            if _SEEDED != int(value):
                logger.warning("OMPL RNG already seeded with %d in this "
                               "process; seed %d ignored", _SEEDED, value)
            return
        _, _, ou = self._modules()
        # 部分 OMPL Python 构建未导出 RNG.setSeed
        try:
            ou.RNG.setSeed(int(value))
        except AttributeError:
            logger.warning("OMPL bindings do not expose RNG.setSeed; "
                           "seed %d ignored", value)
            return
        _SEEDED = int(value)
        logger.info("OMPL RNG seed = %d", value)
