"""
planbench/registry.py — 环境 / 规划器注册表

两张独立的 name → object 映射. 启动时由组合根 (create_default_registry)
一次性填充, 之后只读; 并发注册需调用方自行串行化.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .environments import BUILTIN_ENVIRONMENTS, Environment
from .planners import BUILTIN_PLANNERS, PlannerDescriptor

logger = logging.getLogger(__name__)


class Registry:
    """Name-keyed lookup for environments and planner descriptors.

    ``add_*`` ignores ``None``; a later registration under an existing
    name replaces the earlier one.  ``get_*`` returns ``None`` for
    unknown names.
    """

    def __init__(self) -> None:
        self._environments: Dict[str, Environment] = {}
        self._planners: Dict[str, PlannerDescriptor] = {}

    def add_environment(self, environment: Optional[Environment]) -> None:
        if environment is None:
            return
        if environment.name in self._environments:
            logger.warning("environment '%s' re-registered, replacing",
                           environment.name)
        self._environments[environment.name] = environment

    def add_planner(self, planner: Optional[PlannerDescriptor]) -> None:
        if planner is None:
            return
        if planner.name in self._planners:
            logger.warning("planner '%s' re-registered, replacing",
                           planner.name)
        self._planners[planner.name] = planner

    def environment_names(self) -> List[str]:
        return list(self._environments)

    def planner_names(self) -> List[str]:
        return list(self._planners)

    def get_environment(self, name: str) -> Optional[Environment]:
        return self._environments.get(name)

    def get_planner(self, name: str) -> Optional[PlannerDescriptor]:
        return self._planners.get(name)


def create_default_registry() -> Registry:
    """注册全部内置环境与规划器."""
    registry = Registry()
    for make_env in BUILTIN_ENVIRONMENTS:
        registry.add_environment(make_env())
    for planner_cls in BUILTIN_PLANNERS:
        registry.add_planner(planner_cls())
    logger.debug("registry: %d environments, %d planners",
                 len(registry.environment_names()),
                 len(registry.planner_names()))
    return registry
