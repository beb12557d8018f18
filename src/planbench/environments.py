"""
planbench/environments.py — 障碍物地图与环境

ObstacleMap 管理 2D 工作空间中的矩形障碍物集合, 提供增删查和 JSON 持久化.
Environment 是编排层消费的环境接口 (名称 / 地图 / 默认始末点).

Example:
    >>> room = ObstacleMap()
    >>> room.add_obstacle([-10, -10], [10, 10], name="block")
    >>> env = MapEnvironment("Block", room, start=(-50, -50), goal=(50, 50))
"""

from __future__ import annotations

import abc
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .models import Obstacle, Point

logger = logging.getLogger(__name__)


class ObstacleMap:
    """2D 矩形障碍物集合"""

    def __init__(self) -> None:
        self._obstacles: List[Obstacle] = []

    @property
    def n_obstacles(self) -> int:
        return len(self._obstacles)

    def add_obstacle(self, min_point: Sequence[float],
                     max_point: Sequence[float], name: str = "") -> Obstacle:
        """添加一个矩形障碍物

        Args:
            min_point: 最小角点 [x, y]
            max_point: 最大角点 [x, y]
            name: 障碍物名称, 为空时自动命名

        Returns:
            创建的 Obstacle 实例
        """
        if not name:
            name = f"obstacle_{self.n_obstacles}"
        obs = Obstacle(min_point=min_point, max_point=max_point, name=name)
        self._obstacles.append(obs)
        logger.debug("添加障碍物 '%s': min=%s, max=%s", name,
                     obs.min_point.tolist(), obs.max_point.tolist())
        return obs

    def get_obstacles(self) -> List[Obstacle]:
        return list(self._obstacles)

    def get_obstacle(self, name: str) -> Optional[Obstacle]:
        for obs in self._obstacles:
            if obs.name == name:
                return obs
        return None

    def is_free(self, point: Sequence[float]) -> bool:
        """点不在任何障碍物内 (边界算碰撞)."""
        return not any(obs.contains_point(point) for obs in self._obstacles)

    def to_dict(self) -> Dict[str, Any]:
        return {'obstacles': [obs.to_dict() for obs in self._obstacles]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ObstacleMap':
        """从字典加载

        Args:
            data: {'obstacles': [{'min': [...], 'max': [...], 'name': ...}, ...]}
        """
        obstacle_map = cls()
        for item in data.get('obstacles', []):
            obstacle_map.add_obstacle(item['min'], item['max'],
                                      name=item.get('name', ''))
        return obstacle_map

    def to_json(self, filepath: str | Path) -> None:
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, filepath: str | Path) -> 'ObstacleMap':
        with open(filepath, 'r', encoding='utf-8') as f:
            return cls.from_dict(json.load(f))

    def __repr__(self) -> str:
        return f"ObstacleMap(n_obstacles={self.n_obstacles})"


class Environment(abc.ABC):
    """环境接口: 名称、障碍物地图、默认始末点. 对编排层只读."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """注册表键."""

    @abc.abstractmethod
    def get_map(self) -> ObstacleMap:
        """障碍物地图."""

    @abc.abstractmethod
    def get_start_point(self) -> Point:
        """默认起点."""

    @abc.abstractmethod
    def get_goal_point(self) -> Point:
        """默认终点."""


class MapEnvironment(Environment):
    """Environment backed by an in-memory ObstacleMap."""

    def __init__(self, name: str, obstacle_map: ObstacleMap,
                 start: Sequence[float], goal: Sequence[float]):
        self._name = name
        self._map = obstacle_map
        self._start = Point.of(start)
        self._goal = Point.of(goal)

    @property
    def name(self) -> str:
        return self._name

    def get_map(self) -> ObstacleMap:
        return self._map

    def get_start_point(self) -> Point:
        return self._start

    def get_goal_point(self) -> Point:
        return self._goal

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self._name,
            'start': list(self._start),
            'goal': list(self._goal),
            **self._map.to_dict(),
        }

    def __repr__(self) -> str:
        return (f"MapEnvironment({self._name!r}, "
                f"n_obstacles={self._map.n_obstacles})")


# ═══════════════════════════════════════════════════════════════════════════
# 内置环境
# ═══════════════════════════════════════════════════════════════════════════

def empty_room() -> MapEnvironment:
    return MapEnvironment("EmptyRoom", ObstacleMap(),
                          start=(-50.0, -50.0), goal=(50.0, 50.0))


def central_block() -> MapEnvironment:
    m = ObstacleMap()
    m.add_obstacle([-30.0, -30.0], [30.0, 30.0], name="block")
    return MapEnvironment("CentralBlock", m,
                          start=(-70.0, -70.0), goal=(70.0, 70.0))


def two_walls() -> MapEnvironment:
    m = ObstacleMap()
    m.add_obstacle([-40.0, -100.0], [-30.0, 60.0], name="wall_low")
    m.add_obstacle([30.0, -60.0], [40.0, 100.0], name="wall_high")
    return MapEnvironment("TwoWalls", m,
                          start=(-80.0, 0.0), goal=(80.0, 0.0))


def narrow_passage() -> MapEnvironment:
    m = ObstacleMap()
    m.add_obstacle([-5.0, -100.0], [5.0, -4.0], name="wall_bottom")
    m.add_obstacle([-5.0, 4.0], [5.0, 100.0], name="wall_top")
    return MapEnvironment("NarrowPassage", m,
                          start=(-60.0, 0.0), goal=(60.0, 0.0))


BUILTIN_ENVIRONMENTS = (empty_room, central_block, two_walls, narrow_passage)


def load_environment(filepath: str | Path) -> MapEnvironment:
    """从 JSON 文件加载环境

    格式::

        {"name": "...", "start": [x, y], "goal": [x, y],
         "obstacles": [{"min": [x, y], "max": [x, y], "name": "..."}]}
    """
    filepath = Path(filepath)
    with open(filepath, 'r', encoding='utf-8') as f:
        data = json.load(f)
    for key in ('start', 'goal'):
        if key not in data:
            raise ValueError(f"{filepath}: missing '{key}'")
    env = MapEnvironment(
        data.get('name', filepath.stem),
        ObstacleMap.from_dict(data),
        start=data['start'],
        goal=data['goal'],
    )
    logger.info("Loaded environment '%s' (%d obstacles) from %s",
                env.name, env.get_map().n_obstacles, filepath)
    return env
