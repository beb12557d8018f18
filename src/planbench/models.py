"""
planbench/models.py — 数据模型

定义各模块共享的数据结构：Point、Bounds、Obstacle、PlannerGraph、
SolveOutcome，以及编排层配置 OrchestratorConfig。
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np


class Point(NamedTuple):
    """2-D workspace point."""
    x: float
    y: float

    @classmethod
    def of(cls, value: Sequence[float]) -> "Point":
        """从 (x, y) 序列 / ndarray 构造."""
        if isinstance(value, Point):
            return value
        if len(value) != 2:
            raise ValueError(f"expected 2 coordinates, got {len(value)}")
        return cls(float(value[0]), float(value[1]))

    def distance_to(self, other: Sequence[float]) -> float:
        return math.hypot(self.x - other[0], self.y - other[1])


@dataclass(frozen=True)
class Bounds:
    """Square workspace bounds, identical on both axes."""
    low: float = -100.0
    high: float = 100.0

    def __post_init__(self) -> None:
        if not self.low < self.high:
            raise ValueError(
                f"bounds low ({self.low}) must be below high ({self.high})")

    def contains(self, point: Sequence[float]) -> bool:
        return (self.low <= point[0] <= self.high
                and self.low <= point[1] <= self.high)


@dataclass
class Obstacle:
    """轴对齐矩形障碍物

    Attributes:
        min_point: 最小角点 [x, y]
        max_point: 最大角点 [x, y]
        name: 障碍物名称（可选）
    """
    min_point: np.ndarray
    max_point: np.ndarray
    name: str = ""

    def __post_init__(self) -> None:
        self.min_point = np.asarray(self.min_point, dtype=np.float64)
        self.max_point = np.asarray(self.max_point, dtype=np.float64)
        if self.min_point.shape != (2,) or self.max_point.shape != (2,):
            raise ValueError("obstacle corners must be 2-D points")
        if np.any(self.min_point > self.max_point):
            raise ValueError(
                f"obstacle '{self.name}': min_point must not exceed max_point")

    @property
    def center(self) -> np.ndarray:
        return (self.min_point + self.max_point) / 2.0

    @property
    def size(self) -> np.ndarray:
        return self.max_point - self.min_point

    def contains_point(self, point: Sequence[float]) -> bool:
        p = np.asarray(point, dtype=np.float64)
        return bool(np.all(p >= self.min_point) and np.all(p <= self.max_point))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'min': self.min_point.tolist(),
            'max': self.max_point.tolist(),
            'name': self.name,
        }


@dataclass
class PlannerGraph:
    """Roadmap / search tree explored by a solver."""
    vertices: List[Point] = field(default_factory=list)
    edges: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    def segments(self) -> List[Tuple[Point, Point]]:
        return [(self.vertices[i], self.vertices[j]) for i, j in self.edges]


def path_length(path: Sequence[Sequence[float]]) -> float:
    if len(path) < 2:
        return 0.0
    arr = np.asarray(path, dtype=np.float64)
    return float(np.sum(np.linalg.norm(np.diff(arr, axis=0), axis=1)))


@dataclass
class SolveOutcome:
    """单次 solve 的结果.

    ``solved == False`` 表示在时间预算内无解, 属于正常结果而非错误.
    """
    planner_name: str
    solved: bool
    exact: bool = False
    status: str = "no_solution"
    path: List[Point] = field(default_factory=list)
    graph: PlannerGraph = field(default_factory=PlannerGraph)
    planning_time: float = 0.0

    @property
    def path_length(self) -> float:
        if not self.solved:
            return float("inf")
        return path_length(self.path)

    def to_dict(self) -> dict:
        return {
            "planner": self.planner_name,
            "solved": self.solved,
            "exact": self.exact,
            "status": self.status,
            "planning_time": self.planning_time,
            "num_vertices": self.graph.num_vertices,
            "num_edges": self.graph.num_edges,
            "path_length": self.path_length if self.solved else None,
            "path": [list(p) for p in self.path],
        }

    @staticmethod
    def no_solution(planner_name: str, planning_time: float = 0.0,
                    graph: Optional[PlannerGraph] = None) -> "SolveOutcome":
        return SolveOutcome(
            planner_name=planner_name, solved=False, exact=False,
            status="no_solution", path=[],
            graph=graph if graph is not None else PlannerGraph(),
            planning_time=planning_time,
        )


@dataclass
class OrchestratorConfig:
    """编排层参数配置

    Attributes:
        bounds_low / bounds_high: 工作空间边界 (两轴相同)
        solve_time: 单次 solve 的时间预算 (秒)
        goal_threshold: 目标区域容差; None 使用求解库默认值
        validity_resolution: 状态有效性检测分辨率 (空间尺度比例); None 不设置
        benchmark_log: benchmark 报告默认文件名
        experiment_name: benchmark 实验名称
        seed: 求解库随机种子; 0 表示不设置
        display_progress: benchmark 时输出逐次进度
        quiet_backend: 降低求解库自身日志级别
    """
    bounds_low: float = -100.0
    bounds_high: float = 100.0
    solve_time: float = 1.0
    goal_threshold: Optional[float] = None
    validity_resolution: Optional[float] = None
    benchmark_log: str = "benchmark_results.json"
    experiment_name: str = "planbench"
    seed: int = 0
    display_progress: bool = True
    quiet_backend: bool = True

    def __post_init__(self) -> None:
        if self.solve_time <= 0:
            raise ValueError("solve_time must be positive")

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.bounds_low, self.bounds_high)

    # ── JSON 序列化 ──

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self, filepath: str | Path) -> str:
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        return str(filepath)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrchestratorConfig':
        """从字典创建（忽略未知字段，缺失字段用默认值）"""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_json(cls, filepath: str | Path) -> 'OrchestratorConfig':
        with open(filepath, 'r', encoding='utf-8') as f:
            return cls.from_dict(json.load(f))
