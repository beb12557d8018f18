"""
planbench/benchmark.py — 多规划器 benchmark 驱动

BenchmarkRequest: maxTime / maxMem / runCount / displayProgress
BenchmarkDriver:  对每个求解器独立运行 run_count 次, 记录时间 / 内存 / 成功率
BenchmarkReport:  以 (去重后的) 规划器名称为键的报告, 可保存为 JSON

用法:
    driver = BenchmarkDriver(backend, instance, "my experiment")
    driver.add_planner(solver_a, "RRTstar")
    driver.add_planner(solver_b, "RRTstar2")
    report = driver.benchmark(BenchmarkRequest(max_time=5.0, max_mem=100.0,
                                               run_count=50))
    report.save("benchmark_results.json")
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np
import psutil

from .backend import ProblemInstance, SearchBackend
from .errors import DuplicateNameError
from .models import path_length

logger = logging.getLogger(__name__)


def disambiguate_names(names: Iterable[str]) -> List[str]:
    """同名规划器追加出现次数后缀: RRTstar, RRTstar2, RRTstar3 ...

    第一次出现保留原名; 若带后缀的名称已被占用, 继续递增计数.
    """
    counts: Dict[str, int] = {}
    used = set()
    result = []
    for name in names:
        count = counts.get(name, 0) + 1
        candidate = name if count == 1 else f"{name}{count}"
        while candidate in used:
            count += 1
            candidate = f"{name}{count}"
        counts[name] = count
        used.add(candidate)
        result.append(candidate)
    return result


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class BenchmarkRequest:
    """Per-run limits.

    Attributes:
        max_time: time budget handed to ``solve`` (seconds)
        max_mem: memory growth above which a run is flagged (MB)
        run_count: independent runs per planner
        display_progress: log every run at INFO instead of DEBUG
    """
    max_time: float = 5.0
    max_mem: float = 4096.0
    run_count: int = 100
    display_progress: bool = True

    def __post_init__(self) -> None:
        if self.max_time <= 0:
            raise ValueError("max_time must be positive")
        if self.max_mem <= 0:
            raise ValueError("max_mem must be positive")
        if self.run_count < 0:
            raise ValueError("run_count must not be negative")


@dataclass
class RunRecord:
    """单次运行结果."""
    run: int
    solved: bool
    exact: bool
    status: str
    time: float
    memory_mb: float
    num_vertices: int
    num_edges: int
    path_length: Optional[float]  # None: 未求解

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PlannerRuns:
    """一个规划器 (报告键) 的全部运行记录."""
    name: str
    runs: List[RunRecord] = field(default_factory=list)

    def add(self, record: RunRecord) -> None:
        self.runs.append(record)

    @property
    def n_runs(self) -> int:
        return len(self.runs)

    def summary(self) -> Dict[str, Any]:
        """聚合统计; 无运行记录时只返回 n_runs=0."""
        if not self.runs:
            return {"n_runs": 0}
        times = np.array([r.time for r in self.runs])
        n_solved = sum(1 for r in self.runs if r.solved)
        stats: Dict[str, Any] = {
            "n_runs": len(self.runs),
            "n_solved": n_solved,
            "n_exact": sum(1 for r in self.runs if r.exact),
            "success_rate": n_solved / len(self.runs),
            "time_mean": float(np.mean(times)),
            "time_median": float(np.median(times)),
            "time_std": float(np.std(times)),
            "time_min": float(np.min(times)),
            "time_max": float(np.max(times)),
            "memory_mean_mb": float(np.mean([r.memory_mb for r in self.runs])),
            "vertices_mean": float(np.mean([r.num_vertices for r in self.runs])),
        }
        lengths = [r.path_length for r in self.runs
                   if r.solved and r.path_length is not None]
        if lengths:
            stats["path_length_mean"] = float(np.mean(lengths))
            stats["path_length_min"] = float(np.min(lengths))
        return stats

    def to_dict(self) -> dict:
        return {
            "runs": [r.to_dict() for r in self.runs],
            "summary": self.summary(),
        }


@dataclass
class BenchmarkReport:
    """以规划器名称为键的 benchmark 报告 (键顺序 = 提交顺序)."""
    experiment_name: str
    environment: str = ""
    start: Tuple[float, float] = (0.0, 0.0)
    goal: Tuple[float, float] = (0.0, 0.0)
    request: Optional[BenchmarkRequest] = None
    planners: Dict[str, PlannerRuns] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_planner(self, name: str) -> PlannerRuns:
        if name in self.planners:
            raise DuplicateNameError(f"planner '{name}' already in report")
        runs = PlannerRuns(name)
        self.planners[name] = runs
        return runs

    def planner_names(self) -> List[str]:
        return list(self.planners)

    def to_dict(self) -> dict:
        return {
            "experiment": self.experiment_name,
            "environment": self.environment,
            "start": list(self.start),
            "goal": list(self.goal),
            "request": asdict(self.request) if self.request else None,
            "metadata": self.metadata,
            "planners": {name: runs.to_dict()
                         for name, runs in self.planners.items()},
        }

    def save(self, path: str | Path) -> Path:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False,
                      default=_json_default)
        logger.info("Saved benchmark (%d planners) → %s",
                    len(self.planners), p)
        return p

    @staticmethod
    def load(path: str | Path) -> "BenchmarkReport":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        req = data.get("request")
        report = BenchmarkReport(
            experiment_name=data["experiment"],
            environment=data.get("environment", ""),
            start=tuple(data.get("start", (0.0, 0.0))),
            goal=tuple(data.get("goal", (0.0, 0.0))),
            request=BenchmarkRequest(**req) if req else None,
            metadata=data.get("metadata", {}),
        )
        for name, entry in data.get("planners", {}).items():
            runs = report.add_planner(name)
            for r in entry.get("runs", []):
                runs.add(RunRecord(**r))
        return report


# ═══════════════════════════════════════════════════════════════════════════
# BenchmarkDriver
# ═══════════════════════════════════════════════════════════════════════════

class BenchmarkDriver:
    """Runs every added solver ``run_count`` times on one shared problem."""

    def __init__(self, backend: SearchBackend, instance: ProblemInstance,
                 experiment_name: str = "planbench",
                 environment_name: str = ""):
        self.backend = backend
        self.instance = instance
        self.experiment_name = experiment_name
        self.environment_name = environment_name
        self._planners: List[Tuple[str, Any]] = []
        self._process = psutil.Process()

    def add_planner(self, solver: Any, name: Optional[str] = None) -> str:
        """添加求解器; name 缺省时使用 ``solver.getName()``."""
        if name is None:
            name = solver.getName()
        if any(existing == name for existing, _ in self._planners):
            raise DuplicateNameError(
                f"planner '{name}' already added to this benchmark")
        self._planners.append((name, solver))
        return name

    @property
    def planner_names(self) -> List[str]:
        return [name for name, _ in self._planners]

    def benchmark(self, request: BenchmarkRequest) -> BenchmarkReport:
        inst = self.instance
        report = BenchmarkReport(
            experiment_name=self.experiment_name,
            environment=self.environment_name,
            start=(inst.start.x, inst.start.y),
            goal=(inst.goal.x, inst.goal.y),
            request=request,
        )
        total = len(self._planners) * request.run_count
        done = 0
        t_start = time.perf_counter()
        progress_level = logging.INFO if request.display_progress else logging.DEBUG

        for name, solver in self._planners:
            runs = report.add_planner(name)
            solver.setProblemDefinition(inst.problem)
            for k in range(request.run_count):
                record = self._run_once(solver, k, request)
                runs.add(record)
                done += 1
                logger.log(progress_level,
                           "[%d/%d] %s run %d → %s (%.3fs)",
                           done, total, name, k,
                           "OK" if record.solved else "FAIL", record.time)

        report.metadata = {
            "backend": self.backend.name,
            "total_runs": total,
            "total_time": time.perf_counter() - t_start,
            "timestamp": time.strftime("%Y%m%d_%H%M%S"),
        }
        return report

    def _run_once(self, solver: Any, run: int,
                  request: BenchmarkRequest) -> RunRecord:
        inst = self.instance
        self.backend.clear_problem(inst.problem)
        solver.clear()
        if not solver.isSetup():
            solver.setup()

        rss0 = self._process.memory_info().rss
        t0 = time.perf_counter()
        status = solver.solve(request.max_time)
        dt = time.perf_counter() - t0
        memory_mb = max(0, self._process.memory_info().rss - rss0) / (1024.0 * 1024.0)

        solved = bool(status)
        exact = solved and self.backend.has_exact_solution(inst.problem)
        graph = self.backend.planner_graph(solver, inst.space)
        length = (path_length(self.backend.solution_path(inst.problem))
                  if solved else None)

        if memory_mb > request.max_mem:
            label = "memory_limit"
            logger.warning("run %d used %.1f MB (limit %.1f MB)",
                           run, memory_mb, request.max_mem)
        elif exact:
            label = "exact"
        elif solved:
            label = "approximate"
        else:
            label = "unsolved"

        return RunRecord(
            run=run, solved=solved, exact=exact, status=label, time=dt,
            memory_mb=memory_mb, num_vertices=graph.num_vertices,
            num_edges=graph.num_edges, path_length=length,
        )


def _json_default(obj):
    """JSON serialization fallback."""
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
