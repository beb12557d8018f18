"""
planbench/orchestrator.py — 单次求解与多规划器 benchmark 编排

Orchestrator 为每次调用构建独立的搜索空间 / 有效性判定 / 问题实例,
通过 PlannerDescriptor 的工厂获得求解器并调用:

- solve():     单个规划器, 固定时间预算, 结果交给展示层
- benchmark(): 多个规划器共享同一问题实例, 同名自动加后缀, 报告写入文件

两者均在调用线程上同步执行; submit_solve / submit_benchmark 把同样的
调用放到后台工作线程, 由宿主在 commit() 时 (自己的线程上) 处理结果.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from .backend import ProblemInstance, SearchBackend
from .benchmark import (
    BenchmarkDriver,
    BenchmarkReport,
    BenchmarkRequest,
    disambiguate_names,
)
from .environments import Environment
from .errors import InvalidStateError, MissingSelectionError
from .models import OrchestratorConfig, Point, SolveOutcome
from .ompl_backend import OmplBackend
from .planners import PlannerDescriptor
from .presenter import GOAL_COLOR, START_COLOR, LoggingPresenter, Presenter
from .validity import ValidityOracle

logger = logging.getLogger(__name__)


class PlanningTask:
    """Handle for a solve / benchmark running on the worker thread.

    The host calls ``commit()`` from its own thread once the task is done;
    a cancelled task never commits.  Cancelling does not pre-empt a solver
    that is already running, it only discards its result.
    """

    def __init__(self, future: Future,
                 on_commit: Optional[Callable[[Any], None]] = None):
        self._future = future
        self._on_commit = on_commit
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()
        self._future.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> Any:
        return self._future.result(timeout)

    def commit(self, callback: Optional[Callable[[Any], None]] = None) -> bool:
        """Hand the result to ``callback`` unless the task was cancelled."""
        if self.cancelled:
            logger.debug("task cancelled, result discarded")
            return False
        result = self._future.result()
        callback = callback or self._on_commit
        if callback is not None:
            callback(result)
        return True


def _require(**selection: Any) -> None:
    missing = [name for name, value in selection.items() if value is None]
    if missing:
        raise MissingSelectionError(f"no {', '.join(missing)} selected")


class Orchestrator:
    """Wires planner, environment-derived validity oracle and problem together.

    Args:
        backend: solver library adapter (default: OmplBackend from ``config``)
        presenter: presentation layer (default: LoggingPresenter)
        config: OrchestratorConfig
    """

    def __init__(self, backend: Optional[SearchBackend] = None,
                 presenter: Optional[Presenter] = None,
                 config: Optional[OrchestratorConfig] = None):
        self.config = config or OrchestratorConfig()
        if backend is None:
            backend = OmplBackend(
                goal_threshold=self.config.goal_threshold,
                validity_resolution=self.config.validity_resolution,
                quiet=self.config.quiet_backend,
            )
        self.backend = backend
        self.presenter = presenter or LoggingPresenter()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._seeded = False
        self._lock = threading.Lock()

    # ── problem construction ─────────────────────────────────────

    def build_problem(self, environment: Environment,
                      start: Sequence[float],
                      goal: Sequence[float]) -> ProblemInstance:
        """有界 2D 搜索空间 + 绑定地图的有效性判定 + 始末状态.

        始末点越界或碰撞时立即抛 InvalidStateError, 不做裁剪.
        """
        bounds = self.config.bounds
        start, goal = Point.of(start), Point.of(goal)
        obstacle_map = environment.get_map()

        for label, point in (("start", start), ("goal", goal)):
            if not bounds.contains(point):
                raise InvalidStateError(
                    f"{label} point ({point.x:g}, {point.y:g}) is outside "
                    f"bounds [{bounds.low:g}, {bounds.high:g}]")
            if not obstacle_map.is_free(point):
                raise InvalidStateError(
                    f"{label} point ({point.x:g}, {point.y:g}) is in "
                    f"collision in '{environment.name}'")

        self._ensure_seeded()
        oracle = ValidityOracle(obstacle_map, bounds)
        space = self.backend.build_space(bounds, oracle)
        problem = self.backend.build_problem(space, start, goal)
        return ProblemInstance(bounds, oracle, start, goal, space, problem)

    def _ensure_seeded(self) -> None:
        with self._lock:
            if self.config.seed and not self._seeded:
                self.backend.seed(self.config.seed)
                self._seeded = True

    # ── single solve ─────────────────────────────────────────────

    def solve(self, planner: Optional[PlannerDescriptor],
              environment: Optional[Environment],
              start: Optional[Sequence[float]] = None,
              goal: Optional[Sequence[float]] = None,
              time_budget: Optional[float] = None,
              present: bool = True) -> SolveOutcome:
        """运行一次规划.

        Args:
            planner: 规划器描述
            environment: 环境
            start / goal: 始末点; None 时使用环境默认值
            time_budget: 时间预算 (秒); None 时使用 ``config.solve_time``
            present: 是否把结果交给展示层

        Returns:
            SolveOutcome; 无解时 ``solved == False``
        """
        _require(planner=planner, environment=environment)
        start = environment.get_start_point() if start is None else start
        goal = environment.get_goal_point() if goal is None else goal
        budget = self.config.solve_time if time_budget is None else time_budget

        inst = self.build_problem(environment, start, goal)
        solver = planner.get_planner(inst.space)
        solver.setProblemDefinition(inst.problem)
        solver.setup()

        logger.info("Solving '%s' with %s (budget %.2fs)",
                    environment.name, planner.name, budget)
        t0 = time.perf_counter()
        status = solver.solve(budget)
        dt = time.perf_counter() - t0

        graph = self.backend.planner_graph(solver, inst.space)
        if status:
            exact = self.backend.has_exact_solution(inst.problem)
            outcome = SolveOutcome(
                planner_name=planner.name,
                solved=True,
                exact=exact,
                status="exact" if exact else "approximate",
                path=self.backend.solution_path(inst.problem),
                graph=graph,
                planning_time=dt,
            )
            logger.info("%s solved in %.3fs: %d vertices, %d edges, "
                        "path length %.3f", planner.name, dt,
                        graph.num_vertices, graph.num_edges,
                        outcome.path_length)
        else:
            outcome = SolveOutcome.no_solution(planner.name, dt, graph)
            logger.info("%s found no solution within %.2fs",
                        planner.name, budget)

        if present:
            self.present(outcome)
        return outcome

    def present(self, outcome: SolveOutcome) -> None:
        if outcome.solved:
            self.presenter.draw_search_graph(outcome.graph)
            self.presenter.draw_geometric_path(outcome.path)
        else:
            self.presenter.report_no_solution(outcome.planner_name)
        self.presenter.refresh()

    def show_environment(self, environment: Optional[Environment],
                         start: Optional[Sequence[float]] = None,
                         goal: Optional[Sequence[float]] = None) -> None:
        """绘制地图与始末点 (起点绿色, 终点黑色)."""
        _require(environment=environment)
        start = Point.of(environment.get_start_point() if start is None else start)
        goal = Point.of(environment.get_goal_point() if goal is None else goal)
        self.presenter.draw_map_2d(environment.get_map())
        self.presenter.draw_point(start, START_COLOR)
        self.presenter.draw_point(goal, GOAL_COLOR)
        self.presenter.refresh()

    # ── benchmark ────────────────────────────────────────────────

    def benchmark(self, planners: Optional[Sequence[PlannerDescriptor]],
                  environment: Optional[Environment],
                  start: Optional[Sequence[float]] = None,
                  goal: Optional[Sequence[float]] = None,
                  max_time: float = 5.0,
                  max_mem: float = 4096.0,
                  run_count: int = 100,
                  log_path: Optional[str | Path] = None) -> BenchmarkReport:
        """多规划器 benchmark, 报告写入 ``log_path`` (默认 config.benchmark_log).

        所有规划器共享同一个问题实例, 保证结果可比.
        """
        _require(environment=environment)
        planners = list(planners or [])
        if not planners:
            raise MissingSelectionError("no planner selected")
        if any(p is None for p in planners):
            raise MissingSelectionError("planner list contains an empty selection")

        request = BenchmarkRequest(
            max_time=max_time, max_mem=max_mem, run_count=run_count,
            display_progress=self.config.display_progress,
        )
        start = environment.get_start_point() if start is None else start
        goal = environment.get_goal_point() if goal is None else goal
        inst = self.build_problem(environment, start, goal)

        driver = BenchmarkDriver(self.backend, inst,
                                 experiment_name=self.config.experiment_name,
                                 environment_name=environment.name)
        solvers = [p.get_planner(inst.space) for p in planners]
        names = disambiguate_names(s.getName() for s in solvers)
        for solver, name in zip(solvers, names):
            solver.setName(name)
            driver.add_planner(solver, name)

        logger.info("Benchmark '%s': %s × %d runs (maxTime=%.2fs, maxMem=%.0fMB)",
                    environment.name, ", ".join(names), run_count,
                    max_time, max_mem)
        report = driver.benchmark(request)
        report.save(log_path if log_path is not None
                    else self.config.benchmark_log)
        return report

    # ── background execution ─────────────────────────────────────

    def _worker(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="planbench")
            return self._executor

    def submit_solve(self, *args: Any, **kwargs: Any) -> PlanningTask:
        """``solve`` on the worker thread; presentation happens on commit."""
        kwargs["present"] = False
        future = self._worker().submit(self.solve, *args, **kwargs)
        return PlanningTask(future, on_commit=self.present)

    def submit_benchmark(self, *args: Any, **kwargs: Any) -> PlanningTask:
        future = self._worker().submit(self.benchmark, *args, **kwargs)
        return PlanningTask(future)

    def close(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self) -> "Orchestrator":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
