"""
planbench/cli.py — 命令行入口

用法:
    # 列出已注册的环境与规划器
    planbench list

    # 单次求解, 可选保存图片
    planbench solve --env EmptyRoom --planner RRTstar --set range=5 --plot out.png

    # 多规划器 benchmark (同名规划器自动加后缀)
    planbench benchmark --env TwoWalls --planner RRTstar --planner RRTstar \\
        --planner LazyPRMstar --max-time 1 --runs 20 --output results.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from .environments import load_environment
from .errors import PlanBenchError
from .models import OrchestratorConfig
from .orchestrator import Orchestrator
from .presenter import LoggingPresenter
from .registry import Registry, create_default_registry

logger = logging.getLogger(__name__)

LOG_FMT = "[%(asctime)s] %(levelname)-7s %(name)s: %(message)s"


def _parse_assignment(item: str) -> Tuple[str, str]:
    key, sep, value = item.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{item}'")
    return key.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="planbench",
        description="2D sampling-based planner solve / benchmark tool")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="DEBUG 级别日志")
    parser.add_argument("--config", default=None,
                        help="OrchestratorConfig JSON 文件")
    parser.add_argument("--env-file", action="append", default=[],
                        help="额外加载的环境 JSON (可重复)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="列出环境与规划器")

    solve = sub.add_parser("solve", help="单次求解")
    solve.add_argument("--env", required=True)
    solve.add_argument("--planner", required=True)
    solve.add_argument("--start", nargs=2, type=float, default=None,
                       metavar=("X", "Y"))
    solve.add_argument("--goal", nargs=2, type=float, default=None,
                       metavar=("X", "Y"))
    solve.add_argument("--time", type=float, default=None,
                       help="时间预算 (秒), 默认 config.solve_time")
    solve.add_argument("--set", action="append", default=[],
                       type=_parse_assignment,
                       metavar="NAME=VALUE", help="规划器参数")
    solve.add_argument("--plot", default=None, help="保存图片路径")

    bench = sub.add_parser("benchmark", help="多规划器 benchmark")
    bench.add_argument("--env", required=True)
    bench.add_argument("--planner", action="append", required=True,
                       help="规划器名称 (可重复)")
    bench.add_argument("--start", nargs=2, type=float, default=None,
                       metavar=("X", "Y"))
    bench.add_argument("--goal", nargs=2, type=float, default=None,
                       metavar=("X", "Y"))
    bench.add_argument("--max-time", type=float, default=5.0)
    bench.add_argument("--max-mem", type=float, default=4096.0)
    bench.add_argument("--runs", type=int, default=10)
    bench.add_argument("--output", default=None,
                       help="报告路径, 默认 config.benchmark_log")
    return parser


def _load_registry(env_files: List[str]) -> Registry:
    registry = create_default_registry()
    for path in env_files:
        registry.add_environment(load_environment(path))
    return registry


def _lookup(registry: Registry, env_name: str, planner_names: Sequence[str]):
    env = registry.get_environment(env_name)
    if env is None:
        raise SystemExit(f"unknown environment '{env_name}' "
                         f"(available: {', '.join(sorted(registry.environment_names()))})")
    planners = []
    for name in planner_names:
        desc = registry.get_planner(name)
        if desc is None:
            raise SystemExit(f"unknown planner '{name}' "
                             f"(available: {', '.join(sorted(registry.planner_names()))})")
        # 每次选择使用独立副本, 参数互不影响
        planners.append(desc.copy())
    return env, planners


def cmd_list(registry: Registry) -> int:
    print("Environments:")
    for name in sorted(registry.environment_names()):
        env = registry.get_environment(name)
        print(f"  {name:16s} start={tuple(env.get_start_point())} "
              f"goal={tuple(env.get_goal_point())} "
              f"obstacles={env.get_map().n_obstacles}")
    print("Planners:")
    for name in sorted(registry.planner_names()):
        configs = registry.get_planner(name).get_configurations().to_dict()
        print(f"  {name:16s} {configs}")
    return 0


def cmd_solve(args: argparse.Namespace, registry: Registry,
              config: OrchestratorConfig) -> int:
    env, (planner,) = _lookup(registry, args.env, [args.planner])
    planner.get_configurations().update(dict(args.set))

    if args.plot:
        from .viz import MatplotlibPresenter
        presenter = MatplotlibPresenter(
            limits=(config.bounds_low, config.bounds_high),
            title=f"{planner.name} @ {env.name}")
    else:
        presenter = LoggingPresenter()

    orch = Orchestrator(presenter=presenter, config=config)
    orch.show_environment(env, args.start, args.goal)
    outcome = orch.solve(planner, env, args.start, args.goal,
                         time_budget=args.time)
    if args.plot:
        presenter.save(args.plot)
        presenter.close()
    print(f"{outcome.planner_name}: {outcome.status} "
          f"({outcome.planning_time:.3f}s, {outcome.graph.num_vertices} vertices, "
          f"path length {outcome.path_length:.3f})")
    return 0 if outcome.solved else 2


def cmd_benchmark(args: argparse.Namespace, registry: Registry,
                  config: OrchestratorConfig) -> int:
    env, planners = _lookup(registry, args.env, args.planner)
    with Orchestrator(config=config) as orch:
        report = orch.benchmark(planners, env, args.start, args.goal,
                                max_time=args.max_time, max_mem=args.max_mem,
                                run_count=args.runs, log_path=args.output)
    for name, runs in report.planners.items():
        s = runs.summary()
        if s["n_runs"] == 0:
            print(f"  {name:16s} (no runs)")
            continue
        print(f"  {name:16s} success {s['success_rate'] * 100:5.1f}%  "
              f"time {s['time_mean']:.3f}±{s['time_std']:.3f}s")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format=LOG_FMT, datefmt="%H:%M:%S")

    try:
        config = (OrchestratorConfig.from_json(args.config)
                  if args.config else OrchestratorConfig())
        registry = _load_registry(args.env_file)
        if args.command == "list":
            return cmd_list(registry)
        if args.command == "solve":
            return cmd_solve(args, registry, config)
        return cmd_benchmark(args, registry, config)
    except (PlanBenchError, OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
