"""test/test_models.py - 数据模型与 OrchestratorConfig"""
import math

import pytest

from planbench.models import (
    Bounds,
    OrchestratorConfig,
    PlannerGraph,
    Point,
    SolveOutcome,
    path_length,
)


class TestPoint:

    def test_of(self):
        assert Point.of([1, 2]) == Point(1.0, 2.0)
        p = Point(3.0, 4.0)
        assert Point.of(p) is p
        with pytest.raises(ValueError):
            Point.of([1, 2, 3])

    def test_distance(self):
        assert Point(0, 0).distance_to((3, 4)) == pytest.approx(5.0)


class TestBounds:

    def test_contains_inclusive(self):
        b = Bounds()
        assert b.contains((100, -100))
        assert not b.contains((100.01, 0))

    def test_invalid(self):
        with pytest.raises(ValueError):
            Bounds(5, 5)


class TestGraphAndPath:

    def test_segments(self):
        g = PlannerGraph([Point(0, 0), Point(1, 0), Point(1, 1)],
                         [(0, 1), (1, 2)])
        assert g.num_vertices == 3
        assert g.num_edges == 2
        assert g.segments()[1] == (Point(1, 0), Point(1, 1))

    def test_path_length(self):
        assert path_length([]) == 0.0
        assert path_length([(0, 0)]) == 0.0
        assert path_length([(0, 0), (3, 4), (3, 10)]) == pytest.approx(11.0)


class TestSolveOutcome:

    def test_no_solution(self):
        out = SolveOutcome.no_solution("RRT", 1.5)
        assert not out.solved
        assert out.path_length == math.inf
        assert out.to_dict()["status"] == "no_solution"
        assert out.to_dict()["num_vertices"] == 0
        assert out.to_dict()["path_length"] is None

    def test_to_dict(self):
        out = SolveOutcome("RRT", True, exact=True, status="exact",
                           path=[Point(0, 0), Point(0, 2)])
        d = out.to_dict()
        assert d["path_length"] == pytest.approx(2.0)
        assert d["path"] == [[0, 0], [0, 2]]


class TestOrchestratorConfig:

    def test_defaults(self):
        cfg = OrchestratorConfig()
        assert cfg.bounds == Bounds(-100.0, 100.0)
        assert cfg.solve_time == 1.0
        assert cfg.benchmark_log == "benchmark_results.json"
        assert cfg.goal_threshold is None

    def test_invalid_solve_time(self):
        with pytest.raises(ValueError):
            OrchestratorConfig(solve_time=0)

    def test_json_roundtrip(self, tmp_path):
        cfg = OrchestratorConfig(solve_time=2.0, seed=3, goal_threshold=0.5)
        path = cfg.to_json(tmp_path / "cfg" / "orch.json")
        assert OrchestratorConfig.from_json(path) == cfg

    def test_from_dict_ignores_unknown(self):
        cfg = OrchestratorConfig.from_dict({"seed": 9, "colour": "red"})
        assert cfg.seed == 9
        assert cfg.solve_time == 1.0
