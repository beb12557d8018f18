"""test/test_environments.py - ObstacleMap / 内置环境 / 有效性判定"""
import json

import numpy as np
import pytest

from planbench.environments import (
    BUILTIN_ENVIRONMENTS,
    MapEnvironment,
    ObstacleMap,
    load_environment,
    narrow_passage,
)
from planbench.models import Bounds, Point
from planbench.validity import ValidityOracle


class TestObstacleMap:

    def test_add_obstacle(self):
        m = ObstacleMap()
        obs = m.add_obstacle([0, 0], [2, 4], name="box")
        assert m.n_obstacles == 1
        assert m.get_obstacle("box") is obs
        np.testing.assert_allclose(obs.center, [1.0, 2.0])
        np.testing.assert_allclose(obs.size, [2.0, 4.0])

    def test_auto_naming(self):
        m = ObstacleMap()
        m.add_obstacle([0, 0], [1, 1])
        m.add_obstacle([2, 2], [3, 3])
        assert [o.name for o in m.get_obstacles()] == ["obstacle_0", "obstacle_1"]

    def test_get_missing_obstacle(self):
        assert ObstacleMap().get_obstacle("nope") is None

    def test_is_free_boundary_counts_as_collision(self):
        m = ObstacleMap()
        m.add_obstacle([-1, -1], [1, 1])
        assert not m.is_free((0, 0))
        assert not m.is_free((1, 0))
        assert m.is_free((1.001, 0))

    def test_inverted_corners_rejected(self):
        with pytest.raises(ValueError):
            ObstacleMap().add_obstacle([1, 1], [0, 0])

    def test_json_roundtrip(self, tmp_path):
        m = ObstacleMap()
        m.add_obstacle([-5, -5], [5, 5], name="a")
        m.add_obstacle([10, 0], [20, 3], name="b")
        path = tmp_path / "map.json"
        m.to_json(path)
        loaded = ObstacleMap.from_json(path)
        assert loaded.to_dict() == m.to_dict()


class TestBuiltins:

    @pytest.mark.parametrize("factory", BUILTIN_ENVIRONMENTS)
    def test_endpoints_are_valid(self, factory):
        env = factory()
        oracle = ValidityOracle(env.get_map(), Bounds())
        assert oracle.is_valid(env.get_start_point())
        assert oracle.is_valid(env.get_goal_point())

    def test_names_are_unique(self):
        names = [f().name for f in BUILTIN_ENVIRONMENTS]
        assert len(names) == len(set(names))

    def test_narrow_passage_gap(self):
        m = narrow_passage().get_map()
        assert m.is_free((0, 0))
        assert not m.is_free((0, 10))
        assert not m.is_free((0, -10))

    def test_each_call_builds_new_map(self):
        assert narrow_passage().get_map() is not narrow_passage().get_map()


class TestValidityOracle:

    def test_bounds_and_obstacles(self):
        m = ObstacleMap()
        m.add_obstacle([0, 0], [10, 10])
        oracle = ValidityOracle(m, Bounds(-20, 20))
        assert oracle((-5, -5))
        assert not oracle((5, 5))
        assert not oracle((25, 0))
        assert oracle.check_count == 3
        oracle.reset_counter()
        assert oracle.check_count == 0


class TestLoadEnvironment:

    def test_load(self, tmp_path):
        path = tmp_path / "corridor.json"
        path.write_text(json.dumps({
            "name": "Corridor",
            "start": [-10, 0], "goal": [10, 0],
            "obstacles": [{"min": [-1, 2], "max": [1, 50], "name": "top"}],
        }), encoding="utf-8")
        env = load_environment(path)
        assert isinstance(env, MapEnvironment)
        assert env.name == "Corridor"
        assert env.get_start_point() == Point(-10.0, 0.0)
        assert env.get_map().get_obstacle("top") is not None

    def test_name_defaults_to_stem(self, tmp_path):
        path = tmp_path / "plain.json"
        path.write_text('{"start": [0, 0], "goal": [1, 1]}', encoding="utf-8")
        env = load_environment(path)
        assert env.name == "plain"
        assert env.get_map().n_obstacles == 0

    def test_missing_goal(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"start": [0, 0]}', encoding="utf-8")
        with pytest.raises(ValueError, match="goal"):
            load_environment(path)

    def test_to_dict_loads_back(self, tmp_path, blocked_env):
        path = tmp_path / "env.json"
        path.write_text(json.dumps(blocked_env.to_dict()), encoding="utf-8")
        env = load_environment(path)
        assert env.name == "CentralBlock"
        assert env.get_map().to_dict() == blocked_env.get_map().to_dict()
