"""test/test_benchmark.py - 多规划器 benchmark 测试"""
import json

import pytest

from planbench.benchmark import (
    BenchmarkDriver,
    BenchmarkReport,
    BenchmarkRequest,
    PlannerRuns,
    RunRecord,
    disambiguate_names,
)
from planbench.errors import DuplicateNameError, MissingSelectionError

from fakes import FakePlanner


def _record(run, solved=True, time=0.1, length=10.0):
    return RunRecord(run=run, solved=solved, exact=solved,
                     status="exact" if solved else "unsolved", time=time,
                     memory_mb=0.0, num_vertices=5, num_edges=4,
                     path_length=length if solved else None)


class TestDisambiguate:

    def test_unique_names_untouched(self):
        assert disambiguate_names(["RRT", "RRTstar"]) == ["RRT", "RRTstar"]

    def test_repeats_get_counter(self):
        assert disambiguate_names(["RRTstar"] * 3) == [
            "RRTstar", "RRTstar2", "RRTstar3"]

    def test_interleaved(self):
        assert disambiguate_names(["A", "B", "A", "B", "A"]) == [
            "A", "B", "A2", "B2", "A3"]

    def test_suffix_collision_skips_taken_name(self):
        names = disambiguate_names(["A2", "A", "A"])
        assert names == ["A2", "A", "A3"]
        assert len(set(names)) == 3

    def test_empty(self):
        assert disambiguate_names([]) == []


class TestRequest:

    def test_defaults(self):
        req = BenchmarkRequest()
        assert req.max_time == 5.0
        assert req.max_mem == 4096.0
        assert req.run_count == 100
        assert req.display_progress

    @pytest.mark.parametrize("kwargs", [
        {"max_time": 0.0},
        {"max_mem": -1.0},
        {"run_count": -1},
    ])
    def test_rejects_invalid(self, kwargs):
        with pytest.raises(ValueError):
            BenchmarkRequest(**kwargs)


class TestPlannerRuns:

    def test_empty_summary(self):
        assert PlannerRuns("X").summary() == {"n_runs": 0}

    def test_summary_statistics(self):
        runs = PlannerRuns("X")
        runs.add(_record(0, time=0.1, length=10.0))
        runs.add(_record(1, time=0.3, length=14.0))
        runs.add(_record(2, solved=False, time=0.5))
        s = runs.summary()
        assert s["n_runs"] == 3
        assert s["n_solved"] == 2
        assert s["success_rate"] == pytest.approx(2 / 3)
        assert s["time_mean"] == pytest.approx(0.3)
        assert s["time_median"] == pytest.approx(0.3)
        assert s["time_max"] == pytest.approx(0.5)
        assert s["path_length_mean"] == pytest.approx(12.0)
        assert s["path_length_min"] == pytest.approx(10.0)

    def test_no_path_stats_without_solutions(self):
        runs = PlannerRuns("X")
        runs.add(_record(0, solved=False))
        assert "path_length_mean" not in runs.summary()


class TestReport:

    def test_duplicate_planner_rejected(self):
        report = BenchmarkReport("exp")
        report.add_planner("RRT")
        with pytest.raises(DuplicateNameError):
            report.add_planner("RRT")

    def test_save_and_load(self, tmp_path):
        report = BenchmarkReport("exp", environment="EmptyRoom",
                                 start=(-1.0, 0.0), goal=(1.0, 0.0),
                                 request=BenchmarkRequest(run_count=2))
        runs = report.add_planner("RRT")
        runs.add(_record(0))
        runs.add(_record(1, solved=False))
        path = report.save(tmp_path / "nested" / "out.json")
        assert path.exists()

        loaded = BenchmarkReport.load(path)
        assert loaded.experiment_name == "exp"
        assert loaded.environment == "EmptyRoom"
        assert loaded.goal == (1.0, 0.0)
        assert loaded.request.run_count == 2
        assert loaded.planner_names() == ["RRT"]
        assert loaded.planners["RRT"].n_runs == 2
        assert loaded.planners["RRT"].runs[1].path_length is None

    def test_saved_report_is_strict_json(self, tmp_path):
        report = BenchmarkReport("exp")
        runs = report.add_planner("RRT")
        runs.add(_record(0, solved=False))
        text = report.save(tmp_path / "out.json").read_text(encoding="utf-8")
        assert "NaN" not in text
        assert "Infinity" not in text
        data = json.loads(text, parse_constant=pytest.fail)
        assert data["planners"]["RRT"]["runs"][0]["path_length"] is None


class TestDriver:

    @pytest.fixture
    def instance(self, orchestrator, empty_env):
        return orchestrator.build_problem(
            empty_env, empty_env.get_start_point(), empty_env.get_goal_point())

    def test_add_planner_defaults_to_solver_name(self, fake_backend, instance):
        driver = BenchmarkDriver(fake_backend, instance)
        solver = FakePlanner("Alpha").get_planner(instance.space)
        assert driver.add_planner(solver) == "Alpha"
        with pytest.raises(DuplicateNameError):
            driver.add_planner(FakePlanner("Alpha").get_planner(instance.space))
        assert driver.planner_names == ["Alpha"]

    def test_runs_are_independent(self, fake_backend, instance):
        driver = BenchmarkDriver(fake_backend, instance, "exp", "EmptyRoom")
        solver = FakePlanner().get_planner(instance.space)
        driver.add_planner(solver)
        report = driver.benchmark(BenchmarkRequest(max_time=0.5, run_count=4,
                                                   display_progress=False))
        assert solver.clear_calls == 4
        assert solver.solve_budgets == [0.5] * 4
        runs = report.planners["Fake"].runs
        assert [r.run for r in runs] == [0, 1, 2, 3]
        assert all(r.status == "exact" for r in runs)
        assert report.metadata["backend"] == "fake"
        assert report.metadata["total_runs"] == 4

    def test_memory_growth_flagged(self, fake_backend, instance):
        class GrowingProcess:
            rss = 0

            def memory_info(self):
                GrowingProcess.rss += 8 * 1024 * 1024
                return type("mem", (), {"rss": GrowingProcess.rss})()

        driver = BenchmarkDriver(fake_backend, instance)
        driver._process = GrowingProcess()
        driver.add_planner(FakePlanner().get_planner(instance.space))
        report = driver.benchmark(BenchmarkRequest(max_mem=1.0, run_count=1))
        record = report.planners["Fake"].runs[0]
        assert record.status == "memory_limit"
        assert record.memory_mb == pytest.approx(8.0)
        assert record.solved


class TestOrchestratorBenchmark:

    def test_same_name_planners_disambiguated(self, orchestrator, empty_env,
                                              tmp_path):
        planners = [FakePlanner("RRTstar") for _ in range(3)]
        report = orchestrator.benchmark(planners, empty_env, run_count=2,
                                        max_time=0.1,
                                        log_path=tmp_path / "r.json")
        assert report.planner_names() == ["RRTstar", "RRTstar2", "RRTstar3"]
        data = json.loads((tmp_path / "r.json").read_text(encoding="utf-8"))
        assert list(data["planners"]) == ["RRTstar", "RRTstar2", "RRTstar3"]

    def test_descriptor_copies_with_different_configs(self, orchestrator,
                                                      empty_env):
        base = FakePlanner("RRTstar")
        tuned = base.copy()
        tuned.get_configurations().get("range").set(5.0)
        report = orchestrator.benchmark([base, tuned], empty_env, run_count=1)
        assert report.planner_names() == ["RRTstar", "RRTstar2"]

    def test_zero_runs_writes_empty_report(self, orchestrator, empty_env,
                                           tmp_path):
        out = tmp_path / "zero.json"
        report = orchestrator.benchmark([FakePlanner("A"), FakePlanner("B")],
                                        empty_env, run_count=0, log_path=out)
        assert report.planner_names() == ["A", "B"]
        assert all(r.summary() == {"n_runs": 0}
                   for r in report.planners.values())
        assert out.exists()

    def test_default_log_path(self, orchestrator, empty_env):
        orchestrator.benchmark([FakePlanner()], empty_env, run_count=1)
        with open(orchestrator.config.benchmark_log, encoding="utf-8") as f:
            assert json.load(f)["environment"] == "EmptyRoom"

    def test_shared_problem_instance(self, orchestrator, empty_env,
                                     fake_backend):
        orchestrator.benchmark([FakePlanner("A"), FakePlanner("B")],
                               empty_env, run_count=1)
        assert len(fake_backend.problems) == 1

    @pytest.mark.parametrize("planners", [None, [], [None]])
    def test_missing_planners(self, orchestrator, empty_env, fake_backend,
                              planners):
        with pytest.raises(MissingSelectionError):
            orchestrator.benchmark(planners, empty_env, run_count=1)
        assert fake_backend.spaces == []

    def test_missing_environment(self, orchestrator):
        with pytest.raises(MissingSelectionError):
            orchestrator.benchmark([FakePlanner()], None)

    def test_submit_benchmark(self, orchestrator, empty_env):
        task = orchestrator.submit_benchmark([FakePlanner()], empty_env,
                                             run_count=2)
        report = task.result(timeout=30)
        assert report.planners["Fake"].n_runs == 2
