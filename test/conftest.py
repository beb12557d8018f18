"""
conftest.py — pytest fixtures shared across the test suite.

Provides fake backend / presenter, built-in environments and an
Orchestrator wired to them, so individual test modules stay short.
"""
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for path in (SRC, Path(__file__).resolve().parent):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

os.environ.setdefault("MPLBACKEND", "Agg")

from planbench import ompl_backend  # noqa: E402
from planbench.environments import central_block, empty_room  # noqa: E402
from planbench.models import OrchestratorConfig  # noqa: E402
from planbench.orchestrator import Orchestrator  # noqa: E402

from fakes import FakeBackend, FakeSolver, RecordingPresenter  # noqa: E402


# =========================================================================
# Environment fixtures
# =========================================================================

@pytest.fixture
def empty_env():
    """EmptyRoom: no obstacles, start (-50,-50), goal (50,50)."""
    return empty_room()


@pytest.fixture
def blocked_env():
    """CentralBlock: the straight line start→goal crosses the block."""
    return central_block()


# =========================================================================
# Backend / orchestrator fixtures
# =========================================================================

@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def orchestrator(fake_backend, presenter, tmp_path):
    config = OrchestratorConfig(benchmark_log=str(tmp_path / "bench.json"))
    orch = Orchestrator(backend=fake_backend, presenter=presenter,
                        config=config)
    yield orch
    orch.close()


@pytest.fixture
def fake_ompl_planners(monkeypatch):
    """Make OmplPlannerDescriptor variants build FakeSolvers."""
    monkeypatch.setattr(
        ompl_backend, "load_planner_class",
        lambda algorithm: (lambda si: FakeSolver(si, name=algorithm)))
