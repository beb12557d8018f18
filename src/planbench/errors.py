"""
planbench/errors.py — 异常类型

所有异常同时继承 ``PlanBenchError`` 与对应的内置异常, 调用方可以按
任一类型捕获.  "无解" 不是异常, 见 ``SolveOutcome.solved``.
"""

from __future__ import annotations


class PlanBenchError(Exception):
    """Base class for all planbench errors."""


class UnknownConfigurationError(PlanBenchError, KeyError):
    """A parameter name that the planner does not declare was requested."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"unknown configuration '{self.name}'"


class DuplicateNameError(PlanBenchError, ValueError):
    """A configuration value with the same name is already registered."""


class InvalidConfigurationValueError(PlanBenchError, ValueError):
    """A parameter value is outside its declared range or has the wrong type."""


class MissingSelectionError(PlanBenchError, ValueError):
    """solve / benchmark was called without an environment or planner."""


class InvalidStateError(PlanBenchError, ValueError):
    """Start or goal point is out of bounds or in collision."""


class BackendUnavailableError(PlanBenchError, ImportError):
    """The solver library required by a backend cannot be imported."""
