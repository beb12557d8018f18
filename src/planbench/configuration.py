"""
planbench/configuration.py — 规划器可调参数

ConfigurationValue: 单个命名参数 (name / default 只读, value 可变)
ConfigurationSet:   一个规划器独占的有序参数集合, 按名称查找

Example:
    >>> configs = ConfigurationSet()
    >>> configs.add(range_configuration())
    >>> configs.get("range").set(2.5)
    >>> configs.to_dict()
    {'range': 2.5}
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .errors import (
    DuplicateNameError,
    InvalidConfigurationValueError,
    UnknownConfigurationError,
)

logger = logging.getLogger(__name__)

RANGE = "range"
GOAL_BIAS = "goal_bias"


class ConfigurationValue:
    """A single named, typed tunable parameter.

    ``name`` and ``default`` are fixed at construction; only ``value``
    changes.  ``kind`` is used to coerce new values (``float`` or ``int``),
    ``lower`` / ``upper`` are inclusive limits (None = unbounded).
    """

    __slots__ = ("_name", "_default", "_value", "kind", "lower", "upper",
                 "description")

    def __init__(self, name: str, default: float, *,
                 kind: type = float,
                 lower: Optional[float] = None,
                 upper: Optional[float] = None,
                 description: str = ""):
        if not name:
            raise ValueError("configuration name must not be empty")
        self._name = name
        self.kind = kind
        self.lower = lower
        self.upper = upper
        self.description = description
        self._default = self._coerce(default)
        self._value = self._default

    @property
    def name(self) -> str:
        return self._name

    @property
    def default(self) -> float:
        return self._default

    @property
    def value(self) -> float:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        self.set(new_value)

    def set(self, new_value: Any) -> None:
        """Validate and store ``new_value``."""
        self._value = self._coerce(new_value)

    def reset(self) -> None:
        self._value = self._default

    @property
    def is_default(self) -> bool:
        return self._value == self._default

    def _coerce(self, raw: Any) -> float:
        try:
            val = self.kind(raw)
        except (TypeError, ValueError) as exc:
            raise InvalidConfigurationValueError(
                f"{self._name}: cannot convert {raw!r} to "
                f"{self.kind.__name__}") from exc
        if self.lower is not None and val < self.lower:
            raise InvalidConfigurationValueError(
                f"{self._name}={val} is below lower limit {self.lower}")
        if self.upper is not None and val > self.upper:
            raise InvalidConfigurationValueError(
                f"{self._name}={val} is above upper limit {self.upper}")
        return val

    def copy(self) -> "ConfigurationValue":
        dup = ConfigurationValue(self._name, self._default, kind=self.kind,
                                 lower=self.lower, upper=self.upper,
                                 description=self.description)
        dup._value = self._value
        return dup

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigurationValue):
            return NotImplemented
        return (self._name == other._name
                and self._value == other._value
                and self._default == other._default)

    def __repr__(self) -> str:
        return (f"ConfigurationValue({self._name!r}, value={self._value!r}, "
                f"default={self._default!r})")


def range_configuration(default: float = 0.0) -> ConfigurationValue:
    """Maximum motion length added to the tree / roadmap.

    0.0 means the algorithm picks its own range from the space extent.
    """
    return ConfigurationValue(
        RANGE, default, lower=0.0,
        description="max motion length (0 = let the planner decide)")


def goal_bias_configuration(default: float = 0.05) -> ConfigurationValue:
    """Probability of sampling the goal state directly."""
    return ConfigurationValue(
        GOAL_BIAS, default, lower=0.0, upper=1.0,
        description="probability of sampling the goal")


class ConfigurationSet:
    """有序参数集合, 名称唯一, 由单个 PlannerDescriptor 独占."""

    def __init__(self) -> None:
        self._values: Dict[str, ConfigurationValue] = {}

    def add(self, value: ConfigurationValue) -> ConfigurationValue:
        """注册新参数; 重名时抛 DuplicateNameError."""
        if value.name in self._values:
            raise DuplicateNameError(
                f"configuration '{value.name}' already registered")
        self._values[value.name] = value
        return value

    def get(self, name: str) -> ConfigurationValue:
        """返回集合内的参数对象 (可原地修改); 不存在时抛 UnknownConfigurationError."""
        try:
            return self._values[name]
        except KeyError:
            raise UnknownConfigurationError(name) from None

    def names(self) -> List[str]:
        return list(self._values)

    def copy(self) -> "ConfigurationSet":
        dup = ConfigurationSet()
        for value in self._values.values():
            dup.add(value.copy())
        return dup

    def to_dict(self) -> Dict[str, float]:
        return {name: v.value for name, v in self._values.items()}

    def update(self, values: Mapping[str, Any]) -> None:
        """Apply ``{name: value}``; every name must already be declared.

        The whole mapping is validated before anything is written, so a bad
        entry leaves the set unchanged.
        """
        staged = []
        for name, raw in values.items():
            current = self.get(name)
            probe = current.copy()
            probe.set(raw)
            staged.append((current, probe.value))
        for current, val in staged:
            current.set(val)
        logger.debug("configuration updated: %s", self.to_dict())

    def reset(self) -> None:
        for value in self._values.values():
            value.reset()

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[ConfigurationValue]:
        return iter(list(self._values.values()))

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ConfigurationSet({self.to_dict()!r})"
