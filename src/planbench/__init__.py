"""
planbench - 2D 采样规划器求解与对比测试

选择障碍物环境、带可调参数的采样规划器以及始末点, 然后:
1. 单次求解, 把搜索图与路径交给展示层
2. 多规划器重复运行, 记录对比统计并写入报告

核心组成：
- ConfigurationValue / ConfigurationSet: 规划器可调参数
- PlannerDescriptor: 统一规划器接口 (名称 / 参数 / 求解器工厂 / 克隆)
- Registry: 环境与规划器注册表
- Orchestrator: solve() / benchmark() 编排
- SearchBackend / OmplBackend: 求解库边界 (OMPL)
"""

from .configuration import (
    ConfigurationSet,
    ConfigurationValue,
    goal_bias_configuration,
    range_configuration,
)
from .errors import (
    BackendUnavailableError,
    DuplicateNameError,
    InvalidConfigurationValueError,
    InvalidStateError,
    MissingSelectionError,
    PlanBenchError,
    UnknownConfigurationError,
)
from .models import Bounds, Obstacle, OrchestratorConfig, PlannerGraph, Point, SolveOutcome
from .environments import (
    Environment,
    MapEnvironment,
    ObstacleMap,
    load_environment,
)
from .validity import ValidityOracle
from .backend import ProblemInstance, SearchBackend
from .ompl_backend import OmplBackend
from .planners import (
    BUILTIN_PLANNERS,
    LazyPRMStarPlanner,
    OmplPlannerDescriptor,
    PlannerDescriptor,
    RRTConnectPlanner,
    RRTPlanner,
    RRTStarPlanner,
)
from .registry import Registry, create_default_registry
from .benchmark import (
    BenchmarkDriver,
    BenchmarkReport,
    BenchmarkRequest,
    PlannerRuns,
    RunRecord,
    disambiguate_names,
)
from .presenter import LoggingPresenter, Presenter
from .orchestrator import Orchestrator, PlanningTask

__version__ = "0.1.0"
__all__ = [
    # 参数
    'ConfigurationValue',
    'ConfigurationSet',
    'range_configuration',
    'goal_bias_configuration',
    # 异常
    'PlanBenchError',
    'UnknownConfigurationError',
    'DuplicateNameError',
    'InvalidConfigurationValueError',
    'MissingSelectionError',
    'InvalidStateError',
    'BackendUnavailableError',
    # 数据模型
    'Point',
    'Bounds',
    'Obstacle',
    'PlannerGraph',
    'SolveOutcome',
    'OrchestratorConfig',
    # 环境
    'Environment',
    'MapEnvironment',
    'ObstacleMap',
    'load_environment',
    'ValidityOracle',
    # 求解库
    'SearchBackend',
    'ProblemInstance',
    'OmplBackend',
    # 规划器
    'PlannerDescriptor',
    'OmplPlannerDescriptor',
    'RRTStarPlanner',
    'LazyPRMStarPlanner',
    'RRTPlanner',
    'RRTConnectPlanner',
    'BUILTIN_PLANNERS',
    # 注册与编排
    'Registry',
    'create_default_registry',
    'Orchestrator',
    'PlanningTask',
    'Presenter',
    'LoggingPresenter',
    # benchmark
    'BenchmarkDriver',
    'BenchmarkReport',
    'BenchmarkRequest',
    'PlannerRuns',
    'RunRecord',
    'disambiguate_names',
]
