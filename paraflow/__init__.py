"""paraflow: 콜백 스타일 비동기 연산을 serial / parallel / map으로 조합하는 라이브러리"""

from paraflow.core.flow import serial, parallel, map
from paraflow.core.aggregator import ResultAggregator
from paraflow.core.node import Node, Serial, Parallel, Map, ExecutionError
from paraflow.core.module_adapter import ModuleAdapter
from paraflow.core.executor import Executor, ExecutionPolicy, ExecutionResult
from paraflow.config import Settings, get_settings
from paraflow.logging import configure_logging

__version__ = "0.1.0"

__all__ = [
    "serial",
    "parallel",
    "map",
    "ResultAggregator",
    "Node",
    "Serial",
    "Parallel",
    "Map",
    "ExecutionError",
    "ModuleAdapter",
    "Executor",
    "ExecutionPolicy",
    "ExecutionResult",
    "Settings",
    "get_settings",
    "configure_logging",
]
