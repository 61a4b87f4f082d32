"""Core components for paraflow"""

from paraflow.core.aggregator import ResultAggregator
from paraflow.core.flow import serial, parallel, map
from paraflow.core.node import Node, Serial, Parallel, Map, ExecutionError
from paraflow.core.module_adapter import ModuleAdapter
from paraflow.core.executor import Executor, ExecutionPolicy, ExecutionResult

__all__ = [
    "ResultAggregator",
    "serial",
    "parallel",
    "map",
    "Node",
    "Serial",
    "Parallel",
    "Map",
    "ExecutionError",
    "ModuleAdapter",
    "Executor",
    "ExecutionPolicy",
    "ExecutionResult",
]
