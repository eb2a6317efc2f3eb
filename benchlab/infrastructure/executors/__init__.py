from .base import Executor, ExecutorError
from .command import CommandExecutor
from .factory import get_executor, known_workloads

__all__ = [
    "CommandExecutor",
    "Executor",
    "ExecutorError",
    "get_executor",
    "known_workloads",
]
