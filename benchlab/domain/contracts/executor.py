from abc import ABC, abstractmethod
from typing import Protocol

from .config import WorkloadSpec
from .results import ScoreRecord


class ExecutorContract(ABC):
    @abstractmethod
    async def execute(
        self, workload: WorkloadSpec, browser_flags: list[str]
    ) -> ScoreRecord:
        pass


class ExecutorFactory(Protocol):
    def __call__(self, workload_name: str) -> ExecutorContract: ...
