import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import ScoreFieldError
from .config import WorkloadSpec
from .device import DeviceInfo

TOTAL_SCORE = "Total Score"


@dataclass(frozen=True)
class ScoreRecord:
    scores: dict[str, float | str]
    date: str

    def value(self, name: str = TOTAL_SCORE) -> float:
        """Return the named metric as a float.

        Raises ScoreFieldError when the metric is missing or is not a
        finite number, so a bad record never sorts as NaN.
        """
        if name not in self.scores:
            raise ScoreFieldError(f"Score field '{name}' missing from record")
        raw = self.scores[name]
        if isinstance(raw, bool):
            raise ScoreFieldError(f"Score field '{name}' is not numeric: {raw!r}")
        try:
            number = float(raw)
        except (TypeError, ValueError):
            raise ScoreFieldError(f"Score field '{name}' is not numeric: {raw!r}")
        if math.isnan(number):
            raise ScoreFieldError(f"Score field '{name}' is NaN")
        return number

    def to_dict(self) -> dict[str, Any]:
        return {"scores": dict(self.scores), "date": self.date}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScoreRecord":
        return cls(scores=dict(data["scores"]), date=str(data["date"]))


@dataclass
class SelectionResult:
    middle_score: ScoreRecord
    selected_round: int
    detailed_scores: list[ScoreRecord]


@dataclass
class PersistedResult:
    workload: str
    device_info: DeviceInfo
    test_result: dict[str, float | str]
    selected_round: int
    test_rounds: list[ScoreRecord]
    chrome_flags: list[str]
    execution_date: str

    @classmethod
    def from_selection(
        cls,
        workload: WorkloadSpec,
        device_info: DeviceInfo,
        selection: SelectionResult,
        chrome_flags: list[str],
    ) -> "PersistedResult":
        return cls(
            workload=workload.name,
            device_info=device_info,
            test_result=dict(selection.middle_score.scores),
            selected_round=selection.selected_round,
            test_rounds=list(selection.detailed_scores),
            chrome_flags=list(chrome_flags),
            execution_date=selection.middle_score.date,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "workload": self.workload,
            "device_info": self.device_info,
            "test_result": self.test_result,
            "selected_round": self.selected_round,
            "test_rounds": [r.to_dict() for r in self.test_rounds],
            "chrome_flags": self.chrome_flags,
            "execution_date": self.execution_date,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PersistedResult":
        return cls(
            workload=data["workload"],
            device_info=data["device_info"],
            test_result=data["test_result"],
            selected_round=data["selected_round"],
            test_rounds=[ScoreRecord.from_dict(r) for r in data["test_rounds"]],
            chrome_flags=data["chrome_flags"],
            execution_date=data["execution_date"],
        )


@dataclass
class SyncReport:
    local_dir: Path
    direction: str
    transferred: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class ResultRepositoryContract(ABC):
    @abstractmethod
    def result_dir(self, workload_name: str) -> Path:
        pass

    @abstractmethod
    def ensure_result_dir(self, workload_name: str) -> Path:
        pass

    @abstractmethod
    def save(
        self, device_info: DeviceInfo, workload: WorkloadSpec, result: PersistedResult
    ) -> Path:
        pass

    @abstractmethod
    def load(self, path: Path) -> PersistedResult:
        pass

    @abstractmethod
    def list_results(self, workload_name: str) -> list[str]:
        pass
