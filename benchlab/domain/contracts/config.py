from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_REMOTE_DIR_TEMPLATE = (
    "/home/{{ username }}/benchlab/results/{{ platform }}/{{ workload }}"
)


@dataclass(frozen=True)
class WorkloadSpec:
    name: str
    run_times: int
    sleep_interval: float = 0.0
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResultServerConfig:
    host: str
    username: str
    password: str | None = None
    port: int = 22
    remote_dir_template: str = DEFAULT_REMOTE_DIR_TEMPLATE


@dataclass(frozen=True)
class SuiteConfig:
    workloads: list[WorkloadSpec]
    results_root: Path
    platform_name: str
    chrome_flags: list[str] = field(default_factory=list)
    result_server: ResultServerConfig | None = None
    dev_mode: bool = False

    @property
    def sync_enabled(self) -> bool:
        """Remote sync runs only with a configured server outside dev mode."""
        return self.result_server is not None and not self.dev_mode

    def workload(self, name: str) -> WorkloadSpec:
        for workload in self.workloads:
            if workload.name == name:
                return workload
        raise KeyError(name)


class ConfigLoaderContract(ABC):
    @abstractmethod
    def load(self, path: Path) -> SuiteConfig:
        pass
