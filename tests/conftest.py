from pathlib import Path
from typing import Any

import pytest

from benchlab.domain.contracts.config import (
    ResultServerConfig,
    SuiteConfig,
    WorkloadSpec,
)
from benchlab.domain.contracts.executor import ExecutorContract
from benchlab.domain.contracts.remote import RemoteArchiveContract
from benchlab.domain.contracts.results import ScoreRecord
from benchlab.infrastructure.executors.base import ExecutorError


class FakeExecutor(ExecutorContract):
    def __init__(self, totals: list[Any], fail_on_call: int | None = None) -> None:
        self.totals = totals
        self.fail_on_call = fail_on_call
        self.calls = 0
        self.flags_seen: list[list[str]] = []

    async def execute(
        self, workload: WorkloadSpec, browser_flags: list[str]
    ) -> ScoreRecord:
        self.calls += 1
        self.flags_seen.append(browser_flags)
        if self.fail_on_call == self.calls:
            raise ExecutorError(f"{workload.name} browser crashed")
        total = self.totals[(self.calls - 1) % len(self.totals)]
        return ScoreRecord(
            scores={"Total Score": total, "Label": "x"},
            date=f"2024-01-01T00:00:{self.calls:02d}",
        )


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeRemote:
    """In-memory remote archive shared by every session the factory opens."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.dirs: set[str] = set()
        self.connects = 0
        self.closes = 0
        self.uploads: list[str] = []
        self.downloads: list[str] = []
        self.fail_transfers: set[str] = set()
        self.connect_error: Exception | None = None
        self.list_error: Exception | None = None
        self.close_error: Exception | None = None

    def factory(self, server: ResultServerConfig) -> "FakeArchive":
        return FakeArchive(self)


class FakeArchive(RemoteArchiveContract):
    def __init__(self, remote: FakeRemote) -> None:
        self.remote = remote

    def connect(self) -> None:
        if self.remote.connect_error:
            raise self.remote.connect_error
        self.remote.connects += 1

    def close(self) -> None:
        self.remote.closes += 1
        if self.remote.close_error:
            raise self.remote.close_error

    def exists(self, remote_path: str) -> bool:
        return remote_path in self.remote.dirs or remote_path in self.remote.files

    def makedirs(self, remote_path: str) -> None:
        self.remote.dirs.add(remote_path)

    def list_files(self, remote_dir: str) -> list[str]:
        if self.remote.list_error:
            raise self.remote.list_error
        prefix = remote_dir.rstrip("/") + "/"
        return sorted(
            path[len(prefix) :]
            for path in self.remote.files
            if path.startswith(prefix) and "/" not in path[len(prefix) :]
        )

    def download(self, remote_path: str, local_path: Path) -> None:
        name = remote_path.rsplit("/", 1)[-1]
        if name in self.remote.fail_transfers:
            local_path.write_bytes(b"partial")
            raise OSError(f"connection reset while reading {name}")
        local_path.write_bytes(self.remote.files[remote_path])
        self.remote.downloads.append(name)

    def upload(self, local_path: Path, remote_path: str) -> None:
        if local_path.name in self.remote.fail_transfers:
            raise OSError(f"permission denied writing {remote_path}")
        self.remote.files[remote_path] = local_path.read_bytes()
        self.remote.uploads.append(local_path.name)


@pytest.fixture
def device_info() -> dict[str, Any]:
    return {
        "CPU": {"mfr": "Intel", "info": "TigerLake i7-1165G7"},
        "GPU": "Iris Xe Graphics",
        "Browser": "Chrome-Canary-92.0.4500.0",
        "OS": "Windows 10",
    }


@pytest.fixture
def server() -> ResultServerConfig:
    return ResultServerConfig(host="archive.local", username="bench", password="pw")


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def suite_config(tmp_path: Path, server: ResultServerConfig) -> SuiteConfig:
    return SuiteConfig(
        workloads=[
            WorkloadSpec(name="JetStream2", run_times=3, sleep_interval=1),
            WorkloadSpec(name="WebXPRT3", run_times=3, sleep_interval=1),
            WorkloadSpec(name="Aquarium", run_times=1, sleep_interval=0),
        ],
        results_root=tmp_path / "results",
        platform_name="Linux",
        chrome_flags=["--no-sandbox"],
        result_server=server,
        dev_mode=True,
    )
