import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, Iterable

from ..domain.contracts.config import SuiteConfig, WorkloadSpec
from ..domain.contracts.device import DeviceInfo
from ..domain.contracts.executor import ExecutorContract, ExecutorFactory
from ..domain.contracts.results import PersistedResult, ResultRepositoryContract
from ..domain.errors import ConfigurationError
from .run_workload import RunWorkload
from .sync_results import PULL, PUSH, SyncResults

logger = logging.getLogger(__name__)


class RunSuite:
    def __init__(
        self,
        config: SuiteConfig,
        result_repository: ResultRepositoryContract,
        executor_factory: ExecutorFactory,
        run_workload: RunWorkload | None = None,
        sync: SyncResults | None = None,
        known_workloads: Callable[[], Iterable[str]] | None = None,
    ) -> None:
        self._config = config
        self._result_repository = result_repository
        self._executor_factory = executor_factory
        self._run_workload = run_workload or RunWorkload()
        self._sync = sync
        self._known_workloads = known_workloads

    def resolve_executors(
        self, workloads: list[WorkloadSpec]
    ) -> dict[str, ExecutorContract]:
        executors: dict[str, ExecutorContract] = {}
        unknown: list[str] = []
        for workload in workloads:
            try:
                executors[workload.name] = self._executor_factory(workload.name)
            except ConfigurationError:
                unknown.append(workload.name)

        if unknown:
            message = f"No executor for workload(s): {', '.join(unknown)}"
            if self._known_workloads is not None:
                available = ", ".join(sorted(self._known_workloads()))
                message = f"{message}. Available: {available}"
            raise ConfigurationError(message)
        return executors

    def count_rounds(self, workloads: list[WorkloadSpec] | None = None) -> int:
        workloads = workloads if workloads is not None else self._config.workloads
        return sum(w.run_times for w in workloads)

    async def execute(
        self,
        device_info: DeviceInfo,
        workloads: list[WorkloadSpec] | None = None,
        on_progress: Callable[[], None] | None = None,
    ) -> dict[str, Path]:
        workloads = workloads if workloads is not None else self._config.workloads

        # Every name must resolve before the first browser run starts.
        executors = self.resolve_executors(workloads)

        start_time = time.perf_counter()
        manifest: dict[str, Path] = {}

        for workload in workloads:
            if self._sync:
                await self._sync_workload(self._sync, workload, PULL)

            selection = await self._run_workload.execute(
                workload,
                executors[workload.name],
                self._config.chrome_flags,
                on_progress=on_progress,
            )

            result = PersistedResult.from_selection(
                workload=workload,
                device_info=device_info,
                selection=selection,
                chrome_flags=self._config.chrome_flags,
            )
            manifest[workload.name] = await asyncio.to_thread(
                self._result_repository.save, device_info, workload, result
            )

            if self._sync:
                await self._sync_workload(self._sync, workload, PUSH)

        logger.info(
            "Suite finished %d workload(s) in %.1fs",
            len(manifest),
            time.perf_counter() - start_time,
        )
        return manifest

    async def _sync_workload(
        self, sync: SyncResults, workload: WorkloadSpec, direction: str
    ) -> None:
        report = await asyncio.to_thread(sync.execute, workload, direction)
        if report.failed:
            logger.warning(
                "%s of %s left %d file(s) unsynced: %s",
                direction,
                workload.name,
                len(report.failed),
                ", ".join(report.failed),
            )

