import asyncio
import logging
from typing import Awaitable, Callable

from ..domain.contracts.config import WorkloadSpec
from ..domain.contracts.executor import ExecutorContract
from ..domain.contracts.results import TOTAL_SCORE, ScoreRecord, SelectionResult
from ..domain.median import select_median

logger = logging.getLogger(__name__)

# First runs of these workloads are skewed by cold caches and JIT warm-up.
WARMUP_WORKLOADS = frozenset({"Speedometer2", "Unity3D"})
WARMUP_COOLDOWN_SECONDS = 100.0

Sleep = Callable[[float], Awaitable[None]]


class RunWorkload:
    def __init__(
        self,
        sleep: Sleep = asyncio.sleep,
        sort_field: str = TOTAL_SCORE,
    ) -> None:
        self._sleep = sleep
        self._sort_field = sort_field

    async def execute(
        self,
        workload: WorkloadSpec,
        executor: ExecutorContract,
        browser_flags: list[str],
        on_progress: Callable[[], None] | None = None,
    ) -> SelectionResult:
        if workload.name in WARMUP_WORKLOADS:
            logger.info("Warming up %s", workload.name)
            await executor.execute(workload, browser_flags)
            await self._sleep(WARMUP_COOLDOWN_SECONDS)

        batch: list[ScoreRecord] = []
        for round_number in range(workload.run_times):
            record = await executor.execute(workload, browser_flags)
            batch.append(record)
            logger.info(
                "%s round %d/%d: %s=%s",
                workload.name,
                round_number + 1,
                workload.run_times,
                self._sort_field,
                record.scores.get(self._sort_field),
            )
            if on_progress:
                on_progress()

            await self._sleep(workload.sleep_interval)

        selection = select_median(batch, self._sort_field)
        logger.info(
            "%s selected round %d of %d",
            workload.name,
            selection.selected_round + 1,
            len(batch),
        )
        return selection
