import logging
from pathlib import Path

from ..domain.contracts.config import WorkloadSpec
from ..domain.contracts.results import ResultRepositoryContract
from ..domain.errors import BenchLabError
from .sync_results import PULL, SyncResults

logger = logging.getLogger(__name__)


class SearchResultsError(BenchLabError):
    pass


class SearchResults:
    """Finds one result file per workload for a weekly regular test round.

    A file matches when its name contains the CPU, browser channel and
    browser version keywords. Exactly one match per workload is required.
    """

    def __init__(
        self,
        result_repository: ResultRepositoryContract,
        sync: SyncResults | None = None,
    ) -> None:
        self._result_repository = result_repository
        self._sync = sync

    def execute(
        self,
        workloads: list[WorkloadSpec],
        cpu: str,
        channel: str,
        version: str,
    ) -> dict[str, Path]:
        results: dict[str, Path] = {}
        for workload in workloads:
            if self._sync:
                self._sync.execute(workload, PULL)

            matches = [
                name
                for name in self._result_repository.list_results(workload.name)
                if cpu in name and channel in name and version in name
            ]
            if len(matches) != 1:
                raise SearchResultsError(
                    f"Expected one result for '{workload.name}' matching "
                    f"{cpu}/{channel}/{version}, found {len(matches)}"
                )

            results[workload.name] = (
                self._result_repository.result_dir(workload.name) / matches[0]
            )
            logger.debug("%s -> %s", workload.name, results[workload.name])

        return results
