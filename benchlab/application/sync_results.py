import logging
import os
import posixpath

from jinja2 import StrictUndefined, Template, UndefinedError

from ..domain.contracts.config import ResultServerConfig, WorkloadSpec
from ..domain.contracts.remote import RemoteArchiveContract, RemoteArchiveFactory
from ..domain.contracts.results import ResultRepositoryContract, SyncReport
from ..domain.errors import BenchLabError

logger = logging.getLogger(__name__)

PULL = "pull"
PUSH = "push"
DIRECTIONS = (PULL, PUSH)


class RemoteSyncError(BenchLabError):
    pass


class SyncResults:
    """Reconciles a workload's local results directory with the remote archive.

    Files are matched by name only. A pull downloads remote files missing
    locally; a push uploads local files missing remotely. Files present on
    both sides are never compared or overwritten.

    A failed transfer of a single file is logged and reported in
    ``SyncReport.failed`` while the remaining files are still attempted.
    Connection, listing and directory errors raise ``RemoteSyncError``.
    The remote session is closed on every path.
    """

    def __init__(
        self,
        server: ResultServerConfig,
        result_repository: ResultRepositoryContract,
        platform_name: str,
        archive_factory: RemoteArchiveFactory,
    ) -> None:
        self._server = server
        self._result_repository = result_repository
        self._platform_name = platform_name
        self._archive_factory = archive_factory

    def remote_dir(self, workload_name: str) -> str:
        try:
            template = Template(
                self._server.remote_dir_template, undefined=StrictUndefined
            )
            return template.render(
                username=self._server.username,
                platform=self._platform_name,
                workload=workload_name,
            )
        except UndefinedError as e:
            raise RemoteSyncError(f"Invalid remote_dir_template: {e}")

    def execute(self, workload: WorkloadSpec, direction: str) -> SyncReport:
        if direction not in DIRECTIONS:
            raise RemoteSyncError(
                f"Invalid sync direction '{direction}'. Must be 'pull' or 'push'"
            )

        local_dir = self._result_repository.ensure_result_dir(workload.name)
        remote_dir = self.remote_dir(workload.name)
        report = SyncReport(local_dir=local_dir, direction=direction)

        try:
            with self._archive_factory(self._server) as archive:
                if not archive.exists(remote_dir):
                    archive.makedirs(remote_dir)

                if direction == PULL:
                    self._pull(archive, remote_dir, report)
                else:
                    self._push(archive, workload.name, remote_dir, report)
        except Exception as e:
            logger.error(
                "Failed to %s %s results with %s: %s",
                direction,
                workload.name,
                self._server.host,
                e,
            )
            raise RemoteSyncError(
                f"Failed to {direction} '{workload.name}' results "
                f"with {self._server.host}: {e}"
            ) from e

        return report

    def pull_all(self, workloads: list[WorkloadSpec]) -> list[SyncReport]:
        return [self.execute(workload, PULL) for workload in workloads]

    def _pull(
        self,
        archive: RemoteArchiveContract,
        remote_dir: str,
        report: SyncReport,
    ) -> None:
        for filename in archive.list_files(remote_dir):
            if filename.startswith("."):
                continue
            target = report.local_dir / filename
            if target.exists():
                continue

            logger.info("Downloading remote file: %s", filename)
            partial = report.local_dir / f".{filename}.part"
            try:
                archive.download(posixpath.join(remote_dir, filename), partial)
                os.replace(partial, target)
            except Exception as e:
                partial.unlink(missing_ok=True)
                logger.error("Failed to download %s: %s", filename, e)
                report.failed.append(filename)
                continue

            report.transferred.append(filename)

    def _push(
        self,
        archive: RemoteArchiveContract,
        workload_name: str,
        remote_dir: str,
        report: SyncReport,
    ) -> None:
        remote_files = set(archive.list_files(remote_dir))

        for filename in self._result_repository.list_results(workload_name):
            if filename in remote_files:
                continue

            logger.info("Uploading local file: %s", filename)
            try:
                archive.upload(
                    report.local_dir / filename, posixpath.join(remote_dir, filename)
                )
            except Exception as e:
                logger.error("Failed to upload %s: %s", filename, e)
                report.failed.append(filename)
                continue

            report.transferred.append(filename)
