import asyncio
import logging
import time

from ...domain.contracts.config import WorkloadSpec
from ...domain.contracts.results import ScoreRecord
from .base import Executor, ExecutorError

logger = logging.getLogger(__name__)


class CommandExecutor(Executor):
    """Runs a workload's browser driver as a subprocess.

    The workload's ``command`` option is an argv list whose items are Jinja2
    templates over the workload options. The driver prints one score record
    as JSON on stdout.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    async def execute(
        self, workload: WorkloadSpec, browser_flags: list[str]
    ) -> ScoreRecord:
        command = workload.options.get("command")
        if not command or not isinstance(command, list):
            raise ExecutorError(
                f"Workload '{workload.name}' needs a 'command' list to run"
            )

        context = self.template_context(workload, browser_flags)
        argv = [self.render(str(arg), context) for arg in command]

        logger.debug("Running %s: %s", workload.name, argv)
        start_time = time.perf_counter()
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExecutorError(f"Cannot start driver for '{workload.name}': {e}")

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise ExecutorError(
                f"Driver for '{workload.name}' timed out after {self._timeout}s"
            )
        duration = time.perf_counter() - start_time

        if process.returncode != 0:
            detail = stderr.decode(errors="replace").strip()
            raise ExecutorError(
                f"Driver for '{workload.name}' exited with code "
                f"{process.returncode}: {detail}"
            )

        logger.debug("%s run finished in %.1fs", workload.name, duration)
        return self.parse_score_record(stdout)
