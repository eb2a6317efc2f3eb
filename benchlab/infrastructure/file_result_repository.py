import json
import logging
import os
import re
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable

from ..domain.contracts.config import WorkloadSpec
from ..domain.contracts.device import DeviceInfo
from ..domain.contracts.results import PersistedResult, ResultRepositoryContract
from ..domain.errors import BenchLabError, ConfigurationError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


class FileResultRepositoryError(BenchLabError):
    pass


def result_filename(device_info: DeviceInfo, timestamp: datetime) -> str:
    try:
        cpu = device_info["CPU"]
        cpu_info = "-".join([cpu["mfr"], re.sub(r"\s", "-", cpu["info"])])
        browser = device_info["Browser"]
    except (KeyError, TypeError) as e:
        raise ConfigurationError(f"Device info missing field: {e}")

    return f"{timestamp.strftime(TIMESTAMP_FORMAT)}_{cpu_info}_{browser}.json"


def load_result(path: Path) -> PersistedResult:
    path = Path(path)
    if not path.exists():
        raise FileResultRepositoryError(f"Result file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except ValueError as e:
            raise FileResultRepositoryError(f"Invalid JSON in {path}: {e}")

    try:
        return PersistedResult.from_dict(data)
    except (KeyError, TypeError) as e:
        raise FileResultRepositoryError(f"Malformed result file {path}: {e}")


class FileResultRepository(ResultRepositoryContract):
    def __init__(
        self,
        results_root: Path,
        platform_name: str,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._results_root = Path(results_root)
        self._platform_name = platform_name
        # Naive datetime.now() is local time, which filenames are stamped in.
        self._clock = clock

    def result_dir(self, workload_name: str) -> Path:
        return (self._results_root / self._platform_name / workload_name).resolve()

    def ensure_result_dir(self, workload_name: str) -> Path:
        results_dir = self.result_dir(workload_name)
        try:
            results_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileResultRepositoryError(
                f"Cannot create results directory {results_dir} "
                f"for workload '{workload_name}': {e}"
            )
        return results_dir

    def save(
        self, device_info: DeviceInfo, workload: WorkloadSpec, result: PersistedResult
    ) -> Path:
        results_dir = self.ensure_result_dir(workload.name)
        target = results_dir / result_filename(device_info, self._clock())

        fd, tmp_name = tempfile.mkstemp(
            dir=results_dir, prefix=f".{target.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(result.to_dict(), f, indent=4, ensure_ascii=False)
            os.replace(tmp_name, target)
        except (OSError, TypeError, ValueError) as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise FileResultRepositoryError(
                f"Failed to write result for workload '{workload.name}' "
                f"to {target}: {e}"
            )

        logger.info("Stored %s result at %s", workload.name, target)
        return target

    def load(self, path: Path) -> PersistedResult:
        return load_result(path)

    def list_results(self, workload_name: str) -> list[str]:
        results_dir = self.result_dir(workload_name)
        if not results_dir.exists():
            return []

        return sorted(
            p.name
            for p in results_dir.iterdir()
            if p.is_file() and not p.name.startswith(".")
        )
