import os
from pathlib import Path
from typing import Any

import yaml

from ..domain.contracts.config import (
    DEFAULT_REMOTE_DIR_TEMPLATE,
    ConfigLoaderContract,
    ResultServerConfig,
    SuiteConfig,
    WorkloadSpec,
)
from ..domain.errors import ConfigurationError
from .platform import get_platform_name

PASSWORD_ENV_VAR = "BENCHLAB_RESULT_SERVER_PASSWORD"


class YamlConfigLoaderError(ConfigurationError):
    pass


class YamlConfigLoader(ConfigLoaderContract):
    def load(self, path: Path) -> SuiteConfig:
        path = Path(path).resolve()
        if not path.exists():
            raise YamlConfigLoaderError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise YamlConfigLoaderError(f"Invalid YAML in {path}: {e}")

        if not isinstance(data, dict):
            raise YamlConfigLoaderError(
                f"Config must be a YAML dictionary, got {type(data).__name__}"
            )

        workloads = self._parse_workloads(data.get("workloads"), path)

        chrome_flags = data.get("chrome_flags", [])
        if not isinstance(chrome_flags, list) or not all(
            isinstance(flag, str) for flag in chrome_flags
        ):
            raise YamlConfigLoaderError(
                f"chrome_flags must be a list of strings in {path}"
            )

        results_root = Path(data.get("results_root", "results"))
        if not results_root.is_absolute():
            results_root = path.parent / results_root

        server_data = data.get("result_server")
        result_server = (
            self._parse_result_server(server_data, path) if server_data else None
        )

        return SuiteConfig(
            workloads=workloads,
            results_root=results_root,
            platform_name=data.get("platform") or get_platform_name(),
            chrome_flags=chrome_flags,
            result_server=result_server,
            dev_mode=bool(data.get("dev_mode", False)),
        )

    def _parse_workloads(self, data: Any, path: Path) -> list[WorkloadSpec]:
        if not data:
            raise YamlConfigLoaderError(f"No workloads specified in {path}")
        if not isinstance(data, list):
            raise YamlConfigLoaderError(f"workloads must be a list in {path}")

        workloads = []
        seen: set[str] = set()
        for i, item in enumerate(data):
            if not isinstance(item, dict):
                raise YamlConfigLoaderError(f"Workload {i} must be a dictionary")

            item = dict(item)
            name = item.pop("name", None)
            if not name:
                raise YamlConfigLoaderError(f"Workload {i} missing 'name'")
            if name in seen:
                raise YamlConfigLoaderError(f"Duplicate workload '{name}' in {path}")
            seen.add(name)

            # bool is an int subclass, so YAML `true` must be rejected explicitly
            run_times = item.pop("run_times", 1)
            if isinstance(run_times, bool) or not isinstance(run_times, int):
                raise YamlConfigLoaderError(
                    f"Workload '{name}' run_times must be an integer, "
                    f"got {run_times!r}"
                )

            sleep_interval = item.pop("sleep_interval", 0)
            if isinstance(sleep_interval, bool) or not isinstance(
                sleep_interval, (int, float)
            ):
                raise YamlConfigLoaderError(
                    f"Workload '{name}' sleep_interval must be a number, "
                    f"got {sleep_interval!r}"
                )
            sleep_interval = float(sleep_interval)

            if run_times < 1:
                raise YamlConfigLoaderError(
                    f"Workload '{name}' run_times must be at least 1"
                )
            if sleep_interval < 0:
                raise YamlConfigLoaderError(
                    f"Workload '{name}' sleep_interval must not be negative"
                )

            workloads.append(
                WorkloadSpec(
                    name=name,
                    run_times=run_times,
                    sleep_interval=sleep_interval,
                    options=item,
                )
            )

        return workloads

    def _parse_result_server(self, data: Any, path: Path) -> ResultServerConfig:
        if not isinstance(data, dict):
            raise YamlConfigLoaderError(f"result_server must be a dictionary in {path}")

        missing = {"host", "username"} - set(data.keys())
        if missing:
            raise YamlConfigLoaderError(
                f"result_server missing required keys: {', '.join(sorted(missing))}"
            )

        return ResultServerConfig(
            host=data["host"],
            username=data["username"],
            password=data.get("password") or os.getenv(PASSWORD_ENV_VAR),
            port=int(data.get("port", 22)),
            remote_dir_template=data.get(
                "remote_dir_template", DEFAULT_REMOTE_DIR_TEMPLATE
            ),
        )
