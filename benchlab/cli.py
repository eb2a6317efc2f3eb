import asyncio
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from benchlab.application.run_suite import RunSuite
from benchlab.application.search_results import SearchResults
from benchlab.application.sync_results import PULL, PUSH, SyncResults
from benchlab.domain.contracts.config import SuiteConfig, WorkloadSpec
from benchlab.domain.errors import ConfigurationError
from benchlab.infrastructure import (
    FileDeviceInfoProvider,
    FileResultRepository,
    SftpArchive,
    YamlConfigLoader,
)
from benchlab.infrastructure.console_display import (
    configure_logging,
    console,
    display_manifest,
    display_result,
    display_sync_report,
    progress_bar,
)
from benchlab.infrastructure.executors.factory import get_executor, known_workloads
from benchlab.infrastructure.file_result_repository import load_result

load_dotenv()

app = typer.Typer(
    name="bench-lab",
    help="Run browser benchmarks repeatedly and archive the median results",
    no_args_is_help=True,
)

_config_loader = YamlConfigLoader()


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    configure_logging(verbose)


def _create_repository(config: SuiteConfig) -> FileResultRepository:
    return FileResultRepository(config.results_root, config.platform_name)


def _create_sync(
    config: SuiteConfig, repository: FileResultRepository
) -> SyncResults | None:
    if not config.sync_enabled or config.result_server is None:
        return None
    return SyncResults(
        server=config.result_server,
        result_repository=repository,
        platform_name=config.platform_name,
        archive_factory=SftpArchive,
    )


def _require_sync(
    config: SuiteConfig, repository: FileResultRepository
) -> SyncResults:
    sync = _create_sync(config, repository)
    if sync is None:
        raise ConfigurationError(
            "Remote sync needs a result_server and dev_mode disabled"
        )
    return sync


def _select_workloads(
    config: SuiteConfig, names: list[str] | None
) -> list[WorkloadSpec]:
    if not names:
        return config.workloads
    try:
        return [config.workload(name) for name in names]
    except KeyError as e:
        raise ConfigurationError(f"Workload {e} not in config")


async def _run_with_progress(
    runner: RunSuite,
    device_info_path: Path,
    workloads: list[WorkloadSpec],
    quiet: bool,
) -> dict[str, Path]:
    device_info = await FileDeviceInfoProvider(device_info_path).get_device_info()

    if quiet:
        return await runner.execute(device_info, workloads)

    with progress_bar("Running suite", runner.count_rounds(workloads)) as (
        progress,
        task_id,
    ):

        def on_progress() -> None:
            progress.advance(task_id)

        return await runner.execute(device_info, workloads, on_progress=on_progress)


@app.command(help="Run the configured workloads and store their results.")
def run(
    config_path: Annotated[Path, typer.Argument(help="Path to suite config YAML")],
    device_info: Annotated[
        Path | None,
        typer.Option(
            "--device-info",
            "-d",
            help="Device info YAML/JSON (default: device_info.yaml beside config)",
        ),
    ] = None,
    workload: Annotated[
        list[str] | None,
        typer.Option("--workload", "-w", help="Run only this workload"),
    ] = None,
    no_sync: Annotated[
        bool, typer.Option("--no-sync", help="Skip remote pull/push")
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Hide progress bar")
    ] = False,
) -> None:
    config_path = config_path.resolve()
    device_info_path = device_info or config_path.parent / "device_info.yaml"

    try:
        config = _config_loader.load(config_path)
        workloads = _select_workloads(config, workload)
        repository = _create_repository(config)
        runner = RunSuite(
            config=config,
            result_repository=repository,
            executor_factory=get_executor,
            sync=None if no_sync else _create_sync(config, repository),
            known_workloads=known_workloads,
        )
        manifest = asyncio.run(
            _run_with_progress(runner, device_info_path.resolve(), workloads, quiet)
        )
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    console.print("\n[bold green]Complete![/bold green]")
    display_manifest(manifest)


@app.command(help="Sync one workload's results with the remote archive.")
def sync(
    config_path: Annotated[Path, typer.Argument(help="Path to suite config YAML")],
    workload: Annotated[str, typer.Argument(help="Workload name")],
    push: Annotated[
        bool,
        typer.Option("--push/--pull", help="Upload local files or download remote"),
    ] = False,
) -> None:
    try:
        config = _config_loader.load(config_path.resolve())
        spec = _select_workloads(config, [workload])[0]
        repository = _create_repository(config)
        direction = PUSH if push else PULL
        report = _require_sync(config, repository).execute(spec, direction)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    display_sync_report(workload, report)
    if report.failed:
        raise typer.Exit(1)


@app.command(help="Pull every configured workload's results from the archive.")
def pull(
    config_path: Annotated[Path, typer.Argument(help="Path to suite config YAML")],
) -> None:
    try:
        config = _config_loader.load(config_path.resolve())
        repository = _create_repository(config)
        reports = _require_sync(config, repository).pull_all(config.workloads)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    for spec, report in zip(config.workloads, reports):
        display_sync_report(spec.name, report)
    if any(report.failed for report in reports):
        raise typer.Exit(1)


@app.command(help="Find one result per workload for a CPU and browser build.")
def search(
    config_path: Annotated[Path, typer.Argument(help="Path to suite config YAML")],
    cpu: Annotated[str, typer.Option("--cpu", help="CPU keyword, e.g. 1165G7")],
    channel: Annotated[
        str, typer.Option("--channel", help="Browser channel keyword, e.g. Canary")
    ],
    version: Annotated[
        str, typer.Option("--version", help="Browser version keyword")
    ],
    no_sync: Annotated[
        bool, typer.Option("--no-sync", help="Search local results only")
    ] = False,
) -> None:
    try:
        config = _config_loader.load(config_path.resolve())
        repository = _create_repository(config)
        searcher = SearchResults(
            repository, None if no_sync else _create_sync(config, repository)
        )
        manifest = searcher.execute(config.workloads, cpu, channel, version)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    display_manifest(manifest, title=f"Results for {cpu} {channel} {version}")


@app.command(help="Show a stored result file.")
def show(
    path: Annotated[Path, typer.Argument(help="Path to a result JSON file")],
) -> None:
    path = path.resolve()

    try:
        result = load_result(path)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    display_result(result, path)


if __name__ == "__main__":
    app()
