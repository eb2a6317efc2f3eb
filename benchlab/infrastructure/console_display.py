import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn
from rich.table import Table
from rich.text import Text

from ..domain.contracts.results import TOTAL_SCORE, PersistedResult, SyncReport

console = Console()


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )
    # paramiko is chatty at INFO
    logging.getLogger("paramiko").setLevel(logging.WARNING)


def display_manifest(manifest: dict[str, Path], title: str = "Results") -> None:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Workload")
    table.add_column("Result file", style="dim")

    for workload, path in manifest.items():
        table.add_row(workload, str(path))

    console.print()
    console.print(table)


def display_sync_report(workload: str, report: SyncReport) -> None:
    verb = "Downloaded" if report.direction == "pull" else "Uploaded"
    console.print(
        f"[bold]{workload}[/bold]: {verb} {len(report.transferred)} file(s) "
        f"[dim]({report.local_dir})[/dim]"
    )
    for name in report.transferred:
        console.print(f"  [green]✓[/green] {name}")
    for name in report.failed:
        console.print(f"  [bold red]✗[/bold red] {name}")


def display_result(result: PersistedResult, path: Path | None = None) -> None:
    rounds = Table(
        title=f"{result.workload} ({len(result.test_rounds)} rounds)",
        show_header=True,
        header_style="bold cyan",
    )
    rounds.add_column("Round", justify="right")
    rounds.add_column(TOTAL_SCORE, justify="right")
    rounds.add_column("Date", style="dim")

    for i, record in enumerate(result.test_rounds):
        selected = i == result.selected_round
        style = "bold green" if selected else ""
        rounds.add_row(
            Text(f"{i + 1}{' *' if selected else ''}", style=style),
            Text(str(record.scores.get(TOTAL_SCORE, "-")), style=style),
            record.date,
        )

    console.print()
    if path:
        console.print(f"[dim]{path}[/dim]")
    console.print(rounds)

    metrics = Table(title="Selected result", show_header=True, header_style="bold cyan")
    metrics.add_column("Metric")
    metrics.add_column("Value", justify="right")
    for name, value in result.test_result.items():
        metrics.add_row(name, str(value))
    console.print(metrics)

    cpu = result.device_info.get("CPU", {})
    info = [
        f"[bold]CPU:[/bold] {cpu.get('info', '-') if isinstance(cpu, dict) else cpu}",
        f"[bold]Browser:[/bold] {result.device_info.get('Browser', '-')}",
        f"[bold]Executed:[/bold] {result.execution_date}",
    ]
    if result.chrome_flags:
        info.append(f"[bold]Flags:[/bold] {' '.join(result.chrome_flags)}")
    console.print(Panel("\n".join(info), title="Device", border_style="blue"))


@contextmanager
def progress_bar(
    description: str, total: int
) -> Generator[tuple[Progress, TaskID], None, None]:
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TextColumn("({task.completed}/{task.total})"),
        console=console,
    )
    with progress:
        task_id = progress.add_task(description, total=total)
        yield progress, task_id
