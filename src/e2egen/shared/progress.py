"""Rich progress display for generation runs."""

from __future__ import annotations

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

console = Console()


class PipelineProgress:
    """One spinner line per pipeline step, plus persistent event lines."""

    def __init__(self) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        )
        self._task_ids: dict[str, int] = {}

    def __enter__(self) -> "PipelineProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def start(self, step: str) -> None:
        """Register and start tracking a step."""
        tid = self._progress.add_task(f"[cyan]{step}[/]", total=None)
        self._task_ids[step] = tid

    def update(self, step: str, status: str) -> None:
        """Update the status text for a step."""
        if step in self._task_ids:
            self._progress.update(self._task_ids[step], description=f"[cyan]{step}[/] - {status}")

    def finish(self, step: str, status: str = "") -> None:
        """Mark a step as complete."""
        if step in self._task_ids:
            suffix = f" - {status}" if status else ""
            self._progress.update(
                self._task_ids[step],
                description=f"[green]✓ {step}{suffix}[/]",
                completed=True,
            )

    def fail(self, step: str, error: str) -> None:
        """Mark a step as failed."""
        if step in self._task_ids:
            self._progress.update(
                self._task_ids[step],
                description=f"[red]✗ {step}: {error}[/]",
                completed=True,
            )

    def log_event(self, step: str, message: str, style: str = "dim") -> None:
        """Print a persistent log line above the spinner (not overwritten)."""
        self._progress.console.print(f"  [{style}]{step}:[/] {message}")
