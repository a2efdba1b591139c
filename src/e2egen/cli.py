"""Typer CLI — ``e2egen generate``, ``e2egen analyze`` and ``e2egen validate``."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from e2egen.config import build_config, load_config, resolve_api_key
from e2egen.exceptions import E2EGenError
from e2egen.schemas.config import GeneratorConfig

# Load .env file from the working directory (if it exists)
load_dotenv()

app = typer.Typer(
    name="e2egen",
    help="Analyze a web app's UI code and generate Playwright end-to-end tests with an LLM.",
    no_args_is_help=True,
)
console = Console()

DEFAULT_ANALYSIS_OUTPUT = Path(".analysis") / "component-analysis.json"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load(config: Path | None) -> GeneratorConfig | None:
    if config is None:
        return None
    try:
        return load_config(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", help="Path to e2egen.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file without generating anything."""
    _setup_logging(verbose)
    cfg = _load(config)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  Output dir:  {cfg.output_dir}")
    console.print(f"  Include:     {', '.join(cfg.include_patterns)}")
    console.print(f"  Exclude:     {', '.join(cfg.exclude_patterns) or '(none)'}")
    console.print(f"  Max files:   {cfg.max_files}")
    console.print(f"  Model:       {cfg.model}")
    console.print(f"  Max tokens:  {cfg.max_tokens_per_request}")
    console.print(f"  API key:     {'set' if resolve_api_key(cfg) else '(missing)'}")


@app.command()
def generate(
    codebase_dir: Path = typer.Argument(Path("."), help="Root of the codebase to generate tests for."),
    output: str = typer.Option(None, "--output", "-o", help="Directory to write test files into."),
    include: list[str] = typer.Option(None, "--include", "-i", help="Include glob (repeatable)."),
    exclude: list[str] = typer.Option(None, "--exclude", "-e", help="Exclude glob (repeatable)."),
    api_key: str = typer.Option(None, "--api-key", "-k", help="OpenAI API key (defaults to OPENAI_API_KEY)."),
    model: str = typer.Option(None, "--model", help="Chat model identifier."),
    max_tokens: int = typer.Option(None, "--max-tokens", help="Token ceiling per request."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to e2egen.yml"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Run the full pipeline with a canned response (no API calls)."),
    save_raw: bool = typer.Option(False, "--save-raw", help="Save responses that contain no test files."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Generate Playwright tests for a codebase."""
    _setup_logging(verbose)

    try:
        cfg = build_config(
            _load(config),
            output_dir=output,
            include_patterns=include,
            exclude_patterns=exclude,
            api_key=api_key,
            model=model,
            max_tokens_per_request=max_tokens,
            save_raw_responses=save_raw or None,
        )
    except ValueError as exc:
        console.print(f"[red]Invalid options:[/] {exc}")
        raise typer.Exit(code=1)

    if dry_run:
        console.print("[yellow]DRY-RUN mode — no API calls will be made.[/]\n")

    console.print(f"[bold]Generating tests for:[/] {codebase_dir.resolve()}\n")
    try:
        artifacts = asyncio.run(_run_generation(cfg, codebase_dir, dry_run=dry_run))
    except E2EGenError as exc:
        console.print(f"[red]Error ({exc.code}):[/] {exc.message}")
        raise typer.Exit(code=1)

    if not artifacts:
        console.print("[yellow]No test files were generated.[/]")
        return
    console.print(f"\n[green]Generated {len(artifacts)} test file(s) in {Path(cfg.output_dir).resolve()}[/]")


async def _run_generation(cfg: GeneratorConfig, codebase_dir: Path, *, dry_run: bool = False) -> list:
    """Run the generator inside a progress display."""
    from e2egen.generation.generator import E2EGenerator
    from e2egen.shared.progress import PipelineProgress

    if dry_run:
        from e2egen.shared.openai_client import DryRunClient
        client = DryRunClient()
    else:
        from e2egen.shared.openai_client import GenerationClient
        client = GenerationClient(resolve_api_key(cfg), model=cfg.model)

    step = "Generate"
    with PipelineProgress() as progress:
        progress.start(step)
        generator = E2EGenerator(
            cfg,
            client,
            on_progress=lambda msg: progress.update(step, msg),
            on_event=lambda msg: progress.log_event(step, msg),
        )
        try:
            artifacts = await generator.generate_tests(codebase_dir)
        except E2EGenError as exc:
            progress.fail(step, exc.message)
            raise
        progress.finish(step, f"{len(artifacts)} file(s)")
    return artifacts


@app.command()
def analyze(
    project_dir: Path = typer.Argument(Path("."), help="Root of the project to analyze."),
    output: Path = typer.Option(None, "--output", "-o", help="JSON output path (default: .analysis/component-analysis.json under the project)."),
    report: Path = typer.Option(None, "--report", help="Also write a Markdown report to this path."),
    include: list[str] = typer.Option(None, "--include", "-i", help="Include glob (repeatable)."),
    exclude: list[str] = typer.Option(None, "--exclude", "-e", help="Exclude glob (repeatable)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Extract the UI structure of a project into JSON (and optionally Markdown)."""
    from e2egen.indexer.analyzer import analyze_codebase
    from e2egen.output.markdown import render_analysis_report

    _setup_logging(verbose)

    try:
        result = analyze_codebase(project_dir, include or None, exclude or None)
    except E2EGenError as exc:
        console.print(f"[red]Error ({exc.code}):[/] {exc.message}")
        raise typer.Exit(code=1)

    output = output or project_dir / DEFAULT_ANALYSIS_OUTPUT
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.model_dump_json(indent=2))
    console.print(f"[green]Analysis saved to {output}[/]")

    if report:
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(render_analysis_report(result))
        console.print(f"[green]Report saved to {report}[/]")

    summary = result.summary
    console.print(
        f"  {summary.total_files} file(s), {summary.total_elements} element(s), "
        f"{summary.interactive_elements} interactive, {summary.total_states} state hook(s)"
    )
