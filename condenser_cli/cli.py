"""Typer-based CLI for Timewave Condenser."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__, config
from .config_manager import load_config, read_config, resolve_prompt
from .llm import GenerationError, create_client
from .models import ProjectConfig
from .packer import PACK_STYLES, PackerError, pack_repository
from .pipeline import categorize_repository, summarize_codebase
from .repo_scan import collect_repository_paths
from .resolver import areas_for_path, find_ownership_conflicts, find_uncategorized_paths

console = Console()

app = typer.Typer(
    help="🗜️  Timewave Condenser — area-aware codebase summaries.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"Timewave Condenser v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    )
):
    """Timewave Condenser: map repository areas and summarize packed codebases."""
    pass


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_required_config(config_path: Path) -> ProjectConfig:
    loaded = read_config(config_path)
    if loaded.error is not None:
        raise typer.BadParameter(f"Invalid configuration {config_path}: {loaded.error}")
    if loaded.config is None:
        raise typer.BadParameter(f"Configuration file not found at {config_path}")
    return loaded.config


ConfigOption = typer.Option(config.DEFAULT_CONFIG_FILE, "--config", "-c", help="Area configuration TOML file.")


@app.command("summarize")
def summarize(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Packed repository file."),
    output: Path = typer.Option(..., "--output", "-o", help="Directory for summary.md and summary.xml."),
    provider: str = typer.Option(config.DEFAULT_PROVIDER, "--provider", "-p", help="AI provider: claude or openai."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Area configuration TOML file."),
    area: Optional[str] = typer.Option(None, "--area", "-a", help="Area whose prompt guides the summary."),
    system_prompt: str = typer.Option("", "--system-prompt", help="Custom system prompt."),
    max_tokens: int = typer.Option(config.DEFAULT_MAX_TOKENS, "--max-tokens", min=1, help="Maximum reply tokens."),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="API key (defaults to environment)."),
    model: Optional[str] = typer.Option(None, "--model", help="Override the provider's model."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
):
    """Summarize a packed repository into Markdown and XML."""
    _configure_logging(verbose)
    settings = config.RunSettings(provider=provider, api_key=api_key, model=model, max_tokens=max_tokens)

    project_config = load_config(config_path) if config_path else None
    if verbose and project_config:
        typer.echo(f"Project: {project_config.project_name}")
        if area and area in project_config.areas:
            typer.echo(f"Using area: {area} - {project_config.areas[area].description}")

    prompt = resolve_prompt(project_config, area, system_prompt)

    try:
        client = create_client(settings)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))

    typer.echo(f"Reading input file: {input_path}")
    outcome = summarize_codebase(input_path, output, client, system_prompt=prompt, max_tokens=max_tokens)

    if not outcome.ok:
        console.print(f"[red]✗[/red] Summary generation failed: {escape(outcome.error)}")
        typer.echo(f"Fallback summary files created in {output}")
        raise typer.Exit(code=1)

    typer.echo(f"Markdown summary: {outcome.markdown_path}")
    typer.echo(f"XML summary: {outcome.xml_path}")
    console.print("[green]✓[/green] Summary generation completed successfully!")


@app.command("categorize")
def categorize(
    repo_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Repository to scan."),
    config_path: Path = ConfigOption,
    provider: str = typer.Option(config.DEFAULT_PROVIDER, "--provider", "-p", help="AI provider: claude or openai."),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="API key (defaults to environment)."),
    model: Optional[str] = typer.Option(None, "--model", help="Override the classification model."),
    threshold: float = typer.Option(
        config.DEFAULT_CONFIDENCE_THRESHOLD,
        "--threshold",
        "-t",
        min=0.0,
        max=1.0,
        help="Minimum confidence to auto-apply a suggestion.",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show suggestions without saving."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
):
    """Use AI to assign uncategorized paths to existing areas."""
    _configure_logging(verbose)
    _load_required_config(config_path)
    settings = config.RunSettings(provider=provider, api_key=api_key, model=model)
    try:
        client = create_client(settings)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))

    try:
        report = categorize_repository(
            repo_path,
            config_path,
            client,
            confidence_threshold=threshold,
            dry_run=dry_run,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    except GenerationError as exc:
        console.print(f"[red]✗[/red] Classification request failed: {escape(str(exc))}")
        raise typer.Exit(code=1)

    if not report.uncategorized:
        typer.echo("No uncategorized paths found. Configuration is up to date.")
        return

    typer.echo(f"Found {len(report.uncategorized)} uncategorized paths.")
    if not report.suggestions:
        typer.echo("No usable suggestions were returned.")
        return

    applied = {id(s) for s in report.merge_result.applied}
    table = Table(title="Categorization Suggestions", show_lines=False)
    table.add_column("Path", style="cyan")
    table.add_column("Area", style="magenta")
    table.add_column("Confidence", justify="right")
    table.add_column("Status")
    table.add_column("Reasoning", min_width=20)
    for suggestion in report.suggestions:
        status = "[green]applied[/green]" if id(suggestion) in applied else "[yellow]skipped[/yellow]"
        table.add_row(
            escape(suggestion.path),
            escape(suggestion.area),
            f"{suggestion.confidence:.2f}",
            status,
            escape(suggestion.reasoning),
        )
    console.print(table)

    if report.saved:
        typer.echo(f"Updated configuration saved to {config_path}")
    elif dry_run:
        typer.echo("Dry run: configuration not modified.")


@app.command("gaps")
def gaps(
    repo_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Repository to scan."),
    config_path: Path = ConfigOption,
):
    """List paths that no area covers."""
    project_config = _load_required_config(config_path)
    uncategorized = find_uncategorized_paths(collect_repository_paths(repo_path), project_config)
    if not uncategorized:
        typer.echo("All paths are categorized.")
        return
    for path in uncategorized:
        typer.echo(path)
    typer.echo(f"\n{len(uncategorized)} uncategorized path(s)")


@app.command("overlaps")
def overlaps(
    repo_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Repository to scan."),
    config_path: Path = ConfigOption,
):
    """List paths claimed by more than one area."""
    project_config = _load_required_config(config_path)
    conflicts = find_ownership_conflicts(collect_repository_paths(repo_path), project_config)
    if not conflicts:
        typer.echo("No overlapping areas.")
        return
    for path, owners in conflicts.items():
        typer.echo(f"{path}: {', '.join(owners)}")


@app.command("owners")
def owners(
    path: str = typer.Argument(..., help="Repository-relative path."),
    config_path: Path = ConfigOption,
):
    """Show which areas own a path."""
    project_config = _load_required_config(config_path)
    names = areas_for_path(path, project_config)
    if not names:
        typer.echo(f"{path}: uncategorized")
    elif len(names) == 1:
        typer.echo(f"{path}: {names[0]}")
    else:
        typer.echo(f"{path}: ambiguous ({', '.join(names)})")


@app.command("areas")
def areas(config_path: Path = ConfigOption):
    """Show the areas declared in the configuration."""
    project_config = _load_required_config(config_path)
    table = Table(title=project_config.project_name or "Areas", show_lines=False)
    table.add_column("Area", style="cyan")
    table.add_column("Description")
    table.add_column("Included", style="green")
    table.add_column("Excluded", style="red")
    for name, area in project_config.areas.items():
        table.add_row(
            escape(name),
            escape(area.description),
            escape("\n".join(area.included_patterns)) or "-",
            escape("\n".join(area.excluded_patterns)) or "-",
        )
    console.print(table)


@app.command("prompt")
def prompt(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Area configuration TOML file."),
    area: Optional[str] = typer.Option(None, "--area", "-a", help="Area name."),
    system_prompt: str = typer.Option("", "--system-prompt", help="Prompt used when no area applies."),
):
    """Print the prompt a summarize run would use."""
    project_config = load_config(config_path) if config_path else None
    typer.echo(resolve_prompt(project_config, area, system_prompt))


@app.command("pack")
def pack(
    repo_path: Path = typer.Argument(..., help="Repository to pack."),
    output: Path = typer.Option(Path("output"), "--output", "-o", help="Output directory."),
    style: str = typer.Option("markdown", "--style", "-s", help=f"Output style: {', '.join(PACK_STYLES)}."),
):
    """Pack a repository into one document with Repomix."""
    try:
        packed = pack_repository(repo_path, output, style)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    except PackerError as exc:
        console.print(f"[red]✗[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)
    typer.echo(f"Pack completed successfully! Output saved to: {packed}")


if __name__ == "__main__":
    app()
