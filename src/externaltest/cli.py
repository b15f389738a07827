"""Command-line interface for externaltest."""

import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from externaltest import __version__
from externaltest.config import ExternalTestConfig, create_example_config


console = Console(soft_wrap=True)


def _load_config(config_path: Optional[str]) -> ExternalTestConfig:
    """Load configuration or exit with an error message."""
    try:
        if config_path:
            return ExternalTestConfig.from_file(config_path)
        return ExternalTestConfig.load()
    except (FileNotFoundError, ValidationError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        console.print("Run [bold]externaltest init[/bold] to create a configuration file")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="externaltest")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: externaltest.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show external test output")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """externaltest - run script based tests in isolated directories."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="externaltest.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(output: str, force: bool) -> None:
    """Initialize a new externaltest configuration file."""
    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(
            f"[yellow]Configuration file already exists:[/yellow] {output_path}"
        )
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
        console.print(f"[green]Created configuration file:[/green] {output_path}")
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {escape(str(e))}")
        sys.exit(1)


@main.command()
@click.argument("suite")
@click.argument("test")
@click.option("--source-dir", type=click.Path(file_okay=False), help="Override the configured source directory")
@click.option("--build-dir", type=click.Path(file_okay=False), help="Override the configured build directory")
@click.pass_context
def run(
    ctx: click.Context,
    suite: str,
    test: str,
    source_dir: Optional[str],
    build_dir: Optional[str],
) -> None:
    """Run the external test SUITE/TEST."""
    from externaltest.core.runner import ExternalTestRunner

    config = _load_config(ctx.obj.get("config_path"))

    overrides: dict[str, object] = {}
    if source_dir:
        overrides["source_dir"] = source_dir
    if build_dir:
        overrides["build_dir"] = build_dir
    if ctx.obj.get("verbose"):
        overrides["verbose"] = True
    if overrides:
        config = ExternalTestConfig.model_validate({**config.model_dump(), **overrides})

    failures: list[str] = []
    outcome = ExternalTestRunner(config, reporter=failures.append).run(suite, test)

    if outcome.passed:
        console.print(f"[green]✓[/green] {escape(outcome.name)} passed")
        return

    for message in failures:
        console.print(f"[red]✗[/red] {escape(message)}")
    if outcome.workspace:
        console.print(f"[dim]Workspace: {escape(outcome.workspace)}[/dim]")
    sys.exit(1)


@main.command("show-config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the resolved configuration and the environment given to scripts."""
    from externaltest.core.environment import launch_environment

    config = _load_config(ctx.obj.get("config_path"))

    table = Table(title="External Test Configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value")

    for key, value in config.model_dump().items():
        table.add_row(key, str(value))
    for key, value in launch_environment(config).items():
        table.add_row(key, value, style="dim")

    console.print(table)


if __name__ == "__main__":
    main()
