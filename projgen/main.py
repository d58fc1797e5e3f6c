"""
projgen — CLI entrypoint.

Usage:
    projgen --help
    projgen plan --output target/projects
    projgen generate --output target/projects --definition demo --config-set db
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from projgen import __version__
from projgen.core.models.activation import DEFAULT_COMMAND_TIMEOUT, ActivationPolicy
from projgen.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="projgen")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to projgen.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """projgen — generate skeleton projects from descriptors."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(level=resolve_level(debug=debug, verbose=verbose, quiet=quiet))


def _selection_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by ``plan`` and ``generate``."""
    options = [
        click.option(
            "--output", "-o", "output",
            type=click.Path(file_okay=False), default="generated-projects",
            show_default=True, help="Directory generated projects are written to.",
        ),
        click.option(
            "--definition", "-d", "definitions", multiple=True,
            help="Active definition id or regular expression (repeatable).",
        ),
        click.option(
            "--structure", "-s", "structures", multiple=True,
            help="Active structure id or regular expression (repeatable).",
        ),
        click.option(
            "--config-set", "config_sets", multiple=True,
            help="Active config set id (repeatable).",
        ),
        click.option(
            "--empty-activates",
            type=click.Choice([p.value for p in ActivationPolicy]),
            default=ActivationPolicy.ALL.value, show_default=True,
            help="What no --definition/--structure selects.",
        ),
        click.option("--jbang-executable", default=None, help="Path to the jbang launcher."),
        click.option(
            "--maven-settings", type=click.Path(dir_okay=False), default=None,
            help="Maven user settings file for archetype generation.",
        ),
        click.option(
            "--local-repository", type=click.Path(file_okay=False), default=None,
            help="Maven local repository for archetype generation.",
        ),
        click.option(
            "--timeout", type=float, default=DEFAULT_COMMAND_TIMEOUT, show_default=True,
            help="Seconds each generation command may run.",
        ),
        click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _run(ctx: click.Context, dry_run: bool, **kwargs: Any) -> None:
    from projgen.core.use_cases.generate import generate

    as_json = kwargs.pop("as_json")
    maven_settings = kwargs.pop("maven_settings")
    local_repository = kwargs.pop("local_repository")

    result = generate(
        output_directory=Path(kwargs["output"]),
        config_path=ctx.obj.get("config_path"),
        definitions=list(kwargs["definitions"]),
        structures=list(kwargs["structures"]),
        config_sets=list(kwargs["config_sets"]),
        policy=ActivationPolicy(kwargs["empty_activates"]),
        jbang=kwargs["jbang_executable"],
        maven_settings=Path(maven_settings) if maven_settings else None,
        local_repository=Path(local_repository) if local_repository else None,
        timeout=kwargs["timeout"],
        dry_run=dry_run,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    quiet = ctx.obj.get("quiet", False)
    label = "Planned" if dry_run else "Generated"
    if not quiet:
        click.secho(f"\n📦 {label} {len(result.planned)} project(s)", fg="cyan", bold=True)
    for project in result.planned:
        marker = "•" if dry_run else "✓"
        click.secho(f"   {marker} {project.definition_id} × {project.structure_id}", fg="green", nl=False)
        click.echo(f"  → {project.project_dir}")
        if dry_run or ctx.obj.get("verbose"):
            click.echo(f"     │ {project.command}")
    click.echo()


@cli.command()
@_selection_options
@click.pass_context
def plan(ctx: click.Context, **kwargs: Any) -> None:
    """Show the active pairs and their commands without running them."""
    _run(ctx, dry_run=True, **kwargs)


@cli.command()
@_selection_options
@click.pass_context
def generate(ctx: click.Context, **kwargs: Any) -> None:
    """Generate and patch a project for every active pair.

    Examples:

        projgen generate -o target/projects

        projgen generate -d demo -s 'quarkus-.*' --config-set postgres
    """
    _run(ctx, dry_run=False, **kwargs)


if __name__ == "__main__":
    cli()
