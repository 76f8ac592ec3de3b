"""Click CLI with affected and graph subcommands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from selective_testing import __version__
from selective_testing.errors import SelectiveTestingError
from selective_testing.graph.render import render_files, render_graph
from selective_testing.overrides import find_default_config, load_config
from selective_testing.pipeline import RunConfig, parse_workspace, run_selective_testing

_WORKSPACE = click.Path(exists=True, path_type=Path)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="-v for progress, -vv for debug output")
@click.pass_context
def cli(ctx: click.Context, verbose: int):
    """selective-testing: run only the tests affected by a change."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = {"verbose": verbose}


@cli.command()
@click.argument("workspace", type=_WORKSPACE, default=".")
@click.option("--base-branch", "-b", help="Branch to diff against (default: main)")
@click.option("--changed", "changed_files", multiple=True, help="Changed file; repeat to skip git entirely")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Override config (YAML)")
@click.option("--test-plan", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="JSON test plan to rewrite")
@click.option("--render", is_flag=True, help="Also print the dependency graph")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--strict", is_flag=True, help="Fail when any project or package cannot be loaded")
@click.option("--workers", type=click.IntRange(min=1), help="Discovery worker threads")
@click.pass_context
def affected(
    ctx: click.Context,
    workspace: Path,
    base_branch: str | None,
    changed_files: tuple[str, ...],
    config_file: Path | None,
    test_plan: Path | None,
    render: bool,
    as_json: bool,
    strict: bool,
    workers: int | None,
):
    """List the targets affected by the changes in WORKSPACE."""
    config = RunConfig(
        workspace=workspace,
        base_branch=base_branch,
        changed_files=list(changed_files) if changed_files else None,
        config_file=config_file,
        test_plan=test_plan,
        strict=strict,
        max_workers=workers,
    )

    def progress(stage: str):
        if ctx.obj["verbose"]:
            click.echo(f"  {stage}...", err=True)

    try:
        result = run_selective_testing(config, progress=progress)
    except SelectiveTestingError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if render:
        click.echo(render_graph(result.info.dependency_structure))
        click.echo()

    if not result.affected:
        click.echo("No affected targets.", err=True)
    for target in result.sorted_affected():
        click.echo(target.simple_description)

    if result.enabled_tests is not None:
        click.echo(
            f"Enabled {len(result.enabled_tests)} test target(s) in {config.test_plan or 'test plan'}",
            err=True,
        )


@cli.command()
@click.argument("workspace", type=_WORKSPACE, default=".")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Override config (YAML)")
@click.option("--files/--no-files", default=True, help="List the files each target owns")
def graph(workspace: Path, config_file: Path | None, files: bool):
    """Print the dependency graph of WORKSPACE."""
    directory = workspace if workspace.is_dir() else workspace.parent
    path = config_file or find_default_config(directory)

    try:
        overrides = load_config(path) if path else None
        assembly = parse_workspace(workspace, overrides)
    except SelectiveTestingError as e:
        raise click.ClickException(str(e))

    click.echo(render_graph(assembly.info.dependency_structure))
    if files:
        click.echo()
        click.echo(render_files(assembly.info))


def main():
    cli()


if __name__ == "__main__":
    main()
