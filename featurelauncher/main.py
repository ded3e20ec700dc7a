"""
Feature Launcher — CLI entrypoint.

Usage:
    python -m featurelauncher.main --help
    python -m featurelauncher.main -f app.json plan
    python -m featurelauncher.main -f org.example:app:slingosgifeature:1.0 artifacts
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from featurelauncher import __version__
from featurelauncher.core.config.loader import (
    ConfigError,
    LauncherConfig,
    StartupMode,
    load_launcher_config,
)
from featurelauncher.core.observability.logging_config import setup_logging


def _parse_pairs(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for value in values:
        key, sep, val = value.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {value!r}")
        pairs[key] = val
    return pairs


@click.group()
@click.version_option(version=__version__, prog_name="featurelauncher")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to launcher.yml (default: auto-detect).",
)
@click.option("--feature", "-f", "feature", default=None,
              help="Application feature: file path, URL or coordinate.")
@click.option("--home", "-p", "home", type=click.Path(file_okay=False), default=None,
              help="Launcher home directory.")
@click.option("--cache", "-c", "cache", type=click.Path(file_okay=False), default=None,
              help="Artifact cache directory (default: <home>/cache).")
@click.option("--repository", "-u", "repositories", multiple=True,
              help="Repository URL or directory (repeatable, replaces configured ones).")
@click.option("--var", "-V", "variables", multiple=True, callback=_parse_pairs,
              help="Variable override key=value (repeatable).")
@click.option("--property", "-D", "properties", multiple=True, callback=_parse_pairs,
              help="Framework property key=value (repeatable, wins over the feature).")
@click.option("--startup-mode", type=click.Choice([m.value for m in StartupMode]), default=None,
              help="pure installs bundles only; install also allows extension artifacts.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    feature: str | None,
    home: str | None,
    cache: str | None,
    repositories: tuple[str, ...],
    variables: dict[str, str],
    properties: dict[str, str],
    startup_mode: str | None,
) -> None:
    """Feature Launcher — turn a feature into an installation plan."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = None
    setup_logging(level=level)

    try:
        config = load_launcher_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    updates: dict = {
        "variables": {**config.variables, **variables},
        "framework_properties": {**config.framework_properties, **properties},
    }
    if feature:
        updates["application_file"] = feature
    if home:
        updates["home_directory"] = Path(home)
    if cache:
        updates["cache_directory"] = Path(cache)
    if repositories:
        updates["repository_urls"] = list(repositories)
    if startup_mode:
        updates["startup_mode"] = StartupMode(startup_mode)

    ctx.obj["config"] = config.model_copy(update=updates)


def _fail(error: str) -> None:
    click.secho(f"❌ {error}", fg="red", err=True)
    sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, as_json: bool) -> None:
    """Prepare and print the installation plan."""
    from featurelauncher.core.use_cases.launch import build_plan

    config: LauncherConfig = ctx.obj["config"]
    result = build_plan(config)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        _fail(result.error)

    assert result.feature is not None and result.plan is not None
    installation = result.plan

    if not ctx.obj.get("quiet"):
        click.secho(f"\n🚀 {result.feature.id}", fg="cyan", bold=True)
        if result.feature.title:
            click.echo(f"   {result.feature.title}")
        click.echo(f"   mode: {config.startup_mode}")
        click.echo()

    click.secho(f"   Bundles: {installation.bundle_count}", fg="white", bold=True)
    for order, files in installation.bundles_by_start_order():
        click.echo(f"     [{order}]")
        for f in files:
            click.echo(f"       • {f}")

    if installation.installable_artifacts:
        click.echo()
        click.secho(f"   Artifacts: {len(installation.installable_artifacts)}", fg="white", bold=True)
        for f in installation.installable_artifacts:
            click.echo(f"     • {f}")

    if installation.configurations:
        click.echo()
        click.secho(f"   Configurations: {len(installation.configurations)}", fg="white", bold=True)
        for cfg in installation.configurations:
            factory = f" ({cfg.factory_pid})" if cfg.factory_pid else ""
            click.echo(f"     • {cfg.name}{factory}")

    if installation.framework_properties:
        click.echo()
        click.secho("   Framework properties:", fg="white", bold=True)
        for key, value in installation.framework_properties.items():
            click.echo(f"     {key}={value}")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def artifacts(ctx: click.Context, as_json: bool) -> None:
    """Resolve every referenced artifact (warms the cache)."""
    from featurelauncher.core.use_cases.launch import map_artifacts

    result = map_artifacts(ctx.obj["config"])

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        _fail(result.error)

    for aid, path in result.artifacts.items():
        click.echo(f"{aid}  → {path}")
    if not ctx.obj.get("quiet"):
        click.secho(f"✅ {len(result.artifacts)} artifacts resolved", fg="green")


@cli.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """Print the loaded feature with variables resolved."""
    from featurelauncher.core.use_cases.launch import load_feature

    result = load_feature(ctx.obj["config"])
    if result.error:
        _fail(result.error)
    click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
