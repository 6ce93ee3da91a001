"""quicksaver CLI entry point."""

from __future__ import annotations

import logging
import signal
from pathlib import Path

import click

from quicksaver import __version__

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path("quicksave.yaml")


def _load(ctx: click.Context):
    from quicksaver.config.loader import load_config

    try:
        return load_config(ctx.obj["config_path"])
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(), default=None, help="Config file path")
@click.option("--log-level", default=None, help="Log level (overrides VerboseLevel)")
@click.option("--json-logs", is_flag=True, help="JSON log output")
@click.pass_context
def main(
    ctx: click.Context,
    config: str | None,
    log_level: str | None,
    json_logs: bool,
) -> None:
    """quicksaver - keep rotating copies of Starfield quicksaves."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else DEFAULT_CONFIG
    ctx.obj["log_level"] = log_level
    ctx.obj["json_logs"] = json_logs


def _setup_logging(ctx: click.Context, verbose_level: int) -> None:
    from quicksaver.logging_config import level_for_verbosity, setup_logging

    level = ctx.obj["log_level"] or level_for_verbosity(verbose_level)
    setup_logging(level=level, json_output=ctx.obj["json_logs"])


@main.command()
@click.option("--once", is_flag=True, help="Run a single update immediately and exit")
@click.pass_context
def run(ctx: click.Context, once: bool) -> None:
    """Watch the save directory and rotate quicksaves."""
    from quicksaver.config.loader import write_default_config
    from quicksaver.focus.desktop import DesktopFocusTrigger
    from quicksaver.rotation.engine import RotationEngine
    from quicksaver.rotation.monitor import QuicksaveMonitor

    config_path = ctx.obj["config_path"]
    if not config_path.exists():
        click.echo(f"No settings found, writing defaults to {config_path.resolve()}")
        write_default_config(config_path)
    config = _load(ctx)
    _setup_logging(ctx, config.verbose_level)

    if not config.save_path.is_dir():
        raise click.ClickException(f"SaveDirectory {config.save_path} does not exist")

    for line in config.settings_lines():
        logger.info(line)

    focus = DesktopFocusTrigger(key=config.quicksave_key)
    engine = RotationEngine(config, focus)
    monitor = QuicksaveMonitor(engine, interval=config.update_interval)

    if once:
        result = monitor.tick()
        if result is None:
            raise click.ClickException(f"Could not read {config.save_path}")
        click.echo(result.summary())
        return

    previous = signal.signal(signal.SIGINT, lambda *_: monitor.stop())
    try:
        monitor.run()
    finally:
        signal.signal(signal.SIGINT, previous)


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show settings and the saves currently in the directory."""
    from quicksaver.saves.catalog import managed_saves, scan_directory
    from quicksaver.saves.selector import select_quicksave

    config = _load(ctx)

    click.echo(f"quicksaver v{__version__}")
    click.echo(f"Config: {ctx.obj['config_path']}")
    for line in config.settings_lines():
        click.echo(f"  {line}")

    if not config.save_path.is_dir():
        click.echo(f"\nSave directory {config.save_path} does not exist.")
        return

    entries = list(scan_directory(config.save_path))
    selection = select_quicksave(entries)
    if selection:
        click.echo(f"\nQuicksave: {selection.entry.name}")
    else:
        click.echo("\nNo quicksave found.")

    managed = managed_saves(entries)
    click.echo(f"\nManaged saves ({len(managed)}/{config.quicksave_count}):")
    for entry in managed:
        click.echo(f"  {entry.name}")


@main.command("init-config")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def init_config(ctx: click.Context, force: bool) -> None:
    """Write the default settings file."""
    from quicksaver.config.loader import write_default_config

    config_path = ctx.obj["config_path"]
    if write_default_config(config_path, force=force):
        click.echo(f"Wrote default settings to {config_path}")
    else:
        click.echo(f"{config_path} already exists (use --force to overwrite)")
