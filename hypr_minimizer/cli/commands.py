"""
hypr-minimizer CLI

Usage:
    hypr-minimizer minimize
    hypr-minimizer restore [ADDRESS]
    hypr-minimizer restore-last
    hypr-minimizer restore-all
    hypr-minimizer show
    hypr-minimizer list [--json]

Exit codes:
    0 - Success
    1 - Nothing to do (no focused window, nothing minimized, picker cancelled)
    2 - Error (Hyprland rejected a command, state or picker failure)
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import click
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..core.config import fallback_config, load_config
from ..core.engine import MinimizeEngine, OperationResult, Outcome
from ..core.errors import ConfigError
from . import displays
from .logging_config import log_failure, setup_logging


EXIT_SUCCESS = 0
EXIT_NOTHING_TO_DO = 1
EXIT_ERROR = 2

logger = logging.getLogger(__name__)


def exit_code_for(outcome: Outcome) -> int:
    """Map an engine outcome to a stable process exit code."""
    if outcome is Outcome.SUCCESS:
        return EXIT_SUCCESS
    if outcome.is_benign:
        return EXIT_NOTHING_TO_DO
    return EXIT_ERROR


def _get_engine(ctx: click.Context) -> MinimizeEngine:
    """Engine for this invocation, built from configuration on first use."""
    engine = ctx.obj.get("engine")
    if engine is not None:
        return engine

    config_error = ctx.obj.get("config_error")
    if config_error is not None:
        raise config_error

    engine = MinimizeEngine.from_config(ctx.obj["config"])
    ctx.obj["engine"] = engine
    return engine


def _report(operation: str, result: OperationResult) -> int:
    """Print the result, write diagnostics and return the exit code."""
    for failure in result.failures:
        log_failure(operation, failure)

    code = exit_code_for(result.outcome)
    if code == EXIT_SUCCESS:
        if result.message:
            Console().print(f"[green]✓[/green] {escape(result.message)}")
    elif code == EXIT_NOTHING_TO_DO:
        Console(stderr=True).print(f"[yellow]{escape(result.message)}[/yellow]")
    else:
        err = Console(stderr=True)
        err.print(f"[red]✗ Error:[/red] {escape(result.message)}")
        for failure in result.failures:
            err.print(f"  [dim]{escape(failure.diagnostic())}[/dim]")
    return code


def _run(ctx: click.Context, operation: str, action: Callable[[MinimizeEngine], OperationResult]) -> None:
    """Run an engine operation and exit with its mapped code."""
    try:
        engine = _get_engine(ctx)
        result = action(engine)
    except ConfigError as e:
        log_failure(operation, e)
        Console(stderr=True).print(f"[red]✗ Error:[/red] {escape(str(e))}")
        sys.exit(EXIT_ERROR)
    except Exception as e:
        logger.exception(f"{operation}: unexpected error: {e}")
        Console(stderr=True).print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        sys.exit(EXIT_ERROR)

    sys.exit(_report(operation, result))


@click.group()
@click.version_option(__version__, prog_name="hypr-minimizer")
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging (INFO level)')
@click.option('--debug', is_flag=True, help='Enable debug logging (DEBUG level, includes verbose)')
@click.option(
    '--config', 'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file (default: $XDG_CONFIG_HOME/hypr-minimizer/config.json)',
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool, config_path: Optional[Path]):
    """Minimize and restore Hyprland windows through a special workspace."""
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        ctx.obj["config_error"] = e
        config = fallback_config()
    ctx.obj.setdefault("config", config)

    setup_logging(verbose=verbose, debug=debug, log_file=ctx.obj["config"].log_file)


@cli.command()
@click.pass_context
def minimize(ctx: click.Context):
    """Hide the focused window in the special workspace."""
    _run(ctx, "minimize", lambda engine: engine.minimize())


@cli.command()
@click.argument('address', required=False)
@click.pass_context
def restore(ctx: click.Context, address: Optional[str]):
    """
    Restore a minimized window.

    Without ADDRESS a picker lists the minimized windows.
    """
    if address:
        _run(ctx, "restore", lambda engine: engine.restore(address))
    else:
        _run(ctx, "restore", lambda engine: engine.restore_interactive())


@cli.command('restore-last')
@click.pass_context
def restore_last(ctx: click.Context):
    """Restore the most recently minimized window."""
    _run(ctx, "restore-last", lambda engine: engine.restore_last())


@cli.command('restore-all')
@click.pass_context
def restore_all(ctx: click.Context):
    """Restore every minimized window."""
    _run(ctx, "restore-all", lambda engine: engine.restore_all())


@cli.command()
@click.pass_context
def show(ctx: click.Context):
    """
    Print Waybar status JSON.

    Always exits 0 and never talks to Hyprland. An invalid config file
    falls back to the default state location.
    """
    try:
        engine = ctx.obj.get("engine") or MinimizeEngine.from_config(ctx.obj["config"])
        result = engine.status()
        payload = result.status.to_json()
    except Exception as e:
        logger.exception(f"show: {e}")
        payload = '{"text": "", "tooltip": "hypr-minimizer error", "class": "error", "alt": "error", "count": 0}'
    click.echo(payload)
    sys.exit(EXIT_SUCCESS)


@cli.command('list')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON instead of a formatted table')
@click.pass_context
def list_windows(ctx: click.Context, output_json: bool):
    """List minimized windows."""
    console = Console()

    try:
        windows = _get_engine(ctx).status().windows
    except ConfigError as e:
        Console(stderr=True).print(f"[red]✗ Error:[/red] {escape(str(e))}")
        sys.exit(EXIT_ERROR)

    if output_json:
        click.echo(displays.format_minimized_json(windows))
    else:
        displays.display_minimized(windows, console)
    sys.exit(EXIT_SUCCESS)


def main() -> None:
    """Console script entry point."""
    cli(prog_name="hypr-minimizer")


if __name__ == "__main__":
    main()
