"""Main CLI application entry point.

Defines the Typer application. Run without arguments, homereap starts a
detached pass and returns; the detached child is the same program started
with the sentinel argument.
"""

from typing import Annotated

import typer

from homereap import __version__
from homereap.core.background import CHILD_SENTINEL, launch_detached
from homereap.core.config import ConfigError, ReaperConfig, load_config
from homereap.core.coordinator import RunCoordinator
from homereap.core.logs import configure_logging
from homereap.core.paths import ensure_log_dir, new_log_path
from homereap.models.outcome import RunSummary
from homereap.utils.formatting import (
    console,
    create_outcome_table,
    format_outcome_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    name="homereap",
    help="Reclaim encrypted home volumes of logged-out users.",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"homereap version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    sentinel: Annotated[
        str | None,
        typer.Argument(
            help="Reserved for the detached child; leave empty.",
            show_default=False,
        ),
    ] = None,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Tear down encrypted home mounts of users who have logged out.

    Starts one pass in the background and writes its log to a new,
    timestamped file in the log directory.
    """
    if sentinel is not None and sentinel != CHILD_SENTINEL:
        raise typer.BadParameter(f"unexpected argument {sentinel!r}", param_hint="SENTINEL")

    try:
        config = load_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if sentinel is None:
        _start_detached(config)
        return

    _run_pass(config)


def _start_detached(config: ReaperConfig) -> None:
    """Launch the detached child and report where it logs."""
    try:
        log_dir = ensure_log_dir(config.log_path)
        log_path = new_log_path(log_dir)
        pid = launch_detached(log_path)
    except (OSError, RuntimeError) as e:
        print_error(f"Could not start reclaim pass: {e}")
        raise typer.Exit(code=1) from e

    print_info(f"Reclaim pass started in the background (pid {pid}).")
    print_info(f"Log: {log_path}")


def _run_pass(config: ReaperConfig) -> None:
    """Run one pass in the foreground and print the outcomes."""
    configure_logging(config.log_level)
    summary = RunCoordinator(config).run()
    _print_summary(summary)


def _print_summary(summary: RunSummary) -> None:
    """Display the result of a pass."""
    if summary.environment_error:
        print_warning(f"Pass ended early: {summary.environment_error}")
        return

    if summary.nothing_to_do:
        print_info(
            f"No candidate volumes found ({len(summary.rejections)} skipped). Nothing to do."
        )
        return

    table = create_outcome_table()
    for outcome in summary.outcomes:
        table.add_row(*format_outcome_row(outcome))
    console.print(table)

    failed = summary.failed
    if failed:
        print_warning(
            f"{len(failed)} of {len(summary.outcomes)} volume(s) are still mounted."
        )
    else:
        print_success(f"All {len(summary.outcomes)} volume(s) reclaimed.")


if __name__ == "__main__":
    app()
