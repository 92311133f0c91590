"""Command-line entry point for openapi-flow.

``openapi-flow`` has four sub-commands:

* ``validate`` runs the schema, graph and quality checks on one document,
* ``lint`` runs the switchable lint rules from the config file,
* ``graph`` prints the global state graph as Mermaid or JSON,
* ``doctor`` checks the installation and the config file.

:func:`main` is the console script.  A :class:`~openapi_flow.exceptions.FlowError`
escaping a command ends the run with that error's exit code; any other
exception is recorded in a crash log under :func:`~openapi_flow.config.get_data_dir`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from openapi_flow import __version__
from openapi_flow.commands.doctor import doctor_command
from openapi_flow.commands.graph import graph_command
from openapi_flow.commands.lint import lint_command
from openapi_flow.commands.validate import validate_command
from openapi_flow.config import get_data_dir
from openapi_flow.exceptions import FlowError
from openapi_flow.exit_codes import EXIT_GENERIC_FAILURE
from openapi_flow.output import OutputManager, error, set_output

EXIT_CANCELLED = 130

app = typer.Typer(
    name="openapi-flow",
    help="Validate and visualise resource lifecycles declared in OpenAPI documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("validate")(validate_command)
app.command("lint")(lint_command)
app.command("graph")(graph_command)
app.command("doctor")(doctor_command)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"openapi-flow {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    plain: bool = typer.Option(
        False, "--plain", help="Unstyled tables and JSON, even on a terminal."
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colour."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only print the report, warnings and errors."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Print debug traces to stderr."
    ),
) -> None:
    """Install the output manager for this run."""
    set_output(
        OutputManager(
            plain=True if plain else None,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )


def _on_sigint(signum: int, frame: Any) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_CANCELLED)


def _install_sigint_handler() -> None:
    signal.signal(signal.SIGINT, _on_sigint)


def _write_crash_log() -> str:
    """Save the active traceback with the command line that caused it."""
    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    header = f"openapi-flow {__version__}\nargv: {' '.join(sys.argv)}\n\n"
    log_path.write_text(header + traceback.format_exc(), encoding="utf-8")
    return str(log_path)


def main() -> None:
    """Console-script entry point.

    Raises:
        SystemExit: Always; carries the command's exit code.
    """
    _install_sigint_handler()
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)
    except FlowError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
