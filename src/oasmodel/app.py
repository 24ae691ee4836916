"""The ``oasmodel`` command line.

``oasmodel convert`` rewrites a document for another spec version or text
format and ``oasmodel inspect`` summarises one. The root callback sets up
console output for the invocation; :func:`main` is the console script and
turns any :class:`~oasmodel.exceptions.OasModelError` that escapes a
command into that error's exit status.
"""

from __future__ import annotations

import signal
import sys
from typing import Optional

import typer

from oasmodel import __version__
from oasmodel.exit_codes import EXIT_GENERIC_FAILURE

_INTERRUPTED = 130

app = typer.Typer(
    name="oasmodel",
    help="Read, convert and inspect Swagger 2.0 / OpenAPI 3.0 / 3.1 documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"oasmodel {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Print the oasmodel version."
    ),
    json_output: bool = typer.Option(False, "--json", help="Print tables as JSON records."),
    plain_output: bool = typer.Option(False, "--plain", help="Print tables as tab-separated text."),
    no_color: bool = typer.Option(False, "--no-color", help="Never colour output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide status lines and translation warnings."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show reader and writer debug records."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write the document or table to this file instead of stdout."
    ),
) -> None:
    from oasmodel.output import DisplayMode, OutputManager, set_output

    if json_output:
        mode = DisplayMode.JSON
    elif plain_output:
        mode = DisplayMode.PLAIN
    else:
        mode = DisplayMode.AUTO

    output = OutputManager(mode=mode, no_color=no_color, quiet=quiet, verbose=verbose, output_file=output_file)
    set_output(output)
    output.install_log_handler()

    ctx.ensure_object(dict)
    ctx.obj["output_file"] = output_file


def _register_commands() -> None:
    from oasmodel.commands.convert import convert_command
    from oasmodel.commands.inspect import inspect_command

    if not app.registered_commands:
        app.command("convert")(convert_command)
        app.command("inspect")(inspect_command)


_register_commands()


def _exit_on_interrupt(signum, frame) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(_INTERRUPTED)


def main() -> None:
    """Console-script entry point; always ends in :class:`SystemExit`."""
    signal.signal(signal.SIGINT, _exit_on_interrupt)
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        _exit_on_interrupt(signal.SIGINT, None)
    except Exception as exc:
        from oasmodel.exceptions import OasModelError
        from oasmodel.output import error

        if not isinstance(exc, OasModelError):
            error(f"Unexpected error: {exc}")
            sys.exit(EXIT_GENERIC_FAILURE)
        error(str(exc))
        sys.exit(exc.exit_code)
