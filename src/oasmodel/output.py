"""Console output for the ``oasmodel`` command line.

Converted documents and inspection tables go to stdout (or the ``-o``
file) and nothing else does, so ``oasmodel convert a.yaml | jq`` always
sees clean JSON. Status lines, warnings, errors and the library's own log
records (translation losses when writing an older version, for instance)
go to stderr.

How stdout is rendered depends on the :class:`DisplayMode`: Rich tables
and syntax highlighting on an interactive terminal, tab-separated text when
piped, JSON records with ``--json``. ``NO_COLOR``, ``TERM=dumb`` and
``--no-color`` turn colour off everywhere.

The CLI callback builds one :class:`OutputManager` per invocation and
installs it with :func:`set_output`; commands reach it via
:func:`get_output` or the ``info``/``success``/``error``/``debug`` helpers.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

_LIBRARY_LOGGER = "oasmodel"


class DisplayMode(str, Enum):
    """How tables and documents are rendered on stdout.

    ``AUTO`` becomes ``RICH`` on a colour-capable terminal and ``PLAIN``
    everywhere else.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Stream routing and rendering for one CLI invocation.

    Args:
        mode: Rendering for stdout; ``AUTO`` is resolved immediately.
        no_color: Strip colour and markup from both streams.
        quiet: Drop informational stderr lines and library warnings.
        verbose: Show debug lines and library debug records.
        output_file: Path that receives documents and tables instead of
            stdout.
    """

    def __init__(
        self,
        mode: DisplayMode = DisplayMode.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._colorless = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file

        if mode == DisplayMode.AUTO:
            mode = DisplayMode.RICH if _is_tty() and not self._colorless else DisplayMode.PLAIN
        self._mode = mode

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._colorless,
            force_terminal=mode == DisplayMode.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._colorless, stderr=True)

    @property
    def mode(self) -> DisplayMode:
        return self._mode

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Emit *text* unchanged, newline-terminated, to the output file or stdout."""
        terminated = text if text.endswith("\n") else text + "\n"
        if self._output_file:
            with open(self._output_file, "w", encoding="utf-8") as fh:
                fh.write(terminated)
        else:
            sys.stdout.write(terminated)
            sys.stdout.flush()

    def print_document(self, text: str, language: str) -> None:
        """Emit serialized document text.

        Only a Rich terminal gets highlighting; files and pipes receive the
        serializer's output byte for byte.
        """
        if self._mode == DisplayMode.RICH and not self._output_file:
            self._stdout.print(Syntax(text, language, theme="monokai", word_wrap=True))
            return
        self.print_data(text)

    def print_table(self, headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
        if self._mode == DisplayMode.JSON:
            self.print_data(json.dumps([dict(zip(headers, row)) for row in rows], indent=2, ensure_ascii=False))
            return
        if self._mode == DisplayMode.PLAIN:
            self.print_data("\n".join("\t".join(line) for line in [headers, *rows]))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def _diagnose(self, message: str, label: str = "", style: Optional[str] = None) -> None:
        if self._colorless:
            sys.stderr.write(f"{label}{message}\n")
            sys.stderr.flush()
        elif style and label:
            self._stderr.print(f"[{style}]{escape(label.rstrip())}[/{style}] {escape(message)}")
        elif style:
            self._stderr.print(f"[{style}]{escape(message)}[/{style}]")
        else:
            self._stderr.print(escape(message))

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnose(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnose(message, style="green")

    def warning(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._diagnose(message, "Warning: ", "yellow")

    def error(self, message: str) -> None:
        self._diagnose(message, "Error: ", "bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnose(message, "[debug] ", "dim")

    def install_log_handler(self) -> logging.Handler:
        """Send ``oasmodel`` log records to stderr at the verbosity chosen on the command line.

        A handler installed by an earlier invocation in the same process
        (the test runner, for one) is replaced rather than duplicated.
        """
        if self._verbose:
            level = logging.DEBUG
        elif self._quiet:
            level = logging.ERROR
        else:
            level = logging.WARNING

        handler = RichHandler(console=self._stderr, show_time=False, show_path=self._verbose, markup=False)
        handler.setLevel(level)

        library_logger = logging.getLogger(_LIBRARY_LOGGER)
        for stale in [h for h in library_logger.handlers if isinstance(h, RichHandler)]:
            library_logger.removeHandler(stale)
        library_logger.addHandler(handler)
        library_logger.setLevel(level)
        return handler


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    # NO_COLOR disables colour whatever its value, even empty.
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager so the next :func:`get_output` builds a fresh one."""
    global _output
    _output = None


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)


def format_any(data: Any) -> str:
    """Table cell text; a missing value shows as ``-``."""
    return "-" if data is None else str(data)
