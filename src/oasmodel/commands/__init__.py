"""Built-in CLI sub-commands for oasmodel.

* :mod:`~oasmodel.commands.convert` -- rewrite a document in another
  spec version or text format.
* :mod:`~oasmodel.commands.inspect` -- summarise a document's contents.

Each module exports a plain callback registered directly on the root app.
"""

from __future__ import annotations

import contextlib
from typing import Iterator

import typer

from oasmodel.exceptions import OasModelError
from oasmodel.output import error


@contextlib.contextmanager
def command_errors() -> Iterator[None]:
    """Report an :class:`OasModelError` on stderr and exit with its code."""
    try:
        yield
    except OasModelError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
