"""``oasmodel convert`` -- read a document and write it for another version."""

from __future__ import annotations

from typing import Optional

import typer

from oasmodel.commands import command_errors
from oasmodel.config import resolve_config
from oasmodel.loader import load_text
from oasmodel.output import debug, get_output, success
from oasmodel.readers import read_document
from oasmodel.settings import OpenApiFormat
from oasmodel.writers import serialize_as_json, serialize_as_yaml


def convert_command(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="File path, http(s) URL, or '-' for stdin."),
    to: Optional[str] = typer.Option(
        None, "--to", "-t", help="Target version: 2.0, 3.0 or 3.1."
    ),
    format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output text format: json or yaml."
    ),
    compact: bool = typer.Option(
        False, "--compact", help="Write JSON without whitespace."
    ),
) -> None:
    """Convert an API description to another spec version.

    Defaults come from the configuration chain (global config, project
    ``oasmodel.json``, ``OASMODEL_*`` environment variables); flags win.

    Example::

        oasmodel convert petstore.yaml --to 2.0
        cat api.json | oasmodel convert - --to 3.1 --format yaml -o api.yaml
    """
    with command_errors():
        config = resolve_config(cli_target_version=to, cli_format=format)
        text = load_text(source)
        document = read_document(text)
        debug(f"Writing {config.target_version.value} as {config.format.value}")

        if config.format == OpenApiFormat.YAML:
            result = serialize_as_yaml(document, config.target_version)
        else:
            indented = config.indented and not compact
            result = serialize_as_json(document, config.target_version, indented=indented)

    output = get_output()
    output.print_document(result, config.format.value)
    output_file = (ctx.obj or {}).get("output_file")
    if output_file:
        success(f"Wrote {output_file}")
