"""``oasmodel inspect`` -- summarise what a document contains.

Read-only: loads the document, reads it into the model and prints either
an overview (version, title, counts per component registry) or, with
``--paths``, one row per operation.
"""

from __future__ import annotations

from typing import Any

import typer

from oasmodel.commands import command_errors
from oasmodel.loader import load_text
from oasmodel.models import OpenApiDocument
from oasmodel.output import format_any, get_output, info
from oasmodel.readers import read_document
from oasmodel.readers.parse_node import MapNode, compose

_REGISTRIES = (
    ("schemas", "Schemas"),
    ("responses", "Responses"),
    ("parameters", "Parameters"),
    ("examples", "Examples"),
    ("request_bodies", "Request bodies"),
    ("headers", "Headers"),
    ("security_schemes", "Security schemes"),
    ("links", "Links"),
    ("callbacks", "Callbacks"),
    ("path_items", "Path items"),
)


def _declared_version(text: str) -> str:
    root = compose(text)
    if isinstance(root, MapNode):
        return root.scalar_value("openapi") or root.scalar_value("swagger") or "-"
    return "-"


def _operation_count(document: OpenApiDocument) -> int:
    return sum(len(item.operations or {}) for item in (document.paths or {}).values())


def _overview(document: OpenApiDocument, declared: str) -> list[list[str]]:
    info_ = document.info
    rows: list[list[Any]] = [
        ["Spec version", declared],
        ["Title", info_.title if info_ else None],
        ["API version", info_.version if info_ else None],
        ["Servers", len(document.servers or [])],
        ["Paths", len(document.paths or {})],
        ["Operations", _operation_count(document)],
        ["Webhooks", len(document.webhooks or {})],
        ["Tags", len(document.tags or [])],
    ]
    components = document.components
    for attribute, label in _REGISTRIES:
        registry = getattr(components, attribute) if components is not None else None
        rows.append([label, len(registry or {})])
    return [[label, format_any(value)] for label, value in rows]


def _operations(document: OpenApiDocument) -> list[list[str]]:
    rows = []
    for path, item in (document.paths or {}).items():
        for operation_type, operation in (item.operations or {}).items():
            rows.append([
                operation_type.value.upper(),
                path,
                operation.operation_id or "-",
                operation.summary or "-",
                "Yes" if operation.deprecated else "",
            ])
    return rows


def inspect_command(
    source: str = typer.Argument(..., help="File path, http(s) URL, or '-' for stdin."),
    paths: bool = typer.Option(False, "--paths", help="List operations instead of the overview."),
) -> None:
    """Show a document's version, title and contents.

    Example::

        oasmodel inspect petstore.yaml
        oasmodel --json inspect https://example.com/openapi.json --paths
    """
    with command_errors():
        text = load_text(source)
        document = read_document(text)
    output = get_output()

    if paths:
        rows = _operations(document)
        if not rows:
            info("No operations defined in this document.")
            return
        output.print_table(
            ["Method", "Path", "Operation ID", "Summary", "Deprecated"],
            rows,
            title=f"Operations ({len(rows)})",
        )
        return

    title = document.info.title if document.info and document.info.title else "Document"
    output.print_table(["Field", "Value"], _overview(document, _declared_version(text)), title=title)
