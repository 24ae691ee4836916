"""Swagger 2.0 inline-schema helpers shared by parameters, headers and the reader.

Non-body 2.0 parameters and 2.0 headers do not nest a schema: a fixed set
of JSON Schema keywords sits directly on the object, and array
serialization is controlled by ``collectionFormat`` instead of
``style``/``explode``.
"""

from __future__ import annotations

from typing import Optional

from oasmodel.schema import JsonSchema
from oasmodel.versions import SpecVersion
from oasmodel.writers.base import OpenApiWriter

SIMPLE_SCHEMA_KEYWORDS = (
    "type",
    "format",
    "items",
    "default",
    "maximum",
    "exclusiveMaximum",
    "minimum",
    "exclusiveMinimum",
    "maxLength",
    "minLength",
    "pattern",
    "maxItems",
    "minItems",
    "uniqueItems",
    "enum",
    "multipleOf",
)

# collectionFormat -> (style, explode)
_STYLES_BY_FORMAT = {
    "csv": ("form", False),
    "ssv": ("spaceDelimited", False),
    "pipes": ("pipeDelimited", False),
    "multi": ("form", True),
}


def collection_format_for(style: Optional[str], explode: Optional[bool]) -> Optional[str]:
    """Map a 3.x ``style``/``explode`` pair onto a 2.0 ``collectionFormat``."""
    if style is None:
        return None
    if style == "form":
        return "multi" if explode else "csv"
    if style == "spaceDelimited":
        return "ssv"
    if style == "pipeDelimited":
        return "pipes"
    if style == "simple":
        return "csv"
    return None


def style_for_collection_format(
    collection_format: str, location: Optional[str]
) -> tuple[Optional[str], Optional[bool]]:
    """Map a 2.0 ``collectionFormat`` onto a 3.x ``(style, explode)`` pair."""
    if collection_format == "csv" and location in ("path", "header"):
        return "simple", False
    return _STYLES_BY_FORMAT.get(collection_format, (None, None))


def write_simple_schema(
    writer: OpenApiWriter,
    schema: Optional[JsonSchema],
    collection_format: Optional[str] = None,
) -> None:
    """Write the 2.0 simple-type keywords of *schema* inline.

    Keywords keep the schema's own order; ``collectionFormat`` follows
    ``items`` (or ``type`` when there are no items).
    """
    data = schema.for_version(SpecVersion.V2) if schema is not None else {}
    if not isinstance(data, dict):
        data = {}
    pending = collection_format if data.get("type") == "array" else None
    anchor = "items" if "items" in data else "type"
    for keyword, value in data.items():
        if keyword not in SIMPLE_SCHEMA_KEYWORDS:
            continue
        writer.write_property_name(keyword)
        writer.write_embedded(value)
        if keyword == anchor and pending is not None:
            writer.write_property("collectionFormat", pending)
            pending = None
    if pending is not None:
        writer.write_property("collectionFormat", pending)
