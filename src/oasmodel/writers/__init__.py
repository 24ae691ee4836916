"""Writers -- turn document elements into JSON or YAML text.

Typical usage::

    from oasmodel.writers import serialize_as_json
    from oasmodel.versions import SpecVersion

    text = serialize_as_json(document, SpecVersion.V2)

Sub-modules:

* :mod:`~oasmodel.writers.base` -- the :class:`OpenApiWriter` abstraction
  and the absent-vs-empty property helpers.
* :mod:`~oasmodel.writers.json_writer` -- indented / compact JSON.
* :mod:`~oasmodel.writers.yaml_writer` -- block YAML via PyYAML events.
"""

from __future__ import annotations

import io
from typing import Any, Optional, TextIO

from oasmodel.exceptions import InvalidArgumentError
from oasmodel.settings import OpenApiFormat, WriterSettings
from oasmodel.versions import SpecVersion
from oasmodel.writers.base import OpenApiWriter
from oasmodel.writers.json_writer import JsonWriter
from oasmodel.writers.yaml_writer import YamlWriter

__all__ = [
    "OpenApiWriter",
    "JsonWriter",
    "YamlWriter",
    "create_writer",
    "serialize",
    "serialize_as_json",
    "serialize_as_yaml",
]


def create_writer(stream: TextIO, settings: Optional[WriterSettings] = None) -> OpenApiWriter:
    """Build the writer backend selected by *settings* around *stream*."""
    settings = settings or WriterSettings()
    if settings.format == OpenApiFormat.YAML:
        return YamlWriter(stream, indent=settings.indent)
    return JsonWriter(stream, indented=settings.indented, indent=settings.indent)


def serialize(
    element: Any,
    stream: TextIO,
    version: SpecVersion,
    settings: Optional[WriterSettings] = None,
) -> None:
    """Serialize *element* for *version* into *stream*.

    Raises:
        InvalidArgumentError: If *element* or *stream* is ``None``, or
            *version* is not a supported spec version. Nothing is written in
            that case.
    """
    if element is None:
        raise InvalidArgumentError("element")
    if stream is None:
        raise InvalidArgumentError("stream")
    try:
        version = SpecVersion(version)
    except ValueError as exc:
        raise InvalidArgumentError("version", f"Unknown spec version: {version!r}") from exc
    writer = create_writer(stream, settings)
    element.serialize(writer, version)
    writer.flush()


def serialize_as_json(element: Any, version: SpecVersion, indented: bool = True) -> str:
    """Return *element* serialized as JSON text for *version*."""
    buffer = io.StringIO()
    serialize(element, buffer, version, WriterSettings(format=OpenApiFormat.JSON, indented=indented))
    return buffer.getvalue()


def serialize_as_yaml(element: Any, version: SpecVersion) -> str:
    """Return *element* serialized as YAML text for *version*."""
    buffer = io.StringIO()
    serialize(element, buffer, version, WriterSettings(format=OpenApiFormat.YAML))
    return buffer.getvalue()
