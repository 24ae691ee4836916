"""Payload description: media types, encodings, examples and headers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import Field

from oasmodel.any import OpenApiAny
from oasmodel.elements import Extensible, Referenceable
from oasmodel.models._swagger2 import collection_format_for, write_simple_schema
from oasmodel.schema import JsonSchema
from oasmodel.versions import SpecVersion
from oasmodel.writers.base import OpenApiWriter

logger = logging.getLogger(__name__)


def _write_schema(writer: OpenApiWriter, name: str, schema: Optional[JsonSchema], version) -> None:
    writer.write_optional_object(name, schema, lambda w, s: s.write(w, version))


class Example(Referenceable, Extensible):
    """A named example payload. 3.x only; 2.0 keeps bare values per media type."""

    summary: Optional[str] = None
    description: Optional[str] = None
    value: Optional[OpenApiAny] = None
    external_value: Optional[str] = Field(default=None, alias="externalValue")

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("summary", self.summary)
        writer.write_property("description", self.description)
        writer.write_optional_object("value", self.value, lambda w, v: w.write_any(v, version))
        writer.write_property("externalValue", self.external_value)
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        # Callers write ``value`` directly into the 2.0 ``examples`` map.
        return

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


class Header(Referenceable, Extensible):
    """A response (or encoding) header.

    In 2.0 a header carries its type keywords inline, like a non-body
    parameter; in 3.x it nests a ``schema`` or a ``content`` map.
    """

    description: Optional[str] = None
    required: bool = False
    deprecated: bool = False
    allow_empty_value: bool = Field(default=False, alias="allowEmptyValue")
    style: Optional[str] = None
    explode: Optional[bool] = None
    allow_reserved: bool = Field(default=False, alias="allowReserved")
    schema_: Optional[JsonSchema] = Field(default=None, alias="schema")
    example: Optional[OpenApiAny] = None
    examples: Optional[dict[str, Example]] = None
    content: Optional[dict[str, "MediaType"]] = None

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("description", self.description)
        writer.write_property("required", self.required, False)
        writer.write_property("deprecated", self.deprecated, False)
        writer.write_property("allowEmptyValue", self.allow_empty_value, False)
        writer.write_property("style", self.style)
        writer.write_property("explode", self.explode)
        writer.write_property("allowReserved", self.allow_reserved, False)
        _write_schema(writer, "schema", self.schema_, version)
        writer.write_optional_object("example", self.example, lambda w, v: w.write_any(v, version))
        writer.write_optional_map("examples", self.examples, lambda w, e: e.serialize(w, version))
        writer.write_optional_map("content", self.content, lambda w, m: m.serialize(w, version))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        version = SpecVersion.V2
        writer.write_start_object()
        writer.write_property("description", self.description)
        write_simple_schema(writer, self._effective_schema(), collection_format_for(self.style, self.explode))
        writer.write_optional_object("x-example", self.example, lambda w, v: w.write_any(v, version))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)

    def _effective_schema(self) -> Optional[JsonSchema]:
        if self.schema_ is not None:
            return self.schema_
        for media in (self.content or {}).values():
            if media.schema_ is not None:
                return media.schema_
        return None


class Encoding(Extensible):
    """Serialization details for one property of a form or multipart body."""

    content_type: Optional[str] = Field(default=None, alias="contentType")
    headers: Optional[dict[str, Header]] = None
    style: Optional[str] = None
    explode: Optional[bool] = None
    allow_reserved: bool = Field(default=False, alias="allowReserved")

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("contentType", self.content_type)
        writer.write_optional_map("headers", self.headers, lambda w, h: h.serialize(w, version))
        writer.write_property("style", self.style)
        writer.write_property("explode", self.explode)
        writer.write_property("allowReserved", self.allow_reserved, False)
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        return

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


class MediaType(Extensible):
    """The schema and examples of one media type in a ``content`` map. 3.x only."""

    schema_: Optional[JsonSchema] = Field(default=None, alias="schema")
    example: Optional[OpenApiAny] = None
    examples: Optional[dict[str, Example]] = None
    encoding: Optional[dict[str, Encoding]] = None

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        _write_schema(writer, "schema", self.schema_, version)
        writer.write_optional_object("example", self.example, lambda w, v: w.write_any(v, version))
        writer.write_optional_map("examples", self.examples, lambda w, e: e.serialize(w, version))
        writer.write_optional_map("encoding", self.encoding, lambda w, e: e.serialize(w, version))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        return

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)

    def example_value(self) -> Optional[Any]:
        """The single example to use where only one value fits (2.0 ``examples``)."""
        if self.example is not None:
            return self.example
        for example in (self.examples or {}).values():
            if example.value is not None:
                return example.value
        return None


Header.model_rebuild()
