"""Operation outputs: responses and links."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from oasmodel.any import OpenApiAny
from oasmodel.elements import Extensible, Referenceable
from oasmodel.models.info import Server
from oasmodel.models.media import Header, MediaType
from oasmodel.schema import JsonSchema
from oasmodel.versions import SpecVersion
from oasmodel.writers.base import OpenApiWriter


class Link(Referenceable, Extensible):
    """A design-time link from a response to another operation. 3.x only.

    ``parameters`` and ``request_body`` hold runtime expressions or
    constants; both are kept as Any-values.
    """

    operation_ref: Optional[str] = Field(default=None, alias="operationRef")
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    parameters: Optional[dict[str, OpenApiAny]] = None
    request_body: Optional[OpenApiAny] = Field(default=None, alias="requestBody")
    description: Optional[str] = None
    server: Optional[Server] = None

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("operationRef", self.operation_ref)
        writer.write_property("operationId", self.operation_id)
        writer.write_optional_map("parameters", self.parameters, lambda w, v: w.write_any(v, version))
        writer.write_optional_object(
            "requestBody", self.request_body, lambda w, v: w.write_any(v, version)
        )
        writer.write_property("description", self.description)
        writer.write_optional_object("server", self.server, lambda w, s: s.serialize(w, version))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        return

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


class Response(Referenceable, Extensible):
    """A single response of an operation.

    ``description`` is required by every version and is written even when
    unset (as ``null``). For 2.0 the first media type's schema becomes the
    response ``schema`` and each media type's example lands in ``examples``.
    """

    description: Optional[str] = None
    headers: Optional[dict[str, Header]] = None
    content: Optional[dict[str, MediaType]] = None
    links: Optional[dict[str, Link]] = None

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_required_property("description", self.description)
        writer.write_optional_map("headers", self.headers, lambda w, h: h.serialize(w, version))
        writer.write_optional_map("content", self.content, lambda w, m: m.serialize(w, version))
        writer.write_optional_map("links", self.links, lambda w, lnk: lnk.serialize(w, version))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        version = SpecVersion.V2
        writer.write_start_object()
        writer.write_required_property("description", self.description)
        schema = self.first_schema()
        writer.write_optional_object("schema", schema, lambda w, s: s.write(w, version))
        examples = {
            media_type: media.example_value()
            for media_type, media in (self.content or {}).items()
            if media.example_value() is not None
        }
        if examples:
            writer.write_optional_map("examples", examples, lambda w, v: w.write_any(v, version))
        writer.write_optional_map("headers", self.headers, lambda w, h: h.serialize(w, version))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)

    def first_schema(self) -> Optional[JsonSchema]:
        for media in (self.content or {}).values():
            if media.schema_ is not None:
                return media.schema_
        return None
