"""Document metadata: info, contact, license, servers, tags, external docs."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from oasmodel.elements import Extensible, Referenceable
from oasmodel.versions import SpecVersion
from oasmodel.writers.base import OpenApiWriter


class ExternalDocs(Extensible):
    """A link to additional documentation."""

    description: Optional[str] = None
    url: Optional[str] = None

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("description", self.description)
        writer.write_property("url", self.url)
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V2)

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


class Contact(Extensible):
    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("name", self.name)
        writer.write_property("url", self.url)
        writer.write_property("email", self.email)
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V2)

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


class License(Extensible):
    """License information. ``identifier`` (an SPDX expression) exists only in 3.1."""

    name: Optional[str] = None
    identifier: Optional[str] = None
    url: Optional[str] = None

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("name", self.name)
        if version == SpecVersion.V3_1:
            writer.write_property("identifier", self.identifier)
        writer.write_property("url", self.url)
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V2)

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


class Info(Extensible):
    """API metadata from the document's *Info Object*.

    ``summary`` is a 3.1 addition and is dropped when writing older versions.
    """

    title: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    terms_of_service: Optional[str] = Field(default=None, alias="termsOfService")
    contact: Optional[Contact] = None
    license: Optional[License] = None
    version: Optional[str] = None

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_required_property("title", self.title)
        if version == SpecVersion.V3_1:
            writer.write_property("summary", self.summary)
        writer.write_property("description", self.description)
        writer.write_property("termsOfService", self.terms_of_service)
        writer.write_optional_object("contact", self.contact, lambda w, c: c.serialize(w, version))
        writer.write_optional_object("license", self.license, lambda w, lic: lic.serialize(w, version))
        writer.write_required_property("version", self.version)
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V2)

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


class ServerVariable(Extensible):
    """A substitution variable in a server URL template. 3.x only."""

    enum: Optional[list[str]] = None
    default: Optional[str] = None
    description: Optional[str] = None

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_optional_collection("enum", self.enum, lambda w, s: w.write_string(s))
        writer.write_required_property("default", self.default)
        writer.write_property("description", self.description)
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        # Folded into host/basePath by the document.
        return

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


class Server(Extensible):
    """A server the API is reachable at. 3.x only.

    Swagger 2.0 has no server list: the document writer derives ``host``,
    ``basePath`` and ``schemes`` from the servers, and operations derive
    ``schemes`` from theirs.
    """

    url: Optional[str] = None
    description: Optional[str] = None
    variables: Optional[dict[str, ServerVariable]] = None

    def expanded_url(self) -> str:
        """The URL with every ``{variable}`` replaced by its default value."""
        url = self.url or ""
        for name, variable in (self.variables or {}).items():
            if variable.default is not None:
                url = url.replace("{" + name + "}", variable.default)
        return url

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("url", self.url)
        writer.write_property("description", self.description)
        writer.write_optional_map("variables", self.variables, lambda w, v: v.serialize(w, version))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        return

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


class Tag(Referenceable, Extensible):
    """A tag, declared once on the document and referred to by name elsewhere.

    Inside an operation a tag is written as its name (or, when it carries a
    reference, as the referenced tag's id). :meth:`serialize_definition`
    writes the full declaration used in the document's ``tags`` list.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = Field(default=None, alias="externalDocs")

    def serialize_definition(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("name", self.name)
        writer.write_property("description", self.description)
        writer.write_optional_object(
            "externalDocs", self.external_docs, lambda w, d: d.serialize(w, version)
        )
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def _serialize_name(self, writer: OpenApiWriter) -> None:
        writer.write_value(self.name)

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        self._serialize_name(writer)

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize_name(writer)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize_name(writer)


__all__ = [
    "Contact",
    "ExternalDocs",
    "Info",
    "License",
    "Server",
    "ServerVariable",
    "Tag",
]
