"""The document root and its component registries."""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlsplit

from pydantic import Field

from oasmodel.elements import Extensible
from oasmodel.models.info import ExternalDocs, Info, Server, Tag
from oasmodel.models.media import Example, Header
from oasmodel.models.operations import Callback, PathItem, schemes_of
from oasmodel.models.parameters import Parameter, RequestBody
from oasmodel.models.responses import Link, Response
from oasmodel.models.security import SecurityRequirement, SecurityScheme
from oasmodel.references import Reference, ReferenceType, resolve_reference
from oasmodel.schema import JsonSchema
from oasmodel.versions import SpecVersion
from oasmodel.writers.base import OpenApiWriter

logger = logging.getLogger(__name__)


def _defines_itself(component: Any, reference_type: ReferenceType, key: str) -> bool:
    """True when *component* carries a reference to its own registry slot."""
    reference = getattr(component, "reference", None)
    return (
        reference is not None
        and reference.is_local
        and reference.type == reference_type
        and reference.id == key
    )


def write_registry(
    writer: OpenApiWriter,
    name: str,
    registry: Optional[dict[str, Any]],
    reference_type: ReferenceType,
    version: SpecVersion,
) -> None:
    """Write one component registry as the ``name`` property.

    An entry whose reference points at its own key is a definition tagged
    with its own location and is written inline; any other reference makes
    the entry an alias and only the pointer is written.
    """
    if registry is None:
        return
    writer.write_property_name(name)
    writer.write_start_object()
    for key, component in registry.items():
        writer.write_property_name(key)
        if component is None:
            writer.write_null()
        elif _defines_itself(component, reference_type, key):
            component.serialize_without_reference(writer, version)
        else:
            component.serialize(writer, version)
    writer.write_end_object()


class Components(Extensible):
    """Named, reusable building blocks referenced from elsewhere in the document.

    Swagger 2.0 spreads these over ``definitions``, ``parameters``,
    ``responses`` and ``securityDefinitions``; request bodies are folded into
    2.0 ``parameters`` as body parameters. Examples, headers, links and
    callbacks have no 2.0 registry and are dropped with a warning.
    """

    schemas: Optional[dict[str, JsonSchema]] = None
    responses: Optional[dict[str, Response]] = None
    parameters: Optional[dict[str, Parameter]] = None
    examples: Optional[dict[str, Example]] = None
    request_bodies: Optional[dict[str, RequestBody]] = Field(default=None, alias="requestBodies")
    headers: Optional[dict[str, Header]] = None
    security_schemes: Optional[dict[str, SecurityScheme]] = Field(
        default=None, alias="securitySchemes"
    )
    links: Optional[dict[str, Link]] = None
    callbacks: Optional[dict[str, Callback]] = None
    path_items: Optional[dict[str, PathItem]] = Field(default=None, alias="pathItems")

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_optional_map("schemas", self.schemas, lambda w, s: s.write(w, version))
        for name, registry, reference_type in (
            ("responses", self.responses, ReferenceType.RESPONSE),
            ("parameters", self.parameters, ReferenceType.PARAMETER),
            ("examples", self.examples, ReferenceType.EXAMPLE),
            ("requestBodies", self.request_bodies, ReferenceType.REQUEST_BODY),
            ("headers", self.headers, ReferenceType.HEADER),
            ("securitySchemes", self.security_schemes, ReferenceType.SECURITY_SCHEME),
            ("links", self.links, ReferenceType.LINK),
            ("callbacks", self.callbacks, ReferenceType.CALLBACK),
        ):
            write_registry(writer, name, registry, reference_type, version)
        if version == SpecVersion.V3_1:
            write_registry(writer, "pathItems", self.path_items, ReferenceType.PATH_ITEM, version)
        elif self.path_items:
            logger.warning("Dropping %d path item component(s): OpenAPI 3.1 only", len(self.path_items))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        # Written piecewise by OpenApiDocument.serialize_v2.
        return

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)

    def v2_parameters(self) -> Optional[dict[str, Parameter]]:
        """2.0 ``parameters``: parameter components plus request bodies as body parameters."""
        if self.parameters is None and self.request_bodies is None:
            return None
        parameters: dict[str, Parameter] = dict(self.parameters or {})
        for key, body in (self.request_bodies or {}).items():
            if key in parameters:
                logger.warning("Request body '%s' clashes with a parameter of the same name", key)
                continue
            if _defines_itself(body, ReferenceType.REQUEST_BODY, key):
                body = body.model_copy(update={"reference": None})
            parameters[key] = body.to_body_parameter()
        return parameters

    def v2_security_definitions(self) -> Optional[dict[str, SecurityScheme]]:
        if self.security_schemes is None:
            return None
        definitions = {}
        for key, scheme in self.security_schemes.items():
            inline = scheme.reference is None or _defines_itself(
                scheme, ReferenceType.SECURITY_SCHEME, key
            )
            if inline and not scheme.supported_in_v2():
                logger.warning(
                    "Dropping security scheme '%s': type '%s' has no Swagger 2.0 form",
                    key,
                    scheme.type.value if scheme.type else None,
                )
                continue
            definitions[key] = scheme
        return definitions

    def dropped_in_v2(self) -> list[str]:
        return [
            name
            for name, registry in (
                ("examples", self.examples),
                ("headers", self.headers),
                ("links", self.links),
                ("callbacks", self.callbacks),
                ("pathItems", self.path_items),
            )
            if registry
        ]


class OpenApiDocument(Extensible):
    """The root of an API description.

    Example::

        document = OpenApiDocument(info=Info(title="Pets", version="1.0"))
        document.paths["/pets"] = PathItem()
        text = serialize_as_json(document, SpecVersion.V2)
    """

    info: Optional[Info] = None
    json_schema_dialect: Optional[str] = Field(default=None, alias="jsonSchemaDialect")
    servers: Optional[list[Server]] = None
    paths: Optional[dict[str, PathItem]] = Field(default_factory=dict)
    # Extensions of the paths object itself, written after its entries.
    paths_extensions: Optional[dict[str, Any]] = None
    webhooks: Optional[dict[str, PathItem]] = None
    components: Optional[Components] = None
    security: Optional[list[SecurityRequirement]] = None
    tags: Optional[list[Tag]] = None
    external_docs: Optional[ExternalDocs] = Field(default=None, alias="externalDocs")

    def resolve(self, reference: Reference, follow: bool = True) -> Any:
        """Look *reference* up in this document's registries.

        See :func:`oasmodel.references.resolve_reference`.
        """
        return resolve_reference(self, reference, follow)

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_required_property("openapi", version.value)
        writer.write_optional_object("info", self.info, lambda w, i: i.serialize(w, version))
        if version == SpecVersion.V3_1:
            writer.write_property("jsonSchemaDialect", self.json_schema_dialect)
        writer.write_optional_collection("servers", self.servers, lambda w, s: s.serialize(w, version))
        writer.write_optional_map(
            "paths", self.paths, lambda w, p: p.serialize(w, version), self.paths_extensions, version
        )
        if version == SpecVersion.V3_1:
            writer.write_optional_map("webhooks", self.webhooks, lambda w, p: p.serialize(w, version))
        elif self.webhooks:
            logger.warning("Dropping %d webhook(s): OpenAPI 3.1 only", len(self.webhooks))
        writer.write_optional_object(
            "components", self.components, lambda w, c: c.serialize(w, version)
        )
        writer.write_optional_collection("security", self.security, lambda w, s: s.serialize(w, version))
        writer.write_optional_collection(
            "tags", self.tags, lambda w, t: t.serialize_definition(w, version)
        )
        writer.write_optional_object(
            "externalDocs", self.external_docs, lambda w, d: d.serialize(w, version)
        )
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        version = SpecVersion.V2
        writer.write_start_object()
        writer.write_required_property("swagger", version.value)
        writer.write_optional_object("info", self.info, lambda w, i: i.serialize(w, version))
        self._write_host(writer)
        writer.write_optional_map(
            "paths", self.paths, lambda w, p: p.serialize(w, version), self.paths_extensions, version
        )

        components = self.components
        if components is not None:
            writer.write_optional_map(
                "definitions", components.schemas, lambda w, s: s.write(w, version)
            )
            write_registry(
                writer, "parameters", components.v2_parameters(), ReferenceType.PARAMETER, version
            )
            write_registry(
                writer, "responses", components.responses, ReferenceType.RESPONSE, version
            )
            write_registry(
                writer,
                "securityDefinitions",
                components.v2_security_definitions(),
                ReferenceType.SECURITY_SCHEME,
                version,
            )
            dropped = components.dropped_in_v2()
            if dropped:
                logger.warning(
                    "Dropping component registries with no Swagger 2.0 equivalent: %s",
                    ", ".join(dropped),
                )
        writer.write_optional_collection("security", self.security, lambda w, s: s.serialize(w, version))
        writer.write_optional_collection(
            "tags", self.tags, lambda w, t: t.serialize_definition(w, version)
        )
        writer.write_optional_object(
            "externalDocs", self.external_docs, lambda w, d: d.serialize(w, version)
        )
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def _write_host(self, writer: OpenApiWriter) -> None:
        """Derive ``host``, ``basePath`` and ``schemes`` from the server list.

        The first server supplies host and base path; schemes are collected
        from every server on that same host.
        """
        if not self.servers:
            return
        first = urlsplit(self.servers[0].expanded_url())
        if first.netloc:
            writer.write_property("host", first.netloc)
        if first.path and first.path != "/":
            writer.write_property("basePath", first.path)
        schemes = schemes_of(
            [server for server in self.servers if urlsplit(server.expanded_url()).netloc == first.netloc]
        )
        if schemes:
            writer.write_optional_collection("schemes", schemes, lambda w, s: w.write_string(s))

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)
