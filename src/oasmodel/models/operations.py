"""Operations, path items and callbacks.

Writing an :class:`Operation` as Swagger 2.0 is where most version
translation happens:

* ``consumes`` is derived from the request body's media types and
  ``produces`` from the responses' media types;
* the request body is hoisted into ``parameters``, as a single ``in: body``
  parameter or, for form media types, as one ``in: formData`` parameter per
  top-level schema property;
* ``schemes`` is derived from the operation's servers.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional
from urllib.parse import urlsplit

from pydantic import Field

from oasmodel.elements import Extensible, Referenceable
from oasmodel.models.info import ExternalDocs, Server, Tag
from oasmodel.models.parameters import (
    Parameter,
    ParameterLocation,
    RequestBody,
    request_body_from_parameters,
)
from oasmodel.models.responses import Response
from oasmodel.models.security import SecurityRequirement
from oasmodel.references import ReferenceType
from oasmodel.versions import SpecVersion
from oasmodel.writers.base import OpenApiWriter

logger = logging.getLogger(__name__)


class OperationType(str, enum.Enum):
    """HTTP methods a path item can hold, in output order."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


def _distinct(values) -> list[str]:
    return list(dict.fromkeys(value for value in values if value))


def _is_legacy_body(parameter: Parameter) -> bool:
    if parameter.reference is not None:
        return parameter.reference.type == ReferenceType.REQUEST_BODY
    return parameter.location is not None and parameter.location.is_legacy


def schemes_of(servers: Optional[list[Server]]) -> list[str]:
    """URL schemes of *servers*, distinct and in order."""
    return _distinct(urlsplit(server.expanded_url()).scheme for server in servers or [])


class Operation(Extensible):
    """A single API operation on a path."""

    tags: Optional[list[Tag]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = Field(default=None, alias="externalDocs")
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    parameters: Optional[list[Parameter]] = None
    request_body: Optional[RequestBody] = Field(default=None, alias="requestBody")
    responses: Optional[dict[str, Response]] = Field(default_factory=dict)
    # Extensions of the responses object itself, written after its entries.
    responses_extensions: Optional[dict[str, Any]] = None
    callbacks: Optional[dict[str, "Callback"]] = None
    deprecated: bool = False
    security: Optional[list[SecurityRequirement]] = None
    servers: Optional[list[Server]] = None

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        parameters = self.parameters
        request_body = self.request_body
        if parameters is not None and any(
            p.location is not None and p.location.is_legacy for p in parameters
        ):
            if request_body is None:
                request_body = request_body_from_parameters(parameters)
            parameters = [p for p in parameters if p.location is None or not p.location.is_legacy]

        writer.write_start_object()
        writer.write_optional_collection("tags", self.tags, lambda w, t: t.serialize(w, version))
        writer.write_property("summary", self.summary)
        writer.write_property("description", self.description)
        writer.write_optional_object(
            "externalDocs", self.external_docs, lambda w, d: d.serialize(w, version)
        )
        writer.write_property("operationId", self.operation_id)
        writer.write_optional_collection("parameters", parameters, lambda w, p: p.serialize(w, version))
        writer.write_optional_object("requestBody", request_body, lambda w, b: b.serialize(w, version))
        writer.write_optional_map(
            "responses",
            self.responses,
            lambda w, r: r.serialize(w, version),
            self.responses_extensions,
            version,
        )
        writer.write_optional_map("callbacks", self.callbacks, lambda w, c: c.serialize(w, version))
        writer.write_property("deprecated", self.deprecated, False)
        writer.write_optional_collection("security", self.security, lambda w, s: s.serialize(w, version))
        writer.write_optional_collection("servers", self.servers, lambda w, s: s.serialize(w, version))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        version = SpecVersion.V2
        writer.write_start_object()
        writer.write_optional_collection("tags", self.tags, lambda w, t: t.serialize(w, version))
        writer.write_property("summary", self.summary)
        writer.write_property("description", self.description)
        writer.write_optional_object(
            "externalDocs", self.external_docs, lambda w, d: d.serialize(w, version)
        )
        writer.write_property("operationId", self.operation_id)

        consumes = _distinct(self.request_body.content_types) if self.request_body else []
        if consumes:
            writer.write_optional_collection("consumes", consumes, lambda w, s: w.write_string(s))
        produces = _distinct(
            media_type
            for response in (self.responses or {}).values()
            for media_type in (response.content or {})
        )
        if produces:
            writer.write_optional_collection("produces", produces, lambda w, s: w.write_string(s))

        parameters = self.v2_parameters()
        if parameters is not None:
            writer.write_optional_collection(
                "parameters", parameters, lambda w, p: p.serialize(w, version)
            )
        writer.write_optional_map(
            "responses",
            self.responses,
            lambda w, r: r.serialize(w, version),
            self.responses_extensions,
            version,
        )

        schemes = schemes_of(self.servers)
        if schemes:
            writer.write_optional_collection("schemes", schemes, lambda w, s: w.write_string(s))
        writer.write_property("deprecated", self.deprecated, False)
        writer.write_optional_collection("security", self.security, lambda w, s: s.serialize(w, version))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)

    def v2_parameters(self) -> Optional[list[Parameter]]:
        """The 2.0 parameter list: own parameters plus the hoisted request body.

        Cookie parameters have no 2.0 location and are dropped. When a request
        body is set it takes the place of any ``body``/``formData``
        parameters, as it does when writing 3.x.
        """
        parameters: Optional[list[Parameter]] = None
        if self.parameters is not None:
            parameters = []
            for parameter in self.parameters:
                if parameter.location == ParameterLocation.COOKIE:
                    logger.warning(
                        "Dropping cookie parameter '%s' from operation '%s': "
                        "not representable in Swagger 2.0",
                        parameter.name,
                        self.operation_id or "",
                    )
                    continue
                if self.request_body is not None and _is_legacy_body(parameter):
                    logger.warning(
                        "Dropping %s parameter '%s' from operation '%s': "
                        "the request body replaces it",
                        parameter.location.value if parameter.location else "body",
                        parameter.name or "",
                        self.operation_id or "",
                    )
                    continue
                parameters.append(parameter)

        if self.request_body is not None:
            if self.request_body.reference is None and self.request_body.is_form():
                hoisted = self.request_body.to_form_data_parameters()
            else:
                hoisted = [self.request_body.to_body_parameter()]
            parameters = (parameters or []) + hoisted
        return parameters


class PathItem(Referenceable, Extensible):
    """The operations available on a single path.

    ``summary`` and ``description`` have no 2.0 field and are written as the
    ``x-summary`` / ``x-description`` extensions there. Path item
    components (and references to them) exist only in 3.1.
    """

    summary: Optional[str] = None
    description: Optional[str] = None
    operations: Optional[dict[OperationType, Operation]] = None
    servers: Optional[list[Server]] = None
    parameters: Optional[list[Parameter]] = None

    def add_operation(self, operation_type: OperationType, operation: Operation) -> None:
        if self.operations is None:
            self.operations = {}
        self.operations[OperationType(operation_type)] = operation

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("summary", self.summary)
        writer.write_property("description", self.description)
        for operation_type, operation in (self.operations or {}).items():
            writer.write_optional_object(
                OperationType(operation_type).value, operation, lambda w, o: o.serialize(w, version)
            )
        writer.write_optional_collection("servers", self.servers, lambda w, s: s.serialize(w, version))
        writer.write_optional_collection(
            "parameters", self.parameters, lambda w, p: p.serialize(w, version)
        )
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        version = SpecVersion.V2
        writer.write_start_object()
        for operation_type, operation in (self.operations or {}).items():
            writer.write_optional_object(
                OperationType(operation_type).value, operation, lambda w, o: o.serialize(w, version)
            )
        writer.write_optional_collection(
            "parameters", self.parameters, lambda w, p: p.serialize(w, version)
        )
        extensions = self.extensions or {}
        if self.summary is not None and "x-summary" not in extensions:
            writer.write_property("x-summary", self.summary)
        if self.description is not None and "x-description" not in extensions:
            writer.write_property("x-description", self.description)
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


class Callback(Referenceable, Extensible):
    """Out-of-band requests keyed by runtime expression. 3.x only."""

    path_items: Optional[dict[str, PathItem]] = Field(default=None, alias="pathItems")

    def add_path_item(self, expression: str, path_item: PathItem) -> None:
        if self.path_items is None:
            self.path_items = {}
        self.path_items[expression] = path_item

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        for expression, path_item in (self.path_items or {}).items():
            writer.write_property_name(expression)
            path_item.serialize(writer, version)
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        return

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


Operation.model_rebuild()
