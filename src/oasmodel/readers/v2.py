"""Swagger 2.0 deserializer.

Reads a 2.0 document straight into the 3.x-shaped model:

* ``body`` parameters become a :class:`RequestBody` (a custom name is kept
  in ``x-bodyName``) and ``formData`` parameters become one form request
  body;
* ``consumes``/``produces`` (operation level, else document level) supply
  the request and response media types;
* ``host``, ``basePath`` and ``schemes`` become servers;
* the simple-type keywords on non-body parameters and headers are gathered
  into a schema, and ``collectionFormat`` into ``style``/``explode``;
* ``definitions``, ``parameters``, ``responses`` and
  ``securityDefinitions`` become components.

Elements whose 2.0 shape matches 3.0 (info, tags, external docs, security
requirements) reuse the 3.0 loaders.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from oasmodel.models import (
    Components,
    Example,
    Header,
    MediaType,
    OAuthFlow,
    OAuthFlows,
    OpenApiDocument,
    Operation,
    OperationType,
    Parameter,
    ParameterLocation,
    PathItem,
    RequestBody,
    Response,
    SecurityScheme,
    SecuritySchemeType,
    Server,
)
from oasmodel.models._swagger2 import SIMPLE_SCHEMA_KEYWORDS, style_for_collection_format
from oasmodel.models.parameters import request_body_from_parameters
from oasmodel.readers.context import ParsingContext
from oasmodel.readers.field_maps import (
    EXTENSION_PATTERNS,
    AnyField,
    AnyFieldMap,
    FieldAction,
    FixedFieldMap,
    bool_field,
    element_field,
    extensible_map_field,
    list_field,
    load_schema,
    map_field,
    parse_map,
    process_any_fields,
    string_field,
)
from oasmodel.readers.parse_node import MapNode, ParseNode, expect_list, expect_map, expect_scalar
from oasmodel.readers.v3 import OpenApiV3Deserializer, enum_field, security_field, tags_field
from oasmodel.references import ReferenceType, parse_reference
from oasmodel.schema import JsonSchema
from oasmodel.versions import SpecVersion

logger = logging.getLogger(__name__)

DEFAULT_RESPONSE_CONTENT_TYPE = "application/octet-stream"

# Scratch keys on the parsing context.
_GLOBAL_CONSUMES = "consumes"
_GLOBAL_PRODUCES = "produces"
_OPERATION_PRODUCES = "operation.produces"
_BODY_PARAMETER_IDS = "body-parameter-ids"
_SERVER_BASE = "server-base"

_FLOW_ATTRIBUTES = {
    "implicit": "implicit",
    "password": "password",
    "application": "client_credentials",
    "accessCode": "authorization_code",
}

_SECURITY_TYPES = {
    "basic": SecuritySchemeType.HTTP,
    "apiKey": SecuritySchemeType.API_KEY,
    "oauth2": SecuritySchemeType.OAUTH2,
}


def _media_list(node: MapNode, name: str, context: ParsingContext) -> Optional[list[str]]:
    value = node.get(name)
    if value is None:
        return None
    with context.location(name):
        return expect_list(value, name, context).create_simple_list(name, context)


def _optional_scalar(node: MapNode, name: str, context: ParsingContext) -> Optional[str]:
    value = node.get(name)
    if value is None:
        return None
    with context.location(name):
        return expect_scalar(value, name, context)


class _SecurityDefinition:
    """A 2.0 security definition being read.

    The single OAuth2 flow is collected beside the scheme and attached once
    its ``flow`` name is known.
    """

    def __init__(self) -> None:
        self.scheme = SecurityScheme()
        self.flow = OAuthFlow()
        self.flow_name: Optional[str] = None

    def add_extension(self, name: str, value: Any) -> None:
        self.scheme.add_extension(name, value)


def _on_scheme(action: FieldAction) -> FieldAction:
    return lambda draft, node, context: action(draft.scheme, node, context)


def _on_flow(action: FieldAction) -> FieldAction:
    return lambda draft, node, context: action(draft.flow, node, context)


def _security_type(draft: _SecurityDefinition, node: ParseNode, context: ParsingContext) -> None:
    raw = expect_scalar(node, "type", context)
    draft.scheme.type = _SECURITY_TYPES.get(raw)
    if draft.scheme.type is None:
        logger.warning("Ignoring unknown security scheme type '%s' at %s", raw, context.path)
    elif raw == "basic":
        draft.scheme.scheme = "basic"


def _gather_simple_schema(node: MapNode) -> Optional[JsonSchema]:
    """Collect the inline simple-type keywords of a parameter or header, in node order."""
    data = {key: value.to_python() for key, value in node.items() if key in SIMPLE_SCHEMA_KEYWORDS}
    return JsonSchema(data) if data else None


def _apply_collection_format(target: Any, node: MapNode, location: Optional[str]) -> None:
    collection_format = node.scalar_value("collectionFormat")
    if collection_format is None:
        return
    style, explode = style_for_collection_format(collection_format, location)
    target.style = style
    target.explode = explode


def _noop(target: Any, node: ParseNode, context: ParsingContext) -> None:
    return


def _x_examples_field(target: Parameter, node: ParseNode, context: ParsingContext) -> None:
    examples = expect_map(node, "x-examples", context)
    target.examples = {key: Example(value=value.create_any()) for key, value in examples.items()}


_X_EXAMPLE_ANY_FIELDS: AnyFieldMap = {
    "x-example": AnyField(lambda t, v: setattr(t, "example", v), lambda t: t.schema_)
}


class SwaggerV2Deserializer(OpenApiV3Deserializer):
    """Reads Swagger 2.0 parse nodes into the 3.x-shaped model."""

    version = SpecVersion.V2

    DOCUMENT_FIXED_FIELDS: FixedFieldMap = {
        "swagger": _noop,
        "info": element_field("info", "load_info"),
        # host, basePath, schemes, consumes and produces are read up front.
        "host": _noop,
        "basePath": _noop,
        "schemes": _noop,
        "consumes": _noop,
        "produces": _noop,
        "paths": extensible_map_field("paths", "paths_extensions", "load_path_item"),
        "definitions": lambda o, n, c: c.deserializer.load_definitions(o, n, c),
        "parameters": lambda o, n, c: c.deserializer.load_parameter_definitions(o, n, c),
        "responses": lambda o, n, c: c.deserializer.load_response_definitions(o, n, c),
        "securityDefinitions": lambda o, n, c: c.deserializer.load_security_definitions(o, n, c),
        "security": security_field,
        "tags": list_field("tags", "load_tag"),
        "externalDocs": element_field("external_docs", "load_external_docs"),
    }

    PATH_ITEM_FIXED_FIELDS: FixedFieldMap = {
        **{
            operation_type.value: (
                lambda o, n, c, _type=operation_type: o.add_operation(
                    _type, c.deserializer.load_operation(n, c)
                )
            )
            for operation_type in OperationType
            if operation_type is not OperationType.TRACE
        },
        "parameters": list_field("parameters", "load_parameter"),
    }

    OPERATION_FIXED_FIELDS: FixedFieldMap = {
        "tags": tags_field,
        "summary": string_field("summary"),
        "description": string_field("description"),
        "externalDocs": element_field("external_docs", "load_external_docs"),
        "operationId": string_field("operation_id", "operationId"),
        "consumes": _noop,
        "produces": _noop,
        "parameters": list_field("parameters", "load_parameter"),
        "responses": extensible_map_field("responses", "responses_extensions", "load_response"),
        "schemes": lambda o, n, c: c.deserializer.load_operation_schemes(o, n, c),
        "deprecated": bool_field("deprecated", "deprecated"),
        "security": security_field,
    }

    PARAMETER_FIXED_FIELDS: FixedFieldMap = {
        "name": string_field("name"),
        "in": enum_field("location", ParameterLocation, "in"),
        "description": string_field("description"),
        "required": bool_field("required", "required"),
        "allowEmptyValue": bool_field("allow_empty_value", "allowEmptyValue"),
        "schema": lambda o, n, c: setattr(o, "schema_", load_schema(n, c)),
        "x-example": _noop,
        "x-examples": _x_examples_field,
    }

    HEADER_FIXED_FIELDS: FixedFieldMap = {
        "description": string_field("description"),
        "x-example": _noop,
    }

    RESPONSE_FIXED_FIELDS: FixedFieldMap = {
        "description": string_field("description"),
        # schema and examples become content, built once the node is read.
        "schema": _noop,
        "examples": _noop,
        "headers": map_field("headers", "load_header"),
    }

    SECURITY_SCHEME_FIXED_FIELDS: FixedFieldMap = {
        "type": _security_type,
        "description": _on_scheme(string_field("description")),
        "name": _on_scheme(string_field("name")),
        "in": _on_scheme(string_field("location", "in")),
        "flow": string_field("flow_name", "flow"),
        "authorizationUrl": _on_flow(string_field("authorization_url", "authorizationUrl")),
        "tokenUrl": _on_flow(string_field("token_url", "tokenUrl")),
        "scopes": _on_flow(
            lambda o, n, c: setattr(o, "scopes", expect_map(n, "scopes", c).create_simple_map("scopes", c))
        ),
    }

    # ------------------------------------------------------------------ #
    # Document and components
    # ------------------------------------------------------------------ #

    def load_document(self, node: ParseNode, context: ParsingContext) -> OpenApiDocument:
        map_node = expect_map(node, "document", context)
        fallback = context.settings.default_content_type
        consumes = _media_list(map_node, "consumes", context)
        produces = _media_list(map_node, "produces", context)
        if fallback is not None:
            consumes = consumes or [fallback]
            produces = produces or [fallback]
        context.set_temp(_GLOBAL_CONSUMES, consumes)
        context.set_temp(_GLOBAL_PRODUCES, produces)
        context.set_temp(_BODY_PARAMETER_IDS, self._body_parameter_ids(map_node))

        document = OpenApiDocument(paths=None)
        document.servers = self._load_servers(map_node, context)
        return parse_map(map_node, document, self.DOCUMENT_FIXED_FIELDS, EXTENSION_PATTERNS, context)

    def _body_parameter_ids(self, node: MapNode) -> set[str]:
        """Ids of the root ``parameters`` that are body parameters.

        References to them are request-body references, which can only be
        known by looking at the target.
        """
        parameters = node.get("parameters")
        if not isinstance(parameters, MapNode):
            return set()
        return {
            key
            for key, value in parameters.items()
            if isinstance(value, MapNode) and value.scalar_value("in") == "body"
        }

    def _load_servers(self, node: MapNode, context: ParsingContext) -> Optional[list[Server]]:
        host = _optional_scalar(node, "host", context)
        base_path = _optional_scalar(node, "basePath", context)
        schemes = _media_list(node, "schemes", context)
        context.set_temp(_SERVER_BASE, (host, base_path))
        return self._servers_for(schemes, host, base_path)

    def _servers_for(
        self, schemes: Optional[list[str]], host: Optional[str], base_path: Optional[str]
    ) -> Optional[list[Server]]:
        if host is None and base_path is None and not schemes:
            return None
        base_path = base_path or ""
        if host is None:
            if schemes:
                logger.warning("Ignoring schemes without a host; the server URL is relative")
            return [Server(url=base_path or "/")]
        if not schemes:
            # Scheme-relative: the document's own transport applies.
            return [Server(url=f"//{host}{base_path}")]
        return [Server(url=f"{scheme}://{host}{base_path}") for scheme in schemes]

    def _components(self, document: OpenApiDocument) -> Components:
        if document.components is None:
            document.components = Components()
        return document.components

    def load_definitions(self, document: OpenApiDocument, node: ParseNode, context: ParsingContext) -> None:
        entries = expect_map(node, "definitions", context)
        self._components(document).schemas = entries.create_map(load_schema, context)

    def load_parameter_definitions(
        self, document: OpenApiDocument, node: ParseNode, context: ParsingContext
    ) -> None:
        components = self._components(document)
        consumes = context.get_temp(_GLOBAL_CONSUMES)
        for key, value in expect_map(node, "parameters", context).items():
            with context.location(key):
                parameter = self.load_parameter(value, context)
                if parameter.location == ParameterLocation.BODY:
                    if components.request_bodies is None:
                        components.request_bodies = {}
                    components.request_bodies[key] = request_body_from_parameters(
                        [parameter], consumes
                    )
                    continue
                if components.parameters is None:
                    components.parameters = {}
                components.parameters[key] = parameter

    def load_response_definitions(
        self, document: OpenApiDocument, node: ParseNode, context: ParsingContext
    ) -> None:
        entries = expect_map(node, "responses", context)
        self._components(document).responses = entries.create_map(self.load_response, context)

    def load_security_definitions(
        self, document: OpenApiDocument, node: ParseNode, context: ParsingContext
    ) -> None:
        entries = expect_map(node, "securityDefinitions", context)
        self._components(document).security_schemes = entries.create_map(
            self.load_security_scheme, context
        )

    # ------------------------------------------------------------------ #
    # Paths and operations
    # ------------------------------------------------------------------ #

    def load_path_item(self, node: ParseNode, context: ParsingContext) -> PathItem:
        map_node = expect_map(node, "pathItem", context)
        pointer = map_node.reference_pointer()
        if pointer is not None:
            # 2.0 path items can only reference external files.
            return PathItem(reference=parse_reference(pointer, ReferenceType.PATH_ITEM, context.version))
        path_item = parse_map(
            map_node, PathItem(), self.PATH_ITEM_FIXED_FIELDS, EXTENSION_PATTERNS, context
        )
        self._push_down_legacy_parameters(path_item, context)
        return path_item

    def _push_down_legacy_parameters(self, path_item: PathItem, context: ParsingContext) -> None:
        """Move path-level body/formData parameters onto the operations."""
        legacy = [p for p in path_item.parameters or [] if self._is_legacy(p)]
        if not legacy:
            return
        path_item.parameters = [p for p in path_item.parameters if not self._is_legacy(p)] or None
        for operation in (path_item.operations or {}).values():
            if operation.request_body is None:
                operation.request_body = self._request_body_for(
                    legacy, context.get_temp(_GLOBAL_CONSUMES)
                )

    def load_operation(self, node: ParseNode, context: ParsingContext) -> Operation:
        map_node = expect_map(node, "operation", context)
        consumes = _media_list(map_node, "consumes", context)
        produces = _media_list(map_node, "produces", context)
        if consumes is None:
            consumes = context.get_temp(_GLOBAL_CONSUMES)
        if produces is None:
            produces = context.get_temp(_GLOBAL_PRODUCES)
        context.set_temp(_OPERATION_PRODUCES, produces)
        try:
            operation = parse_map(
                map_node, Operation(responses=None), self.OPERATION_FIXED_FIELDS, EXTENSION_PATTERNS, context
            )
        finally:
            context.pop_temp(_OPERATION_PRODUCES)

        legacy = [p for p in operation.parameters or [] if self._is_legacy(p)]
        if legacy:
            operation.parameters = [
                p for p in operation.parameters if not self._is_legacy(p)
            ] or None
            operation.request_body = self._request_body_for(legacy, consumes)
        return operation

    def load_operation_schemes(self, operation: Operation, node: ParseNode, context: ParsingContext) -> None:
        schemes = expect_list(node, "schemes", context).create_simple_list("schemes", context)
        host, base_path = context.get_temp(_SERVER_BASE, (None, None))
        operation.servers = self._servers_for(schemes, host, base_path)

    @staticmethod
    def _is_legacy(parameter: Parameter) -> bool:
        if parameter.reference is not None:
            return parameter.reference.type == ReferenceType.REQUEST_BODY
        return parameter.location is not None and parameter.location.is_legacy

    def _request_body_for(
        self, legacy: list[Parameter], consumes: Optional[list[str]]
    ) -> Optional[RequestBody]:
        for parameter in legacy:
            if parameter.reference is not None:
                return RequestBody(reference=parameter.reference.clone())
        return request_body_from_parameters(legacy, consumes)

    def load_parameter(self, node: ParseNode, context: ParsingContext) -> Parameter:
        map_node = expect_map(node, "parameter", context)
        pointer = map_node.reference_pointer()
        if pointer is not None:
            reference = parse_reference(pointer, ReferenceType.PARAMETER, context.version)
            if reference.is_local and reference.id in context.get_temp(_BODY_PARAMETER_IDS, ()):
                reference.type = ReferenceType.REQUEST_BODY
            return Parameter(reference=reference)

        parameter = parse_map(
            map_node, Parameter(), self.PARAMETER_FIXED_FIELDS, EXTENSION_PATTERNS, context
        )
        if parameter.location != ParameterLocation.BODY:
            parameter.schema_ = _gather_simple_schema(map_node)
            location = parameter.location.value if parameter.location else None
            _apply_collection_format(parameter, map_node, location)
            process_any_fields(map_node, parameter, _X_EXAMPLE_ANY_FIELDS, context)
        return parameter

    # ------------------------------------------------------------------ #
    # Responses
    # ------------------------------------------------------------------ #

    def load_response(self, node: ParseNode, context: ParsingContext) -> Response:
        map_node = expect_map(node, "response", context)
        pointer = map_node.reference_pointer()
        if pointer is not None:
            return Response(reference=parse_reference(pointer, ReferenceType.RESPONSE, context.version))

        response = parse_map(
            map_node, Response(), self.RESPONSE_FIXED_FIELDS, EXTENSION_PATTERNS, context
        )
        schema = None
        schema_node = map_node.get("schema")
        if schema_node is not None:
            with context.location("schema"):
                schema = load_schema(schema_node, context)
        examples = {}
        examples_node = map_node.get("examples")
        if examples_node is not None:
            with context.location("examples"):
                for media_type, value in expect_map(examples_node, "examples", context).items():
                    examples[media_type] = value.create_any(schema)

        if schema is None and not examples:
            return response
        produces = context.get_temp(_OPERATION_PRODUCES) or context.get_temp(_GLOBAL_PRODUCES)
        media_types = list(produces or [DEFAULT_RESPONSE_CONTENT_TYPE])
        media_types += [media for media in examples if media not in media_types]
        response.content = {
            media: MediaType(
                schema=schema.clone() if schema is not None else None,
                example=examples.get(media),
            )
            for media in media_types
        }
        return response

    def load_header(self, node: ParseNode, context: ParsingContext) -> Header:
        map_node = expect_map(node, "header", context)
        header = parse_map(map_node, Header(), self.HEADER_FIXED_FIELDS, EXTENSION_PATTERNS, context)
        header.schema_ = _gather_simple_schema(map_node)
        _apply_collection_format(header, map_node, "header")
        process_any_fields(map_node, header, _X_EXAMPLE_ANY_FIELDS, context)
        return header

    # ------------------------------------------------------------------ #
    # Security
    # ------------------------------------------------------------------ #

    def load_security_scheme(self, node: ParseNode, context: ParsingContext) -> SecurityScheme:
        map_node = expect_map(node, "securityScheme", context)
        draft = parse_map(
            map_node, _SecurityDefinition(), self.SECURITY_SCHEME_FIXED_FIELDS, EXTENSION_PATTERNS, context
        )
        scheme = draft.scheme
        if scheme.type == SecuritySchemeType.OAUTH2:
            attribute = _FLOW_ATTRIBUTES.get(draft.flow_name or "")
            if attribute is None:
                logger.warning("Ignoring OAuth2 scheme without a known flow at %s", context.path)
            else:
                scheme.flows = OAuthFlows(**{attribute: draft.flow})
        return scheme
