"""OpenAPI 3.0 deserializer.

Every element type has a fixed-field table and shares the ``x-`` pattern
table. The tables are class attributes so :class:`~oasmodel.readers.v31.OpenApiV31Deserializer`
can extend them with the 3.1 additions.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Type

from oasmodel.elements import OpenApiElement
from oasmodel.models import (
    Callback,
    Components,
    Contact,
    Encoding,
    Example,
    ExternalDocs,
    Header,
    Info,
    License,
    Link,
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
    SecurityRequirement,
    SecurityScheme,
    SecuritySchemeType,
    Server,
    ServerVariable,
    Tag,
)
from oasmodel.readers.context import ParsingContext
from oasmodel.readers.field_maps import (
    EXTENSION_PATTERNS,
    AnyField,
    AnyFieldMap,
    AnyMapField,
    AnyMapFieldMap,
    FixedFieldMap,
    any_field,
    bool_field,
    element_field,
    extensible_map_field,
    list_field,
    load_extension,
    load_schema,
    map_field,
    parse_map,
    process_any_fields,
    process_any_map_fields,
    schema_field,
    string_field,
    string_list_field,
)
from oasmodel.readers.parse_node import MapNode, ParseNode, expect_list, expect_map, expect_scalar
from oasmodel.references import Reference, ReferenceType, parse_reference
from oasmodel.schema import JsonSchema
from oasmodel.versions import SpecVersion

logger = logging.getLogger(__name__)


def enum_field(attribute: str, enum_type: type, name: str) -> Callable:
    """Read an enum-valued scalar; an unrecognised value leaves the field unset."""

    def action(target: Any, node: ParseNode, context: ParsingContext) -> None:
        raw = expect_scalar(node, name, context)
        try:
            setattr(target, attribute, enum_type(raw))
        except ValueError:
            logger.warning("Ignoring unknown %s '%s' at %s", name, raw, context.path)
            setattr(target, attribute, None)

    return action


def tags_field(target: Operation, node: ParseNode, context: ParsingContext) -> None:
    names = expect_list(node, "tags", context).create_simple_list("tags", context)
    target.tags = [Tag(reference=Reference(type=ReferenceType.TAG, id=name)) for name in names]


def security_field(target: Any, node: ParseNode, context: ParsingContext) -> None:
    target.security = expect_list(node, "security", context).create_list(
        context.deserializer.load_security_requirement, context
    )


def _set(attribute: str) -> Callable[[Any, Any], None]:
    def setter(target: Any, value: Any) -> None:
        setattr(target, attribute, value)

    return setter


def _schema_of(target: Any):
    return target.schema_


_EXAMPLE_ANY_FIELDS: AnyFieldMap = {"example": AnyField(_set("example"), _schema_of)}
_EXAMPLES_ANY_MAP_FIELDS: AnyMapFieldMap = {
    "examples": AnyMapField(lambda t: t.examples, "value", _set("value"), _schema_of)
}


class OpenApiV3Deserializer:
    """Reads OpenAPI 3.0 parse nodes into model elements."""

    version = SpecVersion.V3_0

    DOCUMENT_FIXED_FIELDS: FixedFieldMap = {
        "openapi": lambda o, n, c: None,
        "info": element_field("info", "load_info"),
        "servers": list_field("servers", "load_server"),
        "paths": extensible_map_field("paths", "paths_extensions", "load_path_item"),
        "components": element_field("components", "load_components"),
        "security": security_field,
        "tags": list_field("tags", "load_tag"),
        "externalDocs": element_field("external_docs", "load_external_docs"),
    }

    INFO_FIXED_FIELDS: FixedFieldMap = {
        "title": string_field("title"),
        "description": string_field("description"),
        "termsOfService": string_field("terms_of_service", "termsOfService"),
        "contact": element_field("contact", "load_contact"),
        "license": element_field("license", "load_license"),
        "version": string_field("version"),
    }

    CONTACT_FIXED_FIELDS: FixedFieldMap = {
        "name": string_field("name"),
        "url": string_field("url"),
        "email": string_field("email"),
    }

    LICENSE_FIXED_FIELDS: FixedFieldMap = {
        "name": string_field("name"),
        "url": string_field("url"),
    }

    SERVER_FIXED_FIELDS: FixedFieldMap = {
        "url": string_field("url"),
        "description": string_field("description"),
        "variables": map_field("variables", "load_server_variable"),
    }

    SERVER_VARIABLE_FIXED_FIELDS: FixedFieldMap = {
        "enum": string_list_field("enum"),
        "default": string_field("default"),
        "description": string_field("description"),
    }

    EXTERNAL_DOCS_FIXED_FIELDS: FixedFieldMap = {
        "description": string_field("description"),
        "url": string_field("url"),
    }

    TAG_FIXED_FIELDS: FixedFieldMap = {
        "name": string_field("name"),
        "description": string_field("description"),
        "externalDocs": element_field("external_docs", "load_external_docs"),
    }

    PATH_ITEM_FIXED_FIELDS: FixedFieldMap = {
        "summary": string_field("summary"),
        "description": string_field("description"),
        **{
            operation_type.value: (
                lambda o, n, c, _type=operation_type: o.add_operation(
                    _type, c.deserializer.load_operation(n, c)
                )
            )
            for operation_type in OperationType
        },
        "servers": list_field("servers", "load_server"),
        "parameters": list_field("parameters", "load_parameter"),
    }

    OPERATION_FIXED_FIELDS: FixedFieldMap = {
        "tags": tags_field,
        "summary": string_field("summary"),
        "description": string_field("description"),
        "externalDocs": element_field("external_docs", "load_external_docs"),
        "operationId": string_field("operation_id", "operationId"),
        "parameters": list_field("parameters", "load_parameter"),
        "requestBody": element_field("request_body", "load_request_body"),
        "responses": extensible_map_field("responses", "responses_extensions", "load_response"),
        "callbacks": map_field("callbacks", "load_callback"),
        "deprecated": bool_field("deprecated", "deprecated"),
        "security": security_field,
        "servers": list_field("servers", "load_server"),
    }

    PARAMETER_FIXED_FIELDS: FixedFieldMap = {
        "name": string_field("name"),
        "in": enum_field("location", ParameterLocation, "in"),
        "description": string_field("description"),
        "required": bool_field("required", "required"),
        "deprecated": bool_field("deprecated", "deprecated"),
        "allowEmptyValue": bool_field("allow_empty_value", "allowEmptyValue"),
        "style": string_field("style"),
        "explode": bool_field("explode", "explode"),
        "allowReserved": bool_field("allow_reserved", "allowReserved"),
        "schema": schema_field("schema_"),
        "content": map_field("content", "load_media_type"),
        "examples": map_field("examples", "load_example"),
        "example": any_field("example"),
    }

    REQUEST_BODY_FIXED_FIELDS: FixedFieldMap = {
        "description": string_field("description"),
        "content": map_field("content", "load_media_type"),
        "required": bool_field("required", "required"),
    }

    MEDIA_TYPE_FIXED_FIELDS: FixedFieldMap = {
        "schema": schema_field("schema_"),
        "example": any_field("example"),
        "examples": map_field("examples", "load_example"),
        "encoding": map_field("encoding", "load_encoding"),
    }

    ENCODING_FIXED_FIELDS: FixedFieldMap = {
        "contentType": string_field("content_type", "contentType"),
        "headers": map_field("headers", "load_header"),
        "style": string_field("style"),
        "explode": bool_field("explode", "explode"),
        "allowReserved": bool_field("allow_reserved", "allowReserved"),
    }

    EXAMPLE_FIXED_FIELDS: FixedFieldMap = {
        "summary": string_field("summary"),
        "description": string_field("description"),
        "value": any_field("value"),
        "externalValue": string_field("external_value", "externalValue"),
    }

    HEADER_FIXED_FIELDS: FixedFieldMap = {
        "description": string_field("description"),
        "required": bool_field("required", "required"),
        "deprecated": bool_field("deprecated", "deprecated"),
        "allowEmptyValue": bool_field("allow_empty_value", "allowEmptyValue"),
        "style": string_field("style"),
        "explode": bool_field("explode", "explode"),
        "allowReserved": bool_field("allow_reserved", "allowReserved"),
        "schema": schema_field("schema_"),
        "example": any_field("example"),
        "examples": map_field("examples", "load_example"),
        "content": map_field("content", "load_media_type"),
    }

    RESPONSE_FIXED_FIELDS: FixedFieldMap = {
        "description": string_field("description"),
        "headers": map_field("headers", "load_header"),
        "content": map_field("content", "load_media_type"),
        "links": map_field("links", "load_link"),
    }

    LINK_FIXED_FIELDS: FixedFieldMap = {
        "operationRef": string_field("operation_ref", "operationRef"),
        "operationId": string_field("operation_id", "operationId"),
        "parameters": lambda o, n, c: setattr(
            o,
            "parameters",
            {key: value.create_any() for key, value in expect_map(n, "parameters", c).items()},
        ),
        "requestBody": any_field("request_body"),
        "description": string_field("description"),
        "server": element_field("server", "load_server"),
    }

    COMPONENTS_FIXED_FIELDS: FixedFieldMap = {
        "schemas": map_field("schemas", "load_schema"),
        "responses": map_field("responses", "load_response"),
        "parameters": map_field("parameters", "load_parameter"),
        "examples": map_field("examples", "load_example"),
        "requestBodies": map_field("request_bodies", "load_request_body", "requestBodies"),
        "headers": map_field("headers", "load_header"),
        "securitySchemes": map_field("security_schemes", "load_security_scheme", "securitySchemes"),
        "links": map_field("links", "load_link"),
        "callbacks": map_field("callbacks", "load_callback"),
    }

    SECURITY_SCHEME_FIXED_FIELDS: FixedFieldMap = {
        "type": enum_field("type", SecuritySchemeType, "type"),
        "description": string_field("description"),
        "name": string_field("name"),
        "in": string_field("location", "in"),
        "scheme": string_field("scheme"),
        "bearerFormat": string_field("bearer_format", "bearerFormat"),
        "flows": element_field("flows", "load_oauth_flows"),
        "openIdConnectUrl": string_field("open_id_connect_url", "openIdConnectUrl"),
    }

    OAUTH_FLOWS_FIXED_FIELDS: FixedFieldMap = {
        "implicit": element_field("implicit", "load_oauth_flow"),
        "password": element_field("password", "load_oauth_flow"),
        "clientCredentials": element_field("client_credentials", "load_oauth_flow"),
        "authorizationCode": element_field("authorization_code", "load_oauth_flow"),
    }

    OAUTH_FLOW_FIXED_FIELDS: FixedFieldMap = {
        "authorizationUrl": string_field("authorization_url", "authorizationUrl"),
        "tokenUrl": string_field("token_url", "tokenUrl"),
        "refreshUrl": string_field("refresh_url", "refreshUrl"),
        "scopes": lambda o, n, c: setattr(
            o, "scopes", expect_map(n, "scopes", c).create_simple_map("scopes", c)
        ),
    }

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _parse(
        self, node: ParseNode, element: OpenApiElement, name: str, fixed: FixedFieldMap, context: ParsingContext
    ):
        return parse_map(expect_map(node, name, context), element, fixed, EXTENSION_PATTERNS, context)

    def _referenced(
        self,
        node: MapNode,
        element_type: Type[OpenApiElement],
        reference_type: ReferenceType,
        context: ParsingContext,
    ) -> Optional[OpenApiElement]:
        """Build a reference-only element when *node* is a ``$ref`` object."""
        pointer = node.reference_pointer()
        if pointer is None:
            return None
        reference = parse_reference(pointer, reference_type, context.version)
        self._read_reference_siblings(node, reference, context)
        return element_type(reference=reference)

    def _read_reference_siblings(self, node: MapNode, reference: Reference, context: ParsingContext) -> None:
        # 3.0 reference objects have no siblings.
        return

    # ------------------------------------------------------------------ #
    # Loaders
    # ------------------------------------------------------------------ #

    def load_document(self, node: ParseNode, context: ParsingContext) -> OpenApiDocument:
        document = OpenApiDocument(paths=None)
        return self._parse(node, document, "document", self.DOCUMENT_FIXED_FIELDS, context)

    def load_info(self, node: ParseNode, context: ParsingContext) -> Info:
        return self._parse(node, Info(), "info", self.INFO_FIXED_FIELDS, context)

    def load_contact(self, node: ParseNode, context: ParsingContext) -> Contact:
        return self._parse(node, Contact(), "contact", self.CONTACT_FIXED_FIELDS, context)

    def load_license(self, node: ParseNode, context: ParsingContext) -> License:
        return self._parse(node, License(), "license", self.LICENSE_FIXED_FIELDS, context)

    def load_server(self, node: ParseNode, context: ParsingContext) -> Server:
        return self._parse(node, Server(), "server", self.SERVER_FIXED_FIELDS, context)

    def load_server_variable(self, node: ParseNode, context: ParsingContext) -> ServerVariable:
        return self._parse(
            node, ServerVariable(), "variable", self.SERVER_VARIABLE_FIXED_FIELDS, context
        )

    def load_external_docs(self, node: ParseNode, context: ParsingContext) -> ExternalDocs:
        return self._parse(
            node, ExternalDocs(), "externalDocs", self.EXTERNAL_DOCS_FIXED_FIELDS, context
        )

    def load_tag(self, node: ParseNode, context: ParsingContext) -> Tag:
        return self._parse(node, Tag(), "tag", self.TAG_FIXED_FIELDS, context)

    def load_path_item(self, node: ParseNode, context: ParsingContext) -> PathItem:
        map_node = expect_map(node, "pathItem", context)
        referenced = self._referenced(map_node, PathItem, ReferenceType.PATH_ITEM, context)
        if referenced is not None:
            return referenced
        return parse_map(map_node, PathItem(), self.PATH_ITEM_FIXED_FIELDS, EXTENSION_PATTERNS, context)

    def load_operation(self, node: ParseNode, context: ParsingContext) -> Operation:
        operation = Operation(responses=None)
        return self._parse(node, operation, "operation", self.OPERATION_FIXED_FIELDS, context)

    def load_parameter(self, node: ParseNode, context: ParsingContext) -> Parameter:
        map_node = expect_map(node, "parameter", context)
        referenced = self._referenced(map_node, Parameter, ReferenceType.PARAMETER, context)
        if referenced is not None:
            return referenced
        parameter = parse_map(
            map_node, Parameter(), self.PARAMETER_FIXED_FIELDS, EXTENSION_PATTERNS, context
        )
        process_any_fields(map_node, parameter, _EXAMPLE_ANY_FIELDS, context)
        process_any_map_fields(map_node, parameter, _EXAMPLES_ANY_MAP_FIELDS, context)
        return parameter

    def load_request_body(self, node: ParseNode, context: ParsingContext) -> RequestBody:
        map_node = expect_map(node, "requestBody", context)
        referenced = self._referenced(map_node, RequestBody, ReferenceType.REQUEST_BODY, context)
        if referenced is not None:
            return referenced
        return parse_map(
            map_node, RequestBody(), self.REQUEST_BODY_FIXED_FIELDS, EXTENSION_PATTERNS, context
        )

    def load_media_type(self, node: ParseNode, context: ParsingContext) -> MediaType:
        map_node = expect_map(node, "mediaType", context)
        media_type = parse_map(
            map_node, MediaType(), self.MEDIA_TYPE_FIXED_FIELDS, EXTENSION_PATTERNS, context
        )
        process_any_fields(map_node, media_type, _EXAMPLE_ANY_FIELDS, context)
        process_any_map_fields(map_node, media_type, _EXAMPLES_ANY_MAP_FIELDS, context)
        return media_type

    def load_encoding(self, node: ParseNode, context: ParsingContext) -> Encoding:
        return self._parse(node, Encoding(), "encoding", self.ENCODING_FIXED_FIELDS, context)

    def load_example(self, node: ParseNode, context: ParsingContext) -> Example:
        map_node = expect_map(node, "example", context)
        referenced = self._referenced(map_node, Example, ReferenceType.EXAMPLE, context)
        if referenced is not None:
            return referenced
        return parse_map(map_node, Example(), self.EXAMPLE_FIXED_FIELDS, EXTENSION_PATTERNS, context)

    def load_header(self, node: ParseNode, context: ParsingContext) -> Header:
        map_node = expect_map(node, "header", context)
        referenced = self._referenced(map_node, Header, ReferenceType.HEADER, context)
        if referenced is not None:
            return referenced
        header = parse_map(map_node, Header(), self.HEADER_FIXED_FIELDS, EXTENSION_PATTERNS, context)
        process_any_fields(map_node, header, _EXAMPLE_ANY_FIELDS, context)
        process_any_map_fields(map_node, header, _EXAMPLES_ANY_MAP_FIELDS, context)
        return header

    def load_response(self, node: ParseNode, context: ParsingContext) -> Response:
        map_node = expect_map(node, "response", context)
        referenced = self._referenced(map_node, Response, ReferenceType.RESPONSE, context)
        if referenced is not None:
            return referenced
        return parse_map(map_node, Response(), self.RESPONSE_FIXED_FIELDS, EXTENSION_PATTERNS, context)

    def load_link(self, node: ParseNode, context: ParsingContext) -> Link:
        map_node = expect_map(node, "link", context)
        referenced = self._referenced(map_node, Link, ReferenceType.LINK, context)
        if referenced is not None:
            return referenced
        return parse_map(map_node, Link(), self.LINK_FIXED_FIELDS, EXTENSION_PATTERNS, context)

    def load_callback(self, node: ParseNode, context: ParsingContext) -> Callback:
        map_node = expect_map(node, "callback", context)
        referenced = self._referenced(map_node, Callback, ReferenceType.CALLBACK, context)
        if referenced is not None:
            return referenced
        callback = Callback()
        for key, value in map_node.items():
            with context.location(key):
                if key.startswith("x-"):
                    callback.add_extension(key, load_extension(key, value, context))
                else:
                    callback.add_path_item(key, self.load_path_item(value, context))
        return callback

    def load_components(self, node: ParseNode, context: ParsingContext) -> Components:
        return self._parse(node, Components(), "components", self.COMPONENTS_FIXED_FIELDS, context)

    def load_schema(self, node: ParseNode, context: ParsingContext) -> JsonSchema:
        return load_schema(node, context)

    def load_security_scheme(self, node: ParseNode, context: ParsingContext) -> SecurityScheme:
        map_node = expect_map(node, "securityScheme", context)
        referenced = self._referenced(
            map_node, SecurityScheme, ReferenceType.SECURITY_SCHEME, context
        )
        if referenced is not None:
            return referenced
        return parse_map(
            map_node, SecurityScheme(), self.SECURITY_SCHEME_FIXED_FIELDS, EXTENSION_PATTERNS, context
        )

    def load_oauth_flows(self, node: ParseNode, context: ParsingContext) -> OAuthFlows:
        return self._parse(node, OAuthFlows(), "flows", self.OAUTH_FLOWS_FIXED_FIELDS, context)

    def load_oauth_flow(self, node: ParseNode, context: ParsingContext) -> OAuthFlow:
        return self._parse(node, OAuthFlow(scopes=None), "flow", self.OAUTH_FLOW_FIXED_FIELDS, context)

    def load_security_requirement(
        self, node: ParseNode, context: ParsingContext
    ) -> SecurityRequirement:
        requirement = SecurityRequirement()
        for name, scopes in expect_map(node, "security", context).items():
            with context.location(name):
                scheme = SecurityScheme(
                    reference=Reference(type=ReferenceType.SECURITY_SCHEME, id=name)
                )
                requirement.add(
                    scheme, expect_list(scopes, name, context).create_simple_list(name, context)
                )
        return requirement
