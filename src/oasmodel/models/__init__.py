"""The document model: one pydantic class per API-description object."""

from oasmodel.models.document import Components, OpenApiDocument
from oasmodel.models.info import Contact, ExternalDocs, Info, License, Server, ServerVariable, Tag
from oasmodel.models.media import Encoding, Example, Header, MediaType
from oasmodel.models.operations import Callback, Operation, OperationType, PathItem
from oasmodel.models.parameters import Parameter, ParameterLocation, RequestBody
from oasmodel.models.responses import Link, Response
from oasmodel.models.security import (
    OAuthFlow,
    OAuthFlows,
    SecurityRequirement,
    SecurityScheme,
    SecuritySchemeType,
)

__all__ = [
    "Callback",
    "Components",
    "Contact",
    "Encoding",
    "Example",
    "ExternalDocs",
    "Header",
    "Info",
    "License",
    "Link",
    "MediaType",
    "OAuthFlow",
    "OAuthFlows",
    "OpenApiDocument",
    "Operation",
    "OperationType",
    "Parameter",
    "ParameterLocation",
    "PathItem",
    "RequestBody",
    "Response",
    "SecurityRequirement",
    "SecurityScheme",
    "SecuritySchemeType",
    "Server",
    "ServerVariable",
    "Tag",
]
