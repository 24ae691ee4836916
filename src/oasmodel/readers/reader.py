"""Entry points that turn document text into model elements."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from oasmodel.elements import OpenApiElement
from oasmodel.exceptions import DocumentParseError, InvalidArgumentError
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
    Parameter,
    PathItem,
    RequestBody,
    Response,
    SecurityRequirement,
    SecurityScheme,
    Server,
    ServerVariable,
    Tag,
)
from oasmodel.readers.context import ParsingContext
from oasmodel.readers.parse_node import MapNode, ParseNode, compose, from_python
from oasmodel.readers.v2 import SwaggerV2Deserializer
from oasmodel.readers.v3 import OpenApiV3Deserializer
from oasmodel.readers.v31 import OpenApiV31Deserializer
from oasmodel.settings import ReaderSettings
from oasmodel.versions import SpecVersion, detect_version

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=OpenApiElement)

Source = Union[str, bytes, Mapping[str, Any]]

_DESERIALIZERS = {
    SpecVersion.V2: SwaggerV2Deserializer,
    SpecVersion.V3_0: OpenApiV3Deserializer,
    SpecVersion.V3_1: OpenApiV31Deserializer,
}

_FRAGMENT_LOADERS: dict[type, str] = {
    OpenApiDocument: "load_document",
    Info: "load_info",
    Contact: "load_contact",
    License: "load_license",
    Server: "load_server",
    ServerVariable: "load_server_variable",
    ExternalDocs: "load_external_docs",
    Tag: "load_tag",
    PathItem: "load_path_item",
    Operation: "load_operation",
    Parameter: "load_parameter",
    RequestBody: "load_request_body",
    MediaType: "load_media_type",
    Encoding: "load_encoding",
    Example: "load_example",
    Header: "load_header",
    Response: "load_response",
    Link: "load_link",
    Callback: "load_callback",
    Components: "load_components",
    SecurityScheme: "load_security_scheme",
    SecurityRequirement: "load_security_requirement",
    OAuthFlows: "load_oauth_flows",
    OAuthFlow: "load_oauth_flow",
}


def _to_node(source: Source) -> ParseNode:
    if source is None:
        raise InvalidArgumentError("source")
    if isinstance(source, bytes):
        try:
            source = source.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DocumentParseError(f"Document is not valid UTF-8: {exc}") from exc
    if isinstance(source, str):
        return compose(source)
    return from_python(source)


def _context(version: SpecVersion, settings: Optional[ReaderSettings]) -> ParsingContext:
    context = ParsingContext(version, settings)
    context.deserializer = _DESERIALIZERS[context.version]()
    return context


def read_document(source: Source, settings: Optional[ReaderSettings] = None) -> OpenApiDocument:
    """Read a complete document, detecting its version.

    Args:
        source: YAML or JSON text, UTF-8 bytes, or already-decoded data.
        settings: Reader options; registered extension parsers apply here.

    Returns:
        The document in the version-independent model.

    Raises:
        DocumentParseError: If the text is malformed or a recognised field
            has the wrong shape.
        UnsupportedVersionError: If the version is missing or unsupported.
        ReferenceSyntaxError: If a ``$ref`` does not match the pointer grammar.
    """
    root = _to_node(source)
    if not isinstance(root, MapNode):
        raise DocumentParseError(f"The document root must be a mapping, found a {root.kind}")
    version = detect_version(root.scalar_value("swagger"), root.scalar_value("openapi"))
    context = _context(version, settings)
    document = context.deserializer.load_document(root, context)
    logger.debug("Read %s document with %d path(s)", version.value, len(document.paths or {}))
    return document


def read_fragment(
    source: Source,
    element_type: Type[E],
    version: SpecVersion,
    settings: Optional[ReaderSettings] = None,
) -> E:
    """Read a single element of *element_type* written for *version*.

    Raises:
        InvalidArgumentError: If *element_type* cannot be read on its own.
        DocumentParseError: If the text is malformed.
    """
    loader = _FRAGMENT_LOADERS.get(element_type)
    if loader is None:
        raise InvalidArgumentError(
            "element_type", f"Cannot read a {getattr(element_type, '__name__', element_type)} fragment"
        )
    context = _context(SpecVersion(version), settings)
    return getattr(context.deserializer, loader)(_to_node(source), context)
