"""Pointers to reusable components and their version-specific syntax.

A :class:`Reference` records *what* it points at -- a component type, an id
and optionally an external document -- never the pointer text itself. The
text is derived on demand from the fixed ``(type, version) -> root`` table
in :data:`_V2_ROOTS` / :func:`component_root`:

========================  ===============================  ========================
Type                      OpenAPI 3.x root                 Swagger 2.0 root
========================  ===============================  ========================
``SCHEMA``                ``components/schemas``           ``definitions``
``PARAMETER``             ``components/parameters``        ``parameters``
``REQUEST_BODY``          ``components/requestBodies``     ``parameters``
``RESPONSE``              ``components/responses``         ``responses``
``SECURITY_SCHEME``       ``components/securitySchemes``   ``securityDefinitions``
========================  ===============================  ========================

Resolution is lazy: a reference to a missing component can be built,
copied and serialized freely, and only :func:`resolve_reference` fails with
:class:`~oasmodel.exceptions.ReferenceNotFoundError`.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict

from oasmodel.exceptions import (
    InvalidArgumentError,
    ReferenceCycleError,
    ReferenceNotFoundError,
    ReferenceSyntaxError,
    SerializationError,
)
from oasmodel.versions import SpecVersion
from oasmodel.writers.base import OpenApiWriter, ensure_writer

if TYPE_CHECKING:
    from oasmodel.models.document import OpenApiDocument


class ReferenceType(str, enum.Enum):
    """Kinds of reusable component; the value is the 3.x ``components`` key."""

    SCHEMA = "schemas"
    RESPONSE = "responses"
    PARAMETER = "parameters"
    EXAMPLE = "examples"
    REQUEST_BODY = "requestBodies"
    HEADER = "headers"
    SECURITY_SCHEME = "securitySchemes"
    LINK = "links"
    CALLBACK = "callbacks"
    PATH_ITEM = "pathItems"
    TAG = "tags"


_V2_ROOTS: dict[ReferenceType, str] = {
    ReferenceType.SCHEMA: "definitions",
    ReferenceType.PARAMETER: "parameters",
    ReferenceType.REQUEST_BODY: "parameters",
    ReferenceType.RESPONSE: "responses",
    ReferenceType.HEADER: "headers",
    ReferenceType.SECURITY_SCHEME: "securityDefinitions",
    ReferenceType.TAG: "tags",
}

_V2_TYPES_BY_ROOT: dict[str, ReferenceType] = {
    "definitions": ReferenceType.SCHEMA,
    "parameters": ReferenceType.PARAMETER,
    "responses": ReferenceType.RESPONSE,
    "headers": ReferenceType.HEADER,
    "securityDefinitions": ReferenceType.SECURITY_SCHEME,
    "tags": ReferenceType.TAG,
}

# Attribute of Components holding each registry.
_REGISTRY_ATTRIBUTES: dict[ReferenceType, str] = {
    ReferenceType.SCHEMA: "schemas",
    ReferenceType.RESPONSE: "responses",
    ReferenceType.PARAMETER: "parameters",
    ReferenceType.EXAMPLE: "examples",
    ReferenceType.REQUEST_BODY: "request_bodies",
    ReferenceType.HEADER: "headers",
    ReferenceType.SECURITY_SCHEME: "security_schemes",
    ReferenceType.LINK: "links",
    ReferenceType.CALLBACK: "callbacks",
    ReferenceType.PATH_ITEM: "path_items",
}


def component_root(reference_type: ReferenceType, version: SpecVersion) -> str:
    """Return the pointer root (without ``#/``) for *reference_type* in *version*.

    Raises:
        SerializationError: If the component type has no home in *version*.
    """
    if version == SpecVersion.V2:
        try:
            return _V2_ROOTS[reference_type]
        except KeyError:
            raise SerializationError(
                f"Components of type '{reference_type.value}' cannot be referenced in Swagger 2.0"
            ) from None
    if reference_type == ReferenceType.TAG:
        return "tags"
    if reference_type == ReferenceType.PATH_ITEM and version == SpecVersion.V3_0:
        raise SerializationError("Path item components require OpenAPI 3.1")
    return f"components/{reference_type.value}"


def _escape(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


class Reference(BaseModel):
    """A pointer to a reusable component.

    ``summary`` and ``description`` are the OpenAPI 3.1 reference-object
    siblings that override the target's own values; they are only written
    for 3.1.

    ``external_fragment`` keeps the fragment of a pointer into another
    document as it was read (``/Pet`` for ``common.yaml#/Pet``). When set,
    the pointer is written back verbatim instead of from the root table.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    type: ReferenceType
    id: Optional[str] = None
    external_resource: Optional[str] = None
    external_fragment: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_external(self) -> bool:
        return self.external_resource is not None

    @property
    def is_local(self) -> bool:
        return self.external_resource is None

    def pointer(self, version: SpecVersion) -> str:
        """Render the ``$ref`` text for *version*."""
        if self.id is None:
            if self.external_resource is None:
                raise SerializationError("A reference needs an id or an external resource")
            return self.external_resource
        if self.external_resource is not None and self.external_fragment is not None:
            return f"{self.external_resource}#{self.external_fragment}"
        if self.type == ReferenceType.TAG:
            return self.id
        local = f"#/{component_root(self.type, SpecVersion(version))}/{_escape(self.id)}"
        return f"{self.external_resource}{local}" if self.external_resource else local

    def serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        """Write the pointer-only object (or the bare id for tags)."""
        writer = ensure_writer(writer)
        version = SpecVersion(version)
        if self.type == ReferenceType.TAG and self.is_local:
            writer.write_string(self.id or "")
            return
        writer.write_start_object()
        writer.write_property("$ref", self.pointer(version))
        if version == SpecVersion.V3_1:
            writer.write_property("summary", self.summary)
            writer.write_property("description", self.description)
        writer.write_end_object()

    def clone(self) -> "Reference":
        return self.model_copy(deep=True)


def parse_reference(
    pointer: str,
    reference_type: Optional[ReferenceType],
    version: SpecVersion,
) -> Reference:
    """Parse a ``$ref`` string read from a document of *version*.

    Local pointers must use the version's root layout
    (``#/components/{plural}/{id}`` for 3.x, ``#/{root}/{id}`` for 2.0). The
    component type is taken from the pointer; *reference_type* is used for
    bare ids and external documents, and to tell 2.0 body parameters
    (``REQUEST_BODY``) from other parameters.

    Raises:
        ReferenceSyntaxError: If *pointer* does not match the grammar.
    """
    if pointer is None:
        raise InvalidArgumentError("pointer")
    text = pointer.strip()
    if not text:
        raise ReferenceSyntaxError(pointer)

    if "#" not in text:
        if reference_type is None:
            raise ReferenceSyntaxError(pointer, f"Cannot infer the component type of '{pointer}'")
        if reference_type == ReferenceType.TAG or ("/" not in text and "." not in text):
            return Reference(type=reference_type, id=text)
        return Reference(type=reference_type, external_resource=text)

    external, _, fragment = text.partition("#")
    if not fragment.startswith("/"):
        raise ReferenceSyntaxError(pointer, f"Reference fragment must start with '/': '{pointer}'")
    segments = [_unescape(segment) for segment in fragment[1:].split("/")]
    if any(segment == "" for segment in segments):
        raise ReferenceSyntaxError(pointer)

    if external:
        # Fragment layout of foreign documents is not ours to validate.
        if reference_type is None:
            raise ReferenceSyntaxError(pointer, f"Cannot infer the component type of '{pointer}'")
        return Reference(
            type=reference_type,
            id=segments[-1],
            external_resource=external,
            external_fragment=fragment,
        )

    version = SpecVersion(version)
    if version.is_legacy:
        if len(segments) != 2 or segments[0] not in _V2_TYPES_BY_ROOT:
            raise ReferenceSyntaxError(
                pointer, f"'{pointer}' is not a Swagger 2.0 component pointer"
            )
        parsed_type = _V2_TYPES_BY_ROOT[segments[0]]
        if parsed_type == ReferenceType.PARAMETER and reference_type == ReferenceType.REQUEST_BODY:
            parsed_type = ReferenceType.REQUEST_BODY
        return Reference(type=parsed_type, id=segments[1])

    if len(segments) != 3 or segments[0] != "components":
        raise ReferenceSyntaxError(pointer, f"'{pointer}' is not a components pointer")
    try:
        parsed_type = ReferenceType(segments[1])
    except ValueError:
        raise ReferenceSyntaxError(
            pointer, f"Unknown component type '{segments[1]}' in '{pointer}'"
        ) from None
    if parsed_type == ReferenceType.TAG:
        raise ReferenceSyntaxError(pointer, "Tags are not components")
    return Reference(type=parsed_type, id=segments[2])


def resolve_reference(
    document: "OpenApiDocument",
    reference: Reference,
    follow: bool = True,
) -> Any:
    """Look *reference* up in *document*'s component registries.

    When *follow* is true and the component found is itself only a reference
    (an alias of another component), the chain is followed to the inline
    definition.

    Raises:
        InvalidArgumentError: If *document* or *reference* is ``None``.
        ReferenceNotFoundError: If the target does not exist, or the reference
            points into an external document (never fetched).
        ReferenceCycleError: If following aliases revisits a component.
    """
    if document is None:
        raise InvalidArgumentError("document")
    if reference is None:
        raise InvalidArgumentError("reference")

    seen: list[str] = []
    current = reference
    while True:
        label = f"{current.type.value}/{current.id}"
        if label in seen:
            raise ReferenceCycleError(seen + [label])
        seen.append(label)
        target = _lookup(document, current)
        next_reference = getattr(target, "reference", None)
        if not follow or next_reference is None or _same_target(next_reference, current):
            # A component referencing its own slot is the definition itself.
            return target
        current = next_reference


def _same_target(first: Reference, second: Reference) -> bool:
    return (first.type, first.id, first.external_resource, first.external_fragment) == (
        second.type,
        second.id,
        second.external_resource,
        second.external_fragment,
    )


def _lookup(document: "OpenApiDocument", reference: Reference) -> Any:
    pointer = reference.external_resource or ""
    if reference.id is not None:
        pointer += f"#/{reference.type.value}/{reference.id}"
    if reference.is_external:
        raise ReferenceNotFoundError(
            pointer, f"External reference '{pointer}' cannot be resolved in-document"
        )
    if reference.id is None:
        raise ReferenceNotFoundError(pointer)

    if reference.type == ReferenceType.TAG:
        for tag in document.tags or []:
            if tag.name == reference.id:
                return tag
        raise ReferenceNotFoundError(reference.id, f"Tag '{reference.id}' is not declared")

    registry = None
    if document.components is not None:
        registry = getattr(document.components, _REGISTRY_ATTRIBUTES[reference.type], None)
    if not registry or reference.id not in registry:
        raise ReferenceNotFoundError(pointer)
    return registry[reference.id]
