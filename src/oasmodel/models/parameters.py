"""Operation inputs: parameters and request bodies.

Swagger 2.0 models a request body as an ``in: body`` parameter and form
fields as ``in: formData`` parameters; 3.x uses a :class:`RequestBody` with a
``content`` map. The canonical model is the 3.x shape. The helpers here
convert in both directions:

* :meth:`RequestBody.to_body_parameter` and
  :meth:`RequestBody.to_form_data_parameters` when writing 2.0;
* :func:`request_body_from_parameters` when reading 2.0 (and when writing
  3.x from a model that still carries legacy parameters).
"""

from __future__ import annotations

import enum
import logging
from typing import Optional, Sequence

from pydantic import Field

from oasmodel.any import AnyString, OpenApiAny
from oasmodel.elements import Extensible, Referenceable
from oasmodel.models._swagger2 import collection_format_for, write_simple_schema
from oasmodel.models.media import Example, MediaType
from oasmodel.references import ReferenceType
from oasmodel.schema import JsonSchema
from oasmodel.versions import SpecVersion
from oasmodel.writers.base import OpenApiWriter

logger = logging.getLogger(__name__)

BODY_NAME_EXTENSION = "x-bodyName"
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
DEFAULT_BODY_CONTENT_TYPE = "application/json"


class ParameterLocation(str, enum.Enum):
    """Value of a parameter's ``in`` field. ``body`` and ``formData`` are 2.0 only."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"
    FORM_DATA = "formData"
    BODY = "body"

    @property
    def is_legacy(self) -> bool:
        return self in (ParameterLocation.FORM_DATA, ParameterLocation.BODY)


class Parameter(Referenceable, Extensible):
    """A single operation parameter."""

    name: Optional[str] = None
    location: Optional[ParameterLocation] = Field(default=None, alias="in")
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
    content: Optional[dict[str, MediaType]] = None

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("name", self.name)
        writer.write_property("in", self.location.value if self.location else None)
        writer.write_property("description", self.description)
        writer.write_property("required", self.required, False)
        writer.write_property("deprecated", self.deprecated, False)
        writer.write_property("allowEmptyValue", self.allow_empty_value, False)
        writer.write_property("style", self.style)
        writer.write_property("explode", self.explode)
        writer.write_property("allowReserved", self.allow_reserved, False)
        writer.write_optional_object("schema", self.schema_, lambda w, s: s.write(w, version))
        writer.write_optional_object("example", self.example, lambda w, v: w.write_any(v, version))
        writer.write_optional_map("examples", self.examples, lambda w, e: e.serialize(w, version))
        writer.write_optional_map("content", self.content, lambda w, m: m.serialize(w, version))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        version = SpecVersion.V2
        writer.write_start_object()
        writer.write_property("in", self.location.value if self.location else None)
        writer.write_property("name", self.name)
        writer.write_property("description", self.description)
        writer.write_property("required", self.required, False)
        if self.location == ParameterLocation.BODY:
            writer.write_optional_object("schema", self.schema_, lambda w, s: s.write(w, version))
            examples = self._v2_body_examples()
            writer.write_optional_map("x-examples", examples, lambda w, v: w.write_any(v, version))
        else:
            writer.write_property("allowEmptyValue", self.allow_empty_value, False)
            write_simple_schema(
                writer, self._effective_schema(), collection_format_for(self.style, self.explode)
            )
            writer.write_optional_object(
                "x-example", self.example, lambda w, v: w.write_any(v, version)
            )
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

    def _v2_body_examples(self):
        if not self.examples:
            return None
        values = {
            name: example.value for name, example in self.examples.items() if example.value is not None
        }
        return values or None


class RequestBody(Referenceable, Extensible):
    """The payload of an operation, keyed by media type. 3.x only."""

    description: Optional[str] = None
    content: Optional[dict[str, MediaType]] = None
    required: bool = False

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("description", self.description)
        writer.write_optional_map("content", self.content, lambda w, m: m.serialize(w, version))
        writer.write_property("required", self.required, False)
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        # Hoisted into the operation's parameters; see to_body_parameter.
        return

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)

    @property
    def content_types(self) -> list[str]:
        return list(self.content or {})

    def is_form(self) -> bool:
        """True when any declared media type is a form encoding."""
        return any(media in FORM_CONTENT_TYPES for media in self.content_types)

    def _first_media(self) -> Optional[MediaType]:
        for media in (self.content or {}).values():
            return media
        return None

    def to_body_parameter(self) -> Parameter:
        """Build the equivalent 2.0 ``in: body`` parameter.

        The parameter is named by the ``x-bodyName`` extension, or ``body``.
        """
        if self.reference is not None:
            return Parameter(
                reference=self.reference.model_copy(update={"type": ReferenceType.REQUEST_BODY})
            )
        extensions = dict(self.extensions or {})
        body_name = extensions.pop(BODY_NAME_EXTENSION, None)
        if body_name is not None:
            body_name = getattr(body_name, "value", body_name)
        media = self._first_media()
        schema = media.schema_.clone() if media and media.schema_ is not None else JsonSchema({})
        return Parameter(
            location=ParameterLocation.BODY,
            name=body_name or "body",
            description=self.description,
            required=self.required,
            schema=schema,
            examples=_clone_examples(media.examples) if media else None,
            extensions=extensions or None,
        )

    def to_form_data_parameters(self) -> list[Parameter]:
        """Expand the form schema's top-level properties into 2.0 ``formData`` parameters."""
        media = self._first_media()
        if media is None or media.schema_ is None:
            return []
        schema = media.schema_
        required = set(schema.required)
        parameters = []
        for property_name, property_schema in schema.properties.items():
            data = property_schema.to_python()
            if isinstance(data, dict):
                description = data.pop("description", None)
                if data.get("type") == "string" and data.get("format") in ("binary", "base64"):
                    data = {key: value for key, value in data.items() if key != "format"}
                    data["type"] = "file"
            else:
                description = None
            parameters.append(
                Parameter(
                    location=ParameterLocation.FORM_DATA,
                    name=property_name,
                    description=description,
                    required=property_name in required,
                    schema=JsonSchema(data),
                )
            )
        return parameters


def _clone_examples(examples: Optional[dict[str, Example]]) -> Optional[dict[str, Example]]:
    if examples is None:
        return None
    return {name: example.clone() for name, example in examples.items()}


def request_body_from_parameters(
    parameters: Sequence[Parameter],
    content_types: Optional[Sequence[str]] = None,
) -> Optional[RequestBody]:
    """Fold 2.0 ``body``/``formData`` parameters into one :class:`RequestBody`.

    A ``body`` parameter wins over form fields. The request body's media types
    are *content_types* (the 2.0 ``consumes`` list); when that is empty,
    bodies default to ``application/json`` and forms to
    ``application/x-www-form-urlencoded``. Returns ``None`` when there is no
    legacy parameter.
    """
    body = next((p for p in parameters if p.location == ParameterLocation.BODY), None)
    if body is not None:
        return _body_to_request_body(body, content_types)

    form = [p for p in parameters if p.location == ParameterLocation.FORM_DATA]
    if not form:
        return None
    return _form_to_request_body(form, content_types)


def _body_to_request_body(
    body: Parameter, content_types: Optional[Sequence[str]]
) -> RequestBody:
    if body.reference is not None:
        return RequestBody(
            reference=body.reference.model_copy(update={"type": ReferenceType.REQUEST_BODY})
        )
    media_types = list(content_types or []) or [DEFAULT_BODY_CONTENT_TYPE]
    extensions = dict(body.extensions or {})
    if body.name and body.name != "body":
        extensions[BODY_NAME_EXTENSION] = AnyString(body.name)
    return RequestBody(
        description=body.description,
        required=body.required,
        content={
            media: MediaType(
                schema=body.schema_.clone() if body.schema_ is not None else None,
                examples=_clone_examples(body.examples),
            )
            for media in media_types
        },
        extensions=extensions or None,
    )


def _form_to_request_body(
    form: Sequence[Parameter], content_types: Optional[Sequence[str]]
) -> RequestBody:
    properties: dict[str, object] = {}
    required: list[str] = []
    for parameter in form:
        if parameter.reference is not None:
            logger.warning(
                "Referenced formData parameter '%s' cannot be folded into a form body",
                parameter.reference.id,
            )
            continue
        data = parameter.schema_.to_python() if parameter.schema_ is not None else {}
        if not isinstance(data, dict):
            data = {}
        if data.get("type") == "file":
            data = {"type": "string", "format": "binary", **{
                key: value for key, value in data.items() if key not in ("type", "format")
            }}
        if parameter.description is not None:
            data["description"] = parameter.description
        properties[parameter.name or ""] = data
        if parameter.required:
            required.append(parameter.name or "")

    schema_data: dict[str, object] = {"type": "object", "properties": properties}
    if required:
        schema_data["required"] = required
    media_types = [media for media in content_types or [] if media in FORM_CONTENT_TYPES]
    if not media_types:
        media_types = [FORM_CONTENT_TYPES[0]]
    return RequestBody(
        content={media: MediaType(schema=JsonSchema(schema_data)) for media in media_types},
    )
