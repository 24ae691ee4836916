"""Tests for Operation serialization and copying.

The expected texts are the exact writer output: two-space indentation,
``{ }`` / ``[ ]`` for empty containers and embedded schemas inlined as
compact JSON.
"""

from __future__ import annotations

import json

import pytest

from oasmodel.any import AnyString
from oasmodel.models import (
    Example,
    ExternalDocs,
    MediaType,
    Operation,
    Parameter,
    ParameterLocation,
    RequestBody,
    Response,
    SecurityRequirement,
    SecurityScheme,
    Server,
    Tag,
)
from oasmodel.references import Reference, ReferenceType
from oasmodel.schema import JsonSchema
from oasmodel.versions import SpecVersion
from oasmodel.writers import serialize_as_json


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _number_schema() -> JsonSchema:
    return JsonSchema({"type": "number", "minimum": 5, "maximum": 10})


def _form_schema() -> JsonSchema:
    return JsonSchema(
        {
            "properties": {
                "name": {"type": "string", "description": "Updated name of the pet"},
                "status": {"type": "string", "description": "Updated status of the pet"},
            },
            "required": ["name"],
        }
    )


def operation_with_body() -> Operation:
    return Operation(
        summary="summary1",
        description="operationDescription",
        external_docs=ExternalDocs(description="externalDocsDescription", url="http://external.com"),
        operation_id="operationId1",
        parameters=[
            Parameter(location=ParameterLocation.PATH, name="parameter1"),
            Parameter(location=ParameterLocation.HEADER, name="parameter2"),
        ],
        request_body=RequestBody(
            description="description2",
            required=True,
            content={"application/json": MediaType(schema=_number_schema())},
        ),
        responses={
            "200": Response(reference=Reference(type=ReferenceType.RESPONSE, id="response1")),
            "400": Response(content={"application/json": MediaType(schema=_number_schema())}),
        },
        servers=[Server(url="http://server.com", description="serverDescription")],
    )


def advanced_operation() -> Operation:
    operation = operation_with_body()
    operation.tags = [
        Tag(name="tagName1", description="tagDescription1"),
        Tag(reference=Reference(type=ReferenceType.TAG, id="tagId1")),
    ]
    requirement = SecurityRequirement()
    requirement.add(
        SecurityScheme(reference=Reference(type=ReferenceType.SECURITY_SCHEME, id="securitySchemeId1"))
    )
    requirement.add(
        SecurityScheme(reference=Reference(type=ReferenceType.SECURITY_SCHEME, id="securitySchemeId2")),
        ["scopeName1", "scopeName2"],
    )
    operation.security = [requirement]
    return operation


def operation_with_form_data() -> Operation:
    return Operation(
        summary="Updates a pet in the store with form data",
        description="",
        operation_id="updatePetWithForm",
        parameters=[
            Parameter(
                name="petId",
                location=ParameterLocation.PATH,
                description="ID of pet that needs to be updated",
                required=True,
                schema=JsonSchema({"type": "string"}),
            )
        ],
        request_body=RequestBody(
            content={
                "application/x-www-form-urlencoded": MediaType(schema=_form_schema()),
                "multipart/form-data": MediaType(schema=_form_schema()),
            }
        ),
        responses={
            "200": Response(description="Pet updated."),
            "405": Response(description="Invalid input"),
        },
    )


# ---------------------------------------------------------------------------
# Expected texts
# ---------------------------------------------------------------------------

BASIC = """{
  "responses": { }
}"""

WITH_BODY_V3 = """{
  "summary": "summary1",
  "description": "operationDescription",
  "externalDocs": {
    "description": "externalDocsDescription",
    "url": "http://external.com"
  },
  "operationId": "operationId1",
  "parameters": [
    {
      "name": "parameter1",
      "in": "path"
    },
    {
      "name": "parameter2",
      "in": "header"
    }
  ],
  "requestBody": {
    "description": "description2",
    "content": {
      "application/json": {
        "schema": {"type":"number","minimum":5,"maximum":10}
      }
    },
    "required": true
  },
  "responses": {
    "200": {
      "$ref": "#/components/responses/response1"
    },
    "400": {
      "description": null,
      "content": {
        "application/json": {
          "schema": {"type":"number","minimum":5,"maximum":10}
        }
      }
    }
  },
  "servers": [
    {
      "url": "http://server.com",
      "description": "serverDescription"
    }
  ]
}"""

ADVANCED_V3 = """{
  "tags": [
    "tagName1",
    "tagId1"
  ],
  "summary": "summary1",
  "description": "operationDescription",
  "externalDocs": {
    "description": "externalDocsDescription",
    "url": "http://external.com"
  },
  "operationId": "operationId1",
  "parameters": [
    {
      "name": "parameter1",
      "in": "path"
    },
    {
      "name": "parameter2",
      "in": "header"
    }
  ],
  "requestBody": {
    "description": "description2",
    "content": {
      "application/json": {
        "schema": {"type":"number","minimum":5,"maximum":10}
      }
    },
    "required": true
  },
  "responses": {
    "200": {
      "$ref": "#/components/responses/response1"
    },
    "400": {
      "description": null,
      "content": {
        "application/json": {
          "schema": {"type":"number","minimum":5,"maximum":10}
        }
      }
    }
  },
  "security": [
    {
      "securitySchemeId1": [ ],
      "securitySchemeId2": [
        "scopeName1",
        "scopeName2"
      ]
    }
  ],
  "servers": [
    {
      "url": "http://server.com",
      "description": "serverDescription"
    }
  ]
}"""

WITH_BODY_V2 = """{
  "summary": "summary1",
  "description": "operationDescription",
  "externalDocs": {
    "description": "externalDocsDescription",
    "url": "http://external.com"
  },
  "operationId": "operationId1",
  "consumes": [
    "application/json"
  ],
  "produces": [
    "application/json"
  ],
  "parameters": [
    {
      "in": "path",
      "name": "parameter1"
    },
    {
      "in": "header",
      "name": "parameter2"
    },
    {
      "in": "body",
      "name": "body",
      "description": "description2",
      "required": true,
      "schema": {"type":"number","minimum":5,"maximum":10}
    }
  ],
  "responses": {
    "200": {
      "$ref": "#/responses/response1"
    },
    "400": {
      "description": null,
      "schema": {"type":"number","minimum":5,"maximum":10}
    }
  },
  "schemes": [
    "http"
  ]
}"""

ADVANCED_V2 = """{
  "tags": [
    "tagName1",
    "tagId1"
  ],
  "summary": "summary1",
  "description": "operationDescription",
  "externalDocs": {
    "description": "externalDocsDescription",
    "url": "http://external.com"
  },
  "operationId": "operationId1",
  "consumes": [
    "application/json"
  ],
  "produces": [
    "application/json"
  ],
  "parameters": [
    {
      "in": "path",
      "name": "parameter1"
    },
    {
      "in": "header",
      "name": "parameter2"
    },
    {
      "in": "body",
      "name": "body",
      "description": "description2",
      "required": true,
      "schema": {"type":"number","minimum":5,"maximum":10}
    }
  ],
  "responses": {
    "200": {
      "$ref": "#/responses/response1"
    },
    "400": {
      "description": null,
      "schema": {"type":"number","minimum":5,"maximum":10}
    }
  },
  "schemes": [
    "http"
  ],
  "security": [
    {
      "securitySchemeId1": [ ],
      "securitySchemeId2": [
        "scopeName1",
        "scopeName2"
      ]
    }
  ]
}"""

FORM_DATA_V3 = """{
  "summary": "Updates a pet in the store with form data",
  "description": "",
  "operationId": "updatePetWithForm",
  "parameters": [
    {
      "name": "petId",
      "in": "path",
      "description": "ID of pet that needs to be updated",
      "required": true,
      "schema": {"type":"string"}
    }
  ],
  "requestBody": {
    "content": {
      "application/x-www-form-urlencoded": {
        "schema": {"properties":{"name":{"type":"string","description":"Updated name of the pet"},"status":{"type":"string","description":"Updated status of the pet"}},"required":["name"]}
      },
      "multipart/form-data": {
        "schema": {"properties":{"name":{"type":"string","description":"Updated name of the pet"},"status":{"type":"string","description":"Updated status of the pet"}},"required":["name"]}
      }
    }
  },
  "responses": {
    "200": {
      "description": "Pet updated."
    },
    "405": {
      "description": "Invalid input"
    }
  }
}"""

FORM_DATA_V2 = """{
  "summary": "Updates a pet in the store with form data",
  "description": "",
  "operationId": "updatePetWithForm",
  "consumes": [
    "application/x-www-form-urlencoded",
    "multipart/form-data"
  ],
  "parameters": [
    {
      "in": "path",
      "name": "petId",
      "description": "ID of pet that needs to be updated",
      "required": true,
      "type": "string"
    },
    {
      "in": "formData",
      "name": "name",
      "description": "Updated name of the pet",
      "required": true,
      "type": "string"
    },
    {
      "in": "formData",
      "name": "status",
      "description": "Updated status of the pet",
      "type": "string"
    }
  ],
  "responses": {
    "200": {
      "description": "Pet updated."
    },
    "405": {
      "description": "Invalid input"
    }
  }
}"""


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


class TestOperationSerialization:
    """Bit-exact JSON for the 3.0 and 2.0 layouts."""

    @pytest.mark.parametrize("version", [SpecVersion.V3_0, SpecVersion.V2])
    def test_basic_operation(self, version: SpecVersion) -> None:
        assert serialize_as_json(Operation(), version) == BASIC

    def test_operation_with_body_v3(self) -> None:
        assert serialize_as_json(operation_with_body(), SpecVersion.V3_0) == WITH_BODY_V3

    def test_advanced_operation_v3(self) -> None:
        assert serialize_as_json(advanced_operation(), SpecVersion.V3_0) == ADVANCED_V3

    def test_operation_with_form_data_v3(self) -> None:
        assert serialize_as_json(operation_with_form_data(), SpecVersion.V3_0) == FORM_DATA_V3

    def test_operation_with_body_v2(self) -> None:
        assert serialize_as_json(operation_with_body(), SpecVersion.V2) == WITH_BODY_V2

    def test_advanced_operation_v2(self) -> None:
        assert serialize_as_json(advanced_operation(), SpecVersion.V2) == ADVANCED_V2

    def test_operation_with_form_data_v2(self) -> None:
        assert serialize_as_json(operation_with_form_data(), SpecVersion.V2) == FORM_DATA_V2

    def test_null_collections_v2(self) -> None:
        operation = Operation(parameters=None, servers=None)
        assert serialize_as_json(operation, SpecVersion.V2) == BASIC

    def test_null_responses_are_omitted(self) -> None:
        operation = Operation(responses=None)
        assert serialize_as_json(operation, SpecVersion.V3_0) == "{ }"

    def test_compact_output(self) -> None:
        text = serialize_as_json(operation_with_form_data(), SpecVersion.V3_0, indented=False)
        assert "\n" not in text
        assert text.startswith('{"summary":"Updates a pet in the store with form data","description":""')
        assert text.endswith('"405":{"description":"Invalid input"}}}')

    def test_v31_matches_v30_layout(self) -> None:
        assert serialize_as_json(operation_with_body(), SpecVersion.V3_1) == WITH_BODY_V3

    def test_deprecated_written_only_when_true(self) -> None:
        operation = Operation(deprecated=True)
        assert '"deprecated": true' in serialize_as_json(operation, SpecVersion.V3_0)
        assert '"deprecated": true' in serialize_as_json(operation, SpecVersion.V2)


class TestLegacyParametersInV3:
    """A model still carrying 2.0 body/formData parameters beside 3.x fields."""

    def test_body_parameter_becomes_request_body(self) -> None:
        operation = Operation(
            parameters=[
                Parameter(location=ParameterLocation.QUERY, name="q"),
                Parameter(
                    location=ParameterLocation.BODY,
                    name="body",
                    required=True,
                    schema=JsonSchema({"type": "string"}),
                ),
            ]
        )
        text = serialize_as_json(operation, SpecVersion.V3_0)
        assert '"in": "body"' not in text
        assert '"requestBody": {' in text
        assert '"application/json": {' in text
        assert '"required": true' in text

    def test_cookie_parameter_dropped_in_v2(self, caplog: pytest.LogCaptureFixture) -> None:
        operation = Operation(
            operation_id="withCookie",
            parameters=[Parameter(location=ParameterLocation.COOKIE, name="session")],
        )
        with caplog.at_level("WARNING", logger="oasmodel"):
            text = serialize_as_json(operation, SpecVersion.V2)
        assert "session" not in text
        assert '"parameters": [ ]' in text
        assert "cookie parameter 'session'" in caplog.text

    def test_request_body_replaces_legacy_parameters_in_v2(self, caplog: pytest.LogCaptureFixture) -> None:
        operation = Operation(
            operation_id="both",
            parameters=[
                Parameter(location=ParameterLocation.BODY, name="old", schema=JsonSchema({"type": "string"}))
            ],
            request_body=RequestBody(
                content={"application/json": MediaType(schema=JsonSchema({"type": "integer"}))}
            ),
        )
        with caplog.at_level("WARNING", logger="oasmodel"):
            data = json.loads(serialize_as_json(operation, SpecVersion.V2))
        assert [(p["in"], p["name"]) for p in data["parameters"]] == [("body", "body")]
        assert data["parameters"][0]["schema"] == {"type": "integer"}
        assert "the request body replaces it" in caplog.text


# ---------------------------------------------------------------------------
# Map order
# ---------------------------------------------------------------------------

_ORDERS = [("a", "b", "c"), ("c", "a", "b"), ("b", "c", "a"), ("c", "b", "a")]


class TestInsertionOrder:
    """Reordering a map changes the output order and nothing else."""

    @pytest.mark.parametrize("version", [SpecVersion.V2, SpecVersion.V3_0, SpecVersion.V3_1])
    @pytest.mark.parametrize("order", _ORDERS)
    def test_responses(self, order: tuple, version: SpecVersion) -> None:
        codes = {"a": "200", "b": "404", "c": "default"}

        def build(keys) -> Operation:
            return Operation(
                responses={codes[key]: Response(description=f"response {key}") for key in keys}
            )

        data = json.loads(serialize_as_json(build(order), version))
        assert list(data["responses"]) == [codes[key] for key in order]
        assert data == json.loads(serialize_as_json(build(_ORDERS[0]), version))

    @pytest.mark.parametrize("order", _ORDERS)
    def test_media_type_examples(self, order: tuple) -> None:
        media = MediaType(examples={name: Example(value=AnyString(name)) for name in order})
        data = json.loads(serialize_as_json(media, SpecVersion.V3_0))
        assert list(data["examples"]) == list(order)
        assert data == {"examples": {name: {"value": name} for name in "abc"}}


# ---------------------------------------------------------------------------
# Copying
# ---------------------------------------------------------------------------


class TestOperationClone:
    """clone() produces an independent deep copy."""

    def test_copies_responses(self) -> None:
        operation = operation_with_body().clone()
        assert operation.responses is not None
        assert len(operation.responses) == 2

    def test_copies_none(self) -> None:
        source = Operation(
            parameters=None,
            tags=None,
            responses=None,
            callbacks=None,
            security=None,
            servers=None,
            extensions=None,
        )
        operation = source.clone()
        assert operation.tags is None
        assert operation.summary is None
        assert operation.description is None
        assert operation.external_docs is None
        assert operation.operation_id is None
        assert operation.parameters is None
        assert operation.request_body is None
        assert operation.responses is None
        assert operation.callbacks is None
        assert operation.security is None
        assert operation.servers is None
        assert operation.extensions is None

    @pytest.mark.parametrize(
        "build", [operation_with_body, advanced_operation, operation_with_form_data]
    )
    @pytest.mark.parametrize("version", [SpecVersion.V2, SpecVersion.V3_0, SpecVersion.V3_1])
    def test_serialization_of_clone_is_identical(self, build, version: SpecVersion) -> None:
        operation = build()
        assert serialize_as_json(operation.clone(), version) == serialize_as_json(operation, version)

    def test_clone_shares_no_storage(self) -> None:
        operation = operation_with_body()
        copy = operation.clone()

        copy.parameters[0].name = "changed"
        copy.responses["201"] = Response(description="Created")
        copy.request_body.content["application/json"].schema_.data["minimum"] = 0

        assert operation.parameters[0].name == "parameter1"
        assert "201" not in operation.responses
        assert operation.request_body.content["application/json"].schema_.data["minimum"] == 5

    def test_clone_keeps_empty_collections(self) -> None:
        operation = Operation(parameters=[], tags=[])
        copy = operation.clone()
        assert copy.parameters == []
        assert copy.tags == []
        assert copy.responses == {}
