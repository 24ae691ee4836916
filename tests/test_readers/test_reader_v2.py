"""Tests for reading Swagger 2.0 documents into the version-independent model.

The 2.0 petstore fixture covers body and form parameters, response schemas
and examples, operation-level schemes and every 2.0 security type.
"""

from __future__ import annotations

import json

import pytest

from oasmodel.any import AnyInt, AnyObject, AnyString
from oasmodel.exceptions import DocumentParseError
from oasmodel.models import OpenApiDocument, OperationType, ParameterLocation, SecuritySchemeType
from oasmodel.readers import read_document
from oasmodel.references import ReferenceType
from oasmodel.settings import ReaderSettings
from oasmodel.versions import SpecVersion
from oasmodel.writers import serialize_as_json


def _as_dict(document: OpenApiDocument, version: SpecVersion) -> dict:
    return json.loads(serialize_as_json(document, version))


# ---------------------------------------------------------------------------
# Document level
# ---------------------------------------------------------------------------


class TestServers:
    """host, basePath and schemes become one server per scheme."""

    def test_from_fixture(self, petstore_20: OpenApiDocument) -> None:
        assert [server.url for server in petstore_20.servers] == [
            "https://petstore.swagger.io/v2",
            "http://petstore.swagger.io/v2",
        ]

    def test_no_scheme(self) -> None:
        document = read_document("swagger: '2.0'\nhost: api.example.com\n")
        assert [server.url for server in document.servers] == ["//api.example.com"]

    def test_base_path_only(self) -> None:
        document = read_document("swagger: '2.0'\nbasePath: /api\n")
        assert [server.url for server in document.servers] == ["/api"]

    def test_none(self) -> None:
        assert read_document("swagger: '2.0'\n").servers is None

    def test_operation_schemes(self, petstore_20: OpenApiDocument) -> None:
        operation = petstore_20.paths["/pets/{id}"].operations[OperationType.POST]
        assert [server.url for server in operation.servers] == ["https://petstore.swagger.io/v2"]

    @pytest.mark.parametrize("field, text", [("host", "host: {a: b}\n"), ("basePath", "basePath: [a, b]\n")])
    def test_wrong_shape(self, field: str, text: str) -> None:
        with pytest.raises(DocumentParseError) as exc_info:
            read_document("swagger: '2.0'\n" + text)
        assert exc_info.value.field == field
        assert exc_info.value.path == f"#/{field}"


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class TestParameters:
    def test_simple_schema_gathered(self, petstore_20: OpenApiDocument) -> None:
        tags = petstore_20.paths["/pets"].operations[OperationType.GET].parameters[0]
        assert tags.location == ParameterLocation.QUERY
        assert tags.schema_.data == {"type": "array", "items": {"type": "string"}}

    def test_collection_format(self, petstore_20: OpenApiDocument) -> None:
        tags = petstore_20.paths["/pets"].operations[OperationType.GET].parameters[0]
        assert (tags.style, tags.explode) == ("form", False)

    def test_x_example_coerced_by_schema(self, petstore_20: OpenApiDocument) -> None:
        limit = petstore_20.paths["/pets"].operations[OperationType.GET].parameters[1]
        assert limit.example == AnyInt(20)

    def test_path_parameter_stays_on_path(self, petstore_20: OpenApiDocument) -> None:
        path_item = petstore_20.paths["/pets/{id}"]
        assert [parameter.name for parameter in path_item.parameters] == ["id"]
        assert path_item.parameters[0].required is True

    @pytest.mark.parametrize(
        "collection_format, location, expected",
        [
            ("csv", "path", ("simple", False)),
            ("ssv", "query", ("spaceDelimited", False)),
            ("pipes", "query", ("pipeDelimited", False)),
            ("multi", "query", ("form", True)),
        ],
    )
    def test_collection_formats(self, collection_format: str, location: str, expected) -> None:
        text = (
            "swagger: '2.0'\n"
            "paths:\n"
            "  /a/{ids}:\n"
            "    get:\n"
            "      parameters:\n"
            "        - name: ids\n"
            f"          in: {location}\n"
            "          type: array\n"
            "          items:\n"
            "            type: integer\n"
            f"          collectionFormat: {collection_format}\n"
            "      responses: {}\n"
        )
        parameter = read_document(text).paths["/a/{ids}"].operations[OperationType.GET].parameters[0]
        assert (parameter.style, parameter.explode) == expected


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class TestRequestBodies:
    """body and formData parameters become request bodies."""

    def test_body_reference(self, petstore_20: OpenApiDocument) -> None:
        operation = petstore_20.paths["/pets"].operations[OperationType.POST]
        assert operation.parameters is None
        assert operation.request_body.reference.type == ReferenceType.REQUEST_BODY
        assert operation.request_body.reference.id == "PetBody"

    def test_body_component(self, petstore_20: OpenApiDocument) -> None:
        body = petstore_20.components.request_bodies["PetBody"]
        assert body.description == "Pet to add to the store"
        assert body.required is True
        assert list(body.content) == ["application/json"]
        assert body.content["application/json"].schema_.ref == "#/definitions/Pet"
        assert body.extensions == {"x-bodyName": AnyString("pet")}
        assert "PetBody" not in petstore_20.components.parameters

    def test_body_reference_resolves(self, petstore_20: OpenApiDocument) -> None:
        operation = petstore_20.paths["/pets"].operations[OperationType.POST]
        assert petstore_20.resolve(operation.request_body.reference).required is True

    def test_form_body(self, petstore_20: OpenApiDocument) -> None:
        operation = petstore_20.paths["/pets/{id}"].operations[OperationType.POST]
        assert operation.parameters is None
        media = operation.request_body.content["application/x-www-form-urlencoded"]
        assert media.schema_.data == {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Updated name of the pet"},
                "photo": {"type": "string", "format": "binary"},
            },
            "required": ["name"],
        }

    def test_path_level_body_pushed_down(self) -> None:
        text = (
            "swagger: '2.0'\n"
            "paths:\n"
            "  /pets:\n"
            "    parameters:\n"
            "      - name: body\n"
            "        in: body\n"
            "        schema:\n"
            "          type: object\n"
            "    put:\n"
            "      responses: {}\n"
        )
        path_item = read_document(text).paths["/pets"]
        assert path_item.parameters is None
        body = path_item.operations[OperationType.PUT].request_body
        assert body.content["application/json"].schema_.data == {"type": "object"}
        assert body.extensions is None

    def test_default_content_type_setting(self) -> None:
        text = (
            "swagger: '2.0'\n"
            "paths:\n"
            "  /pets:\n"
            "    put:\n"
            "      parameters:\n"
            "        - name: body\n"
            "          in: body\n"
            "          schema:\n"
            "            type: string\n"
            "      responses:\n"
            "        '200':\n"
            "          description: ok\n"
            "          schema:\n"
            "            type: string\n"
        )
        document = read_document(text, ReaderSettings(default_content_type="text/plain"))
        operation = document.paths["/pets"].operations[OperationType.PUT]
        assert list(operation.request_body.content) == ["text/plain"]
        assert list(operation.responses["200"].content) == ["text/plain"]


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class TestResponses:
    def test_schema_becomes_content(self, petstore_20: OpenApiDocument) -> None:
        ok = petstore_20.paths["/pets"].operations[OperationType.GET].responses["200"]
        media = ok.content["application/json"]
        assert media.schema_.data == {"type": "array", "items": {"$ref": "#/definitions/Pet"}}

    def test_headers(self, petstore_20: OpenApiDocument) -> None:
        ok = petstore_20.paths["/pets"].operations[OperationType.GET].responses["200"]
        header = ok.headers["X-Rate-Limit"]
        assert header.description == "calls per hour allowed by the user"
        assert header.schema_.data == {"type": "integer", "format": "int32"}

    def test_examples_become_example(self, petstore_20: OpenApiDocument) -> None:
        ok = petstore_20.paths["/pets"].operations[OperationType.POST].responses["200"]
        assert ok.content["application/json"].example == AnyObject(
            {"id": AnyInt(1), "name": AnyString("doggie")}
        )

    def test_reference(self, petstore_20: OpenApiDocument) -> None:
        default = petstore_20.paths["/pets"].operations[OperationType.GET].responses["default"]
        assert default.reference.type == ReferenceType.RESPONSE
        assert petstore_20.resolve(default.reference).description == "unexpected error"

    def test_no_schema_no_content(self, petstore_20: OpenApiDocument) -> None:
        deleted = petstore_20.paths["/pets/{id}"].operations[OperationType.DELETE].responses["204"]
        assert deleted.content is None


# ---------------------------------------------------------------------------
# Security
# ---------------------------------------------------------------------------


class TestSecurity:
    def test_basic(self, petstore_20: OpenApiDocument) -> None:
        basic = petstore_20.components.security_schemes["basicAuth"]
        assert basic.type == SecuritySchemeType.HTTP
        assert basic.scheme == "basic"

    def test_oauth2_flow_mapped(self, petstore_20: OpenApiDocument) -> None:
        oauth = petstore_20.components.security_schemes["petstore_auth"]
        assert oauth.type == SecuritySchemeType.OAUTH2
        flow = oauth.flows.authorization_code
        assert flow.authorization_url == "https://petstore.swagger.io/oauth/authorize"
        assert flow.token_url == "https://petstore.swagger.io/oauth/token"
        assert flow.scopes == {"write:pets": "modify pets"}

    def test_api_key_with_extension(self, petstore_20: OpenApiDocument) -> None:
        api_key = petstore_20.components.security_schemes["api_key"]
        assert api_key.type == SecuritySchemeType.API_KEY
        assert (api_key.name, api_key.location) == ("api_key", "header")
        assert api_key.extensions == {"x-key-rotation": AnyString("monthly")}

    def test_unknown_type(self, caplog: pytest.LogCaptureFixture) -> None:
        text = "swagger: '2.0'\nsecurityDefinitions:\n  odd:\n    type: kerberos\n"
        with caplog.at_level("WARNING", logger="oasmodel"):
            document = read_document(text)
        assert document.components.security_schemes["odd"].type is None
        assert "kerberos" in caplog.text

    def test_requirement(self, petstore_20: OpenApiDocument) -> None:
        scheme, scopes = petstore_20.security[0].requirements[0]
        assert scheme.reference.id == "petstore_auth"
        assert scopes == ["write:pets"]

    @pytest.mark.parametrize(
        "field, value",
        [
            ("description", "[a, b]"),
            ("name", "{a: b}"),
            ("flow", "[implicit]"),
            ("tokenUrl", "[a]"),
            ("scopes", "[a]"),
        ],
    )
    def test_wrong_shape(self, field: str, value: str) -> None:
        text = f"swagger: '2.0'\nsecurityDefinitions:\n  k:\n    type: oauth2\n    {field}: {value}\n"
        with pytest.raises(DocumentParseError) as exc_info:
            read_document(text)
        assert exc_info.value.field == field
        assert exc_info.value.path == f"#/securityDefinitions/k/{field}"


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------


class TestTranslation:
    """Reading 2.0 and writing 3.0 or 2.0 again."""

    def test_to_v3(self, petstore_20: OpenApiDocument) -> None:
        data = _as_dict(petstore_20, SpecVersion.V3_0)
        assert data["servers"] == [
            {"url": "https://petstore.swagger.io/v2"},
            {"url": "http://petstore.swagger.io/v2"},
        ]
        assert data["components"]["schemas"]["Pet"]["properties"]["id"] == {
            "type": "integer",
            "format": "int64",
        }
        add_pet = data["paths"]["/pets"]["post"]
        assert add_pet["requestBody"] == {"$ref": "#/components/requestBodies/PetBody"}
        find_pets = data["paths"]["/pets"]["get"]
        assert find_pets["responses"]["200"]["content"]["application/json"]["schema"] == {
            "type": "array",
            "items": {"$ref": "#/components/schemas/Pet"},
        }
        assert data["components"]["securitySchemes"]["basicAuth"] == {"type": "http", "scheme": "basic"}

    def test_to_v2(self, petstore_20: OpenApiDocument) -> None:
        data = _as_dict(petstore_20, SpecVersion.V2)
        assert data["swagger"] == "2.0"
        assert (data["host"], data["basePath"], data["schemes"]) == (
            "petstore.swagger.io",
            "/v2",
            ["https", "http"],
        )
        add_pet = data["paths"]["/pets"]["post"]
        assert add_pet["parameters"] == [{"$ref": "#/parameters/PetBody"}]
        assert add_pet["produces"] == ["application/json"]

        tags = data["paths"]["/pets"]["get"]["parameters"][0]
        assert tags["collectionFormat"] == "csv"
        assert tags["type"] == "array"

        body = data["parameters"]["PetBody"]
        assert body["in"] == "body"
        assert body["name"] == "pet"
        assert body["schema"] == {"$ref": "#/definitions/Pet"}
        assert "x-bodyName" not in body

        update = data["paths"]["/pets/{id}"]["post"]
        assert update["consumes"] == ["application/x-www-form-urlencoded"]
        assert [(p["in"], p["name"]) for p in update["parameters"]] == [
            ("formData", "name"),
            ("formData", "photo"),
        ]
        assert update["parameters"][1]["type"] == "file"
        assert update["schemes"] == ["https"]

        assert data["securityDefinitions"]["petstore_auth"]["flow"] == "accessCode"
        assert data["securityDefinitions"]["basicAuth"] == {"type": "basic"}

    def test_v2_round_trip_idempotent(self, petstore_20: OpenApiDocument) -> None:
        first = serialize_as_json(petstore_20, SpecVersion.V2)
        assert serialize_as_json(read_document(first), SpecVersion.V2) == first

    def test_external_references_and_map_extensions(self) -> None:
        text = (
            "swagger: '2.0'\n"
            "paths:\n"
            "  x-paths-ext: 1\n"
            "  /a:\n"
            "    get:\n"
            "      parameters:\n"
            "        - $ref: 'common.yaml#/Limit'\n"
            "      responses:\n"
            "        x-resp-ext: 2\n"
            "        '200':\n"
            "          $ref: 'common.yaml#/Ok'\n"
        )
        data = _as_dict(read_document(text), SpecVersion.V2)
        assert data["paths"] == {
            "/a": {
                "get": {
                    "parameters": [{"$ref": "common.yaml#/Limit"}],
                    "responses": {"200": {"$ref": "common.yaml#/Ok"}, "x-resp-ext": 2},
                }
            },
            "x-paths-ext": 1,
        }
