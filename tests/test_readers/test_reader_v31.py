"""Tests for reading OpenAPI 3.1 documents and the fields 3.1 added."""

from __future__ import annotations

import json

import pytest

from oasmodel.models import OpenApiDocument, OperationType, PathItem, Response
from oasmodel.readers import read_document, read_fragment
from oasmodel.references import ReferenceType
from oasmodel.versions import SpecVersion
from oasmodel.writers import serialize_as_json


class TestWebhooksDocument:
    def test_info_additions(self, webhooks_31: OpenApiDocument) -> None:
        assert webhooks_31.info.summary == "Pets over webhooks"
        assert webhooks_31.info.license.identifier == "MIT"
        assert webhooks_31.json_schema_dialect == "https://spec.openapis.org/oas/3.1/dialect/base"

    def test_webhooks(self, webhooks_31: OpenApiDocument) -> None:
        webhook = webhooks_31.webhooks["newPet"]
        body = webhook.operations[OperationType.POST].request_body
        assert body.content["application/json"].schema_.ref == "#/components/schemas/Pet"
        assert webhooks_31.paths == {}

    def test_type_array_schema_kept(self, webhooks_31: OpenApiDocument) -> None:
        assert webhooks_31.components.schemas["Pet"].data["type"] == ["object", "null"]

    def test_path_item_components(self, webhooks_31: OpenApiDocument) -> None:
        path_item = webhooks_31.components.path_items["PetPath"]
        ok = path_item.operations[OperationType.GET].responses["200"]
        assert ok.reference.type == ReferenceType.RESPONSE
        assert ok.reference.description == "Overridden description"
        assert webhooks_31.resolve(ok.reference).description == "fine"

    def test_written_as_31(self, webhooks_31: OpenApiDocument) -> None:
        data = json.loads(serialize_as_json(webhooks_31, SpecVersion.V3_1))
        assert data["openapi"] == "3.1.1"
        assert data["jsonSchemaDialect"] == "https://spec.openapis.org/oas/3.1/dialect/base"
        assert list(data["webhooks"]) == ["newPet"]
        assert data["components"]["pathItems"]["PetPath"]["get"]["responses"]["200"] == {
            "$ref": "#/components/responses/Ok",
            "description": "Overridden description",
        }

    def test_idempotent(self, webhooks_31: OpenApiDocument) -> None:
        first = serialize_as_json(webhooks_31, SpecVersion.V3_1)
        assert serialize_as_json(read_document(first), SpecVersion.V3_1) == first

    def test_written_as_30_drops_31_fields(
        self, webhooks_31: OpenApiDocument, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("WARNING", logger="oasmodel"):
            data = json.loads(serialize_as_json(webhooks_31, SpecVersion.V3_0))
        assert data["openapi"] == "3.0.4"
        assert "webhooks" not in data
        assert "jsonSchemaDialect" not in data
        assert "summary" not in data["info"]
        assert "identifier" not in data["info"]["license"]
        assert "pathItems" not in data["components"]
        assert "webhook" in caplog.text
        assert "path item component" in caplog.text


class TestVersionDifferences:
    """3.1-only fields are unknown to the 3.0 reader and ignored there."""

    TEXT = (
        "info:\n"
        "  title: t\n"
        "  summary: short\n"
        "  version: '1'\n"
        "jsonSchemaDialect: https://example.com/dialect\n"
        "webhooks:\n"
        "  ping:\n"
        "    post:\n"
        "      responses: {}\n"
    )

    def test_31_reads_additions(self) -> None:
        document = read_document("openapi: 3.1.0\n" + self.TEXT)
        assert document.info.summary == "short"
        assert document.json_schema_dialect == "https://example.com/dialect"
        assert list(document.webhooks) == ["ping"]

    def test_30_ignores_additions(self) -> None:
        document = read_document("openapi: 3.0.3\n" + self.TEXT)
        assert document.info.summary is None
        assert document.json_schema_dialect is None
        assert document.webhooks is None

    def test_reference_siblings_only_in_31(self) -> None:
        text = "$ref: '#/components/responses/Ok'\nsummary: s\ndescription: d\n"
        v31 = read_fragment(text, Response, SpecVersion.V3_1)
        v30 = read_fragment(text, Response, SpecVersion.V3_0)
        assert (v31.reference.summary, v31.reference.description) == ("s", "d")
        assert (v30.reference.summary, v30.reference.description) == (None, None)

    def test_path_item_reference(self) -> None:
        path_item = read_fragment("$ref: '#/components/pathItems/Pets'\n", PathItem, SpecVersion.V3_1)
        assert path_item.reference.type == ReferenceType.PATH_ITEM
        assert path_item.reference.id == "Pets"
