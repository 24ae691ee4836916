"""OpenAPI 3.1 deserializer: the 3.0 tables plus the fields 3.1 added."""

from __future__ import annotations

from oasmodel.readers.field_maps import FixedFieldMap, element_field, map_field, parse_map, string_field
from oasmodel.readers.parse_node import MapNode, ParseNode, expect_map
from oasmodel.readers.context import ParsingContext
from oasmodel.readers.v3 import OpenApiV3Deserializer
from oasmodel.references import Reference
from oasmodel.versions import SpecVersion


class OpenApiV31Deserializer(OpenApiV3Deserializer):
    version = SpecVersion.V3_1

    DOCUMENT_FIXED_FIELDS: FixedFieldMap = {
        **OpenApiV3Deserializer.DOCUMENT_FIXED_FIELDS,
        "jsonSchemaDialect": string_field("json_schema_dialect", "jsonSchemaDialect"),
        "webhooks": element_field("webhooks", "load_webhooks"),
    }

    INFO_FIXED_FIELDS: FixedFieldMap = {
        **OpenApiV3Deserializer.INFO_FIXED_FIELDS,
        "summary": string_field("summary"),
    }

    LICENSE_FIXED_FIELDS: FixedFieldMap = {
        **OpenApiV3Deserializer.LICENSE_FIXED_FIELDS,
        "identifier": string_field("identifier"),
    }

    COMPONENTS_FIXED_FIELDS: FixedFieldMap = {
        **OpenApiV3Deserializer.COMPONENTS_FIXED_FIELDS,
        "pathItems": map_field("path_items", "load_path_item", "pathItems"),
    }

    # Siblings of '$ref' that override the target.
    REFERENCE_FIXED_FIELDS: FixedFieldMap = {
        "summary": string_field("summary"),
        "description": string_field("description"),
    }

    def _read_reference_siblings(
        self, node: MapNode, reference: Reference, context: ParsingContext
    ) -> None:
        parse_map(node, reference, self.REFERENCE_FIXED_FIELDS, [], context)

    def load_webhooks(self, node: ParseNode, context: ParsingContext):
        webhooks = {}
        for key, value in expect_map(node, "webhooks", context).items():
            with context.location(key):
                webhooks[key] = self.load_path_item(value, context)
        return webhooks
