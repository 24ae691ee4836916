"""Security schemes, OAuth flows and security requirements."""

from __future__ import annotations

import enum
import logging
from typing import Optional

from pydantic import Field

from oasmodel.elements import Extensible, OpenApiElement, Referenceable
from oasmodel.exceptions import SerializationError
from oasmodel.versions import SpecVersion
from oasmodel.writers.base import OpenApiWriter

logger = logging.getLogger(__name__)


class SecuritySchemeType(str, enum.Enum):
    API_KEY = "apiKey"
    HTTP = "http"
    OAUTH2 = "oauth2"
    OPEN_ID_CONNECT = "openIdConnect"
    MUTUAL_TLS = "mutualTLS"


class OAuthFlow(Extensible):
    authorization_url: Optional[str] = Field(default=None, alias="authorizationUrl")
    token_url: Optional[str] = Field(default=None, alias="tokenUrl")
    refresh_url: Optional[str] = Field(default=None, alias="refreshUrl")
    scopes: Optional[dict[str, str]] = Field(default_factory=dict)

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("authorizationUrl", self.authorization_url)
        writer.write_property("tokenUrl", self.token_url)
        writer.write_property("refreshUrl", self.refresh_url)
        writer.write_optional_map("scopes", self.scopes, lambda w, s: w.write_string(s))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        return

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


# 3.x flow attribute -> 2.0 ``flow`` value
_V2_FLOW_NAMES = {
    "implicit": "implicit",
    "password": "password",
    "client_credentials": "application",
    "authorization_code": "accessCode",
}


class OAuthFlows(Extensible):
    implicit: Optional[OAuthFlow] = None
    password: Optional[OAuthFlow] = None
    client_credentials: Optional[OAuthFlow] = Field(default=None, alias="clientCredentials")
    authorization_code: Optional[OAuthFlow] = Field(default=None, alias="authorizationCode")

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        for attribute, name in (
            ("implicit", "implicit"),
            ("password", "password"),
            ("client_credentials", "clientCredentials"),
            ("authorization_code", "authorizationCode"),
        ):
            writer.write_optional_object(
                name, getattr(self, attribute), lambda w, f: f.serialize(w, version)
            )
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        return

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)

    def first_flow(self) -> tuple[Optional[str], Optional[OAuthFlow]]:
        """The first declared flow as ``(2.0 flow name, flow)``."""
        for attribute, v2_name in _V2_FLOW_NAMES.items():
            flow = getattr(self, attribute)
            if flow is not None:
                return v2_name, flow
        return None, None


class SecurityScheme(Referenceable, Extensible):
    """An authentication mechanism.

    2.0 knows ``basic``, ``apiKey`` and ``oauth2`` with a single flow. HTTP
    basic maps onto ``basic``; the first OAuth flow is kept. Other HTTP
    schemes, OpenID Connect and mutual TLS have no 2.0 form; see
    :meth:`supported_in_v2`.
    """

    type: Optional[SecuritySchemeType] = None
    description: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = Field(default=None, alias="in")
    scheme: Optional[str] = None
    bearer_format: Optional[str] = Field(default=None, alias="bearerFormat")
    flows: Optional[OAuthFlows] = None
    open_id_connect_url: Optional[str] = Field(default=None, alias="openIdConnectUrl")

    def _serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        writer.write_start_object()
        writer.write_property("type", self.type.value if self.type else None)
        writer.write_property("description", self.description)
        if self.type == SecuritySchemeType.API_KEY:
            writer.write_property("name", self.name)
            writer.write_property("in", self.location)
        elif self.type == SecuritySchemeType.HTTP:
            writer.write_property("scheme", self.scheme)
            writer.write_property("bearerFormat", self.bearer_format)
        elif self.type == SecuritySchemeType.OAUTH2:
            writer.write_optional_object("flows", self.flows, lambda w, f: f.serialize(w, version))
        elif self.type == SecuritySchemeType.OPEN_ID_CONNECT:
            writer.write_property("openIdConnectUrl", self.open_id_connect_url)
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def supported_in_v2(self) -> bool:
        if self.type == SecuritySchemeType.HTTP:
            return (self.scheme or "").lower() == "basic"
        return self.type in (SecuritySchemeType.API_KEY, SecuritySchemeType.OAUTH2)

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        """Write the 2.0 security definition.

        Raises:
            SerializationError: If the scheme has no 2.0 form (see
                :meth:`supported_in_v2`).
        """
        version = SpecVersion.V2
        if self.type is not None and not self.supported_in_v2():
            kind = f"http {self.scheme}" if self.type == SecuritySchemeType.HTTP else self.type.value
            raise SerializationError(f"Security scheme '{kind}' has no Swagger 2.0 form")
        writer.write_start_object()
        if self.type == SecuritySchemeType.HTTP:
            writer.write_property("type", "basic")
        else:
            writer.write_property("type", self.type.value if self.type else None)
        writer.write_property("description", self.description)
        if self.type == SecuritySchemeType.API_KEY:
            writer.write_property("name", self.name)
            writer.write_property("in", self.location)
        elif self.type == SecuritySchemeType.OAUTH2 and self.flows is not None:
            flow_name, flow = self.flows.first_flow()
            if flow is not None:
                writer.write_property("flow", flow_name)
                writer.write_property("authorizationUrl", flow.authorization_url)
                writer.write_property("tokenUrl", flow.token_url)
                writer.write_optional_map("scopes", flow.scopes, lambda w, s: w.write_string(s))
        writer.write_extensions(self.extensions, version)
        writer.write_end_object()

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_0)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer, SpecVersion.V3_1)


class SecurityRequirement(OpenApiElement):
    """An ordered list of ``(scheme, scopes)`` pairs that must all be satisfied.

    Schemes are keyed in the output by their reference id, so each scheme
    should be a reference-only :class:`SecurityScheme`; inline schemes have
    no name to be keyed by and are skipped with a warning.
    """

    requirements: list[tuple[SecurityScheme, list[str]]] = Field(default_factory=list)

    def add(self, scheme: SecurityScheme, scopes: Optional[list[str]] = None) -> None:
        self.requirements.append((scheme, list(scopes or [])))

    def _serialize(self, writer: OpenApiWriter) -> None:
        writer.write_start_object()
        for scheme, scopes in self.requirements:
            if scheme.reference is None or scheme.reference.id is None:
                logger.warning("Skipping security requirement on an unnamed inline scheme")
                continue
            writer.write_property_name(scheme.reference.id)
            writer.write_collection(scopes, lambda w, s: w.write_string(s))
        writer.write_end_object()

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        self._serialize(writer)

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        self._serialize(writer)

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        self._serialize(writer)
