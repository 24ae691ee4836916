"""Pydantic settings models for the reader, the writers and the CLI.

**Library settings** -- passed explicitly to the reader and serializer
entry points: :class:`ReaderSettings` and :class:`WriterSettings`.

**CLI configuration** -- serialised as JSON in the user's config directory
and in an optional project-local ``oasmodel.json``: :class:`GlobalConfig`.
See :func:`oasmodel.config.resolve_config` for the precedence chain.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from oasmodel.exceptions import UnsupportedVersionError
from oasmodel.versions import SpecVersion


class OpenApiFormat(str, enum.Enum):
    """Text encodings the writers can produce."""

    JSON = "json"
    YAML = "yaml"


ExtensionParser = Callable[[Any, SpecVersion], Any]
"""Signature of a vendor extension parser: ``(any_value, version) -> extension``."""


class ReaderSettings(BaseModel):
    """Options that change how documents are read.

    Example::

        settings = ReaderSettings(
            extension_parsers={"x-rate-limit": RateLimit.from_any},
        )
        document = read_document(text, settings)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    extension_parsers: dict[str, ExtensionParser] = Field(
        default_factory=dict,
        description="Map of x- field name to a parser turning its Any-value into an extension object",
    )
    default_content_type: Optional[str] = Field(
        default=None,
        description="Media type assumed for 2.0 bodies when neither the operation nor "
        "the document declares consumes/produces",
    )


class WriterSettings(BaseModel):
    """Options that change how documents are written."""

    format: OpenApiFormat = Field(default=OpenApiFormat.JSON)
    indented: bool = Field(default=True, description="Pretty output (JSON only)")
    indent: int = Field(default=2, ge=1, le=8, description="Spaces per nesting level")


class GlobalConfig(BaseModel):
    """User-wide CLI configuration persisted at ``~/.config/oasmodel/config.json``.

    Loaded by :func:`~oasmodel.config.load_global_config`. Fields here have
    the lowest precedence and can be overridden by project config,
    environment variables, or CLI flags.
    """

    target_version: SpecVersion = Field(
        default=SpecVersion.V3_0, description="Version written by 'oasmodel convert'"
    )
    format: OpenApiFormat = Field(default=OpenApiFormat.JSON)
    indented: bool = True
    color: bool = True

    @field_validator("target_version", mode="before")
    @classmethod
    def _parse_version_label(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, SpecVersion):
            try:
                return SpecVersion.from_label(value)
            except UnsupportedVersionError as exc:
                raise ValueError(str(exc)) from exc
        return value
