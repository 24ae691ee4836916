"""Capabilities shared by every document element.

* :class:`OpenApiElement` -- version-dispatched serialization and deep copy.
* :class:`Extensible` -- an ordered ``x-`` extension store.
* :class:`Referenceable` -- an inline definition plus an optional
  :class:`~oasmodel.references.Reference`; when the reference is set only the
  pointer is written.

Each concrete element implements ``serialize_v2``, ``serialize_v3`` and
``serialize_v31``; :meth:`OpenApiElement.serialize` picks one from
:data:`_SERIALIZERS`.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from oasmodel.exceptions import InvalidArgumentError
from oasmodel.references import Reference
from oasmodel.versions import SpecVersion
from oasmodel.writers.base import OpenApiWriter, ensure_writer

_SERIALIZERS = {
    SpecVersion.V2: "serialize_v2",
    SpecVersion.V3_0: "serialize_v3",
    SpecVersion.V3_1: "serialize_v31",
}


class OpenApiElement(BaseModel):
    """Base class of every document element.

    Elements are plain mutable pydantic models: assignment is not
    re-validated, collections are ordinary lists and insertion-ordered
    dicts, and ``None`` always means "absent".
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        extra="forbid",
    )

    def serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        """Write this element for *version*.

        Raises:
            InvalidArgumentError: If *writer* is ``None`` or *version* is not
                a supported spec version.
        """
        writer = ensure_writer(writer)
        try:
            version = SpecVersion(version)
        except ValueError as exc:
            raise InvalidArgumentError("version", f"Unknown spec version: {version!r}") from exc
        getattr(self, _SERIALIZERS[version])(writer)

    def serialize_v2(self, writer: OpenApiWriter) -> None:
        raise NotImplementedError

    def serialize_v3(self, writer: OpenApiWriter) -> None:
        raise NotImplementedError

    def serialize_v31(self, writer: OpenApiWriter) -> None:
        raise NotImplementedError

    def clone(self):
        """Return an independent deep copy.

        ``None`` and empty collections are preserved as they are, map order is
        kept, and no list, dict or nested element is shared with ``self``.
        """
        return self.model_copy(deep=True)


class Extensible(OpenApiElement):
    """Mixin for elements that accept ``x-`` vendor extensions."""

    extensions: Optional[dict[str, Any]] = None

    def add_extension(self, name: str, value: Any) -> None:
        """Store *value* under *name*, creating the extension map if absent.

        Raises:
            InvalidArgumentError: If *name* does not start with ``x-``.
        """
        if not name.startswith("x-"):
            raise InvalidArgumentError("name", f"Extension name '{name}' must start with 'x-'")
        if self.extensions is None:
            self.extensions = {}
        self.extensions[name] = value


class Referenceable(OpenApiElement):
    """Mixin for elements that can stand in for a reusable component."""

    reference: Optional[Reference] = None

    def serialize(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        if self.reference is not None:
            writer = ensure_writer(writer)
            self.reference.serialize(writer, SpecVersion(version))
            return
        super().serialize(writer, version)

    def serialize_without_reference(self, writer: OpenApiWriter, version: SpecVersion) -> None:
        """Write the inline definition even when a reference is set."""
        OpenApiElement.serialize(self, writer, version)
