"""Opaque embedded JSON Schema nodes.

The document model does not interpret schema semantics. A
:class:`JsonSchema` wraps the schema exactly as it was read (an ordered
``dict``, or a ``bool`` for 3.1 boolean schemas) and offers the handful of
structural accessors the translation engine needs: the declared type,
``properties``, ``items``, ``required`` and ``description``.

On output, numeric and structural content passes through verbatim. The one
rewrite applied is to local ``$ref`` pointers into the schema registry, whose
root differs between the legacy (``#/definitions/``) and newer
(``#/components/schemas/``) formats.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Optional, Union

from oasmodel.references import ReferenceType, component_root

if TYPE_CHECKING:
    from oasmodel.versions import SpecVersion
    from oasmodel.writers.base import OpenApiWriter

_SCHEMA_ROOTS = ("#/definitions/", "#/components/schemas/")


class JsonSchema:
    """An embedded schema node with its own clone/serialize contract.

    Args:
        data: The schema as plain Python data. Mappings are copied so the
            caller's dict is never aliased.
    """

    __slots__ = ("data",)

    def __init__(self, data: Union[dict[str, Any], bool, None] = None) -> None:
        if data is None:
            data = {}
        if not isinstance(data, (dict, bool)):
            raise TypeError(f"A schema must be a mapping or a boolean, not {type(data).__name__}")
        self.data: Union[dict[str, Any], bool] = copy.deepcopy(data)

    @classmethod
    def _wrap(cls, data: Any) -> Optional["JsonSchema"]:
        if isinstance(data, (dict, bool)):
            schema = cls.__new__(cls)
            schema.data = data
            return schema
        return None

    # ------------------------------------------------------------------ #
    # Structural accessors
    # ------------------------------------------------------------------ #

    def get(self, keyword: str, default: Any = None) -> Any:
        if isinstance(self.data, dict):
            return self.data.get(keyword, default)
        return default

    @property
    def primary_type(self) -> Optional[str]:
        """The declared ``type``; for a 3.1 type array, the first non-null entry."""
        value = self.get("type")
        if isinstance(value, list):
            non_null = [item for item in value if item != "null"]
            return non_null[0] if non_null else None
        return value if isinstance(value, str) else None

    @property
    def format(self) -> Optional[str]:
        return self.get("format")

    @property
    def description(self) -> Optional[str]:
        return self.get("description")

    @property
    def ref(self) -> Optional[str]:
        return self.get("$ref")

    @property
    def properties(self) -> dict[str, "JsonSchema"]:
        """Read-only view of ``properties``, in declaration order."""
        raw = self.get("properties")
        if not isinstance(raw, dict):
            return {}
        result: dict[str, JsonSchema] = {}
        for name, value in raw.items():
            wrapped = self._wrap(value)
            if wrapped is not None:
                result[name] = wrapped
        return result

    @property
    def items(self) -> Optional["JsonSchema"]:
        return self._wrap(self.get("items"))

    @property
    def required(self) -> list[str]:
        value = self.get("required")
        return list(value) if isinstance(value, list) else []

    # ------------------------------------------------------------------ #
    # Clone / serialize
    # ------------------------------------------------------------------ #

    def clone(self) -> "JsonSchema":
        return JsonSchema(self.data)

    def to_python(self) -> Union[dict[str, Any], bool]:
        return copy.deepcopy(self.data)

    def for_version(self, version: "SpecVersion") -> Union[dict[str, Any], bool]:
        """Return the schema data with local schema ``$ref`` roots rewritten for *version*."""
        root = f"#/{component_root(ReferenceType.SCHEMA, version)}/"
        return _rewrite_refs(self.data, root)

    def write(self, writer: "OpenApiWriter", version: "SpecVersion") -> None:
        writer.write_embedded(self.for_version(version))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, JsonSchema) and other.data == self.data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JsonSchema({self.data!r})"


def _rewrite_refs(value: Any, root: str) -> Any:
    if isinstance(value, dict):
        result: dict[str, Any] = {}
        for key, item in value.items():
            if key == "$ref" and isinstance(item, str):
                result[key] = _rewrite_pointer(item, root)
            else:
                result[key] = _rewrite_refs(item, root)
        return result
    if isinstance(value, list):
        return [_rewrite_refs(item, root) for item in value]
    return value


def _rewrite_pointer(pointer: str, root: str) -> str:
    for known in _SCHEMA_ROOTS:
        if pointer.startswith(known):
            return root + pointer[len(known):]
    return pointer
