"""Schema-free JSON-like values used for examples, defaults and extension payloads.

The variant set is closed: :class:`AnyNull`, :class:`AnyBool`,
:class:`AnyInt`, :class:`AnyDouble`, :class:`AnyString`, :class:`AnyArray`
and :class:`AnyObject`. :data:`OpenApiAny` is the union of exactly these
classes; code that needs to branch on the variant switches on
:attr:`any_type` rather than subclassing.

Every variant can :meth:`clone` itself into a tree that shares no list or
dict storage with the source, and :meth:`write` itself into any
:class:`~oasmodel.writers.OpenApiWriter` without knowing the target
encoding.
"""

from __future__ import annotations

import enum
import math
import re
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Union

if TYPE_CHECKING:
    from oasmodel.schema import JsonSchema
    from oasmodel.versions import SpecVersion
    from oasmodel.writers.base import OpenApiWriter


class AnyType(str, enum.Enum):
    """Runtime tag of an :data:`OpenApiAny` value."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    DOUBLE = "double"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class AnyNull:
    """The ``null`` value."""

    __slots__ = ()
    any_type = AnyType.NULL

    def clone(self) -> "AnyNull":
        return AnyNull()

    def to_python(self) -> None:
        return None

    def write(self, writer: "OpenApiWriter", version: Optional["SpecVersion"] = None) -> None:
        writer.write_null()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AnyNull)

    def __hash__(self) -> int:
        return hash(None)

    def __repr__(self) -> str:
        return "AnyNull()"


class _AnyScalar:
    __slots__ = ("value",)
    any_type: AnyType

    def __init__(self, value: Any) -> None:
        self.value = value

    def clone(self):
        return type(self)(self.value)

    def to_python(self) -> Any:
        return self.value

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.value == self.value  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((self.any_type, self.value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class AnyBool(_AnyScalar):
    __slots__ = ()
    any_type = AnyType.BOOLEAN

    def __init__(self, value: bool) -> None:
        super().__init__(bool(value))

    def write(self, writer: "OpenApiWriter", version: Optional["SpecVersion"] = None) -> None:
        writer.write_boolean(self.value)


class AnyInt(_AnyScalar):
    """A 64-bit signed integer."""

    __slots__ = ()
    any_type = AnyType.INTEGER

    def __init__(self, value: int) -> None:
        if not _fits_int64(int(value)):
            raise ValueError(f"{value} does not fit in a 64-bit integer")
        super().__init__(int(value))

    def write(self, writer: "OpenApiWriter", version: Optional["SpecVersion"] = None) -> None:
        writer.write_number(self.value)


class AnyDouble(_AnyScalar):
    __slots__ = ()
    any_type = AnyType.DOUBLE

    def __init__(self, value: float) -> None:
        super().__init__(float(value))

    def write(self, writer: "OpenApiWriter", version: Optional["SpecVersion"] = None) -> None:
        writer.write_number(self.value)


class AnyString(_AnyScalar):
    __slots__ = ()
    any_type = AnyType.STRING

    def __init__(self, value: str) -> None:
        super().__init__(str(value))

    def write(self, writer: "OpenApiWriter", version: Optional["SpecVersion"] = None) -> None:
        writer.write_string(self.value)


class AnyArray:
    """An ordered list of :data:`OpenApiAny` items."""

    __slots__ = ("items",)
    any_type = AnyType.ARRAY

    def __init__(self, items: Optional[Iterable["OpenApiAny"]] = None) -> None:
        self.items: list[OpenApiAny] = list(items) if items is not None else []

    def clone(self) -> "AnyArray":
        return AnyArray(item.clone() for item in self.items)

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]

    def write(self, writer: "OpenApiWriter", version: Optional["SpecVersion"] = None) -> None:
        writer.write_start_array()
        for item in self.items:
            item.write(writer, version)
        writer.write_end_array()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index: int) -> "OpenApiAny":
        return self.items[index]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AnyArray) and other.items == self.items

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"AnyArray({self.items!r})"


class AnyObject:
    """An insertion-ordered mapping of property name to :data:`OpenApiAny`."""

    __slots__ = ("properties",)
    any_type = AnyType.OBJECT

    def __init__(self, properties: Optional[Mapping[str, "OpenApiAny"]] = None) -> None:
        self.properties: dict[str, OpenApiAny] = dict(properties) if properties is not None else {}

    def clone(self) -> "AnyObject":
        return AnyObject({key: value.clone() for key, value in self.properties.items()})

    def to_python(self) -> dict[str, Any]:
        return {key: value.to_python() for key, value in self.properties.items()}

    def write(self, writer: "OpenApiWriter", version: Optional["SpecVersion"] = None) -> None:
        writer.write_start_object()
        for key, value in self.properties.items():
            writer.write_property_name(key)
            value.write(writer, version)
        writer.write_end_object()

    def __len__(self) -> int:
        return len(self.properties)

    def __iter__(self):
        return iter(self.properties)

    def __contains__(self, key: object) -> bool:
        return key in self.properties

    def __getitem__(self, key: str) -> "OpenApiAny":
        return self.properties[key]

    def __setitem__(self, key: str, value: "OpenApiAny") -> None:
        self.properties[key] = value

    def items(self):
        return self.properties.items()

    def __eq__(self, other: object) -> bool:
        # Ordered comparison: two objects with the same members in a different
        # order serialize differently.
        return isinstance(other, AnyObject) and list(other.properties.items()) == list(
            self.properties.items()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"AnyObject({self.properties!r})"


OpenApiAny = Union[AnyNull, AnyBool, AnyInt, AnyDouble, AnyString, AnyArray, AnyObject]
"""Closed union of every Any-value variant."""

ANY_VARIANTS = (AnyNull, AnyBool, AnyInt, AnyDouble, AnyString, AnyArray, AnyObject)


def is_any(value: object) -> bool:
    """Return ``True`` if *value* is one of the :data:`OpenApiAny` variants."""
    return isinstance(value, ANY_VARIANTS)


def any_from_python(value: Any) -> OpenApiAny:
    """Convert plain Python data (as produced by ``json.loads``) into an Any-value tree.

    Raises:
        TypeError: If *value* contains something that is not JSON-like.
    """
    if is_any(value):
        return value.clone()
    if value is None:
        return AnyNull()
    if isinstance(value, bool):
        return AnyBool(value)
    if isinstance(value, int):
        return AnyInt(value)
    if isinstance(value, float):
        return AnyDouble(value)
    if isinstance(value, str):
        return AnyString(value)
    if isinstance(value, Mapping):
        return AnyObject({str(key): any_from_python(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return AnyArray(any_from_python(item) for item in value)
    raise TypeError(f"Cannot convert {type(value).__name__} to an Any-value")


# YAML 1.2 core schema resolution for plain (unquoted) scalars.
_NULL_RE = re.compile(r"^(?:~|null|Null|NULL|)$")
_BOOL_RE = re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$")
_INT_RE = re.compile(r"^[-+]?(?:0|[1-9][0-9]*)$")
_HEX_RE = re.compile(r"^0x[0-9a-fA-F]+$")
_OCT_RE = re.compile(r"^0o[0-7]+$")
_FLOAT_RE = re.compile(r"^[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?$")
_INF_RE = re.compile(r"^[-+]?\.(?:inf|Inf|INF)$")
_NAN_RE = re.compile(r"^\.(?:nan|NaN|NAN)$")


def _fits_int64(value: int) -> bool:
    return -(2**63) <= value < 2**63


def _integer(value: int) -> OpenApiAny:
    # Integers outside the 64-bit range degrade to doubles.
    return AnyInt(value) if _fits_int64(value) else AnyDouble(float(value))


def any_from_scalar(raw: str, quoted: bool, schema: Optional["JsonSchema"] = None) -> OpenApiAny:
    """Convert raw scalar text into the most specific Any-value.

    Quoted scalars are strings. Plain scalars are resolved with the YAML 1.2
    core schema (null, booleans, integers, floats), falling back to a
    string.

    A sibling *schema* overrides both rules: when it declares ``string`` a
    plain scalar other than null keeps its text, and when it declares a
    numeric or boolean type a quoted scalar is coerced as by
    :func:`coerce_any`.
    """
    if schema is not None:
        schema_type = schema.primary_type
        if schema_type == "string" and (quoted or not _NULL_RE.match(raw)):
            return AnyString(raw)
        if quoted:
            return coerce_any(AnyString(raw), schema)
    if quoted:
        return AnyString(raw)
    if _NULL_RE.match(raw):
        return AnyNull()
    if _BOOL_RE.match(raw):
        return AnyBool(raw.lower() == "true")
    if _INT_RE.match(raw):
        return _integer(int(raw))
    if _HEX_RE.match(raw):
        return _integer(int(raw, 16))
    if _OCT_RE.match(raw):
        return _integer(int(raw[2:], 8))
    if _FLOAT_RE.match(raw):
        return AnyDouble(float(raw))
    if _INF_RE.match(raw):
        return AnyDouble(-math.inf if raw.startswith("-") else math.inf)
    if _NAN_RE.match(raw):
        return AnyDouble(math.nan)
    return AnyString(raw)


def coerce_any(value: OpenApiAny, schema: Optional["JsonSchema"]) -> OpenApiAny:
    """Coerce string values toward the type declared by a sibling *schema*.

    A string is turned into :class:`AnyInt`, :class:`AnyDouble` or
    :class:`AnyBool` when the schema declares ``integer``, ``number`` or
    ``boolean`` and the text parses as such. Integer text outside the 64-bit
    range stays a string for ``integer`` and becomes a double for ``number``.
    Arrays and objects are coerced item-wise with the schema's ``items`` /
    ``properties``. Anything else is returned unchanged.
    """
    if schema is None:
        return value

    schema_type = schema.primary_type
    if isinstance(value, AnyString):
        text = value.value
        is_int = _INT_RE.match(text.strip()) is not None and _fits_int64(int(text))
        if schema_type == "integer" and is_int:
            return AnyInt(int(text))
        if schema_type == "number":
            if is_int:
                return AnyInt(int(text))
            if _FLOAT_RE.match(text.strip()):
                return AnyDouble(float(text))
        if schema_type == "boolean" and text.strip().lower() in ("true", "false"):
            return AnyBool(text.strip().lower() == "true")
        return value

    if isinstance(value, AnyArray) and schema_type == "array":
        items_schema = schema.items
        return AnyArray(coerce_any(item, items_schema) for item in value.items)

    if isinstance(value, AnyObject):
        properties = schema.properties
        if not properties:
            return value
        return AnyObject(
            {key: coerce_any(item, properties.get(key)) for key, item in value.properties.items()}
        )

    return value
