"""Writer abstraction shared by every output encoding.

A writer only knows how to open and close objects and arrays, emit property
names and emit scalars. Document elements drive it through the
``write_optional_*`` / ``write_required_*`` helpers below, which implement
the absent-vs-empty rules in one place:

* a ``None`` collection or object is omitted entirely;
* an empty collection is written as an empty container;
* a required scalar is written even when it is ``None`` (as ``null``).
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Optional, TypeVar

from oasmodel.exceptions import InvalidArgumentError, SerializationError

if TYPE_CHECKING:
    from oasmodel.versions import SpecVersion

T = TypeVar("T")


class OpenApiWriter(abc.ABC):
    """Base class for streaming writers.

    Subclasses implement the primitive emission methods; everything else is
    built on top of them.
    """

    # ------------------------------------------------------------------ #
    # Primitive emission
    # ------------------------------------------------------------------ #

    @abc.abstractmethod
    def write_start_object(self) -> None: ...

    @abc.abstractmethod
    def write_end_object(self) -> None: ...

    @abc.abstractmethod
    def write_start_array(self) -> None: ...

    @abc.abstractmethod
    def write_end_array(self) -> None: ...

    @abc.abstractmethod
    def write_property_name(self, name: str) -> None: ...

    @abc.abstractmethod
    def write_string(self, value: str) -> None: ...

    @abc.abstractmethod
    def write_number(self, value: int | float) -> None: ...

    @abc.abstractmethod
    def write_boolean(self, value: bool) -> None: ...

    @abc.abstractmethod
    def write_null(self) -> None: ...

    def flush(self) -> None:
        """Flush buffered output to the underlying stream."""

    # ------------------------------------------------------------------ #
    # Composite emission
    # ------------------------------------------------------------------ #

    def write_value(self, value: Any) -> None:
        """Write a plain Python scalar, dispatching on its type."""
        if value is None:
            self.write_null()
        elif isinstance(value, bool):
            self.write_boolean(value)
        elif isinstance(value, (int, float)):
            self.write_number(value)
        elif isinstance(value, str):
            self.write_string(value)
        else:
            raise SerializationError(f"Cannot write {type(value).__name__} as a scalar")

    def write_embedded(self, value: Any) -> None:
        """Write an opaque embedded JSON value (an embedded schema node).

        The default walks the value with the primitive methods; backends may
        override it to render embedded values differently.
        """
        if isinstance(value, Mapping):
            self.write_start_object()
            for key, item in value.items():
                self.write_property_name(str(key))
                self.write_embedded(item)
            self.write_end_object()
        elif isinstance(value, (list, tuple)):
            self.write_start_array()
            for item in value:
                self.write_embedded(item)
            self.write_end_array()
        else:
            self.write_value(value)

    def write_any(self, value: Any, version: Optional["SpecVersion"] = None) -> None:
        """Write an Any-value or extension object (anything with ``write(writer, version)``)."""
        if value is None:
            self.write_null()
            return
        write = getattr(value, "write", None)
        if write is None:
            raise SerializationError(
                f"{type(value).__name__} has no write(writer, version) method"
            )
        write(self, version)

    # ------------------------------------------------------------------ #
    # Property helpers
    # ------------------------------------------------------------------ #

    def write_property(self, name: str, value: Any, default: Any = None) -> None:
        """Write ``name: value`` unless *value* is ``None`` or equals *default*."""
        if value is None or (default is not None and value == default):
            return
        self.write_property_name(name)
        self.write_value(value)

    def write_required_property(self, name: str, value: Any) -> None:
        """Write ``name: value``, emitting ``null`` when *value* is ``None``."""
        self.write_property_name(name)
        self.write_value(value)

    def write_optional_object(
        self, name: str, value: Optional[T], action: Callable[["OpenApiWriter", T], None]
    ) -> None:
        if value is None:
            return
        self.write_property_name(name)
        action(self, value)

    def write_optional_collection(
        self,
        name: str,
        items: Optional[Iterable[T]],
        action: Callable[["OpenApiWriter", T], None],
    ) -> None:
        if items is None:
            return
        self.write_property_name(name)
        self.write_collection(items, action)

    def write_collection(
        self, items: Iterable[T], action: Callable[["OpenApiWriter", T], None]
    ) -> None:
        self.write_start_array()
        for item in items:
            action(self, item)
        self.write_end_array()

    def write_optional_map(
        self,
        name: str,
        mapping: Optional[Mapping[str, T]],
        action: Callable[["OpenApiWriter", T], None],
        extensions: Optional[Mapping[str, Any]] = None,
        version: Optional["SpecVersion"] = None,
    ) -> None:
        if mapping is None:
            return
        self.write_property_name(name)
        self.write_map(mapping, action, extensions, version)

    def write_map(
        self,
        mapping: Mapping[str, T],
        action: Callable[["OpenApiWriter", T], None],
        extensions: Optional[Mapping[str, Any]] = None,
        version: Optional["SpecVersion"] = None,
    ) -> None:
        """Write *mapping* as an object; *extensions* of the map itself follow the entries."""
        self.write_start_object()
        for key, value in mapping.items():
            self.write_property_name(key)
            if value is None:
                self.write_null()
            else:
                action(self, value)
        self.write_extensions(extensions, version)
        self.write_end_object()

    def write_extensions(
        self, extensions: Optional[Mapping[str, Any]], version: "SpecVersion"
    ) -> None:
        """Write vendor extensions verbatim, in insertion order."""
        if not extensions:
            return
        for name, value in extensions.items():
            self.write_property_name(name)
            self.write_any(value, version)


def ensure_writer(writer: Optional[OpenApiWriter]) -> OpenApiWriter:
    """Reject a missing writer before anything is written."""
    if writer is None:
        raise InvalidArgumentError("writer")
    return writer
