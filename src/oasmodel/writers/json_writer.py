"""JSON writer backend.

Indented output uses a two-space indent, one property or item per line, and
renders empty containers as ``{ }`` and ``[ ]``. Compact output contains no
insignificant whitespace. In both modes embedded schema nodes are written
inline as compact JSON.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, TextIO

from oasmodel.exceptions import SerializationError
from oasmodel.writers.base import OpenApiWriter


@dataclass
class _Scope:
    is_array: bool
    count: int = 0


class JsonWriter(OpenApiWriter):
    """Stream JSON text to *stream*.

    Args:
        stream: Any text sink with a ``write`` method.
        indented: ``True`` for pretty output, ``False`` for compact output.
        indent: Spaces per nesting level in indented mode.
    """

    def __init__(self, stream: TextIO, indented: bool = True, indent: int = 2) -> None:
        self._stream = stream
        self._indented = indented
        self._indent = " " * indent
        self._scopes: list[_Scope] = []
        self._after_property = False

    # ------------------------------------------------------------------ #
    # Layout
    # ------------------------------------------------------------------ #

    def _newline(self, depth: int) -> None:
        if self._indented:
            self._stream.write("\n" + self._indent * depth)

    def _begin_value(self) -> None:
        """Emit the separator that precedes a value in the current position."""
        if self._after_property:
            self._after_property = False
            return
        if not self._scopes:
            return
        scope = self._scopes[-1]
        if not scope.is_array:
            raise SerializationError("A value inside an object must follow a property name")
        if scope.count:
            self._stream.write(",")
        self._newline(len(self._scopes))
        scope.count += 1

    def _open(self, token: str, is_array: bool) -> None:
        self._begin_value()
        self._stream.write(token)
        self._scopes.append(_Scope(is_array=is_array))

    def _close(self, token: str, is_array: bool) -> None:
        if not self._scopes or self._scopes[-1].is_array != is_array:
            raise SerializationError(f"Unbalanced '{token}'")
        scope = self._scopes.pop()
        if scope.count == 0:
            self._stream.write(" " + token if self._indented else token)
        else:
            self._newline(len(self._scopes))
            self._stream.write(token)

    # ------------------------------------------------------------------ #
    # Primitive emission
    # ------------------------------------------------------------------ #

    def write_start_object(self) -> None:
        self._open("{", is_array=False)

    def write_end_object(self) -> None:
        self._close("}", is_array=False)

    def write_start_array(self) -> None:
        self._open("[", is_array=True)

    def write_end_array(self) -> None:
        self._close("]", is_array=True)

    def write_property_name(self, name: str) -> None:
        if not self._scopes or self._scopes[-1].is_array:
            raise SerializationError(f"Property '{name}' written outside of an object")
        scope = self._scopes[-1]
        if scope.count:
            self._stream.write(",")
        self._newline(len(self._scopes))
        scope.count += 1
        self._stream.write(json.dumps(name, ensure_ascii=False))
        self._stream.write(": " if self._indented else ":")
        self._after_property = True

    def _write_raw(self, text: str) -> None:
        self._begin_value()
        self._stream.write(text)

    def write_string(self, value: str) -> None:
        self._write_raw(json.dumps(value, ensure_ascii=False))

    def write_number(self, value: int | float) -> None:
        self._write_raw(_format_number(value))

    def write_boolean(self, value: bool) -> None:
        self._write_raw("true" if value else "false")

    def write_null(self) -> None:
        self._write_raw("null")

    def write_embedded(self, value: Any) -> None:
        self._write_raw(json.dumps(value, ensure_ascii=False, separators=(",", ":")))

    def flush(self) -> None:
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()


def _format_number(value: int | float) -> str:
    if isinstance(value, bool):
        raise SerializationError("Booleans are not numbers")
    if isinstance(value, int):
        return str(value)
    if math.isnan(value) or math.isinf(value):
        raise SerializationError(f"{value} cannot be represented in JSON")
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)

