"""YAML writer backend built on PyYAML's event emitter.

Writer calls are translated one-for-one into ``yaml`` events and fed to a
:class:`yaml.emitter.Emitter`, so output streams to the sink as the document is
walked. Strings that would otherwise resolve to another YAML type
(``"200"``, ``"true"``, ``"null"``) are quoted automatically.
"""

from __future__ import annotations

import math
from typing import TextIO

import yaml
from yaml.emitter import Emitter
from yaml.events import Event
from yaml.resolver import Resolver

from oasmodel.exceptions import SerializationError
from oasmodel.writers.base import OpenApiWriter

_STR_TAG = "tag:yaml.org,2002:str"
_resolver = Resolver()


class YamlWriter(OpenApiWriter):
    """Stream block-style YAML to *stream*.

    The stream and document events are emitted lazily around the first
    top-level value and closed as soon as that value is complete.

    Args:
        stream: Any text sink with a ``write`` method.
        indent: Spaces per nesting level.
        width: Preferred line width for long scalars.
    """

    def __init__(self, stream: TextIO, indent: int = 2, width: int = 4096) -> None:
        self._emitter = Emitter(stream, indent=indent, width=width, allow_unicode=True)
        self._depth = 0
        self._started = False
        self._finished = False

    def _emit(self, event: Event) -> None:
        self._emitter.emit(event)

    def _before_value(self) -> None:
        if self._finished:
            raise SerializationError("Only one top-level value can be written")
        if not self._started:
            self._emit(yaml.StreamStartEvent())
            self._emit(yaml.DocumentStartEvent(explicit=False))
            self._started = True

    def _after_value(self) -> None:
        if self._depth == 0:
            self._emit(yaml.DocumentEndEvent(explicit=False))
            self._emit(yaml.StreamEndEvent())
            self._finished = True

    def _scalar(self, value: str, plain: bool) -> None:
        self._before_value()
        if plain:
            implicit = (True, False)
        else:
            # Allow a plain scalar only when it would read back as a string.
            resolved = _resolver.resolve(yaml.ScalarNode, value, (True, False))
            implicit = (resolved == _STR_TAG, True)
        self._emit(yaml.ScalarEvent(anchor=None, tag=None, implicit=implicit, value=value))
        self._after_value()

    # ------------------------------------------------------------------ #
    # Primitive emission
    # ------------------------------------------------------------------ #

    def write_start_object(self) -> None:
        self._before_value()
        self._emit(yaml.MappingStartEvent(anchor=None, tag=None, implicit=True, flow_style=False))
        self._depth += 1

    def write_end_object(self) -> None:
        if self._depth == 0:
            raise SerializationError("Unbalanced end of object")
        self._depth -= 1
        self._emit(yaml.MappingEndEvent())
        self._after_value()

    def write_start_array(self) -> None:
        self._before_value()
        self._emit(yaml.SequenceStartEvent(anchor=None, tag=None, implicit=True, flow_style=False))
        self._depth += 1

    def write_end_array(self) -> None:
        if self._depth == 0:
            raise SerializationError("Unbalanced end of array")
        self._depth -= 1
        self._emit(yaml.SequenceEndEvent())
        self._after_value()

    def write_property_name(self, name: str) -> None:
        if self._depth == 0:
            raise SerializationError(f"Property '{name}' written outside of an object")
        self._scalar(name, plain=False)

    def write_string(self, value: str) -> None:
        self._scalar(value, plain=False)

    def write_number(self, value: int | float) -> None:
        if isinstance(value, float):
            if math.isnan(value):
                text = ".nan"
            elif math.isinf(value):
                text = ".inf" if value > 0 else "-.inf"
            elif value.is_integer() and abs(value) < 1e16:
                text = str(int(value))
            else:
                text = repr(value)
        else:
            text = str(value)
        self._scalar(text, plain=True)

    def write_boolean(self, value: bool) -> None:
        self._scalar("true" if value else "false", plain=True)

    def write_null(self) -> None:
        self._scalar("null", plain=True)

    def flush(self) -> None:
        stream = getattr(self._emitter, "stream", None)
        flush = getattr(stream, "flush", None)
        if flush is not None:
            flush()
