"""Vendor extension registry.

Every ``x-`` field is read as an Any-value. When a parser is registered for
the field name, the Any-value is handed to it and whatever it returns is
stored instead; the returned object must be writable (have a
``write(writer, version)`` method) so it survives serialization.

Example::

    class RateLimit:
        def __init__(self, per_minute): ...
        def write(self, writer, version):
            writer.write_start_object()
            writer.write_property("perMinute", self.per_minute)
            writer.write_end_object()

        @classmethod
        def from_any(cls, value, version):
            return cls(value["perMinute"].value)

    registry = ExtensionRegistry({"x-rate-limit": RateLimit.from_any})
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from oasmodel.any import OpenApiAny
from oasmodel.exceptions import DocumentParseError, InvalidArgumentError
from oasmodel.settings import ExtensionParser
from oasmodel.versions import SpecVersion

logger = logging.getLogger(__name__)

EXTENSION_PREFIX = "x-"


def is_extension_name(name: str) -> bool:
    return name.startswith(EXTENSION_PREFIX)


class ExtensionRegistry:
    """Maps ``x-`` field names to parser callables."""

    def __init__(self, parsers: Optional[Mapping[str, ExtensionParser]] = None) -> None:
        self._parsers: dict[str, ExtensionParser] = {}
        for name, parser in (parsers or {}).items():
            self.register(name, parser)

    def register(self, name: str, parser: ExtensionParser) -> None:
        """Register *parser* for the extension field *name*.

        Raises:
            InvalidArgumentError: If *name* lacks the ``x-`` prefix or
                *parser* is not callable.
        """
        if not is_extension_name(name):
            raise InvalidArgumentError("name", f"Extension name '{name}' must start with 'x-'")
        if not callable(parser):
            raise InvalidArgumentError("parser", f"Parser for '{name}' is not callable")
        self._parsers[name] = parser

    def unregister(self, name: str) -> None:
        self._parsers.pop(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._parsers

    def __len__(self) -> int:
        return len(self._parsers)

    def parse(self, name: str, value: OpenApiAny, version: SpecVersion) -> Any:
        """Turn the Any-value read for *name* into the stored extension.

        Without a registered parser the Any-value itself is returned.

        Raises:
            DocumentParseError: If the parser fails or returns something
                that cannot be written back out.
        """
        parser = self._parsers.get(name)
        if parser is None:
            return value
        logger.debug("Parsing extension %s with %r", name, parser)
        try:
            result = parser(value, version)
        except DocumentParseError:
            raise
        except Exception as exc:
            raise DocumentParseError(
                f"Extension parser failed: {exc}", field=name
            ) from exc
        if result is None:
            return value
        if not callable(getattr(result, "write", None)):
            raise DocumentParseError(
                f"Extension parser returned {type(result).__name__}, which has no "
                "write(writer, version) method",
                field=name,
            )
        return result
