"""Per-document reading state."""

from __future__ import annotations

import contextlib
from typing import Any, Iterator, Optional

from oasmodel.exceptions import DocumentParseError
from oasmodel.extensions import ExtensionRegistry
from oasmodel.settings import ReaderSettings
from oasmodel.versions import SpecVersion


def _escape(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


class ParsingContext:
    """State carried through one read.

    Holds the version being read, the extension registry, the current
    location (as a JSON pointer, for error attribution) and a scratch area
    for values the 2.0 translation needs across sibling fields, such as the
    document-level ``consumes`` list.
    """

    def __init__(self, version: SpecVersion, settings: Optional[ReaderSettings] = None) -> None:
        self.version = SpecVersion(version)
        self.settings = settings or ReaderSettings()
        self.extensions = ExtensionRegistry(self.settings.extension_parsers)
        self._segments: list[str] = []
        self._temp: dict[str, Any] = {}
        # Set by the reader to the version's deserializer; field actions
        # look nested loaders up on it.
        self.deserializer: Any = None

    @property
    def path(self) -> str:
        return "#/" + "/".join(_escape(segment) for segment in self._segments)

    @contextlib.contextmanager
    def location(self, segment: str) -> Iterator[None]:
        self._segments.append(segment)
        try:
            yield
        finally:
            self._segments.pop()

    def error(
        self, message: str, field: Optional[str] = None, raw: Optional[str] = None
    ) -> DocumentParseError:
        return DocumentParseError(message, field=field, path=self.path, raw=raw)

    # Scratch storage, used by the 2.0 reader only.

    def set_temp(self, key: str, value: Any) -> None:
        self._temp[key] = value

    def get_temp(self, key: str, default: Any = None) -> Any:
        return self._temp.get(key, default)

    def pop_temp(self, key: str, default: Any = None) -> Any:
        return self._temp.pop(key, default)
