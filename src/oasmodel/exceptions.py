"""Exception hierarchy for oasmodel.

All exceptions inherit from :class:`OasModelError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`oasmodel.exit_codes`.
The CLI entry point in :func:`oasmodel.app.main` catches ``OasModelError``
and exits with the appropriate code; library callers catch the specific
subclass they care about.

Subclass hierarchy::

    OasModelError               (exit 1)
    +-- InvalidArgumentError    (exit 2)
    +-- DocumentParseError      (exit 7)
    |   +-- UnsupportedVersionError
    +-- DocumentLoadError       (exit 7)
    +-- OpenApiReferenceError   (exit 8)
    |   +-- ReferenceSyntaxError
    |   +-- ReferenceNotFoundError
    |   +-- ReferenceCycleError
    +-- SerializationError      (exit 9)
    +-- ConfigError             (exit 1)
"""

from __future__ import annotations

from typing import Optional

from oasmodel.exit_codes import (
    EXIT_DOCUMENT_PARSE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_REFERENCE_ERROR,
    EXIT_SERIALIZATION_ERROR,
)


class OasModelError(Exception):
    """Base exception for all oasmodel errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`oasmodel.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidArgumentError(OasModelError):
    """Raised when a serialize or resolve entry point receives a null or invalid argument.

    Raised before any output is produced, so a writer never holds a
    partially written element.
    """

    exit_code = EXIT_INVALID_USAGE

    def __init__(self, argument: str, message: str | None = None):
        self.argument = argument
        super().__init__(message or f"Argument '{argument}' must not be None")


class DocumentParseError(OasModelError):
    """Raised when a recognised field holds a wrongly-shaped value.

    Carries the field name, the JSON-pointer-style path of the node being
    read, and the raw scalar text (when there is one). The enclosing
    document's parse is aborted; no partial value is substituted.

    Args:
        message: Description of what was expected.
        field: Name of the offending field, if known.
        path: Location of the node, e.g. ``#/paths/~1pets/get/parameters/0``.
        raw: Raw scalar text found in the document.
    """

    exit_code = EXIT_DOCUMENT_PARSE_ERROR

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        path: Optional[str] = None,
        raw: Optional[str] = None,
    ):
        self.field = field
        self.path = path
        self.raw = raw
        detail = message
        if field is not None:
            detail = f"{detail} (field '{field}'"
            if raw is not None:
                detail += f", value '{raw}'"
            detail += ")"
        if path:
            detail = f"{detail} at {path}"
        super().__init__(detail)


class UnsupportedVersionError(DocumentParseError):
    """Raised when the document declares no version or one that is not 2.0, 3.0.x or 3.1.x."""


class DocumentLoadError(OasModelError):
    """Raised when document text cannot be read from a file, URL or stdin."""

    exit_code = EXIT_DOCUMENT_PARSE_ERROR


class OpenApiReferenceError(OasModelError):
    """Base class for reference pointer failures.

    Named with an ``OpenApi`` prefix to avoid shadowing the built-in
    ``ReferenceError``.
    """

    exit_code = EXIT_REFERENCE_ERROR


class ReferenceSyntaxError(OpenApiReferenceError):
    """Raised while parsing a pointer string that does not match the version's pointer grammar."""

    def __init__(self, pointer: str, message: str | None = None):
        self.pointer = pointer
        super().__init__(message or f"Malformed reference pointer: '{pointer}'")


class ReferenceNotFoundError(OpenApiReferenceError):
    """Raised at resolution time when the referenced component does not exist."""

    def __init__(self, pointer: str, message: str | None = None):
        self.pointer = pointer
        super().__init__(message or f"Reference target not found: '{pointer}'")


class ReferenceCycleError(OpenApiReferenceError):
    """Raised when following reference-only components loops back on itself."""

    def __init__(self, chain: list[str]):
        self.chain = chain
        super().__init__("Reference cycle detected: " + " -> ".join(chain))


class SerializationError(OasModelError):
    """Raised when an element cannot be expressed in the requested spec version."""

    exit_code = EXIT_SERIALIZATION_ERROR


class ConfigError(OasModelError):
    """Raised for configuration problems (invalid JSON, unknown target version)."""

    exit_code = EXIT_GENERIC_FAILURE
