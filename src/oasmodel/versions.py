"""Spec versions understood by the reader and writers."""

from __future__ import annotations

import enum
import logging
from typing import Optional

from oasmodel.exceptions import UnsupportedVersionError

logger = logging.getLogger(__name__)


class SpecVersion(str, enum.Enum):
    """Wire encodings supported by :mod:`oasmodel`.

    ``V2`` is the legacy Swagger 2.0 format; ``V3_0`` and ``V3_1`` are the two
    OpenAPI 3 revisions. The value is the version string written into the
    document root.
    """

    V2 = "2.0"
    V3_0 = "3.0.4"
    V3_1 = "3.1.1"

    @property
    def is_legacy(self) -> bool:
        return self is SpecVersion.V2

    @classmethod
    def from_label(cls, label: str) -> "SpecVersion":
        """Map a user-facing label (``2.0``, ``3.0``, ``3.1``, ``3.0.3`` ...) to a version.

        Raises:
            UnsupportedVersionError: If the label names no supported version.
        """
        label = label.strip()
        if label in ("2", "2.0"):
            return cls.V2
        if label == "3" or label == "3.0" or label.startswith("3.0."):
            return cls.V3_0
        if label == "3.1" or label.startswith("3.1."):
            return cls.V3_1
        raise UnsupportedVersionError(
            f"Unsupported spec version: {label}. Supported: 2.0, 3.0, 3.1"
        )


def detect_version(swagger: Optional[str], openapi: Optional[str]) -> SpecVersion:
    """Detect the spec version from the root ``swagger`` / ``openapi`` values.

    Args:
        swagger: Raw ``swagger`` field text, if present.
        openapi: Raw ``openapi`` field text, if present.

    Returns:
        The detected :class:`SpecVersion`.

    Raises:
        UnsupportedVersionError: If neither field is present or the declared
            version is not supported.
    """
    if swagger is not None:
        if swagger.strip() == "2.0":
            logger.debug("Detected Swagger 2.0 document")
            return SpecVersion.V2
        raise UnsupportedVersionError(
            f"Unsupported Swagger version: {swagger}", field="swagger", raw=swagger
        )

    if openapi is None:
        raise UnsupportedVersionError(
            "Missing 'openapi' or 'swagger' field. Is this an API description document?"
        )

    version_str = openapi.strip()
    if version_str.startswith("3.0"):
        logger.debug("Detected OpenAPI %s document", version_str)
        return SpecVersion.V3_0
    if version_str.startswith("3.1"):
        logger.debug("Detected OpenAPI %s document", version_str)
        return SpecVersion.V3_1

    raise UnsupportedVersionError(
        f"Unsupported OpenAPI version: {version_str}. "
        "Only Swagger 2.0, OpenAPI 3.0.x and 3.1.x are supported.",
        field="openapi",
        raw=version_str,
    )
