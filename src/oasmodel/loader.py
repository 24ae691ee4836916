"""Fetch raw document text from a URL, a local file, or stdin.

This is the only module that performs I/O on behalf of the CLI; the model,
readers and writers work on strings and streams they are handed. The text
returned here is passed unchanged to :func:`oasmodel.readers.read_document`,
which detects JSON or YAML itself.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import httpx

from oasmodel.exceptions import DocumentLoadError

logger = logging.getLogger(__name__)


def load_text(source: str, timeout: float = 30.0) -> str:
    """Load document text from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        timeout: Seconds to wait for a URL before giving up.

    Returns:
        The document text.

    Raises:
        DocumentLoadError: If the source cannot be read or is empty.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source, timeout)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> str:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise DocumentLoadError("No input received from stdin")
    return content


def _load_from_url(url: str, timeout: float) -> str:
    """Fetch a document over HTTP(S), following redirects."""
    logger.debug("Fetching %s", url)
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentLoadError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DocumentLoadError(f"Failed to fetch document from {url}: {exc}") from exc

    if not response.text.strip():
        raise DocumentLoadError(f"Empty response from {url}")
    return response.text


def _load_from_file(path: str) -> str:
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentLoadError(f"Document file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentLoadError(f"Failed to read document file {path}: {exc}") from exc

    if not content.strip():
        raise DocumentLoadError(f"Document file is empty: {path}")
    return content
