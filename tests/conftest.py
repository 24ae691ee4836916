"""Shared test fixtures for oasmodel.

Provides the fixture documents, ready-read document models, an isolated
configuration environment, output managers and a CLI runner. These
fixtures are discovered by pytest and available to every test module
without explicit imports.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from oasmodel.models import OpenApiDocument
from oasmodel.output import DisplayMode, OutputManager, reset_output, set_output
from oasmodel.readers import read_document


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file"). Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw document fixtures (text as stored on disk)
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_20_text() -> str:
    return (FIXTURES_DIR / "petstore_2.0.yaml").read_text(encoding="utf-8")


@pytest.fixture
def petstore_30_text() -> str:
    return (FIXTURES_DIR / "petstore_3.0.yaml").read_text(encoding="utf-8")


@pytest.fixture
def webhooks_31_text() -> str:
    return (FIXTURES_DIR / "webhooks_3.1.yaml").read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Read document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_20(petstore_20_text: str) -> OpenApiDocument:
    """The Swagger 2.0 petstore, read into the model."""
    return read_document(petstore_20_text)


@pytest.fixture
def petstore_30(petstore_30_text: str) -> OpenApiDocument:
    """The OpenAPI 3.0 petstore, read into the model."""
    return read_document(petstore_30_text)


@pytest.fixture
def webhooks_31(webhooks_31_text: str) -> OpenApiDocument:
    return read_document(webhooks_31_text)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME at a subdirectory of tmp_path so that tests
    never touch real user config, clears the OASMODEL_* environment
    variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("oasmodel.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))

    for var in ["OASMODEL_TARGET_VERSION", "OASMODEL_FORMAT"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(mode=DisplayMode.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(mode=DisplayMode.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner capturing stdout and stderr."""
    from typer.testing import CliRunner

    return CliRunner()
