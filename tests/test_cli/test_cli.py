"""End-to-end tests for the ``oasmodel`` command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from oasmodel import __version__
from oasmodel.app import app
from oasmodel.readers import read_document
from oasmodel.versions import SpecVersion
from oasmodel.writers import serialize_as_json

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
PETSTORE_30 = str(FIXTURES_DIR / "petstore_3.0.yaml")
PETSTORE_20 = str(FIXTURES_DIR / "petstore_2.0.yaml")


def test_version(cli_runner) -> None:
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"oasmodel {__version__}"


# ---------------------------------------------------------------------------
# convert
# ---------------------------------------------------------------------------


class TestConvert:
    def test_default_is_30_json(self, cli_runner, isolated_config: Path, petstore_30_text: str) -> None:
        result = cli_runner.invoke(app, ["--plain", "convert", PETSTORE_30])
        assert result.exit_code == 0, result.output
        expected = serialize_as_json(read_document(petstore_30_text), SpecVersion.V3_0)
        assert result.stdout == expected + "\n"

    def test_to_v2(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "convert", PETSTORE_30, "--to", "2.0"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["swagger"] == "2.0"
        assert data["host"] == "petstore.swagger.io"
        assert data["basePath"] == "/v1"

    def test_yaml_format(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "convert", PETSTORE_20, "-t", "3.1", "-f", "yaml"])
        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("openapi: 3.1.1\n")
        assert yaml.safe_load(result.stdout)["info"]["title"]

    def test_compact(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "convert", PETSTORE_30, "--compact"])
        assert result.exit_code == 0, result.output
        assert result.stdout.count("\n") == 1
        assert result.stdout.startswith('{"openapi":"3.0.4",')

    def test_output_file(self, cli_runner, isolated_config: Path) -> None:
        target = isolated_config / "out.json"
        result = cli_runner.invoke(app, ["--plain", "-o", str(target), "convert", PETSTORE_30])
        assert result.exit_code == 0, result.output
        assert result.stdout == ""
        assert json.loads(target.read_text(encoding="utf-8"))["openapi"] == "3.0.4"

    def test_project_config_target(self, cli_runner, isolated_config: Path) -> None:
        (isolated_config / "oasmodel.json").write_text('{"target_version": "2.0"}', encoding="utf-8")
        result = cli_runner.invoke(app, ["--plain", "convert", PETSTORE_30])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["swagger"] == "2.0"

    def test_stdin(self, cli_runner, isolated_config: Path, petstore_20_text: str) -> None:
        result = cli_runner.invoke(app, ["--plain", "convert", "-", "--to", "2.0"], input=petstore_20_text)
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["swagger"] == "2.0"

    def test_unsupported_target(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "convert", PETSTORE_30, "--to", "4.0"])
        assert result.exit_code == 1
        assert result.stdout == ""

    @pytest.mark.parametrize(
        "text",
        ["openapi: 3.0.3\ninfo: [1, 2\n", "openapi: 5.0.0\ninfo: {}\n", "just text\n"],
    )
    def test_unreadable_document(self, cli_runner, isolated_config: Path, text: str) -> None:
        path = isolated_config / "bad.yaml"
        path.write_text(text, encoding="utf-8")
        result = cli_runner.invoke(app, ["--plain", "--no-color", "convert", str(path)])
        assert result.exit_code == 7
        assert result.stdout == ""

    def test_missing_file(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "convert", str(isolated_config / "nope.yaml")])
        assert result.exit_code == 7

    def test_bad_reference(self, cli_runner, isolated_config: Path) -> None:
        path = isolated_config / "bad_ref.yaml"
        path.write_text(
            "openapi: 3.0.3\n"
            "info: {title: t, version: '1'}\n"
            "paths:\n"
            "  /x:\n"
            "    get:\n"
            "      responses:\n"
            "        '200':\n"
            "          $ref: '#/definitions/Ok'\n",
            encoding="utf-8",
        )
        result = cli_runner.invoke(app, ["--plain", "convert", str(path)])
        assert result.exit_code == 8


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


class TestInspect:
    def test_overview_plain(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "inspect", PETSTORE_30])
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0] == "Field\tValue"
        assert "Spec version\t3.0.3" in lines
        assert "Title\tSwagger Petstore" in lines
        assert "Operations\t3" in lines

    def test_overview_json(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "inspect", PETSTORE_20])
        assert result.exit_code == 0, result.output
        rows = {row["Field"]: row["Value"] for row in json.loads(result.stdout)}
        assert rows["Spec version"] == "2.0"
        assert rows["Webhooks"] == "0"

    def test_paths(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "inspect", PETSTORE_30, "--paths"])
        assert result.exit_code == 0, result.output
        operations = json.loads(result.stdout)
        assert [(op["Method"], op["Path"], op["Operation ID"]) for op in operations] == [
            ("GET", "/pets", "listPets"),
            ("POST", "/pets", "createPets"),
            ("GET", "/pets/{petId}", "showPetById"),
        ]

    def test_paths_empty(self, cli_runner, isolated_config: Path) -> None:
        path = isolated_config / "empty.yaml"
        path.write_text("openapi: 3.0.3\ninfo: {title: t, version: '1'}\npaths: {}\n", encoding="utf-8")
        result = cli_runner.invoke(app, ["--plain", "--no-color", "inspect", str(path), "--paths"])
        assert result.exit_code == 0
        assert result.stdout == ""
