"""Tests for the CLI output layer.

Covers:
- DisplayMode resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline, quiet and verbose modes
- print_table in JSON and plain modes
- Output file redirection
- Routing of library log records
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from oasmodel.output import (
    DisplayMode,
    OutputManager,
    _should_disable_color,
    format_any,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("oasmodel.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("oasmodel.output._is_tty", lambda: True)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("TERM", raising=False)


@pytest.fixture()
def library_logger():
    logger = logging.getLogger("oasmodel")
    saved = (list(logger.handlers), logger.level)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])


# ------------------------------------------------------------------ #
# Format resolution
# ------------------------------------------------------------------ #


class TestDisplayModeResolution:
    def test_auto_on_tty_is_rich(self, tty) -> None:
        assert OutputManager().mode == DisplayMode.RICH

    def test_auto_piped_is_plain(self, non_tty) -> None:
        assert OutputManager().mode == DisplayMode.PLAIN

    def test_auto_on_tty_without_color_is_plain(self, tty) -> None:
        assert OutputManager(no_color=True).mode == DisplayMode.PLAIN

    def test_explicit_format_kept(self, tty) -> None:
        assert OutputManager(mode=DisplayMode.JSON).mode == DisplayMode.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_color_enabled(self, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# Data output
# ------------------------------------------------------------------ #


class TestDataOutput:
    def test_print_data_appends_newline(self, capsys) -> None:
        OutputManager(mode=DisplayMode.PLAIN).print_data('{"a":1}')
        captured = capsys.readouterr()
        assert captured.out == '{"a":1}\n'
        assert captured.err == ""

    def test_print_data_keeps_existing_newline(self, capsys) -> None:
        OutputManager(mode=DisplayMode.PLAIN).print_data("a: 1\n")
        assert capsys.readouterr().out == "a: 1\n"

    def test_output_file(self, tmp_path: Path, capsys) -> None:
        target = tmp_path / "out.json"
        OutputManager(mode=DisplayMode.PLAIN, output_file=str(target)).print_data("{ }")
        assert target.read_text(encoding="utf-8") == "{ }\n"
        assert capsys.readouterr().out == ""

    def test_print_document_plain_is_verbatim(self, capsys) -> None:
        OutputManager(mode=DisplayMode.PLAIN).print_document('{\n  "x": 1\n}', "json")
        assert capsys.readouterr().out == '{\n  "x": 1\n}\n'

    def test_print_document_rich_to_file_is_verbatim(self, tmp_path: Path) -> None:
        target = tmp_path / "out.yaml"
        OutputManager(mode=DisplayMode.RICH, output_file=str(target)).print_document("a: 1\n", "yaml")
        assert target.read_text(encoding="utf-8") == "a: 1\n"


class TestPrintTable:
    HEADERS = ["Field", "Value"]
    ROWS = [["Title", "Pets"], ["Paths", "2"]]

    def test_json(self, capsys) -> None:
        OutputManager(mode=DisplayMode.JSON).print_table(self.HEADERS, self.ROWS)
        assert json.loads(capsys.readouterr().out) == [
            {"Field": "Title", "Value": "Pets"},
            {"Field": "Paths", "Value": "2"},
        ]

    def test_plain(self, capsys) -> None:
        OutputManager(mode=DisplayMode.PLAIN).print_table(self.HEADERS, self.ROWS)
        assert capsys.readouterr().out == "Field\tValue\nTitle\tPets\nPaths\t2\n"

    def test_rich(self, capsys) -> None:
        OutputManager(mode=DisplayMode.RICH, no_color=True).print_table(
            self.HEADERS, self.ROWS, title="Pets"
        )
        out = capsys.readouterr().out
        assert "Title" in out
        assert "Pets" in out


# ------------------------------------------------------------------ #
# Diagnostics
# ------------------------------------------------------------------ #


class TestDiagnostics:
    def test_info_goes_to_stderr(self, capsys) -> None:
        OutputManager(mode=DisplayMode.PLAIN, no_color=True).info("loading")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "loading\n"

    def test_quiet_suppresses_info_and_success(self, capsys) -> None:
        output = OutputManager(mode=DisplayMode.PLAIN, no_color=True, quiet=True)
        output.info("loading")
        output.success("done")
        assert capsys.readouterr().err == ""

    def test_quiet_keeps_warnings_and_errors(self, capsys) -> None:
        output = OutputManager(mode=DisplayMode.PLAIN, no_color=True, quiet=True)
        output.warning("lossy")
        output.error("broken")
        assert capsys.readouterr().err == "Warning: lossy\nError: broken\n"

    def test_debug_only_when_verbose(self, capsys) -> None:
        OutputManager(mode=DisplayMode.PLAIN, no_color=True).debug("hidden")
        OutputManager(mode=DisplayMode.PLAIN, no_color=True, verbose=True).debug("shown")
        assert capsys.readouterr().err == "[debug] shown\n"


class TestLogHandler:
    @pytest.mark.parametrize(
        "kwargs, level",
        [({}, logging.WARNING), ({"quiet": True}, logging.ERROR), ({"verbose": True}, logging.DEBUG)],
    )
    def test_levels(self, library_logger, kwargs: dict, level: int) -> None:
        handler = OutputManager(mode=DisplayMode.PLAIN, **kwargs).install_log_handler()
        assert handler.level == level
        assert library_logger.level == level

    def test_replaces_previous_handler(self, library_logger) -> None:
        OutputManager(mode=DisplayMode.PLAIN).install_log_handler()
        handler = OutputManager(mode=DisplayMode.PLAIN).install_log_handler()
        rich_handlers = [h for h in library_logger.handlers if isinstance(h, RichHandler)]
        assert rich_handlers == [handler]


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_is_lazy_singleton(self) -> None:
        reset_output()
        assert get_output() is get_output()

    def test_set_output(self) -> None:
        output = OutputManager(mode=DisplayMode.JSON)
        set_output(output)
        assert get_output() is output


@pytest.mark.parametrize("value, expected", [(None, "-"), (3, "3"), ("Pets", "Pets")])
def test_format_any(value, expected: str) -> None:
    assert format_any(value) == expected
