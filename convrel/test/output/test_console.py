"""Tests for convrel.output.console module."""

from __future__ import annotations

import pytest

from convrel.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"
        assert str(Style.DEFAULT) == "default"


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_error_and_warning_flags(self) -> None:
        console = MockConsole()
        assert not console.has_error()
        console.warning("careful")
        console.error("broken")
        assert console.has_warning()
        assert console.has_error()
        assert not console.has_success()

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.success("Released v1.0.0")
        console.info("1.0.0 -> 1.1.0")

        assert len(console.find("v1.0.0")) == 1
        assert console.text == "OK Released v1.0.0\ninfo: 1.0.0 -> 1.1.0"

    def test_clear(self) -> None:
        console = MockConsole()
        console.print("x")
        console.clear()
        assert console.messages == []

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.newline()


class TestRichConsole:
    def test_brackets_are_printed_verbatim(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.print("- **api:** handle [bold] input")
        console.error("bad [red] header")

        out = capsys.readouterr().out
        assert "[bold]" in out
        assert "[red]" in out

    def test_stderr_console(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(stderr=True).warning("hook output")

        captured = capsys.readouterr()
        assert "hook output" in captured.err
        assert captured.out == ""
