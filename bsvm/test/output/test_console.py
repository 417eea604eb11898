"""Tests for bsvm.output.console module."""

from __future__ import annotations

import pytest

from bsvm.output.console import (
    ConsoleProtocol,
    MockConsole,
    OutputRecord,
    RichConsole,
    Style,
)


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"
        assert str(Style.DEFAULT) == "default"


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs == [OutputRecord("hello", Style.DEFAULT)]

    def test_prefixed_helpers(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("broken")
        console.warning("careful")
        console.info("fyi")
        assert console.messages == ["OK done", "error: broken", "warning: careful", "info: fyi"]
        assert console.has_error()
        assert console.has_warning()

    def test_debug_dropped_unless_verbose(self) -> None:
        quiet = MockConsole()
        quiet.debug("detail")
        assert quiet.outputs == []

        loud = MockConsole(verbose=True)
        loud.debug("detail")
        assert loud.outputs == [OutputRecord("detail", Style.DIM)]

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.print("Release 1.0 <v1.0.0>")
        console.newline()
        console.print("Release 1.1 <v1.1.0>")
        assert len(console.find("<v1.")) == 2
        assert console.text == "Release 1.0 <v1.0.0>\n\nRelease 1.1 <v1.1.0>"

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.header("Versions")
        assert console.outputs[0].style == Style.HEADER  # type: ignore[attr-defined]


class TestRichConsole:
    def test_markup_in_names_is_printed_literally(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        console = RichConsole()
        console.print("[bold]Alpha[/bold] <v0.1.0>")
        console.error("[red]tag[/red]")

        out = capsys.readouterr().out
        assert "[bold]Alpha[/bold] <v0.1.0>" in out
        assert "[red]tag[/red]" in out

    def test_debug_only_when_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().debug("hidden detail")
        assert "hidden detail" not in capsys.readouterr().out

        RichConsole(verbose=True).debug("shown detail")
        assert "shown detail" in capsys.readouterr().out
