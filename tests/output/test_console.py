"""Tests for the Rich console factory and theme."""

from __future__ import annotations

import pytest

from commctl.domain.lifecycle import CommissionStatus
from commctl.output.console import create_console, get_output, style_for_status


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_theme_styles_resolve(self) -> None:
        console = create_console()
        console.print("[comm.ok]OK[/comm.ok]")
        assert "OK" in get_output(console)


class TestStyleForStatus:
    @pytest.mark.parametrize("status", list(CommissionStatus))
    def test_every_status_has_style(self, status: CommissionStatus) -> None:
        assert style_for_status(status) == f"comm.status.{status}"

    def test_unknown_status_is_unstyled(self) -> None:
        assert style_for_status("paused") == ""
