"""Unit tests for techdebt.cli.output module."""

import io

import pytest

from techdebt.cli.output import OutputConfig, OutputManager, should_use_color


class TestShouldUseColor:
    def test_explicit_flag_wins(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        assert should_use_color(explicit_flag=True) is True
        assert should_use_color(explicit_flag=False) is False

    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert should_use_color() is False

    def test_force_color_env(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert should_use_color(stream=io.StringIO()) is True

    def test_non_tty_stream(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        assert should_use_color(stream=io.StringIO()) is False


class TestOutputConfig:
    def test_no_color_flag(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert OutputConfig.from_flags(no_color=True).use_color is False


class TestOutputManager:
    @pytest.fixture
    def streams(self):
        return io.StringIO(), io.StringIO()

    def manager(self, streams, **kwargs):
        out, err = streams
        return OutputManager(OutputConfig(use_color=False, stream=out, err_stream=err, **kwargs))

    def test_plain_symbols(self, streams):
        output = self.manager(streams)
        output.success("done")
        output.warning("careful")
        output.skip("eslint: not installed")
        assert streams[0].getvalue() == "[OK] done\n[WARN] careful\n[SKIP] eslint: not installed\n"

    def test_errors_go_to_stderr(self, streams):
        self.manager(streams).error("Error: bad")
        assert streams[0].getvalue() == ""
        assert streams[1].getvalue() == "Error: bad\n"

    def test_quiet_suppresses_all_but_errors(self, streams):
        output = self.manager(streams, quiet=True)
        output.info("hidden")
        output.success("hidden")
        output.error("shown")
        assert streams[0].getvalue() == ""
        assert "shown" in streams[1].getvalue()
