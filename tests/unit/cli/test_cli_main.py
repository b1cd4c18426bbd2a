"""Unit tests for the techdebt command-line interface."""

import json

import pytest
from click.testing import CliRunner

from techdebt import __version__
from techdebt.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(make_tree, lines_of):
    return make_tree(
        {
            "src/big.ts": lines_of(501),
            "src/notes.py": "x = 1\n# TODO: tidy up\n",
        }
    )


class TestScanCommand:
    def test_text_report(self, runner, project):
        result = runner.invoke(cli, ["scan", str(project), "--no-color"])
        assert result.exit_code == 1
        assert "TECHDEBT SCAN RESULTS" in result.stdout
        assert "CRITICAL (must fix before merge)" in result.stdout
        assert "[FILE_SIZE] src/big.ts" in result.stdout
        assert "TODO marker: # TODO: tidy up" in result.stdout

    def test_summary_only(self, runner, project):
        result = runner.invoke(cli, ["scan", str(project), "--summary", "--no-color"])
        assert result.exit_code == 1
        assert "SUMMARY" in result.stdout
        assert "[FILE_SIZE]" not in result.stdout

    def test_json_summary(self, runner, project):
        result = runner.invoke(cli, ["scan", str(project), "--json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["summary"] == {
            "critical": 1,
            "high": 0,
            "medium": 1,
            "low": 0,
            "total": 2,
        }
        assert data["scannedPath"] == str(project)
        assert data["threshold"] == "none"
        assert data["duplicatesEnabled"] is False
        assert data["exitCode"] == 1

    def test_json_threshold(self, runner, project):
        result = runner.invoke(cli, ["scan", str(project), "--json", "--threshold", "CRITICAL"])
        data = json.loads(result.stdout)
        assert data["summary"]["medium"] == 0
        assert data["summary"]["total"] == 1
        assert data["threshold"] == "critical"

    def test_clean_tree_exits_zero(self, runner, make_tree):
        root = make_tree({"index.ts": "export const answer = 42;\n"})
        result = runner.invoke(cli, ["scan", str(root), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["summary"]["total"] == 0

    def test_invalid_threshold(self, runner, project):
        result = runner.invoke(cli, ["scan", str(project), "--threshold", "urgent", "--no-color"])
        assert result.exit_code == 3
        assert result.stdout == ""
        assert result.stderr.strip().splitlines() == ["Error: Invalid threshold level 'urgent'"]

    def test_missing_directory(self, runner, tmp_path):
        result = runner.invoke(cli, ["scan", str(tmp_path / "missing"), "--no-color"])
        assert result.exit_code == 3
        assert "Directory not found" in result.stderr

    def test_unknown_option(self, runner, project):
        result = runner.invoke(cli, ["scan", str(project), "--bogus"])
        assert result.exit_code == 3

    def test_quiet_and_verbose_conflict(self, runner, project):
        result = runner.invoke(cli, ["scan", str(project), "-q", "-v"])
        assert result.exit_code == 3

    def test_bad_config_file(self, runner, project):
        (project / ".techdebt.json").write_text("{not json")
        result = runner.invoke(cli, ["scan", str(project), "--no-color"])
        assert result.exit_code == 3
        assert result.stderr.startswith("Error:")

    def test_duplicates_flag(self, runner, make_tree):
        body = "".join(f"  total += values[{i}];\n" for i in range(12))
        source = f"function sum(values) {{\n{body}}}\n"
        root = make_tree({"a.js": source, "b.js": source})
        result = runner.invoke(cli, ["scan", str(root), "--json", "--duplicates"])
        data = json.loads(result.stdout)
        assert data["duplicatesEnabled"] is True
        assert data["summary"]["critical"] == 1

    def test_fix_without_tools(self, runner, project, monkeypatch, tmp_path):
        monkeypatch.setenv("PATH", str(tmp_path / "empty-bin"))
        result = runner.invoke(cli, ["scan", str(project), "--fix", "--summary", "--no-color"])
        assert result.exit_code == 1
        assert "[SKIP] eslint: not installed" in result.stdout
        assert "Auto-fix complete" in result.stdout

    def test_json_log_file(self, runner, project, tmp_path):
        log_file = tmp_path / "logs" / "scan.log"
        result = runner.invoke(
            cli,
            ["scan", str(project), "--json", "--log-file", str(log_file), "--log-format", "json"],
        )
        assert result.exit_code == 1
        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        complete = [e for e in entries if e["message"].startswith("Scan complete")]
        assert complete[0]["finding_count"] == 2
        assert complete[0]["level"] == "INFO"

    def test_invalid_log_format(self, runner, project):
        result = runner.invoke(cli, ["scan", str(project), "--log-format", "xml"])
        assert result.exit_code == 3


class TestReportCommand:
    def test_report_to_stdout(self, runner, project):
        result = runner.invoke(cli, ["report", str(project)])
        assert result.exit_code == 0
        assert "**Code Health Score:**" in result.stdout
        assert "### [FILE_SIZE] src/big.ts" in result.stdout

    def test_report_to_file(self, runner, project, tmp_path):
        target = tmp_path / "TECH_DEBT.md"
        result = runner.invoke(cli, ["report", str(project), "--output", str(target), "--no-color"])
        assert result.exit_code == 0
        assert "Report written to" in result.stdout
        assert "| 🔴 Critical | 1 |" in target.read_text(encoding="utf-8")

    def test_report_missing_directory(self, runner, tmp_path):
        result = runner.invoke(cli, ["report", str(tmp_path / "missing")])
        assert result.exit_code == 3


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_unknown_command(runner):
    result = runner.invoke(cli, ["frobnicate"])
    assert result.exit_code == 3
