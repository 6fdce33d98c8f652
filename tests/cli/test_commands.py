"""Tests for the trinity command line."""

import json

import pytest
from conftest import write_files
from typer.testing import CliRunner

from trinity.cli import app
from trinity.cli._common import console, err_console
from trinity.validation import git


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep long paths and messages on one line."""
    monkeypatch.setattr(console, "width", 500)
    monkeypatch.setattr(err_console, "width", 500)


class TestVersion:
    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "Trinity version 1.0.0" in result.output


class TestValidateCommand:
    def test_passing_project(self, runner, ts_project):
        result = runner.invoke(app, ["validate", "-C", str(ts_project)])
        assert result.exit_code == 0, result.output
        assert "PASSED" in result.output

    def test_failing_project(self, runner, untested_project):
        result = runner.invoke(app, ["validate", "-C", str(untested_project)])
        assert result.exit_code == 1
        assert "FAILED" in result.output

    def test_fail_on_errors_only(self, runner, untested_project):
        result = runner.invoke(app, ["validate", "-C", str(untested_project), "--fail-on", "errors", "-q"])
        assert result.exit_code == 0

    def test_min_score_and_mode(self, runner, untested_project):
        result = runner.invoke(
            app, ["validate", "-C", str(untested_project), "-m", "mid-dev", "--min-score", "60", "-q"]
        )
        assert result.exit_code == 0

    def test_json_report_to_file(self, runner, ts_project, tmp_path):
        out = tmp_path / "reports" / "trinity.json"
        result = runner.invoke(app, ["validate", "-C", str(ts_project), "-f", "json", "-o", str(out)])
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert data["valid"] is True
        assert data["score"]["overall"] == 100

    def test_html_report_from_config(self, runner, ts_project):
        write_files(
            ts_project,
            {"trinity.toml": '[reporting]\noutput_format = "html"\ngenerate_reports = true\n'},
        )
        result = runner.invoke(app, ["validate", "-C", str(ts_project), "-q"])
        assert result.exit_code == 0, result.output
        report = ts_project / "trinity-reports" / "trinity-report.html"
        assert report.read_text().startswith("<!DOCTYPE html>")

    def test_invalid_config_value(self, runner, ts_project):
        write_files(ts_project, {"trinity.toml": "[validation]\nmin_trinity_score = 150\n"})
        result = runner.invoke(app, ["validate", "-C", str(ts_project)])
        assert result.exit_code == 2
        assert "between 0 and 100" in result.output

    def test_malformed_config_fails_run(self, runner, ts_project):
        write_files(ts_project, {"trinity.toml": "[validation\n"})
        result = runner.invoke(app, ["validate", "-C", str(ts_project)])
        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_log_file(self, runner, ts_project, tmp_path_factory):
        log_file = tmp_path_factory.mktemp("logs") / "trinity.log"
        result = runner.invoke(app, ["validate", "-C", str(ts_project), "-q", "--log-file", str(log_file)])
        assert result.exit_code == 0, result.output
        assert "Starting Trinity validation" in log_file.read_text()

    def test_baseline_round_trip(self, runner, ts_project, tmp_path):
        baseline = tmp_path / "baseline.json"
        first = runner.invoke(app, ["validate", "-C", str(ts_project), "--save-baseline", str(baseline)])
        assert first.exit_code == 0
        assert baseline.exists()
        second = runner.invoke(app, ["validate", "-C", str(ts_project), "--baseline", str(baseline)])
        assert second.exit_code == 0
        assert "Trend vs baseline" in second.output
        assert "stable" in second.output

    def test_trend_uses_configured_weights(self, runner, ts_project, tmp_path_factory):
        write_files(ts_project, {"trinity.toml": "[scoring]\ntest_weight = 2.0\n"})
        baseline = tmp_path_factory.mktemp("baselines") / "old.json"
        baseline.write_text(
            json.dumps({"score": {"test": 80, "implementation": 100, "documentation": 100, "overall": 90}})
        )
        result = runner.invoke(app, ["validate", "-C", str(ts_project), "--baseline", str(baseline)])
        assert result.exit_code == 0, result.output
        assert "improving" in result.output
        assert "(+10)" in result.output

    def test_unwritable_baseline(self, runner, ts_project, tmp_path_factory):
        blocker = tmp_path_factory.mktemp("out") / "blocker"
        blocker.write_text("a file, not a directory")
        result = runner.invoke(
            app, ["validate", "-C", str(ts_project), "--save-baseline", str(blocker / "base.json")]
        )
        assert result.exit_code == 2
        assert "Cannot access file" in result.output

    def test_unknown_mode_rejected(self, runner, ts_project):
        result = runner.invoke(app, ["validate", "-C", str(ts_project), "-m", "sideways"])
        assert result.exit_code == 2


class TestInitCommand:
    def test_creates_config_files(self, runner, ts_project):
        result = runner.invoke(app, ["init", "-C", str(ts_project)])
        assert result.exit_code == 0, result.output
        assert (ts_project / "trinity.toml").exists()
        assert (ts_project / "trinity.example.toml").exists()
        assert "typescript" in result.output

    def test_refuses_to_overwrite(self, runner, ts_project):
        runner.invoke(app, ["init", "-C", str(ts_project)])
        again = runner.invoke(app, ["init", "-C", str(ts_project)])
        assert again.exit_code == 1
        assert "already exists" in again.output
        forced = runner.invoke(app, ["init", "-C", str(ts_project), "--force", "-t", "react"])
        assert forced.exit_code == 0
        assert 'framework = "react"' in (ts_project / "trinity.toml").read_text()

    def test_written_config_validates(self, runner, ts_project):
        runner.invoke(app, ["init", "-C", str(ts_project)])
        result = runner.invoke(app, ["validate", "-C", str(ts_project), "-q"])
        assert result.exit_code == 0, result.output


class TestConfigCommand:
    def test_json(self, runner, ts_project):
        result = runner.invoke(app, ["config", "-C", str(ts_project), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["valid"] is True
        assert data["source"] is None
        assert data["config"]["project"]["language"] == "typescript"
        assert data["config"]["validation"]["min_trinity_score"] == 90

    def test_table(self, runner, ts_project):
        result = runner.invoke(app, ["config", "-C", str(ts_project)])
        assert result.exit_code == 0
        assert "[validation]" in result.output
        assert "Configuration is valid" in result.output

    def test_invalid(self, runner, ts_project):
        write_files(ts_project, {"trinity.toml": '[reporting]\noutput_format = "pdf"\n'})
        result = runner.invoke(app, ["config", "-C", str(ts_project)])
        assert result.exit_code == 2
        assert "Unknown output format" in result.output


class TestHooksCommand:
    @pytest.fixture(autouse=True)
    def no_git(self, monkeypatch):
        monkeypatch.setattr(git, "_run_git", lambda repo, *args: None)

    def test_install(self, runner, ts_project):
        (ts_project / ".git").mkdir()
        result = runner.invoke(app, ["hooks", "install", "-C", str(ts_project)])
        assert result.exit_code == 0, result.output
        assert (ts_project / ".git" / "hooks" / "pre-commit").exists()
        assert (ts_project / ".git" / "hooks" / "pre-push").exists()

    def test_non_blocking_push(self, runner, ts_project):
        (ts_project / ".git").mkdir()
        write_files(
            ts_project,
            {"trinity.toml": "[git]\npre_commit_validation = false\nblock_push_on_failure = false\n"},
        )
        result = runner.invoke(app, ["hooks", "install", "-C", str(ts_project)])
        assert result.exit_code == 0, result.output
        assert not (ts_project / ".git" / "hooks" / "pre-commit").exists()
        assert "|| true" in (ts_project / ".git" / "hooks" / "pre-push").read_text()

    def test_both_disabled(self, runner, ts_project):
        write_files(
            ts_project,
            {"trinity.toml": "[git]\npre_commit_validation = false\npre_push_validation = false\n"},
        )
        result = runner.invoke(app, ["hooks", "install", "-C", str(ts_project)])
        assert result.exit_code == 0
        assert "nothing to install" in result.output

    def test_not_a_repository(self, runner, ts_project):
        result = runner.invoke(app, ["hooks", "install", "-C", str(ts_project)])
        assert result.exit_code == 2
        assert "not a git repository" in result.output
