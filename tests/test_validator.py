"""End-to-end tests for TrinityValidator on small on-disk projects."""

import json

import pytest
from conftest import fake_runner, make_config, write_files

from trinity.config import TrinityConfig
from trinity.exceptions import TestRunnerError, TestRunnerTimeout
from trinity.models import TrinityValidationResult
from trinity.validation import TrinityValidator


def _validator(root, overrides=None, **kwargs):
    return TrinityValidator(make_config(root, overrides), **kwargs)


def _messages(findings):
    return [f.message for f in findings]


class TestFullValidation:
    def test_synchronized_project_passes(self, ts_project):
        result = _validator(ts_project).validate("all")
        assert result.errors == []
        assert result.warnings == []
        assert result.score.test == 100
        assert result.score.implementation == 100
        assert result.score.documentation == 100
        assert result.score.overall == 100
        assert result.valid
        assert result.synchronization.synchronized
        assert result.recommendations == []

    def test_metadata(self, ts_project):
        result = _validator(ts_project).validate("all")
        meta = result.metadata
        assert meta.mode == "all"
        assert meta.test_files == 3
        assert meta.implementation_files == 4
        assert meta.documentation_files == 2
        assert meta.total_files == 9
        assert meta.project_name == ts_project.name
        assert meta.trinity_version == "1.0.0"
        assert meta.execution_time >= 0
        assert meta.timestamp.endswith("+00:00")

    def test_untested_project(self, untested_project):
        result = _validator(untested_project).validate("all")
        assert result.score.test == 0
        assert result.score.implementation == 100
        assert result.score.documentation == 100
        assert result.score.overall == 67
        assert not result.valid
        assert result.errors == []
        sync_warnings = [w for w in result.warnings if w.category == "synchronization"]
        assert len(sync_warnings) == 10
        assert "Recommended test directory missing: __tests__" in _messages(result.warnings)
        assert result.synchronization.coverage.test_coverage == 0
        assert not result.synchronization.synchronized
        assert result.recommendations == [
            "Improve test coverage and fix test dependencies",
            "Add tests for 10 implementation file(s) without one",
            "Raise the overall score by 23 point(s) to reach 90",
        ]

    def test_broken_import(self, ts_project):
        write_files(ts_project, {"src/broken.ts": "import { helper } from './missing';\n"})
        result = _validator(ts_project).validate("all")
        assert _messages(result.errors) == ["Missing dependency: ./missing in src/broken.ts"]
        assert result.errors[0].category == "implementation"
        assert result.errors[0].file == "src/broken.ts"
        assert result.score.implementation == 97
        assert not result.valid
        details = result.layers["implementation"].details
        assert details.total_files == 5
        assert details.valid_files == 4
        assert details.error_count == 1
        assert _messages(result.warnings) == ["Missing test file for: src/broken.ts"]

    def test_mid_dev_skips_synchronization(self, ts_project):
        write_files(ts_project, {"src/lonely.ts": "export const x = 1;\n"})
        all_result = _validator(ts_project).validate("all")
        mid_result = _validator(ts_project).validate("mid-dev")
        assert len(all_result.warnings) == 1
        assert mid_result.warnings == []
        assert mid_result.score.overall == 100
        assert mid_result.valid

    def test_no_implementation_files(self, tmp_path):
        write_files(tmp_path, {"README.md": "# Empty\n"})
        result = _validator(tmp_path).validate("all")
        assert result.score.implementation == 0
        assert result.score.test == 0
        assert result.score.overall < 100

    def test_idempotent(self, ts_project):
        validator = _validator(ts_project)
        first = validator.validate("all")
        second = validator.validate("all")
        assert first.score == second.score
        assert first.errors == second.errors
        assert first.warnings == second.warnings

    def test_result_round_trips_through_json(self, untested_project):
        result = _validator(untested_project).validate("all")
        restored = TrinityValidationResult.from_dict(json.loads(json.dumps(result.to_dict())))
        assert restored == result

    def test_unknown_mode_runs_everything(self, ts_project):
        result = _validator(ts_project).validate("sideways")
        assert result.metadata.mode == "all"
        assert result.valid

    def test_min_score_override(self, untested_project):
        result = _validator(untested_project).validate_project(mode="mid-dev", min_score=60)
        assert result.valid

    def test_python_project(self, py_project):
        config = TrinityConfig(py_project).auto_detect_project()
        assert config.project.language == "python"
        result = TrinityValidator(config).validate("all")
        assert result.errors == []
        assert result.score.test == 90
        assert result.score.implementation == 100
        assert result.score.documentation == 100
        assert result.score.overall == 97
        assert result.synchronization.missing_tests == ["src/pydemo/extra.py"]
        assert result.valid


class TestFailureHandling:
    def test_layer_failure_is_contained(self, ts_project, monkeypatch):
        validator = _validator(ts_project)

        def explode():
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(validator.classifier, "find_test_files", explode)
        result = validator.validate("mid-dev")
        assert _messages(result.errors) == ["Test layer validation failed: disk on fire"]
        assert result.errors[0].category == "test"
        assert result.score.test == 0
        assert result.score.implementation == 100
        assert result.score.documentation == 100
        assert not result.valid

    def test_failure_outside_layers(self, ts_project, monkeypatch):
        validator = _validator(ts_project)

        def explode(*args):
            raise RuntimeError("boom")

        monkeypatch.setattr(validator, "validate_synchronization", explode)
        result = validator.validate("all")
        assert _messages(result.errors) == ["Validation failed: boom"]
        assert result.errors[0].category == "synchronization"

    def test_config_errors_block_validity(self, ts_project):
        validator = _validator(ts_project, config_errors=["Invalid config file 'trinity.toml': bad"])
        result = validator.validate("all")
        assert _messages(result.errors) == [
            "Configuration error: Invalid config file 'trinity.toml': bad"
        ]
        assert result.score.overall == 100
        assert not result.valid


class TestLayerChecks:
    def test_required_files(self, ts_project):
        result = _validator(
            ts_project, {"validation": {"required_files": ["src/util/logger.ts"]}}
        ).validate("mid-dev")
        assert _messages(result.errors) == ["Critical utility file missing: src/util/logger.ts"]
        assert result.score.implementation == 80

    def test_missing_required_doc(self, ts_project):
        result = _validator(
            ts_project, {"validation": {"required_docs": ["README.md", "CHANGELOG.md"]}}
        ).validate("mid-dev")
        assert _messages(result.warnings) == ["Key documentation missing: CHANGELOG.md"]
        assert result.score.documentation == 85

    def test_broken_markdown_links(self, ts_project):
        write_files(
            ts_project,
            {
                "docs/guide.md": "\n".join(
                    [
                        "[home](../README.md)",
                        "[gone](./nowhere.md#intro)",
                        "[site](https://example.com)",
                        "[anchor](#top)",
                        "[root](/README.md)",
                        "![img](images/missing.png)",
                    ]
                )
            },
        )
        validator = _validator(ts_project)
        assert validator.find_broken_links("docs/guide.md") == ["./nowhere.md#intro", "images/missing.png"]
        result = validator.validate("mid-dev")
        assert result.score.documentation == 90
        assert "Broken link in docs/guide.md: ./nowhere.md#intro" in _messages(result.warnings)

    def test_few_tests_penalized(self, tmp_path):
        write_files(
            tmp_path,
            {
                "README.md": "# Small\n",
                "src/a.ts": "export const a = 1;\n",
                "__tests__/a.test.ts": "import { a } from '../src/a';\n",
            },
        )
        result = _validator(tmp_path).validate("mid-dev")
        assert result.score.test == 90

    def test_test_dependency_error(self, ts_project):
        write_files(ts_project, {"__tests__/extra.test.ts": "import { y } from '../src/nothing';\n"})
        result = _validator(ts_project).validate("mid-dev")
        assert _messages(result.errors) == [
            "Missing dependency: ../src/nothing in __tests__/extra.test.ts"
        ]
        assert result.score.test == 95


class TestPreCommit:
    def _run(self, root, changed):
        return _validator(root, changed_files_provider=lambda: list(changed)).validate("pre-commit")

    def test_clean_commit(self, ts_project):
        write_files(ts_project, {"src/fresh.ts": "export const f = 1;\n", "__tests__/fresh.test.ts": ""})
        result = self._run(ts_project, ["src/fresh.ts", "__tests__/fresh.test.ts"])
        assert result.errors == []
        assert result.metadata.mode == "pre-commit"
        assert result.score.overall == 0

    def test_missing_staged_file(self, ts_project):
        result = self._run(ts_project, ["src/gone.ts"])
        assert _messages(result.errors) == [
            "File scheduled for commit but doesn't exist: src/gone.ts"
        ]

    def test_new_file_without_test_and_broken_import(self, ts_project):
        write_files(ts_project, {"src/broken.ts": "import { z } from './nope';\n"})
        result = self._run(ts_project, ["src/broken.ts"])
        assert _messages(result.errors) == [
            "Broken import in src/broken.ts: ./nope",
            "New implementation file src/broken.ts missing corresponding test file",
        ]
        assert [e.category for e in result.errors] == ["implementation", "test"]

    def test_exempt_and_non_source_files(self, ts_project):
        write_files(ts_project, {"src/types.ts": "export type T = number;\n", "scripts/build.ts": ""})
        result = self._run(ts_project, ["src/types.ts", "scripts/build.ts", "README.md"])
        assert result.errors == []

    def test_critical_files_warned_once(self, ts_project):
        result = self._run(ts_project, ["package.json", "tsconfig.json"])
        assert result.errors == []
        assert _messages(result.warnings) == [
            "Critical files modified - ensure thorough testing: package.json, tsconfig.json"
        ]


class TestPrePush:
    def test_passing_suite(self, ts_project):
        runner = fake_runner(passed=3)
        validator = _validator(
            ts_project, {"validation": {"test_command": "npm run unit", "test_timeout": 30}}, test_runner=runner
        )
        result = validator.validate("pre-push")
        assert result.errors == []
        command, cwd, timeout = runner.calls[0]
        assert command == "npm run unit"
        assert cwd == validator.root
        assert timeout == 30

    def test_default_command_from_adapter(self, ts_project):
        runner = fake_runner(passed=1)
        _validator(ts_project, test_runner=runner).validate("pre-push")
        assert len(runner.calls) == 1
        assert runner.calls[0][0]

    def test_failing_tests(self, ts_project):
        result = _validator(ts_project, test_runner=fake_runner(passed=1, failed=2, returncode=1)).validate(
            "pre-push"
        )
        assert _messages(result.errors) == ["2 tests failing"]
        assert result.errors[0].category == "test"

    def test_nonzero_exit_without_failures(self, ts_project):
        result = _validator(ts_project, test_runner=fake_runner(returncode=3)).validate("pre-push")
        assert _messages(result.errors) == ["Test suite execution failed: exit code 3"]

    def test_timeout(self, ts_project):
        runner = fake_runner(error=TestRunnerTimeout("npm test", 5))
        result = _validator(ts_project, test_runner=runner).validate("pre-push")
        assert _messages(result.errors) == ["Test suite timed out after 5s"]
        assert result.errors[0].category == "synchronization"

    def test_runner_error(self, ts_project):
        runner = fake_runner(error=TestRunnerError("npm test", "command not found: npm"))
        result = _validator(ts_project, test_runner=runner).validate("pre-push")
        assert _messages(result.errors) == ["Test suite execution failed: command not found: npm"]
        assert result.errors[0].category == "test"

    @pytest.mark.parametrize("mode", ["pre-push", "all"])
    def test_synchronization_runs(self, ts_project, mode):
        write_files(ts_project, {"src/lonely.ts": "export const x = 1;\n"})
        validator = _validator(ts_project, test_runner=fake_runner(passed=3))
        result = validator.validate(mode)
        assert result.synchronization.missing_tests == ["src/lonely.ts"]
