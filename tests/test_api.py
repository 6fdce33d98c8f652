"""Tests for the public API."""

import pytest
from conftest import write_files

from trinity import quick_validate, validate_project
from trinity.exceptions import InvalidConfigError, InvalidPathError


class TestValidateProject:
    def test_defaults(self, ts_project):
        result = validate_project(ts_project)
        assert result.valid
        assert result.metadata.mode == "all"

    def test_overrides_and_threshold(self, untested_project):
        assert not validate_project(untested_project, mode="mid-dev").valid
        assert validate_project(untested_project, mode="mid-dev", min_score=60).valid
        result = validate_project(
            untested_project, mode="mid-dev", overrides={"scoring": {"test_weight": 0.0}}
        )
        assert result.score.overall == 100

    def test_invalid_value_raises(self, ts_project):
        with pytest.raises(InvalidConfigError):
            validate_project(ts_project, overrides={"validation": {"test_timeout": 0}})

    def test_explicit_python_language(self, tmp_path):
        write_files(
            tmp_path,
            {
                "trinity.toml": '[project]\nlanguage = "python"\n',
                "README.md": "# p\n",
                "src/p/core.py": "def run():\n    return 1\n",
                "tests/p/test_core.py": "def test_run():\n    assert True\n",
            },
        )
        result = validate_project(tmp_path, mode="mid-dev")
        assert result.metadata.test_files == 1
        assert result.metadata.implementation_files == 1
        assert result.score.implementation == 100
        assert result.score.test > 0

    def test_missing_config_file(self, ts_project):
        with pytest.raises(InvalidPathError):
            validate_project(ts_project, config_file="missing.toml")


class TestQuickValidate:
    def test_quick_validate(self, ts_project):
        assert quick_validate(ts_project)

    def test_quick_validate_failure(self, untested_project):
        assert not quick_validate(untested_project)
