"""Tests for implementation/test/documentation cross-checks."""

from conftest import write_files

from trinity.adapters import PythonAdapter, TypeScriptAdapter
from trinity.validation import SynchronizationAnalyzer


def _analyzer(root, adapter=None, test_dir="__tests__"):
    return SynchronizationAnalyzer(root, adapter or TypeScriptAdapter(), ["src", "lib", "app"], test_dir)


class TestMissingTests:
    def test_synchronized_project(self, ts_project):
        impl = ["src/math.ts", "src/format.ts", "src/index.ts", "src/util/strings.ts"]
        report = _analyzer(ts_project).analyze(impl, [], [], ["README.md"])
        assert report.warnings == []
        assert report.result.synchronized
        assert report.result.coverage.test_coverage == 100
        assert report.result.coverage.documentation_coverage == 100

    def test_one_warning_per_missing_test(self, tmp_path):
        write_files(tmp_path, {"src/a.ts": "", "src/b.ts": "", "__tests__/a.test.ts": ""})
        report = _analyzer(tmp_path).analyze(["src/a.ts", "src/b.ts"], [], [], [])
        assert report.result.missing_tests == ["src/b.ts"]
        assert len(report.warnings) == 1
        warning = report.warnings[0]
        assert warning.severity == "warning"
        assert warning.category == "synchronization"
        assert warning.file == "src/b.ts"
        assert warning.message == "Missing test file for: src/b.ts"
        assert report.result.coverage.test_coverage == 50
        assert not report.result.synchronized

    def test_exempt_files_need_no_test(self, tmp_path):
        report = _analyzer(tmp_path).analyze(["src/index.ts", "src/types.ts", "src/api.d.ts"], [], [], [])
        assert report.warnings == []
        assert report.result.coverage.test_coverage == 0

    def test_python_layout(self, py_project):
        impl = ["src/pydemo/__init__.py", "src/pydemo/core.py", "src/pydemo/extra.py"]
        report = _analyzer(py_project, PythonAdapter(), "tests").analyze(impl, [], [], [])
        assert report.result.missing_tests == ["src/pydemo/extra.py"]


class TestOrphansAndDocs:
    def test_orphaned_tests(self, tmp_path):
        write_files(tmp_path, {"src/a.ts": "", "__tests__/a.test.ts": "", "__tests__/gone.test.ts": ""})
        report = _analyzer(tmp_path).analyze(
            ["src/a.ts"], ["__tests__/a.test.ts", "__tests__/gone.test.ts", "src/inline.test.ts"], [], []
        )
        assert report.result.orphaned_tests == ["__tests__/gone.test.ts"]

    def test_missing_and_empty_docs(self, tmp_path):
        write_files(tmp_path, {"README.md": "# Hi\n", "docs/empty.md": "  \n"})
        report = _analyzer(tmp_path).analyze(
            [], [], ["README.md", "docs/empty.md"], ["README.md", "CONTRIBUTING.md"]
        )
        assert report.result.missing_docs == ["CONTRIBUTING.md"]
        assert report.result.orphaned_docs == ["docs/empty.md"]
        assert report.result.coverage.documentation_coverage == 50
