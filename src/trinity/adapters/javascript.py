"""JavaScript (Node) adapter."""

import re
from pathlib import Path
from typing import Dict, List, Optional

from ..constants import DEFAULT_SOURCE_DIRS
from .base import LanguageAdapter

_TEST_NAME = re.compile(r"^(?P<stem>.+)\.(?:test|spec)(?P<ext>\.[^.]+)$")

# Checked in order; first dependency hit wins
FRAMEWORKS = (
    ("react", ("react",)),
    ("vue", ("vue", "@vue/composition-api")),
    ("angular", ("angular", "@angular/core")),
    ("nextjs", ("next",)),
    ("nuxtjs", ("nuxt",)),
    ("svelte", ("svelte",)),
    ("nestjs", ("nestjs", "@nestjs/core")),
    ("express", ("express",)),
)

TEST_FRAMEWORKS = (
    ("jest", ("jest", "@types/jest", "ts-jest")),
    ("vitest", ("vitest",)),
    ("mocha", ("mocha", "@types/mocha", "ts-mocha")),
    ("ava", ("ava",)),
    ("jasmine", ("jasmine",)),
)

TEST_COMMANDS = {
    "jest": "npx jest",
    "vitest": "npx vitest run",
    "mocha": "npx mocha",
    "ava": "npx ava",
    "jasmine": "npx jasmine",
}


class JavaScriptAdapter(LanguageAdapter):
    name = "javascript"
    source_extensions = (".js", ".jsx", ".mjs", ".cjs")
    lint_files = (
        ".eslintrc.js",
        ".eslintrc.json",
        ".eslintrc.yml",
        ".eslintrc.yaml",
        "eslint.config.js",
        ".jshintrc",
    )
    build_files = (
        "webpack.config.js",
        "rollup.config.js",
        "vite.config.js",
        "babel.config.js",
        ".babelrc",
        "gulpfile.js",
    )

    def detect(self, root: Path) -> bool:
        root = Path(root)
        if not (root / "package.json").exists():
            return False
        return self.has_files_with_suffix(root, DEFAULT_SOURCE_DIRS, self.source_extensions)

    def _ext_group(self) -> str:
        return ",".join(ext.lstrip(".") for ext in self.source_extensions)

    def get_test_patterns(self) -> List[str]:
        exts = self._ext_group()
        return [
            f"**/__tests__/**/*.test.{{{exts}}}",
            f"**/__tests__/**/*.spec.{{{exts}}}",
            f"**/*.test.{{{exts}}}",
            f"**/*.spec.{{{exts}}}",
        ]

    def get_file_patterns(self) -> List[str]:
        exts = self._ext_group()
        return [f"{d}/**/*.{{{exts}}}" for d in DEFAULT_SOURCE_DIRS] + [
            f"!**/*.test.{{{exts}}}",
            f"!**/*.spec.{{{exts}}}",
        ]

    def test_file_name(self, name: str) -> str:
        stem, dot, ext = name.rpartition(".")
        if not dot:
            return f"{name}.test"
        return f"{stem}.test.{ext}"

    def implementation_file_name(self, test_name: str) -> Optional[str]:
        m = _TEST_NAME.match(test_name)
        if m is None:
            return None
        return m.group("stem") + m.group("ext")

    def has_manifest(self, root: Path) -> bool:
        return (Path(root) / "package.json").exists()

    def read_package_json(self, root: Path) -> dict:
        return self.read_json(Path(root) / "package.json")

    def get_dependencies(self, root: Path) -> Dict[str, str]:
        pkg = self.read_package_json(root)
        deps: Dict[str, str] = {}
        for key in ("dependencies", "devDependencies", "peerDependencies"):
            section = pkg.get(key)
            if isinstance(section, dict):
                deps.update({str(k): str(v) for k, v in section.items()})
        return deps

    def detect_framework(self, root: Path) -> Optional[str]:
        deps = self.get_dependencies(root)
        for framework, names in FRAMEWORKS:
            if any(n in deps for n in names):
                return framework
        return None

    def detect_test_framework(self, root: Path) -> Optional[str]:
        deps = self.get_dependencies(root)
        for framework, names in TEST_FRAMEWORKS:
            if any(n in deps for n in names):
                return framework
        return None

    def default_test_command(self, root: Path) -> str:
        scripts = self.read_package_json(root).get("scripts") or {}
        if isinstance(scripts, dict) and scripts.get("test"):
            return "npm test"
        framework = self.detect_test_framework(root)
        return TEST_COMMANDS.get(framework or "", "npm test")

    def is_library(self, root: Path) -> bool:
        pkg = self.read_package_json(root)
        return bool(pkg.get("main") or pkg.get("module") or pkg.get("exports"))
