"""TypeScript adapter: JavaScript rules plus ``.ts``/``.tsx`` sources."""

from pathlib import Path
from typing import List, Optional

from ..constants import DEFAULT_SOURCE_DIRS
from .javascript import JavaScriptAdapter


class TypeScriptAdapter(JavaScriptAdapter):
    name = "typescript"
    source_extensions = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")
    lint_files = JavaScriptAdapter.lint_files + ("tslint.json",)
    build_files = JavaScriptAdapter.build_files + (
        "webpack.config.ts",
        "rollup.config.ts",
        "vite.config.ts",
    )

    def detect(self, root: Path) -> bool:
        root = Path(root)
        if (root / "tsconfig.json").exists():
            return True
        return self.has_files_with_suffix(root, DEFAULT_SOURCE_DIRS, (".ts", ".tsx"))

    def get_file_patterns(self) -> List[str]:
        return super().get_file_patterns() + ["!**/*.d.ts"]

    def has_manifest(self, root: Path) -> bool:
        root = Path(root)
        return (root / "package.json").exists() or (root / "tsconfig.json").exists()

    def get_compiler_options(self, root: Path) -> dict:
        """``compilerOptions`` from tsconfig.json, ``{}`` when absent or unparseable."""
        options = self.read_json(Path(root) / "tsconfig.json").get("compilerOptions")
        return options if isinstance(options, dict) else {}

    def detect_framework(self, root: Path) -> Optional[str]:
        framework = super().detect_framework(root)
        if framework is None and "@types/express" in self.get_dependencies(root):
            return "express"
        return framework
