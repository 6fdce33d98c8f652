"""Import extraction and resolution for JavaScript/TypeScript sources.

Extraction is regex-based text analysis, not parsing: imports inside
comments or strings are picked up too, and bundler aliases are not
understood. Package imports that cannot be located are assumed valid.
"""

import os
import re
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Set

from ..constants import RESOLVE_EXTENSIONS
from ..logging_config import get_logger
from ..models import ImportDependency

logger = get_logger(__name__)

_Q = r"""['"`]"""
_SPEC = r"""([^'"`]+)"""

# Each pattern captures the module specifier in group 1
IMPORT_PATTERNS = (
    # import x from 'a' / import { x } from 'a' / import * as x from 'a'
    re.compile(rf"""\bimport\s+[^;'"`]*?\s+from\s+{_Q}{_SPEC}{_Q}"""),
    # import 'a'
    re.compile(rf"""\bimport\s+{_Q}{_SPEC}{_Q}"""),
    # import('a')
    re.compile(rf"""\bimport\s*\(\s*{_Q}{_SPEC}{_Q}\s*\)"""),
    # require('a')
    re.compile(rf"""\brequire\s*\(\s*{_Q}{_SPEC}{_Q}\s*\)"""),
    # export { x } from 'a' / export * from 'a'
    re.compile(rf"""\bexport\s+[^;'"`]*?\s+from\s+{_Q}{_SPEC}{_Q}"""),
)

_STATEMENT = re.compile(rf"""^import\s+.*?from\s+{_Q}{_SPEC}{_Q}""")
_DEFAULT_BINDING = re.compile(r"^import\s+(?:type\s+)?([A-Za-z_$][\w$]*)\s*(?:,|\s+from\b)")
_NAMED_BINDINGS = re.compile(r"\{([^}]+)\}")
_NAMESPACE_BINDING = re.compile(r"\*\s+as\s+([A-Za-z_$][\w$]*)")

def _dedupe(items: Iterable[str]) -> List[str]:
    seen: Set[str] = set()
    out: List[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def parse_imports(content: str) -> List[str]:
    """Module specifiers imported by ``content``, de-duplicated in first-seen order."""
    found: List[str] = []
    for pattern in IMPORT_PATTERNS:
        found.extend(m.group(1) for m in pattern.finditer(content))
    return _dedupe(found)


def package_name(import_path: str) -> str:
    """``@scope/pkg/sub`` -> ``@scope/pkg``; ``pkg/sub`` -> ``pkg``."""
    parts = import_path.split("/")
    if import_path.startswith("@"):
        return "/".join(parts[:2])
    return parts[0]


def import_kind(import_path: str) -> str:
    if import_path.startswith("."):
        return "relative"
    if import_path.startswith("/"):
        return "absolute"
    return "package"


class ImportAnalyzer:
    """Reads project files and resolves their imports against the tree.

    Args:
        project_root: Root that relative file paths are resolved against
        extensions: Extensions tried when an import omits one
    """

    def __init__(self, project_root: Path, extensions: Iterable[str] = RESOLVE_EXTENSIONS):
        self.root = Path(project_root)
        self.extensions = tuple(extensions)

    # ── Reading ─────────────────────────────────────────────────

    def _read(self, file: str) -> Optional[str]:
        try:
            with open(self.root / file, encoding="utf-8", errors="replace") as f:
                return f.read()
        except OSError as e:
            logger.warning(f"Could not read file for import analysis: {file} ({e})")
            return None

    def extract_imports(self, file: str) -> List[str]:
        """Imports of ``file``; an unreadable file has none."""
        content = self._read(file)
        if content is None:
            return []
        return parse_imports(content)

    # ── Resolution ──────────────────────────────────────────────

    def _relative_target(self, from_file: str, import_path: str) -> Optional[str]:
        base = os.path.normpath(
            os.path.join(str(PurePosixPath(from_file).parent), import_path)
        ).replace(os.sep, "/")
        candidates = [base]
        candidates += [base + ext for ext in self.extensions]
        candidates += [f"{base}/index{ext}" for ext in self.extensions]
        for candidate in candidates:
            if (self.root / candidate).is_file():
                return candidate
        return None

    def _absolute_exists(self, import_path: str) -> bool:
        return (self.root / import_path.lstrip("/")).exists()

    def _package_path(self, import_path: str) -> Optional[str]:
        """Installed location of a package import, if it is in node_modules."""
        installed = PurePosixPath("node_modules", package_name(import_path)).as_posix()
        return installed if (self.root / installed).exists() else None

    def validate_import_path(self, from_file: str, import_path: str) -> bool:
        kind = import_kind(import_path)
        if kind == "relative":
            return self._relative_target(from_file, import_path) is not None
        if kind == "absolute":
            return self._absolute_exists(import_path)
        # Builtins and packages not installed locally are assumed to resolve
        return True

    def resolve_import(self, from_file: str, import_path: str) -> ImportDependency:
        kind = import_kind(import_path)
        resolved_path: Optional[str] = None
        if kind == "relative":
            resolved_path = self._relative_target(from_file, import_path)
            resolved = resolved_path is not None
        elif kind == "absolute":
            resolved = self._absolute_exists(import_path)
            if resolved:
                resolved_path = import_path.lstrip("/")
        else:
            resolved = True
            resolved_path = self._package_path(import_path)
        return ImportDependency(
            source=from_file,
            target=import_path,
            kind=kind,
            resolved=resolved,
            resolved_path=resolved_path,
        )

    def get_dependency_tree(self, file: str, _visited: Optional[Set[str]] = None) -> List[str]:
        """Files reachable from ``file`` through resolved relative imports.

        A file that imports itself, directly or transitively, appears in
        its own tree.
        """
        visited = _visited if _visited is not None else set()
        if file in visited:
            return []
        visited.add(file)

        deps: List[str] = []
        for import_path in self.extract_imports(file):
            if import_kind(import_path) != "relative":
                continue
            target = self._relative_target(file, import_path)
            if target is None:
                continue
            deps.append(target)
            deps.extend(self.get_dependency_tree(target, visited))
        return _dedupe(deps)

    def has_circular_dependencies(self, file: str) -> bool:
        return file in self.get_dependency_tree(file)

    # ── Usage ───────────────────────────────────────────────────

    def get_unused_imports(self, file: str) -> List[str]:
        """Bindings from single-line ``import ... from`` statements never mentioned again.

        Advisory only: a whole-word search of the remaining text is all that
        decides usage.
        """
        content = self._read(file)
        if content is None:
            return []

        unused: List[str] = []
        for line in content.splitlines():
            statement = line.strip()
            if not _STATEMENT.match(statement):
                continue
            rest = content.replace(statement, "", 1)
            for name in _bindings(statement):
                if not re.search(rf"(?<![\w$]){re.escape(name)}(?![\w$])", rest):
                    unused.append(name)
        return unused


def _bindings(statement: str) -> List[str]:
    names: List[str] = []
    default = _DEFAULT_BINDING.match(statement)
    if default:
        names.append(default.group(1))
    named = _NAMED_BINDINGS.search(statement)
    if named:
        for part in named.group(1).split(","):
            part = part.strip()
            if part.startswith("type "):
                part = part[len("type ") :].strip()
            if " as " in part:
                part = part.split(" as ", 1)[1].strip()
            if part:
                names.append(part)
    namespace = _NAMESPACE_BINDING.search(statement)
    if namespace:
        names.append(namespace.group(1))
    return names
