"""Fixed values shared across the engine: defaults, patterns, message texts."""

from enum import Enum

TRINITY_VERSION = "1.0.0"

MIN_TRINITY_SCORE = 90
PERFECT_SCORE = 100

# Layers scoring below this get a recommendation
RECOMMENDATION_THRESHOLD = 90

# Overall-score delta inside which a trend counts as noise
TREND_DEAD_ZONE = 2

LAYERS = ("test", "implementation", "documentation")


class ValidationMode(str, Enum):
    """Which sequence of checks a run performs."""

    ALL = "all"
    PRE_COMMIT = "pre-commit"
    PRE_PUSH = "pre-push"
    MID_DEV = "mid-dev"


# ── File extensions ──────────────────────────────────────────────────

SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")
RESOLVE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")
DOC_EXTENSIONS = (".md", ".mdx", ".rst", ".txt")

LANGUAGE_BY_EXTENSION = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".py": "python",
    ".md": "markdown",
    ".mdx": "markdown",
    ".rst": "restructuredtext",
    ".txt": "text",
    ".json": "json",
    ".toml": "toml",
    ".yml": "yaml",
    ".yaml": "yaml",
}

# ── Default glob patterns ────────────────────────────────────────────

DEFAULT_TEST_PATTERNS = [
    "**/__tests__/**/*.test.{js,ts,jsx,tsx,mjs,cjs}",
    "**/__tests__/**/*.spec.{js,ts,jsx,tsx,mjs,cjs}",
    "**/*.test.{js,ts,jsx,tsx,mjs,cjs}",
    "**/*.spec.{js,ts,jsx,tsx,mjs,cjs}",
]

DEFAULT_IMPLEMENTATION_PATTERNS = [
    "src/**/*.{js,ts,jsx,tsx}",
    "lib/**/*.{js,ts,jsx,tsx}",
    "app/**/*.{js,ts,jsx,tsx}",
    "!**/*.test.{js,ts,jsx,tsx}",
    "!**/*.spec.{js,ts,jsx,tsx}",
    "!**/*.d.ts",
]

DEFAULT_DOCUMENTATION_PATTERNS = [
    "**/*.md",
    "**/*.mdx",
    "docs/**/*",
    "README*",
    "CHANGELOG*",
    "CONTRIBUTING*",
]

DEFAULT_EXCLUDE_PATTERNS = [
    "node_modules/**",
    "dist/**",
    "build/**",
    "coverage/**",
    ".git/**",
    "*.log",
    ".env*",
]

# Top-level documentation names, matched at depth <= 1 only
TOP_LEVEL_DOC_NAMES = ("README*", "CHANGELOG*", "CONTRIBUTING*")

CONFIG_FILE_NAMES = frozenset(
    {
        "package.json",
        "tsconfig.json",
        "jest.config.js",
        "vitest.config.ts",
        "eslint.config.js",
        ".eslintrc",
        ".eslintrc.json",
        "babel.config.js",
        "webpack.config.js",
        "rollup.config.js",
        "vite.config.js",
        "vite.config.ts",
        "pyproject.toml",
        "setup.py",
        "setup.cfg",
        "tox.ini",
        "trinity.toml",
    }
)

# ── Default directories ──────────────────────────────────────────────

DEFAULT_TEST_DIRS = ["__tests__", "test", "tests"]
DEFAULT_SOURCE_DIRS = ["src", "lib", "app"]
DEFAULT_DOCS_DIRS = ["docs", "documentation"]
DEFAULT_EXCLUDE_DIRS = ["node_modules", "dist", "build", "coverage", ".git"]

DEFAULT_REQUIRED_DOCS = ["README.md"]
DEFAULT_REQUIRED_TEST_DIRS = ["__tests__"]
DEFAULT_CRITICAL_FILES = ["package.json", "tsconfig.json", "pyproject.toml", "setup.py"]

DEFAULT_TEST_TIMEOUT = 600

# Implementation files that never need their own test
SYNC_EXEMPT_STEMS = frozenset({"types", "constants", "index", "__init__", "__main__"})

# ── Message texts ────────────────────────────────────────────────────


def msg_missing_dependency(dep: str, file: str) -> str:
    return f"Missing dependency: {dep} in {file}"


def msg_broken_import(imp: str, file: str) -> str:
    return f"Broken import in {file}: {imp}"


def msg_missing_test(file: str) -> str:
    return f"Missing test file for: {file}"


def msg_missing_documentation(file: str) -> str:
    return f"Key documentation missing: {file}"


def msg_critical_file_missing(file: str) -> str:
    return f"Critical utility file missing: {file}"


def msg_tests_failing(failed: int) -> str:
    return f"{failed} tests failing"


def msg_layer_failed(layer: str, error: str) -> str:
    return f"{layer} layer validation failed: {error}"


def msg_file_not_found(file: str) -> str:
    return f"File scheduled for commit but doesn't exist: {file}"


def msg_missing_recommended_dir(directory: str) -> str:
    return f"Recommended test directory missing: {directory}"


def msg_critical_files_modified(files: list) -> str:
    return f"Critical files modified - ensure thorough testing: {', '.join(files)}"


def msg_broken_link(link: str, file: str) -> str:
    return f"Broken link in {file}: {link}"


def msg_new_file_missing_test(file: str) -> str:
    return f"New implementation file {file} missing corresponding test file"


def msg_test_suite_failed(reason: str) -> str:
    return f"Test suite execution failed: {reason}"


def msg_test_suite_timeout(timeout: float) -> str:
    return f"Test suite timed out after {timeout:g}s"


def msg_config_error(error: str) -> str:
    return f"Configuration error: {error}"
