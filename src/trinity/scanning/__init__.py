"""File discovery, classification and import analysis."""

from .classifier import FileClassifier
from .imports import ImportAnalyzer, parse_imports
from .patterns import expand_braces, match_any, match_path

__all__ = [
    "FileClassifier",
    "ImportAnalyzer",
    "parse_imports",
    "expand_braces",
    "match_any",
    "match_path",
]
