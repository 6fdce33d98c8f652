"""Glob matching for project-relative paths.

Uses fnmatch (``*`` matches any characters including ``/``) and adds the
pieces project globs rely on:

- ``{a,b}`` brace alternatives
- ``**/`` prefixes and ``/**/`` segments matching zero or more directories
- ``!pattern`` negation in pattern lists
"""

import fnmatch
import re
from functools import lru_cache
from typing import Iterable, List, Tuple

_BRACE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` groups into every alternative.

    >>> expand_braces("*.{js,ts}")
    ['*.js', '*.ts']
    """
    match = _BRACE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: List[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def _globstar_variants(pattern: str) -> List[str]:
    # Each "**" directory segment may stand for zero directories
    variants = [pattern]
    while any("**" in v for v in variants):
        nxt: List[str] = []
        for v in variants:
            if v.startswith("**/"):
                nxt.append(v[3:])
                nxt.append("*/" + v[3:])
            elif "/**/" in v:
                nxt.append(v.replace("/**/", "/", 1))
                nxt.append(v.replace("/**/", "/*/", 1))
            elif "**" in v:
                nxt.append(v.replace("**", "*"))
            else:
                nxt.append(v)
        variants = nxt
    return variants


@lru_cache(maxsize=512)
def translate(pattern: str) -> Tuple[str, ...]:
    """Turn one glob into the plain fnmatch patterns that together match it."""
    result: List[str] = []
    for expanded in expand_braces(pattern):
        for variant in _globstar_variants(expanded):
            if variant not in result:
                result.append(variant)
    return tuple(result)


def match_path(path: str, pattern: str) -> bool:
    """Match a POSIX relative path against a single (non-negated) glob."""
    return any(fnmatch.fnmatchcase(path, p) for p in translate(pattern))


def split_patterns(patterns: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Split a pattern list into (positive, negated-without-bang)."""
    positive: List[str] = []
    negative: List[str] = []
    for p in patterns:
        if p.startswith("!"):
            negative.append(p[1:])
        else:
            positive.append(p)
    return positive, negative


def match_any(path: str, patterns: Iterable[str]) -> bool:
    """Match against a pattern list where ``!`` entries exclude.

    A path matches when at least one positive pattern matches and no
    negated pattern does.
    """
    positive, negative = split_patterns(patterns)
    if not any(match_path(path, p) for p in positive):
        return False
    return not any(match_path(path, p) for p in negative)


