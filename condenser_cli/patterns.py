"""Glob-style include/exclude matching for repository-relative paths.

Patterns follow the usual repository glob dialect:

* ``*`` matches any run of characters inside one path segment
* ``?`` matches a single character inside one path segment
* ``[abc]`` / ``[!abc]`` are character classes
* ``**`` crosses segment boundaries (``**/x`` also matches a top-level ``x``)

A pattern that matches a directory also owns everything below it, so an
area listing ``src/api`` owns ``src/api/users.ts``. Matching is
case-sensitive and purely textual; nothing touches the filesystem.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Callable, Iterable, List, Sequence

logger = logging.getLogger(__name__)

Matcher = Callable[[str], bool]


def normalize_path(path: str) -> str:
    """Strip ``./`` prefixes and trailing slashes from a relative path."""
    while path.startswith("./"):
        path = path[2:]
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def _translate(pattern: str) -> str:
    """Translate a glob into a regular expression string."""
    parts: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            if j - i == 1:
                parts.append("[^/]*")
                i = j
                continue
            segment_start = i == 0 or pattern[i - 1] == "/"
            if segment_start and j < n and pattern[j] == "/":
                # "**/" swallows zero or more whole directories
                parts.append("(?:.*/)?")
                i = j + 1
            else:
                parts.append(".*")
                i = j
        elif c == "?":
            parts.append("[^/]")
            i += 1
        elif c == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                # Unclosed class, keep the bracket literally
                parts.append(re.escape(c))
                i += 1
                continue
            body = pattern[i + 1:j].replace("\\", "\\\\")
            if body[:1] in ("!", "^"):
                body = "^" + body[1:]
            parts.append(f"[{body}]")
            i = j + 1
        else:
            parts.append(re.escape(c))
            i += 1
    return "(?s:" + "".join(parts) + r")\Z"


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> Matcher:
    """Compile ``pattern`` into a predicate over normalized paths.

    Malformed globs never raise; they degrade to an exact literal comparison.
    """
    normalized = normalize_path(pattern)
    try:
        regex = re.compile(_translate(normalized))
    except re.error as exc:
        logger.debug("Treating malformed glob %r as a literal: %s", pattern, exc)
        return lambda candidate: candidate == normalized
    return lambda candidate: regex.match(candidate) is not None


def _candidates(path: str) -> Iterable[str]:
    """Yield the path itself followed by each ancestor directory."""
    current = normalize_path(path)
    yield current
    while "/" in current:
        current = current.rsplit("/", 1)[0]
        if current:
            yield current


def pattern_matches(path: str, pattern: str) -> bool:
    """Return True if ``pattern`` matches ``path`` or one of its ancestors."""
    matcher = compile_pattern(pattern)
    return any(matcher(candidate) for candidate in _candidates(path))


def matches_any(path: str, patterns: Sequence[str]) -> bool:
    return any(pattern_matches(path, pattern) for pattern in patterns)


def matches(path: str, include_patterns: Sequence[str], exclude_patterns: Sequence[str]) -> bool:
    """Check whether a pattern set owns ``path``.

    Args:
        path: Repository-relative POSIX path
        include_patterns: Globs that claim paths; an empty list claims nothing
        exclude_patterns: Globs that carve paths back out of the included set

    Returns:
        True if at least one include pattern matches and no exclude does
    """
    if not include_patterns:
        return False
    if not matches_any(path, include_patterns):
        return False
    return not matches_any(path, exclude_patterns)
