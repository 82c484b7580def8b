from __future__ import annotations
from typing import Optional

from pathspec.pattern import RegexPattern
from pathspec.patterns.gitignore.basic import GitIgnoreBasicPattern


class PatternError(ValueError):
    """Raised when a glob string cannot be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid glob {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


def normalize_line(raw: str) -> Optional[str]:
    """
    Clean one line of an ignore file.

    Returns None for blank lines and comments. Trailing spaces are dropped
    unless escaped with a backslash, e.g. ``"foo\\ "`` keeps its last space.
    """
    line = raw[:-1] if raw.endswith("\r") else raw
    if not line or line[0] == "#":
        return None
    end = len(line)
    while end > 0 and line[end - 1] == " ":
        if end > 1 and line[end - 2] == "\\":
            break
        end -= 1
    return line[:end] or None


def _has_star_run(seg: str) -> bool:
    run, i = 0, 0
    while i < len(seg):
        if seg[i] == "\\":
            run, i = 0, i + 2
            continue
        run = run + 1 if seg[i] == "*" else 0
        if run > 1:
            return True
        i += 1
    return False


class GlobPattern(RegexPattern):
    """
    Whole-string shell glob. ``*`` and ``?`` stay inside one path segment,
    ``**`` as a full segment spans any number of segments (zero included).
    Segment globs (classes, escapes) are translated by pathspec.
    """

    __slots__ = ()

    @classmethod
    def pattern_to_regex(cls, pattern: str) -> tuple[str, bool]:
        if not pattern:
            raise PatternError(pattern, "empty pattern")
        segs = pattern.split("/")
        last = len(segs) - 1
        parts: list[str] = []
        for i, seg in enumerate(segs):
            if seg == "**":
                parts.append(".*" if i == last else "(?:[^/]*/)*")
                continue
            if _has_star_run(seg):
                raise PatternError(pattern, "'**' must be a whole path segment")
            try:
                # private pathspec API, version pinned in pyproject.toml
                parts.append(GitIgnoreBasicPattern._translate_segment_glob(seg, "raise"))
            except ValueError as e:
                # unterminated bracket or dangling escape
                raise PatternError(pattern, str(e)) from e
            if i < last:
                parts.append("/")
        return "^" + "".join(parts) + "$", True

    def matches(self, candidate: str) -> bool:
        return self.match_file(candidate) is not None


def compile_glob(pattern: str) -> GlobPattern:
    return GlobPattern(pattern)
