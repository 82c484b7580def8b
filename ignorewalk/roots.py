from __future__ import annotations
import os
from pathlib import Path, PurePath
from typing import Optional, Sequence, Union

from pathspec.patterns.gitignore.basic import GitIgnoreBasicPattern


class RepoNotFoundError(FileNotFoundError):
    """Raised when no directory up the chain holds the repository marker."""


def split_path(path: Union[str, os.PathLike]) -> tuple[str, ...]:
    return PurePath(path).parts


def relative_root(declared: Sequence[str], base: Sequence[str]) -> tuple[str, ...]:
    """
    Express the *declared* directory relative to *base*, both given as path
    segments. Diverging roots backtrack with ``..``:

        relative_root(("/", "a", "b"), ("/", "a", "c")) == ("..", "b")
    """
    common = 0
    for ours, theirs in zip(declared, base):
        if ours != theirs:
            break
        common += 1
    return ("..",) * (len(base) - common) + tuple(declared[common:])


def anchor_pattern(pattern: str, root: Sequence[str]) -> str:
    # pattern comes without its leading "/"; directory names are literal
    if not root:
        return pattern
    return "/".join((*(GitIgnoreBasicPattern.escape(seg) for seg in root), pattern))


def resolve_parts(base: Sequence[str], segs: Sequence[str]) -> tuple[str, ...]:
    """Lexically apply *segs* (which may hold ``..``) on top of *base*."""
    parts = list(base)
    for seg in segs:
        if seg in ("", "."):
            continue
        if seg == "..":
            if len(parts) > 1:
                parts.pop()
        else:
            parts.append(seg)
    return tuple(parts)


def strip_root(parts: Sequence[str], root: Sequence[str]) -> Optional[str]:
    """
    The part of *parts* below *root*, "/"-joined, or None when *parts* is not
    strictly inside *root*.
    """
    n = len(root)
    if len(parts) <= n or tuple(parts[:n]) != tuple(root):
        return None
    return "/".join(parts[n:])


def find_repo_root(start: Union[str, os.PathLike, Sequence[str]], marker: str = ".git") -> Path:
    if isinstance(start, (str, os.PathLike)):
        segs = split_path(Path(start).resolve())
    else:
        segs = tuple(start)
    for depth in range(len(segs), 0, -1):
        candidate = Path(*segs[:depth])
        if (candidate / marker).exists():
            return candidate
    shown = Path(*segs) if segs else "<empty path>"
    raise RepoNotFoundError(f"could not find {marker} in {shown} or any parent directory")
