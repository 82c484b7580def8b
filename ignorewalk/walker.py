from __future__ import annotations
import errno
import os
from pathlib import Path
from typing import Callable, Optional, Union

from .config import Config
from .ignore import IgnoreList

# visitor(path, is_dir) -> truthy to skip descending into that directory
Visitor = Callable[[str, bool], Optional[bool]]


def relative_to_base(ignore: IgnoreList, root: Union[str, os.PathLike]) -> str:
    rel = ignore.root_of(root)
    return os.path.join(*rel) if rel else "."


def walk(ignore: IgnoreList, root: Union[str, os.PathLike], visitor: Visitor,
         invert: bool = False, follow_symlinks: bool = False) -> None:
    """
    Depth-first pre-order walk below *root*, in name order. Entries matched by
    *ignore* are not visited and matched directories are not descended into.
    With ``invert=True`` only matched entries are visited (a matched
    directory once, without its contents). Invert mode still descends into
    unmatched directories and stops at matched ones, so it lists the ignored
    entries of the whole tree; it does not restrict the walk to the subtrees
    of matched directories.

    Paths handed to *visitor* are relative to ``ignore.base``. Anything the
    visitor raises stops the walk and propagates.
    """
    top = Path(root).resolve()
    if not top.exists():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(root))
    if not top.is_dir():
        raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(root))

    def rec(fs_dir: str, rel_dir: str) -> None:
        with os.scandir(fs_dir) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            rel = entry.name if rel_dir == "." else os.path.join(rel_dir, entry.name)
            is_dir = entry.is_dir(follow_symlinks=follow_symlinks)
            matched = ignore.match(rel, is_dir)
            skip = False
            if matched == invert:
                skip = bool(visitor(rel, is_dir))
            if is_dir and not matched and not skip:
                rec(entry.path, rel)

    rec(str(top), relative_to_base(ignore, top))


class Walker:
    def __init__(self, ignore: Optional[IgnoreList] = None, cfg: Optional[Config] = None) -> None:
        if cfg is None:
            cfg = ignore.config if ignore is not None else Config()
        self.cfg = cfg
        self.ignore = ignore if ignore is not None else IgnoreList(config=cfg)

    def walk(self, root: Union[str, os.PathLike], visitor: Visitor, invert: bool = False) -> None:
        walk(self.ignore, root, visitor, invert=invert, follow_symlinks=self.cfg.follow_symlinks)

    def _collect(self, root, invert: bool = False) -> list[tuple[str, bool]]:
        out: list[tuple[str, bool]] = []
        self.walk(root, lambda p, d: out.append((p, d)), invert=invert)
        return out

    def iter_paths(self, root) -> list[str]:
        return [p for p, _ in self._collect(root)]

    def iter_files(self, root) -> list[str]:
        return [p for p, is_dir in self._collect(root) if not is_dir]

    def ignored_paths(self, root) -> list[str]:
        return [p for p, _ in self._collect(root, invert=True)]

    def build_tree(self, root) -> str:
        children: dict[str, list[tuple[str, bool]]] = {}
        for p, is_dir in self._collect(root):
            children.setdefault(os.path.dirname(p) or ".", []).append((p, is_dir))

        def key(e: tuple[str, bool]):
            return (0 if (self.cfg.dirs_first_in_tree and e[1]) else 1, os.path.basename(e[0]).lower())

        lines: list[str] = []

        def rec(cur: str, prefix: str = "") -> None:
            entries = sorted(children.get(cur, []), key=key)
            for i, (p, is_dir) in enumerate(entries):
                last = (i == len(entries) - 1)
                lines.append(prefix + ("└── " if last else "├── ") + os.path.basename(p))
                if is_dir:
                    rec(p, prefix + ("    " if last else "│   "))

        lines.append(Path(root).resolve().name + "/")
        rec(relative_to_base(self.ignore, root))
        return "\n".join(lines)
