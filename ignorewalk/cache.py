from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional

from .config import Config, load_defaults
from .ignore import IgnoreList
from .patterns import PatternError

logger = logging.getLogger(__name__)

class IgnoreCache:
    """IgnoreList for one project root, rebuilt only when its ignore files change."""

    def __init__(self, cfg: Optional[Config] = None) -> None:
        self.cfg = cfg if cfg is not None else load_defaults()
        self.root: Optional[Path] = None
        self.ignore: Optional[IgnoreList] = None
        self._snapshot: dict[Path, float] = {}

    def _collect_ignore_files(self, root: Path) -> list[Path]:
        out = []
        for p in root.rglob(self.cfg.ignore_filename):
            if self.cfg.root_marker in p.relative_to(root).parts:
                continue
            if p.is_file():
                out.append(p)
        return sorted(out)

    def _changed(self, files: list[Path]) -> bool:
        cur = {p: p.stat().st_mtime for p in files}
        if cur != self._snapshot:
            self._snapshot = cur
            return True
        return False

    def build(self, root: os.PathLike | str) -> bool:
        """Returns True when the IgnoreList was (re)built."""
        root = Path(root).resolve()
        files = self._collect_ignore_files(root)
        # always refresh the snapshot so the next call compares against it
        changed = self._changed(files)
        if self.root == root and not changed and self.ignore is not None:
            return False
        ign = IgnoreList(base=root, config=self.cfg)
        ign.append_all(root)
        for pat in self.cfg.extra_patterns:
            try:
                ign.append_glob(pat)
            except PatternError as e:
                logger.warning("Invalid extra pattern %r: %s", pat, e.reason)
        self.root, self.ignore = root, ign
        logger.debug("Rebuilt ignore list for %s from %d files", root, len(files))
        return True

    def ignored(self, path: os.PathLike | str) -> bool:
        if self.root is None or self.ignore is None:
            return False
        p = Path(path).resolve()
        rel = os.path.relpath(p, self.root)
        return self.ignore.match(rel, p.is_dir())
