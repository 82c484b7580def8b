from __future__ import annotations
import errno
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Sequence, Union

from .config import Config
from .patterns import GlobPattern, PatternError, compile_glob, normalize_line
from .roots import (
    anchor_pattern,
    find_repo_root,
    relative_root,
    resolve_parts,
    split_path,
    strip_root,
)

logger = logging.getLogger(__name__)

PathArg = Union[str, os.PathLike]


def clean_query(path: str, is_dir: bool = False) -> tuple[str, bool]:
    """
    Canonical spelling of a query path: ``/`` separators, no leading ``/`` or
    ``./`` (both mean the list base), and a trailing ``/`` folded into
    *is_dir*.
    """
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    if len(path) > 1 and path.startswith("/"):
        path = path.lstrip("/") or "/"
    while path.startswith("./") and len(path) > 2:
        path = path[2:]
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/") or "/"
        is_dir = True
    return path, is_dir


def path_variants(path: str, is_dir: bool = False) -> tuple[list[str], list[str]]:
    """
    String forms of one candidate, as ``(whole, all)``. ``whole`` holds the
    path itself and is what root-anchored patterns are tried against; ``all``
    adds the basename or, for top-level entries, ``./name``. Directories also
    get every form with a trailing slash, which is what ``dir/`` patterns
    match.
    """
    path, is_dir = clean_query(path, is_dir)
    name = path.rsplit("/", 1)[-1]
    whole = [path]
    variants = [path, "./" + path] if name == path else [path, name]
    if is_dir:
        whole.append(path + "/")
        variants += [v + "/" for v in variants]
    return whole, variants


@dataclass(frozen=True)
class GlobSource:
    """Patterns contributed by one ignore file (or one ad hoc glob)."""
    # tried against the path and its basename
    patterns: tuple[GlobPattern, ...] = ()
    # declared with a leading "/": tried against the whole path only
    anchored: tuple[GlobPattern, ...] = ()
    # directory of the file, relative to the list base; () means the base.
    # A file source only applies to paths inside it.
    root: tuple[str, ...] = ()
    origin: Optional[Path] = None

    def match(self, whole: Sequence[str], variants: Sequence[str]) -> bool:
        return (any(p.matches(v) for p in self.anchored for v in whole)
                or any(p.matches(v) for p in self.patterns for v in variants))


class IgnoreList:
    """
    Ordered set of GlobSources anchored at a fixed base directory.

    Paths given to :meth:`match` are relative to ``base``. The list is only
    mutated by the ``append*`` methods; callers sharing it between threads
    must not append while another thread walks or matches.
    """

    def __init__(self, base: Optional[PathArg] = None, config: Optional[Config] = None) -> None:
        self.base = Path(base).resolve() if base is not None else Path.cwd()
        self.base_parts = split_path(self.base)
        self.config = config if config is not None else Config()
        self.sources: list[GlobSource] = []

    @classmethod
    def new(cls, config: Optional[Config] = None) -> IgnoreList:
        return cls(config=config)

    @classmethod
    def from_file(cls, path: PathArg, config: Optional[Config] = None) -> IgnoreList:
        ign = cls(config=config)
        ign.append(path)
        return ign

    @classmethod
    def from_git(cls, config: Optional[Config] = None) -> IgnoreList:
        """
        Collect every ignore file of the repository containing the current
        directory. Raises RepoNotFoundError outside of a repository.
        """
        ign = cls(config=config)
        root = find_repo_root(ign.base_parts, ign.config.root_marker)
        ign.append_all(root)
        return ign

    def __len__(self) -> int:
        return len(self.sources)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, os.PathLike)) and self.match(path)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base={str(self.base)!r}, sources={len(self.sources)})"

    def patterns(self) -> Iterator[GlobPattern]:
        for source in self.sources:
            yield from source.anchored
            yield from source.patterns

    def root_of(self, directory: PathArg) -> tuple[str, ...]:
        parts = split_path(Path(directory).resolve())
        if parts == self.base_parts:
            return ()
        return relative_root(parts, self.base_parts)

    def append_glob(self, literal: str) -> GlobSource:
        # a leading slash anchors at the base, which is this source's root
        if literal.startswith("/"):
            source = GlobSource(anchored=(compile_glob(literal[1:]),))
        else:
            source = GlobSource((compile_glob(literal),))
        self.sources.append(source)
        return source

    def append(self, path: PathArg) -> Optional[GlobSource]:
        """
        Add the patterns of one ignore file. Lines that fail to compile are
        logged and skipped; an unreadable file raises OSError.
        """
        fname = Path(path)
        with open(fname, encoding=self.config.encoding, errors=self.config.errors_policy) as fh:
            lines = fh.read().splitlines()
        root = self.root_of(fname.parent)

        floating: list[GlobPattern] = []
        anchored: list[GlobPattern] = []
        for lineno, raw in enumerate(lines, 1):
            pattern = normalize_line(raw)
            if pattern is None:
                continue
            is_anchored = pattern.startswith("/")
            if is_anchored:
                pattern = anchor_pattern(pattern[1:], root)
            try:
                compiled = compile_glob(pattern)
            except PatternError as e:
                logger.warning("Invalid glob in %s:%d: %r (%s)", fname, lineno, raw, e.reason)
                continue
            (anchored if is_anchored else floating).append(compiled)
        if not floating and not anchored:
            return None
        source = GlobSource(tuple(floating), tuple(anchored), root, fname)
        self.sources.append(source)
        logger.debug("Loaded %d patterns from %s (root %r)",
                     len(floating) + len(anchored), fname, "/".join(root))
        return source

    def append_all(self, path: Optional[PathArg] = None) -> int:
        """
        Append every ignore file found under *path* (the base by default).
        Returns the number of files that contributed patterns.
        """
        top = Path(path) if path is not None else self.base
        if not top.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(top))
        if not top.is_dir():
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(top))

        def onerror(err: OSError) -> None:
            if isinstance(err, FileNotFoundError):
                logger.debug("Skipping vanished entry %s", err.filename)
                return
            raise err

        name, marker = self.config.ignore_filename, self.config.root_marker
        added = 0
        for dirpath, dirnames, filenames in os.walk(top, onerror=onerror, followlinks=self.config.follow_symlinks):
            dirnames[:] = sorted(d for d in dirnames if d != marker)
            if name not in filenames:
                continue
            try:
                source = self.append(Path(dirpath) / name)
            except FileNotFoundError:
                logger.debug("Skipping vanished ignore file in %s", dirpath)
                continue
            if source is not None:
                added += 1
        return added

    def _scoped_variants(self, root: tuple[str, ...], parts: tuple[str, ...],
                         is_dir: bool) -> Optional[tuple[list[str], list[str]]]:
        rel = strip_root(parts, resolve_parts(self.base_parts, root))
        if rel is None:
            return None
        whole, variants = path_variants(rel, is_dir)
        if root:
            # anchored patterns carry the root as a prefix
            whole = ["/".join((*root, w)) for w in whole]
        return whole, variants

    def match(self, path: PathArg, is_dir: bool = False) -> bool:
        """
        True if any source ignores *path* (relative to base). Sources read
        from a file only apply to paths inside that file's directory, and
        their patterns see the path relative to it.
        """
        path, is_dir = clean_query(os.fspath(path), is_dir)
        parts = resolve_parts(self.base_parts, path.split("/"))
        forms: dict[Optional[tuple[str, ...]], Optional[tuple[list[str], list[str]]]] = {}
        for source in self.sources:
            # ad hoc globs have no directory and see the query as given
            key = source.root if source.origin is not None else None
            if key not in forms:
                forms[key] = (path_variants(path, is_dir) if key is None
                              else self._scoped_variants(key, parts, is_dir))
            found = forms[key]
            if found is not None and source.match(*found):
                return True
        return False
