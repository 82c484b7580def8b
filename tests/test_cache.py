from __future__ import annotations

import logging
import os
from pathlib import Path

from ignorewalk.cache import IgnoreCache
from ignorewalk.config import Config


def test_ignore_cache_ignored(tmp_path: Path) -> None:
    root = tmp_path / "proj"
    root.mkdir()
    (root / ".gitignore").write_text("ignored_dir/\n*.tmp\n", encoding="utf-8")

    ignored_dir = root / "ignored_dir"
    ignored_dir.mkdir()
    normal_dir = root / "normal"
    normal_dir.mkdir()

    ignored_file = root / "foo.tmp"
    ignored_file.write_text("x", encoding="utf-8")
    normal_file = root / "foo.txt"
    normal_file.write_text("x", encoding="utf-8")

    cache = IgnoreCache(Config())
    assert cache.ignored(ignored_file) is False  # nothing built yet
    assert cache.build(root) is True

    assert cache.ignored(ignored_dir) is True
    assert cache.ignored(normal_dir) is False
    assert cache.ignored(ignored_file) is True
    assert cache.ignored(normal_file) is False


def test_ignore_cache_nested_files(tmp_path: Path) -> None:
    root = tmp_path / "proj"
    (root / "sub").mkdir(parents=True)
    (root / "sub" / ".gitignore").write_text("/only-here.txt\n", encoding="utf-8")
    (root / "sub" / "only-here.txt").write_text("x", encoding="utf-8")
    (root / "only-here.txt").write_text("x", encoding="utf-8")

    cache = IgnoreCache(Config())
    cache.build(root)
    assert cache.ignored(root / "sub" / "only-here.txt") is True
    assert cache.ignored(root / "only-here.txt") is False


def test_ignore_cache_changed_snapshot(tmp_path: Path) -> None:
    root = tmp_path / "proj"
    root.mkdir()
    gi = root / ".gitignore"
    gi.write_text("a/\n", encoding="utf-8")

    cache = IgnoreCache(Config())
    assert cache.build(root) is True
    before = dict(cache._snapshot)
    first = cache.ignore
    # nothing changed: same list, same snapshot
    assert cache.build(root) is False
    assert dict(cache._snapshot) == before
    assert cache.ignore is first

    gi.write_text("a/\n*.tmp\n", encoding="utf-8")
    st = gi.stat()
    os.utime(gi, (st.st_atime, st.st_mtime + 10))
    assert cache.build(root) is True
    assert dict(cache._snapshot) != before
    assert cache.ignore is not first
    assert cache.ignore.match("x.tmp")


def test_ignore_cache_extra_patterns(tmp_path: Path, caplog) -> None:
    root = tmp_path / "proj"
    root.mkdir()
    (root / "notes.bak").write_text("x", encoding="utf-8")
    caplog.set_level(logging.WARNING, logger="ignorewalk.cache")

    cache = IgnoreCache(Config(extra_patterns=("*.bak", "***")))
    cache.build(root)

    assert cache.ignored(root / "notes.bak") is True
    assert any("***" in r.getMessage() for r in caplog.records)


def test_ignore_cache_uses_rc_defaults(tmp_path: Path, monkeypatch) -> None:
    rc = tmp_path / ".ignorewalk.json"
    rc.write_text('{"ignore_filename": ".dumpignore"}', encoding="utf-8")
    monkeypatch.setattr("ignorewalk.config.RC_PATH", rc, raising=True)

    root = tmp_path / "proj"
    root.mkdir()
    (root / ".dumpignore").write_text("*.log\n", encoding="utf-8")
    (root / "run.log").write_text("x", encoding="utf-8")

    cache = IgnoreCache()
    cache.build(root)
    assert cache.ignored(root / "run.log") is True
