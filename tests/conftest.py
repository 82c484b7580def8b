from __future__ import annotations

from pathlib import Path

import pytest


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Create *files* (relative path -> content) under *root*; a key ending in '/' is an empty dir."""
    for rel, content in files.items():
        p = root / rel
        if rel.endswith("/"):
            p.mkdir(parents=True, exist_ok=True)
            continue
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def sample_project_tree(tmp_path: Path, monkeypatch) -> Path:
    """
    Small C-style project, also made the current directory. Its rules live
    next to it in tmp_path/rules.gitignore (*.o, build/):

        tmp_path/
          proj/
            main.c
            main.o
            build/out.bin
            src/helper.o

    Returns the path to 'proj'.
    """
    (tmp_path / "rules.gitignore").write_text("*.o\nbuild/\n", encoding="utf-8")
    proj = write_tree(tmp_path / "proj", {
        "main.c": "int main(void) { return 0; }\n",
        "main.o": "",
        "build/out.bin": "",
        "src/helper.o": "",
    })
    monkeypatch.chdir(proj)
    return proj


@pytest.fixture
def nested_repo(tmp_path: Path, monkeypatch) -> Path:
    """
    Repository with a nested ignore file, current directory set to its root:

        repo/
          .git/
          .gitignore          (/secrets.txt, *.log)
          secrets.txt
          app.log
          nested/
            .gitignore        (/local.cfg, cache/)
            secrets.txt
            local.cfg
            cache/data.bin
            deep/local.cfg
    """
    repo = write_tree(tmp_path / "repo", {
        ".git/": "",
        ".gitignore": "/secrets.txt\n*.log\n",
        "secrets.txt": "",
        "app.log": "",
        "nested/.gitignore": "/local.cfg\ncache/\n",
        "nested/secrets.txt": "",
        "nested/local.cfg": "",
        "nested/cache/data.bin": "",
        "nested/deep/local.cfg": "",
    })
    monkeypatch.chdir(repo)
    return repo


@pytest.fixture
def make_tree():
    return write_tree
