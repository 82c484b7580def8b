from __future__ import annotations
from dataclasses import dataclass, asdict
from pathlib import Path
import json
import logging

RC_PATH = Path.home() / ".ignorewalk.json"

logger = logging.getLogger(__name__)

@dataclass(slots=True)
class Config:
    # names of the per-directory pattern file and of the repository marker
    ignore_filename: str = ".gitignore"
    root_marker: str = ".git"
    follow_symlinks: bool = False
    encoding: str = "utf-8"
    errors_policy: str = "replace"
    # globs applied on top of the pattern files (IgnoreCache)
    extra_patterns: tuple[str, ...] = ()
    dirs_first_in_tree: bool = True

def load_defaults() -> Config:
    if RC_PATH.exists():
        try:
            data: dict[str, object] = json.loads(RC_PATH.read_text(encoding="utf-8"))
            cfg = Config()
            for k, v in data.items():
                if hasattr(cfg, k):
                    setattr(cfg, k, tuple(v) if k == "extra_patterns" else v)
            return cfg
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Broken rc file %s, using defaults: %s", RC_PATH, e)
    return Config()

def save_defaults(cfg: Config) -> None:
    RC_PATH.write_text(json.dumps(asdict(cfg), ensure_ascii=False, indent=2), encoding="utf-8")
