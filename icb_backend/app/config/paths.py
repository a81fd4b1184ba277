# icb_backend/app/config/paths.py
from __future__ import annotations

"""
Central path resolution for the brewing tools backend.

Env overrides:
    ICB_RULES_DIR

Defaults:
    <repo_root>/icb_backend/app/tools/rules

Exports:
    - constants: REPO_ROOT, APP_ROOT, RULES_DIR
    - getters: get_*()
    - resolvers: resolve_rules_file()
"""

import os
from pathlib import Path

# ──────────────────────────────────────────────────────────────────────────────
_THIS_FILE = Path(__file__).resolve()

def _resolve_repo_root() -> Path:
    p = _THIS_FILE
    for _ in range(6):
        if (p.parent / "icb_backend" / "app").exists():
            return p.parent
        p = p.parent
    return _THIS_FILE.parents[3]

REPO_ROOT: Path = _resolve_repo_root()
APP_ROOT: Path = _THIS_FILE.parents[1]

def _clean_env(value: str | None) -> str | None:
    if value is None:
        return None
    v = value.strip().strip('"').strip("'")
    return v or None

def _env_path(name: str) -> Path | None:
    raw = _clean_env(os.getenv(name))
    if not raw:
        return None
    return Path(raw).expanduser().resolve()

_default_rules = APP_ROOT / "tools" / "rules"

# ── Getters
def get_repo_root() -> Path: return REPO_ROOT
def get_app_root()  -> Path: return APP_ROOT

def get_rules_dir() -> Path:
    # read on every call so tests can point ICB_RULES_DIR at a tmp dir
    return (_env_path("ICB_RULES_DIR") or _default_rules).resolve()

RULES_DIR: Path = get_rules_dir()

# ── Resolvers
def resolve_rules_file(name: str) -> Path:
    """Return absolute path under the rules dir for a given filename."""
    return get_rules_dir() / name
