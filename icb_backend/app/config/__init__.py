# icb_backend/app/config/__init__.py
from __future__ import annotations

# Re-export config surface expected by callers across the app.

# Env settings live in manifest.py
from .manifest import (
    APP_ENV,
    DEBUG_MODE,
    LOG_LEVEL,
    MIN_DRINK_ML,
    MAX_DRINK_ML,
    DEFAULT_DRINK_ML,
    CORS_ORIGINS,
    validate_manifest,
)

# Path helpers live in paths.py
from .paths import (
    REPO_ROOT,
    APP_ROOT,
    RULES_DIR,
    get_rules_dir,
    resolve_rules_file,
)

__all__ = [
    # manifest
    "APP_ENV",
    "DEBUG_MODE",
    "LOG_LEVEL",
    "MIN_DRINK_ML",
    "MAX_DRINK_ML",
    "DEFAULT_DRINK_ML",
    "CORS_ORIGINS",
    "validate_manifest",
    # paths
    "REPO_ROOT",
    "APP_ROOT",
    "RULES_DIR",
    "get_rules_dir",
    "resolve_rules_file",
]
