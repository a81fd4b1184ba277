# icb_backend/app/config/manifest.py
from __future__ import annotations

import os
from typing import Dict, List

from .paths import resolve_rules_file

# ---- environment mode ----
APP_ENV: str = os.getenv("APP_ENV", "development")
DEBUG_MODE: bool = os.getenv("DEBUG", "0") not in ("", "0", "false", "False")
LOG_LEVEL: str = os.getenv("ICB_LOG_LEVEL", "DEBUG" if DEBUG_MODE else "INFO").upper()

# ---- calculator drink-size bounds (ml) ----
MIN_DRINK_ML: float = float(os.getenv("ICB_MIN_DRINK_ML", "50"))
MAX_DRINK_ML: float = float(os.getenv("ICB_MAX_DRINK_ML", "2000"))
DEFAULT_DRINK_ML: int = int(os.getenv("ICB_DEFAULT_DRINK_ML", "300"))

# ---- CORS for the Next.js frontend ----
CORS_ORIGINS: List[str] = [
    o.strip()
    for o in os.getenv(
        "ICB_CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",
    ).split(",")
    if o.strip()
]

# ---- rulebook manifest ----
RULES_REQUIRED: List[str] = [
    "expert_recipes.yaml",
]

def validate_manifest() -> Dict[str, object]:
    missing_required = [name for name in RULES_REQUIRED if not resolve_rules_file(name).exists()]
    return {
        "status": "ok" if not missing_required else "missing_required",
        "required": RULES_REQUIRED,
        "missing_required": missing_required,
    }


__all__ = [
    "APP_ENV", "DEBUG_MODE", "LOG_LEVEL",
    "MIN_DRINK_ML", "MAX_DRINK_ML", "DEFAULT_DRINK_ML",
    "CORS_ORIGINS", "validate_manifest",
]
