# icb_backend/app/tools/share_link.py
from __future__ import annotations

import re
from typing import Mapping, Optional, Union
from urllib.parse import parse_qs, urlencode

from icb_backend.app.config import DEFAULT_DRINK_ML
from icb_backend.app.schemas import BrewingMethodKey, CalculatorSettings, RoastLevel, StrengthLevel

# Purpose:
# Calculator settings <-> URL query string (?method=&strength=&roast=&drink=).
# Bad values fall back to the calculator defaults instead of failing, so an
# old or hand-edited link still opens the tool.

# at most nine digits, so the parsed drink is always a finite float
_LEADING_INT = re.compile(r"^\s*([+-]?\d{1,9})")

def _first(query: Mapping, key: str) -> Optional[str]:
    v = query.get(key)
    if isinstance(v, (list, tuple)):
        v = v[0] if v else None
    if v is None:
        return None
    return str(v).strip() or None

def _enum_or(enum_cls, raw: Optional[str], default):
    try:
        return enum_cls((raw or "").lower())
    except ValueError:
        return default

def _parse_drink(raw: Optional[str]) -> int:
    # integer parse of the leading digits; 0 or garbage -> default.
    # A longer run keeps its first nine digits and stays oversized.
    m = _LEADING_INT.match(raw or "")
    n = int(m.group(1)) if m else 0
    return n or DEFAULT_DRINK_ML

def parse_calculator_query(query: Union[str, Mapping]) -> CalculatorSettings:
    if isinstance(query, str):
        query = parse_qs(query.lstrip("?"))
    method_raw = _first(query, "method")
    drink_raw = _first(query, "drink") or _first(query, "water")  # legacy param name
    return CalculatorSettings(
        method=_enum_or(BrewingMethodKey, method_raw, None),
        drink=_parse_drink(drink_raw),
        strength=_enum_or(StrengthLevel, _first(query, "strength"), StrengthLevel.AVERAGE),
        roast_level=_enum_or(RoastLevel, _first(query, "roast"), RoastLevel.MEDIUM),
    )

def build_calculator_query(settings: CalculatorSettings) -> str:
    params = {}
    if settings.method is not None:
        params["method"] = settings.method.value
    params["strength"] = settings.strength.value
    params["roast"] = settings.roast_level.value
    params["drink"] = f"{settings.drink:g}"
    return urlencode(params)
