from __future__ import annotations
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status

from icb_backend.app.config import MAX_DRINK_ML, MIN_DRINK_ML
from icb_backend.app.schemas import (
    BrewingMethod, CalculatorInput, CalculatorResult, CalculatorSettings, ExpertProfile, ExpertRecipe,
)
from icb_backend.app.tools import brew_timer, expert_recipes, share_link
from icb_backend.app.tools.brewing_guide import (
    COMMON_VOLUMES, VOLUME_UNITS, calculate_brew_ratio, convert_volume,
    format_coffee_amount, get_brewing_method, get_strength_label,
    list_brewing_methods, round_half_up, unit_abbreviation,
)
from icb_backend.app.utils.logs import get_logger

log = get_logger("tools_helpers")

CALCULATION_FAILED = "Unable to calculate recipe. Please check your inputs."


# ----------------------------------------------------------------------
# Drink-size validation (the 50-2000 ml range lives here, not in the core)
# ----------------------------------------------------------------------

def validate_drink_size(ml: float, unit: str = "ml") -> Optional[str]:
    abbr = unit_abbreviation(unit)
    if ml < MIN_DRINK_ML:
        return f"Minimum drink size is {convert_volume(MIN_DRINK_ML, 'ml', unit, precision=2):g} {abbr}"
    if ml > MAX_DRINK_ML:
        return f"Maximum drink size is {convert_volume(MAX_DRINK_ML, 'ml', unit, precision=2):g} {abbr}"
    return None


# ----------------------------------------------------------------------
# Methods
# ----------------------------------------------------------------------

def methods() -> List[BrewingMethod]:
    return list_brewing_methods()

def method_or_404(method_id: str) -> BrewingMethod:
    m = get_brewing_method(method_id)
    if m is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"unknown brewing method '{method_id}'")
    return m


# ----------------------------------------------------------------------
# Calculator
# ----------------------------------------------------------------------

def result_payload(result: CalculatorResult, strength: Any = None) -> Dict[str, Any]:
    body = result.model_dump(mode="json")
    shown = round_half_up(result.coffee_amount, 1)
    body["coffee_amount_display"] = shown
    body["coffee_amount_label"] = format_coffee_amount(shown)
    if strength is not None:
        body["strength_label"] = get_strength_label(strength)
    return body

def calculate(inp: CalculatorInput, unit: str = "ml") -> Dict[str, Any]:
    # volume arrives in ml; `unit` only shapes the validation message
    err = validate_drink_size(inp.volume, unit)
    if err:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=err)

    result = calculate_brew_ratio(inp)
    if result is None:
        log.info(f"calculate: no result for method={inp.method!r} volume={inp.volume!r}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=CALCULATION_FAILED)
    return result_payload(result, inp.strength)

def calculate_from_query(query: Dict[str, Any]) -> Dict[str, Any]:
    settings = share_link.parse_calculator_query(query)
    if settings.method is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=CALCULATION_FAILED)
    body = calculate(_input_from(settings))
    body["share_query"] = share_link.build_calculator_query(settings)
    return body

def _input_from(settings: CalculatorSettings) -> CalculatorInput:
    return CalculatorInput(
        method=settings.method.value if settings.method else "",
        volume=settings.drink,
        strength=settings.strength,
        roast_level=settings.roast_level,
    )


# ----------------------------------------------------------------------
# Units
# ----------------------------------------------------------------------

def convert(amount: float, from_unit: str, to_unit: str) -> Dict[str, Any]:
    for u in (from_unit, to_unit):
        if (u or "").strip().lower() not in VOLUME_UNITS:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail=f"unknown unit '{u}' (expected one of {sorted(VOLUME_UNITS)})")
    return {
        "amount": amount,
        "from_unit": from_unit,
        "to_unit": to_unit,
        "value": convert_volume(amount, from_unit, to_unit),
        "display": convert_volume(amount, from_unit, to_unit, precision=2),
    }

def volumes() -> Dict[str, Any]:
    return {
        "units": {k: v.model_dump() for k, v in VOLUME_UNITS.items()},
        "presets": [p.model_dump() for p in COMMON_VOLUMES],
        "min_ml": MIN_DRINK_ML,
        "max_ml": MAX_DRINK_ML,
    }


# ----------------------------------------------------------------------
# Timer
# ----------------------------------------------------------------------

def timer(query: Dict[str, Any], elapsed: int = 0) -> Dict[str, Any]:
    if elapsed < 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="elapsed must be >= 0")
    settings = share_link.parse_calculator_query(query)
    result = calculate_brew_ratio(_input_from(settings)) if settings.method else None
    if result is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=CALCULATION_FAILED)
    steps = brew_timer.get_timer_steps(result)
    state = brew_timer.timer_state(steps, elapsed)
    return {"method": result.method.id.value, "timer": state.model_dump(mode="json")}


# ----------------------------------------------------------------------
# Expert recipes
# ----------------------------------------------------------------------

def recipes(method=None, difficulty=None, use=None, tag=None, expert=None, flavor_note=None) -> List[ExpertRecipe]:
    return expert_recipes.list_expert_recipes(
        method=method, difficulty=difficulty, use=use, tag=tag, expert=expert, flavor_note=flavor_note,
    )

def flavor_notes() -> List[str]:
    return expert_recipes.list_flavor_notes()

def experts() -> List[ExpertProfile]:
    return expert_recipes.list_experts()

def recipe_or_404(slug: str) -> ExpertRecipe:
    rec = expert_recipes.get_expert_recipe(slug)
    if rec is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"unknown recipe '{slug}'")
    return rec

def recipe_detail(slug: str) -> Dict[str, Any]:
    rec = recipe_or_404(slug)
    result = expert_recipes.recipe_calculator_result(rec)
    return {
        "recipe": rec.model_dump(mode="json"),
        "timer_steps": [s.model_dump() for s in brew_timer.get_timer_steps(result)],
    }

def recipe_text(slug: str) -> str:
    return expert_recipes.recipe_as_text(recipe_or_404(slug))


# ----------------------------------------------------------------------
# Share link
# ----------------------------------------------------------------------

def share(query: Dict[str, Any]) -> Dict[str, Any]:
    settings = share_link.parse_calculator_query(query)
    return {"settings": settings.model_dump(mode="json"), "query": share_link.build_calculator_query(settings)}
