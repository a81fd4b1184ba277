# icb_backend/app/tools/expert_recipes.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml  # PyYAML
from pydantic import ValidationError

from icb_backend.app.config.paths import resolve_rules_file
from icb_backend.app.schemas import CalculatorInput, CalculatorResult, ExpertProfile, ExpertRecipe, RoastLevel
from icb_backend.app.tools.brewing_guide import calculate_brew_ratio, get_brewing_method
from icb_backend.app.utils.logs import get_logger

log = get_logger("expert_recipes")

_RULES_EXPERT_RECIPES = "expert_recipes.yaml"

# -----------------------------------------------------------------------------
# Internal IO helpers
# -----------------------------------------------------------------------------
def _load_yaml_from(path: Path) -> Any:
    try:
        txt = path.read_text(encoding="utf-8")
        return yaml.safe_load(txt)
    except FileNotFoundError:
        raise
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

def _parse_recipes(raw: Any, path: Path) -> List[ExpertRecipe]:
    rows = (raw or {}).get("recipes") if isinstance(raw, dict) else None
    if not isinstance(rows, list):
        raise ValueError(f"Expected a top-level 'recipes' list in {path}")
    out: List[ExpertRecipe] = []
    seen: set[str] = set()
    for i, row in enumerate(rows):
        try:
            rec = ExpertRecipe(**row)
        except (TypeError, ValidationError) as e:
            raise ValueError(f"Invalid recipe #{i} in {path}: {e}") from e
        if rec.slug in seen:
            raise ValueError(f"Duplicate recipe slug {rec.slug!r} in {path}")
        seen.add(rec.slug)
        out.append(rec)
    return out

def _parse_bios(raw: Any, path: Path) -> Dict[str, str]:
    # optional `experts:` block of {name, bio}; absent -> no bios
    rows = raw.get("experts") if isinstance(raw, dict) else None
    if rows is None:
        return {}
    if not isinstance(rows, list):
        raise ValueError(f"Expected 'experts' to be a list in {path}")
    bios: Dict[str, str] = {}
    for i, row in enumerate(rows):
        if not isinstance(row, dict) or not str(row.get("name") or "").strip():
            raise ValueError(f"Invalid expert #{i} in {path}: a name is required")
        bios[str(row["name"]).strip()] = str(row.get("bio") or "").strip()
    return bios

def _rules_path() -> Path:
    path = resolve_rules_file(_RULES_EXPERT_RECIPES)
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found: {path}")
    return path

def _wanted(values: Union[str, Iterable[str], None]) -> List[str]:
    # a single value or several (?tag=a&tag=b); blanks dropped, lowercased
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    return [v.strip().lower() for v in values if v and v.strip()]

# -----------------------------------------------------------------------------
# Public loader API
# -----------------------------------------------------------------------------
@lru_cache(maxsize=1)
def load_expert_recipes() -> Dict[str, ExpertRecipe]:
    """
    Load the curated recipe rulebook (required), keyed by slug.
    Raises FileNotFoundError if missing, ValueError if malformed.
    """
    path = _rules_path()
    recipes = _parse_recipes(_load_yaml_from(path), path)
    log.info(f"[rules] loaded {len(recipes)} expert recipes from {path}")
    return {r.slug: r for r in recipes}

@lru_cache(maxsize=1)
def load_expert_bios() -> Dict[str, str]:
    """Expert name -> short bio, from the same rulebook."""
    path = _rules_path()
    bios = _parse_bios(_load_yaml_from(path), path)
    log.info(f"[rules] loaded {len(bios)} expert bios from {path}")
    return bios

def list_expert_recipes(
    method: Optional[str] = None,
    difficulty: Optional[str] = None,
    use: Optional[str] = None,
    tag: Union[str, Iterable[str], None] = None,
    expert: Optional[str] = None,
    flavor_note: Union[str, Iterable[str], None] = None,
) -> List[ExpertRecipe]:
    """
    Recipes matching every given filter, easiest first then by title.

    `expert` is a case-insensitive substring of the expert's name.
    `tag` and `flavor_note` take one value or several; a recipe matches
    when it carries any of them.
    """
    tags = _wanted(tag)
    notes = _wanted(flavor_note)
    who = (expert or "").strip().lower()

    def _keep(r: ExpertRecipe) -> bool:
        if method and r.method.value != method.strip().lower():
            return False
        if difficulty and r.difficulty.value.lower() != difficulty.strip().lower():
            return False
        if use and r.recommended_use != use.strip().lower():
            return False
        if who and who not in r.expert.name.lower():
            return False
        if tags and not set(tags) & {t.lower() for t in r.tags}:
            return False
        if notes and not set(notes) & {n.lower() for n in r.flavor_notes}:
            return False
        return True

    rows = [r for r in load_expert_recipes().values() if _keep(r)]
    return sorted(rows, key=lambda r: (r.difficulty_index, r.title))

def list_flavor_notes() -> List[str]:
    """Every flavor note used by any recipe, deduplicated and sorted."""
    return sorted({n for r in load_expert_recipes().values() for n in r.flavor_notes})

def list_experts() -> List[ExpertProfile]:
    # experts in rulebook order, each with the slugs of their recipes
    bios = load_expert_bios()
    by_name: Dict[str, List[str]] = {}
    for r in load_expert_recipes().values():
        by_name.setdefault(r.expert.name, []).append(r.slug)
    return [ExpertProfile(name=n, bio=bios.get(n, ""), recipes=slugs) for n, slugs in by_name.items()]

def get_expert_recipe(slug: str) -> Optional[ExpertRecipe]:
    return load_expert_recipes().get((slug or "").strip().lower())

# -----------------------------------------------------------------------------
# Bridges
# -----------------------------------------------------------------------------
def recipe_calculator_result(recipe: ExpertRecipe) -> Optional[CalculatorResult]:
    """Calculator result used to drive the brew timer for an expert recipe."""
    roast = recipe.roast_recommendation[0] if recipe.roast_recommendation else RoastLevel.MEDIUM
    return calculate_brew_ratio(CalculatorInput(
        method=recipe.method.value,
        volume=recipe.water,
        strength=recipe.strength_level,
        roast_level=roast,
    ))

def recipe_as_text(recipe: ExpertRecipe) -> str:
    """Plain-text copy of a recipe (what the site puts on the clipboard)."""
    method = get_brewing_method(recipe.method)
    lines = [
        f"{recipe.title} by {recipe.expert.name}",
        f"Method: {method.name if method else recipe.method.value}",
        "",
        f"Coffee: {recipe.coffee:g}g",
        f"Water: {recipe.water:g}ml",
        f"Ratio: {recipe.ratio}",
        f"Grind: {recipe.grind}",
        f"Temperature: {recipe.temperature}",
        f"Time: {recipe.total_time}",
        "",
        "Steps:",
    ]
    lines += [f"{i}. {s.time}: {s.instruction}" for i, s in enumerate(recipe.steps, start=1)]
    if recipe.key_technique:
        lines += ["", f"Key Technique: {recipe.key_technique}"]
    return "\n".join(lines)
