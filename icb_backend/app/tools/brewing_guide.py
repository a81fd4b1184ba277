# icb_backend/app/tools/brewing_guide.py
from __future__ import annotations

import math
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Union

from icb_backend.app.schemas import (
    BrewingMethod, BrewingMethodKey, CalculatorInput, CalculatorResult,
    RoastLevel, StrengthLevel, VolumePreset, VolumeUnit,
)
from icb_backend.app.utils.logs import get_logger

# Purpose:
# Static brewing-method table plus the brew-ratio calculator built on it.
# Everything here is pure: no I/O, no shared mutable state.

log = get_logger("brewing_guide")

_S = StrengthLevel
_R = RoastLevel

_HOT_FILTER = {_R.LIGHT: "95-100°C", _R.MEDIUM: "90-93°C", _R.DARK: "87-90°C"}


# --------- Method table ----------
# ratios are water-to-coffee denominators, i.e. 1:N
_METHODS: List[BrewingMethod] = [
    BrewingMethod(
        id=BrewingMethodKey.POUROVER,
        name="Pour Over",
        ratios={_S.MILD: 18, _S.AVERAGE: 15, _S.ROBUST: 13},
        grind_size="Medium-fine",
        brew_time="3-4 minutes (total)",
        temperatures=_HOT_FILTER,
        description="Manual brewing that highlights subtle flavors and clarity, great for showcasing origin characteristics.",
        flavor_profile="Clean, balanced, nuanced",
        recommended_roast=(_R.LIGHT, _R.MEDIUM),
        tips=(
            "Use a gooseneck kettle for controlled, circular pouring",
            "Wet the filter with hot water before adding coffee",
            "Bloom for 30-45 seconds with 2x coffee weight in water",
            "Maintain steady pour rate to hit target brew time",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.FRENCHPRESS,
        name="French Press",
        ratios={_S.MILD: 18, _S.AVERAGE: 15, _S.ROBUST: 12},
        grind_size="Coarse",
        brew_time="4 minutes (steep time)",
        temperatures=_HOT_FILTER,
        description="Immersion brewing that produces full-bodied cups with rich oils and deep flavor.",
        flavor_profile="Full-bodied, rich, slightly textured",
        recommended_roast=(_R.MEDIUM, _R.DARK),
        tips=(
            "Use coarse, even grind to prevent over-extraction",
            "Stir coffee grounds after adding water for even saturation",
            "Steep for exactly 4 minutes, then press slowly",
            "Serve immediately to prevent over-extraction",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.CHEMEX,
        name="Chemex",
        ratios={_S.MILD: 18, _S.AVERAGE: 16, _S.ROBUST: 13},
        grind_size="Medium-coarse",
        brew_time="4-6 minutes (total)",
        temperatures=_HOT_FILTER,
        description="Pour-over method using thick filters for exceptionally clean, bright cups with no sediment.",
        flavor_profile="Ultra-clean, bright, tea-like clarity",
        recommended_roast=(_R.LIGHT, _R.MEDIUM),
        tips=(
            "Use Chemex-branded filters for proper thickness",
            "Rinse filter thoroughly to remove papery taste",
            "Grind slightly coarser than V60 to compensate for thick filter",
            "Focus on even saturation with slower pour rate",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.AEROPRESS,
        name="AeroPress",
        ratios={_S.MILD: 18, _S.AVERAGE: 15, _S.ROBUST: 12},
        grind_size="Medium-fine",
        brew_time="1-2 minutes (including steep & press)",
        temperatures={_R.LIGHT: "85-90°C", _R.MEDIUM: "80-85°C", _R.DARK: "74-79°C"},
        description="Pressure-based brewing creating concentrated, espresso-like results with incredible versatility.",
        flavor_profile="Concentrated, smooth, low-bitterness",
        recommended_roast=(_R.LIGHT, _R.MEDIUM, _R.DARK),
        tips=(
            "Experiment with inverted method for longer steep times",
            "Use lower temperatures than other methods due to pressure",
            "Press slowly and steadily over 20-30 seconds",
            "Dilute concentrate to taste with hot water if desired",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.AUTODRIP,
        name="Auto Drip",
        ratios={_S.MILD: 18, _S.AVERAGE: 17, _S.ROBUST: 13},
        grind_size="Medium",
        brew_time="5-6 minutes (machine cycle)",
        temperatures={_R.LIGHT: "93-96°C", _R.MEDIUM: "90-93°C", _R.DARK: "87-90°C"},
        description="Automatic brewing method for consistent, convenient coffee with minimal hands-on time.",
        flavor_profile="Balanced, familiar, consistent",
        recommended_roast=(_R.MEDIUM, _R.DARK),
        tips=(
            "Use SCA certified machines for proper temperature and timing",
            "Clean machine regularly to prevent mineral buildup",
            "Use filtered water for best taste and machine longevity",
            "Replace heating element if brew temperature drops below 90°C",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.MOKAPOT,
        name="Moka Pot",
        ratios={_S.MILD: 9, _S.AVERAGE: 8, _S.ROBUST: 6},
        grind_size="Fine (but not powder)",
        brew_time="5-8 minutes (heating time)",
        temperatures={_R.LIGHT: "Medium heat", _R.MEDIUM: "Medium-low heat", _R.DARK: "Low heat"},
        description="Stovetop brewing creating strong, espresso-like coffee with distinctive bold character.",
        flavor_profile="Strong, bold, slightly bitter",
        recommended_roast=(_R.MEDIUM, _R.DARK),
        tips=(
            "Use medium heat to avoid burning and over-extraction",
            "Fill water chamber to safety valve level only",
            "Pack coffee grounds lightly, level but not compressed",
            "Remove from heat when gurgling starts, let sit 30 seconds before serving",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.SIPHON,
        name="Siphon",
        ratios={_S.MILD: 16, _S.AVERAGE: 14, _S.ROBUST: 12},
        grind_size="Medium-fine",
        brew_time="3-5 minutes (brewing cycle)",
        temperatures=_HOT_FILTER,
        description="Vacuum brewing method producing exceptionally clean, complex flavors with theatrical presentation.",
        flavor_profile="Clean, complex, wine-like clarity",
        recommended_roast=(_R.LIGHT, _R.MEDIUM),
        tips=(
            "Maintain consistent heat throughout brewing cycle",
            "Stir once gently after adding coffee to ensure saturation",
            "Time the brewing carefully, 1-2 minutes is optimal",
            "Let vacuum draw coffee down naturally for clean finish",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.COLDBREW,
        name="Cold Brew",
        ratios={_S.MILD: 8, _S.AVERAGE: 6, _S.ROBUST: 4},
        grind_size="Extra coarse",
        brew_time="12-24 hours (steep time)",
        temperatures={r: "Room temperature" for r in _R},
        description="Long extraction in cold water for smooth, low-acid coffee with natural sweetness.",
        flavor_profile="Smooth, sweet, low-acid, chocolaty",
        recommended_roast=(_R.MEDIUM, _R.DARK),
        tips=(
            "Steep for 12-24 hours depending on desired strength",
            "Use extra coarse grind to avoid over-extraction and cloudiness",
            "Filter through fine mesh or paper filter before serving",
            "Dilute concentrate 1:1 with water, ice, or milk to taste",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.ESPRESSO,
        name="Espresso",
        ratios={_S.MILD: 3, _S.AVERAGE: 2, _S.ROBUST: 1.5},
        grind_size="Extra fine",
        brew_time="25-30 seconds (extraction time)",
        temperatures={_R.LIGHT: "93-96°C", _R.MEDIUM: "90-93°C", _R.DARK: "87-90°C"},
        description="High-pressure extraction creating concentrated, rich coffee with distinctive crema layer.",
        flavor_profile="Intense, rich, complex with crema",
        recommended_roast=(_R.MEDIUM, _R.DARK),
        tips=(
            "Use machines with 15-20 bars pressure; 9 bars is optimal for extraction",
            "Tamp evenly with 30lbs pressure for consistent extraction",
            "Aim for 25-30 second extraction time for balanced flavor",
            "Fresh grind is crucial for proper crema formation",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.TURKISH,
        name="Turkish Coffee",
        ratios={_S.MILD: 12, _S.AVERAGE: 10, _S.ROBUST: 8},
        grind_size="Powder fine (finest possible)",
        brew_time="3-4 minutes (simmering time)",
        temperatures={r: "Slow simmer (~90°C)" for r in _R},
        description="Traditional method brewing ultra-fine grounds in a cezve for an authentic, cultural experience.",
        flavor_profile="Rich, thick, intense with grounds",
        recommended_roast=(_R.MEDIUM, _R.DARK),
        tips=(
            "Grind to flour-like powder consistency for proper texture",
            "Add sugar before brewing if desired, it cannot be added after",
            "Watch for foam formation carefully and remove just as it rises",
            "Serve immediately with grounds settled at bottom, do not stir",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.SOUTHINDIANFILTER,
        name="South Indian Filter",
        ratios={_S.MILD: 4, _S.AVERAGE: 3, _S.ROBUST: 2.5},
        grind_size="Fine to medium-fine",
        brew_time="15-20 minutes (drip time)",
        temperatures={r: "100°C (boiling)" for r in _R},
        description="Slow-drip method producing strong, chicory-blended decoction, best enjoyed with milk.",
        flavor_profile="Strong, aromatic, chicory-enhanced",
        recommended_roast=(_R.MEDIUM, _R.DARK),
        tips=(
            "Use freshly ground coffee with 10-20% chicory blend for authenticity",
            "Pack grounds firmly but not too tight in upper chamber",
            "Let decoction drip slowly, patience creates better extraction",
            "Mix decoction with hot milk in 1:3 or 1:4 ratio, add sugar to taste",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.V60,
        name="Hario V60",
        ratios={_S.MILD: 18, _S.AVERAGE: 16, _S.ROBUST: 14},
        grind_size="Medium-fine",
        brew_time="2:30-3:30 minutes (total)",
        temperatures={_R.LIGHT: "95-100°C", _R.MEDIUM: "92-95°C", _R.DARK: "88-92°C"},
        description="Iconic cone-shaped dripper with spiral ridges for maximum control and clarity.",
        flavor_profile="Clean, bright, nuanced",
        recommended_roast=(_R.LIGHT, _R.MEDIUM),
        tips=(
            "Requires precise pouring technique for best results",
            "Large single hole allows for flow rate control",
            "Spiral ridges promote even extraction",
            "Excellent for highlighting origin characteristics",
        ),
    ),
    BrewingMethod(
        id=BrewingMethodKey.KALITAWAVE,
        name="Kalita Wave",
        ratios={_S.MILD: 17, _S.AVERAGE: 15, _S.ROBUST: 13},
        grind_size="Medium",
        brew_time="3-4 minutes (total)",
        temperatures=_HOT_FILTER,
        description="Flat-bottom dripper with wave filters for even extraction and forgiving, balanced cups.",
        flavor_profile="Balanced, even, consistent",
        recommended_roast=(_R.LIGHT, _R.MEDIUM, _R.DARK),
        tips=(
            "Flat bottom provides even water contact with coffee bed",
            "Three small holes control flow rate for consistent extraction",
            "Less technique-sensitive than V60, great for beginners",
            "Wave filters prevent clogging and over-extraction",
        ),
    ),
]

BREWING_METHODS: Mapping[str, BrewingMethod] = MappingProxyType({m.id.value: m for m in _METHODS})


def _norm_key(method_id) -> str:
    if isinstance(method_id, BrewingMethodKey):
        return method_id.value
    return str(method_id or "").strip().lower()


def get_brewing_method(method_id: Union[str, BrewingMethodKey, None]) -> Optional[BrewingMethod]:
    return BREWING_METHODS.get(_norm_key(method_id))


def list_brewing_methods() -> List[BrewingMethod]:
    return list(BREWING_METHODS.values())


# --------- Rounding / formatting ----------
# Half-up rounding so 0.05 -> 0.1 the way the site's display does it
# (builtin round() is banker's rounding).
def round_half_up(x: float, digits: int = 0) -> float:
    f = 10 ** digits
    return math.floor(float(x) * f + 0.5) / f


def format_ratio(denominator: float) -> str:
    d = float(denominator)
    return f"1:{int(d)}" if d.is_integer() else f"1:{d:g}"


# --------- Calculator ----------
def calculate_brew_ratio(inputs: Union[CalculatorInput, Dict]) -> Optional[CalculatorResult]:
    """
    Turn a drink size plus taste preferences into a recipe for one method.

    coffee_amount = volume / N, where N is the method's ratio preset for the
    requested strength. Returns None when the method id is unknown or the
    volume is not a positive finite number; callers show a generic
    "check your inputs" message for that. The 50-2000 ml range is the
    caller's concern (see validate_drink_size in the router helpers).
    """
    if not isinstance(inputs, CalculatorInput):
        inputs = CalculatorInput(**inputs)

    method = get_brewing_method(inputs.method)
    if method is None:
        log.debug(f"calculate_brew_ratio: unknown method {inputs.method!r}")
        return None

    volume = float(inputs.volume)
    if not math.isfinite(volume) or volume <= 0:
        log.debug(f"calculate_brew_ratio: rejected volume {inputs.volume!r} for {method.id.value}")
        return None

    ratio = method.ratios[inputs.strength]
    result = CalculatorResult(
        method=method,
        coffee_amount=volume / ratio,
        water_amount=volume,
        ratio=format_ratio(ratio),
        temperature=method.temperatures[inputs.roast_level],
        grind_size=method.grind_size,
        brew_time=method.brew_time,
    )
    log.debug(
        f"calculate_brew_ratio: {method.id.value} {volume}ml "
        f"{inputs.strength.value}/{inputs.roast_level.value} -> {result.coffee_amount:.2f}g"
    )
    return result


# --------- Units ----------
VOLUME_UNITS: Mapping[str, VolumeUnit] = MappingProxyType({
    "ml": VolumeUnit(name="Milliliters", abbreviation="ml", ml_multiplier=1),
    "cups": VolumeUnit(name="Cups", abbreviation="cups", ml_multiplier=236.588),
    "oz": VolumeUnit(name="Fluid Ounces", abbreviation="fl oz", ml_multiplier=29.5735),
})


def _multiplier(unit: str) -> float:
    u = VOLUME_UNITS.get((unit or "").strip().lower())
    if u is None:
        # unknown units are treated as ml
        log.debug(f"convert_volume: unknown unit {unit!r}, using ml")
        return 1.0
    return u.ml_multiplier


def convert_volume(amount: float, from_unit: str, to_unit: str, precision: Optional[int] = None) -> float:
    """
    Convert between ml, US cups and fluid ounces.
    precision=None keeps full float precision; pass 2 for the display value.
    """
    value = float(amount) * _multiplier(from_unit) / _multiplier(to_unit)
    if precision is None:
        return value
    return round_half_up(value, precision)


def unit_abbreviation(unit: str) -> str:
    u = VOLUME_UNITS.get((unit or "").strip().lower())
    return u.abbreviation if u else "ml"


# 1 tbsp of ground coffee is roughly 6 g
def format_coffee_amount(grams: float) -> str:
    tablespoons = round_half_up(grams / 6, 1)
    return f"{grams:g}g ({tablespoons:g} tbsp)"


STRENGTH_LABELS: Mapping[StrengthLevel, str] = MappingProxyType({
    StrengthLevel.MILD: "Mild",
    StrengthLevel.AVERAGE: "Medium",
    StrengthLevel.ROBUST: "Robust",
})


def get_strength_label(strength: Union[StrengthLevel, str]) -> str:
    return STRENGTH_LABELS[StrengthLevel(strength)]


COMMON_VOLUMES: tuple = (
    VolumePreset(label="1 Cup", ml=237, cups=1, oz=8),
    VolumePreset(label="2 Cups", ml=474, cups=2, oz=16),
    VolumePreset(label="3 Cups", ml=711, cups=3, oz=24),
    VolumePreset(label="4 Cups", ml=948, cups=4, oz=32),
    VolumePreset(label="6 Cups", ml=1422, cups=6, oz=48),
    VolumePreset(label="8 Cups", ml=1896, cups=8, oz=64),
    VolumePreset(label="Single Serve (250ml)", ml=250, cups=1.05, oz=8.5),
    VolumePreset(label="Large Mug (350ml)", ml=350, cups=1.5, oz=12),
    VolumePreset(label="Thermos (500ml)", ml=500, cups=2.1, oz=17),
)
