# schemas.py  (brewing tools: methods, calculator, timer, expert recipes)

from __future__ import annotations
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Literal
from pydantic import BaseModel, Field, ConfigDict, field_serializer, field_validator


# ===================== Enums =====================

class StrengthLevel(str, Enum):
    MILD = "mild"
    AVERAGE = "average"
    ROBUST = "robust"

class RoastLevel(str, Enum):
    LIGHT = "light"
    MEDIUM = "medium"
    DARK = "dark"

class BrewingMethodKey(str, Enum):
    POUROVER = "pourover"
    FRENCHPRESS = "frenchpress"
    CHEMEX = "chemex"
    AEROPRESS = "aeropress"
    AUTODRIP = "autodrip"
    MOKAPOT = "mokapot"
    SIPHON = "siphon"
    COLDBREW = "coldbrew"
    ESPRESSO = "espresso"
    TURKISH = "turkish"
    SOUTHINDIANFILTER = "southindianfilter"
    V60 = "v60"
    KALITAWAVE = "kalitawave"

class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


# ===================== Method table =====================

class BrewingMethod(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: BrewingMethodKey
    name: str
    ratios: Dict[StrengthLevel, float]          # 1:X water per gram of coffee
    grind_size: str
    brew_time: str
    temperatures: Dict[RoastLevel, str]
    description: str
    flavor_profile: str
    recommended_roast: Tuple[RoastLevel, ...] = ()
    tips: Tuple[str, ...] = ()

    # the method table is shared; lookups must not be able to edit it
    @field_validator("ratios", "temperatures")
    @classmethod
    def _read_only(cls, v: Dict) -> Mapping:
        return MappingProxyType(dict(v))

    @field_serializer("ratios", "temperatures")
    def _as_dict(self, v: Mapping) -> Dict:
        return dict(v)

class VolumeUnit(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    abbreviation: str
    ml_multiplier: float

class VolumePreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    ml: int
    cups: float
    oz: float


# ===================== Calculator =====================

class CalculatorInput(BaseModel):
    # unknown method ids must reach the calculator (it answers "no result")
    method: str
    volume: float                                # ml of finished drink
    strength: StrengthLevel = StrengthLevel.AVERAGE
    roast_level: RoastLevel = RoastLevel.MEDIUM

class CalculatorResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: BrewingMethod
    coffee_amount: float                         # grams, unrounded
    water_amount: float                          # ml, echo of input volume
    ratio: str                                   # "1:N"
    temperature: str
    grind_size: str
    brew_time: str


# ===================== Timer =====================

class TimerStep(BaseModel):
    time: int                                    # seconds from start
    instruction: str
    is_completed: bool = False

class TimerState(BaseModel):
    elapsed: int
    elapsed_display: str
    current_step: Optional[TimerStep] = None
    completed_steps: int = 0
    total_steps: int = 0
    progress_percentage: float = 0.0
    steps: List[TimerStep] = Field(default_factory=list)


# ===================== Expert recipes =====================

class RecipeStep(BaseModel):
    time: str                                    # "0:00", "Before", "4:00+"
    time_seconds: int = 0
    instruction: str
    water_amount: Optional[float] = None
    pour_number: Optional[int] = None

class ExpertInfo(BaseModel):
    name: str
    title: str
    achievement: str
    year: Optional[int] = None

class ExpertRecipe(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    slug: str
    title: str
    expert: ExpertInfo
    method: BrewingMethodKey
    difficulty: Difficulty
    difficulty_index: int = 1

    coffee: float
    water: float
    bypass_water: Optional[float] = None
    ratio: str
    grind: str
    temperature: str
    total_time: str

    roast_recommendation: List[RoastLevel] = Field(default_factory=list)
    strength_level: StrengthLevel = StrengthLevel.AVERAGE
    flavor_profile: str = ""
    flavor_notes: List[str] = Field(default_factory=list)
    recommended_use: Literal["everyday", "competition", "experiment"] = "everyday"

    story: str = ""
    key_technique: str = ""
    tips: List[str] = Field(default_factory=list)
    steps: List[RecipeStep] = Field(default_factory=list)

    youtube_url: Optional[str] = None
    source_url_type: Optional[Literal["blog", "video", "championship", "brand"]] = None
    equipment_recommendations: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

class ExpertProfile(BaseModel):
    name: str
    bio: str = ""
    recipes: List[str] = Field(default_factory=list)   # slugs


# ===================== Share link =====================

class CalculatorSettings(BaseModel):
    method: Optional[BrewingMethodKey] = None
    drink: float = 300                           # ml
    strength: StrengthLevel = StrengthLevel.AVERAGE
    roast_level: RoastLevel = RoastLevel.MEDIUM
