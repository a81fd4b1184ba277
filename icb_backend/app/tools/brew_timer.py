# icb_backend/app/tools/brew_timer.py
from __future__ import annotations
from typing import List, Optional, Sequence, Tuple

from icb_backend.app.schemas import BrewingMethodKey, CalculatorResult, TimerState, TimerStep
from icb_backend.app.tools.brewing_guide import round_half_up

# Purpose:
# Timed step list for a calculator result, plus progress for an elapsed time.
# Water targets are fractions of the total water, rounded to whole ml.

# (seconds, instruction template, fraction of total water or None)
_Plan = Sequence[Tuple[int, str, Optional[float]]]

_PLANS = {
    BrewingMethodKey.POUROVER: (
        (0, "Bloom with {}ml water, wait 30 seconds", 0.2),
        (30, "Pour slowly to {}ml total", 0.5),
        (90, "Continue pouring to {}ml", 0.8),
        (150, "Final pour to {}ml", 1.0),
        (240, "Brewing complete - enjoy!", None),
    ),
    BrewingMethodKey.FRENCHPRESS: (
        (0, "Add all water and stir gently", None),
        (30, "Place lid, do not press yet", None),
        (240, "Press plunger slowly and serve", None),
    ),
    BrewingMethodKey.AEROPRESS: (
        (0, "Add water and stir for 10 seconds", None),
        (10, "Attach cap and flip (if inverted)", None),
        (60, "Press slowly for 30 seconds", None),
        (90, "Brewing complete!", None),
    ),
    BrewingMethodKey.CHEMEX: (
        (0, "Bloom with {}ml, wait 45 seconds", 0.15),
        (45, "Pour to {}ml total", 0.6),
        (120, "Final pour to {}ml", 1.0),
        (300, "Brewing complete - enjoy!", None),
    ),
}

_GENERIC: _Plan = (
    (0, "Start brewing process", None),
    (60, "Check extraction progress", None),
    (180, "Almost done", None),
    (240, "Brewing complete!", None),
)


def _instruction(template: str, fraction: Optional[float], total_water: float) -> str:
    if fraction is None:
        return template
    return template.format(int(round_half_up(total_water * fraction)))


def get_timer_steps(result: Optional[CalculatorResult]) -> List[TimerStep]:
    if result is None:
        return []
    plan = _PLANS.get(result.method.id, _GENERIC)
    return [
        TimerStep(time=t, instruction=_instruction(tpl, frac, result.water_amount))
        for t, tpl, frac in plan
    ]


def format_time(seconds: int) -> str:
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def timer_state(steps: Sequence[TimerStep], elapsed: int) -> TimerState:
    """
    Progress snapshot `elapsed` seconds after start.
    A step counts as done once the clock has ticked past start and reached
    its time; the current step is the first one still ahead (else the last).
    """
    if elapsed < 0:
        raise ValueError("elapsed must be >= 0")

    marked = [
        s.model_copy(update={"is_completed": 0 < s.time <= elapsed}) for s in steps
    ]
    completed = sum(1 for s in marked if s.is_completed)
    current = next((s for s in marked if s.time > elapsed), marked[-1] if marked else None)
    total = len(marked)
    return TimerState(
        elapsed=elapsed,
        elapsed_display=format_time(elapsed),
        current_step=current,
        completed_steps=completed,
        total_steps=total,
        progress_percentage=(completed / total * 100) if total else 0.0,
        steps=marked,
    )
