# app/routers/tools.py
from __future__ import annotations
from typing import List, Optional
from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse

from icb_backend.app.schemas import CalculatorInput
from icb_backend.app.services.router_helpers import tools_helpers as H

router = APIRouter(prefix="/tools", tags=["tools"])

# ---- methods ----
@router.get("/methods")
def list_methods():
    return {"data": H.methods()}

@router.get("/methods/{method_id}")
def read_method(method_id: str):
    return {"data": H.method_or_404(method_id)}

# ---- calculator ----
@router.post("/calculate")
def calculate(inp: CalculatorInput, unit: str = "ml"):
    """
    Coffee recipe for a drink size. `volume` is in ml; `unit` is the unit
    the caller displays, used for the min/max drink-size message.
    Unknown method or unusable volume -> 422 "Unable to calculate recipe...".
    """
    return H.calculate(inp, unit=unit)

@router.get("/calculate")
def calculate_from_link(request: Request):
    """
    Share-link form: /tools/calculate?method=v60&drink=300&strength=average&roast=medium
    """
    return H.calculate_from_query(dict(request.query_params))

# ---- units ----
@router.get("/convert")
def convert(amount: float, from_unit: str = "ml", to_unit: str = "cups"):
    return H.convert(amount, from_unit, to_unit)

@router.get("/volumes")
def volumes():
    return H.volumes()

# ---- timer ----
@router.get("/timer")
def timer(request: Request, elapsed: int = Query(0)):
    return H.timer(dict(request.query_params), elapsed=elapsed)

# ---- expert recipes ----
@router.get("/recipes")
def list_recipes(
    method: Optional[str] = None,
    difficulty: Optional[str] = None,
    use: Optional[str] = None,
    tag: Optional[List[str]] = Query(None),
    expert: Optional[str] = None,
    flavor_note: Optional[List[str]] = Query(None),
):
    """
    Filters combine with AND. `tag` and `flavor_note` repeat (?tag=a&tag=b)
    and match any of the given values; `expert` matches part of the name.
    """
    return {"data": H.recipes(
        method=method, difficulty=difficulty, use=use, tag=tag, expert=expert, flavor_note=flavor_note,
    )}

# fixed paths before /recipes/{slug}
@router.get("/recipes/flavor-notes")
def list_flavor_notes():
    return {"data": H.flavor_notes()}

@router.get("/recipes/experts")
def list_experts():
    return {"data": H.experts()}

@router.get("/recipes/{slug}")
def read_recipe(slug: str):
    return H.recipe_detail(slug)

@router.get("/recipes/{slug}/text", response_class=PlainTextResponse)
def read_recipe_text(slug: str):
    return H.recipe_text(slug)

# ---- share link ----
@router.get("/share-link")
def share_link(request: Request):
    return H.share(dict(request.query_params))
