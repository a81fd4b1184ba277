# tests/test_api_contracts.py
# Purpose:
# HTTP shapes the calculator page relies on.
import pytest

from icb_backend.app.services.router_helpers.tools_helpers import CALCULATION_FAILED


def _calc(client, **body):
    payload = {"method": "pourover", "volume": 300, "strength": "average", "roast_level": "medium"}
    payload.update(body)
    return client.post("/api/tools/calculate", json=payload)

def test_calculate_happy_path(client):
    r = _calc(client)
    assert r.status_code == 200, r.text
    j = r.json()
    assert j["coffee_amount"] == pytest.approx(20.0)
    assert j["water_amount"] == 300
    assert j["ratio"] == "1:15"
    assert j["temperature"] == "90-93°C"
    assert j["grind_size"] == "Medium-fine"
    assert j["method"]["id"] == "pourover"
    assert j["method"]["ratios"]["average"] == 15
    assert j["coffee_amount_display"] == 20.0
    assert j["coffee_amount_label"] == "20g (3.3 tbsp)"
    assert j["strength_label"] == "Medium"

def test_calculate_rounds_for_display_only(client):
    j = _calc(client, method="frenchpress", volume=500, strength="robust").json()
    assert j["coffee_amount"] == pytest.approx(41.6667, abs=1e-3)
    assert j["coffee_amount_display"] == 41.7

def test_unknown_method_is_a_generic_422(client):
    r = _calc(client, method="percolator")
    assert r.status_code == 422
    assert r.json()["detail"] == CALCULATION_FAILED

@pytest.mark.parametrize("volume", [0, -100, 10])
def test_too_small_drink_is_rejected(client, volume):
    r = _calc(client, volume=volume)
    assert r.status_code == 422
    assert r.json()["detail"] == "Minimum drink size is 50 ml"

def test_too_large_drink_message_uses_callers_unit(client):
    r = client.post("/api/tools/calculate?unit=cups",
                    json={"method": "coldbrew", "volume": 2500})
    assert r.status_code == 422
    assert r.json()["detail"] == "Maximum drink size is 8.45 cups"

def test_oversized_share_link_drink_is_a_422(client):
    r = client.get("/api/tools/calculate", params={"method": "v60", "drink": "9" * 400})
    assert r.status_code == 422
    assert r.json()["detail"] == "Maximum drink size is 2000 ml"

    r = client.get("/api/tools/share-link", params={"method": "v60", "drink": "9" * 5000})
    assert r.status_code == 200
    assert r.json()["settings"]["drink"] == 999_999_999

    r = client.get("/api/tools/timer", params={"method": "v60", "water": "9" * 5000})
    assert r.status_code == 200

def test_bad_enum_is_a_validation_error(client):
    assert _calc(client, strength="bold").status_code == 422
    assert _calc(client, roast_level="burnt").status_code == 422

def test_calculate_from_share_link(client):
    r = client.get("/api/tools/calculate", params={"method": "frenchpress", "drink": "500", "strength": "robust"})
    assert r.status_code == 200, r.text
    j = r.json()
    assert j["coffee_amount_display"] == 41.7
    assert j["share_query"] == "method=frenchpress&strength=robust&roast=medium&drink=500"

def test_calculate_from_link_without_method(client):
    r = client.get("/api/tools/calculate", params={"drink": "300"})
    assert r.status_code == 422

def test_methods(client):
    data = client.get("/api/tools/methods").json()["data"]
    assert len(data) == 13
    assert {"pourover", "southindianfilter", "kalitawave"} <= {m["id"] for m in data}

    m = client.get("/api/tools/methods/southindianfilter").json()["data"]
    assert m["name"] == "South Indian Filter"
    assert m["ratios"] == {"mild": 4, "average": 3, "robust": 2.5}
    assert client.get("/api/tools/methods/percolator").status_code == 404

def test_convert(client):
    j = client.get("/api/tools/convert", params={"amount": 1, "from_unit": "cups", "to_unit": "ml"}).json()
    assert j["value"] == pytest.approx(236.588)
    assert j["display"] == 236.59
    assert client.get("/api/tools/convert", params={"amount": 1, "from_unit": "liters"}).status_code == 400

def test_volumes(client):
    j = client.get("/api/tools/volumes").json()
    assert set(j["units"]) == {"ml", "cups", "oz"}
    assert len(j["presets"]) == 9
    assert (j["min_ml"], j["max_ml"]) == (50, 2000)

def test_timer(client):
    r = client.get("/api/tools/timer", params={"method": "pourover", "drink": 300, "elapsed": 30})
    assert r.status_code == 200, r.text
    j = r.json()
    assert j["method"] == "pourover"
    assert j["timer"]["completed_steps"] == 1
    assert j["timer"]["current_step"]["instruction"] == "Continue pouring to 240ml"
    assert client.get("/api/tools/timer", params={"method": "pourover", "elapsed": -5}).status_code == 400
    assert client.get("/api/tools/timer", params={"method": "percolator"}).status_code == 422

def test_recipes(client):
    data = client.get("/api/tools/recipes").json()["data"]
    assert data[0]["slug"] == "hoffman-french-press"
    v60 = client.get("/api/tools/recipes", params={"method": "v60"}).json()["data"]
    assert len(v60) == 3
    assert len(data) == 8

def test_recipe_filters_over_http(client):
    r = client.get("/api/tools/recipes", params=[("tag", "inverted"), ("tag", "third-wave")])
    assert [d["slug"] for d in r.json()["data"]] == [
        "carolina-aeropress", "intelligentsia-pourover", "george-aeropress-2024",
    ]
    r = client.get("/api/tools/recipes", params={"expert": "hoffmann", "flavor_note": "tea-like"})
    assert [d["slug"] for d in r.json()["data"]] == ["hoffman-chemex"]

def test_flavor_notes_and_experts_routes(client):
    notes = client.get("/api/tools/recipes/flavor-notes").json()["data"]
    assert notes == sorted(set(notes)) and "syrupy" in notes
    experts = client.get("/api/tools/recipes/experts").json()["data"]
    assert experts[0]["name"] == "James Hoffmann"
    assert "hoffman-chemex" in experts[0]["recipes"]

def test_recipe_detail_and_text(client):
    j = client.get("/api/tools/recipes/hoffman-french-press").json()
    assert j["recipe"]["expert"]["name"] == "James Hoffmann"
    assert [s["time"] for s in j["timer_steps"]] == [0, 30, 240]

    r = client.get("/api/tools/recipes/hoffman-french-press/text")
    assert r.status_code == 200
    assert r.text.startswith("Ultimate French Press by James Hoffmann")
    assert client.get("/api/tools/recipes/nope").status_code == 404

def test_share_link_normalizes(client):
    j = client.get("/api/tools/share-link", params={"method": "V60", "water": "450", "roast": "burnt"}).json()
    assert j["query"] == "method=v60&strength=average&roast=medium&drink=450"
    assert j["settings"]["method"] == "v60"
