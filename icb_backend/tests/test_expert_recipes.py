# tests/test_expert_recipes.py
# Purpose:
# Bundled rulebook loads, filters, bridges into the calculator; bad files fail loudly.
import pytest

from icb_backend.app.schemas import BrewingMethodKey
from icb_backend.app.tools import expert_recipes as er


def test_bundled_recipes_load():
    recipes = er.load_expert_recipes()
    assert "hoffman-v60" in recipes
    assert len(recipes) == 8
    assert {"intelligentsia-pourover", "hoffman-chemex", "george-aeropress-2024"} <= set(recipes)

def test_listing_is_sorted_by_difficulty_then_title():
    slugs = [r.slug for r in er.list_expert_recipes()]
    assert slugs == [
        "hoffman-french-press",
        "carolina-aeropress",
        "hoffman-chemex",
        "hoffman-v60",
        "intelligentsia-pourover",
        "scott-rao-v60",
        "george-aeropress-2024",
        "tetsu-kasuya-46",
    ]

def test_filters():
    assert {r.slug for r in er.list_expert_recipes(method="v60")} == {"hoffman-v60", "scott-rao-v60", "tetsu-kasuya-46"}
    assert [r.slug for r in er.list_expert_recipes(difficulty="advanced")] == ["george-aeropress-2024", "tetsu-kasuya-46"]
    assert {r.slug for r in er.list_expert_recipes(use="competition")} == {
        "carolina-aeropress", "george-aeropress-2024", "tetsu-kasuya-46",
    }
    assert [r.slug for r in er.list_expert_recipes(tag="Inverted")] == ["carolina-aeropress", "george-aeropress-2024"]
    assert er.list_expert_recipes(method="siphon") == []

def test_expert_filter_is_a_name_substring():
    assert [r.slug for r in er.list_expert_recipes(expert="HOFFMANN")] == [
        "hoffman-french-press", "hoffman-chemex", "hoffman-v60",
    ]
    assert [r.slug for r in er.list_expert_recipes(expert="stanica")] == ["george-aeropress-2024"]
    assert er.list_expert_recipes(expert="nobody") == []

def test_several_tags_match_any():
    slugs = [r.slug for r in er.list_expert_recipes(tag=["inverted", "third-wave"])]
    assert slugs == ["carolina-aeropress", "intelligentsia-pourover", "george-aeropress-2024"]
    # blanks are ignored rather than filtering everything out
    assert len(er.list_expert_recipes(tag=["", "  "])) == 8

def test_flavor_note_filter():
    assert [r.slug for r in er.list_expert_recipes(flavor_note="tea-like")] == ["hoffman-chemex"]
    assert [r.slug for r in er.list_expert_recipes(flavor_note=["syrupy", "modern"])] == [
        "carolina-aeropress", "george-aeropress-2024",
    ]
    # filters still combine with AND; "ultra-clean" is not "clean"
    both = er.list_expert_recipes(expert="hoffmann", flavor_note="clean")
    assert [r.slug for r in both] == ["hoffman-french-press", "hoffman-v60"]

def test_flavor_notes_are_sorted_and_unique():
    notes = er.list_flavor_notes()
    assert notes == sorted(set(notes))
    assert notes[0] == "acidic"
    assert {"tea-like", "syrupy", "origin-forward"} <= set(notes)
    assert notes.count("clean") == 1

def test_experts_listing():
    experts = er.list_experts()
    assert [e.name for e in experts] == [
        "James Hoffmann",
        "Tetsu Kasuya",
        "Scott Rao",
        "Carolina Ibarra Garay",
        "Intelligentsia Coffee",
        "George Stanica",
    ]
    hoffmann = experts[0]
    assert hoffmann.recipes == ["hoffman-v60", "hoffman-french-press", "hoffman-chemex"]
    assert hoffmann.bio.startswith("World Barista Champion 2007")

def test_new_recipes_carry_their_data():
    george = er.get_expert_recipe("george-aeropress-2024")
    assert george.expert.year == 2024
    assert george.bypass_water == 80
    assert "2024" in george.tags
    chemex = er.get_expert_recipe("hoffman-chemex")
    assert chemex.method is BrewingMethodKey.CHEMEX
    assert chemex.steps[-1].time_seconds == 270
    intelli = er.get_expert_recipe("intelligentsia-pourover")
    assert intelli.method is BrewingMethodKey.POUROVER
    assert intelli.youtube_url is None and intelli.source_url_type == "brand"

def test_lookup_by_slug():
    rec = er.get_expert_recipe("Tetsu-Kasuya-46")
    assert rec.method is BrewingMethodKey.V60
    assert rec.expert.year == 2016
    assert er.get_expert_recipe("nope") is None

def test_recipe_drives_calculator():
    res = er.recipe_calculator_result(er.get_expert_recipe("carolina-aeropress"))
    # aeropress robust is 1:12, first recommended roast is light
    assert res.coffee_amount == pytest.approx(25.0)
    assert res.temperature == "85-90°C"

def test_recipe_as_text():
    txt = er.recipe_as_text(er.get_expert_recipe("hoffman-v60"))
    lines = txt.splitlines()
    assert lines[0] == "Hoffman V60 Technique by James Hoffmann"
    assert "Method: Hario V60" in lines
    assert "Coffee: 30g" in lines
    assert "1. Before: Rinse paper filter with hot water" in lines
    assert lines[-1].startswith("Key Technique: ")

def test_missing_rulebook(rules_dir):
    with pytest.raises(FileNotFoundError):
        er.load_expert_recipes()

def test_invalid_yaml(rules_dir):
    (rules_dir / "expert_recipes.yaml").write_text("recipes: [ {", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid YAML"):
        er.load_expert_recipes()

def test_wrong_shape(rules_dir):
    (rules_dir / "expert_recipes.yaml").write_text("- just a list\n", encoding="utf-8")
    with pytest.raises(ValueError, match="'recipes' list"):
        er.load_expert_recipes()

def test_duplicate_slug(rules_dir):
    row = """
  - id: a
    slug: dup
    title: A
    expert: {name: X, title: Y, achievement: Z}
    method: v60
    difficulty: Beginner
    coffee: 15
    water: 250
    ratio: "1:16.7"
    grind: Medium
    temperature: "93°C"
    total_time: "3:00"
"""
    (rules_dir / "expert_recipes.yaml").write_text("recipes:" + row + row, encoding="utf-8")
    with pytest.raises(ValueError, match="Duplicate recipe slug"):
        er.load_expert_recipes()

def test_bad_recipe_row(rules_dir):
    (rules_dir / "expert_recipes.yaml").write_text("recipes:\n  - {slug: x, method: percolator}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid recipe #0"):
        er.load_expert_recipes()

def test_rulebook_without_bios(rules_dir):
    (rules_dir / "expert_recipes.yaml").write_text(
        "recipes:\n"
        "  - {id: a, slug: a, title: A, expert: {name: X, title: Y, achievement: Z}, method: v60,\n"
        "     difficulty: Beginner, coffee: 15, water: 250, ratio: '1:16.7', grind: Medium,\n"
        "     temperature: '93°C', total_time: '3:00'}\n",
        encoding="utf-8",
    )
    experts = er.list_experts()
    assert [(e.name, e.bio, e.recipes) for e in experts] == [("X", "", ["a"])]

def test_bad_experts_block(rules_dir):
    (rules_dir / "expert_recipes.yaml").write_text("recipes: []\nexperts:\n  - {bio: no name}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid expert #0"):
        er.load_expert_bios()
