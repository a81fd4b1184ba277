from __future__ import annotations
import pytest
from fastapi.testclient import TestClient
from icb_backend.app.main import app
from icb_backend.app.tools import expert_recipes
from icb_backend.app.schemas import CalculatorInput

# --- Shared client ---
@pytest.fixture(scope="session")
def client():
    return TestClient(app)

# --- Recipe rulebook is lru_cached; tests that repoint ICB_RULES_DIR need a clean slate ---
@pytest.fixture(autouse=True)
def fresh_recipe_cache():
    expert_recipes.load_expert_recipes.cache_clear()
    expert_recipes.load_expert_bios.cache_clear()
    yield
    expert_recipes.load_expert_recipes.cache_clear()
    expert_recipes.load_expert_bios.cache_clear()

@pytest.fixture
def rules_dir(tmp_path, monkeypatch):
    """Empty rules dir wired in through ICB_RULES_DIR."""
    d = tmp_path / "rules"
    d.mkdir()
    monkeypatch.setenv("ICB_RULES_DIR", str(d))
    return d

@pytest.fixture
def make_input():
    def _make(method="pourover", volume=300, strength="average", roast_level="medium"):
        return CalculatorInput(method=method, volume=volume, strength=strength, roast_level=roast_level)
    return _make
