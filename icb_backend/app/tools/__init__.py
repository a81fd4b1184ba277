# icb_backend/app/tools/__init__.py
from .brewing_guide import calculate_brew_ratio, convert_volume, get_brewing_method, list_brewing_methods

__all__ = ["calculate_brew_ratio", "convert_volume", "get_brewing_method", "list_brewing_methods"]
