"""Registry of the available effect recipes."""

from __future__ import annotations

from .base import Recipe, RecipeContext, RecipeParams
from .bilinearwarp import RECIPE as BILINEARWARP
from .corners import RECIPE as CORNERS
from .histmatch import RECIPE as HISTMATCH
from .kaleidoscope import RECIPE as KALEIDOSCOPE
from .lenswarp import RECIPE as LENSWARP
from .sphere import RECIPE as SPHERE
from .tonemap import RECIPE as TONEMAP

RECIPES: dict[str, Recipe] = {
    recipe.name: recipe
    for recipe in (
        BILINEARWARP,
        CORNERS,
        HISTMATCH,
        KALEIDOSCOPE,
        LENSWARP,
        SPHERE,
        TONEMAP,
    )
}


def get_recipe(name: str) -> Recipe:
    """Return the registered recipe called ``name``."""
    try:
        return RECIPES[name]
    except KeyError:
        msg = f"Unknown recipe: {name}"
        raise KeyError(msg) from None


__all__ = [
    "RECIPES",
    "Recipe",
    "RecipeContext",
    "RecipeParams",
    "get_recipe",
]
