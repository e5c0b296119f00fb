"""Public package exports for magick-recipes."""

from __future__ import annotations

from .recipes import RECIPES, Recipe, RecipeContext, RecipeParams, get_recipe

__all__ = ["RECIPES", "Recipe", "RecipeContext", "RecipeParams", "get_recipe"]
