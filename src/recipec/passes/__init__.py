"""Semantic passes over parsed recipe modules."""

from .recipe_resolution import RecipeResolver

__all__ = ["RecipeResolver"]
