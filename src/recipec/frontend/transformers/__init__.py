"""
Recipe AST Transformers
=======================

Lark transformers for single top-level lines and body interpolations.
"""

from .base import RecipeHeader, RecipeTransformer
from .literals import unquote
from .body import BodyLineParser

__all__ = [
    'RecipeHeader',
    'RecipeTransformer',
    'BodyLineParser',
    'unquote',
]
