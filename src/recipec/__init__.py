"""
recipec: semantic resolution for recipe files.

Parses recipe modules, links recipe dependencies across nested modules and
checks variable scoping, producing a queryable `Namespace`.
"""

from .analysis.namespace import Namespace
from .compiler.driver import CompilationResult, CompilerDriver
from .passes.recipe_resolution import RecipeResolver
from .shared.errors import CompileError, CompileErrorKind, RecipecError
from .utils.config import Settings

__version__ = "0.1.0"

__all__ = [
    "Namespace",
    "CompilationResult",
    "CompilerDriver",
    "RecipeResolver",
    "CompileError",
    "CompileErrorKind",
    "RecipecError",
    "Settings",
]
