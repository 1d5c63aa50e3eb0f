"""
Recipe Namespace

Hierarchical store of resolved recipes: one node per module, holding the
module's own recipes and its already-resolved child modules.
"""

import logging
from typing import Dict, Iterator, Optional, Sequence, Tuple, Union

from ..shared.errors import RecipecImplementationError
from ..shared.nodes import Name, Namepath, Recipe
from ..utils.config import MODULE_SEPARATOR

logger = logging.getLogger(__name__)

PathLike = Union[Namepath, Sequence[Union[Name, str]]]


def _segments(path: PathLike) -> Tuple[str, ...]:
    if isinstance(path, Namepath):
        return path.lexemes()
    return tuple(s.lexeme if isinstance(s, Name) else s for s in path)


class Namespace:
    """
    Resolved recipes of one module plus its child modules.

    Children must be fully resolved before they are added; a parent's
    resolver queries them through `lookup_path` while building its own
    table.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._recipes: Dict[str, Recipe] = {}
        self.modules: Dict[str, "Namespace"] = {}

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup_local(self, name: str) -> Optional[Recipe]:
        """This module's own recipe called `name`, if any."""
        return self._recipes.get(name)

    def lookup_path(self, path: PathLike) -> Optional[Recipe]:
        """
        Resolve a `::` path: leading segments select child modules, the last
        one names the recipe. Returns None on any miss.
        """
        segments = _segments(path)
        if not segments:
            raise RecipecImplementationError("lookup_path called with an empty path")
        return self._lookup_segments(segments)

    def _lookup_segments(self, segments: Tuple[str, ...]) -> Optional[Recipe]:
        first, rest = segments[0], segments[1:]
        if not rest:
            return self.lookup_local(first)
        module = self.modules.get(first)
        if module is None:
            return None
        return module._lookup_segments(rest)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def insert(self, recipe: Recipe) -> None:
        """Add a freshly resolved recipe under its own name."""
        if recipe.key in self._recipes:
            raise RecipecImplementationError(
                f"recipe `{recipe.key}` inserted twice into namespace `{self.name}`"
            )
        self._recipes[recipe.key] = recipe

    def add_module(self, module: "Namespace") -> None:
        """Attach a fully resolved child module under its name."""
        if module.name is None:
            raise RecipecImplementationError("child namespace must be named")
        if module.name in self.modules:
            raise RecipecImplementationError(
                f"module `{module.name}` added twice to namespace `{self.name}`"
            )
        logger.debug(f"namespace {self.name!r}: attached module {module.name!r}")
        self.modules[module.name] = module

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def iterate_local(self) -> Iterator[Recipe]:
        """This module's own recipes in insertion order (fresh iterator per call)."""
        return iter(self._recipes.values())

    def walk(self, prefix: Tuple[str, ...] = ()) -> Iterator[Tuple[str, Recipe]]:
        """
        Depth-first (qualified name, recipe) pairs: own recipes first, then
        each child module's.
        """
        for recipe in self._recipes.values():
            yield MODULE_SEPARATOR.join(prefix + (recipe.key,)), recipe
        for name, module in self.modules.items():
            yield from module.walk(prefix + (name,))

    def __contains__(self, name: str) -> bool:
        return name in self._recipes

    def __len__(self) -> int:
        return len(self._recipes)

    def __repr__(self) -> str:
        return (f"Namespace(name={self.name!r}, recipes={list(self._recipes)}, "
                f"modules={list(self.modules)})")
