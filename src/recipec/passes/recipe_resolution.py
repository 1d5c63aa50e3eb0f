"""
Recipe Resolution Pass

Links one module's recipes into a dependency DAG and validates variable
scoping. Runs once per module, children before parents.

Phase 1 (linking) drains the worklist depth-first. A recipe is in exactly
one of three states while it runs:
  - finalized: present in the namespace table
  - in progress: its name is on the ancestry stack
  - pending: still in the worklist
Meeting an in-progress name again is a cycle.

Phase 2 (scoping) checks every variable reference in parameter defaults,
dependency arguments and body interpolations against the assignment table,
the parameters in scope at that site and the built-in constants.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from ..analysis.namespace import Namespace
from ..shared.constants import constants
from ..shared.errors import CompileErrorKind
from ..shared.nodes import Assignment, Name, Parameter, Recipe, UnresolvedRecipe
from ..utils.config import Settings

logger = logging.getLogger(__name__)


class RecipeResolver:
    """
    Resolver for a single module.

    Use `RecipeResolver.resolve_recipes(...)`; the first error aborts and
    propagates as a `CompileError`, and the in-progress namespace must then
    be discarded.
    """

    def __init__(
        self,
        assignments: Mapping[str, Assignment],
        unresolved_recipes: Dict[str, UnresolvedRecipe],
        namespace: Namespace,
        builtins: Optional[Mapping[str, str]] = None,
    ):
        self.assignments = assignments
        self.unresolved_recipes = unresolved_recipes
        self.namespace = namespace
        self.builtins = builtins if builtins is not None else constants()

    @classmethod
    def resolve_recipes(
        cls,
        assignments: Mapping[str, Assignment],
        settings: Settings,
        unresolved_recipes: Dict[str, UnresolvedRecipe],
        namespace: Namespace,
    ) -> Namespace:
        """
        Resolve every recipe in `unresolved_recipes` into `namespace`.

        `namespace` must already hold this module's fully resolved child
        modules. `unresolved_recipes` is consumed (emptied). Worklist entries
        are taken in insertion order, so with several independent errors the
        one reported is deterministic.
        """
        resolver = cls(assignments, unresolved_recipes, namespace)
        logger.debug(
            f"resolving {len(unresolved_recipes)} recipe(s) in module {namespace.name!r}"
        )

        while resolver.unresolved_recipes:
            name = next(iter(resolver.unresolved_recipes))
            unresolved = resolver.unresolved_recipes.pop(name)
            resolver.resolve_recipe([], unresolved)

        for recipe in resolver.namespace.iterate_local():
            resolver.validate_recipe(recipe, settings)

        return resolver.namespace

    # ------------------------------------------------------------------
    # Phase 1: dependency linking
    # ------------------------------------------------------------------

    def resolve_recipe(self, stack: List[str], recipe: UnresolvedRecipe) -> Recipe:
        resolved = self.namespace.lookup_local(recipe.key)
        if resolved is not None:
            logger.debug(f"recipe {recipe.key!r} already resolved")
            return resolved

        stack.append(recipe.key)

        dependencies: List[Recipe] = []
        for dependency in recipe.dependencies:
            path = dependency.recipe
            leaf = path.last

            found = self.namespace.lookup_path(path)
            if found is not None:
                dependencies.append(found)
                continue

            local = len(path) == 1
            if local and leaf.lexeme in stack:
                start = stack.index(leaf.lexeme)
                raise leaf.error(
                    CompileErrorKind.CIRCULAR_RECIPE_DEPENDENCY,
                    recipe=recipe.key,
                    circle=stack[start:] + [leaf.lexeme],
                )

            if local and leaf.lexeme in self.unresolved_recipes:
                pending = self.unresolved_recipes.pop(leaf.lexeme)
                dependencies.append(self.resolve_recipe(stack, pending))
                continue

            raise leaf.error(
                CompileErrorKind.UNKNOWN_DEPENDENCY,
                recipe=recipe.key,
                unknown=str(path),
            )

        stack.pop()

        resolved = recipe.resolve(dependencies)
        self.namespace.insert(resolved)
        logger.debug(
            f"resolved recipe {recipe.key!r} -> [{', '.join(d.key for d in dependencies)}]"
        )
        return resolved

    # ------------------------------------------------------------------
    # Phase 2: variable scoping
    # ------------------------------------------------------------------

    def validate_recipe(self, recipe: Recipe, settings: Settings) -> None:
        # Defaults see only the parameters declared before them.
        for i, parameter in enumerate(recipe.parameters):
            if parameter.default is not None:
                for variable in parameter.default.variables():
                    self.resolve_variable(variable, recipe.parameters[:i])

        for dependency in recipe.dependencies:
            for argument in dependency.arguments:
                for variable in argument.variables():
                    self.resolve_variable(variable, recipe.parameters)

        for line in recipe.body:
            if settings.ignore_comments and line.is_comment():
                continue
            for interpolation in line.interpolations():
                for variable in interpolation.expression.variables():
                    self.resolve_variable(variable, recipe.parameters)

    def resolve_variable(self, variable: Name, parameters: Sequence[Parameter]) -> None:
        name = variable.lexeme
        defined = (
            name in self.assignments
            or any(p.name.lexeme == name for p in parameters)
            or name in self.builtins
        )
        if not defined:
            raise variable.error(CompileErrorKind.UNDEFINED_VARIABLE, variable=name)
