"""
Module Analyzer

Turns the parsed items of one recipe file into the inputs of the recipe
resolver: the worklist of unresolved recipes, the assignment table, the
module settings and the child-module declarations.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from ..shared.errors import CompileError, CompileErrorKind
from ..shared.nodes import Assignment, ModDeclaration, ModuleSyntax, UnresolvedRecipe
from ..utils.config import Settings

logger = logging.getLogger(__name__)

_TYPE_NAMES = {bool: "boolean", str: "string"}


@dataclass
class ModuleInputs:
    """Everything the resolver needs for one module."""
    name: Optional[str]
    file: str
    recipes: Dict[str, UnresolvedRecipe] = field(default_factory=dict)
    assignments: Dict[str, Assignment] = field(default_factory=dict)
    settings: Settings = field(default_factory=Settings)
    modules: List[ModDeclaration] = field(default_factory=list)


class ModuleAnalyzer:
    """
    Stateless: `analyze()` can be called for any number of modules.

    Detects:
        * a recipe name defined twice in the same module
        * a variable assigned twice in the same module
        * a child module declared twice
        * unknown settings
        * a setting given a value of the wrong type
    """

    def analyze(self, syntax: ModuleSyntax, name: Optional[str] = None) -> ModuleInputs:
        inputs = ModuleInputs(name=name, file=syntax.file)

        for recipe in syntax.recipes():
            first = inputs.recipes.get(recipe.key)
            if first is not None:
                raise recipe.name.error(
                    CompileErrorKind.DUPLICATE_RECIPE,
                    recipe=recipe.key,
                    first=first.name.location.line,
                    line=recipe.name.location.line,
                )
            inputs.recipes[recipe.key] = recipe

        for assignment in syntax.assignments():
            if assignment.key in inputs.assignments:
                raise assignment.name.error(
                    CompileErrorKind.DUPLICATE_VARIABLE,
                    variable=assignment.key,
                )
            inputs.assignments[assignment.key] = assignment

        seen: Dict[str, ModDeclaration] = {}
        for module in syntax.modules():
            first_module = seen.get(module.key)
            if first_module is not None:
                raise module.name.error(
                    CompileErrorKind.DUPLICATE_MODULE,
                    module=module.key,
                    first=first_module.name.location.line,
                    line=module.name.location.line,
                )
            seen[module.key] = module
            inputs.modules.append(module)

        settings = Settings()
        for setting in syntax.settings():
            if setting.name.lexeme not in Settings.known():
                raise setting.name.error(
                    CompileErrorKind.UNKNOWN_SETTING,
                    setting=setting.name.lexeme,
                )
            expected = Settings.value_type(setting.name.lexeme)
            if not isinstance(setting.value, expected):
                location = setting.value_location or setting.name.location
                raise CompileError(
                    CompileErrorKind.INVALID_SETTING_VALUE,
                    location,
                    setting=setting.name.lexeme,
                    expected=_TYPE_NAMES[expected],
                )
            settings = replace(
                settings, **{Settings.attribute_for(setting.name.lexeme): setting.value}
            )
        inputs.settings = settings

        logger.debug(
            f"analyzed {syntax.file}: {len(inputs.recipes)} recipe(s), "
            f"{len(inputs.assignments)} assignment(s), {len(inputs.modules)} module(s)"
        )
        return inputs
