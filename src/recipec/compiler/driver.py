"""
Compiler Driver

Parses a recipe file, loads its `mod` submodules and resolves every module
bottom-up: each child namespace is complete before its parent's resolver
runs.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..analysis.module_analyzer import ModuleAnalyzer
from ..analysis.namespace import Namespace
from ..frontend.parser import Parser
from ..passes.recipe_resolution import RecipeResolver
from ..shared.errors import CompileErrorKind, ErrorReporter, RecipecError
from ..shared.nodes import ModDeclaration
from ..utils.config import (
    DEFAULT_SOURCE_FILE, MODULE_DIRECTORY_FILE, MODULE_FILE_EXTENSION, MODULE_SEPARATOR,
)
from ..utils.io_utils import read_source_file

logger = logging.getLogger(__name__)

ModulePath = Tuple[str, ...]


class CompilationResult:
    """Compilation result"""
    def __init__(
        self,
        namespace: Optional[Namespace] = None,
        reporter: Optional[ErrorReporter] = None,
        success: bool = False,
    ):
        self.namespace = namespace
        self.reporter = reporter
        self.success = success

    @property
    def error(self) -> Optional[RecipecError]:
        """The error that aborted compilation, if any."""
        return getattr(self.reporter, "exception", None)

    def has_errors(self) -> bool:
        """True if compilation reported errors."""
        if self.reporter:
            return self.reporter.has_errors()
        return not self.success

    def get_errors(self, color: bool = False) -> List[str]:
        if self.reporter and self.reporter.has_errors():
            return [self.reporter.format_error(e, color=color) for e in self.reporter.errors]
        return []


class _ModuleReporter(ErrorReporter):
    """ErrorReporter that also keeps the raised exception for callers."""

    def __init__(self, source_files: Dict[str, str]):
        super().__init__(source_files)
        self.exception: Optional[RecipecError] = None

    def report_exception(self, exc: RecipecError) -> None:
        self.exception = exc
        super().report_exception(exc)


class CompilerDriver:
    """
    Orchestrates parsing, module loading and recipe resolution.

    Stateless between compilations; safe to share.
    """

    def __init__(self) -> None:
        self.parser = Parser()
        self.analyzer = ModuleAnalyzer()

    def compile(
        self,
        source: str,
        source_file: str = DEFAULT_SOURCE_FILE,
        root_path: Optional[Path] = None,
        source_overlay: Optional[Dict[ModulePath, str]] = None,
    ) -> CompilationResult:
        """
        Compile a root recipe file.

        Args:
            root_path: directory `mod` files are looked up in (default: cwd)
            source_overlay: in-memory module sources keyed by module path,
                e.g. ``{("foo",): "...", ("foo", "bar"): "..."}``; checked
                before the filesystem
        """
        reporter = _ModuleReporter({source_file: source})
        if root_path is None:
            root_path = Path.cwd()

        try:
            namespace = self._compile_module(
                source,
                source_file,
                module_path=(),
                directory=root_path,
                overlay=source_overlay or {},
                reporter=reporter,
                active=[source_file],
            )
        except RecipecError as e:
            logger.debug(f"compilation of {source_file} failed: {e.message}")
            reporter.report_exception(e)
            return CompilationResult(reporter=reporter, success=False)

        return CompilationResult(namespace=namespace, reporter=reporter, success=True)

    def compile_file(self, path: Path, source_overlay: Optional[Dict[ModulePath, str]] = None) -> CompilationResult:
        path = Path(path).resolve()
        return self.compile(read_source_file(path), str(path), path.parent, source_overlay)

    def _compile_module(
        self,
        source: str,
        source_file: str,
        module_path: ModulePath,
        directory: Path,
        overlay: Dict[ModulePath, str],
        reporter: ErrorReporter,
        active: List[str],
    ) -> Namespace:
        syntax = self.parser.parse(source, source_file)
        inputs = self.analyzer.analyze(syntax, name=module_path[-1] if module_path else None)

        namespace = Namespace(inputs.name)
        for declaration in inputs.modules:
            child_path = module_path + (declaration.key,)
            child_source, child_file, child_directory = self._load_module(
                declaration, child_path, directory, overlay
            )
            if child_file in active:
                raise declaration.name.error(
                    CompileErrorKind.CIRCULAR_MODULE,
                    module=MODULE_SEPARATOR.join(child_path),
                    path=child_file,
                )
            reporter.source_files[child_file] = child_source
            logger.info(f"Loading module '{MODULE_SEPARATOR.join(child_path)}' from {child_file}")
            child = self._compile_module(
                child_source,
                child_file,
                child_path,
                child_directory,
                overlay,
                reporter,
                active + [child_file],
            )
            namespace.add_module(child)

        return RecipeResolver.resolve_recipes(
            inputs.assignments,
            inputs.settings,
            inputs.recipes,
            namespace,
        )

    def _load_module(
        self,
        declaration: ModDeclaration,
        module_path: ModulePath,
        directory: Path,
        overlay: Dict[ModulePath, str],
    ) -> Tuple[str, str, Path]:
        """
        Return (source, file name, directory of its own submodules).

        An overlay source stands in for `name.just` beside the declaring file,
        so its own `mod` children not in the overlay are looked up in the
        declaring file's directory.
        """
        if module_path in overlay:
            file_name = "/".join(module_path) + MODULE_FILE_EXTENSION
            return overlay[module_path], file_name, directory

        candidates = [
            directory / f"{declaration.key}{MODULE_FILE_EXTENSION}",
            directory / declaration.key / MODULE_DIRECTORY_FILE,
        ]
        for candidate in candidates:
            if candidate.is_file():
                resolved = candidate.resolve()
                return read_source_file(resolved), str(resolved), resolved.parent

        raise declaration.name.error(
            CompileErrorKind.MODULE_NOT_FOUND,
            module=MODULE_SEPARATOR.join(module_path),
        )
