"""Compiler driver: parse, load modules, resolve bottom-up."""

from .driver import CompilationResult, CompilerDriver

__all__ = ["CompilationResult", "CompilerDriver"]
