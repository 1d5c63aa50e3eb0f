"""Module analysis: recipe namespaces and per-module resolver inputs."""

from .namespace import Namespace
from .module_analyzer import ModuleAnalyzer, ModuleInputs

__all__ = [
    'Namespace',
    'ModuleAnalyzer',
    'ModuleInputs',
]
