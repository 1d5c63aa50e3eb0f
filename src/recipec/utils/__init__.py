"""
recipec utilities package
"""

from .config import Settings
from .io_utils import read_source_file

__all__ = ["Settings", "read_source_file"]
