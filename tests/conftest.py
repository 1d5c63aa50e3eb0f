"""
Pytest configuration and shared fixtures for all recipec tests.

The compiler driver is stateless between compilations, so a single
instance (and its cached Lark parser) is shared by the whole session.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from recipec.compiler.driver import CompilerDriver
from recipec.frontend.parser import Parser


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_compiler():
    """
    Session-scoped stateless compiler instance shared across ALL tests.

    - Parser grammar is loaded once per process
    - Safe to share: every compile() builds fresh namespaces
    """
    return CompilerDriver()


@pytest.fixture(scope="class")
def compiler(session_compiler):
    """Class-scoped compiler - returns session compiler (stateless, safe to share)."""
    return session_compiler


@pytest.fixture
def parser():
    """Fresh parser per test; the underlying Lark instance is cached."""
    return Parser()


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
