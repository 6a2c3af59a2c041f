"""
Pytest configuration and shared fixtures for the docpath test suite.

The parser is built once per session (Lark grammar load is the expensive
part) and shared; it keeps no state between parses.
"""

import sys
import pytest
from typing import Callable, Dict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from docpath.frontend.parser import Parser
from docpath.analysis.doc_resolver import DocResolver
from docpath.analysis.module_system.module_loader import ModuleLoader
from docpath.analysis.module_system.package_roots import PackageRoots

FIXTURES_DIR = Path(__file__).parent / "fixtures"
TEST_CRATE_DIR = FIXTURES_DIR / "test-crate"
TEST_CRATE_NAME = "test_crate"


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_parser():
    """Session-scoped parser shared across ALL tests."""
    return Parser()


@pytest.fixture(scope="session")
def test_crate_roots():
    """Registry holding the bundled fixture crate, discovered from its Cargo.toml."""
    return PackageRoots.build([str(TEST_CRATE_DIR)])


@pytest.fixture(scope="session")
def resolver(session_parser, test_crate_roots):
    """Resolver over the fixture crate."""
    return DocResolver(test_crate_roots, loader=ModuleLoader(session_parser))


# =============================================================================
# Function-scoped fixtures (default - one per test)
# =============================================================================

@pytest.fixture
def parse(session_parser) -> Callable:
    """Parse Rust source text into a SourceFile."""
    def _parse(source: str, source_file: str = "lib.rs"):
        return session_parser.parse(source, source_file)
    return _parse


@pytest.fixture
def make_crate(tmp_path, session_parser) -> Callable:
    """
    Write a crate under tmp_path and return a resolver for it.

    ``files`` maps paths relative to the crate root to their contents;
    ``src/lib.rs`` is required for resolution to succeed.
    """
    def _make(files: Dict[str, str], name: str = "pkg") -> DocResolver:
        root = tmp_path / name
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        roots = PackageRoots.build([f"{name}={root}"])
        return DocResolver(roots, loader=ModuleLoader(session_parser))
    return _make
