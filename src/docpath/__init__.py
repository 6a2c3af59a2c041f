"""
docpath: find the documentation of a Rust item from a symbolic path.

    >>> roots = PackageRoots.build(["tests/fixtures/test-crate"])
    >>> resolve("test_crate::crustaceans::Crab", roots)
    'A crab.'
"""

from .analysis import DocResolver, resolve, attrs_to_string, PackageRoots
from .shared import SymbolPath, DocpathError
from .templating import DirectiveExpander

__version__ = "0.1.0"

__all__ = [
    'DocResolver',
    'resolve',
    'attrs_to_string',
    'PackageRoots',
    'SymbolPath',
    'DocpathError',
    'DirectiveExpander',
]
