"""
Analysis: symbolic path resolution and doc extraction.
"""

from .doc_resolver import DocResolver, resolve
from .doc_extractor import attrs_to_string
from .module_system import PackageRoots, ModuleLoader, ModulePathResolver

__all__ = [
    'DocResolver',
    'resolve',
    'attrs_to_string',
    'PackageRoots',
    'ModuleLoader',
    'ModulePathResolver',
]
