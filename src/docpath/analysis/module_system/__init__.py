"""Module system: package roots, module path resolution, file loading."""

from .package_roots import PackageRoots, parse_entry, read_manifest_name
from .path_resolver import ModulePathResolver
from .module_loader import ModuleLoader

__all__ = [
    'PackageRoots',
    'parse_entry',
    'read_manifest_name',
    'ModulePathResolver',
    'ModuleLoader',
]
