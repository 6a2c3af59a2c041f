"""
Shared components: declaration tree, symbolic paths, errors.
"""

from .source_location import SourceLocation
from .errors import (
    DocpathError, PathSyntaxError, PackageNotFoundError,
    ManifestReadError, ManifestParseError, ConfigError,
    SourceReadError, SourceParseError, UnsupportedConstructError,
    InvalidPathShapeError, MalformedDocAttributeError, ItemNotFoundError,
    format_error,
)
from .symbol_path import SymbolPath
from .nodes import (
    ItemKind, FieldStyle, AttrToken, TokenTree, Attribute,
    Field, Fields, Variant, Item, Module, Record, TaggedUnion,
    ImplBlock, OtherItem, SourceFile,
)
