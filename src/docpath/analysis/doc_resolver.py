"""
Documentation Resolver

Walks a crate's declaration trees along a symbolic path and returns the doc
text of the declaration it lands on:

    pkg::Crab::num_legs          struct field
    pkg::LobsterColor::Red::0    positional field of an enum variant
    pkg::LobsterColor::halloween method in `impl LobsterColor`
    pkg::crustaceans             module (external body in src/crustaceans.rs)

Resolution is depth-first. At each level the first declaration that matches
the segment *and* produces a result wins; a declaration that matches by name
but finds nothing (an enum without the requested variant) lets the scan move
on, so an `impl` block after the type can still answer. A fatal error from any
declaration ends the walk at once.

Item-position macro invocations may expand to the item being looked for. When
a scan comes up empty next to one, the walk fails instead of reporting "not
found".

"Not found" is None. Everything else that stops the walk is a DocpathError
carrying the consumed path and the file being examined.

Rust Pattern: rustc_resolve path resolution over rustc_ast items
"""

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .doc_extractor import attrs_to_string
from .module_system.module_loader import ModuleLoader
from .module_system.package_roots import PackageRoots
from .module_system.path_resolver import ModulePathResolver
from ..shared.errors import (
    InvalidPathShapeError, PackageNotFoundError, UnsupportedConstructError,
)
from ..shared.nodes import (
    Attribute, FieldStyle, Fields, ImplBlock, Item, ItemKind, Module,
    OtherItem, Record, TaggedUnion,
)
from ..shared.symbol_path import SymbolPath

logger = logging.getLogger(__name__)

_INDEX_RE = re.compile(r"[0-9]+")

# Items that never take part in path resolution
SKIPPED_KINDS = frozenset({
    ItemKind.USE,
    ItemKind.EXTERN_CRATE,
    ItemKind.FOREIGN_MOD,
})

# Items that can be named but carry no member-addressable docs
UNSUPPORTED_KINDS = frozenset({
    ItemKind.FN,
    ItemKind.CONST,
    ItemKind.STATIC,
    ItemKind.TYPE_ALIAS,
    ItemKind.TRAIT,
    ItemKind.UNION,
    ItemKind.MACRO_RULES,
})

# Impl members addressable by name
IMPL_MEMBER_KINDS = frozenset({ItemKind.FN, ItemKind.CONST, ItemKind.TYPE_ALIAS})


@dataclass(frozen=True)
class _Scope:
    """Where the walk currently is"""
    entry_file: Path
    file: Path
    consumed: SymbolPath


class DocResolver:
    """
    Resolve symbolic paths against a package registry.

    Holds no per-call state: the registry is read-only and every call parses
    the files it needs afresh, so one resolver can serve many callers.
    """

    def __init__(self, roots: PackageRoots,
                 loader: Optional[ModuleLoader] = None,
                 module_paths: Optional[ModulePathResolver] = None):
        self.roots = roots
        self.loader = loader or ModuleLoader()
        self.module_paths = module_paths or ModulePathResolver()

    def resolve(self, path: Union[SymbolPath, str]) -> Optional[str]:
        """
        Doc text of the declaration at ``path``, or None if it does not exist.

        Raises PackageNotFoundError when the first segment is not registered.
        """
        if isinstance(path, str):
            path = SymbolPath.parse(path)
        package, rest = path.head_tail()
        root = self.roots.get(package)
        if root is None:
            raise PackageNotFoundError(f"package `{package}` is not registered", consumed=package)

        entry = self.module_paths.entry_file(root)
        scope = _Scope(entry_file=entry, file=entry, consumed=SymbolPath((package,)))
        logger.debug(f"Resolving {path} from {entry}")
        source = self.loader.load(entry, str(scope.consumed))
        if rest is None:
            return self._docs(source.attrs, scope)
        return self._scan(source.items, rest, scope)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _scan(self, items: Iterable[Item], path: SymbolPath, scope: _Scope) -> Optional[str]:
        segment, rest = path.head_tail()
        macro_call: Optional[OtherItem] = None
        for item in items:
            if isinstance(item, OtherItem) and item.kind is ItemKind.MACRO_CALL:
                macro_call = macro_call or item
            result = self._visit(item, segment, rest, scope)
            if result is not None:
                return result
        if macro_call is not None:
            raise _macro_error(macro_call, str(scope.consumed.child(segment)), scope.file)
        return None

    def _visit(self, item: Item, segment: str, rest: Optional[SymbolPath], scope: _Scope) -> Optional[str]:
        if isinstance(item, Module):
            if item.name != segment:
                return None
            return self._visit_module(item, rest, replace(scope, consumed=scope.consumed.child(segment)))
        if isinstance(item, Record):
            if item.name != segment:
                return None
            return self._visit_record(item, rest, replace(scope, consumed=scope.consumed.child(segment)))
        if isinstance(item, TaggedUnion):
            if item.name != segment:
                return None
            return self._visit_enum(item, rest, replace(scope, consumed=scope.consumed.child(segment)))
        if isinstance(item, ImplBlock):
            if item.self_type != segment:
                return None
            return self._visit_impl(item, rest, replace(scope, consumed=scope.consumed.child(segment)))
        if isinstance(item, OtherItem):
            return self._visit_other(item, segment, scope)
        raise UnsupportedConstructError(
            f"unexpected declaration {type(item).__name__}",
            consumed=str(scope.consumed), file=scope.file, location=item.location,
        )

    # ------------------------------------------------------------------
    # Per-kind handlers
    # ------------------------------------------------------------------

    def _visit_module(self, module: Module, rest: Optional[SymbolPath], scope: _Scope) -> Optional[str]:
        if not module.is_external:
            if rest is None:
                return self._docs(module.attrs + module.inner_attrs, scope)
            return self._scan(module.items, rest, scope)

        file = self.module_paths.module_file(scope.entry_file, scope.file, module.name, str(scope.consumed))
        source = self.loader.load(file, str(scope.consumed))
        scope = replace(scope, file=file)
        if rest is None:
            return self._docs(source.attrs, scope)
        return self._scan(source.items, rest, scope)

    def _visit_record(self, record: Record, rest: Optional[SymbolPath], scope: _Scope) -> Optional[str]:
        if rest is None:
            return self._docs(record.attrs, scope)
        return self._visit_field(record.fields, rest, scope)

    def _visit_enum(self, enum: TaggedUnion, rest: Optional[SymbolPath], scope: _Scope) -> Optional[str]:
        if rest is None:
            return self._docs(enum.attrs, scope)
        name, tail = rest.head_tail()
        variant = enum.variant(name)
        if variant is None:
            return None
        scope = replace(scope, consumed=scope.consumed.child(name))
        if tail is None:
            return self._docs(variant.attrs, scope)
        return self._visit_field(variant.fields, tail, scope)

    def _visit_field(self, fields: Fields, path: SymbolPath, scope: _Scope) -> Optional[str]:
        """Field of a struct or variant: exactly one segment, by name or index."""
        segment, tail = path.head_tail()
        if tail is not None:
            raise InvalidPathShapeError(
                f"`{segment}` is a field; nothing can be addressed inside it (found `{tail}`)",
                consumed=str(scope.consumed), file=scope.file,
            )
        scope = replace(scope, consumed=scope.consumed.child(segment))

        if fields.style is FieldStyle.NAMED:
            field = fields.lookup(segment)
            return self._docs(field.attrs, scope) if field is not None else None
        if fields.style is FieldStyle.POSITIONAL:
            if not _INDEX_RE.fullmatch(segment):
                raise InvalidPathShapeError(
                    f"positional field index `{segment}` is not a number",
                    consumed=str(scope.consumed), file=scope.file,
                )
            index = int(segment)
            if index >= len(fields.fields):
                return None
            return self._docs(fields.fields[index].attrs, scope)
        return None

    def _visit_impl(self, impl: ImplBlock, rest: Optional[SymbolPath], scope: _Scope) -> Optional[str]:
        if rest is None:
            return self._docs(impl.attrs + impl.inner_attrs, scope)
        name, tail = rest.head_tail()
        for member in impl.members:
            if member.kind in IMPL_MEMBER_KINDS and member.name == name:
                scope = replace(scope, consumed=scope.consumed.child(name))
                if tail is not None:
                    raise InvalidPathShapeError(
                        f"`{name}` is an impl member; nothing can be addressed inside it (found `{tail}`)",
                        consumed=str(scope.consumed), file=scope.file, location=member.location,
                    )
                return self._docs(member.attrs, scope)
        macro_call = next((m for m in impl.members if m.kind is ItemKind.MACRO_CALL), None)
        if macro_call is not None:
            raise _macro_error(macro_call, str(scope.consumed.child(name)), scope.file)
        return None

    def _visit_other(self, item: OtherItem, segment: str, scope: _Scope) -> Optional[str]:
        if item.kind in SKIPPED_KINDS:
            return None
        if item.kind is ItemKind.MACRO_CALL:
            if item.name != segment:
                return None
            raise _macro_error(item, str(scope.consumed.child(segment)), scope.file)
        if item.kind in UNSUPPORTED_KINDS:
            if item.name != segment:
                return None
            raise UnsupportedConstructError(
                f"{item.kind.value} `{segment}` has no member-addressable documentation",
                consumed=str(scope.consumed.child(segment)), file=scope.file, location=item.location,
            )
        raise UnsupportedConstructError(
            f"unexpected item kind `{item.kind.value}`",
            consumed=str(scope.consumed), file=scope.file, location=item.location,
        )

    def _docs(self, attrs: List[Attribute], scope: _Scope) -> str:
        logger.debug(f"Resolved {scope.consumed} in {scope.file}")
        return attrs_to_string(attrs, str(scope.consumed), scope.file)


def _macro_error(call: OtherItem, consumed: str, file: Path) -> UnsupportedConstructError:
    return UnsupportedConstructError(
        f"`{call.macro_path}!` invocation may define `{consumed}`; macro expansion is not supported",
        consumed=consumed, file=file, location=call.location,
    )


def resolve(path: Union[SymbolPath, str], roots: PackageRoots,
            loader: Optional[ModuleLoader] = None) -> Optional[str]:
    """Resolve one path; see DocResolver.resolve."""
    return DocResolver(roots, loader=loader).resolve(path)
