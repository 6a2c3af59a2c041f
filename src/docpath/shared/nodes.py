"""
Declaration Tree

Item-level view of a Rust source file: just enough structure to walk a
symbolic path and read the attributes of the node it lands on. Function
bodies, expressions and types are not modelled; where they appear they are
kept as rendered text or dropped.

Rust Pattern: rustc_ast::ast::Item
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from .source_location import SourceLocation


class ItemKind(Enum):
    """Item kinds recognised by the parser"""
    MODULE = "mod"
    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"
    IMPL = "impl"
    TRAIT = "trait"
    FN = "fn"
    CONST = "const"
    STATIC = "static"
    TYPE_ALIAS = "type"
    USE = "use"
    EXTERN_CRATE = "extern crate"
    FOREIGN_MOD = "extern block"
    MACRO_RULES = "macro_rules"
    MACRO_CALL = "macro call"


class FieldStyle(Enum):
    """Shape of a struct or variant body"""
    NAMED = "named"            # { a: T, b: U }
    POSITIONAL = "positional"  # (T, U)
    UNIT = "unit"              # nothing


@dataclass(frozen=True)
class AttrToken:
    """A single lexical token inside an attribute (kind is the grammar terminal name)"""
    kind: str
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class TokenTree:
    """A delimited group of tokens: ( ... ), [ ... ], { ... } or < ... >"""
    delimiter: str
    tokens: Tuple[Union[AttrToken, "TokenTree"], ...] = ()

    def __str__(self) -> str:
        closing = {"(": ")", "[": "]", "{": "}", "<": ">"}[self.delimiter]
        return self.delimiter + " ".join(str(t) for t in self.tokens) + closing


@dataclass
class Attribute:
    """
    Attribute attached to an item, field or variant.

    ``#[doc = "x"]`` has path ``doc`` and tokens ``[=, "x"]``. Doc comments are
    desugared to the same shape by the parser.
    """
    path: str
    tokens: Tuple[Union[AttrToken, TokenTree], ...] = ()
    is_inner: bool = False
    location: Optional[SourceLocation] = None


@dataclass
class Field:
    """Struct or variant field; positional fields have name None"""
    name: Optional[str]
    ty: str
    attrs: List[Attribute] = field(default_factory=list)
    location: Optional[SourceLocation] = None


@dataclass
class Fields:
    style: FieldStyle
    fields: List[Field] = field(default_factory=list)

    @classmethod
    def unit(cls) -> "Fields":
        return cls(FieldStyle.UNIT, [])

    def lookup(self, segment: str) -> Optional[Field]:
        """Named lookup by identifier. Positional lookup is handled by the resolver."""
        for f in self.fields:
            if f.name == segment:
                return f
        return None


@dataclass
class Variant:
    name: str
    fields: Fields
    attrs: List[Attribute] = field(default_factory=list)
    location: Optional[SourceLocation] = None


@dataclass
class Item:
    """Base class for all declaration tree nodes"""
    name: Optional[str] = None
    attrs: List[Attribute] = field(default_factory=list)
    location: Optional[SourceLocation] = None

    @property
    def kind(self) -> ItemKind:
        raise NotImplementedError


@dataclass
class Module(Item):
    """
    ``mod name { ... }`` (items is a list) or ``mod name;`` (items is None).

    The body of an external module lives in another file and is parsed on
    demand by the resolver.
    """
    items: Optional[List[Item]] = None
    inner_attrs: List[Attribute] = field(default_factory=list)

    @property
    def kind(self) -> ItemKind:
        return ItemKind.MODULE

    @property
    def is_external(self) -> bool:
        return self.items is None


@dataclass
class Record(Item):
    """struct"""
    fields: Fields = field(default_factory=Fields.unit)

    @property
    def kind(self) -> ItemKind:
        return ItemKind.STRUCT


@dataclass
class TaggedUnion(Item):
    """enum"""
    variants: List[Variant] = field(default_factory=list)

    @property
    def kind(self) -> ItemKind:
        return ItemKind.ENUM

    def variant(self, name: str) -> Optional[Variant]:
        for v in self.variants:
            if v.name == name:
                return v
        return None


@dataclass
class ImplBlock(Item):
    """
    ``impl<..> [Trait for] Type { ... }``

    self_type holds the innermost name of the implementing type (``Foo`` for
    ``&'a mut crate::x::Foo<T>``); None when the type has no name (tuples,
    slices, ``dyn Trait`` ...). Trait impls and inherent impls are treated alike.
    """
    self_type: Optional[str] = None
    members: List[Item] = field(default_factory=list)
    inner_attrs: List[Attribute] = field(default_factory=list)

    @property
    def kind(self) -> ItemKind:
        return ItemKind.IMPL


@dataclass
class OtherItem(Item):
    """
    Any item the resolver does not descend into.

    macro_path is the invoked macro (``bitflags::bitflags``) for macro calls.
    """
    item_kind: ItemKind = ItemKind.USE
    macro_path: Optional[str] = None

    @property
    def kind(self) -> ItemKind:
        return self.item_kind


@dataclass
class SourceFile:
    """Parsed file: inner (file-level) attributes and top-level items"""
    path: str
    attrs: List[Attribute] = field(default_factory=list)
    items: List[Item] = field(default_factory=list)
