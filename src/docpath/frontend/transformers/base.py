"""
Declaration Transformer

Converts the Lark parse tree of a Rust file into the declaration tree in
``docpath.shared.nodes``. Only item-level structure survives; bodies are
dropped once parsed.

Rust Pattern: rustc_ast lowering of parsed items
"""

from lark import Transformer, v_args
from lark.lexer import Token
from typing import List, Optional, Tuple
from typing_extensions import TypeAlias
import logging

from ...shared.nodes import (
    Attribute, AttrToken, TokenTree, Field, Fields, FieldStyle, Variant,
    Item, ItemKind, Module, Record, TaggedUnion, ImplBlock, OtherItem, SourceFile,
)
from ...shared.source_location import SourceLocation
from .attributes import desugar_doc_comment, split_attribute_path, strip_raw, to_attr_tokens
from .impl_header import parse_impl_header, render

# Lark Meta object carries position information
LarkMeta: TypeAlias = object

logger: logging.Logger = logging.getLogger(__name__)


def _split_members(children) -> Tuple[List[Attribute], List[Item]]:
    """Separate inner attributes (lists) from items in a body."""
    inner: List[Attribute] = []
    items: List[Item] = []
    for child in children:
        if isinstance(child, list):
            inner.extend(child)
        elif isinstance(child, Item):
            items.append(child)
    return inner, items


@v_args(inline=True, meta=True)
class DeclarationTransformer(Transformer):
    """
    Rust item transformer.

    One instance per parse: ``current_file`` is stamped into every
    SourceLocation it produces.
    """

    def __init__(self, current_file: str = "lib.rs"):
        super().__init__()
        self.current_file = current_file

    def __default__(self, data, children, meta):
        raise NotImplementedError(
            f"{self.__class__.__name__} has no handler for grammar rule '{data}'"
        )

    def _location(self, meta: LarkMeta) -> Optional[SourceLocation]:
        if getattr(meta, "empty", True):
            return None
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )

    # ------------------------------------------------------------------
    # File
    # ------------------------------------------------------------------

    def file(self, meta, *children) -> SourceFile:
        attrs, items = _split_members(children)
        logger.debug(f"{self.current_file}: {len(items)} top-level items, {len(attrs)} inner attributes")
        return SourceFile(path=self.current_file, attrs=attrs, items=items)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def inner_meta(self, meta, child) -> List[Attribute]:
        if isinstance(child, Attribute):
            return [child]
        return desugar_doc_comment(child, self._location(meta))

    outer_meta = inner_meta

    def inner_attr(self, meta, *children) -> Attribute:
        path, tokens = split_attribute_path(to_attr_tokens(children))
        return Attribute(path, tokens, is_inner=True, location=self._location(meta))

    def outer_attr(self, meta, *children) -> Attribute:
        path, tokens = split_attribute_path(to_attr_tokens(children))
        return Attribute(path, tokens, is_inner=False, location=self._location(meta))

    def attrs(self, meta, *metas) -> List[Attribute]:
        return [attr for group in metas for attr in group]

    def visibility(self, meta, *_) -> None:
        return None

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def item(self, meta, attrs, *rest) -> Item:
        node = rest[-1]
        node.attrs = attrs
        node.location = self._location(meta)
        return node

    impl_member = item

    def external_module(self, meta, name) -> Module:
        return Module(name=strip_raw(name), items=None)

    def inline_module(self, meta, name, *children) -> Module:
        inner, items = _split_members(children)
        return Module(name=strip_raw(name), items=items, inner_attrs=inner)

    def named_struct(self, meta, name, *rest) -> Record:
        fields = next(c for c in rest if isinstance(c, Fields))
        return Record(name=strip_raw(name), fields=fields)

    tuple_struct = named_struct

    def unit_struct(self, meta, name, *_) -> Record:
        return Record(name=strip_raw(name), fields=Fields.unit())

    def named_fields(self, meta, *fields) -> Fields:
        return Fields(FieldStyle.NAMED, list(fields))

    def tuple_fields(self, meta, *fields) -> Fields:
        return Fields(FieldStyle.POSITIONAL, list(fields))

    def named_field(self, meta, attrs, *rest) -> Field:
        name, ty = rest[-2], rest[-1]
        return Field(name=strip_raw(name), ty=ty, attrs=attrs, location=self._location(meta))

    def tuple_field(self, meta, attrs, *rest) -> Field:
        return Field(name=None, ty=rest[-1], attrs=attrs, location=self._location(meta))

    def field_type(self, meta, *tokens) -> str:
        return render(to_attr_tokens(tokens))

    def enum_item(self, meta, name, *rest) -> TaggedUnion:
        variants = [c for c in rest if isinstance(c, Variant)]
        return TaggedUnion(name=strip_raw(name), variants=variants)

    def variant(self, meta, attrs, name, *rest) -> Variant:
        fields = next((c for c in rest if isinstance(c, Fields)), Fields.unit())
        return Variant(name=strip_raw(name), fields=fields, attrs=attrs, location=self._location(meta))

    def discriminant(self, meta, *_) -> None:
        return None

    def union_item(self, meta, name, *_) -> OtherItem:
        return OtherItem(name=strip_raw(name), item_kind=ItemKind.UNION)

    def impl_item(self, meta, *children) -> ImplBlock:
        header = [c for c in children if isinstance(c, (Token, TokenTree))]
        inner, members = _split_members(children)
        self_type = parse_impl_header(to_attr_tokens(header))
        if self_type is None:
            logger.debug(f"{self.current_file}: impl header `{render(to_attr_tokens(header))}` has no named self type")
        return ImplBlock(self_type=self_type, members=members, inner_attrs=inner)

    def fn_item(self, meta, *children) -> OtherItem:
        name = next(c for c in children if isinstance(c, Token) and c.type == "NAME")
        return OtherItem(name=strip_raw(name), item_kind=ItemKind.FN)

    def trait_item(self, meta, name, *_) -> OtherItem:
        return OtherItem(name=strip_raw(name), item_kind=ItemKind.TRAIT)

    def const_item(self, meta, name, *_) -> OtherItem:
        return OtherItem(name=strip_raw(name), item_kind=ItemKind.CONST)

    def static_item(self, meta, name, *_) -> OtherItem:
        return OtherItem(name=strip_raw(name), item_kind=ItemKind.STATIC)

    def type_item(self, meta, name, *_) -> OtherItem:
        return OtherItem(name=strip_raw(name), item_kind=ItemKind.TYPE_ALIAS)

    def use_item(self, meta, *_) -> OtherItem:
        return OtherItem(item_kind=ItemKind.USE)

    def extern_crate_item(self, meta, *tokens) -> OtherItem:
        name = strip_raw(tokens[0]) if tokens else None
        return OtherItem(name=name, item_kind=ItemKind.EXTERN_CRATE)

    def foreign_mod_item(self, meta, *_) -> OtherItem:
        return OtherItem(item_kind=ItemKind.FOREIGN_MOD)

    def macro_rules_item(self, meta, name, *_) -> OtherItem:
        return OtherItem(name=strip_raw(name), item_kind=ItemKind.MACRO_RULES)

    def macro_call_item(self, meta, *children) -> OtherItem:
        bang = next(i for i, c in enumerate(children) if isinstance(c, Token) and c.type == "BANG")
        after = children[bang + 1] if bang + 1 < len(children) else None
        name = strip_raw(after) if isinstance(after, Token) and after.type == "NAME" else None
        path = "::".join(strip_raw(c) for c in children[:bang] if isinstance(c, Token) and c.type == "NAME")
        return OtherItem(name=name, item_kind=ItemKind.MACRO_CALL, macro_path=path)

    def generics(self, meta, *_) -> None:
        return None

    def where_clause(self, meta, *_) -> None:
        return None

    # ------------------------------------------------------------------
    # Token trees
    # ------------------------------------------------------------------

    def paren_group(self, meta, *tokens) -> TokenTree:
        return TokenTree("(", to_attr_tokens(tokens))

    def bracket_group(self, meta, *tokens) -> TokenTree:
        return TokenTree("[", to_attr_tokens(tokens))

    def brace_group(self, meta, *tokens) -> TokenTree:
        return TokenTree("{", to_attr_tokens(tokens))

    def angle_group(self, meta, *tokens) -> TokenTree:
        return TokenTree("<", to_attr_tokens(tokens))
