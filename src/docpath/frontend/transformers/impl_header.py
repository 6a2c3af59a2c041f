"""
Impl header analysis.

The grammar keeps everything between `impl` and the opening brace as a flat
token list. This module recovers the one piece the resolver needs: the name
of the implementing type.

Rust Pattern: rustc_ast::ast::Impl { self_ty, .. }
"""

from typing import List, Optional, Sequence, Tuple, Union

from ...shared.nodes import AttrToken, TokenTree
from .attributes import strip_raw

TreeToken = Union[AttrToken, TokenTree]

_NAMELESS_TYPE_HEADS = ("dyn", "impl", "fn", "unsafe", "extern", "_")


def _is(tok: TreeToken, kind: str, text: Optional[str] = None) -> bool:
    if not isinstance(tok, AttrToken) or tok.kind != kind:
        return False
    return text is None or tok.text == text


def _skip_angle(tokens: Sequence[TreeToken], start: int) -> int:
    """Index just past the `>` matching the `<` at ``start``."""
    depth = 0
    for idx in range(start, len(tokens)):
        if _is(tokens[idx], "LESSTHAN"):
            depth += 1
        elif _is(tokens[idx], "MORETHAN"):
            depth -= 1
            if depth == 0:
                return idx + 1
    return len(tokens)


def _top_level(tokens: Sequence[TreeToken]) -> List[Tuple[int, TreeToken]]:
    """Tokens outside any `<...>` nesting, with their indices."""
    out = []
    depth = 0
    for idx, tok in enumerate(tokens):
        if _is(tok, "LESSTHAN"):
            depth += 1
        elif _is(tok, "MORETHAN"):
            depth = max(depth - 1, 0)
        elif depth == 0:
            out.append((idx, tok))
    return out


def render(tokens: Sequence[TreeToken]) -> str:
    """Render tokens as compact source text"""
    text = ""
    for tok in tokens:
        piece = str(tok)
        if text and (text[-1].isalnum() or text[-1] == "_") and (piece[0].isalnum() or piece[0] in "_'\""):
            text += " "
        text += piece
    return text


def parse_impl_header(tokens: Sequence[TreeToken]) -> Optional[str]:
    """
    Self type name of an impl header.

    ``<T> fmt::Display for Wrapper<T> where T: Copy`` gives ``"Wrapper"``.
    """
    tokens = list(tokens)
    if tokens and _is(tokens[0], "LESSTHAN"):
        tokens = tokens[_skip_angle(tokens, 0):]

    for idx, tok in _top_level(tokens):
        if _is(tok, "WHERE"):
            tokens = tokens[:idx]
            break

    for idx, tok in reversed(_top_level(tokens)):
        if _is(tok, "NAME", "for"):
            tokens = tokens[idx + 1:]
            break
    return self_type_name(tokens)


def self_type_name(tokens: Sequence[TreeToken]) -> Optional[str]:
    """
    Innermost name of a type after stripping references and raw pointers.

    ``&'a mut crate::shapes::Crab<T>`` gives ``Crab``. Types without a name
    (tuples, slices, trait objects, function pointers) give None.
    """
    idx = 0
    while idx < len(tokens):
        tok = tokens[idx]
        if _is(tok, "PUNCT", "&") or _is(tok, "LIFETIME") or _is(tok, "MUT"):
            idx += 1
        elif _is(tok, "PUNCT", "*") and idx + 1 < len(tokens) and (
                _is(tokens[idx + 1], "CONST") or _is(tokens[idx + 1], "MUT")):
            idx += 2
        else:
            break
    rest = tokens[idx:]
    if not rest:
        return None

    head = rest[0]
    if isinstance(head, TokenTree) or not isinstance(head, AttrToken):
        return None
    if head.text in _NAMELESS_TYPE_HEADS or _is(head, "BANG"):
        return None

    start = 0
    if _is(head, "LESSTHAN"):
        # qualified self: <T as Trait>::Assoc
        start = _skip_angle(rest, 0)

    name = None
    for _, tok in _top_level(rest[start:]):
        if isinstance(tok, AttrToken) and tok.kind == "NAME":
            name = strip_raw(tok.text)
        elif isinstance(tok, TokenTree):
            break
    return name
