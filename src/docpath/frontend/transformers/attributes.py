"""
Attribute and doc comment handling.

Doc comments are sugar for ``#[doc = "..."]``. Both comment forms are
desugared here so that every later stage only sees attributes:

    /// A crab.             ->  #[doc = " A crab."]

    /**
     * A crab.              ->  #[doc = " A crab."]
     */

Block comments are split into one attribute per line after dropping blank
first/last lines and a common leading `*` decoration, so the two forms yield
the same text after extraction.
"""

import re
from typing import List, Optional, Sequence, Tuple, Union

from lark.lexer import Token

from ...shared.nodes import Attribute, AttrToken, TokenTree
from ...shared.source_location import SourceLocation
from ...utils.config import DOC_ATTRIBUTE

LINE_DOC_PREFIX_LEN = 3    # "///" or "//!"
BLOCK_DOC_PREFIX_LEN = 3   # "/**" or "/*!"
BLOCK_DOC_SUFFIX_LEN = 2   # "*/"

_RAW_PREFIX = "r#"

_ESCAPE_RE = re.compile(
    r"""\\(?:
        (?P<simple>[nrt\\0'"])
      | x(?P<hex>[0-9a-fA-F]{2})
      | u\{(?P<unicode>[0-9a-fA-F_]{1,6})\}
      | (?P<newline>\n[ \t\r\n]*)
    )""",
    re.VERBOSE,
)
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\", "0": "\0", "'": "'", '"': '"'}

_STRING_PREFIX_RE = re.compile(r'^(?P<prefix>[bc]?)(?P<raw>r?)(?P<hashes>#*)"')


def strip_raw(name: str) -> str:
    """`r#type` -> `type`"""
    return str(name[len(_RAW_PREFIX):] if name.startswith(_RAW_PREFIX) else name)


def to_attr_tokens(children: Sequence[Union[Token, TokenTree, AttrToken]]) -> Tuple[Union[AttrToken, TokenTree], ...]:
    """Convert raw Lark tokens to tree tokens; groups are already converted."""
    out: List[Union[AttrToken, TokenTree]] = []
    for child in children:
        if isinstance(child, Token):
            out.append(AttrToken(child.type, str(child)))
        else:
            out.append(child)
    return tuple(out)


def split_attribute_path(tokens: Sequence[Union[AttrToken, TokenTree]]) -> Tuple[str, Tuple[Union[AttrToken, TokenTree], ...]]:
    """
    Split ``doc = "x"`` into path ``doc`` and the remaining tokens.

    Paths may be qualified (``rustfmt::skip``); an `unsafe(...)` wrapper is
    not unwrapped.
    """
    parts: List[str] = []
    idx = 0
    expect_name = True
    while idx < len(tokens):
        tok = tokens[idx]
        if not isinstance(tok, AttrToken):
            break
        if expect_name and tok.text.isidentifier():
            parts.append(strip_raw(tok.text))
            expect_name = False
        elif not expect_name and tok.kind == "PATHSEP":
            expect_name = True
        else:
            break
        idx += 1
    return "::".join(parts), tuple(tokens[idx:])


def quote_str(text: str) -> str:
    """Render text as a Rust string literal"""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _unescape_match(m: "re.Match") -> str:
    if m.group("simple") is not None:
        return _SIMPLE_ESCAPES[m.group("simple")]
    if m.group("hex") is not None:
        return chr(int(m.group("hex"), 16))
    if m.group("unicode") is not None:
        return chr(int(m.group("unicode").replace("_", ""), 16))
    return ""


def unquote_str(literal: str) -> Optional[str]:
    """
    Remove exactly one layer of quoting from a Rust string literal.

    Handles byte/C-string prefixes, raw strings with any number of hashes and
    escape sequences in non-raw strings. Returns None when ``literal`` is not
    a string literal.
    """
    m = _STRING_PREFIX_RE.match(literal)
    if m is None:
        return None
    closing = '"' + m.group("hashes")
    if not literal.endswith(closing) or len(literal) < m.end() + len(closing):
        return None
    body = literal[m.end():len(literal) - len(closing)]
    if m.group("raw"):
        return body
    if m.group("hashes"):
        return None
    return _ESCAPE_RE.sub(_unescape_match, body)


def doc_attribute(text: str, is_inner: bool, location: Optional[SourceLocation]) -> Attribute:
    """Build the `#[doc = "text"]` attribute a doc comment stands for."""
    return Attribute(
        path=DOC_ATTRIBUTE,
        tokens=(AttrToken("EQUAL", "="), AttrToken("STRING", quote_str(text))),
        is_inner=is_inner,
        location=location,
    )


def block_doc_lines(body: str) -> List[str]:
    """
    Normalize the inside of a `/** ... */` comment into lines.

    Drops a blank first and last line, then removes the leading `*` of every
    line when all non-blank lines carry one.
    """
    lines = body.split("\n")
    lines = [line.rstrip("\r") for line in lines]
    if len(lines) > 1 and not lines[0].strip():
        lines = lines[1:]
    if len(lines) > 1 and not lines[-1].strip():
        lines = lines[:-1]
    non_blank = [line for line in lines if line.strip()]
    if non_blank and all(line.lstrip().startswith("*") for line in non_blank):
        lines = [line.lstrip()[1:] if line.strip() else "" for line in lines]
    return lines


def desugar_doc_comment(token: Token, location: Optional[SourceLocation]) -> List[Attribute]:
    """Turn one doc comment token into doc attributes."""
    text = str(token)
    is_inner = token.type.startswith("INNER")
    if token.type.endswith("LINE_DOC"):
        return [doc_attribute(text[LINE_DOC_PREFIX_LEN:].rstrip("\r"), is_inner, location)]
    body = text[BLOCK_DOC_PREFIX_LEN:len(text) - BLOCK_DOC_SUFFIX_LEN]
    return [doc_attribute(line, is_inner, location) for line in block_doc_lines(body)]
