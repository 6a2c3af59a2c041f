"""
Parser

Rust Pattern: rustc_parse
"""

from pathlib import Path
from typing import Optional
from lark import Lark
from lark.exceptions import (
    UnexpectedInput, UnexpectedToken, UnexpectedCharacters, UnexpectedEOF,
    ParseError as LarkParseError, VisitError,
)
import logging

from ..shared.nodes import SourceFile
from ..shared.errors import DocpathError, SourceParseError
from ..shared.source_location import SourceLocation
from .transformers.base import DeclarationTransformer
from ..utils.config import DEFAULT_PARSER_CACHE_FILE, ENTRY_FILE

logger = logging.getLogger(__name__)

_SHEBANG = "#!"


def strip_shebang(source: str) -> str:
    """
    Blank out a leading `#!` interpreter line.

    `#![...]` is an inner attribute, not a shebang. The line break is kept so
    reported line numbers still match the file.
    """
    if not source.startswith(_SHEBANG):
        return source
    if source[len(_SHEBANG):].lstrip().startswith("["):
        return source
    newline = source.find("\n")
    return "" if newline == -1 else source[newline:]


def _describe(e: UnexpectedInput) -> str:
    if isinstance(e, UnexpectedToken):
        if e.token.type == "$END":
            return "unexpected end of file"
        return f"unexpected token `{e.token}`"
    if isinstance(e, UnexpectedCharacters):
        return f"unexpected character `{e.char}`"
    if isinstance(e, UnexpectedEOF):
        return "unexpected end of file"
    return str(e)


class Parser:
    """
    Rust item parser (Rust naming: rustc_parse).

    The Lark parser is built once and only read afterwards; each parse gets
    its own transformer, so one Parser can be shared between resolutions.
    """

    def __init__(self, cache_file: str = DEFAULT_PARSER_CACHE_FILE):
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            grammar_path,
            start='file',
            parser='lalr',              # Required for caching
            cache=cache_file,
            propagate_positions=True,
            maybe_placeholders=False,
            regex=True,                 # Nested block comments need recursive patterns
        )

    def parse(self, source: str, source_file: str = ENTRY_FILE) -> SourceFile:
        """
        Parse source text into a declaration tree.

        Raises SourceParseError with the failing line and column.
        """
        try:
            tree = self.parser.parse(strip_shebang(source))
            return DeclarationTransformer(source_file).transform(tree)

        except (UnexpectedInput, LarkParseError) as e:
            location: Optional[SourceLocation] = None
            line = getattr(e, 'line', -1)
            column = getattr(e, 'column', -1)
            if isinstance(line, int) and line > 0:
                location = SourceLocation(file=source_file, line=line, column=max(column, 1))
            message = _describe(e) if isinstance(e, UnexpectedInput) else str(e)
            logger.debug(f"Parse error in {source_file}: {e}")
            raise SourceParseError(f"cannot parse source: {message}", file=source_file, location=location) from e

        except VisitError as e:
            if isinstance(e.orig_exc, DocpathError):
                raise e.orig_exc from e
            raise SourceParseError(
                f"cannot build declaration tree: {e.orig_exc}", file=source_file
            ) from e
