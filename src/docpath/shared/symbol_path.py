"""
Symbolic Path

A symbolic path such as ``pkg::Crab::num_legs`` names a declaration. The first
segment is a package name, the remaining segments walk nested declarations.

Rust Pattern: rustc_ast::Path
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import PathSyntaxError
from ..utils.config import MODULE_SEPARATOR


@dataclass(frozen=True)
class SymbolPath:
    """
    Immutable, non-empty sequence of non-empty segments.

    Equality and hashing are structural.
    """
    segments: Tuple[str, ...]

    def __post_init__(self):
        if not self.segments:
            raise PathSyntaxError("symbolic path must have at least one segment")
        for segment in self.segments:
            if not segment:
                raise PathSyntaxError(
                    f"empty segment in symbolic path `{MODULE_SEPARATOR.join(self.segments)}`"
                )

    @classmethod
    def parse(cls, text: str) -> "SymbolPath":
        """Split text on `::`. Fails on empty input or empty segments."""
        if not text:
            raise PathSyntaxError("symbolic path is empty")
        return cls(tuple(text.split(MODULE_SEPARATOR)))

    def head_tail(self) -> Tuple[str, Optional["SymbolPath"]]:
        """Split into the first segment and the rest (None when nothing is left)."""
        head = self.segments[0]
        if len(self.segments) == 1:
            return head, None
        return head, SymbolPath(self.segments[1:])

    def child(self, segment: str) -> "SymbolPath":
        return SymbolPath(self.segments + (segment,))

    def __str__(self) -> str:
        return MODULE_SEPARATOR.join(self.segments)
