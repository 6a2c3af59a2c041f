"""
Frontend: Rust source text to declaration tree.

Rust Pattern: rustc_parse
"""

from .parser import Parser, strip_shebang

__all__ = ['Parser', 'strip_shebang']
