"""
Lark transformers that build the declaration tree.
"""

from .base import DeclarationTransformer
from .attributes import desugar_doc_comment, unquote_str, quote_str
from .impl_header import parse_impl_header, self_type_name

__all__ = [
    'DeclarationTransformer',
    'desugar_doc_comment', 'unquote_str', 'quote_str',
    'parse_impl_header', 'self_type_name',
]
