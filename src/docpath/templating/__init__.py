"""
Templating: expand doc-include directives in prose.
"""

from .preprocessor import DirectiveExpander, MdBookPreprocessor, DIRECTIVE_RE

__all__ = ['DirectiveExpander', 'MdBookPreprocessor', 'DIRECTIVE_RE']
