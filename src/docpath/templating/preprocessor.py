"""
Directive expansion for prose documents.

A directive names one symbolic path and is replaced by that item's doc text:

    > {{#rustdoc_include test_crate::Crab::num_legs}}

Continuation lines of a multi-line doc get the text that precedes the
directive on its line, so the example above stays inside the quote block.
A backslash before the directive (``\\{{#rustdoc_include ...}}``) keeps it
verbatim, minus the backslash.

MdBookPreprocessor speaks mdBook's preprocessor protocol: the book arrives on
stdin as ``[context, book]`` JSON and goes back out with every chapter
expanded.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..analysis.doc_resolver import DocResolver
from ..analysis.module_system.package_roots import PackageRoots
from ..shared.errors import ConfigError, ItemNotFoundError
from ..shared.symbol_path import SymbolPath
from ..utils.config import DEFAULT_PREPROCESSOR_NAME, DIRECTIVE_NAME
from ..utils.host_config import package_entries_from_config

logger = logging.getLogger(__name__)

DIRECTIVE_RE = re.compile(
    r"(?P<escape>\\)?\{\{#" + re.escape(DIRECTIVE_NAME) + r"\s+(?P<path>[^\s{}]+)\s*\}\}"
)


class DirectiveExpander:
    """Replace directives in text with resolved doc text."""

    def __init__(self, resolver: DocResolver):
        self.resolver = resolver

    def expand(self, text: str, source_name: Optional[str] = None) -> str:
        """
        Expand every directive in ``text``.

        Any failure, including a path that resolves to nothing, raises and no
        partial output is produced.
        """
        out: List[str] = []
        last = 0
        for m in DIRECTIVE_RE.finditer(text):
            out.append(text[last:m.start()])
            if m.group("escape"):
                out.append(m.group(0)[1:])
            else:
                line_start = text.rfind("\n", 0, m.start()) + 1
                out.append(self._render(m.group("path"), text[line_start:m.start()], source_name))
            last = m.end()
        out.append(text[last:])
        return "".join(out)

    def _render(self, raw_path: str, prefix: str, source_name: Optional[str]) -> str:
        path = SymbolPath.parse(raw_path)
        doc = self.resolver.resolve(path)
        if doc is None:
            raise ItemNotFoundError(f"item `{path}` not found", consumed=str(path), file=source_name)
        logger.debug(f"Expanded {path} in {source_name or '<text>'}")
        return doc.replace("\n", "\n" + prefix)


class MdBookPreprocessor:
    """
    mdBook preprocessor front end.

    Crates come from ``[preprocessor.<name>].crates`` in book.toml, relative
    to the book root.
    """

    def __init__(self, name: str = DEFAULT_PREPROCESSOR_NAME, extra_entries: Sequence[str] = ()):
        self.name = name
        self.extra_entries = list(extra_entries)

    def supports(self, renderer: str) -> bool:
        return True

    def run(self, payload: str) -> str:
        try:
            context, book = json.loads(payload)
        except ValueError as e:
            raise ConfigError(f"malformed mdBook preprocessor input: {e}") from e
        root = Path(context.get("root", "."))
        entries = package_entries_from_config(context.get("config", {}), self.name, root, source="book.toml")
        entries.extend(self.extra_entries)
        expander = DirectiveExpander(DocResolver(PackageRoots.build(entries)))
        for section in book.get("sections", []):
            self._expand_item(section, expander)
        return json.dumps(book)

    def _expand_item(self, item: Any, expander: DirectiveExpander) -> None:
        if not isinstance(item, dict) or "Chapter" not in item:
            return
        chapter: Dict[str, Any] = item["Chapter"]
        chapter["content"] = expander.expand(chapter.get("content", ""), chapter.get("path") or chapter.get("name"))
        for sub in chapter.get("sub_items", []):
            self._expand_item(sub, expander)
