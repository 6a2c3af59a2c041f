"""
Documentation Extractor

Joins the `doc` attributes of one declaration into a single text block:

    /// The number of legs this crab has. Probably 8, but there are some weird
    /// crabs out there!

becomes two attributes and then one string with a newline between the lines.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..frontend.transformers.attributes import unquote_str
from ..shared.errors import MalformedDocAttributeError
from ..shared.nodes import Attribute, AttrToken
from ..utils.config import DOC_ATTRIBUTE

logger = logging.getLogger(__name__)


def doc_payload(attr: Attribute, consumed: Optional[str] = None,
                file: Optional[Union[Path, str]] = None) -> Optional[str]:
    """
    Text carried by one `doc` attribute, or None for list-form attributes
    such as ``#[doc(hidden)]`` which carry no text.
    """
    tokens = attr.tokens
    if len(tokens) == 1 and not isinstance(tokens[0], AttrToken):
        return None
    if (len(tokens) == 2
            and isinstance(tokens[0], AttrToken) and tokens[0].kind == "EQUAL"
            and isinstance(tokens[1], AttrToken) and tokens[1].kind == "STRING"):
        text = unquote_str(tokens[1].text)
        if text is not None:
            return text
    rendered = " ".join(str(t) for t in tokens)
    shown = f"#[doc {rendered}]" if rendered else "#[doc]"
    raise MalformedDocAttributeError(
        f"doc attribute must have the form `#[doc = \"...\"]`, found `{shown}`",
        consumed=consumed,
        file=file,
        location=attr.location,
    )


def attrs_to_string(attrs: Iterable[Attribute], consumed: Optional[str] = None,
                    file: Optional[Union[Path, str]] = None) -> str:
    """
    Concatenate doc payloads in declaration order, one per line.

    Each payload has its surrounding whitespace trimmed. No doc attributes
    gives an empty string.
    """
    lines: List[str] = []
    for attr in attrs:
        if attr.path != DOC_ATTRIBUTE:
            continue
        payload = doc_payload(attr, consumed, file)
        if payload is None:
            logger.debug(f"Skipping list-form doc attribute at {attr.location}")
            continue
        lines.append(payload.strip())
    return "\n".join(lines)
