"""
Error Reporting

Every fatal condition raised while resolving a symbolic path is a
DocpathError. Each carries the path prefix consumed so far and the file being
examined, so a report can say where the walk stopped. "Not found" is not an
error: the resolver returns None for it.

Rust Pattern: rustc_errors::Diagnostic
"""

import os
from pathlib import Path
from typing import List, Optional, Union

from .source_location import SourceLocation


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("DOCPATH_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class DocpathError(Exception):
    """
    Base exception for all docpath errors.

    Attributes:
        message: human readable description
        consumed: the symbolic path prefix consumed when the error happened
        file: the source or manifest file being examined, if any
        location: precise position inside ``file``, if known
    """
    def __init__(self,
                 message: str,
                 *,
                 consumed: Optional[str] = None,
                 file: Optional[Union[Path, str]] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.consumed = consumed
        self.file = str(file) if file is not None else None
        self.location = location

    def __str__(self):
        return format_error(self, color=False)


class PathSyntaxError(DocpathError):
    """Symbolic path text that does not form a valid path"""
    pass


class PackageNotFoundError(DocpathError):
    """First path segment is not a registered package name"""
    pass


class ManifestReadError(DocpathError):
    """Package manifest could not be read"""
    pass


class ManifestParseError(DocpathError):
    """Package manifest is malformed or has no package name"""
    pass


class ConfigError(DocpathError):
    """Host tool configuration could not be read or is malformed"""
    pass


class SourceReadError(DocpathError):
    """Source file could not be read"""
    pass


class SourceParseError(DocpathError):
    """Source file is not syntactically valid"""
    pass


class UnsupportedConstructError(DocpathError):
    """
    Path addresses a construct the resolver does not handle.

    Raised for external modules declared outside the entry file and for item
    kinds without member-addressable documentation (fn, const, trait, ...).
    """
    pass


class InvalidPathShapeError(DocpathError):
    """Path has too many segments, or a non-numeric positional field index"""
    pass


class MalformedDocAttributeError(DocpathError):
    """A `doc` attribute whose value is not `= "literal"`"""
    pass


class ItemNotFoundError(DocpathError):
    """
    Raised by callers that require a hit (templating, CLI).

    The resolver itself reports not-found as None.
    """
    pass


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_error(error: DocpathError, color: Optional[bool] = None) -> str:
    """
    Render an error in rustc style.

    Example output (plain, no color)::

        error: field index `x` is not a number
         --> /crates/pkg/src/lib.rs:3:1
          = note: while resolving `pkg::Pair`
    """
    if color is None:
        color = _use_color()
    out: List[str] = [
        _style("error", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    ]
    where = None
    if error.location is not None:
        where = str(error.location)
    elif error.file is not None:
        where = error.file
    if where is not None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + where)
    if error.consumed:
        out.append(_style("  = ", _BOLD, _BLUE, color=color) + f"note: while resolving `{error.consumed}`")
    return "\n".join(out)
