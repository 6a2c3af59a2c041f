"""
Package Root Registry

Maps package (crate) names to their root directories. Built once from a list
of entries and read-only afterwards.

Entries are either ``name=path`` or a bare crate directory whose
``Cargo.toml`` supplies the name:

    PackageRoots.build(["pkg=~/src/pkg", "../other-crate"])

Rust Pattern: rustc_session::search_paths (`--extern name=path`)
"""

import logging
import os
import tomllib
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from ...shared.errors import ManifestParseError, ManifestReadError
from ...utils.config import (
    MANIFEST_FILENAME, MANIFEST_NAME_KEY, MANIFEST_PACKAGE_TABLE, PACKAGE_ENTRY_SEPARATOR,
)

logger = logging.getLogger(__name__)


def read_manifest_name(root: Path) -> str:
    """Read `[package].name` from the crate manifest under ``root``."""
    manifest = root / MANIFEST_FILENAME
    try:
        data = manifest.read_bytes()
    except OSError as e:
        raise ManifestReadError(f"cannot read manifest: {e.strerror or e}", file=manifest) from e
    try:
        parsed = tomllib.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ManifestParseError(f"cannot parse manifest: {e}", file=manifest) from e

    package = parsed.get(MANIFEST_PACKAGE_TABLE)
    name = package.get(MANIFEST_NAME_KEY) if isinstance(package, dict) else None
    if not isinstance(name, str) or not name:
        raise ManifestParseError(
            f"manifest has no `{MANIFEST_PACKAGE_TABLE}.{MANIFEST_NAME_KEY}` string", file=manifest
        )
    return name


def parse_entry(entry: str) -> Tuple[str, Path]:
    """
    Turn one registry entry into (package name, root).

    ``name=path`` is taken as given (after `~` expansion); a bare path is
    read for its manifest name.
    """
    if PACKAGE_ENTRY_SEPARATOR in entry:
        name, path = entry.split(PACKAGE_ENTRY_SEPARATOR, 1)
        return name, Path(os.path.expanduser(path))
    root = Path(os.path.expanduser(entry))
    return read_manifest_name(root), root


class PackageRoots(Mapping[str, Path]):
    """
    Read-only package name -> root directory mapping.

    Later entries win over earlier entries with the same name.
    """

    def __init__(self, roots: Optional[Mapping[str, Path]] = None):
        self._roots: Mapping[str, Path] = MappingProxyType(dict(roots or {}))

    @classmethod
    def build(cls, entries: Iterable[str]) -> "PackageRoots":
        """Build from entries; the first failing manifest aborts construction."""
        roots: Dict[str, Path] = {}
        for entry in entries:
            name, root = parse_entry(entry)
            if name in roots and roots[name] != root:
                logger.warning(f"Package '{name}' registered twice: {roots[name]} replaced by {root}")
            roots[name] = root
            logger.debug(f"PackageRoots: registered '{name}' at {root}")
        return cls(roots)

    def get(self, name: str, default: Optional[Path] = None) -> Optional[Path]:
        return self._roots.get(name, default)

    def __getitem__(self, name: str) -> Path:
        return self._roots[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._roots)

    def __len__(self) -> int:
        return len(self._roots)

    def __repr__(self) -> str:
        return f"PackageRoots({dict(self._roots)!r})"
