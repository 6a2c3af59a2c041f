"""
Host tool configuration.

Documentation tools that run docpath as a preprocessor (mdBook and friends)
list the crates to register in their own configuration:

    [preprocessor.rustdoc-include]
    crates = ["test-crate", "other=~/src/other"]
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, List, Mapping, Union

from ..shared.errors import ConfigError
from .config import DEFAULT_PREPROCESSOR_NAME, HOST_CONFIG_CRATES_KEY, PACKAGE_ENTRY_SEPARATOR

logger = logging.getLogger(__name__)


def load_package_entries(config_path: Union[Path, str],
                         section: str = DEFAULT_PREPROCESSOR_NAME) -> List[str]:
    """
    Registry entries from ``[preprocessor.<section>].crates`` of a TOML file.

    A missing section or key gives an empty list. Relative paths are taken
    relative to the configuration file's directory.
    """
    path = Path(config_path)
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read configuration: {e.strerror or e}", file=path) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"cannot parse configuration: {e}", file=path) from e
    return package_entries_from_config(data, section, path.parent, source=path)


def package_entries_from_config(data: Mapping[str, Any], section: str, base: Path,
                                source: Union[Path, str, None] = None) -> List[str]:
    """Same as load_package_entries, for configuration already in memory."""
    preprocessors = data.get("preprocessor", {})
    table = preprocessors.get(section, {}) if isinstance(preprocessors, dict) else None
    if not isinstance(table, dict):
        raise ConfigError(f"`preprocessor.{section}` must be a table", file=source)
    entries = table.get(HOST_CONFIG_CRATES_KEY, [])
    if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
        raise ConfigError(
            f"`preprocessor.{section}.{HOST_CONFIG_CRATES_KEY}` must be a list of strings", file=source
        )
    logger.debug(f"Loaded {len(entries)} crate entries from {source or 'host configuration'}")
    return [_anchor(entry, base) for entry in entries]


def _anchor(entry: str, base: Path) -> str:
    """Make a relative path in an entry relative to ``base``."""
    if PACKAGE_ENTRY_SEPARATOR in entry:
        name, raw = entry.split(PACKAGE_ENTRY_SEPARATOR, 1)
        return f"{name}{PACKAGE_ENTRY_SEPARATOR}{_anchor_path(raw, base)}"
    return _anchor_path(entry, base)


def _anchor_path(raw: str, base: Path) -> str:
    if raw.startswith("~") or Path(raw).is_absolute():
        return raw
    return str(base / raw)
