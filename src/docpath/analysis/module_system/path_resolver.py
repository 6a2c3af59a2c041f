"""
Module Path Resolution

Maps a crate root to its entry file and an external ``mod name;`` declaration
to the file holding its body.

Only the flat layout is supported: modules declared in ``src/lib.rs`` live
in ``src/<name>.rs``. A ``mod name;`` inside any other file would need
``src/<parent>/<name>.rs`` lookup and is rejected.

Rust Pattern: rustc_expand::module::mod_file_path
"""

import logging
from pathlib import Path

from ...shared.errors import UnsupportedConstructError
from ...utils.config import ENTRY_FILE, SOURCE_DIR, SOURCE_FILE_EXTENSION

logger = logging.getLogger(__name__)


class ModulePathResolver:
    """
    Stateless; can be shared between resolutions.
    """

    def entry_file(self, root: Path) -> Path:
        """`<root>/src/lib.rs`"""
        return Path(root) / SOURCE_DIR / ENTRY_FILE

    def module_file(self, entry_file: Path, current_file: Path, name: str, consumed: str) -> Path:
        """
        File holding the body of ``mod name;`` declared in ``current_file``.

        Raises UnsupportedConstructError unless ``current_file`` is the crate
        entry file.
        """
        if Path(current_file) != Path(entry_file):
            raise UnsupportedConstructError(
                f"external module `{name}` declared outside the crate entry file is not supported",
                consumed=consumed,
                file=current_file,
            )
        path = Path(entry_file).with_name(f"{name}{SOURCE_FILE_EXTENSION}")
        logger.debug(f"ModulePathResolver: mod {name} -> {path}")
        return path
