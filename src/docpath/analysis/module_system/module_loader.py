"""
Module Loader

Reads one source file and parses it into a declaration tree. Nothing is
cached: every call reads and parses the file again.

Rust Pattern: rustc_parse::parse_crate_from_file
"""

import logging
from pathlib import Path
from typing import Optional

from ...frontend.parser import Parser
from ...shared.errors import SourceParseError, SourceReadError
from ...shared.nodes import SourceFile
from ...utils.io_utils import read_source_file

logger = logging.getLogger(__name__)


class ModuleLoader:
    """Declaration source backed by the filesystem"""

    def __init__(self, parser: Optional[Parser] = None):
        self.parser = parser or Parser()

    def load(self, file: Path, consumed: Optional[str] = None) -> SourceFile:
        """
        Read and parse ``file``.

        Raises SourceReadError or SourceParseError carrying ``consumed``, the
        symbolic path prefix that led here.
        """
        try:
            source = read_source_file(file)
        except (OSError, UnicodeDecodeError) as e:
            reason = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
            raise SourceReadError(f"cannot read source file: {reason}", consumed=consumed, file=file) from e

        logger.debug(f"ModuleLoader: parsing {file}")
        try:
            return self.parser.parse(source, str(file))
        except SourceParseError as e:
            e.consumed = consumed
            raise
