"""
Utility helpers: constants, file I/O and host configuration.
"""

from .io_utils import read_source_file, write_text_file
from .host_config import load_package_entries, package_entries_from_config

__all__ = ['read_source_file', 'write_text_file', 'load_package_entries', 'package_entries_from_config']
