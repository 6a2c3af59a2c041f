"""
Configuration constants shared across docpath
"""

import os
import tempfile

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "docpath_rust_items.cache")

# Symbolic path constants
MODULE_SEPARATOR = "::"

# Crate layout constants
SOURCE_DIR = "src"
ENTRY_FILE = "lib.rs"
SOURCE_FILE_EXTENSION = ".rs"
MANIFEST_FILENAME = "Cargo.toml"
MANIFEST_PACKAGE_TABLE = "package"
MANIFEST_NAME_KEY = "name"
PACKAGE_ENTRY_SEPARATOR = "="

# Attribute constants
DOC_ATTRIBUTE = "doc"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Templating constants
DIRECTIVE_NAME = "rustdoc_include"
DEFAULT_PREPROCESSOR_NAME = "rustdoc-include"
HOST_CONFIG_CRATES_KEY = "crates"

# CLI output constants
DOC_LINE_PREFIX = "/// "
