"""CLI entry point: run `docpath show pkg::Item -c pkg=path` or `python -m docpath ...`."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .analysis.doc_resolver import DocResolver
from .analysis.module_system.package_roots import PackageRoots
from .shared.errors import DocpathError, ItemNotFoundError, SourceReadError, format_error
from .shared.symbol_path import SymbolPath
from .templating.preprocessor import DirectiveExpander, MdBookPreprocessor
from .utils.config import DEFAULT_PREPROCESSOR_NAME, DOC_LINE_PREFIX
from .utils.host_config import load_package_entries
from .utils.io_utils import read_source_file, write_text_file


def format_doc(path: SymbolPath, doc: str) -> str:
    """`pkg::Item doc:` followed by the doc text as `///` lines."""
    body = DOC_LINE_PREFIX + doc.replace("\n", "\n" + DOC_LINE_PREFIX)
    return f"{path} doc:\n\n{body}\n"


def _package_roots(args: argparse.Namespace) -> PackageRoots:
    entries: List[str] = []
    if args.config is not None:
        entries.extend(load_package_entries(args.config, args.section))
    entries.extend(args.crates)
    return PackageRoots.build(entries)


def _cmd_show(args: argparse.Namespace) -> int:
    path = SymbolPath.parse(args.path)
    doc = DocResolver(_package_roots(args)).resolve(path)
    if doc is None:
        raise ItemNotFoundError(f"item `{path}` not found", consumed=str(path))
    sys.stdout.write(format_doc(path, doc) + "\n")
    return 0


def _cmd_expand(args: argparse.Namespace) -> int:
    try:
        text = read_source_file(args.file)
    except OSError as e:
        raise SourceReadError(f"cannot read document: {e.strerror or e}", file=args.file) from e
    expanded = DirectiveExpander(DocResolver(_package_roots(args))).expand(text, str(args.file))
    if args.output is not None:
        write_text_file(args.output, expanded)
    else:
        sys.stdout.write(expanded)
    return 0


def _cmd_mdbook(args: argparse.Namespace) -> int:
    preprocessor = MdBookPreprocessor(args.section, args.crates)
    if args.action == "supports":
        return 0 if preprocessor.supports(args.renderer or "") else 1
    sys.stdout.write(preprocessor.run(sys.stdin.read()))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-c", "--crate", dest="crates", action="append", default=[],
                        metavar="ENTRY", help="Crate to register: NAME=PATH or a crate directory (repeatable)")
    common.add_argument("--config", type=Path, default=None,
                        help="Host tool configuration (book.toml) listing crates")
    common.add_argument("--section", default=DEFAULT_PREPROCESSOR_NAME,
                        help=f"Preprocessor table to read in --config (default: {DEFAULT_PREPROCESSOR_NAME})")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    parser = argparse.ArgumentParser(prog="docpath", description="Find the documentation of a Rust item.")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", parents=[common], help="Print the docs of one item")
    show.add_argument("path", help="Symbolic path, e.g. my_crate::Type::field")
    show.set_defaults(handler=_cmd_show)

    expand = sub.add_parser("expand", parents=[common], help="Expand include directives in a document")
    expand.add_argument("file", type=Path, help="Document to expand")
    expand.add_argument("-o", "--output", type=Path, default=None, help="Write here instead of stdout")
    expand.set_defaults(handler=_cmd_expand)

    mdbook = sub.add_parser("mdbook", parents=[common], help="Run as an mdBook preprocessor")
    mdbook.add_argument("action", nargs="?", choices=["supports"])
    mdbook.add_argument("renderer", nargs="?")
    mdbook.set_defaults(handler=_cmd_mdbook)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.handler(args)
    except DocpathError as e:
        sys.stderr.write(format_error(e) + "\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
