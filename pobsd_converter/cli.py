"""Command-line interface for the PlayOnBSD database converter.

WHY: Maintainers and web front-ends need the games database as JSON. The
CLI is the thin I/O layer around the core: it reads the database file,
runs the parse pipeline, writes the JSON document and reports what was
wrong with the input.

HOW: Uses argparse to accept the database path ("-" for stdin), parser
options (separator, keep policies, record boundaries), an optional single
entry to emit, strict mode, and output/report destinations. Status and
diagnostics go to stderr; the JSON document goes to stdout or --output.

RULES:
- Positional argument: database file path, or "-" to read stdin
- Default: whole catalog as a JSON array; --entry NAME emits one object
- --output-dir DIR: <stem>.json and <stem>-diagnostics.txt, named from
  each formatter's suffix; not combinable with --entry or --output
- Diagnostics report goes to stderr (or --report FILE) unless --quiet
- --strict: any diagnostic → no JSON written, exit status 1
- Unknown --entry, unreadable input → "Error: ..." on stderr, exit status 1
- Exit status 0 otherwise, even when diagnostics were reported
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pobsd_converter import __version__
from pobsd_converter.config import (
    DEFAULT_JSON_INDENT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SEPARATOR_NAME,
    DEFAULT_STRICT,
    EXIT_CANCELLED,
    EXIT_ERROR,
    EXIT_OK,
    SEPARATORS,
    KeepPolicy,
    ParseOptions,
    resolve_separator,
)
from pobsd_converter.core.errors import CatalogError
from pobsd_converter.core.ir import Catalog
from pobsd_converter.core.pipeline import parse_database
from pobsd_converter.formatters import FORMATTERS
from pobsd_converter.formatters.base import FormatterOutput
from pobsd_converter.formatters.json_catalog import serialize_entry

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _configure_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, DEFAULT_LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _parse_options(args: argparse.Namespace) -> ParseOptions:
    return ParseOptions(
        separator=resolve_separator(args.separator),
        field_policy=KeepPolicy(args.shadowed),
        identifier_policy=KeepPolicy(args.duplicates),
        split_on_identifier=args.split_on_game,
    )


def _load_catalog(input_file: str, options: ParseOptions) -> Catalog:
    """Read the database from a path or stdin and parse it.

    RULES:
    - "-" reads stdin
    - Files are read as UTF-8; a leading byte-order mark is dropped
    - Raises FileNotFoundError when the path is not a regular file
    """
    if input_file == "-":
        return parse_database(sys.stdin, options=options)

    path = Path(input_file)
    if not path.is_file():
        raise FileNotFoundError("File not found: {}".format(path))
    with open(path, encoding="utf-8-sig") as f:
        return parse_database(f, options=options)


def _render_document(catalog: Catalog, args: argparse.Namespace) -> str:
    indent = None if args.compact else args.indent
    if args.entry is not None:
        return serialize_entry(catalog.get_entry(args.entry), indent=indent)
    formatter = FORMATTERS["json"](indent=indent)
    return formatter.format(catalog)[0].content


def _emit_report(catalog: Catalog, args: argparse.Namespace) -> None:
    report = FORMATTERS["diagnostics"]().format(catalog)[0].content
    if args.report:
        Path(args.report).write_text(report, encoding="utf-8")
        if not args.quiet:
            _status("Diagnostics report saved: {}".format(args.report))
    elif not args.quiet and (catalog.diagnostics or catalog.rejected):
        sys.stderr.write(report)
        sys.stderr.flush()


def _output_stem(input_file: str) -> str:
    """Stem of the files written by --output-dir ("catalog" for stdin)."""
    if input_file == "-":
        return "catalog"
    return Path(input_file).stem


def _save_output(output: FormatterOutput, output_dir: Path, stem: str) -> Path:
    """Write one formatter output as <stem><suffix> inside output_dir."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / "{}{}".format(stem, output.suffix)
    content = output.content
    if not content.endswith("\n"):
        content += "\n"
    path.write_text(content, encoding="utf-8")
    return path


def _run_output_dir(catalog: Catalog, args: argparse.Namespace) -> int:
    """Write the report and the catalog JSON side by side in --output-dir.

    RULES:
    - <stem>-diagnostics.txt is always written, even in strict mode
    - <stem>.json is written only if strict mode lets the run through
    """
    output_dir = Path(args.output_dir)
    stem = _output_stem(args.input_file)

    report = FORMATTERS["diagnostics"]().format(catalog)
    for output in report:
        path = _save_output(output, output_dir, stem)
        if not args.quiet:
            _status("Diagnostics report saved: {}".format(path))

    if args.strict and not catalog.is_clean:
        catalog.require_clean()

    indent = None if args.compact else args.indent
    for output in FORMATTERS["json"](indent=indent).format(catalog):
        path = _save_output(output, output_dir, stem)
        if not args.quiet:
            _status("Saved {} entries to {}".format(len(catalog), path))
    return EXIT_OK


def run(args: argparse.Namespace) -> int:
    """Execute one conversion and return the process exit status."""
    if args.output_dir and args.entry is not None:
        raise ValueError("--entry cannot be combined with --output-dir")

    options = _parse_options(args)
    catalog = _load_catalog(args.input_file, options)
    logger.info("Loaded %d entries from %s", len(catalog), args.input_file)

    if args.output_dir:
        return _run_output_dir(catalog, args)

    _emit_report(catalog, args)

    if args.strict and not catalog.is_clean:
        catalog.require_clean()

    document = _render_document(catalog, args)
    if args.output:
        Path(args.output).write_text(document + "\n", encoding="utf-8")
        if not args.quiet:
            _status("Saved {} entries to {}".format(len(catalog), args.output))
    else:
        sys.stdout.write(document + "\n")
        sys.stdout.flush()
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="pobsd-converter",
        description="Convert a PlayOnBSD games database into JSON.",
    )

    parser.add_argument(
        "input_file",
        help="Path to the games database file, or '-' to read stdin.",
    )

    destination = parser.add_mutually_exclusive_group()
    destination.add_argument(
        "-o", "--output",
        default=None,
        help="Write the JSON document to this file (default: stdout).",
    )
    destination.add_argument(
        "--output-dir",
        default=None,
        metavar="DIR",
        help="Write <name>.json and <name>-diagnostics.txt into DIR, "
             "named after the input file.",
    )

    parser.add_argument(
        "--entry",
        default=None,
        metavar="NAME",
        help="Emit only the entry with this game name, as a JSON object.",
    )

    parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_STRICT,
        help="Fail when the database produced any diagnostic (default: %(default)s).",
    )

    parser.add_argument(
        "--separator",
        choices=sorted(SEPARATORS),
        default=DEFAULT_SEPARATOR_NAME,
        help="Separator between a field name and its value (default: %(default)s).",
    )

    parser.add_argument(
        "--duplicates",
        choices=[p.value for p in KeepPolicy],
        default=KeepPolicy.LAST.value,
        help="Which entry to keep when two share a game name (default: %(default)s).",
    )

    parser.add_argument(
        "--shadowed",
        choices=[p.value for p in KeepPolicy],
        default=KeepPolicy.LAST.value,
        help="Which value to keep when a field repeats in one entry (default: %(default)s).",
    )

    parser.add_argument(
        "--split-on-game",
        action="store_true",
        help="Also start a new entry at every Game line (databases without blank lines).",
    )

    parser.add_argument(
        "--indent",
        type=int,
        default=DEFAULT_JSON_INDENT,
        help="JSON indentation width (default: %(default)s).",
    )

    parser.add_argument(
        "--compact",
        action="store_true",
        help="Emit the JSON document on a single line.",
    )

    parser.add_argument(
        "--report",
        default=None,
        metavar="FILE",
        help="Write the diagnostics report to this file instead of stderr.",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Do not print the diagnostics report or status messages.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Always ends with sys.exit(status)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose, args.quiet)

    try:
        status = run(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(EXIT_CANCELLED)
    except (CatalogError, OSError, ValueError) as e:
        # ValueError covers UnicodeDecodeError and bad separator names
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(EXIT_ERROR)
    sys.exit(status)


if __name__ == "__main__":
    main()
