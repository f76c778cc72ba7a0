"""Command-line interface for gocallmap."""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path

import orjson

from artifacts.analysis import run_analysis
from artifacts.generators.functions import display_columns, function_records
from artifacts.generators.untested import untested_records
from artifacts.write import generate_all_artifacts
from contract.artifacts import FUNCTIONS_CSV_HEADER
from contract.validation import validate_artifacts
from errors import GoCallMapError
from rules.config import ConfigError, load_config
from verify.verify import verify_determinism

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Go module directory (default: .)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug messages"
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only log errors"
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gocallmap",
        description="Static call graph and coverage overlay for Go modules.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze", help="Analyze a module and write artifacts"
    )
    _add_common_options(analyze_parser)
    analyze_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for generated artifacts (default: config output dir)",
    )
    analyze_parser.add_argument(
        "--coverage",
        default=None,
        help="Coverage profile from 'go test -coverprofile' (writes untested.jsonl)",
    )

    functions_parser = subparsers.add_parser(
        "functions", help="List indexed functions with their calls"
    )
    _add_common_options(functions_parser)
    functions_parser.add_argument(
        "--format",
        choices=("table", "csv", "json"),
        default="table",
        help="Output format (default: table)",
    )

    untested_parser = subparsers.add_parser(
        "untested", help="List functions without executed coverage blocks"
    )
    _add_common_options(untested_parser)
    untested_parser.add_argument(
        "--coverage",
        required=True,
        help="Coverage profile from 'go test -coverprofile'",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate artifacts")
    _add_common_options(validate_parser)
    validate_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify determinism of artifacts"
    )
    _add_common_options(verify_parser)
    verify_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )
    verify_parser.add_argument(
        "--coverage",
        default=None,
        help="Coverage profile the artifacts were generated with",
    )

    return parser


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def _resolve_path(value: str | None) -> Path | None:
    if value is None:
        return None
    return Path(value).expanduser().resolve()


def _resolve_artifacts_dir(root: Path, artifacts_dir: str | None) -> Path:
    if artifacts_dir is None:
        config = load_config(root)
        return (root / config.output_dir).resolve()
    return Path(artifacts_dir).expanduser().resolve()


def _handle_analyze(root: Path, out_dir: str | None, coverage: str | None) -> int:
    result = generate_all_artifacts(
        root=root,
        out_dir=_resolve_path(out_dir),
        coverage_profile=_resolve_path(coverage),
    )
    sys.stdout.write(
        f"{result['module_path']}: {result['function_count']} functions, "
        f"{result['edge_count']} edges, {result['cycle_count']} recursion groups\n"
    )
    if result["untested_count"] is not None:
        sys.stdout.write(f"untested functions: {result['untested_count']}\n")
    if result["coverage_error"] is not None:
        # Graph artifacts are written; only the coverage overlay is missing.
        sys.stderr.write(f"error: {result['coverage_error']}\n")
        return 2
    return 0


def _write_table(rows: list[list[str]]) -> None:
    header = list(FUNCTIONS_CSV_HEADER)
    widths = [
        max(len(row[column]) for row in [header, *rows])
        for column in range(len(header))
    ]
    for row in [header, *rows]:
        line = "  ".join(cell.ljust(width) for cell, width in zip(row, widths))
        sys.stdout.write(line.rstrip() + "\n")


def _handle_functions(root: Path, output_format: str) -> int:
    analysis = run_analysis(root)
    records = function_records(analysis.registry)

    if output_format == "json":
        for record in records:
            payload = orjson.dumps(record.model_dump(), option=orjson.OPT_SORT_KEYS)
            sys.stdout.write(payload.decode("utf-8") + "\n")
    elif output_format == "csv":
        writer = csv.writer(sys.stdout, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(FUNCTIONS_CSV_HEADER)
        for record in records:
            writer.writerow(display_columns(record))
    else:
        _write_table([display_columns(record, ", ") for record in records])
    return 0


def _handle_untested(root: Path, coverage: str) -> int:
    analysis = run_analysis(root, coverage_profile=_resolve_path(coverage))
    if analysis.coverage_error is not None:
        sys.stderr.write(f"error: {analysis.coverage_error}\n")
        return 2
    records = untested_records(analysis)
    for record in records:
        sys.stdout.write(f"{record.file}:{record.start_line}: {record.name}\n")
    return 1 if records else 0


def _handle_validate(root: Path, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    result = validate_artifacts(resolved_artifacts_dir)
    for warning in result.warnings:
        sys.stderr.write(f"warning: {warning.location()}: {warning.message}\n")
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(root: Path, artifacts_dir: str | None, coverage: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    try:
        result = verify_determinism(
            root=root,
            artifacts_dir=resolved_artifacts_dir,
            coverage_profile=_resolve_path(coverage),
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"artifacts-dir: {resolved_artifacts_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def _dispatch(args: argparse.Namespace, root: Path) -> int:
    if args.command == "analyze":
        return _handle_analyze(root, args.out_dir, args.coverage)

    if args.command == "functions":
        return _handle_functions(root, args.format)

    if args.command == "untested":
        return _handle_untested(root, args.coverage)

    if args.command == "validate":
        return _handle_validate(root, args.artifacts_dir)

    if args.command == "verify":
        return _handle_verify(root, args.artifacts_dir, args.coverage)

    raise AssertionError


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(verbose=args.verbose, quiet=args.quiet)

    root = Path(args.root).expanduser().resolve()

    try:
        return _dispatch(args, root)
    except (GoCallMapError, ConfigError, OSError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
