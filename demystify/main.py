"""Command line interface for running the renaming pipeline."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import pipeline, utils, worker
from .config import PipelineConfig, load_config
from .exceptions import ConfigError, DemystifyError, ParseError
from .logging_config import close_debug_logger, configure_debug_file_logger

LOG = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="demystify",
        description="Rename identifiers in minified JavaScript after their context.",
    )
    parser.add_argument("input", nargs="?", help="JavaScript file to transform")
    parser.add_argument("-o", "--output", help="destination file (default: <input>_demystified.js)")
    parser.add_argument("--stdout", action="store_true", help="print the result instead of writing a file")
    parser.add_argument("--report", help="write the JSON diagnostics report to this path")
    parser.add_argument("--config", help="JSON file with pipeline settings")
    parser.add_argument("--rounds", type=int, default=None, help="number of pattern-mining rounds")
    parser.add_argument(
        "--until-converged",
        action="store_true",
        default=None,
        help="keep mining until a round renames nothing",
    )
    parser.add_argument("--max-rounds", type=int, default=None, help="round cap for --until-converged")
    parser.add_argument("--module", action="store_true", help="parse the input as an ES module")
    parser.add_argument(
        "--no-function-names",
        action="store_true",
        help="do not name anonymous function expressions",
    )
    parser.add_argument("--skip-passes", help="comma separated list of passes to skip")
    parser.add_argument("--only-passes", help="comma separated list of passes to run exclusively")
    parser.add_argument("--log-level", default="WARNING", choices=_LOG_LEVELS)
    parser.add_argument("--debug-log", help="write a DEBUG trace of the heuristics to this file")
    parser.add_argument(
        "--serve",
        action="store_true",
        help="answer JSON-line requests on stdin instead of reading a file",
    )
    return parser


def _split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _unknown_passes(names: List[str]) -> List[str]:
    known = set(pipeline.PIPELINE.names)
    return [name for name in names if name not in known]


def _resolve_config(args: argparse.Namespace) -> PipelineConfig:
    config = load_config(Path(args.config)) if args.config else PipelineConfig()
    return config.merged(
        mining_rounds=args.rounds,
        until_converged=args.until_converged,
        max_rounds=args.max_rounds,
        source_type="module" if args.module else None,
        name_functions=False if args.no_function_names else None,
    )


def _describe_parse_error(exc: ParseError, source_name: str) -> str:
    if exc.line is not None and exc.column is not None:
        return f"{source_name}:{exc.line}:{exc.column}: {exc.description}"
    return f"{source_name}: {exc}"


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    utils.setup_logging(getattr(logging, args.log_level))

    try:
        config = _resolve_config(args)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    skip = _split_list(args.skip_passes)
    only = _split_list(args.only_passes)
    unknown = _unknown_passes(skip + only)
    if unknown:
        print(
            f"error: unknown pass(es): {', '.join(unknown)} "
            f"(available: {', '.join(pipeline.PIPELINE.names)})",
            file=sys.stderr,
        )
        return 2

    trace_logger = None
    if args.debug_log:
        trace_logger = configure_debug_file_logger("demystify", Path(args.debug_log))

    try:
        if args.serve:
            worker.serve(sys.stdin, sys.stdout, config)
            return 0
        if not args.input:
            parser.print_usage(sys.stderr)
            print("error: an input file is required unless --serve is given", file=sys.stderr)
            return 2
        return _run_file(args, config, skip, only)
    finally:
        if trace_logger is not None:
            close_debug_logger(trace_logger)


def _run_file(
    args: argparse.Namespace,
    config: PipelineConfig,
    skip: List[str],
    only: List[str],
) -> int:
    source = utils.safe_read_file(args.input)
    if source is None:
        print(f"error: cannot read {args.input}", file=sys.stderr)
        return 1

    try:
        ctx = pipeline.run(source, config, skip=skip, only=only)
    except ParseError as exc:
        print(f"error: {_describe_parse_error(exc, args.input)}", file=sys.stderr)
        return 1
    except DemystifyError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.report:
        report_text = json.dumps(ctx.report.to_json(), ensure_ascii=False, indent=2)
        if not utils.safe_write_file(args.report, report_text + "\n"):
            print(f"error: cannot write report to {args.report}", file=sys.stderr)
            return 1

    if args.stdout:
        sys.stdout.write(ctx.output)
        return 0

    destination = args.output or utils.create_output_path(args.input)
    if not utils.safe_write_file(destination, ctx.output):
        print(f"error: cannot write {destination}", file=sys.stderr)
        return 1
    LOG.info("wrote %s (%d chars)", destination, len(ctx.output))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI wrapper
    raise SystemExit(main())
