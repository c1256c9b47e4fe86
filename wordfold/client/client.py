"""
Command-line client for running a word count over a local file.
"""

import sys
import json
import logging
import argparse
from typing import List, Optional

from wordfold.config import PipelineConfig
from wordfold.errors import SourceReadError
from wordfold.coordinator.pipeline import PipelineCoordinator, PipelineResult


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human readable string."""
    if seconds < 60:
        return f"{seconds:.2f}s"
    minutes = int(seconds / 60)
    seconds = seconds % 60
    return f"{minutes}m {seconds:.1f}s"


def print_result(result: PipelineResult, as_json: bool = False):
    """Print ranked words to stdout and any warnings to stderr."""
    if as_json:
        document = {
            'top_words': [[word, count] for word, count in result.top_words],
            'num_chunks': result.num_chunks,
            'complete': result.complete,
            'dropped_chunks': result.dropped_chunks,
            'warnings': [str(w) for w in result.warnings],
        }
        print(json.dumps(document, indent=2))
    else:
        for word, count in result.top_words:
            print(f"{word}\t{count}")

    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    if not result.complete:
        print(f"Warning: counts from chunks {result.dropped_chunks} are missing, "
              f"result is incomplete", file=sys.stderr)


def build_parser(defaults: PipelineConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wordfold",
        description="Count the most frequent words in a file with a parallel map-reduce pipeline")
    parser.add_argument("input", help="Input text file")
    parser.add_argument("--folds", "-f", type=int, default=defaults.folds,
                        help=f"Number of chunks to split the input into (default: {defaults.folds})")
    parser.add_argument("--top-k", "-k", type=int, default=defaults.top_k,
                        help=f"Number of words to report (default: {defaults.top_k})")
    parser.add_argument("--timeout", type=float, default=defaults.collect_timeout,
                        help=f"Seconds to wait for each map result (default: {defaults.collect_timeout})")
    parser.add_argument("--case-sensitive", action="store_true", default=defaults.case_sensitive,
                        help="Do not fold words to lower case")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--metrics-out", help="Write run metrics to this JSON file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    try:
        defaults = PipelineConfig.from_env()
    except ValueError as e:
        print(f"Invalid WORDFOLD_* environment setting: {e}", file=sys.stderr)
        return 2

    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = PipelineConfig(
            folds=args.folds,
            top_k=args.top_k,
            collect_timeout=args.timeout,
            case_sensitive=args.case_sensitive,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        result = PipelineCoordinator(config).run(args.input)
    except SourceReadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_result(result, as_json=args.json)

    if result.metrics is not None:
        if args.verbose:
            print(f"Completed in {format_duration(result.metrics.total_time_seconds)}", file=sys.stderr)
        if args.metrics_out:
            result.metrics.save_to_file(args.metrics_out)

    return 0


if __name__ == "__main__":
    sys.exit(main())
