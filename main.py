#!/usr/bin/env python3
"""
Page Compare
Command line entry point: compares a pre-go-live page with its current
counterpart and exits non-zero when the similarity is below the threshold.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Tuple

from core.fetcher import FetchError, PageFetcher
from core.html_parser import HTMLParser
from core.page_analyzer import DEFAULT_THRESHOLD, PageAnalyzer, validate_threshold
from comparator.report_builder import ReportBuilder
from utils import file_utils

logger = logging.getLogger(__name__)

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_ERROR = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Compare a pre-go-live page with its current counterpart.')
    parser.add_argument('pre_go_live', help='Pre-go-live URL (or HTML file with --files)')
    parser.add_argument('current', help='Current URL (or HTML file with --files)')
    parser.add_argument('--threshold', default=DEFAULT_THRESHOLD,
                        help=f'Pass threshold 0-100 (default {DEFAULT_THRESHOLD})')
    parser.add_argument('--files', action='store_true', help='Treat the arguments as local HTML files')
    parser.add_argument('--render', action='store_true', help='Render pages in a headless browser before comparing')
    parser.add_argument('--resolve-attributes', action='store_true',
                        help='Read class, id and style attributes for styling comparison')
    parser.add_argument('--json-out', type=Path, help='Write the JSON report to this path')
    parser.add_argument('--html-out', type=Path, help='Write the HTML report to this path')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser


def load_local_page(path_arg: str) -> Tuple[str, str]:
    path = file_utils.normalize_path(path_arg)
    if not file_utils.is_html_file(path):
        logger.warning(f"{path} does not look like an HTML file")
    return file_utils.read_file_content(path), path.as_uri()


def print_progress(percent: int) -> None:
    logger.info(f"Progress: {percent}%")


def main(argv=None) -> int:
    """Main execution function."""
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        threshold = validate_threshold(args.threshold)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    analyzer = PageAnalyzer(
        html_parser=HTMLParser(resolve_attributes=args.resolve_attributes),
        fetcher=PageFetcher(render=args.render)
    )

    try:
        if args.files:
            pre_go_live_html, pre_go_live_url = load_local_page(args.pre_go_live)
            current_html, current_url = load_local_page(args.current)
            comparison = analyzer.compare_html(pre_go_live_html, current_html, pre_go_live_url, current_url)
        else:
            comparison = analyzer.compare_urls(args.pre_go_live, args.current, threshold, on_progress=print_progress)
    except FetchError as e:
        print(f"Failed to compare pages: {e}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as e:
        print(f"Failed to read page: {e}", file=sys.stderr)
        return EXIT_ERROR

    print(analyzer.generate_report(threshold))

    if args.json_out or args.html_out:
        builder = ReportBuilder()
        builder.build_report(comparison, threshold)
        if args.json_out:
            builder.generate_json_report(args.json_out)
        if args.html_out:
            builder.generate_html_report(args.html_out)

    return EXIT_PASS if comparison.passes(threshold) else EXIT_FAIL


if __name__ == "__main__":
    sys.exit(main())
