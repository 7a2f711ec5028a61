"""
Command-line interface for cpdetect.
"""

import argparse
import logging
import sys

from . import __version__
from .config import (
    DEFAULT_IGNORE_FOLDERS, DEFAULT_LIST_TOP_RESULT, DEFAULT_MIN_CHAR_COUNT,
    DEFAULT_MIN_LINE_COUNT, ScanConfig, SourceType
)
from .errors import ConfigError
from .formatters import FORMATTERS, get_formatter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cpdetect',
        description='Find copy-pasted code in a source tree'
    )
    parser.add_argument('root', help='Root directory to scan')
    parser.add_argument('source_type', choices=[t.value for t in SourceType], help='Source file type')
    parser.add_argument('--min-line-count', type=int, default=DEFAULT_MIN_LINE_COUNT,
                        help='Minimum number of lines to be considered as copy paste')
    parser.add_argument('--min-char-count', type=int, default=DEFAULT_MIN_CHAR_COUNT,
                        help='Minimum characters to be considered as copy paste')
    parser.add_argument('--ignore-folders', default=','.join(DEFAULT_IGNORE_FOLDERS),
                        help='Comma-separated folder names to ignore')
    parser.add_argument('--list-source-folder', action='store_true',
                        help='List source files instead of detecting duplicates')
    parser.add_argument('--list-top-result', type=int, default=DEFAULT_LIST_TOP_RESULT,
                        help='Number of top results to list')
    parser.add_argument('--workers', type=int, default=1, help='Parallel worker processes')
    parser.add_argument('--format', choices=sorted(FORMATTERS), default='text', help='Report format')
    parser.add_argument('--output', '-o', help='Output file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def configure_logging(verbose: bool = False):
    """Log bare messages to stderr to keep stdout clean for the report."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(message)s',
        stream=sys.stderr,
    )


def main(argv: list = None) -> int:
    """CLI entry point. Returns the process exit code."""
    from .analyser import Analyser

    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = ScanConfig.from_args(args)
    except ConfigError as e:
        logger.error("error: %s", e)
        return EXIT_CONFIG_ERROR

    analyser = Analyser(config)

    if args.list_source_folder:
        for path in analyser.list_sources():
            print(path)
        return EXIT_OK

    result = analyser.analyse()
    output = get_formatter(args.format)(result)

    if args.output:
        with open(args.output, 'w') as f:
            f.write(output + "\n")
        logger.info("Saved to %s", args.output)
    else:
        print(output)

    return EXIT_OK
