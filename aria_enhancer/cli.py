#!/usr/bin/env python3
"""
ARIA Enhancer CLI

Command-line interface for adding ARIA attributes to HTML and checking it
against WCAG structural rules.

Usage:
    python -m aria_enhancer enhance page.html [-o output.html]
    aria-enhancer audit page.html
    aria-enhancer validate page.html --format json
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import AccessibilityConfig, WcagLevel
from .enhancer import ARIAEnhancer
from .errors import AccessibilityError
from .wcag_validator import WCAGValidator


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def parse_args(args: list = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='aria-enhancer',
        description='Add ARIA attributes to HTML and check WCAG structure',
        epilog='Example: aria-enhancer enhance page.html -o page.aria.html'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    enhance = subparsers.add_parser(
        'enhance',
        help='Add missing ARIA attributes and strip invalid ones'
    )
    enhance.add_argument(
        'input',
        type=str,
        help="Path to input HTML file ('-' for stdin)"
    )
    enhance.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Output file (default: stdout)'
    )

    audit = subparsers.add_parser(
        'audit',
        help='Fail on the first alt text, heading or label violation'
    )
    audit.add_argument(
        'input',
        type=str,
        help="Path to input HTML file ('-' for stdin)"
    )
    audit.add_argument(
        '--max-heading-jump',
        type=int,
        default=1,
        help='Largest allowed upward heading step (default: 1)'
    )

    validate = subparsers.add_parser(
        'validate',
        help='Print a report of every accessibility issue found'
    )
    validate.add_argument(
        'input',
        type=str,
        help="Path to input HTML file ('-' for stdin)"
    )
    validate.add_argument(
        '-f', '--format',
        choices=['json', 'text'],
        default='text',
        help='Output format (default: text)'
    )
    validate.add_argument(
        '--level',
        choices=[level.value for level in WcagLevel],
        default=WcagLevel.AA.value,
        help='WCAG conformance level (default: AA)'
    )

    return parser.parse_args(args)


def read_input(path: str) -> str:
    """Read HTML from a file path, or stdin for '-'."""
    if path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def main(args: list = None) -> int:
    """
    Main entry point for CLI.

    Args:
        args: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, 1 for error or failed check)
    """
    parsed = parse_args(args)
    setup_logging(parsed.verbose)

    logger = logging.getLogger(__name__)

    if parsed.input != '-' and not Path(parsed.input).exists():
        logger.error(f"Input file not found: {parsed.input}")
        return 1

    html = read_input(parsed.input)

    try:
        if parsed.command == 'enhance':
            enhanced = ARIAEnhancer().enhance(html)
            if parsed.output:
                with open(parsed.output, 'w', encoding='utf-8') as f:
                    f.write(enhanced)
                logger.info(f"Enhanced HTML written to: {parsed.output}")
            else:
                sys.stdout.write(enhanced)
            return 0

        if parsed.command == 'audit':
            config = AccessibilityConfig(max_heading_jump=parsed.max_heading_jump)
            WCAGValidator(config).audit(html)
            logger.info("WCAG audit passed")
            return 0

        config = AccessibilityConfig(wcag_level=WcagLevel(parsed.level))
        report = WCAGValidator(config).validate(html, file_path=parsed.input)
        print(report.to_json() if parsed.format == 'json' else report.to_text())
        return 0 if report.passed else 1

    except AccessibilityError as e:
        logger.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
