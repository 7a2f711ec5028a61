"""
Main entry point for running cpdetect as a module.

Usage:
    python -m cpdetect ./path/to/repo java
    python -m cpdetect ./path/to/repo python --min-line-count 8 --list-top-result 10
    python -m cpdetect ./path/to/repo cpp --format json --output results.json
"""

import sys

from .cli import main


if __name__ == '__main__':
    sys.exit(main())
