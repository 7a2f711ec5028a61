"""
Scan configuration.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Tuple

from .errors import ConfigError

DEFAULT_MIN_LINE_COUNT = 6
DEFAULT_MIN_CHAR_COUNT = 80
DEFAULT_IGNORE_FOLDERS = ('thirdparty', 'test', 'node_modules')
DEFAULT_LIST_TOP_RESULT = 30


class SourceType(Enum):
    """Supported source languages."""
    JAVA = 'java'
    CPP = 'cpp'
    C = 'c'
    RUST = 'rust'
    JAVASCRIPT = 'javascript'
    PYTHON = 'python'

    @classmethod
    def parse(cls, value: str) -> 'SourceType':
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ', '.join(t.value for t in cls)
            raise ConfigError(f"unknown source type {value!r} (expected one of: {choices})") from None

    def __str__(self) -> str:
        return self.value


def split_folders(value: str) -> Tuple[str, ...]:
    """Split a comma-separated folder list, dropping empty entries."""
    return tuple(f.strip() for f in value.split(',') if f.strip())


@dataclass(frozen=True)
class ScanConfig:
    """
    Immutable configuration for one scan.

    Validation happens on construction, so an existing ScanConfig is
    always safe to hand to the Analyser.
    """
    root: str
    source_type: SourceType
    min_line_count: int = DEFAULT_MIN_LINE_COUNT
    min_char_count: int = DEFAULT_MIN_CHAR_COUNT
    ignore_folders: Tuple[str, ...] = DEFAULT_IGNORE_FOLDERS
    list_top_result: int = DEFAULT_LIST_TOP_RESULT
    workers: int = 1

    def __post_init__(self):
        if not isinstance(self.source_type, SourceType):
            object.__setattr__(self, 'source_type', SourceType.parse(str(self.source_type)))
        if isinstance(self.ignore_folders, str):
            object.__setattr__(self, 'ignore_folders', split_folders(self.ignore_folders))
        else:
            object.__setattr__(self, 'ignore_folders', tuple(self.ignore_folders))
        self._validate()

    def _validate(self):
        for name in ('min_line_count', 'min_char_count', 'list_top_result', 'workers'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigError(f"{name.replace('_', '-')} must be a positive integer, got {value!r}")

        root = Path(self.root)
        if not root.is_dir():
            raise ConfigError(f"root directory does not exist: {self.root}")
        if not os.access(root, os.R_OK | os.X_OK):
            raise ConfigError(f"root directory is not readable: {self.root}")

    @classmethod
    def from_args(cls, args) -> 'ScanConfig':
        """Build a config from parsed command-line arguments."""
        return cls(
            root=args.root,
            source_type=args.source_type,
            min_line_count=args.min_line_count,
            min_char_count=args.min_char_count,
            ignore_folders=split_folders(args.ignore_folders),
            list_top_result=args.list_top_result,
            workers=args.workers,
        )

    def to_dict(self) -> dict:
        return {
            'source_type': self.source_type.value,
            'min_line_count': self.min_line_count,
            'min_char_count': self.min_char_count,
            'ignore_folders': list(self.ignore_folders),
            'list_top_result': self.list_top_result,
        }
