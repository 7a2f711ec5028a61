"""
Data model shared by the fingerprint index, cluster builder and ranker.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class SourceLine:
    """A normalized, non-empty line of a source file."""
    path: str
    line_number: int
    text: str
    char_count: int
    offset: int


@dataclass(frozen=True)
class Occurrence:
    """One concrete location of a duplicated block."""
    path: str
    start_line: int
    end_line: int
    char_count: int

    @property
    def sort_key(self) -> Tuple[str, int]:
        return (self.path, self.start_line)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file': self.path,
            'start_line': self.start_line,
            'end_line': self.end_line,
            'char_count': self.char_count,
        }


@dataclass(frozen=True)
class Cluster:
    """
    A set of occurrences sharing identical normalized text.

    line_count is the number of normalized lines in the block and
    char_count the largest original character count among occurrences.
    """
    line_count: int
    char_count: int
    occurrences: Tuple[Occurrence, ...]

    @property
    def size(self) -> int:
        """Total duplicated lines, counting every occurrence."""
        return self.line_count * len(self.occurrences)

    @property
    def first(self) -> Occurrence:
        return self.occurrences[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'line_count': self.line_count,
            'char_count': self.char_count,
            'size': self.size,
            'occurrences': [o.to_dict() for o in self.occurrences],
        }
