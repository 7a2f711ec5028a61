"""
Fingerprint index: rolling window hashes over normalized lines.
"""

import hashlib
import logging
from collections import defaultdict

logger = logging.getLogger(__name__)

MODULUS = (1 << 61) - 1
BASE = 1_000_003


def line_hash(text: str) -> int:
    """Stable 64-bit digest of a normalized line, reduced into the hash field."""
    digest = hashlib.blake2b(text.encode('utf-8'), digest_size=8).digest()
    return int.from_bytes(digest, 'big') % MODULUS


def window_hashes(lines: list, window: int) -> list:
    """
    Polynomial rolling hash of every run of `window` consecutive lines.

    Element i is the hash of lines[i:i + window]. Files shorter than the
    window produce no hashes.
    """
    if window < 1 or len(lines) < window:
        return []

    values = [line_hash(line.text) for line in lines]
    high = pow(BASE, window - 1, MODULUS)

    h = 0
    for v in values[:window]:
        h = (h * BASE + v) % MODULUS
    hashes = [h]

    for i in range(window, len(values)):
        h = ((h - values[i - window] * high) * BASE + values[i]) % MODULUS
        hashes.append(h)

    return hashes


class FingerprintIndex:
    """
    Groups window positions by content hash.

    Positions are (file id, start index) pairs, where the start index
    points into that file's list of SourceLine.
    """

    def __init__(self, window: int):
        self.window = window
        self.files = {}
        self._buckets = defaultdict(list)
        self._pruned = False

    def add_file(self, file_id: str, lines: list, hashes: list = None):
        """
        Add a file's lines, hashing its windows unless `hashes` is given
        (as produced by window_hashes in a worker process).
        """
        if file_id in self.files:
            raise ValueError(f"file already indexed: {file_id}")
        if hashes is None:
            hashes = window_hashes(lines, self.window)

        self.files[file_id] = lines
        for start, h in enumerate(hashes):
            self._buckets[h].append((file_id, start))
        self._pruned = False

    def lines(self, file_id: str) -> list:
        return self.files[file_id]

    def window_text(self, file_id: str, start: int) -> tuple:
        return tuple(line.text for line in self.files[file_id][start:start + self.window])

    def prune(self) -> int:
        """Drop singleton buckets. Returns the number of buckets left."""
        for h in [h for h, entries in self._buckets.items() if len(entries) < 2]:
            del self._buckets[h]
        self._pruned = True
        return len(self._buckets)

    def candidates(self) -> list:
        """
        Buckets with two or more windows, as (hash, positions) pairs sorted
        by hash, positions sorted by (file id, start index).
        """
        if not self._pruned:
            self.prune()
        return [(h, sorted(self._buckets[h])) for h in sorted(self._buckets)]

    @property
    def total_lines(self) -> int:
        return sum(len(lines) for lines in self.files.values())

    def __len__(self):
        return sum(len(entries) for entries in self._buckets.values())
