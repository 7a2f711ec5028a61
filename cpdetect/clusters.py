"""
Clone cluster builder.

Turns candidate hash buckets into verified, maximal, non-overlapping
clusters of duplicated code.
"""

import bisect
import logging
from collections import defaultdict

from .models import Cluster, Occurrence

logger = logging.getLogger(__name__)


class ClaimedRanges:
    """Disjoint, sorted index ranges already reported for one file."""

    def __init__(self):
        self._starts = []
        self._ends = []

    def overlaps(self, start: int, end: int) -> bool:
        i = bisect.bisect_right(self._starts, end)
        # the range starting closest before `end` is the only candidate
        return i > 0 and self._ends[i - 1] >= start

    def claim(self, start: int, end: int):
        i = bisect.bisect_right(self._starts, start)
        self._starts.insert(i, start)
        self._ends.insert(i, end)


class ClusterBuilder:
    """
    Builds clusters from a FingerprintIndex.

    Seeds are pairs of windows whose normalized text is equal (the hash
    only nominates them). Each seed is extended into a maximal block
    (within one file, into disjoint tiles); blocks with equal text are
    unioned; overlaps are resolved in favour of longer blocks.
    """

    def __init__(self, index, min_line_count: int, min_char_count: int):
        self.index = index
        self.window = index.window
        self.min_line_count = min_line_count
        self.min_char_count = min_char_count
        self.stats = {'buckets': 0, 'collisions': 0, 'seeds': 0, 'blocks': 0}

    def build(self) -> list:
        """
        Returns:
            Clusters in construction order (longest blocks first)
        """
        blocks = self._extend_seeds()
        candidates = self._group_blocks(blocks)
        clusters = self._resolve_overlaps(candidates)

        logger.debug(
            "%d buckets, %d hash collisions, %d seeds, %d blocks, %d clusters",
            self.stats['buckets'], self.stats['collisions'], self.stats['seeds'],
            self.stats['blocks'], len(clusters)
        )
        return clusters

    def _verified_groups(self, positions: list) -> list:
        """Split a hash bucket into groups of windows with identical text."""
        groups = {}
        for file_id, start in positions:
            groups.setdefault(self.index.window_text(file_id, start), []).append((file_id, start))

        if len(groups) > 1:
            self.stats['collisions'] += len(groups) - 1
        return [group for group in groups.values() if len(group) > 1]

    def _extend_seeds(self) -> set:
        """Maximal blocks as (file_a, start_a, file_b, start_b, length) tuples."""
        blocks = set()
        # (file, distance) -> same-file runs already tiled on that diagonal
        runs = defaultdict(ClaimedRanges)

        for _, positions in self.index.candidates():
            self.stats['buckets'] += 1
            for group in self._verified_groups(positions):
                for i, (file_a, start_a) in enumerate(group):
                    for file_b, start_b in group[i + 1:]:
                        if file_a == file_b:
                            candidates = self._same_file_blocks(file_a, start_a, start_b, runs)
                        elif self._continues_previous(file_a, start_a, file_b, start_b):
                            continue
                        else:
                            self.stats['seeds'] += 1
                            candidates = [self._extend(file_a, start_a, file_b, start_b)]

                        blocks.update(b for b in candidates if self._meets_thresholds(b))

        self.stats['blocks'] = len(blocks)
        return blocks

    def _continues_previous(self, file_a: str, start_a: int, file_b: str, start_b: int) -> bool:
        """True if the seed one line earlier also matches, so extending it yields the same block."""
        if start_a == 0 or start_b == 0:
            return False
        lines_a = self.index.lines(file_a)
        lines_b = self.index.lines(file_b)
        return lines_a[start_a - 1].text == lines_b[start_b - 1].text

    def _extend(self, file_a: str, start_a: int, file_b: str, start_b: int) -> tuple:
        lines_a = self.index.lines(file_a)
        lines_b = self.index.lines(file_b)
        length = self.window

        while (start_a > 0 and start_b > 0
               and lines_a[start_a - 1].text == lines_b[start_b - 1].text):
            start_a -= 1
            start_b -= 1
            length += 1

        while (start_a + length < len(lines_a) and start_b + length < len(lines_b)
               and lines_a[start_a + length].text == lines_b[start_b + length].text):
            length += 1

        return (file_a, start_a, file_b, start_b, length)

    def _same_file_blocks(self, file_id: str, start_a: int, start_b: int, runs) -> list:
        """
        Blocks for a seed pair inside one file.

        The equal run along the diagonal `start_b - start_a` is found once
        and cut into tiles no longer than that distance, so the two copies
        of each tile stay disjoint. Seeds inside a run already tiled yield
        nothing.
        """
        distance = start_b - start_a
        if distance < self.window:
            return []
        diagonal = runs[(file_id, distance)]
        if diagonal.overlaps(start_a, start_a):
            return []

        self.stats['seeds'] += 1
        lines = self.index.lines(file_id)
        run_start = start_a
        while run_start > 0 and lines[run_start - 1].text == lines[run_start - 1 + distance].text:
            run_start -= 1
        run_end = start_a + self.window - 1
        while (run_end + 1 + distance < len(lines)
               and lines[run_end + 1].text == lines[run_end + 1 + distance].text):
            run_end += 1
        diagonal.claim(run_start, run_end)

        return [
            (file_id, s, file_id, s + distance, min(distance, run_end - s + 1))
            for s in range(run_start, run_end + 1, distance)
        ]

    def _char_count(self, file_id: str, start: int, length: int) -> int:
        return sum(line.char_count for line in self.index.lines(file_id)[start:start + length])

    def _meets_thresholds(self, block: tuple) -> bool:
        file_a, start_a, file_b, start_b, length = block
        if length < self.min_line_count:
            return False
        chars = max(self._char_count(file_a, start_a, length), self._char_count(file_b, start_b, length))
        return chars >= self.min_char_count

    def _group_blocks(self, blocks: set) -> list:
        """
        Union blocks with identical normalized text.

        Returns:
            List of (length, sorted positions) candidates
        """
        groups = defaultdict(set)
        for file_a, start_a, file_b, start_b, length in blocks:
            lines = self.index.lines(file_a)[start_a:start_a + length]
            key = tuple(line.text for line in lines)
            groups[key].add((file_a, start_a))
            groups[key].add((file_b, start_b))

        return [(len(key), sorted(positions)) for key, positions in groups.items()]

    def _occurrence(self, file_id: str, start: int, length: int) -> Occurrence:
        lines = self.index.lines(file_id)
        return Occurrence(
            path=file_id,
            start_line=lines[start].line_number,
            end_line=lines[start + length - 1].line_number,
            char_count=self._char_count(file_id, start, length),
        )

    def _resolve_overlaps(self, candidates: list) -> list:
        """
        Accept candidates longest first; drop occurrences that overlap
        anything already accepted. Only candidates left with two or more
        occurrences that still meet the character threshold become clusters.
        """
        prepared = []
        for length, positions in candidates:
            occurrences = [self._occurrence(f, s, length) for f, s in positions]
            max_chars = max(o.char_count for o in occurrences)
            prepared.append((length, max_chars, positions, occurrences))

        prepared.sort(key=lambda c: (-c[0], -c[1], c[3][0].sort_key))

        claimed = defaultdict(ClaimedRanges)
        clusters = []
        for length, _, positions, occurrences in prepared:
            kept = []
            local = defaultdict(ClaimedRanges)
            for (file_id, start), occurrence in zip(positions, occurrences):
                end = start + length - 1
                if claimed[file_id].overlaps(start, end) or local[file_id].overlaps(start, end):
                    continue
                local[file_id].claim(start, end)
                kept.append((file_id, start, end, occurrence))

            if len(kept) < 2:
                continue
            char_count = max(k[3].char_count for k in kept)
            if length < self.min_line_count or char_count < self.min_char_count:
                continue

            for file_id, start, end, _ in kept:
                claimed[file_id].claim(start, end)

            clusters.append(Cluster(
                line_count=length,
                char_count=char_count,
                occurrences=tuple(sorted((k[3] for k in kept), key=lambda o: o.sort_key)),
            ))

        return clusters


def build_clusters(index, min_line_count: int, min_char_count: int) -> list:
    """Convenience wrapper around ClusterBuilder."""
    return ClusterBuilder(index, min_line_count, min_char_count).build()
