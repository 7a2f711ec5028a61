import pytest

from cpdetect.fingerprint import FingerprintIndex
from cpdetect.models import SourceLine


def source_lines(path: str, texts: list, char_counts: list = None) -> list:
    """SourceLines numbered from 1, one per text, original length = text length."""
    lines = []
    offset = 0
    for i, text in enumerate(texts):
        chars = char_counts[i] if char_counts else len(text)
        lines.append(SourceLine(path, i + 1, text, chars, offset))
        offset += chars + 1
    return lines


def code_block(tag: str, count: int) -> list:
    """Distinct statement-like lines, each well over 8 characters."""
    return [f"result_{tag}_{i} = compute_value({i}, '{tag}')" for i in range(count)]


def assert_disjoint(clusters: list):
    occurrences = [o for c in clusters for o in c.occurrences]
    for i, a in enumerate(occurrences):
        for b in occurrences[i + 1:]:
            overlapping = (
                a.path == b.path and a.start_line <= b.end_line and b.start_line <= a.end_line
            )
            assert not overlapping, f"{a} overlaps {b}"


@pytest.fixture
def make_index():
    def _make(files: dict, window: int) -> FingerprintIndex:
        index = FingerprintIndex(window)
        for path, texts in files.items():
            index.add_file(path, source_lines(path, texts))
        return index
    return _make
