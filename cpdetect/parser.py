"""
Source normalization using tree-sitter to locate comments.
"""

import logging
from functools import lru_cache
from pathlib import Path

import tree_sitter_c as tsc
import tree_sitter_cpp as tscpp
import tree_sitter_java as tsjava
import tree_sitter_javascript as tsjs
import tree_sitter_python as tspython
import tree_sitter_rust as tsrust
from tree_sitter import Language, Parser

from .config import SourceType
from .errors import ConfigError, SourceReadError
from .models import SourceLine

logger = logging.getLogger(__name__)

NEWLINE = 0x0A
SPACE = 0x20


class SourceNormalizer:
    """
    Turns a source file into its normalized lines.

    Comments are blanked out (newlines kept, so line numbers survive),
    whitespace runs collapse to a single space, and lines left empty are
    dropped. Subclasses only pick the grammar and the file extensions.
    """

    source_type = None
    EXTENSIONS = frozenset()

    def __init__(self):
        self.language = Language(self._grammar())
        self.parser = Parser(self.language)

    def _grammar(self):
        raise NotImplementedError

    def normalize(self, file_path, file_id: str = None) -> list:
        """
        Read and normalize a single file.

        Args:
            file_path: Path to the source file
            file_id: Identifier stored on each SourceLine (default: the path)

        Returns:
            List of SourceLine, in file order

        Raises:
            SourceReadError: if the file cannot be read
        """
        path = Path(file_path)
        file_id = file_id or str(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise SourceReadError(file_id, e.strerror or str(e)) from e
        return self.normalize_bytes(content, file_id)

    def normalize_bytes(self, content: bytes, file_id: str) -> list:
        code = self._strip_comments(content)

        lines = []
        offset = 0
        for line_number, (raw, stripped) in enumerate(zip(content.split(b'\n'), code.split(b'\n')), 1):
            text = ' '.join(stripped.decode('utf-8', errors='replace').split())
            if text:
                original = raw.rstrip(b'\r').decode('utf-8', errors='replace')
                lines.append(SourceLine(
                    path=file_id,
                    line_number=line_number,
                    text=text,
                    char_count=len(original),
                    offset=offset,
                ))
            offset += len(raw) + 1

        logger.debug("%s: %d normalized lines", file_id, len(lines))
        return lines

    def _strip_comments(self, content: bytes) -> bytes:
        spans = self._comment_spans(content)
        if not spans:
            return content

        buf = bytearray(content)
        for start, end in spans:
            for i in range(start, end):
                if buf[i] != NEWLINE:
                    buf[i] = SPACE
        return bytes(buf)

    def _comment_spans(self, content: bytes) -> list:
        """Byte ranges of every comment node in the file."""
        tree = self.parser.parse(content)

        spans = []
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            if 'comment' in node.type:
                spans.append((node.start_byte, node.end_byte))
                continue
            stack.extend(node.children)
        return spans


class JavaNormalizer(SourceNormalizer):
    source_type = SourceType.JAVA
    EXTENSIONS = frozenset({'.java'})

    def _grammar(self):
        return tsjava.language()


class CNormalizer(SourceNormalizer):
    source_type = SourceType.C
    EXTENSIONS = frozenset({'.c', '.h'})

    def _grammar(self):
        return tsc.language()


class CppNormalizer(SourceNormalizer):
    source_type = SourceType.CPP
    EXTENSIONS = frozenset({'.cpp', '.cc', '.cxx', '.hpp', '.hh', '.hxx', '.h'})

    def _grammar(self):
        return tscpp.language()


class RustNormalizer(SourceNormalizer):
    source_type = SourceType.RUST
    EXTENSIONS = frozenset({'.rs'})

    def _grammar(self):
        return tsrust.language()


class JavaScriptNormalizer(SourceNormalizer):
    source_type = SourceType.JAVASCRIPT
    EXTENSIONS = frozenset({'.js', '.mjs', '.cjs', '.jsx'})

    def _grammar(self):
        return tsjs.language()


class PythonNormalizer(SourceNormalizer):
    source_type = SourceType.PYTHON
    EXTENSIONS = frozenset({'.py'})

    def _grammar(self):
        return tspython.language()


NORMALIZERS = {
    cls.source_type: cls
    for cls in (
        JavaNormalizer, CNormalizer, CppNormalizer,
        RustNormalizer, JavaScriptNormalizer, PythonNormalizer,
    )
}


def normalizer_class(source_type: SourceType) -> type:
    try:
        return NORMALIZERS[source_type]
    except KeyError:
        raise ConfigError(f"no normalizer for source type {source_type!r}") from None


@lru_cache(maxsize=None)
def get_normalizer(source_type: SourceType) -> SourceNormalizer:
    """Shared normalizer per source type (one per process)."""
    return normalizer_class(source_type)()
