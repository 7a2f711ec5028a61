"""
Source file discovery.
"""

import logging
from pathlib import Path

from .config import SourceType
from .parser import normalizer_class

logger = logging.getLogger(__name__)


def discover_sources(root_dir: str, source_type: SourceType, ignore_folders: tuple = ()) -> list:
    """
    Find source files of the given type under root_dir.

    Args:
        root_dir: Root directory to scan
        source_type: Selects the file extensions to keep
        ignore_folders: Folder names skipped at any depth (e.g. ("test", "node_modules"))

    Returns:
        Sorted list of resolved file paths
    """
    root = Path(root_dir).resolve()
    extensions = normalizer_class(source_type).EXTENSIONS
    ignored = set(ignore_folders)

    files = []
    for file_path in root.rglob('*'):
        if file_path.suffix not in extensions:
            continue
        try:
            if not file_path.is_file():
                continue
        except OSError as e:
            logger.warning("Skipping %s: %s", file_path, e)
            continue
        if _should_skip(file_path.relative_to(root), ignored):
            logger.debug("Ignoring %s", file_path)
            continue
        files.append(file_path)

    return sorted(files)


def source_id(root_dir: str, file_path: Path) -> str:
    """Stable identifier for a file: its POSIX path relative to the root."""
    root = Path(root_dir).resolve()
    try:
        return file_path.resolve().relative_to(root).as_posix()
    except ValueError:
        return file_path.as_posix()


def _should_skip(relative_path: Path, ignored: set) -> bool:
    """Check if any parent folder of the file is in the ignore list."""
    return any(part in ignored for part in relative_path.parts[:-1])
