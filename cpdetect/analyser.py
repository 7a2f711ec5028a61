"""
Main analyser - orchestrates discovery, normalization, fingerprinting and clustering.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from datetime import datetime
from pathlib import Path

import numpy as np

from .clusters import ClusterBuilder
from .config import ScanConfig
from .discovery import discover_sources, source_id
from .errors import SourceReadError
from .fingerprint import FingerprintIndex, window_hashes
from .parser import get_normalizer
from .ranking import rank_clusters

logger = logging.getLogger(__name__)


def _fingerprint_file(args):
    """Worker function to normalize and hash a single file (may run in a subprocess)."""
    file_path, file_id, source_type, window = args

    try:
        lines = get_normalizer(source_type).normalize(file_path, file_id)
    except SourceReadError as e:
        return {'file': file_id, 'status': 'error', 'error': e.reason}

    return {
        'file': file_id,
        'status': 'success',
        'lines': lines,
        'hashes': window_hashes(lines, window),
    }


class Analyser:
    """Copy-paste detector for a source tree."""

    def __init__(self, config: ScanConfig):
        self.config = config
        self.skipped = []
        self._last_index = None
        self._all_clusters = []

    def list_sources(self) -> list:
        """Source files that a scan would read, sorted."""
        return discover_sources(
            self.config.root, self.config.source_type, self.config.ignore_folders
        )

    def build_index(self, files: list) -> FingerprintIndex:
        """
        Normalize files and hash their windows into a FingerprintIndex.

        Unreadable files are skipped with a warning and recorded in
        self.skipped.
        """
        index = FingerprintIndex(self.config.min_line_count)
        tasks = [
            (str(f), source_id(self.config.root, Path(f)), self.config.source_type, index.window)
            for f in files
        ]

        if self.config.workers > 1 and len(tasks) > 1:
            with ProcessPoolExecutor(max_workers=self.config.workers) as executor:
                results = list(executor.map(_fingerprint_file, tasks, chunksize=16))
        else:
            results = [_fingerprint_file(t) for t in tasks]

        self.skipped = []
        for result in results:
            if result['status'] != 'success':
                logger.warning("Skipping %s: %s", result['file'], result['error'])
                self.skipped.append(result['file'])
                continue
            index.add_file(result['file'], result['lines'], result['hashes'])

        logger.info("Indexed %d windows from %d files", len(index), len(index.files))
        return index

    def detect(self, files: list) -> list:
        """
        Find and rank clone clusters among the given files.

        Returns:
            At most config.list_top_result clusters, largest first
        """
        index = self.build_index(files)
        builder = ClusterBuilder(index, self.config.min_line_count, self.config.min_char_count)
        clusters = builder.build()
        self._last_index = index
        self._all_clusters = clusters
        return rank_clusters(clusters, self.config.list_top_result)

    def analyse(self) -> dict:
        """
        Analyse the configured root for code duplication.

        Returns:
            Analysis result dict with metrics and ranked clusters
        """
        logger.info("Scanning codebase: %s", self.config.root)
        files = self.list_sources()
        logger.info("Found %d source files of %s", len(files), self.config.source_type)

        if not files:
            return self._empty_result()

        ranked = self.detect(files)
        return self._build_result(files, ranked)

    def _empty_result(self) -> dict:
        """Return empty result when no source files are found."""
        return {
            'root': str(self.config.root),
            'source_type': self.config.source_type.value,
            'timestamp': datetime.now().isoformat(),
            'config': self.config.to_dict(),
            'metrics': self._compute_metrics(0, 0, []),
            'size_distribution': {},
            'clusters': []
        }

    def _build_result(self, files: list, ranked: list) -> dict:
        """Build the analysis result dict."""
        metrics = self._compute_metrics(len(files), self._last_index.total_lines, self._all_clusters)

        return {
            'root': str(self.config.root),
            'source_type': self.config.source_type.value,
            'timestamp': datetime.now().isoformat(),
            'config': self.config.to_dict(),
            'metrics': metrics,
            'size_distribution': self._get_distribution(self._all_clusters),
            'clusters': [c.to_dict() for c in ranked]
        }

    def _compute_metrics(self, total_files: int, total_lines: int, clusters: list) -> dict:
        """Compute duplication metrics over every cluster, not only the reported ones."""
        duplicated = sum(c.size for c in clusters)
        return {
            'total_files': total_files,
            'skipped_files': len(self.skipped),
            'total_lines': total_lines,
            'duplicated_lines': duplicated,
            'duplication_ratio': duplicated / total_lines if total_lines > 0 else 0,
            'cluster_count': len(clusters),
        }

    def _get_distribution(self, clusters: list) -> dict:
        """Get cluster line count distribution stats."""
        if not clusters:
            return {}

        sizes = [c.line_count for c in clusters]
        return {
            'min': int(np.min(sizes)),
            'max': int(np.max(sizes)),
            'mean': float(np.mean(sizes)),
            'median': float(np.median(sizes)),
        }
