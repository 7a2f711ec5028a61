"""
cpdetect - Copy-Paste Code Detector

Finds blocks of code duplicated across the files of a source tree
(java, c, cpp, rust, javascript, python).
"""

__version__ = "0.1.0"

from .analyser import Analyser
from .clusters import ClusterBuilder, build_clusters
from .config import ScanConfig, SourceType
from .fingerprint import FingerprintIndex
from .models import Cluster, Occurrence, SourceLine
from .ranking import rank_clusters

__all__ = [
    "Analyser", "ClusterBuilder", "build_clusters", "ScanConfig", "SourceType",
    "FingerprintIndex", "Cluster", "Occurrence", "SourceLine", "rank_clusters",
]
