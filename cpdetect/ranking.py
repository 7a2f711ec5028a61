"""
Ranking of clone clusters.
"""

from .errors import ConfigError


def rank_key(cluster) -> tuple:
    """Largest total duplication first, then longer blocks, then earliest location."""
    return (-cluster.size, -cluster.line_count, cluster.first.sort_key)


def rank_clusters(clusters: list, top: int) -> list:
    """
    Return the `top` largest clusters.

    Raises:
        ConfigError: if top is not a positive integer
    """
    if top <= 0:
        raise ConfigError(f"list-top-result must be a positive integer, got {top!r}")
    return sorted(clusters, key=rank_key)[:top]
