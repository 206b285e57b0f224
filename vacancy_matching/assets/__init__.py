"""Dagster assets for vacancy matching."""

from vacancy_matching.assets.matches import vacancy_matches, vacancy_partitions

__all__ = [
    "vacancy_matches",
    "vacancy_partitions",
]
