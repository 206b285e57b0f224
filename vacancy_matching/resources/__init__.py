"""Dagster resources for vacancy matching."""

from vacancy_matching.resources.matchmaking import MatchmakingResource

__all__ = [
    "MatchmakingResource",
]
