"""Candidate-vacancy matching engine."""

from vacancy_matching.matching.aggregate import aggregate, candidate_skill_relevance
from vacancy_matching.matching.cache import InMemoryMatchCache, MatchCache, SqlMatchCache
from vacancy_matching.matching.config import MatchingConfig, SynonymTable
from vacancy_matching.matching.engine import MatchingEngine, ScoredMatch
from vacancy_matching.matching.errors import (
    ConfigurationError,
    InvalidArgumentError,
    MatchingError,
    NotFoundError,
    PerCandidateScoringWarning,
)
from vacancy_matching.matching.explain import explain
from vacancy_matching.matching.ranking import RankingService, assign_strong_matches
from vacancy_matching.matching.repositories import (
    InMemoryVacancyRepository,
    SqlVacancyRepository,
    load_candidate_pool,
)
from vacancy_matching.matching.skill_matcher import SkillMatcher
from vacancy_matching.matching.statuses import InMemoryStatusStore, SqlStatusStore, StatusFilter
from vacancy_matching.matching.types import (
    DEFAULT_WEIGHTS,
    CandidateProfile,
    CandidateSkill,
    CriteriaScores,
    MatchResult,
    RankingPage,
    Relevance,
    SkillMatch,
    SkillMatchSource,
    VacancyProfile,
    VacancyWeights,
)

__all__ = [
    # Scoring
    "aggregate",
    "candidate_skill_relevance",
    "explain",
    "MatchingConfig",
    "MatchingEngine",
    "ScoredMatch",
    "SkillMatcher",
    "SynonymTable",
    # Ranking
    "RankingService",
    "assign_strong_matches",
    "StatusFilter",
    # Storage
    "MatchCache",
    "InMemoryMatchCache",
    "SqlMatchCache",
    "InMemoryStatusStore",
    "SqlStatusStore",
    "InMemoryVacancyRepository",
    "SqlVacancyRepository",
    "load_candidate_pool",
    # Types
    "CandidateProfile",
    "CandidateSkill",
    "CriteriaScores",
    "DEFAULT_WEIGHTS",
    "MatchResult",
    "RankingPage",
    "Relevance",
    "SkillMatch",
    "SkillMatchSource",
    "VacancyProfile",
    "VacancyWeights",
    # Errors
    "ConfigurationError",
    "InvalidArgumentError",
    "MatchingError",
    "NotFoundError",
    "PerCandidateScoringWarning",
]
