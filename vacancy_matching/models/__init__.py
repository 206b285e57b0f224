"""SQLAlchemy models for the vacancy matching database."""

from vacancy_matching.models.base import Base
from vacancy_matching.models.enums import (
    CandidateStatusEnum,
    ReviewStatusEnum,
    VacancyStatusEnum,
)
from vacancy_matching.models.skills import Skill, SkillAlias
from vacancy_matching.models.candidates import Candidate
from vacancy_matching.models.vacancies import WEIGHT_COLUMNS, Vacancy
from vacancy_matching.models.matches import CandidateVacancyMatch
from vacancy_matching.models.statuses import CandidateStatus

__all__ = [
    # Base
    "Base",
    # Enums
    "CandidateStatusEnum",
    "ReviewStatusEnum",
    "VacancyStatusEnum",
    # Skills
    "Skill",
    "SkillAlias",
    # Candidates & vacancies
    "Candidate",
    "Vacancy",
    "WEIGHT_COLUMNS",
    # Matching
    "CandidateVacancyMatch",
    "CandidateStatus",
]
