"""Value types passed between the matcher, scorers, cache and ranking service.

Everything here is a frozen dataclass: candidate and vacancy snapshots are
read-only for the duration of a ranking call, and a MatchResult is never
mutated once computed.
"""

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from vacancy_matching.matching.errors import ConfigurationError

CRITERIA = ("skills", "location", "experience", "title", "education", "industry")


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps (SQLite drops tzinfo on the way back)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Relevance(str, enum.Enum):
    """Relevance tier derived from a similarity score."""

    STRONG = "strong"
    PARTIAL = "partial"
    WEAK = "weak"

    @classmethod
    def from_similarity(cls, similarity: int, strong: int = 70, partial: int = 40) -> "Relevance":
        if similarity >= strong:
            return cls.STRONG
        if similarity >= partial:
            return cls.PARTIAL
        return cls.WEAK


class SkillMatchSource(str, enum.Enum):
    """Which matcher stage produced a SkillMatch."""

    DIRECT = "direct"
    SYNONYM = "synonym"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class CandidateSkill:
    """A candidate skill plus where on the profile it was found."""

    name: str
    location: str | None = None
    context: str | None = None


@dataclass(frozen=True)
class SkillMatch:
    skill: str
    similarity: int
    relevance: Relevance
    source: SkillMatchSource
    matched_skill: str | None = None
    source_location: str | None = None
    source_context: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "skill": self.skill,
            "similarity": self.similarity,
            "relevance": self.relevance.value,
            "source": self.source.value,
            "matchedSkill": self.matched_skill,
            "sourceLocation": self.source_location,
            "sourceContext": self.source_context,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SkillMatch":
        return cls(
            skill=data["skill"],
            similarity=int(data["similarity"]),
            relevance=Relevance(data["relevance"]),
            source=SkillMatchSource(data["source"]),
            matched_skill=data.get("matchedSkill"),
            source_location=data.get("sourceLocation"),
            source_context=data.get("sourceContext"),
        )


@dataclass(frozen=True)
class CriteriaScores:
    """Per-criterion sub-scores, each 0-100."""

    skills: int = 0
    location: int = 0
    experience: int = 0
    title: int = 0
    education: int = 0
    industry: int = 0

    def __post_init__(self):
        for name in CRITERIA:
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} score must be within 0-100, got {value}")

    def as_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in CRITERIA}


@dataclass(frozen=True)
class VacancyWeights:
    """Importance of each criterion for one vacancy.

    Each weight is an integer in [0, 100] and the six must add up to exactly
    100. Construction fails with ConfigurationError otherwise.
    """

    skills: int
    location: int
    experience: int
    title: int
    education: int
    industry: int

    def __post_init__(self):
        for name in CRITERIA:
            value = getattr(self, name)
            if not isinstance(value, int) or not 0 <= value <= 100:
                raise ConfigurationError(f"Weight '{name}' must be an integer within 0-100, got {value!r}")
        total = self.total
        if total != 100:
            raise ConfigurationError(
                f"Vacancy weights must sum to 100, got {total}", actual_sum=total
            )

    @property
    def total(self) -> int:
        return sum(getattr(self, name) for name in CRITERIA)

    @classmethod
    def from_mapping(cls, weights: Mapping[str, int]) -> "VacancyWeights":
        missing = [name for name in CRITERIA if name not in weights]
        if missing:
            raise ConfigurationError(f"Missing weights: {', '.join(missing)}")
        return cls(**{name: weights[name] for name in CRITERIA})

    def as_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in CRITERIA}


DEFAULT_WEIGHTS = VacancyWeights(
    skills=40, location=25, experience=15, title=10, education=5, industry=5
)


@dataclass(frozen=True)
class CandidateProfile:
    """Read-only candidate snapshot used for one ranking call."""

    id: int
    skills: tuple[str, ...] = ()
    location: str | None = None
    years_experience: float | None = None
    job_title: str | None = None
    past_role_title: str | None = None
    education: str | None = None
    industry: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    company_location: str | None = None
    title_description: str | None = None
    profile_summary: str | None = None
    durations: tuple[str, ...] = ()
    updated_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@dataclass(frozen=True)
class VacancyProfile:
    """Read-only vacancy snapshot used for one ranking call."""

    id: int
    title: str | None = None
    skills: tuple[str, ...] = ()
    location: str | None = None
    experience_level: str | None = None
    education_level: str | None = None
    industry: str | None = None
    organization: str | None = None
    weights: VacancyWeights = DEFAULT_WEIGHTS
    updated_at: datetime | None = None


@dataclass(frozen=True)
class MatchResult:
    candidate_id: int
    vacancy_id: int
    overall_score: int
    criteria: CriteriaScores
    skill_matches: tuple[SkillMatch, ...]
    candidate_skill_relevance: tuple[SkillMatch, ...]
    explanation: str
    calculated_at: datetime = field(default_factory=utcnow)

    @property
    def matched_skills(self) -> list[str]:
        return [m.skill for m in self.skill_matches if m.relevance is not Relevance.WEAK]

    @property
    def missing_skills(self) -> list[str]:
        return [m.skill for m in self.skill_matches if m.relevance is Relevance.WEAK]

    @property
    def label(self) -> str:
        if self.overall_score >= 70:
            return "Strong Match"
        if self.overall_score >= 40:
            return "Moderate Match"
        return "Weak Match"

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidateId": self.candidate_id,
            "vacancyId": self.vacancy_id,
            "overallScore": self.overall_score,
            "criteriaScores": self.criteria.as_dict(),
            "skillMatches": [m.to_dict() for m in self.skill_matches],
            "candidateSkillRelevance": [m.to_dict() for m in self.candidate_skill_relevance],
            "explanation": self.explanation,
            "label": self.label,
            "calculatedAt": self.calculated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MatchResult":
        return cls(
            candidate_id=data["candidateId"],
            vacancy_id=data["vacancyId"],
            overall_score=int(data["overallScore"]),
            criteria=CriteriaScores(**data["criteriaScores"]),
            skill_matches=tuple(SkillMatch.from_dict(m) for m in data["skillMatches"]),
            candidate_skill_relevance=tuple(
                SkillMatch.from_dict(m) for m in data["candidateSkillRelevance"]
            ),
            explanation=data["explanation"],
            calculated_at=as_utc(datetime.fromisoformat(data["calculatedAt"])),
        )


@dataclass(frozen=True)
class RankingPage:
    results: list[MatchResult]
    total: int
    total_pages: int
    page: int
    page_size: int
    diagnostics: list = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "total": self.total,
            "totalPages": self.total_pages,
            "page": self.page,
            "pageSize": self.page_size,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }

