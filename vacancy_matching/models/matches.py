"""Cached match results."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vacancy_matching.models.base import Base


class CandidateVacancyMatch(Base):
    """Last computed match for a (candidate, vacancy) pair.

    ``breakdown`` holds the full MatchResult as JSON. The row is stale once
    either source record's ``updated_at`` is newer than ``calculated_at``.
    """

    __tablename__ = "candidate_vacancy_matches"
    __table_args__ = (
        UniqueConstraint("candidate_id", "vacancy_id", name="uq_candidate_vacancy"),
        CheckConstraint("match_score >= 0 AND match_score <= 100", name="ck_match_score_range"),
        Index("idx_matches_vacancy_score", "vacancy_id", "match_score"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    candidate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("candidates.id", ondelete="CASCADE"),
        nullable=False,
    )
    vacancy_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("vacancies.id", ondelete="CASCADE"),
        nullable=False,
    )

    match_score: Mapped[int] = mapped_column(Integer, nullable=False)
    breakdown: Mapped[dict] = mapped_column(JSON, nullable=False)
    calculated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    candidate: Mapped["Candidate"] = relationship("Candidate")
    vacancy: Mapped["Vacancy"] = relationship("Vacancy")


# Import for type hints
from vacancy_matching.models.candidates import Candidate  # noqa: E402
from vacancy_matching.models.vacancies import Vacancy  # noqa: E402
