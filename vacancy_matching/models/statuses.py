"""Reviewer decisions per (candidate, vacancy)."""

from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from vacancy_matching.models.base import Base
from vacancy_matching.models.enums import CandidateStatusEnum


class CandidateStatus(Base):
    """Used only to filter ranked results, never as scoring input."""

    __tablename__ = "candidate_statuses"
    __table_args__ = (
        UniqueConstraint("candidate_id", "vacancy_id", name="uq_candidate_status_pair"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    candidate_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False
    )
    vacancy_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("vacancies.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[CandidateStatusEnum] = mapped_column(
        Enum(CandidateStatusEnum, name="candidate_status_enum"), default=CandidateStatusEnum.TODO
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_by: Mapped[str] = mapped_column(String(50), default="reviewer")  # reviewer, auto

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
