"""Candidate records as kept by the back office.

The matching engine only reads these rows; they are written by the CRM sync
and CV parsing, which live outside this package.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from vacancy_matching.models.base import Base


class Candidate(Base):
    __tablename__ = "candidates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ═══════════════════════════════════════════════════════════════════
    # IDENTITY
    # ═══════════════════════════════════════════════════════════════════
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # ═══════════════════════════════════════════════════════════════════
    # CURRENT & PAST ROLE
    # ═══════════════════════════════════════════════════════════════════
    job_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    title_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    company: Mapped[str | None] = mapped_column(Text, nullable=True)
    company_location: Mapped[str | None] = mapped_column(Text, nullable=True)
    industry: Mapped[str | None] = mapped_column(Text, nullable=True)  # "branche" in the CRM
    current_role_duration: Mapped[str | None] = mapped_column(Text, nullable=True)  # "2 years 3 months"
    company_duration: Mapped[str | None] = mapped_column(Text, nullable=True)
    past_employer: Mapped[str | None] = mapped_column(Text, nullable=True)
    past_role_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    past_role_duration: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ═══════════════════════════════════════════════════════════════════
    # MATCHING ATTRIBUTES
    # ═══════════════════════════════════════════════════════════════════
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    skills: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    years_experience: Mapped[float | None] = mapped_column(Float, nullable=True)
    education: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    @property
    def durations(self) -> list[str]:
        return [
            d
            for d in (self.current_role_duration, self.company_duration, self.past_role_duration)
            if d
        ]
