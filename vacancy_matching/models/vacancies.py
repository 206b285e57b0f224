"""Vacancy records with per-vacancy matching weights."""

from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, DateTime, Enum, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from vacancy_matching.models.base import Base
from vacancy_matching.models.enums import VacancyStatusEnum

WEIGHT_COLUMNS = (
    "skills_weight",
    "location_weight",
    "experience_weight",
    "title_weight",
    "education_weight",
    "industry_weight",
)


class Vacancy(Base):
    """Open job requisition.

    Weights are validated to sum to 100 when the row is turned into a
    matching snapshot, not by the database: a broken weight set must reach
    the ranking request as a ConfigurationError carrying the actual sum.
    """

    __tablename__ = "vacancies"
    __table_args__ = tuple(
        CheckConstraint(f"{column} >= 0 AND {column} <= 100", name=f"ck_vacancy_{column}_range")
        for column in WEIGHT_COLUMNS
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    organization: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[VacancyStatusEnum] = mapped_column(
        Enum(VacancyStatusEnum, name="vacancy_status_enum"), default=VacancyStatusEnum.OPEN
    )

    # ═══════════════════════════════════════════════════════════════════
    # REQUIREMENTS
    # ═══════════════════════════════════════════════════════════════════
    skills: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    experience_level: Mapped[str | None] = mapped_column(String(50), nullable=True)  # junior, mid-level, senior...
    education_level: Mapped[str | None] = mapped_column(String(100), nullable=True)
    industry: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ═══════════════════════════════════════════════════════════════════
    # MATCHING WEIGHTS (percent, sum to 100)
    # ═══════════════════════════════════════════════════════════════════
    skills_weight: Mapped[int] = mapped_column(Integer, default=40, nullable=False)
    location_weight: Mapped[int] = mapped_column(Integer, default=25, nullable=False)
    experience_weight: Mapped[int] = mapped_column(Integer, default=15, nullable=False)
    title_weight: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    education_weight: Mapped[int] = mapped_column(Integer, default=5, nullable=False)
    industry_weight: Mapped[int] = mapped_column(Integer, default=5, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
