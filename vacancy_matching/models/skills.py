"""Skills taxonomy models.

Aliases feed the matcher's synonym table: every alias is treated as a synonym
of its canonical skill and of the skill's other aliases.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vacancy_matching.models.base import Base
from vacancy_matching.models.enums import ReviewStatusEnum


class Skill(Base):
    """Canonical skill in the taxonomy.

    Example: "Kubernetes" is canonical, "K8s" is an alias.
    """

    __tablename__ = "skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)  # "Kubernetes"
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)  # "kubernetes"

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    created_by: Mapped[str] = mapped_column(String(50), default="seed")  # seed, manual, crm
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    review_status: Mapped[ReviewStatusEnum] = mapped_column(
        Enum(ReviewStatusEnum, name="review_status_enum"),
        default=ReviewStatusEnum.APPROVED,
    )

    aliases: Mapped[list["SkillAlias"]] = relationship(
        "SkillAlias", back_populates="skill", cascade="all, delete-orphan"
    )


class SkillAlias(Base):
    """Alias mapping to a canonical skill.

    Example: "K8s" -> Kubernetes, "Postgres" -> PostgreSQL
    """

    __tablename__ = "skill_aliases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    alias: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    skill_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("skills.id", ondelete="CASCADE"),
        nullable=False,
    )

    added_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    added_by: Mapped[str] = mapped_column(String(50), default="manual")  # seed, manual, crm

    skill: Mapped["Skill"] = relationship("Skill", back_populates="aliases")
