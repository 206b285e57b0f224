"""Create vacancy matching tables.

Revision ID: 20261019_matching
Revises:
Create Date: 2026-10-19

Creates the skills taxonomy, candidates, vacancies (with per-vacancy
weights), the match cache and reviewer statuses.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "20261019_matching"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

WEIGHT_DEFAULTS = {
    "skills_weight": 40,
    "location_weight": 25,
    "experience_weight": 15,
    "title_weight": 10,
    "education_weight": 5,
    "industry_weight": 5,
}


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    review_status_enum = sa.Enum("PENDING", "APPROVED", "REJECTED", name="review_status_enum")
    vacancy_status_enum = sa.Enum("OPEN", "ON_HOLD", "FILLED", "CLOSED", name="vacancy_status_enum")
    candidate_status_enum = sa.Enum("TODO", "NOT_A_MATCH", name="candidate_status_enum")

    op.create_table(
        "skills",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False, unique=True),
        sa.Column("slug", sa.String(100), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("created_by", sa.String(50)),
        sa.Column("is_active", sa.Boolean()),
        sa.Column("review_status", review_status_enum),
    )
    op.create_table(
        "skill_aliases",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("alias", sa.Text(), nullable=False, unique=True),
        sa.Column(
            "skill_id", sa.Integer(), sa.ForeignKey("skills.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("added_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("added_by", sa.String(50)),
    )

    op.create_table(
        "candidates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("job_title", sa.Text(), nullable=True),
        sa.Column("title_description", sa.Text(), nullable=True),
        sa.Column("profile_summary", sa.Text(), nullable=True),
        sa.Column("company", sa.Text(), nullable=True),
        sa.Column("company_location", sa.Text(), nullable=True),
        sa.Column("industry", sa.Text(), nullable=True),
        sa.Column("current_role_duration", sa.Text(), nullable=True),
        sa.Column("company_duration", sa.Text(), nullable=True),
        sa.Column("past_employer", sa.Text(), nullable=True),
        sa.Column("past_role_title", sa.Text(), nullable=True),
        sa.Column("past_role_duration", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("skills", sa.JSON(), nullable=True),
        sa.Column("years_experience", sa.Float(), nullable=True),
        sa.Column("education", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_candidates_updated_at", "candidates", ["updated_at"])

    op.create_table(
        "vacancies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("organization", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", vacancy_status_enum),
        sa.Column("skills", sa.JSON(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("experience_level", sa.String(50), nullable=True),
        sa.Column("education_level", sa.String(100), nullable=True),
        sa.Column("industry", sa.Text(), nullable=True),
        *[
            sa.Column(column, sa.Integer(), nullable=False, server_default=str(default))
            for column, default in WEIGHT_DEFAULTS.items()
        ],
        *_timestamps(),
        *[
            sa.CheckConstraint(
                f"{column} >= 0 AND {column} <= 100", name=f"ck_vacancy_{column}_range"
            )
            for column in WEIGHT_DEFAULTS
        ],
    )
    op.create_index("idx_vacancies_status_updated", "vacancies", ["status", "updated_at"])

    op.create_table(
        "candidate_vacancy_matches",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "candidate_id",
            sa.Integer(),
            sa.ForeignKey("candidates.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "vacancy_id",
            sa.Integer(),
            sa.ForeignKey("vacancies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("match_score", sa.Integer(), nullable=False),
        sa.Column("breakdown", sa.JSON(), nullable=False),
        sa.Column("calculated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("candidate_id", "vacancy_id", name="uq_candidate_vacancy"),
        sa.CheckConstraint("match_score >= 0 AND match_score <= 100", name="ck_match_score_range"),
    )
    op.create_index(
        "idx_matches_vacancy_score", "candidate_vacancy_matches", ["vacancy_id", "match_score"]
    )

    op.create_table(
        "candidate_statuses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "candidate_id",
            sa.Integer(),
            sa.ForeignKey("candidates.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "vacancy_id",
            sa.Integer(),
            sa.ForeignKey("vacancies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", candidate_status_enum),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("assigned_by", sa.String(50)),
        *_timestamps(),
        sa.UniqueConstraint("candidate_id", "vacancy_id", name="uq_candidate_status_pair"),
    )


def downgrade() -> None:
    op.drop_table("candidate_statuses")
    op.drop_index("idx_matches_vacancy_score", table_name="candidate_vacancy_matches")
    op.drop_table("candidate_vacancy_matches")
    op.drop_index("idx_vacancies_status_updated", table_name="vacancies")
    op.drop_table("vacancies")
    op.drop_index("idx_candidates_updated_at", table_name="candidates")
    op.drop_table("candidates")
    op.drop_table("skill_aliases")
    op.drop_table("skills")

    sa.Enum(name="candidate_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="vacancy_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="review_status_enum").drop(op.get_bind(), checkfirst=True)
