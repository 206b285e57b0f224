"""Read-only snapshots of candidates and vacancies.

Rows are converted into frozen CandidateProfile / VacancyProfile snapshots
before scoring so that a ranking call never touches a live ORM object.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from vacancy_matching.db import get_session
from vacancy_matching.matching.errors import ConfigurationError
from vacancy_matching.matching.types import (
    CandidateProfile,
    VacancyProfile,
    VacancyWeights,
    as_utc,
)
from vacancy_matching.models.candidates import Candidate
from vacancy_matching.models.enums import VacancyStatusEnum
from vacancy_matching.models.vacancies import Vacancy

logger = logging.getLogger(__name__)


def _as_tuple(value) -> tuple:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def candidate_profile_from_model(row: Candidate) -> CandidateProfile:
    return CandidateProfile(
        id=row.id,
        skills=_as_tuple(row.skills),
        location=row.location,
        years_experience=row.years_experience,
        job_title=row.job_title,
        past_role_title=row.past_role_title,
        education=row.education,
        industry=row.industry,
        first_name=row.first_name,
        last_name=row.last_name,
        company=row.company,
        company_location=row.company_location,
        title_description=row.title_description,
        profile_summary=row.profile_summary,
        durations=_as_tuple(row.durations),
        updated_at=as_utc(row.updated_at),
    )


def vacancy_profile_from_model(row: Vacancy) -> VacancyProfile:
    """Snapshot a vacancy row.

    Raises:
        ConfigurationError: the row's weights do not sum to 100.
    """
    try:
        weights = VacancyWeights(
            skills=row.skills_weight,
            location=row.location_weight,
            experience=row.experience_weight,
            title=row.title_weight,
            education=row.education_weight,
            industry=row.industry_weight,
        )
    except ConfigurationError as e:
        raise ConfigurationError(f"Vacancy {row.id}: {e}", actual_sum=e.actual_sum) from e

    return VacancyProfile(
        id=row.id,
        title=row.title,
        skills=_as_tuple(row.skills),
        location=row.location,
        experience_level=row.experience_level,
        education_level=row.education_level,
        industry=row.industry,
        organization=row.organization,
        weights=weights,
        updated_at=as_utc(row.updated_at),
    )


class VacancyRepository(Protocol):
    def get(self, vacancy_id: int) -> VacancyProfile | None: ...


class InMemoryVacancyRepository:
    def __init__(self, vacancies: Iterable[VacancyProfile] = ()):
        self._vacancies = {v.id: v for v in vacancies}

    def add(self, vacancy: VacancyProfile) -> None:
        self._vacancies[vacancy.id] = vacancy

    def get(self, vacancy_id):
        return self._vacancies.get(vacancy_id)


class SqlVacancyRepository:
    """Vacancies read from the ``vacancies`` table."""

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory

    def get(self, vacancy_id):
        session = self._session_factory()
        try:
            row = session.get(Vacancy, vacancy_id)
            return vacancy_profile_from_model(row) if row is not None else None
        finally:
            session.close()

    def open_vacancy_ids(self, updated_since: datetime | None = None) -> list[int]:
        stmt = select(Vacancy.id).where(Vacancy.status == VacancyStatusEnum.OPEN)
        if updated_since is not None:
            stmt = stmt.where(Vacancy.updated_at > updated_since)
        session = self._session_factory()
        try:
            return list(session.execute(stmt.order_by(Vacancy.id)).scalars())
        finally:
            session.close()


def load_candidate_pool(
    session_factory: Callable[[], Session] = get_session,
    candidate_ids: Iterable[int] | None = None,
) -> list[CandidateProfile]:
    """Snapshot every candidate, or only ``candidate_ids`` when given."""
    stmt = select(Candidate).order_by(Candidate.id)
    if candidate_ids is not None:
        stmt = stmt.where(Candidate.id.in_(list(candidate_ids)))
    session = session_factory()
    try:
        pool = [candidate_profile_from_model(row) for row in session.execute(stmt).scalars()]
    finally:
        session.close()
    logger.debug("Loaded %d candidate snapshots", len(pool))
    return pool


def candidates_updated_since(
    updated_since: datetime, session_factory: Callable[[], Session] = get_session
) -> int:
    """Number of candidates changed after ``updated_since``."""
    session = session_factory()
    try:
        return session.execute(
            select(func.count()).select_from(Candidate).where(Candidate.updated_at > updated_since)
        ).scalar_one()
    finally:
        session.close()
