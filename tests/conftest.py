"""Shared fixtures: profile factories and an in-memory SQLite database."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vacancy_matching.matching.config import MatchingConfig, SynonymTable
from vacancy_matching.matching.types import CandidateProfile, VacancyProfile
from vacancy_matching.models import Base

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_candidate(candidate_id: int = 1, **overrides) -> CandidateProfile:
    fields = {
        "skills": ("Python", "Docker"),
        "location": "Amsterdam, Netherlands",
        "years_experience": 6,
        "job_title": "Senior Backend Engineer",
        "education": "Master of Computer Science",
        "industry": "Software",
        "first_name": "Alex",
        "last_name": f"Candidate{candidate_id}",
        "company": "Acme",
        "updated_at": T0,
    }
    fields.update(overrides)
    return CandidateProfile(id=candidate_id, **fields)


def make_vacancy(vacancy_id: int = 100, **overrides) -> VacancyProfile:
    fields = {
        "title": "Senior Backend Engineer",
        "skills": ("Python", "Docker", "Kubernetes"),
        "location": "Amsterdam",
        "experience_level": "senior",
        "education_level": "Bachelor",
        "industry": "Software",
        "organization": "Client BV",
        "updated_at": T0,
    }
    fields.update(overrides)
    return VacancyProfile(id=vacancy_id, **fields)


@pytest.fixture
def small_synonyms():
    return SynonymTable.from_mapping(
        {
            "javascript": ["js", "ecmascript"],
            "kubernetes": ["k8s"],
            "postgresql": ["postgres"],
        }
    )


@pytest.fixture
def config(small_synonyms):
    return MatchingConfig(synonyms=small_synonyms)


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session (and thread) of one test."""
    db_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def candidate_factory():
    return make_candidate


@pytest.fixture
def vacancy_factory():
    return make_vacancy
