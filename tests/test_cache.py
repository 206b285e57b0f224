"""Tests for the in-memory and SQL match caches."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from vacancy_matching.matching.cache import InMemoryMatchCache, SqlMatchCache
from vacancy_matching.matching.errors import InvalidArgumentError
from vacancy_matching.matching.types import (
    CriteriaScores,
    MatchResult,
    Relevance,
    SkillMatch,
    SkillMatchSource,
)
from vacancy_matching.models import CandidateVacancyMatch

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_result(candidate_id=1, vacancy_id=100, score=80, calculated_at=T0 + timedelta(hours=1)):
    match = SkillMatch(
        skill="Python",
        similarity=100,
        relevance=Relevance.STRONG,
        source=SkillMatchSource.DIRECT,
        matched_skill="Python",
        source_location="Listed Skills",
    )
    return MatchResult(
        candidate_id=candidate_id,
        vacancy_id=vacancy_id,
        overall_score=score,
        criteria=CriteriaScores(skills=score, location=score),
        skill_matches=(match,),
        candidate_skill_relevance=(match,),
        explanation="Strong skills and location match; 1 of 1 required skills matched (1 direct).",
        calculated_at=calculated_at,
    )


@pytest.fixture(params=["memory", "sql"])
def cache(request, session_factory):
    if request.param == "memory":
        return InMemoryMatchCache()
    return SqlMatchCache(session_factory)


class TestMatchCache:
    """Behaviour shared by both cache implementations."""

    def test_get_missing_returns_none(self, cache):
        """Test that an unknown pair is absent."""
        assert cache.get(1, 100) is None

    def test_put_then_get(self, cache):
        """Test that a stored result is returned unchanged."""
        result = make_result()
        cache.put(result)

        cached = cache.get(1, 100, not_before=T0)

        assert cached is not None
        assert cached.to_dict() == result.to_dict()

    def test_entry_older_than_source_record_is_absent(self, cache):
        """Test that an update after the calculation makes the entry stale."""
        cache.put(make_result())

        assert cache.get(1, 100, not_before=T0 + timedelta(hours=2)) is None

    def test_entry_calculated_at_update_time_is_fresh(self, cache):
        """Test that calculated_at equal to updated_at still counts as fresh."""
        result = make_result()
        cache.put(result)

        assert cache.get(1, 100, not_before=result.calculated_at) is not None

    def test_put_overwrites_pair(self, cache):
        """Test that a newer result replaces the stored one."""
        cache.put(make_result(score=50))
        cache.put(make_result(score=90, calculated_at=T0 + timedelta(hours=3)))

        assert cache.get(1, 100).overall_score == 90

    def test_get_many_filters_stale_entries(self, cache):
        """Test bulk lookup with per-candidate freshness bounds."""
        cache.put(make_result(candidate_id=1))
        cache.put(make_result(candidate_id=2))
        cache.put(make_result(candidate_id=3, vacancy_id=200))

        found = cache.get_many(100, {1: T0, 2: T0 + timedelta(days=1), 3: None})

        assert list(found) == [1]

    def test_invalidate_by_vacancy(self, cache):
        """Test that invalidation removes only the vacancy's entries."""
        cache.put(make_result(candidate_id=1))
        cache.put(make_result(candidate_id=2))
        cache.put(make_result(candidate_id=1, vacancy_id=200))

        assert cache.invalidate(vacancy_id=100) == 2
        assert cache.get(1, 100) is None
        assert cache.get(1, 200) is not None

    def test_invalidate_by_candidate(self, cache):
        """Test that invalidation by candidate spans vacancies."""
        cache.put(make_result(candidate_id=1))
        cache.put(make_result(candidate_id=1, vacancy_id=200))

        assert cache.invalidate(candidate_id=1) == 2

    def test_invalidate_needs_a_key(self, cache):
        """Test that invalidating everything by accident is refused."""
        with pytest.raises(InvalidArgumentError):
            cache.invalidate()


class TestInMemoryMatchCache:
    """Tests specific to the in-memory cache."""

    def test_older_write_does_not_replace_newer(self):
        """Test that a late duplicate write keeps the newer entry."""
        cache = InMemoryMatchCache()
        cache.put(make_result(score=90, calculated_at=T0 + timedelta(hours=3)))
        cache.put(make_result(score=50, calculated_at=T0 + timedelta(hours=1)))

        assert cache.get(1, 100).overall_score == 90
        assert len(cache) == 1


class TestSqlMatchCache:
    """Tests specific to the SQL cache."""

    def test_row_columns(self, session_factory):
        """Test that score and breakdown are persisted."""
        SqlMatchCache(session_factory).put(make_result(score=64))

        session = session_factory()
        row = session.execute(select(CandidateVacancyMatch)).scalar_one()
        session.close()
        assert row.match_score == 64
        assert row.breakdown["candidateId"] == 1
        assert row.breakdown["skillMatches"][0]["source"] == "direct"

    def test_naive_timestamps_read_back_as_utc(self, session_factory):
        """Test that calculated_at comes back timezone-aware."""
        cache = SqlMatchCache(session_factory)
        cache.put(make_result())

        assert cache.get(1, 100).calculated_at.tzinfo is not None
