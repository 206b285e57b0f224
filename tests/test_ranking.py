"""Tests for the ranking & query service."""

from dataclasses import replace
from datetime import timedelta
from unittest.mock import patch

import pytest

from vacancy_matching.matching.cache import InMemoryMatchCache
from vacancy_matching.matching.engine import MatchingEngine
from vacancy_matching.matching.errors import InvalidArgumentError, NotFoundError
from vacancy_matching.matching.ranking import RankingService, assign_strong_matches, matches_search
from vacancy_matching.matching.repositories import InMemoryVacancyRepository
from vacancy_matching.matching.statuses import InMemoryStatusStore, StatusFilter
from vacancy_matching.matching.types import utcnow
from vacancy_matching.models.enums import CandidateStatusEnum


@pytest.fixture
def vacancy(vacancy_factory):
    return vacancy_factory()


@pytest.fixture
def statuses():
    return InMemoryStatusStore()


@pytest.fixture
def cache():
    return InMemoryMatchCache()


@pytest.fixture
def service(config, vacancy, cache, statuses):
    return RankingService(
        vacancies=InMemoryVacancyRepository([vacancy]),
        cache=cache,
        statuses=statuses,
        engine=MatchingEngine(config),
        max_workers=4,
    )


@pytest.fixture
def pool(candidate_factory):
    return [candidate_factory(i) for i in range(1, 24)]


class TestPagination:
    """Tests for paging through ranked results."""

    def test_last_page_is_partial(self, service, vacancy, pool):
        """Test that 23 candidates at 10 per page give 3 pages with 3 on the last."""
        ranking = service.rank(vacancy.id, pool, page=3, page_size=10)

        assert ranking.total == 23
        assert ranking.total_pages == 3
        assert len(ranking.results) == 3

    def test_ties_break_on_candidate_id(self, service, vacancy, pool):
        """Test that equal scores are ordered by ascending candidate id."""
        ranking = service.rank(vacancy.id, list(reversed(pool)), page=1, page_size=10)

        assert [r.candidate_id for r in ranking.results] == list(range(1, 11))

    def test_page_past_the_end_is_empty(self, service, vacancy, pool):
        """Test that a page beyond the last one returns no results."""
        ranking = service.rank(vacancy.id, pool, page=5, page_size=10)

        assert ranking.results == []
        assert ranking.total == 23

    def test_empty_pool(self, service, vacancy):
        """Test that an empty pool gives an empty first page."""
        ranking = service.rank(vacancy.id, [])

        assert ranking.total == 0
        assert ranking.total_pages == 0
        assert ranking.results == []


class TestOrdering:
    """Tests for score ordering and determinism."""

    def test_sorted_by_score_descending(self, service, vacancy, candidate_factory):
        """Test that better candidates come first."""
        weak = candidate_factory(1, skills=(), location="Tokyo", job_title="Chef", industry="Catering")
        strong = candidate_factory(2)

        ranking = service.rank(vacancy.id, [weak, strong])

        assert [r.candidate_id for r in ranking.results] == [2, 1]
        assert ranking.results[0].overall_score > ranking.results[1].overall_score

    def test_same_input_same_output(self, config, vacancy, pool):
        """Test that two independent rankings agree on order, scores and text."""

        def ranked():
            service = RankingService(
                InMemoryVacancyRepository([vacancy]), InMemoryMatchCache(), engine=MatchingEngine(config)
            )
            page = service.rank(vacancy.id, pool, page_size=50)
            return [(r.candidate_id, r.overall_score, r.explanation) for r in page.results]

        assert ranked() == ranked()

    def test_single_worker(self, config, vacancy, pool):
        """Test that ranking without a thread pool gives the same result."""
        service = RankingService(
            InMemoryVacancyRepository([vacancy]),
            InMemoryMatchCache(),
            engine=MatchingEngine(config),
            max_workers=1,
        )

        assert service.rank(vacancy.id, pool).total == 23

    def test_duplicate_candidates_counted_once(self, service, vacancy, candidate_factory):
        """Test that a candidate listed twice appears once."""
        candidate = candidate_factory(7)

        assert service.rank(vacancy.id, [candidate, candidate]).total == 1

    def test_min_score(self, service, vacancy, candidate_factory):
        """Test that results below min_score are dropped."""
        weak = candidate_factory(1, skills=(), location="Tokyo", job_title="Chef", industry="Catering")
        strong = candidate_factory(2)

        ranking = service.rank(vacancy.id, [weak, strong], min_score=70)

        assert [r.candidate_id for r in ranking.results] == [2]


class TestFiltering:
    """Tests for the search and status filters."""

    def test_not_a_match_hidden_from_todo(self, service, vacancy, pool, statuses):
        """Test that a rejected candidate is hidden by default and shown under 'all'."""
        statuses.set_status(5, vacancy.id, CandidateStatusEnum.NOT_A_MATCH)

        todo = service.rank(vacancy.id, pool, page_size=50, status="todo")
        everyone = service.rank(vacancy.id, pool, page_size=50, status=StatusFilter.ALL)

        assert 5 not in [r.candidate_id for r in todo.results]
        assert todo.total == 22
        assert 5 in [r.candidate_id for r in everyone.results]
        assert everyone.total == 23

    def test_status_does_not_change_score(self, service, vacancy, pool, statuses):
        """Test that filtering never alters a candidate's score."""
        before = service.rank(vacancy.id, pool, page_size=50, status="all")
        statuses.set_status(5, vacancy.id, CandidateStatusEnum.TODO)
        after = service.rank(vacancy.id, pool, page_size=50, status="all")

        assert [r.overall_score for r in before.results] == [r.overall_score for r in after.results]

    def test_search_by_name_and_company(self, service, vacancy, candidate_factory):
        """Test case-insensitive search over name, company and titles."""
        pool = [
            candidate_factory(1, first_name="Maria", company="Initech"),
            candidate_factory(2, first_name="Bob", company="Globex"),
        ]

        assert [r.candidate_id for r in service.rank(vacancy.id, pool, search="maria").results] == [1]
        assert [r.candidate_id for r in service.rank(vacancy.id, pool, search="GLOBEX").results] == [2]
        assert service.rank(vacancy.id, pool, search="nobody").total == 0

    def test_blank_search_matches_everyone(self, candidate_factory):
        """Test that an empty search term filters nothing."""
        assert matches_search(candidate_factory(), "  ")
        assert matches_search(candidate_factory(), None)


class TestErrors:
    """Tests for invalid requests."""

    def test_unknown_vacancy(self, service, pool):
        """Test that an unknown vacancy raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            service.rank(999, pool)
        assert exc_info.value.vacancy_id == 999

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"page": 0},
            {"page": -1},
            {"page": True},
            {"page": "2"},
            {"page_size": 0},
            {"page_size": 2.5},
            {"status": "maybe"},
        ],
    )
    def test_invalid_arguments(self, service, vacancy, pool, kwargs):
        """Test that bad pagination or status values are rejected."""
        with pytest.raises(InvalidArgumentError):
            service.rank(vacancy.id, pool, **kwargs)

    def test_invalid_arguments_checked_before_lookup(self, service, pool):
        """Test that argument errors win over a missing vacancy."""
        with pytest.raises(InvalidArgumentError):
            service.rank(999, pool, page=0)


class TestDiagnostics:
    """Tests for per-candidate scoring problems."""

    def test_bad_candidate_reported_not_fatal(self, service, vacancy, candidate_factory, cache):
        """Test that a malformed candidate is ranked with a diagnostic and not cached."""
        good = candidate_factory(1)
        bad = candidate_factory(2, years_experience="ten")

        ranking = service.rank(vacancy.id, [good, bad])

        assert ranking.total == 2
        assert [(d.candidate_id, d.criterion) for d in ranking.diagnostics] == [(2, "experience")]
        assert ranking.to_dict()["diagnostics"][0]["candidateId"] == 2
        assert cache.get(1, vacancy.id) is not None
        assert cache.get(2, vacancy.id) is None

    def test_diagnostics_repeat_on_every_call(self, service, vacancy, candidate_factory):
        """Test that a degraded result is rescored, so its warning shows up again."""
        bad = candidate_factory(2, years_experience="ten")

        service.rank(vacancy.id, [bad])
        again = service.rank(vacancy.id, [bad])

        assert len(again.diagnostics) == 1

    def test_unexpected_error_type_is_not_fatal(self, service, vacancy, candidate_factory):
        """Test that an error outside the usual data errors is still contained to one candidate."""
        good = candidate_factory(1)
        huge = candidate_factory(2, years_experience=10**400)

        ranking = service.rank(vacancy.id, [good, huge])

        assert ranking.total == 2
        assert [(d.candidate_id, d.criterion) for d in ranking.diagnostics] == [(2, "experience")]


class TestCaching:
    """Tests for cache reuse and invalidation by timestamp."""

    def test_second_ranking_reuses_cache(self, service, vacancy, pool, cache):
        """Test that fresh cache entries are not rescored."""
        service.rank(vacancy.id, pool)
        assert len(cache) == 23

        with patch.object(MatchingEngine, "score", side_effect=AssertionError("rescored")):
            ranking = service.rank(vacancy.id, pool)

        assert ranking.total == 23

    def test_updated_candidate_is_rescored(self, config, vacancy, pool, cache, candidate_factory):
        """Test that a candidate changed after the calculation is scored again."""
        engine = MatchingEngine(config)
        service = RankingService(InMemoryVacancyRepository([vacancy]), cache, engine=engine)
        service.rank(vacancy.id, pool)

        changed = candidate_factory(3, updated_at=utcnow() + timedelta(hours=1))
        pool = [changed if c.id == 3 else c for c in pool]
        with patch.object(engine, "score", wraps=engine.score) as score:
            service.rank(vacancy.id, pool)

        assert score.call_count == 1
        assert score.call_args.args[0].id == 3

    def test_updated_vacancy_rescored_everyone(self, config, vacancy, pool, cache):
        """Test that a vacancy change invalidates every pair for it."""
        engine = MatchingEngine(config)
        service = RankingService(InMemoryVacancyRepository([vacancy]), cache, engine=engine)
        service.rank(vacancy.id, pool)

        repository = InMemoryVacancyRepository([vacancy])
        repository.add(replace(vacancy, updated_at=utcnow() + timedelta(hours=1)))
        service = RankingService(repository, cache, engine=engine, max_workers=1)
        with patch.object(engine, "score", wraps=engine.score) as score:
            service.rank(vacancy.id, pool)

        assert score.call_count == 23

    def test_results_stamped_with_snapshot_time(self, config, vacancy, cache, candidate_factory):
        """Test that an update after the pool was read makes the new result stale."""
        engine = MatchingEngine(config)
        service = RankingService(InMemoryVacancyRepository([vacancy]), cache, engine=engine)
        as_of = utcnow() - timedelta(minutes=5)

        service.rank(vacancy.id, [candidate_factory(1)], as_of=as_of)
        assert cache.get(1, vacancy.id).calculated_at == as_of

        changed = candidate_factory(1, updated_at=as_of + timedelta(minutes=1))
        with patch.object(engine, "score", wraps=engine.score) as score:
            service.rank(vacancy.id, [changed])

        assert score.call_count == 1


class TestAssignStrongMatches:
    """Tests for auto-assigning strong matches to the todo list."""

    def test_only_strong_matches_without_status(self, service, vacancy, candidate_factory, statuses):
        """Test that strong, unreviewed candidates are put into todo."""
        weak = candidate_factory(1, skills=(), location="Tokyo", job_title="Chef", industry="Catering")
        strong = candidate_factory(2)
        reviewed = candidate_factory(3)
        statuses.set_status(3, vacancy.id, CandidateStatusEnum.NOT_A_MATCH)
        ranking = service.rank(vacancy.id, [weak, strong, reviewed], status="all")

        assigned = assign_strong_matches(vacancy.id, ranking.results, statuses)

        assert assigned == [2]
        assert statuses.statuses_for_vacancy(vacancy.id) == {
            2: CandidateStatusEnum.TODO,
            3: CandidateStatusEnum.NOT_A_MATCH,
        }
