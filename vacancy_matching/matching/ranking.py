"""Ranking & query service: the entry point for listing matches of a vacancy.

For each candidate in the pool the service reuses a fresh cached MatchResult
or scores the pair, then filters, sorts (score descending, candidate id
ascending) and paginates. Scoring of cache misses fans out over a bounded
thread pool; every pair is independent so the order of completion does not
matter.
"""

import logging
import math
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from vacancy_matching.matching.cache import MatchCache
from vacancy_matching.matching.engine import MatchingEngine, ScoredMatch
from vacancy_matching.matching.errors import InvalidArgumentError, NotFoundError
from vacancy_matching.matching.repositories import VacancyRepository
from vacancy_matching.matching.statuses import CandidateStatusStore, StatusFilter
from vacancy_matching.matching.text import normalize
from vacancy_matching.matching.types import (
    CandidateProfile,
    MatchResult,
    RankingPage,
    VacancyProfile,
    as_utc,
    utcnow,
)
from vacancy_matching.models.enums import CandidateStatusEnum

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_MAX_WORKERS = 4
STRONG_MATCH_SCORE = 70


def matches_search(candidate: CandidateProfile, search: str | None) -> bool:
    """Case-insensitive substring match over name, company and titles."""
    term = normalize(search)
    if not term:
        return True
    haystacks = (
        candidate.full_name,
        candidate.company,
        candidate.job_title,
        candidate.past_role_title,
    )
    return any(term in normalize(h) for h in haystacks)


def _newest(*timestamps: datetime | None) -> datetime | None:
    present = [as_utc(t) for t in timestamps if t is not None]
    return max(present) if present else None


class RankingService:
    """Ranks a candidate pool against one vacancy.

    The cache, vacancy repository and status store are injected so callers own
    their lifecycle; nothing here is module-level state.
    """

    def __init__(
        self,
        vacancies: VacancyRepository,
        cache: MatchCache,
        statuses: CandidateStatusStore | None = None,
        engine: MatchingEngine | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._vacancies = vacancies
        self._cache = cache
        self._statuses = statuses
        self._engine = engine or MatchingEngine()
        self._max_workers = max_workers

    def rank(
        self,
        vacancy_id: int,
        candidate_pool: Iterable[CandidateProfile],
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        search: str | None = None,
        status: str | StatusFilter | None = StatusFilter.TODO,
        min_score: int = 0,
        as_of: datetime | None = None,
    ) -> RankingPage:
        """Return one page of ranked matches for ``vacancy_id``.

        Args:
            vacancy_id: Vacancy to rank against.
            candidate_pool: Candidate snapshots to consider.
            page: 1-based page number.
            page_size: Results per page.
            search: Optional substring filter over name, company and titles.
            status: ``todo`` (default) hides candidates marked not-a-match; ``all`` keeps them.
            min_score: Drop results scoring below this value.
            as_of: When the candidate pool was read; newly scored results are
                stamped with it. Defaults to the start of this call.

        Raises:
            InvalidArgumentError: bad pagination or status filter.
            NotFoundError: the vacancy does not exist.
            ConfigurationError: the vacancy's weights do not sum to 100.
        """
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise InvalidArgumentError(f"page must be an integer >= 1, got {page!r}")
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
            raise InvalidArgumentError(f"page_size must be a positive integer, got {page_size!r}")
        status_filter = StatusFilter.parse(status)
        calculated_at = as_utc(as_of) if as_of is not None else utcnow()

        vacancy = self._vacancies.get(vacancy_id)
        if vacancy is None:
            raise NotFoundError(vacancy_id)

        statuses = self._statuses.statuses_for_vacancy(vacancy_id) if self._statuses else {}
        pool: dict[int, CandidateProfile] = {}
        for candidate in candidate_pool:
            if candidate.id in pool:
                continue
            if matches_search(candidate, search) and status_filter.admits(statuses.get(candidate.id)):
                pool[candidate.id] = candidate

        results, diagnostics = self._results_for(vacancy, list(pool.values()), calculated_at)
        if min_score:
            results = [r for r in results if r.overall_score >= min_score]
        results.sort(key=lambda r: (-r.overall_score, r.candidate_id))

        total = len(results)
        start = (page - 1) * page_size
        logger.info(
            "Ranked %d candidates for vacancy %s (page %d, %d diagnostics)",
            total,
            vacancy_id,
            page,
            len(diagnostics),
        )
        return RankingPage(
            results=results[start : start + page_size],
            total=total,
            total_pages=math.ceil(total / page_size),
            page=page,
            page_size=page_size,
            diagnostics=diagnostics,
        )

    def _results_for(
        self, vacancy: VacancyProfile, pool: Sequence[CandidateProfile], calculated_at: datetime
    ) -> tuple[list[MatchResult], list]:
        not_before = {c.id: _newest(c.updated_at, vacancy.updated_at) for c in pool}
        cached = self._cache.get_many(vacancy.id, not_before)
        misses = [c for c in pool if c.id not in cached]
        logger.debug(
            "Vacancy %s: %d cache hits, %d to score", vacancy.id, len(cached), len(misses)
        )

        diagnostics = []
        results = list(cached.values())
        for scored in self._score_all(vacancy, misses, calculated_at):
            results.append(scored.result)
            if scored.warnings:
                # Results carrying warnings are never cached.
                diagnostics.extend(scored.warnings)
            else:
                self._cache.put(scored.result)
        return results, diagnostics

    def _score_all(
        self,
        vacancy: VacancyProfile,
        candidates: Sequence[CandidateProfile],
        calculated_at: datetime,
    ) -> list[ScoredMatch]:
        def score(candidate: CandidateProfile) -> ScoredMatch:
            return self._engine.score(candidate, vacancy, calculated_at)

        if self._max_workers <= 1 or len(candidates) <= 1:
            return [score(c) for c in candidates]
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            return list(executor.map(score, candidates))


def assign_strong_matches(
    vacancy_id: int,
    results: Iterable[MatchResult],
    statuses: CandidateStatusStore,
    threshold: int = STRONG_MATCH_SCORE,
) -> list[int]:
    """Put strong matches without a reviewer status into ``todo``.

    Returns the candidate ids that received a status.
    """
    strong = [r.candidate_id for r in results if r.overall_score >= threshold]
    return statuses.assign_if_missing(vacancy_id, strong, CandidateStatusEnum.TODO)
