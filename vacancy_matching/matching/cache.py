"""Match cache: last computed MatchResult per (candidate, vacancy).

An entry is only served while it is at least as new as both source records.
Callers pass the newer of the two ``updated_at`` values as ``not_before``; an
older entry reads as absent and the caller recomputes and writes through.
Absence is never cached.
"""

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vacancy_matching.db import get_session
from vacancy_matching.matching.errors import InvalidArgumentError
from vacancy_matching.matching.types import MatchResult, as_utc
from vacancy_matching.models.matches import CandidateVacancyMatch

logger = logging.getLogger(__name__)


def is_fresh(result: MatchResult, not_before: datetime | None) -> bool:
    if not_before is None:
        return True
    return as_utc(result.calculated_at) >= as_utc(not_before)


def _require_key(candidate_id: int | None, vacancy_id: int | None) -> None:
    if candidate_id is None and vacancy_id is None:
        raise InvalidArgumentError("invalidate() needs a candidate_id, a vacancy_id or both")


class MatchCache(Protocol):
    def get(
        self, candidate_id: int, vacancy_id: int, *, not_before: datetime | None = None
    ) -> MatchResult | None: ...

    def get_many(
        self, vacancy_id: int, not_before: Mapping[int, datetime | None]
    ) -> dict[int, MatchResult]: ...

    def put(self, result: MatchResult) -> None: ...

    def invalidate(self, candidate_id: int | None = None, vacancy_id: int | None = None) -> int: ...


class InMemoryMatchCache:
    """Dict-backed cache for a single process."""

    def __init__(self):
        self._entries: dict[tuple[int, int], MatchResult] = {}
        self._lock = threading.Lock()

    def get(self, candidate_id, vacancy_id, *, not_before=None):
        with self._lock:
            result = self._entries.get((candidate_id, vacancy_id))
        if result is None or not is_fresh(result, not_before):
            return None
        return result

    def get_many(self, vacancy_id, not_before):
        found = {}
        for candidate_id, newest in not_before.items():
            result = self.get(candidate_id, vacancy_id, not_before=newest)
            if result is not None:
                found[candidate_id] = result
        return found

    def put(self, result):
        key = (result.candidate_id, result.vacancy_id)
        with self._lock:
            current = self._entries.get(key)
            # Two workers may compute the same pair; keep the newer one.
            if current is None or as_utc(current.calculated_at) <= as_utc(result.calculated_at):
                self._entries[key] = result

    def invalidate(self, candidate_id=None, vacancy_id=None):
        _require_key(candidate_id, vacancy_id)
        with self._lock:
            stale = [
                key
                for key in self._entries
                if (candidate_id is None or key[0] == candidate_id)
                and (vacancy_id is None or key[1] == vacancy_id)
            ]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SqlMatchCache:
    """Cache persisted in ``candidate_vacancy_matches``.

    Each call opens and closes its own session so the cache can be shared
    between threads.
    """

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory

    @staticmethod
    def _to_result(row: CandidateVacancyMatch) -> MatchResult:
        result = MatchResult.from_dict(row.breakdown)
        return replace(result, calculated_at=as_utc(row.calculated_at))

    def get(self, candidate_id, vacancy_id, *, not_before=None):
        session = self._session_factory()
        try:
            row = session.execute(
                select(CandidateVacancyMatch).where(
                    CandidateVacancyMatch.candidate_id == candidate_id,
                    CandidateVacancyMatch.vacancy_id == vacancy_id,
                )
            ).scalar_one_or_none()
            result = self._to_result(row) if row is not None else None
        finally:
            session.close()

        if result is None or not is_fresh(result, not_before):
            return None
        return result

    def get_many(self, vacancy_id, not_before):
        if not not_before:
            return {}
        session = self._session_factory()
        try:
            rows = session.execute(
                select(CandidateVacancyMatch).where(
                    CandidateVacancyMatch.vacancy_id == vacancy_id,
                    CandidateVacancyMatch.candidate_id.in_(list(not_before)),
                )
            ).scalars().all()
            results = [self._to_result(row) for row in rows]
        finally:
            session.close()

        return {
            r.candidate_id: r for r in results if is_fresh(r, not_before.get(r.candidate_id))
        }

    def put(self, result):
        session = self._session_factory()
        try:
            self._upsert(session, result)
            session.commit()
        except IntegrityError:
            # Another writer inserted the same pair first; update its row instead.
            session.rollback()
            logger.debug(
                "Concurrent insert for candidate %s / vacancy %s, retrying as update",
                result.candidate_id,
                result.vacancy_id,
            )
            self._upsert(session, result)
            session.commit()
        finally:
            session.close()

    @staticmethod
    def _upsert(session: Session, result: MatchResult) -> None:
        row = session.execute(
            select(CandidateVacancyMatch).where(
                CandidateVacancyMatch.candidate_id == result.candidate_id,
                CandidateVacancyMatch.vacancy_id == result.vacancy_id,
            )
        ).scalar_one_or_none()
        if row is None:
            session.add(
                CandidateVacancyMatch(
                    candidate_id=result.candidate_id,
                    vacancy_id=result.vacancy_id,
                    match_score=result.overall_score,
                    breakdown=result.to_dict(),
                    calculated_at=result.calculated_at,
                )
            )
            session.flush()
        else:
            row.match_score = result.overall_score
            row.breakdown = result.to_dict()
            row.calculated_at = result.calculated_at

    def invalidate(self, candidate_id=None, vacancy_id=None):
        _require_key(candidate_id, vacancy_id)
        stmt = delete(CandidateVacancyMatch)
        if candidate_id is not None:
            stmt = stmt.where(CandidateVacancyMatch.candidate_id == candidate_id)
        if vacancy_id is not None:
            stmt = stmt.where(CandidateVacancyMatch.vacancy_id == vacancy_id)

        session = self._session_factory()
        try:
            removed = session.execute(stmt).rowcount
            session.commit()
        finally:
            session.close()
        logger.info(
            "Invalidated %d cached matches (candidate=%s, vacancy=%s)", removed, candidate_id, vacancy_id
        )
        return removed
