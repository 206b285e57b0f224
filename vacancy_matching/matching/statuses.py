"""Reviewer statuses per (candidate, vacancy) and the ranking status filter.

Statuses only filter ranked results; they never change a score.
"""

import enum
import logging
import threading
from collections.abc import Callable, Iterable
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from vacancy_matching.db import get_session
from vacancy_matching.matching.errors import InvalidArgumentError
from vacancy_matching.models.enums import CandidateStatusEnum
from vacancy_matching.models.statuses import CandidateStatus

logger = logging.getLogger(__name__)


class StatusFilter(str, enum.Enum):
    """``todo`` hides candidates marked not-a-match; ``all`` shows everyone."""

    TODO = "todo"
    ALL = "all"

    @classmethod
    def parse(cls, value: "str | StatusFilter | None") -> "StatusFilter":
        if value is None:
            return cls.TODO
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise InvalidArgumentError(
                f"Unknown status filter {value!r}; expected one of: todo, all"
            ) from e

    def admits(self, status: CandidateStatusEnum | None) -> bool:
        if self is StatusFilter.ALL:
            return True
        return status is not CandidateStatusEnum.NOT_A_MATCH


class CandidateStatusStore(Protocol):
    def statuses_for_vacancy(self, vacancy_id: int) -> dict[int, CandidateStatusEnum]: ...

    def set_status(
        self,
        candidate_id: int,
        vacancy_id: int,
        status: CandidateStatusEnum,
        *,
        notes: str | None = None,
        assigned_by: str = "reviewer",
    ) -> None: ...

    def assign_if_missing(
        self, vacancy_id: int, candidate_ids: Iterable[int], status: CandidateStatusEnum
    ) -> list[int]: ...


class InMemoryStatusStore:
    def __init__(self):
        self._statuses: dict[tuple[int, int], CandidateStatusEnum] = {}
        self._lock = threading.Lock()

    def statuses_for_vacancy(self, vacancy_id):
        with self._lock:
            return {c: s for (c, v), s in self._statuses.items() if v == vacancy_id}

    def set_status(self, candidate_id, vacancy_id, status, *, notes=None, assigned_by="reviewer"):
        with self._lock:
            self._statuses[(candidate_id, vacancy_id)] = CandidateStatusEnum(status)

    def assign_if_missing(self, vacancy_id, candidate_ids, status):
        assigned = []
        with self._lock:
            for candidate_id in candidate_ids:
                key = (candidate_id, vacancy_id)
                if key not in self._statuses:
                    self._statuses[key] = CandidateStatusEnum(status)
                    assigned.append(candidate_id)
        return assigned


class SqlStatusStore:
    """Statuses persisted in ``candidate_statuses``."""

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory

    def statuses_for_vacancy(self, vacancy_id):
        session = self._session_factory()
        try:
            rows = session.execute(
                select(CandidateStatus.candidate_id, CandidateStatus.status).where(
                    CandidateStatus.vacancy_id == vacancy_id
                )
            ).all()
        finally:
            session.close()
        return {candidate_id: status for candidate_id, status in rows}

    def set_status(self, candidate_id, vacancy_id, status, *, notes=None, assigned_by="reviewer"):
        session = self._session_factory()
        try:
            row = session.execute(
                select(CandidateStatus).where(
                    CandidateStatus.candidate_id == candidate_id,
                    CandidateStatus.vacancy_id == vacancy_id,
                )
            ).scalar_one_or_none()
            if row is None:
                row = CandidateStatus(candidate_id=candidate_id, vacancy_id=vacancy_id)
                session.add(row)
            row.status = CandidateStatusEnum(status)
            row.assigned_by = assigned_by
            if notes is not None:
                row.notes = notes
            session.commit()
        finally:
            session.close()

    def assign_if_missing(self, vacancy_id, candidate_ids, status):
        candidate_ids = list(candidate_ids)
        if not candidate_ids:
            return []
        session = self._session_factory()
        try:
            existing = set(
                session.execute(
                    select(CandidateStatus.candidate_id).where(
                        CandidateStatus.vacancy_id == vacancy_id,
                        CandidateStatus.candidate_id.in_(candidate_ids),
                    )
                ).scalars()
            )
            assigned = [c for c in candidate_ids if c not in existing]
            session.add_all(
                CandidateStatus(
                    candidate_id=c,
                    vacancy_id=vacancy_id,
                    status=CandidateStatusEnum(status),
                    assigned_by="auto",
                )
                for c in assigned
            )
            session.commit()
        finally:
            session.close()
        logger.info(
            "Assigned status %s to %d candidates for vacancy %s",
            CandidateStatusEnum(status).value,
            len(assigned),
            vacancy_id,
        )
        return assigned
