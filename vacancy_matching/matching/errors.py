"""Errors raised by the matching engine.

ConfigurationError, InvalidArgumentError and NotFoundError are raised to the
caller of a ranking request and are never retried: the same input fails the
same way. Per-candidate problems are not raised; they are collected as
PerCandidateScoringWarning entries next to the ranked results.
"""

from dataclasses import dataclass


class MatchingError(Exception):
    """Base class for matching engine errors."""


class ConfigurationError(MatchingError):
    """Vacancy weights or matching settings are unusable.

    When raised for weights, ``actual_sum`` holds the sum that was found so the
    record can be fixed where it was entered.
    """

    def __init__(self, message: str, actual_sum: int | None = None):
        super().__init__(message)
        self.actual_sum = actual_sum


class InvalidArgumentError(MatchingError, ValueError):
    """Malformed query parameters (pagination, status filter)."""


class NotFoundError(MatchingError, LookupError):
    """The requested vacancy does not exist."""

    def __init__(self, vacancy_id):
        super().__init__(f"Vacancy {vacancy_id} not found")
        self.vacancy_id = vacancy_id


@dataclass(frozen=True)
class PerCandidateScoringWarning:
    """Non-fatal scoring problem for a single candidate.

    The candidate stays in the results with the affected criterion scored 0.
    """

    candidate_id: int
    criterion: str
    message: str

    def to_dict(self) -> dict:
        return {
            "candidateId": self.candidate_id,
            "criterion": self.criterion,
            "message": self.message,
        }
