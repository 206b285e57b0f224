"""Database enums for the vacancy matching schema."""

import enum


class VacancyStatusEnum(str, enum.Enum):
    """Vacancy lifecycle status. Only open vacancies are ranked automatically."""

    OPEN = "open"
    ON_HOLD = "on_hold"
    FILLED = "filled"
    CLOSED = "closed"


class CandidateStatusEnum(str, enum.Enum):
    """Reviewer decision for a candidate on one vacancy."""

    TODO = "todo"
    NOT_A_MATCH = "not-a-match"


class ReviewStatusEnum(str, enum.Enum):
    """Review status for skills and aliases."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
