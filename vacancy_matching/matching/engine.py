"""Scoring pipeline for a single (candidate, vacancy) pair."""

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import partial

from vacancy_matching.matching.aggregate import aggregate, candidate_skill_relevance
from vacancy_matching.matching.config import MatchingConfig
from vacancy_matching.matching.errors import PerCandidateScoringWarning
from vacancy_matching.matching.explain import explain
from vacancy_matching.matching.scorers import (
    match_required_skills,
    score_education,
    score_experience,
    score_industry,
    score_location,
    score_title,
    skills_score,
)
from vacancy_matching.matching.skill_matcher import SkillMatcher
from vacancy_matching.matching.types import (
    CandidateProfile,
    CriteriaScores,
    MatchResult,
    VacancyProfile,
    utcnow,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredMatch:
    result: MatchResult
    warnings: tuple[PerCandidateScoringWarning, ...] = ()


class MatchingEngine:
    """Runs the matcher, the six scorers, the aggregator and the explainer.

    A scorer that fails on a candidate, whatever the error, scores its
    criterion 0 and records a PerCandidateScoringWarning instead of raising, so
    one bad record never blocks a ranking. When the skills step fails every
    required skill is still reported, as an unmatched weak SkillMatch.
    """

    def __init__(self, config: MatchingConfig | None = None, matcher: SkillMatcher | None = None):
        self.config = config or MatchingConfig()
        self.matcher = matcher or SkillMatcher(self.config)
        self._scorers = {
            "location": partial(score_location, config=self.config),
            "experience": score_experience,
            "title": score_title,
            "education": partial(score_education, config=self.config),
            "industry": partial(score_industry, config=self.config),
        }

    def score(
        self,
        candidate: CandidateProfile,
        vacancy: VacancyProfile,
        calculated_at: datetime | None = None,
    ) -> ScoredMatch:
        """Score one pair.

        ``calculated_at`` stamps the result; callers pass the time their
        snapshots were taken so a later update of either record makes the
        result stale.
        """
        warnings: list[PerCandidateScoringWarning] = []

        def record(criterion: str, message: str) -> None:
            logger.warning("Candidate %s / vacancy %s: %s: %s", candidate.id, vacancy.id, criterion, message)
            warnings.append(PerCandidateScoringWarning(candidate.id, criterion, message))

        try:
            candidate_skills, problems, _ = self.matcher.collect_candidate_skills(
                candidate, vacancy.skills
            )
            for problem in problems:
                record("skills", problem)
            skill_matches = match_required_skills(vacancy, candidate_skills, self.matcher)
            relevance = candidate_skill_relevance(candidate_skills, vacancy.skills, self.matcher)
            scores = {"skills": skills_score(skill_matches)}
        except Exception as e:
            record("skills", f"{type(e).__name__}: {e}")
            skill_matches = tuple(
                self.matcher.unmatched(required) for required in vacancy.skills or ()
            )
            relevance = ()
            scores = {"skills": 0}

        for criterion, scorer in self._scorers.items():
            try:
                scores[criterion] = scorer(candidate, vacancy)
            except Exception as e:
                record(criterion, f"{type(e).__name__}: {e}")
                scores[criterion] = 0

        criteria = CriteriaScores(**scores)
        result = MatchResult(
            candidate_id=candidate.id,
            vacancy_id=vacancy.id,
            overall_score=aggregate(criteria, vacancy.weights),
            criteria=criteria,
            skill_matches=skill_matches,
            candidate_skill_relevance=relevance,
            explanation=explain(criteria, skill_matches, vacancy.weights, self.config),
            calculated_at=calculated_at or utcnow(),
        )
        return ScoredMatch(result=result, warnings=tuple(warnings))
