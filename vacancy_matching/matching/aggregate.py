"""Weighted aggregation of criteria scores and the candidate-side skill view."""

from collections.abc import Mapping, Sequence
from dataclasses import replace

from vacancy_matching.matching.skill_matcher import SkillMatcher, parse_candidate_skill
from vacancy_matching.matching.text import normalize
from vacancy_matching.matching.types import (
    CRITERIA,
    CandidateSkill,
    CriteriaScores,
    Relevance,
    SkillMatch,
    VacancyWeights,
)


def aggregate(criteria: CriteriaScores, weights: VacancyWeights | Mapping[str, int]) -> int:
    """Combine the six criteria into one 0-100 score.

    ``round(sum(score * weight) / 100)`` with halves rounded up, computed on
    integers so recomputation is bit-for-bit stable.

    Raises:
        ConfigurationError: the weights do not sum to 100.
    """
    if not isinstance(weights, VacancyWeights):
        weights = VacancyWeights.from_mapping(weights)

    weighted_total = sum(getattr(criteria, name) * getattr(weights, name) for name in CRITERIA)
    return (weighted_total + 50) // 100


def candidate_skill_relevance(
    candidate_skills: Sequence[str | CandidateSkill],
    required_skills: Sequence[str],
    matcher: SkillMatcher,
) -> tuple[SkillMatch, ...]:
    """Match every candidate skill back against the required skills.

    One entry per distinct candidate skill, keeping the candidate skill's own
    provenance. ``matched_skill`` names the required skill it relates to best.
    A weak skill from the same technology category as a required skill (React
    for an Angular role) is lifted to partial relevance. This view is
    informational and never feeds the overall score.
    """
    entries = []
    seen = set()
    for raw in candidate_skills:
        skill = parse_candidate_skill(raw)
        key = normalize(skill.name)
        if not key or key in seen:
            continue
        seen.add(key)
        best = matcher.match(skill.name, list(required_skills))
        if best.relevance is Relevance.WEAK:
            related = matcher.related_skill(skill.name, required_skills)
            if related is not None:
                similarity = max(best.similarity, matcher.config.partial_threshold)
                best = replace(
                    best,
                    similarity=similarity,
                    relevance=matcher.relevance(similarity),
                    matched_skill=related,
                )
        entries.append(
            replace(best, source_location=skill.location, source_context=skill.context)
        )
    return tuple(entries)
