"""Human-readable match explanations.

The explanation is a single deterministic sentence: the strong criteria, the
criteria that cost the most points, a count of matched required skills by
match source, and (when weights are known) what the role is focused on.
"""

from collections.abc import Sequence

from vacancy_matching.matching.config import MatchingConfig
from vacancy_matching.matching.types import (
    CRITERIA,
    CriteriaScores,
    Relevance,
    SkillMatch,
    SkillMatchSource,
    VacancyWeights,
)

MAX_LIMITING_FACTORS = 2

# (partial, weak) phrasing per criterion
LIMITING_PHRASES = {
    "skills": ("partial skills overlap", "limited skills match"),
    "location": ("acceptable location", "location mismatch"),
    "experience": ("experience slightly off target", "experience gap"),
    "title": ("related job title", "different job title"),
    "education": ("education partly matches requirement", "education below requirement"),
    "industry": ("industry partly related", "different industry background"),
}

FOCUS_PHRASES = {
    "skills": "skills-focused role",
    "location": "location-critical role",
    "experience": "experience-focused role",
    "title": "title-focused role",
    "education": "education-focused role",
    "industry": "industry-focused role",
}


def _join(words: Sequence[str]) -> str:
    if len(words) == 1:
        return words[0]
    return ", ".join(words[:-1]) + " and " + words[-1]


def _weight(weights: VacancyWeights | None, criterion: str) -> int:
    return getattr(weights, criterion) if weights is not None else 1


def describe_skill_matches(skill_matches: Sequence[SkillMatch]) -> str:
    """``"3 of 4 required skills matched (2 direct, 1 synonym)"``."""
    if not skill_matches:
        return "no required skills specified"

    matched = [m for m in skill_matches if m.relevance is not Relevance.WEAK]
    counts = {source: 0 for source in SkillMatchSource}
    for m in matched:
        counts[m.source] += 1

    summary = f"{len(matched)} of {len(skill_matches)} required skills matched"
    breakdown = ", ".join(f"{n} {source.value}" for source, n in counts.items() if n)
    if breakdown:
        summary += f" ({breakdown})"
    return summary


def role_focus(weights: VacancyWeights) -> str | None:
    """Phrase for the single highest-weighted criterion, None on a tie."""
    ranked = sorted(CRITERIA, key=lambda c: -getattr(weights, c))
    if getattr(weights, ranked[0]) == getattr(weights, ranked[1]):
        return None
    return FOCUS_PHRASES[ranked[0]]


def explain(
    criteria: CriteriaScores,
    skill_matches: Sequence[SkillMatch],
    weights: VacancyWeights | None = None,
    config: MatchingConfig | None = None,
) -> str:
    config = config or MatchingConfig()
    considered = [c for c in CRITERIA if _weight(weights, c) > 0]
    scores = criteria.as_dict()

    strengths = sorted(
        (c for c in considered if scores[c] >= config.strong_threshold),
        key=lambda c: (-_weight(weights, c), CRITERIA.index(c)),
    )
    limiting = sorted(
        (c for c in considered if scores[c] < config.strong_threshold),
        key=lambda c: (-(100 - scores[c]) * _weight(weights, c), CRITERIA.index(c)),
    )[:MAX_LIMITING_FACTORS]

    parts = []
    if strengths:
        parts.append(f"strong {_join(strengths)} match")
    for c in limiting:
        partial, weak = LIMITING_PHRASES[c]
        parts.append(partial if scores[c] >= config.partial_threshold else weak)
    parts.append(describe_skill_matches(skill_matches))
    if weights is not None:
        focus = role_focus(weights)
        if focus:
            parts.append(focus)

    text = "; ".join(parts)
    return text[0].upper() + text[1:] + "."
