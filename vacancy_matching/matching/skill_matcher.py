"""Skill matching: direct, synonym and fuzzy comparison of skill names.

``SkillMatcher.match`` compares one required skill against a candidate's
skills and always returns exactly one SkillMatch, possibly weak. Stages run in
priority order (direct, synonym, fuzzy); a later stage only wins when it is
strictly more similar.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from vacancy_matching.matching.config import MatchingConfig
from vacancy_matching.matching.text import (
    contains_phrase,
    normalize,
    round_half_up,
    sentences,
    sequence_ratio,
    split_annotation,
    token_jaccard,
)
from vacancy_matching.matching.types import (
    CandidateProfile,
    CandidateSkill,
    Relevance,
    SkillMatch,
    SkillMatchSource,
)

logger = logging.getLogger(__name__)

LISTED_SKILLS = "Listed Skills"

# Free-text profile fields scanned for known skill terms, with the label shown
# as the skill's source location.
TEXT_FIELDS = (
    ("job_title", "Job Title"),
    ("title_description", "Job Description"),
    ("profile_summary", "Profile Summary"),
    ("past_role_title", "Previous Role"),
)


class CollectedSkills(NamedTuple):
    skills: list[CandidateSkill]
    problems: list[str]
    dropped: list[str]


def parse_candidate_skill(entry: str | CandidateSkill) -> CandidateSkill:
    """Turn a raw skill entry into a CandidateSkill.

    Raises:
        TypeError: the entry is neither a string nor a CandidateSkill.
    """
    if isinstance(entry, CandidateSkill):
        return entry
    if not isinstance(entry, str):
        raise TypeError(f"skill entry must be a string, got {type(entry).__name__}")
    name, found_in = split_annotation(entry)
    return CandidateSkill(name=name, location=found_in or LISTED_SKILLS)


class SkillMatcher:
    """Compares skill names using a configurable synonym table and thresholds."""

    def __init__(self, config: MatchingConfig | None = None):
        self.config = config or MatchingConfig()
        self.synonyms = self.config.synonyms

    def relevance(self, similarity: int) -> Relevance:
        return Relevance.from_similarity(
            similarity, self.config.strong_threshold, self.config.partial_threshold
        )

    def similarity(self, a: str, b: str) -> int:
        """Fuzzy similarity of two normalized names, 0 to ``fuzzy_ceiling``."""
        ratio = max(sequence_ratio(a, b), token_jaccard(a, b))
        return max(0, min(self.config.fuzzy_ceiling, round_half_up(ratio * 100)))

    def match(
        self, required_skill: str, candidate_skills: Sequence[str | CandidateSkill]
    ) -> SkillMatch:
        """Find the best match for ``required_skill`` among ``candidate_skills``."""
        display_name = split_annotation(required_skill)[0]
        required = normalize(display_name)
        skills = [parse_candidate_skill(s) for s in candidate_skills]
        skills = [s for s in skills if normalize(s.name)]

        if not required or not skills:
            return self._build(display_name, 0, SkillMatchSource.FUZZY, None)

        for skill in skills:
            if normalize(skill.name) == required:
                return self._build(display_name, 100, SkillMatchSource.DIRECT, skill)

        synonym_hit = next(
            (s for s in skills if self.synonyms.are_synonyms(required, s.name)), None
        )

        best_similarity, best_skill = -1, None
        for skill in skills:
            similarity = self.similarity(required, normalize(skill.name))
            if similarity > best_similarity:
                best_similarity, best_skill = similarity, skill

        if synonym_hit is not None and best_similarity <= self.config.synonym_similarity:
            return self._build(
                display_name, self.config.synonym_similarity, SkillMatchSource.SYNONYM, synonym_hit
            )

        if best_similarity < self.config.fuzzy_floor:
            best_skill = None
        return self._build(display_name, best_similarity, SkillMatchSource.FUZZY, best_skill)

    def unmatched(self, required_skill: str) -> SkillMatch:
        """Weak, zero-similarity match for a required skill nobody could be compared with."""
        return self._build(split_annotation(str(required_skill))[0], 0, SkillMatchSource.FUZZY, None)

    def _build(
        self,
        skill: str,
        similarity: int,
        source: SkillMatchSource,
        matched: CandidateSkill | None,
    ) -> SkillMatch:
        return SkillMatch(
            skill=skill,
            similarity=similarity,
            relevance=self.relevance(similarity),
            source=source,
            matched_skill=matched.name if matched else None,
            source_location=matched.location if matched else None,
            source_context=matched.context if matched else None,
        )

    def is_skill_entry(self, name: str, wanted: Iterable[str] = ()) -> bool:
        """Whether a listed entry counts as a skill.

        Entries the vacancy asks for and synonym vocabulary terms always count.
        Otherwise entries shorter than two characters, bare numbers, filler
        words and soft skills are skipped.
        """
        key = normalize(name)
        if key in wanted or key in self.synonyms:
            return True
        if len(key) < 2 or key.isdigit():
            return False
        return key not in self.config.non_skill_words and key not in self.config.soft_skills

    def categories_of(self, name: str) -> set[str]:
        key = normalize(name)
        if not key:
            return set()
        return {
            category
            for category, members in self.config.skill_categories.items()
            if any(contains_phrase(key, m) or contains_phrase(m, key) for m in members)
        }

    def related_skill(self, name: str, required_skills: Iterable[str]) -> str | None:
        """First required skill sharing a technology category with ``name``."""
        categories = self.categories_of(name)
        if not categories:
            return None
        for required in required_skills:
            display_name = split_annotation(required)[0]
            if categories & self.categories_of(display_name):
                return display_name
        return None

    def collect_candidate_skills(
        self, candidate: CandidateProfile, required_skills: Iterable[str] = ()
    ) -> CollectedSkills:
        """Gather a candidate's skills with provenance.

        Listed skills come first. Known terms (synonym vocabulary plus the
        vacancy's required skills) found in the candidate's free-text fields
        are appended with the field label and the sentence they appear in.

        Returns:
            ``CollectedSkills(skills, problems, dropped)``: ``problems``
            describes malformed entries, ``dropped`` names entries filtered
            out as non-skills.
        """
        skills: list[CandidateSkill] = []
        problems: list[str] = []
        dropped: list[str] = []
        seen: set[str] = set()
        wanted = {normalize(split_annotation(s)[0]) for s in required_skills}
        wanted.discard("")

        for entry in candidate.skills or ():
            try:
                skill = parse_candidate_skill(entry)
            except TypeError as e:
                problems.append(str(e))
                continue
            key = normalize(skill.name)
            if not key:
                problems.append("empty skill entry")
                continue
            if not self.is_skill_entry(key, wanted):
                dropped.append(skill.name)
                continue
            if key not in seen:
                seen.add(key)
                skills.append(skill)

        terms = set(self.synonyms.vocabulary) | wanted
        ordered_terms = sorted(terms)

        for attr, location in TEXT_FIELDS:
            for sentence in sentences(getattr(candidate, attr)):
                text = normalize(sentence)
                for term in ordered_terms:
                    if term in seen or term not in text:
                        continue
                    if contains_phrase(text, term):
                        seen.add(term)
                        skills.append(CandidateSkill(name=term, location=location, context=sentence))

        if problems:
            logger.debug("Candidate %s: skipped %d malformed skill entries", candidate.id, len(problems))
        if dropped:
            logger.debug("Candidate %s: ignored non-skill entries %s", candidate.id, dropped)
        return CollectedSkills(skills, problems, dropped)
