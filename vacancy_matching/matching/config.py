"""Tunable matching constants and the skill synonym table.

Thresholds and the synonym table are data, not code: the defaults below can be
overridden per deployment through ``MatchmakingResource`` fields and a JSON
synonym file.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from vacancy_matching.matching.errors import ConfigurationError
from vacancy_matching.matching.text import normalize

logger = logging.getLogger(__name__)

DEFAULT_SYNONYMS_PATH = Path(__file__).with_name("synonyms.json")

# Listed entries that are never skills on their own.
DEFAULT_NON_SKILL_WORDS = frozenset(
    {
        "less", "more", "and", "or", "the", "of", "to", "in", "for", "with", "at", "by",
        "from", "as", "is", "are", "was", "were", "be", "have", "has", "had", "will",
        "can", "must", "do", "done", "get", "make", "made", "work", "worked", "use",
        "used", "help", "run", "set", "lead", "new", "only", "very", "well", "good",
        "up", "out", "if", "about", "years", "year", "other", "various", "etc", "n/a",
        "none", "misc", "general", "skills",
    }
)

# Soft skills are skipped while collecting candidate skills unless the vacancy
# asks for them.
DEFAULT_SOFT_SKILLS = frozenset(
    {
        "communication", "teamwork", "leadership", "problem-solving", "problem solving",
        "critical thinking", "analytical", "time management", "organization",
        "attention to detail", "customer service", "interpersonal", "adaptability",
        "flexibility", "creativity", "innovation", "collaboration", "negotiation",
        "presentation", "public speaking", "conflict resolution", "decision making",
        "stress management", "multitasking", "team player", "self-motivated",
        "proactive", "reliable",
    }
)

# Technology families used to relate a candidate skill to a required skill when
# their names do not look alike.
DEFAULT_SKILL_CATEGORIES: dict[str, tuple[str, ...]] = {
    "frontend": ("javascript", "typescript", "react", "angular", "vue", "html", "css", "sass"),
    "backend": ("node.js", "python", "java", "c#", "php", "ruby", "go", "express", "django"),
    "database": ("mysql", "postgresql", "mongodb", "redis", "sqlite", "oracle"),
    "cloud": ("aws", "azure", "gcp", "docker", "kubernetes", "terraform"),
    "hvac": ("heating", "ventilation", "air conditioning", "climate control", "chiller"),
    "electrical": ("electrical", "power", "voltage", "generator", "transformer"),
    "security": ("cctv", "surveillance", "access control", "fire safety", "alarm systems"),
}


class SynonymTable:
    """Bidirectional synonym lookup.

    Terms listed together form a group and every pair inside a group is a
    synonym pair. A term may belong to several groups ("node" can sit next to
    both "javascript" and "node.js") without merging those groups.
    """

    def __init__(self, groups: Iterable[Iterable[str]] = ()):
        self._groups: list[frozenset[str]] = []
        self._membership: dict[str, set[int]] = {}
        for group in groups:
            self._add_group(group)

    def _add_group(self, terms: Iterable[str]) -> None:
        members = frozenset(t for t in (normalize(term) for term in terms) if t)
        if len(members) < 2:
            return
        index = len(self._groups)
        self._groups.append(members)
        for term in members:
            self._membership.setdefault(term, set()).add(index)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> "SynonymTable":
        """Build from ``{canonical: [alias, ...]}``."""
        return cls([canonical, *aliases] for canonical, aliases in mapping.items())

    @classmethod
    def from_json(cls, path: str | Path) -> "SynonymTable":
        """Load a ``{canonical: [alias, ...]}`` JSON file."""
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Synonym file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Synonym file {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict) or not all(isinstance(v, list) for v in data.values()):
            raise ConfigurationError(f"Synonym file {path} must map names to lists of aliases")

        table = cls.from_mapping(data)
        logger.info("Loaded %d synonym groups from %s", len(table), path)
        return table

    def merged_with_aliases(self, alias_map: Mapping[str, str]) -> "SynonymTable":
        """Return a new table extended with ``{alias: canonical}`` pairs.

        Used to fold the ``skill_aliases`` taxonomy from the database into the
        file-based table.
        """
        by_canonical: dict[str, list[str]] = {}
        for alias, canonical in alias_map.items():
            by_canonical.setdefault(canonical, []).append(alias)

        merged = SynonymTable(self._groups)
        for canonical, aliases in by_canonical.items():
            merged._add_group([canonical, *aliases])
        return merged

    def are_synonyms(self, a: str, b: str) -> bool:
        a, b = normalize(a), normalize(b)
        if not a or not b or a == b:
            return False
        return bool(self._membership.get(a, set()) & self._membership.get(b, set()))

    def synonyms_of(self, term: str) -> set[str]:
        term = normalize(term)
        found: set[str] = set()
        for index in self._membership.get(term, ()):
            found |= self._groups[index]
        found.discard(term)
        return found

    @property
    def vocabulary(self) -> frozenset[str]:
        return frozenset(self._membership)

    def __contains__(self, term: str) -> bool:
        return normalize(term) in self._membership

    def __len__(self) -> int:
        return len(self._groups)


@lru_cache(maxsize=1)
def load_default_synonyms() -> SynonymTable:
    return SynonymTable.from_json(DEFAULT_SYNONYMS_PATH)


@dataclass(frozen=True)
class MatchingConfig:
    """Thresholds shared by the matcher, scorers and explanation text."""

    synonyms: SynonymTable = field(default_factory=load_default_synonyms)

    # Relevance tiers: strong >= strong_threshold, partial >= partial_threshold
    strong_threshold: int = 70
    partial_threshold: int = 40

    synonym_similarity: int = 90
    fuzzy_floor: int = 20
    fuzzy_ceiling: int = 99

    remote_score: int = 90
    same_country_score: int = 60
    same_region_score: int = 30
    education_partial_score: int = 75
    neutral_education_score: int = 50
    neutral_industry_score: int = 50

    non_skill_words: frozenset[str] = DEFAULT_NON_SKILL_WORDS
    soft_skills: frozenset[str] = DEFAULT_SOFT_SKILLS
    skill_categories: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_SKILL_CATEGORIES), hash=False
    )

    def __post_init__(self):
        if not 0 <= self.partial_threshold < self.strong_threshold <= 100:
            raise ConfigurationError(
                f"Relevance thresholds must satisfy 0 <= partial < strong <= 100, "
                f"got partial={self.partial_threshold} strong={self.strong_threshold}"
            )
        if not 0 <= self.fuzzy_floor <= self.fuzzy_ceiling <= 100:
            raise ConfigurationError(
                f"Fuzzy bounds must satisfy 0 <= floor <= ceiling <= 100, "
                f"got floor={self.fuzzy_floor} ceiling={self.fuzzy_ceiling}"
            )
        for name in (
            "synonym_similarity",
            "remote_score",
            "same_country_score",
            "same_region_score",
            "education_partial_score",
            "neutral_education_score",
            "neutral_industry_score",
        ):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ConfigurationError(f"{name} must be within 0-100, got {value}")
