"""Criteria scorers.

Each scorer compares one aspect of a candidate with a vacancy and returns an
integer in [0, 100]. Scorers are pure and independent of each other; missing
fields produce a low or neutral score, never an exception.
"""

import re
from collections.abc import Sequence

from vacancy_matching.matching.config import MatchingConfig
from vacancy_matching.matching.skill_matcher import SkillMatcher
from vacancy_matching.matching.text import (
    clamp_score,
    contains_phrase,
    normalize,
    round_half_up,
    sequence_ratio,
    tokenize,
)
from vacancy_matching.matching.types import (
    CandidateProfile,
    CandidateSkill,
    SkillMatch,
    VacancyProfile,
)

# ═══════════════════════════════════════════════════════════════════
# SKILLS
# ═══════════════════════════════════════════════════════════════════


def match_required_skills(
    vacancy: VacancyProfile,
    candidate_skills: Sequence[str | CandidateSkill],
    matcher: SkillMatcher,
) -> tuple[SkillMatch, ...]:
    """One SkillMatch per required skill, in the vacancy's order."""
    return tuple(matcher.match(required, candidate_skills) for required in vacancy.skills)


def skills_score(skill_matches: Sequence[SkillMatch]) -> int:
    """Average similarity of the required-skill matches; 100 when nothing is required."""
    if not skill_matches:
        return 100
    return clamp_score(sum(m.similarity for m in skill_matches) / len(skill_matches))


def score_skills(
    candidate: CandidateProfile, vacancy: VacancyProfile, matcher: SkillMatcher | None = None
) -> int:
    matcher = matcher or SkillMatcher()
    candidate_skills, _, _ = matcher.collect_candidate_skills(candidate, vacancy.skills)
    return skills_score(match_required_skills(vacancy, candidate_skills, matcher))


# ═══════════════════════════════════════════════════════════════════
# LOCATION
# ═══════════════════════════════════════════════════════════════════

COUNTRY_PLACES: dict[str, tuple[str, ...]] = {
    "germany": ("deutschland", "berlin", "munich", "münchen", "frankfurt", "hamburg", "cologne", "köln", "dortmund", "essen", "düsseldorf", "stuttgart"),
    "netherlands": ("nederland", "holland", "amsterdam", "rotterdam", "the hague", "den haag", "utrecht", "eindhoven", "tilburg", "groningen", "almere"),
    "belgium": ("belgië", "belgique", "brussels", "bruxelles", "antwerp", "antwerpen", "ghent", "gent", "bruges", "brugge", "leuven", "namur"),
    "france": ("paris", "lyon", "marseille", "toulouse", "nice", "nantes", "strasbourg", "montpellier", "bordeaux", "lille"),
    "united kingdom": ("uk", "england", "scotland", "london", "manchester", "birmingham", "leeds", "glasgow", "sheffield", "liverpool", "edinburgh", "bristol"),
    "sweden": ("stockholm", "gothenburg", "göteborg", "malmö", "uppsala", "västerås", "örebro", "linköping"),
    "switzerland": ("zurich", "zürich", "geneva", "genève", "basel", "bern", "lausanne", "winterthur"),
    "italy": ("rome", "roma", "milan", "milano", "naples", "napoli", "turin", "torino", "palermo", "genoa"),
    "spain": ("madrid", "barcelona", "valencia", "seville", "sevilla", "zaragoza", "málaga", "murcia", "palma", "bilbao"),
    "poland": ("warsaw", "warszawa", "kraków", "krakow", "łódź", "wrocław", "poznań", "gdańsk", "szczecin"),
    "austria": ("vienna", "wien", "graz", "linz", "salzburg", "innsbruck", "klagenfurt"),
    "denmark": ("copenhagen", "københavn", "aarhus", "odense", "aalborg", "esbjerg"),
    "norway": ("oslo", "bergen", "trondheim", "stavanger", "drammen", "fredrikstad"),
    "finland": ("helsinki", "espoo", "tampere", "vantaa", "turku", "oulu"),
}

# Every country in the table above is European.
EUROPEAN_COUNTRIES = frozenset(COUNTRY_PLACES)

REMOTE_TERMS = ("remote", "work from home", "anywhere")

# Tokens that say nothing about where a place is.
_PLACE_NOISE = frozenset(
    {"the", "and", "of", "area", "region", "city", "greater", "metro", "hybrid", "office", "on", "site", "onsite"}
)


def _countries(location: str) -> set[str]:
    found = set()
    for country, places in COUNTRY_PLACES.items():
        if contains_phrase(location, country) or any(contains_phrase(location, p) for p in places):
            found.add(country)
    return found


def _is_remote(location: str) -> bool:
    return any(contains_phrase(location, term) for term in REMOTE_TERMS)


def _place_tokens(location: str) -> set[str]:
    return {t for t in tokenize(location) if len(t) > 2 and t not in _PLACE_NOISE and not t.isdigit()}


def _location_pair_score(vacancy_location: str, candidate_location: str, config: MatchingConfig) -> int:
    if contains_phrase(candidate_location, vacancy_location) or contains_phrase(
        vacancy_location, candidate_location
    ):
        return 100
    if _is_remote(vacancy_location) or _is_remote(candidate_location):
        return config.remote_score

    vacancy_countries = _countries(vacancy_location)
    candidate_countries = _countries(candidate_location)
    if vacancy_countries & candidate_countries:
        return config.same_country_score
    if _place_tokens(vacancy_location) & _place_tokens(candidate_location):
        return config.same_country_score
    if (
        vacancy_countries
        and candidate_countries
        and vacancy_countries <= EUROPEAN_COUNTRIES
        and candidate_countries <= EUROPEAN_COUNTRIES
    ):
        return config.same_region_score
    return 0


def score_location(
    candidate: CandidateProfile, vacancy: VacancyProfile, config: MatchingConfig | None = None
) -> int:
    """Best location fit over the candidate's home and company locations."""
    config = config or MatchingConfig()
    vacancy_location = normalize(vacancy.location)
    if not vacancy_location:
        return 0

    candidate_locations = [
        loc for loc in (normalize(candidate.location), normalize(candidate.company_location)) if loc
    ]
    if not candidate_locations:
        return 0

    return clamp_score(
        max(_location_pair_score(vacancy_location, loc, config) for loc in candidate_locations)
    )


# ═══════════════════════════════════════════════════════════════════
# EXPERIENCE
# ═══════════════════════════════════════════════════════════════════

# Target years of experience per vacancy tier (inclusive).
EXPERIENCE_TIERS: dict[str, tuple[int, int]] = {
    "junior": (0, 2),
    "mid level": (2, 7),
    "senior": (5, 15),
    "lead": (7, 20),
    "manager": (5, 25),
    "director": (10, 30),
}

_TIER_ALIASES = {
    "mid": "mid level",
    "medior": "mid level",
    "intermediate": "mid level",
    "entry level": "junior",
}

# Minimum years implied by a seniority word in the candidate's titles.
_TITLE_FLOORS = (("senior", 5.0), ("lead", 5.0), ("manager", 7.0), ("director", 7.0), ("junior", 1.0))

_YEARS = re.compile(r"(\d+(?:[.,]\d+)?)\s*(?:\+\s*)?(?:years?|yrs?|jaar)\b")
_MONTHS = re.compile(r"(\d+)\s*(?:months?|mos?|maanden)\b")


def experience_range(level: str | None) -> tuple[int, int] | None:
    """Map a vacancy experience tier to its target range, or None if unknown."""
    key = normalize(level).replace("-", " ").replace("_", " ")
    if not key:
        return None
    key = _TIER_ALIASES.get(key, key)
    if key in EXPERIENCE_TIERS:
        return EXPERIENCE_TIERS[key]
    for alias, tier in _TIER_ALIASES.items():
        if contains_phrase(key, alias):
            return EXPERIENCE_TIERS[tier]
    for tier, bounds in EXPERIENCE_TIERS.items():
        if contains_phrase(key, tier):
            return bounds
    return None


def parse_duration_years(duration: str | None) -> float:
    """Read ``"3 years 6 months"`` style text as a number of years."""
    text = normalize(duration)
    years = sum(float(m.replace(",", ".")) for m in _YEARS.findall(text))
    months = sum(int(m) for m in _MONTHS.findall(text))
    return years + months / 12


def effective_years(candidate: CandidateProfile) -> float:
    years = float(candidate.years_experience or 0)
    for duration in candidate.durations or ():
        years = max(years, parse_duration_years(duration))
    for title in (candidate.job_title, candidate.past_role_title):
        title = normalize(title)
        for word, floor in _TITLE_FLOORS:
            if contains_phrase(title, word):
                years = max(years, floor)
                break
    return years


def score_experience(candidate: CandidateProfile, vacancy: VacancyProfile) -> int:
    """Full credit inside the tier's range, linear decay outside it.

    Every missing year costs 20 points. Every year over the range costs 10
    points, bottoming out at 50. An unknown tier scores 0.
    """
    bounds = experience_range(vacancy.experience_level)
    if bounds is None:
        return 0
    low, high = bounds
    years = effective_years(candidate)
    if low <= years <= high:
        return 100
    if years < low:
        return clamp_score(max(0.0, 100 - 20 * (low - years)))
    return clamp_score(max(50.0, 100 - 10 * (years - high)))


# ═══════════════════════════════════════════════════════════════════
# TITLE
# ═══════════════════════════════════════════════════════════════════

TITLE_WORD_MAP = {
    "architecture": "architect",
    "engineering": "engineer",
    "development": "developer",
    "management": "manager",
    "lead": "leader",
    "principal": "senior",
    "staff": "senior",
    "sr": "senior",
    "head": "director",
    "chief": "director",
    "vp": "director",
    "expert": "specialist",
}

CORE_TITLE_KEYWORDS = frozenset(
    {
        "gpu", "cpu", "architect", "engineer", "developer", "data", "software",
        "hardware", "cloud", "devops", "security", "ai", "ml", "blockchain",
        "frontend", "backend", "fullstack", "mobile", "web", "ios", "android",
        "python", "java", "javascript", "react", "angular", "node", "aws",
        "azure", "gcp", "kubernetes", "docker", "api", "database", "sql",
    }
)

SENIORITY_WORDS = frozenset({"senior", "director", "leader"})

CORE_KEYWORD_BONUS = 15
SENIORITY_BONUS = 10
_PARTIAL_WORD_RATIO = 0.7


def _title_words(title: str | None) -> list[str]:
    return [TITLE_WORD_MAP.get(word, word) for word in tokenize(title)]


def title_similarity(vacancy_title: str | None, candidate_title: str | None) -> int:
    """Weighted word overlap between two job titles.

    Core technical keywords weigh three times as much as other words and may
    earn partial credit for near-identical spellings. Exact core keyword hits
    and shared seniority add a bonus on top.
    """
    vacancy_words = _title_words(vacancy_title)
    candidate_words = set(_title_words(candidate_title))
    if not vacancy_words or not candidate_words:
        return 0

    earned = possible = 0.0
    bonus = 0
    for word in vacancy_words:
        is_core = word in CORE_TITLE_KEYWORDS
        weight = 3.0 if is_core else 1.0
        possible += weight
        if word in candidate_words:
            earned += weight
            if is_core:
                bonus += CORE_KEYWORD_BONUS
        elif is_core:
            ratio = max(sequence_ratio(word, other) for other in candidate_words)
            if ratio > _PARTIAL_WORD_RATIO:
                earned += weight * ratio

    if SENIORITY_WORDS.intersection(vacancy_words) and SENIORITY_WORDS & candidate_words:
        bonus += SENIORITY_BONUS

    return clamp_score(min(100.0, earned / possible * 100 + bonus))


def score_title(candidate: CandidateProfile, vacancy: VacancyProfile) -> int:
    titles = [t for t in (candidate.job_title, candidate.past_role_title) if t and t.strip()]
    if not normalize(vacancy.title) or not titles:
        return 0
    return max(title_similarity(vacancy.title, title) for title in titles)


# ═══════════════════════════════════════════════════════════════════
# EDUCATION
# ═══════════════════════════════════════════════════════════════════

EDUCATION_LEVELS: tuple[tuple[str, int], ...] = (
    ("high school", 1),
    ("secondary", 1),
    ("diploma", 2),
    ("associate", 2),
    ("bachelor", 3),
    ("undergraduate", 3),
    ("master", 4),
    ("masters", 4),
    ("graduate", 4),
    ("mba", 4),
    ("phd", 5),
    ("ph.d", 5),
    ("doctorate", 5),
)

EDUCATION_FIELDS = (
    "engineering",
    "computer science",
    "business",
    "management",
    "technical",
    "finance",
    "marketing",
)


def education_tier(education: str | None) -> int | None:
    """Highest education tier named in the text, or None."""
    text = normalize(education)
    tiers = [tier for name, tier in EDUCATION_LEVELS if contains_phrase(text, name)]
    return max(tiers) if tiers else None


def score_education(
    candidate: CandidateProfile, vacancy: VacancyProfile, config: MatchingConfig | None = None
) -> int:
    config = config or MatchingConfig()
    required = normalize(vacancy.education_level)
    attained = normalize(candidate.education)
    if not required or not attained:
        return config.neutral_education_score

    required_tier = education_tier(required)
    attained_tier = education_tier(attained)
    if required_tier is None or attained_tier is None:
        shared_field = any(
            contains_phrase(required, f) and contains_phrase(attained, f) for f in EDUCATION_FIELDS
        )
        return 75 if shared_field else 25

    if attained_tier >= required_tier:
        return 100
    if attained_tier == required_tier - 1:
        return config.education_partial_score
    return 0


# ═══════════════════════════════════════════════════════════════════
# INDUSTRY
# ═══════════════════════════════════════════════════════════════════

INDUSTRY_CATEGORIES: dict[str, tuple[str, ...]] = {
    "datacenter": ("data center", "data centre", "datacenter", "infrastructure", "hosting", "cloud"),
    "technology": ("tech", "technology", "it", "ict", "software", "digital"),
    "facility": ("facility", "facilities", "building", "maintenance", "operations"),
    "engineering": ("engineering", "technical", "mechanical", "electrical", "civil"),
}

CATEGORY_SCORE = 75


def industry_categories(industry: str) -> set[str]:
    return {
        category
        for category, keywords in INDUSTRY_CATEGORIES.items()
        if any(contains_phrase(industry, k) for k in keywords)
    }


def score_industry(
    candidate: CandidateProfile, vacancy: VacancyProfile, config: MatchingConfig | None = None
) -> int:
    """Industry overlap; unset on either side scores the neutral default."""
    config = config or MatchingConfig()
    required = normalize(vacancy.industry)
    actual = normalize(candidate.industry)
    if not required or not actual:
        return config.neutral_industry_score

    if required == actual or required in actual or actual in required:
        return 100
    if industry_categories(required) & industry_categories(actual):
        return CATEGORY_SCORE
    return clamp_score(round_half_up(sequence_ratio(required, actual) * 100))
