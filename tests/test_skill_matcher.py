"""Tests for skill matching.

This module tests:
- Text normalization and annotation parsing
- Direct, synonym and fuzzy matching precedence
- Candidate skill collection from listed skills and free text
- Synonym table loading
"""

import json

import pytest

from vacancy_matching.matching.config import MatchingConfig, SynonymTable, load_default_synonyms
from vacancy_matching.matching.errors import ConfigurationError
from vacancy_matching.matching.skill_matcher import LISTED_SKILLS, SkillMatcher, parse_candidate_skill
from vacancy_matching.matching.text import (
    clamp_score,
    contains_phrase,
    normalize,
    round_half_up,
    split_annotation,
    tokenize,
)
from vacancy_matching.matching.types import CandidateProfile, Relevance, SkillMatchSource


class TestText:
    """Tests for the text helpers."""

    def test_normalize_collapses_case_and_whitespace(self):
        """Test that normalization casefolds and collapses whitespace."""
        assert normalize("  Node.JS \t Developer ") == "node.js developer"
        assert normalize(None) == ""

    def test_split_annotation_parenthesized(self):
        """Test parsing of '(found in: ...)' annotations."""
        assert split_annotation("Python (found in: Work Experience, page 2)") == (
            "Python",
            "Work Experience, page 2",
        )

    def test_split_annotation_dash(self):
        """Test parsing of '- found in: ...' annotations."""
        assert split_annotation("Docker - found in: CV") == ("Docker", "CV")

    def test_split_annotation_plain(self):
        """Test that plain names come back unchanged."""
        assert split_annotation(" Terraform ") == ("Terraform", None)

    def test_tokenize_keeps_tech_punctuation(self):
        """Test that tokens like c++ and node.js survive tokenization."""
        assert tokenize("C++ and Node.js") == ["c++", "and", "node.js"]

    def test_contains_phrase_respects_word_boundaries(self):
        """Test that 'java' is not found inside 'javascript'."""
        assert contains_phrase("senior java developer", "java")
        assert not contains_phrase("javascript developer", "java")

    def test_round_half_up(self):
        """Test that halves round up."""
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(2.49) == 2

    def test_clamp_score(self):
        """Test that scores are clamped to 0-100."""
        assert clamp_score(120) == 100
        assert clamp_score(-3) == 0


class TestSkillMatcher:
    """Tests for SkillMatcher.match precedence and edge cases."""

    def test_direct_match_is_case_insensitive(self):
        """Test that equal names after normalization score 100."""
        match = SkillMatcher().match("Python", ["  PYTHON "])

        assert match.similarity == 100
        assert match.source is SkillMatchSource.DIRECT
        assert match.relevance is Relevance.STRONG
        assert match.matched_skill == "PYTHON"

    def test_synonym_beats_weaker_fuzzy(self):
        """Test that JavaScript vs [JS, Java] is a synonym match, not a fuzzy one."""
        match = SkillMatcher().match("JavaScript", ["JS", "Java"])

        assert match.source is SkillMatchSource.SYNONYM
        assert match.similarity == 90
        assert match.matched_skill == "JS"

    def test_synonyms_are_bidirectional(self, config):
        """Test that an alias required by the vacancy matches the canonical skill."""
        match = SkillMatcher(config).match("K8s", ["Kubernetes"])

        assert match.source is SkillMatchSource.SYNONYM
        assert match.similarity == 90

    def test_fuzzy_wins_only_when_strictly_higher(self, config):
        """Test that a near-identical spelling above the synonym score wins."""
        match = SkillMatcher(config).match("Kubernetes", ["k8s", "Kubernetess"])

        assert match.source is SkillMatchSource.FUZZY
        assert match.similarity == 95
        assert match.matched_skill == "Kubernetess"

    def test_fuzzy_partial_match(self, config):
        """Test fuzzy similarity for related but different skills."""
        match = SkillMatcher(config).match("React", ["React Native"])

        assert match.source is SkillMatchSource.FUZZY
        assert match.similarity == 59
        assert match.relevance is Relevance.PARTIAL
        assert match.matched_skill == "React Native"

    def test_fuzzy_never_reaches_direct_score(self):
        """Test that fuzzy similarity is capped below 100."""
        matcher = SkillMatcher(MatchingConfig(fuzzy_ceiling=99))
        assert matcher.similarity("golang", "golang") == 99

    def test_empty_candidate_skills_yield_weak_match(self):
        """Test that no candidate skills still produce one weak SkillMatch."""
        match = SkillMatcher().match("Python", [])

        assert match.skill == "Python"
        assert match.similarity == 0
        assert match.relevance is Relevance.WEAK
        assert match.source is SkillMatchSource.FUZZY
        assert match.matched_skill is None

    def test_below_floor_has_no_provenance(self, config):
        """Test that a hit under the fuzzy floor reports no matched skill."""
        match = SkillMatcher(config).match("Python", ["Excel"])

        assert match.similarity == 0
        assert match.matched_skill is None
        assert match.source_location is None

    def test_annotation_becomes_source_location(self):
        """Test that '(found in: ...)' is carried as the match's source location."""
        match = SkillMatcher().match("Python", ["Python (found in: Work Experience, page 2)"])

        assert match.source is SkillMatchSource.DIRECT
        assert match.source_location == "Work Experience, page 2"

    def test_plain_skill_is_listed(self):
        """Test that unannotated skills are attributed to the listed skills."""
        assert parse_candidate_skill("Go").location == LISTED_SKILLS

    def test_non_string_skill_raises_type_error(self):
        """Test that a malformed skill entry is rejected."""
        with pytest.raises(TypeError):
            parse_candidate_skill(42)


class TestCollectCandidateSkills:
    """Tests for gathering candidate skills with provenance."""

    def test_listed_skills_deduplicated_and_malformed_reported(self, config):
        """Test that duplicates collapse and bad entries become problems."""
        candidate = CandidateProfile(id=1, skills=("Python", "python", 42, "  "))

        skills, problems, _ = SkillMatcher(config).collect_candidate_skills(candidate)

        assert [s.name for s in skills] == ["Python"]
        assert problems == ["skill entry must be a string, got int", "empty skill entry"]

    def test_skills_found_in_free_text(self, config):
        """Test that known terms in the profile summary are added with context."""
        candidate = CandidateProfile(
            id=1,
            skills=("Python",),
            profile_summary="I built services on Kubernetes. Loved it.",
        )

        skills, problems, _ = SkillMatcher(config).collect_candidate_skills(candidate)

        assert problems == []
        extracted = skills[1]
        assert extracted.name == "kubernetes"
        assert extracted.location == "Profile Summary"
        assert extracted.context == "I built services on Kubernetes."

    def test_required_skills_are_searched_in_titles(self, config):
        """Test that a vacancy's required skill is picked up from the job title."""
        candidate = CandidateProfile(id=1, job_title="Terraform Engineer")

        skills, _, _ = SkillMatcher(config).collect_candidate_skills(candidate, ["Terraform"])

        assert [(s.name, s.location) for s in skills] == [("terraform", "Job Title")]

    def test_non_skill_entries_dropped(self, config):
        """Test that filler words, numbers, single letters and soft skills are filtered out."""
        candidate = CandidateProfile(
            id=1, skills=("Python", "and", "2019", "x", "Communication", "Teamwork")
        )

        skills, problems, dropped = SkillMatcher(config).collect_candidate_skills(candidate)

        assert [s.name for s in skills] == ["Python"]
        assert problems == []
        assert dropped == ["and", "2019", "x", "Communication", "Teamwork"]

    def test_requested_entries_survive_filtering(self, config):
        """Test that a soft skill or one-letter skill the vacancy asks for is kept."""
        candidate = CandidateProfile(id=1, skills=("Communication", "R"))

        skills, _, dropped = SkillMatcher(config).collect_candidate_skills(
            candidate, ["Communication", "R"]
        )

        assert [s.name for s in skills] == ["Communication", "R"]
        assert dropped == []

    def test_custom_non_skill_words(self, small_synonyms):
        """Test that the filler word list is configurable."""
        config = MatchingConfig(synonyms=small_synonyms, non_skill_words=frozenset({"excel"}))
        candidate = CandidateProfile(id=1, skills=("Excel", "and"))

        skills, _, dropped = SkillMatcher(config).collect_candidate_skills(candidate)

        assert [s.name for s in skills] == ["and"]
        assert dropped == ["Excel"]

    def test_missing_skill_list_is_empty(self, config):
        """Test that a candidate without a skill list collects nothing and reports nothing."""
        candidate = CandidateProfile(id=1, skills=None)

        skills, problems, dropped = SkillMatcher(config).collect_candidate_skills(candidate)

        assert (skills, problems, dropped) == ([], [], [])


class TestSkillCategories:
    """Tests for relating skills through technology categories."""

    def test_categories_of(self, config):
        """Test category lookup by whole-word membership."""
        matcher = SkillMatcher(config)

        assert matcher.categories_of("React Native") == {"frontend"}
        assert matcher.categories_of("Docker") == {"cloud"}
        assert matcher.categories_of("Django") == {"backend"}
        assert matcher.categories_of("Excel") == set()

    def test_related_skill(self, config):
        """Test that the first required skill in a shared category is returned."""
        matcher = SkillMatcher(config)

        assert matcher.related_skill("Angular", ["Python", "React"]) == "React"
        assert matcher.related_skill("Excel", ["Python", "React"]) is None


class TestSynonymTable:
    """Tests for synonym table loading and merging."""

    def test_default_table_knows_common_aliases(self):
        """Test that the bundled synonym file is loaded."""
        table = load_default_synonyms()
        assert table.are_synonyms("postgres", "PostgreSQL")
        assert not table.are_synonyms("java", "javascript")

    def test_from_json(self, tmp_path):
        """Test loading a custom synonym file."""
        path = tmp_path / "synonyms.json"
        path.write_text(json.dumps({"golang": ["go"]}))

        table = SynonymTable.from_json(path)

        assert table.are_synonyms("Go", "golang")
        assert len(table) == 1

    def test_missing_file_is_configuration_error(self, tmp_path):
        """Test that an unreadable synonym file raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            SynonymTable.from_json(tmp_path / "missing.json")

    def test_invalid_shape_is_configuration_error(self, tmp_path):
        """Test that a non-mapping synonym file raises ConfigurationError."""
        path = tmp_path / "synonyms.json"
        path.write_text(json.dumps(["go", "golang"]))
        with pytest.raises(ConfigurationError):
            SynonymTable.from_json(path)

    def test_merged_with_aliases(self, small_synonyms):
        """Test that database aliases extend the table without mutating it."""
        merged = small_synonyms.merged_with_aliases({"PSQL": "PostgreSQL"})

        assert merged.are_synonyms("psql", "PostgreSQL")
        assert not small_synonyms.are_synonyms("psql", "postgresql")

    def test_inconsistent_thresholds_rejected(self, small_synonyms):
        """Test that MatchingConfig validates its thresholds."""
        with pytest.raises(ConfigurationError):
            MatchingConfig(synonyms=small_synonyms, strong_threshold=40, partial_threshold=70)
