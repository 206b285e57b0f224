"""Matchmaking resource: matching settings, database snapshots and the ranking service."""

from datetime import datetime

from dagster import ConfigurableResource
from pydantic import Field
from sqlalchemy.orm import Session

from vacancy_matching.db import get_session
from vacancy_matching.matching.cache import MatchCache, SqlMatchCache
from vacancy_matching.matching.config import MatchingConfig, SynonymTable, load_default_synonyms
from vacancy_matching.matching.engine import MatchingEngine
from vacancy_matching.matching.ranking import RankingService
from vacancy_matching.matching.repositories import (
    SqlVacancyRepository,
    candidates_updated_since,
    load_candidate_pool,
)
from vacancy_matching.matching.statuses import SqlStatusStore
from vacancy_matching.matching.types import CandidateProfile, VacancyProfile
from vacancy_matching.skills.resolver import synonym_table_with_aliases


class MatchmakingResource(ConfigurableResource):
    """Wires the matching engine to the database for the matches asset and CLI.

    Every threshold is a resource field so matching behaviour can be tuned from
    run config or environment without a code change.
    """

    synonyms_path: str | None = Field(
        default=None,
        description="Path to a JSON synonym file ({canonical: [aliases]}); bundled table when unset",
    )
    use_skill_aliases: bool = Field(
        default=True,
        description="Merge approved skill_aliases rows into the synonym table",
    )
    strong_threshold: int = Field(default=70, description="Minimum similarity for strong relevance")
    partial_threshold: int = Field(default=40, description="Minimum similarity for partial relevance")
    synonym_similarity: int = Field(default=90, description="Similarity reported for a synonym hit")
    fuzzy_floor: int = Field(default=20, description="Below this, a fuzzy hit carries no provenance")
    fuzzy_ceiling: int = Field(default=99, description="Upper bound for fuzzy similarity")
    neutral_industry_score: int = Field(
        default=50, description="Industry score when either side has no industry"
    )
    max_workers: int = Field(default=4, description="Thread pool size for scoring cache misses")

    @staticmethod
    def _get_session() -> Session:
        return get_session()

    def _synonym_table(self) -> SynonymTable:
        synonyms = (
            SynonymTable.from_json(self.synonyms_path)
            if self.synonyms_path
            else load_default_synonyms()
        )
        if not self.use_skill_aliases:
            return synonyms
        session = self._get_session()
        try:
            return synonym_table_with_aliases(session, synonyms)
        finally:
            session.close()

    def matching_config(self) -> MatchingConfig:
        """Build the matching configuration from the resource fields.

        Raises:
            ConfigurationError: thresholds are inconsistent or the synonym file is unusable.
        """
        return MatchingConfig(
            synonyms=self._synonym_table(),
            strong_threshold=self.strong_threshold,
            partial_threshold=self.partial_threshold,
            synonym_similarity=self.synonym_similarity,
            fuzzy_floor=self.fuzzy_floor,
            fuzzy_ceiling=self.fuzzy_ceiling,
            neutral_industry_score=self.neutral_industry_score,
        )

    def build_ranking_service(self, cache: MatchCache | None = None) -> RankingService:
        """Ranking service backed by the SQL cache, vacancy table and status table."""
        return RankingService(
            vacancies=SqlVacancyRepository(self._get_session),
            cache=cache if cache is not None else SqlMatchCache(self._get_session),
            statuses=self.status_store(),
            engine=MatchingEngine(self.matching_config()),
            max_workers=self.max_workers,
        )

    def status_store(self) -> SqlStatusStore:
        return SqlStatusStore(self._get_session)

    def get_vacancy(self, vacancy_id: int) -> VacancyProfile | None:
        return SqlVacancyRepository(self._get_session).get(vacancy_id)

    def get_open_vacancy_ids(self, updated_since: datetime | None = None) -> list[int]:
        """Ids of open vacancies, optionally only those changed after ``updated_since``."""
        return SqlVacancyRepository(self._get_session).open_vacancy_ids(updated_since)

    def get_candidate_pool(self, candidate_ids: list[int] | None = None) -> list[CandidateProfile]:
        return load_candidate_pool(self._get_session, candidate_ids)

    def count_candidates_updated_since(self, updated_since: datetime) -> int:
        return candidates_updated_since(updated_since, self._get_session)
