"""Dagster definitions for the Vacancy Matching system.

This module is the entry point for Dagster. It wires together:
- Assets (vacancy_matches, one partition per vacancy)
- Resources (matchmaking: matching settings, database access, ranking service)
- Jobs (matchmaking, sync_vacancy_partitions_job)
- Sensors (vacancy_change_sensor)
"""

import os

from dagster import Definitions
from dotenv import load_dotenv

from vacancy_matching.assets import vacancy_matches
from vacancy_matching.jobs import matchmaking_job, sync_vacancy_partitions_job
from vacancy_matching.resources import MatchmakingResource
from vacancy_matching.sensors import vacancy_change_sensor

# Load environment variables from .env file (must be before resource initialization)
load_dotenv()

all_assets = [vacancy_matches]


def get_environment() -> str:
    """Get current environment from env var."""
    return os.getenv("ENVIRONMENT", "development")


dev_resources = {
    # Matching settings, database snapshots and the SQL-backed match cache
    "matchmaking": MatchmakingResource(
        synonyms_path=os.getenv("MATCHING_SYNONYMS_PATH") or None,
        max_workers=int(os.getenv("MATCHING_MAX_WORKERS", "4")),
    ),
}


def get_resources():
    """Get resources based on current environment."""
    # Same wiring in every environment; only DATABASE_URL differs
    return dev_resources


all_jobs = [
    # Asset job (partitioned) - use Backfill in UI to select vacancies
    matchmaking_job,
    # Ops job (non-partitioned)
    sync_vacancy_partitions_job,
]

all_sensors = [
    vacancy_change_sensor,
]

defs = Definitions(
    assets=all_assets,
    resources=get_resources(),
    jobs=all_jobs,
    sensors=all_sensors,
)


def main():
    """Entry point for CLI usage."""
    print("Vacancy Matching Dagster project loaded successfully!")
    print(f"Environment: {get_environment()}")
    print(f"Assets: {len(all_assets)}")
    print(f"Jobs: {len(all_jobs)}")
    print(f"Sensors: {len(all_sensors)}")
    print("\nAvailable jobs:")
    for job in all_jobs:
        print(f"  - {job.name}")
    print("\nRun 'vacancy-matching-dev' to start the development server.")


if __name__ == "__main__":
    main()
