"""Dagster jobs for vacancy matching.

Jobs available in the Dagster dashboard:

ASSET JOBS (for materializing assets):
- matchmaking: Rank the candidate pool for each selected vacancy (partitioned by vacancy id)

OPS JOBS (for operational tasks):
- sync_vacancy_partitions_job: Register every open vacancy as a dynamic partition

USAGE:
1. Run sync_vacancy_partitions_job to register vacancy partitions
2. Go to Jobs → matchmaking → Backfill
3. Select partitions (all, or a few vacancies) and launch

The vacancy_change_sensor does steps 1-3 automatically for vacancies that
changed, and for all open vacancies when candidates changed.
"""

from dagster import OpExecutionContext, define_asset_job, job, op

from vacancy_matching.assets.matches import vacancy_matches, vacancy_partitions

matchmaking_job = define_asset_job(
    name="matchmaking",
    description=(
        "Rank all candidates against a vacancy and refresh the match cache. "
        "One partition per vacancy id; use Backfill to select vacancies."
    ),
    selection=[vacancy_matches],
    partitions_def=vacancy_partitions,
    tags={"dagster/concurrency_limit": "matchmaking"},
)


@op(required_resource_keys={"matchmaking"})
def sync_vacancy_partitions(context: OpExecutionContext) -> dict:
    """Register every open vacancy id as a dynamic partition."""
    vacancy_ids = [str(v) for v in context.resources.matchmaking.get_open_vacancy_ids()]
    context.log.info(f"Found {len(vacancy_ids)} open vacancies")

    existing = set(context.instance.get_dynamic_partitions(partitions_def_name=vacancy_partitions.name))
    new_ids = [v for v in vacancy_ids if v not in existing]
    if new_ids:
        context.instance.add_dynamic_partitions(
            partitions_def_name=vacancy_partitions.name,
            partition_keys=new_ids,
        )
        context.log.info(f"Added {len(new_ids)} new vacancy partitions")
    context.log.info("Next: Go to Jobs → matchmaking → Backfill to rank the vacancies")
    return {
        "open_vacancies": len(vacancy_ids),
        "existing_partitions": len(existing),
        "new_partitions": len(new_ids),
    }


@job(description="Register open vacancies as dynamic partitions")
def sync_vacancy_partitions_job():
    """Register all open vacancy ids as dynamic partitions.

    Run this job first to populate the partition list, then use matchmaking
    with Backfill to rank them.
    """
    sync_vacancy_partitions()


__all__ = [
    "matchmaking_job",
    "sync_vacancy_partitions_job",
]
