"""Sensor that re-ranks vacancies whose inputs changed.

Cursor format (JSON):
{
    "last_sync": "2026-10-19T10:30:00+00:00",  # ISO timestamp of the previous tick
    "initialized": true                        # Whether the initial sync completed
}

- First run: every open vacancy is registered as a partition and ranked.
- Later runs: vacancies updated since ``last_sync`` are re-ranked. When any
  candidate changed, every open vacancy is re-ranked since each ranking
  covers the whole pool. Stale cache rows are detected by timestamp, so a
  re-rank only rescores the pairs that actually changed.
"""

import json
from datetime import datetime, timezone

from dagster import RunRequest, SensorEvaluationContext, SkipReason, sensor

from vacancy_matching.assets.matches import vacancy_partitions
from vacancy_matching.jobs import matchmaking_job


@sensor(
    job=matchmaking_job,
    minimum_interval_seconds=300,
    description="Re-ranks vacancies when the vacancy or any candidate record changed",
    required_resource_keys={"matchmaking"},
)
def vacancy_change_sensor(context: SensorEvaluationContext):
    matchmaking = context.resources.matchmaking

    cursor_data = {"initialized": False, "last_sync": None}
    if context.cursor:
        cursor_data = json.loads(context.cursor)

    current_sync_time = datetime.now(timezone.utc)
    existing = set(
        context.instance.get_dynamic_partitions(partitions_def_name=vacancy_partitions.name)
    )

    if not cursor_data.get("initialized"):
        context.log.info("First sync - ranking all open vacancies")
        to_rank = [str(v) for v in matchmaking.get_open_vacancy_ids()]
        run_kind = "init"
    else:
        last_sync = datetime.fromisoformat(cursor_data["last_sync"])
        changed_candidates = matchmaking.count_candidates_updated_since(last_sync)
        if changed_candidates:
            context.log.info(f"{changed_candidates} candidates changed since {last_sync}; re-ranking all open vacancies")
            to_rank = [str(v) for v in matchmaking.get_open_vacancy_ids()]
        else:
            to_rank = [str(v) for v in matchmaking.get_open_vacancy_ids(updated_since=last_sync)]
        run_kind = "update"

    context.update_cursor(
        json.dumps({"initialized": True, "last_sync": current_sync_time.isoformat()})
    )

    if not to_rank:
        return SkipReason(f"No vacancy or candidate changes since {cursor_data.get('last_sync')}")

    new_ids = [v for v in to_rank if v not in existing]
    if new_ids:
        context.instance.add_dynamic_partitions(
            partitions_def_name=vacancy_partitions.name,
            partition_keys=new_ids,
        )

    return [
        RunRequest(
            run_key=f"vacancy-{run_kind}-{vacancy_id}-{current_sync_time.isoformat()}",
            partition_key=vacancy_id,
        )
        for vacancy_id in to_rank
    ]
