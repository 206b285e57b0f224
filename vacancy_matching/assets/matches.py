"""Vacancy match assets.

One partition per vacancy. Materializing a partition ranks the whole
candidate pool against that vacancy, writes every clean result through to
``candidate_vacancy_matches`` and puts strong matches into the reviewers'
todo list.
"""

from collections import Counter
from typing import Any

from dagster import (
    AssetExecutionContext,
    DynamicPartitionsDefinition,
    MetadataValue,
    Output,
    asset,
)

from vacancy_matching.matching.ranking import assign_strong_matches
from vacancy_matching.matching.statuses import StatusFilter
from vacancy_matching.matching.types import utcnow

vacancy_partitions = DynamicPartitionsDefinition(name="vacancies")

ALGORITHM_VERSION = "weighted_v1"
TOP_N_IN_METADATA = 10


@asset(
    partitions_def=vacancy_partitions,
    description="Ranked candidate matches for one vacancy (one partition per vacancy id)",
    group_name="matching",
    code_version="1.0.0",
    required_resource_keys={"matchmaking"},
    metadata={
        "table": "candidate_vacancy_matches",
        "algorithm_version": ALGORITHM_VERSION,
    },
)
def vacancy_matches(context: AssetExecutionContext) -> Output[dict[str, Any]]:
    """Score every candidate against the partition's vacancy.

    Fresh cached matches are reused. Reviewer statuses are ignored while
    ranking (status=all) so the cache covers the full pool.
    """
    matchmaking = context.resources.matchmaking
    vacancy_id = int(context.partition_key)

    as_of = utcnow()
    pool = matchmaking.get_candidate_pool()
    context.log.info(f"Ranking {len(pool)} candidates for vacancy {vacancy_id}")

    service = matchmaking.build_ranking_service()
    ranking = service.rank(
        vacancy_id,
        pool,
        page=1,
        page_size=max(len(pool), 1),
        status=StatusFilter.ALL,
        as_of=as_of,
    )

    for warning in ranking.diagnostics:
        context.log.warning(
            f"Candidate {warning.candidate_id}: {warning.criterion} scored 0 ({warning.message})"
        )

    labels = Counter(r.label for r in ranking.results)
    assigned = assign_strong_matches(vacancy_id, ranking.results, matchmaking.status_store())
    context.log.info(
        f"Vacancy {vacancy_id}: {labels['Strong Match']} strong, {labels['Moderate Match']} moderate, "
        f"{labels['Weak Match']} weak; {len(assigned)} new todo statuses"
    )

    top = [
        {"candidate_id": r.candidate_id, "score": r.overall_score, "explanation": r.explanation}
        for r in ranking.results[:TOP_N_IN_METADATA]
    ]
    return Output(
        value={
            "vacancy_id": vacancy_id,
            "total": ranking.total,
            "labels": dict(labels),
            "assigned_todo": assigned,
            "diagnostics": [d.to_dict() for d in ranking.diagnostics],
        },
        metadata={
            "candidates_scored": ranking.total,
            "strong_matches": labels["Strong Match"],
            "moderate_matches": labels["Moderate Match"],
            "weak_matches": labels["Weak Match"],
            "assigned_todo": len(assigned),
            "diagnostics": len(ranking.diagnostics),
            "top_matches": MetadataValue.json(top),
        },
    )
