import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from vacancy_matching.matching.errors import MatchingError
from vacancy_matching.matching.types import RankingPage, utcnow

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def local_dev():
    os.chdir(PROJECT_ROOT)
    os.environ.setdefault("DAGSTER_HOME", str(PROJECT_ROOT))
    os.execvp(
        sys.executable,
        [sys.executable, "-m", "dagster", "dev", "-m", "vacancy_matching.definitions"]
        + sys.argv[1:],
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vacancy-matching-rank",
        description="Rank the candidate pool against one vacancy.",
    )
    parser.add_argument("vacancy_id", type=int)
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, default=10)
    parser.add_argument("--search", default=None, help="Filter by name, company or title")
    parser.add_argument("--status", default="todo", choices=["todo", "all"])
    parser.add_argument("--json", action="store_true", help="Print the page as JSON")
    return parser


def format_page(ranking: RankingPage) -> str:
    lines = [
        f"Page {ranking.page}/{max(ranking.total_pages, 1)} ({ranking.total} candidates)",
    ]
    for position, result in enumerate(ranking.results, start=(ranking.page - 1) * ranking.page_size + 1):
        lines.append(
            f"{position:>4}. candidate {result.candidate_id:<8} {result.overall_score:>3}  "
            f"{result.label}: {result.explanation}"
        )
    for warning in ranking.diagnostics:
        lines.append(f"  ! candidate {warning.candidate_id}: {warning.criterion}: {warning.message}")
    return "\n".join(lines)


def rank(argv: list[str] | None = None) -> int:
    """Rank candidates for a vacancy from the command line."""
    from vacancy_matching.resources import MatchmakingResource

    args = _parser().parse_args(argv)
    load_dotenv()

    matchmaking = MatchmakingResource(synonyms_path=os.getenv("MATCHING_SYNONYMS_PATH") or None)
    try:
        service = matchmaking.build_ranking_service()
        as_of = utcnow()
        ranking = service.rank(
            args.vacancy_id,
            matchmaking.get_candidate_pool(),
            page=args.page,
            page_size=args.page_size,
            search=args.search,
            status=args.status,
            as_of=as_of,
        )
    except MatchingError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(ranking.to_dict(), indent=2))
    else:
        print(format_page(ranking))
    return 0


def main():
    sys.exit(rank())
