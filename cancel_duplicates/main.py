"""
cancel-duplicates — Cancel superseded GitHub Actions runs of the current workflow.

Meant to run as a step inside a workflow job. Reads the run identity from the
GitHub Actions environment, finds older queued or in-progress runs of the
same workflow on the same branch, and cancels them.

Exit codes:
    0   — nothing to do, or every step completed (cancel failures included)
    1   — fatal error (bad environment, unresolvable workflow, listing failure),
          or a cancel failed while --fail-on-error was given
    130 — interrupted
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from cancel_duplicates.agents.orchestrator import Orchestrator
from cancel_duplicates.core.config import DRY_RUN, LOG_DIR, LOG_LEVEL, MAX_PARALLEL_CANCELS
from cancel_duplicates.core.environment import load_run_context
from cancel_duplicates.core.errors import DedupeError
from cancel_duplicates.models.cancel_outcome import DedupeSummary
from cancel_duplicates.services.github_client import GitHubClient
from cancel_duplicates.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cancel-duplicates",
        description="Cancel older queued/in-progress runs of this workflow on the same branch.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=DRY_RUN,
        help="log the runs that would be cancelled without cancelling them",
    )
    parser.add_argument(
        "--parallel",
        type=int,
        default=MAX_PARALLEL_CANCELS,
        metavar="N",
        help=f"cancel requests allowed in flight (default: {MAX_PARALLEL_CANCELS})",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=LOG_LEVEL if LOG_LEVEL in LOG_LEVELS else "INFO",
    )
    parser.add_argument(
        "--fail-on-error",
        action="store_true",
        help="exit non-zero when any cancel request fails",
    )
    return parser


async def run(dry_run: bool = False, max_parallel: int = 1) -> DedupeSummary:
    """Load the run context and execute one deduplication pass."""
    context = load_run_context()
    if context is None:
        return DedupeSummary(skipped_reason="unsupported event or ref")

    async with GitHubClient(token=context.token, base_url=context.api_url) as client:
        return await Orchestrator(client).run(
            context, dry_run=dry_run, max_parallel=max_parallel
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point. Returns exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level), log_dir=LOG_DIR)

    if args.parallel < 1:
        logger.error("--parallel must be at least 1")
        return 1

    try:
        summary = asyncio.run(run(dry_run=args.dry_run, max_parallel=args.parallel))
    except DedupeError as e:
        logger.error("%s", e)
        return 1

    if summary.skipped_reason:
        logger.info("Nothing to do: %s", summary.skipped_reason)
        return 0

    if args.fail_on_error and summary.failed:
        logger.error("%d cancel request(s) failed", summary.failed)
        return 1
    return 0


def cli() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.warning("Interrupted.")
        sys.exit(130)


if __name__ == "__main__":
    cli()
