"""
Cancellation Driver
===================
Issues one cancel request per target and records the outcome.

A failed cancel is logged and recorded, never retried and never raised:
the run that invoked the tool must not fail because cleanup of a sibling
did. Requests run under a semaphore so at most `max_parallel` are in
flight; the default of 1 cancels strictly in target order.
"""
import asyncio
import logging
from typing import List, Sequence

from cancel_duplicates.core.errors import GitHubAPIError
from cancel_duplicates.models.cancel_outcome import CancelOutcome
from cancel_duplicates.models.workflow_run import WorkflowRun
from cancel_duplicates.services.github_client import GitHubClient

logger = logging.getLogger(__name__)


async def cancel_run(client: GitHubClient, owner: str, repo: str, run: WorkflowRun) -> CancelOutcome:
    logger.info("Cancelling run ID: %d", run.run_id)
    try:
        status_code = await client.cancel_workflow_run(owner, repo, run.run_id)
    except GitHubAPIError as e:
        logger.warning(
            "Could not cancel run (id %d): [%s] %s", run.run_id, e.status_code, e.message
        )
        return CancelOutcome(
            run_id=run.run_id,
            run_number=run.run_number,
            success=False,
            status_code=e.status_code,
            message=e.message,
        )

    logger.info("Previous run (id %d) cancelled, status = %d", run.run_id, status_code)
    return CancelOutcome(
        run_id=run.run_id,
        run_number=run.run_number,
        success=True,
        status_code=status_code,
    )


async def cancel_runs(
    client: GitHubClient,
    owner: str,
    repo: str,
    targets: Sequence[WorkflowRun],
    max_parallel: int = 1,
    dry_run: bool = False,
) -> List[CancelOutcome]:
    """Cancel every target; outcomes are returned in target order."""
    if dry_run:
        for run in targets:
            logger.info("[DRY-RUN] Would cancel run %s", run.describe())
        return [
            CancelOutcome(run_id=run.run_id, run_number=run.run_number, success=True, dry_run=True)
            for run in targets
        ]

    semaphore = asyncio.Semaphore(max(1, max_parallel))

    async def _bounded(run: WorkflowRun) -> CancelOutcome:
        async with semaphore:
            return await cancel_run(client, owner, repo, run)

    outcomes = await asyncio.gather(*(_bounded(run) for run in targets))
    return list(outcomes)
