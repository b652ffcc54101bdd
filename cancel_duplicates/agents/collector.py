"""
Collector
=========
Lists every queued and in-progress run of one workflow on one branch and
merges them into a single collection keyed by run number.

Page shapes:
    The listing endpoint normally returns {"total_count": n, "workflow_runs": [...]}.
    Some paginated responses arrive as a bare list instead. normalize_page()
    is the only place that knows about either shape; anything else is fatal.

Each status listing is paged to exhaustion. Both statuses are fetched
concurrently and merged, in status order, only after both have finished.
"""
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Sequence

from cancel_duplicates.core.constants import TRACKED_STATUSES
from cancel_duplicates.core.errors import MalformedResponseError
from cancel_duplicates.models.workflow_run import WorkflowRun
from cancel_duplicates.services.github_client import GitHubClient

logger = logging.getLogger(__name__)

CollectedRuns = Dict[int, WorkflowRun]


def normalize_page(payload: Any) -> List[Dict[str, Any]]:
    """
    Return the run payloads contained in one listing page.

    Any other shape means the listing cannot be trusted as complete, so it
    is fatal rather than skipped.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        runs = payload.get("workflow_runs")
        if isinstance(runs, list):
            return runs
        if payload.get("message"):
            raise MalformedResponseError(f"Unexpected runs page: {payload['message']}")
    raise MalformedResponseError(f"Unrecognised runs page of type {type(payload).__name__}")


def merge_runs(collected: CollectedRuns, runs: Iterable[WorkflowRun]) -> CollectedRuns:
    """Insert runs keyed by run number; a later duplicate replaces the earlier one."""
    for run in runs:
        if run.run_number in collected:
            logger.debug("Run number %d listed more than once, keeping latest", run.run_number)
        collected[run.run_number] = run
    return collected


def descending(collected: CollectedRuns) -> List[WorkflowRun]:
    """Runs ordered newest first by run number."""
    return [collected[number] for number in sorted(collected, reverse=True)]


async def _list_status(
    client: GitHubClient,
    owner: str,
    repo: str,
    workflow_id: str,
    status: str,
    branch: str,
) -> List[WorkflowRun]:
    runs: List[WorkflowRun] = []
    async for page in client.iter_workflow_run_pages(owner, repo, workflow_id, status, branch):
        runs.extend(WorkflowRun.from_api(item) for item in normalize_page(page))
    logger.info("Found %d %s run(s) on %s", len(runs), status, branch)
    return runs


async def collect_runs(
    client: GitHubClient,
    owner: str,
    repo: str,
    workflow_id: str,
    branch: str,
    statuses: Sequence[str] = TRACKED_STATUSES,
) -> CollectedRuns:
    results = await asyncio.gather(
        *(_list_status(client, owner, repo, workflow_id, status, branch) for status in statuses)
    )

    collected: CollectedRuns = {}
    for runs in results:
        merge_runs(collected, runs)

    logger.info("Found queued/in_progress workflows: %d", len(collected))
    return collected
