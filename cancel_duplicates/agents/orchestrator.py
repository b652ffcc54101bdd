"""
Orchestrator
============
Runs one deduplication pass for the current run:

    Workflow Resolver -> Collector -> Duplicate Policy -> Cancellation Driver

Each step waits for the previous one to finish. Resolution and listing
errors propagate to the caller; cancel failures are folded into the
returned summary.
"""
import logging

from cancel_duplicates.agents.canceller import cancel_runs
from cancel_duplicates.agents.collector import collect_runs
from cancel_duplicates.agents.duplicate_policy import select_targets
from cancel_duplicates.agents.workflow_resolver import resolve_workflow_id
from cancel_duplicates.models.cancel_outcome import DedupeSummary
from cancel_duplicates.models.run_context import RunContext
from cancel_duplicates.services.github_client import GitHubClient

logger = logging.getLogger(__name__)


class Orchestrator:
    """Drives the deduplication pipeline against one GitHub client."""

    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    async def run(
        self,
        context: RunContext,
        dry_run: bool = False,
        max_parallel: int = 1,
    ) -> DedupeSummary:
        owner, repo = context.owner, context.repo

        workflow_id = await resolve_workflow_id(self.client, owner, repo, context.run_id)
        collected = await collect_runs(self.client, owner, repo, workflow_id, context.branch)
        targets = select_targets(collected, context.run_id)
        outcomes = await cancel_runs(
            self.client, owner, repo, targets, max_parallel=max_parallel, dry_run=dry_run
        )

        summary = DedupeSummary(
            workflow_id=workflow_id,
            branch=context.branch,
            collected=len(collected),
            targets=[run.run_id for run in targets],
            outcomes=outcomes,
        )
        logger.info(
            "Done: %d collected, %d targeted, %d cancelled, %d failed",
            summary.collected, len(summary.targets), summary.cancelled, summary.failed,
        )
        return summary
