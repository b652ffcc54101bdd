"""
Workflow Resolver
=================
Looks up the current run and derives the id of the workflow it belongs to.
Without it there is nothing to deduplicate against, so failure is fatal.
"""
import logging

from cancel_duplicates.core.errors import ResolutionError
from cancel_duplicates.services.github_client import GitHubClient

logger = logging.getLogger(__name__)


def workflow_id_from_run(run: dict) -> str:
    """
    Extract the workflow id from a run payload.

    GitHub exposes it as the last segment of `workflow_url`
    (.../actions/workflows/<id>); `workflow_id` is used when the URL is absent.
    """
    workflow_url = run.get("workflow_url") or ""
    workflow_id = workflow_url.rstrip("/").split("/")[-1] if workflow_url else ""
    if not workflow_id and run.get("workflow_id") is not None:
        workflow_id = str(run["workflow_id"])
    return workflow_id


async def resolve_workflow_id(client: GitHubClient, owner: str, repo: str, run_id: int) -> str:
    run = await client.get_workflow_run(owner, repo, run_id)
    workflow_id = workflow_id_from_run(run if isinstance(run, dict) else {})
    if not workflow_id:
        raise ResolutionError(f"Could not resolve workflow for run {run_id}")

    logger.info("Workflow ID is: %s", workflow_id)
    return workflow_id
