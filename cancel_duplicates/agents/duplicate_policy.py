"""
Duplicate Policy
================
Decides which collected runs are older duplicates of the current run.

Runs are visited newest first by run number. The first matching rule skips
a run:

    1. run id >= current run id    -> the current run or a newer one
    2. status == completed         -> nothing left to cancel
    3. event not push/pull_request -> scheduled, manual, ... runs are left alone

Every run that survives is a cancellation target, returned in visit order.
Run ids come from one increasing sequence, so comparing them stands in for
comparing creation times.
"""
import logging
from typing import List, Optional

from cancel_duplicates.agents.collector import CollectedRuns, descending
from cancel_duplicates.core.constants import (
    ACCEPTED_EVENTS,
    COMPLETED_STATUS,
    SKIP_COMPLETED,
    SKIP_EVENT_MISMATCH,
    SKIP_NEWER_OR_SELF,
)
from cancel_duplicates.models.workflow_run import WorkflowRun

logger = logging.getLogger(__name__)


def skip_reason(run: WorkflowRun, self_run_id: int) -> Optional[str]:
    """Return why `run` must not be cancelled, or None if it is a target."""
    if run.run_id >= self_run_id:
        return SKIP_NEWER_OR_SELF
    if run.status == COMPLETED_STATUS:
        return SKIP_COMPLETED
    if run.event not in ACCEPTED_EVENTS:
        return SKIP_EVENT_MISMATCH
    return None


def select_targets(collected: CollectedRuns, self_run_id: int) -> List[WorkflowRun]:
    targets: List[WorkflowRun] = []
    for run in descending(collected):
        logger.info("Processing run %s", run.describe())
        reason = skip_reason(run, self_run_id)
        if reason is not None:
            logger.info("Skipping run ID %d: %s", run.run_id, reason)
            continue
        targets.append(run)

    logger.info("Selected %d run(s) for cancellation", len(targets))
    return targets
