"""
Cancel Outcome Model
====================
Result of one cancellation attempt and of a whole invocation.

CancelOutcome is recorded per target whether the request succeeded,
failed, or was only logged in dry-run mode. DedupeSummary is what the
orchestrator hands back to the CLI.
"""
from typing import List, Optional

from pydantic import BaseModel


class CancelOutcome(BaseModel):
    run_id: int
    run_number: int
    success: bool
    status_code: Optional[int] = None
    message: str = ""
    dry_run: bool = False


class DedupeSummary(BaseModel):
    workflow_id: str = ""
    branch: str = ""
    collected: int = 0
    targets: List[int] = []
    outcomes: List[CancelOutcome] = []
    skipped_reason: Optional[str] = None

    @property
    def cancelled(self) -> int:
        return sum(1 for o in self.outcomes if o.success and not o.dry_run)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.success)
