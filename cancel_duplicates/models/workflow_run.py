"""
Workflow Run Model
==================
Normalized view of one sibling run as returned by the GitHub REST API.

Fields:
    run_id        — REST `id`; comparable against the current run's id
    run_number    — per-workflow sequence number; ordering and dedupe key
    status        — queued / in_progress / completed / ...
    event         — trigger event (push, pull_request, schedule, ...)
    workflow_url  — API URL of the owning workflow definition
    head_branch   — branch the run was started for (logging only)
    html_url      — browser link to the run (logging only)
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cancel_duplicates.core.errors import MalformedResponseError


class WorkflowRun(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    run_id: int = Field(alias="id")
    run_number: int
    status: str
    event: str
    workflow_url: str = ""
    head_branch: Optional[str] = None
    html_url: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "WorkflowRun":
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            run_id = payload.get("id") if isinstance(payload, dict) else None
            raise MalformedResponseError(
                f"Malformed run record (id {run_id}): {e.error_count()} invalid field(s): "
                + ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            ) from e

    def describe(self) -> str:
        return (
            f"#{self.run_number} (id {self.run_id}) "
            f"[{self.event} : {self.status} : {self.head_branch or 'unknown'}]"
        )
