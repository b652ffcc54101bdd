"""
Run Context Model
Identity of the run that invoked the tool, validated from the environment.
"""
from pydantic import BaseModel, Field

from cancel_duplicates.core.config import GITHUB_API_URL


class RunContext(BaseModel):
    token: str = Field(repr=False)
    run_id: int
    owner: str
    repo: str
    event_name: str
    branch: str
    api_url: str = GITHUB_API_URL
