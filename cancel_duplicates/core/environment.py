"""
Environment
===========
Builds the RunContext from the variables GitHub Actions exports to every job.

Required:
    GITHUB_RUN_ID       — id of the run executing this tool
    GITHUB_REPOSITORY   — owner/repo slug
    GITHUB_EVENT_NAME   — event that triggered the run
    GITHUB_REF          — full ref for push events (refs/heads/...)
    GITHUB_HEAD_REF     — source branch for pull_request events

Token lookup order: INPUT_GITHUB-TOKEN (action input), INPUT_GITHUB_TOKEN,
GITHUB_TOKEN.

Only push and pull_request runs are deduplicated. Other events and tag
pushes yield None, which the CLI treats as a successful no-op.
"""
import logging
import os
from typing import Mapping, Optional

from cancel_duplicates.core.config import GITHUB_API_URL
from cancel_duplicates.core.constants import ACCEPTED_EVENTS, BRANCH_PREFIX, TAG_PREFIX
from cancel_duplicates.core.errors import ConfigurationError, UnsupportedRefError
from cancel_duplicates.models.run_context import RunContext

logger = logging.getLogger(__name__)

TOKEN_VARIABLES = ("INPUT_GITHUB-TOKEN", "INPUT_GITHUB_TOKEN", "GITHUB_TOKEN")


def get_required_env(environ: Mapping[str, str], key: str) -> str:
    value = environ.get(key)
    if value is None or value == "":
        raise ConfigurationError(f"{key} was not defined.")
    return value


def resolve_branch(event_name: str, ref: str) -> Optional[str]:
    """
    Turn the triggering ref into a bare branch name.

    Pull request head refs are already bare branch names. Push refs must be
    under refs/heads/; tag pushes return None so the caller can skip them.
    """
    if event_name == "pull_request":
        return ref

    if ref.startswith(TAG_PREFIX):
        return None
    if not ref.startswith(BRANCH_PREFIX):
        raise UnsupportedRefError(f"{ref} was not an expected branch ref ({BRANCH_PREFIX}).")
    branch = ref[len(BRANCH_PREFIX):]
    if not branch:
        raise UnsupportedRefError(f"{ref} does not name a branch.")
    return branch


def parse_repository(slug: str) -> tuple[str, str]:
    owner, _, repo = slug.partition("/")
    if not owner or not repo or "/" in repo:
        raise ConfigurationError(f"GITHUB_REPOSITORY must be 'owner/repo', got '{slug}'.")
    return owner, repo


def load_run_context(environ: Optional[Mapping[str, str]] = None) -> Optional[RunContext]:
    """
    Validate the process environment and build a RunContext.

    Returns None when the run should be skipped entirely (unsupported event
    or tag push). Raises ConfigurationError / UnsupportedRefError for input
    that makes the whole operation impossible.
    """
    if environ is None:
        environ = os.environ

    raw_run_id = get_required_env(environ, "GITHUB_RUN_ID")
    try:
        run_id = int(raw_run_id)
    except ValueError:
        raise ConfigurationError(f"GITHUB_RUN_ID must be an integer, got '{raw_run_id}'.")
    if run_id <= 0:
        raise ConfigurationError(f"GITHUB_RUN_ID must be positive, got {run_id}.")

    owner, repo = parse_repository(get_required_env(environ, "GITHUB_REPOSITORY"))
    event_name = get_required_env(environ, "GITHUB_EVENT_NAME")

    if event_name not in ACCEPTED_EVENTS:
        logger.info("Skipping unsupported event: %s", event_name)
        return None

    ref_key = "GITHUB_HEAD_REF" if event_name == "pull_request" else "GITHUB_REF"
    ref = get_required_env(environ, ref_key)
    branch = resolve_branch(event_name, ref)
    if branch is None:
        logger.info("Skipping tag build: %s", ref)
        return None

    token = next((environ[k] for k in TOKEN_VARIABLES if environ.get(k)), "")
    if not token:
        raise ConfigurationError(
            "No GitHub token found (set the github-token input or GITHUB_TOKEN)."
        )

    context = RunContext(
        token=token,
        run_id=run_id,
        owner=owner,
        repo=repo,
        event_name=event_name,
        branch=branch,
        api_url=environ.get("GITHUB_API_URL") or GITHUB_API_URL,
    )
    logger.info(
        "Branch is %s, repo is %s, owner is %s, run id is %d",
        context.branch, context.repo, context.owner, context.run_id,
    )
    return context
