"""
GitHub Client
=============
Thin asynchronous wrapper over the three GitHub Actions REST calls the
tool needs:

    GET  /repos/{owner}/{repo}/actions/runs/{run_id}
    GET  /repos/{owner}/{repo}/actions/workflows/{workflow_id}/runs
    POST /repos/{owner}/{repo}/actions/runs/{run_id}/cancel

Pagination:
    Listings follow the `Link: <...>; rel="next"` header until GitHub stops
    sending one. Pages are yielded raw; shaping them into runs is the
    collector's job.

Errors:
    Any non-2xx response, and any transport failure, is raised as
    GitHubAPIError carrying the status code and GitHub's `message` field.
    A 2xx body that is not JSON raises MalformedResponseError. Nothing is
    retried here.
"""
import logging
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from cancel_duplicates.core.config import (
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    HTTP_TIMEOUT,
    PAGE_SIZE,
    USER_AGENT,
)
from cancel_duplicates.core.errors import GitHubAPIError, MalformedResponseError

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"Expected JSON from {response.url} (HTTP {response.status_code}): {e}"
        ) from e


class GitHubClient:
    """
    Client for the GitHub Actions runs API.

    Use as an async context manager. An existing httpx.AsyncClient can be
    injected (tests pass one built on httpx.MockTransport); it is then left
    open on exit.
    """

    def __init__(
        self,
        token: str = "",
        base_url: str = GITHUB_API_URL,
        timeout: float = HTTP_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=self.headers,
            timeout=timeout,
        )
        if not self._owns_client:
            self._client.headers.update(self.headers)

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, url, params=params)
        except httpx.HTTPError as e:
            raise GitHubAPIError(None, str(e) or e.__class__.__name__, url) from e

        if response.is_error:
            raise GitHubAPIError(response.status_code, _error_message(response), str(response.url))
        return response

    async def get_workflow_run(self, owner: str, repo: str, run_id: int) -> Dict[str, Any]:
        """Fetch a single run record."""
        response = await self._request("GET", f"/repos/{owner}/{repo}/actions/runs/{run_id}")
        return _json_body(response)

    async def iter_workflow_run_pages(
        self,
        owner: str,
        repo: str,
        workflow_id: str,
        status: str,
        branch: str,
    ) -> AsyncIterator[Any]:
        """
        Yield every page of runs for one workflow, status and branch.

        The first request carries the filters as query parameters; follow-up
        requests use the absolute `next` URL exactly as GitHub returns it.
        """
        url: Optional[str] = f"/repos/{owner}/{repo}/actions/workflows/{workflow_id}/runs"
        params: Optional[Dict[str, Any]] = {
            "status": status,
            "branch": branch,
            "per_page": PAGE_SIZE,
        }
        page = 0
        while url:
            response = await self._request("GET", url, params=params)
            page += 1
            logger.debug("Fetched %s runs page %d for workflow %s", status, page, workflow_id)
            yield _json_body(response)

            url = response.links.get("next", {}).get("url")
            params = None

    async def cancel_workflow_run(self, owner: str, repo: str, run_id: int) -> int:
        """Request cancellation of a run. Returns the HTTP status (202 when accepted)."""
        response = await self._request("POST", f"/repos/{owner}/{repo}/actions/runs/{run_id}/cancel")
        return response.status_code
