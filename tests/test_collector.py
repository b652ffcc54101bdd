"""
Collector Tests
===============
Page normalisation, merging, and exhaustive per-status listing.
"""
import asyncio

import pytest
from unittest.mock import MagicMock

from cancel_duplicates.agents.collector import (
    collect_runs,
    descending,
    merge_runs,
    normalize_page,
)
from cancel_duplicates.core.errors import DedupeError, GitHubAPIError, MalformedResponseError
from cancel_duplicates.models.workflow_run import WorkflowRun


def payload(number, run_id, status="queued", event="push"):
    return {
        "id": run_id,
        "run_number": number,
        "status": status,
        "event": event,
        "workflow_url": "https://api.github.com/repos/o/r/actions/workflows/7",
        "head_branch": "main",
    }


class FakeClient:
    """Serves pre-built pages per status and records the queries made."""

    def __init__(self, pages_by_status, fail_on=None):
        self.pages_by_status = pages_by_status
        self.fail_on = fail_on
        self.calls = []

    async def iter_workflow_run_pages(self, owner, repo, workflow_id, status, branch):
        self.calls.append((owner, repo, workflow_id, status, branch))
        if status == self.fail_on:
            raise GitHubAPIError(500, "boom")
        for page in self.pages_by_status.get(status, []):
            await asyncio.sleep(0)
            yield page


def test_normalize_wrapped_page():
    page = {"total_count": 1, "workflow_runs": [payload(1, 10)]}
    assert normalize_page(page) == [payload(1, 10)]


def test_normalize_bare_list_page():
    assert normalize_page([payload(1, 10)]) == [payload(1, 10)]


@pytest.mark.parametrize("page", [{"message": "odd"}, {"workflow_runs": None}, None, "runs"])
def test_normalize_unknown_shape_is_fatal(page):
    with pytest.raises(MalformedResponseError):
        normalize_page(page)


def test_merge_overwrites_same_run_number():
    first = WorkflowRun(run_id=10, run_number=1, status="queued", event="push")
    second = WorkflowRun(run_id=10, run_number=1, status="in_progress", event="push")
    collected = merge_runs({}, [first])
    merge_runs(collected, [second])
    assert len(collected) == 1
    assert collected[1].status == "in_progress"


def test_descending_order():
    runs = [WorkflowRun(run_id=n, run_number=n, status="queued", event="push") for n in (3, 11, 7)]
    collected = merge_runs({}, runs)
    assert [r.run_number for r in descending(collected)] == [11, 7, 3]


def test_collect_consumes_every_page_for_each_status():
    client = FakeClient({
        "queued": [
            {"workflow_runs": [payload(1, 10), payload(2, 20)]},
            # bare list variant on a continuation page
            [payload(3, 30)],
        ],
        "in_progress": [
            {"workflow_runs": [payload(4, 40, status="in_progress")]},
            {"workflow_runs": []},
        ],
    })

    collected = asyncio.run(collect_runs(client, "o", "r", "7", "main"))

    assert sorted(collected) == [1, 2, 3, 4]
    assert collected[4].status == "in_progress"
    assert [c[3] for c in client.calls] == ["queued", "in_progress"]
    assert all(c[:3] == ("o", "r", "7") and c[4] == "main" for c in client.calls)


def test_collect_empty():
    client = FakeClient({})
    assert asyncio.run(collect_runs(client, "o", "r", "7", "main")) == {}


def test_collect_run_seen_in_both_statuses_keeps_later():
    client = FakeClient({
        "queued": [[payload(5, 50, status="queued")]],
        "in_progress": [[payload(5, 50, status="in_progress")]],
    })
    collected = asyncio.run(collect_runs(client, "o", "r", "7", "main"))
    assert len(collected) == 1
    assert collected[5].status == "in_progress"


def test_listing_failure_propagates():
    client = FakeClient({"queued": [[payload(1, 10)]]}, fail_on="in_progress")
    with pytest.raises(GitHubAPIError):
        asyncio.run(collect_runs(client, "o", "r", "7", "main"))


def test_custom_status_list():
    client = MagicMock()
    seen = []

    async def pages(owner, repo, workflow_id, status, branch):
        seen.append(status)
        yield [payload(1, 10, status=status)]

    client.iter_workflow_run_pages = pages
    collected = asyncio.run(collect_runs(client, "o", "r", "7", "dev", statuses=("queued",)))
    assert seen == ["queued"]
    assert list(collected) == [1]


def test_error_body_page_aborts_collection():
    """A 200 page carrying only an API message must not pass as an empty listing."""
    client = FakeClient({
        "queued": [{"message": "API rate limit exceeded", "documentation_url": "https://docs.github.com"}],
    })
    with pytest.raises(MalformedResponseError, match="rate limit"):
        asyncio.run(collect_runs(client, "o", "r", "7", "main"))


def test_malformed_run_record_aborts_collection():
    client = FakeClient({
        "queued": [[{"id": 1, "run_number": 1, "status": None, "event": "push"}]],
    })
    with pytest.raises(DedupeError) as exc:
        asyncio.run(collect_runs(client, "o", "r", "7", "main"))
    assert isinstance(exc.value, MalformedResponseError)
    assert "status" in str(exc.value)
