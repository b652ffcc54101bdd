import asyncio
import logging

import pytest
from unittest.mock import AsyncMock, MagicMock

from cancel_duplicates.agents.canceller import cancel_runs
from cancel_duplicates.core.errors import GitHubAPIError
from cancel_duplicates.models.workflow_run import WorkflowRun


def make_run(number, run_id):
    return WorkflowRun(run_id=run_id, run_number=number, status="queued", event="push")


@pytest.fixture
def client():
    mock = MagicMock()
    mock.cancel_workflow_run = AsyncMock(return_value=202)
    return mock


def test_first_failure_does_not_stop_second(client, caplog):
    """One failed cancel is logged; the next target is still attempted."""
    client.cancel_workflow_run.side_effect = [
        GitHubAPIError(409, "Cannot cancel a workflow run that is completed."),
        202,
    ]
    targets = [make_run(11, 101), make_run(10, 100)]

    with caplog.at_level(logging.INFO):
        outcomes = asyncio.run(cancel_runs(client, "o", "r", targets))

    assert client.cancel_workflow_run.await_count == 2
    assert [o.run_id for o in outcomes] == [101, 100]
    assert outcomes[0].success is False
    assert outcomes[0].status_code == 409
    assert "completed" in outcomes[0].message
    assert outcomes[1].success is True
    assert outcomes[1].status_code == 202
    assert any(
        r.levelno == logging.WARNING and "101" in r.getMessage() and "409" in r.getMessage()
        for r in caplog.records
    )


def test_transport_error_recorded_without_status(client):
    client.cancel_workflow_run.side_effect = GitHubAPIError(None, "connection reset")
    outcomes = asyncio.run(cancel_runs(client, "o", "r", [make_run(1, 10)]))
    assert outcomes[0].success is False
    assert outcomes[0].status_code is None


def test_sequential_by_default_keeps_order(client):
    order = []

    async def cancel(owner, repo, run_id):
        order.append(run_id)
        await asyncio.sleep(0)
        return 202

    client.cancel_workflow_run.side_effect = cancel
    targets = [make_run(n, n * 10) for n in (5, 4, 3)]
    asyncio.run(cancel_runs(client, "o", "r", targets))
    assert order == [50, 40, 30]
    client.cancel_workflow_run.assert_any_await("o", "r", 50)


def test_parallel_limit_respected(client):
    in_flight = {"now": 0, "peak": 0}

    async def cancel(owner, repo, run_id):
        in_flight["now"] += 1
        in_flight["peak"] = max(in_flight["peak"], in_flight["now"])
        await asyncio.sleep(0.01)
        in_flight["now"] -= 1
        return 202

    client.cancel_workflow_run.side_effect = cancel
    targets = [make_run(n, n) for n in range(1, 8)]
    outcomes = asyncio.run(cancel_runs(client, "o", "r", targets, max_parallel=3))

    assert in_flight["peak"] == 3
    assert [o.run_id for o in outcomes] == list(range(1, 8))
    assert all(o.success for o in outcomes)


def test_dry_run_issues_no_requests(client):
    outcomes = asyncio.run(
        cancel_runs(client, "o", "r", [make_run(2, 20), make_run(1, 10)], dry_run=True)
    )
    client.cancel_workflow_run.assert_not_called()
    assert [o.run_id for o in outcomes] == [20, 10]
    assert all(o.dry_run and o.success for o in outcomes)


def test_no_targets(client):
    assert asyncio.run(cancel_runs(client, "o", "r", [])) == []
    client.cancel_workflow_run.assert_not_called()
