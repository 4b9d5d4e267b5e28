"""
Tests for JobStore against a mocked Neo4j session.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from jobboard.models import JobCreate, JobUpdate
from jobboard.store import JobStore, job_from_node


NODE = {
    "id": "4f1c",
    "created_at": 1700000000000,
    "title": "Engineer",
    "company": "Acme",
    "location": "Remote",
    "type": "Full-time",
    "salary": 90000,
    "experience": 3,
}


def mock_session(**result_methods):
    result = MagicMock()
    for name, value in result_methods.items():
        setattr(result, name, AsyncMock(return_value=value))
    session = MagicMock()
    session.run = AsyncMock(return_value=result)
    return session


def test_job_from_node_maps_identifier_and_drops_bookkeeping():
    job = job_from_node(NODE)
    assert job.id == "4f1c"
    assert job.model_dump(by_alias=True)["_id"] == "4f1c"
    assert "created_at" not in job.model_dump()


@pytest.mark.asyncio
async def test_list_all_returns_jobs_in_store_order():
    second = {**NODE, "id": "9a9a", "created_at": NODE["created_at"] + 1}
    session = mock_session(data=[{"j": NODE}, {"j": second}])

    jobs = await JobStore(session).list_all()

    assert [job.id for job in jobs] == ["4f1c", "9a9a"]
    assert "ORDER BY j.created_at" in session.run.await_args.args[0]


@pytest.mark.asyncio
async def test_insert_sends_all_fields():
    session = mock_session(single={"j": NODE})
    payload = JobCreate(**{k: v for k, v in NODE.items() if k not in ("id", "created_at")})

    job = await JobStore(session).insert(payload)

    assert job.id == "4f1c"
    assert session.run.await_args.kwargs["fields"] == payload.model_dump()


@pytest.mark.asyncio
async def test_update_sends_only_supplied_fields():
    session = mock_session(single={"j": {**NODE, "salary": 1}})

    job = await JobStore(session).update("4f1c", JobUpdate(salary=1))

    assert job.salary == 1
    assert session.run.await_args.kwargs == {"job_id": "4f1c", "fields": {"salary": 1}}


@pytest.mark.asyncio
async def test_update_missing_job_returns_none():
    session = mock_session(single=None)
    assert await JobStore(session).update("nope", JobUpdate(title="X")) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("nodes_deleted, expected", [(1, True), (0, False)])
async def test_delete_reports_whether_a_node_was_removed(nodes_deleted, expected):
    summary = SimpleNamespace(counters=SimpleNamespace(nodes_deleted=nodes_deleted))
    session = mock_session(consume=summary)
    assert await JobStore(session).delete("4f1c") is expected
