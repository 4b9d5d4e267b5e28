"""
Pytest fixtures: in-memory stand-ins for the Neo4j-backed stores, installed
through FastAPI dependency overrides so no database is needed.
"""

import uuid
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from jobboard.accounts import hash_password, verify_password
from jobboard.main import app, get_account_store, get_job_store
from jobboard.models import Job, JobCreate, JobUpdate, SessionInfo


class StoreDown(RuntimeError):
    pass


class InMemoryJobStore:
    """Dict-backed JobStore with the same async interface."""

    def __init__(self) -> None:
        self.docs: Dict[str, dict] = {}
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise StoreDown("store unreachable")

    def _job(self, job_id: str) -> Job:
        return Job.model_validate({"_id": job_id, **self.docs[job_id]})

    async def list_all(self) -> List[Job]:
        self._check()
        return [self._job(job_id) for job_id in self.docs]

    async def insert(self, payload: JobCreate) -> Job:
        self._check()
        job_id = uuid.uuid4().hex
        self.docs[job_id] = payload.model_dump()
        return self._job(job_id)

    async def update(self, job_id: str, payload: JobUpdate) -> Optional[Job]:
        self._check()
        if job_id not in self.docs:
            return None
        self.docs[job_id].update(payload.changes())
        return self._job(job_id)

    async def delete(self, job_id: str) -> bool:
        self._check()
        return self.docs.pop(job_id, None) is not None


class InMemoryAccountStore:
    """Dict-backed AccountStore."""

    def __init__(self) -> None:
        self.accounts: Dict[str, str] = {}
        self.sessions: Dict[str, str] = {}

    async def signup(self, username: str, password: str) -> None:
        self.accounts[username] = hash_password(password)
        self.sessions = {t: u for t, u in self.sessions.items() if u != username}

    async def login(self, username: str, password: str) -> Optional[SessionInfo]:
        encoded = self.accounts.get(username)
        if encoded is None or not verify_password(password, encoded):
            return None
        token = uuid.uuid4().hex
        self.sessions[token] = username
        return SessionInfo(username=username, token=token)

    async def logout(self, token: str) -> None:
        self.sessions.pop(token, None)

    async def current(self, token: str) -> Optional[str]:
        return self.sessions.get(token)


@pytest.fixture
def job_store():
    return InMemoryJobStore()


@pytest.fixture
def account_store():
    return InMemoryAccountStore()


@pytest.fixture
def client(job_store, account_store):
    """FastAPI test client wired to the in-memory stores."""
    app.dependency_overrides[get_job_store] = lambda: job_store
    app.dependency_overrides[get_account_store] = lambda: account_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def engineer_payload():
    return {
        "title": "Engineer",
        "company": "Acme",
        "location": "Remote",
        "type": "Full-time",
        "salary": 90000,
        "experience": 3,
    }
