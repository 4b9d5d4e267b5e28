"""
Async client for the job board API.

Mirrors the browser data layer: failures are logged and turned into an
empty or neutral result instead of being raised, so callers cannot tell
"no jobs" from "fetch failed".
"""

from __future__ import annotations

import logging
from urllib.parse import quote
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import httpx

from .config import get_settings
from .listing import filter_jobs, filter_options, sort_jobs
from .models import Job, SessionInfo

logger = logging.getLogger(__name__)


@dataclass
class BoardView:
    """What the board shows after one search/filter/sort action."""

    jobs: List[Job]
    locations: List[str] = field(default_factory=list)
    types: List[str] = field(default_factory=list)


class JobBoardClient:
    """Thin wrapper over the job routes and the auth routes."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url or get_settings().api_base_url
        self._http = httpx.AsyncClient(
            base_url=self.base_url, transport=transport, timeout=timeout
        )

    async def __aenter__(self) -> "JobBoardClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def list_jobs(self) -> List[Job]:
        try:
            response = await self._http.get("/jobs")
            response.raise_for_status()
            return [Job.model_validate(item) for item in response.json()]
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error fetching jobs: %s", exc)
            return []

    async def create_job(self, payload: Mapping[str, Any]) -> Optional[Job]:
        try:
            response = await self._http.post("/jobs", json=dict(payload))
            response.raise_for_status()
            return Job.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error posting job: %s", exc)
            return None

    async def delete_job(self, job_id: str) -> bool:
        try:
            response = await self._http.delete(f"/jobs/{quote(job_id, safe='')}")
            response.raise_for_status()
            return True
        except httpx.HTTPError as exc:
            logger.error("Error deleting job %s: %s", job_id, exc)
            return False

    async def browse(
        self,
        search: str = "",
        location: str = "",
        job_type: str = "",
        sort: str = "",
    ) -> BoardView:
        """
        Refetch the whole list, then filter and sort it locally.

        The dropdown vocabularies come from the resulting view.
        """
        jobs = sort_jobs(filter_jobs(await self.list_jobs(), search, location, job_type), sort)
        options = filter_options(jobs)
        return BoardView(jobs=jobs, locations=options["locations"], types=options["types"])

    async def signup(self, username: str, password: str) -> bool:
        try:
            response = await self._http.post(
                "/auth/signup", json={"username": username, "password": password}
            )
            response.raise_for_status()
            return True
        except httpx.HTTPError as exc:
            logger.error("Signup failed for %s: %s", username, exc)
            return False

    async def login(self, username: str, password: str) -> Optional[SessionInfo]:
        try:
            response = await self._http.post(
                "/auth/login", json={"username": username, "password": password}
            )
            response.raise_for_status()
            return SessionInfo.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Login failed for %s: %s", username, exc)
            return None

    async def logout(self, session: SessionInfo) -> None:
        try:
            response = await self._http.post("/auth/logout", headers=_bearer(session))
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Logout failed for %s: %s", session.username, exc)


def _bearer(session: SessionInfo) -> Dict[str, str]:
    return {"Authorization": f"Bearer {session.token}"}
