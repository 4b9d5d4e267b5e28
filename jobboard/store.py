"""
Job record store: one :Job node per posting.

Node properties mirror the document fields, plus the store-assigned `id`
(a random UUID) and `created_at`, a millisecond timestamp that orders the
list; jobs created in the same millisecond fall back to `id` order.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from neo4j import AsyncSession

from .models import Job, JobCreate, JobUpdate

logger = logging.getLogger(__name__)


def job_from_node(node: Mapping[str, Any]) -> Job:
    """Turn :Job node properties into the API model."""
    props = dict(node)
    props.pop("created_at", None)
    return Job.model_validate({"_id": props.pop("id"), **props})


class JobStore:
    """CRUD access to :Job nodes through a single Neo4j session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self) -> List[Job]:
        """Every job, oldest first. No filtering happens here."""
        query = """
        MATCH (j:Job)
        RETURN j
        ORDER BY j.created_at, j.id
        """
        result = await self.session.run(query)
        records = await result.data()
        return [job_from_node(record["j"]) for record in records]

    async def insert(self, payload: JobCreate) -> Job:
        """Persist a new job and return it with its assigned identifier."""
        query = """
        CREATE (j:Job {id: randomUUID(), created_at: timestamp()})
        SET j += $fields
        RETURN j
        """
        result = await self.session.run(query, fields=payload.model_dump())
        record = await result.single()
        job = job_from_node(record["j"])
        logger.info("Created job %s (%s @ %s)", job.id, job.title, job.company)
        return job

    async def update(self, job_id: str, payload: JobUpdate) -> Optional[Job]:
        """
        Overwrite the supplied fields of an existing job.

        Returns None when no job has that identifier.
        """
        query = """
        MATCH (j:Job {id: $job_id})
        SET j += $fields
        RETURN j
        """
        result = await self.session.run(query, job_id=job_id, fields=payload.changes())
        record = await result.single()
        if record is None:
            return None
        return job_from_node(record["j"])

    async def delete(self, job_id: str) -> bool:
        """Remove a job. Returns False when no job has that identifier."""
        query = """
        MATCH (j:Job {id: $job_id})
        DETACH DELETE j
        """
        result = await self.session.run(query, job_id=job_id)
        summary = await result.consume()
        deleted = summary.counters.nodes_deleted > 0
        if deleted:
            logger.info("Deleted job %s", job_id)
        return deleted
