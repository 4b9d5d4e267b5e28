"""
Seed script: load a handful of sample postings into Neo4j.

Jobs are matched on (title, company), so running it twice does not create
duplicates. Nodes get the same `id`/`created_at` layout the API writes.
"""

from __future__ import annotations

from typing import List

from neo4j import GraphDatabase

from jobboard.config import get_settings
from jobboard.db import CONSTRAINTS
from jobboard.models import JobCreate


SAMPLE_JOBS: List[dict] = [
    {"title": "Software Engineer", "company": "Acme", "location": "Remote",
     "type": "Full-time", "salary": 90000, "experience": 3},
    {"title": "Data Analyst", "company": "Globex", "location": "New York",
     "type": "Full-time", "salary": 72000, "experience": 2},
    {"title": "Frontend Developer", "company": "Initech", "location": "Austin",
     "type": "Contract", "salary": 65000, "experience": 1},
    {"title": "DevOps Engineer", "company": "Umbrella", "location": "Remote",
     "type": "Full-time", "salary": 110000, "experience": 5},
    {"title": "QA Intern", "company": "Zeta Labs", "location": "Berlin",
     "type": "Internship", "salary": 24000, "experience": 0},
    {"title": "Product Designer", "company": "Hooli", "location": "San Francisco",
     "type": "Part-time", "salary": 58000, "experience": 4},
]


def run(jobs: List[dict] | None = None) -> None:
    """Validate and write the sample jobs."""
    settings = get_settings()
    print(f"[SEED] Connecting to Neo4j at: {settings.neo4j_uri}")

    payloads = [JobCreate.model_validate(job) for job in (jobs or SAMPLE_JOBS)]

    driver = GraphDatabase.driver(
        settings.neo4j_uri,
        auth=(settings.neo4j_user, settings.neo4j_password),
    )
    with driver.session() as session:
        for statement in CONSTRAINTS:
            session.run(statement).consume()
        print("[SEED] ✓ Constraints in place")

        created = 0
        for payload in payloads:
            summary = session.run(
                """
                MERGE (j:Job {title: $title, company: $company})
                ON CREATE SET j.id = randomUUID(),
                              j.created_at = timestamp(),
                              j += $fields
                """,
                title=payload.title,
                company=payload.company,
                fields=payload.model_dump(),
            ).consume()
            created += summary.counters.nodes_created

        total = session.run("MATCH (j:Job) RETURN count(j) AS cnt").single()["cnt"]
        print(f"[SEED] ✓ Created {created} jobs, {total} in database")

    driver.close()


if __name__ == "__main__":
    run()
