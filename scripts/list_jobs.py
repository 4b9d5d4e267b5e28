"""
Browse the job board from the command line through the HTTP API.

Example:
    python scripts/list_jobs.py --search engineer --sort salary-high
"""

from __future__ import annotations

import argparse
import asyncio

from jobboard.client import JobBoardClient
from jobboard.listing import SORT_OPTIONS
from jobboard.logging_config import configure_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--url", default=None, help="API base URL (default: JOB_BOARD_API_URL)")
    parser.add_argument("--search", default="", help="Title or company substring")
    parser.add_argument("--location", default="", help="Exact location")
    parser.add_argument("--type", dest="job_type", default="", help="Exact job type")
    parser.add_argument("--sort", default="", choices=["", *SORT_OPTIONS])
    return parser.parse_args()


async def browse(args: argparse.Namespace) -> None:
    async with JobBoardClient(base_url=args.url) as client:
        view = await client.browse(args.search, args.location, args.job_type, args.sort)

    for job in view.jobs:
        print(f"{job.id}  {job.title} @ {job.company}  [{job.location}, {job.type}]  "
              f"${job.salary or 0:,}  {job.experience}y")
    print(f"\n{len(view.jobs)} jobs")
    print(f"Locations: {', '.join(view.locations) or '-'}")
    print(f"Job types: {', '.join(view.types) or '-'}")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(browse(parse_args()))
