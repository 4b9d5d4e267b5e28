"""
Client-side listing logic: search/dropdown filtering, sorting and the
dropdown vocabularies.

The board page runs the same rules in JavaScript; these functions are the
Python side used by the client and the scripts.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Tuple

from .models import Job

SORT_OPTIONS: Dict[str, Tuple[Callable[[Job], object], bool]] = {
    "salary-high": (lambda job: job.salary or 0, True),
    "salary-low": (lambda job: job.salary or 0, False),
    "experience-high": (lambda job: job.experience or 0, True),
    "experience-low": (lambda job: job.experience or 0, False),
    "company": (lambda job: ((job.company or "").lower(), job.company or ""), False),
}


def matches(job: Job, search: str = "", location: str = "", job_type: str = "") -> bool:
    """
    True when the job passes the search box and both dropdowns.

    The search term matches title or company, case-insensitively; the
    dropdowns require exact values. Empty inputs match everything.
    """
    term = search.lower()
    if term and term not in (job.title or "").lower() and term not in (job.company or "").lower():
        return False
    if location and job.location != location:
        return False
    if job_type and job.type != job_type:
        return False
    return True


def filter_jobs(
    jobs: Iterable[Job],
    search: str = "",
    location: str = "",
    job_type: str = "",
) -> List[Job]:
    return [job for job in jobs if matches(job, search, location, job_type)]


def sort_jobs(jobs: Iterable[Job], criterion: str = "") -> List[Job]:
    """
    Sort by one of SORT_OPTIONS. Unknown or empty criteria keep input order.

    `sorted` is stable, so ties keep their relative order.
    """
    option = SORT_OPTIONS.get(criterion)
    if option is None:
        return list(jobs)
    key, descending = option
    return sorted(jobs, key=key, reverse=descending)


def unique_values(jobs: Iterable[Job], field: str) -> List[str]:
    """Distinct non-empty values of a field, in first-seen order."""
    seen: Dict[str, None] = {}
    for job in jobs:
        value = getattr(job, field)
        if value:
            seen.setdefault(value, None)
    return list(seen)


def filter_options(jobs: Iterable[Job]) -> Dict[str, List[str]]:
    """
    Dropdown vocabularies for the jobs currently on display.

    Built from the displayed set, not the full catalogue, so a filtered
    view only offers values present in it.
    """
    jobs = list(jobs)
    return {
        "locations": unique_values(jobs, "location"),
        "types": unique_values(jobs, "type"),
    }
