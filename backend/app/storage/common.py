"""
Rules shared by every storage backend: ids, clocks, field sets and the job
filter predicate.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from .records import Job

Clock = Callable[[], datetime]

DEFAULT_APPLICATION_STATUS = "submitted"
EXPERIENCE_LEVELS = ("fresher", "experienced")
COURSE_LEVELS = ("beginner", "intermediate", "advanced")

USER_UPDATABLE_FIELDS = {"email", "full_name", "phone", "password"}
USER_REQUIRED_FIELDS = ("email", "full_name", "password")

JOB_REQUIRED_FIELDS = (
    "company_id",
    "title",
    "description",
    "requirements",
    "qualifications",
    "skills",
    "experience_level",
    "location",
    "job_type",
    "closing_date",
)
JOB_OPTIONAL_FIELDS = (
    "experience_min",
    "experience_max",
    "salary",
    "apply_url",
    "batch_eligible",
    "is_active",
)
JOB_FIELDS = set(JOB_REQUIRED_FIELDS) | set(JOB_OPTIONAL_FIELDS)

COMPANY_OPTIONAL_FIELDS = ("description", "website", "linkedin_url", "logo", "location")
COURSE_OPTIONAL_FIELDS = ("instructor", "duration", "level", "image_url", "course_url", "price")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone=True columns.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


def reject_unknown_fields(fields: dict[str, Any], allowed: set[str], entity: str) -> None:
    unknown = sorted(set(fields) - allowed)
    if unknown:
        raise ValueError(f"Unknown {entity} field(s): {', '.join(unknown)}")


def check_user_update(fields: dict[str, Any]) -> None:
    """Reject unknown fields and blank values for the fields every user must keep."""
    reject_unknown_fields(fields, USER_UPDATABLE_FIELDS, "user")
    blank = [name for name in USER_REQUIRED_FIELDS if name in fields and fields[name] in (None, "")]
    if blank:
        raise ValueError(f"User field(s) cannot be empty: {', '.join(blank)}")


def check_job_fields(values: dict[str, Any]) -> None:
    """Validate a complete set of job values (after defaults or a merge)."""
    missing = [name for name in JOB_REQUIRED_FIELDS if values.get(name) in (None, "")]
    if missing:
        raise ValueError(f"Missing required job field(s): {', '.join(missing)}")

    if values["experience_level"] not in EXPERIENCE_LEVELS:
        raise ValueError(f"experience_level must be one of: {', '.join(EXPERIENCE_LEVELS)}")

    if not isinstance(values.get("is_active"), bool):
        raise ValueError("is_active must be true or false")

    lo, hi = values.get("experience_min"), values.get("experience_max")
    if lo is not None and hi is not None and lo > hi:
        raise ValueError("experience_min must not exceed experience_max")


def check_course_level(level: Optional[str]) -> None:
    if level is not None and level not in COURSE_LEVELS:
        raise ValueError(f"level must be one of: {', '.join(COURSE_LEVELS)}")


def job_matches(
    job: Job,
    experience_level: Optional[str] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
) -> bool:
    """
    Filters compose with AND. Level is exact; location and search are
    case-insensitive substring checks, search hitting title, description or skills.
    """
    if experience_level and job.experience_level != experience_level:
        return False
    if location and location.lower() not in (job.location or "").lower():
        return False
    if search:
        needle = search.lower()
        haystacks = (job.title, job.description, job.skills)
        if not any(needle in (text or "").lower() for text in haystacks):
            return False
    return True
