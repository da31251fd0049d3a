"""
Plain records handed out by every storage backend.

Records are frozen: backends replace a stored record instead of mutating it,
so a value returned to a caller can never change underneath it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if isinstance(value, datetime) else value


@dataclass(frozen=True)
class User:
    id: str
    email: str
    full_name: str
    password: str  # bcrypt hash, never plaintext
    created_at: datetime
    phone: Optional[str] = None

    def as_public(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "phone": self.phone,
            "created_at": _iso(self.created_at),
        }


@dataclass(frozen=True)
class Company:
    id: str
    name: str
    created_at: datetime
    description: Optional[str] = None
    website: Optional[str] = None
    linkedin_url: Optional[str] = None
    logo: Optional[str] = None
    location: Optional[str] = None

    def as_dict(self) -> dict:
        payload = asdict(self)
        payload["created_at"] = _iso(self.created_at)
        return payload


@dataclass(frozen=True)
class Job:
    id: str
    company_id: str
    title: str
    description: str
    requirements: str
    qualifications: str
    skills: str
    experience_level: str
    location: str
    job_type: str
    closing_date: datetime
    created_at: datetime
    experience_min: Optional[int] = None
    experience_max: Optional[int] = None
    salary: Optional[str] = None
    apply_url: Optional[str] = None
    batch_eligible: Optional[str] = None
    is_active: bool = True

    def as_dict(self) -> dict:
        payload = asdict(self)
        payload["closing_date"] = _iso(self.closing_date)
        payload["created_at"] = _iso(self.created_at)
        return payload


@dataclass(frozen=True)
class JobWithCompany:
    job: Job
    company: Company

    def as_dict(self) -> dict:
        payload = self.job.as_dict()
        payload["company"] = self.company.as_dict()
        return payload


@dataclass(frozen=True)
class Course:
    id: str
    title: str
    description: str
    category: str
    created_at: datetime
    instructor: Optional[str] = None
    duration: Optional[str] = None
    level: Optional[str] = None
    image_url: Optional[str] = None
    course_url: Optional[str] = None
    price: Optional[str] = None

    def as_dict(self) -> dict:
        payload = asdict(self)
        payload["created_at"] = _iso(self.created_at)
        return payload


@dataclass(frozen=True)
class Application:
    id: str
    user_id: str
    job_id: str
    status: str
    applied_at: datetime

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "job_id": self.job_id,
            "status": self.status,
            "applied_at": _iso(self.applied_at),
        }


@dataclass(frozen=True)
class ApplicationWithJob:
    application: Application
    job: JobWithCompany

    def as_dict(self) -> dict:
        payload = self.application.as_dict()
        payload["job"] = self.job.as_dict()
        return payload


@dataclass(frozen=True)
class Contact:
    id: str
    name: str
    email: str
    message: str
    created_at: datetime

    def as_dict(self) -> dict:
        payload = asdict(self)
        payload["created_at"] = _iso(self.created_at)
        return payload


@dataclass(frozen=True)
class PasswordResetOtp:
    code: str
    expires_at: datetime
