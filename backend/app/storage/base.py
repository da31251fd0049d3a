"""
Storage capability interface consumed by the route layer.

Each capability group is its own Protocol so a route module can depend on
only what it uses; `Storage` is the full set every backend implements.
Lookups by id return None when nothing matches. Referential and uniqueness
violations raise the errors in `utils.error_handlers`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol

from .records import (
    Application,
    ApplicationWithJob,
    Company,
    Contact,
    Course,
    Job,
    JobWithCompany,
    User,
)


class AuthStore(Protocol):
    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        ...

    def create_user(
        self, email: str, full_name: str, password: str, phone: Optional[str] = None
    ) -> User:
        ...

    def update_user(self, user_id: str, **fields: Any) -> Optional[User]:
        ...

    def validate_user(self, email: str, password: str) -> Optional[User]:
        ...

    def update_user_password(self, email: str, new_password: str) -> None:
        ...


class OtpStore(Protocol):
    def store_password_reset_otp(self, email: str, code: str) -> None:
        ...

    def verify_password_reset_otp(self, email: str, code: str) -> bool:
        ...

    def clear_password_reset_otp(self, email: str) -> None:
        ...

    def purge_expired_otps(self) -> int:
        ...


class CompanyStore(Protocol):
    def get_companies(self) -> list[Company]:
        ...

    def get_company(self, company_id: str) -> Optional[Company]:
        ...

    def create_company(self, name: str, **fields: Any) -> Company:
        ...


class JobStore(Protocol):
    def get_jobs(
        self,
        experience_level: Optional[str] = None,
        location: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[JobWithCompany]:
        ...

    def get_job(self, job_id: str) -> Optional[JobWithCompany]:
        ...

    def create_job(self, **fields: Any) -> Job:
        ...

    def update_job(self, job_id: str, **fields: Any) -> Optional[Job]:
        ...


class ApplicationStore(Protocol):
    def create_application(
        self, user_id: str, job_id: str, status: Optional[str] = None
    ) -> Application:
        ...

    def get_user_applications(self, user_id: str) -> list[ApplicationWithJob]:
        ...

    def delete_application(self, application_id: str) -> None:
        ...


class CourseStore(Protocol):
    def get_courses(self, category: Optional[str] = None) -> list[Course]:
        ...

    def get_course(self, course_id: str) -> Optional[Course]:
        ...

    def create_course(
        self, title: str, description: str, category: str, **fields: Any
    ) -> Course:
        ...


class ContactStore(Protocol):
    def create_contact(self, name: str, email: str, message: str) -> Contact:
        ...


class Storage(
    AuthStore,
    OtpStore,
    CompanyStore,
    JobStore,
    ApplicationStore,
    CourseStore,
    ContactStore,
    Protocol,
):
    """Everything the API needs from persistence."""

    def seed_sample_data(self, now: Optional[datetime] = None) -> bool:
        ...
