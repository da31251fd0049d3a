"""
In-memory storage backend for local development, demos and tests.

Every collection is an insertion-ordered dict guarded by its own lock. Reads
take a snapshot under the lock; writes swap whole frozen records in, so a
reader never sees a half-merged update.
"""

from __future__ import annotations

import threading
from dataclasses import asdict, replace
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from ..config import OTP_TTL_MINUTES
from ..utils.error_handlers import (
    DuplicateEmailError,
    JobNotFoundError,
    StorageIntegrityError,
    UnknownCompanyError,
    UserNotFoundError,
)
from ..utils.security import burn_password_check, codes_match, hash_password, verify_password
from . import sample_data
from .common import (
    COMPANY_OPTIONAL_FIELDS,
    COURSE_OPTIONAL_FIELDS,
    DEFAULT_APPLICATION_STATUS,
    JOB_FIELDS,
    Clock,
    check_course_level,
    check_job_fields,
    check_user_update,
    job_matches,
    new_id,
    reject_unknown_fields,
    utcnow,
)
from .records import (
    Application,
    ApplicationWithJob,
    Company,
    Contact,
    Course,
    Job,
    JobWithCompany,
    PasswordResetOtp,
    User,
)


class MemoryStorage:
    """Dict-backed implementation of `Storage`."""

    def __init__(self, clock: Clock = utcnow, otp_ttl_minutes: int = OTP_TTL_MINUTES):
        self.clock = clock
        self.otp_ttl = timedelta(minutes=otp_ttl_minutes)

        self.users: Dict[str, User] = {}
        self.companies: Dict[str, Company] = {}
        self.jobs: Dict[str, Job] = {}
        self.courses: Dict[str, Course] = {}
        self.applications: Dict[str, Application] = {}
        self.contacts: Dict[str, Contact] = {}
        self.otps: Dict[str, PasswordResetOtp] = {}

        self._users_lock = threading.Lock()
        self._companies_lock = threading.Lock()
        self._jobs_lock = threading.Lock()
        self._courses_lock = threading.Lock()
        self._applications_lock = threading.Lock()
        self._contacts_lock = threading.Lock()
        self._otps_lock = threading.Lock()
        self._seed_lock = threading.Lock()
        self._seeded = False

    # -------------------- Seeding --------------------

    def seed_sample_data(self, now: Optional[datetime] = None) -> bool:
        """Load the starter companies, jobs and courses once. Returns False if already seeded."""
        with self._seed_lock:
            if self._seeded:
                return False
            now = now or self.clock()
            with self._companies_lock:
                for values in sample_data.SAMPLE_COMPANIES:
                    self.companies[values["id"]] = Company(created_at=now, **values)
            with self._jobs_lock:
                for values in sample_data.sample_jobs(now):
                    self.jobs[values["id"]] = Job(created_at=now, **values)
            with self._courses_lock:
                for values in sample_data.SAMPLE_COURSES:
                    self.courses[values["id"]] = Course(created_at=now, **values)
            self._seeded = True
            return True

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        for lock, collection in (
            (self._users_lock, self.users),
            (self._companies_lock, self.companies),
            (self._jobs_lock, self.jobs),
            (self._courses_lock, self.courses),
            (self._applications_lock, self.applications),
            (self._contacts_lock, self.contacts),
            (self._otps_lock, self.otps),
        ):
            with lock:
                collection.clear()
        with self._seed_lock:
            self._seeded = False

    # -------------------- Auth --------------------

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._users_lock:
            return self._find_user_by_email(email)

    def _find_user_by_email(self, email: str) -> Optional[User]:
        # Caller holds _users_lock.
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        with self._users_lock:
            return self.users.get(user_id)

    def create_user(
        self, email: str, full_name: str, password: str, phone: Optional[str] = None
    ) -> User:
        hashed = hash_password(password)
        with self._users_lock:
            if self._find_user_by_email(email) is not None:
                raise DuplicateEmailError(email)
            user = User(
                id=new_id(),
                email=email,
                full_name=full_name,
                phone=phone or None,
                password=hashed,
                created_at=self.clock(),
            )
            self.users[user.id] = user
            return user

    def update_user(self, user_id: str, **fields: Any) -> Optional[User]:
        check_user_update(fields)
        if "password" in fields:
            fields["password"] = hash_password(fields["password"])
        with self._users_lock:
            user = self.users.get(user_id)
            if user is None:
                return None
            new_email = fields.get("email")
            if new_email is not None and new_email != user.email:
                clash = self._find_user_by_email(new_email)
                if clash is not None and clash.id != user_id:
                    raise DuplicateEmailError(new_email)
            updated = replace(user, **fields)
            self.users[user_id] = updated
            return updated

    def validate_user(self, email: str, password: str) -> Optional[User]:
        user = self.get_user_by_email(email)
        if user is None:
            burn_password_check(password)
            return None
        return user if verify_password(password, user.password) else None

    def update_user_password(self, email: str, new_password: str) -> None:
        hashed = hash_password(new_password)
        with self._users_lock:
            user = self._find_user_by_email(email)
            if user is None:
                raise UserNotFoundError(email)
            self.users[user.id] = replace(user, password=hashed)

    # -------------------- Password reset OTP --------------------

    def store_password_reset_otp(self, email: str, code: str) -> None:
        now = self.clock()
        with self._otps_lock:
            self._purge_expired(now)
            self.otps[email] = PasswordResetOtp(code=code, expires_at=now + self.otp_ttl)

    def verify_password_reset_otp(self, email: str, code: str) -> bool:
        with self._otps_lock:
            stored = self.otps.get(email)
            if stored is None:
                return False
            if self.clock() > stored.expires_at:
                del self.otps[email]
                return False
            return codes_match(stored.code, code)

    def clear_password_reset_otp(self, email: str) -> None:
        with self._otps_lock:
            self.otps.pop(email, None)

    def purge_expired_otps(self) -> int:
        with self._otps_lock:
            return self._purge_expired(self.clock())

    def _purge_expired(self, now: datetime) -> int:
        # Caller holds _otps_lock.
        expired = [email for email, otp in self.otps.items() if now > otp.expires_at]
        for email in expired:
            del self.otps[email]
        return len(expired)

    # -------------------- Companies --------------------

    def get_companies(self) -> list[Company]:
        with self._companies_lock:
            return list(self.companies.values())

    def get_company(self, company_id: str) -> Optional[Company]:
        with self._companies_lock:
            return self.companies.get(company_id)

    def create_company(self, name: str, **fields: Any) -> Company:
        reject_unknown_fields(fields, set(COMPANY_OPTIONAL_FIELDS), "company")
        company = Company(
            id=new_id(),
            name=name,
            created_at=self.clock(),
            **{key: fields.get(key) or None for key in COMPANY_OPTIONAL_FIELDS},
        )
        with self._companies_lock:
            self.companies[company.id] = company
        return company

    # -------------------- Jobs --------------------

    def _with_company(self, job: Job, companies: Dict[str, Company]) -> JobWithCompany:
        company = companies.get(job.company_id)
        if company is None:
            raise StorageIntegrityError(
                f"Job {job.id} references missing company {job.company_id}",
                details={"job_id": job.id, "company_id": job.company_id},
            )
        return JobWithCompany(job=job, company=company)

    def get_jobs(
        self,
        experience_level: Optional[str] = None,
        location: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[JobWithCompany]:
        with self._jobs_lock:
            jobs = list(self.jobs.values())
        with self._companies_lock:
            companies = dict(self.companies)
        return [
            self._with_company(job, companies)
            for job in jobs
            if job_matches(job, experience_level, location, search)
        ]

    def get_job(self, job_id: str) -> Optional[JobWithCompany]:
        with self._jobs_lock:
            job = self.jobs.get(job_id)
        if job is None:
            return None
        with self._companies_lock:
            companies = dict(self.companies)
        return self._with_company(job, companies)

    def create_job(self, **fields: Any) -> Job:
        reject_unknown_fields(fields, JOB_FIELDS, "job")
        values = {"experience_min": None, "experience_max": None, "is_active": True}
        values.update(fields)
        if values["is_active"] is None:
            values["is_active"] = True
        check_job_fields(values)
        if self.get_company(values["company_id"]) is None:
            raise UnknownCompanyError(values["company_id"])

        job = Job(id=new_id(), created_at=self.clock(), **values)
        with self._jobs_lock:
            self.jobs[job.id] = job
        return job

    def update_job(self, job_id: str, **fields: Any) -> Optional[Job]:
        reject_unknown_fields(fields, JOB_FIELDS, "job")
        with self._jobs_lock:
            existing = self.jobs.get(job_id)
            if existing is None:
                return None
            merged = asdict(existing)
            merged.update(fields)
            check_job_fields(merged)
            if merged["company_id"] != existing.company_id and self.get_company(merged["company_id"]) is None:
                raise UnknownCompanyError(merged["company_id"])
            updated = replace(existing, **fields)
            self.jobs[job_id] = updated
            return updated

    # -------------------- Applications --------------------

    def create_application(
        self, user_id: str, job_id: str, status: Optional[str] = None
    ) -> Application:
        with self._users_lock:
            if user_id not in self.users:
                raise UserNotFoundError(user_id=user_id)
        with self._jobs_lock:
            if job_id not in self.jobs:
                raise JobNotFoundError(job_id)
        application = Application(
            id=new_id(),
            user_id=user_id,
            job_id=job_id,
            status=status or DEFAULT_APPLICATION_STATUS,
            applied_at=self.clock(),
        )
        with self._applications_lock:
            self.applications[application.id] = application
        return application

    def get_user_applications(self, user_id: str) -> list[ApplicationWithJob]:
        with self._applications_lock:
            mine = [app for app in self.applications.values() if app.user_id == user_id]
        with self._jobs_lock:
            jobs = dict(self.jobs)
        with self._companies_lock:
            companies = dict(self.companies)

        results = []
        for app in mine:
            job = jobs.get(app.job_id)
            if job is None:
                raise StorageIntegrityError(
                    f"Application {app.id} references missing job {app.job_id}",
                    details={"application_id": app.id, "job_id": app.job_id},
                )
            results.append(ApplicationWithJob(application=app, job=self._with_company(job, companies)))
        return results

    def delete_application(self, application_id: str) -> None:
        with self._applications_lock:
            self.applications.pop(application_id, None)

    # -------------------- Courses --------------------

    def get_courses(self, category: Optional[str] = None) -> list[Course]:
        with self._courses_lock:
            courses = list(self.courses.values())
        if category:
            courses = [course for course in courses if course.category == category]
        return courses

    def get_course(self, course_id: str) -> Optional[Course]:
        with self._courses_lock:
            return self.courses.get(course_id)

    def create_course(self, title: str, description: str, category: str, **fields: Any) -> Course:
        reject_unknown_fields(fields, set(COURSE_OPTIONAL_FIELDS), "course")
        check_course_level(fields.get("level"))
        course = Course(
            id=new_id(),
            title=title,
            description=description,
            category=category,
            created_at=self.clock(),
            **{key: fields.get(key) or None for key in COURSE_OPTIONAL_FIELDS},
        )
        with self._courses_lock:
            self.courses[course.id] = course
        return course

    # -------------------- Contacts --------------------

    def create_contact(self, name: str, email: str, message: str) -> Contact:
        contact = Contact(
            id=new_id(),
            name=name,
            email=email,
            message=message,
            created_at=self.clock(),
        )
        with self._contacts_lock:
            self.contacts[contact.id] = contact
        return contact
