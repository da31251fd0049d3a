"""
SQLAlchemy-backed storage. Accepts any SQLAlchemy URL (MySQL, Postgres, or SQLite for tests).

Filters run in SQL with the same semantics as the in-memory backend: exact
experience level, case-insensitive substring for location and for the
title/description/skills search, all combined with AND.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import OTP_TTL_MINUTES
from ..database import init_db, make_engine, make_session_factory
from ..models.application import ApplicationRow
from ..models.company import CompanyRow
from ..models.contact import ContactRow
from ..models.course import CourseRow
from ..models.job import JobRow
from ..models.password_reset import PasswordResetOtpRow
from ..models.user import UserRow
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
    as_utc,
    check_course_level,
    check_job_fields,
    check_user_update,
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
    User,
)


def _to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        full_name=row.full_name,
        phone=row.phone,
        password=row.password,
        created_at=as_utc(row.created_at),
    )


def _to_company(row: CompanyRow) -> Company:
    return Company(
        id=row.id,
        name=row.name,
        description=row.description,
        website=row.website,
        linkedin_url=row.linkedin_url,
        logo=row.logo,
        location=row.location,
        created_at=as_utc(row.created_at),
    )


def _to_job(row: JobRow) -> Job:
    return Job(
        id=row.id,
        company_id=row.company_id,
        title=row.title,
        description=row.description,
        requirements=row.requirements,
        qualifications=row.qualifications,
        skills=row.skills,
        experience_level=row.experience_level,
        experience_min=row.experience_min,
        experience_max=row.experience_max,
        location=row.location,
        job_type=row.job_type,
        salary=row.salary,
        apply_url=row.apply_url,
        closing_date=as_utc(row.closing_date),
        batch_eligible=row.batch_eligible,
        is_active=bool(row.is_active),
        created_at=as_utc(row.created_at),
    )


def _to_course(row: CourseRow) -> Course:
    return Course(
        id=row.id,
        title=row.title,
        description=row.description,
        instructor=row.instructor,
        duration=row.duration,
        level=row.level,
        category=row.category,
        image_url=row.image_url,
        course_url=row.course_url,
        price=row.price,
        created_at=as_utc(row.created_at),
    )


def _to_application(row: ApplicationRow) -> Application:
    return Application(
        id=row.id,
        user_id=row.user_id,
        job_id=row.job_id,
        status=row.status,
        applied_at=as_utc(row.applied_at),
    )


def _to_contact(row: ContactRow) -> Contact:
    return Contact(
        id=row.id,
        name=row.name,
        email=row.email,
        message=row.message,
        created_at=as_utc(row.created_at),
    )


def _joined(job: JobRow, company: Optional[CompanyRow]) -> JobWithCompany:
    if company is None:
        raise StorageIntegrityError(
            f"Job {job.id} references missing company {job.company_id}",
            details={"job_id": job.id, "company_id": job.company_id},
        )
    return JobWithCompany(job=_to_job(job), company=_to_company(company))


SEQ_ATTEMPTS = 5


def _next_seq(session: Session, model) -> int:  # noqa: ANN001
    current = session.scalar(select(func.max(model.seq)))
    return (current or 0) + 1


def _insert_in_order(session: Session, row) -> None:  # noqa: ANN001
    """
    Commit `row` with the next insertion counter for its table.

    `seq` is unique, so a concurrent insert that read the same max fails the
    commit; take a fresh value and try again.
    """
    model = type(row)
    for attempt in range(1, SEQ_ATTEMPTS + 1):
        row.seq = _next_seq(session, model)
        session.add(row)
        try:
            session.commit()
            return
        except IntegrityError:
            session.rollback()
            if attempt == SEQ_ATTEMPTS:
                raise


class SqlStorage:
    """Relational implementation of `Storage`; one session per operation."""

    def __init__(
        self,
        database_url: str,
        clock: Clock = utcnow,
        otp_ttl_minutes: int = OTP_TTL_MINUTES,
    ):
        self.engine = make_engine(database_url)
        self.Session = make_session_factory(self.engine)
        self.clock = clock
        self.otp_ttl = timedelta(minutes=otp_ttl_minutes)
        init_db(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    # -------------------- Seeding --------------------

    def seed_sample_data(self, now: Optional[datetime] = None) -> bool:
        now = now or self.clock()
        first_id = sample_data.SAMPLE_COMPANIES[0]["id"]
        with self.Session() as session:
            if session.get(CompanyRow, first_id) is not None:
                return False
            seq = _next_seq(session, CompanyRow)
            for offset, values in enumerate(sample_data.SAMPLE_COMPANIES):
                session.add(CompanyRow(seq=seq + offset, created_at=now, **values))
            seq = _next_seq(session, JobRow)
            for offset, values in enumerate(sample_data.sample_jobs(now)):
                session.add(JobRow(seq=seq + offset, created_at=now, **values))
            seq = _next_seq(session, CourseRow)
            for offset, values in enumerate(sample_data.SAMPLE_COURSES):
                session.add(CourseRow(seq=seq + offset, created_at=now, **values))
            session.commit()
            return True

    # -------------------- Auth --------------------

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self.Session() as session:
            row = session.execute(select(UserRow).where(UserRow.email == email)).scalar_one_or_none()
            return _to_user(row) if row else None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        with self.Session() as session:
            row = session.get(UserRow, user_id)
            return _to_user(row) if row else None

    def create_user(
        self, email: str, full_name: str, password: str, phone: Optional[str] = None
    ) -> User:
        hashed = hash_password(password)
        with self.Session() as session:
            existing = session.execute(select(UserRow.id).where(UserRow.email == email)).first()
            if existing:
                raise DuplicateEmailError(email)
            row = UserRow(
                id=new_id(),
                email=email,
                full_name=full_name,
                phone=phone or None,
                password=hashed,
                created_at=self.clock(),
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError:
                # Lost a race with a concurrent signup for the same email.
                session.rollback()
                raise DuplicateEmailError(email)
            return _to_user(row)

    def update_user(self, user_id: str, **fields: Any) -> Optional[User]:
        check_user_update(fields)
        if "password" in fields:
            fields["password"] = hash_password(fields["password"])
        with self.Session() as session:
            row = session.get(UserRow, user_id)
            if row is None:
                return None
            new_email = fields.get("email")
            if new_email is not None and new_email != row.email:
                clash = session.execute(
                    select(UserRow.id).where(UserRow.email == new_email, UserRow.id != user_id)
                ).first()
                if clash:
                    raise DuplicateEmailError(new_email)
            for key, value in fields.items():
                setattr(row, key, value)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                if new_email is None:
                    raise
                # Lost a race with another user claiming the same email.
                raise DuplicateEmailError(new_email)
            return _to_user(row)

    def validate_user(self, email: str, password: str) -> Optional[User]:
        user = self.get_user_by_email(email)
        if user is None:
            burn_password_check(password)
            return None
        return user if verify_password(password, user.password) else None

    def update_user_password(self, email: str, new_password: str) -> None:
        hashed = hash_password(new_password)
        with self.Session() as session:
            row = session.execute(select(UserRow).where(UserRow.email == email)).scalar_one_or_none()
            if row is None:
                raise UserNotFoundError(email)
            row.password = hashed
            session.commit()

    # -------------------- Password reset OTP --------------------

    def store_password_reset_otp(self, email: str, code: str) -> None:
        now = self.clock()
        with self.Session() as session:
            session.execute(delete(PasswordResetOtpRow).where(PasswordResetOtpRow.expires_at < now))
            session.merge(PasswordResetOtpRow(email=email, code=code, expires_at=now + self.otp_ttl))
            session.commit()

    def verify_password_reset_otp(self, email: str, code: str) -> bool:
        with self.Session() as session:
            row = session.get(PasswordResetOtpRow, email)
            if row is None:
                return False
            if self.clock() > as_utc(row.expires_at):
                session.delete(row)
                session.commit()
                return False
            return codes_match(row.code, code)

    def clear_password_reset_otp(self, email: str) -> None:
        with self.Session() as session:
            session.execute(delete(PasswordResetOtpRow).where(PasswordResetOtpRow.email == email))
            session.commit()

    def purge_expired_otps(self) -> int:
        with self.Session() as session:
            result = session.execute(
                delete(PasswordResetOtpRow).where(PasswordResetOtpRow.expires_at < self.clock())
            )
            session.commit()
            return result.rowcount or 0

    # -------------------- Companies --------------------

    def get_companies(self) -> list[Company]:
        with self.Session() as session:
            rows = session.execute(select(CompanyRow).order_by(CompanyRow.seq, CompanyRow.id)).scalars()
            return [_to_company(row) for row in rows]

    def get_company(self, company_id: str) -> Optional[Company]:
        with self.Session() as session:
            row = session.get(CompanyRow, company_id)
            return _to_company(row) if row else None

    def create_company(self, name: str, **fields: Any) -> Company:
        reject_unknown_fields(fields, set(COMPANY_OPTIONAL_FIELDS), "company")
        with self.Session() as session:
            row = CompanyRow(
                id=new_id(),
                name=name,
                created_at=self.clock(),
                **{key: fields.get(key) or None for key in COMPANY_OPTIONAL_FIELDS},
            )
            _insert_in_order(session, row)
            return _to_company(row)

    # -------------------- Jobs --------------------

    def get_jobs(
        self,
        experience_level: Optional[str] = None,
        location: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[JobWithCompany]:
        stmt = select(JobRow, CompanyRow).outerjoin(CompanyRow, JobRow.company_id == CompanyRow.id)
        if experience_level:
            stmt = stmt.where(JobRow.experience_level == experience_level)
        if location:
            stmt = stmt.where(JobRow.location.icontains(location, autoescape=True))
        if search:
            stmt = stmt.where(
                or_(
                    JobRow.title.icontains(search, autoescape=True),
                    JobRow.description.icontains(search, autoescape=True),
                    JobRow.skills.icontains(search, autoescape=True),
                )
            )
        stmt = stmt.order_by(JobRow.seq, JobRow.id)

        with self.Session() as session:
            return [_joined(job, company) for job, company in session.execute(stmt).all()]

    def get_job(self, job_id: str) -> Optional[JobWithCompany]:
        stmt = (
            select(JobRow, CompanyRow)
            .outerjoin(CompanyRow, JobRow.company_id == CompanyRow.id)
            .where(JobRow.id == job_id)
        )
        with self.Session() as session:
            found = session.execute(stmt).first()
            if found is None:
                return None
            return _joined(*found)

    def create_job(self, **fields: Any) -> Job:
        reject_unknown_fields(fields, JOB_FIELDS, "job")
        values = {"experience_min": None, "experience_max": None, "is_active": True}
        values.update(fields)
        if values["is_active"] is None:
            values["is_active"] = True
        check_job_fields(values)

        with self.Session() as session:
            if session.get(CompanyRow, values["company_id"]) is None:
                raise UnknownCompanyError(values["company_id"])
            row = JobRow(
                id=new_id(),
                created_at=self.clock(),
                **values,
            )
            _insert_in_order(session, row)
            return _to_job(row)

    def update_job(self, job_id: str, **fields: Any) -> Optional[Job]:
        reject_unknown_fields(fields, JOB_FIELDS, "job")
        with self.Session() as session:
            row = session.get(JobRow, job_id, with_for_update=True)
            if row is None:
                return None
            merged = {name: getattr(row, name) for name in JOB_FIELDS}
            merged.update(fields)
            check_job_fields(merged)
            if merged["company_id"] != row.company_id and session.get(CompanyRow, merged["company_id"]) is None:
                raise UnknownCompanyError(merged["company_id"])
            for key, value in fields.items():
                setattr(row, key, value)
            session.commit()
            return _to_job(row)

    # -------------------- Applications --------------------

    def create_application(
        self, user_id: str, job_id: str, status: Optional[str] = None
    ) -> Application:
        with self.Session() as session:
            if session.get(UserRow, user_id) is None:
                raise UserNotFoundError(user_id=user_id)
            if session.get(JobRow, job_id) is None:
                raise JobNotFoundError(job_id)
            row = ApplicationRow(
                id=new_id(),
                user_id=user_id,
                job_id=job_id,
                status=status or DEFAULT_APPLICATION_STATUS,
                applied_at=self.clock(),
            )
            _insert_in_order(session, row)
            return _to_application(row)

    def get_user_applications(self, user_id: str) -> list[ApplicationWithJob]:
        stmt = (
            select(ApplicationRow, JobRow, CompanyRow)
            .outerjoin(JobRow, ApplicationRow.job_id == JobRow.id)
            .outerjoin(CompanyRow, JobRow.company_id == CompanyRow.id)
            .where(ApplicationRow.user_id == user_id)
            .order_by(ApplicationRow.seq, ApplicationRow.id)
        )
        results = []
        with self.Session() as session:
            for app, job, company in session.execute(stmt).all():
                if job is None:
                    raise StorageIntegrityError(
                        f"Application {app.id} references missing job {app.job_id}",
                        details={"application_id": app.id, "job_id": app.job_id},
                    )
                results.append(ApplicationWithJob(application=_to_application(app), job=_joined(job, company)))
        return results

    def delete_application(self, application_id: str) -> None:
        with self.Session() as session:
            session.execute(delete(ApplicationRow).where(ApplicationRow.id == application_id))
            session.commit()

    # -------------------- Courses --------------------

    def get_courses(self, category: Optional[str] = None) -> list[Course]:
        stmt = select(CourseRow)
        if category:
            stmt = stmt.where(CourseRow.category == category)
        stmt = stmt.order_by(CourseRow.seq, CourseRow.id)
        with self.Session() as session:
            return [_to_course(row) for row in session.execute(stmt).scalars()]

    def get_course(self, course_id: str) -> Optional[Course]:
        with self.Session() as session:
            row = session.get(CourseRow, course_id)
            return _to_course(row) if row else None

    def create_course(self, title: str, description: str, category: str, **fields: Any) -> Course:
        reject_unknown_fields(fields, set(COURSE_OPTIONAL_FIELDS), "course")
        check_course_level(fields.get("level"))
        with self.Session() as session:
            row = CourseRow(
                id=new_id(),
                title=title,
                description=description,
                category=category,
                created_at=self.clock(),
                **{key: fields.get(key) or None for key in COURSE_OPTIONAL_FIELDS},
            )
            _insert_in_order(session, row)
            return _to_course(row)

    # -------------------- Contacts --------------------

    def create_contact(self, name: str, email: str, message: str) -> Contact:
        with self.Session() as session:
            row = ContactRow(
                id=new_id(),
                name=name,
                email=email,
                message=message,
                created_at=self.clock(),
            )
            session.add(row)
            session.commit()
            return _to_contact(row)
