from datetime import datetime
from typing import Literal
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ..storage.base import Storage
from ..storage.common import as_utc
from ..storage.records import User
from ..utils.dependencies import get_current_user, get_storage
from ..utils.error_handlers import get_error_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])

ExperienceLevel = Literal["fresher", "experienced"]


class JobCreate(BaseModel):
    company_id: str = Field(min_length=1)
    title: str = Field(min_length=2, max_length=255)
    description: str = Field(min_length=1)
    requirements: str = Field(min_length=1)
    qualifications: str = Field(min_length=1)
    skills: str = Field(min_length=1)
    experience_level: ExperienceLevel
    experience_min: int | None = Field(default=None, ge=0)
    experience_max: int | None = Field(default=None, ge=0)
    location: str = Field(min_length=1, max_length=255)
    job_type: str = Field(min_length=1, max_length=30)  # e.g. full-time / internship
    salary: str | None = Field(default=None, max_length=100)
    apply_url: str | None = Field(default=None, max_length=500)
    closing_date: datetime
    batch_eligible: str | None = Field(default=None, max_length=100)
    is_active: bool = True


class JobUpdate(BaseModel):
    company_id: str | None = Field(default=None, min_length=1)
    title: str | None = Field(default=None, min_length=2, max_length=255)
    description: str | None = None
    requirements: str | None = None
    qualifications: str | None = None
    skills: str | None = None
    experience_level: ExperienceLevel | None = None
    experience_min: int | None = Field(default=None, ge=0)
    experience_max: int | None = Field(default=None, ge=0)
    location: str | None = Field(default=None, max_length=255)
    job_type: str | None = Field(default=None, max_length=30)
    salary: str | None = Field(default=None, max_length=100)
    apply_url: str | None = Field(default=None, max_length=500)
    closing_date: datetime | None = None
    batch_eligible: str | None = Field(default=None, max_length=100)
    is_active: bool | None = None


@router.get("")
def list_jobs(
    experience_level: ExperienceLevel | None = Query(default=None),
    location: str | None = Query(default=None, max_length=255),
    search: str | None = Query(default=None, max_length=255),
    storage: Storage = Depends(get_storage),
):
    jobs = storage.get_jobs(
        experience_level=experience_level,
        location=(location or "").strip() or None,
        search=(search or "").strip() or None,
    )
    return [job.as_dict() for job in jobs]


@router.get("/{job_id}")
def get_job(job_id: str, storage: Storage = Depends(get_storage)):
    job = storage.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail=get_error_message("job_not_found"))
    return job.as_dict()


@router.post("", status_code=201)
def create_job(
    payload: JobCreate,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    fields = payload.model_dump()
    fields["closing_date"] = as_utc(fields["closing_date"])
    # UnknownCompanyError / ValueError propagate to the app-level handlers (400).
    job = storage.create_job(**fields)
    logger.info("User %s created job %s", user.id, job.id)
    return job.as_dict()


@router.patch("/{job_id}")
def update_job(
    job_id: str,
    payload: JobUpdate,
    _user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    fields = payload.model_dump(exclude_unset=True)
    if fields.get("closing_date") is not None:
        fields["closing_date"] = as_utc(fields["closing_date"])

    job = storage.update_job(job_id, **fields)
    if job is None:
        raise HTTPException(status_code=404, detail=get_error_message("job_not_found"))
    return job.as_dict()
