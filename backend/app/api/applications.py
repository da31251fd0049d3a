import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..storage.base import Storage
from ..storage.records import User
from ..utils.dependencies import get_current_user, get_storage
from ..utils.error_handlers import get_error_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/applications", tags=["Applications"])


class ApplicationCreate(BaseModel):
    job_id: str = Field(min_length=1)
    status: str | None = Field(default=None, max_length=50)


@router.post("", status_code=201)
def apply_to_job(
    payload: ApplicationCreate,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    job = storage.get_job(payload.job_id)
    if job is not None and not job.job.is_active:
        raise HTTPException(status_code=400, detail=get_error_message("job_closed"))

    # JobNotFoundError propagates to the app-level handler (404).
    application = storage.create_application(user_id=user.id, job_id=payload.job_id, status=payload.status)
    logger.info("User %s applied to job %s", user.id, payload.job_id)
    return application.as_dict()


@router.get("")
def my_applications(
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return [item.as_dict() for item in storage.get_user_applications(user.id)]


@router.delete("/{application_id}")
def withdraw_application(
    application_id: str,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    mine = {item.application.id for item in storage.get_user_applications(user.id)}
    if application_id not in mine:
        raise HTTPException(status_code=404, detail=get_error_message("application_not_found"))

    storage.delete_application(application_id)
    return {"message": "Application withdrawn"}
