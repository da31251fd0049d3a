import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..storage.base import Storage
from ..utils.dependencies import get_storage
from ..utils.validation import validate_email, validate_string_field

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["Contact"])


class ContactRequest(BaseModel):
    name: str
    email: str
    message: str


@router.post("", status_code=201)
def submit_contact(payload: ContactRequest, storage: Storage = Depends(get_storage)):
    name = validate_string_field(payload.name, "Name", max_length=255)
    email = validate_email(payload.email)
    message = validate_string_field(payload.message, "Message", max_length=5000)

    contact = storage.create_contact(name=name, email=email, message=message)
    logger.info("Contact message %s received", contact.id)
    return {"message": "Thanks for reaching out! We'll get back to you soon.", "contact": contact.as_dict()}
