from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..storage.base import Storage
from ..storage.records import User
from ..utils.dependencies import get_current_user, get_storage
from ..utils.error_handlers import get_error_message

router = APIRouter(prefix="/api/companies", tags=["Companies"])


class CompanyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    website: str | None = Field(default=None, max_length=255)
    linkedin_url: str | None = Field(default=None, max_length=255)
    logo: str | None = Field(default=None, max_length=500)
    location: str | None = Field(default=None, max_length=255)


@router.get("")
def list_companies(storage: Storage = Depends(get_storage)):
    return [company.as_dict() for company in storage.get_companies()]


@router.get("/{company_id}")
def get_company(company_id: str, storage: Storage = Depends(get_storage)):
    company = storage.get_company(company_id)
    if company is None:
        raise HTTPException(status_code=404, detail=get_error_message("company_not_found"))
    return company.as_dict()


@router.post("", status_code=201)
def create_company(
    payload: CompanyCreate,
    _user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    fields = payload.model_dump()
    name = fields.pop("name").strip()
    return storage.create_company(name, **fields).as_dict()
