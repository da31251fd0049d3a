from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ..storage.base import Storage
from ..storage.records import User
from ..utils.dependencies import get_current_user, get_storage
from ..utils.error_handlers import get_error_message

router = APIRouter(prefix="/api/courses", tags=["Courses"])


class CourseCreate(BaseModel):
    title: str = Field(min_length=2, max_length=255)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=100)
    instructor: str | None = Field(default=None, max_length=255)
    duration: str | None = Field(default=None, max_length=100)
    level: Literal["beginner", "intermediate", "advanced"] | None = None
    image_url: str | None = Field(default=None, max_length=500)
    course_url: str | None = Field(default=None, max_length=500)
    price: str | None = Field(default=None, max_length=50)


@router.get("")
def list_courses(
    category: str | None = Query(default=None, max_length=100),
    storage: Storage = Depends(get_storage),
):
    return [course.as_dict() for course in storage.get_courses(category=category or None)]


@router.get("/{course_id}")
def get_course(course_id: str, storage: Storage = Depends(get_storage)):
    course = storage.get_course(course_id)
    if course is None:
        raise HTTPException(status_code=404, detail=get_error_message("course_not_found"))
    return course.as_dict()


@router.post("", status_code=201)
def create_course(
    payload: CourseCreate,
    _user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    fields = payload.model_dump()
    title = fields.pop("title")
    description = fields.pop("description")
    category = fields.pop("category")
    return storage.create_course(title, description, category, **fields).as_dict()
