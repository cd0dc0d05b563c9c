"""
Pydantic schemas for lesson plan request/response validation.

These schemas enforce input validation and define the API contract.
No business logic belongs here.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TITLE_MAX_LEN = 200
SUBJECT_MAX_LEN = 100
DESCRIPTION_MAX_LEN = 10_000

# Response payloads use camelCase keys, like the envelope around them.
CAMEL_CASE = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateLessonPlanRequest(BaseModel):
    """Request schema for creating a lesson plan.

    Attributes:
        title: Short title (1-200 chars).
        subject: Subject area (1-100 chars).
        description: Optional body of the plan.
    """

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LEN)
    subject: str = Field(..., min_length=1, max_length=SUBJECT_MAX_LEN)
    description: str = Field("", max_length=DESCRIPTION_MAX_LEN)


class LessonPlanResponse(BaseModel):
    """A single lesson plan."""

    model_config = ConfigDict(**CAMEL_CASE, from_attributes=True)

    id: UUID
    title: str
    subject: str
    description: str
    created_by: Optional[UUID]
    created_at: datetime


class LessonPlanListResponse(BaseModel):
    """Response schema for listing lesson plans."""

    model_config = CAMEL_CASE

    items: list[LessonPlanResponse]
    count: int


class DeleteLessonPlanResponse(BaseModel):
    """Response schema for deleting a lesson plan."""

    model_config = CAMEL_CASE

    id: UUID
    deleted: bool
