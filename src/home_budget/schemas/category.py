"""Category request/response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = Field("#64748b", max_length=20)
    icon: str | None = Field(None, max_length=50)
    ai_prompt: str | None = Field(
        None, description="Hint for the classifier describing what belongs here"
    )
    is_savings: bool = False


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    color: str | None = Field(None, max_length=20)
    icon: str | None = Field(None, max_length=50)
    ai_prompt: str | None = None
    is_savings: bool | None = None


class CategoryResponse(BaseModel):
    id: UUID
    name: str
    color: str
    icon: str | None
    ai_prompt: str | None
    is_savings: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
