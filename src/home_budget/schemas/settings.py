"""App settings schemas."""

from typing import Any

from pydantic import BaseModel, Field


class SettingUpdateRequest(BaseModel):
    key: str = Field(min_length=1, max_length=100)
    value: Any = None


class SettingUpdateResult(BaseModel):
    success: bool = True
    key: str
    value: Any = None
