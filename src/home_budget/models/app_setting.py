"""Key/value application settings stored in the database."""
from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from home_budget.models.base import BaseModel


class AppSetting(BaseModel):
    """Household-level setting (e.g. financial month start day)."""

    __tablename__ = "app_settings"

    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<AppSetting(key={self.key})>"
