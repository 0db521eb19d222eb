"""Spending category model."""
from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from home_budget.models.base import BaseModel


class Category(BaseModel):
    """User-managed spending category.

    ``ai_prompt`` is an optional free-text hint handed to the LLM classifier
    alongside the category name.
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    color: Mapped[str] = mapped_column(String(20), default="#64748b", nullable=False)
    icon: Mapped[str | None] = mapped_column(String(50), nullable=True)
    ai_prompt: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_savings: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Rules are removed together with their category (ON DELETE CASCADE).
    rules: Mapped[list["CategorizationRule"]] = relationship(
        "CategorizationRule", back_populates="category", passive_deletes="all"
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"
