"""Shared response schemas."""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, Field

CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> float:
    """Round a money amount to 2 places for API output."""
    return float(Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP))


class PaginationMeta(BaseModel):
    """Pagination metadata for list responses."""

    page: int = Field(description="Current page number (1-indexed)")
    limit: int = Field(description="Items per page")
    total: int = Field(description="Total number of items")
    total_pages: int = Field(description="Total number of pages")
