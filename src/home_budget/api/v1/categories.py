"""Category catalog endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.api.deps import get_db
from home_budget.core.exceptions import CategoryNotFoundError
from home_budget.models.category import Category
from home_budget.repositories.category import CategoryRepository
from home_budget.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse], summary="List categories")
async def list_categories(db: AsyncSession = Depends(get_db)) -> list[CategoryResponse]:
    """Full catalog ordered by name."""
    categories = await CategoryRepository(db).list_ordered()
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(
    payload: CategoryCreate, db: AsyncSession = Depends(get_db)
) -> CategoryResponse:
    """
    Create a category.

    A duplicate name is rejected by the unique constraint and returned as
    ``DB_002`` (409).
    """
    category = await CategoryRepository(db).create(Category(**payload.model_dump()))
    return CategoryResponse.model_validate(category)


@router.patch("/{category_id}", response_model=CategoryResponse, summary="Update a category")
async def update_category(
    category_id: UUID, payload: CategoryUpdate, db: AsyncSession = Depends(get_db)
) -> CategoryResponse:
    category = await CategoryRepository(db).update(
        category_id, payload.model_dump(exclude_unset=True)
    )
    if category is None:
        raise CategoryNotFoundError(details={"category_id": str(category_id)})
    return CategoryResponse.model_validate(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    description="""
    Delete a category. Its rules are deleted with it; transactions that used
    it become uncategorized.
    """,
)
async def delete_category(category_id: UUID, db: AsyncSession = Depends(get_db)) -> None:
    if not await CategoryRepository(db).delete(category_id):
        raise CategoryNotFoundError(details={"category_id": str(category_id)})
