"""API version 1 routes."""

from fastapi import APIRouter

from home_budget.api.v1 import categories, categorization, settings, subscriptions, transactions

router = APIRouter(prefix="/api/v1")

# Include routers
router.include_router(categories.router)
router.include_router(transactions.router)
router.include_router(categorization.router)
router.include_router(subscriptions.router)
router.include_router(settings.router)
