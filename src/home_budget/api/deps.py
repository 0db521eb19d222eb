"""FastAPI dependency injection for the database, classifier and services."""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from home_budget.categorization.classifier import Classifier, OpenAIClassifier
from home_budget.db.session import get_db
from home_budget.services.app_settings import AppSettingsService, SettingsCache
from home_budget.services.categorization import CategorizationService
from home_budget.services.subscription import SubscriptionService
from home_budget.services.transaction import TransactionService

# One cache per process; routes that change settings refresh it.
_settings_cache = SettingsCache()


@lru_cache
def get_classifier() -> OpenAIClassifier:
    """
    Get the shared classifier.

    The OpenAI client is created on first use, so requests that never reach
    the AI path work without an API key.
    """
    return OpenAIClassifier()


def get_settings_cache() -> SettingsCache:
    return _settings_cache


async def get_categorization_service(
    db: AsyncSession = Depends(get_db),
    classifier: Classifier = Depends(get_classifier),
) -> CategorizationService:
    return CategorizationService(db, classifier)


async def get_transaction_service(
    db: AsyncSession = Depends(get_db),
    classifier: Classifier = Depends(get_classifier),
) -> TransactionService:
    return TransactionService(db, classifier)


async def get_subscription_service(
    db: AsyncSession = Depends(get_db),
) -> SubscriptionService:
    return SubscriptionService(db)


async def get_app_settings_service(
    db: AsyncSession = Depends(get_db),
    cache: SettingsCache = Depends(get_settings_cache),
) -> AppSettingsService:
    """
    Get app settings service instance.

    Args:
        db: Database session
        cache: Process-wide settings cache

    Returns:
        AppSettingsService instance
    """
    return AppSettingsService(db, cache)
