"""Database models."""
from home_budget.models.category import Category
from home_budget.models.categorization_rule import CategorizationRule
from home_budget.models.transaction import Transaction
from home_budget.models.ai_categorization_log import AiCategorizationLog
from home_budget.models.app_setting import AppSetting

__all__ = [
    "Category",
    "CategorizationRule",
    "Transaction",
    "AiCategorizationLog",
    "AppSetting",
]
