"""Transaction categorization.

Learned counterparty rules first, LLM classification second. See
``resolver.CategorizationResolver``.
"""

from .keys import is_internal_transfer, normalize_account, normalize_merchant
from .resolver import CategorizationInput, CategorizationResolver, CategorizationResult

__all__ = [
    "CategorizationInput",
    "CategorizationResolver",
    "CategorizationResult",
    "is_internal_transfer",
    "normalize_account",
    "normalize_merchant",
]
