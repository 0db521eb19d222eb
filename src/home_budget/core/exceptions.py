"""Custom exception classes.

Each exception maps to an error code defined in errors.py. Handlers in
``api/middleware/error_handler.py`` turn them into JSON error responses.
"""

from typing import Any


class BudgetError(Exception):
    """Base exception for all domain errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "CAT_001")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    default_code = "SYS_001"
    default_status = 500

    def __init__(
        self,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        self.error_code = error_code or self.default_code
        self.details = details or {}
        self.http_status = http_status or self.default_status
        super().__init__(self.error_code)


class NoCategoriesError(BudgetError):
    """Raised when the category catalog is empty.

    Nothing can be classified until at least one category exists.
    """

    default_code = "CAT_001"
    default_status = 409


class ClassifierUnavailableError(BudgetError):
    """Raised when the LLM backend fails (network, auth, rate limit)."""

    default_code = "CAT_002"
    default_status = 502


class CategoryNotFoundError(BudgetError):
    default_code = "CAT_003"
    default_status = 404


class RuleNotFoundError(BudgetError):
    default_code = "CAT_004"
    default_status = 404


class MissingCounterpartyError(BudgetError):
    default_code = "CAT_005"
    default_status = 400


class TransactionNotFoundError(BudgetError):
    default_code = "API_006"
    default_status = 404


class InvalidSettingError(BudgetError):
    default_code = "SET_001"
    default_status = 400
