"""Error codes and user-friendly messages.

Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

ERROR_CATALOG: dict[str, dict] = {
    # Categorization
    "CAT_001": {
        "code": "CAT_001",
        "message": "No categories found",
        "user_message": "There are no categories to assign transactions to.",
        "suggestion": "Create at least one category (for example 'Other') and try again.",
        "retry_allowed": False,
    },
    "CAT_002": {
        "code": "CAT_002",
        "message": "Classification backend unavailable",
        "user_message": "Automatic categorization is temporarily unavailable.",
        "suggestion": "Please try again in a few moments or pick a category manually.",
        "retry_allowed": True,
    },
    "CAT_003": {
        "code": "CAT_003",
        "message": "Category not found",
        "user_message": "We couldn't find this category.",
        "suggestion": "Please refresh the category list and try again.",
        "retry_allowed": False,
    },
    "CAT_004": {
        "code": "CAT_004",
        "message": "Categorization rule not found",
        "user_message": "We couldn't find this rule.",
        "suggestion": "Please refresh the rule list and try again.",
        "retry_allowed": False,
    },
    "CAT_005": {
        "code": "CAT_005",
        "message": "Transaction has no counterparty account",
        "user_message": "A rule can only be created for transactions with a counterparty account.",
        "suggestion": "Change the category of this transaction without creating a rule.",
        "retry_allowed": False,
    },
    # Settings
    "SET_001": {
        "code": "SET_001",
        "message": "Invalid setting value",
        "user_message": "This setting value isn't valid.",
        "suggestion": "Please check the allowed values and try again.",
        "retry_allowed": False,
    },
    # Database
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed",
        "user_message": "A database error occurred.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "DB_002": {
        "code": "DB_002",
        "message": "Resource already exists",
        "user_message": "This record already exists.",
        "suggestion": "Please check if the record was already created.",
        "retry_allowed": False,
    },
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request data failed validation",
        "user_message": "Invalid input data.",
        "suggestion": "Please check your input and try again.",
        "retry_allowed": True,
    },
    # API-specific errors
    "API_006": {
        "code": "API_006",
        "message": "Transaction not found",
        "user_message": "We couldn't find this transaction.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred.",
        "suggestion": "Please try again later or contact support.",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details (a generic definition for unknown codes)
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
