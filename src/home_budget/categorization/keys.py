"""Normalization of the keys transactions are matched on.

Two keys matter:
- counterparty account (IBAN-like): the key of learned categorization rules
- merchant key: the grouping key of subscription detection
"""

from __future__ import annotations

import re

_COUNTRY_CODE = re.compile(r"^[A-Z]{2}")


def _norm(text: str) -> str:
    return re.sub(r"\s+", " ", (text or "").strip().upper())


def normalize_merchant(name: str | None) -> str:
    """Normalize a merchant/counterparty string into a stable key.

    This is an exact-match key (not fuzzy matching). It is used to group
    transactions of one payee.
    """
    return _norm(name or "")


def normalize_account(account: str | None) -> str | None:
    """Strip all whitespace from an account number and upper-case it.

    Returns None for missing or blank input so callers can treat "no account"
    uniformly.
    """
    if not account:
        return None
    cleaned = re.sub(r"\s+", "", account).upper()
    return cleaned or None


def iban_numeric_part(account: str) -> str:
    """Account number without the two-letter country prefix (if any)."""
    clean = normalize_account(account) or ""
    if _COUNTRY_CODE.match(clean):
        return clean[2:]
    return clean


def is_internal_transfer(counterparty_account: str | None, own_ibans: list[str]) -> bool:
    """Whether a counterparty is one of the household's own accounts.

    Matches the full normalized IBAN, or only the numeric part so that
    exports without a country code still match.
    """
    account = normalize_account(counterparty_account)
    if not account or not own_ibans:
        return False

    account_numeric = iban_numeric_part(account)
    for iban in own_ibans:
        normalized = normalize_account(iban)
        if not normalized:
            continue
        if account == normalized or account_numeric == iban_numeric_part(normalized):
            return True
    return False
