from home_budget.categorization.keys import (
    iban_numeric_part,
    is_internal_transfer,
    normalize_account,
)


def test_normalize_account_strips_spaces_and_uppercases() -> None:
    assert normalize_account(" pl61 1090 1014 0000 0712 1981 2874 ") == "PL61109010140000071219812874"


def test_normalize_account_blank_is_none() -> None:
    assert normalize_account(None) is None
    assert normalize_account("") is None
    assert normalize_account("   ") is None


def test_iban_numeric_part() -> None:
    assert iban_numeric_part("PL61 1090 1014") == "6110901014"
    assert iban_numeric_part("61109010140000071219812874") == "61109010140000071219812874"


def test_internal_transfer_full_iban_match() -> None:
    own = ["PL61 1090 1014 0000 0712 1981 2874"]
    assert is_internal_transfer("PL61109010140000071219812874", own)


def test_internal_transfer_matches_without_country_code() -> None:
    own = ["PL61109010140000071219812874"]
    assert is_internal_transfer("61 1090 1014 0000 0712 1981 2874", own)


def test_internal_transfer_other_account() -> None:
    own = ["PL61109010140000071219812874"]
    assert not is_internal_transfer("PL27114020040000300201355387", own)


def test_internal_transfer_without_account_or_list() -> None:
    assert not is_internal_transfer(None, ["PL61109010140000071219812874"])
    assert not is_internal_transfer("PL61109010140000071219812874", [])
