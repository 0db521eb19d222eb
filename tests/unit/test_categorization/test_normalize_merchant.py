from home_budget.categorization.keys import normalize_merchant


def test_normalize_merchant_uppercase_trim_and_collapse_spaces():
    assert normalize_merchant("  Netflix   International  B.V. ") == "NETFLIX INTERNATIONAL B.V."


def test_normalize_merchant_empty_string():
    assert normalize_merchant("") == ""
    assert normalize_merchant(None) == ""
