"""Unit tests for settings parsing and validation."""

import pytest

from home_budget.core.exceptions import InvalidSettingError
from home_budget.services.app_settings import (
    FINANCIAL_MONTH_START_DAY,
    IGNORED_IBANS,
    parse_financial_start_day,
    parse_ignored_ibans,
    validate_setting,
)


@pytest.mark.parametrize(
    "stored, expected",
    [(25, 25), ("10", 10), (1, 1), (31, 31), (0, 1), (32, 1), ("abc", 1), (None, 1)],
)
def test_parse_financial_start_day(stored, expected):
    assert parse_financial_start_day(stored) == expected


def test_parse_ignored_ibans():
    assert parse_ignored_ibans(["PL61109010140000071219812874", ""]) == [
        "PL61109010140000071219812874"
    ]
    assert parse_ignored_ibans("PL61109010140000071219812874") == []
    assert parse_ignored_ibans(None) == []


def test_validate_start_day_accepts_numeric_strings():
    assert validate_setting(FINANCIAL_MONTH_START_DAY, "25") == 25


@pytest.mark.parametrize("value", [0, 32, "abc", True, 2.5, None])
def test_validate_start_day_rejects_invalid(value):
    with pytest.raises(InvalidSettingError) as exc_info:
        validate_setting(FINANCIAL_MONTH_START_DAY, value)

    assert exc_info.value.error_code == "SET_001"
    assert exc_info.value.http_status == 400


def test_validate_ignored_ibans():
    assert validate_setting(IGNORED_IBANS, ["PL61 1090"]) == ["PL61 1090"]
    with pytest.raises(InvalidSettingError):
        validate_setting(IGNORED_IBANS, "PL61 1090")
    with pytest.raises(InvalidSettingError):
        validate_setting(IGNORED_IBANS, [123])


def test_unknown_keys_pass_through():
    assert validate_setting("theme", {"dark": True}) == {"dark": True}
