from datetime import datetime, timezone

import pytest

from vastraverse.exceptions import ValidationError
from vastraverse.utils import DateUtils, FormattingUtils, ValidationUtils


@pytest.mark.parametrize(
    "amount, cents",
    [(1299, 129900), ("19.99", 1999), (0.1, 10), (1299.505, 129951)],
)
def test_to_cents(amount, cents):
    assert FormattingUtils.to_cents(amount) == cents


@pytest.mark.parametrize(
    "cents, text",
    [
        (0, "₹0.00"),
        (99900, "₹999.00"),
        (129950, "₹1,299.50"),
        (12345678900, "₹12,34,56,789.00"),
    ],
)
def test_format_money_uses_indian_grouping(cents, text):
    assert FormattingUtils.format_money(cents) == text


def test_parse_handles_strings_and_naive_datetimes():
    from_string = DateUtils.parse("2024-03-01T10:00:00+00:00")
    from_naive = DateUtils.parse(datetime(2024, 3, 1, 10, 0))

    assert from_string == from_naive
    assert from_string.tzinfo is not None
    assert DateUtils.parse(None) is None


def test_receipt_date_is_local_time():
    stamp = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    assert DateUtils.format_for_receipt(stamp, "Asia/Kolkata") == "01 Mar 2024, 03:30 PM IST"


def test_normalize_email():
    assert ValidationUtils.normalize_email("  Asha@Example.COM ") == "asha@example.com"
    with pytest.raises(ValueError):
        ValidationUtils.normalize_email("not-an-email")


def test_phone_validation():
    assert ValidationUtils.is_valid_phone("+91 98765 43210")
    assert not ValidationUtils.is_valid_phone("call me")


@pytest.mark.parametrize("amount", [1e30, "abc"])
def test_to_cents_rejects_unrepresentable_amounts(amount):
    with pytest.raises(ValidationError):
        FormattingUtils.to_cents(amount)
