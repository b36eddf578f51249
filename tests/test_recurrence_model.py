from datetime import date

import pytest

from models.reminder import (
    Custom,
    Daily,
    Monthly,
    Once,
    Reminder,
    Weekly,
    recurrence_from_fields,
    recurrence_interval,
)


@pytest.mark.parametrize("kind, expected", [
    ("once", Once()),
    ("daily", Daily()),
    ("weekly", Weekly()),
    ("monthly", Monthly()),
    (" Monthly ", Monthly()),
    (None, Once()),
])
def test_recurrence_from_fields(kind, expected):
    assert recurrence_from_fields(kind) == expected


def test_custom_carries_interval():
    rec = recurrence_from_fields("custom", 14)
    assert rec == Custom(14)
    assert rec.kind == "custom"
    assert recurrence_interval(rec) == 14


def test_custom_without_interval_is_malformed_not_an_error():
    assert recurrence_from_fields("custom") == Custom(0)


def test_unknown_kind_raises():
    with pytest.raises(ValueError, match="Unknown recurrence"):
        recurrence_from_fields("yearly")


def test_interval_only_for_custom():
    assert recurrence_interval(Weekly()) is None


def test_reminder_properties():
    reminder = Reminder(
        id=1, user_id=1, title="Salary", amount=2500.0, type="Receivable",
        due_date=date(2024, 1, 25), recurrence=Custom(14),
    )
    assert reminder.recurrence_kind == "custom"
    assert reminder.recurrence_interval == 14
    assert reminder.is_recurring

    once = Reminder(
        id=2, user_id=1, title="Deposit", amount=50.0, type="Payment",
        due_date=date(2024, 1, 25),
    )
    assert once.recurrence_kind == "once"
    assert once.recurrence_interval is None
    assert not once.is_recurring
