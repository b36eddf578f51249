"""The stepping enumerator and the closed-form due check must describe the same dates."""
from datetime import date, timedelta

import pytest

from models.reminder import Reminder, Once, Daily, Weekly, Monthly, Custom
from services.recurrence_engine import is_due_on, upcoming_occurrences

HORIZON_DAYS = 400

ANCHORS = [date(2023, 1, 31), date(2024, 1, 31), date(2024, 2, 29), date(2023, 6, 15)]
RECURRENCES = [Once(), Daily(), Weekly(), Monthly(), Custom(3), Custom(10), Custom(45)]
END_OFFSETS = [None, 40, 200]


def _grid():
    for anchor in ANCHORS:
        for rec in RECURRENCES:
            for end_offset in END_OFFSETS:
                end = anchor + timedelta(days=end_offset) if end_offset else None
                yield Reminder(
                    id=1, user_id=1, title="Grid", amount=1.0, type="Payment",
                    due_date=anchor, recurrence=rec, duration_end=end,
                )


GRID = list(_grid())


def _ids(reminder):
    end = reminder.duration_end.isoformat() if reminder.duration_end else "open"
    return f"{reminder.recurrence_kind}-{reminder.recurrence_interval}-{reminder.due_date}-{end}"


def _days(start, count):
    return [start + timedelta(days=i) for i in range(count)]


@pytest.mark.parametrize("reminder", GRID, ids=_ids)
def test_due_check_agrees_with_enumeration(reminder):
    occurrences = set(upcoming_occurrences(reminder, HORIZON_DAYS + 10, reminder.due_date))
    window = _days(reminder.due_date - timedelta(days=10), HORIZON_DAYS)
    for d in window:
        assert is_due_on(reminder, d) == (d in occurrences), d


@pytest.mark.parametrize("reminder", GRID, ids=_ids)
def test_enumeration_from_later_start_matches_due_check(reminder):
    for offset in (1, 17, 95):
        now = reminder.due_date + timedelta(days=offset)
        expected = [d for d in _days(now, HORIZON_DAYS) if is_due_on(reminder, d)][:5]
        assert upcoming_occurrences(reminder, 5, now).to_list() == expected


@pytest.mark.parametrize("reminder", GRID, ids=_ids)
def test_occurrences_strictly_increase(reminder):
    dates = upcoming_occurrences(reminder, 30, reminder.due_date - timedelta(days=3)).to_list()
    assert all(a < b for a, b in zip(dates, dates[1:]))
    if reminder.duration_end:
        assert all(d <= reminder.duration_end for d in dates)


@pytest.mark.parametrize("anchor", ANCHORS)
def test_weekly_occurrences_share_anchor_weekday(anchor):
    reminder = Reminder(
        id=1, user_id=1, title="Weekly", amount=1.0, type="Receivable",
        due_date=anchor, recurrence=Weekly(),
    )
    dates = upcoming_occurrences(reminder, 20, anchor).to_list()
    assert len(dates) == 20
    assert {d.weekday() for d in dates} == {anchor.weekday()}
