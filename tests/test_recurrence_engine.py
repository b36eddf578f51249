from datetime import date

import pytest

from models.reminder import Once, Daily, Weekly, Monthly, Custom
from services import recurrence_engine as engine
from services.recurrence_engine import (
    is_due_on,
    next_due_date,
    next_occurrence,
    upcoming_occurrences,
)


# ── Stepper ──────────────────────────────────────────────────────────────────

def test_next_occurrence_steps(make_reminder):
    anchor = date(2024, 1, 1)
    assert next_occurrence(make_reminder(anchor, Daily()), anchor) == date(2024, 1, 2)
    assert next_occurrence(make_reminder(anchor, Weekly()), anchor) == date(2024, 1, 8)
    assert next_occurrence(make_reminder(anchor, Monthly()), anchor) == date(2024, 2, 1)
    assert next_occurrence(make_reminder(anchor, Custom(10)), anchor) == date(2024, 1, 11)


def test_next_occurrence_once_is_none(make_reminder):
    reminder = make_reminder(date(2024, 1, 1))
    assert next_occurrence(reminder, reminder.due_date) is None


def test_next_occurrence_malformed_custom_is_none(make_reminder):
    anchor = date(2024, 1, 1)
    assert next_occurrence(make_reminder(anchor, Custom(0)), anchor) is None
    assert next_occurrence(make_reminder(anchor, Custom(-3)), anchor) is None


def test_next_occurrence_monthly_returns_to_anchor_day(make_reminder):
    reminder = make_reminder(date(2023, 1, 31), Monthly())
    assert next_occurrence(reminder, date(2023, 2, 28)) == date(2023, 3, 31)


def test_next_occurrence_stops_after_duration_end(make_reminder):
    reminder = make_reminder(date(2024, 1, 1), Weekly(), duration_end=date(2024, 1, 10))
    assert next_occurrence(reminder, date(2024, 1, 1)) == date(2024, 1, 8)
    assert next_occurrence(reminder, date(2024, 1, 8)) is None


def test_next_occurrence_on_duration_end_is_kept(make_reminder):
    reminder = make_reminder(date(2024, 1, 1), Daily(), duration_end=date(2024, 1, 2))
    assert next_occurrence(reminder, date(2024, 1, 1)) == date(2024, 1, 2)


# ── Enumerator ───────────────────────────────────────────────────────────────

def test_monthly_on_31st_non_leap_year(make_reminder):
    reminder = make_reminder(date(2023, 1, 31), Monthly())
    assert upcoming_occurrences(reminder, 5, date(2023, 1, 1)).to_list() == [
        date(2023, 1, 31),
        date(2023, 2, 28),
        date(2023, 3, 31),
        date(2023, 4, 30),
        date(2023, 5, 31),
    ]


def test_monthly_on_31st_leap_year(make_reminder):
    reminder = make_reminder(date(2024, 1, 31), Monthly())
    assert upcoming_occurrences(reminder, 3, date(2024, 1, 1)).to_list() == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
    ]


def test_duration_end_between_second_and_third(make_reminder):
    reminder = make_reminder(date(2024, 1, 1), Weekly(), duration_end=date(2024, 1, 10))
    assert upcoming_occurrences(reminder, 10, date(2024, 1, 1)).to_list() == [
        date(2024, 1, 1),
        date(2024, 1, 8),
    ]
    assert not is_due_on(reminder, date(2024, 1, 15))


def test_anchor_after_duration_end_has_no_occurrences(make_reminder):
    reminder = make_reminder(date(2024, 3, 1), Daily(), duration_end=date(2024, 2, 1))
    assert upcoming_occurrences(reminder, 5, date(2024, 1, 1)).to_list() == []
    assert not is_due_on(reminder, date(2024, 3, 1))


def test_once_in_the_past_is_empty(make_reminder):
    reminder = make_reminder(date(2024, 1, 1))
    assert upcoming_occurrences(reminder, 10, date(2024, 2, 1)).to_list() == []


@pytest.mark.parametrize("now", [date(2024, 1, 1), date(2023, 12, 1)])
def test_once_today_or_future_yields_due_date_once(make_reminder, now):
    reminder = make_reminder(date(2024, 1, 1))
    assert upcoming_occurrences(reminder, 10, now).to_list() == [date(2024, 1, 1)]


def test_now_on_an_occurrence_includes_it(make_reminder):
    reminder = make_reminder(date(2024, 1, 1), Custom(10))
    assert upcoming_occurrences(reminder, 2, date(2024, 1, 21)).to_list() == [
        date(2024, 1, 21),
        date(2024, 1, 31),
    ]


def test_fast_forward_monthly_over_years(make_reminder):
    reminder = make_reminder(date(2020, 1, 15), Monthly())
    assert upcoming_occurrences(reminder, 2, date(2024, 6, 20)).to_list() == [
        date(2024, 7, 15),
        date(2024, 8, 15),
    ]


def test_fast_forward_daily_beyond_step_ceiling(make_reminder):
    reminder = make_reminder(date(2000, 1, 1), Daily())
    assert upcoming_occurrences(reminder, 1, date(2024, 1, 1)).to_list() == [date(2024, 1, 1)]


def test_fast_forward_past_duration_end_is_empty(make_reminder):
    reminder = make_reminder(date(2024, 1, 1), Daily(), duration_end=date(2024, 1, 31))
    assert upcoming_occurrences(reminder, 5, date(2024, 3, 1)).to_list() == []


def test_fast_forward_ceiling_gives_empty_sequence(make_reminder, monkeypatch):
    monkeypatch.setattr(engine, "MAX_FAST_FORWARD_STEPS", 0)
    reminder = make_reminder(date(2024, 1, 1), Daily())
    assert upcoming_occurrences(reminder, 5, date(2024, 2, 1)).to_list() == []
    # An anchor on or after `now` needs no fast-forward
    assert upcoming_occurrences(reminder, 1, date(2024, 1, 1)).to_list() == [date(2024, 1, 1)]


def test_sequence_is_restartable(make_reminder):
    seq = upcoming_occurrences(make_reminder(date(2024, 1, 1), Weekly()), 4, date(2024, 1, 1))
    first = list(seq)
    assert len(first) == 4
    assert list(seq) == first
    assert next(iter(seq)) == date(2024, 1, 1)


def test_sequence_is_lazy_and_bounded(make_reminder):
    seq = upcoming_occurrences(make_reminder(date(2024, 1, 1), Daily()), 3, date(2024, 1, 1))
    it = iter(seq)
    assert next(it) == date(2024, 1, 1)
    assert next(it) == date(2024, 1, 2)
    assert next(it) == date(2024, 1, 3)
    with pytest.raises(StopIteration):
        next(it)


@pytest.mark.parametrize("max_count", [0, -1])
def test_non_positive_max_count_is_empty(make_reminder, max_count):
    reminder = make_reminder(date(2024, 1, 1), Daily())
    assert upcoming_occurrences(reminder, max_count, date(2024, 1, 1)).to_list() == []


def test_malformed_custom_is_empty(make_reminder):
    reminder = make_reminder(date(2024, 1, 1), Custom(0))
    assert upcoming_occurrences(reminder, 5, date(2023, 1, 1)).to_list() == []


# ── next_due_date ────────────────────────────────────────────────────────────

def test_next_due_date_is_strictly_after(make_reminder):
    reminder = make_reminder(date(2024, 1, 1), Weekly())
    assert next_due_date(reminder, date(2024, 1, 1)) == date(2024, 1, 8)
    assert next_due_date(reminder, date(2023, 12, 31)) == date(2024, 1, 1)


def test_next_due_date_exhausted(make_reminder):
    assert next_due_date(make_reminder(date(2024, 1, 1)), date(2024, 1, 1)) is None


# ── Evaluator ────────────────────────────────────────────────────────────────

def test_custom_interval_due_dates(make_reminder):
    reminder = make_reminder(date(2024, 1, 1), Custom(10))
    assert is_due_on(reminder, date(2024, 1, 1))
    assert is_due_on(reminder, date(2024, 1, 11))
    assert is_due_on(reminder, date(2024, 1, 21))
    assert not is_due_on(reminder, date(2024, 1, 15))


def test_once_due_only_on_its_date(make_reminder):
    reminder = make_reminder(date(2024, 1, 1))
    assert is_due_on(reminder, date(2024, 1, 1))
    assert not is_due_on(reminder, date(2024, 1, 2))
    assert not is_due_on(reminder, date(2023, 12, 31))


def test_not_due_before_anchor(make_reminder):
    for rec in (Daily(), Weekly(), Monthly(), Custom(3)):
        assert not is_due_on(make_reminder(date(2024, 1, 10), rec), date(2024, 1, 9))


def test_weekly_requires_same_weekday(make_reminder):
    reminder = make_reminder(date(2024, 1, 1), Weekly())  # a Monday
    assert is_due_on(reminder, date(2024, 1, 29))
    assert not is_due_on(reminder, date(2024, 1, 30))


def test_monthly_clamped_day(make_reminder):
    reminder = make_reminder(date(2023, 1, 31), Monthly())
    assert is_due_on(reminder, date(2023, 2, 28))
    assert is_due_on(reminder, date(2023, 4, 30))
    assert not is_due_on(reminder, date(2023, 3, 30))
    assert not is_due_on(reminder, date(2023, 1, 30))


def test_monthly_far_future_is_closed_form(make_reminder):
    reminder = make_reminder(date(2024, 1, 31), Monthly())
    assert is_due_on(reminder, date(2124, 2, 29))
    assert not is_due_on(reminder, date(2124, 2, 28))


def test_malformed_custom_never_due(make_reminder):
    reminder = make_reminder(date(2024, 1, 1), Custom(0))
    assert not is_due_on(reminder, date(2024, 1, 1))
    assert not is_due_on(reminder, date(2024, 1, 2))


# ── End of the calendar ──────────────────────────────────────────────────────

def test_huge_custom_interval_stops_at_date_max(make_reminder):
    reminder = make_reminder(date(2024, 1, 1), Custom(3_000_000))
    assert upcoming_occurrences(reminder, 5, date(2024, 1, 1)).to_list() == [date(2024, 1, 1)]
    assert next_occurrence(reminder, date(2024, 1, 1)) is None
    assert next_due_date(reminder, date(2024, 1, 1)) is None


def test_monthly_in_last_representable_month(make_reminder):
    reminder = make_reminder(date(9999, 12, 15), Monthly())
    assert next_occurrence(reminder, date(9999, 12, 15)) is None
    assert upcoming_occurrences(reminder, 3, date(9999, 1, 1)).to_list() == [date(9999, 12, 15)]
    assert next_due_date(reminder, date(9999, 12, 15)) is None


def test_next_due_date_after_date_max(make_reminder):
    assert next_due_date(make_reminder(date(2024, 1, 1), Daily()), date.max) is None
