"""Occurrence arithmetic for reminders.

Everything here is a pure function of its arguments. Two paths answer the
same question:

* ``next_occurrence`` / ``upcoming_occurrences`` walk forward one step at a
  time from the anchor ``due_date``;
* ``is_due_on`` decides membership of a single date in closed form.

Both use ``clamp_day_to_month`` with the anchor's day of month, so a monthly
reminder on the 31st lands on the last day of shorter months and returns to
the 31st afterwards.
"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from models.reminder import Reminder, Once, Daily, Weekly, Monthly, Custom
from utils.constants import MAX_FAST_FORWARD_STEPS
from utils.date_helpers import add_months, clamp_day_to_month, months_between

logger = logging.getLogger(__name__)


def _step_days(reminder: Reminder) -> int | None:
    """Fixed day step for daily/weekly/custom rules, else None."""
    rec = reminder.recurrence
    if isinstance(rec, Daily):
        return 1
    if isinstance(rec, Weekly):
        return 7
    if isinstance(rec, Custom):
        return rec.interval_days if rec.interval_days > 0 else None
    return None


def _is_malformed(reminder: Reminder) -> bool:
    rec = reminder.recurrence
    return isinstance(rec, Custom) and rec.interval_days <= 0


def _past_end(reminder: Reminder, d: date) -> bool:
    return reminder.duration_end is not None and d > reminder.duration_end


def next_occurrence(reminder: Reminder, current: date) -> date | None:
    """Return the occurrence following `current`, or None when the rule is exhausted."""
    rec = reminder.recurrence
    step = None
    if not isinstance(rec, Monthly):
        step = _step_days(reminder)
        if step is None:
            # Once, or a custom rule without a usable interval
            return None
    try:
        if step is None:
            candidate = add_months(current, 1, preferred_day=reminder.due_date.day)
        else:
            candidate = current + timedelta(days=step)
    except (OverflowError, ValueError):
        # Nothing comes after date.max
        return None

    if _past_end(reminder, candidate):
        return None
    return candidate


def _jump_before(reminder: Reminder, now: date) -> date:
    """Latest occurrence strictly before `now` reachable from the anchor.

    Equivalent to stepping from due_date k times, computed directly. The
    duration cutoff is not applied here.
    """
    anchor = reminder.due_date
    if isinstance(reminder.recurrence, Monthly):
        k = max(months_between(anchor, now) - 1, 0)
        return add_months(anchor, k, preferred_day=anchor.day)
    step = _step_days(reminder)
    k = max(((now - anchor).days - 1) // step, 0)
    return anchor + timedelta(days=k * step)


def _first_on_or_after(reminder: Reminder, now: date) -> date | None:
    """First occurrence >= now, or None if the rule expires (or stalls) first."""
    current = reminder.due_date
    if current >= now:
        return None if _past_end(reminder, current) else current

    current = _jump_before(reminder, now)
    if _past_end(reminder, current):
        return None

    steps = 0
    while current < now:
        if steps >= MAX_FAST_FORWARD_STEPS:
            logger.debug(
                "Fast-forward ceiling hit for reminder %s at %s", reminder.id, current
            )
            return None
        nxt = next_occurrence(reminder, current)
        if nxt is None:
            return None
        current = nxt
        steps += 1
    return current


@dataclass(frozen=True)
class OccurrenceSequence:
    """Upcoming occurrences of a reminder, at most `max_count` of them.

    Iterating always starts over from `now`; the object holds no cursor.
    """
    reminder: Reminder
    max_count: int
    now: date

    def __iter__(self) -> Iterator[date]:
        if self.max_count <= 0 or _is_malformed(self.reminder):
            return

        if isinstance(self.reminder.recurrence, Once):
            if self.reminder.due_date >= self.now:
                yield self.reminder.due_date
            return

        current = _first_on_or_after(self.reminder, self.now)
        emitted = 0
        while current is not None and emitted < self.max_count:
            yield current
            emitted += 1
            current = next_occurrence(self.reminder, current)

    def to_list(self) -> list[date]:
        return list(self)


def upcoming_occurrences(reminder: Reminder, max_count: int, now: date) -> OccurrenceSequence:
    return OccurrenceSequence(reminder, max_count, now)


def next_due_date(reminder: Reminder, after: date) -> date | None:
    """First occurrence strictly after `after`."""
    if after >= date.max:
        return None
    return next(iter(upcoming_occurrences(reminder, 1, after + timedelta(days=1))), None)


def is_due_on(reminder: Reminder, check_date: date) -> bool:
    """Closed-form test of whether `check_date` is an occurrence of `reminder`."""
    rec = reminder.recurrence
    anchor = reminder.due_date

    if isinstance(rec, Once):
        return check_date == anchor
    if check_date < anchor or _past_end(reminder, check_date):
        return False

    if isinstance(rec, Monthly):
        preferred = clamp_day_to_month(check_date.year, check_date.month, anchor.day)
        return check_date.day == preferred and months_between(anchor, check_date) >= 0

    step = _step_days(reminder)
    if step is None:
        return False
    if isinstance(rec, Weekly) and check_date.weekday() != anchor.weekday():
        return False
    return (check_date - anchor).days % step == 0
