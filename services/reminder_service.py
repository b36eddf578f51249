import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from models.reminder import Reminder, Once, recurrence_from_fields
from database.reminder_dao import ReminderDAO
from services.wallet_service import WalletService
from services import recurrence_engine as engine
from utils.constants import (
    REMINDER_TYPES, MAX_OCCURRENCES, MAX_CUSTOM_INTERVAL_DAYS, DEFAULT_OCCURRENCES,
    SCHEDULE_OCCURRENCES, DEFAULT_SCHEDULE_DAYS, MAX_SCHEDULE_DAYS, UPCOMING_REMINDER_DAYS,
    DISMISS_FALLBACK_DAYS, SEVERITY_ORDER,
)
from utils.currency import format_currency
from utils.date_helpers import today, parse_date, format_date, relative_day_label

logger = logging.getLogger(__name__)


class ReminderNotFoundError(ValueError):
    """Reminder does not exist or the acting user may not see it."""


@dataclass
class ReminderAlert:
    type: str       # 'due_today' | 'upcoming' | 'overdue'
    severity: str   # 'info' | 'warning' | 'error'
    title: str
    detail: str
    key: str = ""   # "reminder:<id>"; empty = not dismissable


@dataclass
class ScheduleEntry:
    reminder: Reminder
    occurrences: list[date] = field(default_factory=list)


def alert_key(reminder: Reminder) -> str:
    return f"reminder:{reminder.id}"


class ReminderService:
    def __init__(self, reminder_dao: ReminderDAO, wallet_service: WalletService):
        self._dao = reminder_dao
        self._wallets = wallet_service

    # ── Queries ──────────────────────────────────────────────────────────────

    def get_user_reminders(self, user_id: int) -> list[Reminder]:
        """Own reminders plus those shared through family wallets."""
        return self._dao.get_accessible(user_id, self._wallets.family_wallet_ids(user_id))

    def get_active(self, user_id: int) -> list[Reminder]:
        return self._dao.get_active(user_id)

    def get_by_type(self, user_id: int, type_: str) -> list[Reminder]:
        if type_ not in REMINDER_TYPES:
            raise ValueError("Type must be Payment or Receivable.")
        return self._dao.get_by_type(user_id, type_)

    def get_by_id(self, reminder_id: int, user_id: int) -> Reminder | None:
        reminder = self._dao.get_by_id(reminder_id)
        if reminder is None:
            return None
        if reminder.user_id == user_id:
            return reminder
        if reminder.wallet_id and self._wallets.has_access(user_id, reminder.wallet_id):
            return reminder
        logger.warning("User %s denied access to reminder %s", user_id, reminder_id)
        return None

    # ── CRUD ─────────────────────────────────────────────────────────────────

    def create(
        self,
        user_id: int,
        title: str,
        amount: float,
        type_: str,
        due_date: date | str,
        recurrence: str = "once",
        recurrence_interval: int | None = None,
        duration_end: date | str | None = None,
        wallet_id: int | None = None,
    ) -> Reminder:
        if wallet_id and not self._wallets.has_access(user_id, wallet_id):
            raise ReminderNotFoundError("Reminder or wallet not found.")
        title, due, rec, end = self._validate(
            title, amount, type_, due_date, recurrence, recurrence_interval, duration_end
        )
        reminder = self._dao.create(
            user_id=user_id, title=title, amount=amount, type_=type_,
            due_date=due, recurrence=rec, duration_end=end, wallet_id=wallet_id,
        )
        logger.info("Created reminder %s (%r, %s) for user %s",
                    reminder.id, title, rec.kind, user_id)
        return reminder

    def update(
        self,
        reminder_id: int,
        user_id: int,
        title: str,
        amount: float,
        type_: str,
        due_date: date | str,
        recurrence: str = "once",
        recurrence_interval: int | None = None,
        duration_end: date | str | None = None,
        wallet_id: int | None = None,
        is_active: bool = True,
    ) -> Reminder:
        existing = self._require(reminder_id, user_id)
        if wallet_id and wallet_id != existing.wallet_id:
            if not self._wallets.has_access(user_id, wallet_id):
                raise ReminderNotFoundError("Reminder or wallet not found.")
        title, due, rec, end = self._validate(
            title, amount, type_, due_date, recurrence, recurrence_interval, duration_end
        )
        reminder = self._dao.update(
            reminder_id=reminder_id, title=title, amount=amount, type_=type_,
            due_date=due, recurrence=rec, duration_end=end, wallet_id=wallet_id,
            is_active=is_active,
        )
        logger.info("Updated reminder %s", reminder_id)
        return reminder

    def delete(self, reminder_id: int, user_id: int) -> bool:
        self._require(reminder_id, user_id)
        deleted = self._dao.delete(reminder_id)
        logger.info("Deleted reminder %s", reminder_id)
        return deleted

    def activate(self, reminder_id: int, user_id: int) -> Reminder:
        return self.set_active(reminder_id, user_id, True)

    def deactivate(self, reminder_id: int, user_id: int) -> Reminder:
        return self.set_active(reminder_id, user_id, False)

    def set_active(self, reminder_id: int, user_id: int, is_active: bool) -> Reminder:
        self._require(reminder_id, user_id)
        logger.info("%s reminder %s", "Activated" if is_active else "Deactivated", reminder_id)
        return self._dao.set_active(reminder_id, is_active)

    # ── Occurrences ──────────────────────────────────────────────────────────

    def next_due_date(self, reminder: Reminder, after: date | None = None) -> date | None:
        """Return the next date the reminder is due after `after` (default: today)."""
        return engine.next_due_date(reminder, after or today())

    def get_occurrences(
        self,
        reminder_id: int,
        user_id: int,
        max_count: int = DEFAULT_OCCURRENCES,
        now: date | None = None,
    ) -> list[date]:
        if isinstance(max_count, bool) or not isinstance(max_count, int) \
                or not 1 <= max_count <= MAX_OCCURRENCES:
            raise ValueError(f"Max occurrences must be between 1 and {MAX_OCCURRENCES}.")
        reminder = self._require(reminder_id, user_id)
        return engine.upcoming_occurrences(reminder, max_count, now or today()).to_list()

    def get_schedule(
        self, user_id: int, days: int = DEFAULT_SCHEDULE_DAYS, ref: date | None = None
    ) -> list[ScheduleEntry]:
        """Active reminders with their occurrences over the next `days` days."""
        if not 1 <= days <= MAX_SCHEDULE_DAYS:
            raise ValueError(f"Days parameter must be between 1 and {MAX_SCHEDULE_DAYS}.")
        ref = ref or today()
        horizon = ref + timedelta(days=days)
        schedule = []
        for reminder in self._dao.get_active(user_id):
            dates = [
                d for d in engine.upcoming_occurrences(reminder, SCHEDULE_OCCURRENCES, ref)
                if d <= horizon
            ]
            if dates:
                schedule.append(ScheduleEntry(reminder, dates))
        schedule.sort(key=lambda e: e.occurrences[0])
        return schedule

    def get_upcoming(
        self, user_id: int, days: int = UPCOMING_REMINDER_DAYS, ref: date | None = None
    ) -> list[Reminder]:
        ref = ref or today()
        horizon = ref + timedelta(days=days)
        found = []
        for reminder in self._dao.get_active(user_id):
            first = next(iter(engine.upcoming_occurrences(reminder, 1, ref)), None)
            if first is not None and first <= horizon:
                found.append((first, reminder))
        found.sort(key=lambda pair: (pair[0], pair[1].id))
        return [reminder for _, reminder in found]

    def get_overdue(self, user_id: int, ref: date | None = None) -> list[Reminder]:
        """Active reminders whose last possible occurrence is already behind `ref`."""
        ref = ref or today()
        overdue = []
        for reminder in self._dao.get_active(user_id):
            if isinstance(reminder.recurrence, Once):
                if reminder.due_date < ref:
                    overdue.append(reminder)
            elif reminder.duration_end is not None and reminder.duration_end < ref:
                overdue.append(reminder)
        return overdue

    def get_due(self, user_id: int, check_date: date | None = None) -> list[Reminder]:
        check_date = check_date or today()
        return [r for r in self._dao.get_active(user_id) if engine.is_due_on(r, check_date)]

    # ── Alerts ───────────────────────────────────────────────────────────────

    def get_alerts(
        self,
        user_id: int,
        ref: date | None = None,
        upcoming_days: int = UPCOMING_REMINDER_DAYS,
        dismissed_keys: set[str] | None = None,
    ) -> list[ReminderAlert]:
        ref = ref or today()
        alerts: list[ReminderAlert] = []
        due_ids = set()

        for reminder in self.get_due(user_id, ref):
            due_ids.add(reminder.id)
            alerts.append(ReminderAlert(
                type="due_today",
                severity="warning",
                title=f"{reminder.title} is due today",
                detail=self._detail(reminder),
                key=alert_key(reminder),
            ))

        for reminder in self.get_overdue(user_id, ref):
            last = reminder.due_date if not reminder.is_recurring else reminder.duration_end
            alerts.append(ReminderAlert(
                type="overdue",
                severity="error",
                title=f"{reminder.title} is overdue",
                detail=f"Last due {relative_day_label(last, ref)} · {self._detail(reminder)}",
                key=alert_key(reminder),
            ))

        for reminder in self.get_upcoming(user_id, upcoming_days, ref):
            if reminder.id in due_ids:
                continue
            next_due = engine.next_due_date(reminder, ref)
            alerts.append(ReminderAlert(
                type="upcoming",
                severity="info",
                title=f"{reminder.title} due {relative_day_label(next_due, ref)}",
                detail=f"Due on {next_due.strftime('%b %d')} · {self._detail(reminder)}",
                key=alert_key(reminder),
            ))

        alerts.sort(key=lambda a: SEVERITY_ORDER[a.severity])
        if dismissed_keys:
            alerts = [a for a in alerts if a.key not in dismissed_keys]
        return alerts

    def compute_expiry(self, alert: ReminderAlert, ref: date | None = None) -> str:
        """Return YYYY-MM-DD expiry date for a dismissed alert.

        The dismissal lasts until the reminder's next due date, or 30 days
        when it has none.
        """
        ref = ref or today()
        if alert.key.startswith("reminder:"):
            try:
                reminder_id = int(alert.key.split(":", 1)[1])
            except ValueError:
                reminder_id = None
            reminder = self._dao.get_by_id(reminder_id) if reminder_id else None
            if reminder:
                next_due = engine.next_due_date(reminder, ref)
                if next_due:
                    return format_date(next_due)
        return format_date(ref + timedelta(days=DISMISS_FALLBACK_DAYS))

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _require(self, reminder_id: int, user_id: int) -> Reminder:
        reminder = self.get_by_id(reminder_id, user_id)
        if reminder is None:
            raise ReminderNotFoundError("Reminder or wallet not found.")
        return reminder

    @staticmethod
    def _detail(reminder: Reminder) -> str:
        parts = [reminder.type, format_currency(reminder.amount)]
        if reminder.wallet_name:
            parts.append(f"Wallet: {reminder.wallet_name}")
        return " · ".join(parts)

    @staticmethod
    def _to_date(value: date | str | None, message: str) -> date | None:
        if value is None or value == "":
            return None
        if isinstance(value, date):
            return value
        parsed = parse_date(value)
        if parsed is None:
            raise ValueError(message)
        return parsed

    def _validate(self, title, amount, type_, due_date, recurrence, recurrence_interval,
                  duration_end):
        title = (title or "").strip()
        if not title:
            raise ValueError("Title cannot be empty.")
        if type_ not in REMINDER_TYPES:
            raise ValueError("Type must be Payment or Receivable.")
        if amount is None or amount <= 0:
            raise ValueError("Amount must be a positive number.")

        due = self._to_date(due_date, "Invalid date format.")
        if due is None:
            raise ValueError("Invalid date format.")

        kind = (recurrence or "once").strip().lower()
        interval = None
        if kind == "custom":
            if isinstance(recurrence_interval, bool) \
                    or not isinstance(recurrence_interval, int) or recurrence_interval <= 0:
                raise ValueError(
                    "Recurrence interval must be a positive number for custom recurrence."
                )
            if recurrence_interval > MAX_CUSTOM_INTERVAL_DAYS:
                raise ValueError(
                    f"Recurrence interval cannot exceed {MAX_CUSTOM_INTERVAL_DAYS} days."
                )
            interval = recurrence_interval
        try:
            rec = recurrence_from_fields(kind, interval)
        except ValueError:
            raise ValueError(
                "Recurrence must be one of once, daily, weekly, monthly or custom."
            ) from None

        end = self._to_date(duration_end, "Invalid duration end date format.")
        if isinstance(rec, Once):
            # A one-time reminder has no cutoff
            end = None
        if end is not None and end <= due:
            raise ValueError("Duration end date must be after due date.")
        return title, due, rec, end
