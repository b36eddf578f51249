from dataclasses import dataclass
from datetime import date
from typing import Optional, Union


# ── Recurrence variants ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Once:
    kind = "once"


@dataclass(frozen=True)
class Daily:
    kind = "daily"


@dataclass(frozen=True)
class Weekly:
    kind = "weekly"


@dataclass(frozen=True)
class Monthly:
    kind = "monthly"


@dataclass(frozen=True)
class Custom:
    interval_days: int
    kind = "custom"


Recurrence = Union[Once, Daily, Weekly, Monthly, Custom]

_SIMPLE_RECURRENCES = {
    "once": Once(),
    "daily": Daily(),
    "weekly": Weekly(),
    "monthly": Monthly(),
}


def recurrence_from_fields(kind: str | None, interval: int | None = None) -> Recurrence:
    """Build a recurrence from its persisted (kind, interval) pair.

    A missing kind means 'once'. A 'custom' row without an interval becomes
    Custom(0), which the engine treats as having no occurrences.
    """
    kind = (kind or "once").strip().lower()
    if kind == "custom":
        return Custom(int(interval or 0))
    try:
        return _SIMPLE_RECURRENCES[kind]
    except KeyError:
        raise ValueError(f"Unknown recurrence '{kind}'.") from None


def recurrence_interval(recurrence: Recurrence) -> int | None:
    return recurrence.interval_days if isinstance(recurrence, Custom) else None


# ── Reminder ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Reminder:
    id: int
    user_id: int
    title: str
    amount: float
    type: str                   # 'Payment' | 'Receivable'
    due_date: date              # anchor occurrence
    recurrence: Recurrence = Once()
    duration_end: Optional[date] = None
    is_active: bool = True
    wallet_id: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""
    wallet_name: str = ""

    @property
    def recurrence_kind(self) -> str:
        return self.recurrence.kind

    @property
    def recurrence_interval(self) -> int | None:
        return recurrence_interval(self.recurrence)

    @property
    def is_recurring(self) -> bool:
        return not isinstance(self.recurrence, Once)
