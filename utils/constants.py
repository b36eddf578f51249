APP_NAME = "Family Budget Reminders"
APP_WIDTH = 1100
APP_HEIGHT = 700
DB_FILE = "family_budget.db"

DEFAULT_USER_NAME = "Me"
DATE_FORMAT = "%Y-%m-%d"

# Occurrence limits
DEFAULT_OCCURRENCES = 10
MAX_OCCURRENCES = 50
MAX_CUSTOM_INTERVAL_DAYS = 3660
MAX_FAST_FORWARD_STEPS = 100
SCHEDULE_OCCURRENCES = 5
DEFAULT_SCHEDULE_DAYS = 30
MAX_SCHEDULE_DAYS = 365
UPCOMING_REMINDER_DAYS = 7
DISMISS_FALLBACK_DAYS = 30

REMINDER_TYPES = ["Payment", "Receivable"]
RECURRENCE_KINDS = ["once", "daily", "weekly", "monthly", "custom"]
RECURRENCE_LABELS = {
    "once":    "One time",
    "daily":   "Daily",
    "weekly":  "Weekly",
    "monthly": "Monthly",
    "custom":  "Every N days",
}

SEVERITY_COLORS = {
    "error":   "#F44336",
    "warning": "#FF9800",
    "info":    "#2196F3",
}

SEVERITY_ICONS = {
    "error":   "❗",
    "warning": "⚠",
    "info":    "ℹ",
}

SEVERITY_ORDER = {"error": 0, "warning": 1, "info": 2}

TYPE_COLORS = {
    "Payment":    "#F44336",
    "Receivable": "#4CAF50",
}
