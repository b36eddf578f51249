import argparse
import logging
import os
import sqlite3
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.user_dao import UserDAO
from database.wallet_dao import WalletDAO
from database.reminder_dao import ReminderDAO
from database.dismissed_reminder_dao import DismissedReminderDAO

from services.wallet_service import WalletService
from services.reminder_service import ReminderService

from ui.app_window import AppWindow

from utils.app_config import get_db_path, get_log_level
from utils.constants import APP_NAME, UPCOMING_REMINDER_DAYS
from utils.currency import format_reminder_amount
from utils.date_helpers import format_date, parse_date, today

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="main.py", description=APP_NAME)
    parser.add_argument("--db", help="database file (overrides the configured path)")
    parser.add_argument("--user", help="act as this user instead of the last one used")
    parser.add_argument(
        "--due", nargs="?", const="", metavar="YYYY-MM-DD",
        help="print reminders due on the date (default today) and exit",
    )
    return parser.parse_args(argv)


def _resolve_user(db: DatabaseManager, user_dao: UserDAO, name: str | None):
    if name:
        return user_dao.get_by_name(name)
    last_user_id = db.get_setting("last_user_id", "")
    if last_user_id.isdigit():
        user = user_dao.get_by_id(int(last_user_id))
        if user:
            return user
    users = user_dao.get_all()
    return users[0] if users else None


def print_due(reminder_svc: ReminderService, user_id: int, check_date, symbol: str) -> None:
    for r in reminder_svc.get_due(user_id, check_date):
        print(f"{r.title}\t{r.type}\t{format_reminder_amount(r.amount, r.type, symbol)}")


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(args.db or get_db_path())

    # ── DAOs ─────────────────────────────────────────────────────────────────
    user_dao = UserDAO(db)
    wallet_dao = WalletDAO(db)
    reminder_dao = ReminderDAO(db)
    dismissed_reminder_dao = DismissedReminderDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    wallet_svc = WalletService(wallet_dao, user_dao)
    reminder_svc = ReminderService(reminder_dao, wallet_svc)

    user = _resolve_user(db, user_dao, args.user)
    if user is None:
        print(f"Unknown user: {args.user}", file=sys.stderr)
        db.close()
        return 2

    currency_symbol = db.get_setting("currency_symbol", "$")

    # ── Command-line due check ───────────────────────────────────────────────
    if args.due is not None:
        check_date = parse_date(args.due) if args.due else today()
        if check_date is None:
            print(f"Invalid date: {args.due}", file=sys.stderr)
            db.close()
            return 2
        print_due(reminder_svc, user.id, check_date, currency_symbol)
        db.close()
        return 0

    # ── Startup alerts, minus dismissed ones ─────────────────────────────────
    ref = today()
    try:
        dismissed_keys = dismissed_reminder_dao.get_active_keys(user.id, format_date(ref))
    except sqlite3.Error:
        logger.exception("Could not read dismissed reminders")
        dismissed_keys = set()
    upcoming_days = db.get_setting("upcoming_days", str(UPCOMING_REMINDER_DAYS))
    alerts = reminder_svc.get_alerts(
        user.id, ref,
        upcoming_days=int(upcoming_days) if upcoming_days.isdigit() else UPCOMING_REMINDER_DAYS,
        dismissed_keys=dismissed_keys,
    )

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    logger.info("Starting %s as %s", APP_NAME, user.name)
    app = AppWindow(
        reminder_service=reminder_svc,
        wallet_service=wallet_svc,
        user_dao=user_dao,
        db=db,
        dismissed_reminder_dao=dismissed_reminder_dao,
        initial_user=user,
        startup_alerts=alerts,
        date_format=db.get_setting("date_format", "MM/DD/YYYY"),
        currency_symbol=currency_symbol,
    )
    app.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
