from datetime import date

import pytest

from database.db_manager import DatabaseManager
from database.dismissed_reminder_dao import DismissedReminderDAO
from database.reminder_dao import ReminderDAO
from database.user_dao import UserDAO
from database.wallet_dao import WalletDAO
from models.reminder import Reminder, Once
from services.reminder_service import ReminderService
from services.wallet_service import WalletService


@pytest.fixture()
def db(tmp_path):
    manager = DatabaseManager.open(str(tmp_path / "test.db"))
    yield manager
    manager.close()


@pytest.fixture()
def user_dao(db):
    return UserDAO(db)


@pytest.fixture()
def wallet_dao(db):
    return WalletDAO(db)


@pytest.fixture()
def reminder_dao(db):
    return ReminderDAO(db)


@pytest.fixture()
def dismissed_dao(db):
    return DismissedReminderDAO(db)


@pytest.fixture()
def wallet_service(wallet_dao, user_dao):
    return WalletService(wallet_dao, user_dao)


@pytest.fixture()
def reminder_service(reminder_dao, wallet_service):
    return ReminderService(reminder_dao, wallet_service)


@pytest.fixture()
def me(user_dao):
    """The user seeded on a fresh database."""
    return user_dao.get_by_name("Me")


@pytest.fixture()
def other(user_dao):
    return user_dao.create("Alex")


@pytest.fixture()
def make_reminder():
    """Build an in-memory Reminder for engine tests."""
    def _make(due_date: date, recurrence=Once(), duration_end=None, **overrides):
        fields = dict(
            id=1, user_id=1, title="Rent", amount=100.0, type="Payment",
            due_date=due_date, recurrence=recurrence, duration_end=duration_end,
        )
        fields.update(overrides)
        return Reminder(**fields)
    return _make
