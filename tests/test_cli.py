import pytest

pytest.importorskip("customtkinter")
pytest.importorskip("tkcalendar")

import main  # noqa: E402
from database.db_manager import DatabaseManager  # noqa: E402
from database.reminder_dao import ReminderDAO  # noqa: E402
from database.user_dao import UserDAO  # noqa: E402
from database.wallet_dao import WalletDAO  # noqa: E402
from services.reminder_service import ReminderService  # noqa: E402
from services.wallet_service import WalletService  # noqa: E402


@pytest.fixture()
def db_path(tmp_path, monkeypatch):
    monkeypatch.setenv("FAMILY_BUDGET_CONFIG_DIR", str(tmp_path / "cfg"))
    path = str(tmp_path / "cli.db")
    db = DatabaseManager.open(path)
    user_dao = UserDAO(db)
    svc = ReminderService(ReminderDAO(db), WalletService(WalletDAO(db), user_dao))
    me = user_dao.get_by_name("Me")
    svc.create(me.id, "Rent", 900.0, "Payment", "2024-01-10", "monthly")
    svc.create(me.id, "Salary", 2500.0, "Receivable", "2024-02-10", "monthly")
    svc.create(me.id, "Dentist", 80.0, "Payment", "2024-03-11", "once")
    db.close()
    return path


def test_due_prints_reminders_due_on_date(db_path, capsys):
    assert main.main(["--db", db_path, "--due", "2024-03-10"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["Rent\tPayment\t-$900.00", "Salary\tReceivable\t+$2,500.00"]


def test_due_rejects_bad_date(db_path, capsys):
    assert main.main(["--db", db_path, "--due", "10.03.2024"]) == 2
    assert "Invalid date" in capsys.readouterr().err


def test_unknown_user(db_path, capsys):
    assert main.main(["--db", db_path, "--user", "Nobody", "--due"]) == 2
    assert "Unknown user" in capsys.readouterr().err
