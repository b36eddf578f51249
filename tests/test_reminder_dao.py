from datetime import date

from models.reminder import Custom, Monthly, Once


def test_fresh_database_has_default_user_and_settings(db, user_dao):
    assert [u.name for u in user_dao.get_all()] == ["Me"]
    assert db.get_setting("date_format") == "MM/DD/YYYY"
    assert db.get_setting("upcoming_days") == "7"
    assert db.get_setting("missing", "fallback") == "fallback"


def test_initialize_is_idempotent(db, user_dao):
    db.initialize()
    db.initialize()
    assert len(user_dao.get_all()) == 1


def test_set_setting(db):
    db.set_setting("last_user_id", "3")
    assert db.get_setting("last_user_id") == "3"


def test_create_round_trips_recurrence(reminder_dao, me):
    created = reminder_dao.create(
        user_id=me.id, title="Gym", amount=30.0, type_="Payment",
        due_date=date(2024, 1, 5), recurrence=Custom(14), duration_end=date(2024, 12, 31),
    )
    loaded = reminder_dao.get_by_id(created.id)
    assert loaded.recurrence == Custom(14)
    assert loaded.due_date == date(2024, 1, 5)
    assert loaded.duration_end == date(2024, 12, 31)
    assert loaded.is_active
    assert loaded.wallet_name == ""


def test_once_has_no_interval(reminder_dao, me):
    created = reminder_dao.create(
        user_id=me.id, title="Deposit", amount=10.0, type_="Receivable",
        due_date=date(2024, 1, 5), recurrence=Once(),
    )
    assert created.recurrence == Once()
    assert created.recurrence_interval is None
    assert created.duration_end is None


def test_update_and_set_active(reminder_dao, me):
    created = reminder_dao.create(
        user_id=me.id, title="Rent", amount=900.0, type_="Payment",
        due_date=date(2024, 1, 1), recurrence=Monthly(),
    )
    updated = reminder_dao.update(
        created.id, title="Rent (new flat)", amount=950.0, type_="Payment",
        due_date=date(2024, 2, 1), recurrence=Monthly(),
    )
    assert updated.title == "Rent (new flat)"
    assert updated.amount == 950.0

    paused = reminder_dao.set_active(created.id, False)
    assert not paused.is_active
    assert reminder_dao.get_active(me.id) == []
    assert len(reminder_dao.get_by_user(me.id)) == 1


def test_delete(reminder_dao, me):
    created = reminder_dao.create(
        user_id=me.id, title="Rent", amount=900.0, type_="Payment",
        due_date=date(2024, 1, 1), recurrence=Monthly(),
    )
    assert reminder_dao.delete(created.id)
    assert not reminder_dao.delete(created.id)
    assert reminder_dao.get_by_id(created.id) is None


def test_get_by_type(reminder_dao, me):
    for title, type_ in [("Rent", "Payment"), ("Salary", "Receivable")]:
        reminder_dao.create(
            user_id=me.id, title=title, amount=1.0, type_=type_,
            due_date=date(2024, 1, 1), recurrence=Monthly(),
        )
    assert [r.title for r in reminder_dao.get_by_type(me.id, "Receivable")] == ["Salary"]


def test_wallet_name_is_joined(reminder_dao, wallet_dao, me):
    wallet = wallet_dao.create(me.id, "Household", is_family=True)
    created = reminder_dao.create(
        user_id=me.id, title="Power", amount=60.0, type_="Payment",
        due_date=date(2024, 1, 1), recurrence=Monthly(), wallet_id=wallet.id,
    )
    assert created.wallet_name == "Household"


def test_dismissals_expire(dismissed_dao, me):
    dismissed_dao.dismiss(me.id, "reminder:1", "2024-01-10")
    dismissed_dao.dismiss(me.id, "reminder:2", "2024-01-05")
    assert dismissed_dao.get_active_keys(me.id, "2024-01-04") == {"reminder:1", "reminder:2"}
    assert dismissed_dao.get_active_keys(me.id, "2024-01-05") == {"reminder:1"}
    assert dismissed_dao.get_active_keys(me.id, "2024-01-10") == set()


def test_dismiss_again_replaces_expiry(dismissed_dao, me):
    dismissed_dao.dismiss(me.id, "reminder:1", "2024-01-10")
    dismissed_dao.dismiss(me.id, "reminder:1", "2024-02-10")
    assert dismissed_dao.get_active_keys(me.id, "2024-01-20") == {"reminder:1"}


def test_dismissals_are_per_user(dismissed_dao, me, other):
    dismissed_dao.dismiss(me.id, "reminder:1", "2024-01-10")
    assert dismissed_dao.get_active_keys(other.id, "2024-01-01") == set()
