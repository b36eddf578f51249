from datetime import date
from typing import Optional
from database.db_manager import DatabaseManager
from models.reminder import Reminder, Recurrence, recurrence_from_fields, recurrence_interval
from utils.date_helpers import parse_date, format_date


class ReminderDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Reminder:
        return Reminder(
            id=row["id"],
            user_id=row["user_id"],
            wallet_id=row["wallet_id"],
            title=row["title"],
            amount=row["amount"],
            type=row["type"],
            due_date=parse_date(row["due_date"]),
            recurrence=recurrence_from_fields(row["recurrence"], row["recurrence_interval"]),
            duration_end=parse_date(row["duration_end"]),
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            wallet_name=(row["wallet_name"] or "") if "wallet_name" in row.keys() else "",
        )

    def _select(self) -> str:
        return """
            SELECT r.*, w.name AS wallet_name
            FROM reminders r
            LEFT JOIN wallets w ON r.wallet_id = w.id
        """

    def get_by_id(self, reminder_id: int) -> Optional[Reminder]:
        conn = self._db.get_connection()
        row = conn.execute(self._select() + " WHERE r.id = ?", (reminder_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_user(self, user_id: int) -> list[Reminder]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE r.user_id = ? ORDER BY r.due_date, r.id", (user_id,)
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_active(self, user_id: int) -> list[Reminder]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE r.user_id = ? AND r.is_active = 1 ORDER BY r.due_date, r.id",
            (user_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_type(self, user_id: int, type_: str) -> list[Reminder]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE r.user_id = ? AND r.type = ? ORDER BY r.due_date, r.id",
            (user_id, type_),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_accessible(self, user_id: int, wallet_ids: list[int]) -> list[Reminder]:
        """Reminders the user owns or that live in one of `wallet_ids`."""
        sql = self._select() + " WHERE r.user_id = ?"
        params: list = [user_id]
        if wallet_ids:
            placeholders = ", ".join("?" for _ in wallet_ids)
            sql += f" OR r.wallet_id IN ({placeholders})"
            params.extend(wallet_ids)
        conn = self._db.get_connection()
        rows = conn.execute(sql + " ORDER BY r.due_date, r.id", params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(
        self,
        user_id: int,
        title: str,
        amount: float,
        type_: str,
        due_date: date,
        recurrence: Recurrence,
        duration_end: date | None = None,
        wallet_id: int | None = None,
    ) -> Reminder:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO reminders
               (user_id, wallet_id, title, amount, type, due_date,
                recurrence, recurrence_interval, duration_end)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                user_id, wallet_id, title, amount, type_, format_date(due_date),
                recurrence.kind, recurrence_interval(recurrence), format_date(duration_end),
            ),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        reminder_id: int,
        title: str,
        amount: float,
        type_: str,
        due_date: date,
        recurrence: Recurrence,
        duration_end: date | None = None,
        wallet_id: int | None = None,
        is_active: bool = True,
    ) -> Reminder:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE reminders SET
               title=?, amount=?, type=?, due_date=?, recurrence=?,
               recurrence_interval=?, duration_end=?, wallet_id=?, is_active=?,
               updated_at=datetime('now')
               WHERE id=?""",
            (
                title, amount, type_, format_date(due_date), recurrence.kind,
                recurrence_interval(recurrence), format_date(duration_end), wallet_id,
                1 if is_active else 0, reminder_id,
            ),
        )
        conn.commit()
        return self.get_by_id(reminder_id)

    def set_active(self, reminder_id: int, is_active: bool) -> Reminder | None:
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE reminders SET is_active = ?, updated_at = datetime('now') WHERE id = ?",
            (1 if is_active else 0, reminder_id),
        )
        conn.commit()
        return self.get_by_id(reminder_id)

    def delete(self, reminder_id: int) -> bool:
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM reminders WHERE id = ?", (reminder_id,))
        conn.commit()
        return cursor.rowcount > 0
