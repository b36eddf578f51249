from database.db_manager import DatabaseManager


class DismissedReminderDAO:
    """Per-user alert dismissals that lapse on an expiry date."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def dismiss(self, user_id: int, key: str, expires: str) -> None:
        """Insert or replace a dismissal record. expires is YYYY-MM-DD."""
        conn = self._db.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO dismissed_reminders(user_id, key, expires) VALUES (?, ?, ?)",
            (user_id, key, expires),
        )
        conn.commit()

    def get_active_keys(self, user_id: int, ref_date: str) -> set[str]:
        """Purge expired rows, then return the user's keys still in effect on ref_date.

        A dismissal expiring on a reminder's next due date is gone on that date.
        """
        conn = self._db.get_connection()
        conn.execute("DELETE FROM dismissed_reminders WHERE expires <= ?", (ref_date,))
        conn.commit()
        rows = conn.execute(
            "SELECT key FROM dismissed_reminders WHERE user_id = ?", (user_id,)
        ).fetchall()
        return {row["key"] for row in rows}
