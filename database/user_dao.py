from typing import Optional
from database.db_manager import DatabaseManager
from models.user import User


class UserDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> User:
        return User(id=row["id"], name=row["name"], created_at=row["created_at"])

    def get_all(self) -> list[User]:
        conn = self._db.get_connection()
        rows = conn.execute("SELECT * FROM users ORDER BY name").fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, user_id: int) -> Optional[User]:
        conn = self._db.get_connection()
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_name(self, name: str) -> Optional[User]:
        conn = self._db.get_connection()
        row = conn.execute("SELECT * FROM users WHERE name = ?", (name,)).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, name: str) -> User:
        name = name.strip()
        if not name:
            raise ValueError("User name cannot be empty.")
        if self.get_by_name(name):
            raise ValueError(f"A user named '{name}' already exists.")
        conn = self._db.get_connection()
        cursor = conn.execute("INSERT INTO users(name) VALUES (?)", (name,))
        conn.commit()
        return self.get_by_id(cursor.lastrowid)
