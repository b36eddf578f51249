from typing import Optional
from database.db_manager import DatabaseManager
from models.wallet import Wallet, WalletMember


class WalletDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Wallet:
        return Wallet(
            id=row["id"],
            name=row["name"],
            owner_id=row["owner_id"],
            is_family=bool(row["is_family"]),
            created_at=row["created_at"],
            owner_name=row["owner_name"] if "owner_name" in row.keys() else "",
        )

    def _row_to_member(self, row) -> WalletMember:
        return WalletMember(
            wallet_id=row["wallet_id"],
            user_id=row["user_id"],
            role=row["role"],
            joined_at=row["joined_at"],
            user_name=row["user_name"] if "user_name" in row.keys() else "",
        )

    def _select(self) -> str:
        return """
            SELECT w.*, u.name AS owner_name
            FROM wallets w
            JOIN users u ON w.owner_id = u.id
        """

    def get_by_id(self, wallet_id: int) -> Optional[Wallet]:
        conn = self._db.get_connection()
        row = conn.execute(self._select() + " WHERE w.id = ?", (wallet_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_owner_and_name(self, owner_id: int, name: str) -> Optional[Wallet]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE w.owner_id = ? AND w.name = ?", (owner_id, name)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_accessible(self, user_id: int) -> list[Wallet]:
        """Wallets the user owns, plus family wallets they are a member of."""
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + """
            WHERE w.owner_id = ?
               OR (w.is_family = 1 AND w.id IN (
                   SELECT wallet_id FROM wallet_members WHERE user_id = ?))
            ORDER BY w.name
            """,
            (user_id, user_id),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(self, owner_id: int, name: str, is_family: bool = False) -> Wallet:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT INTO wallets(name, owner_id, is_family) VALUES (?, ?, ?)",
            (name, owner_id, 1 if is_family else 0),
        )
        conn.execute(
            "INSERT INTO wallet_members(wallet_id, user_id, role) VALUES (?, ?, 'owner')",
            (cursor.lastrowid, owner_id),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def delete(self, wallet_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM wallets WHERE id = ?", (wallet_id,))
        conn.commit()

    # ── Membership ───────────────────────────────────────────────────────────

    def get_members(self, wallet_id: int) -> list[WalletMember]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT m.*, u.name AS user_name
               FROM wallet_members m
               JOIN users u ON m.user_id = u.id
               WHERE m.wallet_id = ?
               ORDER BY m.role DESC, u.name""",
            (wallet_id,),
        ).fetchall()
        return [self._row_to_member(r) for r in rows]

    def find_membership(self, wallet_id: int, user_id: int) -> Optional[WalletMember]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM wallet_members WHERE wallet_id = ? AND user_id = ?",
            (wallet_id, user_id),
        ).fetchone()
        return self._row_to_member(row) if row else None

    def get_member_wallet_ids(self, user_id: int, family_only: bool = True) -> list[int]:
        conn = self._db.get_connection()
        sql = """SELECT m.wallet_id FROM wallet_members m
                 JOIN wallets w ON m.wallet_id = w.id
                 WHERE m.user_id = ?"""
        if family_only:
            sql += " AND w.is_family = 1"
        rows = conn.execute(sql, (user_id,)).fetchall()
        return [r["wallet_id"] for r in rows]

    def add_member(self, wallet_id: int, user_id: int, role: str = "member"):
        conn = self._db.get_connection()
        conn.execute(
            "INSERT OR IGNORE INTO wallet_members(wallet_id, user_id, role) VALUES (?, ?, ?)",
            (wallet_id, user_id, role),
        )
        conn.commit()

    def remove_member(self, wallet_id: int, user_id: int):
        conn = self._db.get_connection()
        conn.execute(
            "DELETE FROM wallet_members WHERE wallet_id = ? AND user_id = ?",
            (wallet_id, user_id),
        )
        conn.commit()
