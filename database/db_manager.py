import logging
import os
import sqlite3
from utils.constants import DB_FILE, DEFAULT_USER_NAME, UPCOMING_REMINDER_DAYS

logger = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._migrate_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def _migrate_schema(self, conn: sqlite3.Connection):
        """Idempotent ALTER TABLE for columns added after initial release."""
        cols = {row[1] for row in conn.execute("PRAGMA table_info(reminders)").fetchall()}
        if "duration_end" not in cols:
            conn.execute("ALTER TABLE reminders ADD COLUMN duration_end TEXT")
        if "recurrence_interval" not in cols:
            conn.execute("ALTER TABLE reminders ADD COLUMN recurrence_interval INTEGER")

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS users (
                id         INTEGER PRIMARY KEY AUTOINCREMENT,
                name       TEXT NOT NULL UNIQUE,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS wallets (
                id         INTEGER PRIMARY KEY AUTOINCREMENT,
                name       TEXT    NOT NULL,
                owner_id   INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                is_family  INTEGER NOT NULL DEFAULT 0,
                created_at TEXT    NOT NULL DEFAULT (datetime('now')),
                UNIQUE(owner_id, name)
            );

            CREATE TABLE IF NOT EXISTS wallet_members (
                wallet_id INTEGER NOT NULL REFERENCES wallets(id) ON DELETE CASCADE,
                user_id   INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                role      TEXT    NOT NULL CHECK(role IN ('owner','member')),
                joined_at TEXT    NOT NULL DEFAULT (datetime('now')),
                PRIMARY KEY (wallet_id, user_id)
            );

            CREATE TABLE IF NOT EXISTS reminders (
                id                  INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id             INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                wallet_id           INTEGER REFERENCES wallets(id) ON DELETE CASCADE,
                title               TEXT    NOT NULL,
                amount              REAL    NOT NULL CHECK(amount > 0),
                type                TEXT    NOT NULL CHECK(type IN ('Payment','Receivable')),
                due_date            TEXT    NOT NULL,
                recurrence          TEXT    NOT NULL DEFAULT 'once'
                                    CHECK(recurrence IN ('once','daily','weekly','monthly','custom')),
                recurrence_interval INTEGER,
                duration_end        TEXT,
                is_active           INTEGER NOT NULL DEFAULT 1,
                created_at          TEXT    NOT NULL DEFAULT (datetime('now')),
                updated_at          TEXT    NOT NULL DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_reminders_user_id   ON reminders(user_id);
            CREATE INDEX IF NOT EXISTS idx_reminders_wallet_id ON reminders(wallet_id);
            CREATE INDEX IF NOT EXISTS idx_reminders_user_due  ON reminders(user_id, due_date);
            CREATE INDEX IF NOT EXISTS idx_reminders_is_active ON reminders(is_active);
            CREATE INDEX IF NOT EXISTS idx_wallet_members_user ON wallet_members(user_id);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS dismissed_reminders (
                user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                key     TEXT    NOT NULL,
                expires TEXT    NOT NULL,
                PRIMARY KEY (user_id, key)
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("appearance_mode", "system"),
            ("currency_symbol", "$"),
            ("date_format", "MM/DD/YYYY"),
            ("upcoming_days", str(UPCOMING_REMINDER_DAYS)),
            ("last_user_id", ""),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

        # Default user so a fresh install is usable straight away
        conn.execute(
            "INSERT OR IGNORE INTO users(name) VALUES (?)", (DEFAULT_USER_NAME,)
        )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    @staticmethod
    def open(db_path: str | None = None) -> "DatabaseManager":
        """Startup factory: creates the parent folder if needed and initializes the schema."""
        path = db_path or DB_FILE
        folder = os.path.dirname(os.path.abspath(path))
        os.makedirs(folder, exist_ok=True)
        db = DatabaseManager(path)
        db.initialize()
        logger.info("Opened database %s", path)
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
