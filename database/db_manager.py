import sqlite3
import os
from utils.constants import DB_FILE


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and apply migrations."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._migrate_schema(conn)
        conn.commit()

    def _migrate_schema(self, conn: sqlite3.Connection):
        """Idempotent ALTER TABLE for columns added after initial release."""
        cols = {row[1] for row in conn.execute("PRAGMA table_info(recurring_templates)").fetchall()}
        if "currency_code" not in cols:
            conn.execute("ALTER TABLE recurring_templates ADD COLUMN currency_code TEXT")
        if "is_fixed" not in cols:
            conn.execute(
                "ALTER TABLE recurring_templates ADD COLUMN is_fixed INTEGER NOT NULL DEFAULT 1"
            )
        cols = {row[1] for row in conn.execute("PRAGMA table_info(expenses)").fetchall()}
        if "currency_code" not in cols:
            conn.execute("ALTER TABLE expenses ADD COLUMN currency_code TEXT")

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS recurring_templates (
                id                  TEXT    PRIMARY KEY,
                plan_id             TEXT    NOT NULL,
                name                TEXT    NOT NULL,
                amount_cents        INTEGER NOT NULL CHECK(amount_cents >= 0),
                frequency           TEXT    NOT NULL CHECK(frequency IN
                    ('weekly','biweekly','semimonthly','monthly','quarterly','annual')),
                category            TEXT    NOT NULL,
                bucket_id           TEXT    NOT NULL DEFAULT '',
                currency_code       TEXT,
                day_of_month        INTEGER CHECK(day_of_month BETWEEN 1 AND 31),
                is_active           INTEGER NOT NULL DEFAULT 1,
                last_generated_date TEXT,
                notes               TEXT,
                is_fixed            INTEGER NOT NULL DEFAULT 1,
                created_at          TEXT    NOT NULL,
                updated_at          TEXT    NOT NULL
            );

            CREATE TABLE IF NOT EXISTS expenses (
                id               TEXT    PRIMARY KEY,
                plan_id          TEXT    NOT NULL,
                bucket_id        TEXT    NOT NULL DEFAULT '',
                name             TEXT    NOT NULL,
                amount_cents     INTEGER NOT NULL,
                frequency        TEXT    NOT NULL,
                category         TEXT    NOT NULL,
                currency_code    TEXT,
                is_fixed         INTEGER NOT NULL DEFAULT 0,
                notes            TEXT,
                transaction_date TEXT,
                created_at       TEXT    NOT NULL,
                updated_at       TEXT    NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_templates_plan_id ON recurring_templates(plan_id);
            CREATE INDEX IF NOT EXISTS idx_templates_active  ON recurring_templates(plan_id, is_active);
            CREATE INDEX IF NOT EXISTS idx_expenses_plan_id  ON expenses(plan_id);
            CREATE INDEX IF NOT EXISTS idx_expenses_date     ON expenses(transaction_date);
        """)

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (and initializes) recurring.db.

        db_folder: if provided, the DB file is stored in that directory instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            db_path = os.path.join(db_folder, DB_FILE)
        else:
            db_path = DB_FILE
        db = DatabaseManager(db_path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
