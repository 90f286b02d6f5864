"""
SQLite storage for per-user transactions.
"""
import sqlite3
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from core.config import get_settings
from core.exceptions import StorageError
from core.logger import setup_logger
from core.schema import Transaction

logger = setup_logger(__name__)


class Database:
    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or get_settings().database_path

    def get_connection(self) -> sqlite3.Connection:
        """Create a database connection."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            logger.error(f"Failed to open database {self.db_path}: {e}")
            raise StorageError("Failed to open database", details={"db_path": self.db_path, "error": str(e)})
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Initialize database tables."""
        conn = self.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS transactions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    description TEXT NOT NULL,
                    amount REAL NOT NULL,
                    category TEXT NOT NULL,
                    type TEXT NOT NULL DEFAULT 'debit'
                        CHECK (type IN ('debit', 'credit')),
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_transactions_user_date
                ON transactions (user_id, date)
            """)
            conn.commit()
            logger.info("Database initialized successfully")
        except sqlite3.Error as e:
            logger.error(f"Database initialization failed: {e}")
            raise StorageError("Database initialization failed", details={"error": str(e)})
        finally:
            conn.close()

    def insert_transactions(self, transactions: Sequence[Transaction]) -> int:
        """
        Insert a batch of transactions in one commit.

        Returns:
            Number of rows inserted
        """
        if not transactions:
            return 0

        conn = self.get_connection()
        now = datetime.now(timezone.utc).isoformat()
        rows = [
            (t.user_id, t.date.isoformat(), t.description, t.amount, t.category, t.type, now)
            for t in transactions
        ]

        try:
            with conn:
                conn.executemany(
                    "INSERT INTO transactions "
                    "(user_id, date, description, amount, category, type, created_at) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    rows
                )
            logger.info(f"Inserted {len(rows)} transactions")
            return len(rows)
        except sqlite3.Error as e:
            logger.error(f"Failed to insert transactions: {e}")
            raise StorageError("Failed to save transactions", details={"error": str(e)})
        finally:
            conn.close()

    @staticmethod
    def _range_clause(
        user_id: str,
        start_date: Optional[date],
        end_date: Optional[date]
    ) -> tuple:
        clause = "WHERE user_id = ?"
        params: List[Any] = [user_id]
        # Range applies only when both bounds are given
        if start_date and end_date:
            clause += " AND date BETWEEN ? AND ?"
            params.extend([start_date.isoformat(), end_date.isoformat()])
        return clause, params

    def get_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[Dict[str, Any]]:
        """Get a user's transactions, newest first."""
        clause, params = self._range_clause(user_id, start_date, end_date)
        conn = self.get_connection()

        try:
            cursor = conn.execute(
                "SELECT id, user_id, date, description, amount, category, type, created_at "
                f"FROM transactions {clause} ORDER BY date DESC, id DESC",
                params
            )
            return [dict(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            logger.error(f"Failed to get transactions: {e}")
            raise StorageError("Failed to load transactions", details={"error": str(e)})
        finally:
            conn.close()

    def summarize_by_category(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[Dict[str, Any]]:
        """Total amount and count per category, largest total first."""
        clause, params = self._range_clause(user_id, start_date, end_date)
        conn = self.get_connection()

        try:
            cursor = conn.execute(
                "SELECT category, SUM(amount) AS total, COUNT(*) AS count "
                f"FROM transactions {clause} GROUP BY category ORDER BY total DESC",
                params
            )
            return [dict(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            logger.error(f"Failed to summarize transactions: {e}")
            raise StorageError("Failed to summarize transactions", details={"error": str(e)})
        finally:
            conn.close()

    def delete_all(self, user_id: str) -> int:
        """Delete every transaction owned by a user."""
        conn = self.get_connection()

        try:
            with conn:
                cursor = conn.execute("DELETE FROM transactions WHERE user_id = ?", (user_id,))
            logger.info(f"Deleted {cursor.rowcount} transactions for user {user_id}")
            return cursor.rowcount
        except sqlite3.Error as e:
            logger.error(f"Failed to delete transactions: {e}")
            raise StorageError("Failed to delete transactions", details={"error": str(e)})
        finally:
            conn.close()


# Global DB instance
_db: Optional[Database] = None


def get_db() -> Database:
    global _db
    if _db is None:
        _db = Database()
        _db.init_db()
    return _db


def reset_db() -> None:
    global _db
    _db = None
