from typing import Optional
from database.db_manager import DatabaseManager
from models.expense_item import ExpenseItem


class ExpenseDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> ExpenseItem:
        return ExpenseItem(
            id=row["id"],
            plan_id=row["plan_id"],
            bucket_id=row["bucket_id"],
            name=row["name"],
            amount_cents=row["amount_cents"],
            frequency=row["frequency"],
            category=row["category"],
            is_fixed=bool(row["is_fixed"]),
            currency_code=row["currency_code"],
            notes=row["notes"],
            transaction_date=row["transaction_date"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_by_plan_id(self, plan_id: str) -> list[ExpenseItem]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM expenses
               WHERE plan_id = ?
               ORDER BY COALESCE(transaction_date, created_at) ASC, rowid ASC""",
            (plan_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_plan_ids(self) -> list[str]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT DISTINCT plan_id FROM expenses ORDER BY plan_id"
        ).fetchall()
        return [r["plan_id"] for r in rows]

    def get_by_id(self, expense_id: str) -> Optional[ExpenseItem]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM expenses WHERE id = ?", (expense_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, expense: ExpenseItem) -> ExpenseItem:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO expenses
               (id, plan_id, bucket_id, name, amount_cents, frequency, category,
                currency_code, is_fixed, notes, transaction_date, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                expense.id, expense.plan_id, expense.bucket_id, expense.name,
                expense.amount_cents, expense.frequency, expense.category,
                expense.currency_code, 1 if expense.is_fixed else 0, expense.notes,
                expense.transaction_date, expense.created_at, expense.updated_at,
            ),
        )
        conn.commit()
        return self.get_by_id(expense.id)

    def delete(self, expense_id: str):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
        conn.commit()
