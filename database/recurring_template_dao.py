from datetime import date
from typing import Optional
from database.db_manager import DatabaseManager
from models.recurring_template import RecurringTemplate
from services.template_scheduler import filter_due
from utils.date_helpers import now_timestamp


class RecurringTemplateDAO:
    """Persistence for recurring expense templates.

    Templates define expenses that are generated automatically each month
    (rent on the 1st, subscriptions on the 15th, ...).
    """

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> RecurringTemplate:
        return RecurringTemplate(
            id=row["id"],
            plan_id=row["plan_id"],
            name=row["name"],
            amount_cents=row["amount_cents"],
            frequency=row["frequency"],
            category=row["category"],
            bucket_id=row["bucket_id"],
            is_active=bool(row["is_active"]),
            is_fixed=bool(row["is_fixed"]),
            currency_code=row["currency_code"],
            day_of_month=row["day_of_month"],
            last_generated_date=row["last_generated_date"],
            notes=row["notes"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_by_plan_id(self, plan_id: str) -> list[RecurringTemplate]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM recurring_templates WHERE plan_id = ? ORDER BY name, rowid",
            (plan_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_active_by_plan_id(self, plan_id: str) -> list[RecurringTemplate]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM recurring_templates
               WHERE plan_id = ? AND is_active = 1
               ORDER BY name, rowid""",
            (plan_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, template_id: str) -> Optional[RecurringTemplate]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM recurring_templates WHERE id = ?", (template_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_plan_ids(self) -> list[str]:
        """Distinct plan ids that own at least one template."""
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT DISTINCT plan_id FROM recurring_templates ORDER BY plan_id"
        ).fetchall()
        return [r["plan_id"] for r in rows]

    def get_templates_for_today(
        self, plan_id: str, reference_date: date | None = None
    ) -> list[RecurringTemplate]:
        """Active templates of the plan that are due on reference_date (default: today)."""
        return filter_due(self.get_active_by_plan_id(plan_id), reference_date)

    def create(self, template: RecurringTemplate) -> RecurringTemplate:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO recurring_templates
               (id, plan_id, name, amount_cents, frequency, category, bucket_id,
                currency_code, day_of_month, is_active, last_generated_date,
                notes, is_fixed, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                template.id, template.plan_id, template.name, template.amount_cents,
                template.frequency, template.category, template.bucket_id,
                template.currency_code, template.day_of_month,
                1 if template.is_active else 0, template.last_generated_date,
                template.notes, 1 if template.is_fixed else 0,
                template.created_at, template.updated_at,
            ),
        )
        conn.commit()
        return self.get_by_id(template.id)

    def update(self, template: RecurringTemplate) -> Optional[RecurringTemplate]:
        """Write every editable field back; refreshes updated_at. None if the id is unknown."""
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE recurring_templates SET
               name=?, amount_cents=?, frequency=?, category=?, bucket_id=?,
               currency_code=?, day_of_month=?, is_active=?, last_generated_date=?,
               notes=?, is_fixed=?, updated_at=?
               WHERE id=?""",
            (
                template.name, template.amount_cents, template.frequency,
                template.category, template.bucket_id, template.currency_code,
                template.day_of_month, 1 if template.is_active else 0,
                template.last_generated_date, template.notes,
                1 if template.is_fixed else 0, now_timestamp(), template.id,
            ),
        )
        conn.commit()
        return self.get_by_id(template.id)

    def update_last_generated(self, template_id: str, date_str: str):
        """Lightweight write after generation; prevents a second run the same day."""
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE recurring_templates SET last_generated_date = ?, updated_at = ? WHERE id = ?",
            (date_str, now_timestamp(), template_id),
        )
        conn.commit()

    def toggle_active(self, template_id: str) -> Optional[RecurringTemplate]:
        template = self.get_by_id(template_id)
        if template is None:
            return None
        template.is_active = not template.is_active
        return self.update(template)

    def delete(self, template_id: str):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM recurring_templates WHERE id = ?", (template_id,))
        conn.commit()

    def delete_by_plan_id(self, plan_id: str):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM recurring_templates WHERE plan_id = ?", (plan_id,))
        conn.commit()
