from dataclasses import dataclass
from typing import Optional


@dataclass
class RecurringTemplate:
    id: str
    plan_id: str
    name: str
    amount_cents: int
    frequency: str          # 'weekly' | 'biweekly' | ... | 'annual'
    category: str           # one of EXPENSE_CATEGORIES
    bucket_id: str
    is_active: bool = True
    is_fixed: bool = True
    currency_code: Optional[str] = None     # None = plan currency
    day_of_month: Optional[int] = None      # 1-31, clamped to month length
    last_generated_date: Optional[str] = None   # 'YYYY-MM-DD'
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
