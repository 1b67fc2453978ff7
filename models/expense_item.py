from dataclasses import dataclass
from typing import Optional


@dataclass
class ExpenseItem:
    id: str
    plan_id: str
    bucket_id: str
    name: str
    amount_cents: int
    frequency: str
    category: str
    is_fixed: bool = False
    currency_code: Optional[str] = None
    notes: Optional[str] = None
    transaction_date: Optional[str] = None  # 'YYYY-MM-DD'
    created_at: str = ""
    updated_at: str = ""
