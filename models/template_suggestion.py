from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TemplateSuggestion:
    """A candidate template produced by pattern detection. Never persisted."""
    name: str
    amount_cents: int
    frequency: str
    category: str
    confidence: float                       # 0.0 - 1.0
    matching_expense_ids: tuple[str, ...]
    currency_code: Optional[str] = None
