import logging
import math
from datetime import datetime
from typing import NamedTuple
from database.expense_dao import ExpenseDAO
from models.expense_item import ExpenseItem
from models.template_suggestion import TemplateSuggestion
from utils.constants import (
    AMOUNT_WEIGHT,
    DEFAULT_MIN_OCCURRENCES,
    FALLBACK_FREQUENCY,
    FREQUENCY_GAP_THRESHOLDS,
    LONGEST_FREQUENCY,
    MIN_SUGGESTION_CONFIDENCE,
    NO_CURRENCY_KEY,
    OCCURRENCE_SATURATION,
    OCCURRENCE_WEIGHT,
)
from utils.currency import round_half_up_mean
from utils.date_helpers import parse_date, parse_timestamp
from utils.name_normalizer import normalize_expense_name

logger = logging.getLogger(__name__)


class GroupKey(NamedTuple):
    normalized_name: str
    currency: str


def group_key_for(expense: ExpenseItem) -> GroupKey:
    return GroupKey(
        normalize_expense_name(expense.name),
        expense.currency_code or NO_CURRENCY_KEY,
    )


def _occurred_at(expense: ExpenseItem) -> datetime:
    """transaction_date when present, else created_at; datetime.min if neither parses."""
    if expense.transaction_date:
        d = parse_date(expense.transaction_date)
        if d is not None:
            return datetime(d.year, d.month, d.day)
    ts = parse_timestamp(expense.created_at)
    if ts is None:
        return datetime.min
    return ts.replace(tzinfo=None)


def frequency_for_gap(avg_days: float) -> str:
    for upper, frequency in FREQUENCY_GAP_THRESHOLDS:
        if avg_days <= upper:
            return frequency
    return LONGEST_FREQUENCY


def detect_frequency(expenses: list[ExpenseItem]) -> str:
    """Most likely frequency from the average positive gap between occurrences."""
    times = sorted(_occurred_at(e) for e in expenses)
    # elapsed time, rounded half-up to whole days
    gaps = [math.floor((b - a).total_seconds() / 86400 + 0.5) for a, b in zip(times, times[1:])]
    gaps = [g for g in gaps if g > 0]
    if not gaps:
        return FALLBACK_FREQUENCY
    return frequency_for_gap(sum(gaps) / len(gaps))


def dominant_category(expenses: list[ExpenseItem]) -> str:
    counts: dict[str, int] = {}
    for e in expenses:
        counts[e.category] = counts.get(e.category, 0) + 1
    best, best_count = expenses[0].category, 0
    for category, count in counts.items():
        if count > best_count:
            best, best_count = category, count
    return best


def score_confidence(occurrences: int, amounts: list[int], mean_amount: int) -> float:
    """Blend of how often the charge appeared and how stable its amount is.

    0-50% maximum deviation from the mean maps linearly onto an amount score of 1-0.
    """
    occurrence_score = min(occurrences / OCCURRENCE_SATURATION, 1)
    if mean_amount > 0:
        max_deviation = max(abs(a - mean_amount) for a in amounts)
        deviation_ratio = max_deviation / mean_amount
    else:
        deviation_ratio = 1
    amount_score = max(0, 1 - deviation_ratio * 2)
    return occurrence_score * OCCURRENCE_WEIGHT + amount_score * AMOUNT_WEIGHT


def analyze_group(expenses: list[ExpenseItem]) -> TemplateSuggestion:
    """Build a suggestion from a group of expenses that share a GroupKey."""
    # max() keeps the first of equally recent expenses
    most_recent = max(expenses, key=_occurred_at)
    amounts = [e.amount_cents for e in expenses]
    mean_amount = round_half_up_mean(amounts)

    return TemplateSuggestion(
        name=most_recent.name,
        amount_cents=mean_amount,
        frequency=detect_frequency(expenses),
        category=dominant_category(expenses),
        confidence=score_confidence(len(expenses), amounts, mean_amount),
        matching_expense_ids=tuple(e.id for e in expenses),
        currency_code=most_recent.currency_code,
    )


def group_expenses(expenses: list[ExpenseItem]) -> dict[GroupKey, list[ExpenseItem]]:
    groups: dict[GroupKey, list[ExpenseItem]] = {}
    for expense in expenses:
        groups.setdefault(group_key_for(expense), []).append(expense)
    return groups


class PatternDetector:
    """Finds repeated expenses in a plan's history and proposes templates.

    Detection is read-only and stateless: every call recomputes suggestions
    from the current expenses, so a dismissed suggestion can come back.
    """

    def __init__(self, expense_dao: ExpenseDAO):
        self._expense_dao = expense_dao

    def detect(
        self, plan_id: str, min_occurrences: int = DEFAULT_MIN_OCCURRENCES
    ) -> list[TemplateSuggestion]:
        expenses = self._expense_dao.get_by_plan_id(plan_id)
        suggestions: list[TemplateSuggestion] = []
        # A single expense is never a pattern, whatever the caller asks for
        threshold = max(min_occurrences, 2)

        for group in group_expenses(expenses).values():
            if len(group) < threshold:
                continue
            suggestion = analyze_group(group)
            if suggestion.confidence >= MIN_SUGGESTION_CONFIDENCE:
                suggestions.append(suggestion)

        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        logger.debug(
            "Pattern detection for plan %s: %d expenses, %d suggestions",
            plan_id, len(expenses), len(suggestions),
        )
        return suggestions
