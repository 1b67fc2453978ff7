"""Monthly schedule arithmetic for recurring templates.

A template is pinned to an anchor day: its explicit day_of_month, or the day
of the month it was created. Each month the anchor is clamped to the month's
real length, so an anchor of 31 lands on the 30th in April and on the 28th or
29th in February.
"""
import logging
from datetime import date
from models.recurring_template import RecurringTemplate
from utils.date_helpers import (
    clamp_day_to_month,
    format_date,
    next_month_of,
    parse_timestamp,
    today,
)

logger = logging.getLogger(__name__)


def anchor_day(template: RecurringTemplate) -> int:
    if template.day_of_month is not None:
        return template.day_of_month
    created = parse_timestamp(template.created_at)
    if created is None:
        raise ValueError(f"Template {template.id} has no valid created_at timestamp.")
    return created.day


def _resolve_in_month(anchor: int, year: int, month: int) -> date:
    return date(year, month, clamp_day_to_month(year, month, anchor))


def next_due_date(template: RecurringTemplate, reference_date: date | None = None) -> date | None:
    """Next occurrence of the template, or None when the template is inactive.

    A template whose anchor is today counts as already due, so the next
    occurrence is in the following month.
    """
    if not template.is_active:
        return None
    ref = reference_date or today()
    anchor = anchor_day(template)
    if ref.day < anchor:
        return _resolve_in_month(anchor, ref.year, ref.month)
    y, m = next_month_of(ref.year, ref.month)
    return _resolve_in_month(anchor, y, m)


def upcoming_due_dates(
    template: RecurringTemplate, count: int, reference_date: date | None = None
) -> list[date]:
    """The next `count` occurrences after reference_date, one per month."""
    first = next_due_date(template, reference_date)
    if first is None or count <= 0:
        return []
    anchor = anchor_day(template)
    result = [first]
    y, m = first.year, first.month
    while len(result) < count:
        y, m = next_month_of(y, m)
        result.append(_resolve_in_month(anchor, y, m))
    return result


def is_due(template: RecurringTemplate, reference_date: date | None = None) -> bool:
    ref = reference_date or today()
    if not template.is_active:
        return False
    if template.last_generated_date == format_date(ref):
        return False
    return ref.day == clamp_day_to_month(ref.year, ref.month, anchor_day(template))


def filter_due(
    templates: list[RecurringTemplate], reference_date: date | None = None
) -> list[RecurringTemplate]:
    ref = reference_date or today()
    due = []
    for t in templates:
        try:
            if is_due(t, ref):
                due.append(t)
        except ValueError as e:
            logger.warning("Skipping template %s in due check: %s", t.id, e)
    return due
