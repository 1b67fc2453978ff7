import logging
from datetime import date

import pytest

from services.template_scheduler import (
    anchor_day,
    filter_due,
    is_due,
    next_due_date,
    upcoming_due_dates,
)


def test_anchor_day_prefers_explicit_day(make_template):
    assert anchor_day(make_template(day_of_month=22)) == 22


def test_anchor_day_falls_back_to_creation_day(make_template):
    t = make_template(day_of_month=None, created_at="2025-01-10T08:30:00")
    assert anchor_day(t) == 10


def test_next_due_later_this_month(make_template):
    t = make_template(day_of_month=15)
    assert next_due_date(t, date(2025, 3, 10)) == date(2025, 3, 15)


def test_next_due_on_anchor_day_moves_to_next_month(make_template):
    t = make_template(day_of_month=15)
    assert next_due_date(t, date(2025, 3, 15)) == date(2025, 4, 15)


def test_next_due_clamps_to_short_month(make_template):
    t = make_template(day_of_month=31)
    assert next_due_date(t, date(2025, 4, 5)) == date(2025, 4, 30)


@pytest.mark.parametrize("ref, expected", [
    (date(2025, 1, 31), date(2025, 2, 28)),
    (date(2024, 1, 31), date(2024, 2, 29)),
    (date(2025, 3, 31), date(2025, 4, 30)),
])
def test_next_due_clamps_next_month(make_template, ref, expected):
    assert next_due_date(make_template(day_of_month=31), ref) == expected


def test_next_due_rolls_over_year(make_template):
    t = make_template(day_of_month=10)
    assert next_due_date(t, date(2025, 12, 20)) == date(2026, 1, 10)


def test_next_due_uses_creation_day(make_template):
    t = make_template(day_of_month=None, created_at="2025-01-10T08:30:00")
    assert next_due_date(t, date(2025, 6, 1)) == date(2025, 6, 10)


def test_next_due_inactive_is_none(make_template):
    assert next_due_date(make_template(is_active=False), date(2025, 6, 1)) is None


def test_upcoming_due_dates_clamp_each_month(make_template):
    t = make_template(day_of_month=31)
    assert upcoming_due_dates(t, 3, date(2025, 1, 5)) == [
        date(2025, 1, 31),
        date(2025, 2, 28),
        date(2025, 3, 31),
    ]
    assert upcoming_due_dates(t, 0, date(2025, 1, 5)) == []
    assert upcoming_due_dates(make_template(is_active=False), 3, date(2025, 1, 5)) == []


def test_is_due_on_clamped_month_end(make_template):
    t = make_template(day_of_month=31)
    assert is_due(t, date(2025, 4, 30))
    assert not is_due(t, date(2025, 4, 29))
    assert is_due(t, date(2025, 5, 31))


def test_is_due_skips_already_generated_today(make_template):
    t = make_template(day_of_month=1, last_generated_date="2025-03-01")
    assert not is_due(t, date(2025, 3, 1))
    assert is_due(t, date(2025, 4, 1))


def test_is_due_skips_inactive(make_template):
    assert not is_due(make_template(day_of_month=1, is_active=False), date(2025, 3, 1))


def test_filter_due_skips_templates_without_anchor(make_template, caplog):
    good = make_template(day_of_month=1)
    broken = make_template(day_of_month=None, created_at="")
    with caplog.at_level(logging.WARNING, logger="services.template_scheduler"):
        due = filter_due([broken, good], date(2025, 3, 1))
    assert due == [good]
    assert broken.id in caplog.text
