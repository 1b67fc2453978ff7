import sqlite3
from datetime import date

import pytest

from conftest import PLAN_ID


def test_create_and_get_by_id(template_dao, make_template):
    t = make_template(name="Rent", currency_code="USD", notes="Landlord")
    created = template_dao.create(t)
    assert created == t
    assert template_dao.get_by_id("missing") is None


def test_get_by_plan_id_filters_plan(template_dao, add_template):
    add_template(name="Rent")
    add_template(name="Water", plan_id="other-plan")
    assert [t.name for t in template_dao.get_by_plan_id(PLAN_ID)] == ["Rent"]


def test_get_active_by_plan_id(template_dao, add_template):
    add_template(name="Rent")
    add_template(name="Gym", is_active=False)
    assert [t.name for t in template_dao.get_active_by_plan_id(PLAN_ID)] == ["Rent"]


def test_get_plan_ids(template_dao, add_template):
    add_template(plan_id="b")
    add_template(plan_id="a")
    add_template(plan_id="a")
    assert template_dao.get_plan_ids() == ["a", "b"]


def test_get_templates_for_today(template_dao, add_template):
    rent = add_template(name="Rent", day_of_month=1)
    add_template(name="Phone", day_of_month=15)
    add_template(name="Done", day_of_month=1, last_generated_date="2025-03-01")
    add_template(name="Paused", day_of_month=1, is_active=False)

    due = template_dao.get_templates_for_today(PLAN_ID, date(2025, 3, 1))

    assert [t.id for t in due] == [rent.id]


def test_update_last_generated(template_dao, add_template):
    t = add_template()
    template_dao.update_last_generated(t.id, "2025-03-01")
    stored = template_dao.get_by_id(t.id)
    assert stored.last_generated_date == "2025-03-01"
    assert stored.updated_at != t.updated_at


def test_update_writes_fields(template_dao, add_template):
    t = add_template(name="Rent", amount_cents=100000)
    t.amount_cents = 110000
    t.day_of_month = None
    updated = template_dao.update(t)
    assert updated.amount_cents == 110000
    assert updated.day_of_month is None


def test_toggle_active_both_ways(template_dao, add_template):
    t = add_template()
    assert template_dao.toggle_active(t.id).is_active is False
    assert template_dao.toggle_active(t.id).is_active is True
    assert template_dao.toggle_active("missing") is None


def test_delete_and_delete_by_plan_id(template_dao, add_template):
    a = add_template(name="A")
    add_template(name="B")
    add_template(name="C", plan_id="other-plan")

    template_dao.delete(a.id)
    assert [t.name for t in template_dao.get_by_plan_id(PLAN_ID)] == ["B"]

    template_dao.delete_by_plan_id(PLAN_ID)
    assert template_dao.get_by_plan_id(PLAN_ID) == []
    assert len(template_dao.get_by_plan_id("other-plan")) == 1


def test_schema_rejects_negative_amount(template_dao, make_template):
    with pytest.raises(sqlite3.IntegrityError):
        template_dao.create(make_template(amount_cents=-5))
