import logging

import pytest

import main
from database.db_manager import DatabaseManager
from database.expense_dao import ExpenseDAO
from database.recurring_template_dao import RecurringTemplateDAO
from utils import app_config
from utils.date_helpers import format_date, today


@pytest.fixture
def db_folder(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setattr(app_config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(app_config, "CONFIG_FILE", config_dir / "config.json")
    folder = str(tmp_path / "db")
    app_config.save_config({"db_folder": folder, "auto_generate_interval_minutes": 0})
    return folder


def test_main_generates_due_templates_on_startup(db_folder, make_template):
    db = DatabaseManager.open(db_folder=db_folder)
    RecurringTemplateDAO(db).create(make_template(name="Rent", day_of_month=today().day))
    db.close()

    main.main()

    db = DatabaseManager.open(db_folder=db_folder)
    try:
        expenses = ExpenseDAO(db).get_by_plan_id("plan-1")
        assert [(e.name, e.transaction_date) for e in expenses] == [("Rent", format_date(today()))]
    finally:
        db.close()


def test_main_logs_suggestions_for_plan_without_templates(db_folder, make_expense, caplog):
    db = DatabaseManager.open(db_folder=db_folder)
    expense_dao = ExpenseDAO(db)
    for d in ("2025-01-05", "2025-02-05", "2025-03-05"):
        expense_dao.create(make_expense(name="Spotify", amount_cents=999, transaction_date=d))
    db.close()

    caplog.set_level(logging.INFO)
    main.main()

    assert "suggestion" in caplog.text
    assert "Spotify" in caplog.text
