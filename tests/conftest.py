import uuid
import pytest

from database.db_manager import DatabaseManager
from database.expense_dao import ExpenseDAO
from database.recurring_template_dao import RecurringTemplateDAO
from models.expense_item import ExpenseItem
from models.recurring_template import RecurringTemplate
from services.pattern_detector import PatternDetector
from services.recurring_service import RecurringService

PLAN_ID = "plan-1"
BUCKET_ID = "bucket-needs"


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def template_dao(db):
    return RecurringTemplateDAO(db)


@pytest.fixture
def expense_dao(db):
    return ExpenseDAO(db)


@pytest.fixture
def service(template_dao, expense_dao):
    return RecurringService(template_dao, expense_dao, PatternDetector(expense_dao))


@pytest.fixture
def make_expense():
    """Build an unsaved ExpenseItem; keyword overrides win."""
    def _make(name="Netflix", amount_cents=1599, transaction_date="2025-01-15", **overrides):
        fields = dict(
            id=str(uuid.uuid4()),
            plan_id=PLAN_ID,
            bucket_id=BUCKET_ID,
            name=name,
            amount_cents=amount_cents,
            frequency="monthly",
            category="subscriptions",
            transaction_date=transaction_date,
            created_at="2025-01-01T09:00:00",
            updated_at="2025-01-01T09:00:00",
        )
        fields.update(overrides)
        return ExpenseItem(**fields)
    return _make


@pytest.fixture
def add_expense(expense_dao, make_expense):
    def _add(*args, **kwargs):
        return expense_dao.create(make_expense(*args, **kwargs))
    return _add


@pytest.fixture
def make_template():
    def _make(name="Rent", amount_cents=150000, day_of_month=1, **overrides):
        fields = dict(
            id=str(uuid.uuid4()),
            plan_id=PLAN_ID,
            name=name,
            amount_cents=amount_cents,
            frequency="monthly",
            category="housing",
            bucket_id=BUCKET_ID,
            day_of_month=day_of_month,
            created_at="2025-01-10T08:30:00",
            updated_at="2025-01-10T08:30:00",
        )
        fields.update(overrides)
        return RecurringTemplate(**fields)
    return _make


@pytest.fixture
def add_template(template_dao, make_template):
    def _add(*args, **kwargs):
        return template_dao.create(make_template(*args, **kwargs))
    return _add
