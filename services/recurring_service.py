import logging
import uuid
from dataclasses import replace
from datetime import date
from models.expense_item import ExpenseItem
from models.generation_result import GenerationResult
from models.recurring_template import RecurringTemplate
from models.template_suggestion import TemplateSuggestion
from database.expense_dao import ExpenseDAO
from database.recurring_template_dao import RecurringTemplateDAO
from services.pattern_detector import PatternDetector
from services.template_scheduler import next_due_date, upcoming_due_dates
from utils.constants import (
    AUTO_GENERATED_NOTE,
    AUTO_GENERATED_SUFFIX,
    DEFAULT_MIN_OCCURRENCES,
    EXPENSE_CATEGORIES,
    FREQUENCIES,
    NAME_MAX_LENGTH,
    NOTES_MAX_LENGTH,
)
from utils.currency import format_cents
from utils.date_helpers import format_date, now_timestamp, today

logger = logging.getLogger(__name__)


class RecurringService:
    """Generation of expenses from recurring templates.

    - Automatic generation for templates that are due today
    - Detection of recurring patterns in existing expenses
    - Manual generation and template management
    """

    def __init__(
        self,
        template_dao: RecurringTemplateDAO,
        expense_dao: ExpenseDAO,
        detector: PatternDetector | None = None,
    ):
        self._dao = template_dao
        self._expense_dao = expense_dao
        self._detector = detector or PatternDetector(expense_dao)

    # ── Queries ──────────────────────────────────────────────────────────────

    def get_templates(self, plan_id: str) -> list[RecurringTemplate]:
        return self._dao.get_by_plan_id(plan_id)

    def get_by_id(self, template_id: str) -> RecurringTemplate | None:
        return self._dao.get_by_id(template_id)

    def templates_due_today(
        self, plan_id: str, reference_date: date | None = None
    ) -> list[RecurringTemplate]:
        return self._dao.get_templates_for_today(plan_id, reference_date)

    def get_next_generation_date(
        self, template: RecurringTemplate, reference_date: date | None = None
    ) -> str | None:
        """ISO date of the template's next occurrence, None if inactive."""
        due = next_due_date(template, reference_date)
        return format_date(due) if due else None

    def get_upcoming_generation_dates(
        self, template: RecurringTemplate, count: int = 3, reference_date: date | None = None
    ) -> list[str]:
        return [format_date(d) for d in upcoming_due_dates(template, count, reference_date)]

    # ── Generation ───────────────────────────────────────────────────────────

    def check_and_generate_for_plan(
        self, plan_id: str, reference_date: date | None = None
    ) -> GenerationResult:
        """
        Generate expenses for every template of the plan that is due on
        reference_date (default: today). A failing template is recorded in
        the result's errors and never stops the others.

        Two overlapping runs for the same plan can both see a template as due
        before either records last_generated_date; callers that need at most
        one expense per day must not overlap runs.
        """
        ref = reference_date or today()
        templates = self.templates_due_today(plan_id, ref)
        result = GenerationResult()
        logger.info("Checking %d due template(s) for plan %s", len(templates), plan_id)

        for template in templates:
            try:
                self.generate_expense_from_template(template, ref)
            except Exception as e:
                logger.warning(
                    "Generation failed for template %s (%s): %s",
                    template.id, template.name, e,
                )
                result.record_failure(template.id, template.name, str(e) or type(e).__name__)
            else:
                result.record_success(template.id)

        logger.info(
            "Plan %s: generated %d expense(s), %d error(s)",
            plan_id, result.generated_count, len(result.errors),
        )
        return result

    def generate_expense_from_template(
        self, template: RecurringTemplate, reference_date: date | None = None
    ) -> ExpenseItem:
        """Create one expense from the template, then mark it generated.

        The expense write and the last_generated_date update are separate
        writes; if the second fails the template stays due and may generate
        again on the next check.
        """
        ref = reference_date or today()
        ref_str = format_date(ref)
        now = now_timestamp()

        expense = ExpenseItem(
            id=str(uuid.uuid4()),
            plan_id=template.plan_id,
            bucket_id=template.bucket_id,
            name=template.name,
            amount_cents=template.amount_cents,
            frequency=template.frequency,
            category=template.category,
            is_fixed=template.is_fixed,
            currency_code=template.currency_code,
            notes=(
                f"{template.notes} {AUTO_GENERATED_SUFFIX}"
                if template.notes else AUTO_GENERATED_NOTE
            ),
            transaction_date=ref_str,
            created_at=now,
            updated_at=now,
        )

        created = self._expense_dao.create(expense)
        self._dao.update_last_generated(template.id, ref_str)
        template.last_generated_date = ref_str
        return created

    def generate_now(
        self, template_id: str, reference_date: date | None = None
    ) -> ExpenseItem | None:
        """Generate regardless of schedule. None if the template does not exist."""
        template = self._dao.get_by_id(template_id)
        if template is None:
            return None
        expense = self.generate_expense_from_template(template, reference_date)
        logger.info(
            "Generated %s (%s) from template %s on demand",
            expense.name, format_cents(expense.amount_cents, expense.currency_code), template_id,
        )
        return expense

    # ── Detection ────────────────────────────────────────────────────────────

    def detect_recurring_patterns(
        self, plan_id: str, min_occurrences: int = DEFAULT_MIN_OCCURRENCES
    ) -> list[TemplateSuggestion]:
        return self._detector.detect(plan_id, min_occurrences)

    # ── Template creation ────────────────────────────────────────────────────

    def create_template_from_suggestion(
        self, plan_id: str, suggestion: TemplateSuggestion, bucket_id: str
    ) -> RecurringTemplate:
        now = now_timestamp()
        template = RecurringTemplate(
            id=str(uuid.uuid4()),
            plan_id=plan_id,
            name=suggestion.name,
            amount_cents=suggestion.amount_cents,
            frequency=suggestion.frequency,
            category=suggestion.category,
            bucket_id=bucket_id,
            currency_code=suggestion.currency_code,
            is_active=True,
            is_fixed=True,
            notes=(
                "Created from pattern detection "
                f"({len(suggestion.matching_expense_ids)} matching expenses)"
            ),
            created_at=now,
            updated_at=now,
        )
        return self._create(template)

    def create_template_from_expense(
        self, expense: ExpenseItem, day_of_month: int | None = None
    ) -> RecurringTemplate:
        """'Save as template' for an existing expense."""
        now = now_timestamp()
        template = RecurringTemplate(
            id=str(uuid.uuid4()),
            plan_id=expense.plan_id,
            name=expense.name,
            amount_cents=expense.amount_cents,
            frequency=expense.frequency,
            category=expense.category,
            bucket_id=expense.bucket_id,
            currency_code=expense.currency_code,
            day_of_month=day_of_month,
            is_active=True,
            is_fixed=expense.is_fixed,
            notes=expense.notes,
            created_at=now,
            updated_at=now,
        )
        return self._create(template)

    def _create(self, template: RecurringTemplate) -> RecurringTemplate:
        self._validate(template)
        created = self._dao.create(template)
        logger.info("Created recurring template %s (%s)", created.id, created.name)
        return created

    # ── Template management ──────────────────────────────────────────────────

    def update_template(self, template: RecurringTemplate) -> RecurringTemplate | None:
        self._validate(template)
        return self._dao.update(template)

    def toggle_active(self, template_id: str) -> RecurringTemplate | None:
        return self._dao.toggle_active(template_id)

    def set_day_of_month(self, template_id: str, day_of_month: int | None) -> RecurringTemplate | None:
        template = self._dao.get_by_id(template_id)
        if template is None:
            return None
        return self.update_template(replace(template, day_of_month=day_of_month))

    def delete_template(self, template_id: str):
        """Remove the template. Expenses it already generated are kept."""
        self._dao.delete(template_id)

    def delete_templates_for_plan(self, plan_id: str):
        self._dao.delete_by_plan_id(plan_id)

    def _validate(self, template: RecurringTemplate):
        name = (template.name or "").strip()
        if not name:
            raise ValueError("Name cannot be empty.")
        if len(name) > NAME_MAX_LENGTH:
            raise ValueError(f"Name cannot exceed {NAME_MAX_LENGTH} characters.")
        if not isinstance(template.amount_cents, int) or template.amount_cents < 0:
            raise ValueError("Amount must be a non-negative number of cents.")
        if template.frequency not in FREQUENCIES:
            raise ValueError("Invalid frequency.")
        if template.category not in EXPENSE_CATEGORIES:
            raise ValueError("Invalid category.")
        if template.day_of_month is not None and not 1 <= template.day_of_month <= 31:
            raise ValueError("Day of month must be between 1 and 31.")
        if template.notes and len(template.notes) > NOTES_MAX_LENGTH:
            raise ValueError(f"Notes cannot exceed {NOTES_MAX_LENGTH} characters.")
