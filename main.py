import logging
import os
import sys

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.expense_dao import ExpenseDAO
from database.recurring_template_dao import RecurringTemplateDAO

from services.auto_generate_service import AutoGenerateService
from services.pattern_detector import PatternDetector
from services.recurring_service import RecurringService

from utils.app_config import (
    get_auto_generate_interval_minutes,
    get_db_folder,
    get_log_level,
    get_min_occurrences,
)

logger = logging.getLogger(__name__)


def main():
    # ── Bootstrap: read config before anything touches the DB ─────────────────
    logging.basicConfig(
        level=getattr(logging, get_log_level(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    db_folder = get_db_folder()
    interval = get_auto_generate_interval_minutes()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=db_folder)

    # ── DAOs ─────────────────────────────────────────────────────────────────
    template_dao = RecurringTemplateDAO(db)
    expense_dao = ExpenseDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    detector = PatternDetector(expense_dao)
    recurring_svc = RecurringService(template_dao, expense_dao, detector)
    auto_svc = AutoGenerateService(recurring_svc, template_dao, interval_minutes=interval)

    # ── Apply due templates on load ──────────────────────────────────────────
    try:
        results = auto_svc.run_once()
        for plan_id, result in results.items():
            for err in result.errors:
                logger.error(
                    "Plan %s: template %s (%s) failed: %s",
                    plan_id, err.template_id, err.template_name, err.error,
                )

        # ── Startup suggestions (read-only) ──────────────────────────────────
        min_occurrences = get_min_occurrences()
        for plan_id in expense_dao.get_plan_ids():
            suggestions = recurring_svc.detect_recurring_patterns(plan_id, min_occurrences)
            if suggestions:
                logger.info(
                    "Plan %s: %d recurring pattern suggestion(s), best: %s (%.0f%%)",
                    plan_id, len(suggestions), suggestions[0].name, suggestions[0].confidence * 100,
                )

        # ── Keep generating on an interval, if configured ────────────────────
        if interval > 0:
            auto_svc.start()
            try:
                auto_svc.wait()
            except KeyboardInterrupt:
                logger.info("Stopping auto-generation")
            finally:
                auto_svc.stop()
    finally:
        db.close()


if __name__ == "__main__":
    main()
