import logging
import threading
from datetime import date
from database.recurring_template_dao import RecurringTemplateDAO
from models.generation_result import GenerationResult
from services.recurring_service import RecurringService

logger = logging.getLogger(__name__)


class AutoGenerateService:
    """Runs the due-template batch for every plan, once or on an interval.

    Batches run one after another on a single thread, so runs started here
    never overlap each other.
    """

    def __init__(
        self,
        recurring_service: RecurringService,
        template_dao: RecurringTemplateDAO,
        interval_minutes: int = 0,
    ):
        self._recurring = recurring_service
        self._template_dao = template_dao
        self._interval_seconds = max(0, interval_minutes) * 60
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self, reference_date: date | None = None) -> dict[str, GenerationResult]:
        """Run the batch for each plan that owns templates; {plan_id: result}."""
        results: dict[str, GenerationResult] = {}
        for plan_id in self._template_dao.get_plan_ids():
            results[plan_id] = self._recurring.check_and_generate_for_plan(plan_id, reference_date)
        return results

    def start(self):
        """Start the background loop. No-op without an interval or when already running."""
        if self._interval_seconds <= 0 or self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="auto-generate", daemon=True)
        self._thread.start()
        logger.info("Auto-generation every %d s", self._interval_seconds)

    def stop(self, timeout: float | None = None):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def wait(self, timeout: float | None = None) -> bool:
        """Block until stop() is called; True if stopped."""
        return self._stop.wait(timeout)

    def _loop(self):
        while not self._stop.wait(self._interval_seconds):
            try:
                self.run_once()
            except Exception:
                # Store outages must not kill the loop; the next tick retries
                logger.exception("Auto-generation run failed")
