DB_FILE = "recurring.db"
DATE_FORMAT = "%Y-%m-%d"
DEFAULT_MIN_OCCURRENCES = 2

FREQUENCIES = ["weekly", "biweekly", "semimonthly", "monthly", "quarterly", "annual"]

EXPENSE_CATEGORIES = [
    "housing",
    "utilities",
    "transportation",
    "groceries",
    "healthcare",
    "insurance",
    "debt_payment",
    "savings",
    "entertainment",
    "dining",
    "personal",
    "subscriptions",
    "other",
]

NAME_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 500

# ── Pattern detection ─────────────────────────────────────────────────────────

# Group key used when an expense has no currency code of its own
NO_CURRENCY_KEY = "default"
MIN_SUGGESTION_CONFIDENCE = 0.5
OCCURRENCE_SATURATION = 6
OCCURRENCE_WEIGHT = 0.4
AMOUNT_WEIGHT = 0.6

# Inclusive upper bounds on the average gap (days) between occurrences
FREQUENCY_GAP_THRESHOLDS = [
    (10, "weekly"),
    (18, "biweekly"),
    (20, "semimonthly"),
    (45, "monthly"),
    (120, "quarterly"),
]
FALLBACK_FREQUENCY = "monthly"
LONGEST_FREQUENCY = "annual"

# ── Generation ────────────────────────────────────────────────────────────────

AUTO_GENERATED_SUFFIX = "(auto-generated)"
AUTO_GENERATED_NOTE = "(auto-generated from recurring template)"
