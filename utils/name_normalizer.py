"""Reduce free-text expense labels to a grouping key.

"Netflix #3", "NETFLIX - January 2024" and "Netflix 01/15/2024" all become
"netflix". The rules are heuristic: over-merges and misses are expected.
"""
import re

_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)

_ISO_DATE_RE = re.compile(r"\b\d{4}-\d{2}-\d{2}\b")
_SLASH_DATE_RE = re.compile(r"\b\d{1,2}/\d{1,2}(?:/\d{2,4})?\b")
_MONTH_YEAR_SUFFIX_RE = re.compile(r"\s*[-–]\s*" + _MONTH + r"\.?\s*\d{4}\s*$")
_MONTH_RE = re.compile(r"\b" + _MONTH + r"\b\.?")
_TRAILING_SEQUENCE_RE = re.compile(r"\s*#?\d+\s*$")
_WHITESPACE_RE = re.compile(r"\s+")


def _normalize_once(name: str) -> str:
    s = name.lower()
    s = _ISO_DATE_RE.sub("", s)
    s = _SLASH_DATE_RE.sub("", s)
    # Suffix first: once the month is gone the "- <month> <year>" shape is lost
    s = _MONTH_YEAR_SUFFIX_RE.sub("", s)
    s = _MONTH_RE.sub("", s)
    s = _TRAILING_SEQUENCE_RE.sub("", s)
    s = _WHITESPACE_RE.sub(" ", s)
    return s.strip()


def normalize_expense_name(name: str) -> str:
    """Canonical grouping key for an expense name.

    Passes repeat until the string stops changing, so stripping one token can
    never expose another (e.g. "bill 12 #3") that a second call would remove.
    """
    if not name:
        return ""
    current = name
    while True:
        normalized = _normalize_once(current)
        if normalized == current:
            return normalized
        current = normalized
