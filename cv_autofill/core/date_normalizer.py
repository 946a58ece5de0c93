"""
Date parsing and normalization for CV date ranges.

Every date the parser emits is a canonical "MM/YYYY" token. Month names, numeric
month/year and bare years are accepted; anything else passes through unchanged.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from cv_autofill.core.matching import Match, Strategy, first_confident

logger = logging.getLogger(__name__)

MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

PRESENT_TOKENS = {"present", "current", "now"}

MONTH_PATTERN = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?(?![a-z])"
)
_MONTH = MONTH_PATTERN
_SEP = r"\s*[-–—]\s*"
_PRESENT = r"(present|current|now)"

MONTH_YEAR_RE = re.compile(rf"^({_MONTH})\s+(\d{{4}})$", re.IGNORECASE)
NUMERIC_MONTH_YEAR_RE = re.compile(r"^(\d{1,2})/(\d{4})$")
YEAR_RE = re.compile(r"^(\d{4})$")
CANONICAL_RE = re.compile(r"^(\d{2})/(\d{4})$")

# Date-range shapes, most specific first
RANGE_PATTERNS = [
    ("month_year_range", re.compile(rf"\b({_MONTH}\s+\d{{4}}){_SEP}({_MONTH}\s+\d{{4}})", re.IGNORECASE), 0.9),
    ("month_year_present", re.compile(rf"\b({_MONTH}\s+\d{{4}}){_SEP}{_PRESENT}\b", re.IGNORECASE), 0.9),
    ("numeric_range", re.compile(rf"\b(\d{{1,2}}/\d{{4}}){_SEP}(\d{{1,2}}/\d{{4}})\b"), 0.85),
    ("numeric_present", re.compile(rf"\b(\d{{1,2}}/\d{{4}}){_SEP}{_PRESENT}\b", re.IGNORECASE), 0.85),
    ("year_range", re.compile(rf"(?<![/\d])(\d{{4}}){_SEP}(\d{{4}})\b"), 0.7),
    ("year_present", re.compile(rf"(?<![/\d])(\d{{4}}){_SEP}{_PRESENT}\b", re.IGNORECASE), 0.7),
]


@dataclass(frozen=True)
class DateRange:
    start: Optional[str]
    end: Optional[str]
    current: bool
    raw: str = ""


def normalize_date(value: str) -> str:
    """
    Convert a date token to "MM/YYYY".

    Examples:
        "Jan 2020" -> "01/2020"
        "September 2019" -> "09/2019"
        "3/2021" -> "03/2021"
        "2020" -> "01/2020"
        "Spring 2020" -> "Spring 2020" (unrecognized, unchanged)
    """
    if not value:
        return value
    token = value.strip()

    m = MONTH_YEAR_RE.match(token)
    if m:
        key = m.group(1).lower().rstrip(".")
        month = MONTHS.get(key)
        if month:
            return f"{month:02d}/{m.group(2)}"
        return token

    m = NUMERIC_MONTH_YEAR_RE.match(token)
    if m:
        month = int(m.group(1))
        if 1 <= month <= 12:
            return f"{month:02d}/{m.group(2)}"
        return token

    m = YEAR_RE.match(token)
    if m:
        return f"01/{m.group(1)}"

    return token


def parse_date(value: Optional[str]) -> Optional[date]:
    """Comparable date for a date token (first of the month), or None when unrecognized."""
    if not value:
        return None
    m = CANONICAL_RE.match(normalize_date(value))
    if not m:
        return None
    month, year = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12 or not date.min.year <= year <= date.max.year:
        return None
    return date(year, month, 1)


def _range_strategy(name: str, pattern: re.Pattern, confidence: float) -> Strategy:
    def strategy(text: str) -> Optional[Match]:
        m = pattern.search(text)
        if not m:
            return None
        start_raw, end_raw = m.group(1), m.group(2)
        current = end_raw.lower() in PRESENT_TOKENS
        value = DateRange(
            start=normalize_date(start_raw),
            end=None if current else normalize_date(end_raw),
            current=current,
            raw=m.group(0),
        )
        return Match(value=value, confidence=confidence, method=name)

    return strategy


RANGE_STRATEGIES = [_range_strategy(name, pattern, conf) for name, pattern, conf in RANGE_PATTERNS]


def parse_date_range(text: str) -> Optional[DateRange]:
    """
    Find the first date range in text.

    Examples:
        "Jan 2020 - Present" -> DateRange("01/2020", None, True)
        "2018 - 2020" -> DateRange("01/2018", "01/2020", False)
        "no dates here" -> None
    """
    if not text:
        return None
    match = first_confident(RANGE_STRATEGIES, text)
    if match is None:
        return None
    logger.debug("date range via %s: %r", match.method, match.value.raw)
    return match.value


def is_date_range_line(line: str) -> bool:
    """True when the line is nothing but a date range ("Jan 2020 - Present")."""
    dr = parse_date_range(line)
    if dr is None:
        return False
    rest = line.replace(dr.raw, "").strip(" \t()[],|-–—")
    return not rest
