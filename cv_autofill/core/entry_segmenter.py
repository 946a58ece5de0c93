"""
Split a located section into candidate entries (one per job, one per degree).

A new entry starts on any line matching the section's start-of-entry heuristics.
Blank lines stay inside the current entry as paragraph breaks but never start
a new one. Fragments below a minimal length are dropped as noise.
"""

import logging
import re
from typing import Callable, List

from cv_autofill.core.date_normalizer import MONTH_PATTERN

logger = logging.getLogger(__name__)

MIN_JOB_ENTRY_LENGTH = 10
MIN_EDUCATION_ENTRY_LENGTH = 5

# ===== WORK ENTRY STARTS =====

JOB_START_PATTERNS = [
    # "Title at Company", "Title | Company", "Title - Company", "Title, Company"
    re.compile(r"^[A-Z][^,\n]+(,|\s+at\s+|\s+\|\s+|\s+-\s+)[A-Z][^,\n]+"),
    # "Company | Title", "Company - Title"
    re.compile(r"^[A-Z][^,\n]+\s+(,|\||-)\s*[A-Z][^,\n]+"),
    # Bare date range at the start of the line: "2018 - 2020", "Jan 2020 - Present"
    re.compile(r"^\d{4}\s*[-–—]\s*(?:\d{4}|present|current|now)\b", re.IGNORECASE),
    re.compile(rf"^{MONTH_PATTERN}\s+\d{{4}}\s*[-–—]", re.IGNORECASE),
    re.compile(r"^\d{1,2}/\d{4}\s*[-–—]"),
    # Seniority / role keywords
    re.compile(
        r"^(Senior|Junior|Lead|Principal|Director|Manager|Developer|Engineer|Analyst|Specialist|Coordinator|Assistant)\b",
        re.IGNORECASE,
    ),
]

# ===== EDUCATION ENTRY STARTS =====

EDUCATION_START_PATTERNS = {
    # Degree keywords
    "degree": re.compile(r"^(Bachelor|Master|PhD|Doctor|Associate|Certificate|Diploma)", re.IGNORECASE),
    # Degree abbreviations (case-sensitive so prose is not read as "MA")
    "degree_abbrev": re.compile(
        r"^(B\.?A\.?|B\.?S\.?|M\.?A\.?|M\.?S\.?|M\.?B\.?A\.?|Ph\.?D\.?|B\.?Sc\.?|M\.?Sc\.?)(?=[\s,]|$)"
    ),
    # Institution names
    "institution": re.compile(r"^[A-Z][^,\n]*(University|College|Institute|School|Academy)", re.IGNORECASE),
    # Bare date range
    "date": re.compile(r"^\d{4}\s*[-–—]\s*(?:\d{4}|present|current|now)\b", re.IGNORECASE),
    # GPA marker
    "gpa": re.compile(r"GPA:?\s*\d\.\d", re.IGNORECASE),
}


def is_job_entry_start(line: str) -> bool:
    return any(p.search(line) for p in JOB_START_PATTERNS)


def education_entry_kinds(line: str) -> set[str]:
    """Which start-of-entry signals a line carries ("degree", "institution", "date", "gpa")."""
    kinds = {name for name, p in EDUCATION_START_PATTERNS.items() if p.search(line)}
    if "degree_abbrev" in kinds:
        kinds.discard("degree_abbrev")
        kinds.add("degree")
    return kinds


def is_education_entry_start(line: str) -> bool:
    return bool(education_entry_kinds(line))


def _split_entries(section: str, is_start: Callable[[str], bool], min_length: int) -> List[str]:
    entries: List[str] = []
    current: List[str] = []

    for raw in section.split("\n"):
        line = raw.strip()

        if not line:
            # Paragraph break inside an entry
            if current:
                current.append("")
            continue

        if is_start(line) and current:
            entries.append("\n".join(current).strip())
            current = []

        current.append(line)

    if current:
        entries.append("\n".join(current).strip())

    kept = [e for e in entries if len(e) > min_length]
    if len(kept) != len(entries):
        logger.debug("dropped %d short fragment(s)", len(entries) - len(kept))
    return kept


def split_job_entries(section: str) -> List[str]:
    """
    Split an experience section into job entries.

    Example:
        "Engineer at Acme\\n2019 - 2021\\n• Shipped X\\nAnalyst at Beta\\n2017 - 2019"
        -> ["Engineer at Acme\\n2019 - 2021\\n• Shipped X", "Analyst at Beta\\n2017 - 2019"]
    """
    if not section:
        return []
    return _split_entries(section, _job_start_in_context(), MIN_JOB_ENTRY_LENGTH)


def split_education_entries(section: str) -> List[str]:
    if not section:
        return []
    return _split_entries(section, _education_start_in_context(), MIN_EDUCATION_ENTRY_LENGTH)


def _job_start_in_context() -> Callable[[str], bool]:
    """
    Start-of-entry check that keeps a header line and its date line together.

    "Senior Engineer at Tech Corp" followed by "Jan 2020 - Present" is one entry,
    and so is the date-first layout "Jan 2020 - Present" / "Senior Engineer at
    Tech Corp". A date range only opens a new entry when it does not directly
    follow an entry header.
    """
    prev = "other"  # "header" | "date_start" | "other"

    def check(line: str) -> bool:
        nonlocal prev
        if _is_bare_date_line(line):
            started = prev != "header"
            prev = "date_start" if started else "other"
            return started
        if is_job_entry_start(line):
            if prev == "date_start":
                prev = "other"
                return False
            prev = "header"
            return True
        prev = "other"
        return False

    return check


def _is_bare_date_line(line: str) -> bool:
    return any(p.search(line) for p in JOB_START_PATTERNS[2:5])


def _education_start_in_context() -> Callable[[str], bool]:
    """
    Start-of-entry check for multi-line degree blocks.

    A degree line, an institution line, a date range and a GPA line usually
    describe the same degree, so a line only opens a new entry when it repeats
    a signal the current entry already has ("Master of Science" after
    "Bachelor of Arts", a second institution, a second date range).
    """
    seen: set[str] = set()

    def check(line: str) -> bool:
        nonlocal seen
        kinds = education_entry_kinds(line)
        if not kinds:
            return False
        if kinds & seen:
            seen = set(kinds)
            return True
        seen |= kinds
        return False

    return check
