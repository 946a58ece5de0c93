"""
Work experience extraction.

Each segmented entry is read as: a header line naming title and company, a date
range somewhere in the entry, and the remaining lines as description and
achievements. Entries are returned most-recent first.
"""

import logging
import re
from datetime import date
from typing import List, Optional, Tuple

from cv_autofill.core.date_normalizer import DateRange, is_date_range_line, parse_date, parse_date_range
from cv_autofill.core.entry_segmenter import split_job_entries
from cv_autofill.core.schemas import WorkExperienceEntry
from cv_autofill.core.text_normalization import non_empty_lines, squeeze_spaces, strip_bullet

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_LINE_LENGTH = 10

# Ordered: the first separator that splits the header wins
TITLE_COMPANY_PATTERNS = [
    re.compile(r"^(.+?)\s+at\s+(.+)$", re.IGNORECASE),
    re.compile(r"^(.+?)\s*\|\s*(.+)$"),
    re.compile(r"^(.+?)\s+[-–—]\s+(.+)$"),
    re.compile(r"^(.+?),\s*(.+)$"),
    re.compile(r"^([A-Z][^-]+)-(.+)$"),
]

COMPANY_INDICATOR_RE = re.compile(
    r"\b(Inc|LLC|Corp|Ltd|Company|Technologies|Solutions|Systems|Group)\b\.?",
    re.IGNORECASE,
)

ACHIEVEMENT_VERB_RE = re.compile(r"\b(achieved|improved|increased|reduced|led|managed)\b", re.IGNORECASE)

HEADER_TRIM = " \t,|-–—()"
BULLET_GLYPHS = "•·▪▫‣⁃●-*"


def split_title_company(line: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split an entry header into (title, company).

    The side carrying a legal-entity keyword is treated as the company, so
    "Acme Inc - Developer" and "Developer - Acme Inc" both give
    ("Developer", "Acme Inc").
    """
    for pattern in TITLE_COMPANY_PATTERNS:
        m = pattern.match(line)
        if not m:
            continue
        first = m.group(1).strip(HEADER_TRIM)
        second = m.group(2).strip(HEADER_TRIM)
        if not first or not second:
            continue
        if COMPANY_INDICATOR_RE.search(first) and not COMPANY_INDICATOR_RE.search(second):
            first, second = second, first
        return first, second
    return (line.strip(HEADER_TRIM) or None), None


def _header_index(lines: List[str]) -> Optional[int]:
    """Index of the first line that is not a bare date range; None when that line is a bullet."""
    for i, line in enumerate(lines):
        if is_date_range_line(line):
            continue
        if line[0] in BULLET_GLYPHS:
            return None
        return i
    return None


def is_achievement(line: str) -> bool:
    return line[:1] in BULLET_GLYPHS or bool(ACHIEVEMENT_VERB_RE.search(line))


def parse_job_entry(entry: str) -> Optional[WorkExperienceEntry]:
    """
    Parse one job entry; None unless both a title and a company are found.

    Example:
        "Senior Engineer at Tech Corp\\nJan 2020 - Present\\n• Led a team of 5"
            -> job_title="Senior Engineer", company="Tech Corp", start_date="01/2020",
               current=True, achievements=["Led a team of 5"]
    """
    lines = non_empty_lines(entry)
    if not lines:
        return None

    dates: Optional[DateRange] = parse_date_range(entry)

    header_idx = _header_index(lines)
    title = company = None
    if header_idx is not None:
        header_text = lines[header_idx]
        if dates is not None and dates.raw in header_text:
            header_text = header_text.replace(dates.raw, " ")
        title, company = split_title_company(squeeze_spaces(header_text).strip(HEADER_TRIM))

    if not title or not company:
        logger.debug("dropping job entry without both title and company: %r", lines[0][:60])
        return None

    description_lines = []
    achievements = []
    for i, line in enumerate(lines):
        if i == header_idx or parse_date_range(line) is not None:
            continue
        if len(line) <= MIN_DESCRIPTION_LINE_LENGTH:
            continue
        description_lines.append(strip_bullet(line))
        if is_achievement(line):
            achievements.append(strip_bullet(line))

    return WorkExperienceEntry(
        job_title=title,
        company=company,
        start_date=dates.start if dates else None,
        end_date=dates.end if dates else None,
        current=dates.current if dates else False,
        description=" ".join(description_lines) or None,
        achievements=achievements,
    )


def _sort_key(entry: WorkExperienceEntry) -> Tuple[bool, bool, int]:
    start: Optional[date] = parse_date(entry.start_date)
    return (not entry.current, start is None, -start.toordinal() if start else 0)


def sort_work_experience(entries: List[WorkExperienceEntry]) -> List[WorkExperienceEntry]:
    """Current roles first, then by start date descending. Ties keep document order."""
    return sorted(entries, key=_sort_key)


def extract_work_experience(section: Optional[str]) -> List[WorkExperienceEntry]:
    if not section:
        return []
    entries = []
    for raw in split_job_entries(section):
        parsed = parse_job_entry(raw)
        if parsed is not None:
            entries.append(parsed)
    logger.debug("work experience: %d entr(ies) parsed", len(entries))
    return sort_work_experience(entries)
