"""
Locate labeled sections (experience, education, skills, summary) in normalized CV text.

A section starts on the line after a short header line containing one of the
section's synonyms, and runs until the next short line carrying a different
known header, or the end of the text.
"""

import logging
import re
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

# Header lines are short; body lines mentioning "experience" are not headers
MAX_HEADER_LENGTH = 50

HEADER_DECORATION_RE = re.compile(r"[^a-z&\s]", re.IGNORECASE)

EXPERIENCE_HEADERS = (
    "experience",
    "employment",
    "work history",
    "professional experience",
    "career history",
    "work experience",
    "employment history",
)

EDUCATION_HEADERS = (
    "education",
    "academic background",
    "qualifications",
    "academic qualifications",
    "educational background",
    "degrees",
    "certifications",
)

SKILLS_HEADERS = (
    "skills",
    "technical skills",
    "competencies",
    "technologies",
    "programming languages",
    "software",
    "tools",
    "expertise",
)

SUMMARY_HEADERS = (
    "summary",
    "objective",
    "profile",
    "about",
    "overview",
    "professional summary",
)

# Any of these on a short line closes the current section
SECTION_BOUNDARY_HEADERS = (
    "education",
    "experience",
    "employment",
    "skills",
    "projects",
    "certifications",
    "awards",
    "references",
    "languages",
    "interests",
    "hobbies",
    "summary",
    "objective",
    "profile",
    "contact",
    "personal",
)

SECTION_HEADERS = {
    "experience": EXPERIENCE_HEADERS,
    "education": EDUCATION_HEADERS,
    "skills": SKILLS_HEADERS,
    "summary": SUMMARY_HEADERS,
}


def _is_short(line: str) -> bool:
    return len(line) < MAX_HEADER_LENGTH


def _header_key(line: str) -> str:
    """Lower-cased header text without decoration ("== Work Experience: ==" -> "work experience")."""
    return HEADER_DECORATION_RE.sub("", line.split(":", 1)[0]).strip().lower()


def _find_exact_header(lines: list[str], synonyms: list[str]) -> Optional[int]:
    for i, raw in enumerate(lines):
        line = raw.strip()
        if _is_short(line) and _header_key(line) in synonyms:
            return i
    return None


def _find_header(lines: list[str], synonyms: list[str]) -> Optional[int]:
    # Pass 1: a line that is nothing but the header (optionally followed by ":")
    exact = _find_exact_header(lines, synonyms)
    if exact is not None:
        return exact
    # Pass 2: any short line containing a synonym
    for i, raw in enumerate(lines):
        line = raw.strip().lower()
        if _is_short(line) and any(h in line for h in synonyms):
            return i
    return None


def find_section(text: str, headers: Iterable[str]) -> Optional[str]:
    """
    Return the body of the first section whose header matches one of ``headers``.

    A line consisting only of the header wins over a line that merely contains
    it, so "Software Engineer" under the name does not open a "software" section
    when a real "SKILLS" header exists. Text after a colon on the header line
    ("Skills: Python, SQL") is kept as the first line of the section.

    Returns None when no header line is found; an absent section is a normal
    outcome, not an error.

    Examples:
        find_section("EXPERIENCE\\nDev at Acme\\n\\nEDUCATION\\nBSc", EXPERIENCE_HEADERS)
            -> "Dev at Acme"
    """
    if not text:
        return None

    synonyms = [h.lower() for h in headers]
    lines = text.split("\n")

    header_idx = _find_header(lines, synonyms)
    if header_idx is None:
        return None

    start = header_idx + 1
    end = len(lines)
    for i in range(start, len(lines)):
        line = lines[i].strip().lower()
        if not line or not _is_short(line):
            continue
        if any(h in line for h in SECTION_BOUNDARY_HEADERS) and not any(h in line for h in synonyms):
            end = i
            break

    body = lines[start:end]
    header_line = lines[header_idx]
    if ":" in header_line:
        inline = header_line.split(":", 1)[1].strip()
        if inline:
            body = [inline] + body

    section = "\n".join(body).strip()
    logger.debug("section located via %r: header line %d, body lines %d-%d", synonyms[0], header_idx, start, end)
    return section


def locate_sections(text: str) -> dict[str, Optional[str]]:
    """Locate every known section type. Missing sections map to None."""
    return {name: find_section(text, headers) for name, headers in SECTION_HEADERS.items()}


def is_section_header(line: str) -> bool:
    """True for a short line that is nothing but a known section header ("EXPERIENCE", "Skills:")."""
    line = line.strip()
    if not line or not _is_short(line):
        return False
    key = _header_key(line)
    if key in SECTION_BOUNDARY_HEADERS:
        return True
    return any(key in synonyms for synonyms in SECTION_HEADERS.values())


def has_exact_header(text: str, headers: Iterable[str]) -> bool:
    """
    True when some line is nothing but one of ``headers``.

    False when a section could only be found through a line that merely
    contains a synonym, such as "Software Engineer" for the skills section.
    """
    if not text:
        return False
    return _find_exact_header(text.split("\n"), [h.lower() for h in headers]) is not None
