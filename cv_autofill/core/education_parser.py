"""
Education parsing module for extracting degree entries from a CV's education section.

Provides deterministic, rule-based parsing of education entries: degree,
institution and field of study from the entry's header line, plus graduation
date, GPA and honors from anywhere in the entry.
"""

import logging
import re
from typing import List, Optional, Tuple

from cv_autofill.core.date_normalizer import MONTH_PATTERN, normalize_date, parse_date_range
from cv_autofill.core.entry_segmenter import split_education_entries
from cv_autofill.core.schemas import EducationEntry
from cv_autofill.core.text_normalization import non_empty_lines, strip_bullet

logger = logging.getLogger(__name__)


# ===== DEGREE NAMES =====
# Keys are lower-cased with dots and whitespace removed

DEGREE_NAMES = {
    "ba": "Bachelor of Arts",
    "bs": "Bachelor of Science",
    "bsc": "Bachelor of Science",
    "ma": "Master of Arts",
    "ms": "Master of Science",
    "msc": "Master of Science",
    "mba": "Master of Business Administration",
    "phd": "Doctor of Philosophy",
    "bachelor": "Bachelor",
    "bachelor's": "Bachelor",
    "master": "Master",
    "masters": "Master",
    "master's": "Master",
    "doctorate": "Doctor",
    "doctoral": "Doctor",
}

# Longest phrases first so "Summa Cum Laude" is not reported as "Cum Laude"
HONORS = [
    "Summa Cum Laude",
    "Magna Cum Laude",
    "Cum Laude",
    "With Highest Honors",
    "With High Honors",
    "With Honors",
    "With Honor",
    "With Distinction",
    "Dean's List",
    "Honor Roll",
    "Phi Beta Kappa",
    "Valedictorian",
    "Salutatorian",
    "Academic Excellence",
    "Outstanding Student",
    "Merit Scholar",
]

# ===== ENTRY PATTERNS =====

INSTITUTION_KEYWORD_RE = re.compile(r"\b(University|College|Institute|School|Academy|Polytechnic)\b", re.IGNORECASE)

_DEGREE_WORD = r"(?:Bachelor|Master|Doctor|Associate)(?:'s|s)?"
_DEGREE_OF = (
    r"(?:\s+(?:Degree\s+)?of\s+(?:Applied\s+Science|Business\s+Administration|Fine\s+Arts|Science|Arts|"
    r"Engineering|Laws|Philosophy|Education|Technology|Medicine|Music|Nursing|Architecture))?"
)
_DEGREE_ABBREV = r"(?:M\.?B\.?A\.?|Ph\.?\s?D\.?|B\.?Sc\.?|M\.?Sc\.?|B\.?A\.?|B\.?S\.?|M\.?A\.?|M\.?S\.?)(?=[\s,|]|$)"
_SPLIT = r"\s*(?:,|\||\s[-–—]\s|\sat\s)\s*"

# Ordered: degree-first phrasing is tried before institution-first
EDUCATION_PATTERNS = [
    (
        "degree_first",
        re.compile(
            rf"^(?P<degree>{_DEGREE_WORD}{_DEGREE_OF})(?:\s+(?:in|of)\s+(?P<field>[^,|]+?))?{_SPLIT}(?P<institution>.+)$",
            re.IGNORECASE,
        ),
    ),
    (
        "abbreviation_first",
        re.compile(rf"^(?P<degree>{_DEGREE_ABBREV})(?:\s+(?:in\s+)?(?P<field>[^,|]+?))?{_SPLIT}(?P<institution>.+)$"),
    ),
    (
        "institution_dash",
        re.compile(
            r"^(?P<institution>[^,|]*?\b(?:University|College|Institute|School|Academy|Polytechnic)\b[^,|–—]*?)"
            r"\s+[-–—]\s+(?P<degree>.+)$",
            re.IGNORECASE,
        ),
    ),
    (
        "institution_comma",
        re.compile(
            r"^(?P<institution>[^,|]*?\b(?:University|College|Institute|School|Academy|Polytechnic)\b[^,|]*?)"
            r",\s*(?P<degree>.+)$",
            re.IGNORECASE,
        ),
    ),
]

DEGREE_LINE_RE = re.compile(
    rf"^(?:{_DEGREE_WORD}|PhD|Doctorate|Certificate|Diploma)\b|^{_DEGREE_ABBREV}",
    re.IGNORECASE,
)
DEGREE_FIELD_RE = re.compile(r"^(?P<degree>.+?)\s+in\s+(?P<field>.+)$", re.IGNORECASE)
MAJOR_RE = re.compile(r"\b(?:Major|Field of Study|Concentration)\s*:\s*([^,;|\n]+)", re.IGNORECASE)

# Cut an institution/degree string before the first segment that carries a digit
TRAILING_NUMERIC_SEGMENT_RE = re.compile(r"\s*[,|(]\s*(?=[^,|(]*\d).*$")

# ===== GRADUATION DATE / GPA =====

_MONTH = MONTH_PATTERN
GRADUATED_RE = re.compile(rf"Graduated:?\s*((?:{_MONTH}\s+)?\d{{4}})", re.IGNORECASE)
CLASS_OF_RE = re.compile(r"Class\s+of\s+(\d{4})", re.IGNORECASE)
MONTH_YEAR_RE = re.compile(rf"\b({_MONTH}\s+\d{{4}})\b", re.IGNORECASE)
NUMERIC_MONTH_YEAR_RE = re.compile(r"(?<![\d/])(\d{1,2}/\d{4})\b")
YEAR_RE = re.compile(r"(?<![\d./])((?:19|20)\d{2})(?![\d.])")

GPA_PATTERNS = [
    re.compile(r"(?:Cumulative|Overall)\s+GPA:?\s*(\d\.\d+)", re.IGNORECASE),
    re.compile(r"GPA:?\s*(\d\.\d+)(?:\s*/\s*\d\.\d+)?", re.IGNORECASE),
    re.compile(r"(\d\.\d+)(?:\s*/\s*\d\.\d+)?\s+GPA", re.IGNORECASE),
]
MAX_GPA = 4.0


def expand_degree(degree: str) -> str:
    """
    Expand a degree abbreviation to its long form; unknown values pass through.

    Examples:
        "B.S." -> "Bachelor of Science"
        "MBA" -> "Master of Business Administration"
        "Bachelor of Science" -> "Bachelor of Science"
    """
    cleaned = degree.strip()
    key = re.sub(r"[\s.]", "", cleaned).lower()
    return DEGREE_NAMES.get(key, cleaned)


def _clean_part(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    dr = parse_date_range(value)
    if dr is not None:
        value = value.replace(dr.raw, " ")
    value = TRAILING_NUMERIC_SEGMENT_RE.sub("", value)
    value = value.strip(" \t,|-–—()")
    if not re.search(r"[A-Za-z]", value):
        return None
    return value


def _split_degree_field(degree_text: str) -> Tuple[str, Optional[str]]:
    m = DEGREE_FIELD_RE.match(degree_text)
    if m:
        return m.group("degree").strip(), m.group("field").strip()
    return degree_text, None


def match_entry_line(line: str) -> Optional[Tuple[str, str, Optional[str]]]:
    """
    Match one line against the degree/institution orderings.

    Returns (degree, institution, field_of_study) or None.

    Examples:
        "Bachelor of Science, State University"
            -> ("Bachelor of Science", "State University", None)
        "B.S. in Computer Science | MIT" -> ("Bachelor of Science", "MIT", "Computer Science")
        "State University - Master of Arts in History"
            -> ("Master of Arts", "State University", "History")
    """
    for name, pattern in EDUCATION_PATTERNS:
        m = pattern.match(line)
        if not m:
            continue
        institution = _clean_part(m.group("institution"))
        degree_text = _clean_part(m.group("degree"))
        if not institution or not degree_text:
            continue
        field = m.groupdict().get("field")
        if name.startswith("institution"):
            degree_text, field = _split_degree_field(degree_text)
        logger.debug("education line matched %s", name)
        return expand_degree(degree_text), institution, _clean_part(field)
    return None


def _linewise_fallback(lines: List[str]) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Pair the first degree-keyword line with the first institution-keyword line."""
    degree = institution = field = None
    for line in lines:
        if degree is None and DEGREE_LINE_RE.match(line):
            degree_text = _clean_part(line)
            if degree_text:
                degree_text, field = _split_degree_field(degree_text)
                degree = expand_degree(degree_text)
                continue
        if institution is None and INSTITUTION_KEYWORD_RE.search(line):
            institution = _clean_part(line)
    return degree, institution, field


def extract_graduation_date(text: str) -> Optional[str]:
    for pattern in (GRADUATED_RE, CLASS_OF_RE):
        m = pattern.search(text)
        if m:
            return normalize_date(m.group(1))

    dr = parse_date_range(text)
    if dr is not None:
        # Ongoing studies have no graduation date yet
        return dr.end

    for pattern in (MONTH_YEAR_RE, NUMERIC_MONTH_YEAR_RE):
        found = pattern.findall(text)
        if found:
            return normalize_date(found[-1])

    years = YEAR_RE.findall(text)
    if years:
        return normalize_date(years[-1])
    return None


def extract_gpa(text: str) -> Optional[str]:
    """GPA string when one is stated and lies within 0.0-4.0."""
    for pattern in GPA_PATTERNS:
        for m in pattern.finditer(text):
            value = m.group(1)
            try:
                numeric = float(value)
            except ValueError:
                continue
            if 0.0 <= numeric <= MAX_GPA:
                return value
    return None


def extract_honors(text: str) -> Optional[str]:
    lowered = text.lower()
    for honor in HONORS:
        if honor.lower() in lowered:
            return honor
    return None


def parse_education_entry(entry: str) -> Optional[EducationEntry]:
    """
    Parse one education entry; None unless both a degree and an institution are found.

    Example:
        "Bachelor of Science, State University\\n2018"
            -> degree="Bachelor of Science", institution="State University",
               graduation_date="01/2018"
    """
    lines = [strip_bullet(line) for line in non_empty_lines(entry)]
    if not lines:
        return None

    degree = institution = field = None
    for line in lines:
        matched = match_entry_line(line)
        if matched:
            degree, institution, field = matched
            break

    if degree is None and institution is None:
        degree, institution, field = _linewise_fallback(lines)

    if not degree or not institution:
        logger.debug("dropping education entry without both degree and institution: %r", lines[0][:60])
        return None

    if not field:
        m = MAJOR_RE.search(entry)
        if m:
            field = m.group(1).strip()

    return EducationEntry(
        degree=degree,
        institution=institution,
        field_of_study=field,
        graduation_date=extract_graduation_date(entry),
        gpa=extract_gpa(entry),
        honors=extract_honors(entry),
    )


def extract_education(section: Optional[str]) -> List[EducationEntry]:
    if not section:
        return []
    entries = []
    for raw in split_education_entries(section):
        parsed = parse_education_entry(raw)
        if parsed is not None:
            entries.append(parsed)
    logger.debug("education: %d entr(ies) parsed", len(entries))
    return entries
