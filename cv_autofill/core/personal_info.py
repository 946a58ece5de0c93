"""
Personal information extraction: name, email, phone, address and profile URLs.

Every extractor is total: it returns None when nothing plausible is found and
never raises on odd input.
"""

import logging
import re
from typing import List, Optional, Tuple

from cv_autofill.core.matching import Match, Strategy, first_confident
from cv_autofill.core.schemas import Address, PersonalInfo
from cv_autofill.core.section_locator import is_section_header
from cv_autofill.core.text_normalization import non_empty_lines

logger = logging.getLogger(__name__)

NAME_SCAN_LINES = 5
MAX_EMAIL_LENGTH = 254
MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15

# ===== NAME =====

NOT_A_NAME = {"cv", "resume", "résumé", "curriculum vitae"}

_NAME_PART = r"[A-Z][A-Za-z]*(?:[-'][A-Za-z]+)*"
_TITLE = r"(?:Dr|Mr|Ms|Mrs|Prof)\.?"

NAME_PATTERNS = [
    ("titled", re.compile(rf"^{_TITLE}\s+({_NAME_PART})(?:\s+{_NAME_PART})?\s+({_NAME_PART})$"), 0.9),
    ("first_last", re.compile(rf"^({_NAME_PART})\s+({_NAME_PART})$"), 0.9),
    ("first_middle_last", re.compile(rf"^({_NAME_PART})\s+{_NAME_PART}\.?\s+({_NAME_PART})$"), 0.85),
    ("two_middle_names", re.compile(rf"^({_NAME_PART})\s+{_NAME_PART}\s+{_NAME_PART}\s+({_NAME_PART})$"), 0.75),
]


def normalize_name_part(part: str) -> str:
    """
    Capitalize each hyphen/apostrophe segment of an all-caps or all-lowercase name part.

    Mixed-case parts ("McDonald") are kept as written.

    Examples:
        "JOHN" -> "John"
        "o'brien" -> "O'Brien"
        "MARY-JANE" -> "Mary-Jane"
    """
    if not (part.isupper() or part.islower()):
        return part
    return re.sub(r"[^-']+", lambda m: m.group(0).capitalize(), part)


def _name_strategy(name: str, pattern: re.Pattern, confidence: float) -> Strategy:
    def strategy(line: str) -> Optional[Match]:
        m = pattern.match(line)
        if not m:
            return None
        first, last = normalize_name_part(m.group(1)), normalize_name_part(m.group(2))
        return Match(value=(first, last), confidence=confidence, method=name)

    return strategy


NAME_STRATEGIES = [_name_strategy(*p) for p in NAME_PATTERNS]


def extract_name(text: str) -> Tuple[Optional[str], Optional[str]]:
    """First and last name from the first few non-empty lines; (None, None) when absent."""
    scanned = 0
    for line in non_empty_lines(text):
        if scanned >= NAME_SCAN_LINES:
            break
        scanned += 1
        if len(line) < 3 or line.lower() in NOT_A_NAME or is_section_header(line):
            continue
        match = first_confident(NAME_STRATEGIES, line)
        if match is not None:
            logger.debug("name via %s on line %d", match.method, scanned)
            return match.value
    return None, None


# ===== EMAIL =====

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
STRICT_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(candidate: str) -> bool:
    return (
        len(candidate) <= MAX_EMAIL_LENGTH
        and candidate.count("@") == 1
        and bool(STRICT_EMAIL_RE.match(candidate))
    )


def extract_email(text: str) -> Optional[str]:
    for m in EMAIL_RE.finditer(text or ""):
        candidate = m.group(0)
        if is_valid_email(candidate):
            return candidate.lower()
    return None


# ===== PHONE =====

PHONE_PATTERNS = [
    ("international", re.compile(r"\+\d{1,3}\s*\(?\d{3}\)?\s*\d{3}[-.\s]?\d{4}"), 0.95),
    ("us_parens", re.compile(r"\(\d{3}\)\s*\d{3}[-.\s]?\d{4}"), 0.9),
    ("dashed", re.compile(r"\b\d{3}[-.\s]\d{3}[-.\s]\d{4}\b"), 0.85),
    ("bare_ten_digits", re.compile(r"\b\d{10}\b"), 0.7),
    ("space_grouped", re.compile(r"\b\d{3}\s+\d{3}\s+\d{4}\b"), 0.7),
]


def normalize_phone(raw: str) -> Optional[str]:
    """
    Normalize a phone match; None when the digit count falls outside 10-15.

    Examples:
        "(555) 123-4567" -> "+15551234567"
        "1-555-123-4567" -> "+15551234567"
        "+44 (020) 123 4567" -> "+440201234567"
    """
    has_plus = raw.strip().startswith("+")
    digits = re.sub(r"\D", "", raw)

    if has_plus:
        normalized = "+" + digits
    elif len(digits) == 10:
        normalized = "+1" + digits
    elif len(digits) == 11 and digits.startswith("1"):
        normalized = "+" + digits
    else:
        normalized = digits

    if not MIN_PHONE_DIGITS <= len(normalized.lstrip("+")) <= MAX_PHONE_DIGITS:
        return None
    return normalized


def _phone_strategy(name: str, pattern: re.Pattern, confidence: float) -> Strategy:
    def strategy(text: str) -> Optional[Match]:
        for m in pattern.finditer(text):
            phone = normalize_phone(m.group(0))
            if phone:
                return Match(value=phone, confidence=confidence, method=name)
        return None

    return strategy


PHONE_STRATEGIES = [_phone_strategy(*p) for p in PHONE_PATTERNS]


def extract_phone(text: str) -> Optional[str]:
    match = first_confident(PHONE_STRATEGIES, text or "")
    if match is None:
        return None
    logger.debug("phone via %s", match.method)
    return match.value


# ===== ADDRESS =====

POSTAL_CODE_RE = re.compile(r"\b(\d{5}(?:-\d{4})?|\d{6}|[A-Z]\d[A-Z]\s*\d[A-Z]\d)\b")
CITY_STATE_RE = re.compile(r"([A-Za-z .'-]+),\s*([A-Z]{2}|[A-Za-z]+)\s+[A-Z0-9]")
STREET_RE = re.compile(
    r"^\d+\s+.+\b(?:street|st|avenue|ave|road|rd|drive|dr|lane|ln|boulevard|blvd|way|court|ct|place|pl)\.?$",
    re.IGNORECASE,
)
COUNTRIES = [
    "United States", "United Kingdom", "USA", "US", "Canada", "UK", "Australia",
    "Germany", "France", "Italy", "Spain", "Netherlands", "Sweden", "Norway", "Denmark",
]
COUNTRY_RES = [(c, re.compile(rf"\b{re.escape(c)}\b")) for c in COUNTRIES]


def _contact_block(text: str) -> List[str]:
    """Lines above the first section header, where contact details live."""
    lines = []
    for line in non_empty_lines(text):
        if is_section_header(line):
            break
        lines.append(line)
    return lines


def extract_address(text: str) -> Optional[Address]:
    """
    Address components from the contact block.

    Example:
        "123 Main St\\nSpringfield, IL 62701\\nUSA"
            -> Address(street="123 Main St", city="Springfield", state="IL",
                       post_code="62701", country="USA")
    """
    address = Address()

    for line in _contact_block(text):
        if address.post_code is None:
            m = POSTAL_CODE_RE.search(line)
            if m:
                address.post_code = m.group(1)
                cs = CITY_STATE_RE.search(line[: m.end()])
                if cs:
                    address.city = cs.group(1).strip()
                    address.state = cs.group(2).strip()

        if address.street is None:
            head = line.split(",", 1)[0].strip()
            if STREET_RE.match(line):
                address.street = line
            elif STREET_RE.match(head):
                address.street = head

        if address.country is None:
            for country, pattern in COUNTRY_RES:
                if pattern.search(line):
                    address.country = country
                    break

    return None if address.is_empty() else address


# ===== PROFILE URLS =====

LINKEDIN_URL_RE = re.compile(r"https?://(?:[a-z]{2,3}\.)?linkedin\.com/in/([\w%-]+)/?", re.IGNORECASE)
LINKEDIN_BARE_RE = re.compile(r"\b(?:www\.)?linkedin\.com/in/([\w%-]+)/?", re.IGNORECASE)
LINKEDIN_LABEL_RE = re.compile(r"\blinkedin\s*:\s*([\w-]{3,})", re.IGNORECASE)


def _linkedin_strategy(name: str, pattern: re.Pattern, confidence: float) -> Strategy:
    def strategy(text: str) -> Optional[Match]:
        m = pattern.search(text)
        if not m:
            return None
        return Match(value=f"https://www.linkedin.com/in/{m.group(1)}", confidence=confidence, method=name)

    return strategy


LINKEDIN_STRATEGIES = [
    _linkedin_strategy("full_url", LINKEDIN_URL_RE, 0.95),
    _linkedin_strategy("bare_domain", LINKEDIN_BARE_RE, 0.85),
    _linkedin_strategy("label", LINKEDIN_LABEL_RE, 0.7),
]


def extract_linkedin_url(text: str) -> Optional[str]:
    match = first_confident(LINKEDIN_STRATEGIES, text or "")
    return match.value if match else None


PORTFOLIO_HOST_RE = re.compile(
    r"(?:https?://)?(?:www\.)?(?:"
    r"[\w-]+\.(?:github\.io|netlify\.app|vercel\.app|herokuapp\.com)(?:/[^\s,;|]*)?"
    r"|(?:behance\.net|dribbble\.com|github\.com)/[\w.-]+"
    r")",
    re.IGNORECASE,
)
PORTFOLIO_LABEL_RE = re.compile(r"\b(?:portfolio|website|site)\s*:\s*(\S+)", re.IGNORECASE)
ANY_URL_RE = re.compile(r"https?://[^\s,;|<>()]+", re.IGNORECASE)
URL_TRAILING_PUNCT = ".,;:)]}'\""


def _clean_url(candidate: str) -> Optional[str]:
    url = candidate.strip().rstrip(URL_TRAILING_PUNCT)
    if not url or "linkedin.com" in url.lower() or "@" in url:
        return None
    if "." not in url:
        return None
    if not re.match(r"^https?://", url, re.IGNORECASE):
        url = "https://" + url
    return url


def _portfolio_candidates(pattern: re.Pattern, text: str, group: int = 0) -> Optional[str]:
    for m in pattern.finditer(text):
        url = _clean_url(m.group(group))
        if url:
            return url
    return None


def extract_portfolio_url(text: str) -> Optional[str]:
    """
    Portfolio / personal site URL.

    Known hosting domains win over a "Portfolio:" / "Website:" label, which wins
    over any other URL. LinkedIn and email-like candidates are never returned.
    """
    text = text or ""
    return (
        _portfolio_candidates(PORTFOLIO_HOST_RE, text)
        or _portfolio_candidates(PORTFOLIO_LABEL_RE, text, group=1)
        or _portfolio_candidates(ANY_URL_RE, text)
    )


def extract_personal_info(text: str) -> PersonalInfo:
    first_name, last_name = extract_name(text)
    info = PersonalInfo(
        first_name=first_name,
        last_name=last_name,
        email=extract_email(text),
        phone=extract_phone(text),
        address=extract_address(text),
        linkedin_url=extract_linkedin_url(text),
        portfolio_url=extract_portfolio_url(text),
    )
    logger.debug("personal info: %d field(s) populated", info.populated_fields())
    return info
