"""
Text normalization for extracted CV text.

Backends hand us text with mixed line endings, runs of blank lines and
irregular spacing. normalize_text() canonicalizes it before any structural
parsing; the smaller helpers are shared by the field extractors.
"""

import re


LINE_ENDING_RE = re.compile(r"\r\n?")
BLANK_RUN_RE = re.compile(r"\n{3,}")
# Horizontal whitespace only, so line structure survives
HSPACE_RUN_RE = re.compile(r"[^\S\n]{2,}")
TRAILING_SPACE_RE = re.compile(r"[^\S\n]+\n")

BULLET_PREFIX_RE = re.compile(r"^[\s•·▪▫‣⁃●\-*]+")


def normalize_text(text: str) -> str:
    """
    Canonicalize raw extracted text.

    Steps, in order:
    1. CRLF / CR -> LF
    2. 3+ consecutive newlines -> exactly one blank line
    3. runs of 2+ horizontal whitespace characters -> single space
    4. trim leading/trailing whitespace

    Idempotent: normalize_text(normalize_text(s)) == normalize_text(s).
    Empty input yields empty output.
    """
    if not text:
        return ""
    t = LINE_ENDING_RE.sub("\n", text)
    # Whitespace-only lines count as blank
    t = TRAILING_SPACE_RE.sub("\n", t)
    t = BLANK_RUN_RE.sub("\n\n", t)
    t = HSPACE_RUN_RE.sub(" ", t)
    return t.strip()


def strip_bullet(text: str) -> str:
    """Remove a leading bullet/dash marker ("• Led a team" -> "Led a team")."""
    return BULLET_PREFIX_RE.sub("", text).strip()


def squeeze_spaces(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def non_empty_lines(text: str) -> list[str]:
    return [ln.strip() for ln in text.split("\n") if ln.strip()]
