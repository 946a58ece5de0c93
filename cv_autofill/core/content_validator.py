"""
Content validation for extracted CV text.

Runs before structural parsing (and again on any derived text blob) so the
parsers only ever see text that has a realistic chance of being a CV. Each
failure names the rule it violated, so callers can give targeted guidance.
"""

import logging
import re
from typing import Optional

from cv_autofill.core.config import Settings, get_settings
from cv_autofill.core.context import ProcessingContext
from cv_autofill.core.errors import EmptyContentError, InsufficientContentError

logger = logging.getLogger(__name__)

WORD_SPLIT_RE = re.compile(r"\s+")


def count_words(text: str) -> int:
    if not text or not text.strip():
        return 0
    return len(WORD_SPLIT_RE.split(text.strip()))


def validate_content(
    text: Optional[str],
    settings: Optional[Settings] = None,
    context: Optional[ProcessingContext] = None,
    stage: str = "content_validation",
) -> str:
    """
    Validate text against the emptiness, length and word-count rules.

    Returns the trimmed text on success.

    Raises:
        EmptyContentError: text is None, empty or all-whitespace
        InsufficientContentError: trimmed length or word count below the minimum
        ProcessingTimeoutError: the context's wall-clock budget is spent
    """
    if context is not None:
        context.check_deadline(stage)
        settings = settings or context.settings
    settings = settings or get_settings()

    trimmed = (text or "").strip()
    if not trimmed:
        raise _record(context, EmptyContentError())

    if len(trimmed) < settings.MIN_TEXT_LENGTH:
        raise _record(context, InsufficientContentError(
            f"Text too short: {len(trimmed)} characters",
            details=f"Minimum required: {settings.MIN_TEXT_LENGTH} characters",
        ))

    words = count_words(trimmed)
    if words < settings.MIN_WORD_COUNT:
        raise _record(context, InsufficientContentError(
            f"Too few words: {words}",
            details=f"Minimum required: {settings.MIN_WORD_COUNT} words",
        ))

    logger.debug("%s passed: %d chars, %d words", stage, len(trimmed), words)
    return trimmed


def _record(context: Optional[ProcessingContext], error):
    if context is not None:
        context.record_error(error)
    return error
