"""
Unit tests for text_normalization and content_validator modules.

Normalization must be idempotent; validation rejects empty, short and
low-word-count text before any parsing runs.
"""

import time

import pytest
from cv_autofill.core.config import Settings
from cv_autofill.core.content_validator import count_words, validate_content
from cv_autofill.core.context import MAX_ERROR_LOG_SIZE, ProcessingContext
from cv_autofill.core.errors import (
    EmptyContentError,
    InsufficientContentError,
    ProcessingTimeoutError,
)
from cv_autofill.core.text_normalization import non_empty_lines, normalize_text, strip_bullet


SAMPLES = [
    "John Doe\r\njohn@example.com\r\n\r\n\r\n\r\nEXPERIENCE",
    "a    b\t\tc\n\n\n\nd",
    "  leading and trailing  \n",
    "Line one   \n   \n\n  \nLine two",
    "",
]


class TestNormalizeText:
    """Line endings, blank runs and horizontal whitespace."""

    def test_crlf_and_cr_become_lf(self):
        assert normalize_text("a\r\nb\rc") == "a\nb\nc"

    def test_blank_runs_collapse_to_one_blank_line(self):
        assert normalize_text("a\n\n\n\nb") == "a\n\nb"

    def test_horizontal_whitespace_collapses(self):
        assert normalize_text("a    b\t\tc") == "a b c"

    def test_whitespace_only_lines_count_as_blank(self):
        assert normalize_text("a\n   \n\n  \nb") == "a\n\nb"

    def test_trims_ends(self):
        assert normalize_text("   hello world \n\n") == "hello world"

    def test_empty_input(self):
        assert normalize_text("") == ""
        assert normalize_text(None) == ""

    @pytest.mark.parametrize("sample", SAMPLES)
    def test_idempotent(self, sample):
        once = normalize_text(sample)
        assert normalize_text(once) == once


class TestHelpers:
    def test_strip_bullet(self):
        assert strip_bullet("• Led a team") == "Led a team"
        assert strip_bullet("- Shipped X") == "Shipped X"
        assert strip_bullet("Plain line") == "Plain line"

    def test_non_empty_lines(self):
        assert non_empty_lines(" a \n\n b\n") == ["a", "b"]

    def test_count_words(self):
        assert count_words("") == 0
        assert count_words("   ") == 0
        assert count_words("one two\nthree") == 3


# ===== CONTENT VALIDATION TESTS =====

VALID_TEXT = "John Doe is a software engineer with ten years of experience building web services."


class TestValidateContent:
    def test_valid_text_is_returned_trimmed(self):
        assert validate_content("  " + VALID_TEXT + "\n") == VALID_TEXT

    @pytest.mark.parametrize("text", [None, "", "   ", "\n\t\n"])
    def test_empty_text(self, text):
        with pytest.raises(EmptyContentError):
            validate_content(text)

    def test_too_short(self):
        with pytest.raises(InsufficientContentError) as exc:
            validate_content("Too short text")
        assert exc.value.message.startswith("Text too short")
        assert exc.value.status_code == 422

    def test_too_few_words(self):
        with pytest.raises(InsufficientContentError) as exc:
            validate_content("a" * 60)
        assert exc.value.message == "Too few words: 1"

    def test_thresholds_come_from_settings(self):
        settings = Settings(MIN_TEXT_LENGTH=5, MIN_WORD_COUNT=2)
        assert validate_content("hello world", settings) == "hello world"

    def test_error_is_recorded_on_context(self):
        ctx = ProcessingContext(settings=Settings())
        with pytest.raises(EmptyContentError):
            validate_content("   ", context=ctx)
        assert len(ctx.errors) == 1
        assert isinstance(ctx.errors[0], EmptyContentError)

    def test_expired_deadline_raises_timeout(self):
        ctx = ProcessingContext(settings=Settings(), deadline=time.monotonic() - 1, budget_seconds=0.5)
        with pytest.raises(ProcessingTimeoutError) as exc:
            validate_content(VALID_TEXT, context=ctx)
        assert "content_validation" in exc.value.message
        assert ctx.errors[-1] is exc.value


class TestProcessingContext:
    def test_no_deadline_never_times_out(self):
        ctx = ProcessingContext(settings=Settings())
        ctx.check_deadline("anything")

    def test_with_budget_sets_deadline(self):
        ctx = ProcessingContext.with_budget(30.0, Settings())
        assert ctx.budget_seconds == 30.0
        assert ctx.deadline > time.monotonic()
        ctx.check_deadline("parse")

    def test_error_log_is_bounded(self):
        ctx = ProcessingContext(settings=Settings())
        for i in range(MAX_ERROR_LOG_SIZE + 10):
            ctx.record_error(EmptyContentError(f"error {i}"))
        assert len(ctx.errors) == MAX_ERROR_LOG_SIZE
        assert ctx.errors[0].message == "error 10"
        assert ctx.errors[-1].message == f"error {MAX_ERROR_LOG_SIZE + 9}"

    def test_warnings_are_per_context(self):
        first = ProcessingContext(settings=Settings())
        second = ProcessingContext(settings=Settings())
        first.warn("No skills section found")
        assert first.warnings == ["No skills section found"]
        assert second.warnings == []
