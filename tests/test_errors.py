"""
Tests for the error taxonomy and backend error classification.
"""

from zipfile import BadZipFile

import pytest
from cv_autofill.core.errors import (
    CorruptedFileError,
    CVProcessingErrorCode,
    EmptyContentError,
    ExtractionFailedError,
    InsufficientContentError,
    PasswordProtectedError,
    ProcessingTimeoutError,
    SizeLimitExceededError,
    UnsupportedFormatError,
    classify_extraction_error,
)
from cv_autofill.core.extraction import EXTENSION_TYPES
from cv_autofill.core.matching import Match, best_match, first_confident


class TestErrorTaxonomy:
    @pytest.mark.parametrize(
        "error_cls, code, status",
        [
            (UnsupportedFormatError, CVProcessingErrorCode.UNSUPPORTED_FORMAT, 415),
            (SizeLimitExceededError, CVProcessingErrorCode.SIZE_LIMIT_EXCEEDED, 413),
            (CorruptedFileError, CVProcessingErrorCode.CORRUPTED_FILE, 422),
            (PasswordProtectedError, CVProcessingErrorCode.PASSWORD_PROTECTED, 422),
            (EmptyContentError, CVProcessingErrorCode.EMPTY_CONTENT, 422),
            (InsufficientContentError, CVProcessingErrorCode.INSUFFICIENT_CONTENT, 422),
            (ExtractionFailedError, CVProcessingErrorCode.EXTRACTION_FAILED, 500),
            (ProcessingTimeoutError, CVProcessingErrorCode.TIMEOUT_ERROR, 504),
        ],
    )
    def test_code_and_status(self, error_cls, code, status):
        err = error_cls()
        assert err.code == code
        assert err.status_code == status
        assert err.message
        assert err.user_message

    def test_unsupported_format_lists_every_accepted_extension(self):
        user_message = UnsupportedFormatError().user_message
        for ext in EXTENSION_TYPES:
            assert ext in user_message

    def test_custom_message_keeps_user_message(self):
        err = CorruptedFileError("Invalid PDF structure", details="xref missing")
        assert err.message == "Invalid PDF structure"
        assert str(err) == "Invalid PDF structure"
        assert err.user_message != err.message

    def test_to_dict(self):
        body = EmptyContentError(details="page 1").to_dict()
        assert body["code"] == "EMPTY_CONTENT"
        assert body["details"] == "page 1"
        assert set(body) == {"code", "message", "user_message", "details"}


class TestClassifyExtractionError:
    def test_timeout_by_type(self):
        assert isinstance(classify_extraction_error(TimeoutError("slow"), "pdf"), ProcessingTimeoutError)

    def test_timeout_by_message(self):
        err = classify_extraction_error(RuntimeError("Operation timed out after 15000ms"), "pdf")
        assert isinstance(err, ProcessingTimeoutError)

    def test_corrupted_pdf(self):
        err = classify_extraction_error(ValueError("Invalid PDF structure"), "pdf")
        assert isinstance(err, CorruptedFileError)
        assert err.message == "Invalid PDF structure"

    def test_corrupted_docx(self):
        err = classify_extraction_error(BadZipFile("File is not a zip file"), "docx")
        assert isinstance(err, CorruptedFileError)

    def test_corruption_markers_are_per_format(self):
        err = classify_extraction_error(ValueError("Invalid PDF structure"), "docx")
        assert isinstance(err, ExtractionFailedError)

    def test_password_protected(self):
        err = classify_extraction_error(ValueError("document is encrypted"), "pdf")
        assert isinstance(err, PasswordProtectedError)

    def test_insufficient_and_empty(self):
        assert isinstance(classify_extraction_error(ValueError("text too short"), "txt"), InsufficientContentError)
        assert isinstance(classify_extraction_error(ValueError("page is empty"), "txt"), EmptyContentError)

    def test_unknown_error(self):
        err = classify_extraction_error(KeyError("boom"), "pdf")
        assert isinstance(err, ExtractionFailedError)
        assert err.status_code == 500

    def test_classified_error_passes_through(self):
        original = PasswordProtectedError("locked")
        assert classify_extraction_error(original, "pdf") is original


# ===== MATCHING COMBINATOR TESTS =====


class TestMatching:
    def test_best_match_ignores_none(self):
        result = best_match([None, Match("a", 0.4, "x"), None, Match("b", 0.9, "y")])
        assert result.value == "b"

    def test_best_match_first_wins_on_tie(self):
        result = best_match([Match("a", 0.7, "x"), Match("b", 0.7, "y")])
        assert result.value == "a"

    def test_best_match_empty(self):
        assert best_match([]) is None
        assert best_match([None]) is None

    def test_first_confident_returns_first_above_floor(self):
        strategies = [
            lambda text: None,
            lambda text: Match("low", 0.3, "weak"),
            lambda text: Match("ok", 0.6, "medium"),
            lambda text: Match("great", 0.99, "strong"),
        ]
        assert first_confident(strategies, "input").value == "ok"

    def test_first_confident_falls_back_to_best_below_floor(self):
        strategies = [
            lambda text: Match("low", 0.2, "weak"),
            lambda text: Match("less low", 0.4, "weak"),
        ]
        assert first_confident(strategies, "input").value == "less low"

    def test_first_confident_nothing_matches(self):
        assert first_confident([lambda text: None], "input") is None
