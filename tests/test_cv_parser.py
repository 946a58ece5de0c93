"""
End-to-end tests for the CV parsing pipeline and its upload wrappers.
"""

import asyncio
import time

import pytest
from cv_autofill.core import extraction
from cv_autofill.core.config import Settings
from cv_autofill.core.context import ProcessingContext
from cv_autofill.core.cv_parser import CVParser, parse_cv_text, process_document, process_text
from cv_autofill.core.errors import (
    EmptyContentError,
    InsufficientContentError,
    PasswordProtectedError,
    ProcessingTimeoutError,
    SizeLimitExceededError,
    UnsupportedFormatError,
)
from cv_autofill.core.extraction import detect_file_type, extract_text, validate_upload

RESUME = """John Doe
Software Engineer
john.doe@email.com
(555) 123-4567

EXPERIENCE
Senior Engineer at Tech Corp
Jan 2020 - Present
• Led a team of 5

EDUCATION
Bachelor of Science, State University
2018

SKILLS
JavaScript, Python, React"""


# ===== PIPELINE TESTS =====


class TestParse:
    def test_full_resume(self):
        profile = parse_cv_text(RESUME, Settings())

        info = profile.personal_info
        assert (info.first_name, info.last_name) == ("John", "Doe")
        assert info.email == "john.doe@email.com"
        assert info.phone == "+15551234567"

        assert len(profile.work_experience) == 1
        job = profile.work_experience[0]
        assert job.job_title == "Senior Engineer"
        assert job.company == "Tech Corp"
        assert job.start_date == "01/2020"
        assert job.current is True
        assert job.achievements == ["Led a team of 5"]

        assert len(profile.education) == 1
        assert profile.education[0].degree == "Bachelor of Science"
        assert profile.education[0].institution == "State University"
        assert profile.education[0].graduation_date == "01/2018"

        assert profile.skills == ["JavaScript", "Python", "React"]

        confidence = profile.confidence
        for score in (confidence.personal_info, confidence.work_experience, confidence.education, confidence.skills):
            assert 0.0 < score <= 0.8

    def test_crlf_input_gives_same_profile(self):
        settings = Settings()
        assert parse_cv_text(RESUME.replace("\n", "\r\n"), settings) == parse_cv_text(RESUME, settings)

    def test_whitespace_only_text(self):
        with pytest.raises(EmptyContentError):
            parse_cv_text("   \n\t  ", Settings())

    def test_short_text(self):
        with pytest.raises(InsufficientContentError):
            parse_cv_text("John Doe\njohn@example.com", Settings())

    def test_context_collects_sections(self):
        settings = Settings()
        ctx = ProcessingContext(settings=settings)
        CVParser(settings).parse(RESUME, ctx)
        assert ctx.sections_found == {"experience", "education", "skills"}
        assert ctx.warnings == []

    def test_missing_sections_are_warnings_not_errors(self):
        text = (
            "Jane Smith\n"
            "jane.smith@example.com\n"
            "Backend developer with eight years of experience building payment systems."
        )
        settings = Settings()
        ctx = ProcessingContext(settings=settings)
        profile = CVParser(settings).parse(text, ctx)
        assert profile.personal_info.email == "jane.smith@example.com"
        assert profile.work_experience == []
        assert profile.confidence.work_experience == 0.0
        assert "No experience section found" in ctx.warnings
        assert "No skills section found" in ctx.warnings

    def test_expired_budget(self):
        settings = Settings()
        ctx = ProcessingContext(settings=settings, deadline=time.monotonic() - 1, budget_seconds=1.0)
        with pytest.raises(ProcessingTimeoutError):
            CVParser(settings).parse(RESUME, ctx)

    def test_contact_block_is_not_read_as_skills(self):
        text = (
            "John Doe\n"
            "Software Engineer\n"
            "john.doe@email.com\n"
            "Springfield Office\n"
            "\n"
            "EXPERIENCE\n"
            "Senior Engineer at Tech Corp\n"
            "Jan 2020 - Present\n"
            "• Built services in Python and Docker"
        )
        assert parse_cv_text(text, Settings()).skills == ["Docker", "Python"]

    def test_year_zero_does_not_break_sorting(self):
        text = "Jane Smith\njane.smith@example.com\n\nEXPERIENCE\nEngineer at Acme Corp\n0000 - Present\n\nAnalyst at Beta LLC\n2015 - 2018"
        profile = parse_cv_text(text, Settings())
        assert [e.company for e in profile.work_experience] == ["Acme Corp", "Beta LLC"]
        assert profile.work_experience[0].start_date == "01/0000"

    def test_stage_methods(self):
        parser = CVParser(Settings())
        assert parser.extract_personal_info(RESUME).email == "john.doe@email.com"
        assert [e.company for e in parser.extract_work_experience(RESUME)] == ["Tech Corp"]
        assert [e.institution for e in parser.extract_education(RESUME)] == ["State University"]
        assert parser.extract_skills(RESUME) == ["JavaScript", "Python", "React"]


# ===== UPLOAD PATH TESTS =====


class TestUploadValidation:
    @pytest.mark.parametrize(
        "filename, content_type, expected",
        [
            ("cv.pdf", None, "pdf"),
            ("CV.DOCX", None, "docx"),
            ("cv.doc", None, "docx"),
            ("cv.txt", None, "txt"),
            ("cv.md", None, "txt"),
            ("upload", "application/pdf", "pdf"),
            (None, "text/plain; charset=utf-8", "txt"),
        ],
    )
    def test_detect_file_type(self, filename, content_type, expected):
        assert detect_file_type(filename, content_type) == expected

    def test_unsupported(self):
        with pytest.raises(UnsupportedFormatError):
            detect_file_type("photo.png", "image/png")

    def test_size_checked_first(self):
        settings = Settings(MAX_FILE_SIZE_BYTES=10)
        with pytest.raises(SizeLimitExceededError) as exc:
            validate_upload(b"x" * 11, "photo.png", "image/png", settings)
        assert "exceeds limit" in exc.value.message

    def test_empty_upload(self):
        with pytest.raises(EmptyContentError):
            validate_upload(b"", "cv.txt", "text/plain", Settings())


class TestProcessing:
    def test_process_text(self):
        response = asyncio.run(process_text(RESUME, Settings()))
        assert response.profile.personal_info.first_name == "John"
        assert response.sections_found == ["education", "experience", "skills"]
        assert response.parse_quality in {"high", "medium", "low"}
        assert response.extraction is None
        assert response.processing_time_ms >= 0

    def test_process_document_txt(self):
        response = asyncio.run(process_document(RESUME.encode("utf-8"), "cv.txt", "text/plain", Settings()))
        assert response.extraction.file_type == "txt"
        assert response.extraction.extraction_method == "plain-text"
        assert response.profile.skills == ["JavaScript", "Python", "React"]

    def test_utf8_bom_is_dropped(self):
        response = asyncio.run(process_document(b"\xef\xbb\xbf" + RESUME.encode("utf-8"), "cv.txt", None, Settings()))
        assert response.profile.personal_info.first_name == "John"

    def test_blank_text_file(self):
        with pytest.raises(EmptyContentError):
            asyncio.run(process_document(b"   \n  ", "cv.txt", "text/plain", Settings()))

    def test_parse_timeout(self):
        with pytest.raises(ProcessingTimeoutError):
            asyncio.run(process_text(RESUME, Settings(PARSE_TIMEOUT_SECONDS=0.0)))

    def test_extraction_timeout(self, monkeypatch):
        def slow_backend(data):
            time.sleep(0.5)
            return extraction.extract_plain_text(data)

        monkeypatch.setitem(extraction.BACKENDS, "txt", slow_backend)
        with pytest.raises(ProcessingTimeoutError) as exc:
            asyncio.run(extract_text(b"hello world", "txt", Settings(TEXT_TIMEOUT_SECONDS=0.05)))
        assert exc.value.message.startswith("TXT extraction timed out")

    def test_backend_failure_is_classified(self, monkeypatch):
        def broken_backend(data):
            raise ValueError("document is encrypted")

        monkeypatch.setitem(extraction.BACKENDS, "pdf", broken_backend)
        with pytest.raises(PasswordProtectedError):
            asyncio.run(extract_text(b"%PDF-1.4", "pdf", Settings()))
