"""
CV understanding pipeline.

    normalize -> validate -> locate sections -> personal info / experience /
    education / skills -> confidence

CVParser.parse() is synchronous and pure over its input text; everything it
records goes into the caller-owned ProcessingContext. process_document() and
process_text() wrap it for uploads: validation, timed extraction and a timed
parse in a worker thread.
"""

import asyncio
import logging
import time
from typing import List, Optional

from cv_autofill.core.confidence_calculator import ConfidenceCalculator
from cv_autofill.core.config import Settings, get_settings
from cv_autofill.core.content_validator import validate_content
from cv_autofill.core.context import ProcessingContext
from cv_autofill.core.education_parser import extract_education
from cv_autofill.core.errors import ProcessingTimeoutError
from cv_autofill.core.experience_parser import extract_work_experience
from cv_autofill.core.extraction import extract_text, validate_upload
from cv_autofill.core.personal_info import extract_personal_info
from cv_autofill.core.schemas import (
    EducationEntry,
    ExtractedProfileData,
    ExtractionResult,
    ParseResponse,
    PersonalInfo,
    WorkExperienceEntry,
)
from cv_autofill.core.section_locator import SKILLS_HEADERS, has_exact_header, locate_sections
from cv_autofill.core.skills_parser import extract_skills
from cv_autofill.core.text_normalization import normalize_text

logger = logging.getLogger(__name__)


def _skills_from(text: str, sections: dict) -> List[str]:
    return extract_skills(
        sections["skills"],
        sections["experience"],
        sections["summary"],
        explicit_skills_header=has_exact_header(text, SKILLS_HEADERS),
    )


class CVParser:
    """Runs the parsing stages over one document's text."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def extract_personal_info(self, text: str) -> PersonalInfo:
        return extract_personal_info(normalize_text(text))

    def extract_work_experience(self, text: str) -> List[WorkExperienceEntry]:
        return extract_work_experience(locate_sections(normalize_text(text))["experience"])

    def extract_education(self, text: str) -> List[EducationEntry]:
        return extract_education(locate_sections(normalize_text(text))["education"])

    def extract_skills(self, text: str) -> List[str]:
        normalized = normalize_text(text)
        return _skills_from(normalized, locate_sections(normalized))

    def parse(self, text: Optional[str], context: Optional[ProcessingContext] = None) -> ExtractedProfileData:
        """
        Parse CV text into a profile.

        Raises only content-validation errors (empty / insufficient text) and
        ProcessingTimeoutError when the context's budget runs out. Missing
        sections and fields yield empty values and lower confidence.
        """
        context = context or ProcessingContext(settings=self.settings)

        normalized = normalize_text(text or "")
        validated = validate_content(normalized, self.settings, context)

        sections = locate_sections(validated)
        context.sections_found.update(name for name, body in sections.items() if body)
        for name in ("experience", "education", "skills"):
            if not sections[name]:
                context.warn(f"No {name} section found")

        context.check_deadline("personal_info")
        personal_info = extract_personal_info(validated)

        context.check_deadline("work_experience")
        work_experience = extract_work_experience(sections["experience"])

        context.check_deadline("education")
        education = extract_education(sections["education"])

        context.check_deadline("skills")
        skills = _skills_from(validated, sections)

        confidence = ConfidenceCalculator.score_profile(
            personal_info, work_experience, education, skills, self.settings
        )
        logger.info(
            "parsed CV: %d job(s), %d education entr(ies), %d skill(s)",
            len(work_experience), len(education), len(skills),
        )
        return ExtractedProfileData(
            personal_info=personal_info,
            work_experience=work_experience,
            education=education,
            skills=skills,
            confidence=confidence,
        )


def parse_cv_text(
    text: Optional[str],
    settings: Optional[Settings] = None,
    context: Optional[ProcessingContext] = None,
) -> ExtractedProfileData:
    return CVParser(settings).parse(text, context)


async def _parse_with_timeout(
    text: str,
    settings: Settings,
    extraction: Optional[ExtractionResult] = None,
    started: Optional[float] = None,
) -> ParseResponse:
    started = started if started is not None else time.perf_counter()
    budget = settings.PARSE_TIMEOUT_SECONDS
    context = ProcessingContext.with_budget(budget, settings)
    parser = CVParser(settings)

    try:
        profile = await asyncio.wait_for(asyncio.to_thread(parser.parse, text, context), timeout=budget)
    except asyncio.TimeoutError:
        raise ProcessingTimeoutError(
            f"CV parsing timed out after {budget:.1f}s",
            details=f"budget_seconds={budget}",
        ) from None

    warnings = list(extraction.warnings) if extraction else []
    warnings.extend(context.warnings)

    return ParseResponse(
        profile=profile,
        parse_quality=ConfidenceCalculator.overall_quality(profile.confidence, settings),
        extraction=extraction,
        sections_found=sorted(context.sections_found),
        warnings=warnings,
        processing_time_ms=(time.perf_counter() - started) * 1000,
    )


async def process_text(text: str, settings: Optional[Settings] = None) -> ParseResponse:
    """Parse already-extracted text under the parse time budget."""
    return await _parse_with_timeout(text, settings or get_settings())


async def process_document(
    data: bytes,
    filename: Optional[str],
    content_type: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ParseResponse:
    """
    Full upload path: validate -> extract (timed) -> parse (timed).

    Raises a CVProcessingError subclass for every failure; nothing partial is returned.
    """
    settings = settings or get_settings()
    started = time.perf_counter()

    file_type = validate_upload(data, filename, content_type, settings)
    extraction = await extract_text(data, file_type, settings)
    return await _parse_with_timeout(extraction.text, settings, extraction=extraction, started=started)
