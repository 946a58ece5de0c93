"""
Confidence scoring for extracted profile categories.

Each category is scored independently from how much was found relative to what
a typical CV contains, then scaled by the high-confidence ceiling so heuristic
matching never claims full certainty.

Confidence Scale (with the default 0.8 ceiling):
  0.8   = every expected field / entry found
  0.4   = about half of the expected amount found
  0.0   = nothing found
"""

from typing import List, Optional

from cv_autofill.core.config import Settings, get_settings
from cv_autofill.core.schemas import (
    ConfidenceScores,
    EducationEntry,
    PersonalInfo,
    WorkExperienceEntry,
)


class ConfidenceCalculator:
    """Central place for all extraction confidence logic."""

    @staticmethod
    def ratio(found: int, expected: int, ceiling: float) -> float:
        """min(found / expected, 1) scaled by the ceiling; never negative."""
        if found <= 0 or expected <= 0:
            return 0.0
        return round(min(found / expected, 1.0) * ceiling, 4)

    @staticmethod
    def personal_info(info: PersonalInfo, settings: Optional[Settings] = None) -> float:
        settings = settings or get_settings()
        return ConfidenceCalculator.ratio(
            info.populated_fields(), settings.PERSONAL_INFO_FIELDS, settings.HIGH_CONFIDENCE
        )

    @staticmethod
    def work_experience(entries: List[WorkExperienceEntry], settings: Optional[Settings] = None) -> float:
        settings = settings or get_settings()
        return ConfidenceCalculator.ratio(len(entries), settings.EXPECTED_WORK_ENTRIES, settings.HIGH_CONFIDENCE)

    @staticmethod
    def education(entries: List[EducationEntry], settings: Optional[Settings] = None) -> float:
        settings = settings or get_settings()
        return ConfidenceCalculator.ratio(
            len(entries), settings.EXPECTED_EDUCATION_ENTRIES, settings.HIGH_CONFIDENCE
        )

    @staticmethod
    def skills(skills: List[str], settings: Optional[Settings] = None) -> float:
        settings = settings or get_settings()
        return ConfidenceCalculator.ratio(len(skills), settings.EXPECTED_SKILLS, settings.HIGH_CONFIDENCE)

    @staticmethod
    def score_profile(
        personal_info: PersonalInfo,
        work_experience: List[WorkExperienceEntry],
        education: List[EducationEntry],
        skills: List[str],
        settings: Optional[Settings] = None,
    ) -> ConfidenceScores:
        settings = settings or get_settings()
        return ConfidenceScores(
            personal_info=ConfidenceCalculator.personal_info(personal_info, settings),
            work_experience=ConfidenceCalculator.work_experience(work_experience, settings),
            education=ConfidenceCalculator.education(education, settings),
            skills=ConfidenceCalculator.skills(skills, settings),
        )

    @staticmethod
    def overall_quality(scores: ConfidenceScores, settings: Optional[Settings] = None) -> str:
        """
        Coarse label for the whole parse: "high", "medium", "low" or "failed".

        Based on the mean category score relative to the ceiling.
        """
        settings = settings or get_settings()
        values = [scores.personal_info, scores.work_experience, scores.education, scores.skills]
        if not any(values) or settings.HIGH_CONFIDENCE <= 0:
            return "failed"
        relative = (sum(values) / len(values)) / settings.HIGH_CONFIDENCE
        if relative >= 0.75:
            return "high"
        if relative >= 0.4:
            return "medium"
        return "low"
