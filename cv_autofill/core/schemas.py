from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional


FileType = Literal["pdf", "docx", "txt"]
ConfidenceScore = float  # 0.0 to 0.8 (capped by HIGH_CONFIDENCE)


class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    post_code: Optional[str] = None
    country: Optional[str] = None

    def is_empty(self) -> bool:
        return not any(self.model_dump().values())


class PersonalInfo(BaseModel):
    """Contact details found in the header of a CV. Every field is optional."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None  # +15551234567 style when a US number is detected
    address: Optional[Address] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None

    def populated_fields(self) -> int:
        """Number of populated top-level fields (first and last name count once each)."""
        count = sum(
            1
            for value in (self.first_name, self.last_name, self.email, self.phone,
                          self.linkedin_url, self.portfolio_url)
            if value
        )
        if self.address is not None and not self.address.is_empty():
            count += 1
        return count


class WorkExperienceEntry(BaseModel):
    job_title: str
    company: str
    start_date: Optional[str] = None  # MM/YYYY
    end_date: Optional[str] = None  # MM/YYYY, absent when current
    current: bool = False
    description: Optional[str] = None
    achievements: List[str] = Field(default_factory=list)


class EducationEntry(BaseModel):
    """Education entry in candidate profile."""
    degree: str  # Bachelor of Science, Master of Business Administration, etc.
    institution: str  # University, College, Institute name
    field_of_study: Optional[str] = None  # Computer Science, Engineering, etc.
    graduation_date: Optional[str] = None  # MM/YYYY
    gpa: Optional[str] = None  # "3.8", only when 0.0 <= gpa <= 4.0
    honors: Optional[str] = None  # Magna Cum Laude, Dean's List, etc.


class ConfidenceScores(BaseModel):
    personal_info: ConfidenceScore = Field(default=0.0, ge=0.0, le=1.0)
    work_experience: ConfidenceScore = Field(default=0.0, ge=0.0, le=1.0)
    education: ConfidenceScore = Field(default=0.0, ge=0.0, le=1.0)
    skills: ConfidenceScore = Field(default=0.0, ge=0.0, le=1.0)


class ExtractedProfileData(BaseModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    work_experience: List[WorkExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    confidence: ConfidenceScores = Field(default_factory=ConfidenceScores)


class ExtractionResult(BaseModel):
    """What a text-extraction backend hands to the pipeline."""
    text: str
    file_type: FileType
    page_count: Optional[int] = Field(default=None, description="Only reported by the PDF backend")
    word_count: int = 0
    warnings: List[str] = Field(default_factory=list, description="Non-fatal structural warnings (DOCX)")
    extraction_time_ms: float = 0.0
    extraction_method: str = Field(..., description="Backend used (pdfplumber, python-docx, plain-text)")


class ParseResponse(BaseModel):
    profile: ExtractedProfileData
    parse_quality: str = Field(default="failed", description="high, medium, low or failed")
    extraction: Optional[ExtractionResult] = None
    sections_found: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    processing_time_ms: float = 0.0


class TextParseRequest(BaseModel):
    text: str = Field(..., description="Plain CV text already extracted from a document")


class ErrorDetail(BaseModel):
    code: str
    message: str = Field(..., description="Technical message")
    user_message: str = Field(..., description="Guidance that can be shown to the candidate")
    details: Optional[str] = None
    extra: Dict[str, Any] = Field(default_factory=dict)
