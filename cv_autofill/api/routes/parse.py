from fastapi import APIRouter, File, UploadFile

from cv_autofill.core.config import get_settings
from cv_autofill.core.cv_parser import process_document, process_text
from cv_autofill.core.schemas import ErrorDetail, ParseResponse, TextParseRequest

router = APIRouter(tags=["parse"])

ERROR_RESPONSES = {
    413: {"model": ErrorDetail, "description": "File exceeds the size limit"},
    415: {"model": ErrorDetail, "description": "Unsupported file format"},
    422: {"model": ErrorDetail, "description": "Corrupted, password-protected, empty or insufficient content"},
    500: {"model": ErrorDetail, "description": "Text extraction failed"},
    504: {"model": ErrorDetail, "description": "Extraction or parsing exceeded its time budget"},
}


@router.post(
    "/parse",
    response_model=ParseResponse,
    summary="Parse CV",
    description="Extract a structured profile (personal info, work experience, education, skills) from a CV file (PDF, DOCX/DOC, TXT/MD).",
    responses={
        200: {
            "description": "Successfully parsed CV",
            "content": {
                "application/json": {
                    "example": {
                        "profile": {
                            "personal_info": {
                                "first_name": "John",
                                "last_name": "Doe",
                                "email": "john.doe@email.com",
                                "phone": "+15551234567",
                            },
                            "work_experience": [
                                {
                                    "job_title": "Senior Engineer",
                                    "company": "Tech Corp",
                                    "start_date": "01/2020",
                                    "end_date": None,
                                    "current": True,
                                }
                            ],
                            "skills": ["JavaScript", "Python", "React"],
                            "confidence": {
                                "personal_info": 0.53,
                                "work_experience": 0.27,
                                "education": 0.4,
                                "skills": 0.24,
                            },
                        },
                        "parse_quality": "low",
                        "sections_found": ["education", "experience", "skills"],
                        "warnings": [],
                    }
                }
            },
        },
        **ERROR_RESPONSES,
    },
)
async def parse_cv(
    file: UploadFile = File(..., description="CV file (PDF, DOCX/DOC or TXT/MD)")
):
    """
    Parse a CV file and extract candidate information.

    **Supported formats:**
    - PDF (.pdf) - text-layer extraction only, OCR not supported
    - DOCX (.docx, .doc)
    - TXT (.txt, .md)

    Size and format are checked before extraction. Failures are returned as an
    error body with a technical `message` and a candidate-facing `user_message`.
    """
    raw = await file.read()
    return await process_document(raw, file.filename, file.content_type, get_settings())


@router.post(
    "/parse/text",
    response_model=ParseResponse,
    summary="Parse CV text",
    description="Run the parsing pipeline on plain text already extracted from a CV.",
    responses={422: ERROR_RESPONSES[422], 504: ERROR_RESPONSES[504]},
)
async def parse_cv_text(request: TextParseRequest):
    return await process_text(request.text, get_settings())
