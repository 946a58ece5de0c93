"""
CV processing error taxonomy.

Each error carries a technical message (for logs) and a separate user-facing
message (for whoever uploaded the document), plus the HTTP status the API
layer renders it with.
"""
from enum import Enum
from typing import Dict, Optional, Tuple


class CVProcessingErrorCode(str, Enum):
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    CORRUPTED_FILE = "CORRUPTED_FILE"
    PASSWORD_PROTECTED = "PASSWORD_PROTECTED"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    EMPTY_CONTENT = "EMPTY_CONTENT"
    INSUFFICIENT_CONTENT = "INSUFFICIENT_CONTENT"
    SIZE_LIMIT_EXCEEDED = "SIZE_LIMIT_EXCEEDED"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    INVALID_FILE_STRUCTURE = "INVALID_FILE_STRUCTURE"


# code -> (technical message, user-facing message)
ERROR_MESSAGES: Dict[CVProcessingErrorCode, Tuple[str, str]] = {
    CVProcessingErrorCode.UNSUPPORTED_FORMAT: (
        "Unsupported file format",
        "Please upload a PDF, Word or plain-text document (.pdf, .docx, .doc, .txt, .md).",
    ),
    CVProcessingErrorCode.CORRUPTED_FILE: (
        "File appears to be corrupted",
        "The file appears to be corrupted or damaged. Please try uploading a different version of your CV.",
    ),
    CVProcessingErrorCode.PASSWORD_PROTECTED: (
        "Password-protected files not supported",
        "Password-protected files are not supported. Please upload an unprotected version of your CV.",
    ),
    CVProcessingErrorCode.EXTRACTION_FAILED: (
        "Text extraction failed",
        "Unable to extract text from your CV. Please ensure the file is not corrupted and try again.",
    ),
    CVProcessingErrorCode.EMPTY_CONTENT: (
        "No readable text found",
        "No readable text was found in your CV. Please ensure the document contains text content and is not image-only.",
    ),
    CVProcessingErrorCode.INSUFFICIENT_CONTENT: (
        "Insufficient text content",
        "Your CV appears to contain very little text. Please ensure it includes your complete resume information.",
    ),
    CVProcessingErrorCode.SIZE_LIMIT_EXCEEDED: (
        "File size exceeds limit",
        "Your CV file is too large. Please upload a smaller file.",
    ),
    CVProcessingErrorCode.TIMEOUT_ERROR: (
        "Processing timeout",
        "Your CV is taking too long to process. Please try uploading a smaller or simpler document.",
    ),
    CVProcessingErrorCode.INVALID_FILE_STRUCTURE: (
        "Invalid file structure",
        "The file structure is invalid or unrecognized. Please try saving your CV in a different format and uploading again.",
    ),
}


class CVProcessingError(Exception):
    """Base exception for every classified CV processing failure"""

    code: CVProcessingErrorCode = CVProcessingErrorCode.EXTRACTION_FAILED
    status_code: int = 500

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        technical, user_facing = ERROR_MESSAGES[self.code]
        self.message = message or technical
        self.user_message = user_facing
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "code": self.code.value,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
        }


class UnsupportedFormatError(CVProcessingError):
    code = CVProcessingErrorCode.UNSUPPORTED_FORMAT
    status_code = 415


class CorruptedFileError(CVProcessingError):
    code = CVProcessingErrorCode.CORRUPTED_FILE
    status_code = 422


class PasswordProtectedError(CVProcessingError):
    code = CVProcessingErrorCode.PASSWORD_PROTECTED
    status_code = 422


class ExtractionFailedError(CVProcessingError):
    code = CVProcessingErrorCode.EXTRACTION_FAILED
    status_code = 500


class EmptyContentError(CVProcessingError):
    code = CVProcessingErrorCode.EMPTY_CONTENT
    status_code = 422


class InsufficientContentError(CVProcessingError):
    code = CVProcessingErrorCode.INSUFFICIENT_CONTENT
    status_code = 422


class SizeLimitExceededError(CVProcessingError):
    code = CVProcessingErrorCode.SIZE_LIMIT_EXCEEDED
    status_code = 413


class ProcessingTimeoutError(CVProcessingError):
    code = CVProcessingErrorCode.TIMEOUT_ERROR
    status_code = 504


class InvalidFileStructureError(CVProcessingError):
    code = CVProcessingErrorCode.INVALID_FILE_STRUCTURE
    status_code = 422


# Backend error text fragments, checked in order against the lower-cased message
_TIMEOUT_MARKERS = ("timeout", "timed out")
_PASSWORD_MARKERS = ("password", "encrypted")
_CORRUPTION_MARKERS = {
    "pdf": ("invalid pdf", "pdf structure", "no /root", "eof marker", "pdfsyntaxerror"),
    "docx": ("not a valid zip", "badzipfile", "file is not a zip file", "invalid signature", "package not found"),
}
_INSUFFICIENT_MARKERS = ("too short", "insufficient")
_EMPTY_MARKERS = ("empty", "no readable text")


def classify_extraction_error(error: BaseException, file_type: str) -> CVProcessingError:
    """
    Map an arbitrary backend failure onto the error taxonomy by inspecting its text.

    Already-classified errors pass through untouched.

    Examples:
        TimeoutError("Operation timed out after 15000ms") -> ProcessingTimeoutError
        PdfminerException("Invalid PDF structure") -> CorruptedFileError
        BadZipFile("File is not a zip file") -> CorruptedFileError (docx)
        ValueError("document is encrypted") -> PasswordProtectedError
    """
    if isinstance(error, CVProcessingError):
        return error

    technical = str(error) or error.__class__.__name__
    text = f"{error.__class__.__name__}: {technical}".lower()

    if isinstance(error, TimeoutError) or any(m in text for m in _TIMEOUT_MARKERS):
        return ProcessingTimeoutError(technical)

    if any(m in text for m in _CORRUPTION_MARKERS.get(file_type, ())):
        return CorruptedFileError(technical)

    if any(m in text for m in _PASSWORD_MARKERS):
        return PasswordProtectedError(technical)

    if any(m in text for m in _INSUFFICIENT_MARKERS):
        return InsufficientContentError(technical)

    if any(m in text for m in _EMPTY_MARKERS):
        return EmptyContentError(technical)

    return ExtractionFailedError(technical)
