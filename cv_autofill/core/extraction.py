"""
Upload validation and text extraction dispatch.

Size and format are checked before any backend runs. Backends are synchronous
and run in a worker thread under a per-format time budget; their failures are
re-classified into the CV processing error taxonomy.
"""

import asyncio
import logging
import os
import time
from typing import Callable, Dict, Optional

from cv_autofill.core.config import Settings, get_settings
from cv_autofill.core.content_validator import count_words
from cv_autofill.core.docx_extractor import extract_docx_text
from cv_autofill.core.errors import (
    CVProcessingError,
    EmptyContentError,
    ProcessingTimeoutError,
    SizeLimitExceededError,
    UnsupportedFormatError,
    classify_extraction_error,
)
from cv_autofill.core.pdf_extractor import extract_pdf_text
from cv_autofill.core.schemas import ExtractionResult, FileType

logger = logging.getLogger(__name__)

EXTENSION_TYPES: Dict[str, FileType] = {
    ".pdf": "pdf",
    ".docx": "docx",
    ".doc": "docx",
    ".txt": "txt",
    ".md": "txt",
}

CONTENT_TYPES: Dict[str, FileType] = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/msword": "docx",
    "text/plain": "txt",
    "text/markdown": "txt",
}


def detect_file_type(filename: Optional[str], content_type: Optional[str] = None) -> FileType:
    """
    Resolve the source format from the file extension, falling back to the MIME type.

    Raises:
        UnsupportedFormatError: neither the extension nor the MIME type is recognized
    """
    ext = os.path.splitext((filename or "").lower())[1]
    if ext in EXTENSION_TYPES:
        return EXTENSION_TYPES[ext]

    mime = (content_type or "").lower().split(";", 1)[0].strip()
    if mime in CONTENT_TYPES:
        return CONTENT_TYPES[mime]

    raise UnsupportedFormatError(
        f"Unsupported file format: {filename or '<unnamed>'} ({content_type or 'unknown type'})",
        details=f"Supported extensions: {', '.join(sorted(EXTENSION_TYPES))}",
    )


def validate_upload(
    data: bytes,
    filename: Optional[str],
    content_type: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> FileType:
    """Check size, emptiness and format before any extraction work. Returns the file type."""
    settings = settings or get_settings()

    if len(data) > settings.MAX_FILE_SIZE_BYTES:
        size_mb = len(data) / (1024 * 1024)
        limit_mb = settings.MAX_FILE_SIZE_BYTES / (1024 * 1024)
        raise SizeLimitExceededError(
            f"File size {size_mb:.1f}MB exceeds limit of {limit_mb:.1f}MB",
            details=f"size_bytes={len(data)}",
        )

    file_type = detect_file_type(filename, content_type)

    if not data:
        raise EmptyContentError("Uploaded file is empty")

    return file_type


def extract_plain_text(data: bytes) -> ExtractionResult:
    started = time.perf_counter()
    text = data.decode("utf-8-sig", errors="replace")
    return ExtractionResult(
        text=text,
        file_type="txt",
        word_count=count_words(text),
        extraction_time_ms=(time.perf_counter() - started) * 1000,
        extraction_method="plain-text",
    )


BACKENDS: Dict[str, Callable[[bytes], ExtractionResult]] = {
    "pdf": extract_pdf_text,
    "docx": extract_docx_text,
    "txt": extract_plain_text,
}


async def extract_text(data: bytes, file_type: FileType, settings: Optional[Settings] = None) -> ExtractionResult:
    """
    Run the backend for ``file_type`` under its time budget.

    Raises:
        ProcessingTimeoutError: the budget expired; any partial result is discarded
        EmptyContentError: the backend produced no text
        CVProcessingError: any other backend failure, classified by its error text
    """
    settings = settings or get_settings()
    backend = BACKENDS[file_type]
    budget = settings.timeout_for(file_type)

    try:
        result = await asyncio.wait_for(asyncio.to_thread(backend, data), timeout=budget)
    except asyncio.TimeoutError:
        raise ProcessingTimeoutError(
            f"{file_type.upper()} extraction timed out after {budget:.1f}s",
            details=f"budget_seconds={budget}",
        ) from None
    except CVProcessingError:
        raise
    except Exception as exc:
        error = classify_extraction_error(exc, file_type)
        logger.warning("%s extraction failed (%s): %s", file_type, error.code.value, exc)
        raise error from exc

    if not result.text.strip():
        raise EmptyContentError(
            f"No readable text extracted from {file_type.upper()} document",
            details="; ".join(result.warnings) or None,
        )

    logger.info(
        "extracted %d words from %s via %s in %.0fms",
        result.word_count, file_type, result.extraction_method, result.extraction_time_ms,
    )
    return result
