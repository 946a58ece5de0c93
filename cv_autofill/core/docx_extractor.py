import logging
import time
from io import BytesIO
from typing import List

from docx import Document

from cv_autofill.core.content_validator import count_words
from cv_autofill.core.schemas import ExtractionResult

logger = logging.getLogger(__name__)


def _table_lines(doc) -> List[str]:
    """One line per table row, cells joined with " | " (merged cells appear once)."""
    lines = []
    for table in doc.tables:
        for row in table.rows:
            cells: List[str] = []
            for cell in row.cells:
                t = (cell.text or "").strip()
                if t and t not in cells:
                    cells.append(t)
            if cells:
                lines.append(" | ".join(cells))
    return lines


def extract_docx_text(docx_bytes: bytes) -> ExtractionResult:
    """
    Deterministically extract non-empty paragraph text from a DOCX, followed by
    table text.

    Non-fatal structure issues (layout tables, no body paragraphs) are reported
    as warnings instead of errors.
    """
    started = time.perf_counter()
    doc = Document(BytesIO(docx_bytes))

    lines: List[str] = []
    for p in doc.paragraphs:
        t = (p.text or "").strip()
        if t:
            lines.append(t)
    paragraph_count = len(lines)

    table_lines = _table_lines(doc)
    warnings: List[str] = []
    if table_lines:
        warnings.append(
            f"Document contains {len(doc.tables)} table(s); table text was appended after the body text"
        )
        lines.extend(table_lines)
    if paragraph_count == 0:
        warnings.append("Document has no text paragraphs")

    text = "\n".join(lines)
    logger.debug("docx: %d paragraph(s), %d table line(s)", paragraph_count, len(table_lines))

    return ExtractionResult(
        text=text,
        file_type="docx",
        word_count=count_words(text),
        warnings=warnings,
        extraction_time_ms=(time.perf_counter() - started) * 1000,
        extraction_method="python-docx",
    )
