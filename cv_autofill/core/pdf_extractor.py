import logging
import math
import re
import time
from io import BytesIO
from typing import Any, Dict, List, Tuple

import pdfplumber

from cv_autofill.core.content_validator import count_words
from cv_autofill.core.schemas import ExtractionResult

logger = logging.getLogger(__name__)

# Horizontal gap tolerances swept per page; the one giving the cleanest words wins
X_TOLERANCE_RANGE = (1.5, 2, 2.5, 3)
# Words whose tops differ by no more than this share a line
LINE_GAP = 3

LETTER_RUN_RE = re.compile(r"[A-Za-z]+")
GLUED_RUN_LENGTH = 18
LONE_LETTER_SHARE = 0.2


def _join_line(words: List[Dict[str, Any]]) -> str:
    return " ".join(w["text"] for w in sorted(words, key=lambda w: w["x0"]))


def _words_to_text(page: Any, *, x_tolerance: float = 3, line_gap: float = LINE_GAP) -> str:
    """
    Rebuild a page's text from pdfplumber word boxes.

    Words are walked top to bottom; a word joins the open line while its top
    stays within ``line_gap`` of the line's first word, otherwise it starts a
    new line. Each line is read left to right.
    """
    words = page.extract_words(x_tolerance=x_tolerance, y_tolerance=2, use_text_flow=True)
    lines: List[List[Dict[str, Any]]] = []
    for word in sorted(words, key=lambda w: w["top"]):
        if lines and word["top"] - lines[-1][0]["top"] <= line_gap:
            lines[-1].append(word)
        else:
            lines.append([word])
    return "\n".join(_join_line(line) for line in lines)


def _glue_penalty(text: str) -> float:
    """
    How broken the word spacing of ``text`` looks; 0 is clean, higher is worse.

    Long letter runs mean neighbouring words were glued together, a high share
    of lone letters means words were torn apart. Text without letters scores inf.
    """
    runs = LETTER_RUN_RE.findall(text)
    if not runs:
        return math.inf
    glued = sum(1 for r in runs if len(r) >= GLUED_RUN_LENGTH)
    lone_share = sum(1 for r in runs if len(r) == 1) / len(runs)
    return glued * 10 + max(0.0, lone_share - LONE_LETTER_SHARE) * 10


def _best_page_text(page: Any) -> Tuple[str, float]:
    """Text for the tolerance with the lowest penalty; the first tolerance wins ties."""
    texts = {xt: _words_to_text(page, x_tolerance=xt) for xt in X_TOLERANCE_RANGE}
    best = min(X_TOLERANCE_RANGE, key=lambda xt: _glue_penalty(texts[xt]))
    return texts[best], best


def extract_pdf_text(pdf_bytes: bytes) -> ExtractionResult:
    """
    Extract plain text from a PDF's text layer with pdfplumber.

    Pages are joined with a blank line. Scanned PDFs without a text layer yield
    empty text; OCR is not attempted. pdfplumber/pdfminer errors propagate
    unchanged so the caller can classify them.
    """
    started = time.perf_counter()
    pages: List[str] = []

    with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
        page_count = len(pdf.pages)
        for page_i, page in enumerate(pdf.pages, start=1):
            text, used_x_tol = _best_page_text(page)
            logger.debug("pdf page %d: x_tolerance=%s, %d chars", page_i, used_x_tol, len(text))
            if text.strip():
                pages.append(text.strip())

    text = "\n\n".join(pages)
    warnings = []
    if page_count and not pages:
        warnings.append("PDF has no text layer; scanned documents are not supported")

    return ExtractionResult(
        text=text,
        file_type="pdf",
        page_count=page_count,
        word_count=count_words(text),
        warnings=warnings,
        extraction_time_ms=(time.perf_counter() - started) * 1000,
        extraction_method="pdfplumber",
    )
