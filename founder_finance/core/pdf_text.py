"""
Text extraction from PDF statements

Renders each page's visible text with pdfplumber. Layout is not preserved
beyond one text line per printed line, which is all the statement text
parser needs.
"""
import io
from typing import List

import pdfplumber

from ..utils.logging_setup import get_logger

logger = get_logger('founder_finance.core.pdf_text')


def extract_text_from_pdf(data: bytes) -> str:
    """
    Extract visible text from a PDF

    Args:
        data: Raw file contents

    Returns:
        Page texts joined by line breaks; empty when no page has text
        (e.g. a scanned statement)
    """
    pages_text: List[str] = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            text = page.extract_text() or ''
            if text.strip():
                pages_text.append(text)

        if not pages_text:
            logger.warning("No text extracted from %d PDF pages - may need OCR", len(pdf.pages))
    return '\n'.join(pages_text)
