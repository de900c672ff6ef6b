"""
PDF Roster Feeder
=================

Extracts text from roster PDFs with pdfplumber and hands it to the same
format detection and parsers used for pasted text. No OCR: scanned PDFs
without a text layer yield no duties.
"""

import io
import logging
import re
from datetime import date
from pathlib import Path
from typing import Optional, Tuple, Union

import pdfplumber

from models.data_models import ParseResult
from parsers.format_detection import parse_roster
from parsers.time_normalizer import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)

MAX_PDF_BYTES = 10 * 1024 * 1024

PdfSource = Union[str, Path, bytes]

PDF_ROSTER_FORMAT_EXAMPLE = """
Expected PDF Content:
- Roster Buster calendar format with monthly layout
- Flight duties with Rep times (e.g., "Rep 1120Z")
- Standby duties (e.g., "SBYHOME")
- Day off entries (e.g., "Unknown - DAYOFF")
- Flight details with airport codes and times
- Check out times and layover information

The PDF should contain a calendar grid with dates and corresponding duty information.
"""


def validate_pdf_bytes(content: bytes) -> Tuple[bool, Optional[str]]:
    """Cheap checks before handing bytes to pdfplumber"""
    if not content or content[:4] != b'%PDF':
        return False, 'File is not a valid PDF document'
    if len(content) > MAX_PDF_BYTES:
        return False, 'PDF file is too large (maximum 10MB allowed)'
    return True, None


def extract_text_from_pdf(source: PdfSource) -> str:
    """
    Page text joined with newlines; runs of spaces inside a line collapse.

    Raises ValueError when the document cannot be read.
    """
    handle = io.BytesIO(source) if isinstance(source, bytes) else str(source)
    try:
        lines = []
        with pdfplumber.open(handle) as pdf:
            for page in pdf.pages:
                for line in (page.extract_text() or '').splitlines():
                    line = re.sub(r'[ \t]+', ' ', line).strip()
                    if line:
                        lines.append(line)
        return '\n'.join(lines)
    except Exception as e:
        raise ValueError(f"Failed to extract text from PDF: {e}") from e


def parse_pdf_roster(source: PdfSource, is_utc: bool = True,
                     default_timezone: str = DEFAULT_TIMEZONE,
                     today: Optional[date] = None) -> ParseResult:
    """Extract text and route it through roster format detection"""
    try:
        text = extract_text_from_pdf(source)
    except ValueError as e:
        logger.warning(str(e))
        return ParseResult(success=False, errors=[f"PDF parsing error: {e}"])

    if not text.strip():
        return ParseResult(success=False, errors=['No text could be extracted from the PDF file'])

    logger.info(f"Extracted {len(text)} characters from PDF")
    return parse_roster(text, is_utc=is_utc, default_timezone=default_timezone, today=today)
