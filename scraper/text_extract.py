"""Turn fetched documents into flat text for the register extractors."""
import io
import logging

import pdfplumber
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


def html_to_text(html: str) -> str:
    # Text nodes are concatenated with no separator; the register regex relies on
    # the whitespace already present in the markup.
    soup = BeautifulSoup(html, "html.parser")
    return soup.get_text()


def pdf_to_text(data: bytes) -> str:
    """
    Extract the text of every page of a PDF held in memory.

    Args:
        data: Raw PDF bytes

    Returns:
        Page texts joined by newlines

    Raises:
        ValueError: If the bytes cannot be read as a PDF
    """
    try:
        text_parts = []
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            logger.info(f"[PDF] Processing PDF with {len(pdf.pages)} pages")
            for page_num, page in enumerate(pdf.pages, start=1):
                try:
                    page_text = page.extract_text()
                except Exception as e:
                    logger.warning(f"[PDF] Error extracting text from page {page_num}: {e}")
                    page_text = None
                text_parts.append(page_text or "")
    except Exception as e:
        logger.error(f"[PDF] Error reading PDF ({len(data)} bytes): {e}")
        raise ValueError(f"Failed to read PDF: {e}") from e

    full_text = "\n".join(text_parts)
    logger.info(f"[PDF] Extracted {len(full_text)} characters from PDF")
    return full_text
