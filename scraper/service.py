"""Fetch, extract and dedupe one register edition."""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .config import (
    DEFAULT_FORMAT,
    PDF_HEADERS,
    REGISTER_HEADERS,
    REGISTER_PDF_TIMEOUT,
    REGISTER_PDF_URL_TEMPLATE,
    REGISTER_TIMEOUT,
    REGISTER_URL,
    RegisterFormat,
)
from .errors import InvalidRegisterResponse, MissingDateError, NoEntriesFound
from .fetcher import get_document, post_form
from .register import (
    RegisterEntry,
    SourceKind,
    dedupe_entries,
    extract_entries,
    format_date_for_pdf,
    resolve_register_date,
)
from .text_extract import html_to_text, pdf_to_text

logger = logging.getLogger(__name__)

REGISTER_MARKER = 'FMCSA REGISTER'


@dataclass(frozen=True)
class RegisterResult:
    date: str
    entries: List[RegisterEntry]
    last_updated: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': True,
            'count': len(self.entries),
            'date': self.date,
            'lastUpdated': self.last_updated,
            'entries': [e.to_dict() for e in self.entries],
        }


def _timestamp():
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


async def fetch_register_text(date: Optional[str], source: SourceKind):
    """Returns (date echoed to the caller, flattened register text)."""
    if source == SourceKind.PDF:
        if not date:
            raise MissingDateError('Date is required (YYYY-MM-DD)')
        pdf_url = REGISTER_PDF_URL_TEMPLATE.format(format_date_for_pdf(date))
        logger.info(f"[REGISTER] Fetching FMCSA Register PDF: {pdf_url}")
        document = await get_document(pdf_url, PDF_HEADERS, REGISTER_PDF_TIMEOUT)
        return date, pdf_to_text(document.content)

    register_date = resolve_register_date(date)
    logger.info(f"[REGISTER] Fetching FMCSA Register HTML for {register_date}")
    document = await post_form(
        REGISTER_URL,
        {'pd_date': register_date, 'pv_vpath': 'LIVIEW'},
        REGISTER_HEADERS,
        REGISTER_TIMEOUT,
    )
    html = document.text
    if REGISTER_MARKER not in html.upper():
        logger.warning(f"[REGISTER] '{REGISTER_MARKER}' not found in response for {register_date}")
        raise InvalidRegisterResponse('Invalid response from FMCSA')
    return register_date, html_to_text(html)


async def fetch_register(date: Optional[str] = None,
                         source: SourceKind = SourceKind.HTML,
                         fmt: RegisterFormat = DEFAULT_FORMAT) -> RegisterResult:
    register_date, text = await fetch_register_text(date, source)
    entries = extract_entries(text, source, fmt)
    unique = dedupe_entries(entries)
    logger.info(f"[REGISTER] {register_date} ({source.value}): {len(entries)} matches, {len(unique)} unique entries")
    if not unique:
        raise NoEntriesFound(f"No entries found in the {source.value.upper()} register for {register_date}.")
    return RegisterResult(date=register_date, entries=unique, last_updated=_timestamp())
