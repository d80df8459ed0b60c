"""FMCSA Register record extraction.

Both register editions (the HTML detail page and the daily PDF) are reduced
to flat text first; this module turns that text into RegisterEntry records.
The two paths deliberately keep their historical differences so that entries
already stored stay comparable with new ones:

* HTML path: category comes from keywords found in a fixed lookback window
  before each record, and the last keyword in table order wins. Every
  match is kept.
* PDF path: category is the label of the section the record sits in, and
  titles outside (0, max_title_length) characters are dropped.
"""
import re
from dataclasses import asdict, dataclass
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .config import DEFAULT_FORMAT, RegisterFormat

HTML_RECORD_PATTERN = re.compile(r"((?:MC|FF|MX)-[0-9]+)\s+(.*?)\s+([0-9]{2}/[0-9]{2}/[0-9]{4})")
PDF_RECORD_PATTERN = re.compile(r"((?:MC|FF|MX|MX-MC)-[0-9]+)\s+([\s\S]*?)\s+([0-9]{2}/[0-9]{2}/[0-9]{4})")

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


class SourceKind(str, Enum):
    HTML = "html"
    PDF = "pdf"


@dataclass(frozen=True)
class RegisterEntry:
    number: str
    title: str
    decided: str
    category: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def categorize(window: str, fmt: RegisterFormat = DEFAULT_FORMAT) -> str:
    """Pick a category for the text preceding a record.

    Every keyword present in the window overwrites the previous pick, so the
    result is the last matching keyword in table order, not the one closest
    to the record.
    """
    window = window.upper()
    category = fmt.default_category
    for keyword, label in fmt.categories:
        if keyword in window:
            category = label
    return category


def extract_html_entries(text: str, fmt: RegisterFormat = DEFAULT_FORMAT) -> List[RegisterEntry]:
    entries = []
    for match in HTML_RECORD_PATTERN.finditer(text):
        start = match.start()
        window = text[max(0, start - fmt.lookback_chars):start]
        entries.append(RegisterEntry(
            number=match.group(1),
            title=_collapse(match.group(2)),
            decided=match.group(3),
            category=categorize(window, fmt),
        ))
    return entries


def _section_records(text: str, category: str, fmt: RegisterFormat) -> List[RegisterEntry]:
    entries = []
    for match in PDF_RECORD_PATTERN.finditer(text):
        title = _collapse(match.group(2))
        if 0 < len(title) < fmt.max_title_length:
            entries.append(RegisterEntry(
                number=match.group(1),
                title=title,
                decided=match.group(3),
                category=category,
            ))
    return entries


def extract_pdf_entries(text: str, fmt: RegisterFormat = DEFAULT_FORMAT) -> List[RegisterEntry]:
    entries = []
    found_header = False
    sections = fmt.pdf_sections
    for i, (label, header) in enumerate(sections):
        start = text.find(header)
        if start == -1:
            continue
        found_header = True
        # A section runs until the next header in table order, not the next one
        # present; when that header is missing the section runs to the end.
        end = len(text)
        if i + 1 < len(sections):
            next_start = text.find(sections[i + 1][1], start)
            if next_start != -1:
                end = next_start
        entries.extend(_section_records(text[start:end], label, fmt))

    if not found_header and fmt.unsectioned_fallback:
        entries = _section_records(text, fmt.default_category, fmt)
    return entries


def extract_entries(text: str, kind: SourceKind, fmt: RegisterFormat = DEFAULT_FORMAT) -> List[RegisterEntry]:
    if kind == SourceKind.PDF:
        return extract_pdf_entries(text, fmt)
    return extract_html_entries(text, fmt)


def dedupe_entries(entries: Iterable[RegisterEntry]) -> List[RegisterEntry]:
    """Drop entries whose (number, title) pair was already seen. First one wins."""
    seen = set()
    unique = []
    for entry in entries:
        key = (entry.number, entry.title)
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


# --- Date formats ---
def format_date_for_register(day: date) -> str:
    """Render a date the way the HTML register form expects it, e.g. 20-FEB-24."""
    return f"{day.day:02d}-{MONTHS[day.month - 1]}-{str(day.year)[-2:]}"


def format_date_for_pdf(date_str: str) -> str:
    # 2024-02-20 -> 20240220, as used in the PDF file name
    return date_str.replace("-", "")


def resolve_register_date(value: Optional[str], today: Optional[date] = None) -> str:
    """Register date for the HTML form.

    ISO dates are converted, anything else is assumed to already be in the
    register's DD-MMM-YY form and is passed through. Empty means today.
    """
    if not value:
        return format_date_for_register(today or date.today())
    value = value.strip()
    if ISO_DATE_PATTERN.match(value):
        try:
            return format_date_for_register(date.fromisoformat(value))
        except ValueError:
            return value
    return value
