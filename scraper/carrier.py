import logging
import re
from datetime import date
from typing import List, Optional

from bs4 import BeautifulSoup, Comment, NavigableString

from .config import (
    SAFER_HEADERS,
    SAFER_TIMEOUT,
    SAFER_URL_TEMPLATE,
    SMS_EMAIL_HEADERS,
    SMS_EMAIL_TIMEOUT,
    SMS_REGISTRATION_URL_TEMPLATE,
)
from .errors import CarrierNotFound
from .fetcher import get_document

logger = logging.getLogger(__name__)


def clean_text(text):
    if not text:
        return ''
    return re.sub(r'\s+', ' ', text.replace('\xa0', ' ')).strip()


def decode_cf_email(encoded):
    """Decode a Cloudflare-protected address (data-cfemail hex, XOR keyed on the first byte)."""
    try:
        key = int(encoded[:2], 16)
        return ''.join(chr(int(encoded[n:n + 2], 16) ^ key) for n in range(2, len(encoded), 2))
    except ValueError:
        return ''


def _join_address(cell):
    parts = []
    for node in cell.contents:
        if isinstance(node, Comment):
            continue
        if isinstance(node, NavigableString):
            text = clean_text(str(node))
        elif node.name == 'br':
            continue
        else:
            text = clean_text(node.get_text())
        if text:
            parts.append(text)
    value = ', '.join(parts)
    if not value:
        value = clean_text(re.sub(r'<br\s*/?>', ', ', cell.decode_contents(), flags=re.IGNORECASE))
    return value


def find_value_by_label(soup, label):
    """Value of the td right after the first th/td whose text contains ``label``."""
    for cell in soup.find_all(['th', 'td']):
        if label not in clean_text(cell.get_text()):
            continue
        value_cell = cell.find_next_sibling()
        if value_cell is None or value_cell.name != 'td':
            continue
        if 'Address' in label:
            return _join_address(value_cell)
        return clean_text(value_cell.get_text())
    return ''


def find_marked(soup, summary) -> List[str]:
    """Labels ticked with an "X" in the checkbox table with the given summary."""
    results = []
    for table in soup.find_all('table', attrs={'summary': summary}):
        for td in table.find_all('td'):
            if clean_text(td.get_text()) == 'X':
                following = td.find_next_sibling()
                if following is not None:
                    results.append(clean_text(following.get_text()))
    return results


def parse_carrier_snapshot(html, mc_number, today: Optional[date] = None):
    soup = BeautifulSoup(html, 'html.parser')
    # SAFER wraps every snapshot in <center>; the "no records" page has none
    if not soup.find('center'):
        raise CarrierNotFound(f"Carrier not found: MC {mc_number}")

    today = today or date.today()
    return {
        'mcNumber': mc_number,
        'dotNumber': find_value_by_label(soup, 'USDOT Number:'),
        'legalName': find_value_by_label(soup, 'Legal Name:'),
        'dbaName': find_value_by_label(soup, 'DBA Name:'),
        'entityType': find_value_by_label(soup, 'Entity Type:'),
        'status': find_value_by_label(soup, 'Operating Authority Status:'),
        'phone': find_value_by_label(soup, 'Phone:'),
        'powerUnits': find_value_by_label(soup, 'Power Units:'),
        'nonCmvUnits': find_value_by_label(soup, 'Non-CMV Units:'),
        'drivers': find_value_by_label(soup, 'Drivers:'),
        'physicalAddress': find_value_by_label(soup, 'Physical Address:'),
        'mailingAddress': find_value_by_label(soup, 'Mailing Address:'),
        'dateScraped': f"{today.month}/{today.day}/{today.year}",
        'mcs150Date': find_value_by_label(soup, 'MCS-150 Form Date:'),
        'mcs150Mileage': find_value_by_label(soup, 'MCS-150 Mileage (Year):'),
        'operationClassification': find_marked(soup, 'Operation Classification'),
        'carrierOperation': find_marked(soup, 'Carrier Operation'),
        'cargoCarried': find_marked(soup, 'Cargo Carried'),
        'outOfServiceDate': find_value_by_label(soup, 'Out of Service Date:'),
        'stateCarrierId': find_value_by_label(soup, 'State Carrier ID Number:'),
        'dunsNumber': find_value_by_label(soup, 'DUNS Number:'),
        'email': '',
    }


def parse_sms_email(html):
    """Email from the SMS registration page (<li><label>Email:</label><span class="dat">...)."""
    soup = BeautifulSoup(html, 'html.parser')
    for label in soup.find_all('label'):
        if 'Email:' not in label.get_text():
            continue
        parent = label.parent
        cf_email = parent.find(attrs={'data-cfemail': True})
        if cf_email is not None:
            return decode_cf_email(cf_email.get('data-cfemail', ''))
        text = clean_text(parent.get_text().replace('Email:', ''))
        if text and '@' in text:
            return text
        return ''
    return ''


async def fetch_carrier_email(usdot):
    url = SMS_REGISTRATION_URL_TEMPLATE.format(usdot)
    document = await get_document(url, SMS_EMAIL_HEADERS, SMS_EMAIL_TIMEOUT)
    return parse_sms_email(document.text)


async def fetch_carrier_snapshot(mc_number):
    url = SAFER_URL_TEMPLATE.format(mc_number)
    logger.info(f"[SAFER] Querying MC/MX Number: {mc_number}")
    document = await get_document(url, SAFER_HEADERS, SAFER_TIMEOUT)
    carrier = parse_carrier_snapshot(document.text, mc_number)

    if carrier['dotNumber']:
        try:
            carrier['email'] = await fetch_carrier_email(carrier['dotNumber'])
        except Exception as e:
            logger.error(f"[SMS] Email fetch failed for USDOT {carrier['dotNumber']}: {e}")
    if not carrier['email']:
        logger.warning(f"[SMS] Email field missing for MC {mc_number}")
    return carrier
