import logging

from bs4 import BeautifulSoup

from .carrier import clean_text
from .config import BASIC_CATEGORIES, SMS_PROFILE_HEADERS, SMS_PROFILE_TIMEOUT, SMS_PROFILE_URL_TEMPLATE
from .fetcher import get_document

logger = logging.getLogger(__name__)


def _oos_rows(table):
    rows = table.select('tbody tr')
    if not rows:
        rows = [tr for tr in table.find_all('tr') if tr.find_parent('thead') is None]
    return rows


def parse_safety_profile(html, categories=BASIC_CATEGORIES):
    """Safety rating, BASIC measures and out-of-service rates from the SMS complete profile.

    BASIC cells are matched to ``categories`` by position only; the page has no
    per-cell label to check against.
    """
    soup = BeautifulSoup(html, 'html.parser')

    rating_el = soup.find(id='Rating')
    rating = clean_text(rating_el.get_text()) if rating_el else 'N/A'

    rating_date = 'N/A'
    rating_date_el = soup.find(id='RatingDate')
    if rating_date_el:
        rating_date = (clean_text(rating_date_el.get_text())
                       .replace('Rating Date:', '')
                       .replace('(', '')
                       .replace(')', '')
                       .strip())

    basic_scores = []
    # cells are indexed across every sumData row
    for i, td in enumerate(soup.select('tr.sumData td')):
        if i >= len(categories):
            break
        val_span = td.find('span', class_='val')
        val = clean_text(val_span.get_text()) if val_span else clean_text(td.get_text())
        basic_scores.append({'category': categories[i], 'measure': val or '0'})

    oos_rates = []
    safety_div = soup.find(id='SafetyRating')
    if safety_div:
        oos_table = safety_div.find('table')
        if oos_table:
            for row in _oos_rows(oos_table):
                cols = row.find_all(['th', 'td'])
                if len(cols) >= 3:
                    oos_rates.append({
                        'type': clean_text(cols[0].get_text()),
                        'rate': clean_text(cols[1].get_text()),
                        'nationalAvg': clean_text(cols[2].get_text()),
                    })

    return {
        'rating': rating,
        'ratingDate': rating_date,
        'basicScores': basic_scores,
        'oosRates': oos_rates,
    }


async def fetch_safety_profile(usdot):
    url = SMS_PROFILE_URL_TEMPLATE.format(usdot)
    logger.info(f"[SMS] Fetching safety profile for USDOT {usdot}")
    document = await get_document(url, SMS_PROFILE_HEADERS, SMS_PROFILE_TIMEOUT)
    return parse_safety_profile(document.text)
