"""Unit tests for the SMS safety profile extraction."""
import asyncio
from unittest.mock import AsyncMock, patch

from scraper.config import BASIC_CATEGORIES
from scraper.safety import fetch_safety_profile, parse_safety_profile


def test_parse_rating_and_date(safety_html):
    profile = parse_safety_profile(safety_html)

    assert profile["rating"] == "Satisfactory"
    assert profile["ratingDate"] == "03/14/2019"


def test_parse_basic_scores_by_position(safety_html):
    profile = parse_safety_profile(safety_html)

    assert [s["category"] for s in profile["basicScores"]] == list(BASIC_CATEGORIES)
    assert [s["measure"] for s in profile["basicScores"]] == ["45.2", "12.0", "0", "Not Public", "0", "n/a", "3.4"]


def test_parse_oos_rates_skips_short_rows(safety_html):
    profile = parse_safety_profile(safety_html)

    assert profile["oosRates"] == [
        {"type": "Vehicle", "rate": "20.5%", "nationalAvg": "22.26%"},
        {"type": "Driver", "rate": "3.1%", "nationalAvg": "6.67%"},
    ]


def test_basic_scores_span_every_summary_row():
    html = """<table>
<tr class="sumData"><td><span class="val">45.2</span></td><td>12.0</td></tr>
<tr class="sumData"><td>7.7</td></tr>
</table>"""

    scores = parse_safety_profile(html)["basicScores"]

    assert [s["measure"] for s in scores] == ["45.2", "12.0", "7.7"]
    assert [s["category"] for s in scores] == list(BASIC_CATEGORIES[:3])


def test_parse_empty_page():
    profile = parse_safety_profile("<html><body></body></html>")

    assert profile == {"rating": "N/A", "ratingDate": "N/A", "basicScores": [], "oosRates": []}


def test_parse_oos_table_without_tbody():
    html = """<div id="SafetyRating"><table>
<thead><tr><th>Type</th><th>OOS %</th><th>Nat Avg %</th></tr></thead>
<tr><th>Vehicle</th><td>10%</td><td>21%</td></tr>
</table></div>"""

    assert parse_safety_profile(html)["oosRates"] == [{"type": "Vehicle", "rate": "10%", "nationalAvg": "21%"}]


def test_fetch_safety_profile(safety_html, make_document):
    with patch("scraper.safety.get_document", new=AsyncMock(return_value=make_document(safety_html))) as mock_get:
        profile = asyncio.run(fetch_safety_profile("1234567"))

    assert profile["rating"] == "Satisfactory"
    assert mock_get.await_args.args[0] == "https://ai.fmcsa.dot.gov/SMS/Carrier/1234567/CompleteProfile.aspx"
