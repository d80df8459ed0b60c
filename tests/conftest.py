"""Pytest configuration and shared fixtures."""
import pytest

from scraper.fetcher import FetchedDocument


@pytest.fixture
def register_html() -> str:
    """HTML register detail page with two sections and a repeated entry."""
    return """<html>
<head><title>FMCSA Register</title></head>
<body>
<h2>FMCSA REGISTER</h2>
<p>Decisions and Notices released February 20, 2024</p>
<h3>NAME CHANGES</h3>
<table>
<tr>
<td>MC-100001</td>
<td>ALPHA FREIGHT LLC - DENVER, CO</td>
<td>02/16/2024</td>
</tr>
</table>
<h3>REVOCATIONS</h3>
<table>
<tr>
<td>MC-100002</td>
<td>BETA   HAULERS INC - TACOMA, WA</td>
<td>02/17/2024</td>
</tr>
<tr>
<td>MC-100002</td>
<td>BETA HAULERS INC - TACOMA, WA</td>
<td>02/17/2024</td>
</tr>
</table>
</body>
</html>"""


@pytest.fixture
def safer_html() -> str:
    """SAFER company snapshot for a found carrier."""
    return """<html><body><center>
<table>
<tr><th>Entity Type:</th><td>CARRIER</td></tr>
<tr><th>USDOT Number:</th><td>1234567</td><th>State Carrier ID Number:</th><td></td></tr>
<tr><th>Operating Authority Status:</th><td>AUTHORIZED FOR Property</td></tr>
<tr><th>Out of Service Date:</th><td>None</td></tr>
<tr><th>Legal Name:</th><td>SMITH&nbsp;TRUCKING   CO</td></tr>
<tr><th>DBA Name:</th><td></td></tr>
<tr><th>Physical Address:</th><td>123 MAIN ST<br>SPRINGFIELD, IL  62701</td></tr>
<tr><th>Phone:</th><td>(555) 123-4567</td></tr>
<tr><th>Mailing Address:</th><td>PO BOX 9<br/>SPRINGFIELD, IL 62702</td></tr>
<tr><th>DUNS Number:</th><td>--</td></tr>
<tr><th>Power Units:</th><td>12</td><th>Drivers:</th><td>15</td></tr>
<tr><th>MCS-150 Form Date:</th><td>01/15/2024</td><th>MCS-150 Mileage (Year):</th><td>1,200,000 (2023)</td></tr>
</table>
<table summary="Operation Classification">
<tr><td>X</td><td>Auth. For Hire</td><td></td><td>Exempt For Hire</td></tr>
</table>
<table summary="Carrier Operation">
<tr><td>X</td><td>Interstate</td><td></td><td>Intrastate Only (HM)</td></tr>
</table>
<table summary="Cargo Carried">
<tr><td>X</td><td>General Freight</td></tr>
<tr><td>X</td><td>Household Goods</td></tr>
<tr><td></td><td>Metal: sheets, coils, rolls</td></tr>
</table>
</center></body></html>"""


@pytest.fixture
def sms_registration_html() -> str:
    """SMS registration page with a Cloudflare-protected email ("a@b.co")."""
    return """<html><body><article id="regInfo">
<ul class="col1">
<li><label>Legal Name:</label><span class="dat">SMITH TRUCKING CO</span></li>
<li><label>Email:</label><span class="dat"><a href="/cdn-cgi/l/email-protection" class="__cf_email__"
 data-cfemail="422302206c212d">[email&#160;protected]</a></span></li>
</ul>
</article></body></html>"""


@pytest.fixture
def safety_html() -> str:
    return """<html><body>
<div id="SafetyRating">
<span id="Rating">Satisfactory</span>
<span id="RatingDate">(Rating Date: 03/14/2019)</span>
<table>
<thead><tr><th>Type</th><th>Carrier OOS Rate</th><th>National Average</th></tr></thead>
<tbody>
<tr><th>Vehicle</th><td>20.5%</td><td>22.26%</td></tr>
<tr><th>Driver</th><td>3.1%</td><td>6.67%</td></tr>
<tr><th>Hazmat</th><td>0%</td></tr>
</tbody>
</table>
</div>
<table>
<tr class="sumData">
<td><span class="val">45.2</span></td>
<td>12.0</td>
<td></td>
<td>Not Public</td>
<td>0</td>
<td>n/a</td>
<td><span class="val">3.4</span></td>
<td>extra</td>
</tr>
</table>
</body></html>"""


@pytest.fixture
def make_document():
    """Build a FetchedDocument the way the fetcher would return it."""
    def _make(body, status=200, url="https://example.test/doc"):
        content = body.encode("utf-8") if isinstance(body, str) else body
        return FetchedDocument(url=url, status=status, content=content)
    return _make


def _build_pdf(page_lines) -> bytes:
    """Assemble an uncompressed PDF, one Helvetica text line per page."""
    page_count = len(page_lines)
    font_id = 3 + 2 * page_count
    kids = " ".join(f"{3 + 2 * i} 0 R" for i in range(page_count))
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {page_count} >>".encode(),
    ]
    for i, line in enumerate(page_lines):
        stream = f"BT /F1 12 Tf 72 720 Td ({line}) Tj ET".encode()
        objects.append(
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents {4 + 2 * i} 0 R "
            f"/Resources << /Font << /F1 {font_id} 0 R >> >> >>".encode()
        )
        objects.append(b"<< /Length %d >>\nstream\n%s\nendstream" % (len(stream), stream))
    objects.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n%s\nendobj\n" % (number, body)
    xref_at = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


@pytest.fixture
def register_pdf() -> bytes:
    """Two-page register PDF: header and section on page 1, a record on page 2."""
    return _build_pdf(["FMCSA REGISTER REVOCATIONS", "MC-100000 SMITH TRUCKING CO 01/02/2024"])
