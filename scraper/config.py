import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()

# --- Endpoints ---
REGISTER_URL = "https://li-public.fmcsa.dot.gov/LIVIEW/PKG_register.prc_reg_detail"
REGISTER_LIST_URL = "https://li-public.fmcsa.dot.gov/LIVIEW/PKG_REGISTER.prc_reg_list"
REGISTER_PDF_URL_TEMPLATE = "https://li-public.fmcsa.dot.gov/lihtml/rptspdf/LI_REGISTER{}.PDF"
SAFER_URL_TEMPLATE = (
    "https://safer.fmcsa.dot.gov/query.asp?searchtype=ANY&query_type=queryCarrierSnapshot"
    "&query_param=MC_MX&query_string={}"
)
SMS_REGISTRATION_URL_TEMPLATE = "https://ai.fmcsa.dot.gov/SMS/Carrier/{}/CarrierRegistration.aspx"
SMS_PROFILE_URL_TEMPLATE = "https://ai.fmcsa.dot.gov/SMS/Carrier/{}/CompleteProfile.aspx"
INSURANCE_URL_TEMPLATE = "https://searchcarriers.com/company/{}/insurances"

# --- Timeouts (ms, as playwright expects) ---
REGISTER_TIMEOUT = 30000
REGISTER_PDF_TIMEOUT = 60000
SAFER_TIMEOUT = 15000
SMS_EMAIL_TIMEOUT = 10000
SMS_PROFILE_TIMEOUT = 15000
INSURANCE_TIMEOUT = 15000

# --- Browser-impersonating headers ---
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
SHORT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

REGISTER_HEADERS = {
    "User-Agent": USER_AGENT,
    "Referer": REGISTER_LIST_URL,
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7",
    "Accept-Language": "en-US,en;q=0.9",
    "Origin": "https://li-public.fmcsa.dot.gov",
}
PDF_HEADERS = {"User-Agent": SHORT_USER_AGENT}
SAFER_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}
SMS_EMAIL_HEADERS = {"User-Agent": SHORT_USER_AGENT}
SMS_PROFILE_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}
INSURANCE_HEADERS = {"User-Agent": SHORT_USER_AGENT, "Accept": "application/json"}

# --- Runtime settings (.env / environment) ---
PORT = int(os.getenv("PORT", "3001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
REGISTER_STORE_PATH = os.getenv("REGISTER_STORE_PATH", "fmcsa_register_entries.json")
REGISTER_API_URL = os.getenv("REGISTER_API_URL", "http://localhost:3001")

# --- Register layout ---
DEFAULT_CATEGORY = "MISCELLANEOUS"

# (keyword searched in the upper-cased lookback window, category label)
REGISTER_CATEGORIES: Tuple[Tuple[str, str], ...] = (
    ("NAME CHANGE", "NAME CHANGE"),
    ("CERTIFICATE, PERMIT, LICENSE", "CERTIFICATE, PERMIT, LICENSE"),
    ("CERTIFICATE OF REGISTRATION", "CERTIFICATE OF REGISTRATION"),
    ("DISMISSAL", "DISMISSAL"),
    ("WITHDRAWAL", "WITHDRAWAL"),
    ("REVOCATION", "REVOCATION"),
    ("TRANSFERS", "TRANSFERS"),
    ("GRANT DECISION NOTICES", "GRANT DECISION NOTICES"),
)

# (category label, section header as printed in the PDF), in document order
REGISTER_PDF_SECTIONS: Tuple[Tuple[str, str], ...] = (
    ("NAME CHANGE", "NAME CHANGES"),
    ("CERTIFICATE, PERMIT, LICENSE", "CERTIFICATES, PERMITS & LICENSES"),
    ("CERTIFICATE OF REGISTRATION", "CERTIFICATES OF REGISTRATION"),
    ("DISMISSAL", "DISMISSALS"),
    ("WITHDRAWAL", "WITHDRAWAL OF APPLICATION"),
    ("REVOCATION", "REVOCATIONS"),
    ("TRANSFERS", "TRANSFERS"),
    ("GRANT DECISION NOTICES", "GRANT DECISION NOTICES"),
)

BASIC_CATEGORIES: Tuple[str, ...] = (
    "Unsafe Driving",
    "Crash Indicator",
    "HOS Compliance",
    "Vehicle Maintenance",
    "Controlled Substances",
    "Hazmat Compliance",
    "Driver Fitness",
)


@dataclass(frozen=True)
class RegisterFormat:
    """Layout tables for one edition of the FMCSA Register.

    Passed into the extractors so a change in the agency's wording only
    needs a new instance, not new logic.
    """
    categories: Tuple[Tuple[str, str], ...] = REGISTER_CATEGORIES
    pdf_sections: Tuple[Tuple[str, str], ...] = REGISTER_PDF_SECTIONS
    default_category: str = DEFAULT_CATEGORY
    lookback_chars: int = 500
    max_title_length: int = 500
    unsectioned_fallback: bool = True

    @property
    def category_labels(self) -> Tuple[str, ...]:
        labels = []
        for _, label in self.categories:
            if label not in labels:
                labels.append(label)
        return tuple(labels)


DEFAULT_FORMAT = RegisterFormat()
