import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List

from .config import INSURANCE_HEADERS, INSURANCE_TIMEOUT, INSURANCE_URL_TEMPLATE
from .fetcher import get_document

logger = logging.getLogger(__name__)

INSURANCE_TYPE_CODES = {'1': 'BI&PD', '2': 'CARGO', '3': 'BOND'}
INSURANCE_CLASS_CODES = {'P': 'PRIMARY', 'E': 'EXCESS'}


@dataclass(frozen=True)
class InsurancePolicy:
    dot: str
    carrier: str
    policy_number: str
    effective_date: str
    coverage_amount: str
    type: str
    policy_class: str

    def to_dict(self) -> Dict[str, str]:
        return {
            'dot': self.dot,
            'carrier': self.carrier,
            'policyNumber': self.policy_number,
            'effectiveDate': self.effective_date,
            'coverageAmount': self.coverage_amount,
            'type': self.type,
            'class': self.policy_class,
        }


def _first(record, *keys, default):
    for key in keys:
        if record.get(key):
            return record[key]
    return default


def format_coverage(raw) -> str:
    """750 -> "$750", 5000 -> "$5,000", 750000 -> "$750K"; non-numeric values pass through."""
    if raw == 'N/A':
        return raw
    try:
        amount = float(str(raw))
    except ValueError:
        return str(raw)
    if not math.isfinite(amount):
        return str(raw)
    if 0 < amount < 10000:
        return '$' + f"{amount:,.3f}".rstrip('0').rstrip('.')
    if amount >= 10000:
        thousands = Decimal(amount / 1000).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
        return f"${thousands}K"
    return str(raw)


def normalize_policy(record: Dict[str, Any], usdot: str) -> InsurancePolicy:
    carrier = _first(record, 'name_company', 'insurance_company', 'insurance_company_name', 'company_name',
                     default='NOT SPECIFIED')
    policy_number = _first(record, 'policy_no', 'policy_number', 'pol_num', default='N/A')
    effective = record.get('effective_date')
    effective_date = str(effective).split(' ')[0] if effective else 'N/A'
    coverage = _first(record, 'max_cov_amount', 'coverage_to', 'coverage_amount', default='N/A')

    ins_type = str(record.get('ins_type_code') or 'N/A')
    ins_type = INSURANCE_TYPE_CODES.get(ins_type, ins_type)
    ins_class = str(record.get('ins_class_code') or 'N/A').upper()
    ins_class = INSURANCE_CLASS_CODES.get(ins_class, ins_class)

    return InsurancePolicy(
        dot=usdot,
        carrier=str(carrier).upper(),
        policy_number=str(policy_number).upper(),
        effective_date=effective_date,
        coverage_amount=format_coverage(coverage),
        type=ins_type.upper(),
        policy_class=ins_class,
    )


def policy_records(payload) -> List[Dict[str, Any]]:
    # searchcarriers answers either {"data": [...]} or a bare list
    if isinstance(payload, dict) and payload.get('data'):
        records = payload['data']
    elif isinstance(payload, list):
        records = payload
    else:
        records = []
    if not isinstance(records, list):
        return []
    return [r for r in records if isinstance(r, dict)]


def parse_insurance(payload, usdot) -> Dict[str, Any]:
    policies = [normalize_policy(record, usdot).to_dict() for record in policy_records(payload)]
    return {'policies': policies, 'raw': payload}


async def fetch_insurance(usdot):
    url = INSURANCE_URL_TEMPLATE.format(usdot)
    logger.info(f"[INSURANCE] Fetching insurance filings for USDOT {usdot}")
    document = await get_document(url, INSURANCE_HEADERS, INSURANCE_TIMEOUT)
    result = parse_insurance(document.json(), usdot)
    logger.info(f"[INSURANCE] {len(result['policies'])} policies for USDOT {usdot}")
    return result
