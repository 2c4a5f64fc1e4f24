"""Temporary estimate number, e.g. "NY-10006-20251122-1530".

Shown to the user until an order is confirmed and gets its real code. It is
not unique and is never used as a storage or lookup key.
"""

from datetime import datetime
from typing import Optional

from jamb_estimate.data.tax_rates import CANADA_SALES_TAX_RATES, US_SALES_TAX_RATES

MISSING_REGION_BLOCK = "??-00000"


def region_code(jurisdiction: str) -> str:
    """Two-letter region code for a state / province code or name."""
    value = (jurisdiction or "").strip()
    if not value:
        return ""
    upper = value.upper()
    for table in (US_SALES_TAX_RATES, CANADA_SALES_TAX_RATES):
        if upper in table:
            return upper
        for code, row in table.items():
            if row[0].upper() == upper:
                return code
    return value.split(" ")[0][:2].upper()


def build_estimate_number(jurisdiction: str, postal_code: str, now: Optional[datetime] = None) -> str:
    """Build "REGION-POSTAL-YYYYMMDD-HHMM".

    Args:
        jurisdiction: State / province code or name (or city when that is all
            that is known).
        postal_code: ZIP or postal code.
        now: Timestamp to stamp (defaults to the current local time).
    """
    now = now or datetime.now()
    region = region_code(jurisdiction)
    postal = (postal_code or "").strip()
    block = f"{region}-{postal}" if region and postal else MISSING_REGION_BLOCK
    return f"{block}-{now:%Y%m%d}-{now:%H%M}"
