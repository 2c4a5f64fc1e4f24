"""Sales tax rate lookup for JAMB Estimate."""

from typing import Optional

import structlog

from jamb_estimate.data.tax_rates import CANADA_SALES_TAX_RATES, US_SALES_TAX_RATES

logger = structlog.get_logger(__name__)


def _match(table: dict, key: str) -> Optional[float]:
    for code, row in table.items():
        name, combined = row[0], row[-1]
        if key == code.lower() or key == name.lower():
            return combined
    return None


def lookup_tax_rate(jurisdiction: Optional[str]) -> float:
    """Combined sales tax percent for a state or province.

    Matches the postal code ("CA") or full name ("California"),
    case-insensitively, against the US table and then the Canadian one.

    Returns:
        Rate in percent; 0.0 when the jurisdiction is unknown or blank.
    """
    key = (jurisdiction or "").strip().lower()
    if not key:
        return 0.0

    for table in (US_SALES_TAX_RATES, CANADA_SALES_TAX_RATES):
        rate = _match(table, key)
        if rate is not None:
            return rate

    logger.info("tax_rate_not_found", jurisdiction=jurisdiction)
    return 0.0
