"""Utility modules for JAMB Estimate."""

from jamb_estimate.utils.currency_words import amount_to_words
from jamb_estimate.utils.formatting import format_compact, format_currency
from jamb_estimate.utils.logging_config import configure_logging

__all__ = [
    "amount_to_words",
    "configure_logging",
    "format_compact",
    "format_currency",
]
