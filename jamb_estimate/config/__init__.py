"""JAMB Estimate configuration.

This package contains:
- settings: Environment variables and configuration
- errors: Custom exceptions and error codes
"""

from jamb_estimate.config.settings import settings
from jamb_estimate.config.errors import EstimateError

__all__ = [
    "settings",
    "EstimateError",
]
