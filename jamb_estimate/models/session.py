"""Session snapshot model for JAMB Estimate.

The estimate step writes one versioned snapshot; checkout reads it back so the
two surfaces never recompute independently.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from jamb_estimate.models.estimate import EstimateTotals


SNAPSHOT_SCHEMA_VERSION = 1


class EstimateSnapshot(BaseModel):
    """Frozen hand-off from the estimate step to checkout."""

    schema_version: int = Field(default=SNAPSHOT_SCHEMA_VERSION)
    flow: str = Field(default="calculate", description="calculate | rooms | packages | emergency")
    selection: Dict[str, Dict[str, float]] = Field(
        default_factory=dict,
        description="group -> service id -> quantity",
    )
    finishing_selections: Dict[str, Dict[str, str]] = Field(
        default_factory=dict,
        description="service id -> material sub-group -> external id",
    )
    customer_supplied: Dict[str, List[str]] = Field(default_factory=dict)
    calculation_results: Dict[str, dict] = Field(
        default_factory=dict,
        description="service id -> effective result in wire form",
    )
    selected_time: Optional[str] = None
    totals: EstimateTotals = Field(default_factory=EstimateTotals)
    estimate_number: str = ""
    zipcode: str = ""
    state: str = ""
    address: str = ""
    description: str = ""
    photos: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
