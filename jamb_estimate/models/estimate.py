"""Estimate totals and view models for JAMB Estimate.

The view model is the single "section -> category -> line item" shape that
every surface (summary, checkout, print) renders, whether it was built from a
live estimate or from a persisted composite order.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field


# =============================================================================
# TOTALS
# =============================================================================


class EstimateTotals(BaseModel):
    """All amounts of an estimate, unrounded.

    Rounding happens at display time so the stacking identities hold exactly:
    final_total == final_labor + materials_subtotal + fees + tax_amount.
    """

    labor_subtotal: float = 0.0
    materials_subtotal: float = 0.0
    time_coefficient: float = 1.0
    final_labor: float = 0.0
    service_fee_on_labor: float = 0.0
    service_fee_on_materials: float = 0.0
    sum_before_tax: float = 0.0
    tax_rate_percent: float = 0.0
    tax_amount: float = 0.0
    final_total: float = 0.0

    @property
    def time_adjustment(self) -> float:
        """Signed surcharge (> 0) or discount (< 0) from the time coefficient."""
        return self.final_labor - self.labor_subtotal

    @property
    def has_time_adjustment(self) -> bool:
        return self.time_coefficient != 1

    @property
    def service_fees(self) -> float:
        return self.service_fee_on_labor + self.service_fee_on_materials

    def to_session_dict(self) -> Dict[str, float]:
        return self.model_dump()


# =============================================================================
# VIEW MODEL
# =============================================================================


class ViewSource(str, Enum):
    """Where a view model came from."""

    LIVE = "live"
    PERSISTED = "persisted"


class ViewMaterialLine(BaseModel):
    """A material under a line item."""

    name: str
    external_id: str = ""
    unit_cost: float = 0.0
    quantity: float = 0.0
    line_cost: float = 0.0
    customer_supplied: bool = False


class ViewLineItem(BaseModel):
    """One priced service inside a category node."""

    number: str = Field(default="", description="Outline number, e.g. '1.2.3'")
    service_id: str
    label: str
    description: str = ""
    quantity: float = 1.0
    unit: str = "each"
    labor_cost: float = 0.0
    material_cost: float = 0.0
    material_lines: List[ViewMaterialLine] = Field(default_factory=list)
    priced: bool = Field(default=True, description="False while no pricing result is known")

    @computed_field
    @property
    def line_total(self) -> float:
        return self.labor_cost + self.material_cost


class ViewCategory(BaseModel):
    """Category node of the outline."""

    number: str = ""
    category_id: str
    title: str
    items: List[ViewLineItem] = Field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(item.line_total for item in self.items)


class ViewSection(BaseModel):
    """Section node of the outline."""

    number: str = ""
    name: str
    categories: List[ViewCategory] = Field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(category.total for category in self.categories)


class MaterialSpecEntry(BaseModel):
    """Materials specification row: one material name across all works."""

    name: str
    total_quantity: float = 0.0
    total_cost: float = 0.0


class OrderHeader(BaseModel):
    """Non-monetary details shown at the top of every surface."""

    reference: str = Field(default="", description="Estimate number or order code")
    address: str = ""
    description: str = ""
    selected_date: str = ""
    photos: List[str] = Field(default_factory=list)


class OrderViewModel(BaseModel):
    """Shared rendering shape for live estimates and persisted orders."""

    source: ViewSource
    header: OrderHeader = Field(default_factory=OrderHeader)
    sections: List[ViewSection] = Field(default_factory=list)
    totals: EstimateTotals = Field(default_factory=EstimateTotals)
    total_in_words: str = ""
    materials_specification: List[MaterialSpecEntry] = Field(default_factory=list)

    def line_items(self) -> List[ViewLineItem]:
        """Flattened line items in outline order."""
        return [
            item
            for section in self.sections
            for category in section.categories
            for item in category.items
        ]

    @property
    def line_items_total(self) -> float:
        return sum(item.line_total for item in self.line_items())

    def find_item(self, service_id: str) -> Optional[ViewLineItem]:
        for item in self.line_items():
            if item.service_id == service_id:
                return item
        return None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
