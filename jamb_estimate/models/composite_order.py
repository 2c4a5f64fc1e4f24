"""Composite order models for JAMB Estimate.

A composite order is a confirmed estimate persisted by the order service.
The engine only reads it (and forwards update payloads). Money fields arrive
as strings and are coerced to floats here.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jamb_estimate.models.catalog import ServiceId


def _money(value: Any) -> Any:
    if value is None:
        return 0.0
    if isinstance(value, str):
        return value.replace(",", "").strip() or 0.0
    return value


class OrderMaterial(BaseModel):
    """One material stored under a persisted work."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    external_id: str = ""
    name: str = ""
    quantity: float = 0.0
    cost_per_unit: float = 0.0
    cost: float = Field(default=0.0, description="Line cost (unit cost x quantity)")
    photo: Optional[str] = None

    @field_validator("quantity", "cost_per_unit", "cost", mode="before")
    @classmethod
    def coerce_money(cls, value: Any) -> Any:
        return _money(value)


class OrderWork(BaseModel):
    """One persisted line item. Only the combined total is stored."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    code: str = Field(..., description="Dotted service id, e.g. '1.2.3'")
    name: str = ""
    type: str = "services"
    unit_of_measurement: str = "each"
    work_count: float = Field(default=1.0, description="Persisted quantity")
    total: float = 0.0
    description: Optional[str] = None
    photo: Optional[str] = None
    materials: List[OrderMaterial] = Field(default_factory=list)

    @field_validator("work_count", "total", mode="before")
    @classmethod
    def coerce_money(cls, value: Any) -> Any:
        return _money(value)

    @field_validator("work_count")
    @classmethod
    def default_count(cls, value: float) -> float:
        return value if value > 0 else 1.0

    @field_validator("materials", mode="before")
    @classmethod
    def default_materials(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []

    @property
    def service_id(self) -> ServiceId:
        """Hyphenated structural id recovered from the dotted code."""
        return ServiceId.from_dotted(self.code)

    @property
    def materials_cost(self) -> float:
        return sum(m.cost for m in self.materials)

    @property
    def labor_cost(self) -> float:
        """Back-derived: total minus the stored materials."""
        return self.total - self.materials_cost


class OrderCommon(BaseModel):
    """Order-wide details captured at checkout."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    address: str = ""
    description: str = ""
    selected_date: str = ""
    date_coefficient: float = 1.0
    photos: List[str] = Field(default_factory=list)

    @field_validator("date_coefficient", mode="before")
    @classmethod
    def coerce_coefficient(cls, value: Any) -> Any:
        if value in (None, ""):
            return 1.0
        return _money(value)

    @field_validator("photos", mode="before")
    @classmethod
    def default_photos(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []

    @field_validator("address", "description", "selected_date", mode="before")
    @classmethod
    def default_text(cls, value: Any) -> Any:
        return "" if value is None else value


class CompositeOrder(BaseModel):
    """A frozen, persisted order as returned by the order service."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    code: str
    user_id: Optional[int] = None
    zipcode: str = ""
    subtotal: float = 0.0
    tax_rate: float = 0.0
    tax_amount: float = 0.0
    service_fee_on_labor: float = 0.0
    service_fee_on_materials: float = 0.0
    common: OrderCommon = Field(default_factory=OrderCommon)
    works: List[OrderWork] = Field(default_factory=list)

    @field_validator(
        "subtotal", "tax_rate", "tax_amount", "service_fee_on_labor", "service_fee_on_materials",
        mode="before",
    )
    @classmethod
    def coerce_money(cls, value: Any) -> Any:
        return _money(value)

    @field_validator("common", mode="before")
    @classmethod
    def default_common(cls, value: Any) -> Any:
        return value if value is not None else {}

    @field_validator("zipcode", mode="before")
    @classmethod
    def default_zip(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    @property
    def final_total(self) -> float:
        return self.subtotal + self.tax_amount


class CompositeOrderUpdate(BaseModel):
    """Update payload forwarded to the order service.

    The service owns the shape; known keys are typed and anything else is
    passed through unchanged.
    """

    model_config = ConfigDict(extra="allow")

    token: str
    order_code: str

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
