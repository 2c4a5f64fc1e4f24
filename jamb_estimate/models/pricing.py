"""Pricing models for JAMB Estimate.

Wire shapes of the remote pricing service (finishing materials and the
per-service calculation) and their engine-side counterparts.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _coerce_money(value: Any) -> Any:
    """Remote money fields arrive as strings; blanks mean zero."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        return cleaned or 0.0
    return value


# =============================================================================
# FINISHING MATERIALS
# =============================================================================


class FinishingMaterialOption(BaseModel):
    """A substitutable material choice for a service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    external_id: str
    name: str
    cost_per_unit: float = Field(
        default=0.0,
        validation_alias=AliasChoices("cost_per_unit", "cost"),
        description="Cost of one unit of the material",
    )
    unit_of_measurement: str = "each"
    image: Optional[str] = None

    @field_validator("cost_per_unit", mode="before")
    @classmethod
    def coerce_cost(cls, value: Any) -> Any:
        return _coerce_money(value)


class FinishingMaterialSet(BaseModel):
    """Candidate materials for one service, partitioned into named sub-groups."""

    sections: Dict[str, List[FinishingMaterialOption]] = Field(default_factory=dict)

    @field_validator("sections", mode="before")
    @classmethod
    def drop_non_list_groups(cls, value: Any) -> Any:
        """The service sometimes sends null for an empty group."""
        if not isinstance(value, dict):
            return {}
        return {name: options for name, options in value.items() if isinstance(options, list)}

    def default_selection(self) -> Dict[str, str]:
        """First candidate of every non-empty sub-group."""
        return {
            group: options[0].external_id
            for group, options in self.sections.items()
            if options
        }

    def find(self, external_id: str) -> Optional[Tuple[str, FinishingMaterialOption]]:
        """Locate a material by external id.

        Returns:
            (group name, option) or None if no group offers it.
        """
        for group, options in self.sections.items():
            for option in options:
                if option.external_id == external_id:
                    return group, option
        return None

    @property
    def is_empty(self) -> bool:
        return not any(self.sections.values())


# =============================================================================
# CALCULATION RESULT
# =============================================================================


class MaterialLine(BaseModel):
    """One material line of a calculation result."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = ""
    external_id: str = ""
    unit_cost: float = Field(default=0.0, validation_alias=AliasChoices("unit_cost", "cost_per_unit"))
    quantity: float = 0.0
    line_cost: float = Field(default=0.0, validation_alias=AliasChoices("line_cost", "cost"))
    customer_supplied: bool = Field(default=False, description="Customer sources it; cost zeroed")

    @field_validator("unit_cost", "line_cost", "quantity", mode="before")
    @classmethod
    def coerce_amounts(cls, value: Any) -> Any:
        return _coerce_money(value)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "external_id": self.external_id,
            "cost_per_unit": self.unit_cost,
            "quantity": self.quantity,
            "cost": self.line_cost,
            "customer_supplied": self.customer_supplied,
        }


class CalculationResult(BaseModel):
    """Pricing outcome for one selected service.

    ``total`` is always derived from labor + materials, never stored.
    ``derived`` marks a locally projected result (finishing materials removed)
    as opposed to one fetched from the pricing service.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    labor_cost: float = Field(default=0.0, validation_alias=AliasChoices("labor_cost", "work_cost"))
    material_cost: float = 0.0
    material_lines: List[MaterialLine] = Field(
        default_factory=list,
        validation_alias=AliasChoices("material_lines", "materials"),
    )
    derived: bool = False

    @field_validator("labor_cost", "material_cost", mode="before")
    @classmethod
    def coerce_costs(cls, value: Any) -> Any:
        return _coerce_money(value)

    @field_validator("material_lines", mode="before")
    @classmethod
    def default_lines(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []

    @property
    def total(self) -> float:
        return self.labor_cost + self.material_cost

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "CalculationResult":
        """Build from a /calculate response body."""
        return cls.model_validate(
            {
                "work_cost": data.get("work_cost"),
                "material_cost": data.get("material_cost"),
                "materials": data.get("materials") or [],
            }
        )

    def without_materials(self) -> "CalculationResult":
        """Projection used when the customer supplies the finishing materials."""
        return CalculationResult(labor_cost=self.labor_cost, material_cost=0.0, material_lines=[], derived=True)

    def to_wire(self) -> Dict[str, Any]:
        """Session / wire form, keeping the remote service's field names."""
        return {
            "work_cost": self.labor_cost,
            "material_cost": self.material_cost,
            "materials": [line.to_wire() for line in self.material_lines],
            "total": self.total,
        }


# =============================================================================
# REQUEST SIDE
# =============================================================================


class Location(BaseModel):
    """Where the work happens. Only zipcode and country drive pricing."""

    zipcode: str = ""
    country: str = ""
    state: str = ""
    city: str = ""
    address: str = ""

    @field_validator("zipcode", "country", "state", "city", "address", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else ("" if value is None else value)


class PricingRequest(BaseModel):
    """Body of the remote /calculate call."""

    work_code: str = Field(..., description="Dotted service id, e.g. '1.2.3'")
    zipcode: str
    unit_of_measurement: str
    square: float = Field(..., gt=0, description="Quantity in the service's unit")
    finishing_materials: List[str] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()
