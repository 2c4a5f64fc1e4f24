"""Checkout order payload for JAMB Estimate.

Turns the selection, the effective pricing results and the computed totals
into the order data handed to order creation (``worksData`` and friends),
and into the request body the order service expects.
"""

from typing import Any, Dict, List, Mapping, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

from jamb_estimate.models.catalog import ServiceId
from jamb_estimate.models.estimate import EstimateTotals
from jamb_estimate.models.pricing import CalculationResult
from jamb_estimate.models.session import EstimateSnapshot
from jamb_estimate.services.catalog_index import CatalogIndex

logger = structlog.get_logger(__name__)

FLOW_WORK_TYPES = {
    "calculate": "services",
    "rooms": "rooms",
    "packages": "packages",
    "emergency": "emergency",
}


def _money(value: float) -> str:
    return f"{value:.2f}"


class CheckoutMaterial(BaseModel):
    """Material of a work in the order payload."""

    model_config = ConfigDict(populate_by_name=True)

    external_id: str
    name: str = ""
    quantity: float = 0.0
    cost_per_unit: float = Field(default=0.0, alias="costPerUnit")
    total: float = 0.0


class CheckoutWork(BaseModel):
    """One work (selected service) in the order payload."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = "services"
    code: str = Field(..., description="Dotted service id")
    unit_of_measurement: str = Field(default="each", alias="unitOfMeasurement")
    quantity: float
    labor_cost: float = Field(default=0.0, alias="laborCost")
    materials_cost: float = Field(default=0.0, alias="materialsCost")
    total: float = 0.0
    materials: List[CheckoutMaterial] = Field(default_factory=list)


class CheckoutOrder(BaseModel):
    """Order data collected at checkout."""

    model_config = ConfigDict(populate_by_name=True)

    zipcode: str = ""
    address: str = ""
    description: str = ""
    selected_time: str = Field(default="", alias="selectedTime")
    time_coefficient: float = Field(default=1.0, alias="timeCoefficient")
    labor_subtotal: float = Field(default=0.0, alias="laborSubtotal")
    sum_before_tax: float = Field(default=0.0, alias="sumBeforeTax")
    final_total: float = Field(default=0.0, alias="finalTotal")
    tax_rate: float = Field(default=0.0, alias="taxRate")
    tax_amount: float = Field(default=0.0, alias="taxAmount")
    service_fee_on_labor: float = Field(default=0.0, alias="serviceFeeOnLabor")
    service_fee_on_materials: float = Field(default=0.0, alias="serviceFeeOnMaterials")
    works_data: List[CheckoutWork] = Field(default_factory=list, alias="worksData")

    def to_payload(self) -> Dict[str, Any]:
        """camelCase order data (``worksData`` etc.)."""
        return self.model_dump(by_alias=True)

    def to_create_body(self, user_token: str, photo_urls: Optional[List[str]] = None) -> Dict[str, Any]:
        """Body of the order-creation request; money as 2-decimal strings."""
        return {
            "zipcode": self.zipcode,
            "user_token": user_token,
            "common": {
                "address": self.address,
                "photos": list(photo_urls or []),
                "description": self.description,
                "selected_date": self.selected_time,
                "date_coefficient": _money(self.time_coefficient),
            },
            "works": [
                {
                    "type": work.type,
                    "code": work.code,
                    "unit_of_measurement": work.unit_of_measurement,
                    "work_count": f"{work.quantity:g}",
                    "labor_cost": _money(work.labor_cost),
                    "materials_cost": _money(work.materials_cost),
                    "total": _money(work.total),
                    "materials": [
                        {
                            "external_id": material.external_id,
                            "quantity": material.quantity,
                            "cost_per_unit": _money(material.cost_per_unit),
                            "total": _money(material.total),
                        }
                        for material in work.materials
                    ],
                }
                for work in self.works_data
            ],
            "tax_rate": _money(self.tax_rate),
            "tax_amount": _money(self.tax_amount),
            "date_surcharge": _money(self.labor_subtotal * (self.time_coefficient - 1)),
            "service_fee_on_labor": _money(self.service_fee_on_labor),
            "service_fee_on_materials": _money(self.service_fee_on_materials),
            "subtotal": _money(self.sum_before_tax),
            "total": _money(self.final_total),
        }


def build_checkout_order(
    selection: Mapping[str, float],
    results: Mapping[str, CalculationResult],
    totals: EstimateTotals,
    catalog: CatalogIndex,
    flow: str = "calculate",
    zipcode: str = "",
    address: str = "",
    description: str = "",
    selected_time: Optional[str] = None,
) -> CheckoutOrder:
    """Order data for the current estimate.

    Services without a known result, or unknown to the catalog, are skipped.
    """
    work_type = FLOW_WORK_TYPES.get(flow, "services")
    works = []
    for service_id, quantity in selection.items():
        service = catalog.get_service(service_id)
        result = results.get(service_id)
        if service is None or result is None:
            logger.info("checkout_work_skipped", service_id=service_id, known=service is not None)
            continue
        works.append(
            CheckoutWork(
                type=work_type,
                code=ServiceId.parse(service_id).dotted,
                unit_of_measurement=service.unit_of_measurement,
                quantity=quantity,
                labor_cost=result.labor_cost,
                materials_cost=result.material_cost,
                total=result.total,
                materials=[
                    CheckoutMaterial(
                        external_id=line.external_id,
                        name=line.name,
                        quantity=line.quantity,
                        cost_per_unit=line.unit_cost,
                        total=line.line_cost,
                    )
                    for line in result.material_lines
                ],
            )
        )

    return CheckoutOrder(
        zipcode=zipcode,
        address=address,
        description=description,
        selected_time=selected_time or "",
        time_coefficient=totals.time_coefficient,
        labor_subtotal=totals.labor_subtotal,
        sum_before_tax=totals.sum_before_tax,
        final_total=totals.final_total,
        tax_rate=totals.tax_rate_percent,
        tax_amount=totals.tax_amount,
        service_fee_on_labor=totals.service_fee_on_labor,
        service_fee_on_materials=totals.service_fee_on_materials,
        works_data=works,
    )


def checkout_order_from_snapshot(snapshot: EstimateSnapshot, catalog: CatalogIndex) -> CheckoutOrder:
    """Order data from the estimate snapshot, reusing its stored totals."""
    selection: Dict[str, float] = {}
    for entries in snapshot.selection.values():
        selection.update(entries)
    results = {
        service_id: CalculationResult.model_validate(raw)
        for service_id, raw in snapshot.calculation_results.items()
    }
    return build_checkout_order(
        selection,
        results,
        snapshot.totals,
        catalog,
        flow=snapshot.flow,
        zipcode=snapshot.zipcode,
        address=snapshot.address,
        description=snapshot.description,
        selected_time=snapshot.selected_time,
    )
