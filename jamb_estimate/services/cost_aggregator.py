"""Cost Aggregator for JAMB Estimate.

Pure functions turning a selection plus per-service pricing results into the
estimate totals and the numbered section -> category -> service outline.

Stacking order:
    final_labor = labor_subtotal x time_coefficient   (labor only)
    fee on labor = final_labor x 15%
    fee on materials = materials_subtotal x 5%
    sum_before_tax = final_labor + materials + both fees
    tax = sum_before_tax x rate%
    final_total = sum_before_tax + tax

Amounts are not rounded here; rounding is a display concern.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import structlog

from jamb_estimate.models.estimate import (
    EstimateTotals,
    MaterialSpecEntry,
    ViewCategory,
    ViewLineItem,
    ViewMaterialLine,
    ViewSection,
)
from jamb_estimate.models.pricing import CalculationResult
from jamb_estimate.services.catalog_index import CatalogIndex

logger = structlog.get_logger(__name__)

# Platform constants, not configurable per request
LABOR_SERVICE_FEE_RATE = 0.15
MATERIALS_SERVICE_FEE_RATE = 0.05


# =============================================================================
# Totals
# =============================================================================


def stack_totals(
    labor_subtotal: float,
    materials_subtotal: float,
    time_coefficient: float = 1.0,
    tax_rate_percent: float = 0.0,
) -> EstimateTotals:
    """Apply time coefficient, service fees and tax to the two subtotals."""
    final_labor = labor_subtotal * time_coefficient
    fee_on_labor = final_labor * LABOR_SERVICE_FEE_RATE
    fee_on_materials = materials_subtotal * MATERIALS_SERVICE_FEE_RATE
    sum_before_tax = final_labor + materials_subtotal + fee_on_labor + fee_on_materials
    tax_amount = sum_before_tax * (tax_rate_percent / 100)

    return EstimateTotals(
        labor_subtotal=labor_subtotal,
        materials_subtotal=materials_subtotal,
        time_coefficient=time_coefficient,
        final_labor=final_labor,
        service_fee_on_labor=fee_on_labor,
        service_fee_on_materials=fee_on_materials,
        sum_before_tax=sum_before_tax,
        tax_rate_percent=tax_rate_percent,
        tax_amount=tax_amount,
        final_total=sum_before_tax + tax_amount,
    )


def aggregate_costs(
    selection: Iterable[str],
    results: Mapping[str, CalculationResult],
    time_coefficient: float = 1.0,
    tax_rate_percent: float = 0.0,
) -> EstimateTotals:
    """Totals of an estimate.

    Args:
        selection: Selected service ids (a mapping of id -> quantity works
            too). An id listed more than once is charged once per listing.
        results: Effective pricing result per service. Services without a
            known result contribute nothing.
        time_coefficient: Labor multiplier from the chosen service date.
        tax_rate_percent: Jurisdiction sales tax in percent.

    Returns:
        EstimateTotals with every intermediate amount.
    """
    service_ids = list(selection)
    labor_subtotal = 0.0
    materials_subtotal = 0.0
    for service_id in service_ids:
        result = results.get(service_id)
        if result is None:
            continue
        labor_subtotal += result.labor_cost
        materials_subtotal += result.material_cost

    totals = stack_totals(labor_subtotal, materials_subtotal, time_coefficient, tax_rate_percent)
    logger.debug(
        "estimate_aggregated",
        services=len(service_ids),
        priced=sum(1 for sid in service_ids if sid in results),
        final_total=totals.final_total,
    )
    return totals


# =============================================================================
# Outline
# =============================================================================


def number_outline(sections: List[ViewSection]) -> List[ViewSection]:
    """Assign outline numbers (1, 1.1, 1.1.1, ...) in place and return the list."""
    for s_index, section in enumerate(sections, start=1):
        section.number = str(s_index)
        for c_index, category in enumerate(section.categories, start=1):
            category.number = f"{s_index}.{c_index}"
            for i_index, item in enumerate(category.items, start=1):
                item.number = f"{s_index}.{c_index}.{i_index}"
    return sections


def _view_lines(result: Optional[CalculationResult]) -> List[ViewMaterialLine]:
    if result is None:
        return []
    return [
        ViewMaterialLine(
            name=line.name,
            external_id=line.external_id,
            unit_cost=line.unit_cost,
            quantity=line.quantity,
            line_cost=line.line_cost,
            customer_supplied=line.customer_supplied,
        )
        for line in result.material_lines
    ]


def _service_rank(catalog: CatalogIndex, category_id: str, service_id: str) -> int:
    ids = [service.id for service in catalog.services_of(category_id)]
    return ids.index(service_id) if service_id in ids else len(ids)


def build_breakdown(
    selection: Mapping[str, float],
    results: Mapping[str, CalculationResult],
    catalog: CatalogIndex,
) -> List[ViewSection]:
    """Group selected services into numbered sections and categories.

    Sections and categories follow catalog order; ids the catalog does not
    know land in the "Unknown Section" bucket at the end. Empty groups never
    appear. Selected services without a result are listed unpriced.
    """
    by_category: Dict[str, List[Tuple[int, ViewLineItem]]] = {}
    for position, (service_id, quantity) in enumerate(selection.items()):
        category = catalog.category_of(service_id)
        service = catalog.get_service(service_id)
        result = results.get(service_id)

        item = ViewLineItem(
            service_id=service_id,
            label=service.title if service else service_id,
            description=service.description if service else "",
            quantity=quantity,
            unit=service.unit_of_measurement if service else "each",
            labor_cost=result.labor_cost if result else 0.0,
            material_cost=result.material_cost if result else 0.0,
            material_lines=_view_lines(result),
            priced=result is not None,
        )
        rank = _service_rank(catalog, category.id, service_id) if service else position
        by_category.setdefault(category.id, []).append((rank, item))

    sections: Dict[str, ViewSection] = {}
    for category_id in sorted(by_category, key=catalog.category_rank):
        category = catalog.get_category(category_id)
        section_name = category.section if category else catalog.section_of(category_id).name
        title = category.title if category else catalog.category_of(category_id).title
        items = [item for _, item in sorted(by_category[category_id], key=lambda pair: pair[0])]

        section = sections.setdefault(section_name, ViewSection(name=section_name))
        section.categories.append(ViewCategory(category_id=category_id, title=title, items=items))

    ordered = sorted(sections.values(), key=lambda section: catalog.section_rank(section.name))
    return number_outline(ordered)


def materials_specification(items: Iterable[ViewLineItem]) -> List[MaterialSpecEntry]:
    """Materials grouped by name across all items, in first-seen order."""
    entries: Dict[str, MaterialSpecEntry] = {}
    for item in items:
        for line in item.material_lines:
            entry = entries.setdefault(line.name, MaterialSpecEntry(name=line.name))
            entry.total_quantity += line.quantity
            entry.total_cost += line.line_cost
    return list(entries.values())
