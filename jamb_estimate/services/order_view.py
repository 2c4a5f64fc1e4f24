"""Order View Composer for JAMB Estimate.

Normalizes a live estimate, a saved estimate snapshot or a persisted
composite order into one ``OrderViewModel`` so the summary, checkout and
print surfaces render through the same code.

For persisted orders the category of a work is re-derived from its code via
the Catalog Index (the category id is the join key, not the stored title),
and labor is back-derived as ``work.total - sum(material costs)``.
"""

from typing import Dict, Iterable, List, Mapping, Optional

import structlog

from jamb_estimate.models.composite_order import CompositeOrder, OrderWork
from jamb_estimate.models.estimate import (
    EstimateTotals,
    OrderHeader,
    OrderViewModel,
    ViewCategory,
    ViewLineItem,
    ViewMaterialLine,
    ViewSection,
    ViewSource,
)
from jamb_estimate.models.pricing import CalculationResult
from jamb_estimate.models.session import EstimateSnapshot
from jamb_estimate.services.catalog_index import CatalogIndex
from jamb_estimate.services.cost_aggregator import (
    aggregate_costs,
    build_breakdown,
    materials_specification,
    number_outline,
)
from jamb_estimate.utils.currency_words import amount_to_words

logger = structlog.get_logger(__name__)

# Tolerance when checking stored order totals against the works
SUBTOTAL_TOLERANCE = 0.01


class OrderViewComposer:
    """Builds view models from live or persisted data."""

    def __init__(self, catalog: CatalogIndex):
        self.catalog = catalog

    # -------------------------------------------------------------------------
    # Live estimate
    # -------------------------------------------------------------------------

    def from_live_estimate(
        self,
        selection: Mapping[str, float],
        results: Mapping[str, CalculationResult],
        time_coefficient: float = 1.0,
        tax_rate_percent: float = 0.0,
        header: Optional[OrderHeader] = None,
        occurrences: Optional[Iterable[str]] = None,
    ) -> OrderViewModel:
        """View model of the estimate being built.

        Args:
            selection: Merged service id -> quantity.
            results: Effective pricing results.
            time_coefficient: Labor multiplier of the chosen date.
            tax_rate_percent: Sales tax of the jurisdiction.
            header: Estimate number, address and other details.
            occurrences: Service ids once per group holding them, when the
                flow partitions the selection. Defaults to the merged ids.
        """
        charged = selection if occurrences is None else occurrences
        totals = aggregate_costs(charged, results, time_coefficient, tax_rate_percent)
        return self._assemble(
            ViewSource.LIVE,
            build_breakdown(selection, results, self.catalog),
            totals,
            header,
        )

    def from_snapshot(self, snapshot: EstimateSnapshot) -> OrderViewModel:
        """View model of a saved estimate, reusing its stored totals."""
        selection: Dict[str, float] = {}
        for entries in snapshot.selection.values():
            selection.update(entries)
        results = {
            service_id: CalculationResult.model_validate(raw)
            for service_id, raw in snapshot.calculation_results.items()
        }
        header = OrderHeader(
            reference=snapshot.estimate_number,
            address=snapshot.address,
            description=snapshot.description,
            selected_date=snapshot.selected_time or "",
            photos=list(snapshot.photos),
        )
        return self._assemble(
            ViewSource.LIVE,
            build_breakdown(selection, results, self.catalog),
            snapshot.totals,
            header,
        )

    # -------------------------------------------------------------------------
    # Persisted order
    # -------------------------------------------------------------------------

    def _work_item(self, work: OrderWork) -> ViewLineItem:
        service_id = work.service_id
        service = self.catalog.get_service(service_id)
        label = work.name or (service.title if service else str(service_id))
        return ViewLineItem(
            service_id=str(service_id),
            label=label,
            description=work.description or (service.description if service else ""),
            quantity=work.work_count,
            unit=work.unit_of_measurement,
            labor_cost=work.labor_cost,
            material_cost=work.materials_cost,
            material_lines=[
                ViewMaterialLine(
                    name=material.name,
                    external_id=material.external_id,
                    unit_cost=material.cost_per_unit,
                    quantity=material.quantity,
                    line_cost=material.cost,
                )
                for material in work.materials
            ],
        )

    def from_persisted_order(self, order: CompositeOrder) -> OrderViewModel:
        """View model of a confirmed order.

        Sections and categories appear in the order their first work appears.
        The stored subtotal, fees and tax are shown as stored; the time
        adjustment is recomputed from the stored date coefficient.
        """
        sections: Dict[str, ViewSection] = {}
        categories: Dict[str, ViewCategory] = {}
        labor_subtotal = 0.0
        materials_subtotal = 0.0

        for work in order.works:
            category = self.catalog.category_of(work.service_id)
            section_name = category.section
            section = sections.get(section_name)
            if section is None:
                section = sections[section_name] = ViewSection(name=section_name)
            node = categories.get(category.id)
            if node is None:
                node = categories[category.id] = ViewCategory(category_id=category.id, title=category.title)
                section.categories.append(node)

            item = self._work_item(work)
            node.items.append(item)
            labor_subtotal += item.labor_cost
            materials_subtotal += item.material_cost

        coefficient = order.common.date_coefficient or 1.0
        final_labor = labor_subtotal * coefficient
        recomputed = (
            final_labor + materials_subtotal + order.service_fee_on_labor + order.service_fee_on_materials
        )
        if order.works and abs(recomputed - order.subtotal) > SUBTOTAL_TOLERANCE:
            logger.warning(
                "order_subtotal_mismatch",
                order_code=order.code,
                stored=order.subtotal,
                recomputed=round(recomputed, 2),
            )

        totals = EstimateTotals(
            labor_subtotal=labor_subtotal,
            materials_subtotal=materials_subtotal,
            time_coefficient=coefficient,
            final_labor=final_labor,
            service_fee_on_labor=order.service_fee_on_labor,
            service_fee_on_materials=order.service_fee_on_materials,
            sum_before_tax=order.subtotal,
            tax_rate_percent=order.tax_rate,
            tax_amount=order.tax_amount,
            final_total=order.final_total,
        )
        header = OrderHeader(
            reference=order.code,
            address=order.common.address,
            description=order.common.description,
            selected_date=order.common.selected_date,
            photos=list(order.common.photos),
        )
        return self._assemble(
            ViewSource.PERSISTED,
            number_outline(list(sections.values())),
            totals,
            header,
        )

    # -------------------------------------------------------------------------

    def _assemble(
        self,
        source: ViewSource,
        sections: List[ViewSection],
        totals: EstimateTotals,
        header: Optional[OrderHeader],
    ) -> OrderViewModel:
        items = [item for section in sections for category in section.categories for item in category.items]
        return OrderViewModel(
            source=source,
            header=header or OrderHeader(),
            sections=sections,
            totals=totals,
            total_in_words=amount_to_words(totals.final_total),
            materials_specification=materials_specification(items),
        )
