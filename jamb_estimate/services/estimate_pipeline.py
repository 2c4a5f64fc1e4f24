"""Estimate Pipeline for JAMB Estimate.

Wires the engine together for one session:

    selection change -> resolve finishing materials -> price -> cache
                                                                 |
                            totals / view model / snapshot <-----+

Pricing of a service runs in two stages. The resolve stage (finishing
materials) must finish before the price stage starts, because the pricing
request carries the finishing selection. Every reprice takes a supersession
token first; a result whose token is no longer the latest, or whose service
was deselected meanwhile, is dropped.

Recoverable problems (clamped quantities, unsupported location, failed
remote calls, missing pre-conditions) become warnings on a ``WarningBoard``
instead of exceptions.
"""

import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from jamb_estimate.config.errors import (
    PricingGatewayError,
    UnsupportedLocationError,
    ValidationError,
)
from jamb_estimate.models.estimate import EstimateTotals, OrderHeader, OrderViewModel
from jamb_estimate.models.pricing import CalculationResult, Location
from jamb_estimate.models.session import EstimateSnapshot
from jamb_estimate.services.catalog_index import CatalogIndex, get_catalog_index
from jamb_estimate.services.cost_aggregator import aggregate_costs
from jamb_estimate.services.estimate_number import build_estimate_number
from jamb_estimate.services.finishing_materials import FinishingMaterialResolver
from jamb_estimate.services.order_view import OrderViewComposer
from jamb_estimate.services.pricing_gateway import PricingGatewayClient, validate_location
from jamb_estimate.services.pricing_results import PricingResultCache
from jamb_estimate.services.selection_state import DEFAULT_GROUP, SelectionState
from jamb_estimate.services.session_store import InMemorySessionStore, SessionKeys, SessionStore
from jamb_estimate.services.tax_rates import lookup_tax_rate
from jamb_estimate.services.time_coefficient import TimeQuote

logger = structlog.get_logger(__name__)


class WarningKind:
    """Action kinds a warning can belong to."""

    QUANTITY = "quantity"
    LOCATION = "location"
    PRICING = "pricing"
    FINISHING = "finishing"
    NAVIGATION = "navigation"


class WarningBoard:
    """Non-blocking warnings, one slot per action kind.

    A warning stays until the next successful action of the same kind.
    """

    def __init__(self):
        self._messages: Dict[str, str] = {}

    def post(self, kind: str, message: str) -> None:
        self._messages[kind] = message
        logger.info("warning_posted", kind=kind, warning=message)

    def clear(self, kind: str) -> None:
        self._messages.pop(kind, None)

    def get(self, kind: str) -> Optional[str]:
        return self._messages.get(kind)

    def messages(self) -> Dict[str, str]:
        return dict(self._messages)

    def __bool__(self) -> bool:
        return bool(self._messages)


class EstimatePipeline:
    """Engine facade for one estimate session."""

    def __init__(
        self,
        gateway: PricingGatewayClient,
        catalog: Optional[CatalogIndex] = None,
        store: Optional[SessionStore] = None,
        flow: str = "calculate",
        location: Optional[Location] = None,
    ):
        """Initialize EstimatePipeline.

        Args:
            gateway: Pricing service client.
            catalog: Catalog index. Defaults to the bundled catalog.
            store: Session store shared with the other flow steps.
            flow: Flow name (calculate, rooms, packages, emergency).
            location: Where the work happens; restored from the store if omitted.
        """
        self.gateway = gateway
        self.catalog = catalog or get_catalog_index()
        self.store = store if store is not None else InMemorySessionStore()
        self.flow = flow

        self.selection = SelectionState(self.catalog, self.store, flow)
        self.resolver = FinishingMaterialResolver(gateway, self.store)
        self.results = PricingResultCache(self.store, customer_supplied=self.resolver.customer_supplied)
        self.composer = OrderViewComposer(self.catalog)
        self.warnings = WarningBoard()
        self.selection.add_removal_listener(self._on_service_removed)

        self.location = location or self._restore_location()
        self.time_coefficient: float = float(self.store.get(SessionKeys.TIME_COEFFICIENT, 1.0) or 1.0)
        self.selected_time: Optional[str] = self.store.get(SessionKeys.SELECTED_TIME)

    def _restore_location(self) -> Location:
        return Location(
            zipcode=self.store.get(SessionKeys.ZIPCODE, ""),
            country=self.store.get(SessionKeys.COUNTRY, ""),
            state=self.store.get(SessionKeys.STATE, ""),
            city=self.store.get(SessionKeys.CITY, ""),
            address=self.store.get(SessionKeys.ADDRESS, ""),
        )

    def _on_service_removed(self, service_id: str) -> None:
        self.resolver.forget(service_id)
        self.results.forget(service_id)
        logger.debug("service_state_cascaded", service_id=service_id)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    async def toggle(self, service_id: str, group: str = DEFAULT_GROUP) -> bool:
        """Toggle a service; newly selected services are resolved and priced.

        Deselecting it in one group reprices it when another group still holds
        it at a different quantity.
        """
        before = self.selection.quantity(service_id)
        selected = self.selection.toggle(service_id, group)
        self.warnings.clear(WarningKind.NAVIGATION)
        if selected or (self.selection.is_selected(service_id) and self.selection.quantity(service_id) != before):
            await self.reprice(service_id)
        return selected

    async def set_quantity(self, service_id: str, quantity: Any, group: str = DEFAULT_GROUP) -> Optional[str]:
        """Change a quantity and reprice. Returns the clamp warning, if any."""
        warning = self.selection.set_quantity(service_id, quantity, group)
        if warning:
            self.warnings.post(WarningKind.QUANTITY, warning)
        else:
            self.warnings.clear(WarningKind.QUANTITY)
        await self.reprice(service_id)
        return warning

    def clear(self, group: Optional[str] = None) -> None:
        self.selection.clear(group)

    # -------------------------------------------------------------------------
    # Finishing materials
    # -------------------------------------------------------------------------

    async def pick_material(self, service_id: str, external_id: str) -> Optional[CalculationResult]:
        """Pick a finishing material and reprice the service."""
        try:
            self.resolver.pick(service_id, external_id)
        except ValidationError as e:
            self.warnings.post(WarningKind.FINISHING, e.message)
            return self.results.effective(service_id)
        self.warnings.clear(WarningKind.FINISHING)
        return await self.reprice(service_id)

    def mark_customer_supplied(self, service_id: str, external_id: str, supplied: bool = True) -> Optional[CalculationResult]:
        """Flag a material as customer-supplied; its cost drops out locally."""
        self.resolver.mark_customer_supplied(service_id, external_id, supplied)
        return self.results.effective(service_id)

    def remove_finishing_materials(self, service_id: str) -> Optional[CalculationResult]:
        return self.results.remove_finishing_materials(service_id)

    def restore_finishing_materials(self, service_id: str) -> Optional[CalculationResult]:
        return self.results.restore_finishing_materials(service_id)

    # -------------------------------------------------------------------------
    # Location / date
    # -------------------------------------------------------------------------

    async def set_location(self, location: Location) -> None:
        """Store the job location and reprice everything selected."""
        self.location = location
        self.store.set(SessionKeys.ZIPCODE, location.zipcode)
        self.store.set(SessionKeys.COUNTRY, location.country)
        self.store.set(SessionKeys.STATE, location.state)
        self.store.set(SessionKeys.CITY, location.city)
        self.store.set(SessionKeys.ADDRESS, location.address)
        await self.reprice_all()

    def set_service_date(self, quote: TimeQuote) -> None:
        self.time_coefficient = quote.coefficient
        self.selected_time = quote.label
        self.store.set(SessionKeys.TIME_COEFFICIENT, quote.coefficient)
        self.store.set(SessionKeys.SELECTED_TIME, quote.label)

    @property
    def tax_rate_percent(self) -> float:
        return lookup_tax_rate(self.location.state if self.location else "")

    # -------------------------------------------------------------------------
    # Resolve-then-price
    # -------------------------------------------------------------------------

    async def reprice(self, service_id: str) -> Optional[CalculationResult]:
        """Resolve finishing materials, then price one selected service.

        Returns:
            The effective result afterwards (the previous one if the call
            failed or was superseded), or None if nothing is known.
        """
        if not self.selection.is_selected(service_id):
            return None

        try:
            validate_location(self.location, self.gateway.supported_countries)
        except UnsupportedLocationError as e:
            self.warnings.post(WarningKind.LOCATION, e.message)
            return self.results.effective(service_id)
        self.warnings.clear(WarningKind.LOCATION)

        token = self.results.begin_request(service_id)

        # Stage 1: finishing materials
        if await self.resolver.ensure_loaded(service_id):
            self.warnings.clear(WarningKind.FINISHING)
        else:
            self.warnings.post(
                WarningKind.FINISHING,
                f'Could not load finishing materials for "{self.catalog.service_title(service_id)}". '
                "Pricing without them.",
            )
        if not self.results.is_current(service_id, token):
            logger.debug("reprice_superseded", service_id=service_id, stage="resolve")
            return self.results.effective(service_id)

        # Stage 2: price with the resolved selection
        service = self.catalog.get_service(service_id)
        unit = service.unit_of_measurement if service else "each"
        quantity = self.selection.quantity(service_id)
        try:
            result = await self.gateway.price(
                service_id,
                quantity,
                unit,
                self.location,
                self.resolver.current_selection(service_id),
            )
        except (PricingGatewayError, UnsupportedLocationError) as e:
            logger.warning(
                "pricing_call_failed",
                service_id=service_id,
                code=e.code,
                error=e.message,
            )
            self.warnings.post(
                WarningKind.PRICING,
                f'Could not update the price of "{self.catalog.service_title(service_id)}". Showing the last known price.',
            )
            return self.results.effective(service_id)

        if not self.selection.is_selected(service_id):
            logger.info("pricing_result_for_deselected_service", service_id=service_id)
            return None
        if self.results.apply(service_id, token, result):
            self.warnings.clear(WarningKind.PRICING)
        return self.results.effective(service_id)

    async def reprice_all(self) -> Dict[str, Optional[CalculationResult]]:
        """Reprice every selected service concurrently."""
        service_ids = list(self.selection.merged())
        outcomes = await asyncio.gather(*(self.reprice(sid) for sid in service_ids))
        return dict(zip(service_ids, outcomes))

    # -------------------------------------------------------------------------
    # Outputs
    # -------------------------------------------------------------------------

    def effective_results(self) -> Dict[str, CalculationResult]:
        selected = self.selection.merged()
        return {sid: result for sid, result in self.results.effective_results().items() if sid in selected}

    def totals(self) -> EstimateTotals:
        return aggregate_costs(
            self.selection.occurrences(),
            self.effective_results(),
            self.time_coefficient,
            self.tax_rate_percent,
        )

    def estimate_number(self, now: Optional[datetime] = None) -> str:
        location = self.location or Location()
        return build_estimate_number(location.state or location.city, location.zipcode, now)

    def header(self, now: Optional[datetime] = None) -> OrderHeader:
        return OrderHeader(
            reference=self.estimate_number(now),
            address=self.location.address if self.location else "",
            description=self.store.get(SessionKeys.DESCRIPTION, "") or "",
            selected_date=self.selected_time or "",
            photos=list(self.store.get(SessionKeys.PHOTOS, []) or []),
        )

    def view(self, now: Optional[datetime] = None) -> OrderViewModel:
        """Live view model of the estimate."""
        return self.composer.from_live_estimate(
            self.selection.merged(),
            self.effective_results(),
            self.time_coefficient,
            self.tax_rate_percent,
            header=self.header(now),
            occurrences=self.selection.occurrences(),
        )

    def check_ready(self) -> bool:
        """Pre-conditions for leaving the estimate step."""
        if not self.selection.merged():
            self.warnings.post(WarningKind.NAVIGATION, "Please select at least one service before proceeding.")
            return False
        if not (self.location and self.location.address.strip()):
            self.warnings.post(WarningKind.NAVIGATION, "Please enter your address before proceeding.")
            return False
        self.warnings.clear(WarningKind.NAVIGATION)
        return True

    def save_snapshot(self, now: Optional[datetime] = None) -> EstimateSnapshot:
        """Write the estimate hand-off read by checkout."""
        header = self.header(now)
        snapshot = EstimateSnapshot(
            flow=self.flow,
            selection=self.selection.to_dict(),
            finishing_selections=self.resolver.selections_dict(),
            customer_supplied=self.resolver.customer_supplied_dict(),
            calculation_results={sid: result.to_wire() for sid, result in self.effective_results().items()},
            selected_time=self.selected_time,
            totals=self.totals(),
            estimate_number=header.reference,
            zipcode=self.location.zipcode if self.location else "",
            state=self.location.state if self.location else "",
            address=header.address,
            description=header.description,
            photos=header.photos,
        )
        self.store.save_snapshot(snapshot)
        return snapshot

    def pending_services(self) -> List[str]:
        """Selected services that have no known price yet."""
        results = self.effective_results()
        return [sid for sid in self.selection.merged() if sid not in results]
