"""Finishing Material Resolver for JAMB Estimate.

Fetches the candidate finishing materials of a service once, picks the first
candidate of every sub-group as the default, and tracks the user's picks and
the materials the customer supplies themselves.

Concurrent ``ensure_loaded`` calls for the same service share one fetch.
"""

import asyncio
from typing import Dict, List, Optional, Set

import structlog

from jamb_estimate.config.errors import PricingGatewayError, ValidationError
from jamb_estimate.models.pricing import FinishingMaterialSet
from jamb_estimate.services.pricing_gateway import PricingGatewayClient
from jamb_estimate.services.session_store import SessionKeys, SessionStore

logger = structlog.get_logger(__name__)


class FinishingMaterialResolver:
    """Candidate sets and current picks, per service."""

    def __init__(self, gateway: PricingGatewayClient, store: Optional[SessionStore] = None):
        self.gateway = gateway
        self.store = store
        self._candidates: Dict[str, FinishingMaterialSet] = {}
        self._pending: Dict[str, asyncio.Future] = {}
        # service id -> sub-group -> external id
        self._selections: Dict[str, Dict[str, str]] = {}
        # service id -> external ids the customer supplies
        self._customer_supplied: Dict[str, Set[str]] = {}
        if store is not None:
            self._restore(store)

    def _restore(self, store: SessionStore) -> None:
        selections = store.get(SessionKeys.FINISHING_SELECTIONS, {}) or {}
        for service_id, groups in selections.items():
            if isinstance(groups, dict):
                self._selections[service_id] = dict(groups)
        supplied = store.get(SessionKeys.CUSTOMER_SUPPLIED, {}) or {}
        for service_id, external_ids in supplied.items():
            if isinstance(external_ids, list):
                self._customer_supplied[service_id] = set(external_ids)

    def _persist(self) -> None:
        if self.store is None:
            return
        self.store.set(SessionKeys.FINISHING_SELECTIONS, self.selections_dict())
        self.store.set(SessionKeys.CUSTOMER_SUPPLIED, self.customer_supplied_dict())

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def is_loaded(self, service_id: str) -> bool:
        return service_id in self._candidates

    async def ensure_loaded(self, service_id: str) -> bool:
        """Make sure the candidate set of a service is loaded.

        The first call fetches; concurrent callers await the same fetch.
        A failed fetch is logged and leaves the service without a selection so
        pricing can still go ahead with no finishing materials; the next call
        tries again.

        Returns:
            True if candidates are available.
        """
        if service_id in self._candidates:
            self._apply_defaults(service_id)
            return True

        pending = self._pending.get(service_id)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch(service_id))
            self._pending[service_id] = pending
        try:
            return await asyncio.shield(pending)
        finally:
            if pending.done() and self._pending.get(service_id) is pending:
                del self._pending[service_id]

    async def _fetch(self, service_id: str) -> bool:
        try:
            candidates = await self.gateway.resolve_finishing_materials(service_id)
        except PricingGatewayError as e:
            logger.warning(
                "finishing_materials_failed",
                service_id=service_id,
                code=e.code,
                error=e.message,
            )
            return False

        self._candidates[service_id] = candidates
        self._apply_defaults(service_id)
        logger.info(
            "finishing_materials_loaded",
            service_id=service_id,
            groups=list(candidates.sections),
        )
        return True

    def _apply_defaults(self, service_id: str) -> None:
        """Select the first candidate of every sub-group that has no pick yet."""
        candidates = self._candidates.get(service_id)
        if candidates is None:
            return
        current = self._selections.get(service_id, {})
        merged = {**candidates.default_selection(), **current}
        if merged != current:
            self._selections[service_id] = merged
            self._persist()

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def candidates(self, service_id: str) -> Optional[FinishingMaterialSet]:
        return self._candidates.get(service_id)

    def current_selection(self, service_id: str) -> List[str]:
        """External ids currently picked for a service, one per sub-group."""
        return list(self._selections.get(service_id, {}).values())

    def selection_by_group(self, service_id: str) -> Dict[str, str]:
        return dict(self._selections.get(service_id, {}))

    def pick(self, service_id: str, external_id: str) -> str:
        """Replace the pick of the sub-group that offers ``external_id``.

        Other sub-groups keep their picks.

        Returns:
            Name of the sub-group that changed.

        Raises:
            ValidationError: If the candidates are not loaded or no sub-group
                offers the material.
        """
        candidates = self._candidates.get(service_id)
        found = candidates.find(external_id) if candidates else None
        if found is None:
            raise ValidationError(
                f"Finishing material {external_id} is not offered for service {service_id}",
                field="external_id",
                details={"service_id": service_id},
            )
        group, _ = found
        self._selections.setdefault(service_id, {})[group] = external_id
        self._persist()
        logger.debug("finishing_material_picked", service_id=service_id, group=group, external_id=external_id)
        return group

    def mark_customer_supplied(self, service_id: str, external_id: str, supplied: bool = True) -> None:
        """Flag (or unflag) a material as supplied by the customer.

        The material stays on the line item; its cost is zeroed when the
        pricing result is projected.
        """
        flagged = self._customer_supplied.setdefault(service_id, set())
        if supplied:
            flagged.add(external_id)
        else:
            flagged.discard(external_id)
        if not flagged:
            del self._customer_supplied[service_id]
        self._persist()
        logger.info(
            "customer_supplied_material",
            service_id=service_id,
            external_id=external_id,
            supplied=supplied,
        )

    def customer_supplied(self, service_id: str) -> Set[str]:
        return set(self._customer_supplied.get(service_id, set()))

    def forget(self, service_id: str) -> None:
        """Drop the picks of a deselected service (candidates stay cached)."""
        removed = self._selections.pop(service_id, None) is not None
        removed = self._customer_supplied.pop(service_id, None) is not None or removed
        if removed:
            self._persist()

    def selections_dict(self) -> Dict[str, Dict[str, str]]:
        return {sid: dict(groups) for sid, groups in self._selections.items()}

    def customer_supplied_dict(self) -> Dict[str, List[str]]:
        return {sid: sorted(ids) for sid, ids in self._customer_supplied.items() if ids}
