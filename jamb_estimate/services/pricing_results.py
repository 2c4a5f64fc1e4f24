"""Pricing result cache for JAMB Estimate.

Keeps what the pricing service returned (``fetched``) apart from what the
user changed locally (``materials_removed`` override, customer-supplied
materials). The value every surface uses is ``effective()``, a pure
projection of the two; the fetched result is never mutated.

Each pricing request takes a supersession token. Only a result carrying the
latest token of a still-tracked service is applied; anything else is stale
and dropped.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Set

import structlog

from jamb_estimate.models.pricing import CalculationResult
from jamb_estimate.services.session_store import SessionKeys, SessionStore

logger = structlog.get_logger(__name__)

CustomerSuppliedLookup = Callable[[str], Set[str]]


@dataclass
class CachedResult:
    """Cache entry of one service."""

    fetched: Optional[CalculationResult] = None
    materials_removed: bool = False
    token: int = 0


def project_result(
    fetched: CalculationResult,
    materials_removed: bool = False,
    customer_supplied: Iterable[str] = (),
) -> CalculationResult:
    """Effective result from a fetched one and the local overrides.

    - materials removed: material cost 0, no material lines
    - customer-supplied materials: lines kept and flagged, their cost zeroed
      and taken off the material cost
    """
    if materials_removed:
        return fetched.without_materials()

    supplied = set(customer_supplied)
    if not supplied:
        return fetched

    lines = []
    waived = 0.0
    for line in fetched.material_lines:
        if line.external_id in supplied:
            waived += line.line_cost
            lines.append(line.model_copy(update={"line_cost": 0.0, "customer_supplied": True}))
        else:
            lines.append(line)
    if not waived and lines == fetched.material_lines:
        return fetched

    return CalculationResult(
        labor_cost=fetched.labor_cost,
        material_cost=max(fetched.material_cost - waived, 0.0),
        material_lines=lines,
        derived=True,
    )


class PricingResultCache:
    """Per-service fetched results plus local overrides."""

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        customer_supplied: Optional[CustomerSuppliedLookup] = None,
    ):
        self.store = store
        self._customer_supplied = customer_supplied or (lambda service_id: set())
        self._entries: Dict[str, CachedResult] = {}
        self._next_token = 0
        if store is not None:
            self._restore(store)

    # -------------------------------------------------------------------------
    # Fetch bookkeeping
    # -------------------------------------------------------------------------

    def begin_request(self, service_id: str) -> int:
        """Issue a token for a new pricing request, superseding older ones."""
        self._next_token += 1
        entry = self._entries.setdefault(service_id, CachedResult())
        entry.token = self._next_token
        return entry.token

    def apply(self, service_id: str, token: int, result: CalculationResult) -> bool:
        """Store a fetched result if it is still the latest for the service.

        Returns:
            False when the result was discarded as stale.
        """
        entry = self._entries.get(service_id)
        if entry is None or entry.token != token:
            logger.info(
                "stale_pricing_result_discarded",
                service_id=service_id,
                token=token,
                latest=entry.token if entry else None,
            )
            return False
        entry.fetched = result
        self._persist()
        return True

    def is_current(self, service_id: str, token: int) -> bool:
        entry = self._entries.get(service_id)
        return entry is not None and entry.token == token

    # -------------------------------------------------------------------------
    # Overrides
    # -------------------------------------------------------------------------

    def remove_finishing_materials(self, service_id: str) -> Optional[CalculationResult]:
        """Zero the materials of a service locally, without a remote call.

        Idempotent. The override outlives later re-pricing of the service
        until ``restore_finishing_materials`` is called.

        Returns:
            The new effective result, or None when nothing is cached yet.
        """
        entry = self._entries.get(service_id)
        if entry is None or entry.fetched is None:
            return None
        if not entry.materials_removed:
            entry.materials_removed = True
            self._persist()
            logger.info("finishing_materials_removed", service_id=service_id)
        return self.effective(service_id)

    def restore_finishing_materials(self, service_id: str) -> Optional[CalculationResult]:
        entry = self._entries.get(service_id)
        if entry is None:
            return None
        if entry.materials_removed:
            entry.materials_removed = False
            self._persist()
        return self.effective(service_id)

    def materials_removed(self, service_id: str) -> bool:
        entry = self._entries.get(service_id)
        return bool(entry and entry.materials_removed)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def fetched(self, service_id: str) -> Optional[CalculationResult]:
        entry = self._entries.get(service_id)
        return entry.fetched if entry else None

    def effective(self, service_id: str) -> Optional[CalculationResult]:
        """Result every surface uses: fetched result with overrides projected."""
        entry = self._entries.get(service_id)
        if entry is None or entry.fetched is None:
            return None
        return project_result(
            entry.fetched,
            materials_removed=entry.materials_removed,
            customer_supplied=self._customer_supplied(service_id),
        )

    def effective_results(self) -> Dict[str, CalculationResult]:
        results = {}
        for service_id in self._entries:
            result = self.effective(service_id)
            if result is not None:
                results[service_id] = result
        return results

    def forget(self, service_id: str) -> None:
        """Drop a deselected service; in-flight results for it become stale."""
        if self._entries.pop(service_id, None) is not None:
            self._persist()

    def _persist(self) -> None:
        if self.store is None:
            return
        self.store.set(
            SessionKeys.CALCULATION_RESULTS,
            {
                sid: {"fetched": entry.fetched.to_wire(), "materials_removed": entry.materials_removed}
                for sid, entry in self._entries.items()
                if entry.fetched is not None
            },
        )

    def _restore(self, store: SessionStore) -> None:
        raw = store.get(SessionKeys.CALCULATION_RESULTS, {}) or {}
        for service_id, cached in raw.items():
            if not isinstance(cached, dict) or not isinstance(cached.get("fetched"), dict):
                continue
            self._entries[service_id] = CachedResult(
                fetched=CalculationResult.model_validate(cached["fetched"]),
                materials_removed=bool(cached.get("materials_removed")),
            )

    def __contains__(self, service_id: str) -> bool:
        return self.effective(service_id) is not None
