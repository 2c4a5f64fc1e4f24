"""Selection State for JAMB Estimate.

The sparse map of chosen services to quantities, partitioned by group:
``default`` for the flat calculator, one group per room in the rooms flow,
``indoor`` / ``outdoor`` in the packages flow. Persisted to the session store
after every mutation.
"""

import math
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog

from jamb_estimate.models.catalog import DEFAULT_MAX_QUANTITY, DEFAULT_MIN_QUANTITY
from jamb_estimate.services.catalog_index import CatalogIndex
from jamb_estimate.services.session_store import SessionKeys, SessionStore

logger = structlog.get_logger(__name__)

DEFAULT_GROUP = "default"

RemovalListener = Callable[[str], None]


def _parse_quantity(value: Any) -> Optional[float]:
    """Numeric value of a quantity input ("1,200" accepted); None when unusable."""
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class SelectionState:
    """Chosen services and their quantities.

    Every stored quantity lies within the service's [min, max] bounds.
    Removing a service from its last group notifies removal listeners so the
    finishing-material selection and pricing result go with it.
    """

    def __init__(
        self,
        catalog: CatalogIndex,
        store: Optional[SessionStore] = None,
        flow: str = "calculate",
    ):
        self.catalog = catalog
        self.store = store
        self.flow = flow
        self._groups: Dict[str, Dict[str, float]] = {}
        self._listeners: List[RemovalListener] = []
        if store is not None:
            self._groups = self._restore(store.get(SessionKeys.selection(flow), {}))

    @staticmethod
    def _restore(raw: Any) -> Dict[str, Dict[str, float]]:
        if not isinstance(raw, dict):
            return {}
        groups = {}
        for group, entries in raw.items():
            if isinstance(entries, dict):
                groups[group] = {sid: float(qty) for sid, qty in entries.items()}
        return groups

    # -------------------------------------------------------------------------
    # Listeners / persistence
    # -------------------------------------------------------------------------

    def add_removal_listener(self, listener: RemovalListener) -> None:
        self._listeners.append(listener)

    def _notify_removed(self, service_id: str) -> None:
        if self.is_selected(service_id):
            # still selected in another group
            return
        for listener in self._listeners:
            listener(service_id)

    def _persist(self) -> None:
        if self.store is not None:
            self.store.set(SessionKeys.selection(self.flow), self.to_dict())

    # -------------------------------------------------------------------------
    # Bounds
    # -------------------------------------------------------------------------

    def bounds(self, service_id: str) -> Tuple[float, float, str]:
        """(min, max, unit) for a service; unknown services use the defaults."""
        service = self.catalog.get_service(service_id)
        if service is None:
            return DEFAULT_MIN_QUANTITY, DEFAULT_MAX_QUANTITY, "each"
        return service.min_quantity, service.max_quantity, service.unit_of_measurement

    def clamp(self, service_id: str, value: Any) -> Tuple[float, Optional[str]]:
        """Clamp a requested quantity into the service's bounds.

        Returns:
            (quantity, warning) where warning is None when no clamping happened.
        """
        min_q, max_q, unit = self.bounds(service_id)
        title = self.catalog.service_title(service_id)

        number = _parse_quantity(value)
        if number is None:
            return min_q, f'Invalid quantity for "{title}", using the minimum of {min_q:g}.'

        if unit == "each":
            number = float(round(number))

        if number > max_q:
            return max_q, f'Maximum quantity for "{title}" is {max_q:g}.'
        if number < min_q:
            return min_q, f'Minimum quantity for "{title}" is {min_q:g}.'
        return number, None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def toggle(self, service_id: str, group: str = DEFAULT_GROUP) -> bool:
        """Select a service at its minimum quantity, or deselect it.

        Returns:
            True if the service is selected in the group after the call.
        """
        entries = self._groups.setdefault(group, {})
        if service_id in entries:
            del entries[service_id]
            if not entries:
                del self._groups[group]
            self._persist()
            logger.debug("service_deselected", service_id=service_id, group=group)
            self._notify_removed(service_id)
            return False

        min_q, _, _ = self.bounds(service_id)
        entries[service_id] = min_q
        self._persist()
        logger.debug("service_selected", service_id=service_id, group=group, quantity=min_q)
        return True

    def set_quantity(self, service_id: str, quantity: Any, group: str = DEFAULT_GROUP) -> Optional[str]:
        """Set a quantity, clamped to the service's bounds.

        Selects the service if it was not selected in the group yet.

        Returns:
            A warning string when the value was clamped, otherwise None.
        """
        value, warning = self.clamp(service_id, quantity)
        self._groups.setdefault(group, {})[service_id] = value
        self._persist()
        if warning:
            logger.info("quantity_clamped", service_id=service_id, requested=quantity, applied=value)
        return warning

    def adjust_quantity(self, service_id: str, increment: bool, group: str = DEFAULT_GROUP) -> Optional[str]:
        """Step a quantity up or down by one unit."""
        min_q, _, _ = self.bounds(service_id)
        current = self._groups.get(group, {}).get(service_id, min_q)
        return self.set_quantity(service_id, current + 1 if increment else current - 1, group)

    def clear(self, group: Optional[str] = None) -> None:
        """Remove every selection (or only those of one group)."""
        if group is None:
            removed = {sid for entries in self._groups.values() for sid in entries}
            self._groups = {}
        else:
            removed = set(self._groups.pop(group, {}))
        self._persist()
        logger.info("selection_cleared", group=group, removed=len(removed))
        for service_id in sorted(removed):
            self._notify_removed(service_id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_selected(self, service_id: str, group: Optional[str] = None) -> bool:
        if group is not None:
            return service_id in self._groups.get(group, {})
        return any(service_id in entries for entries in self._groups.values())

    def quantity(self, service_id: str, group: Optional[str] = None) -> Optional[float]:
        """Quantity of a service (merged view when no group is given)."""
        if group is not None:
            return self._groups.get(group, {}).get(service_id)
        return self.merged().get(service_id)

    def group(self, group: str) -> Dict[str, float]:
        return dict(self._groups.get(group, {}))

    @property
    def groups(self) -> List[str]:
        return list(self._groups)

    def merged(self) -> Dict[str, float]:
        """All groups flattened; later groups win on duplicate service ids."""
        merged: Dict[str, float] = {}
        for entries in self._groups.values():
            merged.update(entries)
        return merged

    def occurrences(self) -> List[str]:
        """Service ids once per group that holds them, in group order.

        A service chosen in two rooms appears twice and is charged twice.
        """
        return [service_id for entries in self._groups.values() for service_id in entries]

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {group: dict(entries) for group, entries in self._groups.items()}

    def __len__(self) -> int:
        return len(self.merged())

    def __bool__(self) -> bool:
        return bool(self._groups)
