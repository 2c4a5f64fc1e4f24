"""Catalog Index for JAMB Estimate.

Static lookup service -> category -> section built once from the catalog
tables. Every lookup is total: ids the catalog does not know degrade to an
"Unknown Category" / "Unknown Section" bucket instead of raising.
"""

from typing import Dict, Iterable, List, Optional, Union

import structlog

from jamb_estimate.data import catalog as catalog_data
from jamb_estimate.models.catalog import (
    UNKNOWN_SECTION,
    Category,
    Room,
    Section,
    Service,
    ServiceId,
    ServicePackage,
)

logger = structlog.get_logger(__name__)


class CatalogIndex:
    """Immutable index over sections, categories, services, rooms and packages.

    Service ids are parsed into ``ServiceId`` values once, when the index is
    loaded, so lookups never re-split strings.
    """

    def __init__(
        self,
        sections: Iterable[str],
        categories: Iterable[dict],
        services: Iterable[dict],
        rooms: Iterable[dict] = (),
        packages: Iterable[dict] = (),
    ):
        self._sections: Dict[str, Section] = {name: Section(name=name) for name in sections}
        self._categories: Dict[str, Category] = {}
        for raw in categories:
            category = Category(**raw)
            self._categories[category.id] = category

        self._services: Dict[str, Service] = {}
        self._service_ids: Dict[str, ServiceId] = {}
        self._services_by_category: Dict[str, List[Service]] = {}
        for raw in services:
            service = Service(**raw)
            service_id = ServiceId.parse(service.id)
            self._services[service.id] = service
            self._service_ids[service.id] = service_id
            self._services_by_category.setdefault(service_id.category_id, []).append(service)

        self._rooms: Dict[str, Room] = {room["id"]: Room(**room) for room in rooms}
        self._packages: Dict[str, ServicePackage] = {
            package["id"]: ServicePackage(**package) for package in packages
        }

        # Display order of categories: catalog order
        self._category_order: Dict[str, int] = {
            category_id: position for position, category_id in enumerate(self._categories)
        }
        self._section_order: Dict[str, int] = {
            name: position for position, name in enumerate(self._sections)
        }

    @classmethod
    def default(cls) -> "CatalogIndex":
        """Index over the bundled catalog tables."""
        return cls(
            sections=catalog_data.SECTIONS,
            categories=catalog_data.CATEGORIES,
            services=catalog_data.SERVICES,
            rooms=catalog_data.ROOMS,
            packages=catalog_data.PACKAGES,
        )

    # -------------------------------------------------------------------------
    # Core lookups
    # -------------------------------------------------------------------------

    def service_id(self, raw: str) -> ServiceId:
        """Return the parsed id, reusing the one built at load time."""
        known = self._service_ids.get(raw)
        return known if known is not None else ServiceId.parse(raw)

    def category_of(self, service_id: Union[str, ServiceId]) -> Category:
        """Category owning a service.

        The category id is the first two structural tokens of the service id.
        Unknown or malformed ids map to a fallback category named after the
        raw id.
        """
        parsed = service_id if isinstance(service_id, ServiceId) else self.service_id(service_id)
        category_id = parsed.category_id
        category = self._categories.get(category_id)
        if category is None:
            return Category.unknown(category_id)
        return category

    def section_of(self, category_id: str) -> Section:
        """Section owning a category, or the unknown-section bucket."""
        category = self._categories.get(category_id)
        if category is None:
            return Section(name=UNKNOWN_SECTION)
        return self._sections.get(category.section) or Section(name=category.section)

    def services_of(self, category_id: str) -> List[Service]:
        """Services of a category in catalog order (empty for unknown ids)."""
        return list(self._services_by_category.get(category_id, []))

    def get_service(self, service_id: Union[str, ServiceId]) -> Optional[Service]:
        return self._services.get(str(service_id))

    def get_category(self, category_id: str) -> Optional[Category]:
        return self._categories.get(category_id)

    def service_title(self, service_id: Union[str, ServiceId]) -> str:
        """Service title, falling back to the raw id."""
        service = self.get_service(service_id)
        return service.title if service else str(service_id)

    # -------------------------------------------------------------------------
    # Ordering
    # -------------------------------------------------------------------------

    def category_rank(self, category_id: str) -> int:
        """Catalog position of a category; unknown ids sort last."""
        return self._category_order.get(category_id, len(self._category_order))

    def section_rank(self, section_name: str) -> int:
        """Catalog position of a section; the unknown bucket sorts last."""
        return self._section_order.get(section_name, len(self._section_order))

    @property
    def sections(self) -> List[Section]:
        return list(self._sections.values())

    @property
    def categories(self) -> List[Category]:
        return list(self._categories.values())

    # -------------------------------------------------------------------------
    # Flow helpers
    # -------------------------------------------------------------------------

    def search_services(self, query: str, category_ids: Optional[Iterable[str]] = None) -> List[Service]:
        """Case-insensitive title search, optionally limited to some categories."""
        needle = (query or "").strip().lower()
        if category_ids is None:
            candidates = list(self._services.values())
        else:
            candidates = [service for cid in category_ids for service in self.services_of(cid)]
        if not needle:
            return candidates
        return [service for service in candidates if needle in service.title.lower()]

    def categories_for_room(self, room_id: str) -> List[Category]:
        """Categories offered in a room. Unknown room ids yield an empty list."""
        room = self._rooms.get(room_id)
        if room is None:
            logger.warning("unknown_room", room_id=room_id)
            return []
        return [self.get_category(cid) or Category.unknown(cid) for cid in room.category_ids]

    def get_room(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def get_package(self, package_id: str) -> Optional[ServicePackage]:
        return self._packages.get(package_id)

    @property
    def packages(self) -> List[ServicePackage]:
        return list(self._packages.values())


_default_index: Optional[CatalogIndex] = None


def get_catalog_index() -> CatalogIndex:
    """Shared index over the bundled catalog (built on first use)."""
    global _default_index
    if _default_index is None:
        _default_index = CatalogIndex.default()
    return _default_index
