"""Catalog models for JAMB Estimate.

Sections, categories and services are static reference data. A service id
encodes its category structurally: "<section>-<category>-<index>", so the
category id is always the first two hyphen-delimited tokens.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


UNKNOWN_SECTION = "Unknown Section"
UNKNOWN_CATEGORY_ID = "unknown"

DEFAULT_MIN_QUANTITY = 1.0
DEFAULT_MAX_QUANTITY = 999999.0


@dataclass(frozen=True)
class ServiceId:
    """Structured service identifier.

    Built once from the raw hyphenated id. Ids that do not follow the
    section-category-index shape keep their raw value and report
    ``is_structured == False``; their category id degrades to the raw id.
    """

    raw: str
    section_token: str = ""
    category_token: str = ""
    index_token: str = ""

    @classmethod
    def parse(cls, raw: str) -> "ServiceId":
        """Parse a hyphenated service id like ``"1-2-3"``."""
        raw = (raw or "").strip()
        parts = raw.split("-") if raw else []
        if len(parts) >= 2 and parts[0] and parts[1]:
            return cls(
                raw=raw,
                section_token=parts[0],
                category_token=parts[1],
                index_token="-".join(parts[2:]),
            )
        return cls(raw=raw)

    @classmethod
    def from_dotted(cls, code: str) -> "ServiceId":
        """Parse the dotted wire form (``"1.2.3"``) used by the remote services."""
        return cls.parse((code or "").replace(".", "-"))

    @property
    def is_structured(self) -> bool:
        return bool(self.section_token and self.category_token and self.index_token)

    @property
    def category_id(self) -> str:
        if self.section_token and self.category_token:
            return f"{self.section_token}-{self.category_token}"
        return self.raw or UNKNOWN_CATEGORY_ID

    @property
    def dotted(self) -> str:
        return self.raw.replace("-", ".")

    def __str__(self) -> str:
        return self.raw


class LocationType(str, Enum):
    """Whether a room / sub-group is inside or outside the house."""

    INDOOR = "indoor"
    OUTDOOR = "outdoor"


class Section(BaseModel):
    """Top-level grouping of categories (a trade or room domain)."""

    model_config = ConfigDict(frozen=True)

    name: str


class Category(BaseModel):
    """Group of services within a section, keyed by a stable structural id."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Structural id, e.g. '1-2'")
    title: str
    section: str = Field(..., description="Owning section name")
    is_fallback: bool = Field(default=False, description="True for the unknown-category bucket")

    @classmethod
    def unknown(cls, category_id: str) -> "Category":
        """Fallback bucket for ids the catalog does not know."""
        return cls(
            id=category_id,
            title=f"Unknown Category ({category_id})",
            section=UNKNOWN_SECTION,
            is_fallback=True,
        )


class Service(BaseModel):
    """A sellable unit of work."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Hyphenated structural id, e.g. '1-2-3'")
    title: str
    description: str = ""
    unit_of_measurement: str = "each"
    min_quantity: float = Field(default=DEFAULT_MIN_QUANTITY, gt=0)
    max_quantity: float = Field(default=DEFAULT_MAX_QUANTITY, gt=0)
    base_price: Optional[float] = Field(default=None, ge=0, description="Package mode only")

    @model_validator(mode="after")
    def validate_bounds(self) -> "Service":
        """Ensure min_quantity <= max_quantity."""
        if self.min_quantity > self.max_quantity:
            raise ValueError(
                f"Service {self.id}: min_quantity {self.min_quantity} exceeds max_quantity {self.max_quantity}"
            )
        return self

    @property
    def service_id(self) -> ServiceId:
        return ServiceId.parse(self.id)

    @property
    def is_counted(self) -> bool:
        """Services measured in whole units ('each')."""
        return self.unit_of_measurement == "each"


class Room(BaseModel):
    """A room (or outdoor area) offering a subset of categories."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    type: LocationType = LocationType.INDOOR
    category_ids: List[str] = Field(default_factory=list)


class ServicePackage(BaseModel):
    """A pre-built bundle of services for the packages flow."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    indoor_service_ids: List[str] = Field(default_factory=list)
    outdoor_service_ids: List[str] = Field(default_factory=list)

    @property
    def service_ids(self) -> List[str]:
        return [*self.indoor_service_ids, *self.outdoor_service_ids]
