"""Surface area helper for area-priced services (sq ft)."""

from typing import Optional

SQ_FT_PER_SQ_M = 10.7639


def square_feet(length: float, width: float, system: str = "ft") -> float:
    """Area in sq ft from length x width given in feet ("ft") or meters ("m")."""
    area = (length or 0.0) * (width or 0.0)
    if system == "m":
        return area * SQ_FT_PER_SQ_M
    return area


def square_feet_from_square_meters(area: float) -> float:
    return (area or 0.0) * SQ_FT_PER_SQ_M


def surface_quantity(
    length: float = 0.0,
    width: float = 0.0,
    system: str = "ft",
    known_square_meters: Optional[float] = None,
) -> int:
    """Whole-number sq ft quantity to apply to a service, never below 1.

    A known area in square meters takes precedence over the dimensions.
    """
    if known_square_meters:
        value = square_feet_from_square_meters(known_square_meters)
    else:
        value = square_feet(length, width, system)
    return max(1, round(value))
