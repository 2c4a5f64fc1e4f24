"""Display formatting for money amounts."""


def format_currency(value: float) -> str:
    """Thousands separators and exactly two decimals: 1234.5 -> "1,234.50"."""
    return f"{value:,.2f}"


def format_whole(value: float) -> str:
    """Thousands separators, no decimals (narrow layouts)."""
    return f"{value:,.0f}"


def format_compact(value: float) -> str:
    """Compact price label used by the date picker.

    - >= 1,000,000 -> "1.55M"
    - >= 100,000 -> "150K"
    - >= 1,000 -> "1.34K"
    - otherwise two decimals
    """
    if value >= 1_000_000:
        return f"{value / 1_000_000:.2f}M"
    if value >= 100_000:
        return f"{round(value / 1000)}K"
    if value >= 1_000:
        return f"{value / 1000:.2f}K"
    return f"{value:.2f}"


def format_signed_currency(value: float) -> str:
    """"+$12.00" / "-$12.00" for surcharge and discount lines."""
    sign = "+" if value >= 0 else "-"
    return f"{sign}${format_currency(abs(value))}"
