"""Spell out a dollar amount in English.

1234.56 -> "one thousand two hundred thirty-four and 56/100 dollars"
"""

ONES = [
    "", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine",
    "ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen", "sixteen",
    "seventeen", "eighteen", "nineteen",
]
TENS = ["", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety"]
SCALES = ["", "thousand", "million", "billion", "trillion"]


def _three_digits(number: int) -> str:
    """Words for 1..999."""
    hundreds, remainder = divmod(number, 100)
    words = []
    if hundreds:
        words.append(f"{ONES[hundreds]} hundred")
    if remainder >= 20:
        tens, ones = divmod(remainder, 10)
        words.append(f"{TENS[tens]}-{ONES[ones]}" if ones else TENS[tens])
    elif remainder:
        words.append(ONES[remainder])
    return " ".join(words)


def integer_to_words(number: int) -> str:
    """Words for a non-negative integer, built from 3-digit chunks."""
    if number == 0:
        return "zero"

    chunks = []
    scale = 0
    while number > 0:
        number, chunk = divmod(number, 1000)
        if chunk:
            label = SCALES[scale] if scale < len(SCALES) else f"10^{scale * 3}"
            chunks.append(f"{_three_digits(chunk)} {label}".strip())
        scale += 1
    return " ".join(reversed(chunks))


def amount_to_words(amount: float) -> str:
    """Spell out a currency amount with a fixed two-digit cents suffix.

    Args:
        amount: Dollar amount (negative values are spelled as their magnitude
            prefixed with "minus").

    Returns:
        e.g. "zero and 00/100 dollars".
    """
    negative = amount < 0
    total_cents = int(round(abs(amount) * 100))
    dollars, cents = divmod(total_cents, 100)
    words = f"{integer_to_words(dollars)} and {cents:02d}/100 dollars"
    return f"minus {words}" if negative else words
