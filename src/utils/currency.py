import re

# "." or "," followed by exactly three digits and then a non-digit or the end
_THOUSANDS_SEPARATOR = re.compile(r"[.,](?=\d{3}(?:\D|$))")
_NON_NUMERIC = re.compile(r"[^\d.,-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_amount(value: str) -> float:
    """Parse a price like "20.000", "15,50" or "1.234,56" into a float.

    Returns 0 when nothing numeric can be read, which callers treat as invalid.
    """
    cleaned = re.sub(r"\s+", "", value)
    cleaned = _THOUSANDS_SEPARATOR.sub("", cleaned)
    cleaned = _NON_NUMERIC.sub("", cleaned)
    cleaned = cleaned.replace(",", ".", 1)

    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return 0.0
    return float(match.group(0))
