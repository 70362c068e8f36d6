"""In-game currency units. There is no conversion between them."""

from enum import Enum


class CurrencyUnit(Enum):
    WL = "WL"  # World Lock
    DL = "DL"  # Diamond Lock
    BGL = "BGL"  # Blue Gem Lock


DEFAULT_CURRENCY = CurrencyUnit.WL.value


def is_currency(value) -> bool:
    return value in {c.value for c in CurrencyUnit}


def coerce_currency(value) -> tuple[str, bool]:
    """Map free-form input to a currency unit, falling back to WL.

    Returns ``(currency, coerced)`` where ``coerced`` tells whether the input
    was replaced. Used by bulk import only; commands reject unknown units.
    """
    candidate = (value or "").strip().upper()
    if is_currency(candidate):
        return candidate, False
    return DEFAULT_CURRENCY, True
