import re
from typing import NamedTuple

from foodbridge.models.enums import QuantityUnit

# A comma is a decimal separator only before one or two digits, so "1,000kg" is rejected
_QUANTITY_RE = re.compile(r"^\s*(\d+(?:\.\d+|,\d{1,2}(?!\d))?)\s*([a-zA-Z]+)\.?\s*$")

# Accepted spellings, mapped to (unit, factor to convert into that unit)
_UNIT_ALIASES = {
    "kg": (QuantityUnit.KILOGRAMS, 1.0),
    "kgs": (QuantityUnit.KILOGRAMS, 1.0),
    "kilo": (QuantityUnit.KILOGRAMS, 1.0),
    "kilos": (QuantityUnit.KILOGRAMS, 1.0),
    "kilogram": (QuantityUnit.KILOGRAMS, 1.0),
    "kilograms": (QuantityUnit.KILOGRAMS, 1.0),
    "g": (QuantityUnit.KILOGRAMS, 0.001),
    "gm": (QuantityUnit.KILOGRAMS, 0.001),
    "gms": (QuantityUnit.KILOGRAMS, 0.001),
    "gram": (QuantityUnit.KILOGRAMS, 0.001),
    "grams": (QuantityUnit.KILOGRAMS, 0.001),
    "plate": (QuantityUnit.PLATES, 1.0),
    "plates": (QuantityUnit.PLATES, 1.0),
    "plt": (QuantityUnit.PLATES, 1.0),
    "plts": (QuantityUnit.PLATES, 1.0),
}


class Quantity(NamedTuple):
    amount: float
    unit: QuantityUnit

    def __str__(self):
        amount = int(self.amount) if float(self.amount).is_integer() else self.amount
        return f"{amount} {self.unit.value}"


def parse_quantity(text: str) -> Quantity:
    """Parse free-form text such as "12kg", "500 g" or "5 plates".

    Raises ValueError when the magnitude is missing, not positive, or the
    unit is not one of the kilogram or plate spellings.
    """
    if text is None:
        raise ValueError("Quantity is required")
    match = _QUANTITY_RE.match(text)
    if not match:
        raise ValueError("Quantity must be a number followed by a unit, e.g. '10kg' or '5 plates'")
    magnitude = float(match.group(1).replace(",", "."))
    alias = match.group(2).lower()
    if alias not in _UNIT_ALIASES:
        raise ValueError(f"Unsupported quantity unit '{match.group(2)}'; use kg, g or plates")
    if magnitude <= 0:
        raise ValueError("Quantity must be greater than zero")
    unit, factor = _UNIT_ALIASES[alias]
    return Quantity(amount=round(magnitude * factor, 3), unit=unit)
