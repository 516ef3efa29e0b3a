"""Value objects used by the entity model."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional


class DecimalString(str):
    """A decimal number kept in its string form (``"0"``, ``"4.9"``, ``"85.00"``).

    Ratings and money amounts travel as strings so that both backends
    serialize them identically; this type guarantees the string parses as a
    finite decimal written without an exponent.
    """

    def __new__(cls, value: Any) -> "DecimalString":
        if isinstance(value, bool):
            raise ValueError(f"Not a decimal value: {value!r}")
        text = str(value).strip()
        try:
            number = Decimal(text)
        except InvalidOperation as exc:
            raise ValueError(f"Not a decimal value: {value!r}") from exc
        if not number.is_finite():
            raise ValueError(f"Not a decimal value: {value!r}")
        if "e" in text.lower():
            raise ValueError(f"Exponent notation is not accepted: {value!r}")
        return super().__new__(cls, text)

    def to_decimal(self) -> Decimal:
        return Decimal(str(self))


def optional_decimal(value: Any) -> Optional[DecimalString]:
    if value is None:
        return None
    return DecimalString(value)
