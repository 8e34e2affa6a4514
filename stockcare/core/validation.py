"""Field-level validation for catalog and ledger input.

These are plain functions over mappings so they can be exercised without a
database or an HTTP request. Each returns a list of ``FieldError``; an empty
list means the input is acceptable.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from stockcare.core.constants import (
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    PRICE_PRECISION,
    PRICE_SCALE,
    STOCK_MAX,
)
from stockcare.core.exceptions import FieldError

_OPTIONAL_TEXT_LIMITS = {
    "description": DESCRIPTION_MAX_LENGTH,
    "category": CATEGORY_MAX_LENGTH,
}
_PRICE_FIELDS = ("purchase_price", "sale_price")
_STOCK_FIELDS = ("current_stock", "minimum_stock")
_PRICE_LIMIT = Decimal(10) ** (PRICE_PRECISION - PRICE_SCALE)


def _check_max_length(field: str, value: Optional[str], limit: int) -> Optional[FieldError]:
    if value is not None and len(value) > limit:
        return FieldError(field, "must be at most {} characters".format(limit))
    return None


def _as_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_product(data: Mapping[str, Any]) -> list[FieldError]:
    errors: list[FieldError] = []

    name = data.get("name")
    if name is None or not str(name).strip():
        errors.append(FieldError("name", "is required"))
    else:
        error = _check_max_length("name", str(name), NAME_MAX_LENGTH)
        if error:
            errors.append(error)

    for field, limit in _OPTIONAL_TEXT_LIMITS.items():
        error = _check_max_length(field, data.get(field), limit)
        if error:
            errors.append(error)

    for field in _PRICE_FIELDS:
        raw = data.get(field)
        if raw is None:
            errors.append(FieldError(field, "is required"))
            continue
        price = _as_decimal(raw)
        if price is None or not price.is_finite():
            errors.append(FieldError(field, "must be a number"))
        elif price < 0:
            errors.append(FieldError(field, "must be non-negative"))
        elif price.normalize().as_tuple().exponent < -PRICE_SCALE:
            errors.append(FieldError(field, "must have at most {} decimal places".format(PRICE_SCALE)))
        elif price >= _PRICE_LIMIT:
            errors.append(FieldError(field, "must be less than {}".format(_PRICE_LIMIT)))

    for field in _STOCK_FIELDS:
        raw = data.get(field, 0)
        if not _is_int(raw):
            errors.append(FieldError(field, "must be an integer"))
        elif raw < 0:
            errors.append(FieldError(field, "must be non-negative"))
        elif raw > STOCK_MAX:
            errors.append(FieldError(field, "must be at most {}".format(STOCK_MAX)))

    return errors


def validate_quantity(quantity: Any) -> Optional[FieldError]:
    if not _is_int(quantity):
        return FieldError("quantity", "must be an integer")
    if quantity < 1:
        return FieldError("quantity", "must be at least 1, got {}".format(quantity))
    if quantity > STOCK_MAX:
        return FieldError("quantity", "must be at most {}".format(STOCK_MAX))
    return None


def validate_notes(notes: Optional[str]) -> Optional[FieldError]:
    return _check_max_length("notes", notes, NOTES_MAX_LENGTH)


__all__ = ["validate_notes", "validate_product", "validate_quantity"]
