"""Typed errors raised by the catalog, ledger and reporting services.

Every failure path surfaces one of these to the caller. The HTTP layer maps
them to responses through ``StockCareError.status_code`` so services never
import FastAPI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class StockCareError(Exception):
    """Base class for all service errors."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_payload(self) -> dict:
        return {"detail": self.detail}


class NotFound(StockCareError):
    status_code = 404


class ProductNotFound(NotFound):
    def __init__(self, product_id):
        super().__init__("Product {} not found.".format(product_id))
        self.product_id = product_id


class MovementNotFound(NotFound):
    def __init__(self, movement_id):
        super().__init__("Movement {} not found.".format(movement_id))
        self.movement_id = movement_id


class ValidationError(StockCareError):
    """One or more fields violate their constraints."""

    status_code = 422

    def __init__(self, errors: list[FieldError], detail: Optional[str] = None):
        if detail is None:
            detail = "; ".join("{}: {}".format(e.field, e.message) for e in errors)
        super().__init__(detail)
        self.errors = list(errors)

    def to_payload(self) -> dict:
        return {"detail": self.detail, "errors": [e.as_dict() for e in self.errors]}


class InvalidQuantity(ValidationError):
    def __init__(self, quantity, error: Optional[FieldError] = None):
        if error is None:
            error = FieldError("quantity", "must be at least 1, got {}".format(quantity))
        super().__init__([error])
        self.quantity = quantity


class InsufficientStock(StockCareError):
    status_code = 422

    def __init__(self, product_id, requested: int, available: int):
        super().__init__(
            "Insufficient stock for product {}: requested {}, available {}.".format(
                product_id, requested, available
            )
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available

    def to_payload(self) -> dict:
        return {
            "detail": self.detail,
            "errors": [FieldError("quantity", "exceeds current stock").as_dict()],
        }


class Conflict(StockCareError):
    """The record changed since it was read; re-fetch and retry."""

    status_code = 409


class StorageFailure(StockCareError):
    status_code = 503


__all__ = [
    "Conflict",
    "FieldError",
    "InsufficientStock",
    "InvalidQuantity",
    "MovementNotFound",
    "NotFound",
    "ProductNotFound",
    "StockCareError",
    "StorageFailure",
    "ValidationError",
]
