import logging
from decimal import Decimal
from typing import Any, Mapping, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from stockcare.core.exceptions import Conflict, ProductNotFound, StorageFailure, ValidationError
from stockcare.core.validation import validate_product
from stockcare.models.movement import StockMovement
from stockcare.models.product import Product

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "description",
    "category",
    "purchase_price",
    "sale_price",
    "current_stock",
    "minimum_stock",
)


def _snapshot(product: Product) -> dict[str, Any]:
    return {field: getattr(product, field) for field in EDITABLE_FIELDS}


def _normalize(data: Mapping[str, Any]) -> dict[str, Any]:
    values = {field: data[field] for field in EDITABLE_FIELDS if field in data}
    if isinstance(values.get("name"), str):
        values["name"] = values["name"].strip()
    return values


def _coerce_prices(values: dict[str, Any]) -> None:
    # Only called once validate_product accepted the values.
    for field in ("purchase_price", "sale_price"):
        if field in values and not isinstance(values[field], Decimal):
            values[field] = Decimal(str(values[field]))


def _commit(db: Session, action: str, product_id) -> None:
    try:
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        logger.warning(
            "Concurrent change detected while trying to %s product %s",
            action,
            product_id,
            extra={"product_id": product_id},
        )
        raise Conflict(
            "Product {} was modified by another request; reload and retry.".format(product_id)
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Storage failure while trying to %s product %s", action, product_id)
        raise StorageFailure("Unable to {} product.".format(action)) from exc


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise ProductNotFound(product_id)
    return product


def list_products(db: Session) -> list[Product]:
    return list(db.execute(select(Product).order_by(Product.name, Product.id)).scalars().all())


def create_product(db: Session, data: Mapping[str, Any]) -> Product:
    values = _normalize(data)
    values.setdefault("current_stock", 0)
    values.setdefault("minimum_stock", 0)
    errors = validate_product(values)
    if errors:
        raise ValidationError(errors)
    _coerce_prices(values)

    product = Product(**values)
    db.add(product)
    _commit(db, "create", None)
    logger.info(
        "Created product %s (%s) with stock %s",
        product.id,
        product.name,
        product.current_stock,
        extra={"product_id": product.id},
    )
    return product


def update_product(
    db: Session,
    product_id: int,
    changes: Mapping[str, Any],
    expected_version: Optional[int] = None,
) -> Product:
    """Apply ``changes`` to a product with optimistic concurrency.

    ``expected_version`` is the version the caller last read. A mismatch, or a
    concurrent commit that lands between this read and the flush, raises
    ``Conflict`` and leaves the stored row untouched.
    """
    product = get_product(db, product_id)
    if expected_version is not None and product.version != expected_version:
        logger.warning(
            "Stale update for product %s: expected version %s, stored %s",
            product_id,
            expected_version,
            product.version,
            extra={"product_id": product_id, "version": expected_version},
        )
        raise Conflict(
            "Product {} is at version {}, not {}; reload and retry.".format(
                product_id, product.version, expected_version
            )
        )

    values = _normalize(changes)
    merged = _snapshot(product)
    merged.update(values)
    errors = validate_product(merged)
    if errors:
        raise ValidationError(errors)
    _coerce_prices(values)

    previous_stock = product.current_stock
    for field, value in values.items():
        setattr(product, field, value)

    _commit(db, "update", product_id)
    if product.current_stock != previous_stock:
        logger.warning(
            "Manual stock override on product %s: %s -> %s",
            product_id,
            previous_stock,
            product.current_stock,
            extra={"product_id": product_id},
        )
    return product


def delete_product(db: Session, product_id: int) -> None:
    product = get_product(db, product_id)
    try:
        removed = db.execute(
            delete(StockMovement).where(StockMovement.product_id == product_id)
        ).rowcount
        db.delete(product)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Storage failure while deleting movements of product %s", product_id)
        raise StorageFailure("Unable to delete product.") from exc
    _commit(db, "delete", product_id)
    logger.info(
        "Deleted product %s and %s movements",
        product_id,
        removed,
        extra={"product_id": product_id},
    )


__all__ = [
    "EDITABLE_FIELDS",
    "create_product",
    "delete_product",
    "get_product",
    "list_products",
    "update_product",
]
