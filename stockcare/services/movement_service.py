"""Posting of purchase and sale movements against product stock.

``post_movement`` is the only code path that moves ``Product.current_stock``
in step with the ledger. Each posting reads the product row under lock,
validates, adjusts stock and inserts the movement in a single commit. The
product's version column turns the stock UPDATE into a compare-and-set, so a
posting that lost a race is rolled back and replayed against fresh state.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError

from stockcare.config import get_settings
from stockcare.core.constants import STOCK_MAX
from stockcare.core.exceptions import (
    Conflict,
    FieldError,
    InsufficientStock,
    InvalidQuantity,
    MovementNotFound,
    ProductNotFound,
    StockCareError,
    StorageFailure,
    ValidationError,
)
from stockcare.core.validation import validate_notes, validate_quantity
from stockcare.models.movement import MovementKind, StockMovement
from stockcare.models.product import Product

logger = logging.getLogger(__name__)


def _coerce_kind(kind) -> MovementKind:
    if isinstance(kind, MovementKind):
        return kind
    try:
        return MovementKind(str(kind).strip().lower())
    except ValueError:
        raise ValidationError(
            [FieldError("kind", "must be one of: {}".format(", ".join(k.value for k in MovementKind)))]
        ) from None


def _kind_label(kind) -> str:
    return kind.value if isinstance(kind, MovementKind) else str(kind)


def _normalize_timestamp(value: Optional[datetime]) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _load_product_for_update(db: Session, product_id: int) -> Optional[Product]:
    stmt = (
        select(Product)
        .where(Product.id == product_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return db.execute(stmt).scalars().first()


def apply_movement(current_stock: int, kind: MovementKind, quantity: int) -> int:
    if kind is MovementKind.PURCHASE:
        return current_stock + quantity
    return current_stock - quantity


def _post_once(
    db: Session,
    product_id: int,
    kind,
    quantity,
    timestamp: datetime,
    notes: Optional[str],
) -> StockMovement:
    product = _load_product_for_update(db, product_id)
    if product is None:
        raise ProductNotFound(product_id)

    kind = _coerce_kind(kind)
    quantity_error = validate_quantity(quantity)
    if quantity_error is not None:
        raise InvalidQuantity(quantity, quantity_error)
    notes_error = validate_notes(notes)
    if notes_error is not None:
        raise ValidationError([notes_error])

    if kind is MovementKind.SALE and quantity > product.current_stock:
        raise InsufficientStock(product_id, quantity, product.current_stock)
    if kind is MovementKind.PURCHASE and product.current_stock + quantity > STOCK_MAX:
        raise InvalidQuantity(
            quantity,
            FieldError("quantity", "would raise stock above {}".format(STOCK_MAX)),
        )

    product.current_stock = apply_movement(product.current_stock, kind, quantity)
    movement = StockMovement(
        product=product,
        kind=kind,
        quantity=quantity,
        timestamp=timestamp,
        notes=notes,
    )
    db.add(movement)
    db.commit()
    return movement


def post_movement(
    db: Session,
    product_id: int,
    kind,
    quantity: int,
    timestamp: Optional[datetime] = None,
    notes: Optional[str] = None,
    *,
    max_retries: Optional[int] = None,
) -> StockMovement:
    timestamp = _normalize_timestamp(timestamp)
    label = _kind_label(kind)
    if max_retries is None:
        max_retries = get_settings().MOVEMENT_MAX_RETRIES

    attempt = 0
    while True:
        attempt += 1
        try:
            movement = _post_once(db, product_id, kind, quantity, timestamp, notes)
        except StaleDataError as exc:
            db.rollback()
            if attempt > max_retries:
                logger.warning(
                    "Giving up on %s of %s for product %s after %s attempts",
                    label,
                    quantity,
                    product_id,
                    attempt,
                    extra={"product_id": product_id, "kind": label, "quantity": quantity},
                )
                raise Conflict(
                    "Stock of product {} kept changing; retry the movement.".format(product_id)
                ) from exc
            logger.info(
                "Product %s changed during posting, retrying (attempt %s)",
                product_id,
                attempt,
                extra={"product_id": product_id},
            )
            continue
        except InsufficientStock as exc:
            db.rollback()
            logger.warning(
                "Rejected sale of %s for product %s: only %s in stock",
                exc.requested,
                product_id,
                exc.available,
                extra={"product_id": product_id, "kind": label, "quantity": quantity},
            )
            raise
        except StockCareError:
            db.rollback()
            raise
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Storage failure while posting movement for product %s", product_id)
            raise StorageFailure("Unable to record stock movement.") from exc
        break

    logger.info(
        "Posted %s of %s for product %s as movement %s",
        movement.kind.value,
        quantity,
        product_id,
        movement.id,
        extra={
            "product_id": product_id,
            "movement_id": movement.id,
            "kind": movement.kind.value,
            "quantity": quantity,
        },
    )
    return movement


def get_movement(db: Session, movement_id: int) -> StockMovement:
    movement = db.get(StockMovement, movement_id)
    if movement is None:
        raise MovementNotFound(movement_id)
    return movement


def list_movements(db: Session) -> list[StockMovement]:
    stmt = (
        select(StockMovement)
        .options(selectinload(StockMovement.product))
        .order_by(StockMovement.timestamp.desc(), StockMovement.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def list_product_movements(db: Session, product_id: int) -> list[StockMovement]:
    if db.get(Product, product_id) is None:
        raise ProductNotFound(product_id)
    stmt = (
        select(StockMovement)
        .where(StockMovement.product_id == product_id)
        .options(selectinload(StockMovement.product))
        .order_by(StockMovement.timestamp.desc(), StockMovement.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


__all__ = [
    "apply_movement",
    "get_movement",
    "list_movements",
    "list_product_movements",
    "post_movement",
]
