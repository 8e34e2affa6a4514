from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from stockcare.models.movement import MovementKind, StockMovement
from stockcare.models.product import Product


@dataclass(frozen=True)
class TopSoldEntry:
    product_id: int
    name: str
    quantity: int


@dataclass(frozen=True)
class ProfitabilityEntry:
    product_id: int
    name: str
    sold_quantity: int
    profit_per_unit: Decimal
    total_profit: Decimal


def _sold_quantities():
    return (
        select(
            StockMovement.product_id.label("product_id"),
            func.sum(StockMovement.quantity).label("sold"),
        )
        .where(StockMovement.kind == MovementKind.SALE)
        .group_by(StockMovement.product_id)
        .subquery()
    )


def _as_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def low_stock(db: Session) -> Iterator[Product]:
    """Yield products whose stock is strictly below their minimum, by name."""
    stmt = (
        select(Product)
        .where(Product.current_stock < Product.minimum_stock)
        .order_by(Product.name, Product.id)
    )
    for product in db.execute(stmt).scalars():
        yield product


def top_sold(db: Session, n: int) -> list[TopSoldEntry]:
    if n <= 0:
        return []
    sold = _sold_quantities()
    stmt = (
        select(Product.id, Product.name, sold.c.sold)
        .join(sold, sold.c.product_id == Product.id)
        .order_by(sold.c.sold.desc(), Product.id)
        .limit(n)
    )
    return [
        TopSoldEntry(product_id=row.id, name=row.name, quantity=int(row.sold))
        for row in db.execute(stmt)
    ]


def profitability(db: Session) -> list[ProfitabilityEntry]:
    sold = _sold_quantities()
    stmt = (
        select(
            Product.id,
            Product.name,
            Product.purchase_price,
            Product.sale_price,
            sold.c.sold,
        )
        .join(sold, sold.c.product_id == Product.id)
        .order_by(Product.name, Product.id)
    )

    results = []
    for row in db.execute(stmt):
        sold_quantity = int(row.sold)
        # Negative margins are reported as-is.
        profit_per_unit = _as_decimal(row.sale_price) - _as_decimal(row.purchase_price)
        results.append(
            ProfitabilityEntry(
                product_id=row.id,
                name=row.name,
                sold_quantity=sold_quantity,
                profit_per_unit=profit_per_unit,
                total_profit=profit_per_unit * sold_quantity,
            )
        )
    return results


def dashboard_summary(db: Session, top_n: int = 10) -> dict:
    total_products = db.execute(select(func.count(Product.id))).scalar_one()
    low_stock_products = list(low_stock(db))
    return {
        "total_products": total_products,
        "low_stock_count": len(low_stock_products),
        "low_stock_products": low_stock_products,
        "top_sold": top_sold(db, top_n),
        "profitability": profitability(db),
    }


__all__ = [
    "ProfitabilityEntry",
    "TopSoldEntry",
    "dashboard_summary",
    "low_stock",
    "profitability",
    "top_sold",
]
