from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from stockcare.core.constants import (
    CATEGORY_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PRICE_PRECISION,
    PRICE_SCALE,
)
from stockcare.database.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)

    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    description = Column(Text)
    category = Column(String(CATEGORY_MAX_LENGTH))

    purchase_price = Column(Numeric(PRICE_PRECISION, PRICE_SCALE), nullable=False, default=0)
    sale_price = Column(Numeric(PRICE_PRECISION, PRICE_SCALE), nullable=False, default=0)

    current_stock = Column(Integer, nullable=False, default=0)
    minimum_stock = Column(Integer, nullable=False, default=0)

    # Bumped on every flushed UPDATE; a stale value makes the UPDATE match no rows.
    version = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    # Read side only; deletes are issued explicitly by the catalog service.
    movements = relationship(
        "StockMovement",
        viewonly=True,
        order_by="StockMovement.timestamp.desc()",
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint("purchase_price >= 0", name="ck_products_purchase_price"),
        CheckConstraint("sale_price >= 0", name="ck_products_sale_price"),
        Index("idx_products_name", "name"),
    )

    def __repr__(self) -> str:
        return "<Product id={} name={!r} stock={}>".format(self.id, self.name, self.current_stock)


__all__ = ["Product"]
