import enum
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from stockcare.core.constants import NOTES_MAX_LENGTH
from stockcare.database.base import Base


class MovementKind(str, enum.Enum):
    PURCHASE = "purchase"
    SALE = "sale"


class StockMovement(Base):
    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True)
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )

    kind = Column(
        Enum(MovementKind, name="movement_kind", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    quantity = Column(Integer, nullable=False)
    timestamp = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    notes = Column(String(NOTES_MAX_LENGTH))

    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_stock_movements_quantity"),
        Index("idx_movements_product_kind", "product_id", "kind"),
        Index("idx_movements_timestamp", "timestamp"),
    )

    @property
    def product_name(self):
        return self.product.name if self.product is not None else None

    def __repr__(self) -> str:
        return "<StockMovement id={} product_id={} {} x{}>".format(
            self.id, self.product_id, self.kind.value if self.kind else None, self.quantity
        )


__all__ = ["MovementKind", "StockMovement"]
