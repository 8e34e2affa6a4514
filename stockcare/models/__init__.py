from stockcare.models.movement import MovementKind, StockMovement
from stockcare.models.product import Product

__all__ = ["MovementKind", "Product", "StockMovement"]
