from stockcare.services.catalog_service import (
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)
from stockcare.services.movement_service import (
    get_movement,
    list_movements,
    list_product_movements,
    post_movement,
)
from stockcare.services.report_service import (
    dashboard_summary,
    low_stock,
    profitability,
    top_sold,
)

__all__ = [
    "create_product",
    "dashboard_summary",
    "delete_product",
    "get_movement",
    "get_product",
    "list_movements",
    "list_product_movements",
    "list_products",
    "low_stock",
    "post_movement",
    "profitability",
    "top_sold",
    "update_product",
]
