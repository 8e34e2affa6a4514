from stockcare.routers.dashboard import router as dashboard_router
from stockcare.routers.health import router as health_router
from stockcare.routers.movements import router as movements_router
from stockcare.routers.products import router as products_router

__all__ = [
    "dashboard_router",
    "health_router",
    "movements_router",
    "products_router",
]
