from inventorypro.routers.alerts import router as alerts_router
from inventorypro.routers.categories import router as categories_router
from inventorypro.routers.health import router as health_router
from inventorypro.routers.preferences import router as preferences_router
from inventorypro.routers.products import router as products_router
from inventorypro.routers.reports import router as reports_router
from inventorypro.routers.stock import router as stock_router

__all__ = [
    "alerts_router",
    "categories_router",
    "health_router",
    "preferences_router",
    "products_router",
    "reports_router",
    "stock_router",
]
