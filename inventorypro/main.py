from contextlib import asynccontextmanager

from fastapi import FastAPI

from inventorypro.config import Settings, get_settings
from inventorypro.core.logging import setup_logging
from inventorypro.database import Base, engine
from inventorypro.models import import_all_models
from inventorypro.routers import (
    alerts_router,
    categories_router,
    health_router,
    preferences_router,
    products_router,
    reports_router,
    stock_router,
)

setup_logging()
settings: Settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    import_all_models()
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.include_router(health_router)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(stock_router)
app.include_router(reports_router)
app.include_router(alerts_router)
app.include_router(preferences_router)


__all__ = ["app"]
