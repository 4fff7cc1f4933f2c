# o2o_shop/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from o2o_shop.core.config import get_settings
from o2o_shop.core.exception_handlers import register_exception_handlers
from o2o_shop.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from o2o_shop.models import shop as _shop_models  # noqa: F401
from o2o_shop.models import product as _product_models  # noqa: F401
from o2o_shop.models import headline as _headline_models  # noqa: F401

# Routers
from o2o_shop.routers.products import router as products_router
from o2o_shop.routers.frontend import router as frontend_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(products_router, prefix=settings.API_PREFIX)
app.include_router(frontend_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "o2o-shop-backend"}
