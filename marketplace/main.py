# marketplace/main.py
from fastapi import FastAPI, Request
import uvicorn

from marketplace.api.errors import register_error_handlers
from marketplace.api.routers import carts, health, orders, products
from marketplace.data.database import Base, engine
from marketplace.utils.logging import add_context, clear_context, configure_logging, get_logger

# IMPORT WSZYSTKICH MODELI PRZED CREATE_ALL
import marketplace.data.models  # noqa: F401

configure_logging()
logger = get_logger(__name__)


def init_db(bind=engine) -> None:
    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=bind)
    except Exception:
        logger.exception("Failed to create tables")
        raise


def create_app(create_tables: bool = True) -> FastAPI:
    app = FastAPI(
        title="Marketplace Service",
        version="1.0.0",
    )

    if create_tables:
        init_db()

    register_error_handlers(app)

    @app.middleware("http")
    async def request_log_context(request: Request, call_next):
        #kazdy request zaczyna od pustego kontekstu logow
        clear_context()
        add_context(method=request.method, path=request.url.path)
        return await call_next(request)

    # Include routers
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
