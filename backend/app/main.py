"""FastAPI application bootstrap and router wiring."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.errors import to_http_exception
from app.api.routers import categories, health, products, public_categories, sizes
from app.core.config import get_settings
from app.core.exceptions import CatalogError
from app.db.session import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if get_settings().auto_create_tables:
        init_db()
    yield


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Backstop for domain errors raised outside a route's own translation."""
    http_exc = to_http_exception(exc, "process request")
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    """Instantiate the FastAPI app and include top-level routers."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

    cors_origins = settings.cors_origins
    logger.info(f"[CORS] Allowed origins: {cors_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health.router)
    app.include_router(products.router, prefix="/api/products", tags=["products"])
    app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
    app.include_router(sizes.router, prefix="/api/sizes", tags=["sizes"])
    app.include_router(
        public_categories.router,
        prefix="/api/public/categories",
        tags=["public-categories"],
    )

    return app


app = create_app()
