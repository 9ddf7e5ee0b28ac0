"""
POS Checkout Application

HTTP adapter around one register session: cart, pricing, checkout and
order status tracking.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import Settings, get_settings
from .core.errors import PosError
from .routes import cart_router, checkout_router, products_router
from .services.api_client import PosApiClient
from .services.backends import CatalogService, OrderService
from .services.memory import InMemoryCatalog, InMemoryOrderService
from .services.session import PosSession

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[CatalogService] = None,
    orders: Optional[OrderService] = None,
) -> FastAPI:
    """
    Build the application.

    ``catalog`` and ``orders`` override the configured backend; when only
    one is given the other still comes from settings.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events"""
        logger.info(f"{settings.app_name} starting up...")
        client = None
        catalog_service, order_service = catalog, orders

        if catalog_service is None or order_service is None:
            if settings.memory_backend:
                memory_catalog = InMemoryCatalog()
                catalog_service = catalog_service or memory_catalog
                order_service = order_service or InMemoryOrderService(memory_catalog)
                logger.info("Using in-memory catalog and order service")
            else:
                client = PosApiClient(
                    base_url=settings.api_base_url,
                    api_token=settings.api_token,
                    timeout=settings.request_timeout,
                )
                catalog_service = catalog_service or client
                order_service = order_service or client
                logger.info(f"Order service URL: {settings.api_base_url}")

        app.state.session = PosSession(catalog_service, order_service, settings)
        logger.info(f"Tax rate: {settings.tax_rate}, currency: {settings.currency}")

        yield

        logger.info(f"{settings.app_name} shutting down...")
        if client is not None:
            await client.close()

    app = FastAPI(
        title=settings.app_name,
        description="Cart, pricing and checkout engine for a retail POS",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PosError)
    async def pos_error_handler(request: Request, exc: PosError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(products_router)
    app.include_router(cart_router)
    app.include_router(checkout_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "pos-checkout",
            "backend": settings.backend,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "pos_checkout.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
