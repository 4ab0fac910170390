# shopapi/app.py
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError

from .config import Config, request_id_var
from .database import Database
from .exceptions import ShopError
from .handlers import (
    category_router,
    country_router,
    order_router,
    payment_method_router,
    product_router,
)
from .utils.security import TokenAuthenticator

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger(__name__)


def create_app(database_url: Optional[str] = None, jwt_key: Optional[str] = None) -> FastAPI:
    """Build the API application; the database connects on startup"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = Database(database_url)
        await db.connect()
        app.state.db = db
        try:
            yield
        finally:
            await db.close()

    app = FastAPI(title="shopapi", lifespan=lifespan)
    app.state.authenticator = TokenAuthenticator(jwt_key or Config.JWT_HMAC_KEY)

    setup_middleware(app)
    setup_exception_handlers(app)
    setup_handlers(app)
    return app


def setup_handlers(app: FastAPI):
    for router in (
        category_router,
        product_router,
        country_router,
        payment_method_router,
        order_router,
    ):
        app.include_router(router, prefix=Config.API_PREFIX)


def setup_middleware(app: FastAPI):
    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        try:
            logger.debug(f"started processing request [{request.method} {request.url.path}]")
            try:
                response = await call_next(request)
            except Exception:
                logger.exception("unexpected error")
                response = Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

            response.headers[REQUEST_ID_HEADER] = request_id
            logger.debug(f"finished processing request [status={response.status_code}]")
            return response
        finally:
            request_id_var.reset(token)


def setup_exception_handlers(app: FastAPI):
    @app.exception_handler(ShopError)
    async def handle_shop_error(request: Request, exc: ShopError):
        logger.warning(f"{type(exc).__name__}: {exc.message}")
        return Response(status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        logger.warning(f"invalid request: {exc.errors()}")
        return Response(status_code=status.HTTP_400_BAD_REQUEST)
