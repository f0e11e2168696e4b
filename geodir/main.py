"""
FastAPI application factory.

Every error leaves the API as {"error": "<message>"}; the status code comes
from the GeoDirError subclass (400 / 404 / 500).
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from geodir.errors import GeoDirError, StoreError
from geodir.routers import countries, health, nepal, search
from geodir.schemas.common import ErrorResponse
from geodir.settings import settings

# ── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    logger.info("Starting geodir API [env=%s]", settings.environment)

    from geodir.database import check_db_connection

    if not check_db_connection():
        logger.error("Database is not reachable on startup — check DATABASE_URL")
    else:
        logger.info("Database connection verified")

    yield

    logger.info("Shutting down geodir API")


# ── Error handlers ────────────────────────────────────────────────────────────
def _error(message: str) -> dict:
    return ErrorResponse(error=message).model_dump()


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(GeoDirError)
    async def geodir_error_handler(request: Request, exc: GeoDirError):
        if isinstance(exc, StoreError):
            logger.error("Store error on %s: %s", request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=_error(exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=400, content=_error(message))


# ── App factory ───────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title="Administrative Geography Directory",
        description=(
            "Countries and their nested administrative divisions "
            "(province → district → city), addressable by materialized path, "
            "with prefix and ranked search."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    # ── CORS ──────────────────────────────────────────────────────────────────
    # Dev: allow all origins. Staging/prod: explicit allowlist from ALLOWED_ORIGINS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # ── Routers ───────────────────────────────────────────────────────────────
    prefix = settings.api_prefix
    app.include_router(health.router, prefix=prefix)
    app.include_router(countries.router, prefix=prefix)
    app.include_router(search.router, prefix=prefix)
    app.include_router(nepal.router, prefix=prefix)

    return app


app = create_app()
